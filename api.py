"""
Grundbuch .gbx Service — FastAPI Server
========================================

RESTful API for normalizing and reviewing .gbx exchange documents.

Endpoints:
    POST /normalize         Decode a .gbx document, return its canonical minimal form
    POST /review            Review a .gbx document sent as JSON
    POST /review/file       Review an uploaded .gbx file
    GET  /health            Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
    http://localhost:8000/redoc            # ReDoc (alternative)
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, FastAPI, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from grundbuch_format import __version__
from grundbuch_format.codec import from_dict, loads, to_dict
from grundbuch_format.config import Settings, get_settings
from grundbuch_format.exceptions import GrundbuchFormatError
from grundbuch_format.report import ReviewReport
from grundbuch_format.review import review_document

# ─── Load .env if available ──────────────────────────────────────────
try:
    from dotenv import load_dotenv

    load_dotenv()
except ImportError:
    pass

logger = logging.getLogger(__name__)


# ─── Application Lifespan (load settings) ───────────────────────────

_settings: Settings | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Read settings from the environment on startup."""
    global _settings  # noqa: PLW0603
    _settings = get_settings()
    yield
    _settings = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="Grundbuch .gbx Service",
    description=(
        "Exchange format service for digitized German land-register sheets. "
        "Decodes .gbx documents strictly, emits their canonical minimal encoding, "
        "and reviews register sheets for inconsistencies."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Response Schemas ───────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str
    version: str
    max_upload_bytes: int


# ─── Error Handling ─────────────────────────────────────────────────


@app.exception_handler(GrundbuchFormatError)
async def format_error_handler(request: Request, exc: GrundbuchFormatError) -> JSONResponse:
    """Decode failures are client errors: 422 with code and locations."""
    logger.info("Rejected %s: [%s] %s", request.url.path, exc.code, exc)
    return JSONResponse(
        status_code=422,
        content={"code": exc.code, "message": str(exc), "details": exc.details},
    )


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_settings() -> Settings:
    if _settings is None:
        raise HTTPException(status_code=503, detail="Service not initialised")
    return _settings


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post(
    "/normalize",
    summary="Canonical minimal encoding of a .gbx document",
    tags=["Format"],
    responses={422: {"description": "Document does not match the .gbx schema"}},
)
def normalize(document: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Decode the document and return it re-encoded.

    Empty sections, empty overrides, an empty OCR layout and absent
    optional fields are removed; everything else is returned unchanged.
    """
    return to_dict(from_dict(document))


@app.post(
    "/review",
    summary="Review a .gbx document",
    tags=["Review"],
    responses={422: {"description": "Document does not match the .gbx schema"}},
)
def review(document: dict[str, Any] = Body(...)) -> ReviewReport:
    """Decode the document and run all consistency checks.

    Returns section summaries, the total area of active parcels and the
    list of findings. **is_consistent** is `false` if any ERROR was found.
    """
    return review_document(from_dict(document))


@app.post(
    "/review/file",
    summary="Review an uploaded .gbx file",
    tags=["Review"],
    responses={
        413: {"description": "File too large"},
        422: {"description": "File is not a valid .gbx document"},
        503: {"description": "Service not yet initialised"},
    },
)
async def review_file(file: UploadFile) -> ReviewReport:
    """Upload a `.gbx` file (UTF-8 JSON) for review."""
    settings = _get_settings()
    if file.size and file.size > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large (max {settings.max_upload_bytes} bytes)",
        )

    content = await file.read()
    pdf = await asyncio.to_thread(loads, content)
    return review_document(pdf)


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Service not yet initialised"}},
)
def health_check() -> HealthResponse:
    """Returns service status and configuration info."""
    settings = _get_settings()
    return HealthResponse(
        status="healthy",
        version=__version__,
        max_upload_bytes=settings.max_upload_bytes,
    )
