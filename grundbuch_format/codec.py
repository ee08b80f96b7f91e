"""
Encoding and decoding of .gbx files.

Encoding produces the canonical minimal JSON: empty sections, empty
overrides, an empty OCR layout and every absent optional field are left
out. Decoding restores all of them as defaults, so

    loads(dumps(pdf)) == pdf

holds for every document even though the wire form is smaller.

Decoding never guesses. A payload that doesn't fit the schema raises a
``DecodeError`` (or one of its more specific subclasses) carrying the
offending locations in ``details["errors"]``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .document import PdfFile
from .exceptions import DecodeError, EntryShapeError, UnknownPageTypeError

logger = logging.getLogger(__name__)


# ─── Decoding ───────────────────────────────────────────────────────


def loads(data: str | bytes) -> PdfFile:
    """Decode a .gbx JSON document.

    Raises:
        DecodeError: If the input is not JSON or does not match the schema.
    """
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Rejected .gbx input: not valid JSON (%s)", exc)
        raise DecodeError(f"Input is not valid JSON: {exc}") from exc
    return from_dict(payload)


def from_dict(payload: Any) -> PdfFile:
    """Decode an already-parsed JSON payload."""
    if not isinstance(payload, dict):
        raise DecodeError(
            f"A .gbx document must be a JSON object, got {type(payload).__name__}"
        )
    try:
        pdf = PdfFile.model_validate(payload)
    except ValidationError as exc:
        raise _decode_error(exc) from exc
    logger.debug("Decoded register sheet %s", pdf.analysiert.titelblatt)
    return pdf


def read_gbx(path: str | Path) -> PdfFile:
    """Read and decode a .gbx file (UTF-8 JSON)."""
    with Path(path).open("rb") as f:
        return loads(f.read())


# ─── Encoding ───────────────────────────────────────────────────────


def to_dict(pdf: PdfFile) -> dict[str, Any]:
    """Canonical minimal JSON-compatible form of ``pdf``."""
    return pdf.model_dump(mode="json")


def dumps(pdf: PdfFile, indent: int | None = None) -> str:
    """Encode ``pdf`` as canonical minimal JSON."""
    logger.debug("Encoding register sheet %s", pdf.analysiert.titelblatt)
    return json.dumps(to_dict(pdf), ensure_ascii=False, indent=indent)


def write_gbx(path: str | Path, pdf: PdfFile, indent: int | None = None) -> None:
    """Encode ``pdf`` and write it to ``path`` as UTF-8."""
    Path(path).write_text(dumps(pdf, indent=indent), encoding="utf-8")


# ─── Error Mapping ──────────────────────────────────────────────────


def _decode_error(exc: ValidationError) -> DecodeError:
    """Translate a pydantic ValidationError into our error taxonomy."""
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    details = {"errors": errors}
    logger.warning("Rejected .gbx input: %d schema error(s)", len(errors))

    for err in errors:
        loc = tuple(err["loc"])
        if "klassifikation_neu" in loc and err["type"] == "enum":
            return UnknownPageTypeError(
                f"Unknown page classification at {_format_loc(loc)}", details
            )
    for err in errors:
        loc = tuple(err["loc"])
        if loc[:3] == ("analysiert", "abt1", "eintraege"):
            return EntryShapeError(
                f"Owner entry at {_format_loc(loc[:4])} matches neither the "
                "legacy nor the versioned shape",
                details,
            )

    first = errors[0] if errors else {"loc": (), "msg": str(exc)}
    return DecodeError(
        f"Document does not match the .gbx schema: {_format_loc(tuple(first['loc']))}: {first['msg']}",
        details,
    )


def _format_loc(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "<root>"
