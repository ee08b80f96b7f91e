"""
Pydantic models for review output.

These are plain response models, separate from the exchange format:
they are never written into a .gbx file.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from .grundbuch import Titelblatt


# ─── Severity Levels ────────────────────────────────────────────────


class Severity(str, Enum):
    """Severity of a review finding."""

    ERROR = "ERROR"  # document is internally inconsistent
    WARNING = "WARNING"  # suspicious, needs human review
    INFO = "INFO"  # informational observation


# ─── Review Finding ─────────────────────────────────────────────────


class ReviewFinding(BaseModel):
    """A single finding with severity, machine-readable code, and details."""

    severity: Severity
    code: str  # Machine-readable, e.g. "DUPLICATE_LFD_NR"
    field: str  # Record path, e.g. "abt2.eintraege[3]"
    message: str
    details: dict = Field(default_factory=dict)


# ─── Summaries ──────────────────────────────────────────────────────


class SectionSummary(BaseModel):
    """Record counts of one list within a section."""

    section: str  # e.g. "abt3.loeschungen"
    total: int
    geroetet: int


class ReviewReport(BaseModel):
    """Result of reviewing one register sheet."""

    titelblatt: Titelblatt
    is_consistent: bool
    digitalisiert: bool
    seiten: int = 0  # pages with OCR layout
    sections: list[SectionSummary] = Field(default_factory=list)
    flaeche_m2: int = 0  # total area of active parcels
    flaeche_ha: str = ""
    flaeche_a: str = ""
    flaeche_rest_m2: str = "0"
    findings: list[ReviewFinding] = Field(default_factory=list)
