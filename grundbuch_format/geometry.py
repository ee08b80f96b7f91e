"""Geometry primitives shared by the OCR layout, overrides and records."""

from __future__ import annotations

from functools import total_ordering

from .schema import GbxModel, SeitenId


@total_ordering
class Rect(GbxModel):
    """Rectangle, usually in millimeters from the top left page corner.

    OCR layout rectangles are in image pixels instead. Nothing enforces
    min <= max; degenerate rectangles are passed through untouched.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def _key(self) -> tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Rect):
            return NotImplemented
        return self._key() < other._key()


class Punkt(GbxModel):
    """Point on a PDF page, in millimeters."""

    x: float
    y: float


class Linie(GbxModel):
    """Red line with n points drawn on a PDF page."""

    punkte: list[Punkt]


class PositionInPdf(GbxModel):
    """Where a text block was found in the source PDF."""

    seite: SeitenId
    rect: Rect  # millimeters
