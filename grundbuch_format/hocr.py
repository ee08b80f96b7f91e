"""
hOCR layout of a digitized register sheet, indexed by page.

The tree mirrors the hOCR XML the OCR engine emits:
content area (carea) → paragraph → line → word. All ``bounds`` are in
image pixels from the top left corner; page sizes and red lines are in
millimeters.
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterator

from pydantic import Field, SerializerFunctionWrapHandler, field_serializer

from .geometry import Linie, Rect
from .schema import GbxModel, SeitenId, sort_by_page


class HocrWord(GbxModel):
    bounds: Rect
    confidence: float  # probability that the word was recognized correctly
    text: str


class HocrLine(GbxModel):
    bounds: Rect
    words: list[HocrWord]

    def text(self) -> str:
        return " ".join(w.text for w in self.words)


class HocrParagraph(GbxModel):
    bounds: Rect
    lines: list[HocrLine]


class HocrArea(GbxModel):
    bounds: Rect
    paragraphs: list[HocrParagraph]


class ParsedHocr(GbxModel):
    """Recognized content of one page image."""

    bounds: Rect  # image size in pixels
    careas: list[HocrArea]

    def iter_words(self) -> Iterator[HocrWord]:
        for area in self.careas:
            for paragraph in area.paragraphs:
                for line in paragraph.lines:
                    yield from line.words


class HocrSeite(GbxModel):
    """One PDF page: physical size, recognized text, user-drawn red lines."""

    ALWAYS_EMIT: ClassVar[frozenset[str]] = frozenset({"rote_linien"})

    breite_mm: float
    hoehe_mm: float
    parsed: ParsedHocr
    rote_linien: list[Linie] = Field(default_factory=list)


class HocrLayout(GbxModel):
    seiten: dict[SeitenId, HocrSeite] = Field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.seiten

    @field_serializer("seiten", mode="wrap")
    def _pages_in_order(
        self, value: dict[str, HocrSeite], handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        return sort_by_page(handler(value))
