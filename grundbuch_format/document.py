"""
PdfFile — the .gbx envelope exchanged between server and client.

One envelope per source scan: whether it was digitized, the hOCR layout
of its pages, the user's per-page layout overrides, and the analyzed
register sheet. The envelope is replaced as a whole on every edit.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, SerializerFunctionWrapHandler, field_serializer

from .anpassung import AnpassungSeite
from .grundbuch import Grundbuch
from .hocr import HocrLayout
from .schema import Flag, GbxModel, SeitenId, sort_by_page


class PdfFile(GbxModel):
    digitalisiert: Flag = False  # has an associated PDF
    hocr: HocrLayout = Field(default_factory=HocrLayout)
    anpassungen_seite: dict[SeitenId, AnpassungSeite] = Field(default_factory=dict)
    analysiert: Grundbuch

    @field_serializer("anpassungen_seite", mode="wrap")
    def _pages_in_order(
        self, value: dict[str, AnpassungSeite], handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        return sort_by_page(handler(value))
