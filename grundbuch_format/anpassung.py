"""
User overrides of the automatically detected page layout.

Editors can reclassify a page, move column rectangles and insert row
separators. Each page's overrides live in one ``AnpassungSeite``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from .geometry import Rect
from .schema import GbxModel


class SeitenTyp(str, Enum):
    """Page layout of a register sheet page; each has its own column form.

    The values are wire tokens. Anything else fails to decode.
    """

    BESTANDSVERZEICHNIS_HORZ = "bv-horz"
    BESTANDSVERZEICHNIS_HORZ_ZU_UND_ABSCHREIBUNGEN = "bv-horz-zu-und-abschreibungen"
    BESTANDSVERZEICHNIS_VERT = "bv-vert"
    BESTANDSVERZEICHNIS_VERT_TYP2 = "bv-vert-typ2"
    BESTANDSVERZEICHNIS_VERT_ZU_UND_ABSCHREIBUNGEN = "bv-vert-zu-und-abschreibungen"
    BESTANDSVERZEICHNIS_VERT_ZU_UND_ABSCHREIBUNGEN_ALT = "bv-vert-zu-und-abschreibungen-alt"

    ABT1_HORZ = "abt1-horz"
    ABT1_VERT = "abt1-vert"
    ABT1_VERT_TYP2 = "abt1-vert-typ2"

    ABT2_HORZ_VERAENDERUNGEN = "abt2-horz-veraenderungen"
    ABT2_HORZ = "abt2-horz"
    ABT2_VERT_VERAENDERUNGEN = "abt2-vert-veraenderungen"
    ABT2_VERT = "abt2-vert"
    ABT2_VERT_TYP2 = "abt2-vert-typ2"

    ABT3_HORZ_VERAENDERUNGEN_LOESCHUNGEN = "abt3-horz-veraenderungen-loeschungen"
    ABT3_VERT_VERAENDERUNGEN_LOESCHUNGEN = "abt3-vert-veraenderungen-loeschungen"
    ABT3_HORZ = "abt3-horz"
    ABT3_VERT_VERAENDERUNGEN = "abt3-vert-veraenderungen"
    ABT3_VERT_LOESCHUNGEN = "abt3-vert-loeschungen"
    ABT3_VERT = "abt3-vert"


class AnpassungSeite(GbxModel):
    """Per-page overrides, each mapping keyed by column / row identifier."""

    klassifikation_neu: Optional[SeitenTyp] = None
    spalten: dict[str, Rect] = Field(default_factory=dict)
    zeilen: dict[str, float] = Field(default_factory=dict)  # inserted by hand
    zeilen_auto: dict[str, float] = Field(default_factory=dict)  # inserted automatically
