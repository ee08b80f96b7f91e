"""
The analyzed register sheet: title block plus four sections.

Every record in every section carries the same two redaction flags.
``automatisch_geroetet`` is set by the red-line detector,
``manuell_geroetet`` by a human. A manual flag, when present, always
wins, even if it contradicts the detector:

    manuell   automatisch   ist_geroetet()
    None      None          False
    None      True/False    automatisch
    True      any           True
    False     any           False
"""

from __future__ import annotations

from functools import total_ordering
from typing import Annotated, Any, Optional, Union

from pydantic import Field, TypeAdapter, ValidationError, field_validator, model_validator

from .area import FlurstueckGroesse, GroesseMetrisch
from .exceptions import EntryShapeError
from .geometry import PositionInPdf
from .schema import Count, Flag, GbxModel
from .text import FlexibleText

# Keys only the first shape of an ordered union knows. The fallback shape
# refuses them, so a broken first-shape payload fails instead of losing data.
_PARCEL_ONLY_KEYS = frozenset({"flur", "flurstueck", "gemarkung", "bezeichnung", "groesse"})
_LEGACY_OWNER_KEYS = frozenset({"bv_nr", "grundlage_der_eintragung"})


def _reject_keys(data: Any, keys: frozenset[str], shape: str) -> Any:
    if isinstance(data, dict):
        found = sorted(keys.intersection(data))
        if found:
            raise ValueError(f"{shape} carry no {', '.join(map(repr, found))} field")
    return data

# ─── Title Block ────────────────────────────────────────────────────


@total_ordering
class Titelblatt(GbxModel):
    """Identifies exactly one register sheet; usable as a dict/set key."""

    amtsgericht: str
    grundbuch_von: str
    blatt: str

    def _key(self) -> tuple[str, str, str]:
        return (self.amtsgericht, self.grundbuch_von, self.blatt)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Titelblatt):
            return NotImplemented
        return self._key() < other._key()


# ─── Redaction ──────────────────────────────────────────────────────


class Eintragung(GbxModel):
    """Fields and precedence rule shared by all section records."""

    automatisch_geroetet: Optional[Flag] = None
    manuell_geroetet: Optional[Flag] = None
    position_in_pdf: Optional[PositionInPdf] = None

    def ist_geroetet(self) -> bool:
        if self.manuell_geroetet is not None:
            return self.manuell_geroetet
        if self.automatisch_geroetet is not None:
            return self.automatisch_geroetet
        return False


# ─── Bestandsverzeichnis ────────────────────────────────────────────


class BvEintragFlurstueck(Eintragung):
    """Parcel (Flurstück) row of the property index."""

    lfd_nr: Count
    bisherige_lfd_nr: Optional[Count] = None
    flur: Count
    flurstueck: str = ""
    gemarkung: Optional[str] = None
    bezeichnung: Optional[FlexibleText] = None
    groesse: FlurstueckGroesse = Field(default_factory=GroesseMetrisch)

    @field_validator("gemarkung", "bezeichnung")
    @classmethod
    def _empty_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value:
            return None
        if isinstance(value, FlexibleText) and value.is_empty():
            return None
        return value


class BvEintragRecht(Eintragung):
    """Right attached to the property (Herrschvermerk, grundstücksgleiches Recht)."""

    lfd_nr: Count
    zu_nr: FlexibleText = Field(default_factory=FlexibleText)
    bisherige_lfd_nr: Optional[Count] = None
    text: FlexibleText = Field(default_factory=FlexibleText)

    @model_validator(mode="before")
    @classmethod
    def _reject_parcel(cls, data: Any) -> Any:
        return _reject_keys(data, _PARCEL_ONLY_KEYS, "rights")


# Decoded parcel-first: only a payload without parcel fields becomes a right.
BvEintrag = Annotated[
    Union[BvEintragFlurstueck, BvEintragRecht], Field(union_mode="left_to_right")
]


class BvZuschreibung(Eintragung):
    bv_nr: FlexibleText = Field(default_factory=FlexibleText)
    text: FlexibleText = Field(default_factory=FlexibleText)

    def ist_leer(self) -> bool:
        return self.bv_nr.is_empty() and self.text.is_empty()


class BvAbschreibung(Eintragung):
    bv_nr: FlexibleText = Field(default_factory=FlexibleText)
    text: FlexibleText = Field(default_factory=FlexibleText)

    def ist_leer(self) -> bool:
        return self.bv_nr.is_empty() and self.text.is_empty()


class Bestandsverzeichnis(GbxModel):
    eintraege: list[BvEintrag] = Field(default_factory=list)
    zuschreibungen: list[BvZuschreibung] = Field(default_factory=list)
    abschreibungen: list[BvAbschreibung] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.eintraege or self.zuschreibungen or self.abschreibungen)


# ─── Abteilung 1 (Eigentümer) ───────────────────────────────────────


class _Abt1EintragMixin:
    """Accessors that work on either owner entry shape."""

    def get_lfd_nr(self) -> int:
        return self.lfd_nr  # type: ignore[attr-defined]

    def get_eigentuemer(self) -> str:
        return self.eigentuemer.text()  # type: ignore[attr-defined]


class Abt1EintragV1(_Abt1EintragMixin, Eintragung):
    """Owner entry in the legacy shape, which has no ``version`` field."""

    lfd_nr: Count
    eigentuemer: FlexibleText = Field(default_factory=FlexibleText)
    bv_nr: FlexibleText = Field(default_factory=FlexibleText)
    grundlage_der_eintragung: FlexibleText = Field(default_factory=FlexibleText)

    @model_validator(mode="before")
    @classmethod
    def _reject_versioned(cls, data: Any) -> Any:
        return _reject_keys(data, frozenset({"version"}), "legacy owner entries")


class Abt1EintragV2(_Abt1EintragMixin, Eintragung):
    """Owner entry in the current shape, tagged with an explicit ``version``."""

    lfd_nr: Count
    eigentuemer: FlexibleText = Field(default_factory=FlexibleText)
    version: Count

    @model_validator(mode="before")
    @classmethod
    def _reject_legacy(cls, data: Any) -> Any:
        return _reject_keys(data, _LEGACY_OWNER_KEYS, "versioned owner entries")


# Legacy shape is always tried first; the order is part of the format.
Abt1Eintrag = Annotated[
    Union[Abt1EintragV1, Abt1EintragV2], Field(union_mode="left_to_right")
]

_ABT1_EINTRAG = TypeAdapter(Abt1Eintrag)


def parse_abt1_eintrag(payload: Any) -> Abt1EintragV1 | Abt1EintragV2:
    """Resolve an owner entry payload: legacy shape first, then versioned.

    Raises:
        EntryShapeError: If the payload fits neither shape.
    """
    try:
        return _ABT1_EINTRAG.validate_python(payload)
    except ValidationError as exc:
        raise EntryShapeError(
            "Owner entry matches neither the legacy nor the versioned shape",
            {"errors": exc.errors(include_url=False, include_context=False, include_input=False)},
        ) from exc


class Abt1GrundEintragung(Eintragung):
    bv_nr: FlexibleText = Field(default_factory=FlexibleText)
    text: FlexibleText = Field(default_factory=FlexibleText)  # Grundlage der Eintragung


class Abt1Veraenderung(Eintragung):
    lfd_nr: FlexibleText = Field(default_factory=FlexibleText)
    text: FlexibleText = Field(default_factory=FlexibleText)


class Abt1Loeschung(Eintragung):
    lfd_nr: FlexibleText = Field(default_factory=FlexibleText)
    text: FlexibleText = Field(default_factory=FlexibleText)


class Abteilung1(GbxModel):
    eintraege: list[Abt1Eintrag] = Field(default_factory=list)
    grundlagen_eintragungen: list[Abt1GrundEintragung] = Field(default_factory=list)
    veraenderungen: list[Abt1Veraenderung] = Field(default_factory=list)
    loeschungen: list[Abt1Loeschung] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.eintraege
            or self.grundlagen_eintragungen
            or self.veraenderungen
            or self.loeschungen
        )


# ─── Abteilung 2 (Lasten und Beschränkungen) ────────────────────────


class Abt2Eintrag(Eintragung):
    lfd_nr: Count
    bv_nr: FlexibleText = Field(default_factory=FlexibleText)  # affected property index rows
    text: FlexibleText = Field(default_factory=FlexibleText)


class Abt2Veraenderung(Eintragung):
    lfd_nr: FlexibleText = Field(default_factory=FlexibleText)
    text: FlexibleText = Field(default_factory=FlexibleText)


class Abt2Loeschung(Eintragung):
    lfd_nr: FlexibleText = Field(default_factory=FlexibleText)
    text: FlexibleText = Field(default_factory=FlexibleText)


class Abteilung2(GbxModel):
    eintraege: list[Abt2Eintrag] = Field(default_factory=list)
    veraenderungen: list[Abt2Veraenderung] = Field(default_factory=list)
    loeschungen: list[Abt2Loeschung] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.eintraege or self.veraenderungen or self.loeschungen)


# ─── Abteilung 3 (Grundpfandrechte) ─────────────────────────────────


class Abt3Eintrag(Eintragung):
    lfd_nr: Count
    bv_nr: FlexibleText = Field(default_factory=FlexibleText)
    betrag: FlexibleText = Field(default_factory=FlexibleText)  # EUR / DM
    text: FlexibleText = Field(default_factory=FlexibleText)


class Abt3Veraenderung(Eintragung):
    lfd_nr: FlexibleText = Field(default_factory=FlexibleText)
    betrag: FlexibleText = Field(default_factory=FlexibleText)
    text: FlexibleText = Field(default_factory=FlexibleText)


class Abt3Loeschung(Eintragung):
    lfd_nr: FlexibleText = Field(default_factory=FlexibleText)
    betrag: FlexibleText = Field(default_factory=FlexibleText)
    text: FlexibleText = Field(default_factory=FlexibleText)


class Abteilung3(GbxModel):
    eintraege: list[Abt3Eintrag] = Field(default_factory=list)
    veraenderungen: list[Abt3Veraenderung] = Field(default_factory=list)
    loeschungen: list[Abt3Loeschung] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.eintraege or self.veraenderungen or self.loeschungen)


# ─── Register Sheet ─────────────────────────────────────────────────


class Grundbuch(GbxModel):
    """Analyzed register sheet, including manual edits."""

    titelblatt: Titelblatt
    bestandsverzeichnis: Bestandsverzeichnis = Field(default_factory=Bestandsverzeichnis)
    abt1: Abteilung1 = Field(default_factory=Abteilung1)
    abt2: Abteilung2 = Field(default_factory=Abteilung2)
    abt3: Abteilung3 = Field(default_factory=Abteilung3)


# Every record kind that carries the redaction flags.
RECORD_KINDS: tuple[type[Eintragung], ...] = (
    BvEintragFlurstueck,
    BvEintragRecht,
    BvZuschreibung,
    BvAbschreibung,
    Abt1EintragV1,
    Abt1EintragV2,
    Abt1GrundEintragung,
    Abt1Veraenderung,
    Abt1Loeschung,
    Abt2Eintrag,
    Abt2Veraenderung,
    Abt2Loeschung,
    Abt3Eintrag,
    Abt3Veraenderung,
    Abt3Loeschung,
)
