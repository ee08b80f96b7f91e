"""
Parcel area (Flurstücksgröße) in two interchangeable forms.

On the wire the area is tagged:

    {"typ": "m",  "wert": {"m2": 1234}}
    {"typ": "ha", "wert": {"ha": 1, "a": 2, "m2": 34}}

Both forms reduce to one total in square meters. The display strings
split the decimal digits of that total from the right into m² (two
digits), ares (two digits) and hectares (the rest), the way cadastral
extracts print "ha a m²". Everything here is integer / digit-string
arithmetic; floats would lose single square meters on large parcels.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from .schema import Count, GbxModel

# Weight of one hectare component in the total, as exchanged by existing files.
HECTARE_FACTOR = 100_000
ARE_FACTOR = 100


# ─── Payloads ───────────────────────────────────────────────────────


class MetrischWert(GbxModel):
    m2: Optional[Count] = None


class HektarWert(GbxModel):
    ha: Optional[Count] = None
    a: Optional[Count] = None
    m2: Optional[Count] = None


# ─── Tagged Forms ───────────────────────────────────────────────────


class _Groesse(GbxModel):
    """Behaviour shared by both tagged forms."""

    @abstractmethod
    def is_empty(self) -> bool: ...

    @abstractmethod
    def total_square_meters(self) -> int: ...

    def hectares_string(self) -> str:
        return self._digits()[:-4]

    def ares_string(self) -> str:
        return self._digits()[-4:-2]

    def square_meters_string(self) -> str:
        return self._digits()[-2:] or "0"

    def _digits(self) -> str:
        return str(self.total_square_meters())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Groesse):
            return NotImplemented
        # An empty area is the same value whichever tag it was written with.
        if self.is_empty() and other.is_empty():
            return True
        return type(self) is type(other) and self.wert == other.wert  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        if self.is_empty():
            return hash(None)
        return hash((type(self).__name__, self.wert))  # type: ignore[attr-defined]


class GroesseMetrisch(_Groesse):
    """Area given as a plain square-meter count."""

    typ: Literal["m"] = "m"
    wert: MetrischWert = Field(default_factory=MetrischWert)

    @classmethod
    def from_m2(cls, m2: int | None) -> GroesseMetrisch:
        return cls(wert=MetrischWert(m2=m2))

    def is_empty(self) -> bool:
        return self.wert.m2 is None

    def total_square_meters(self) -> int:
        return self.wert.m2 or 0


class GroesseHektar(_Groesse):
    """Area given as hectares, ares and square meters, each optional."""

    typ: Literal["ha"] = "ha"
    wert: HektarWert = Field(default_factory=HektarWert)

    @classmethod
    def from_parts(
        cls, ha: int | None = None, a: int | None = None, m2: int | None = None
    ) -> GroesseHektar:
        return cls(wert=HektarWert(ha=ha, a=a, m2=m2))

    def is_empty(self) -> bool:
        w = self.wert
        return w.ha is None and w.a is None and w.m2 is None

    def total_square_meters(self) -> int:
        w = self.wert
        return (w.ha or 0) * HECTARE_FACTOR + (w.a or 0) * ARE_FACTOR + (w.m2 or 0)


FlurstueckGroesse = Annotated[
    Union[GroesseMetrisch, GroesseHektar], Field(discriminator="typ")
]
