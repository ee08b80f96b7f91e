"""
Shared schema plumbing for every .gbx model.

The exchange format is minimal on the wire: anything that is absent or
logically empty is left out when encoding, and restored as its default
when decoding. Every model derives from ``GbxModel``, whose serializer
asks each optional field whether it is empty and drops it if so.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, ClassVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    Strict,
    model_serializer,
)

from .exceptions import PageIdError

# ─── Field Types ────────────────────────────────────────────────────

# Running numbers, parcel ids and area components: JSON integers only.
Count = Annotated[int, Strict(), Field(ge=0)]

# Redaction flags: JSON booleans only (no "yes"/1 coercion).
Flag = Annotated[bool, Strict()]

_PAGE_ID = re.compile(r"[1-9][0-9]*")


def _check_seiten_id(value: str) -> str:
    if not _PAGE_ID.fullmatch(value):
        raise ValueError(f"page identifier must be a 1-based decimal page number, got {value!r}")
    return value


# Page identifiers: decimal string of a 1-based page number ("1", "2", ...).
SeitenId = Annotated[str, AfterValidator(_check_seiten_id)]


def seiten_key(page_number: int) -> str:
    """Format a 1-based page number as a page identifier."""
    if isinstance(page_number, bool) or not isinstance(page_number, int) or page_number < 1:
        raise PageIdError(
            f"Page numbers are 1-based integers, got {page_number!r}",
            {"page_number": page_number},
        )
    return str(page_number)


def seiten_nummer(key: str) -> int:
    """Parse a page identifier back into its 1-based page number."""
    if not isinstance(key, str) or not _PAGE_ID.fullmatch(key):
        raise PageIdError(
            f"Invalid page identifier {key!r}",
            {"key": key},
        )
    return int(key)


def sort_by_page(mapping: dict[str, Any]) -> dict[str, Any]:
    """Order a page-keyed mapping by page number (not lexically)."""
    return dict(sorted(mapping.items(), key=lambda item: int(item[0])))


# ─── Emptiness ──────────────────────────────────────────────────────


def is_empty_value(value: Any) -> bool:
    """True if ``value`` is absent or logically empty.

    Composite types answer for themselves through ``is_empty()``;
    plain collections and strings are empty when they have no items.
    """
    if value is None:
        return True
    is_empty = getattr(value, "is_empty", None)
    if callable(is_empty):
        return bool(is_empty())
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


# ─── Base Model ─────────────────────────────────────────────────────


class GbxModel(BaseModel):
    """Immutable base for all exchange-format models.

    Required fields are always encoded. Optional fields (those with a
    default) are dropped when empty, unless listed in ``ALWAYS_EMIT``.
    """

    model_config = ConfigDict(frozen=True)

    ALWAYS_EMIT: ClassVar[frozenset[str]] = frozenset()

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        for name, field in type(self).model_fields.items():
            if field.is_required() or name in self.ALWAYS_EMIT:
                continue
            if is_empty_value(getattr(self, name)):
                data.pop(name, None)
        return data
