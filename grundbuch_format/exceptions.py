"""
Custom exception hierarchy for the .gbx exchange format.

Each exception type maps to a specific category of decode failure,
enabling precise error handling and reporting in host applications.
"""

from __future__ import annotations


class GrundbuchFormatError(Exception):
    """Base exception for all exchange-format failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class DecodeError(GrundbuchFormatError):
    """The payload is not valid JSON or does not match the document schema."""

    def __init__(self, message: str, details: dict | None = None, code: str = "DECODE_FAILED"):
        super().__init__(code, message, details)


class EntryShapeError(DecodeError):
    """An Abteilung 1 entry matches neither the legacy nor the versioned shape."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, details, code="ENTRY_SHAPE_UNRESOLVED")


class UnknownPageTypeError(DecodeError):
    """A page classification token is outside the closed SeitenTyp set."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, details, code="UNKNOWN_PAGE_TYPE")


class PageIdError(DecodeError):
    """A page identifier is not the decimal form of a 1-based page number."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, details, code="PAGE_ID_INVALID")
