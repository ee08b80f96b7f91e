"""
FlexibleText — legal text stored either as one string or as a list of lines.

Editors save some fields as a freeform note and others line by line.
Both shapes appear on the wire and both must survive a round-trip, so
the value keeps whichever shape it was given. Equality only looks at the
lines, never at the storage shape.
"""

from __future__ import annotations

from typing import Union

from pydantic import ConfigDict, RootModel

from .dehyphenate import split_lines, unhyphenate

LINE_SEPARATOR = "\r\n"


class FlexibleText(RootModel[Union[str, list[str]]]):
    """A string, or an explicit list of lines."""

    model_config = ConfigDict(frozen=True)

    root: Union[str, list[str]] = ""

    @classmethod
    def from_text(cls, text: str) -> FlexibleText:
        """Build from plain text. Always yields the explicit line list."""
        return cls(split_lines(text))

    def is_empty(self) -> bool:
        return len(self.root) == 0

    def lines(self) -> list[str]:
        if isinstance(self.root, str):
            return split_lines(self.root)
        return list(self.root)

    def text(self) -> str:
        """Lines joined with CRLF, whatever the platform."""
        return LINE_SEPARATOR.join(self.lines())

    def text_clean(self) -> str:
        """``text()`` with words hyphenated across lines merged back."""
        return unhyphenate(self.text())

    def __str__(self) -> str:
        if isinstance(self.root, str):
            return self.root
        return LINE_SEPARATOR.join(self.root)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FlexibleText):
            return NotImplemented
        return self.lines() == other.lines()

    def __hash__(self) -> int:
        return hash(tuple(self.lines()))
