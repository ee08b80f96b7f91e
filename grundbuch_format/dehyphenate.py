"""
Dehyphenation of OCR'd legal text.

Scanned register sheets wrap long words at the column edge ("Grundbu-"
/ "ch"). This module glues such words back together.

Rules:
    "Grundbu- ch"              → "Grundbuch"   (hyphen, one space, lowercase)
    "Grundbu-\\nch"             → "Grundbuch"   (line break counts as the space)
    "Land- und Forstwirtschaft" → unchanged     (German compound ellipsis)
    "Flur- Stück"              → unchanged     (uppercase: a new word)
    "1 - 3"                    → unchanged     (no letter after the space)

The "- und " marker is split out before matching and re-inserted
verbatim, so it can never be merged.
"""

from __future__ import annotations

import re

# prefix, hyphen, exactly one whitespace, lowercase letter or umlaut, suffix
_UNHYPHENATE = re.compile(r"(.*)-\s([a-zäöü])(.*)")

_LOWERCASE_START = re.compile(r"[a-zäöü]")

# "und" as a whole word at the start of a wrapped line
_UND_START = re.compile(r"und(\s|$)")

_NEWLINE = re.compile(r"\r\n|\r|\n")

UND_MARKER = "- und "


def split_lines(text: str) -> list[str]:
    """Split on universal newlines (CRLF, LF, CR).

    A trailing line break does not start a new, empty line, and the
    empty string has no lines at all.
    """
    lines = _NEWLINE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def unhyphenate(text: str) -> str:
    """Merge words hyphenated across spaces and line breaks.

    Args:
        text: A multi-line text block, any newline convention.

    Returns:
        All lines concatenated into one string, with hyphenations merged.
    """
    cleaned = ""
    for line in split_lines(text):
        segments = line.split(UND_MARKER)
        merged = UND_MARKER.join(_merge_segment(s) for s in segments)
        cleaned = _join_lines(cleaned, merged)
    return cleaned


def _merge_segment(segment: str) -> str:
    """Apply the hyphen rule until it no longer matches."""
    while _UNHYPHENATE.search(segment):
        segment = _UNHYPHENATE.sub(r"\1\2\3", segment)
    return segment


def _join_lines(head: str, line: str) -> str:
    """Append ``line`` to ``head``, merging a word wrapped at the line end."""
    if not head.endswith("-"):
        return head + line
    if _UND_START.match(line):
        return head + " " + line
    if _LOWERCASE_START.match(line):
        return head[:-1] + line
    return head + line
