"""Display-width measurement and truncation for picker lines.

Widths are terminal cells: combining marks take none, East Asian wide and
fullwidth characters take two. Truncation always cuts between characters.
"""

from __future__ import annotations

import unicodedata

ELLIPSIS = "..."
_DOUBLE_WIDTH_CLASSES = frozenset({"W", "F"})


def char_display_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in _DOUBLE_WIDTH_CLASSES else 1


def display_width(text: str) -> int:
    return sum(map(char_display_width, text))


def clip_to_width(text: str, max_cols: int) -> str:
    """Return the longest prefix of ``text`` fitting in ``max_cols`` cells."""
    if max_cols <= 0:
        return ""
    used = 0
    for position, ch in enumerate(text):
        used += char_display_width(ch)
        if used > max_cols:
            return text[:position]
    return text


def printable(text: str, replacement: str = "?") -> str:
    """Replace control and other non-printable characters with ``replacement``.

    Every rendered line must occupy exactly one terminal row.
    """
    if text.isprintable():
        return text
    return "".join(ch if ch.isprintable() else replacement for ch in text)


def truncate_with_ellipsis(text: str, max_cols: int) -> str:
    """Fit ``text`` into ``max_cols`` cells, marking cut text with ``...``.

    Budgets too small to hold the ellipsis fall back to a plain clip.
    """
    if display_width(text) <= max_cols:
        return text
    if max_cols <= len(ELLIPSIS):
        return clip_to_width(text, max_cols)
    return clip_to_width(text, max_cols - len(ELLIPSIS)) + ELLIPSIS


__all__ = [
    "ELLIPSIS",
    "char_display_width",
    "clip_to_width",
    "display_width",
    "printable",
    "truncate_with_ellipsis",
]
