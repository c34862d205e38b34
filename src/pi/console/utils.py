"""Terminal text utilities: ANSI stripping, width measurement, truncation.

Widths are measured in terminal columns.  Grapheme clusters (emoji
sequences, combining marks) are measured as a unit via :mod:`grapheme`;
single code points are delegated to :mod:`wcwidth`.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# CSI sequences (colors, cursor movement) and OSC 8 hyperlinks
_STRIP_RE = re.compile(
    r"\x1b\[[0-9;?]*[A-Za-z]"
    r"|\x1b\]8;;[^\x07]*\x07"
)

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from *text*."""
    return _STRIP_RE.sub("", text)


def char_width(ch: str) -> int:
    """Return the column width of a single code point.

    Control characters and zero-width code points (combining marks,
    joiners) count as 0.
    """
    if not ch:
        return 0
    cp = ord(ch)
    if cp < 0x20 or 0x7F <= cp <= 0x9F:
        return 0
    return max(_wcwidth.wcwidth(ch), 0)


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if len(g) == 1:
        return char_width(g)

    for ch in g:
        cp = ord(ch)
        # VS16, ZWJ, skin tone modifiers and regional indicators force
        # emoji presentation
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2
    if unicodedata.category(first).startswith("M"):
        return 0
    return char_width(first)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*, ignoring ANSI codes."""
    if not text:
        return 0

    stripped = strip_ansi(text)
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


def cursor_column(prompt: str, buffer: str, cursor: int) -> int:
    """Column of the cursor after *prompt* + the first *cursor* characters.

    Each code point before the cursor contributes its own width, so the
    column tracks the scalar-based cursor exactly.
    """
    return visible_width(prompt) + sum(char_width(ch) for ch in buffer[:cursor])


def truncate_to_width(text: str, max_width: int, ellipsis: str = "...") -> str:
    """Truncate *text* to fit within *max_width* visible columns.

    The ellipsis counts towards the width.  Text is only ever cut at
    grapheme boundaries.
    """
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text

    target = max_width - visible_width(ellipsis)
    if target <= 0:
        return ellipsis[:max_width]

    result: list[str] = []
    cols = 0
    for g in grapheme.graphemes(text):
        w = _grapheme_width(g)
        if cols + w > target:
            break
        result.append(g)
        cols += w
    return "".join(result) + ellipsis
