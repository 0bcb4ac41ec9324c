"""Terminal text utilities: width measurement, truncation, and single-lining.

Widths are measured per grapheme cluster so that wide (CJK, emoji) and
zero-width characters line up in the completion grid.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

ELLIPSIS = "..."

# Trailing fragment kept when a long item is shortened.
SPLIT_POSITION = 10

_NEWLINE_RE = re.compile(r"[\r\n]")

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def graphemes(text: str) -> list[str]:
    return list(grapheme.graphemes(text))


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*."""
    if not text:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in text):
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    return _cache_width(text, sum(grapheme_width(g) for g in grapheme.graphemes(text)))


# ---------------------------------------------------------------------------
# Truncation
# ---------------------------------------------------------------------------


def take_columns(text: str, max_cols: int) -> str:
    """Return the longest prefix of *text* fitting in *max_cols* columns."""
    result: list[str] = []
    cols = 0
    for g in grapheme.graphemes(text):
        w = grapheme_width(g)
        if cols + w > max_cols:
            break
        result.append(g)
        cols += w
    return "".join(result)


def take_last_columns(text: str, max_cols: int) -> str:
    """Return the longest suffix of *text* fitting in *max_cols* columns."""
    result: list[str] = []
    cols = 0
    for g in reversed(graphemes(text)):
        w = grapheme_width(g)
        if cols + w > max_cols:
            break
        result.append(g)
        cols += w
    return "".join(reversed(result))


def shorten(text: str, max_width: int, split: int = SPLIT_POSITION) -> str:
    """Shorten *text* to *max_width* by replacing its middle with an ellipsis.

    The last *split* columns are kept. Below ``split + len(ELLIPSIS)`` columns
    the kept tail shrinks instead, so the result never exceeds *max_width*.
    """
    if visible_width(text) <= max_width:
        return text
    if max_width <= len(ELLIPSIS):
        return take_last_columns(text, max_width)
    split = min(split, max_width - len(ELLIPSIS))
    head = take_columns(text, max_width - split - len(ELLIPSIS))
    return head + ELLIPSIS + take_last_columns(text, split)


def single_line(text: str) -> str:
    """Trim *text* and cut it at the first line break, marking the cut."""
    text = text.strip()
    m = _NEWLINE_RE.search(text)
    if m:
        text = text[: m.start()] + ELLIPSIS
    return text
