"""Code-point text utilities: slicing, display width, and input sanitising.

Every column and offset in the buffer is a code-point index. Python strings
already index by code point, so the helpers here are thin, but all column
arithmetic in the package routes through them so that clamping behaves the
same everywhere.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Regex patterns for ANSI / VT control sequences
# ---------------------------------------------------------------------------

# CSI, OSC (BEL or ST terminated) and the single-character C1 introducers.
_ANSI_RE = re.compile(
    r"[\x1b\x9b][\[\]()#;?]*"
    r"(?:"
    r"(?:(?:;[-a-zA-Z\d/#&.:=?%@~_]+)*|[a-zA-Z\d]+(?:;[-a-zA-Z\d/#&.:=?%@~_]*)*)?(?:\x07|\x1b\\)"
    r"|"
    r"(?:\d{1,4}(?:;\d{0,4})*)?[\dA-PR-TZcf-nq-uy=><~]"
    r")"
)
# APC sequences: ESC_ <payload> (BEL | ST)
_APC_RE = re.compile(r"\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)")

_NEWLINE_RE = re.compile(r"\r\n?")
_ESCAPED_CHAR_RE = re.compile(r"\\(.)")


# ---------------------------------------------------------------------------
# Code points
# ---------------------------------------------------------------------------


def to_code_points(text: str) -> list[str]:
    """Split *text* into a list of code points (astral characters stay whole)."""
    return list(text)


def cp_len(text: str) -> int:
    """Length of *text* in code points."""
    return len(text)


def cp_slice(text: str, start: int, end: int | None = None) -> str:
    """Slice *text* by code point, clamping out-of-range indices.

    Unlike plain slicing, negative indices clamp to ``0`` rather than
    counting from the end.
    """
    length = len(text)
    start = min(max(start, 0), length)
    end = length if end is None else min(max(end, 0), length)
    if end <= start:
        return ""
    return text[start:end]


def clamp(value: int, lower: int, upper: int) -> int:
    return lower if value < lower else upper if value > upper else value


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return _NEWLINE_RE.sub("\n", text)


# ---------------------------------------------------------------------------
# Display width
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def char_width(char: str) -> int:
    """Terminal column width of a single code point.

    Control characters and combining marks are zero width, wide East Asian
    glyphs and emoji are two columns, everything else is one.
    """
    if not char:
        return 0
    cp = ord(char[0])
    if cp < 0x20 or 0x7F <= cp <= 0x9F:
        return 0
    return max(_wcwidth.wcwidth(char[0]), 0)


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        return char_width(g)

    for ch in g:
        cp = ord(ch)
        if cp == 0xFE0F:  # VS16
            return 2
        if cp == 0x200D:  # ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000:
        return 2
    if 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return char_width(g[0])


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    Measures whole grapheme clusters, so a ZWJ emoji sequence counts once.
    Uses a fast ASCII path when possible and caches other results.
    """
    if not text:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in text):
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = 0
    for g in grapheme.graphemes(text):
        total += _grapheme_width(g)

    return _cache_width(text, total)


# ---------------------------------------------------------------------------
# Input sanitising
# ---------------------------------------------------------------------------


def strip_ansi(text: str) -> str:
    """Remove ANSI/VT escape sequences from *text*."""
    return _ANSI_RE.sub("", _APC_RE.sub("", text))


def strip_unsafe_characters(text: str) -> str:
    """Strip characters that can break terminal rendering.

    Removes escape sequences, C0 controls other than CR/LF, and C1 controls.
    DEL (0x7F) and all printable Unicode, emoji included, are kept.
    """
    kept: list[str] = []
    for char in strip_ansi(text):
        code = ord(char)
        if code in (0x0A, 0x0D):
            kept.append(char)
        elif code <= 0x1F or 0x80 <= code <= 0x9F:
            continue
        else:
            kept.append(char)
    return "".join(kept)


def unescape_path(path: str) -> str:
    """Undo shell-style backslash escaping (``my\\ file`` -> ``my file``)."""
    return _ESCAPED_CHAR_RE.sub(r"\1", path)
