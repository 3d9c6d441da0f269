"""Word classification and word-wise cursor motions.

Two strategies live here side by side:

* the script-aware classifier (``is_word_char``, ``script_of`` ...) and the
  in-line / cross-line searches built on it, used by vim-style motions;
* the simple punctuation-splitting test (``is_simple_word_char``) used by the
  plain editing motions ``wordLeft``/``wordRight`` and ``delete_word_*``.

They disagree on what a word is (``foo-bar`` is one simple word but three
vim words) and callers rely on each one's behaviour, so they are kept apart.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Literal

from pi.textbuffer.utils import to_code_points

Script = Literal["latin", "han", "arabic", "hiragana", "katakana", "cyrillic", "other"]

_WHITESPACE_RE = re.compile(r"\s")
_SIMPLE_WORD_BREAK_RE = re.compile(r"[\s,.;!?]")

# Unicode character-name prefixes that identify a script.
_SCRIPT_NAME_PREFIXES: tuple[tuple[str, Script], ...] = (
    ("LATIN ", "latin"),
    ("CJK UNIFIED IDEOGRAPH", "han"),
    ("CJK COMPATIBILITY IDEOGRAPH", "han"),
    ("CJK RADICAL ", "han"),
    ("KANGXI RADICAL ", "han"),
    ("ARABIC", "arabic"),
    ("HIRAGANA ", "hiragana"),
    ("KATAKANA ", "katakana"),
    ("CYRILLIC ", "cyrillic"),
)
_WIDTH_NAME_PREFIXES = ("FULLWIDTH ", "HALFWIDTH ")


# ---------------------------------------------------------------------------
# Character classes
# ---------------------------------------------------------------------------


def is_word_char(char: str) -> bool:
    """Letter, number, or underscore in any script."""
    return bool(char) and (char.isalnum() or char == "_")


def is_whitespace(char: str) -> bool:
    return bool(char) and _WHITESPACE_RE.match(char) is not None


def is_combining_mark(char: str) -> bool:
    return bool(char) and unicodedata.category(char[0]).startswith("M")


def is_word_char_with_combining(char: str) -> bool:
    """Word character, or a combining mark attached to one."""
    return is_word_char(char) or is_combining_mark(char)


def script_of(char: str) -> Script:
    """Return the script of *char* for the scripts that matter to word motion."""
    name = unicodedata.name(char[0], "") if char else ""
    for prefix in _WIDTH_NAME_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix):]
            break
    for prefix, script in _SCRIPT_NAME_PREFIXES:
        if name.startswith(prefix):
            return script
    return "other"


def is_script_boundary(a: str, b: str) -> bool:
    """True iff both are word characters and their scripts differ."""
    if not is_word_char(a) or not is_word_char(b):
        return False
    return script_of(a) != script_of(b)


# ---------------------------------------------------------------------------
# In-line searches (script aware)
# ---------------------------------------------------------------------------


def find_next_word_start_in_line(line: str, col: int) -> int | None:
    """Column of the next word start after *col*, or ``None`` if the line has none."""
    chars = to_code_points(line)
    n = len(chars)
    i = max(col, 0)

    if i >= n:
        return None

    if is_word_char(chars[i]):
        while i < n and is_word_char_with_combining(chars[i]):
            if i + 1 < n and is_word_char(chars[i + 1]) and is_script_boundary(chars[i], chars[i + 1]):
                i += 1
                break
            i += 1
    elif not is_whitespace(chars[i]):
        while i < n and not is_word_char(chars[i]) and not is_whitespace(chars[i]):
            i += 1

    while i < n and is_whitespace(chars[i]):
        i += 1

    return i if i < n else None


def find_prev_word_start_in_line(line: str, col: int) -> int | None:
    """Column of the word start before *col*, or ``None`` at the line start."""
    chars = to_code_points(line)
    i = min(col, len(chars))

    if i <= 0:
        return None

    i -= 1
    while i >= 0 and is_whitespace(chars[i]):
        i -= 1

    if i < 0:
        return None

    if is_word_char(chars[i]):
        while i >= 0 and is_word_char(chars[i]):
            if i - 1 >= 0 and is_word_char(chars[i - 1]) and is_script_boundary(chars[i], chars[i - 1]):
                return i
            i -= 1
        return i + 1

    while i >= 0 and not is_word_char(chars[i]) and not is_whitespace(chars[i]):
        i -= 1
    return i + 1


def find_word_end_in_line(line: str, col: int) -> int | None:
    """Column of the last character of the current or next word.

    When *col* already sits on the end of a word (or punctuation run) the
    search starts from the following word, so repeated calls progress.
    Combining marks are never returned; the position of their base character
    is used instead.
    """
    chars = to_code_points(line)
    n = len(chars)
    i = max(col, 0)

    at_end_of_word_char = (
        i < n
        and is_word_char_with_combining(chars[i])
        and (
            i + 1 >= n
            or not is_word_char_with_combining(chars[i + 1])
            or (is_word_char(chars[i]) and i + 1 < n and is_script_boundary(chars[i], chars[i + 1]))
        )
    )
    at_end_of_punctuation = (
        i < n
        and not is_word_char_with_combining(chars[i])
        and not is_whitespace(chars[i])
        and (i + 1 >= n or is_whitespace(chars[i + 1]) or is_word_char_with_combining(chars[i + 1]))
    )

    if at_end_of_word_char or at_end_of_punctuation:
        i += 1
        while i < n and is_whitespace(chars[i]):
            i += 1

    if i < n and not is_word_char_with_combining(chars[i]):
        while i < n and is_whitespace(chars[i]):
            i += 1

    found_word = False
    last_base_char_pos = -1

    if i < n and is_word_char_with_combining(chars[i]):
        while i < n and is_word_char_with_combining(chars[i]):
            found_word = True
            if is_word_char(chars[i]):
                last_base_char_pos = i
            if i + 1 < n and is_word_char(chars[i + 1]) and is_script_boundary(chars[i], chars[i + 1]):
                i += 1
                if is_word_char(chars[i - 1]):
                    last_base_char_pos = i - 1
                break
            i += 1
    elif i < n and not is_whitespace(chars[i]):
        while i < n and not is_word_char(chars[i]) and not is_whitespace(chars[i]):
            found_word = True
            last_base_char_pos = i
            i += 1

    if found_word and last_base_char_pos >= col:
        return last_base_char_pos
    return None


# ---------------------------------------------------------------------------
# Cross-line searches
# ---------------------------------------------------------------------------


def _first_non_whitespace(chars: list[str]) -> int:
    i = 0
    while i < len(chars) and is_whitespace(chars[i]):
        i += 1
    return i


def _has_content_after(lines: list[str] | tuple[str, ...], row: int) -> bool:
    for later in lines[row + 1:]:
        chars = to_code_points(later)
        if _first_non_whitespace(chars) < len(chars):
            return True
    return False


def find_next_word_across_lines(
    lines: list[str] | tuple[str, ...],
    cursor_row: int,
    cursor_col: int,
    search_for_word_start: bool,
) -> tuple[int, int] | None:
    """Find the next word start (or word end) from the cursor, spilling onto later lines.

    An empty line is a stopping point only when nothing but whitespace
    follows it; otherwise blank lines are skipped.
    """
    current_line = lines[cursor_row] if 0 <= cursor_row < len(lines) else ""
    if search_for_word_start:
        col = find_next_word_start_in_line(current_line, cursor_col)
    else:
        col = find_word_end_in_line(current_line, cursor_col)
    if col is not None:
        return (cursor_row, col)

    for row in range(cursor_row + 1, len(lines)):
        line = lines[row]
        chars = to_code_points(line)

        if not chars:
            if not _has_content_after(lines, row):
                return (row, 0)
            continue

        first = _first_non_whitespace(chars)
        if first < len(chars):
            if search_for_word_start:
                return (row, first)
            end_col = find_word_end_in_line(line, first)
            if end_col is not None:
                return (row, end_col)

    return None


def find_prev_word_across_lines(
    lines: list[str] | tuple[str, ...],
    cursor_row: int,
    cursor_col: int,
) -> tuple[int, int] | None:
    """Find the previous word start from the cursor, spilling onto earlier lines."""
    current_line = lines[cursor_row] if 0 <= cursor_row < len(lines) else ""
    col = find_prev_word_start_in_line(current_line, cursor_col)
    if col is not None:
        return (cursor_row, col)

    for row in range(min(cursor_row, len(lines)) - 1, -1, -1):
        line = lines[row]
        chars = to_code_points(line)
        if not chars:
            continue

        last_word_start = len(chars)
        while last_word_start > 0 and is_whitespace(chars[last_word_start - 1]):
            last_word_start -= 1

        if last_word_start > 0:
            word_start = find_prev_word_start_in_line(line, last_word_start)
            if word_start is not None:
                return (row, word_start)

    return None


# ---------------------------------------------------------------------------
# Simple strategy (editing motions)
# ---------------------------------------------------------------------------


def is_simple_word_char(char: str | None) -> bool:
    """Anything but whitespace and ``, . ; ! ?`` counts as part of a word."""
    if not char:
        return False
    return _SIMPLE_WORD_BREAK_RE.match(char) is None


def find_word_left_simple(line: str, col: int) -> int:
    """Start of the word left of *col*, skipping separators first.

    When only separators precede the cursor, steps back a single column.
    """
    chars = to_code_points(line)
    start = min(max(col, 0), len(chars))
    only_spaces = not any(is_simple_word_char(ch) for ch in chars[:start])
    if only_spaces and start > 0:
        return start - 1
    while start > 0 and not is_simple_word_char(chars[start - 1]):
        start -= 1
    while start > 0 and is_simple_word_char(chars[start - 1]):
        start -= 1
    return start


def find_word_right_simple(line: str, col: int) -> int:
    """End of the word right of *col*, skipping separators first."""
    chars = to_code_points(line)
    end = min(max(col, 0), len(chars))
    while end < len(chars) and not is_simple_word_char(chars[end]):
        end += 1
    while end < len(chars) and is_simple_word_char(chars[end]):
        end += 1
    return end
