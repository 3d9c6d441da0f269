"""Conversions between flat text offsets and logical (row, col) positions.

Offsets count code points in the lines joined with ``"\\n"``; every newline
joining two lines costs exactly one.
"""

from __future__ import annotations

from collections.abc import Sequence

from pi.textbuffer.utils import cp_len


def offset_to_logical_pos(text: str, offset: int) -> tuple[int, int]:
    """Map an absolute offset into *text* to a logical ``(row, col)``.

    An offset landing on a newline resolves to the start of the next line.
    Offsets past the end clamp to the end of the last line.
    """
    if offset <= 0:
        return (0, 0)

    lines = text.split("\n")
    current = 0
    for i, line in enumerate(lines):
        line_len = cp_len(line)
        with_newline = line_len + (1 if i < len(lines) - 1 else 0)

        if offset <= current + line_len:
            return (i, offset - current)
        if offset <= current + with_newline:
            if offset == current + with_newline and i < len(lines) - 1:
                return (i + 1, 0)
            return (i, line_len)
        current += with_newline

    last = len(lines) - 1
    return (last, cp_len(lines[last]))


def logical_pos_to_offset(lines: Sequence[str], row: int, col: int) -> int:
    """Inverse of :func:`offset_to_logical_pos`; clamps *row* and *col*."""
    if not lines:
        return 0
    row = min(max(row, 0), len(lines) - 1)
    offset = sum(cp_len(line) + 1 for line in lines[:row])
    return offset + min(max(col, 0), cp_len(lines[row]))


def get_position_from_offsets(
    start_offset: int,
    end_offset: int,
    lines: Sequence[str],
) -> tuple[int, int, int, int]:
    """Resolve a flat ``[start, end)`` span to ``(start_row, start_col, end_row, end_col)``.

    An offset on a newline resolves to the end of the line it terminates;
    the offset right after it to column 0 of the next line. Offsets beyond
    the text clamp to its end.
    """
    if not lines:
        return (0, 0, 0, 0)

    last_row = len(lines) - 1
    end_of_text = (last_row, cp_len(lines[last_row]))

    start_row, start_col = end_of_text
    offset = 0
    for i, line in enumerate(lines):
        line_length = cp_len(line) + 1
        if offset + line_length > start_offset:
            start_row, start_col = i, max(start_offset - offset, 0)
            break
        offset += line_length

    end_row, end_col = end_of_text
    offset = 0
    for i, line in enumerate(lines):
        line_length = cp_len(line)
        if offset + line_length >= end_offset:
            end_row, end_col = i, max(end_offset - offset, 0)
            break
        offset += line_length + 1

    return (start_row, start_col, end_row, end_col)


def get_line_range_offsets(start_row: int, line_count: int, lines: Sequence[str]) -> tuple[int, int]:
    """Flat ``(start, end)`` offsets covering *line_count* lines from *start_row*.

    The span includes the newline after each covered line except the last
    line of the buffer.
    """
    start_offset = sum(cp_len(line) + 1 for line in lines[:start_row])

    end_offset = start_offset
    for row in range(start_row, start_row + line_count):
        if row >= len(lines):
            break
        end_offset += cp_len(lines[row])
        if row < len(lines) - 1:
            end_offset += 1

    return (start_offset, end_offset)


def calculate_initial_cursor_position(lines: Sequence[str], offset: int) -> tuple[int, int]:
    """Place an initial cursor offset into *lines*, clamping to the end of the last line."""
    remaining = max(offset, 0)
    for row, line in enumerate(lines):
        line_len = cp_len(line)
        if remaining <= line_len:
            return (row, remaining)
        remaining -= line_len + (1 if row < len(lines) - 1 else 0)

    if lines:
        last = len(lines) - 1
        return (last, cp_len(lines[last]))
    return (0, 0)
