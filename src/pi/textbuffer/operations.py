"""State transformations shared by the reducer and the vim handler."""

from __future__ import annotations

import dataclasses

from pi.textbuffer.state import BufferState
from pi.textbuffer.utils import clamp, cp_len, cp_slice, normalize_newlines


def push_undo(state: BufferState) -> BufferState:
    """Snapshot *state* onto its undo stack and drop the redo branch."""
    return dataclasses.replace(
        state,
        undo_stack=state.undo_stack.push(state.snapshot()),
        redo_stack=state.redo_stack.clear(),
    )


def replace_range_internal(
    state: BufferState,
    start_row: int,
    start_col: int,
    end_row: int,
    end_col: int,
    text: str,
) -> BufferState:
    """Replace the span ``(start_row, start_col)..(end_row, end_col)`` with *text*.

    Inverted or out-of-bounds ranges return *state* unchanged. The cursor
    ends up after the inserted text. Undo is left to the caller.
    """
    if (
        start_row > end_row
        or (start_row == end_row and start_col > end_col)
        or start_row < 0
        or start_col < 0
        or end_row >= len(state.lines)
        or end_col > state.line_length(end_row)
    ):
        return state

    s_col = clamp(start_col, 0, state.line_length(start_row))
    e_col = clamp(end_col, 0, state.line_length(end_row))

    prefix = cp_slice(state.line(start_row), 0, s_col)
    suffix = cp_slice(state.line(end_row), e_col)
    parts = normalize_newlines(text).split("\n")

    if len(parts) == 1:
        replacement = (prefix + parts[0] + suffix,)
    else:
        replacement = (prefix + parts[0], *parts[1:-1], parts[-1] + suffix)

    new_lines = state.lines[:start_row] + replacement + state.lines[end_row + 1:]

    cursor_row = clamp(start_row + len(parts) - 1, 0, len(new_lines) - 1)
    cursor_col = (s_col if len(parts) == 1 else 0) + cp_len(parts[-1])

    return dataclasses.replace(
        state,
        lines=new_lines,
        cursor_row=cursor_row,
        cursor_col=clamp(cursor_col, 0, cp_len(new_lines[cursor_row])),
        preferred_col=None,
    )


def join_with_next_line(state: BufferState, row: int) -> tuple[str, ...]:
    """Lines of *state* with line *row* and the line after it merged."""
    merged = state.line(row) + state.line(row + 1)
    return state.lines[:row] + (merged,) + state.lines[row + 2:]
