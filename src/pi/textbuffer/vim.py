"""Vim-style commands over a :class:`BufferState`.

The reducer hands every :class:`VimAction` to a :class:`VimActionHandler`
without snapshotting first; each mutating command here pushes exactly one
undo snapshot, and pure motions leave both stacks alone.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Protocol

from pi.textbuffer.actions import VimAction
from pi.textbuffer.offsets import get_line_range_offsets, get_position_from_offsets
from pi.textbuffer.operations import push_undo, replace_range_internal
from pi.textbuffer.state import BufferState
from pi.textbuffer.utils import clamp, cp_len
from pi.textbuffer.words import (
    find_next_word_across_lines,
    find_prev_word_across_lines,
    find_word_end_in_line,
    is_whitespace,
)

logger = logging.getLogger(__name__)


class VimActionHandler(Protocol):
    def __call__(self, state: BufferState, action: VimAction) -> BufferState: ...


def handle_vim_action(state: BufferState, action: VimAction) -> BufferState:
    """Apply one vim command. Unknown commands leave *state* unchanged."""
    count = max(action.count, 1)

    match action.type:
        case "vim_delete_word_forward" | "vim_change_word_forward":
            return _delete_word_forward(state, count)
        case "vim_delete_word_backward" | "vim_change_word_backward":
            return _delete_word_backward(state, count)
        case "vim_delete_word_end" | "vim_change_word_end":
            return _delete_word_end(state, count)
        case "vim_delete_line":
            return _delete_lines(state, count)
        case "vim_change_line":
            return _change_lines(state, state.cursor_row, count)
        case "vim_delete_to_end_of_line" | "vim_change_to_end_of_line":
            return _delete_to_end_of_line(state)
        case "vim_change_movement":
            return _change_movement(state, action.movement, count)
        case "vim_move_left":
            return _move_left(state, count)
        case "vim_move_right":
            return _move_right(state, count)
        case "vim_move_up":
            return _move_vertical(state, -count)
        case "vim_move_down":
            return _move_vertical(state, count)
        case "vim_move_word_forward":
            return _move_word(state, count, forward=True, word_start=True)
        case "vim_move_word_backward":
            return _move_word(state, count, forward=False, word_start=True)
        case "vim_move_word_end":
            return _move_word(state, count, forward=True, word_start=False)
        case "vim_delete_char":
            return _delete_chars(state, count)
        case "vim_insert_at_cursor":
            return state
        case "vim_append_at_cursor":
            if state.cursor_col < state.line_length(state.cursor_row):
                return _place(state, state.cursor_row, state.cursor_col + 1)
            return state
        case "vim_open_line_below":
            return _open_line(state, state.cursor_row + 1)
        case "vim_open_line_above":
            return _open_line(state, state.cursor_row)
        case "vim_append_at_line_end":
            return _place(state, state.cursor_row, state.line_length(state.cursor_row))
        case "vim_insert_at_line_start":
            return _place(state, state.cursor_row, _first_non_whitespace(state.line(state.cursor_row)))
        case "vim_move_to_line_start":
            return _place(state, state.cursor_row, 0)
        case "vim_move_to_line_end":
            return _place(state, state.cursor_row, _last_char_col(state.line(state.cursor_row)))
        case "vim_move_to_first_nonwhitespace":
            line = state.line(state.cursor_row)
            return _place(state, state.cursor_row, min(_first_non_whitespace(line), _last_char_col(line)))
        case "vim_move_to_first_line":
            return _place(state, 0, 0)
        case "vim_move_to_last_line":
            return _place(state, len(state.lines) - 1, 0)
        case "vim_move_to_line":
            line_number = action.line_number if action.line_number is not None else 1
            return _place(state, clamp(line_number - 1, 0, len(state.lines) - 1), 0)
        case "vim_escape_insert_mode":
            if state.cursor_col > 0:
                return _place(state, state.cursor_row, state.cursor_col - 1)
            return state
        case _:
            logger.error("Unknown vim action: %r", action)
            return state


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _place(state: BufferState, row: int, col: int) -> BufferState:
    return dataclasses.replace(state, cursor_row=row, cursor_col=col, preferred_col=None)


def _first_non_whitespace(line: str) -> int:
    i = 0
    while i < len(line) and is_whitespace(line[i]):
        i += 1
    return i


def _last_char_col(line: str) -> int:
    return max(cp_len(line) - 1, 0)


def _delete_span(state: BufferState, start: tuple[int, int], end: tuple[int, int]) -> BufferState:
    if start == end:
        return state
    return replace_range_internal(push_undo(state), start[0], start[1], end[0], end[1], "")


# ---------------------------------------------------------------------------
# Motions
# ---------------------------------------------------------------------------


def _move_left(state: BufferState, count: int) -> BufferState:
    row, col = state.cursor
    for _ in range(count):
        if col > 0:
            col -= 1
        elif row > 0:
            row -= 1
            col = _last_char_col(state.line(row))
        else:
            break
    return _place(state, row, col)


def _move_right(state: BufferState, count: int) -> BufferState:
    row, col = state.cursor
    for _ in range(count):
        if col < state.line_length(row) - 1:
            col += 1
        elif row < len(state.lines) - 1:
            row += 1
            col = 0
        else:
            break
    return _place(state, row, col)


def _move_vertical(state: BufferState, delta: int) -> BufferState:
    row = clamp(state.cursor_row + delta, 0, len(state.lines) - 1)
    col = min(state.cursor_col, _last_char_col(state.line(row)))
    return _place(state, row, col)


def _move_word(state: BufferState, count: int, *, forward: bool, word_start: bool) -> BufferState:
    row, col = state.cursor
    for _ in range(count):
        if forward:
            found = find_next_word_across_lines(state.lines, row, col, word_start)
        else:
            found = find_prev_word_across_lines(state.lines, row, col)
        if found is None:
            break
        row, col = found
    return _place(state, row, col)


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


def _delete_word_forward(state: BufferState, count: int) -> BufferState:
    end_row, end_col = state.cursor
    for _ in range(count):
        found = find_next_word_across_lines(state.lines, end_row, end_col, True)
        if found is not None:
            end_row, end_col = found
            continue
        # No later word: take the rest of the current word, or the line.
        line = state.line(end_row)
        word_end = find_word_end_in_line(line, end_col)
        end_col = word_end + 1 if word_end is not None else cp_len(line)
        break
    return _delete_span(state, state.cursor, (end_row, end_col))


def _delete_word_backward(state: BufferState, count: int) -> BufferState:
    start_row, start_col = state.cursor
    for _ in range(count):
        found = find_prev_word_across_lines(state.lines, start_row, start_col)
        if found is None:
            break
        start_row, start_col = found
    return _delete_span(state, (start_row, start_col), state.cursor)


def _delete_word_end(state: BufferState, count: int) -> BufferState:
    row, col = state.cursor
    end = state.cursor
    for _ in range(count):
        found = find_next_word_across_lines(state.lines, row, col, False)
        if found is None:
            break
        row, col = found
        end = (row, min(col + 1, state.line_length(row)))
    return _delete_span(state, state.cursor, end)


def _delete_to_end_of_line(state: BufferState) -> BufferState:
    row, col = state.cursor
    line_len = state.line_length(row)
    if col >= line_len:
        return state
    return _delete_span(state, (row, col), (row, line_len))


def _delete_chars(state: BufferState, count: int) -> BufferState:
    row, col = state.cursor
    line_len = state.line_length(row)
    if col >= line_len:
        return state
    return _delete_span(state, (row, col), (row, min(col + count, line_len)))


def _delete_lines(state: BufferState, count: int) -> BufferState:
    row = state.cursor_row
    total = len(state.lines)
    line_count = min(count, total - row)

    if line_count >= total:
        return dataclasses.replace(
            push_undo(state), lines=("",), cursor_row=0, cursor_col=0, preferred_col=None
        )

    start_offset, end_offset = get_line_range_offsets(row, line_count, state.lines)
    if row + line_count >= total:
        # Deleting through the last line also removes the newline before it.
        start_offset -= 1
    start_row, start_col, end_row, end_col = get_position_from_offsets(start_offset, end_offset, state.lines)
    deleted = replace_range_internal(push_undo(state), start_row, start_col, end_row, end_col, "")
    return _place(deleted, min(row, len(deleted.lines) - 1), 0)


def _change_lines(state: BufferState, first_row: int, count: int) -> BufferState:
    """Clear the content of *count* lines from *first_row*, leaving one empty line."""
    total = len(state.lines)
    line_count = min(count, total - first_row)
    start_offset, end_offset = get_line_range_offsets(first_row, line_count, state.lines)
    if first_row + line_count < total:
        # Keep the newline that separates the block from the next line.
        end_offset -= 1
    start_row, start_col, end_row, end_col = get_position_from_offsets(start_offset, end_offset, state.lines)
    if (start_row, start_col) == (end_row, end_col):
        return _place(state, first_row, 0)
    changed = replace_range_internal(push_undo(state), start_row, start_col, end_row, end_col, "")
    return _place(changed, first_row, 0)


def _change_movement(state: BufferState, movement: str | None, count: int) -> BufferState:
    row, col = state.cursor
    match movement:
        case "h":
            return _delete_span(state, (row, max(col - count, 0)), (row, col))
        case "l":
            return _delete_span(state, (row, col), (row, min(col + count, state.line_length(row))))
        case "j":
            return _change_lines(state, row, count + 1)
        case "k":
            first = max(row - count, 0)
            return _change_lines(state, first, row - first + 1)
        case _:
            logger.error("Unknown vim change movement: %r", movement)
            return state


def _open_line(state: BufferState, at_row: int) -> BufferState:
    lines = state.lines[:at_row] + ("",) + state.lines[at_row:]
    return dataclasses.replace(
        push_undo(state), lines=lines, cursor_row=at_row, cursor_col=0, preferred_col=None
    )
