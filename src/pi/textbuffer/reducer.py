"""The text buffer reducer: ``(state, action) -> state``.

Every mutating action snapshots the pre-action content for undo and
drops the redo branch; navigation touches neither stack. Vim actions are
handed to a pluggable handler which does its own snapshotting.
"""

from __future__ import annotations

import dataclasses
import logging

from pi.textbuffer.actions import (
    Backspace,
    CreateUndoSnapshot,
    Delete,
    DeleteWordLeft,
    DeleteWordRight,
    Direction,
    Insert,
    KillLineLeft,
    KillLineRight,
    Move,
    MoveToOffset,
    Redo,
    ReplaceRange,
    SetText,
    SetViewportWidth,
    TextBufferAction,
    Undo,
    VimAction,
)
from pi.textbuffer.layout import calculate_visual_layout
from pi.textbuffer.offsets import offset_to_logical_pos
from pi.textbuffer.operations import join_with_next_line, push_undo, replace_range_internal
from pi.textbuffer.state import BufferState
from pi.textbuffer.utils import clamp, cp_len, cp_slice, normalize_newlines, strip_unsafe_characters
from pi.textbuffer.vim import VimActionHandler, handle_vim_action
from pi.textbuffer.words import find_word_left_simple, find_word_right_simple

logger = logging.getLogger(__name__)


def text_buffer_reducer(
    state: BufferState,
    action: TextBufferAction,
    vim_handler: VimActionHandler = handle_vim_action,
) -> BufferState:
    """Apply *action* to *state* and return the resulting state.

    The cursor of the result is always inside the text.
    """
    return _reduce(state, action, vim_handler).clamped()


def _reduce(state: BufferState, action: TextBufferAction, vim_handler: VimActionHandler) -> BufferState:
    match action:
        case SetText(text=text, push_to_undo=push_to_undo):
            return _set_text(state, text, push_to_undo)
        case Insert(text=text):
            return _insert(state, text)
        case Backspace():
            return _backspace(state)
        case Delete():
            return _delete(state)
        case DeleteWordLeft():
            return _delete_word_left(state)
        case DeleteWordRight():
            return _delete_word_right(state)
        case KillLineRight():
            return _kill_line_right(state)
        case KillLineLeft():
            return _kill_line_left(state)
        case Move(direction=direction):
            return _move(state, direction)
        case Undo():
            return _undo(state)
        case Redo():
            return _redo(state)
        case ReplaceRange(start_row=sr, start_col=sc, end_row=er, end_col=ec, text=text):
            snapshotted = push_undo(state)
            replaced = replace_range_internal(snapshotted, sr, sc, er, ec, text)
            # An invalid range leaves the history alone too.
            return state if replaced is snapshotted else replaced
        case MoveToOffset(offset=offset):
            row, col = offset_to_logical_pos(state.text, offset)
            return dataclasses.replace(state, cursor_row=row, cursor_col=col, preferred_col=None)
        case CreateUndoSnapshot():
            return push_undo(state)
        case SetViewportWidth(width=width):
            if width == state.viewport_width:
                return state
            return dataclasses.replace(state, viewport_width=width)
        case VimAction():
            return vim_handler(state, action)
        case _:
            logger.error("Unknown action encountered: %r", action)
            return state


# ---------------------------------------------------------------------------
# Content replacement and insertion
# ---------------------------------------------------------------------------


def _set_text(state: BufferState, text: str, push_to_undo: bool) -> BufferState:
    next_state = push_undo(state) if push_to_undo else state
    lines = tuple(normalize_newlines(text).split("\n"))
    last = len(lines) - 1
    return dataclasses.replace(
        next_state,
        lines=lines,
        cursor_row=last,
        cursor_col=cp_len(lines[last]),
        preferred_col=None,
    )


def _insert(state: BufferState, text: str) -> BufferState:
    next_state = push_undo(state)
    row, col = state.cursor_row, state.cursor_col

    parts = strip_unsafe_characters(normalize_newlines(text)).split("\n")
    line = state.line(row)
    before = cp_slice(line, 0, col)
    after = cp_slice(line, col)

    if len(parts) > 1:
        inserted = (before + parts[0], *parts[1:-1], parts[-1] + after)
        new_row = row + len(parts) - 1
        new_col = cp_len(parts[-1])
    else:
        inserted = (before + parts[0] + after,)
        new_row = row
        new_col = cp_len(before) + cp_len(parts[0])

    return dataclasses.replace(
        next_state,
        lines=state.lines[:row] + inserted + state.lines[row + 1:],
        cursor_row=new_row,
        cursor_col=new_col,
        preferred_col=None,
    )


# ---------------------------------------------------------------------------
# Deletion
# ---------------------------------------------------------------------------


def _join_with_previous(state: BufferState) -> BufferState:
    row = state.cursor_row
    new_col = state.line_length(row - 1)
    return dataclasses.replace(
        push_undo(state),
        lines=join_with_next_line(state, row - 1),
        cursor_row=row - 1,
        cursor_col=new_col,
        preferred_col=None,
    )


def _join_with_next(state: BufferState) -> BufferState:
    return dataclasses.replace(
        push_undo(state),
        lines=join_with_next_line(state, state.cursor_row),
        preferred_col=None,
    )


def _replace_line(state: BufferState, row: int, line: str) -> tuple[str, ...]:
    return state.lines[:row] + (line,) + state.lines[row + 1:]


def _backspace(state: BufferState) -> BufferState:
    row, col = state.cursor_row, state.cursor_col
    if row == 0 and col == 0:
        return state
    if col == 0:
        return _join_with_previous(state)

    line = state.line(row)
    return dataclasses.replace(
        push_undo(state),
        lines=_replace_line(state, row, cp_slice(line, 0, col - 1) + cp_slice(line, col)),
        cursor_col=col - 1,
        preferred_col=None,
    )


def _delete(state: BufferState) -> BufferState:
    row, col = state.cursor_row, state.cursor_col
    if col < state.line_length(row):
        line = state.line(row)
        return dataclasses.replace(
            push_undo(state),
            lines=_replace_line(state, row, cp_slice(line, 0, col) + cp_slice(line, col + 1)),
            preferred_col=None,
        )
    if row < len(state.lines) - 1:
        return _join_with_next(state)
    return state


def _delete_word_left(state: BufferState) -> BufferState:
    row, col = state.cursor_row, state.cursor_col
    if row == 0 and col == 0:
        return state
    if col == 0:
        return _join_with_previous(state)

    line = state.line(row)
    start = find_word_left_simple(line, col)
    return dataclasses.replace(
        push_undo(state),
        lines=_replace_line(state, row, cp_slice(line, 0, start) + cp_slice(line, col)),
        cursor_col=start,
        preferred_col=None,
    )


def _delete_word_right(state: BufferState) -> BufferState:
    row, col = state.cursor_row, state.cursor_col
    line = state.line(row)
    if col >= cp_len(line):
        if row == len(state.lines) - 1:
            return state
        return _join_with_next(state)

    end = find_word_right_simple(line, col)
    return dataclasses.replace(
        push_undo(state),
        lines=_replace_line(state, row, cp_slice(line, 0, col) + cp_slice(line, end)),
        preferred_col=None,
    )


def _kill_line_right(state: BufferState) -> BufferState:
    row, col = state.cursor_row, state.cursor_col
    if col < state.line_length(row):
        return dataclasses.replace(
            push_undo(state),
            lines=_replace_line(state, row, cp_slice(state.line(row), 0, col)),
        )
    if row < len(state.lines) - 1:
        return _join_with_next(state)
    return state


def _kill_line_left(state: BufferState) -> BufferState:
    row, col = state.cursor_row, state.cursor_col
    if col == 0:
        return state
    return dataclasses.replace(
        push_undo(state),
        lines=_replace_line(state, row, cp_slice(state.line(row), col)),
        cursor_col=0,
        preferred_col=None,
    )


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


def _undo(state: BufferState) -> BufferState:
    entry, rest = state.undo_stack.pop()
    if entry is None:
        return state
    restored = state.restore(entry)
    return dataclasses.replace(
        restored,
        undo_stack=rest,
        redo_stack=state.redo_stack.push(state.snapshot()),
    )


def _redo(state: BufferState) -> BufferState:
    entry, rest = state.redo_stack.pop()
    if entry is None:
        return state
    restored = state.restore(entry)
    return dataclasses.replace(
        restored,
        redo_stack=rest,
        undo_stack=state.undo_stack.push(state.snapshot()),
    )


# ---------------------------------------------------------------------------
# Cursor movement
# ---------------------------------------------------------------------------


def _move(state: BufferState, direction: Direction) -> BufferState:
    if direction == "wordLeft":
        return _move_word_left(state)
    if direction == "wordRight":
        return _move_word_right(state)

    layout = calculate_visual_layout(state.lines, state.cursor, state.viewport_width)
    visual_lines = layout.visual_lines
    vis_row, vis_col = layout.visual_cursor
    preferred = state.preferred_col
    current_len = cp_len(visual_lines[vis_row]) if vis_row < len(visual_lines) else 0

    if direction == "left":
        preferred = None
        if vis_col > 0:
            vis_col -= 1
        elif vis_row > 0:
            vis_row -= 1
            vis_col = cp_len(visual_lines[vis_row])
    elif direction == "right":
        preferred = None
        if vis_col < current_len:
            vis_col += 1
        elif vis_row < len(visual_lines) - 1:
            vis_row += 1
            vis_col = 0
    elif direction == "up":
        if vis_row > 0:
            if preferred is None:
                preferred = vis_col
            vis_row -= 1
            vis_col = clamp(preferred, 0, cp_len(visual_lines[vis_row]))
    elif direction == "down":
        if vis_row < len(visual_lines) - 1:
            if preferred is None:
                preferred = vis_col
            vis_row += 1
            vis_col = clamp(preferred, 0, cp_len(visual_lines[vis_row]))
    elif direction == "home":
        preferred = None
        vis_col = 0
    elif direction == "end":
        preferred = None
        vis_col = current_len

    if vis_row >= len(layout.visual_to_logical_map):
        return state
    log_row, log_start = layout.visual_to_logical_map[vis_row]
    return dataclasses.replace(
        state,
        cursor_row=log_row,
        cursor_col=clamp(log_start + vis_col, 0, state.line_length(log_row)),
        preferred_col=preferred,
    )


def _move_word_left(state: BufferState) -> BufferState:
    row, col = state.cursor_row, state.cursor_col
    if row == 0 and col == 0:
        return state
    if col == 0:
        row -= 1
        col = state.line_length(row)
    else:
        col = find_word_left_simple(state.line(row), col)
    return dataclasses.replace(state, cursor_row=row, cursor_col=col, preferred_col=None)


def _move_word_right(state: BufferState) -> BufferState:
    row, col = state.cursor_row, state.cursor_col
    line_len = state.line_length(row)
    if row == len(state.lines) - 1 and col >= line_len:
        return state
    if col >= line_len:
        row += 1
        col = 0
    else:
        col = find_word_right_simple(state.line(row), col)
    return dataclasses.replace(state, cursor_row=row, cursor_col=col, preferred_col=None)
