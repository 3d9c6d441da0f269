"""Actions accepted by the text buffer reducer.

The set is closed: :data:`TextBufferAction` is the union of every action
class, and the reducer matches on each of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

Direction = Literal[
    "left",
    "right",
    "up",
    "down",
    "wordLeft",
    "wordRight",
    "home",
    "end",
]

VimMovement = Literal["h", "j", "k", "l"]

VimActionType = Literal[
    # Operators over word motions
    "vim_delete_word_forward",
    "vim_delete_word_backward",
    "vim_delete_word_end",
    "vim_change_word_forward",
    "vim_change_word_backward",
    "vim_change_word_end",
    # Line operators
    "vim_delete_line",
    "vim_change_line",
    "vim_delete_to_end_of_line",
    "vim_change_to_end_of_line",
    "vim_change_movement",
    # Motions
    "vim_move_left",
    "vim_move_right",
    "vim_move_up",
    "vim_move_down",
    "vim_move_word_forward",
    "vim_move_word_backward",
    "vim_move_word_end",
    "vim_delete_char",
    # Insert-mode entry points
    "vim_insert_at_cursor",
    "vim_append_at_cursor",
    "vim_open_line_below",
    "vim_open_line_above",
    "vim_append_at_line_end",
    "vim_insert_at_line_start",
    # Line motions
    "vim_move_to_line_start",
    "vim_move_to_line_end",
    "vim_move_to_first_nonwhitespace",
    "vim_move_to_first_line",
    "vim_move_to_last_line",
    "vim_move_to_line",
    "vim_escape_insert_mode",
]


@dataclass(frozen=True)
class SetText:
    text: str
    push_to_undo: bool = True


@dataclass(frozen=True)
class Insert:
    text: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class Delete:
    pass


@dataclass(frozen=True)
class DeleteWordLeft:
    pass


@dataclass(frozen=True)
class DeleteWordRight:
    pass


@dataclass(frozen=True)
class KillLineRight:
    pass


@dataclass(frozen=True)
class KillLineLeft:
    pass


@dataclass(frozen=True)
class Move:
    direction: Direction


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Redo:
    pass


@dataclass(frozen=True)
class ReplaceRange:
    start_row: int
    start_col: int
    end_row: int
    end_col: int
    text: str


@dataclass(frozen=True)
class MoveToOffset:
    offset: int


@dataclass(frozen=True)
class CreateUndoSnapshot:
    """Push the current content onto the undo stack without changing it."""


@dataclass(frozen=True)
class SetViewportWidth:
    width: int


@dataclass(frozen=True)
class VimAction:
    """A vim command, handed unchanged to the vim action handler.

    ``count`` is the repeat prefix; ``movement`` is only read by
    ``vim_change_movement`` and ``line_number`` (1-based) by
    ``vim_move_to_line``.
    """

    type: VimActionType
    count: int = 1
    movement: VimMovement | None = None
    line_number: int | None = None


TextBufferAction = Union[
    SetText,
    Insert,
    Backspace,
    Delete,
    DeleteWordLeft,
    DeleteWordRight,
    KillLineRight,
    KillLineLeft,
    Move,
    Undo,
    Redo,
    ReplaceRange,
    MoveToOffset,
    CreateUndoSnapshot,
    SetViewportWidth,
    VimAction,
]
