"""The :class:`TextBuffer` façade.

Owns the current :class:`BufferState`, feeds actions through the reducer,
and keeps the derived views a renderer needs: the wrapped visual lines, the
visual cursor and the vertical scroll offset.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

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
    VimActionType,
    VimMovement,
)
from pi.textbuffer.config import TextBufferConfig
from pi.textbuffer.external_editor import ExternalEditorError, run_external_editor
from pi.textbuffer.keybindings import EditorKeybindingsManager, get_editor_keybindings
from pi.textbuffer.keys import KeyEvent, key_id
from pi.textbuffer.layout import VisualLayout, calculate_visual_layout
from pi.textbuffer.offsets import calculate_initial_cursor_position, offset_to_logical_pos
from pi.textbuffer.reducer import text_buffer_reducer
from pi.textbuffer.state import BufferState, Cursor
from pi.textbuffer.terminal import RawModeController
from pi.textbuffer.utils import normalize_newlines, to_code_points, unescape_path, visible_width
from pi.textbuffer.vim import VimActionHandler, handle_vim_action

logger = logging.getLogger(__name__)

_QUOTED_RE = re.compile(r"^(['\"])(.*)\1$", re.DOTALL)
_DEL = "\x7f"


@dataclass
class Viewport:
    """Size of the area the buffer is rendered into, in terminal cells."""

    width: int
    height: int


@dataclass(frozen=True)
class ViewportSlice:
    """What a renderer paints.

    ``cursor`` is relative to the first line of the slice; ``widths`` holds
    the display width of each line in ``lines``.
    """

    lines: tuple[str, ...]
    cursor: Cursor
    scroll_row: int
    widths: tuple[int, ...]


class TextBuffer:
    """Editable multi-line text with undo, word wrap and scrolling."""

    def __init__(
        self,
        *,
        viewport: Viewport,
        is_valid_path: Callable[[str], bool],
        initial_text: str = "",
        initial_cursor_offset: int = 0,
        shell_mode_active: bool = False,
        on_change: Callable[[str], None] | None = None,
        raw_mode: RawModeController | None = None,
        vim_handler: VimActionHandler = handle_vim_action,
        keybindings: EditorKeybindingsManager | None = None,
        config: TextBufferConfig | None = None,
    ) -> None:
        self._config = config or TextBufferConfig()
        self._viewport = viewport
        self._is_valid_path = is_valid_path
        self.shell_mode_active = shell_mode_active
        self._on_change = on_change
        self._raw_mode = raw_mode
        self._vim_handler = vim_handler
        self._keybindings = keybindings

        lines = normalize_newlines(initial_text).split("\n")
        self._state = BufferState.create(
            lines,
            calculate_initial_cursor_position(lines, initial_cursor_offset),
            viewport_width=viewport.width,
            history_limit=self._config.history_limit,
        )
        self._scroll_row = 0
        self._cached_layout: VisualLayout | None = None
        self._cached_layout_key: tuple[tuple[str, ...], Cursor, int] | None = None
        self._update_scroll()

    # -- State ---------------------------------------------------------------

    @property
    def state(self) -> BufferState:
        return self._state

    @property
    def lines(self) -> tuple[str, ...]:
        return self._state.lines

    @property
    def text(self) -> str:
        return self._state.text

    @property
    def cursor(self) -> Cursor:
        return self._state.cursor

    @property
    def preferred_col(self) -> int | None:
        return self._state.preferred_col

    @property
    def selection_anchor(self) -> Cursor | None:
        return self._state.selection_anchor

    # -- Derived views -------------------------------------------------------

    def _layout(self) -> VisualLayout:
        key = (self._state.lines, self._state.cursor, self._state.viewport_width)
        if self._cached_layout is None or self._cached_layout_key != key:
            self._cached_layout = calculate_visual_layout(*key)
            self._cached_layout_key = key
        return self._cached_layout

    @property
    def all_visual_lines(self) -> tuple[str, ...]:
        return self._layout().visual_lines

    @property
    def visual_cursor(self) -> Cursor:
        return self._layout().visual_cursor

    @property
    def visual_scroll_row(self) -> int:
        return self._scroll_row

    @property
    def viewport_visual_lines(self) -> tuple[str, ...]:
        start = self._scroll_row
        return self.all_visual_lines[start:start + max(self._viewport.height, 0)]

    def viewport(self) -> ViewportSlice:
        lines = self.viewport_visual_lines
        row, col = self.visual_cursor
        return ViewportSlice(
            lines=lines,
            cursor=(row - self._scroll_row, col),
            scroll_row=self._scroll_row,
            widths=tuple(visible_width(line) for line in lines),
        )

    def set_viewport(self, viewport: Viewport) -> None:
        self._viewport = viewport
        self.dispatch(SetViewportWidth(viewport.width))

    def _update_scroll(self) -> None:
        height = max(self._viewport.height, 1)
        row = self.visual_cursor[0]
        if row < self._scroll_row:
            self._scroll_row = row
        elif row >= self._scroll_row + height:
            self._scroll_row = row - height + 1

    # -- Dispatch ------------------------------------------------------------

    def dispatch(self, action: TextBufferAction) -> None:
        """Run *action* through the reducer and refresh the derived views."""
        previous_text = self._state.text
        self._state = text_buffer_reducer(self._state, action, self._vim_handler)
        self._update_scroll()
        if self._on_change is not None:
            text = self._state.text
            if text != previous_text:
                self._on_change(text)

    # -- Editing -------------------------------------------------------------

    def set_text(self, text: str) -> None:
        self.dispatch(SetText(text))

    def insert(self, text: str, *, paste: bool = False) -> None:
        """Insert typed or pasted *text* at the cursor.

        A paste that names an existing path becomes an ``@path `` reference.
        DEL characters in the input act as backspaces at their position.
        """
        if "\n" in text or "\r" in text:
            self.dispatch(Insert(text))
            return

        if paste and not self.shell_mode_active and len(text) >= self._config.drag_drop_min_length:
            candidate = text.strip()
            quoted = _QUOTED_RE.match(candidate)
            if quoted:
                candidate = quoted.group(2)
            candidate = candidate.strip()
            if self._is_valid_path(unescape_path(candidate)):
                text = f"@{candidate} "

        pending: list[str] = []
        for char in to_code_points(text):
            if char == _DEL:
                if pending:
                    self.dispatch(Insert("".join(pending)))
                    pending = []
                self.dispatch(Backspace())
            else:
                pending.append(char)
        if pending:
            self.dispatch(Insert("".join(pending)))

    def newline(self) -> None:
        self.dispatch(Insert("\n"))

    def backspace(self) -> None:
        self.dispatch(Backspace())

    def delete(self) -> None:
        self.dispatch(Delete())

    def move(self, direction: Direction) -> None:
        self.dispatch(Move(direction))

    def undo(self) -> None:
        self.dispatch(Undo())

    def redo(self) -> None:
        self.dispatch(Redo())

    def replace_range(self, start_row: int, start_col: int, end_row: int, end_col: int, text: str) -> None:
        self.dispatch(ReplaceRange(start_row, start_col, end_row, end_col, text))

    def replace_range_by_offset(self, start_offset: int, end_offset: int, text: str) -> None:
        current = self.text
        start_row, start_col = offset_to_logical_pos(current, start_offset)
        end_row, end_col = offset_to_logical_pos(current, end_offset)
        self.replace_range(start_row, start_col, end_row, end_col, text)

    def move_to_offset(self, offset: int) -> None:
        self.dispatch(MoveToOffset(offset))

    def delete_word_left(self) -> None:
        self.dispatch(DeleteWordLeft())

    def delete_word_right(self) -> None:
        self.dispatch(DeleteWordRight())

    def kill_line_right(self) -> None:
        self.dispatch(KillLineRight())

    def kill_line_left(self) -> None:
        self.dispatch(KillLineLeft())

    # -- Key input -----------------------------------------------------------

    def handle_input(self, key: KeyEvent) -> None:
        """Apply the editing command bound to *key*."""
        keybindings = self._keybindings or get_editor_keybindings()
        command = keybindings.resolve(key)
        match command:
            case "insertText":
                self.insert(key.sequence, paste=key.paste)
            case "newLine":
                self.newline()
            case "cursorLeft":
                self.move("left")
            case "cursorRight":
                self.move("right")
            case "cursorUp":
                self.move("up")
            case "cursorDown":
                self.move("down")
            case "cursorWordLeft":
                self.move("wordLeft")
            case "cursorWordRight":
                self.move("wordRight")
            case "cursorLineStart":
                self.move("home")
            case "cursorLineEnd":
                self.move("end")
            case "deleteWordBackward":
                self.delete_word_left()
            case "deleteWordForward":
                self.delete_word_right()
            case "deleteCharBackward":
                self.backspace()
            case "deleteCharForward":
                self.delete()
            case None:
                logger.debug("Unbound key: %s", key_id(key))

    # -- External editor -----------------------------------------------------

    def open_in_external_editor(self, editor: str | None = None) -> ExternalEditorError | None:
        """Edit the whole text in an external editor, blocking until it exits.

        On success the result replaces the text as one undoable step. On
        failure the buffer is left untouched and the error is returned.
        """
        try:
            edited = run_external_editor(
                self.text,
                editor=editor,
                raw_mode=self._raw_mode,
                config=self._config,
            )
        except ExternalEditorError as e:
            logger.warning("External editor error: %s", e)
            return e

        self.dispatch(CreateUndoSnapshot())
        self.dispatch(SetText(edited, push_to_undo=False))
        return None

    # -- Vim -----------------------------------------------------------------

    def _vim(
        self,
        action_type: VimActionType,
        count: int = 1,
        *,
        movement: VimMovement | None = None,
        line_number: int | None = None,
    ) -> None:
        self.dispatch(VimAction(action_type, count=count, movement=movement, line_number=line_number))

    def vim_delete_word_forward(self, count: int = 1) -> None:
        self._vim("vim_delete_word_forward", count)

    def vim_delete_word_backward(self, count: int = 1) -> None:
        self._vim("vim_delete_word_backward", count)

    def vim_delete_word_end(self, count: int = 1) -> None:
        self._vim("vim_delete_word_end", count)

    def vim_change_word_forward(self, count: int = 1) -> None:
        self._vim("vim_change_word_forward", count)

    def vim_change_word_backward(self, count: int = 1) -> None:
        self._vim("vim_change_word_backward", count)

    def vim_change_word_end(self, count: int = 1) -> None:
        self._vim("vim_change_word_end", count)

    def vim_delete_line(self, count: int = 1) -> None:
        self._vim("vim_delete_line", count)

    def vim_change_line(self, count: int = 1) -> None:
        self._vim("vim_change_line", count)

    def vim_delete_to_end_of_line(self) -> None:
        self._vim("vim_delete_to_end_of_line")

    def vim_change_to_end_of_line(self) -> None:
        self._vim("vim_change_to_end_of_line")

    def vim_change_movement(self, movement: VimMovement, count: int = 1) -> None:
        self._vim("vim_change_movement", count, movement=movement)

    def vim_move_left(self, count: int = 1) -> None:
        self._vim("vim_move_left", count)

    def vim_move_right(self, count: int = 1) -> None:
        self._vim("vim_move_right", count)

    def vim_move_up(self, count: int = 1) -> None:
        self._vim("vim_move_up", count)

    def vim_move_down(self, count: int = 1) -> None:
        self._vim("vim_move_down", count)

    def vim_move_word_forward(self, count: int = 1) -> None:
        self._vim("vim_move_word_forward", count)

    def vim_move_word_backward(self, count: int = 1) -> None:
        self._vim("vim_move_word_backward", count)

    def vim_move_word_end(self, count: int = 1) -> None:
        self._vim("vim_move_word_end", count)

    def vim_delete_char(self, count: int = 1) -> None:
        self._vim("vim_delete_char", count)

    def vim_insert_at_cursor(self) -> None:
        self._vim("vim_insert_at_cursor")

    def vim_append_at_cursor(self) -> None:
        self._vim("vim_append_at_cursor")

    def vim_open_line_below(self) -> None:
        self._vim("vim_open_line_below")

    def vim_open_line_above(self) -> None:
        self._vim("vim_open_line_above")

    def vim_append_at_line_end(self) -> None:
        self._vim("vim_append_at_line_end")

    def vim_insert_at_line_start(self) -> None:
        self._vim("vim_insert_at_line_start")

    def vim_move_to_line_start(self) -> None:
        self._vim("vim_move_to_line_start")

    def vim_move_to_line_end(self) -> None:
        self._vim("vim_move_to_line_end")

    def vim_move_to_first_nonwhitespace(self) -> None:
        self._vim("vim_move_to_first_nonwhitespace")

    def vim_move_to_first_line(self) -> None:
        self._vim("vim_move_to_first_line")

    def vim_move_to_last_line(self) -> None:
        self._vim("vim_move_to_last_line")

    def vim_move_to_line(self, line_number: int) -> None:
        self._vim("vim_move_to_line", line_number=line_number)

    def vim_escape_insert_mode(self) -> None:
        self._vim("vim_escape_insert_mode")
