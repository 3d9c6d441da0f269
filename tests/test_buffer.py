"""Tests for pi.textbuffer.buffer.TextBuffer -- the stateful façade."""

from __future__ import annotations

import logging

import pytest

from pi.textbuffer.actions import VimAction
from pi.textbuffer.buffer import TextBuffer, Viewport
from pi.textbuffer.config import TextBufferConfig
from pi.textbuffer.keybindings import EditorKeybindingsManager
from pi.textbuffer.keys import KeyEvent, ctrl
from pi.textbuffer.state import BufferState

VALID_PATH = "/tmp/my file.txt"


def make_buffer(
    text: str = "",
    *,
    width: int = 80,
    height: int = 10,
    offset: int = 0,
    **kwargs: object,
) -> TextBuffer:
    kwargs.setdefault("is_valid_path", lambda p: p == VALID_PATH)
    return TextBuffer(
        viewport=Viewport(width, height),
        initial_text=text,
        initial_cursor_offset=offset,
        **kwargs,  # type: ignore[arg-type]
    )


# ---------------------------------------------------------------------------
# Construction and state
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_empty(self) -> None:
        buf = make_buffer()
        assert buf.lines == ("",)
        assert buf.text == ""
        assert buf.cursor == (0, 0)

    def test_initial_offset(self) -> None:
        buf = make_buffer("abc\ndef", offset=5)
        assert buf.cursor == (1, 1)

    def test_initial_offset_past_end(self) -> None:
        assert make_buffer("abc\nde", offset=99).cursor == (1, 2)

    def test_initial_crlf(self) -> None:
        assert make_buffer("a\r\nb").lines == ("a", "b")

    def test_history_limit_from_config(self) -> None:
        buf = make_buffer(config=TextBufferConfig(history_limit=2))
        for ch in "abcd":
            buf.insert(ch)
        assert buf.state.undo_stack.length == 2

    def test_state_views(self) -> None:
        buf = make_buffer("abc")
        assert isinstance(buf.state, BufferState)
        assert buf.preferred_col is None
        assert buf.selection_anchor is None


class TestOnChange:
    def test_called_with_new_text(self) -> None:
        seen: list[str] = []
        buf = make_buffer("ab", offset=2, on_change=seen.append)
        buf.insert("c")
        buf.backspace()
        assert seen == ["abc", "ab"]

    def test_not_called_for_navigation(self) -> None:
        seen: list[str] = []
        buf = make_buffer("ab", on_change=seen.append)
        buf.move("right")
        buf.move_to_offset(2)
        buf.undo()
        assert seen == []

    def test_not_called_on_construction(self) -> None:
        seen: list[str] = []
        make_buffer("ab", on_change=seen.append)
        assert seen == []


# ---------------------------------------------------------------------------
# Layout, viewport and scrolling
# ---------------------------------------------------------------------------


class TestViewport:
    def test_wrapped_visual_lines(self) -> None:
        buf = make_buffer("hello world", width=7, offset=8)
        assert buf.all_visual_lines == ("hello", "world")
        assert buf.visual_cursor == (1, 2)

    def test_set_viewport_rewraps(self) -> None:
        buf = make_buffer("hello world", width=80)
        buf.set_viewport(Viewport(7, 10))
        assert buf.all_visual_lines == ("hello", "world")
        assert buf.state.viewport_width == 7

    def test_scroll_follows_cursor_down_and_up(self) -> None:
        buf = make_buffer(height=2)
        for _ in range(3):
            buf.newline()
        assert buf.cursor == (3, 0)
        assert buf.visual_scroll_row == 2
        assert len(buf.viewport_visual_lines) == 2

        for _ in range(3):
            buf.move("up")
        assert buf.visual_scroll_row == 0

    def test_scroll_counts_wrapped_rows(self) -> None:
        buf = make_buffer("abcdefghi", width=3, height=1, offset=7)
        assert buf.visual_cursor == (2, 1)
        assert buf.visual_scroll_row == 2
        assert buf.viewport_visual_lines == ("ghi",)

    def test_slice_cursor_is_relative_and_widths_are_cells(self) -> None:
        buf = make_buffer("世界\nab\ncd", height=2, offset=9)
        view = buf.viewport()
        assert view.scroll_row == 1
        assert view.lines == ("ab", "cd")
        assert view.cursor == (1, 2)
        assert view.widths == (2, 2)

    def test_slice_widths_for_wide_chars(self) -> None:
        view = make_buffer("世界\nab").viewport()
        assert view.widths == (4, 2)


# ---------------------------------------------------------------------------
# Insertion
# ---------------------------------------------------------------------------


class TestInsert:
    def test_typed_text(self) -> None:
        buf = make_buffer()
        buf.insert("hi")
        assert buf.text == "hi"

    def test_del_acts_as_backspace(self) -> None:
        buf = make_buffer()
        buf.insert("ab\x7fc")
        assert buf.text == "ac"
        assert buf.cursor == (0, 2)

    def test_multi_line_insert_is_one_step(self) -> None:
        buf = make_buffer()
        buf.insert("a\nb")
        assert buf.lines == ("a", "b")
        assert buf.state.undo_stack.length == 1

    def test_newline(self) -> None:
        buf = make_buffer("ab", offset=1)
        buf.newline()
        assert buf.lines == ("a", "b")
        assert buf.cursor == (1, 0)


class TestPastedPaths:
    """A pasted existing path becomes an @-reference."""

    @pytest.mark.parametrize(
        "pasted, expected",
        [
            ("'/tmp/my file.txt'", "@/tmp/my file.txt "),
            ('"/tmp/my file.txt"', "@/tmp/my file.txt "),
            ("  '/tmp/my file.txt'  ", "@/tmp/my file.txt "),
            ("/tmp/my\\ file.txt", "@/tmp/my\\ file.txt "),
        ],
    )
    def test_valid_path_is_referenced(self, pasted: str, expected: str) -> None:
        buf = make_buffer()
        buf.insert(pasted, paste=True)
        assert buf.text == expected

    def test_invalid_path_is_inserted_verbatim(self) -> None:
        buf = make_buffer()
        buf.insert("/nope", paste=True)
        assert buf.text == "/nope"

    def test_typed_path_is_not_referenced(self) -> None:
        buf = make_buffer()
        buf.insert(VALID_PATH)
        assert buf.text == VALID_PATH

    def test_shell_mode_disables_references(self) -> None:
        buf = make_buffer(shell_mode_active=True)
        buf.insert(VALID_PATH, paste=True)
        assert buf.text == VALID_PATH

    def test_short_paste_is_not_checked(self) -> None:
        checked: list[str] = []

        def is_valid_path(path: str) -> bool:
            checked.append(path)
            return True

        buf = make_buffer(is_valid_path=is_valid_path)
        buf.insert("ab", paste=True)
        assert buf.text == "ab"
        assert checked == []


# ---------------------------------------------------------------------------
# Editing operations
# ---------------------------------------------------------------------------


class TestEditing:
    def test_undo_redo(self) -> None:
        buf = make_buffer()
        buf.insert("a")
        buf.insert("b")
        buf.undo()
        assert buf.text == "a"
        buf.redo()
        assert buf.text == "ab"

    def test_set_text(self) -> None:
        buf = make_buffer("old")
        buf.set_text("new\ntext")
        assert buf.lines == ("new", "text")
        assert buf.cursor == (1, 4)
        buf.undo()
        assert buf.text == "old"

    def test_replace_range(self) -> None:
        buf = make_buffer("foo\nbar\nbaz")
        buf.replace_range(0, 1, 2, 2, "XY")
        assert buf.lines == ("fXYz",)
        assert buf.cursor == (0, 3)

    def test_replace_range_by_offset(self) -> None:
        buf = make_buffer("hello world")
        buf.replace_range_by_offset(5, 6, ",")
        assert buf.text == "hello,world"

    def test_replace_range_by_offset_across_lines(self) -> None:
        buf = make_buffer("ab\ncd")
        buf.replace_range_by_offset(1, 4, "")
        assert buf.text == "ad"

    def test_delete_and_kill(self) -> None:
        buf = make_buffer("hello big world", offset=10)
        buf.delete_word_left()
        assert buf.text == "hello world"
        buf.delete_word_right()
        assert buf.text == "hello "
        buf.kill_line_left()
        assert buf.text == ""

    def test_kill_line_right_and_delete(self) -> None:
        buf = make_buffer("abc\ndef", offset=1)
        buf.kill_line_right()
        assert buf.text == "a\ndef"
        buf.delete()
        assert buf.text == "adef"


# ---------------------------------------------------------------------------
# Key input
# ---------------------------------------------------------------------------


class TestHandleInput:
    def test_printable_key_inserts(self) -> None:
        buf = make_buffer()
        buf.handle_input(KeyEvent("x", sequence="x"))
        assert buf.text == "x"

    def test_return_inserts_newline(self) -> None:
        buf = make_buffer("ab", offset=1)
        buf.handle_input(KeyEvent("return", sequence="\r"))
        assert buf.lines == ("a", "b")

    def test_motion_keys(self) -> None:
        buf = make_buffer("hello world", offset=11)
        buf.handle_input(KeyEvent("left", ctrl=True))
        assert buf.cursor == (0, 6)
        buf.handle_input(KeyEvent("a", ctrl=True))
        assert buf.cursor == (0, 0)
        buf.handle_input(KeyEvent("e", ctrl=True))
        assert buf.cursor == (0, 11)

    def test_deletion_keys(self) -> None:
        buf = make_buffer("hello world", offset=11)
        buf.handle_input(KeyEvent("w", ctrl=True))
        assert buf.text == "hello "
        buf.handle_input(KeyEvent("backspace", sequence="\x7f"))
        assert buf.text == "hello"

    def test_paste_inserts_payload(self) -> None:
        buf = make_buffer()
        buf.handle_input(KeyEvent(paste=True, sequence="a\nb"))
        assert buf.lines == ("a", "b")

    def test_unbound_chord_does_nothing(self, caplog: pytest.LogCaptureFixture) -> None:
        buf = make_buffer("ab")
        with caplog.at_level(logging.DEBUG, logger="pi.textbuffer.buffer"):
            buf.handle_input(KeyEvent("z", ctrl=True, sequence="\x1a"))
        assert buf.text == "ab"
        assert "ctrl+z" in caplog.text

    def test_custom_keybindings(self) -> None:
        manager = EditorKeybindingsManager({"cursorLineStart": ctrl("g")})
        buf = make_buffer("abc", offset=3, keybindings=manager)
        buf.handle_input(KeyEvent("g", ctrl=True))
        assert buf.cursor == (0, 0)


# ---------------------------------------------------------------------------
# Vim façade
# ---------------------------------------------------------------------------


class TestVimFacade:
    def test_delete_line(self) -> None:
        buf = make_buffer("a\nb\nc", offset=2)
        buf.vim_delete_line()
        assert buf.lines == ("a", "c")

    def test_move_to_line_and_change_movement(self) -> None:
        buf = make_buffer("a\nb\nc")
        buf.vim_move_to_line(2)
        assert buf.cursor == (1, 0)
        buf.vim_change_movement("j")
        assert buf.lines == ("a", "")

    def test_counts_are_passed_through(self) -> None:
        buf = make_buffer("a b c")
        buf.vim_move_word_forward(2)
        assert buf.cursor == (0, 4)
        buf.vim_move_left(3)
        assert buf.cursor == (0, 1)

    def test_custom_vim_handler(self) -> None:
        seen: list[VimAction] = []

        def handler(state: BufferState, action: VimAction) -> BufferState:
            seen.append(action)
            return state

        buf = make_buffer("abc", vim_handler=handler)
        buf.vim_delete_char(2)
        assert buf.text == "abc"
        assert seen == [VimAction("vim_delete_char", count=2)]
