"""Tests for pi.textbuffer.layout -- word wrap and visual cursor mapping."""

from __future__ import annotations

import pytest

from pi.textbuffer.layout import TextChunk, calculate_visual_layout, word_wrap_line

# ---------------------------------------------------------------------------
# word_wrap_line
# ---------------------------------------------------------------------------


class TestWordWrapLine:
    """Greedy packing with a preference for breaking at spaces."""

    def test_empty_line_is_one_empty_chunk(self) -> None:
        assert word_wrap_line("", 10) == [TextChunk("", 0, 0)]

    def test_fits_in_one_chunk(self) -> None:
        assert [c.text for c in word_wrap_line("hello", 10)] == ["hello"]

    def test_breaks_at_space_that_would_overflow(self) -> None:
        chunks = word_wrap_line("hello world foo", 11)
        assert [c.text for c in chunks] == ["hello world", "foo"]
        assert chunks[1].start_index == 12

    def test_breaks_at_last_space_in_chunk(self) -> None:
        chunks = word_wrap_line("aaa bbb ccc", 9)
        assert [c.text for c in chunks] == ["aaa bbb", "ccc"]

    def test_hard_break_without_spaces(self) -> None:
        assert [c.text for c in word_wrap_line("abcdefgh", 3)] == ["abc", "def", "gh"]

    def test_wide_characters(self) -> None:
        assert [c.text for c in word_wrap_line("世界你好", 4)] == ["世界", "你好"]

    def test_character_wider_than_viewport_gets_own_line(self) -> None:
        assert [c.text for c in word_wrap_line("世界", 1)] == ["世", "界"]

    @pytest.mark.parametrize("width", [0, 1, -3])
    def test_terminates_for_tiny_widths(self, width: int) -> None:
        chunks = word_wrap_line("ab cd 世", width)
        assert chunks
        assert all(c.length >= 1 for c in chunks)
        starts = [c.start_index for c in chunks]
        assert starts == sorted(set(starts))

    def test_leading_space_is_kept(self) -> None:
        assert [c.text for c in word_wrap_line(" abc", 10)] == [" abc"]


# ---------------------------------------------------------------------------
# calculate_visual_layout
# ---------------------------------------------------------------------------


class TestCalculateVisualLayout:
    """Logical lines and cursor mapped into visual space."""

    def test_wrap_example_cursor_at_end(self) -> None:
        layout = calculate_visual_layout(["hello world foo"], (0, 15), 11)
        assert layout.visual_lines == ("hello world", "foo")
        assert layout.visual_cursor == (1, 3)

    def test_empty_text(self) -> None:
        layout = calculate_visual_layout([""], (0, 0), 10)
        assert layout.visual_lines == ("",)
        assert layout.visual_cursor == (0, 0)
        assert layout.visual_to_logical_map == ((0, 0),)

    def test_empty_line_between_lines(self) -> None:
        layout = calculate_visual_layout(["ab", "", "cd"], (1, 0), 10)
        assert layout.visual_lines == ("ab", "", "cd")
        assert layout.visual_cursor == (1, 0)

    def test_maps(self) -> None:
        layout = calculate_visual_layout(["abcdef", "gh"], (0, 0), 3)
        assert layout.visual_lines == ("abc", "def", "gh")
        assert layout.visual_to_logical_map == ((0, 0), (0, 3), (1, 0))
        assert layout.logical_to_visual_map == (((0, 0), (1, 3)), ((2, 0),))

    def test_cursor_at_hard_break_goes_to_next_chunk(self) -> None:
        layout = calculate_visual_layout(["abcdef"], (0, 3), 3)
        assert layout.visual_cursor == (1, 0)

    def test_cursor_on_consumed_space_sits_at_chunk_end(self) -> None:
        layout = calculate_visual_layout(["hello world"], (0, 5), 7)
        assert layout.visual_lines == ("hello", "world")
        assert layout.visual_cursor == (0, 5)

    def test_cursor_inside_second_chunk(self) -> None:
        layout = calculate_visual_layout(["hello world"], (0, 8), 7)
        assert layout.visual_cursor == (1, 2)

    def test_cursor_at_end_of_middle_line(self) -> None:
        layout = calculate_visual_layout(["abcdef", "x"], (0, 6), 3)
        assert layout.visual_cursor == (1, 3)

    def test_zero_width_still_lays_out(self) -> None:
        layout = calculate_visual_layout(["abc"], (0, 3), 0)
        assert layout.visual_lines == ("a", "b", "c")
        assert layout.visual_cursor == (2, 1)
