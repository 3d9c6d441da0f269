"""Word-wrap layout of logical lines into visual (screen) lines."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pi.textbuffer.utils import char_width, to_code_points


@dataclass(frozen=True)
class TextChunk:
    """One visual line cut from a logical line.

    ``start_index``/``end_index`` are code-point columns in the logical line.
    A space consumed as a wrap point lies outside every chunk.
    """

    text: str
    start_index: int
    end_index: int

    @property
    def length(self) -> int:
        return self.end_index - self.start_index


@dataclass(frozen=True)
class VisualLayout:
    """Derived view of the buffer at a given viewport width."""

    visual_lines: tuple[str, ...]
    visual_cursor: tuple[int, int]
    # Per logical line: (visual line index, start column) for each of its chunks.
    logical_to_visual_map: tuple[tuple[tuple[int, int], ...], ...]
    # Per visual line: (logical line index, start column).
    visual_to_logical_map: tuple[tuple[int, int], ...]


def word_wrap_line(line: str, max_width: int) -> list[TextChunk]:
    """Split *line* into chunks no wider than *max_width* display columns.

    Breaks at the last space in a chunk when one exists past the chunk start;
    the space itself is dropped. A space that would itself overflow ends the
    chunk right there. Without a usable space the chunk is hard-broken, and
    a character wider than the viewport gets a line of its own. Every chunk
    holds at least one code point, so any width (including ``0``) terminates.
    """
    chars = to_code_points(line)
    if not chars:
        return [TextChunk(text="", start_index=0, end_index=0)]

    chunks: list[TextChunk] = []
    pos = 0
    total = len(chars)

    while pos < total:
        width = 0
        count = 0
        break_count = 0

        for i in range(pos, total):
            char = chars[i]
            w = char_width(char)
            if width + w > max_width:
                if char == " " and count > 0:
                    pass
                elif break_count > 0:
                    count = break_count
                break
            width += w
            count += 1
            if char == " ":
                break_count = count - 1

        if count == 0:
            count = 1

        chunks.append(
            TextChunk(
                text="".join(chars[pos:pos + count]),
                start_index=pos,
                end_index=pos + count,
            )
        )
        pos += count

        # The space the line wrapped at is consumed.
        if pos < total and chars[pos] == " ":
            pos += 1

    return chunks


def calculate_visual_layout(
    lines: Sequence[str],
    cursor: tuple[int, int],
    viewport_width: int,
) -> VisualLayout:
    """Wrap every logical line and map the logical cursor into visual space."""
    cursor_row, cursor_col = cursor
    visual_lines: list[str] = []
    logical_to_visual: list[tuple[tuple[int, int], ...]] = []
    visual_to_logical: list[tuple[int, int]] = []
    visual_cursor = (0, 0)

    for row, line in enumerate(lines):
        entries: list[tuple[int, int]] = []
        chunks = word_wrap_line(line, viewport_width)

        for chunk in chunks:
            entries.append((len(visual_lines), chunk.start_index))
            visual_to_logical.append((row, chunk.start_index))
            visual_lines.append(chunk.text)

            if row == cursor_row:
                if chunk.start_index <= cursor_col < chunk.end_index:
                    visual_cursor = (len(visual_lines) - 1, cursor_col - chunk.start_index)
                elif cursor_col == chunk.end_index:
                    visual_cursor = (len(visual_lines) - 1, chunk.length)

        # A cursor at the end of a wrapped line sits after its last chunk.
        if row == cursor_row and line and cursor_col == len(line):
            visual_cursor = (len(visual_lines) - 1, len(visual_lines[-1]))

        logical_to_visual.append(tuple(entries))

    if not visual_lines:
        visual_lines.append("")
        logical_to_visual = [((0, 0),)]
        visual_to_logical.append((0, 0))

    if len(lines) <= 1 and not (lines and lines[0]):
        visual_cursor = (0, 0)

    return VisualLayout(
        visual_lines=tuple(visual_lines),
        visual_cursor=visual_cursor,
        logical_to_visual_map=tuple(logical_to_visual),
        visual_to_logical_map=tuple(visual_to_logical),
    )
