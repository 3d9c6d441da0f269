"""Immutable buffer state and undo snapshots."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field

from pi.textbuffer.undo_stack import DEFAULT_CAPACITY, UndoStack
from pi.textbuffer.utils import clamp, cp_len

Cursor = tuple[int, int]


@dataclass(frozen=True)
class UndoHistoryEntry:
    """Content snapshot. Selection, preferred column and width are not history."""

    lines: tuple[str, ...]
    cursor_row: int
    cursor_col: int


@dataclass(frozen=True)
class BufferState:
    """The whole editable state of a text buffer.

    Every transition builds a new value with :func:`dataclasses.replace`;
    readers holding an older state keep seeing it unchanged.
    """

    lines: tuple[str, ...] = ("",)
    cursor_row: int = 0
    cursor_col: int = 0
    preferred_col: int | None = None
    undo_stack: UndoStack[UndoHistoryEntry] = field(default_factory=UndoStack)
    redo_stack: UndoStack[UndoHistoryEntry] = field(default_factory=UndoStack)
    clipboard: str | None = None
    selection_anchor: Cursor | None = None
    viewport_width: int = 80

    def __post_init__(self) -> None:
        lines = tuple(self.lines)
        if not lines:
            lines = ("",)
        object.__setattr__(self, "lines", lines)

    @classmethod
    def create(
        cls,
        lines: Iterable[str] = ("",),
        cursor: Cursor = (0, 0),
        *,
        viewport_width: int = 80,
        history_limit: int = DEFAULT_CAPACITY,
    ) -> BufferState:
        """Build a fresh state with empty histories bounded by *history_limit*."""
        return cls(
            lines=tuple(lines),
            cursor_row=cursor[0],
            cursor_col=cursor[1],
            undo_stack=UndoStack(capacity=history_limit),
            redo_stack=UndoStack(capacity=history_limit),
            viewport_width=viewport_width,
        ).clamped()

    @property
    def cursor(self) -> Cursor:
        return (self.cursor_row, self.cursor_col)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def line(self, row: int) -> str:
        """Line *row*, or ``""`` when out of range."""
        return self.lines[row] if 0 <= row < len(self.lines) else ""

    def line_length(self, row: int) -> int:
        return cp_len(self.line(row))

    def snapshot(self) -> UndoHistoryEntry:
        return UndoHistoryEntry(lines=self.lines, cursor_row=self.cursor_row, cursor_col=self.cursor_col)

    def restore(self, entry: UndoHistoryEntry) -> BufferState:
        """Return this state with the content of *entry* put back."""
        return dataclasses.replace(
            self,
            lines=entry.lines,
            cursor_row=entry.cursor_row,
            cursor_col=entry.cursor_col,
        )

    def clamped(self) -> BufferState:
        """Return this state with the cursor forced inside the text."""
        row = clamp(self.cursor_row, 0, len(self.lines) - 1)
        col = clamp(self.cursor_col, 0, cp_len(self.lines[row]))
        if row == self.cursor_row and col == self.cursor_col:
            return self
        return dataclasses.replace(self, cursor_row=row, cursor_col=col)
