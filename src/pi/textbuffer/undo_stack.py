"""Bounded, persistent undo/redo history."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from typing import Generic, TypeVar

S = TypeVar("S")

DEFAULT_CAPACITY = 100


class UndoStack(Generic[S]):
    """Fixed-capacity stack of immutable snapshots.

    ``push`` and ``pop`` return new stacks and leave the receiver untouched,
    so a buffer state holding a stack can be shared freely. Once *capacity*
    is reached the oldest snapshot is evicted.
    """

    __slots__ = ("_items", "_capacity")

    def __init__(self, items: tuple[S, ...] = (), capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._items: tuple[S, ...] = tuple(deque(items, maxlen=capacity))

    def push(self, snapshot: S) -> UndoStack[S]:
        """Return a new stack with *snapshot* on top."""
        ring: deque[S] = deque(self._items, maxlen=self._capacity)
        ring.append(snapshot)
        return UndoStack(tuple(ring), self._capacity)

    def pop(self) -> tuple[S | None, UndoStack[S]]:
        """Return ``(top, rest)``, or ``(None, self)`` when empty."""
        if not self._items:
            return None, self
        return self._items[-1], UndoStack(self._items[:-1], self._capacity)

    def peek(self) -> S | None:
        return self._items[-1] if self._items else None

    def clear(self) -> UndoStack[S]:
        """Return an empty stack with the same capacity."""
        if not self._items:
            return self
        return UndoStack((), self._capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def length(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[S]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UndoStack):
            return NotImplemented
        return self._items == other._items and self._capacity == other._capacity

    def __hash__(self) -> int:
        return hash((self._items, self._capacity))

    def __repr__(self) -> str:
        return f"UndoStack(length={len(self._items)}, capacity={self._capacity})"
