"""Fixed-membership circular list with a movable cursor.

``RingBuffer`` backs the active part of a session: ``current`` is the card
under the cursor, ``advance`` moves to the next one and wraps, and
``pop_current`` takes the current card out so the caller can move it
elsewhere.

Operations that need a current element raise ``InvalidStateError`` on an
empty buffer instead of indexing out of range.
"""

from __future__ import annotations

from typing import Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")


class InvalidStateError(RuntimeError):
    """An operation needed a current element but the buffer is empty."""


class RingBuffer(Generic[T]):
    """Ordered items plus a wrapping cursor.

    Invariant: ``0 <= current_index < len(items)`` while the buffer is
    non-empty.  On an empty buffer the cursor is held at 0.
    """

    def __init__(self, items: Iterable[T] = (), current_index: int = 0) -> None:
        self.items: list[T] = list(items)
        self.current_index = current_index
        self._normalize()

    @property
    def current(self) -> T:
        self._require_current("current")
        return self.items[self.current_index]

    @current.setter
    def current(self, value: T) -> None:
        self.set_current(value)

    def set_current(self, value: T) -> None:
        """Replace the element under the cursor in place."""
        self._require_current("set_current")
        self.items[self.current_index] = value

    def advance(self) -> None:
        if not self.items:
            return
        self.current_index += 1
        self._normalize()

    def pop_current(self) -> T:
        """Remove and return the element under the cursor.

        Later elements shift down one slot; the cursor wraps to 0 if it now
        points past the end.
        """
        self._require_current("pop_current")
        item = self.items.pop(self.current_index)
        self._normalize()
        return item

    def extend(self, items: Iterable[T]) -> None:
        self.items.extend(items)
        self._normalize()

    def reset_cursor(self) -> None:
        self.current_index = 0

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def _normalize(self) -> None:
        if self.current_index >= len(self.items) or self.current_index < 0:
            self.current_index = 0

    def _require_current(self, operation: str) -> None:
        if not self.items:
            raise InvalidStateError(f"RingBuffer.{operation} called on an empty buffer")
