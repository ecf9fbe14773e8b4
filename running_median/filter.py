from __future__ import annotations

"""Running median over a fixed-size sliding window.

The window is a ring buffer of slots. Occupied slots are additionally chained
into a circular doubly-linked list kept in ascending value order, linked by
slot index. Each new sample overwrites the oldest slot, so one insertion costs
a single walk over at most ``size`` slots, instead of re-sorting the window.

Cursors:
 - cursor: slot that the next sample overwrites (oldest sample)
 - head: slot holding the current minimum
 - median: slot holding the current median (lower middle for even counts)

Based on Phil Ekstrom, Embedded Systems Programming, November 2000.
"""

import copy as _copy
import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional


log = logging.getLogger(__name__)


class RunningMedianError(Exception):
    """Base class for filter errors."""


class InvalidWindowSize(RunningMedianError, ValueError):
    pass


class EmptyFilterError(RunningMedianError, LookupError):
    pass


@dataclass(repr=False)
class Slot:
    value: Optional[Any] = None
    previous: Optional[int] = None
    next: Optional[int] = None

    def __repr__(self) -> str:
        return f"@{self.previous}-{self.value!r}-@{self.next}"


class MedianFilter:
    """Median filter with linear worst-case cost per sample.

    ``consume`` returns the median of the last ``size`` samples (or of all
    samples seen so far while the window is still filling). For an even
    number of samples the lower of the two middle values is returned, so the
    result is always one of the consumed samples.
    """

    def __init__(self, size: int):
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise InvalidWindowSize(f"window size must be a positive integer, got {size!r}")
        # empty slots are pre-linked in ring order so the first walks find them
        self._slots: List[Slot] = [
            Slot(None, (i + size - 1) % size, (i + 1) % size) for i in range(size)
        ]
        self._cursor = 0
        self._head = 0
        self._median = 0
        self._count = 0
        log.debug("MedianFilter created with window size %d", size)

    # -- sizing -----------------------------------------------------------

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def size(self) -> int:
        return len(self._slots)

    @property
    def count(self) -> int:
        """Number of valid samples, ``min(consumed, size)``."""
        return self._count

    def is_empty(self) -> bool:
        return self._count == 0

    def is_full(self) -> bool:
        return self._count == len(self._slots)

    # -- accessors --------------------------------------------------------

    def median(self) -> Any:
        self._require_samples("median")
        return self._slots[self._median].value

    def min(self) -> Any:
        self._require_samples("min")
        return self._slots[self._head].value

    def max(self) -> Any:
        """Largest valid sample.

        While the window is filling, the empty slots trail the sorted values
        and the first of them is always the slot under the write cursor. Once
        full, the list is closed and the maximum sits just before the head.
        """
        self._require_samples("max")
        if self.is_full():
            return self._slots[self._slots[self._head].previous].value
        return self._slots[self._slots[self._cursor].previous].value

    def latest(self) -> Any:
        """Most recently consumed sample (the slot behind the write cursor)."""
        self._require_samples("latest")
        return self._slots[(self._cursor - 1) % len(self._slots)].value

    def window(self) -> List[Any]:
        """Valid samples in arrival order, oldest first."""
        size = len(self._slots)
        start = self._cursor if self.is_full() else 0
        return [self._slots[(start + i) % size].value for i in range(self._count)]

    def __iter__(self) -> Iterator[Any]:
        # ascending order
        index = self._head
        for _ in range(self._count):
            slot = self._slots[index]
            yield slot.value
            index = slot.next

    # -- mutation ---------------------------------------------------------

    def consume(self, value: Any) -> Any:
        """Push ``value`` into the window, evicting the oldest sample.

        Returns the median of the window after the insertion.
        """
        if value is None:
            raise TypeError("None cannot be consumed: it marks an empty slot")
        if isinstance(value, float) and math.isnan(value):
            raise ValueError("NaN cannot be ordered inside the window")

        if self._cursor == self._head:
            self._head = self._slots[self._head].next
        self._unlink(self._cursor)

        self._median = self._head
        self._insert_sorted(value)
        self._update_head(value)

        if len(self._slots) % 2 == 0:
            # land on the lower one of the middle pair
            self._median = self._slots[self._median].previous

        self._cursor = (self._cursor + 1) % len(self._slots)
        if self._count < len(self._slots):
            self._count += 1
        return self._slots[self._median].value

    def consume_many(self, values: Iterable[Any]) -> Iterator[Any]:
        for value in values:
            yield self.consume(value)

    def _unlink(self, index: int) -> None:
        slot = self._slots[index]
        predecessor, successor = slot.previous, slot.next
        self._slots[predecessor].next = successor
        slot.value = None
        slot.previous = None
        slot.next = None
        # a single slot is its own neighbour, so this also closes it on itself
        self._slots[successor].previous = predecessor

    def _insert_sorted(self, value: Any) -> None:
        size = len(self._slots)
        current = self._head
        inserted = False
        for hop in range(size):
            if not inserted and self._is_insertion_point(value, current, hop):
                self._link_before(current, value)
                inserted = True
            # one median step per two real values passed
            if hop % 2 == 1 and self._slots[current].value is not None:
                self._median = self._slots[self._median].next
            current = self._slots[current].next

    def _is_insertion_point(self, value: Any, current: int, hop: int) -> bool:
        held = self._slots[current].value
        if held is None:
            # empty slots sort after every real value
            return True
        return hop + 1 == len(self._slots) or held >= value

    def _link_before(self, current: int, value: Any) -> None:
        cursor = self._cursor
        assert len(self._slots) == 1 or current != cursor
        predecessor = self._slots[current].previous
        self._slots[predecessor].next = cursor
        node = self._slots[cursor]
        node.value = value
        node.previous = predecessor
        node.next = current
        self._slots[current].previous = cursor

    def _update_head(self, value: Any) -> None:
        head_value = self._slots[self._head].value
        if head_value is None or value <= head_value:
            self._head = self._cursor
            self._median = self._slots[self._median].previous

    # -- misc -------------------------------------------------------------

    def _require_samples(self, what: str) -> None:
        if self._count == 0:
            raise EmptyFilterError(f"{what}() called before any sample was consumed")

    def copy(self) -> "MedianFilter":
        return _copy.copy(self)

    def __copy__(self) -> "MedianFilter":
        clone = self.__class__.__new__(self.__class__)
        clone._slots = [Slot(s.value, s.previous, s.next) for s in self._slots]
        clone._cursor = self._cursor
        clone._head = self._head
        clone._median = self._median
        clone._count = self._count
        return clone

    def __repr__(self) -> str:
        if self._count == 0:
            return f"MedianFilter(size={len(self._slots)}, count=0)"
        return f"MedianFilter(size={len(self._slots)}, count={self._count}, median={self.median()!r})"
