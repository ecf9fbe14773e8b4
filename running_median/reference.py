from __future__ import annotations

"""Sort-based reference median used to cross-check MedianFilter.

Re-sorts the whole window on every sample, so it is only meant for tests and
small windows.
"""

from collections import deque
from typing import Any, Deque, Iterable, Optional

import numpy as np

from .filter import EmptyFilterError, InvalidWindowSize


def lower_median(values: Iterable[Any]) -> Optional[Any]:
    """Value at sorted rank ceil(k/2) of k values (lower middle when k is even)."""
    vals = list(values)
    if not vals:
        return None
    order = np.argsort(np.asarray(vals), kind="stable")
    return vals[int(order[(len(vals) - 1) // 2])]


class NaiveMedianFilter:
    def __init__(self, size: int):
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise InvalidWindowSize(f"window size must be a positive integer, got {size!r}")
        self.data: Deque[Any] = deque(maxlen=size)

    def __len__(self) -> int:
        return self.data.maxlen or 0

    def consume(self, value: Any) -> Any:
        self.data.append(value)
        return lower_median(self.data)

    def median(self) -> Any:
        if not self.data:
            raise EmptyFilterError("median() called before any sample was consumed")
        return lower_median(self.data)

    def min(self) -> Any:
        if not self.data:
            raise EmptyFilterError("min() called before any sample was consumed")
        return min(self.data)

    def max(self) -> Any:
        if not self.data:
            raise EmptyFilterError("max() called before any sample was consumed")
        return max(self.data)

    def sorted(self) -> list:
        return sorted(self.data)
