from __future__ import annotations

"""Spike checks against the running median.

A sample is a spike when it differs from the median of the samples before it
by more than ``threshold``. Spikes still enter the window; only the reported
value is replaced when suppressing. Missing samples (None/NaN) are never
flagged and never enter the window.

Flags:
 - SPIKES: at least one sample was flagged
 - WARMUP_ONLY: fewer samples than the window size, medians never covered a full window
"""

import math
from typing import Any, Iterable, List, Optional

from .filter import MedianFilter


def _is_missing(v: Optional[float]) -> bool:
    return v is None or (isinstance(v, float) and math.isnan(v))


def spike_flags(values: Iterable[Optional[float]], window: int, threshold: float) -> List[bool]:
    if threshold <= 0:
        raise ValueError(f"threshold must be positive, got {threshold!r}")
    f = MedianFilter(window)
    flags: list[bool] = []
    for v in values:
        if _is_missing(v):
            flags.append(False)
            continue
        flags.append(not f.is_empty() and abs(v - f.median()) > threshold)
        f.consume(v)
    return flags


def suppress_spikes(values: Iterable[Optional[float]], window: int, threshold: float) -> List[Any]:
    vals = list(values)
    f = MedianFilter(window)
    out: list = []
    for v, spike in zip(vals, spike_flags(vals, window, threshold)):
        if _is_missing(v):
            out.append(v)
            continue
        out.append(f.median() if spike else v)
        f.consume(v)
    return out


def qc_summary(values: Iterable[Optional[float]], window: int, threshold: float) -> str:
    vals = list(values)
    flags: list[str] = []
    if any(spike_flags(vals, window, threshold)):
        flags.append("SPIKES")
    if sum(1 for v in vals if not _is_missing(v)) < window:
        flags.append("WARMUP_ONLY")
    return "|".join(flags)
