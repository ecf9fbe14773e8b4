from __future__ import annotations

"""Batch helpers: run a MedianFilter over lists, numpy arrays and pandas Series."""

import math
from typing import Any, Iterable, List

import numpy as np
import pandas as pd

from .filter import MedianFilter


def running_median(values: Iterable[Any], window: int) -> List[Any]:
    f = MedianFilter(window)
    return [f.consume(v) for v in values]


def medfilt(values: Iterable[float], window: int) -> np.ndarray:
    """Causal running median of a 1-D float array.

    NaN samples are not fed to the filter and come out as NaN.
    """
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"expected a 1-D array, got shape {arr.shape}")
    f = MedianFilter(window)
    out = np.full(arr.shape, np.nan, dtype=float)
    for i, v in enumerate(arr):
        if math.isnan(v):
            continue
        out[i] = f.consume(float(v))
    return out


def medfilt_series(series: pd.Series, window: int) -> pd.Series:
    filtered = medfilt(series.to_numpy(dtype=float, na_value=np.nan), window)
    return pd.Series(filtered, index=series.index, name=series.name)
