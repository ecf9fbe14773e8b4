from __future__ import annotations

"""Utilities: logging setup and small helpers."""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TextIO


def setup_logging(level: int | str = logging.INFO, stream: TextIO = sys.stdout) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=stream,
    )


def safe_float(x: Any) -> float | None:
    try:
        if x is None:
            return None
        return float(x)
    except (TypeError, ValueError):
        return None


@contextmanager
def atomic_write(path: Path):
    tmp = path.with_suffix(path.suffix + ".tmp")
    yield tmp
    tmp.replace(path)
