from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv, set_key


log = logging.getLogger(__name__)

ENV_PATH = Path(".env")

WINDOW_VAR = "RUNNING_MEDIAN_WINDOW"
THRESHOLD_VAR = "RUNNING_MEDIAN_THRESHOLD"


def load_env(path: Path = ENV_PATH) -> None:
    load_dotenv(dotenv_path=path, override=False)


def get_window() -> Optional[int]:
    raw = os.getenv(WINDOW_VAR)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring %s=%r: not an integer", WINDOW_VAR, raw)
        return None


def get_threshold() -> Optional[float]:
    raw = os.getenv(THRESHOLD_VAR)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring %s=%r: not a number", THRESHOLD_VAR, raw)
        return None


def save_window(value: int, path: Path = ENV_PATH) -> None:
    path.touch(exist_ok=True)
    set_key(str(path), WINDOW_VAR, str(value))
