from __future__ import annotations

"""Filter settings and their JSON persistence."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from . import env
from .utils import atomic_write


log = logging.getLogger(__name__)


APP_NAME = "running-median"
DEFAULT_WINDOW = 5
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def get_config_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("APPDATA", str(Path.home() / "AppData" / "Roaming"))
        return Path(base) / APP_NAME
    else:
        return Path.home() / ".config" / APP_NAME


CONFIG_PATH = get_config_dir() / "config.json"


class FilterSettings(BaseModel):
    window: int = Field(DEFAULT_WINDOW, ge=1)
    # spike threshold in sample units; None disables spike checks
    threshold: Optional[float] = Field(None, gt=0)
    column: Optional[str] = None
    log_level: str = Field("INFO")

    @field_validator("log_level")
    @classmethod
    def _v_log_level(cls, v: str) -> str:
        v = str(v).upper()
        return v if v in LOG_LEVELS else "INFO"

    def merged(self, **overrides: Any) -> "FilterSettings":
        """Copy with the non-None overrides applied and validated."""
        data: Dict[str, Any] = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return FilterSettings(**data)


def load_settings(path: Path = CONFIG_PATH) -> FilterSettings:
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            return FilterSettings(**data)
    except Exception:
        log.exception("Failed to load settings from %s; using defaults", path)
    return FilterSettings()


def save_settings(settings: FilterSettings, path: Path = CONFIG_PATH) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with atomic_write(path) as tmp:
        tmp.write_text(settings.model_dump_json(indent=2), encoding="utf-8")


def apply_env_overrides(settings: FilterSettings) -> FilterSettings:
    return settings.merged(window=env.get_window(), threshold=env.get_threshold())
