from __future__ import annotations

import os

import pytest
from pydantic import ValidationError

from running_median import env
from running_median.config import FilterSettings, apply_env_overrides, load_settings, save_settings


def test_defaults():
    s = FilterSettings()
    assert s.window == 5 and s.threshold is None and s.log_level == "INFO"


def test_validation():
    with pytest.raises(ValidationError):
        FilterSettings(window=0)
    with pytest.raises(ValidationError):
        FilterSettings(threshold=-1.0)
    assert FilterSettings(log_level="debug").log_level == "DEBUG"
    assert FilterSettings(log_level="loud").log_level == "INFO"


def test_save_and_load(tmp_path):
    path = tmp_path / "cfg" / "config.json"
    save_settings(FilterSettings(window=9, threshold=2.5, column="H_m"), path)
    s = load_settings(path)
    assert (s.window, s.threshold, s.column) == (9, 2.5, "H_m")


def test_load_broken_file_uses_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_settings(path) == FilterSettings()
    assert load_settings(tmp_path / "missing.json") == FilterSettings()


def test_merged_ignores_none():
    s = FilterSettings(window=3).merged(window=None, threshold=1.5)
    assert s.window == 3 and s.threshold == 1.5


def test_env_overrides(monkeypatch):
    monkeypatch.setenv(env.WINDOW_VAR, "11")
    monkeypatch.setenv(env.THRESHOLD_VAR, "0.5")
    s = apply_env_overrides(FilterSettings())
    assert s.window == 11 and s.threshold == 0.5


def test_env_garbage_ignored(monkeypatch):
    monkeypatch.setenv(env.WINDOW_VAR, "eleven")
    monkeypatch.delenv(env.THRESHOLD_VAR, raising=False)
    assert apply_env_overrides(FilterSettings(window=4)).window == 4


def test_env_file_roundtrip(tmp_path, monkeypatch):
    monkeypatch.delenv(env.WINDOW_VAR, raising=False)
    path = tmp_path / ".env"
    env.save_window(13, path)
    try:
        env.load_env(path)
        assert env.get_window() == 13
    finally:
        os.environ.pop(env.WINDOW_VAR, None)
