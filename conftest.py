"""Shared pytest fixtures for Lifecell."""

from __future__ import annotations

from typing import Any, List

import pytest

from lifecell.shared.core import configuration


class Recorder:
    """Observer that remembers every value it was called with."""

    def __init__(self) -> None:
        self.values: List[Any] = []

    def __call__(self, value: Any) -> None:
        self.values.append(value)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the global config manager at an empty directory with no env overrides."""
    for env_key in configuration.ENV_OVERRIDES:
        monkeypatch.delenv(env_key, raising=False)
    config_dir = tmp_path / "settings"
    monkeypatch.setattr(configuration, "_config_manager", configuration.ConfigManager(config_dir))
    yield config_dir
    monkeypatch.setattr(configuration, "_config_manager", None)
