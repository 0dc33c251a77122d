from __future__ import annotations

import pytest
import yaml

from lifecell.shared.config import SETTINGS_DIR
from lifecell.shared.core import configuration
from lifecell.shared.core.configuration import ConfigManager, SystemConfig, ValidationLevel, get_config
from lifecell.shared.core.errors import ConfigurationError


def _write(path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


def test_empty_config_dir_yields_model_defaults(tmp_path) -> None:
    config = ConfigManager(tmp_path / "nothing").get_config()

    assert config == SystemConfig()
    assert config.cell.initial_value == 0
    assert config.lifecycle.active_threshold == "started"


def test_packaged_defaults_match_model_defaults() -> None:
    config = ConfigManager(SETTINGS_DIR).get_config()

    assert config.cell.initial_value == 0
    assert config.lifecycle.active_threshold == "started"
    assert config.logging.level == "INFO"


def test_precedence_is_env_then_project_then_user_then_defaults(tmp_path, monkeypatch) -> None:
    _write(tmp_path / "defaults.yaml", {"cell": {"initial_value": 1}, "logging": {"level": "DEBUG"}})
    _write(tmp_path / "user.yaml", {"cell": {"initial_value": 2}, "lifecycle": {"active_threshold": "resumed"}})
    _write(tmp_path / "project.yaml", {"cell": {"initial_value": 3}})
    manager = ConfigManager(tmp_path)

    config = manager.get_config()
    assert config.cell.initial_value == 3
    assert config.lifecycle.active_threshold == "resumed"
    assert config.logging.level == "DEBUG"

    monkeypatch.setenv("LIFECELL_INITIAL_VALUE", "4")
    monkeypatch.setenv("LIFECELL_ACTIVE_THRESHOLD", "STARTED")
    monkeypatch.setenv("LOG_LEVEL", "warning")
    config = manager.get_config()
    assert config.cell.initial_value == 4
    assert config.lifecycle.active_threshold == "started"
    assert config.logging.level == "WARNING"


def test_unconvertible_env_value_is_ignored(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("LIFECELL_INITIAL_VALUE", "many")

    assert ConfigManager(tmp_path).get_config().cell.initial_value == 0


def test_invalid_config_strict_raises_lenient_falls_back(tmp_path) -> None:
    _write(tmp_path / "project.yaml", {"lifecycle": {"active_threshold": "created"}})
    manager = ConfigManager(tmp_path)

    with pytest.raises(ConfigurationError):
        manager.get_config()
    assert manager.get_config(ValidationLevel.LENIENT) == SystemConfig()


def test_unknown_keys_are_rejected(tmp_path) -> None:
    _write(tmp_path / "user.yaml", {"cell": {"initial": 3}})

    with pytest.raises(ConfigurationError):
        ConfigManager(tmp_path).get_config()


def test_malformed_yaml_is_skipped(tmp_path) -> None:
    tmp_path.joinpath("user.yaml").write_text("cell: [unclosed", encoding="utf-8")
    tmp_path.joinpath("project.yaml").write_text("- just\n- a list\n", encoding="utf-8")

    assert ConfigManager(tmp_path).get_config() == SystemConfig()


def test_save_project_config_merges_and_invalidates_cache(tmp_path) -> None:
    manager = ConfigManager(tmp_path / "settings")
    assert manager.get_config().cell.initial_value == 0

    assert manager.save_project_config({"cell": {"initial_value": 8}}) is True
    assert manager.save_project_config({"lifecycle": {"active_threshold": "resumed"}}) is True

    config = manager.get_config()
    assert config.cell.initial_value == 8
    assert config.lifecycle.active_threshold == "resumed"


def test_reload_config_picks_up_file_changes(tmp_path) -> None:
    manager = ConfigManager(tmp_path)
    _write(tmp_path / "user.yaml", {"cell": {"initial_value": 1}})
    assert manager.get_config().cell.initial_value == 1

    _write(tmp_path / "user.yaml", {"cell": {"initial_value": 2}})
    assert manager.get_config().cell.initial_value == 1

    manager.reload_config()
    assert manager.get_config().cell.initial_value == 2


def test_module_accessors_share_one_manager(isolated_config) -> None:
    manager = configuration.get_config_manager()

    assert configuration.get_config_manager() is manager
    assert manager.config_dir == isolated_config
    assert get_config() == SystemConfig()


def test_default_manager_reads_packaged_settings() -> None:
    assert configuration.DEFAULT_CONFIG_DIR == SETTINGS_DIR
    assert ConfigManager().config_dir == SETTINGS_DIR
    assert (SETTINGS_DIR / "defaults.yaml").exists()
