"""Tests for settings loading from JSON files and environment variables."""

import json
import logging

import pytest

from utils.logging_config import configure_logging
from uvmanager.constants import COMMON_INSTALL_PATHS
from uvmanager.settings import EnvSource, ManagerSettings, SettingsLoadError, load_settings


def test_defaults_without_files_or_env():
    settings = load_settings()

    assert settings == ManagerSettings()
    assert settings.search_paths == list(COMMON_INSTALL_PATHS)
    assert settings.use_terminal is True
    assert settings.timeout_seconds is None


def test_file_then_env_override(tmp_path, monkeypatch):
    config_file = tmp_path / "settings.json"
    config_file.write_text(json.dumps({"uv_path": "/file/uv", "search_paths": "/only/uv", "timeout_seconds": 30}))
    monkeypatch.setenv("UV_MANAGER_CONFIG_PATH", str(config_file))
    monkeypatch.setenv("UV_MANAGER_UV_PATH", "/env/uv")
    monkeypatch.setenv("UV_MANAGER_USE_TERMINAL", "false")

    settings = load_settings()

    assert settings.uv_path == "/env/uv"
    assert settings.search_paths == ["/only/uv"]
    assert settings.timeout_seconds == 30
    assert settings.use_terminal is False


def test_config_directory_merges_files_in_order(tmp_path, monkeypatch):
    (tmp_path / "a.json").write_text(json.dumps({"timeout_seconds": 10, "env": {"UV_NO_PROGRESS": "1"}}))
    (tmp_path / "b.json").write_text(json.dumps({"timeout_seconds": 20}))
    (tmp_path / "c.json").write_text("")
    monkeypatch.setenv("UV_MANAGER_CONFIG_PATH", str(tmp_path))

    settings = load_settings()

    assert settings.timeout_seconds == 20
    assert settings.env == {"UV_NO_PROGRESS": "1"}


def test_invalid_json_raises(tmp_path, monkeypatch):
    config_file = tmp_path / "settings.json"
    config_file.write_text("{not json")
    monkeypatch.setenv("UV_MANAGER_CONFIG_PATH", str(config_file))

    with pytest.raises(SettingsLoadError):
        load_settings()


@pytest.mark.parametrize("raw", ["soon", "-5", "0"])
def test_invalid_timeout_raises(monkeypatch, raw):
    monkeypatch.setenv("UV_MANAGER_TIMEOUT_SECONDS", raw)

    with pytest.raises(SettingsLoadError):
        load_settings()


def test_configure_logging_is_idempotent():
    logger = configure_logging("debug")
    configure_logging("debug")

    handlers = [handler for handler in logger.handlers if getattr(handler, "_uvmanager_handler", False)]
    assert len(handlers) == 1
    assert logger.level == logging.DEBUG
    assert configure_logging("nonsense").level == logging.INFO


def test_search_paths_of_wrong_type_is_a_settings_error(tmp_path, monkeypatch):
    config_file = tmp_path / "settings.json"
    config_file.write_text(json.dumps({"search_paths": 5}))
    monkeypatch.setenv("UV_MANAGER_CONFIG_PATH", str(config_file))

    with pytest.raises(SettingsLoadError):
        load_settings()


def test_env_file_values_yield_to_process_environment(tmp_path, monkeypatch):
    env_file = tmp_path / "manager.env"
    env_file.write_text("UV_MANAGER_UV_PATH=/dotenv/uv\nUV_MANAGER_TIMEOUT_SECONDS=45\n")
    monkeypatch.setenv("UV_MANAGER_ENV_FILE", str(env_file))

    settings = load_settings()

    assert settings.uv_path == "/dotenv/uv"
    assert settings.timeout_seconds == 45

    monkeypatch.setenv("UV_MANAGER_UV_PATH", "/process/uv")

    assert load_settings().uv_path == "/process/uv"


def test_explicit_env_file_argument(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("UV_MANAGER_USE_TERMINAL=no\n")

    assert load_settings(env_file).use_terminal is False


def test_env_source_without_file(tmp_path):
    env = EnvSource.load(tmp_path / "absent.env")

    assert env.file_values == {}
    assert env.get("UV_MANAGER_UV_PATH", "fallback") == "fallback"
    assert env.get_bool("UV_MANAGER_USE_TERMINAL", True) is True


def test_log_level_override(monkeypatch):
    monkeypatch.setenv("UV_MANAGER_LOG_LEVEL", "DEBUG")

    settings = load_settings()

    assert settings.log_level == "DEBUG"
    assert configure_logging(settings.log_level).level == logging.DEBUG
