"""Configuration loading for the uv manager core."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, Field, PositiveInt, ValidationError, field_validator

from uvmanager.constants import COMMON_INSTALL_PATHS, USER_ENV_FILE, USER_SETTINGS_FILE
from utils.file_utils import read_json_file

logger = logging.getLogger("uvmanager.settings")

ENV_FILE_ENV_VAR = "UV_MANAGER_ENV_FILE"
CONFIG_ENV_VAR = "UV_MANAGER_CONFIG_PATH"
UV_PATH_ENV_VAR = "UV_MANAGER_UV_PATH"
TIMEOUT_ENV_VAR = "UV_MANAGER_TIMEOUT_SECONDS"
USE_TERMINAL_ENV_VAR = "UV_MANAGER_USE_TERMINAL"
LOG_LEVEL_ENV_VAR = "UV_MANAGER_LOG_LEVEL"


class SettingsLoadError(RuntimeError):
    """Raised when a settings file or variable is invalid."""


class ManagerSettings(BaseModel):
    """Runtime settings for installation discovery and command execution."""

    uv_path: str | None = Field(default=None, description="Explicit uv executable checked before the search paths.")
    search_paths: list[str] = Field(default_factory=lambda: list(COMMON_INSTALL_PATHS))
    timeout_seconds: PositiveInt | None = Field(default=None)
    use_terminal: bool = Field(default=True, description="Hand install/upgrade commands to a terminal surface.")
    env: dict[str, str] = Field(default_factory=dict)
    log_level: str = Field(default="INFO")

    @field_validator("search_paths", mode="before")
    @classmethod
    def _ensure_list(cls, value: Any) -> list[str]:
        if value is None:
            return list(COMMON_INSTALL_PATHS)
        if isinstance(value, list):
            return [str(item) for item in value]
        if isinstance(value, str):
            return [value]
        raise ValueError("search_paths must be a list of strings or a single string")


class EnvSource:
    """Variables from the process environment, falling back to a ``.env`` file."""

    def __init__(self, file_values: Mapping[str, str] | None = None) -> None:
        self.file_values = dict(file_values or {})

    @classmethod
    def load(cls, env_file: Path | None = None) -> EnvSource:
        """Read ``env_file``, ``$UV_MANAGER_ENV_FILE`` or ``~/.uv_manager/.env``."""

        target = env_file or Path(os.getenv(ENV_FILE_ENV_VAR) or USER_ENV_FILE).expanduser()
        if not target.is_file():
            return cls()
        logger.debug("Loaded environment file %s", target)
        values = dotenv_values(target)
        return cls({key: value for key, value in values.items() if value is not None})

    def get(self, key: str, default: str | None = None) -> str | None:
        value = os.environ.get(key)
        if value is not None:
            return value
        return self.file_values.get(key, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        raw = self.get(key)
        if raw is None:
            return default
        return raw.strip().lower() in ("1", "true", "yes", "on")


def _iter_settings_files(env: EnvSource) -> Iterable[Path]:
    search_paths: list[Path] = [USER_SETTINGS_FILE]

    env_path_raw = env.get(CONFIG_ENV_VAR)
    if env_path_raw:
        search_paths.append(Path(env_path_raw).expanduser())

    for base in search_paths:
        if base.is_file() and base.suffix.lower() == ".json":
            yield base
        elif base.is_dir():
            for path in sorted(base.glob("*.json")):
                if path.is_file():
                    yield path
        else:
            logger.debug("Settings path does not exist: %s", base)


def _env_overrides(env: EnvSource) -> dict[str, Any]:
    overrides: dict[str, Any] = {}

    uv_path = env.get(UV_PATH_ENV_VAR)
    if uv_path:
        overrides["uv_path"] = uv_path

    timeout_raw = env.get(TIMEOUT_ENV_VAR)
    if timeout_raw:
        try:
            overrides["timeout_seconds"] = int(timeout_raw)
        except ValueError as exc:
            raise SettingsLoadError(f"{TIMEOUT_ENV_VAR} must be an integer, got '{timeout_raw}'") from exc

    if env.get(USE_TERMINAL_ENV_VAR) is not None:
        overrides["use_terminal"] = env.get_bool(USE_TERMINAL_ENV_VAR, True)

    log_level = env.get(LOG_LEVEL_ENV_VAR)
    if log_level:
        overrides["log_level"] = log_level

    return overrides


def load_settings(env_file: Path | None = None) -> ManagerSettings:
    """Merge settings files (later files win), then environment overrides."""

    env = EnvSource.load(env_file)
    merged: dict[str, Any] = {}
    for config_path in _iter_settings_files(env):
        try:
            data = read_json_file(str(config_path))
        except json.JSONDecodeError as exc:
            raise SettingsLoadError(f"Invalid JSON in {config_path}: {exc}") from exc

        if not data:
            logger.debug("Skipping empty settings file: %s", config_path)
            continue
        logger.debug("Loaded settings from %s", config_path)
        merged.update(data)

    merged.update(_env_overrides(env))

    try:
        return ManagerSettings.model_validate(merged)
    except ValidationError as exc:
        raise SettingsLoadError(f"Invalid uv manager settings: {exc}") from exc
