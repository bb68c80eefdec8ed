"""
Pytest configuration for the uv manager tests
"""

import asyncio
import sys
from pathlib import Path

import pytest

# Ensure the parent directory is in the Python path for imports
parent_dir = Path(__file__).resolve().parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

import uvmanager.settings as settings_module  # noqa: E402

MANAGER_ENV_VARS = (
    settings_module.ENV_FILE_ENV_VAR,
    settings_module.CONFIG_ENV_VAR,
    settings_module.UV_PATH_ENV_VAR,
    settings_module.TIMEOUT_ENV_VAR,
    settings_module.USE_TERMINAL_ENV_VAR,
    settings_module.LOG_LEVEL_ENV_VAR,
)


@pytest.fixture
def fake_exec(monkeypatch):
    """Route ``asyncio.create_subprocess_exec`` through a handler taking the argv."""

    calls: list[list[str]] = []

    def install(handler):
        async def fake_create_subprocess_exec(*args, **_kwargs):
            calls.append(list(args))
            result = handler(list(args))
            if isinstance(result, BaseException):
                raise result
            return result

        monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_create_subprocess_exec)
        return calls

    return install


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "asyncio: mark test as async")


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    """Keep the developer's ~/.uv_manager files and UV_MANAGER_* variables out of tests."""

    for var in MANAGER_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    user_dir = tmp_path / "user-config"
    monkeypatch.setattr(settings_module, "USER_SETTINGS_FILE", user_dir / "settings.json")
    monkeypatch.setattr(settings_module, "USER_ENV_FILE", user_dir / ".env")
