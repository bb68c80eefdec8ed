"""Internal defaults and constants for the uv manager core."""

from __future__ import annotations

from pathlib import Path

DEFAULT_STREAM_LIMIT = 10 * 1024 * 1024  # 10MB per stream
STREAM_CHUNK_SIZE = 4096

USER_CONFIG_DIR = Path.home() / ".uv_manager"
USER_SETTINGS_FILE = USER_CONFIG_DIR / "settings.json"
USER_ENV_FILE = USER_CONFIG_DIR / ".env"

UV_EXECUTABLE_NAME = "uv"

COMMON_INSTALL_PATHS: tuple[str, ...] = (
    str(Path.home() / ".local" / "bin" / UV_EXECUTABLE_NAME),
    "/usr/local/bin/uv",
    "/opt/homebrew/bin/uv",
    "/usr/bin/uv",
)

COLOR_NEVER = ["--color", "never"]

VERSION_ARGS = ["--version"]
TOOL_DIR_ARGS = ["tool", "dir", *COLOR_NEVER]
TOOL_LIST_ARGS = [
    "tool",
    "list",
    "--show-paths",
    "--show-version-specifiers",
    "--show-with",
    "--show-extras",
    *COLOR_NEVER,
]
SELF_UPDATE_ARGS = ["self", "update", *COLOR_NEVER]

INSTALL_SHELL = "/bin/sh"
INSTALL_SCRIPT = "curl -LsSf https://astral.sh/uv/install.sh | sh"

PYPI_PROJECT_URL = "https://pypi.org/project/{name}/"

UV_NOT_FOUND_MESSAGE = "UV not found. Please install UV first."
