"""Core of the uv tool manager: run uv and parse what it prints."""

from __future__ import annotations

from .manager import ManagerState, NoInstallationError, ToolManager
from .models import CommandResult, Executable, Installation, ManagedTool, PendingCommand, sort_installations
from .parsers import parse_tool_listing, parse_version
from .runner import CommandRunner, ExecutionMode, LaunchFailedError, NonZeroExitError
from .settings import ManagerSettings, load_settings

__all__ = [
    "CommandResult",
    "CommandRunner",
    "Executable",
    "ExecutionMode",
    "Installation",
    "LaunchFailedError",
    "ManagedTool",
    "ManagerState",
    "ManagerSettings",
    "NoInstallationError",
    "NonZeroExitError",
    "PendingCommand",
    "ToolManager",
    "load_settings",
    "parse_tool_listing",
    "parse_version",
    "sort_installations",
]
