"""Process execution for the uv manager core."""

from __future__ import annotations

from .base import CommandRunner
from .errors import CommandTimeoutError, LaunchFailedError, NonZeroExitError, RunnerError
from .state import ExecutionMode, RunnerPhase, RunnerState

__all__ = [
    "CommandRunner",
    "CommandTimeoutError",
    "ExecutionMode",
    "LaunchFailedError",
    "NonZeroExitError",
    "RunnerError",
    "RunnerPhase",
    "RunnerState",
]
