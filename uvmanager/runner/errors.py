"""Errors raised by the command runner."""

from __future__ import annotations


class RunnerError(RuntimeError):
    """Base class for failures while running an external command."""

    def __init__(self, message: str, *, returncode: int | None = None, stdout: str = "", stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class LaunchFailedError(RunnerError):
    """The executable could not be started (missing, not executable, denied)."""

    def __init__(self, executable_path: str, reason: str) -> None:
        super().__init__(f"Failed to launch {executable_path}: {reason}")
        self.executable_path = executable_path


class NonZeroExitError(RunnerError):
    """The process ran but exited with a failure status."""

    def __init__(self, code: int, stderr_text: str, *, stdout_text: str = "") -> None:
        super().__init__(
            f"Process exited with code {code}: {stderr_text}",
            returncode=code,
            stdout=stdout_text,
            stderr=stderr_text,
        )

    @property
    def code(self) -> int:
        return self.returncode

    @property
    def stderr_text(self) -> str:
        return self.stderr

    @property
    def stdout_text(self) -> str:
        return self.stdout


class CommandTimeoutError(RunnerError):
    """The process did not finish within the allotted time and was killed."""
