"""Run uv (or any executable) and expose its output and exit status."""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
from collections.abc import Mapping, Sequence

from uvmanager.constants import DEFAULT_STREAM_LIMIT, STREAM_CHUNK_SIZE
from uvmanager.models import CommandResult, PendingCommand

from .errors import CommandTimeoutError, LaunchFailedError, NonZeroExitError
from .state import Dispatcher, ExecutionMode, RunnerPhase, RunnerState

logger = logging.getLogger("uvmanager.runner")


class CommandRunner:
    """Execute one external command at a time and publish its progress.

    A runner tracks a single process handle. Starting another ``execute`` while
    one is in flight replaces the tracked handle without killing the earlier
    process; callers that need parallel commands use separate runners.
    """

    def __init__(
        self,
        *,
        dispatcher: Dispatcher | None = None,
        env: Mapping[str, str] | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.state = RunnerState(dispatcher)
        self._env = dict(env or {})
        self._timeout_seconds = timeout_seconds
        self._process: asyncio.subprocess.Process | None = None

    @property
    def is_running(self) -> bool:
        return self.state.is_running

    async def execute(
        self,
        executable_path: str,
        arguments: Sequence[str] = (),
        mode: ExecutionMode = ExecutionMode.CAPTURED,
        *,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run ``executable_path`` with ``arguments`` until it exits.

        Args:
            executable_path: Absolute path of the program to start.
            arguments: Argument vector, passed through without a shell.
            mode: ``CAPTURED`` buffers everything until exit; ``STREAMED`` appends
                each chunk to ``state.output``/``state.error`` as it arrives.
            timeout: Seconds before the process is killed. Falls back to the
                runner's default; ``None`` waits indefinitely.

        Returns:
            The split stdout/stderr text and the exit code (always 0).

        Raises:
            LaunchFailedError: The executable could not be started.
            NonZeroExitError: The process exited with a non-zero status,
                including after ``cancel()``.
            CommandTimeoutError: The timeout expired.
        """

        if mode is ExecutionMode.INTERACTIVE:
            raise ValueError("Interactive commands are started with run_interactive()")

        command = [executable_path, *arguments]
        limit = timeout if timeout is not None else self._timeout_seconds
        self.state.update(phase=RunnerPhase.RUNNING, is_running=True, output="", error="")
        logger.debug("Executing command (%s): %s", mode.value, " ".join(command))

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=DEFAULT_STREAM_LIMIT,
                env=self._build_environment(),
            )
        except OSError as exc:
            logger.warning("Could not launch %s: %s", executable_path, exc)
            self.state.update(phase=RunnerPhase.TERMINATED, is_running=False)
            raise LaunchFailedError(executable_path, str(exc)) from exc

        self._process = process
        stdout_parts: list[str] = []
        stderr_parts: list[str] = []
        streamed = mode is ExecutionMode.STREAMED

        try:
            try:
                await asyncio.wait_for(self._collect(process, stdout_parts, stderr_parts, streamed), timeout=limit)
            except asyncio.TimeoutError as exc:
                self._signal(process, kill=True)
                await process.wait()
                raise CommandTimeoutError(
                    f"Command '{executable_path}' timed out after {limit} seconds",
                    returncode=process.returncode,
                    stdout="".join(stdout_parts),
                    stderr="".join(stderr_parts),
                ) from exc
            except asyncio.CancelledError:
                self._signal(process)
                raise
        finally:
            self.state.update(phase=RunnerPhase.TERMINATED, is_running=False)

        stdout_text = "".join(stdout_parts)
        stderr_text = "".join(stderr_parts)
        return_code = process.returncode

        if return_code != 0:
            logger.debug("Command %s exited with status %s", executable_path, return_code)
            raise NonZeroExitError(return_code, stderr_text, stdout_text=stdout_text)

        return CommandResult(stdout=stdout_text, stderr=stderr_text, exit_code=return_code)

    def cancel(self) -> None:
        """Ask the tracked process to terminate; the pending ``execute`` still completes."""

        process = self._process
        if process is not None:
            self._signal(process)

    # ------------------------------------------------------------------
    # Interactive handoff
    # ------------------------------------------------------------------

    def run_interactive(self, executable_path: str, arguments: Sequence[str] = ()) -> PendingCommand:
        """Queue a command for a terminal surface instead of running it here."""

        command = PendingCommand(executable_path=executable_path, arguments=list(arguments))
        logger.debug("Queued interactive command: %s", command.display)
        self.state.update(pending_command=command, last_command=command)
        return command

    def take_pending_command(self) -> PendingCommand | None:
        """Hand the queued command to the terminal surface and mark it running."""

        command = self.state.pending_command
        if command is None:
            return None
        self.state.update(pending_command=None, phase=RunnerPhase.RUNNING, is_running=True)
        return command

    def finish_interactive(self, exit_code: int | None = None) -> None:
        """Record that the terminal surface's process exited."""

        logger.debug("Interactive command finished with status %s", exit_code)
        self.state.update(phase=RunnerPhase.TERMINATED, is_running=False)

    # ------------------------------------------------------------------
    # Output collection
    # ------------------------------------------------------------------

    async def _collect(
        self,
        process: asyncio.subprocess.Process,
        stdout_parts: list[str],
        stderr_parts: list[str],
        streamed: bool,
    ) -> None:
        # Captured mode also reads chunk by chunk; a timeout keeps what was read.
        await asyncio.gather(
            self._pump(process.stdout, stdout_parts, "output" if streamed else None),
            self._pump(process.stderr, stderr_parts, "error" if streamed else None),
        )
        await process.wait()
        if not streamed:
            self.state.update(output="".join(stdout_parts), error="".join(stderr_parts))

    async def _pump(self, stream: asyncio.StreamReader | None, parts: list[str], field: str | None) -> None:
        if stream is None:
            return
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            chunk = await stream.read(STREAM_CHUNK_SIZE)
            if not chunk:
                break
            self._append_chunk(decoder.decode(chunk), parts, field)
        self._append_chunk(decoder.decode(b"", final=True), parts, field)

    def _append_chunk(self, text: str, parts: list[str], field: str | None) -> None:
        if not text:
            return
        parts.append(text)
        if field is not None:
            self.state.append(field, text)

    def _signal(self, process: asyncio.subprocess.Process, *, kill: bool = False) -> None:
        if process.returncode is not None:
            return
        logger.debug("%s process %s", "Killing" if kill else "Terminating", process.pid)
        try:
            if kill:
                process.kill()
            else:
                process.terminate()
        except ProcessLookupError:
            pass

    def _build_environment(self) -> dict[str, str]:
        env = os.environ.copy()
        env.update(self._env)
        return env
