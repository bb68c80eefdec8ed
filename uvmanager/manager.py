"""Orchestrate uv invocations and publish the latest parsed snapshot."""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable, Sequence

from uvmanager.constants import (
    COLOR_NEVER,
    INSTALL_SCRIPT,
    INSTALL_SHELL,
    SELF_UPDATE_ARGS,
    TOOL_DIR_ARGS,
    TOOL_LIST_ARGS,
    UV_EXECUTABLE_NAME,
    UV_NOT_FOUND_MESSAGE,
    VERSION_ARGS,
)
from uvmanager.models import Installation, ManagedTool, PendingCommand, sort_installations
from uvmanager.parsers import get_parser
from uvmanager.runner import CommandRunner, ExecutionMode, RunnerError
from uvmanager.runner.state import Dispatcher, ObservableState
from uvmanager.settings import ManagerSettings

logger = logging.getLogger("uvmanager.manager")


class NoInstallationError(RuntimeError):
    """Raised when a uv command is requested but no installation is selected."""

    def __init__(self, message: str = "UV installation not found") -> None:
        super().__init__(message)


def build_install_args(name: str, with_packages: Sequence[str] = (), force: bool = False) -> list[str]:
    args = ["tool", "install", name]
    if with_packages:
        args.extend(["--with", ",".join(with_packages)])
    if force:
        args.append("--force")
    args.append("-v")
    args.extend(COLOR_NEVER)
    return args


def build_upgrade_args(name: str) -> list[str]:
    return ["tool", "upgrade", name, "-v", *COLOR_NEVER]


def build_upgrade_all_args() -> list[str]:
    return ["tool", "upgrade", "--all", "-v", *COLOR_NEVER]


def build_uninstall_args(name: str) -> list[str]:
    return ["tool", "uninstall", name, "-v", *COLOR_NEVER]


def is_self_update(command: PendingCommand | None) -> bool:
    return command is not None and command.arguments[:2] == SELF_UPDATE_ARGS[:2]


class ManagerState(ObservableState):
    """Snapshot of discovered installations and tools as the UI sees it."""

    def __init__(self, dispatcher: Dispatcher | None = None) -> None:
        super().__init__(dispatcher)
        self.installations: list[Installation] = []
        self.selected_installation: Installation | None = None
        self.tools: list[ManagedTool] = []
        self.tools_directory = ""
        self.last_error: str | None = None
        self.is_loading = False


class ToolManager:
    """Drive uv through a ``CommandRunner`` and publish the refreshed results.

    Every refresh replaces ``installations``/``tools`` wholesale; nothing is
    persisted. The manager keeps its own working copy of the snapshot and
    pushes each change to ``state`` through the dispatcher, the same way the
    runner publishes its output. The read-only properties below return the
    published values.

    Fetch failures are recorded in ``last_error`` instead of raised, while
    explicit actions (install, upgrade, uninstall) propagate runner errors to
    the caller.
    """

    def __init__(
        self,
        settings: ManagerSettings | None = None,
        *,
        runner: CommandRunner | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self.settings = settings or ManagerSettings()
        self.runner = runner or CommandRunner(
            dispatcher=dispatcher,
            env=self.settings.env,
            timeout_seconds=self.settings.timeout_seconds,
        )
        self.state = ManagerState(dispatcher)
        self._version_parser = get_parser("version")
        self._tool_list_parser = get_parser("tool_list")
        self._directory_parser = get_parser("tools_directory")
        self._installations: list[Installation] = []
        self._selected: Installation | None = None
        self._tools: list[ManagedTool] = []
        self._tools_directory = ""

    @property
    def installations(self) -> list[Installation]:
        return self.state.installations

    @property
    def selected_installation(self) -> Installation | None:
        return self.state.selected_installation

    @property
    def tools(self) -> list[ManagedTool]:
        return self.state.tools

    @property
    def tools_directory(self) -> str:
        return self.state.tools_directory

    @property
    def last_error(self) -> str | None:
        return self.state.last_error

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def candidate_paths(self) -> list[str]:
        """Configured paths followed by every ``uv`` on PATH, without duplicates."""

        candidates: list[str] = []
        if self.settings.uv_path:
            candidates.append(self.settings.uv_path)
        candidates.extend(self.settings.search_paths)
        for directory in os.get_exec_path():
            if not directory:
                continue
            found = shutil.which(UV_EXECUTABLE_NAME, path=directory)
            if found:
                candidates.append(found)

        unique: list[str] = []
        for path in candidates:
            if path not in unique:
                unique.append(path)
        return unique

    async def read_installation(self, path: str) -> Installation | None:
        try:
            result = await self.runner.execute(path, VERSION_ARGS)
        except RunnerError as exc:
            logger.warning("Failed to get version for %s: %s", path, exc)
            return None

        info = self._version_parser.parse(result.stdout)
        if info is None:
            logger.warning("Unrecognised version output from %s: %r", path, result.stdout)
            return None
        return Installation(path=path, version=info.version, version_date=info.date)

    async def detect_installations(self, paths: Iterable[str] | None = None) -> list[Installation]:
        self.state.update(is_loading=True)
        try:
            detected: list[Installation] = []
            for path in paths if paths is not None else self.candidate_paths():
                if not os.path.isfile(path):
                    continue
                installation = await self.read_installation(path)
                if installation is not None:
                    detected.append(installation)
        finally:
            self.state.update(is_loading=False)

        self._installations = sort_installations(detected)
        if self._installations and self._selected is None:
            self._selected = self._installations[0]
        self.state.update(installations=list(self._installations), selected_installation=self._selected)
        if not self._installations:
            self.state.update(last_error=UV_NOT_FOUND_MESSAGE)
        return self._installations

    def select_installation(self, path: str) -> Installation:
        for installation in self._installations:
            if installation.path == path:
                self._selected = installation
                self.state.update(selected_installation=installation)
                return installation
        raise NoInstallationError(f"No detected uv installation at {path}")

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def fetch_tools_directory(self) -> str:
        if self._selected is None:
            return self._tools_directory

        try:
            result = await self.runner.execute(self._selected.path, TOOL_DIR_ARGS)
        except RunnerError as exc:
            logger.warning("Failed to fetch tools directory: %s", exc)
            self.state.update(last_error=str(exc))
            return self._tools_directory

        self._tools_directory = self._directory_parser.parse(result.stdout)
        self.state.update(tools_directory=self._tools_directory)
        return self._tools_directory

    async def fetch_tools(self) -> list[ManagedTool]:
        if self._selected is None:
            return self._tools

        self.state.update(is_loading=True)
        try:
            result = await self.runner.execute(self._selected.path, TOOL_LIST_ARGS)
        except RunnerError as exc:
            logger.warning("Failed to fetch tools: %s", exc)
            self.state.update(last_error=str(exc))
            return self._tools
        finally:
            self.state.update(is_loading=False)

        self._tools = self._tool_list_parser.parse(result.stdout)
        logger.debug("Loaded %d tools", len(self._tools))
        self.state.update(tools=list(self._tools))
        return self._tools

    async def refresh(self) -> list[ManagedTool]:
        await self.detect_installations()
        await self.fetch_tools_directory()
        return await self.fetch_tools()

    def find_tool(self, name: str) -> ManagedTool | None:
        """Look ``name`` up in the published list so detail views follow refreshes."""

        for tool in self.tools:
            if tool.name == name:
                return tool
        return None

    def filter_tools(self, query: str) -> list[ManagedTool]:
        if not query:
            return list(self.tools)
        needle = query.casefold()
        return [tool for tool in self.tools if needle in tool.name.casefold() or needle in tool.version.casefold()]

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def install_tool(
        self,
        name: str,
        with_packages: Sequence[str] = (),
        force: bool = False,
        use_terminal: bool | None = None,
    ) -> PendingCommand | None:
        return await self._run_action(build_install_args(name, with_packages, force), use_terminal)

    async def upgrade_tool(self, name: str, use_terminal: bool | None = None) -> PendingCommand | None:
        return await self._run_action(build_upgrade_args(name), use_terminal)

    async def upgrade_all_tools(self, use_terminal: bool | None = None) -> PendingCommand | None:
        return await self._run_action(build_upgrade_all_args(), use_terminal)

    async def uninstall_tool(self, name: str) -> None:
        await self._run_action(build_uninstall_args(name), use_terminal=False)

    def self_update(self) -> PendingCommand | None:
        if self._selected is None:
            self.state.update(last_error="UV installation not found")
            return None
        return self.runner.run_interactive(self._selected.path, SELF_UPDATE_ARGS)

    async def install_uv(self) -> list[Installation]:
        await self.runner.execute(INSTALL_SHELL, ["-c", INSTALL_SCRIPT], ExecutionMode.STREAMED)
        return await self.detect_installations()

    async def after_interactive_session(self) -> list[ManagedTool]:
        """Refresh once the terminal surface showing an interactive command closes."""

        if is_self_update(self.runner.state.last_command):
            await self.detect_installations()
            await self.fetch_tools_directory()
        return await self.fetch_tools()

    async def _run_action(self, arguments: list[str], use_terminal: bool | None) -> PendingCommand | None:
        if self._selected is None:
            raise NoInstallationError()

        uv_path = self._selected.path
        if use_terminal is None:
            use_terminal = self.settings.use_terminal

        if use_terminal:
            return self.runner.run_interactive(uv_path, arguments)

        await self.runner.execute(uv_path, arguments, ExecutionMode.STREAMED)
        await self.fetch_tools()
        return None
