"""Pydantic models and runtime containers for the uv manager core."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

from uvmanager.constants import PYPI_PROJECT_URL

_VERSION_RUN = re.compile(r"\d+|\D+")


class Executable(BaseModel):
    """One command exposed by a managed tool."""

    name: str
    path: str


class ManagedTool(BaseModel):
    """A tool installed by uv in its own isolated environment."""

    name: str
    version: str
    install_path: str = ""
    version_specifier: str | None = None
    extras: list[str] = Field(default_factory=list)
    with_packages: list[str] = Field(default_factory=list)
    executables: list[Executable] = Field(default_factory=list)

    @property
    def pypi_url(self) -> str:
        return PYPI_PROJECT_URL.format(name=self.name)


class Installation(BaseModel):
    """One discovered copy of the uv executable on the host."""

    path: str
    version: str
    version_date: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.version} - {self.path}"


@dataclass
class CommandResult:
    """Output of a successful invocation."""

    stdout: str
    stderr: str
    exit_code: int


@dataclass
class PendingCommand:
    """A command queued for an interactive terminal surface."""

    executable_path: str
    arguments: list[str] = field(default_factory=list)

    @property
    def display(self) -> str:
        return " ".join([self.executable_path, *self.arguments])


def version_sort_key(version: str) -> list[tuple[int, int, str]]:
    """Key comparing digit runs numerically, so ``0.5.10`` sorts after ``0.5.2``."""

    key: list[tuple[int, int, str]] = []
    for run in _VERSION_RUN.findall(version):
        if run.isdigit():
            key.append((0, int(run), ""))
        else:
            key.append((1, 0, run))
    return key


def sort_installations(installations: Iterable[Installation]) -> list[Installation]:
    """Return installations ordered by version, newest first."""

    return sorted(installations, key=lambda item: version_sort_key(item.version), reverse=True)
