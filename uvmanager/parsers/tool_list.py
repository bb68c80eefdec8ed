"""Parser for ``uv tool list`` reports."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from uvmanager.models import Executable, ManagedTool

from .base import BaseParser

logger = logging.getLogger("uvmanager.parser")

EXECUTABLE_PREFIX = "- "
NOISE_PREFIXES = ("warning:", "hint:")

HEADER_PATTERN = re.compile(r"^(\S+) v(\d+(?:\.\d+)*(?:\.post\d+)?(?:[a-z]+\d+)?)")
EXECUTABLE_PATTERN = re.compile(r"^(.+) \((.+)\)$")


def _split_list(value: str) -> list[str]:
    return value.split(", ")


@dataclass(frozen=True)
class ExtractorRule:
    """Pull one optional field out of a header line."""

    field: str
    pattern: re.Pattern[str]
    transform: Callable[[str], Any] = str

    def apply(self, line: str) -> tuple[str, Any] | None:
        match = self.pattern.search(line)
        if match is None:
            return None
        return self.field, self.transform(match.group(1))


HEADER_RULES: tuple[ExtractorRule, ...] = (
    ExtractorRule("install_path", re.compile(r"\(([^)]+)\)$")),
    ExtractorRule("version_specifier", re.compile(r"\[required: ([^\]]+)\]")),
    ExtractorRule("extras", re.compile(r"\[extras: ([^\]]+)\]"), _split_list),
    ExtractorRule("with_packages", re.compile(r"\[with: ([^\]]+)\]"), _split_list),
)


class ToolListParser(BaseParser):
    """Turn the multi-line tool report into ``ManagedTool`` records.

    Header lines open a tool, ``- name (path)`` lines attach executables to the
    open tool. Blank lines and ``warning:``/``hint:`` diagnostics are ignored.
    """

    name = "tool_list"

    def __init__(self, rules: tuple[ExtractorRule, ...] = HEADER_RULES):
        self.rules = rules

    def parse(self, text: str) -> list[ManagedTool]:
        tools: list[ManagedTool] = []
        current: ManagedTool | None = None

        for line in (text or "").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith(NOISE_PREFIXES):
                continue

            if line.startswith(EXECUTABLE_PREFIX):
                if current is None:
                    logger.debug("Dropping executable line without a tool: %r", line)
                    continue
                executable = self.parse_executable(line[len(EXECUTABLE_PREFIX) :].strip())
                if executable is not None:
                    current.executables.append(executable)
                continue

            if current is not None:
                tools.append(current)
            current = self.parse_header(line)

        if current is not None:
            tools.append(current)

        return tools

    def parse_header(self, line: str) -> ManagedTool | None:
        match = HEADER_PATTERN.match(line)
        if match is None:
            logger.debug("Skipping unrecognised header line: %r", line)
            return None

        fields: dict[str, Any] = {"name": match.group(1), "version": match.group(2)}
        for rule in self.rules:
            extracted = rule.apply(line.rstrip())
            if extracted is not None:
                key, value = extracted
                fields[key] = value
        return ManagedTool(**fields)

    def parse_executable(self, text: str) -> Executable | None:
        match = EXECUTABLE_PATTERN.match(text)
        if match is None:
            logger.debug("Skipping unrecognised executable line: %r", text)
            return None
        return Executable(name=match.group(1), path=match.group(2))


def parse_tool_listing(text: str) -> list[ManagedTool]:
    return ToolListParser().parse(text)


class ToolsDirectoryParser(BaseParser):
    """Return the directory printed by ``uv tool dir``."""

    name = "tools_directory"

    def parse(self, text: str) -> str:
        return (text or "").strip()


def parse_tools_directory(text: str) -> str:
    return ToolsDirectoryParser().parse(text)
