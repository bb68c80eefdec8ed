"""Parser for ``uv --version`` banners."""

from __future__ import annotations

import re
from typing import NamedTuple

from .base import BaseParser

VERSION_PATTERN = re.compile(r"\w+\s+(\d+\.\d+\.\d+)(?:\s+\(([^)]+)\))?")


class VersionInfo(NamedTuple):
    version: str
    date: str | None = None


class VersionParser(BaseParser):
    """Parse banners such as ``uv 0.5.2 (0b0d0f3a1 2024-11-14)``."""

    name = "version"

    def parse(self, text: str) -> VersionInfo | None:
        match = VERSION_PATTERN.search(text or "")
        if match is None:
            return None
        return VersionInfo(version=match.group(1), date=match.group(2))


def parse_version(text: str) -> VersionInfo | None:
    return VersionParser().parse(text)
