"""Parser interfaces for uv command output."""

from __future__ import annotations

from typing import Any


class ParserError(RuntimeError):
    """Raised when a parser cannot be resolved from the registry."""


class BaseParser:
    """Base interface for uv output parsers.

    Parsers are total: malformed input degrades to ``None`` or to skipped
    lines, never to an exception.
    """

    name: str = "base"

    def parse(self, text: str) -> Any:
        raise NotImplementedError("Parsers must implement parse()")
