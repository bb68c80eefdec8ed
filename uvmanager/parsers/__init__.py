"""Parser registry for uv command output."""

from __future__ import annotations

from .base import BaseParser, ParserError
from .tool_list import (
    ExtractorRule,
    ToolListParser,
    ToolsDirectoryParser,
    parse_tool_listing,
    parse_tools_directory,
)
from .version import VersionInfo, VersionParser, parse_version

_PARSER_CLASSES: dict[str, type[BaseParser]] = {
    VersionParser.name: VersionParser,
    ToolListParser.name: ToolListParser,
    ToolsDirectoryParser.name: ToolsDirectoryParser,
}


def get_parser(name: str) -> BaseParser:
    normalized = (name or "").lower()
    if normalized not in _PARSER_CLASSES:
        raise ParserError(f"No parser registered for '{name}'")
    parser_cls = _PARSER_CLASSES[normalized]
    return parser_cls()


__all__ = [
    "BaseParser",
    "ExtractorRule",
    "ParserError",
    "ToolListParser",
    "ToolsDirectoryParser",
    "VersionInfo",
    "VersionParser",
    "get_parser",
    "parse_tool_listing",
    "parse_tools_directory",
    "parse_version",
]
