"""File helpers shared by configuration loaders."""

from __future__ import annotations

import json
from typing import Any


def read_json_file(file_path: str) -> dict[str, Any] | None:
    """Read a JSON object from ``file_path``.

    Returns None for an empty file. ``json.JSONDecodeError`` propagates so the
    caller can report which file is broken.
    """

    with open(file_path, encoding="utf-8") as handle:
        content = handle.read()
    if not content.strip():
        return None
    data = json.loads(content)
    if not isinstance(data, dict):
        raise json.JSONDecodeError("Expected a JSON object", content, 0)
    return data
