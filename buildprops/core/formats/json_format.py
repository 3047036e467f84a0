"""
JSON format — a flat, pretty-printed object of string values.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from buildprops.core.errors import CannotReadFileError
from buildprops.core.formats.base import PropertiesFormat
from buildprops.core.models.properties import to_property_set


class JsonPropertiesFormat(PropertiesFormat):
    """Writes ``{"key": "value", ...}`` with two-space indentation.

    Text goes through the caller's encoding; non-ASCII characters are
    kept literal. Non-string values read back from disk are
    stringified, so ``1`` and ``"1"`` compare equal.
    """

    @property
    def name(self) -> str:
        return "json"

    def serialize(self, properties: Mapping[str, str], encoding: str) -> bytes:
        content = json.dumps(dict(properties), indent=2, ensure_ascii=False) + "\n"
        return content.encode(encoding)

    def deserialize(self, path: Path, encoding: str) -> dict[str, str]:
        # oversized int literals raise ValueError, deep nesting RecursionError
        try:
            raw = path.read_bytes().decode(encoding)
            data = json.loads(raw)
        except (OSError, ValueError, RecursionError) as e:
            raise CannotReadFileError(f"Cannot parse {path} as JSON: {e}") from e

        if not isinstance(data, dict):
            raise CannotReadFileError(
                f"Expected a JSON object in {path}, got {type(data).__name__}"
            )
        return to_property_set(data)
