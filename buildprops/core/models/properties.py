"""
Property set models — formats, outcomes and value normalization.

A property set is any ``Mapping[str, Any]`` owned by the caller.
Everything the generator compares or writes goes through
``to_property_set`` first, so the caller's mapping is never touched
and every value is a string.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel

# Suffix of the volatile build timestamp key (joined onto the prefix)
BUILD_TIME = "build.time"

DEFAULT_PREFIX = "git"


class SerializationFormat(str, Enum):
    """On-disk format of the generated file."""

    PROPERTIES = "properties"
    JSON = "json"

    @classmethod
    def parse(cls, value: str | SerializationFormat) -> SerializationFormat:
        """Case-insensitive lookup (``"JSON"`` → ``JSON``)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown format '{value}'. Valid: {valid}") from None


class GenerateOutcome(BaseModel):
    """Which branch ``maybe_generate`` took, and where."""

    written: bool
    path: Path
    format: SerializationFormat

    @property
    def up_to_date(self) -> bool:
        return not self.written

    def to_dict(self) -> dict:
        return {
            "written": self.written,
            "path": str(self.path),
            "format": self.format.value,
        }


def prefix_dot(prefix: str) -> str:
    """``"git"`` → ``"git."``; an empty prefix stays empty."""
    if not prefix:
        return ""
    return prefix if prefix.endswith(".") else prefix + "."


def build_time_key(prefix: str) -> str:
    """The volatile key excluded from change detection."""
    return prefix_dot(prefix) + BUILD_TIME


def stringify_value(value: Any) -> str:
    """Render a property value the way it is written to disk."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def to_property_set(properties: Mapping[str, Any]) -> dict[str, str]:
    """Owned string→string copy of a caller's mapping."""
    return {str(k): stringify_value(v) for k, v in properties.items()}


def sorted_properties(properties: Mapping[str, Any]) -> dict[str, str]:
    """Owned copy with keys in ascending order."""
    copy = to_property_set(properties)
    return {k: copy[k] for k in sorted(copy)}
