"""
Formats — the two on-disk renditions of a property set.

    from buildprops.core.formats import get_format
    fmt = get_format(SerializationFormat.JSON)
"""

from __future__ import annotations

from buildprops.core.formats.base import PropertiesFormat
from buildprops.core.formats.json_format import JsonPropertiesFormat
from buildprops.core.formats.properties_format import TextPropertiesFormat
from buildprops.core.models.properties import SerializationFormat

_FORMATS: dict[SerializationFormat, PropertiesFormat] = {
    SerializationFormat.PROPERTIES: TextPropertiesFormat(),
    SerializationFormat.JSON: JsonPropertiesFormat(),
}


def get_format(fmt: SerializationFormat | str) -> PropertiesFormat:
    """Look up the format implementation for an enum value or name."""
    return _FORMATS[SerializationFormat.parse(fmt)]


__all__ = [
    "JsonPropertiesFormat",
    "PropertiesFormat",
    "TextPropertiesFormat",
    "get_format",
]
