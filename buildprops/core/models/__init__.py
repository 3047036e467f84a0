"""
Domain models for the properties generator.

    from buildprops.core.models import GenerateOutcome, SerializationFormat
"""

from buildprops.core.models.properties import (
    BUILD_TIME,
    DEFAULT_PREFIX,
    GenerateOutcome,
    SerializationFormat,
    build_time_key,
    prefix_dot,
    sorted_properties,
    stringify_value,
    to_property_set,
)
from buildprops.core.models.settings import GeneratorSettings

__all__ = [
    "BUILD_TIME",
    "DEFAULT_PREFIX",
    "GenerateOutcome",
    "GeneratorSettings",
    "SerializationFormat",
    "build_time_key",
    "prefix_dot",
    "sorted_properties",
    "stringify_value",
    "to_property_set",
]
