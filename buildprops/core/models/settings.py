"""
Generator settings — loaded from buildprops.yml, overridden by CLI flags.
"""

from __future__ import annotations

import codecs

from pydantic import BaseModel, field_validator

from buildprops.core.models.properties import DEFAULT_PREFIX, SerializationFormat


class GeneratorSettings(BaseModel):
    """Everything one generator run needs besides the properties."""

    format: SerializationFormat = SerializationFormat.PROPERTIES
    prefix: str = DEFAULT_PREFIX
    filename: str = "git.properties"
    encoding: str = "utf-8"
    project_name: str = ""
    base_dir: str = "."

    @field_validator("format", mode="before")
    @classmethod
    def _parse_format(cls, value: object) -> SerializationFormat:
        if isinstance(value, SerializationFormat):
            return value
        return SerializationFormat.parse(str(value))

    @field_validator("encoding")
    @classmethod
    def _check_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError:
            raise ValueError(f"Unknown encoding '{value}'") from None
        return value

    def merged(self, **overrides: object) -> GeneratorSettings:
        """Copy with every non-None override applied (CLI flags win)."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return GeneratorSettings.model_validate(data)
