"""
Generate use case — collect properties, apply settings, write or skip.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Sequence

import yaml

from buildprops.core.config.loader import load_settings
from buildprops.core.errors import (
    CannotReadFileError,
    ConfigError,
    GeneratorExecutionError,
)
from buildprops.core.formats import get_format
from buildprops.core.models.properties import (
    GenerateOutcome,
    SerializationFormat,
    build_time_key,
    to_property_set,
)
from buildprops.core.models.settings import GeneratorSettings
from buildprops.core.services.build_context import BuildContext, RefreshLogBuildContext
from buildprops.core.services.generator import PropertiesFileGenerator

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Result of one generate run."""

    outcome: GenerateOutcome | None = None
    settings: GeneratorSettings | None = None
    property_count: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        if self.error:
            return {"error": self.error}

        result: dict[str, Any] = {"property_count": self.property_count}
        if self.outcome:
            result.update(self.outcome.to_dict())
        if self.settings:
            result["project_name"] = self.settings.project_name
        return result


def format_for_path(path: Path) -> SerializationFormat:
    """Guess a file's format from its suffix (``.json`` or properties)."""
    if path.suffix.lower() == ".json":
        return SerializationFormat.JSON
    return SerializationFormat.PROPERTIES


def _load_yaml_source(path: Path, encoding: str) -> dict[str, str]:
    try:
        data = yaml.safe_load(path.read_bytes().decode(encoding))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise CannotReadFileError(f"Cannot read {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CannotReadFileError(
            f"Expected a YAML mapping in {path}, got {type(data).__name__}"
        )
    return to_property_set(data)


def load_source(path: Path, encoding: str = "utf-8") -> dict[str, str]:
    """Read one property source file (.json, .yml/.yaml or properties).

    Raises:
        CannotReadFileError: If the file is missing or unparsable.
    """
    if not path.is_file():
        raise CannotReadFileError(f"Property source not found: {path}")
    if path.suffix.lower() in (".yml", ".yaml"):
        return _load_yaml_source(path, encoding)
    return get_format(format_for_path(path)).deserialize(path, encoding)


def parse_assignment(text: str) -> tuple[str, str]:
    """Split ``KEY=VALUE`` on the first ``=``."""
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise ValueError(f"Expected KEY=VALUE, got '{text}'")
    return key.strip(), value


def collect_properties(
    sources: Sequence[Path] = (),
    assignments: Sequence[str] = (),
    encoding: str = "utf-8",
) -> dict[str, str]:
    """Merge source files in order, then ``KEY=VALUE`` assignments.

    Later entries override earlier ones.
    """
    properties: dict[str, str] = {}
    for source in sources:
        loaded = load_source(source, encoding)
        logger.debug("Loaded %d properties from %s", len(loaded), source)
        properties.update(loaded)
    for assignment in assignments:
        key, value = parse_assignment(assignment)
        properties[key] = value
    return properties


def run_generate(
    config_path: Path | None = None,
    sources: Sequence[Path] = (),
    assignments: Sequence[str] = (),
    overrides: dict[str, Any] | None = None,
    stamp_build_time: bool = False,
    refresh_log: Path | None = None,
) -> GenerateResult:
    """Generate the properties file described by config + CLI overrides.

    Args:
        config_path: Explicit buildprops.yml (default: auto-detect).
        sources: Property source files, merged in order.
        assignments: ``KEY=VALUE`` strings applied last.
        overrides: Settings fields that win over the config file.
        stamp_build_time: Set ``<prefix>.build.time`` to the current UTC time.
        refresh_log: Ledger file for refresh notifications.

    Returns:
        GenerateResult; ``error`` is set instead of raising.
    """
    result = GenerateResult()

    try:
        settings = load_settings(config_path).merged(**(overrides or {}))
    except (ConfigError, ValueError) as e:
        result.error = str(e)
        return result
    result.settings = settings

    try:
        properties = collect_properties(sources, assignments, settings.encoding)
    except (CannotReadFileError, ValueError) as e:
        result.error = str(e)
        return result

    if stamp_build_time:
        properties[build_time_key(settings.prefix)] = (
            datetime.now(UTC).isoformat(timespec="seconds")
        )
    result.property_count = len(properties)

    build_context: BuildContext | None = None
    if refresh_log is not None:
        build_context = RefreshLogBuildContext(refresh_log)

    generator = PropertiesFileGenerator(
        format=settings.format,
        prefix=settings.prefix,
        project_name=settings.project_name,
        build_context=build_context,
    )

    try:
        result.outcome = generator.maybe_generate(
            properties,
            settings.base_dir,
            settings.filename,
            settings.encoding,
        )
    except GeneratorExecutionError as e:
        result.error = f"{e} ({e.__cause__})"

    return result


@dataclass
class ReadResult:
    """Properties parsed from an existing output file."""

    path: Path | None = None
    format: SerializationFormat | None = None
    properties: dict[str, str] = field(default_factory=dict)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "path": str(self.path),
            "format": self.format.value if self.format else None,
            "properties": {k: self.properties[k] for k in sorted(self.properties)},
        }


def read_properties_file(
    path: Path,
    fmt: SerializationFormat | str | None = None,
    encoding: str = "utf-8",
) -> ReadResult:
    """Parse an existing generated file (format guessed from the suffix)."""
    resolved = SerializationFormat.parse(fmt) if fmt else format_for_path(path)
    result = ReadResult(path=path, format=resolved)

    if not path.is_file():
        result.error = f"File not found: {path}"
        return result

    try:
        result.properties = get_format(resolved).deserialize(path, encoding)
    except CannotReadFileError as e:
        result.error = str(e)
    return result
