"""
Properties file generator — write build metadata only when it changed.

The generator compares the caller's properties with whatever is
already on disk, ignoring the ``<prefix>.build.time`` key whose value
differs on every build. Identical → the file is left untouched, so
its mtime does not invalidate downstream incremental builds.

Read problems with the existing file are never fatal: the file is
simply regenerated. Write problems always are.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path
from typing import Any, Mapping

from buildprops.core.errors import CannotReadFileError, GeneratorExecutionError
from buildprops.core.formats import get_format
from buildprops.core.models.properties import (
    DEFAULT_PREFIX,
    GenerateOutcome,
    SerializationFormat,
    build_time_key,
    sorted_properties,
    to_property_set,
)
from buildprops.core.services.build_context import BuildContext, NullBuildContext

logger = logging.getLogger(__name__)


def resolve_output_target(base_dir: str | Path, filename: str | Path) -> Path:
    """Join ``filename`` onto ``base_dir`` unless it is already absolute.

    Pure path arithmetic: neither argument has to exist.
    """
    target = Path(filename)
    if target.is_absolute():
        return target
    return Path(base_dir) / target


class PropertiesFileGenerator:
    """Write-or-skip generator for one output format.

    Args:
        format: ``SerializationFormat`` or its name (case-insensitive).
        prefix: Property prefix without the dot (``"git"``).
        project_name: Module name shown in log lines.
        build_context: Notified after each write. ``None`` → no-op.
    """

    def __init__(
        self,
        format: SerializationFormat | str = SerializationFormat.PROPERTIES,
        prefix: str = DEFAULT_PREFIX,
        project_name: str = "",
        build_context: BuildContext | None = None,
    ):
        self._format = SerializationFormat.parse(format)
        self._writer = get_format(self._format)
        self._volatile_key = build_time_key(prefix)
        self._project_name = project_name
        self._build_context = build_context or NullBuildContext()

    @property
    def format(self) -> SerializationFormat:
        return self._format

    @property
    def volatile_key(self) -> str:
        return self._volatile_key

    def maybe_generate(
        self,
        properties: Mapping[str, Any],
        base_dir: str | Path,
        filename: str | Path,
        encoding: str = "utf-8",
    ) -> GenerateOutcome:
        """Write ``properties`` to the output target unless it is up to date.

        Returns:
            GenerateOutcome telling whether the file was written.

        Raises:
            GeneratorExecutionError: Unknown encoding, or directory creation
                or the write failed.
        """
        target = resolve_output_target(base_dir, filename)
        try:
            codecs.lookup(encoding)
        except LookupError as e:
            raise GeneratorExecutionError(f"Unknown encoding: {encoding}") from e
        label = self._writer.label

        should_generate = True
        if target.exists():
            logger.info(
                "Reading existing %s [%s] (for module %s)...",
                label, target.absolute(), self._project_name,
            )
            try:
                persisted = self._writer.deserialize(target, encoding)
                should_generate = not self._same_properties(properties, persisted)
            except CannotReadFileError as e:
                logger.info(
                    "Cannot read %s [%s] (for module %s): %s",
                    label, target.absolute(), self._project_name, e,
                )

        if not should_generate:
            logger.info(
                "%s [%s] is up-to-date (for module %s)...",
                label.capitalize(), target.absolute(), self._project_name,
            )
            return GenerateOutcome(written=False, path=target, format=self._format)

        self._write(properties, target, encoding)
        self._build_context.refresh(target)
        return GenerateOutcome(written=True, path=target, format=self._format)

    # ── Helpers ─────────────────────────────────────────────────

    def _same_properties(
        self,
        properties: Mapping[str, Any],
        persisted: Mapping[str, str],
    ) -> bool:
        """Equality on owned copies with the volatile key removed from both."""
        current = to_property_set(properties)
        previous = to_property_set(persisted)
        current.pop(self._volatile_key, None)
        previous.pop(self._volatile_key, None)
        return current == previous

    def _write(self, properties: Mapping[str, Any], target: Path, encoding: str) -> None:
        logger.info(
            "Writing %s to [%s] (for module %s)...",
            self._writer.label, target.absolute(), self._project_name,
        )
        try:
            # encode first: opening the target truncates it
            content = self._writer.serialize(sorted_properties(properties), encoding)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except (OSError, UnicodeError) as e:
            logger.error("Cannot create %s %s: %s", self._writer.label, target, e)
            raise GeneratorExecutionError(f"Cannot create properties file: {target}") from e
