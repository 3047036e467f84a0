"""
Build context — tells the host build tool which outputs changed.

After the generator writes a file it calls ``refresh(path)`` so an
incremental build can invalidate whatever depends on that path.
Skipped (up-to-date) files are never refreshed.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)


class BuildContext(ABC):
    """Receiver of "this path changed" signals."""

    @abstractmethod
    def refresh(self, path: Path) -> None:
        """Record that ``path`` was (re)written."""


class NullBuildContext(BuildContext):
    """No host build tool: refresh does nothing."""

    def refresh(self, path: Path) -> None:
        return None


class RecordingBuildContext(BuildContext):
    """Keeps refreshed paths in memory."""

    def __init__(self) -> None:
        self._refreshed: list[Path] = []

    @property
    def refreshed(self) -> list[Path]:
        return self._refreshed

    @property
    def call_count(self) -> int:
        return len(self._refreshed)

    def refresh(self, path: Path) -> None:
        self._refreshed.append(path)


class RefreshLogBuildContext(BuildContext):
    """Append-only NDJSON ledger of refreshed paths.

    One line per refresh: ``{"timestamp": ..., "path": ...}``.
    An outer build script can tail this file to find changed outputs.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def refresh(self, path: Path) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(
            {
                "timestamp": datetime.now(UTC).isoformat(),
                "path": str(path.absolute()),
            },
            ensure_ascii=False,
        )
        with self._path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
        logger.debug("Refresh recorded for %s in %s", path, self._path)

    def read_all(self) -> list[Path]:
        """Refreshed paths, oldest first. Corrupt lines are skipped."""
        if not self._path.is_file():
            return []

        paths: list[Path] = []
        with self._path.open("r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    paths.append(Path(json.loads(line)["path"]))
                except (json.JSONDecodeError, KeyError, TypeError) as e:
                    logger.warning("Skipping corrupt refresh entry at line %d: %s", line_num, e)
        return paths
