"""
Format base — the serialize/deserialize contract shared by both formats.

The generator only talks to formats through this interface and picks
one at construction time with ``get_format()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping


class PropertiesFormat(ABC):
    """Abstract base class for on-disk property formats.

    To add a format:
        1. Subclass PropertiesFormat
        2. Implement name, serialize, deserialize
        3. Register it in ``buildprops.core.formats._FORMATS``
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The format identifier ('properties', 'json')."""

    @property
    def label(self) -> str:
        """Noun used in log lines ("properties file", "json file")."""
        return f"{self.name} file"

    @abstractmethod
    def serialize(self, properties: Mapping[str, str], encoding: str) -> bytes:
        """Render already-sorted string properties as file content.

        Nothing touches the disk here, so a value the encoding cannot
        represent fails before the existing file is opened.

        Raises:
            UnicodeEncodeError: A value is not representable in ``encoding``.
        """

    @abstractmethod
    def deserialize(self, path: Path, encoding: str) -> dict[str, str]:
        """Read a file written by ``serialize``.

        Raises:
            CannotReadFileError: For any open, decode or parse failure.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
