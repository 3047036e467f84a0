"""
Configuration loader — reads buildprops.yml into GeneratorSettings.

The file is optional. Without one, the generator runs on defaults
plus whatever the CLI flags say.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from buildprops.core.errors import ConfigError
from buildprops.core.models.settings import GeneratorSettings

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "buildprops.yml"

__all__ = ["CONFIG_FILE", "ConfigError", "find_config_file", "load_settings"]


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for buildprops.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to buildprops.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None) -> GeneratorSettings:
    """Load and validate generator settings.

    Args:
        path: Explicit path to buildprops.yml. If None, searches upward;
            if nothing is found, defaults are returned.

    Returns:
        Validated GeneratorSettings. A relative ``base_dir`` is resolved
        against the config file's directory.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    explicit = path is not None
    if path is None:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return GeneratorSettings()

    if not path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return GeneratorSettings()

    logger.debug("Loading generator config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Settings may sit under a "generator" key or at the top level
    section = data.get("generator", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected 'generator' to be a mapping in {path}")

    try:
        settings = GeneratorSettings.model_validate(section)
    except Exception as e:
        raise ConfigError(f"Invalid generator configuration: {e}") from e

    base_dir = Path(settings.base_dir)
    if not base_dir.is_absolute():
        settings = settings.merged(base_dir=str((path.parent / base_dir).resolve()))

    logger.info("Loaded settings from %s (format=%s)", path, settings.format.value)
    return settings
