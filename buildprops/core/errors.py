"""
Error taxonomy — recoverable read failures vs fatal write failures.

CannotReadFileError never leaves the generator: it only means
"there is no usable previous state, regenerate".
GeneratorExecutionError always reaches the caller.
"""

from __future__ import annotations


class BuildPropsError(Exception):
    """Base error for buildprops."""


class CannotReadFileError(BuildPropsError):
    """An existing output file could not be opened or parsed."""


class GeneratorExecutionError(BuildPropsError):
    """Creating or writing the output file failed."""


class ConfigError(BuildPropsError):
    """Raised when the generator configuration is invalid or missing."""
