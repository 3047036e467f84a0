"""
Logging setup for the buildprops CLI.

The generator reports each decision (reading, up-to-date, writing) as
an INFO record. With ``--verbose`` those reach stderr the way a build
log shows them (``[INFO] Writing properties file to [...]``); by default
only problems do, tagged with the program name.

Console level: CLI flag > BUILDPROPS_LOG_LEVEL > WARNING.
BUILDPROPS_LOG_FILE adds a timestamped file log at
BUILDPROPS_LOG_FILE_LEVEL (default: the console level).
"""

from __future__ import annotations

import logging
import sys

STATUS_FORMAT = "[%(levelname)s] %(message)s"
PROBLEM_FORMAT = "buildprops: %(levelname)s: %(message)s"
TRACE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def console_formatter(level: int) -> logging.Formatter:
    """Pick the stderr format for a console level."""
    if level <= logging.DEBUG:
        return logging.Formatter(TRACE_FORMAT, datefmt="%H:%M:%S")
    if level <= logging.INFO:
        return logging.Formatter(STATUS_FORMAT)
    return logging.Formatter(PROBLEM_FORMAT)


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root handlers with a stderr handler and an optional file."""
    console_level = parse_level(level)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(console_formatter(console_level))
    handlers: list[logging.Handler] = [console]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(parse_level(log_file_level) if log_file_level else console_level)
        file_handler.setFormatter(logging.Formatter(TRACE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(min(h.level for h in handlers))


def parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown or empty names mean WARNING."""
    numeric = logging.getLevelName(level.upper()) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
