"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Return a directory for generated files (not created yet)."""
    return tmp_path / "target" / "classes"


@pytest.fixture
def git_properties() -> dict[str, str]:
    """A typical property set with a volatile build time."""
    return {
        "git.commit.id": "abc123",
        "git.branch": "main",
        "git.build.time": "2024-01-01T00:00:00Z",
    }


@pytest.fixture
def info_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture INFO records from buildprops loggers."""
    caplog.set_level(logging.INFO, logger="buildprops")
    return caplog
