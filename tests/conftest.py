"""Pytest configuration and shared fixtures."""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from crontable.scheduler import CronTable


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def crontable_home(temp_dir: Path) -> Path:
    """Create a temporary crontable home directory."""
    home = temp_dir / ".crontable"
    home.mkdir()
    return home


@pytest.fixture
def table() -> Generator[CronTable, None, None]:
    """Create a cron table that is stopped after the test."""
    tab = CronTable()
    yield tab
    tab.stop()


@pytest.fixture
def jobs_yaml(temp_dir: Path) -> Path:
    """Write a small jobs file."""
    path = temp_dir / "jobs.yaml"
    path.write_text(
        """\
timezone: UTC
jobs:
  - name: hello
    schedule: "*/5 * * * *"
    command: echo hello
  - name: nightly
    schedule: "0 3 * * 1-5"
    command: echo nightly
"""
    )
    return path
