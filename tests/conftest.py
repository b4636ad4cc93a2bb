"""Shared pytest configuration for the ics_lite test suite."""

from pathlib import Path
from typing import Any

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "calendars"


def pytest_configure(config: Any) -> None:
    """Register the markers used across the suite."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Tests that exercise several modules together")


@pytest.fixture
def calendars_dir() -> Path:
    """Directory holding the .ics fixture files."""
    return FIXTURES_DIR
