"""Shared pytest fixtures for iofxml tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog


@pytest.fixture
def test_data_dir() -> Path:
    """Returns the path to the test data directory."""
    return Path(__file__).parent / "data"


@pytest.fixture
def read_data(test_data_dir: Path):
    """Returns a loader for raw bytes of a file in the test data directory."""

    def _read(name: str) -> bytes:
        return (test_data_dir / name).read_bytes()

    return _read


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undoes logging configuration applied by CLI tests."""
    yield
    structlog.reset_defaults()
