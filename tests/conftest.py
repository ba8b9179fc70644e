"""Shared test fixtures for all test modules."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixture_bytes():
    """Return a loader for the raw bytes of a sample OPML document."""

    def load(name: str) -> bytes:
        return (FIXTURES_DIR / name).read_bytes()

    return load


@pytest.fixture
def fixture_path():
    """Return a resolver for sample OPML document paths."""

    def resolve(name: str) -> Path:
        return FIXTURES_DIR / name

    return resolve
