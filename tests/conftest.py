"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from tests.fakes import FakeChain


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write text to a CSV file under tmp_path and return its path."""

    def _write(content: str, name: str = "data.csv") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
