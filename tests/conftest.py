"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from configdiff.engine.reader import read
from configdiff.metadata import MetadataSnapshot

FIXTURES_DIR = Path(__file__).parent / "fixtures"
METADATA_DIR = FIXTURES_DIR / "metadata"


@pytest.fixture
def metadata_path() -> Callable[[str], Path]:
    """Path of a metadata fixture under tests/fixtures/metadata/."""

    def _path(name: str) -> Path:
        return METADATA_DIR / f"{name}.json"

    return _path


@pytest.fixture
def read_fixture() -> Any:
    """Read tests/fixtures/metadata/<name>.json into a snapshot."""

    def _read(name: str) -> MetadataSnapshot:
        with (METADATA_DIR / f"{name}.json").open("rb") as stream:
            return read(stream, "utf-8")

    return _read
