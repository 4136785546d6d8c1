# tests/conftest.py

"""Shared pytest fixtures for all stockwatch tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from stockwatch.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_dirs(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Point logs, results and the local baseline DB at a temp dir."""
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.setattr(Settings, "RESULTS_DIR", tmp_path / "results")
    monkeypatch.setattr(
        Settings, "BASELINE_DB_PATH", tmp_path / "data" / "baseline.db"
    )
    yield
