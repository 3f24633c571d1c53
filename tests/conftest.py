# tests/conftest.py

"""Shared pytest fixtures for all tests."""

from pathlib import Path

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_storage(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point the key-value store at a per-test file."""
    path = tmp_path / "local_storage.json"
    monkeypatch.setattr(Settings, "STORAGE_PATH", path)
    return path
