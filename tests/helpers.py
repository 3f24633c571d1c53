# tests/helpers.py

"""Mock HTTP responses built from the JSON fixtures."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict[str, Any]:
    """Read a fixture file from ``tests/fixtures``."""
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        data: dict[str, Any] = json.load(f)
    return data


def make_response(
    data: Any = None, status_code: int = 200, text: str | None = None
) -> MagicMock:
    """Create a mock curl_cffi response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text if text is not None else json.dumps(data)
    resp.json.return_value = data
    return resp


def fixture_response(name: str) -> MagicMock:
    """Create a 200 response whose body is the named fixture."""
    return make_response(load_fixture(name))
