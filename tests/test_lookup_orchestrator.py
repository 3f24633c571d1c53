# tests/test_lookup_orchestrator.py

"""Tests for the sequential provider fallback chain."""

import tempfile
import unittest
from pathlib import Path
from typing import Any
from unittest.mock import patch

from src.config.settings import Settings
from src.models.product import ProductRecord
from src.providers.base_provider import ProviderError
from src.services.lookup_orchestrator import (
    CONNECTION_ERROR_MESSAGE,
    HISTORY_SAVE_ERROR_MESSAGE,
    NOT_FOUND_MESSAGE,
    LookupOrchestrator,
    LookupResult,
)
from src.storage.local_storage import LocalStorage
from src.storage.search_history import SearchHistory

LOAD_PATH = "src.services.lookup_orchestrator._load_provider_class"

# Shared call log, reset in setUp
CALLS: list[str] = []


def _make_cls(label: str, behaviour: str) -> type[object]:
    """Build a fake provider: 'found', 'empty' or 'error'."""

    class FakeProvider:
        """Stub provider recording its calls."""

        def lookup(self, barcode: str) -> ProductRecord | None:
            CALLS.append(label)
            if behaviour == "error":
                raise ProviderError(label, "HTTP 503")
            if behaviour == "crash":
                raise RuntimeError("boom")
            if behaviour == "empty":
                return None
            return ProductRecord(
                barcode=barcode, name=f"{label} item", source=label
            )

    return FakeProvider


def _registry(*behaviours: str) -> tuple[
    list[dict[str, str]], dict[str, type[object]]
]:
    """Build a provider registry plus the class each path resolves to."""
    sources: list[dict[str, str]] = []
    classes: dict[str, type[object]] = {}
    for idx, behaviour in enumerate(behaviours):
        label = f"P{idx + 1}"
        path = f"fake.{label}"
        sources.append({"id": label.lower(), "label": label, "provider": path})
        classes[path] = _make_cls(label, behaviour)
    return sources, classes


class TestLookupOrchestrator(unittest.IsolatedAsyncioTestCase):
    """LookupOrchestrator.lookup behaviour."""

    def setUp(self) -> None:
        CALLS.clear()

    def _orchestrator(
        self, *behaviours: str
    ) -> tuple[LookupOrchestrator, Any]:
        sources, classes = _registry(*behaviours)
        patcher = patch(LOAD_PATH, side_effect=classes.__getitem__)
        patcher.start()
        self.addCleanup(patcher.stop)
        return LookupOrchestrator(providers=sources), classes

    async def test_first_provider_short_circuits(self) -> None:
        """A hit on the first provider skips the rest."""
        orch, _ = self._orchestrator("found", "found", "found", "found")
        result = await orch.lookup("789")

        self.assertIsInstance(result, LookupResult)
        self.assertTrue(result.found)
        self.assertEqual(CALLS, ["P1"])
        self.assertEqual(result.attempts, ["p1"])
        assert result.product is not None
        self.assertEqual(result.product.source, "P1")

    async def test_falls_through_errors_in_order(self) -> None:
        """Failures fall through in registry order."""
        orch, _ = self._orchestrator("error", "crash", "found", "found")
        result = await orch.lookup("789")

        self.assertEqual(CALLS, ["P1", "P2", "P3"])
        assert result.product is not None
        self.assertEqual(result.product.source, "P3")
        self.assertEqual(len(result.errors), 2)
        self.assertEqual(result.message, "")

    async def test_empty_result_falls_through(self) -> None:
        """A provider with no product does not stop the chain."""
        orch, _ = self._orchestrator("empty", "empty", "empty", "found")
        result = await orch.lookup("789")

        self.assertEqual(CALLS, ["P1", "P2", "P3", "P4"])
        self.assertTrue(result.found)
        self.assertEqual(result.errors, [])

    async def test_all_empty_reports_not_found(self) -> None:
        """Every provider answering empty yields the not-found text."""
        orch, _ = self._orchestrator("empty", "error", "empty", "error")
        result = await orch.lookup("789")

        self.assertFalse(result.found)
        self.assertEqual(result.message, NOT_FOUND_MESSAGE)
        self.assertEqual(len(result.attempts), 4)

    async def test_all_errors_reports_connection_problem(self) -> None:
        """Every provider failing yields the connection error text."""
        orch, _ = self._orchestrator("error", "error", "crash", "error")
        result = await orch.lookup("789")

        self.assertFalse(result.found)
        self.assertEqual(result.message, CONNECTION_ERROR_MESSAGE)
        self.assertEqual(len(result.errors), 4)

    async def test_empty_barcode_is_noop(self) -> None:
        """A blank barcode queries nothing."""
        orch, _ = self._orchestrator("found")
        result = await orch.lookup("   ")

        self.assertEqual(CALLS, [])
        self.assertFalse(result.found)
        self.assertEqual(result.attempts, [])
        self.assertEqual(result.message, "")

    async def test_barcode_is_stripped(self) -> None:
        orch, _ = self._orchestrator("found")
        result = await orch.lookup("  789 \n")
        self.assertEqual(result.barcode, "789")
        assert result.product is not None
        self.assertEqual(result.product.barcode, "789")

    async def test_success_saved_to_history(self) -> None:
        """Found products are prepended to the history."""
        orch, _ = self._orchestrator("found")
        await orch.lookup("111")
        await orch.lookup("222")

        barcodes = [e.barcode for e in orch.history]
        self.assertEqual(barcodes, ["222", "111"])
        # Persisted, not just in memory
        self.assertEqual(
            [e.barcode for e in SearchHistory()], ["222", "111"]
        )

    async def test_failure_not_saved_to_history(self) -> None:
        orch, _ = self._orchestrator("empty")
        await orch.lookup("111")
        self.assertEqual(len(orch.history), 0)

    async def test_history_bounded_to_limit(self) -> None:
        orch, _ = self._orchestrator("found")
        for code in ["1", "2", "3", "4", "5", "6", "7"]:
            await orch.lookup(code)

        self.assertEqual(len(orch.history), Settings.HISTORY_LIMIT)
        self.assertEqual(
            [e.barcode for e in orch.history], ["7", "6", "5", "4", "3"]
        )

    async def test_default_registry_order(self) -> None:
        """The built-in chain order is fixed."""
        orch = LookupOrchestrator()
        self.assertEqual(
            [p["id"] for p in orch.providers],
            ["barcode_lookup", "upcitemdb", "open_food_facts", "cosmos"],
        )

    async def test_history_write_error_keeps_product(self) -> None:
        """An unwritable history file does not lose the found product."""
        blocked = Path(tempfile.mkdtemp()) / "blocked"
        blocked.mkdir()
        sources, classes = _registry("found")
        with patch(LOAD_PATH, side_effect=classes.__getitem__):
            orch = LookupOrchestrator(
                history=SearchHistory(LocalStorage(blocked)),
                providers=sources,
            )
            result = await orch.lookup("789")

        assert result.product is not None
        self.assertEqual(result.product.barcode, "789")
        self.assertEqual(result.message, "")
        self.assertTrue(
            result.warning.startswith(HISTORY_SAVE_ERROR_MESSAGE)
        )

    async def test_provider_error_logged_with_traceback(self) -> None:
        orch, _ = self._orchestrator("error", "found")
        with self.assertLogs("consulteja.orchestrator", "WARNING") as logs:
            await orch.lookup("789")
        failed = [r for r in logs.records if "failed for" in r.getMessage()]
        self.assertEqual(len(failed), 1)
        self.assertIsNotNone(failed[0].exc_info)


if __name__ == "__main__":
    unittest.main()
