# src/services/lookup_orchestrator.py

"""Sequential fallback lookup across the registered providers."""

import asyncio
import importlib
import logging
from dataclasses import dataclass, field
from typing import Any

from src.config.settings import Settings
from src.models.product import ProductRecord
from src.providers.base_provider import ProviderError
from src.storage.search_history import SearchHistory

logger = logging.getLogger("consulteja.orchestrator")

NOT_FOUND_MESSAGE = (
    "Product not found. Check that the barcode is correct "
    "and try again."
)
CONNECTION_ERROR_MESSAGE = (
    "Could not query the product. Check your internet "
    "connection and try again."
)
HISTORY_SAVE_ERROR_MESSAGE = "Could not save the lookup to the history."


@dataclass
class LookupResult:
    """Outcome of one barcode lookup through the provider chain."""

    barcode: str
    product: ProductRecord | None = None
    attempts: list[str] = field(
        default_factory=lambda: list[str]()
    )
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )
    message: str = ""
    warning: str = ""

    @property
    def found(self) -> bool:
        return self.product is not None


def _load_provider_class(dotted_path: str) -> type[Any]:
    """Dynamically import a provider class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


class LookupOrchestrator:
    """Tries each provider in priority order until one finds the barcode.

    Providers are awaited one after another, never concurrently. Any
    failure or empty answer falls through to the next provider; the
    first product found ends the chain and is added to the history.
    """

    def __init__(
        self,
        history: SearchHistory | None = None,
        providers: list[dict[str, str]] | None = None,
    ) -> None:
        self.settings = Settings()
        self.history = (
            history if history is not None else SearchHistory()
        )
        self.providers: list[dict[str, str]] = (
            providers
            if providers is not None
            else self.settings.AVAILABLE_PROVIDERS
        )

    async def _try_provider(
        self,
        source: dict[str, str],
        barcode: str,
        result: LookupResult,
    ) -> tuple[ProductRecord | None, bool]:
        """Run one provider inside its own failure boundary.

        Returns the record (if any) and whether the provider answered
        at all, so a clean "no product" can be told apart from an
        outage.
        """
        result.attempts.append(source["id"])
        try:
            provider_cls = _load_provider_class(source["provider"])
            provider = provider_cls()
            record: ProductRecord | None = await asyncio.to_thread(
                provider.lookup, barcode
            )
        except ProviderError as exc:
            result.errors.append(str(exc))
            logger.warning(
                "%s failed for %s: %s",
                source["label"],
                barcode,
                exc.message,
                exc_info=True,
            )
            return None, False
        except Exception as exc:
            result.errors.append(f"{source['label']}: {exc}")
            logger.error(
                "%s raised for %s: %s",
                source["label"],
                barcode,
                exc,
                exc_info=True,
            )
            return None, False
        return record, True

    def _remember(self, record: ProductRecord, result: LookupResult) -> None:
        """Save ``record`` to the history without losing it on a write error."""
        try:
            self.history.add(record)
        except OSError as exc:
            result.warning = f"{HISTORY_SAVE_ERROR_MESSAGE} ({exc})"
            logger.error(
                "Could not save %s to history: %s",
                record.barcode,
                exc,
                exc_info=True,
            )

    async def lookup(self, barcode: str) -> LookupResult:
        """Look up ``barcode`` through the fallback chain."""
        code = barcode.strip()
        result = LookupResult(barcode=code)
        if not code:
            return result

        any_answered = False
        for source in self.providers:
            record, answered = await self._try_provider(
                source, code, result
            )
            any_answered = any_answered or answered
            if record is not None:
                result.product = record
                logger.info(
                    "Found %s via %s after %d attempt(s)",
                    code,
                    source["label"],
                    len(result.attempts),
                )
                self._remember(record, result)
                return result
            if answered:
                logger.info(
                    "%s has no product for %s, trying next provider",
                    source["label"],
                    code,
                )

        result.message = (
            NOT_FOUND_MESSAGE if any_answered
            else CONNECTION_ERROR_MESSAGE
        )
        logger.warning(
            "All %d providers failed for %s (%d error(s))",
            len(result.attempts),
            code,
            len(result.errors),
        )
        return result
