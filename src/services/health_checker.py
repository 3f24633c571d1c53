# src/services/health_checker.py

"""Connectivity probe for every registered provider."""

import asyncio
import logging
import time
from dataclasses import dataclass

from src.config.settings import Settings
from src.providers.base_provider import ProviderError
from src.services.lookup_orchestrator import _load_provider_class

logger = logging.getLogger("consulteja.health")

# A widely listed EAN-13 (Nutella 400g) used as the probe barcode
PROBE_BARCODE = "3017620422003"
_SLOW_THRESHOLD_MS = 5000.0


@dataclass
class HealthResult:
    """Result of a single provider health check."""

    provider_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_provider(source: dict[str, str]) -> HealthResult:
    """Send the probe lookup to one provider and time it."""
    provider_id = source["id"]

    try:
        provider = _load_provider_class(source["provider"])()
    except Exception as exc:
        return HealthResult(
            provider_id=provider_id,
            status="down",
            latency_ms=0.0,
            message=f"Failed to load provider: {exc}",
        )

    start = time.monotonic()
    try:
        record = provider.lookup(PROBE_BARCODE)
    except ProviderError as exc:
        return HealthResult(
            provider_id=provider_id,
            status="down",
            latency_ms=(time.monotonic() - start) * 1000,
            message=exc.message[:80],
        )
    except Exception as exc:
        return HealthResult(
            provider_id=provider_id,
            status="down",
            latency_ms=(time.monotonic() - start) * 1000,
            message=str(exc)[:80],
        )

    elapsed_ms = (time.monotonic() - start) * 1000
    note = "" if record is not None else "Reachable, probe barcode unknown"
    if elapsed_ms > _SLOW_THRESHOLD_MS:
        return HealthResult(
            provider_id=provider_id,
            status="slow",
            latency_ms=elapsed_ms,
            message=note or "High latency",
        )
    return HealthResult(
        provider_id=provider_id,
        status="ok",
        latency_ms=elapsed_ms,
        message=note,
    )


class HealthChecker:
    """Probes every provider, one after another."""

    def __init__(
        self, providers: list[dict[str, str]] | None = None
    ) -> None:
        self.providers = (
            providers
            if providers is not None
            else Settings.AVAILABLE_PROVIDERS
        )

    async def check_all(self) -> list[HealthResult]:
        """Probe each provider in registry order."""
        results: list[HealthResult] = []
        for src in self.providers:
            r = await asyncio.to_thread(probe_provider, src)
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.provider_id,
                r.status,
                r.latency_ms,
                r.message,
            )
            results.append(r)
        return results
