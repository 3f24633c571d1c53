# src/providers/base_provider.py

"""Abstract base class for the barcode database providers."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.product import ProductRecord


class ProviderError(Exception):
    """Raised when a provider cannot be reached or returns garbage."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


def first_of(*values: Any) -> Any:
    """Return the first value that is neither ``None`` nor blank."""
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def first_item(values: Any) -> Any:
    """Return the first element of a non-empty list, else ``None``."""
    if isinstance(values, list) and values:
        return values[0]
    return None


class BaseProvider(ABC):
    """One external product database in the lookup chain.

    Subclasses build the request for a barcode and map the provider's
    JSON into a :class:`ProductRecord`. A provider makes exactly one
    request per lookup; falling through to the next provider is the
    orchestrator's job.
    """

    provider_id: str = ""
    label: str = ""

    def __init__(self) -> None:
        self.logger = logging.getLogger(
            f"consulteja.providers.{self.provider_id}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _headers(self) -> dict[str, str]:
        """Headers sent with every request to this provider."""
        return dict(self.settings.DEFAULT_HEADERS)

    def _fetch_json(self, url: str) -> Any:
        """GET ``url`` once and decode the JSON body.

        Raises:
            ProviderError: on transport errors, non-200 responses or
                bodies that are not JSON.
        """
        try:
            resp = self.session.get(
                url,
                headers=self._headers(),
                timeout=self._request_timeout,
            )
        except Exception as exc:
            raise ProviderError(
                self.label, f"request failed: {exc}"
            ) from exc

        if resp.status_code != 200:
            raise ProviderError(
                self.label, f"HTTP {resp.status_code}"
            )

        try:
            return json.loads(resp.text)
        except ValueError as exc:
            raise ProviderError(
                self.label, "response is not valid JSON"
            ) from exc

    def lookup(self, barcode: str) -> ProductRecord | None:
        """Look up ``barcode``; ``None`` means the service has no product."""
        url = self._build_url(barcode)
        self.logger.debug("[%s] GET %s", self.provider_id, url)
        data = self._fetch_json(url)
        if not isinstance(data, dict):
            raise ProviderError(
                self.label, "unexpected response shape"
            )
        record = self._parse(barcode, data)
        if record is None:
            self.logger.info(
                "[%s] No product for barcode %s",
                self.provider_id,
                barcode,
            )
        return record

    @abstractmethod
    def _build_url(self, barcode: str) -> str:
        """Return the lookup URL for ``barcode``."""
        ...

    @abstractmethod
    def _parse(
        self, barcode: str, data: dict[str, Any]
    ) -> ProductRecord | None:
        """Map the decoded response into a record, or ``None``."""
        ...
