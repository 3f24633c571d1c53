# src/providers/cosmos_provider.py

"""Provider for Bluesoft Cosmos, the Brazilian GTIN catalogue."""

from typing import Any
from urllib.parse import quote

from src.models.product import (
    DESCRIPTION_NOT_AVAILABLE,
    PRICE_NOT_AVAILABLE,
    ProductRecord,
)
from src.providers.base_provider import BaseProvider, first_of


def _nested(data: dict[str, Any], key: str, field: str) -> Any:
    """Read ``data[key][field]`` when ``data[key]`` is a dict."""
    block = data.get(key)
    if isinstance(block, dict):
        return block.get(field)
    return None


class CosmosProvider(BaseProvider):
    """Cosmos: last resort, strong on Brazilian retail products.

    Cosmos has no prices; records carry the fiscal NCM code and the GS1
    GPC category instead.
    """

    provider_id = "cosmos"
    label = "Cosmos"

    GTIN_API = "https://cosmos.bluesoft.com.br/api/gtins/{barcode}.json"

    def _build_url(self, barcode: str) -> str:
        return self.GTIN_API.format(barcode=quote(barcode, safe=""))

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        headers["User-Agent"] = self.settings.COSMOS_USER_AGENT
        if self.settings.COSMOS_TOKEN:
            headers["X-Cosmos-Token"] = self.settings.COSMOS_TOKEN
        return headers

    @staticmethod
    def _brand_name(brand: Any) -> str | None:
        """Cosmos nests the brand as ``{"name": ..., "picture": ...}``."""
        if isinstance(brand, dict):
            return first_of(brand.get("name"))
        return first_of(brand)

    def _parse(
        self, barcode: str, data: dict[str, Any]
    ) -> ProductRecord | None:
        name = first_of(data.get("description"))
        if name is None:
            return None

        gtin = data.get("gtin")
        return ProductRecord(
            barcode=barcode,
            name=name,
            description=first_of(
                _nested(data, "ncm", "description"),
                _nested(data, "gpc", "description"),
            ) or DESCRIPTION_NOT_AVAILABLE,
            price=PRICE_NOT_AVAILABLE,
            image=first_of(data.get("thumbnail")),
            brand=self._brand_name(data.get("brand")),
            gtin=str(gtin) if gtin is not None else None,
            ncm=first_of(_nested(data, "ncm", "code")),
            gpc=first_of(_nested(data, "gpc", "description")),
            net_weight=data.get("net_weight"),
            gross_weight=data.get("gross_weight"),
            width=data.get("width"),
            height=data.get("height"),
            depth=data.get("depth"),
            source=self.label,
        )
