# src/providers/upcitemdb_provider.py

"""Provider for the UPCitemdb free trial lookup endpoint."""

from typing import Any
from urllib.parse import quote

from src.models.product import (
    DESCRIPTION_NOT_AVAILABLE,
    NAME_NOT_AVAILABLE,
    PRICE_NOT_AVAILABLE,
    ProductRecord,
)
from src.providers.base_provider import BaseProvider, first_item, first_of


class UpcItemDbProvider(BaseProvider):
    """UPC Item DB trial plan (no key, rate limited per IP)."""

    provider_id = "upcitemdb"
    label = "UPC Item DB"

    LOOKUP_API = "https://api.upcitemdb.com/prod/trial/lookup?upc={barcode}"

    def _build_url(self, barcode: str) -> str:
        return self.LOOKUP_API.format(barcode=quote(barcode, safe=""))

    @staticmethod
    def _format_price(item: dict[str, Any]) -> str:
        """Prefer the lowest recorded price, then the first offer."""
        lowest = item.get("lowest_recorded_price")
        if lowest:
            return f"From R$ {lowest}"
        offer = first_item(item.get("offers"))
        if isinstance(offer, dict):
            return f"From R$ {offer.get('price') or 'N/A'}"
        return PRICE_NOT_AVAILABLE

    def _parse(
        self, barcode: str, data: dict[str, Any]
    ) -> ProductRecord | None:
        item = first_item(data.get("items"))
        if not isinstance(item, dict):
            return None

        offers = item.get("offers")
        return ProductRecord(
            barcode=barcode,
            name=first_of(item.get("title")) or NAME_NOT_AVAILABLE,
            description=first_of(item.get("description"))
            or DESCRIPTION_NOT_AVAILABLE,
            price=self._format_price(item),
            image=first_item(item.get("images")),
            brand=first_of(item.get("brand")),
            model=first_of(item.get("model")),
            color=first_of(item.get("color")),
            size=first_of(item.get("size")),
            weight=first_of(item.get("weight")),
            category=first_of(item.get("category")),
            offers=offers if isinstance(offers, list) else None,
            source=self.label,
        )
