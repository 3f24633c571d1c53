# src/providers/barcode_lookup_provider.py

"""Provider for the barcodelookup.com v3 products API."""

from typing import Any
from urllib.parse import quote

from src.models.product import (
    DESCRIPTION_NOT_AVAILABLE,
    NAME_NOT_AVAILABLE,
    PRICE_NOT_AVAILABLE,
    ProductRecord,
)
from src.providers.base_provider import BaseProvider, first_item, first_of


class BarcodeLookupProvider(BaseProvider):
    """Barcode Lookup: the broadest catalogue, tried first."""

    provider_id = "barcode_lookup"
    label = "Barcode Lookup"

    LOOKUP_API = (
        "https://api.barcodelookup.com/v3/products"
        "?barcode={barcode}&formatted=y&key={key}"
    )

    def _build_url(self, barcode: str) -> str:
        return self.LOOKUP_API.format(
            barcode=quote(barcode, safe=""),
            key=quote(self.settings.BARCODELOOKUP_API_KEY, safe=""),
        )

    @staticmethod
    def _format_stores(stores: Any) -> str:
        """Render ``stores`` as ``"Store: price, Store: price"``."""
        if not isinstance(stores, list) or not stores:
            return PRICE_NOT_AVAILABLE
        return ", ".join(
            f"{store.get('store_name', '')}: {store.get('price') or 'N/A'}"
            for store in stores
            if isinstance(store, dict)
        ) or PRICE_NOT_AVAILABLE

    def _parse(
        self, barcode: str, data: dict[str, Any]
    ) -> ProductRecord | None:
        item = first_item(data.get("products"))
        if not isinstance(item, dict):
            return None

        stores = item.get("stores")
        return ProductRecord(
            barcode=barcode,
            name=first_of(
                item.get("title"), item.get("product_name")
            ) or NAME_NOT_AVAILABLE,
            description=first_of(item.get("description"))
            or DESCRIPTION_NOT_AVAILABLE,
            price=self._format_stores(stores),
            image=first_item(item.get("images")),
            brand=first_of(item.get("brand")),
            model=first_of(item.get("model")),
            color=first_of(item.get("color")),
            size=first_of(item.get("size")),
            weight=first_of(item.get("weight")),
            category=first_of(item.get("category")),
            manufacturer=first_of(item.get("manufacturer")),
            stores=stores if isinstance(stores, list) else None,
            source=self.label,
        )
