# src/providers/open_food_facts_provider.py

"""Provider for the Open Food Facts product API (v0)."""

from typing import Any
from urllib.parse import quote

from src.models.product import (
    DESCRIPTION_NOT_AVAILABLE,
    NAME_NOT_AVAILABLE,
    PRICE_NOT_AVAILABLE,
    ProductRecord,
)
from src.providers.base_provider import BaseProvider, first_of


class OpenFoodFactsProvider(BaseProvider):
    """Open Food Facts: food and drink, worldwide, no key needed.

    Products carry localised name fields; the first non-blank of the
    generic, English, French and Portuguese names wins.
    """

    provider_id = "open_food_facts"
    label = "Open Food Facts"

    PRODUCT_API = "https://world.openfoodfacts.org/api/v0/product/{barcode}.json"

    def _build_url(self, barcode: str) -> str:
        return self.PRODUCT_API.format(barcode=quote(barcode, safe=""))

    @staticmethod
    def _first_listed_price(prices: Any) -> Any:
        """Price of the first entry in the ``prices`` mapping, if any."""
        if not isinstance(prices, dict) or not prices:
            return None
        entry = next(iter(prices.values()))
        if isinstance(entry, dict):
            return entry.get("price")
        return None

    def _parse(
        self, barcode: str, data: dict[str, Any]
    ) -> ProductRecord | None:
        if data.get("status") != 1:
            return None
        prod = data.get("product")
        if not isinstance(prod, dict):
            return None

        price = first_of(
            prod.get("price"),
            prod.get("price_usd"),
            self._first_listed_price(prod.get("prices")),
        )
        return ProductRecord(
            barcode=barcode,
            name=first_of(
                prod.get("product_name"),
                prod.get("product_name_en"),
                prod.get("product_name_fr"),
                prod.get("product_name_pt"),
            ) or NAME_NOT_AVAILABLE,
            description=first_of(
                prod.get("ingredients_text"),
                prod.get("ingredients_text_en"),
                prod.get("generic_name"),
                prod.get("generic_name_en"),
                prod.get("categories"),
            ) or DESCRIPTION_NOT_AVAILABLE,
            price=str(price) if price is not None else PRICE_NOT_AVAILABLE,
            image=first_of(
                prod.get("image_url"),
                prod.get("image_front_url"),
                prod.get("image_front_small_url"),
            ),
            brand=first_of(prod.get("brands")),
            source=self.label,
        )
