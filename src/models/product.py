# src/models/product.py

"""Normalized product record shared by every provider."""

from dataclasses import asdict, dataclass, fields
from typing import Any

NAME_NOT_AVAILABLE = "Name not available"
DESCRIPTION_NOT_AVAILABLE = "Description not available"
PRICE_NOT_AVAILABLE = "Price not available"

# Optional attributes shown in the detail view, in display order
_DETAIL_FIELDS: list[tuple[str, str]] = [
    ("barcode", "Barcode"),
    ("model", "Model"),
    ("color", "Color"),
    ("size", "Size"),
    ("weight", "Weight"),
    ("category", "Category"),
]


@dataclass
class ProductRecord:
    """A single product found by barcode, whatever provider answered."""

    barcode: str
    name: str = NAME_NOT_AVAILABLE
    description: str = DESCRIPTION_NOT_AVAILABLE
    price: str = PRICE_NOT_AVAILABLE
    image: str | None = None
    brand: str | None = None
    source: str = ""

    # Provider-specific extras
    model: str | None = None
    color: str | None = None
    size: str | None = None
    weight: str | None = None
    category: str | None = None
    manufacturer: str | None = None
    gtin: str | None = None
    ncm: str | None = None
    gpc: str | None = None
    net_weight: float | str | None = None
    gross_weight: float | str | None = None
    width: float | str | None = None
    height: float | str | None = None
    depth: float | str | None = None
    stores: list[dict[str, Any]] | None = None
    offers: list[dict[str, Any]] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict, leaving out unset extras."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductRecord":
        """Rebuild a record from ``to_dict`` output, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        kwargs.setdefault("barcode", "")
        return cls(**kwargs)

    def dimensions(self) -> str:
        """Format width x height x depth from whichever parts exist."""
        parts = [
            str(v) for v in (self.width, self.height, self.depth) if v
        ]
        if not parts:
            return ""
        return " x ".join(parts) + " cm"

    def details(self) -> list[tuple[str, str]]:
        """Return the ``(label, value)`` rows shown for this record."""
        rows: list[tuple[str, str]] = [("Name", self.name)]
        if self.brand:
            rows.append(("Brand", self.brand))
        rows.append(("Price", self.price))
        rows.append(("Description", self.description))
        if self.ncm:
            rows.append(("NCM", self.ncm))
        if self.gpc:
            rows.append(("Category", self.gpc))
        if self.net_weight:
            rows.append(("Net weight", str(self.net_weight)))
        if self.gross_weight:
            rows.append(("Gross weight", str(self.gross_weight)))
        dims = self.dimensions()
        if dims:
            rows.append(("Dimensions", dims))
        for attr, label in _DETAIL_FIELDS:
            value = getattr(self, attr)
            if value:
                rows.append((label, str(value)))
        rows.append(("Source", self.source))
        return rows
