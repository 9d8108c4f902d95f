"""Static catalog data."""

from __future__ import annotations

from foodstand.constant import PRODUCTS
from foodstand.models import CatalogItem

CATALOG: list[CatalogItem] = [
    CatalogItem(item_id=str(row["id"]), name=str(row["name"]), unit_price=int(row["price"]))
    for row in PRODUCTS
]

CATALOG_BY_ID: dict[str, CatalogItem] = {item.item_id: item for item in CATALOG}


def catalog_item(item_id: str) -> CatalogItem | None:
    """Look up a catalog item by id."""
    return CATALOG_BY_ID.get(item_id)
