"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import Money, PriceHistoryEntry

# Fields a wholesale buyer must not see.
INTERNAL_FIELDS = ("cost_basis", "modified_by", "price_history")


@dataclass(frozen=True)
class InventoryStatsDTO:
    total_products: int
    available_products: int
    total_value: Decimal
    low_stock_count: int
    out_of_stock_count: int


def product_to_dict(product: Product, hide_internal: bool = False) -> dict[str, Any]:
    """Serialize a product with its derived display fields.

    With ``hide_internal`` the cost basis, editor and price history
    are left out.
    """
    data: dict[str, Any] = {
        "id": product.id,
        "grade": product.grade.value,
        "strain": product.strain,
        "thca": _plain(product.thca),
        "price": _plain(product.price),
        "cost_basis": _plain(product.cost_basis),
        "status": product.status.value,
        "stock": product.stock,
        "type": product.type.value,
        "photo": product.photo,
        "slug": product.slug,
        "minimum_stock": product.minimum_stock,
        "tags": sorted(product.tags),
        "featured": product.featured,
        "sort_order": product.sort_order,
        "modified_by": product.modified_by,
        "description": product.description,
        "meta_title": product.meta_title,
        "meta_description": product.meta_description,
        "category": product.category,
        "lab_results": product.lab_results,
        "coa": product.coa,
        "price_history": [_history_entry(entry) for entry in product.price_history],
        "last_modified": _plain(product.last_modified),
        "created_at": _plain(product.created_at),
        "updated_at": _plain(product.updated_at),
        # derived
        "margin": product.margin,
        "unit_label": product.unit_label,
        "display_name": product.display_name,
        "available": product.available,
        "image_url": product.image_url,
    }
    if hide_internal:
        for name in INTERNAL_FIELDS:
            del data[name]
    return data


def _history_entry(entry: PriceHistoryEntry) -> dict[str, Any]:
    return {
        "price": _plain(entry.price),
        "cost_basis": _plain(entry.cost_basis),
        "timestamp": _plain(entry.timestamp),
        "modified_by": entry.modified_by,
    }


def _plain(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, Money):
        return str(value.amount)
    if isinstance(value, Decimal):
        return str(value)
    return value.isoformat()
