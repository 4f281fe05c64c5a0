"""Read-only product queries.

Filtering and ordering are delegated to the store; nothing here
mutates state.
"""

from __future__ import annotations

from decimal import Decimal

from catalog.domain.model.product import LOW_STOCK_THRESHOLD, Grade, Product, ProductStatus
from catalog.domain.repository.product_store import ProductStore
from catalog.domain.repository.query import (
    Criterion,
    SumOfProducts,
    asc,
    contains,
    eq,
    gt,
    lte,
)

BY_STRAIN = (asc("strain"),)
INVENTORY_VALUE = SumOfProducts(("price", "stock"))


def available_criteria() -> list[Criterion]:
    return [eq("status", ProductStatus.AVAILABLE), gt("stock", 0)]


def low_stock_criteria(threshold: int) -> list[Criterion]:
    return [eq("status", ProductStatus.AVAILABLE), gt("stock", 0), lte("stock", threshold)]


class ProductQueries:

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    def list_all(self) -> list[Product]:
        return self._store.find_many([], order=(asc("sort_order"), asc("strain")))

    def find_available(self) -> list[Product]:
        """AVAILABLE products with stock on hand, by strain."""
        return self._store.find_many(available_criteria(), order=BY_STRAIN)

    def find_by_grade(self, grade: Grade) -> list[Product]:
        return self._store.find_many([eq("grade", grade)], order=BY_STRAIN)

    def search_by_strain(self, term: str, case_sensitive: bool = False) -> list[Product]:
        return self._store.find_many(
            [contains("strain", term, case_sensitive=case_sensitive)], order=BY_STRAIN
        )

    def find_low_stock(self, threshold: int = LOW_STOCK_THRESHOLD) -> list[Product]:
        """AVAILABLE products with 0 < stock <= threshold, lowest stock first."""
        return self._store.find_many(low_stock_criteria(threshold), order=(asc("stock"),))

    def find_by_status(self, status: ProductStatus) -> list[Product]:
        return self._store.find_many([eq("status", status)], order=BY_STRAIN)

    def get_total_inventory_value(self) -> Decimal:
        """Sum of price x stock over AVAILABLE products; 0 when there are none."""
        return self._store.aggregate([eq("status", ProductStatus.AVAILABLE)], INVENTORY_VALUE)
