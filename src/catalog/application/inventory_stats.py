"""Application service: Inventory Stats use case (query).

The four sub-queries are independent and run concurrently. They are
not a consistent snapshot: a write landing between them shows up in
some numbers and not others.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from catalog.application.dto import InventoryStatsDTO
from catalog.application.product_queries import (
    ProductQueries,
    available_criteria,
    low_stock_criteria,
)
from catalog.domain.model.product import LOW_STOCK_THRESHOLD
from catalog.domain.repository.product_store import ProductStore


class InventoryStatsHandler:

    def __init__(self, store: ProductStore, max_workers: int = 4) -> None:
        self._store = store
        self._queries = ProductQueries(store)
        self._max_workers = max_workers

    def handle(self) -> InventoryStatsDTO:
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            total = pool.submit(self._store.count, [])
            available = pool.submit(self._store.count, available_criteria())
            value = pool.submit(self._queries.get_total_inventory_value)
            low_stock = pool.submit(self._store.count, low_stock_criteria(LOW_STOCK_THRESHOLD))

            total_products = total.result()
            available_products = available.result()

            return InventoryStatsDTO(
                total_products=total_products,
                available_products=available_products,
                total_value=value.result(),
                low_stock_count=low_stock.result(),
                out_of_stock_count=total_products - available_products,
            )
