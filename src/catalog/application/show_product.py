"""Application service: Show Product use case (query)."""

from __future__ import annotations

from catalog.domain.exceptions import NotFoundError
from catalog.domain.model.product import Product
from catalog.domain.repository.product_store import ProductStore
from catalog.domain.repository.query import eq


class ShowProductHandler:

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    def handle(self, product_id: int) -> Product:
        product = self._store.find_one([eq("id", product_id)])
        if product is None:
            raise NotFoundError(f"Product #{product_id} not found")
        return product
