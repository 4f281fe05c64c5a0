"""Application service: Update Stock use case."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from catalog.domain.exceptions import NotFoundError, ValidationError
from catalog.domain.model.product import Product, utc_now
from catalog.domain.repository.product_store import ProductStore
from catalog.domain.repository.query import eq

logger = logging.getLogger(__name__)


class UpdateStockHandler:

    def __init__(
        self,
        store: ProductStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._clock = clock

    def handle(self, product_id: int, new_stock: int) -> Product:
        """Set the stock level; negative values clamp to zero.

        Stock, status and last_modified go out in one write.
        """
        if isinstance(new_stock, bool) or not isinstance(new_stock, int):
            raise ValidationError("Stock must be an integer", fields={"stock": "must be an integer"})

        product = self._store.find_one([eq("id", product_id)])
        if product is None:
            raise NotFoundError(f"Product #{product_id} not found")

        previous_status = product.status
        product.update_stock(new_stock, self._clock())
        updated = self._store.update_by_id(
            product_id,
            {
                "stock": product.stock,
                "status": product.status,
                "last_modified": product.last_modified,
            },
        )

        if updated.status != previous_status:
            logger.info(
                "Product #%s stock=%s, status %s -> %s",
                product_id, updated.stock, previous_status.value, updated.status.value,
            )
        else:
            logger.info("Product #%s stock=%s", product_id, updated.stock)
        return updated
