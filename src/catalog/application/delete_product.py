"""Application service: Delete Product use case (soft delete)."""

from __future__ import annotations

import logging

from catalog.domain.repository.product_store import ProductStore

logger = logging.getLogger(__name__)


class DeleteProductHandler:

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    def handle(self, product_id: int) -> None:
        """Mark a product deleted; the row stays in storage."""
        self._store.soft_delete(product_id)
        logger.info("Soft-deleted product #%s", product_id)
