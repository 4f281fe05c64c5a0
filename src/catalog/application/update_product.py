"""Application service: Update Product use case.

Price or cost-basis changes are appended to the price history; a new
stock level goes through the stock state machine so the status stays
consistent with it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from catalog.domain.exceptions import NotFoundError, ValidationError
from catalog.domain.model.product import Product, utc_now
from catalog.domain.repository.product_store import ProductStore
from catalog.domain.repository.query import eq
from catalog.domain.service.product_lifecycle import ProductLifecycle
from catalog.domain.validation import parse_product_fields

logger = logging.getLogger(__name__)


class UpdateProductHandler:

    def __init__(
        self,
        store: ProductStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._lifecycle = ProductLifecycle(store)
        self._clock = clock

    def handle(self, product_id: int, changes: Mapping[str, Any]) -> Product:
        if not changes:
            raise ValidationError("No fields to update")
        parsed = parse_product_fields(changes, partial=True)

        product = self._store.find_one([eq("id", product_id)])
        if product is None:
            raise NotFoundError(f"Product #{product_id} not found")

        fields = self._lifecycle.apply_update(product, parsed, self._clock())
        updated = self._store.update_by_id(product_id, fields)

        logger.info("Updated product #%s: %s", product_id, ", ".join(sorted(fields)))
        return updated
