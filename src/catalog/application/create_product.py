"""Application service: Create Product use case."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from catalog.domain.model.product import Product, utc_now
from catalog.domain.repository.product_store import ProductStore
from catalog.domain.service.product_lifecycle import ProductLifecycle
from catalog.domain.validation import parse_product_fields

logger = logging.getLogger(__name__)


class CreateProductHandler:

    def __init__(
        self,
        store: ProductStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._lifecycle = ProductLifecycle(store)
        self._clock = clock

    def handle(self, fields: Mapping[str, Any]) -> Product:
        """Add a new product to the catalog.

        Steps:
        1. Validate every field (nothing is written on failure).
        2. Derive the slug and seed the price history.
        3. Insert and return the stored product with its id.
        """
        parsed = parse_product_fields(fields)
        # Blank optional input falls back to the product defaults.
        product = Product(**{name: value for name, value in parsed.items() if value is not None})

        self._lifecycle.prepare_for_insert(product, self._clock())
        saved = self._store.insert(product)

        logger.info("Created product #%s %r (slug=%s)", saved.id, saved.strain, saved.slug)
        return saved
