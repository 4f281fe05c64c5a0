"""Application service: Bulk Update use case.

Validates every entry before the first write, so a malformed entry
rejects the whole batch. Each row is then written on its own; there is
no transaction across rows. Ids that do not exist (or were deleted)
are skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

from catalog.domain.exceptions import ValidationError
from catalog.domain.model.product import Product, utc_now
from catalog.domain.repository.product_store import ProductStore
from catalog.domain.repository.query import eq
from catalog.domain.service.product_lifecycle import ProductLifecycle
from catalog.domain.validation import format_field_errors, parse_product_fields

logger = logging.getLogger(__name__)


class BulkUpdateHandler:

    def __init__(
        self,
        store: ProductStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._lifecycle = ProductLifecycle(store)
        self._clock = clock

    def handle(self, updates: Sequence[Mapping[str, Any]]) -> list[Product]:
        """Apply ``[{"id": 1, "price": "90"}, ...]`` and return the updated products."""
        batch = self._validate(updates)

        updated: list[Product] = []
        for product_id, changes in batch:
            product = self._store.find_one([eq("id", product_id)])
            if product is None:
                logger.warning("Bulk update: product #%s not found, skipping", product_id)
                continue
            fields = self._lifecycle.apply_update(product, changes, self._clock())
            updated.append(self._store.update_by_id(product_id, fields))

        logger.info("Bulk update: %d of %d products updated", len(updated), len(batch))
        return updated

    @staticmethod
    def _validate(updates: Sequence[Mapping[str, Any]]) -> list[tuple[int, dict[str, Any]]]:
        errors: dict[str, str] = {}
        batch: list[tuple[int, dict[str, Any]]] = []

        for index, entry in enumerate(updates):
            prefix = f"updates[{index}]"
            if not isinstance(entry, Mapping):
                errors[prefix] = "must be an object"
                continue
            changes = dict(entry)
            product_id = changes.pop("id", None)
            if isinstance(product_id, bool) or not isinstance(product_id, int) or product_id < 1:
                errors[f"{prefix}.id"] = "must be a positive integer"
                continue
            try:
                batch.append((product_id, parse_product_fields(changes, partial=True)))
            except ValidationError as exc:
                for name, message in exc.fields.items():
                    errors[f"{prefix}.{name}"] = message

        if errors:
            raise ValidationError(format_field_errors(errors), fields=errors)
        return batch
