"""Domain service: Product Lifecycle.

The steps that run around every product write, invoked explicitly by
the application handlers instead of as implicit ORM callbacks:

  before insert: derive a unique slug, seed the price history
  before update: apply changes, route stock through ``update_stock``,
                 record price changes, refresh ``last_modified``

Slug uniqueness is a read-then-write check with no locking. Two
concurrent inserts deriving the same slug can both pass it; the store's
own unique check then rejects the second with ConstraintError.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from catalog.domain.model.product import Product
from catalog.domain.repository.product_store import ProductStore
from catalog.domain.repository.query import eq

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_FALLBACK_SLUG = "product"


def derive_slug(strain: str) -> str:
    """'OG Kush #1!!' -> 'og-kush-1'"""
    return _NON_ALNUM.sub("-", strain.lower()).strip("-")


class ProductLifecycle:

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    def prepare_for_insert(self, product: Product, now: datetime) -> None:
        if not product.slug:
            product.slug = self._unique_slug(derive_slug(product.strain) or _FALLBACK_SLUG, now)

        if product.price and product.cost_basis:
            product.price_history = []
            product.record_price(now)

        product.last_modified = now

    def apply_update(
        self,
        product: Product,
        changes: Mapping[str, Any],
        now: datetime,
    ) -> dict[str, Any]:
        """Apply already-validated changes to ``product``.

        Returns the fields that must be written back to the store.
        """
        changes = dict(changes)
        new_stock = changes.pop("stock", None)
        old_price, old_cost = product.price, product.cost_basis

        for name, value in changes.items():
            setattr(product, name, value)
        written = set(changes)

        if new_stock is not None:
            product.update_stock(new_stock, now)
            written |= {"stock", "status"}

        if product.price != old_price or product.cost_basis != old_cost:
            product.record_price(now)
            written.add("price_history")

        product.last_modified = now
        written.add("last_modified")

        return {name: getattr(product, name) for name in written}

    # --- Internal helpers -----------------------------------------------------

    def _unique_slug(self, slug: str, now: datetime) -> str:
        if self._store.find_one([eq("slug", slug)]) is None:
            return slug
        disambiguated = f"{slug}-{int(now.timestamp() * 1000)}"
        logger.warning("Slug %r already taken, using %r", slug, disambiguated)
        return disambiguated
