"""Abstract persistence contract for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON file, SQL, in-memory)
live in the infrastructure layer and are injected into the handlers.

Every operation ignores soft-deleted rows. A single call is atomic for
the row it touches; nothing spans rows.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from catalog.domain.model.product import Product
from catalog.domain.repository.query import Criteria, Ordering, SumOfProducts


class ProductStore(ABC):

    @abstractmethod
    def insert(self, product: Product) -> Product:
        """Persist a new product and return it with its generated id.

        Raises ConstraintError if the slug is already taken.
        """

    @abstractmethod
    def update_by_id(self, product_id: int, fields: Mapping[str, Any]) -> Product:
        """Overwrite the given fields of one product and return it.

        Raises NotFoundError for missing or deleted ids and
        ConstraintError if the new slug is already taken.
        """

    @abstractmethod
    def find_one(self, criteria: Criteria) -> Product | None:
        """Return the first product matching every criterion, or None."""

    @abstractmethod
    def find_many(
        self,
        criteria: Criteria,
        order: Sequence[Ordering] = (),
        limit: int | None = None,
    ) -> list[Product]:
        """Return matching products in the requested order."""

    @abstractmethod
    def count(self, criteria: Criteria = ()) -> int:
        """Return the number of matching products."""

    @abstractmethod
    def aggregate(self, criteria: Criteria, expression: SumOfProducts) -> Decimal:
        """Evaluate ``expression`` over the matching products."""

    @abstractmethod
    def soft_delete(self, product_id: int) -> None:
        """Mark a product deleted without removing its row.

        Raises NotFoundError for missing or already deleted ids.
        """
