"""Query vocabulary shared by every ProductStore implementation.

Filters are lists of field/predicate pairs, orderings are lists of
field/direction pairs. Stores that can push these down to a database
translate them; in-process stores evaluate them with ``apply_query``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import Money


class Operator(Enum):
    EQ = "eq"
    GT = "gt"
    LTE = "lte"
    CONTAINS = "contains"
    ICONTAINS = "icontains"


@dataclass(frozen=True)
class Criterion:
    field: str
    operator: Operator
    value: Any

    def matches(self, product: Product) -> bool:
        actual = getattr(product, self.field)
        if self.operator is Operator.EQ:
            return actual == self.value
        if actual is None:
            return False
        if self.operator is Operator.GT:
            return actual > self.value
        if self.operator is Operator.LTE:
            return actual <= self.value
        if self.operator is Operator.CONTAINS:
            return str(self.value) in str(actual)
        return str(self.value).casefold() in str(actual).casefold()


@dataclass(frozen=True)
class Ordering:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class SumOfProducts:
    """Aggregate expression: sum over records of the product of ``fields``.

    ``SumOfProducts(("price", "stock"))`` is the inventory value.
    """

    fields: tuple[str, ...]

    def evaluate(self, products: Iterable[Product]) -> Decimal:
        total = Decimal("0")
        for product in products:
            term = Decimal("1")
            for name in self.fields:
                value = _numeric(getattr(product, name))
                if value is None:
                    term = Decimal("0")
                    break
                term *= value
            total += term
        return total


Criteria = Sequence[Criterion]


# --- Constructors -------------------------------------------------------------


def eq(field: str, value: Any) -> Criterion:
    return Criterion(field, Operator.EQ, value)


def gt(field: str, value: Any) -> Criterion:
    return Criterion(field, Operator.GT, value)


def lte(field: str, value: Any) -> Criterion:
    return Criterion(field, Operator.LTE, value)


def contains(field: str, value: str, case_sensitive: bool = True) -> Criterion:
    operator = Operator.CONTAINS if case_sensitive else Operator.ICONTAINS
    return Criterion(field, operator, value)


def asc(field: str) -> Ordering:
    return Ordering(field)


def desc(field: str) -> Ordering:
    return Ordering(field, descending=True)


# --- In-process evaluation ----------------------------------------------------


def matches_all(product: Product, criteria: Criteria) -> bool:
    return all(criterion.matches(product) for criterion in criteria)


def apply_query(
    products: Iterable[Product],
    criteria: Criteria = (),
    order: Sequence[Ordering] = (),
    limit: int | None = None,
) -> list[Product]:
    """Filter, sort and truncate products in memory.

    Strings sort case-insensitively; ``None`` sorts after any value
    in ascending order.
    """
    result = [p for p in products if matches_all(p, criteria)]
    # Stable sort: apply keys from least to most significant.
    for ordering in reversed(order):
        result.sort(
            key=lambda p, name=ordering.field: _sort_key(getattr(p, name)),
            reverse=ordering.descending,
        )
    if limit is not None:
        result = result[:limit]
    return result


def _sort_key(value: Any) -> tuple:
    if value is None:
        return (1, "")
    if isinstance(value, str):
        return (0, value.casefold())
    if isinstance(value, Enum):
        return (0, value.value)
    return (0, value)


def _numeric(value: Any) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, Money):
        return value.amount
    return Decimal(value)
