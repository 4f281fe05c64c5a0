"""Product aggregate, the single entity of the catalog.

A product carries its own stock/status state machine and a bounded
audit trail of price changes. Display fields (margin, unit label, ...)
are derived on read and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_FLOOR, Decimal
from enum import Enum
from typing import Any
from urllib.parse import quote

from catalog.domain.model.value_objects import Money, PriceHistoryEntry


class Grade(Enum):
    A_GRADE = "A-GRADE"
    B_GRADE = "B-GRADE"
    ROSIN = "ROSIN"
    VAPE = "VAPE"
    BULK = "BULK"


class ProductStatus(Enum):
    AVAILABLE = "AVAILABLE"
    COMING_SOON = "COMING SOON"
    SOLD_OUT = "SOLD OUT"


class StrainType(Enum):
    INDICA = "Indica"
    SATIVA = "Sativa"
    HYBRID = "Hybrid"
    CONCENTRATE = "Concentrate"


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
PRICE_HISTORY_LIMIT = 50
LOW_STOCK_THRESHOLD = 10
DEFAULT_MINIMUM_STOCK = 5
PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/200x200/1a1a1a/00C851?text={grade}"

_UNIT_LABELS = {
    Grade.ROSIN: "/gram",
    Grade.VAPE: "/unit",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Product:
    """Aggregate root for a catalog entry.

    The ``__init__`` does not validate: new input goes through
    ``parse_product_fields`` first, and the store reconstitutes
    persisted products directly.
    """

    grade: Grade
    strain: str
    price: Money
    id: int | None = None
    thca: Decimal | None = Decimal("0")
    cost_basis: Money | None = None
    status: ProductStatus = ProductStatus.AVAILABLE
    stock: int = 0
    type: StrainType = StrainType.HYBRID
    photo: str | None = None
    slug: str | None = None
    minimum_stock: int = DEFAULT_MINIMUM_STOCK
    tags: set[str] = field(default_factory=set)
    featured: bool = False
    sort_order: int = 0
    modified_by: str | None = None
    description: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    category: str | None = None
    lab_results: dict[str, Any] | None = None
    coa: str | None = None
    price_history: list[PriceHistoryEntry] = field(default_factory=list)
    last_modified: datetime = field(default_factory=utc_now)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    # --- State transitions ----------------------------------------------------

    def update_stock(self, new_stock: int, now: datetime | None = None) -> Product:
        """Set the stock level and derive the status from it.

        Negative input clamps to zero. Only AVAILABLE <-> SOLD OUT is
        automatic; COMING SOON is never touched.
        """
        self.stock = max(0, new_stock)

        if self.stock == 0 and self.status == ProductStatus.AVAILABLE:
            self.status = ProductStatus.SOLD_OUT
        elif self.stock > 0 and self.status == ProductStatus.SOLD_OUT:
            self.status = ProductStatus.AVAILABLE

        self.last_modified = now or utc_now()
        return self

    def record_price(self, now: datetime | None = None) -> None:
        """Append the current price and cost basis to the history.

        Only the most recent ``PRICE_HISTORY_LIMIT`` entries are kept.
        """
        self.price_history.append(
            PriceHistoryEntry(
                price=self.price,
                cost_basis=self.cost_basis,
                timestamp=now or utc_now(),
                modified_by=self.modified_by,
            )
        )
        overflow = len(self.price_history) - PRICE_HISTORY_LIMIT
        if overflow > 0:
            del self.price_history[:overflow]

    # --- Computed properties --------------------------------------------------

    @property
    def margin(self) -> int | None:
        """Profit percentage relative to cost basis, rounded half up."""
        if self.cost_basis is None or self.cost_basis.amount <= 0:
            return None
        cost = self.cost_basis.amount
        ratio = (self.price.amount - cost) / cost * 100
        return int((ratio + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))

    @property
    def unit_label(self) -> str:
        return _UNIT_LABELS.get(self.grade, "/lb")

    @property
    def display_name(self) -> str:
        return f"{self.grade.value} - {self.strain}"

    @property
    def available(self) -> bool:
        return self.status == ProductStatus.AVAILABLE and self.stock > 0

    @property
    def image_url(self) -> str:
        if self.photo and self.photo.strip():
            return self.photo
        return PLACEHOLDER_IMAGE_URL.format(grade=quote(self.grade.value, safe=""))

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
