"""JSON-file-backed implementation of ProductStore.

The whole table lives in one JSON list. Each operation is a full
read-modify-write under a process-local lock, which makes a single
call atomic within this process and nothing more. Writes go to a
sibling temp file that replaces the table in one step, so readers
never see a partially written file.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from catalog.domain.exceptions import ConstraintError, NotFoundError, StorageError
from catalog.domain.model.product import (
    DEFAULT_MINIMUM_STOCK,
    Grade,
    Product,
    ProductStatus,
    StrainType,
)
from catalog.domain.model.value_objects import Money, PriceHistoryEntry
from catalog.domain.repository.product_store import ProductStore
from catalog.domain.repository.query import Criteria, Ordering, SumOfProducts, apply_query

logger = logging.getLogger(__name__)


class JsonProductStore(ProductStore):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- ProductStore interface -----------------------------------------------

    def insert(self, product: Product) -> Product:
        with self._lock:
            records = self._load_raw()
            live = self._live(records)
            self._check_slug(live, product.slug, exclude_id=None)

            now = datetime.now(timezone.utc)
            product.id = max((raw["id"] for raw in records), default=0) + 1
            product.created_at = now
            product.updated_at = now
            product.deleted_at = None

            records.append(self._to_raw(product))
            self._persist_raw(records)
            return product

    def update_by_id(self, product_id: int, fields: Mapping[str, Any]) -> Product:
        with self._lock:
            records = self._load_raw()
            index, product = self._find_live(records, product_id)

            if "slug" in fields and fields["slug"] != product.slug:
                self._check_slug(self._live(records), fields["slug"], exclude_id=product_id)

            for name, value in fields.items():
                setattr(product, name, value)
            product.updated_at = datetime.now(timezone.utc)

            records[index] = self._to_raw(product)
            self._persist_raw(records)
            return product

    def find_one(self, criteria: Criteria) -> Product | None:
        found = self.find_many(criteria, limit=1)
        return found[0] if found else None

    def find_many(
        self,
        criteria: Criteria,
        order: Sequence[Ordering] = (),
        limit: int | None = None,
    ) -> list[Product]:
        with self._lock:
            records = self._load_raw()
        return apply_query(self._live(records), criteria, order, limit)

    def count(self, criteria: Criteria = ()) -> int:
        return len(self.find_many(criteria))

    def aggregate(self, criteria: Criteria, expression: SumOfProducts) -> Decimal:
        return expression.evaluate(self.find_many(criteria))

    def soft_delete(self, product_id: int) -> None:
        with self._lock:
            records = self._load_raw()
            index, product = self._find_live(records, product_id)
            product.deleted_at = datetime.now(timezone.utc)
            records[index] = self._to_raw(product)
            self._persist_raw(records)

    # --- Constraint helpers ---------------------------------------------------

    def _find_live(self, records: list[dict], product_id: int) -> tuple[int, Product]:
        for i, raw in enumerate(records):
            if raw["id"] == product_id and raw.get("deleted_at") is None:
                return i, self._to_domain(raw)
        raise NotFoundError(f"Product #{product_id} not found")

    @staticmethod
    def _check_slug(live: list[Product], slug: str | None, exclude_id: int | None) -> None:
        if slug is None:
            return
        for product in live:
            if product.slug == slug and product.id != exclude_id:
                raise ConstraintError(f"Slug '{slug}' is already in use")

    def _live(self, records: list[dict]) -> list[Product]:
        return [self._to_domain(raw) for raw in records if raw.get("deleted_at") is None]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "grade": product.grade.value,
            "strain": product.strain,
            "thca": _str_or_none(product.thca),
            "price": str(product.price.amount),
            "cost_basis": _money_to_raw(product.cost_basis),
            "status": product.status.value,
            "stock": product.stock,
            "type": product.type.value,
            "photo": product.photo,
            "slug": product.slug,
            "minimum_stock": product.minimum_stock,
            "tags": sorted(product.tags),
            "featured": product.featured,
            "sort_order": product.sort_order,
            "modified_by": product.modified_by,
            "description": product.description,
            "meta_title": product.meta_title,
            "meta_description": product.meta_description,
            "category": product.category,
            "lab_results": product.lab_results,
            "coa": product.coa,
            "price_history": [
                {
                    "price": str(entry.price.amount),
                    "cost_basis": _money_to_raw(entry.cost_basis),
                    "timestamp": entry.timestamp.isoformat(),
                    "modified_by": entry.modified_by,
                }
                for entry in product.price_history
            ],
            "last_modified": product.last_modified.isoformat(),
            "created_at": _iso_or_none(product.created_at),
            "updated_at": _iso_or_none(product.updated_at),
            "deleted_at": _iso_or_none(product.deleted_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            grade=Grade(raw["grade"]),
            strain=raw["strain"],
            thca=Decimal(raw["thca"]) if raw.get("thca") is not None else None,
            price=Money(Decimal(raw["price"])),
            cost_basis=_money_from_raw(raw.get("cost_basis")),
            status=ProductStatus(raw["status"]),
            stock=raw["stock"],
            type=StrainType(raw["type"]),
            photo=raw.get("photo"),
            slug=raw.get("slug"),
            minimum_stock=raw.get("minimum_stock", DEFAULT_MINIMUM_STOCK),
            tags=set(raw.get("tags") or []),
            featured=raw.get("featured", False),
            sort_order=raw.get("sort_order", 0),
            modified_by=raw.get("modified_by"),
            description=raw.get("description"),
            meta_title=raw.get("meta_title"),
            meta_description=raw.get("meta_description"),
            category=raw.get("category"),
            lab_results=raw.get("lab_results"),
            coa=raw.get("coa"),
            price_history=[
                PriceHistoryEntry(
                    price=Money(Decimal(entry["price"])),
                    cost_basis=_money_from_raw(entry.get("cost_basis")),
                    timestamp=datetime.fromisoformat(entry["timestamp"]),
                    modified_by=entry.get("modified_by"),
                )
                for entry in raw.get("price_history") or []
            ],
            last_modified=datetime.fromisoformat(raw["last_modified"]),
            created_at=_datetime_or_none(raw.get("created_at")),
            updated_at=_datetime_or_none(raw.get("updated_at")),
            deleted_at=_datetime_or_none(raw.get("deleted_at")),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Failed to read %s: %s", self._file_path, exc)
            raise StorageError(f"Could not read product data: {exc}") from exc

    def _persist_raw(self, records: list[dict]) -> None:
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp_path, self._file_path)
        except OSError as exc:
            logger.error("Failed to write %s: %s", self._file_path, exc)
            raise StorageError(f"Could not write product data: {exc}") from exc

    def _ensure_file(self) -> None:
        try:
            if not self._file_path.exists():
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                self._file_path.write_text("[]", encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to initialise %s: %s", self._file_path, exc)
            raise StorageError(f"Could not create product data file: {exc}") from exc


def _money_to_raw(money: Money | None) -> str | None:
    return str(money.amount) if money is not None else None


def _money_from_raw(value: str | None) -> Money | None:
    return Money(Decimal(value)) if value is not None else None


def _str_or_none(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def _iso_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _datetime_or_none(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value is not None else None
