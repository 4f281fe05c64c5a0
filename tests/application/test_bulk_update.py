"""Integration tests for the BulkUpdate use case."""

import pytest

from catalog.application.bulk_update import BulkUpdateHandler
from catalog.domain.exceptions import ValidationError
from catalog.domain.model.product import Grade, Product, ProductStatus
from catalog.domain.model.value_objects import Money
from tests.fakes import FakeProductStore


def _setup():
    store = FakeProductStore(
        [
            Product(grade=Grade.A_GRADE, strain="Gelato", price=Money.of("100"), stock=4),
            Product(grade=Grade.VAPE, strain="Zkittlez", price=Money.of("25"), stock=9),
        ]
    )
    return store, BulkUpdateHandler(store)


class TestBulkUpdate:

    def test_updates_every_entry(self):
        store, handler = _setup()
        updated = handler.handle([{"id": 1, "price": "110"}, {"id": 2, "stock": 0}])

        assert [p.id for p in updated] == [1, 2]
        gelato, zkittlez = store.find_many([])
        assert gelato.price == Money.of("110")
        assert len(gelato.price_history) == 1
        assert zkittlez.status == ProductStatus.SOLD_OUT

    def test_missing_ids_are_skipped(self):
        store, handler = _setup()
        store.soft_delete(2)
        updated = handler.handle([{"id": 2, "price": "1"}, {"id": 7, "price": "1"}, {"id": 1, "featured": True}])
        assert [p.id for p in updated] == [1]

    def test_any_invalid_entry_rejects_the_batch(self):
        store, handler = _setup()
        with pytest.raises(ValidationError) as exc_info:
            handler.handle([{"id": 1, "price": "110"}, {"id": 2, "stock": -4}])

        assert "updates[1].stock" in exc_info.value.fields
        assert store.writes == 0

    @pytest.mark.parametrize("entry", [{"price": "1"}, {"id": "1"}, {"id": 0}, {"id": True}])
    def test_entry_needs_positive_integer_id(self, entry):
        _, handler = _setup()
        with pytest.raises(ValidationError) as exc_info:
            handler.handle([entry])
        assert "updates[0].id" in exc_info.value.fields

    def test_non_object_entry(self):
        _, handler = _setup()
        with pytest.raises(ValidationError) as exc_info:
            handler.handle([42])
        assert "updates[0]" in exc_info.value.fields

    def test_empty_batch(self):
        _, handler = _setup()
        assert handler.handle([]) == []
