"""Unit tests for domain value objects."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from catalog.domain.exceptions import ValidationError
from catalog.domain.model.value_objects import Money, PriceHistoryEntry


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")

    def test_of_factory_from_string(self):
        m = Money.of("25.99")
        assert m.amount == Decimal("25.99")

    def test_of_factory_from_int(self):
        m = Money.of(10)
        assert m.amount == Decimal("10")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten dollars")

    def test_of_factory_rejects_bool(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of(True)

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_non_finite_amount_rejected(self):
        with pytest.raises(ValidationError, match="finite"):
            Money.of("NaN")

    def test_zero_is_allowed_and_falsy(self):
        assert not Money.of("0")
        assert Money.of("0.01")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"
        assert str(Money.of("9.5")) == "$9.50"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") > Money.of("5")
        assert Money.of("10") >= Money.of("10")
        assert Money.of("10") <= Money.of("10")


# ── PriceHistoryEntry ────────────────────────────────────────────────────────


class TestPriceHistoryEntry:

    def test_is_immutable(self):
        entry = PriceHistoryEntry(
            price=Money.of("100"),
            cost_basis=Money.of("80"),
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        with pytest.raises(AttributeError):
            entry.price = Money.of("1")  # type: ignore[misc]

    def test_editor_defaults_to_none(self):
        entry = PriceHistoryEntry(
            price=Money.of("100"),
            cost_basis=None,
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert entry.modified_by is None
