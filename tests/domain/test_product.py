"""Unit tests for the Product aggregate: stock state machine, price
history and derived display fields."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from catalog.domain.model.product import (
    PRICE_HISTORY_LIMIT,
    Grade,
    Product,
    ProductStatus,
)
from catalog.domain.model.value_objects import Money

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _make_product(**overrides) -> Product:
    """Helper to build a valid product."""
    fields = {
        "grade": Grade.A_GRADE,
        "strain": "Blue Dream",
        "price": Money.of("100"),
    }
    fields.update(overrides)
    return Product(**fields)


class TestUpdateStock:

    @pytest.mark.parametrize("new_stock, expected", [(-5, 0), (-1, 0), (0, 0), (1, 1), (250, 250)])
    def test_stock_is_clamped_to_zero(self, new_stock, expected):
        product = _make_product(stock=10)
        product.update_stock(new_stock, NOW)
        assert product.stock == expected

    def test_available_goes_sold_out_at_zero(self):
        product = _make_product(stock=3)
        product.update_stock(0, NOW)
        assert product.status == ProductStatus.SOLD_OUT

    def test_negative_stock_also_sells_out(self):
        product = _make_product(stock=3)
        product.update_stock(-2, NOW)
        assert product.stock == 0
        assert product.status == ProductStatus.SOLD_OUT

    def test_sold_out_returns_to_available_when_restocked(self):
        product = _make_product(stock=0, status=ProductStatus.SOLD_OUT)
        product.update_stock(12, NOW)
        assert product.status == ProductStatus.AVAILABLE

    @pytest.mark.parametrize("new_stock", [-3, 0, 7])
    def test_coming_soon_is_never_changed(self, new_stock):
        product = _make_product(stock=4, status=ProductStatus.COMING_SOON)
        product.update_stock(new_stock, NOW)
        assert product.status == ProductStatus.COMING_SOON

    def test_sold_out_stays_sold_out_at_zero(self):
        product = _make_product(stock=0, status=ProductStatus.SOLD_OUT)
        product.update_stock(0, NOW)
        assert product.status == ProductStatus.SOLD_OUT

    def test_refreshes_last_modified(self):
        product = _make_product(last_modified=NOW - timedelta(days=3))
        product.update_stock(5, NOW)
        assert product.last_modified == NOW

    def test_returns_the_product(self):
        product = _make_product()
        assert product.update_stock(5, NOW) is product


class TestPriceHistory:

    def test_record_appends_current_price(self):
        product = _make_product(cost_basis=Money.of("80"), modified_by="ops@fadedskies.com")
        product.record_price(NOW)

        entry = product.price_history[-1]
        assert entry.price == Money.of("100")
        assert entry.cost_basis == Money.of("80")
        assert entry.timestamp == NOW
        assert entry.modified_by == "ops@fadedskies.com"

    def test_history_is_bounded_fifo(self):
        product = _make_product()
        for i in range(PRICE_HISTORY_LIMIT + 15):
            product.price = Money.of(i)
            product.record_price(NOW + timedelta(minutes=i))

        assert len(product.price_history) == PRICE_HISTORY_LIMIT
        # The 15 oldest entries were dropped.
        assert product.price_history[0].price == Money.of(15)
        assert product.price_history[-1].price == Money.of(PRICE_HISTORY_LIMIT + 14)


class TestDerivedFields:

    def test_margin(self):
        product = _make_product(price=Money.of("100"), cost_basis=Money.of("80"))
        assert product.margin == 25

    @pytest.mark.parametrize("cost_basis", [None, Money.of("0")])
    def test_margin_is_none_without_positive_cost(self, cost_basis):
        product = _make_product(cost_basis=cost_basis)
        assert product.margin is None

    def test_margin_rounds_half_up(self):
        # (101 - 200) / 200 * 100 = -49.5 -> -49
        product = _make_product(price=Money.of("101"), cost_basis=Money.of("200"))
        assert product.margin == -49
        # (2.01 - 2) / 2 * 100 = 0.5 -> 1
        product = _make_product(price=Money.of("2.01"), cost_basis=Money.of("2"))
        assert product.margin == 1

    @pytest.mark.parametrize(
        "grade, label",
        [
            (Grade.ROSIN, "/gram"),
            (Grade.VAPE, "/unit"),
            (Grade.A_GRADE, "/lb"),
            (Grade.B_GRADE, "/lb"),
            (Grade.BULK, "/lb"),
        ],
    )
    def test_unit_label(self, grade, label):
        assert _make_product(grade=grade).unit_label == label

    def test_display_name(self):
        product = _make_product(grade=Grade.B_GRADE, strain="Gelato")
        assert product.display_name == "B-GRADE - Gelato"

    def test_available_needs_status_and_stock(self):
        assert _make_product(stock=3).available
        assert not _make_product(stock=0).available
        assert not _make_product(stock=3, status=ProductStatus.COMING_SOON).available

    def test_image_url_uses_photo(self):
        product = _make_product(photo="https://cdn.example.com/p.jpg")
        assert product.image_url == "https://cdn.example.com/p.jpg"

    @pytest.mark.parametrize("photo", [None, "", "   "])
    def test_image_url_placeholder_by_grade(self, photo):
        product = _make_product(grade=Grade.A_GRADE, photo=photo)
        assert product.image_url == (
            "https://via.placeholder.com/200x200/1a1a1a/00C851?text=A-GRADE"
        )

    def test_defaults(self):
        product = _make_product()
        assert product.status == ProductStatus.AVAILABLE
        assert product.stock == 0
        assert product.minimum_stock == 5
        assert product.thca == Decimal("0")
        assert product.tags == set()
        assert not product.is_deleted
