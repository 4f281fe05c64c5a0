"""Unit tests for the in-process query vocabulary."""

from decimal import Decimal

from catalog.domain.model.product import Grade, Product, ProductStatus
from catalog.domain.model.value_objects import Money
from catalog.domain.repository.query import (
    SumOfProducts,
    apply_query,
    asc,
    contains,
    desc,
    eq,
    gt,
    lte,
)


def _p(strain: str, stock: int = 0, price: str = "10", **kw) -> Product:
    return Product(grade=Grade.A_GRADE, strain=strain, price=Money.of(price), stock=stock, **kw)


PRODUCTS = [
    _p("gelato", stock=5),
    _p("Blue Dream", stock=0),
    _p("Amnesia", stock=12, status=ProductStatus.COMING_SOON),
]


class TestCriteria:

    def test_eq(self):
        result = apply_query(PRODUCTS, [eq("status", ProductStatus.COMING_SOON)])
        assert [p.strain for p in result] == ["Amnesia"]

    def test_gt_and_lte_combine(self):
        result = apply_query(PRODUCTS, [gt("stock", 0), lte("stock", 5)])
        assert [p.strain for p in result] == ["gelato"]

    def test_contains_case_sensitive(self):
        assert apply_query(PRODUCTS, [contains("strain", "dream")]) == []

    def test_contains_case_insensitive(self):
        result = apply_query(PRODUCTS, [contains("strain", "dream", case_sensitive=False)])
        assert [p.strain for p in result] == ["Blue Dream"]

    def test_gt_on_none_never_matches(self):
        product = _p("x", cost_basis=None)
        assert apply_query([product], [gt("cost_basis", Money.of("0"))]) == []


class TestOrdering:

    def test_strings_sort_case_insensitively(self):
        result = apply_query(PRODUCTS, order=[asc("strain")])
        assert [p.strain for p in result] == ["Amnesia", "Blue Dream", "gelato"]

    def test_descending(self):
        result = apply_query(PRODUCTS, order=[desc("stock")])
        assert [p.stock for p in result] == [12, 5, 0]

    def test_multiple_keys(self):
        products = [_p("b", sort_order=1), _p("a", sort_order=1), _p("c", sort_order=0)]
        result = apply_query(products, order=[asc("sort_order"), asc("strain")])
        assert [p.strain for p in result] == ["c", "a", "b"]

    def test_limit(self):
        assert len(apply_query(PRODUCTS, limit=2)) == 2


class TestSumOfProducts:

    def test_price_times_stock(self):
        products = [_p("a", stock=3, price="10.50"), _p("b", stock=2, price="100")]
        assert SumOfProducts(("price", "stock")).evaluate(products) == Decimal("231.50")

    def test_empty_is_zero(self):
        assert SumOfProducts(("price", "stock")).evaluate([]) == Decimal("0")
