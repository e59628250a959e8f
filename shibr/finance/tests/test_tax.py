import math

import pytest

from shibr.data.models import BasePriceItem, InclusivePriceItem, TaxTotals
from shibr.finance.errors import InvalidInputError
from shibr.finance.tax import (
    cart_totals_from_inclusive_prices,
    order_totals_from_base_prices,
    price_with_tax,
    price_without_tax,
    round2,
    tax_rate_percentage,
)


def test_round2_rounds_half_up():
    """0.125 is exact in binary, so the half must round up (not to even)."""
    assert round2(0.125) == 0.13
    assert round(0.125, 2) == 0.12


def test_round2_works_on_the_float_product():
    """Rounding looks at the float product, like Math.round(n * 100) / 100."""
    assert round2(2.675) == 2.68
    assert round2(1.005) == 1.0
    assert round2(1.15 * 100) == 115.0


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf, 1e307])
def test_round2_rejects_amounts_without_cents(bad):
    with pytest.raises(InvalidInputError):
        round2(bad)


def test_price_with_tax_rejects_overflow():
    with pytest.raises(InvalidInputError):
        price_with_tax(1e307)


def test_price_with_tax():
    assert price_with_tax(100) == 115.0
    assert price_with_tax(0) == 0.0
    assert price_with_tax(20) == 23.0


@pytest.mark.parametrize("bad", [-1, -0.01, math.inf, math.nan, "10", None, True])
def test_price_with_tax_rejects_invalid_input(bad):
    with pytest.raises(InvalidInputError):
        price_with_tax(bad)


def test_invalid_input_error_is_a_value_error():
    with pytest.raises(ValueError, match="base_price"):
        price_with_tax(-5)


def test_round_trip_through_inclusive_price_is_lossy():
    """Both directions round to cents; 0.04 comes back as 0.03."""
    assert price_without_tax(0.04) == 0.03
    assert price_with_tax(price_without_tax(0.04)) == 0.03
    assert price_with_tax(price_without_tax(115)) == 115.0


def test_order_totals_empty():
    assert order_totals_from_base_prices([]) == TaxTotals(subtotal=0, tax=0, total=0)


def test_order_totals_single_line():
    totals = order_totals_from_base_prices([BasePriceItem(base_price=10, quantity=3)])
    assert totals == TaxTotals(subtotal=30, tax=4.5, total=34.5)


def test_order_totals_round_each_line_before_summing():
    """Two half-cent lines round to a cent each; rounding the sum would give 0.01."""
    items = [BasePriceItem(base_price=0.005, quantity=1), BasePriceItem(base_price=0.005, quantity=1)]
    totals = order_totals_from_base_prices(items)
    assert totals.subtotal == 0.02
    assert round2(0.005 + 0.005) == 0.01


def test_order_totals_reject_negative_quantity():
    with pytest.raises(InvalidInputError, match="quantity"):
        order_totals_from_base_prices([BasePriceItem(base_price=10, quantity=-1)])


def test_cart_totals_from_inclusive_prices():
    totals = cart_totals_from_inclusive_prices([InclusivePriceItem(inclusive_price=115, quantity=1)])
    assert totals == TaxTotals(subtotal=100, tax=15, total=115)


def test_cart_totals_multiple_lines():
    items = [
        InclusivePriceItem(inclusive_price=57.5, quantity=2),
        InclusivePriceItem(inclusive_price=0, quantity=4),
    ]
    totals = cart_totals_from_inclusive_prices(items)
    assert totals == TaxTotals(subtotal=100, tax=15, total=115)


def test_cart_totals_reject_negative_price():
    with pytest.raises(InvalidInputError, match="inclusive_price"):
        cart_totals_from_inclusive_prices([InclusivePriceItem(inclusive_price=-1, quantity=1)])


def test_tax_rate_percentage():
    assert tax_rate_percentage() == "15%"
