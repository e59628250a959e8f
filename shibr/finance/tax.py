"""Saudi VAT (15%) helpers.

Two pricing regimes exist and are kept as separate entry points:

* orders and settlements store tax-exclusive prices and add VAT on top
  (``order_totals_from_base_prices``);
* the storefront cart shows tax-inclusive prices and backs VAT out of the
  total (``cart_totals_from_inclusive_prices``).

Both round every line to cents before summing. Merging them, or rounding only
the final sum, changes cents on historical records.
"""
from __future__ import annotations

import math
from numbers import Real
from typing import Iterable

from shibr.data.models import BasePriceItem, InclusivePriceItem, TaxTotals
from shibr.finance.errors import InvalidInputError
from shibr.finance.rounding import round2

TAX_RATE = 0.15
VAT_MULTIPLIER = 1 + TAX_RATE

__all__ = [
    "TAX_RATE",
    "VAT_MULTIPLIER",
    "round2",
    "check_amount",
    "check_quantity",
    "check_rate",
    "price_with_tax",
    "price_without_tax",
    "order_totals_from_base_prices",
    "cart_totals_from_inclusive_prices",
    "tax_rate_percentage",
]


def check_amount(value, field: str) -> float:
    """Return ``value`` as a float, rejecting negative or non-finite amounts."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(field, value, "not a number")
    if not math.isfinite(value):
        raise InvalidInputError(field, value, "not finite")
    if value < 0:
        raise InvalidInputError(field, value, "must not be negative")
    return float(value)


def check_rate(value, field: str) -> float:
    """Return ``value`` as a float, rejecting non-finite rates. The range is not checked."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(field, value, "not a number")
    if not math.isfinite(value):
        raise InvalidInputError(field, value, "not finite")
    return float(value)


def check_quantity(value, field: str) -> int:
    """Return ``value`` as an int, rejecting negative or fractional quantities."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(field, value, "not a whole number")
    if value < 0:
        raise InvalidInputError(field, value, "must not be negative")
    return value


def price_with_tax(base_price: float) -> float:
    """Tax-inclusive display price for a tax-exclusive base price."""
    return round2(check_amount(base_price, "base_price") * VAT_MULTIPLIER)


def price_without_tax(inclusive_price: float) -> float:
    """Tax-exclusive price backed out of an inclusive one.

    Not an exact inverse of ``price_with_tax``: both directions round to
    cents, so a round trip can drift by a cent.
    """
    return round2(check_amount(inclusive_price, "inclusive_price") / VAT_MULTIPLIER)


def order_totals_from_base_prices(items: Iterable[BasePriceItem]) -> TaxTotals:
    subtotal = 0.0
    for item in items:
        base_price = check_amount(item.base_price, "base_price")
        quantity = check_quantity(item.quantity, "quantity")
        subtotal += round2(base_price * quantity)

    tax = round2(subtotal * TAX_RATE)
    total = round2(subtotal + tax)
    return TaxTotals(subtotal=round2(subtotal), tax=tax, total=total)


def cart_totals_from_inclusive_prices(items: Iterable[InclusivePriceItem]) -> TaxTotals:
    total = 0.0
    for item in items:
        inclusive_price = check_amount(item.inclusive_price, "inclusive_price")
        quantity = check_quantity(item.quantity, "quantity")
        total += round2(inclusive_price * quantity)

    subtotal = price_without_tax(total)
    tax = round2(total - subtotal)
    return TaxTotals(subtotal=subtotal, tax=tax, total=round2(total))


def tax_rate_percentage() -> str:
    return f"{round(TAX_RATE * 100)}%"
