"""Settlement calculator for rental clearances.

A pure function of the inventory reconciliation lines and two commission
rates. Every line is rounded to cents before the totals are summed; the
totals, commissions and payouts are rounded again. That order of operations is
part of the output format: records approved in the past were computed this
way and must recompute to the same cents.

Commissions are charged on tax-exclusive sales. The store earns its commission
as the payout; VAT is not shared.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence

from shibr.data.models import InventoryLineItem, InventoryMismatch, SettlementCalculation
from shibr.finance.errors import InvalidInputError, InventoryMismatchError
from shibr.finance.tax import VAT_MULTIPLIER, check_amount, check_quantity, check_rate, round2
from shibr.logging import get_logger

logger = get_logger(__name__)


def validate_line(item: InventoryLineItem) -> None:
    """Reject lines with negative, fractional or non-finite inputs."""
    check_quantity(item.initial_quantity, f"{item.product_id}.initial_quantity")
    check_quantity(item.sold_quantity, f"{item.product_id}.sold_quantity")
    check_quantity(item.remaining_quantity, f"{item.product_id}.remaining_quantity")
    check_amount(item.unit_price, f"{item.product_id}.unit_price")


def reconcile_line(item: InventoryLineItem) -> InventoryLineItem:
    """Return a copy of ``item`` with its derived sales values recomputed."""
    validate_line(item)
    sales_value = round2(item.unit_price * item.sold_quantity)
    return item.model_copy(
        update={
            "total_sales_value": sales_value,
            "total_sales_with_tax": round2(sales_value * VAT_MULTIPLIER),
        }
    )


def find_inventory_mismatches(items: Iterable[InventoryLineItem]) -> List[InventoryMismatch]:
    return [
        InventoryMismatch(
            product_id=item.product_id,
            initial_quantity=item.initial_quantity,
            sold_quantity=item.sold_quantity,
            remaining_quantity=item.remaining_quantity,
            difference=item.initial_quantity - item.sold_quantity - item.remaining_quantity,
        )
        for item in items
        if not item.is_balanced
    ]


def _check_unique_products(items: Sequence[InventoryLineItem]) -> None:
    seen = set()
    for item in items:
        if item.product_id in seen:
            raise InvalidInputError("product_id", item.product_id, "appears on more than one line")
        seen.add(item.product_id)


def calculate_settlement(
    items: Iterable[InventoryLineItem],
    platform_commission_rate: float,
    store_commission_rate: float,
    strict: bool = False,
) -> SettlementCalculation:
    """Compute the settlement for one clearance.

    Args:
        items: Inventory reconciliation lines. ``remaining_quantity`` is used as
            given, never re-derived from initial and sold quantities.
        platform_commission_rate: Platform commission on sales, in percent.
        store_commission_rate: Store commission on sales, in percent.
        strict: Raise instead of warning when a line's quantities do not add up.

    Returns:
        SettlementCalculation: Totals, commissions, payout and the reconciled
        lines. An empty ``items`` gives an all-zero result with ``is_empty`` set.

    Raises:
        InvalidInputError: A negative or non-finite price, a negative or
            fractional quantity, a duplicated product id, a non-finite rate,
            or an amount too large to round to cents.
        InventoryMismatchError: ``strict`` is set and at least one line has
            ``initial != sold + remaining``.
    """
    check_rate(platform_commission_rate, "platform_commission_rate")
    check_rate(store_commission_rate, "store_commission_rate")
    items = list(items)
    _check_unique_products(items)
    lines = [reconcile_line(item) for item in items]

    mismatches = find_inventory_mismatches(lines)
    if mismatches:
        if strict:
            raise InventoryMismatchError(mismatches)
        for mismatch in mismatches:
            logger.warning(
                f"Inventory mismatch on product {mismatch.product_id}: "
                f"initial={mismatch.initial_quantity} sold={mismatch.sold_quantity} "
                f"remaining={mismatch.remaining_quantity} (difference {mismatch.difference:+d})"
            )

    total_sales = round2(sum(line.total_sales_value for line in lines))
    total_sales_with_tax = round2(sum(line.total_sales_with_tax for line in lines))

    platform_commission = round2(total_sales * platform_commission_rate / 100)
    store_commission = round2(total_sales * store_commission_rate / 100)

    return_value = round2(sum(line.unit_price * line.remaining_quantity for line in lines))
    brand_total = round2(total_sales - platform_commission - store_commission)

    logger.debug(
        f"Settlement over {len(lines)} line(s): sales={total_sales} "
        f"platform={platform_commission} store={store_commission} brand={brand_total}"
    )

    return SettlementCalculation(
        total_sales=total_sales,
        total_sales_with_tax=total_sales_with_tax,
        total_sold_units=sum(line.sold_quantity for line in lines),
        total_returned_units=sum(line.remaining_quantity for line in lines),
        platform_commission_rate=platform_commission_rate,
        platform_commission_amount=platform_commission,
        store_commission_rate=store_commission_rate,
        store_commission_amount=store_commission,
        store_payout_amount=store_commission,
        return_inventory_value=return_value,
        brand_total_amount=brand_total,
        breakdown=lines,
        warnings=mismatches,
    )
