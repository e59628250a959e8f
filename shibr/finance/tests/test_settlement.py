import math

import pytest
from pydantic import ValidationError

from shibr.data.models import InventoryLineItem
from shibr.finance.errors import InvalidInputError, InventoryMismatchError
from shibr.finance.settlement import calculate_settlement, find_inventory_mismatches, reconcile_line
from shibr.finance.tax import round2


def line(product_id="P1", unit_price=100.0, sold=5, remaining=5, initial=None, **kwargs):
    return InventoryLineItem(
        product_id=product_id,
        product_name=f"Product {product_id}",
        initial_quantity=sold + remaining if initial is None else initial,
        sold_quantity=sold,
        remaining_quantity=remaining,
        unit_price=unit_price,
        **kwargs,
    )


def test_reference_settlement():
    """One line, 8% platform and 10% store commission."""
    result = calculate_settlement([line(initial=10)], platform_commission_rate=8, store_commission_rate=10)

    assert result.total_sales == 500
    assert result.total_sales_with_tax == 575
    assert result.platform_commission_amount == 40
    assert result.store_commission_amount == 50
    assert result.store_payout_amount == 50
    assert result.brand_total_amount == 410
    assert result.return_inventory_value == 500
    assert result.total_sold_units == 5
    assert result.total_returned_units == 5
    assert result.vat_amount == 75
    assert result.platform_commission_rate == 8
    assert result.store_commission_rate == 10
    assert result.warnings == []
    assert not result.is_empty


def test_empty_clearance_is_all_zero():
    result = calculate_settlement([], platform_commission_rate=8, store_commission_rate=10)

    assert result.is_empty
    assert result.breakdown == []
    for field in (
        "total_sales", "total_sales_with_tax", "platform_commission_amount",
        "store_commission_amount", "store_payout_amount", "return_inventory_value",
        "brand_total_amount", "total_sold_units", "total_returned_units",
    ):
        assert getattr(result, field) == 0, field


def test_derived_line_values_are_recomputed():
    stale = line(total_sales_value=999.0, total_sales_with_tax=1.0)
    result = calculate_settlement([stale], 8, 10)
    assert result.breakdown[0].total_sales_value == 500
    assert result.breakdown[0].total_sales_with_tax == 575


def test_reconcile_line_leaves_input_untouched():
    original = line(unit_price=19.99, sold=3)
    reconciled = reconcile_line(original)
    assert reconciled.total_sales_value == 59.97
    assert original.total_sales_value == 0.0


def test_tax_inclusive_total_sums_rounded_lines():
    """Four 0.01 lines: per-line VAT rounds each to 0.01, so the sum stays 0.04
    even though 0.04 * 1.15 would round to 0.05."""
    items = [line(product_id=f"P{i}", unit_price=0.01, sold=1, remaining=0) for i in range(4)]
    result = calculate_settlement(items, 8, 10)

    assert result.total_sales == 0.04
    assert result.total_sales_with_tax == 0.04
    assert round2(result.total_sales * 1.15) == 0.05


def test_calculation_is_idempotent():
    items = [line("P1", 12.35, 7, 3), line("P2", 99.99, 1, 0), line("P3", 0.5, 0, 12)]
    first = calculate_settlement(items, 8, 10)
    second = calculate_settlement(items, 8, 10)
    assert first.model_dump_json() == second.model_dump_json()


def test_selling_more_never_lowers_totals():
    previous = None
    for sold in range(0, 25):
        result = calculate_settlement([line(unit_price=19.99, sold=sold, remaining=0)], 8, 10)
        if previous is not None:
            assert result.total_sales >= previous.total_sales
            assert result.platform_commission_amount >= previous.platform_commission_amount
            assert result.store_commission_amount >= previous.store_commission_amount
        previous = result


@pytest.mark.parametrize("unit_price,sold", [(33.33, 3), (19.99, 7), (0.01, 1), (1234.56, 13)])
def test_commission_rate_boundaries(unit_price, sold):
    result = calculate_settlement([line(unit_price=unit_price, sold=sold, remaining=0)], 0, 100)
    assert result.platform_commission_amount == 0
    assert result.store_commission_amount == result.total_sales
    assert result.brand_total_amount == 0


def test_rates_need_not_sum_to_hundred():
    result = calculate_settlement([line()], platform_commission_rate=22, store_commission_rate=10)
    assert result.platform_commission_amount == 110
    assert result.store_commission_amount == 50
    assert result.brand_total_amount == 340


def test_mismatch_is_reported_and_remaining_used_as_given():
    """initial 10 but only 3 sold + 5 remaining: two units unaccounted for."""
    result = calculate_settlement([line(sold=3, remaining=5, initial=10)], 8, 10)

    assert len(result.warnings) == 1
    warning = result.warnings[0]
    assert warning.product_id == "P1"
    assert warning.difference == 2
    assert result.total_returned_units == 5
    assert result.return_inventory_value == 500


def test_mismatch_rejected_in_strict_mode():
    items = [line("P1", sold=3, remaining=5, initial=10), line("P2"), line("P3", sold=4, remaining=4, initial=7)]
    with pytest.raises(InventoryMismatchError) as exc_info:
        calculate_settlement(items, 8, 10, strict=True)
    assert [m.product_id for m in exc_info.value.mismatches] == ["P1", "P3"]
    assert exc_info.value.mismatches[1].difference == -1


def test_find_inventory_mismatches_ignores_balanced_lines():
    assert find_inventory_mismatches([line(), line("P2", sold=0, remaining=3)]) == []


@pytest.mark.parametrize(
    "bad_line",
    [
        line(unit_price=-1),
        line(unit_price=math.nan),
        line(unit_price=math.inf),
        line(sold=-1, remaining=5, initial=4),
        line(sold=1, remaining=-1, initial=0),
        line(initial=-3),
    ],
)
def test_invalid_lines_are_rejected(bad_line):
    with pytest.raises(InvalidInputError):
        calculate_settlement([bad_line], 8, 10)


def test_duplicate_products_are_rejected():
    with pytest.raises(InvalidInputError, match="P1"):
        calculate_settlement([line("P1"), line("P1", unit_price=5)], 8, 10)


def test_settlement_is_immutable():
    result = calculate_settlement([line()], 8, 10)
    with pytest.raises(ValidationError):
        result.total_sales = 0


@pytest.mark.parametrize("rate", [math.nan, math.inf, -math.inf, "8", None, True])
def test_non_finite_rates_are_rejected(rate):
    with pytest.raises(InvalidInputError, match="platform_commission_rate"):
        calculate_settlement([line()], platform_commission_rate=rate, store_commission_rate=10)
    with pytest.raises(InvalidInputError, match="store_commission_rate"):
        calculate_settlement([line()], platform_commission_rate=8, store_commission_rate=rate)


def test_rates_outside_percent_range_are_accepted():
    result = calculate_settlement([line()], platform_commission_rate=150, store_commission_rate=-5)
    assert result.platform_commission_amount == 750
    assert result.store_commission_amount == -25


def test_overflowing_price_is_rejected():
    with pytest.raises(InvalidInputError):
        calculate_settlement([line(unit_price=1e307)], 8, 10)
