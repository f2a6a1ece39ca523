"""Tests for the order pricing calculator."""

from decimal import Decimal
from uuid import uuid4

import pytest

from app.core.errors import MinOrderAmountNotMet, PricingInvariantViolation
from app.services.order_pricing import (
    PricedLine,
    calculate_item_subtotal,
    calculate_totals,
    ensure_minimum_order,
)


def _line(price: str, quantity: int) -> PricedLine:
    return PricedLine(
        product_id=uuid4(),
        name="Item",
        image=None,
        unit_price=Decimal(price),
        quantity=quantity,
    )


class TestCalculateItemSubtotal:
    def test_sums_price_times_quantity(self):
        lines = [_line("12.50", 2), _line("3.99", 1)]
        assert calculate_item_subtotal(lines) == Decimal("28.99")

    def test_empty_is_zero(self):
        assert calculate_item_subtotal([]) == Decimal("0.00")

    def test_line_total(self):
        assert _line("8.00", 3).line_total == Decimal("24.00")


class TestEnsureMinimumOrder:
    def test_below_minimum_names_required_amount(self):
        with pytest.raises(MinOrderAmountNotMet) as exc_info:
            ensure_minimum_order(Decimal("15.00"), Decimal("20"))

        assert exc_info.value.message == "Minimum order amount is 20.00"
        assert exc_info.value.details == {"required": "20.00", "actual": "15.00"}
        assert exc_info.value.status_code == 400

    def test_exactly_minimum_passes(self):
        ensure_minimum_order(Decimal("20.00"), Decimal("20.00"))

    def test_zero_minimum_always_passes(self):
        ensure_minimum_order(Decimal("0.01"), Decimal("0"))


class TestCalculateTotals:
    def test_payable_is_subtotal_plus_fee_minus_discount(self):
        totals = calculate_totals(Decimal("30.00"), Decimal("5.00"), Decimal("8.00"))

        assert totals.item_subtotal == Decimal("30.00")
        assert totals.delivery_fee == Decimal("5.00")
        assert totals.discount_amount == Decimal("8.00")
        assert totals.payable_amount == Decimal("27.00")

    def test_no_discount_by_default(self):
        totals = calculate_totals(Decimal("30.00"), Decimal("5.00"))
        assert totals.discount_amount == Decimal("0.00")
        assert totals.payable_amount == Decimal("35.00")

    def test_full_discount_leaves_delivery_fee(self):
        totals = calculate_totals(Decimal("30.00"), Decimal("5.00"), Decimal("30.00"))
        assert totals.payable_amount == Decimal("5.00")

    def test_rounds_components_to_cents(self):
        totals = calculate_totals(Decimal("10.005"), Decimal("1"), Decimal("0.125"))
        assert totals.item_subtotal == Decimal("10.01")
        assert totals.discount_amount == Decimal("0.13")
        assert totals.payable_amount == Decimal("10.88")

    def test_discount_above_subtotal_is_rejected_not_clamped(self):
        with pytest.raises(PricingInvariantViolation):
            calculate_totals(Decimal("10.00"), Decimal("5.00"), Decimal("12.00"))

    def test_negative_component_is_rejected(self):
        with pytest.raises(PricingInvariantViolation):
            calculate_totals(Decimal("10.00"), Decimal("-1.00"))
