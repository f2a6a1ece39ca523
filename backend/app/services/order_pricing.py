"""Order pricing: pure functions composing subtotal, delivery fee and discount."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from app.core.errors import MinOrderAmountNotMet, PricingInvariantViolation
from app.models.shared import round_money

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PricedLine:
    """A validated cart line with the catalog data copied at order time."""

    product_id: UUID
    name: str
    image: str | None
    unit_price: Decimal
    quantity: int
    options: list[str] = field(default_factory=list)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class OrderTotals:
    """Price breakdown of an order."""

    item_subtotal: Decimal
    delivery_fee: Decimal
    discount_amount: Decimal
    payable_amount: Decimal


def calculate_item_subtotal(lines: Iterable[PricedLine]) -> Decimal:
    """Sum ``unit_price * quantity`` over all lines."""
    return round_money(sum((line.line_total for line in lines), ZERO))


def ensure_minimum_order(item_subtotal: Decimal, min_order_amount: Decimal) -> None:
    """Reject a pre-discount subtotal below the merchant's minimum.

    Raises:
        MinOrderAmountNotMet: If ``item_subtotal < min_order_amount``.
    """
    required = round_money(min_order_amount)
    if item_subtotal < required:
        raise MinOrderAmountNotMet(required=required, actual=item_subtotal)


def calculate_totals(
    item_subtotal: Decimal,
    delivery_fee: Decimal,
    discount_amount: Decimal = ZERO,
) -> OrderTotals:
    """Compose the final breakdown.

    ``payable = subtotal + delivery_fee - discount``. A discount above the
    subtotal or a negative payable amount means an upstream clamp is broken;
    both raise instead of being corrected here.

    Raises:
        PricingInvariantViolation: If any invariant does not hold.
    """
    subtotal = round_money(item_subtotal)
    fee = round_money(delivery_fee)
    discount = round_money(discount_amount)

    if subtotal < 0 or fee < 0 or discount < 0:
        raise PricingInvariantViolation(
            f"Negative price component: subtotal={subtotal} fee={fee} discount={discount}"
        )
    if discount > subtotal:
        raise PricingInvariantViolation(f"Discount {discount} exceeds subtotal {subtotal}")

    payable = subtotal + fee - discount
    if payable < 0:
        raise PricingInvariantViolation(f"Payable amount {payable} is negative")

    return OrderTotals(
        item_subtotal=subtotal,
        delivery_fee=fee,
        discount_amount=discount,
        payable_amount=payable,
    )
