"""Order pricing: delivery fee, line totals and order totals.

Creation and item edits both price through these functions so that the two
paths never disagree on rounding or on when the delivery fee applies.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from hostel_orders.core.config import settings

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")
DELIVERY_FEE: Decimal = settings.delivery_fee.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Quantize a numeric value to two decimal places."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def delivery_fee(order_type: str) -> Decimal:
    """Flat fee for delivery orders; pickups are free."""
    return DELIVERY_FEE if order_type == "DELIVERY" else ZERO


def line_total(quantity: int, unit_price: Decimal | int | float | str) -> Decimal:
    """Return quantity times unit price rounded to cents."""
    return to_money(Decimal(quantity) * to_money(unit_price))


def subtotal(line_totals: Iterable[Decimal]) -> Decimal:
    return to_money(sum(line_totals, ZERO))


def order_total(order_subtotal: Decimal, order_type: str) -> Decimal:
    """Add the delivery fee once per order; an empty order costs nothing."""
    if order_subtotal <= 0:
        return ZERO
    return to_money(order_subtotal + delivery_fee(order_type))
