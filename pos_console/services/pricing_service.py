"""Pricing Engine - derives checkout totals from cart lines and adjustments."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

from pos_console.models import CartLine, CheckoutAdjustments, CheckoutTotals, DiscountType

CENT = Decimal('0.01')
ZERO = Decimal('0')
HUNDRED = Decimal('100')


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_subtotal(lines: Iterable[CartLine]) -> Decimal:
    """Sum of quantity * unit_price over all lines."""
    subtotal = ZERO
    for line in lines:
        subtotal += line.unit_price * line.quantity
    return _money(subtotal)


def calculate_discount(subtotal: Decimal, adjustments: CheckoutAdjustments) -> Decimal:
    if adjustments.discount_type == DiscountType.PERCENTAGE:
        discount = subtotal * adjustments.discount_value / HUNDRED
    else:
        discount = adjustments.discount_value
    return _money(max(discount, ZERO))


def calculate_tax(subtotal: Decimal, adjustments: CheckoutAdjustments) -> Decimal:
    # Tax is charged on the subtotal before discount.
    return _money(max(subtotal * adjustments.tax_percentage / HUNDRED, ZERO))


def calculate_totals(lines: Iterable[CartLine], adjustments: CheckoutAdjustments) -> CheckoutTotals:
    """
    Calculate totals for the cart.

    Pure function: the same lines and adjustments always give the same
    result. Negative discount or tax contributions (from out-of-range input)
    count as zero. ``due`` is negative when the operator entered more than
    the total; the checkout rejects that case before submitting.

    Example:
        2 x 100.00, fixed discount 50, tax 10%
        -> subtotal 200.00, discount 50.00, tax 20.00, total 170.00
    """
    subtotal = calculate_subtotal(lines)
    discount_amount = calculate_discount(subtotal, adjustments)
    tax_amount = calculate_tax(subtotal, adjustments)
    total = subtotal - discount_amount + tax_amount
    due = total - _money(adjustments.paid_amount)

    return CheckoutTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        tax_amount=tax_amount,
        total=_money(total),
        due=_money(due),
    )


def line_totals(lines: Iterable[CartLine]) -> List[Dict[str, Any]]:
    """Per-line detail rows for the cart table."""
    lines_details = []
    for line in lines:
        details = line.to_dict()
        details['line_total'] = _money(line.line_total)
        lines_details.append(details)
    return lines_details
