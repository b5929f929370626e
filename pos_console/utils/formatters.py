"""
Formatting helpers for amounts shown on the POS screen and receipts.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Union


def money(value: Union[int, float, Decimal, str, None], symbol: str = '৳') -> str:
    """
    Format an amount with currency symbol, thousands separator and 2 decimals.

    Examples:
        money(1500) -> "৳1,500.00"
        money(Decimal('-20.5')) -> "-৳20.50"
        money(None) -> "-"
    """
    if value is None or value == "":
        return "-"
    try:
        num = Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        return "-"

    sign = '-' if num < 0 else ''
    return f"{sign}{symbol}{abs(num):,.2f}"


def jsonable(value: Any) -> Any:
    """Recursively convert Decimals to strings (2 places) for JSON responses."""
    if isinstance(value, Decimal):
        return f"{value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}"
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    return value
