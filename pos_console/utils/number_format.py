"""Parsing of numeric form/JSON inputs of the POS screen."""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

# 1234, 1234.5, 1,234.56 (thousands separator optional)
AMOUNT_PATTERN = re.compile(r"^(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?$")


def parse_amount(value, field: str = 'Amount') -> Decimal:
    """
    Parse a non-negative monetary/percentage input to Decimal (2 places).

    Accepts ints, floats, Decimals and strings such as "1,234.50".
    Empty input (None or "") is zero, like an untouched number box.

    Raises:
        ValueError: if the value is not a number or is negative.
    """
    if value is None:
        return Decimal('0.00')

    if isinstance(value, bool):
        raise ValueError(f'{field} must be a number')

    if isinstance(value, (int, float, Decimal)):
        raw = str(value)
    else:
        raw = str(value).strip()
        if not raw:
            return Decimal('0.00')
        if raw.startswith('-'):
            raise ValueError(f'{field} cannot be negative')
        if not AMOUNT_PATTERN.match(raw):
            raise ValueError(f'{field} must be a number')
        raw = raw.replace(',', '')

    try:
        decimal_value = Decimal(raw)
    except (InvalidOperation, ValueError):
        raise ValueError(f'{field} must be a number')

    if not decimal_value.is_finite():
        raise ValueError(f'{field} must be a number')
    if decimal_value < 0:
        raise ValueError(f'{field} cannot be negative')

    return decimal_value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def parse_quantity(value) -> int:
    """
    Parse a cart quantity. Zero and negatives are allowed (they remove the line).

    Raises:
        ValueError: if the value is not a whole number.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError('Quantity must be a whole number')
    if isinstance(value, int):
        return value
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError('Quantity must be a whole number')
    if not number.is_finite() or number != number.to_integral_value():
        raise ValueError('Quantity must be a whole number')
    return int(number)
