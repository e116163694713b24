"""Parsing of free-form numeric input coming from the POS screens."""
from decimal import Decimal, InvalidOperation

from pharmapos.exceptions import InvalidQuantityError, InvalidDiscountError, ValidationError

HUNDRED = Decimal('100')


def _to_decimal(value):
    """Decimal from int/str/Decimal, None when the input is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        value = repr(value)
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not number.is_finite():
        return None
    return number


def parse_quantity(value) -> int:
    """
    Parse a line item quantity.

    Accepts ints, integral Decimals/floats and digit strings ("3", "3.0").
    Rejects booleans, fractions, garbage and values below 1.

    Raises:
        InvalidQuantityError
    """
    qty = parse_signed_quantity(value)
    if qty < 1:
        raise InvalidQuantityError(payload={'value': str(value)})
    return qty


def parse_signed_quantity(value) -> int:
    """Integer quantity that may be zero or negative (update-item semantics)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = _to_decimal(value)
    if number is None or number != number.to_integral_value():
        raise InvalidQuantityError(payload={'value': str(value)})
    return int(number)


def parse_percent(value, field: str = 'discount', strict_upper: bool = True) -> Decimal:
    """
    Parse a discount percentage. Empty input means 0.

    Negative values are always rejected. Values above 100 are rejected when
    strict_upper, otherwise passed through for the caller to flag.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal('0')

    number = _to_decimal(value)
    if number is None:
        raise InvalidDiscountError(f"{field} must be a number", payload={'field': field})
    if number < 0:
        raise InvalidDiscountError(f"{field} cannot be negative", payload={'field': field})
    if strict_upper and number > HUNDRED:
        raise InvalidDiscountError(f"{field} cannot exceed 100%", payload={'field': field})
    return number


def parse_money(value, field: str = 'amount') -> Decimal:
    """Parse a non-negative monetary amount (no rounding applied)."""
    number = _to_decimal(value)
    if number is None:
        raise ValidationError(f"{field} must be a number", payload={'field': field})
    if number < 0:
        raise ValidationError(f"{field} cannot be negative", payload={'field': field})
    return number
