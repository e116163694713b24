"""
Formatting helpers shared by the API serializers and the exporters.
"""
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime
from typing import Union, Optional

CENT = Decimal('0.01')
INVOICE_PREFIX = 'INV-'


def money(value: Union[int, Decimal, str, None]) -> Decimal:
    """Round to two decimals, half up. Only applied at display/persistence time."""
    if value is None:
        return Decimal('0.00')
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_str(value: Union[int, Decimal, str, None]) -> str:
    """
    Money as a plain two-decimal string.

    Examples:
        money_str(Decimal('45')) -> "45.00"
        money_str(Decimal('2.005')) -> "2.01"
    """
    return f"{money(value)}"


def format_invoice_number(number: int, prefix: Optional[str] = INVOICE_PREFIX) -> str:
    """
    Invoice number zero-padded to 6 digits.

    Examples:
        format_invoice_number(12) -> "INV-000012"
        format_invoice_number(12, prefix='') -> "000012"
    """
    return f"{prefix or ''}{int(number):06d}"


def datetime_str(value: Optional[datetime]) -> str:
    """Timestamp as YYYY-MM-DD HH:MM:SS (empty when missing)."""
    if value is None:
        return ''
    return value.strftime('%Y-%m-%d %H:%M:%S')
