"""
Pricing engine - pure computation of invoice totals.

grossTotal is the sum of undiscounted line totals; per-item discounts only
show up in each line's net and in items_net_total. The invoice-level
discount is applied to grossTotal.

Line figures stay unrounded. The invoice totals are settled in cents: the
discount amount is rounded once (half up) and the net total is derived
from the rounded figures, so net_total == gross_total - discount_amount
holds for every preview, stored invoice and receipt.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from pharmapos.exceptions import InvalidDiscountError
from pharmapos.utils.formatters import money, money_str

logger = logging.getLogger(__name__)

HUNDRED = Decimal('100')
ZERO = Decimal('0')
DISCOUNT_ABOVE_100 = 'DISCOUNT_ABOVE_100'


@dataclass(frozen=True)
class LinePricing:
    """Computed figures for one line item."""
    medicine_id: int
    medicine_name: Optional[str]
    qty: int
    unit_sales_price: Decimal
    discount_percent: Decimal
    discounted_unit_price: Decimal
    line_gross: Decimal
    line_discount: Decimal
    line_net: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            'medicine_id': self.medicine_id,
            'medicine_name': self.medicine_name,
            'qty': self.qty,
            'unit_sales_price': money_str(self.unit_sales_price),
            'discount_percent': money_str(self.discount_percent),
            'discounted_unit_price': money_str(self.discounted_unit_price),
            'line_gross': money_str(self.line_gross),
            'line_discount': money_str(self.line_discount),
            'line_net': money_str(self.line_net),
        }


@dataclass(frozen=True)
class PricingBreakdown:
    """Result of price(): totals in cents, line figures unrounded until to_dict()."""
    gross_total: Decimal
    invoice_discount_percent: Decimal
    discount_amount: Decimal
    net_total: Decimal
    items_net_total: Decimal
    per_item: List[LinePricing] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.per_item

    def to_dict(self) -> Dict[str, Any]:
        return {
            'gross_total': money_str(self.gross_total),
            'invoice_discount_percent': money_str(self.invoice_discount_percent),
            'discount_amount': money_str(self.discount_amount),
            'net_total': money_str(self.net_total),
            'items_net_total': money_str(self.items_net_total),
            'per_item': [item.to_dict() for item in self.per_item],
            'warnings': list(self.warnings),
        }


def price_line(line) -> LinePricing:
    """Price one line item (anything exposing medicine_id, qty, unit_sales_price, discount_percent)."""
    unit_price = Decimal(line.unit_sales_price)
    qty = int(line.qty)
    discount_percent = Decimal(line.discount_percent or 0)

    line_gross = unit_price * qty
    line_discount = line_gross * discount_percent / HUNDRED
    return LinePricing(
        medicine_id=line.medicine_id,
        medicine_name=getattr(line, 'medicine_name', None),
        qty=qty,
        unit_sales_price=unit_price,
        discount_percent=discount_percent,
        discounted_unit_price=unit_price - unit_price * discount_percent / HUNDRED,
        line_gross=line_gross,
        line_discount=line_discount,
        line_net=line_gross - line_discount,
    )


def price(lines: Iterable, invoice_discount_percent=ZERO) -> PricingBreakdown:
    """
    Compute gross total, invoice discount and net total for a set of lines.

    Raises:
        InvalidDiscountError: invoice_discount_percent is negative.
    """
    discount_percent = Decimal(invoice_discount_percent or 0)
    if discount_percent < 0:
        raise InvalidDiscountError("Invoice discount cannot be negative")

    warnings = []
    if discount_percent > HUNDRED:
        logger.warning(f"[PRICING] Invoice discount above 100%: {discount_percent}")
        warnings.append(DISCOUNT_ABOVE_100)

    per_item = [price_line(line) for line in lines]
    gross_total = money(sum((item.line_gross for item in per_item), ZERO))
    items_net_total = sum((item.line_net for item in per_item), ZERO)
    discount_amount = money(gross_total * discount_percent / HUNDRED)

    return PricingBreakdown(
        gross_total=gross_total,
        invoice_discount_percent=discount_percent,
        discount_amount=discount_amount,
        net_total=gross_total - discount_amount,
        items_net_total=items_net_total,
        per_item=per_item,
        warnings=warnings,
    )
