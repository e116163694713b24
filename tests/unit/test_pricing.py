"""
Unit tests for the pricing engine (pure functions, no database).
"""

import pytest
from decimal import Decimal
from types import SimpleNamespace

from pharmapos.exceptions import InvalidDiscountError
from pharmapos.services.pricing_service import price, price_line, DISCOUNT_ABOVE_100


def line(medicine_id, unit_price, qty, discount='0', name=None):
    return SimpleNamespace(
        medicine_id=medicine_id,
        medicine_name=name,
        unit_sales_price=Decimal(unit_price),
        qty=qty,
        discount_percent=Decimal(discount),
    )


class TestPriceLine:
    """Tests for per-item figures."""

    def test_line_without_discount(self):
        item = price_line(line(1, '10.00', 5))

        assert item.line_gross == Decimal('50.00')
        assert item.line_discount == 0
        assert item.line_net == Decimal('50.00')
        assert item.discounted_unit_price == Decimal('10.00')

    def test_line_with_item_discount(self):
        item = price_line(line(1, '12.50', 4, discount='20'))

        assert item.line_gross == Decimal('50.00')
        assert item.line_discount == Decimal('10.00')
        assert item.line_net == Decimal('40.00')
        assert item.discounted_unit_price == Decimal('10.00')


class TestPrice:
    """Tests for invoice-level totals."""

    def test_scenario_a_preview_totals(self):
        """Paracetamol x5 at 10.00 with a 10% invoice discount."""
        breakdown = price([line(1, '10.00', 5)], Decimal('10'))

        assert breakdown.gross_total == Decimal('50.00')
        assert breakdown.discount_amount == Decimal('5.00')
        assert breakdown.net_total == Decimal('45.00')
        assert breakdown.warnings == []

    def test_gross_total_ignores_item_discounts(self):
        """Scenario E: per-item discount changes line nets, not the gross total."""
        lines = [line(1, '10.00', 2), line(2, '10.00', 2, discount='50')]
        breakdown = price(lines, Decimal('0'))

        nets = [item.line_net for item in breakdown.per_item]
        assert nets == [Decimal('20.00'), Decimal('10.00')]
        assert breakdown.gross_total == Decimal('40.00')
        assert breakdown.items_net_total == Decimal('30.00')
        assert breakdown.net_total == Decimal('40.00')

    @pytest.mark.parametrize('discount', ['0', '0.5', '7.25', '33.333', '99.99', '100'])
    def test_net_equals_gross_minus_discount(self, discount):
        lines = [line(1, '3.33', 7), line(2, '19.99', 3, discount='15'), line(3, '0.07', 11)]
        breakdown = price(lines, Decimal(discount))

        assert breakdown.net_total == breakdown.gross_total - breakdown.discount_amount

    def test_totals_are_settled_in_cents(self):
        breakdown = price([line(1, '0.10', 1)], Decimal('33.333'))

        assert breakdown.discount_amount == Decimal('0.03')
        assert breakdown.net_total == Decimal('0.07')

    def test_half_cent_discount_keeps_net_consistent(self):
        """3 x 3.35 at 10%: the 1.005 discount rounds up and net follows it."""
        breakdown = price([line(1, '3.35', 3)], Decimal('10'))
        data = breakdown.to_dict()

        assert breakdown.gross_total == Decimal('10.05')
        assert breakdown.discount_amount == Decimal('1.01')
        assert breakdown.net_total == Decimal('9.04')
        assert (data['gross_total'], data['discount_amount'], data['net_total']) == ('10.05', '1.01', '9.04')
        assert Decimal(data['net_total']) == Decimal(data['gross_total']) - Decimal(data['discount_amount'])

    def test_empty_lines(self):
        breakdown = price([], Decimal('10'))

        assert breakdown.is_empty
        assert breakdown.gross_total == 0
        assert breakdown.net_total == 0

    def test_negative_discount_rejected(self):
        with pytest.raises(InvalidDiscountError):
            price([line(1, '10.00', 1)], Decimal('-1'))

    def test_discount_above_hundred_is_flagged_not_rejected(self):
        breakdown = price([line(1, '10.00', 1)], Decimal('150'))

        assert DISCOUNT_ABOVE_100 in breakdown.warnings
        assert breakdown.discount_amount == Decimal('15.00')
        assert breakdown.net_total == Decimal('-5.00')

    def test_to_dict_keeps_both_totals(self):
        lines = [line(1, '10.00', 2, name='Paracetamol'), line(2, '20.00', 2, discount='50', name='Amoxicillin')]
        data = price(lines, Decimal('10')).to_dict()

        assert data['gross_total'] == '60.00'
        assert data['discount_amount'] == '6.00'
        assert data['net_total'] == '54.00'
        assert data['items_net_total'] == '40.00'
        assert data['per_item'][1]['medicine_name'] == 'Amoxicillin'
        assert data['per_item'][1]['discounted_unit_price'] == '10.00'
        assert data['per_item'][1]['line_net'] == '20.00'
