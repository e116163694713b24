"""
Unit tests for input parsing and display formatting helpers.
"""

import pytest
from datetime import datetime
from decimal import Decimal

from pharmapos.exceptions import InvalidQuantityError, InvalidDiscountError, ValidationError
from pharmapos.utils.number_format import parse_quantity, parse_signed_quantity, parse_percent, parse_money
from pharmapos.utils.formatters import money, money_str, format_invoice_number, datetime_str


class TestParseQuantity:

    @pytest.mark.parametrize('value,expected', [
        (1, 1),
        (12, 12),
        ('3', 3),
        (' 7 ', 7),
        ('4.0', 4),
        (Decimal('5'), 5),
    ])
    def test_accepts_positive_integers(self, value, expected):
        assert parse_quantity(value) == expected

    @pytest.mark.parametrize('value', [0, -1, '0', '-3', '2.5', 'abc', '', None, True, 'NaN', 'Infinity'])
    def test_rejects_invalid_quantities(self, value):
        with pytest.raises(InvalidQuantityError) as exc_info:
            parse_quantity(value)
        assert exc_info.value.code == 'INVALID_QUANTITY'
        assert exc_info.value.status_code == 400

    def test_signed_quantity_allows_zero_and_negative(self):
        assert parse_signed_quantity(0) == 0
        assert parse_signed_quantity('-2') == -2

    def test_signed_quantity_rejects_fractions(self):
        with pytest.raises(InvalidQuantityError):
            parse_signed_quantity('1.5')


class TestParsePercent:

    def test_empty_means_zero(self):
        assert parse_percent(None) == Decimal('0')
        assert parse_percent('  ') == Decimal('0')

    def test_keeps_full_precision(self):
        assert parse_percent('12.345') == Decimal('12.345')

    def test_negative_rejected(self):
        with pytest.raises(InvalidDiscountError):
            parse_percent('-5')

    def test_garbage_rejected(self):
        with pytest.raises(InvalidDiscountError):
            parse_percent('ten')

    def test_above_hundred_strict(self):
        with pytest.raises(InvalidDiscountError):
            parse_percent('100.01', strict_upper=True)

    def test_above_hundred_lenient(self):
        assert parse_percent('150', strict_upper=False) == Decimal('150')


class TestParseMoney:

    def test_parses_decimal_strings(self):
        assert parse_money('45.50') == Decimal('45.50')
        assert parse_money(50) == Decimal('50')

    @pytest.mark.parametrize('value', ['-0.01', 'cash', None, ''])
    def test_rejects_invalid_amounts(self, value):
        with pytest.raises(ValidationError):
            parse_money(value, 'Cash paid')


class TestFormatters:

    def test_money_rounds_half_up(self):
        assert money(Decimal('2.005')) == Decimal('2.01')
        assert money(Decimal('2.004')) == Decimal('2.00')
        assert money(None) == Decimal('0.00')

    def test_money_str(self):
        assert money_str(Decimal('45')) == '45.00'
        assert money_str('0.125') == '0.13'

    @pytest.mark.parametrize('number,expected', [
        (1, 'INV-000001'),
        (12, 'INV-000012'),
        (123456, 'INV-123456'),
        (1234567, 'INV-1234567'),
    ])
    def test_invoice_number_padding(self, number, expected):
        assert format_invoice_number(number) == expected

    def test_invoice_number_without_prefix(self):
        assert format_invoice_number(42, prefix='') == '000042'

    def test_datetime_str(self):
        assert datetime_str(datetime(2024, 3, 9, 14, 5, 7)) == '2024-03-09 14:05:07'
        assert datetime_str(None) == ''
