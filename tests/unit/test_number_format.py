"""
Unit tests for input parsing and money formatting.
"""

import pytest
from decimal import Decimal

from pos_console.utils.formatters import jsonable, money
from pos_console.utils.number_format import parse_amount, parse_quantity


@pytest.mark.parametrize('value, expected', [
    ('1,234.50', Decimal('1234.50')),
    ('15', Decimal('15.00')),
    (' 7.5 ', Decimal('7.50')),
    (12, Decimal('12.00')),
    (Decimal('0.125'), Decimal('0.13')),
    ('', Decimal('0.00')),
    (None, Decimal('0.00')),
])
def test_parse_amount_valid(value, expected):
    assert parse_amount(value) == expected


@pytest.mark.parametrize('value', ['-5', -1, 'abc', '1.2.3', True, float('inf')])
def test_parse_amount_invalid(value):
    with pytest.raises(ValueError):
        parse_amount(value)


def test_parse_amount_error_names_field():
    with pytest.raises(ValueError, match='Tax cannot be negative'):
        parse_amount('-1', 'Tax')


@pytest.mark.parametrize('value, expected', [(3, 3), ('4', 4), ('0', 0), ('-1', -1), ('2.0', 2)])
def test_parse_quantity(value, expected):
    assert parse_quantity(value) == expected


@pytest.mark.parametrize('value', [None, '1.5', 'two', True])
def test_parse_quantity_invalid(value):
    with pytest.raises(ValueError):
        parse_quantity(value)


def test_money():
    assert money(1500) == '৳1,500.00'
    assert money(Decimal('-20.5'), '$') == '-$20.50'
    assert money(None) == '-'


def test_jsonable():
    assert jsonable({'a': [Decimal('1.5'), 2], 'b': None}) == {'a': ['1.50', 2], 'b': None}
