"""Tests for amount parsing and rounding."""

from decimal import Decimal

import pytest

from smsledger.utils.amount_parser import format_amount, parse_amount, round_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("Rs.1,200.50", Decimal("1200.50")),
        ("INR 3,000", Decimal("3000")),
        ("₹99.9", Decimal("99.9")),
        ("-12.00", Decimal("-12.00")),
        (" 1,23,456.78 ", Decimal("123456.78")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "  ", "abc", "NaN", "Infinity", "Rs."])
def test_parse_amount_rejects(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_round_half_up():
    assert round_amount(Decimal("0.005")) == Decimal("0.01")
    assert round_amount(Decimal("2.675")) == Decimal("2.68")
    assert round_amount(Decimal("-0.005")) == Decimal("-0.01")


def test_format_amount():
    assert format_amount(Decimal("1200.5")) == "1200.50"
    assert format_amount(Decimal("0")) == "0.00"
