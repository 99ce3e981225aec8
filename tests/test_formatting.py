"""
Tests for the currency/percentage parse and format boundary.
"""

import pytest
from decimal import Decimal

from realty_finance.formatting import (
    format_brl,
    fraction_as_percent,
    money,
    parse_currency,
    parse_percentage,
    parse_points,
    percent,
)


class TestParseCurrency:
    """Test money parsing."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("R$ 4.500,00", "4500.00"),
            ("R$4.500,5", "4500.5"),
            ("450.000", "450000"),
            ("4500.00", "4500.00"),
            ("1.234.567,89", "1234567.89"),
            ("  250000 ", "250000"),
            ("1234.5", "1234.5"),
            ("12.0", "12.0"),
            ("1.234.567", "1234567"),
        ],
    )
    def test_text(self, text, expected):
        assert parse_currency(text) == Decimal(expected)

    def test_numbers(self):
        assert parse_currency(4500) == Decimal("4500")
        assert parse_currency(0.1) == Decimal("0.1")
        assert parse_currency(Decimal("12.34")) == Decimal("12.34")

    @pytest.mark.parametrize(
        "value", ["", "abc", "R$", "1.2.3", "12.34,56", True, None, float("inf")]
    )
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_currency(value)


class TestParsePercentage:
    """Test percentage parsing into fractions."""

    @pytest.mark.parametrize("value", ["10,99", "10.99", "10,99%", 10.99, Decimal("10.99")])
    def test_to_fraction(self, value):
        assert parse_percentage(value) == Decimal("0.1099")

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("10.5", "0.105"),
            ("12.0", "0.12"),
            ("10.125", "0.10125"),
            ("10,125", "0.10125"),
            ("1.234,5", "12.345"),
        ],
    )
    def test_dot_is_decimal_point(self, text, expected):
        """Without a comma the dot is a decimal point, whatever follows it."""
        assert parse_percentage(text) == Decimal(expected)

    def test_points(self):
        assert parse_points("20,5") == Decimal("20.5")
        assert parse_points("20.5%") == Decimal("20.5")
        assert parse_points(20) == Decimal("20")

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_percentage("ten")


class TestPresentation:
    """Test rounding at the presentation boundary."""

    def test_money_rounds_half_up(self):
        assert money(Decimal("16666.665")) == 16666.67
        assert money(Decimal("18666.6666666")) == 18666.67
        assert money(None) is None

    def test_percent(self):
        assert percent(Decimal("3.80622837370")) == 3.8062
        assert fraction_as_percent(Decimal("0.01")) == 1.0
        assert fraction_as_percent(None) is None

    @pytest.mark.parametrize(
        "value, expected",
        [
            (Decimal("4500"), "R$ 4.500,00"),
            (Decimal("1234567.891"), "R$ 1.234.567,89"),
            (Decimal("0.5"), "R$ 0,50"),
            (Decimal("-17769.7577"), "-R$ 17.769,76"),
        ],
    )
    def test_format_brl(self, value, expected):
        assert format_brl(value) == expected
