"""Tests for amount sanitization and rounding helpers."""

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal

import pytest

from divify.exceptions import ConfigurationError
from divify.money import format_money, parse_rounding, round_amount, to_amount


class TestToAmount:
    """Raw contributions are coerced the way a browser's parseFloat would."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("12.50", Decimal("12.50")),
            ("  7.5 ", Decimal("7.5")),
            ("12abc", Decimal("12")),
            ("30 EUR", Decimal("30")),
            (".5", Decimal("0.5")),
            ("1e2", Decimal("100")),
            (42, Decimal("42")),
            (33.33, Decimal("33.33")),
            (Decimal("0.10"), Decimal("0.10")),
        ],
    )
    def test_valid_amounts(self, raw, expected):
        """Numbers and numeric prefixes are read as-is."""
        assert to_amount(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["", "abc", "NaN", "-5", -5, -0.01, None, True, float("nan"), float("inf")],
    )
    def test_invalid_amounts_become_zero(self, raw):
        """Garbage, negatives and non-finite values count as nothing paid."""
        assert to_amount(raw) == Decimal("0")

    def test_decimal_nan_becomes_zero(self):
        """Decimal NaN never reaches a comparison."""
        assert to_amount(Decimal("NaN")) == Decimal("0")
        assert to_amount(Decimal("-Infinity")) == Decimal("0")

    def test_float_keeps_short_representation(self):
        """Floats don't bring their binary expansion along."""
        assert str(to_amount(0.1)) == "0.1"


class TestRoundAmount:
    """Rounding to cents."""

    def test_half_up(self):
        """Half cents round away from zero."""
        assert round_amount(Decimal("1.025"), ROUND_HALF_UP) == Decimal("1.03")

    def test_half_even(self):
        """Half cents round to the even cent."""
        assert round_amount(Decimal("1.025"), ROUND_HALF_EVEN) == Decimal("1.02")

    def test_negative_zero_normalized(self):
        """A tiny negative residue rounds to a plain 0.00."""
        assert str(round_amount(Decimal("-0.001"))) == "0.00"

    def test_always_two_places(self):
        """Whole numbers still carry cents."""
        assert str(round_amount(Decimal("50"))) == "50.00"


class TestParseRounding:
    """Mapping settings names to decimal constants."""

    def test_known_modes(self):
        assert parse_rounding("half_up") == ROUND_HALF_UP
        assert parse_rounding("half_even") == ROUND_HALF_EVEN

    def test_unknown_mode(self):
        with pytest.raises(ConfigurationError, match="Unknown rounding mode"):
            parse_rounding("bankers")


class TestFormatMoney:
    """Display formatting."""

    def test_positive(self):
        assert format_money(Decimal("1234.5")) == "$1,234.50"

    def test_negative_uses_parentheses(self):
        assert format_money(Decimal("-12")) == "($12.00)"

    def test_zero(self):
        assert format_money(Decimal("0")) == "$0.00"

    def test_half_cent_rounds_half_up_by_default(self):
        assert format_money(Decimal("1.025")) == "$1.03"

    def test_half_cent_with_half_even(self):
        assert format_money(Decimal("1.025"), ROUND_HALF_EVEN) == "$1.02"
        assert format_money(Decimal("-1.025"), ROUND_HALF_EVEN) == "($1.02)"
