"""Tests for numeric normalization helpers."""
import pytest
from decimal import Decimal
from bson.decimal128 import Decimal128


class TestToDecimal:
    """Tests for to_decimal."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (10, Decimal("10")),
            (50.5, Decimal("50.5")),
            ("50.5", Decimal("50.5")),
            (" 7.25 ", Decimal("7.25")),
            (Decimal128("12.30"), Decimal("12.30")),
            (Decimal("3"), Decimal("3")),
        ],
    )
    def test_valid_values(self, raw, expected):
        """Test numeric inputs of every stored shape."""
        from goal_progress.utils.numbers import to_decimal

        assert to_decimal(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, "", "   ", "abc", float("nan"), float("inf"), float("-inf"),
         "NaN", "Infinity", Decimal128("NaN"), True, [1]],
    )
    def test_invalid_values_use_default(self, raw):
        """Test anything non-finite falls back to the default."""
        from goal_progress.utils.numbers import to_decimal

        assert to_decimal(raw) == Decimal("0")
        assert to_decimal(raw, default=None) is None


class TestRounding:
    """Tests for half-up rounding and percentages."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("1.005", "1.01"), ("2.345", "2.35"), ("2.344", "2.34"), ("0.125", "0.13")],
    )
    def test_round_half_up(self, raw, expected):
        """Test halves round up rather than to even."""
        from goal_progress.utils.numbers import round_half_up

        assert round_half_up(Decimal(raw)) == Decimal(expected)

    @pytest.mark.parametrize(
        "current,target,expected",
        [("0", "10", 0), ("9", "10", 90), ("1", "8", 13), ("1", "200", 1), ("15", "10", 150)],
    )
    def test_percent_of(self, current, target, expected):
        """Test percentages round half-up to whole numbers."""
        from goal_progress.utils.numbers import percent_of

        assert percent_of(Decimal(current), Decimal(target)) == expected

    def test_percent_of_zero_target(self):
        """Test a zero target reports 0 instead of failing."""
        from goal_progress.utils.numbers import percent_of

        assert percent_of(Decimal("5"), Decimal("0")) == 0
