"""
Tests for the Money value object and currency formatting.
"""

import pytest
from decimal import Decimal

from core.market_study import Money, ValuationInputError
from utils.formatting import format_currency, format_percent, format_area


# =============================================================================
# Construction
# =============================================================================

class TestMoneyConstruction:
    """Tests for creating Money values."""

    def test_amount_quantized_to_cents(self):
        assert Money(10.005).amount == Decimal("10.01")
        assert Money(10.004).amount == Decimal("10.00")

    def test_accepts_int_decimal_and_string(self):
        assert Money(100) == Money(Decimal("100.00")) == Money("100")

    def test_default_currency_is_brl(self):
        assert Money(1).currency == "BRL"

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), -0.01, "abc", True, None])
    def test_rejects_invalid_amounts(self, bad):
        with pytest.raises(ValuationInputError):
            Money(bad)

    @pytest.mark.parametrize("huge", [1e27, "1" + "0" * 30])
    def test_rejects_amounts_beyond_cent_precision(self, huge):
        with pytest.raises(ValuationInputError, match="too large"):
            Money(huge)

    def test_multiply_overflow_rejected(self):
        with pytest.raises(ValuationInputError):
            Money(10 ** 20).multiply(1e9)

    def test_zero(self):
        assert Money.zero().is_zero
        assert not Money(0.01).is_zero

    def test_is_hashable_and_immutable(self):
        m = Money(5)
        assert {m, Money(5)} == {m}
        with pytest.raises(Exception):
            m.amount = Decimal("6")


# =============================================================================
# Arithmetic
# =============================================================================

class TestMoneyArithmetic:
    """Tests for Money arithmetic and comparison."""

    def test_add_and_subtract(self):
        assert Money(10.50) + Money(0.25) == Money(10.75)
        assert Money(10) - Money(2.5) == Money(7.5)

    def test_subtract_never_negative(self):
        with pytest.raises(ValuationInputError):
            Money(1).subtract(Money(2))

    def test_multiply_rounds_half_up(self):
        assert Money(10).multiply(0.3333) == Money(3.33)
        assert Money(0.05).multiply(0.5) == Money(0.03)
        assert 2 * Money(1.5) == Money(3)

    def test_divide(self):
        assert Money(10).divide(4) == Money(2.5)
        with pytest.raises(ValuationInputError):
            Money(10).divide(0)

    def test_currency_mismatch(self):
        with pytest.raises(ValuationInputError):
            Money(1, "BRL").add(Money(1, "USD"))

    def test_ordering(self):
        assert Money(1) < Money(2) <= Money(2) < Money(3)
        assert max([Money(3), Money(7), Money(5)]) == Money(7)

    def test_float_conversion(self):
        assert float(Money(1234.56)) == 1234.56


# =============================================================================
# Formatting
# =============================================================================

class TestFormatting:
    """Tests for display formatting."""

    def test_brl_uses_ptbr_separators(self):
        assert Money(1234.56).format() == "R$ 1.234,56"
        assert str(Money(469812.64)) == "R$ 469.812,64"

    def test_other_currencies(self):
        assert format_currency(1234.5, "USD") == "$1,234.50"
        assert format_currency(1234.4, "GBP", decimals=0) == "£1,234"

    def test_percent_and_area(self):
        assert format_percent(12.345) == "12.3%"
        assert format_area(85) == "85.00 m²"

    def test_dict_round_trip(self):
        m = Money(99.9, "USD")
        assert Money.from_dict(m.to_dict()) == m
