"""
Test suite for amount module

Tests fixed-point parsing, the no-op subtraction policy and formatting.
"""

import pytest

from payment_engine.amount import (
    Amount, AmountError, InvalidFormat, InvalidPrecision, add, subtract
)


class TestAmountParsing:
    """Test Amount.parse"""
    
    def test_whole_number(self):
        """Test integer text is scaled by 10^4"""
        assert Amount.parse("100") == Amount(1000000)
    
    def test_fraction_padding(self):
        """Test short fractions are right-padded to four digits"""
        assert Amount.parse("1.234") == Amount(12340)
        assert Amount.parse("5.8") == Amount(58000)
        assert Amount.parse("0.0001") == Amount(1)
        assert Amount.parse("2.5000") == Amount(25000)
    
    def test_empty_fraction(self):
        """Test a trailing dot means .0000"""
        assert Amount.parse("5.") == Amount(50000)
    
    def test_surrounding_whitespace(self):
        """Test whitespace around the text is ignored"""
        assert Amount.parse("  1.5 ") == Amount(15000)
    
    def test_too_many_fraction_digits(self):
        """Test more than four fractional digits is a precision error"""
        with pytest.raises(InvalidPrecision):
            Amount.parse("0.00001")
        with pytest.raises(InvalidPrecision):
            Amount.parse("12.34567")
    
    @pytest.mark.parametrize("text", ["", "abc", "1.2a", "-1", "-1.5", ".5", "1.2.3", "1e3", " "])
    def test_invalid_format(self, text):
        """Test non-numeric parts are format errors"""
        with pytest.raises(InvalidFormat):
            Amount.parse(text)
    
    def test_errors_share_a_base(self):
        """Test both parse errors are AmountErrors and ValueErrors"""
        assert issubclass(InvalidFormat, AmountError)
        assert issubclass(InvalidPrecision, AmountError)
        assert issubclass(AmountError, ValueError)
    
    def test_non_text_rejected(self):
        """Test parse refuses non-string input"""
        with pytest.raises(InvalidFormat):
            Amount.parse(1.5)


class TestAmountArithmetic:
    """Test Amount arithmetic and comparison"""
    
    def test_zero_is_identity(self):
        """Test zero() is the additive identity"""
        amount = Amount(1234)
        assert amount + Amount.zero() == amount
        assert Amount.zero().is_zero()
    
    def test_addition_commutative_and_associative(self):
        """Test addition over a few representative values"""
        a, b, c = Amount(1), Amount(25000), Amount(999999)
        assert add(a, b) == add(b, a)
        assert add(add(a, b), c) == add(a, add(b, c))
        assert (a + b).units == 25001
    
    def test_subtract_within_limit(self):
        """Test a >= b gives a - b"""
        assert subtract(Amount(50000), Amount(20000)) == Amount(30000)
        assert subtract(Amount(20000), Amount(20000)) == Amount.zero()
    
    def test_subtract_insufficient_is_noop(self):
        """Test a < b leaves a unchanged"""
        a = Amount(10000)
        assert subtract(a, Amount(10001)) == a
        assert a - Amount(50000) is a
    
    def test_ordering_follows_units(self):
        """Test comparisons use the unit count"""
        assert Amount(1) < Amount(2)
        assert Amount(2) >= Amount(2)
        assert max(Amount(5), Amount(3)) == Amount(5)
    
    def test_negative_units_rejected(self):
        """Test amounts are non-negative"""
        with pytest.raises(ValueError):
            Amount(-1)
    
    def test_float_units_rejected(self):
        """Test units must be an integer"""
        with pytest.raises(TypeError):
            Amount(1.5)


class TestAmountFormatting:
    """Test Amount string output"""
    
    def test_four_fraction_digits(self):
        """Test output always has four fractional digits"""
        assert Amount.parse("1.5").to_string() == "1.5000"
        assert str(Amount.zero()) == "0.0000"
        assert str(Amount(1)) == "0.0001"
        assert str(Amount.parse("1234567.89")) == "1234567.8900"
