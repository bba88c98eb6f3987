"""Tests for precision records and rounding helpers."""

import pytest

from tinyfloat.core.exceptions import InvalidPrecisionError
from tinyfloat.core.precision import (
    Precision,
    default_precision,
    resolve_precision,
    round_half_away,
    truncate_digits,
)


class TestPrecision:
    """Test Precision record."""
    
    def test_defaults(self):
        """Test guard digits default."""
        precision = Precision(2)
        assert precision.scale == 2
        assert precision.guard_digits == 3
    
    @pytest.mark.parametrize("scale", [-1, 1.5, "2", True, None])
    def test_invalid_scale(self, scale):
        """Test invalid scales are rejected."""
        with pytest.raises(InvalidPrecisionError):
            Precision(scale)
    
    @pytest.mark.parametrize("guard_digits", [0, -1, 1.0, False])
    def test_invalid_guard_digits(self, guard_digits):
        """Test at least one integer guard digit is required."""
        with pytest.raises(InvalidPrecisionError):
            Precision(2, guard_digits)
    
    def test_frozen(self):
        """Test records are immutable."""
        precision = Precision(2)
        with pytest.raises(AttributeError):
            precision.scale = 3
    
    def test_with_scale(self):
        """Test with_scale keeps guard digits."""
        precision = Precision(2, guard_digits=5)
        assert precision.with_scale(2) is precision
        assert precision.with_scale(7) == Precision(7, guard_digits=5)
    
    def test_resolve_precision(self, small_precision):
        """Test accepted precision forms."""
        assert resolve_precision(None) == Precision(4, guard_digits=2)
        assert resolve_precision(6) == Precision(6, guard_digits=2)
        record = Precision(1, guard_digits=9)
        assert resolve_precision(record) is record
        assert default_precision() == Precision(4, guard_digits=2)


class TestRoundHalfAway:
    """Test round_half_away."""
    
    def test_rounds_below_half_down(self):
        """Test discarded digits below 5 truncate."""
        assert round_half_away(1234, 1) == 123
        assert round_half_away(1249, 2) == 12
    
    def test_rounds_half_up(self):
        """Test discarded digits at or above 5 round up."""
        assert round_half_away(1235, 1) == 124
        assert round_half_away(1250, 2) == 13
        assert round_half_away(999, 1) == 100
    
    def test_negative_rounds_away_from_zero(self):
        """Test -0.5 rounds to -1, not 0."""
        assert round_half_away(-5, 1) == -1
        assert round_half_away(-1235, 1) == -124
        assert round_half_away(-1234, 1) == -123
    
    def test_no_negative_zero(self):
        """Test small negatives round to plain zero."""
        assert round_half_away(-4, 1) == 0
        assert str(round_half_away(-4, 1)) == "0"
    
    def test_non_positive_digits_shift_left(self):
        """Test zero or negative digit counts scale up exactly."""
        assert round_half_away(12, 0) == 12
        assert round_half_away(-12, -2) == -1200


class TestTruncateDigits:
    """Test truncate_digits."""
    
    def test_truncates_toward_zero(self):
        """Test truncation ignores the discarded digits."""
        assert truncate_digits(1299, 2) == 12
        assert truncate_digits(-1299, 2) == -12
    
    def test_shift_left(self):
        """Test negative digit counts multiply."""
        assert truncate_digits(25, -3) == 25000
        assert truncate_digits(-25, 0) == -25
