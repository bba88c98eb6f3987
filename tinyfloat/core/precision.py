"""Precision configuration and integer rounding helpers."""

from dataclasses import dataclass
from typing import Optional, Union

from tinyfloat.core.config import settings
from tinyfloat.core.exceptions import InvalidPrecisionError


@dataclass(frozen=True)
class Precision:
    """
    Number of fractional digits a value keeps.
    
    Args:
        scale: Fractional decimal digits encoded by the magnitude
        guard_digits: Extra digits computed inside an operation before
            rounding back to `scale`
    """
    
    scale: int
    guard_digits: int = 3
    
    def __post_init__(self):
        """Validate scale and guard digits."""
        if isinstance(self.scale, bool) or not isinstance(self.scale, int):
            raise InvalidPrecisionError(f"Scale must be an integer, got {self.scale!r}")
        if self.scale < 0:
            raise InvalidPrecisionError(f"Scale cannot be negative, got {self.scale}")
        if isinstance(self.guard_digits, bool) or not isinstance(self.guard_digits, int):
            raise InvalidPrecisionError(f"Guard digits must be an integer, got {self.guard_digits!r}")
        if self.guard_digits < 1:
            raise InvalidPrecisionError(f"Guard digits must be at least 1, got {self.guard_digits}")
    
    def with_scale(self, scale: int) -> "Precision":
        """Same guard digits, different scale."""
        if type(scale) is int and scale == self.scale:
            return self
        return Precision(scale, self.guard_digits)


def default_precision() -> Precision:
    """Precision built from the current settings."""
    return Precision(settings.DEFAULT_PRECISION, settings.GUARD_DIGITS)


def resolve_precision(precision: Optional[Union[Precision, int]]) -> Precision:
    """Accept a Precision, a bare scale, or None for the configured default."""
    if precision is None:
        return default_precision()
    if isinstance(precision, Precision):
        return precision
    return Precision(precision, settings.GUARD_DIGITS)


def truncate_digits(value: int, digits: int) -> int:
    """
    Shift `value` right by `digits` decimal places, truncating toward zero.
    
    A negative `digits` shifts left, which is exact.
    """
    if digits <= 0:
        return value * 10 ** -digits
    quotient = abs(value) // 10 ** digits
    return -quotient if value < 0 else quotient


def round_half_away(value: int, digits: int) -> int:
    """
    Drop `digits` trailing decimal digits, rounding half away from zero.
    
    The absolute value is rounded and the sign reapplied, so the result is
    symmetric in sign: -5 rounded by one digit is -1, not 0.
    
    Examples:
        >>> round_half_away(1234, 1)
        123
        >>> round_half_away(1235, 1)
        124
        >>> round_half_away(-1235, 1)
        -124
        >>> round_half_away(-4, 1)
        0
    """
    if digits <= 0:
        return value * 10 ** -digits
    quotient, remainder = divmod(abs(value), 10 ** digits)
    if remainder >= 5 * 10 ** (digits - 1):
        quotient += 1
    return -quotient if value < 0 else quotient
