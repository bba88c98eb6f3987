"""Custom exceptions for the decimal arithmetic engine."""


class TinyFloatError(Exception):
    """Base exception for TinyFloat."""
    pass


class ParseError(TinyFloatError, ValueError):
    """Raised when input is not a well-formed decimal literal."""
    pass


class DivisionByZeroError(TinyFloatError, ZeroDivisionError):
    """Raised when the divisor of div or mod has zero magnitude."""
    pass


class InvalidPrecisionError(TinyFloatError, ValueError):
    """Raised when a scale or guard digit count is invalid."""
    pass


class PrecisionLossWarning(UserWarning):
    """Issued when a float cannot be represented without residual error."""
    pass
