"""
Fixed-point decimal numbers backed by Python integers.

A TinyFloat stores an integer magnitude equal to the decimal value times
10^scale. Addition and subtraction are exact. Multiplication and division
compute `guard_digits` extra digits and round the result half away from
zero, as does downscaling. Parsing truncates digits beyond the scale.

Binary operations always produce a value at the scale of the left operand:

    >>> TinyFloat("0.123456789", 2).add(TinyFloat("0.123456789", 9)).to_string()
    '0.24'
"""

import math
import re
import sys
import warnings
from fractions import Fraction
from typing import Optional, Union

from tinyfloat.core.config import settings
from tinyfloat.core.exceptions import (
    DivisionByZeroError,
    InvalidPrecisionError,
    ParseError,
    PrecisionLossWarning,
)
from tinyfloat.core.logging import get_logger
from tinyfloat.core.precision import (
    Precision,
    resolve_precision,
    round_half_away,
    truncate_digits,
)
from tinyfloat.utils.metrics import track_error, track_precision_loss

logger = get_logger(__name__)

_LITERAL_RE = re.compile(r"(-?)([0-9]+)(?:\.([0-9]+))?")

# Below the interpreter limit on int/str conversion (4300 digits by default)
_CHUNK_DIGITS = 4000


def _int_from_digits(digits: str) -> int:
    """int() of a digit string of any length."""
    if len(digits) <= _CHUNK_DIGITS:
        return int(digits)
    value = 0
    for start in range(0, len(digits), _CHUNK_DIGITS):
        chunk = digits[start:start + _CHUNK_DIGITS]
        value = value * 10 ** len(chunk) + int(chunk)
    return value


def _digits_from_int(value: int) -> str:
    """str() of a non-negative int of any length."""
    base = 10 ** _CHUNK_DIGITS
    if value < base:
        return str(value)
    chunks = []
    while value >= base:
        value, chunk = divmod(value, base)
        chunks.append(str(chunk).zfill(_CHUNK_DIGITS))
    chunks.append(str(value))
    return "".join(reversed(chunks))


def _caller_stacklevel() -> int:
    """Stack level of the first frame outside this module, for warnings.warn."""
    frame = sys._getframe(1)
    level = 1
    while frame is not None and frame.f_globals.get("__name__") == __name__:
        frame = frame.f_back
        level += 1
    return level


def _parse_error(message: str, value) -> ParseError:
    """Log and count a parse failure, returning the error to raise."""
    logger.warning("Malformed decimal literal", error_message=message, value=repr(value))
    track_error(ParseError.__name__)
    return ParseError(message)


def parse_magnitude(text: str, scale: int) -> int:
    """
    Parse a decimal literal into an integer scaled by 10^scale.
    
    Fractional digits beyond `scale` are truncated, missing ones are padded
    with zeros.
    
    Args:
        text: Literal such as "12", "-0.5" or "3.14159"
        scale: Number of fractional digits to keep
    
    Returns:
        Signed integer magnitude
    
    Raises:
        ParseError: If text is not a decimal literal
    """
    if not isinstance(text, str):
        raise _parse_error(f"Expected a string literal, got {type(text).__name__}", text)
    match = _LITERAL_RE.fullmatch(text.strip())
    if match is None:
        raise _parse_error(f"Invalid decimal literal: {text!r}", text)
    sign, int_part, frac_part = match.groups()
    frac_part = (frac_part or "")[:scale].ljust(scale, "0")
    magnitude = _int_from_digits(int_part + frac_part)
    return -magnitude if sign else magnitude


def _float_literal(value: float) -> str:
    """Render a float as its shortest plain decimal literal (no exponent)."""
    if not math.isfinite(value):
        raise _parse_error(f"Cannot represent non-finite float {value!r}", value)
    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    sign = ""
    if mantissa.startswith("-"):
        sign, mantissa = "-", mantissa[1:]
    int_part, _, frac_part = mantissa.partition(".")
    digits = int_part + frac_part
    point = len(int_part) + int(exponent)
    if point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{sign}{digits}{'0' * (point - len(digits))}"
    return f"{sign}{digits[:point]}.{digits[point:]}"


def _parse_float(value: float, scale: int) -> int:
    """Parse a float, flagging any loss of its exact binary value."""
    magnitude = parse_magnitude(_float_literal(value), scale)
    numerator, denominator = value.as_integer_ratio()
    if magnitude * denominator != numerator * 10 ** scale:
        track_precision_loss()
        logger.debug("Float precision loss", value=repr(value), scale=scale)
        if settings.WARN_ON_FLOAT_PRECISION_LOSS:
            warnings.warn(
                f"{value!r} is not exactly representable at scale {scale}",
                PrecisionLossWarning,
                stacklevel=_caller_stacklevel(),
            )
    return magnitude


def _parse_value(value, scale: int) -> int:
    """Parse a str, int or float literal at the given scale."""
    if isinstance(value, bool):
        raise _parse_error("Booleans are not decimal numbers", value)
    if isinstance(value, str):
        return parse_magnitude(value, scale)
    if isinstance(value, int):
        return value * 10 ** scale
    if isinstance(value, float):
        return _parse_float(value, scale)
    raise _parse_error(f"Invalid value type: {type(value).__name__}", value)


def _restore(magnitude: int, precision: Precision) -> "TinyFloat":
    """Unpickle a TinyFloat."""
    return TinyFloat._from_magnitude(magnitude, precision)


Operand = Union["TinyFloat", str, int, float]


class TinyFloat:
    """
    Immutable fixed-point decimal number.
    
    Args:
        value: Literal string, int, float, another TinyFloat, or None for zero
        precision: Scale as an int, a Precision record, or None for the
            configured default. Must be omitted when copying a TinyFloat.
    
    Note: Floats are rendered to their shortest decimal literal first, so
    prefer strings when the exact input matters.
    """
    
    __slots__ = ("_magnitude", "_precision")
    
    def __init__(
        self,
        value: Optional[Operand] = None,
        precision: Optional[Union[Precision, int]] = None,
    ):
        if isinstance(value, TinyFloat):
            if precision is not None:
                raise InvalidPrecisionError(
                    "Copying a TinyFloat keeps its precision; use with_precision() to rescale"
                )
            magnitude, resolved = value._magnitude, value._precision
        else:
            resolved = resolve_precision(precision)
            magnitude = 0 if value is None else _parse_value(value, resolved.scale)
        object.__setattr__(self, "_magnitude", magnitude)
        object.__setattr__(self, "_precision", resolved)
    
    @classmethod
    def _from_magnitude(cls, magnitude: int, precision: Precision) -> "TinyFloat":
        """Build a value without parsing."""
        instance = cls.__new__(cls)
        object.__setattr__(instance, "_magnitude", magnitude)
        object.__setattr__(instance, "_precision", precision)
        return instance
    
    def __setattr__(self, name, value):
        """Reject attribute assignment."""
        raise AttributeError("TinyFloat is immutable")
    
    def __delattr__(self, name):
        """Reject attribute deletion."""
        raise AttributeError("TinyFloat is immutable")
    
    def __reduce__(self):
        """Pickle support."""
        return _restore, (self._magnitude, self._precision)
    
    @property
    def magnitude(self) -> int:
        """Integer equal to the value times 10^scale."""
        return self._magnitude
    
    @property
    def scale(self) -> int:
        """Number of fractional digits."""
        return self._precision.scale
    
    @property
    def precision(self) -> Precision:
        """Scale and guard digits."""
        return self._precision
    
    def _with_magnitude(self, magnitude: int) -> "TinyFloat":
        """New value at this precision."""
        return TinyFloat._from_magnitude(magnitude, self._precision)
    
    def _operand(self, other: Operand) -> int:
        """Magnitude of `other` at this value's scale."""
        if isinstance(other, TinyFloat):
            return other.with_precision(self.scale)._magnitude
        return _parse_value(other, self.scale)
    
    def _divisor(self, other: Operand, operation: str) -> int:
        """Divisor magnitude, rejecting zero."""
        divisor = self._operand(other)
        if divisor == 0:
            logger.warning("Division by zero", operation=operation, dividend=self.to_string())
            track_error(DivisionByZeroError.__name__)
            raise DivisionByZeroError(f"Cannot {operation} {self.to_string()} by zero")
        return divisor
    
    # Arithmetic
    
    def add(self, other: Operand) -> "TinyFloat":
        """Sum at this value's scale."""
        return self._with_magnitude(self._magnitude + self._operand(other))
    
    def sub(self, other: Operand) -> "TinyFloat":
        """Difference at this value's scale."""
        return self._with_magnitude(self._magnitude - self._operand(other))
    
    def mul(self, other: Operand) -> "TinyFloat":
        """
        Product at this value's scale.
        
        The raw product carries 2 * scale digits. It is truncated to
        scale + guard_digits and then rounded half away from zero.
        """
        guard = self._precision.guard_digits
        product = self._magnitude * self._operand(other)
        guarded = truncate_digits(product, self.scale - guard)
        return self._with_magnitude(round_half_away(guarded, guard))
    
    def div(self, other: Operand) -> "TinyFloat":
        """
        Quotient at this value's scale, rounded half away from zero.
        
        Raises:
            DivisionByZeroError: If other is zero at this value's scale
        """
        divisor = self._divisor(other, "divide")
        guard = self._precision.guard_digits
        quotient = abs(self._magnitude) * 10 ** (self.scale + guard) // abs(divisor)
        if (self._magnitude < 0) != (divisor < 0):
            quotient = -quotient
        return self._with_magnitude(round_half_away(quotient, guard))
    
    def mod(self, other: Operand) -> "TinyFloat":
        """
        Remainder with the sign of this value (truncating, not floored).
        
        Raises:
            DivisionByZeroError: If other is zero at this value's scale
        """
        divisor = self._divisor(other, "take modulo of")
        remainder = abs(self._magnitude) % abs(divisor)
        return self._with_magnitude(-remainder if self._magnitude < 0 else remainder)
    
    def with_precision(self, scale: int) -> "TinyFloat":
        """
        Rescale to `scale` fractional digits.
        
        Upscaling pads with zeros. Downscaling rounds half away from zero, so
        downscaling and upscaling again does not restore dropped digits.
        """
        precision = self._precision.with_scale(scale)
        if precision is self._precision:
            return self
        magnitude = round_half_away(self._magnitude, self.scale - scale)
        return TinyFloat._from_magnitude(magnitude, precision)
    
    # Rendering
    
    def to_string(self, scale: Optional[int] = None) -> str:
        """Render with exactly `scale` fractional digits (default: own scale)."""
        value = self if scale is None else self.with_precision(scale)
        digits = _digits_from_int(abs(value._magnitude)).rjust(value.scale + 1, "0")
        sign = "-" if value._magnitude < 0 else ""
        if value.scale == 0:
            return sign + digits
        return f"{sign}{digits[:-value.scale]}.{digits[-value.scale:]}"
    
    def to_number(self, scale: Optional[int] = None) -> float:
        """Lossy conversion to float through the rendered string."""
        return float(self.to_string(scale))
    
    def is_zero(self) -> bool:
        """Check if value is zero."""
        return self._magnitude == 0
    
    def is_positive(self) -> bool:
        """Check if value is positive."""
        return self._magnitude > 0
    
    def is_negative(self) -> bool:
        """Check if value is negative."""
        return self._magnitude < 0
    
    # Operator protocol
    
    def __add__(self, other):
        """Add with the + operator."""
        if not isinstance(other, (TinyFloat, str, int, float)):
            return NotImplemented
        return self.add(other)
    
    def __radd__(self, other):
        """Add a literal on the left."""
        if not isinstance(other, (str, int, float)):
            return NotImplemented
        return TinyFloat(other, self._precision).add(self)
    
    def __sub__(self, other):
        """Subtract with the - operator."""
        if not isinstance(other, (TinyFloat, str, int, float)):
            return NotImplemented
        return self.sub(other)
    
    def __rsub__(self, other):
        """Subtract from a literal on the left."""
        if not isinstance(other, (str, int, float)):
            return NotImplemented
        return TinyFloat(other, self._precision).sub(self)
    
    def __mul__(self, other):
        """Multiply with the * operator."""
        if not isinstance(other, (TinyFloat, str, int, float)):
            return NotImplemented
        return self.mul(other)
    
    def __rmul__(self, other):
        """Multiply a literal on the left."""
        if not isinstance(other, (str, int, float)):
            return NotImplemented
        return TinyFloat(other, self._precision).mul(self)
    
    def __truediv__(self, other):
        """Divide with the / operator."""
        if not isinstance(other, (TinyFloat, str, int, float)):
            return NotImplemented
        return self.div(other)
    
    def __rtruediv__(self, other):
        """Divide a literal on the left."""
        if not isinstance(other, (str, int, float)):
            return NotImplemented
        return TinyFloat(other, self._precision).div(self)
    
    def __mod__(self, other):
        """Remainder with the % operator."""
        if not isinstance(other, (TinyFloat, str, int, float)):
            return NotImplemented
        return self.mod(other)
    
    def __rmod__(self, other):
        """Remainder of a literal on the left."""
        if not isinstance(other, (str, int, float)):
            return NotImplemented
        return TinyFloat(other, self._precision).mod(self)
    
    def __neg__(self) -> "TinyFloat":
        """Negation."""
        return self._with_magnitude(-self._magnitude)
    
    def __pos__(self) -> "TinyFloat":
        """Unary plus."""
        return self
    
    def __abs__(self) -> "TinyFloat":
        """Absolute value."""
        return self._with_magnitude(abs(self._magnitude))
    
    # Comparison
    
    def _aligned(self, other):
        """Both magnitudes at a common scale, or None if not comparable."""
        if isinstance(other, TinyFloat):
            scale = max(self.scale, other.scale)
            return (
                self._magnitude * 10 ** (scale - self.scale),
                other._magnitude * 10 ** (scale - other.scale),
            )
        # Floats and strings are not comparable, hash(0.1) differs from hash of 1/10
        if isinstance(other, bool) or not isinstance(other, int):
            return None
        return self._magnitude, other * 10 ** self.scale
    
    def __eq__(self, other) -> bool:
        """Exact equality across scales."""
        aligned = self._aligned(other)
        if aligned is None:
            return NotImplemented
        return aligned[0] == aligned[1]
    
    def __lt__(self, other) -> bool:
        """Less than comparison."""
        aligned = self._aligned(other)
        if aligned is None:
            return NotImplemented
        return aligned[0] < aligned[1]
    
    def __le__(self, other) -> bool:
        """Less than or equal comparison."""
        aligned = self._aligned(other)
        if aligned is None:
            return NotImplemented
        return aligned[0] <= aligned[1]
    
    def __gt__(self, other) -> bool:
        """Greater than comparison."""
        aligned = self._aligned(other)
        if aligned is None:
            return NotImplemented
        return aligned[0] > aligned[1]
    
    def __ge__(self, other) -> bool:
        """Greater than or equal comparison."""
        aligned = self._aligned(other)
        if aligned is None:
            return NotImplemented
        return aligned[0] >= aligned[1]
    
    def __hash__(self) -> int:
        """Hash consistent with equality across scales."""
        # Equal values at different scales reduce to the same fraction
        return hash(Fraction(self._magnitude, 10 ** self.scale))
    
    # Conversions
    
    def __bool__(self) -> bool:
        """False only for zero."""
        return self._magnitude != 0
    
    def __float__(self) -> float:
        """Convert to float."""
        return self.to_number()
    
    def __int__(self) -> int:
        """Truncate toward zero."""
        return truncate_digits(self._magnitude, self.scale)
    
    def __str__(self) -> str:
        """String representation."""
        return self.to_string()
    
    def __repr__(self) -> str:
        """Developer representation."""
        return f"TinyFloat('{self.to_string()}', precision={self.scale})"


def parse_tiny_float(value: Operand, precision: Optional[Union[Precision, int]] = None) -> TinyFloat:
    """Parse a literal into a TinyFloat."""
    return TinyFloat(value, precision)


def zero(precision: Optional[Union[Precision, int]] = None) -> TinyFloat:
    """Create a zero TinyFloat."""
    return TinyFloat(None, precision)
