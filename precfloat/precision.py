"""
Precision of BigFloat values: a bit count with bits <-> decimal digits conversion.

The process default precision is used by every allocation that does not fix one.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
from dataclasses import dataclass
from typing import Self

# Local ----------------------------------------------------------------------------------------------------------------
from .conf import FloatConf
from .utils import fmt_type, fmt_value

# Constants ------------------------------------------------------------------------------------------------------------

LOG2_10 = 3.3219280948873624
LOG10_2 = 0.30102999566398119

_default_prec: int = FloatConf.DEFAULT_PRECISION


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True, order=True)
class Precision:
    """
    Mantissa width of a BigFloat, in bits.

    Immutable value type. Use Precision.of_digits() to size a value for a number
    of significant decimal digits.

    Attributes:
        bits: Mantissa bits, within [FloatConf.MIN_PRECISION, FloatConf.MAX_PRECISION].

    Examples:
        >>> Precision(53).digits
        15
        >>> Precision.of_digits(30).bits
        100
    """
    bits: int

    def __post_init__(self):
        validate_bits(self.bits)

    @classmethod
    def of_digits(cls, digits: int) -> Self:
        """Smallest precision holding the given number of decimal digits."""
        return cls(digits_to_bits(digits))

    @property
    def digits(self) -> int:
        """Decimal digits this precision always holds."""
        return bits_to_digits(self.bits)

    def __int__(self) -> int:
        return self.bits


# Methods --------------------------------------------------------------------------------------------------------------

def bits_to_digits(bits: int) -> int:
    """
    Decimal digits held by a precision: floor(bits * log10(2)).

    Examples:
        >>> bits_to_digits(53)
        15
    """
    return math.floor(bits * LOG10_2)


def digits_to_bits(digits: int) -> int:
    """
    Bits needed for a number of decimal digits: ceil(digits * log2(10)).

    Examples:
        >>> digits_to_bits(10)
        34
    """
    return math.ceil(digits * LOG2_10)


def validate_bits(bits: int) -> int:
    """
    Check a precision in bits and return it.

    Raises:
        TypeError: If bits is not an int (bool rejected).
        ValueError: If bits is outside the engine precision range.
    """
    if isinstance(bits, bool) or not isinstance(bits, int):
        raise TypeError(f"precision bits must be an int, but got {fmt_type(bits)}")
    if not FloatConf.MIN_PRECISION <= bits <= FloatConf.MAX_PRECISION:
        raise ValueError(f"precision must be in [{FloatConf.MIN_PRECISION}, {FloatConf.MAX_PRECISION}] bits, "
                         f"but found {fmt_value(bits)}")
    return bits


def as_bits(precision: "int | Precision | None") -> int:
    """
    Resolve a precision argument to bits; None selects the process default.
    """
    if precision is None:
        return _default_prec
    if isinstance(precision, Precision):
        return precision.bits
    return validate_bits(precision)


def get_default_prec() -> int:
    """Return the process default precision in bits."""
    return _default_prec


def set_default_prec(bits: "int | Precision") -> None:
    """
    Set the process default precision used by allocations without explicit precision.

    Values already allocated keep their precision.
    """
    global _default_prec
    _default_prec = as_bits(bits)
