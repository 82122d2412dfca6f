"""
Classify Python values into the scalar kinds a BigFloat can be assigned from.

Detection follows the usual numeric protocol order so that third-party scalars
(NumPy integers, gmpy2 mpz, ...) are accepted through __index__ / __float__.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import numbers
from decimal import Decimal
from enum import StrEnum, unique
from typing import Any, Protocol, runtime_checkable

# Local ----------------------------------------------------------------------------------------------------------------
from .bigfloat import BigFloat
from .utils import fmt_type


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class ScalarKind(StrEnum):
    """
    Closed set of source / target kinds of the conversion protocol.

    Attributes:
        I32, I64, U32, U64: Fixed-width integers, range-checked on assignment and
            saturated on extraction.
        F32, F64: IEEE 754 binary32 / binary64.
        INT: Unbounded Python int.
        FRACTION: Exact rational (fractions.Fraction or any numbers.Rational).
        STR: Numeral string in a radix; Decimal values are assigned through their string.
        BIGFLOAT: Another BigFloat, copied with rounding to the target precision.
    """
    I32 = "i32"
    I64 = "i64"
    U32 = "u32"
    U64 = "u64"
    F32 = "f32"
    F64 = "f64"
    INT = "int"
    FRACTION = "fraction"
    STR = "str"
    BIGFLOAT = "bigfloat"


@runtime_checkable
class SupportsFloat(Protocol):
    """Protocol for duck-typed numeric conversion."""

    def __float__(self) -> float: ...


# Methods --------------------------------------------------------------------------------------------------------------

def classify(value: Any) -> ScalarKind:
    """
    Infer the ScalarKind of a Python value.

    Detection priority:
        1. bool → rejected (bool is an int subclass, but never a number here)
        2. BigFloat → BIGFLOAT
        3. str, Decimal → STR (Decimal keeps every digit through its string)
        4. __index__() → INT (int, NumPy integers)
        5. numbers.Rational → FRACTION
        6. __float__() → F64 (float and float-like types)

    Raises:
        TypeError: For bool and unsupported types.

    Examples:
        >>> classify(42)
        <ScalarKind.INT: 'int'>
        >>> classify(Fraction(1, 3))
        <ScalarKind.FRACTION: 'fraction'>
        >>> classify(Decimal("0.1"))
        <ScalarKind.STR: 'str'>
    """
    if isinstance(value, bool):
        raise TypeError(f"boolean values not supported, got {value}")

    if isinstance(value, BigFloat):
        return ScalarKind.BIGFLOAT

    if isinstance(value, (str, Decimal)):
        return ScalarKind.STR

    if hasattr(value, "__index__"):
        return ScalarKind.INT

    if isinstance(value, numbers.Rational):
        return ScalarKind.FRACTION

    if isinstance(value, (float, SupportsFloat)):
        return ScalarKind.F64

    raise TypeError(f"unsupported numeric type: {fmt_type(value)}")
