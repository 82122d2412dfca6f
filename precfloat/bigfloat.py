"""
BigFloat: a mutable arbitrary-precision binary floating-point value.

A BigFloat has a precision in bits fixed at allocation, changed only by set_prec_clear()
or set_prec_round(). Arithmetic never mutates a plain operand: results go to a clone,
unless the caller hands an operand over with move().

Examples:
    >>> a = BigFloat.new().with_prec(113).from_value("0.1")
    >>> b = a + 1                   # a is untouched, b is a fresh 113-bit value
    >>> c = a.move() * 3            # a's object now holds the product, c is a
    >>> c += 2                      # in place
    >>> c.sqrt().prec
    113
"""

# Standard library -----------------------------------------------------------------------------------------------------
from enum import StrEnum, unique
from typing import Any, Self

# Local ----------------------------------------------------------------------------------------------------------------
from . import dispatch, engine, mathops
from .precision import Precision, as_bits
from .precision import get_default_prec as _get_default_prec
from .precision import set_default_prec as _set_default_prec
from .rounding import RoundingMode, resolve
from .utils import class_name, fmt_type


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Sign(StrEnum):
    """Sign bit of a BigFloat; zeros, infinities and NaN carry one as well."""
    NEGATIVE = "negative"
    POSITIVE = "positive"


class _Operand:
    """
    Arithmetic shared by BigFloat (borrowed operand) and Owned (relinquished operand).

    Unary math methods (sqrt, log, sin, ...) are installed from mathops.UNARY_OPS.
    """
    __slots__ = ()

    def __add__(self, other):
        return _binary("add", self, other)

    def __radd__(self, other):
        return _binary("add", other, self)

    def __sub__(self, other):
        return _binary("sub", self, other)

    def __rsub__(self, other):
        return _binary("sub", other, self)

    def __mul__(self, other):
        return _binary("mul", self, other)

    def __rmul__(self, other):
        return _binary("mul", other, self)

    def __truediv__(self, other):
        return _binary("div", self, other)

    def __rtruediv__(self, other):
        return _binary("div", other, self)

    def __pow__(self, other, modulo=None):
        if modulo is not None:
            return NotImplemented
        return _binary("pow", self, other)

    def __rpow__(self, other):
        return _binary("pow", other, self)

    def __neg__(self):
        if isinstance(self, Owned):
            return dispatch.negate(self.take(), owned=True)
        return dispatch.negate(self)

    def __pos__(self):
        return self.take() if isinstance(self, Owned) else self.clone()

    def __abs__(self):
        return self.abs()

    def add(self, other, *, rounding: RoundingMode | None = None):
        """self + other, rounded with rounding or the thread's current mode."""
        return _binary_method("add", self, other, rounding)

    def sub(self, other, *, rounding: RoundingMode | None = None):
        """self - other, rounded with rounding or the thread's current mode."""
        return _binary_method("sub", self, other, rounding)

    def mul(self, other, *, rounding: RoundingMode | None = None):
        """self * other, rounded with rounding or the thread's current mode."""
        return _binary_method("mul", self, other, rounding)

    def div(self, other, *, rounding: RoundingMode | None = None):
        """self / other, rounded with rounding or the thread's current mode."""
        return _binary_method("div", self, other, rounding)

    def pow(self, other, *, rounding: RoundingMode | None = None):
        """self ** other, rounded with rounding or the thread's current mode."""
        return _binary_method("pow", self, other, rounding)


class BigFloat(_Operand):
    """
    Arbitrary-precision floating-point number with a fixed per-value precision.

    BigFloat(precision) allocates a NaN at precision bits, or at the process default
    precision when precision is None. Populate it with set_to(), or build values
    with BigFloat.new() / BigFloat.from_value().

    Not hashable: values are mutable.
    """
    __slots__ = ("_value", "_prec")

    def __init__(self, precision: int | Precision | None = None):
        self._prec = as_bits(precision)
        self._value = engine.allocate(self._prec)

    @classmethod
    def _wrap(cls, value, prec: int) -> Self:
        obj = cls.__new__(cls)
        obj._value = value
        obj._prec = prec
        return obj

    # Construction -------------------------------------------------------------------------------------------------

    @staticmethod
    def new():
        """
        Fluent builder.

        Examples:
            >>> BigFloat.new().with_prec(64).pi().prec
            64
        """
        from .builder import Builder
        return Builder()

    @classmethod
    def from_value(cls, source: Any, precision: int | Precision | None = None, *,
                   kind=None, radix: int = 10, rounding: RoundingMode | None = None) -> "BigFloat":
        """Allocate at precision (default when None) and assign source, see convert.construct()."""
        from .convert import construct
        return construct(source, precision, kind=kind, radix=radix, rounding=rounding)

    @staticmethod
    def get_default_prec() -> int:
        return _get_default_prec()

    @staticmethod
    def set_default_prec(precision: int | Precision) -> None:
        _set_default_prec(precision)

    def clone(self) -> "BigFloat":
        """New BigFloat with the same precision and value."""
        return BigFloat._wrap(self._value, self._prec)

    def __copy__(self) -> "BigFloat":
        return self.clone()

    def __deepcopy__(self, memo) -> "BigFloat":
        return self.clone()

    def move(self) -> "Owned":
        """
        Relinquish this value to the next operation.

        The operation may overwrite this object with its result, and returns it.
        """
        return Owned(self)

    # Precision ----------------------------------------------------------------------------------------------------

    @property
    def prec(self) -> int:
        """Precision in bits."""
        return self._prec

    @property
    def precision(self) -> Precision:
        return Precision(self._prec)

    def set_prec_clear(self, precision: int | Precision) -> None:
        """Change the precision; the value becomes NaN."""
        self._prec = as_bits(precision)
        self._value = engine.allocate(self._prec)

    def set_prec_round(self, precision: int | Precision, *, rounding: RoundingMode | None = None) -> None:
        """Change the precision, rounding the current value to it."""
        prec = as_bits(precision)
        self._value = engine.round_to(self._value, prec, resolve(rounding))
        self._prec = prec

    def swap(self, other: "BigFloat") -> None:
        """Exchange values and precisions with other."""
        if not isinstance(other, BigFloat):
            raise TypeError(f"can only swap with a BigFloat, but got {fmt_type(other)}")
        self._value, other._value = other._value, self._value
        self._prec, other._prec = other._prec, self._prec

    # Special values -----------------------------------------------------------------------------------------------

    def set_to_nan(self) -> None:
        self._value = engine.nan(self._prec)

    def set_to_inf(self, sign: Sign = Sign.POSITIVE) -> None:
        self._value = engine.inf(self._prec, negative=Sign(sign) is Sign.NEGATIVE)

    def set_to_zero(self, sign: Sign = Sign.POSITIVE) -> None:
        self._value = engine.zero(self._prec, negative=Sign(sign) is Sign.NEGATIVE)

    # Queries ------------------------------------------------------------------------------------------------------

    def is_nan(self) -> bool:
        return engine.is_nan(self._value)

    def is_inf(self) -> bool:
        return engine.is_inf(self._value)

    def is_number(self) -> bool:
        """Neither NaN nor infinite."""
        return engine.is_number(self._value)

    def is_zero(self) -> bool:
        return engine.is_zero(self._value)

    def is_regular(self) -> bool:
        """Neither NaN, infinite nor zero."""
        return engine.is_regular(self._value)

    @property
    def sign(self) -> Sign:
        return Sign.NEGATIVE if engine.is_signed(self._value) else Sign.POSITIVE

    @property
    def exponent(self) -> int | None:
        """
        Binary exponent e with value = m * 2**e and 0.5 <= |m| < 1; None unless regular.
        """
        if not self.is_regular():
            return None
        return engine.get_exp(self._value)

    # Conversion ---------------------------------------------------------------------------------------------------

    def set_to(self, source: Any, *, kind=None, radix: int = 10, rounding: RoundingMode | None = None) -> int:
        """Assign source keeping this precision; returns the ternary, see convert.assign_from()."""
        from .convert import assign_from
        return assign_from(self, source, kind=kind, radix=radix, rounding=rounding)

    def get(self, kind=None, *, base: int = 10, rounding: RoundingMode | None = None) -> Any:
        """Read this value as a native type, see convert.extract_to()."""
        from .convert import ScalarKind, extract_to
        return extract_to(self, ScalarKind.F64 if kind is None else kind, base=base, rounding=rounding)

    def to_string_in_base(self, base: int = 10, *, rounding: RoundingMode | None = None) -> tuple[str, int]:
        """
        Digits and exponent in base, such that value = 0.d1d2... * base**exponent.

        Examples:
            >>> BigFloat.from_value(1.5).to_string_in_base(10)
            ('15000000000000000', 1)
        """
        from .convert import ScalarKind, extract_to
        return extract_to(self, ScalarKind.STR, base=base, rounding=rounding)

    def __float__(self) -> float:
        return engine.to_float(self._value, resolve(None))

    def __int__(self) -> int:
        if self.is_nan():
            raise ValueError("cannot convert NaN to integer")
        if self.is_inf():
            raise OverflowError("cannot convert infinity to integer")
        return engine.to_int(self._value, RoundingMode.TOWARD_ZERO)

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __str__(self) -> str:
        from .formatting import Format, FormatOptions
        return FormatOptions(Format.FIXED_OR_SCIENTIFIC).with_precision_of(self).format(self)

    def __repr__(self) -> str:
        return f"{class_name(self)}('{self}', prec={self._prec})"

    # Comparison ---------------------------------------------------------------------------------------------------

    def _compare(self, other) -> int | None:
        if isinstance(other, BigFloat):
            return engine.compare(self._value, other._value)
        if dispatch.is_native(other):
            return engine.compare(self._value, other)
        return NotImplemented

    def __eq__(self, other):
        c = self._compare(other)
        return c if c is NotImplemented else c == 0

    def __lt__(self, other):
        c = self._compare(other)
        return c if c is NotImplemented else c is not None and c < 0

    def __le__(self, other):
        c = self._compare(other)
        return c if c is NotImplemented else c is not None and c <= 0

    def __gt__(self, other):
        c = self._compare(other)
        return c if c is NotImplemented else c is not None and c > 0

    def __ge__(self, other):
        c = self._compare(other)
        return c if c is NotImplemented else c is not None and c >= 0

    __hash__ = None

    # In-place arithmetic: the left operand is owned --------------------------------------------------------------

    def __iadd__(self, other):
        return _binary("add", Owned(self), other)

    def __isub__(self, other):
        return _binary("sub", Owned(self), other)

    def __imul__(self, other):
        return _binary("mul", Owned(self), other)

    def __itruediv__(self, other):
        return _binary("div", Owned(self), other)

    def __ipow__(self, other):
        return _binary("pow", Owned(self), other)


class Owned(_Operand):
    """
    Single-use handle to a relinquished BigFloat, created by BigFloat.move().

    The first operation consuming the handle may overwrite the wrapped object and
    returns it. Consuming the handle again raises ValueError.
    """
    __slots__ = ("_target",)

    def __init__(self, target: BigFloat):
        if not isinstance(target, BigFloat):
            raise TypeError(f"can only own a BigFloat, but got {fmt_type(target)}")
        self._target = target

    @property
    def consumed(self) -> bool:
        return self._target is None

    def take(self) -> BigFloat:
        """Consume the handle and return the wrapped BigFloat."""
        target = self._target
        if target is None:
            raise ValueError("owned operand already consumed")
        self._target = None
        return target

    def __repr__(self) -> str:
        if self._target is None:
            return f"{class_name(self)}(<consumed>)"
        return f"{class_name(self)}({self._target!r})"


# Methods --------------------------------------------------------------------------------------------------------------

def _accepts(operand) -> bool:
    return isinstance(operand, (BigFloat, Owned)) or dispatch.is_native(operand)


def _binary(name: str, left, right, rounding: RoundingMode | None = None):
    if not (_accepts(left) and _accepts(right)):
        return NotImplemented
    left_owned = isinstance(left, Owned)
    right_owned = isinstance(right, Owned)
    if left_owned:
        left = left.take()
    if right_owned:
        right = right.take()
    return dispatch.apply_binary(name, left, right, left_owned=left_owned, right_owned=right_owned,
                                 rounding=rounding)


def _binary_method(name: str, left, right, rounding: RoundingMode | None):
    result = _binary(name, left, right, rounding)
    if result is NotImplemented:
        raise TypeError(f"unsupported operand for {name}(): {fmt_type(right)}")
    return result


def _unary_method(op: mathops.UnaryOp):
    def method(self, *args, rounding: RoundingMode | None = None):
        if isinstance(self, Owned):
            return mathops.apply_unary(op.name, self.take(), *args, owned=True, rounding=rounding)
        return mathops.apply_unary(op.name, self, *args, rounding=rounding)

    method.__name__ = method.__qualname__ = op.name
    method.__doc__ = op.doc
    return method


for _op in mathops.UNARY_OPS.values():
    setattr(_Operand, _op.name, _unary_method(_op))
del _op
