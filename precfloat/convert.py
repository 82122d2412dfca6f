"""
Conversion protocol between Python scalars and BigFloat.

Three capabilities:
    - assign_from(): overwrite an existing BigFloat, keeping its precision;
    - extract_to(): read a BigFloat as a native type;
    - construct(): allocate a BigFloat at a precision and assign to it. Every builder
      route goes through it.

Each ScalarKind has one assign and one extract routine in the dispatch tables below.
When no kind is given, it is inferred with numeric.classify().
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
import math
import operator
from decimal import Decimal
from fractions import Fraction
from functools import partial
from typing import Any

# Third-party ----------------------------------------------------------------------------------------------------------
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from . import engine
from .bigfloat import BigFloat
from .conf import FloatConf
from .errors import ParseError
from .numeric import ScalarKind, classify
from .precision import Precision
from .rounding import RoundingMode, resolve
from .utils import fmt_type, fmt_value

logger = logging.getLogger(__name__)

# Constants ------------------------------------------------------------------------------------------------------------

# Inclusive ranges of the fixed-width integer kinds
INT_BOUNDS = frozendict({
    ScalarKind.I32: (-2 ** 31, 2 ** 31 - 1),
    ScalarKind.I64: (-2 ** 63, 2 ** 63 - 1),
    ScalarKind.U32: (0, 2 ** 32 - 1),
    ScalarKind.U64: (0, 2 ** 64 - 1),
})


# Methods --------------------------------------------------------------------------------------------------------------

def assign_from(target: BigFloat, source: Any, *,
                kind: ScalarKind | str | None = None,
                radix: int = 10,
                rounding: RoundingMode | None = None) -> int:
    """
    Overwrite target with source, rounded to target's existing precision.

    Args:
        target: Receiving BigFloat; its precision never changes.
        source: Scalar to assign. A (numeral, radix) tuple is accepted for strings.
        kind: Explicit ScalarKind; inferred from source when None.
        radix: Numeral radix for strings: 2..62, or 0 to detect it from a 0b / 0x prefix.
        rounding: Explicit rounding mode, or None for the thread's current mode.

    Returns:
        Ternary value: negative, zero or positive when the stored value is below,
        equal to or above the exact source.

    Raises:
        TypeError: If target is not a BigFloat or source does not fit kind.
        ValueError: If radix is out of range.
        OverflowError: If source is out of range of an explicit fixed-width kind.
        ParseError: If a numeral is invalid in radix; target is left NaN.

    Examples:
        >>> x = BigFloat(32)
        >>> assign_from(x, ("abcd.ef", 16))
        0
        >>> x.prec
        32
    """
    if not isinstance(target, BigFloat):
        raise TypeError(f"target must be a BigFloat, but got {fmt_type(target)}")
    if isinstance(source, tuple):
        source, radix = _split_numeral(source)

    kind = classify(source) if kind is None else ScalarKind(kind)
    rnd = resolve(rounding)
    try:
        value, ternary = _ASSIGN[kind](source, target._prec, rnd, radix)
    except ParseError as e:
        logger.debug("assignment of %s failed: %s", fmt_value(source), e)
        target.set_to_nan()
        raise
    target._value = value
    return ternary


def extract_to(source: BigFloat, kind: ScalarKind | str = ScalarKind.F64, *,
               base: int = 10,
               rounding: RoundingMode | None = None) -> Any:
    """
    Read source as a native value of kind, rounding with rounding or the thread's mode.

    Fixed-width integer kinds round then saturate to their range; NaN reads as 0.
    Saturation and NaN set the range-error flag. FRACTION is exact and raises for
    NaN (ValueError) and infinities (OverflowError), as float.as_integer_ratio().
    STR returns (digits, exponent) in base with value = 0.d1d2... * base**exponent.
    BIGFLOAT returns a clone.

    Examples:
        >>> x = BigFloat.from_value(2.5)
        >>> extract_to(x, ScalarKind.I32, rounding=RoundingMode.UP)
        3
        >>> extract_to(x, ScalarKind.STR)
        ('25000000000000000', 1)
    """
    if not isinstance(source, BigFloat):
        raise TypeError(f"source must be a BigFloat, but got {fmt_type(source)}")
    kind = ScalarKind(kind)
    if kind is ScalarKind.STR:
        _check_radix(base, allow_auto=False)
    return _EXTRACT[kind](source, resolve(rounding), base)


def construct(source: Any, precision: int | Precision | None = None, *,
              kind: ScalarKind | str | None = None,
              radix: int = 10,
              rounding: RoundingMode | None = None) -> BigFloat:
    """
    Allocate a BigFloat at precision (the process default when None) and assign source.

    The result precision is precision regardless of source, BigFloat sources included.

    Examples:
        >>> construct("2839231.999769250", Precision.of_digits(30)).prec
        100
    """
    target = BigFloat(precision)
    assign_from(target, source, kind=kind, radix=radix, rounding=rounding)
    return target


# Assign routines: (source, prec, rnd, radix) -> (engine value, ternary) -----------------------------------------------

def _assign_integer(source, prec: int, rnd: RoundingMode, radix: int, *, kind: ScalarKind):
    if isinstance(source, bool):
        raise TypeError("boolean values not supported")
    try:
        n = operator.index(source)
    except TypeError:
        raise TypeError(f"{kind} source must be an integer, but got {fmt_type(source)}") from None
    bounds = INT_BOUNDS.get(kind)
    if bounds is not None and not bounds[0] <= n <= bounds[1]:
        raise OverflowError(f"{fmt_value(n)} out of range for {kind}: [{bounds[0]}, {bounds[1]}]")
    return engine.assign(n, prec, rnd)


def _assign_float(source, prec: int, rnd: RoundingMode, radix: int, *, single: bool):
    if isinstance(source, (bool, str, bytes, Decimal)):
        raise TypeError(f"{'f32' if single else 'f64'} source must be float-like, but got {fmt_type(source)}")
    x = float(source)
    if single:
        exact, _ = engine.assign(x, FloatConf.DOUBLE_PRECISION, rnd)
        narrowed = engine.to_float(exact, rnd, single=True)
        if math.isinf(narrowed) and not math.isinf(x):
            raise OverflowError(f"{fmt_value(source)} out of range for {ScalarKind.F32}")
        x = narrowed
    return engine.assign(x, prec, rnd)


def _assign_fraction(source, prec: int, rnd: RoundingMode, radix: int):
    if isinstance(source, bool):
        raise TypeError("boolean values not supported")
    try:
        q = Fraction(source)
    except (TypeError, ValueError):
        raise TypeError(f"fraction source must be rational, but got {fmt_type(source)}") from None
    return engine.assign_rational(q.numerator, q.denominator, prec, rnd)


def _assign_str(source, prec: int, rnd: RoundingMode, radix: int):
    if isinstance(source, Decimal):
        source, radix = str(source), 10
    if not isinstance(source, str):
        raise TypeError(f"numeral must be a str, but got {fmt_type(source)}")
    _check_radix(radix, allow_auto=True)
    try:
        return engine.assign_str(source.strip(), radix, prec, rnd)
    except ValueError as e:
        raise ParseError(source, radix) from e


def _assign_bigfloat(source, prec: int, rnd: RoundingMode, radix: int):
    if not isinstance(source, BigFloat):
        raise TypeError(f"bigfloat source must be a BigFloat, but got {fmt_type(source)}")
    return engine.assign(source._value, prec, rnd)


_ASSIGN = frozendict({
    ScalarKind.I32: partial(_assign_integer, kind=ScalarKind.I32),
    ScalarKind.I64: partial(_assign_integer, kind=ScalarKind.I64),
    ScalarKind.U32: partial(_assign_integer, kind=ScalarKind.U32),
    ScalarKind.U64: partial(_assign_integer, kind=ScalarKind.U64),
    ScalarKind.INT: partial(_assign_integer, kind=ScalarKind.INT),
    ScalarKind.F32: partial(_assign_float, single=True),
    ScalarKind.F64: partial(_assign_float, single=False),
    ScalarKind.FRACTION: _assign_fraction,
    ScalarKind.STR: _assign_str,
    ScalarKind.BIGFLOAT: _assign_bigfloat,
})


# Extract routines: (source, rnd, base) -> native ----------------------------------------------------------------------

def _extract_integer(source: BigFloat, rnd: RoundingMode, base: int, *, kind: ScalarKind) -> int:
    lo, hi = INT_BOUNDS.get(kind, (None, None))
    return engine.to_int(source._value, rnd, lo, hi)


def _extract_fraction(source: BigFloat, rnd: RoundingMode, base: int) -> Fraction:
    return Fraction(*engine.to_ratio(source._value))


_EXTRACT = frozendict({
    ScalarKind.I32: partial(_extract_integer, kind=ScalarKind.I32),
    ScalarKind.I64: partial(_extract_integer, kind=ScalarKind.I64),
    ScalarKind.U32: partial(_extract_integer, kind=ScalarKind.U32),
    ScalarKind.U64: partial(_extract_integer, kind=ScalarKind.U64),
    ScalarKind.INT: partial(_extract_integer, kind=ScalarKind.INT),
    ScalarKind.F32: lambda source, rnd, base: engine.to_float(source._value, rnd, single=True),
    ScalarKind.F64: lambda source, rnd, base: engine.to_float(source._value, rnd),
    ScalarKind.FRACTION: _extract_fraction,
    ScalarKind.STR: lambda source, rnd, base: engine.get_str(source._value, base, rnd),
    ScalarKind.BIGFLOAT: lambda source, rnd, base: source.clone(),
})


# Helpers --------------------------------------------------------------------------------------------------------------

def _split_numeral(source: tuple) -> tuple[str, int]:
    if len(source) != 2:
        raise TypeError(f"numeral tuple must be (str, radix), but found {fmt_value(source)}")
    text, radix = source
    return text, radix


def _check_radix(radix: int, *, allow_auto: bool) -> None:
    if isinstance(radix, bool) or not isinstance(radix, int):
        raise TypeError(f"radix must be an int, but got {fmt_type(radix)}")
    if allow_auto and radix == FloatConf.AUTO_RADIX:
        return
    if not FloatConf.MIN_RADIX <= radix <= FloatConf.MAX_RADIX:
        expected = f"0 or {FloatConf.MIN_RADIX}..{FloatConf.MAX_RADIX}" if allow_auto \
            else f"{FloatConf.MIN_RADIX}..{FloatConf.MAX_RADIX}"
        raise ValueError(f"radix must be {expected}, but found {fmt_value(radix)}")
