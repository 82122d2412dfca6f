"""
MPFR primitives through gmpy2: the fixed capability surface every BigFloat operation goes through.

Values handled here are immutable gmpy2.mpfr objects. Each primitive runs in a fresh
gmpy2 context holding the operation's precision and rounding mode, with all traps off,
so exceptional results come back as NaN / infinities / zeros and never raise. The flags
raised in that context are merged into the process-wide sticky flags afterwards.

No other module imports gmpy2 directly.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
import math
import operator
import re
from functools import partial
from typing import Any, Callable

# Third-party ----------------------------------------------------------------------------------------------------------
import gmpy2
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from .conf import FloatConf
from .flags import Flag, raise_flags
from .rounding import RoundingMode

logger = logging.getLogger(__name__)

# Constants ------------------------------------------------------------------------------------------------------------

ROUNDING_CODES = frozendict({
    RoundingMode.TO_NEAREST: gmpy2.RoundToNearest,
    RoundingMode.TOWARD_ZERO: gmpy2.RoundToZero,
    RoundingMode.UP: gmpy2.RoundUp,
    RoundingMode.DOWN: gmpy2.RoundDown,
    RoundingMode.AWAY_FROM_ZERO: gmpy2.RoundAwayZero,
})

# Rounding letters of the gmpy2 format mini-language
_FORMAT_ROUNDING = frozendict({
    RoundingMode.TO_NEAREST: "N",
    RoundingMode.TOWARD_ZERO: "Z",
    RoundingMode.UP: "U",
    RoundingMode.DOWN: "D",
    RoundingMode.AWAY_FROM_ZERO: "Y",
})

# gmpy2 context attribute -> sticky flag
_CONTEXT_FLAGS = frozendict({
    "underflow": Flag.UNDERFLOW,
    "overflow": Flag.OVERFLOW,
    "divzero": Flag.DIV_BY_ZERO,
    "invalid": Flag.NAN,
    "inexact": Flag.INEXACT,
    "erange": Flag.ERANGE,
})

UNARY = frozendict({
    "square": gmpy2.square,
    "sqrt": gmpy2.sqrt,
    "rec_sqrt": gmpy2.rec_sqrt,
    "cbrt": gmpy2.cbrt,
    "rootn": gmpy2.rootn,
    "abs": abs,
    "neg": operator.neg,
    "log": gmpy2.log,
    "log2": gmpy2.log2,
    "log10": gmpy2.log10,
    "log1p": gmpy2.log1p,
    "exp": gmpy2.exp,
    "exp2": gmpy2.exp2,
    "exp10": gmpy2.exp10,
    "expm1": gmpy2.expm1,
    "sin": gmpy2.sin,
    "cos": gmpy2.cos,
    "tan": gmpy2.tan,
    "sec": gmpy2.sec,
    "csc": gmpy2.csc,
    "cot": gmpy2.cot,
    "asin": gmpy2.asin,
    "acos": gmpy2.acos,
    "atan": gmpy2.atan,
    "sinh": gmpy2.sinh,
    "cosh": gmpy2.cosh,
    "tanh": gmpy2.tanh,
    "sech": gmpy2.sech,
    "csch": gmpy2.csch,
    "coth": gmpy2.coth,
    "asinh": gmpy2.asinh,
    "acosh": gmpy2.acosh,
    "atanh": gmpy2.atanh,
    "gamma": gmpy2.gamma,
    "lngamma": gmpy2.lngamma,
    "digamma": gmpy2.digamma,
    "zeta": gmpy2.zeta,
    "erf": gmpy2.erf,
    "erfc": gmpy2.erfc,
})

CONSTANTS = frozendict({
    "log2": gmpy2.const_log2,
    "pi": gmpy2.const_pi,
    "euler": gmpy2.const_euler,
    "catalan": gmpy2.const_catalan,
})

_PRINTF_SPEC = re.compile(
    r"%(?P<flags>[-#0 +]*)(?P<width>[0-9]+)?(?:\.(?P<precision>[0-9]*))?R\*(?P<conv>[aAbeEfFgG])"
)

# Exponent marker per conversion, for radix point and trailing zero handling
_EXPONENT_MARKER = frozendict({
    "a": "p", "A": "P", "b": "p",
    "e": "e", "E": "E",
    "f": "", "F": "",
})


# Context helpers ------------------------------------------------------------------------------------------------------

def _run(prec: int, rnd: RoundingMode, fn: Callable, *args: Any, **options: Any):
    """Call fn(*args) at prec bits with rounding rnd and record the raised flags."""
    with gmpy2.context(precision=prec, round=ROUNDING_CODES[rnd], **options):
        result = fn(*args)
        active = gmpy2.get_context()
        raised = [flag for name, flag in _CONTEXT_FLAGS.items() if getattr(active, name)]
    # gmpy2 may hand back an argument unchanged, with the rc of the call that built it
    if isinstance(result, gmpy2.mpfr) and result.rc and all(result is not arg for arg in args):
        raised.append(Flag.INEXACT)
    raise_flags(raised)
    return result


def _make(prec: int, fn: Callable, *args: Any):
    """Build a special value at prec bits without touching the flags."""
    with gmpy2.context(precision=prec):
        return fn(*args)


# Allocation and special values ----------------------------------------------------------------------------------------

def allocate(prec: int):
    """A fresh value: NaN at prec bits."""
    return _make(prec, gmpy2.nan)


def nan(prec: int):
    return _make(prec, gmpy2.nan)


def inf(prec: int, negative: bool = False):
    return _make(prec, gmpy2.inf, -1 if negative else 1)


def zero(prec: int, negative: bool = False):
    return _make(prec, gmpy2.zero, -1 if negative else 1)


def constant(name: str, prec: int, rnd: RoundingMode):
    """Mathematical constant by name (log2, pi, euler, catalan) rounded to prec bits."""
    return _run(prec, rnd, CONSTANTS[name])


# Assignment -----------------------------------------------------------------------------------------------------------

def assign(source: Any, prec: int, rnd: RoundingMode) -> tuple[Any, int]:
    """
    Round an int, float, mpq or mpfr to prec bits.

    Returns:
        (value, ternary) where ternary is negative, zero or positive when the stored
        value is below, equal to or above the exact source.
    """
    value = _run(prec, rnd, gmpy2.mpfr, source)
    if gmpy2.is_nan(value):
        return value, 0
    return value, (value > source) - (value < source)


def assign_rational(numerator: int, denominator: int, prec: int, rnd: RoundingMode) -> tuple[Any, int]:
    return assign(gmpy2.mpq(numerator, denominator), prec, rnd)


def assign_str(text: str, radix: int, prec: int, rnd: RoundingMode) -> tuple[Any, int]:
    """
    Parse a numeral in radix (0 = detect from prefix, else 2..62), rounding to prec bits.

    Raises:
        ValueError: If text is not a valid numeral in radix.
    """
    if not text.strip():
        raise ValueError("empty numeral")
    value = _run(prec, rnd, partial(gmpy2.mpfr, base=radix), text)
    return value, value.rc


def round_to(x, prec: int, rnd: RoundingMode):
    """Round x to prec bits; unary plus rounds to the active context."""
    return _run(prec, rnd, operator.pos, x)


# Arithmetic -----------------------------------------------------------------------------------------------------------

def add(target, other, prec: int, rnd: RoundingMode):
    return _run(prec, rnd, gmpy2.add, target, other)


def sub(target, other, prec: int, rnd: RoundingMode):
    return _run(prec, rnd, gmpy2.sub, target, other)


def rsub(target, other, prec: int, rnd: RoundingMode):
    """other - target, to be stored in target."""
    return _run(prec, rnd, gmpy2.sub, other, target)


def mul(target, other, prec: int, rnd: RoundingMode):
    return _run(prec, rnd, gmpy2.mul, target, other)


def div(target, other, prec: int, rnd: RoundingMode):
    return _run(prec, rnd, gmpy2.div, target, other)


def rdiv(target, other, prec: int, rnd: RoundingMode):
    """other / target, to be stored in target."""
    return _run(prec, rnd, gmpy2.div, other, target)


def pow(target, other, prec: int, rnd: RoundingMode):
    return _run(prec, rnd, operator.pow, target, other)


def rpow(target, other, prec: int, rnd: RoundingMode):
    """other ** target, to be stored in target."""
    return _run(prec, rnd, operator.pow, other, target)


def unary(name: str, x, *args: Any, prec: int, rnd: RoundingMode):
    """Apply the unary primitive registered as name, with optional extra scalar arguments."""
    return _run(prec, rnd, UNARY[name], x, *args)


# Queries --------------------------------------------------------------------------------------------------------------

def is_nan(x) -> bool:
    return gmpy2.is_nan(x)


def is_inf(x) -> bool:
    return gmpy2.is_infinite(x)


def is_number(x) -> bool:
    return gmpy2.is_finite(x)


def is_zero(x) -> bool:
    return gmpy2.is_zero(x)


def is_regular(x) -> bool:
    return gmpy2.is_regular(x)


def is_signed(x) -> bool:
    return gmpy2.is_signed(x)


def get_exp(x) -> int:
    return int(gmpy2.get_exp(x))


def compare(a, b) -> int | None:
    """
    Three-way comparison of a with an mpfr, int or float.

    Returns:
        -1, 0 or 1, or None when the operands are unordered (a NaN is involved);
        the unordered case raises the range-error flag.
    """
    if _is_nan(a) or _is_nan(b):
        raise_flags([Flag.ERANGE])
        return None
    return (a > b) - (a < b)


def _is_nan(v) -> bool:
    if isinstance(v, float):
        return math.isnan(v)
    if isinstance(v, int):
        return False
    return gmpy2.is_nan(v)


# Conversion to native -------------------------------------------------------------------------------------------------

def to_float(x, rnd: RoundingMode, *, single: bool = False) -> float:
    """
    Round x to IEEE 754 binary64, or binary32 when single, including subnormals.

    The result is exactly representable, so the final float() conversion is exact.
    """
    if single:
        prec, emin, emax = FloatConf.SINGLE_PRECISION, FloatConf.SINGLE_EMIN, FloatConf.SINGLE_EMAX
    else:
        prec, emin, emax = FloatConf.DOUBLE_PRECISION, FloatConf.DOUBLE_EMIN, FloatConf.DOUBLE_EMAX
    rounded = _run(prec, rnd, operator.pos, x, emin=emin, emax=emax, subnormalize=True)
    return float(rounded)


def to_int(x, rnd: RoundingMode, lo: int | None = None, hi: int | None = None) -> int:
    """
    Round x to an integer, saturating to [lo, hi] when bounds are given.

    NaN yields 0, infinities yield the matching bound (0 when unbounded); both, like
    saturation, raise the range-error flag.
    """
    if gmpy2.is_nan(x):
        raise_flags([Flag.ERANGE])
        return 0
    if gmpy2.is_infinite(x):
        raise_flags([Flag.ERANGE])
        bound = lo if gmpy2.is_signed(x) else hi
        return 0 if bound is None else bound

    prec = max(x.precision, 64)
    n = int(_run(prec, rnd, gmpy2.rint, x))
    if lo is not None and n < lo:
        raise_flags([Flag.ERANGE])
        return lo
    if hi is not None and n > hi:
        raise_flags([Flag.ERANGE])
        return hi
    return n


def to_ratio(x) -> tuple[int, int]:
    """Exact (numerator, denominator) of a finite x, denominator positive."""
    if gmpy2.is_nan(x):
        raise ValueError("cannot convert NaN to integer ratio")
    if gmpy2.is_infinite(x):
        raise OverflowError("cannot convert infinity to integer ratio")
    numerator, denominator = x.as_integer_ratio()
    return int(numerator), int(denominator)


def get_str(x, base: int, rnd: RoundingMode) -> tuple[str, int]:
    """
    Digits and exponent of x in base, such that x = 0.d1d2... * base^exponent.

    Produces as many digits as needed to read the value back exactly at its precision.
    """
    if gmpy2.is_nan(x):
        return "@NaN@", 0
    if gmpy2.is_infinite(x):
        return ("-@Inf@" if gmpy2.is_signed(x) else "@Inf@"), 0
    digits, exponent, _ = _run(x.precision, rnd, x.digits, base)
    return digits, int(exponent)


# Formatted output -----------------------------------------------------------------------------------------------------

def snprintf(buffer: bytearray | None, spec: str, rnd: RoundingMode, x) -> int:
    """
    Render x with a printf-like specifier "%[#0- +][width][.precision]R*<conv>".

    Writes at most len(buffer) - 1 characters and a terminating zero byte into buffer.
    With buffer None (or empty) nothing is written: the call is a length query.

    Returns:
        The full rendered length, or -1 when the specifier cannot be rendered.
    """
    match = _PRINTF_SPEC.fullmatch(spec)
    if match is None:
        logger.debug("unsupported format specifier %r", spec)
        return -1
    try:
        text = _render(match, rnd, x)
    except ValueError as e:
        logger.debug("engine rejected format specifier %r: %s", spec, e)
        return -1

    data = text.encode("ascii")
    if buffer:
        n = min(len(data), len(buffer) - 1)
        buffer[:n] = data[:n]
        buffer[n] = 0
    return len(data)


def _render(match: re.Match, rnd: RoundingMode, x) -> str:
    flags = match["flags"]
    width = int(match["width"] or 0)
    precision = None if match["precision"] is None else int(match["precision"] or 0)
    conv = match["conv"]

    sign = "+" if "+" in flags else " " if " " in flags else ""
    rounding = _FORMAT_ROUNDING[rnd]
    alternate = "#" in flags
    finite = gmpy2.is_finite(x)

    if conv in "gG":
        body = _render_general(x, sign, precision, rounding, conv, alternate=alternate, finite=finite)
    else:
        if precision is None and conv in "fF":
            precision = FloatConf.PRINTF_PRECISION
        elif precision is None and conv in "eE":
            precision = _exact_digits(x.precision) - 1
        body = _format(x, sign, precision, rounding, conv)
        if alternate and finite:
            body = _force_point(body, _EXPONENT_MARKER[conv])

    return _pad(body, width, flags, conv, finite=finite)


def _render_general(x, sign: str, precision: int | None, rounding: str, conv: str, *,
                    alternate: bool, finite: bool) -> str:
    """%g: scientific when the exponent is below -4 or not below the precision, else fixed."""
    p = FloatConf.PRINTF_PRECISION if precision is None else max(precision, 1)
    sci_conv, fix_conv = ("e", "f") if conv == "g" else ("E", "F")

    sci = _format(x, sign, p - 1, rounding, sci_conv)
    if not finite:
        return sci

    exponent = int(sci.rpartition(sci_conv)[2])
    if p > exponent >= -4:
        body, marker = _format(x, sign, p - 1 - exponent, rounding, fix_conv), ""
    else:
        body, marker = sci, sci_conv

    if alternate:
        return _force_point(body, marker)
    return _strip_zeros(body, marker)


def _format(x, sign: str, digits: int | None, rounding: str, conv: str) -> str:
    """
    gmpy2 rendering of one conversion with digits after the radix point.

    gmpy2 writes "2.0" where printf writes "2" for zero digits, so a radix point
    without digits is removed again.
    """
    dot = "" if digits is None else f".{digits}"
    body = format(x, f"{sign}{dot}{rounding}{conv}")
    if digits == 0 and gmpy2.is_finite(x):
        marker = _EXPONENT_MARKER[conv]
        head, sep, tail = body.partition(marker) if marker else (body, "", "")
        body = head.partition(".")[0] + sep + tail
    return body


def _exact_digits(prec: int) -> int:
    """Significant decimal digits needed to read a prec-bit value back exactly."""
    return 1 + math.ceil(prec * math.log10(2))


def _force_point(body: str, marker: str) -> str:
    head, sep, tail = body.partition(marker) if marker else (body, "", "")
    if "." not in head:
        head += "."
    return head + sep + tail


def _strip_zeros(body: str, marker: str) -> str:
    head, sep, tail = body.partition(marker) if marker else (body, "", "")
    if "." in head:
        head = head.rstrip("0").rstrip(".")
    return head + sep + tail


def _pad(body: str, width: int, flags: str, conv: str, *, finite: bool) -> str:
    fill = width - len(body)
    if fill <= 0:
        return body
    if "-" in flags:
        return body + " " * fill
    if "0" in flags and finite:
        prefix = 1 if body[:1] in ("+", "-", " ") else 0
        if conv in "aA" and body[prefix:prefix + 2].lower() == "0x":
            prefix += 2
        return body[:prefix] + "0" * fill + body[prefix:]
    return " " * fill + body
