"""
Structured formatting of BigFloat values.

FormatOptions is an immutable record turned into a printf-like specifier by
format_string(), then rendered by the engine with format(). Every with_* method
returns a new record.

Examples:
    >>> opts = FormatOptions(Format.FIXED).with_flags(FormatFlag.SIGN | FormatFlag.ZERO_PADDED)
    >>> opts.with_width(12).with_precision(3).format_string()
    '%0+12.3R*f'
    >>> opts.with_width(12).with_precision(3).format(BigFloat.from_value(12345.67))
    '+0012345.670'
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
from dataclasses import dataclass, replace
from enum import Flag, StrEnum, auto, unique
from typing import Self

# Third-party ----------------------------------------------------------------------------------------------------------
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from . import engine
from .bigfloat import BigFloat
from .errors import FormatError
from .precision import Precision
from .rounding import RoundingMode, resolve
from .sentinels import CONTEXT, UNSET, ContextType, UnsetType, ifnotunset
from .utils import fmt_type, fmt_value

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Format(StrEnum):
    """
    Output notation; the value is the lower-case conversion letter.

    Attributes:
        HEX_FLOAT: Hexadecimal mantissa with binary exponent, e.g. 0x1.8p+0.
        BINARY: Binary mantissa with binary exponent; has no upper-case form.
        FIXED: Fixed-point notation.
        SCIENTIFIC: Decimal mantissa with decimal exponent.
        FIXED_OR_SCIENTIFIC: Fixed or scientific, whichever is shorter, as C %g.
    """
    HEX_FLOAT = "a"
    BINARY = "b"
    FIXED = "f"
    SCIENTIFIC = "e"
    FIXED_OR_SCIENTIFIC = "g"


@unique
class Case(StrEnum):
    LOWER = "lower"
    UPPER = "upper"


class FormatFlag(Flag):
    """
    printf flag characters.

    Attributes:
        ALTERNATE_FORM: '#', always print the radix point; %g keeps trailing zeros.
        ZERO_PADDED: '0', pad with leading zeros after the sign; ignored for NaN and infinities.
        LEFT_ADJUSTED: '-', pad on the right; overrides ZERO_PADDED.
        BLANK: ' ', a space where a positive value has no sign.
        SIGN: '+', always print the sign; overrides BLANK.
    """
    ALTERNATE_FORM = auto()
    ZERO_PADDED = auto()
    LEFT_ADJUSTED = auto()
    BLANK = auto()
    SIGN = auto()


# Canonical emission order of flag characters
_FLAG_CHARS = frozendict({
    FormatFlag.ALTERNATE_FORM: "#",
    FormatFlag.ZERO_PADDED: "0",
    FormatFlag.LEFT_ADJUSTED: "-",
    FormatFlag.BLANK: " ",
    FormatFlag.SIGN: "+",
})


@dataclass(frozen=True)
class FormatOptions:
    """
    Formatting options record.

    Attributes:
        kind: Output notation.
        flags: printf flags, any combination of FormatFlag members.
        case: Letter case of the conversion; BINARY ignores it.
        rounding_mode: Explicit RoundingMode, or CONTEXT to round with the thread's
            current mode at format() time.
        width: Minimum field width, or None.
        precision: Digits after the radix point (significant digits for %g), or None.
            When None, a/b/e render as many digits as needed to read the value back
            exactly and f/g render 6.
    """
    kind: Format
    flags: FormatFlag = FormatFlag(0)
    case: Case = Case.LOWER
    rounding_mode: RoundingMode | ContextType = CONTEXT
    width: int | None = None
    precision: int | None = None

    def __post_init__(self):
        """Validate and normalize fields"""
        try:
            object.__setattr__(self, "kind", Format(self.kind))
        except ValueError:
            raise ValueError(f"kind expected one of {', '.join(f.name for f in Format)} "
                             f"but found {fmt_value(self.kind)}") from None

        if not isinstance(self.flags, FormatFlag):
            raise TypeError(f"flags must be FormatFlag, but got {fmt_type(self.flags)}")

        object.__setattr__(self, "case", Case(self.case))

        if self.rounding_mode is not CONTEXT:
            object.__setattr__(self, "rounding_mode", resolve(self.rounding_mode))

        for name in ("width", "precision"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be int | None, but got {fmt_type(value)}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative, but found {fmt_value(value)}")

    # Functional updates ---------------------------------------------------------------------------------------------

    def with_format(self, kind: Format) -> Self:
        return replace(self, kind=kind)

    def with_flags(self, flags: FormatFlag) -> Self:
        return replace(self, flags=flags)

    def with_case(self, case: Case) -> Self:
        return replace(self, case=case)

    def with_rounding_mode(self, mode: RoundingMode) -> Self:
        return replace(self, rounding_mode=mode)

    def with_context_rounding_mode(self) -> Self:
        """Round with the thread's rounding mode current at format() time."""
        return replace(self, rounding_mode=CONTEXT)

    def with_width(self, width: int) -> Self:
        return replace(self, width=width)

    def without_width(self) -> Self:
        return replace(self, width=None)

    def with_precision(self, precision: int | Precision) -> Self:
        """Precision in decimal digits; a Precision is converted from bits to digits."""
        if isinstance(precision, Precision):
            precision = precision.digits
        return replace(self, precision=precision)

    def with_precision_of(self, value: BigFloat) -> Self:
        """
        Use as many digits as the precision of value holds.

        Examples:
            >>> FormatOptions(Format.FIXED).with_precision_of(BigFloat(53)).precision
            15
        """
        if not isinstance(value, BigFloat):
            raise TypeError(f"value must be a BigFloat, but got {fmt_type(value)}")
        return self.with_precision(value.precision)

    def without_precision(self) -> Self:
        return replace(self, precision=None)

    def merge(self,
              kind: Format | UnsetType = UNSET,
              flags: FormatFlag | UnsetType = UNSET,
              case: Case | UnsetType = UNSET,
              rounding_mode: RoundingMode | ContextType | UnsetType = UNSET,
              width: int | None | UnsetType = UNSET,
              precision: int | None | UnsetType = UNSET,
              ) -> Self:
        """
        Create a new FormatOptions instance with merged options.

        Parameters not provided (UNSET) are inherited from the current instance;
        None clears width or precision.
        """
        return FormatOptions(kind=ifnotunset(kind, default=self.kind),
                             flags=ifnotunset(flags, default=self.flags),
                             case=ifnotunset(case, default=self.case),
                             rounding_mode=ifnotunset(rounding_mode, default=self.rounding_mode),
                             width=ifnotunset(width, default=self.width),
                             precision=ifnotunset(precision, default=self.precision))

    # Rendering ------------------------------------------------------------------------------------------------------

    @property
    def conversion(self) -> str:
        """Conversion letter of kind and case."""
        if self.case is Case.UPPER and self.kind is not Format.BINARY:
            return self.kind.value.upper()
        return self.kind.value

    def format_string(self) -> str:
        """
        The engine specifier: %[flags][width][.precision]R*<conversion>.

        Examples:
            >>> FormatOptions(Format.SCIENTIFIC, case=Case.UPPER).format_string()
            '%R*E'
            >>> FormatOptions(Format.FIXED, width=10, precision=20).format_string()
            '%10.20R*f'
        """
        flags = "".join(char for flag, char in _FLAG_CHARS.items() if flag in self.flags)
        width = "" if self.width is None else str(self.width)
        precision = "" if self.precision is None else f".{self.precision}"
        return f"%{flags}{width}{precision}R*{self.conversion}"

    def format(self, value: BigFloat) -> str:
        """
        Render value with these options.

        Raises:
            FormatError: If the engine cannot render value; not recoverable.
        """
        mode = resolve(None) if self.rounding_mode is CONTEXT else self.rounding_mode
        return format_raw(self.format_string(), mode, value)


# Methods --------------------------------------------------------------------------------------------------------------

def format_raw(spec: str, rounding_mode: RoundingMode | ContextType | None, value: BigFloat) -> str:
    """
    Render value with a hand-written engine specifier.

    Queries the rendered length first, then renders into a buffer of exactly that
    size plus the terminator, which is stripped.

    Args:
        spec: Specifier as built by FormatOptions.format_string().
        rounding_mode: Explicit mode, or None / CONTEXT for the thread's current mode.
        value: BigFloat to render.

    Raises:
        TypeError: If value is not a BigFloat.
        FormatError: If the engine reports a negative length.
    """
    if not isinstance(value, BigFloat):
        raise TypeError(f"value must be a BigFloat, but got {fmt_type(value)}")
    mode = resolve(None if rounding_mode is CONTEXT else rounding_mode)

    length = engine.snprintf(None, spec, mode, value._value)
    if length < 0:
        _fail(spec, value, length)

    buffer = bytearray(length + 1)
    written = engine.snprintf(buffer, spec, mode, value._value)
    if written < 0:
        _fail(spec, value, written)
    return buffer[:written].decode("ascii")


def _fail(spec: str, value: BigFloat, length: int):
    logger.error("engine returned length %d for specifier %r and %s", length, spec, fmt_value(value))
    raise FormatError(f"cannot render {fmt_value(value)} with specifier {spec!r}")
