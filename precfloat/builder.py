"""
Fluent construction of BigFloat values: precision first, then the value.

Examples:
    >>> BigFloat.new().fresh().is_nan()
    True
    >>> BigFloat.new().with_prec(Precision.of_digits(30)).from_value("0.1").prec
    100
    >>> BigFloat.new().with_prec(256).pi().prec
    256
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Self

# Local ----------------------------------------------------------------------------------------------------------------
from . import engine
from .bigfloat import BigFloat
from .convert import construct
from .precision import Precision, as_bits
from .rounding import RoundingMode, resolve


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Builder:
    """
    BigFloat factory bound to a precision.

    Attributes:
        precision: Precision of built values, or None for the process default precision
            current at build time.
    """
    precision: Precision | None = None

    def __post_init__(self):
        if self.precision is not None and not isinstance(self.precision, Precision):
            object.__setattr__(self, "precision", Precision(as_bits(self.precision)))

    def with_prec(self, precision: int | Precision) -> Self:
        """Builder for values of the given precision, in bits or as a Precision."""
        return Builder(precision)

    def fresh(self) -> BigFloat:
        """A new NaN value."""
        return BigFloat(self.precision)

    def from_value(self, source: Any, *, kind=None, radix: int = 10,
                   rounding: RoundingMode | None = None) -> BigFloat:
        """A new value assigned from source, see convert.construct()."""
        return construct(source, self.precision, kind=kind, radix=radix, rounding=rounding)

    def log2(self, *, rounding: RoundingMode | None = None) -> BigFloat:
        """Natural logarithm of 2."""
        return self._constant("log2", rounding)

    def pi(self, *, rounding: RoundingMode | None = None) -> BigFloat:
        return self._constant("pi", rounding)

    def euler(self, *, rounding: RoundingMode | None = None) -> BigFloat:
        """Euler-Mascheroni constant, 0.5772..."""
        return self._constant("euler", rounding)

    def catalan(self, *, rounding: RoundingMode | None = None) -> BigFloat:
        """Catalan's constant, 0.9159..."""
        return self._constant("catalan", rounding)

    def _constant(self, name: str, rounding: RoundingMode | None) -> BigFloat:
        target = BigFloat(self.precision)
        target._value = engine.constant(name, target._prec, resolve(rounding))
        return target
