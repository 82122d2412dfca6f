"""
Unary algebraic and transcendental operations, table-driven over engine primitives.

Every operation follows one pattern: an owned receiver is overwritten with the result
and returned, a borrowed receiver is cloned and the clone is passed to the owned form.
Results are rounded to the receiver's precision.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass

# Third-party ----------------------------------------------------------------------------------------------------------
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from . import engine
from .rounding import RoundingMode, resolve
from .utils import fmt_type, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class UnaryOp:
    """
    A unary operation bound to an engine primitive.

    Attributes:
        name: Method name exposed on BigFloat.
        primitive: Key of engine.UNARY.
        doc: One-line description used as the method docstring.
        takes_degree: The operation takes one extra non-negative int argument.
    """
    name: str
    primitive: str
    doc: str
    takes_degree: bool = False


# Constants ------------------------------------------------------------------------------------------------------------

UNARY_OPS = frozendict({op.name: op for op in (
    UnaryOp("square", "square", "x ** 2"),
    UnaryOp("sqrt", "sqrt", "Square root."),
    UnaryOp("rec_sqrt", "rec_sqrt", "Reciprocal square root, 1 / sqrt(x)."),
    UnaryOp("cbrt", "cbrt", "Cube root."),
    UnaryOp("root", "rootn", "k-th root.", takes_degree=True),
    UnaryOp("abs", "abs", "Absolute value."),

    UnaryOp("log", "log", "Natural logarithm."),
    UnaryOp("log2", "log2", "Base-2 logarithm."),
    UnaryOp("log10", "log10", "Base-10 logarithm."),
    UnaryOp("log1p", "log1p", "log(1 + x)."),
    UnaryOp("exp", "exp", "e ** x"),
    UnaryOp("exp2", "exp2", "2 ** x"),
    UnaryOp("exp10", "exp10", "10 ** x"),
    UnaryOp("expm1", "expm1", "exp(x) - 1."),

    UnaryOp("sin", "sin", "Sine."),
    UnaryOp("cos", "cos", "Cosine."),
    UnaryOp("tan", "tan", "Tangent."),
    UnaryOp("sec", "sec", "Secant."),
    UnaryOp("csc", "csc", "Cosecant."),
    UnaryOp("cot", "cot", "Cotangent."),
    UnaryOp("asin", "asin", "Arc-sine."),
    UnaryOp("acos", "acos", "Arc-cosine."),
    UnaryOp("atan", "atan", "Arc-tangent."),

    UnaryOp("sinh", "sinh", "Hyperbolic sine."),
    UnaryOp("cosh", "cosh", "Hyperbolic cosine."),
    UnaryOp("tanh", "tanh", "Hyperbolic tangent."),
    UnaryOp("sech", "sech", "Hyperbolic secant."),
    UnaryOp("csch", "csch", "Hyperbolic cosecant."),
    UnaryOp("coth", "coth", "Hyperbolic cotangent."),
    UnaryOp("asinh", "asinh", "Inverse hyperbolic sine."),
    UnaryOp("acosh", "acosh", "Inverse hyperbolic cosine."),
    UnaryOp("atanh", "atanh", "Inverse hyperbolic tangent."),

    UnaryOp("gamma", "gamma", "Gamma function."),
    UnaryOp("lngamma", "lngamma", "Natural logarithm of the gamma function."),
    UnaryOp("digamma", "digamma", "Digamma function."),
    UnaryOp("zeta", "zeta", "Riemann zeta function."),
    UnaryOp("erf", "erf", "Error function."),
    UnaryOp("erfc", "erfc", "Complementary error function."),
)})


# Methods --------------------------------------------------------------------------------------------------------------

def apply_unary(name: str, operand, *args, owned: bool = False, rounding: RoundingMode | None = None):
    """
    Apply the unary operation name to operand and return the BigFloat holding the result.

    Raises:
        TypeError: If the degree of a degree-taking operation is not an int.
        ValueError: If the degree is negative, or arguments do not match the operation.
    """
    op = UNARY_OPS[name]
    _check_args(op, args)
    if not owned:
        return apply_unary(name, operand.clone(), *args, owned=True, rounding=rounding)

    operand._value = engine.unary(op.primitive, operand._value, *args, prec=operand._prec, rnd=resolve(rounding))
    return operand


def _check_args(op: UnaryOp, args: tuple) -> None:
    if not op.takes_degree:
        if args:
            raise ValueError(f"{op.name}() takes no arguments, but got {len(args)}")
        return

    if len(args) != 1:
        raise ValueError(f"{op.name}() takes exactly one degree argument, but got {len(args)}")
    degree = args[0]
    if isinstance(degree, bool) or not isinstance(degree, int):
        raise TypeError(f"{op.name}() degree must be an int, but got {fmt_type(degree)}")
    if degree < 0:
        raise ValueError(f"{op.name}() degree must be non-negative, but found {fmt_value(degree)}")
