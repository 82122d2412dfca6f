"""
Binary arithmetic with ownership-directed result storage.

Each operator is one BinaryOp record; apply_binary() decides, from which operands the
caller owns, which BigFloat receives the result:

    - an owned left operand is reused (so the result keeps the left precision);
    - otherwise an owned right operand is reused, computing the same left OP right
      (commutative operators just swap, the others use the reversed primitive);
    - otherwise the left operand is cloned and the clone is reused.

Borrowed operands are never mutated. A native left operand (int or float) behaves as
a borrowed operand that cannot hold the result, so the right BigFloat is reused when
owned and cloned otherwise.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Callable

# Third-party ----------------------------------------------------------------------------------------------------------
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from . import engine
from .rounding import RoundingMode, resolve


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class BinaryOp:
    """
    A binary operator bound to its engine primitives.

    Attributes:
        name: Operator name, as in the add/sub/mul/div/pow methods.
        primitive: Computes target OP other into target.
        reversed_primitive: Computes other OP target into target.
        commutative: Operands may be swapped without changing the result.
    """
    name: str
    primitive: Callable
    reversed_primitive: Callable
    commutative: bool


# Constants ------------------------------------------------------------------------------------------------------------

BINARY_OPS = frozendict({
    "add": BinaryOp("add", engine.add, engine.add, commutative=True),
    "sub": BinaryOp("sub", engine.sub, engine.rsub, commutative=False),
    "mul": BinaryOp("mul", engine.mul, engine.mul, commutative=True),
    "div": BinaryOp("div", engine.div, engine.rdiv, commutative=False),
    "pow": BinaryOp("pow", engine.pow, engine.rpow, commutative=False),
})


# Methods --------------------------------------------------------------------------------------------------------------

def is_native(value: Any) -> bool:
    """True for int and float operands; bool is not a number here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def apply_binary(name: str, left, right, *,
                 left_owned: bool = False,
                 right_owned: bool = False,
                 rounding: RoundingMode | None = None):
    """
    Compute left OP right and return the BigFloat holding the result.

    Args:
        name: Key of BINARY_OPS.
        left, right: BigFloat operands, at most one of them native.
        left_owned, right_owned: The caller relinquished that operand; its object may
            be overwritten and returned.
        rounding: Explicit rounding mode, or None for the thread's current mode.

    Returns:
        The reused owned operand, or a clone of a borrowed one. The result precision is
        the precision of that object.
    """
    op = BINARY_OPS[name]
    rnd = resolve(rounding)

    if is_native(left):
        target = right if right_owned else right.clone()
        return _store(target, op.reversed_primitive, left, rnd)

    if left_owned:
        return _store(left, op.primitive, right, rnd)

    if right_owned:
        if op.commutative:
            return _store(right, op.primitive, left, rnd)
        return _store(right, op.reversed_primitive, left, rnd)

    return _store(left.clone(), op.primitive, right, rnd)


def negate(operand, *, owned: bool = False):
    """
    Flip the sign; an owned operand flips in place, a borrowed one is cloned first.

    Negation is exact at the operand's own precision, so no rounding happens.
    """
    target = operand if owned else operand.clone()
    target._value = engine.unary("neg", target._value, prec=target._prec, rnd=RoundingMode.TO_NEAREST)
    return target


def _store(target, primitive: Callable, other, rnd: RoundingMode):
    other_value = other if is_native(other) else other._value
    target._value = primitive(target._value, other_value, target._prec, rnd)
    return target
