"""
Rounding modes and the thread-scoped rounding context.

Every mutating operation that is not given an explicit mode rounds with the
current thread's mode. Each thread starts at RoundingMode.TO_NEAREST.

Example:
    >>> with rounding_mode(RoundingMode.DOWN):
    ...     third = one / 3
    >>> get_rounding_mode()
    <RoundingMode.TO_NEAREST: 'to_nearest'>
"""

# Standard library -----------------------------------------------------------------------------------------------------
import threading
from contextlib import contextmanager
from enum import StrEnum, unique
from typing import Any, Callable, Iterator, TypeVar

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import fmt_type

T = TypeVar("T")


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class RoundingMode(StrEnum):
    """
    Policy mapping an exact result to a representable value at a given precision.

    Attributes:
        TO_NEAREST: Round to nearest, ties to even.
        TOWARD_ZERO: Round toward zero (truncate).
        UP: Round toward plus infinity.
        DOWN: Round toward minus infinity.
        AWAY_FROM_ZERO: Round away from zero.
    """
    TO_NEAREST = "to_nearest"
    TOWARD_ZERO = "toward_zero"
    UP = "up"
    DOWN = "down"
    AWAY_FROM_ZERO = "away_from_zero"

    def use_in(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Shorthand for use_rounding_mode(self, fn, ...)."""
        return use_rounding_mode(self, fn, *args, **kwargs)


class _RoundingContext(threading.local):
    mode: RoundingMode = RoundingMode.TO_NEAREST


_context = _RoundingContext()


# Methods --------------------------------------------------------------------------------------------------------------

def get_rounding_mode() -> RoundingMode:
    """Return the current thread's rounding mode."""
    return _context.mode


def set_rounding_mode(mode: RoundingMode) -> None:
    """Replace the current thread's rounding mode."""
    _context.mode = _validate(mode)


def use_rounding_mode(mode: RoundingMode, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Call fn with the thread's rounding mode temporarily set to mode.

    The previous mode is restored on every exit path, including when fn raises.
    """
    with rounding_mode(mode):
        return fn(*args, **kwargs)


@contextmanager
def rounding_mode(mode: RoundingMode) -> Iterator[RoundingMode]:
    """Scoped override of the current thread's rounding mode."""
    previous = _context.mode
    _context.mode = _validate(mode)
    try:
        yield mode
    finally:
        _context.mode = previous


def resolve(mode: RoundingMode | None) -> RoundingMode:
    """Return mode when given explicitly, otherwise the thread's current mode."""
    if mode is None:
        return _context.mode
    return _validate(mode)


def _validate(mode: Any) -> RoundingMode:
    if isinstance(mode, RoundingMode):
        return mode
    if isinstance(mode, str):
        try:
            return RoundingMode(mode)
        except ValueError:
            raise ValueError(f"unknown rounding mode {mode!r}, expected one of "
                             f"{', '.join(m.value for m in RoundingMode)}") from None
    raise TypeError(f"rounding mode must be RoundingMode, but got {fmt_type(mode)}")
