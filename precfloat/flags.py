"""
Sticky exception flags raised by engine operations.

Six independent indicators, process-wide and shared by all threads, set as a side
effect of arithmetic and cleared only on request. Access is serialized by a lock;
under concurrent arithmetic the flags are still advisory, since another thread's
operation may set them between a computation and its inspection.

Example:
    >>> clear_all()
    >>> third = BigFloat.new().from_value(1) / 3
    >>> Flag.INEXACT.is_set()
    True
"""

# Standard library -----------------------------------------------------------------------------------------------------
import threading
from dataclasses import dataclass, fields
from enum import StrEnum, unique
from typing import Iterable

_lock = threading.Lock()
_raised: set["Flag"] = set()


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Flag(StrEnum):
    """
    Exceptional numeric conditions recorded by the engine.

    Attributes:
        UNDERFLOW: A nonzero result was rounded to a magnitude below the exponent range.
        OVERFLOW: A result exceeded the exponent range.
        DIV_BY_ZERO: An exact infinite result was produced from finite operands.
        NAN: A NaN result was produced.
        INEXACT: A result differs from the exact mathematical value.
        ERANGE: A comparison or integer conversion had no valid result.
    """
    UNDERFLOW = "underflow"
    OVERFLOW = "overflow"
    DIV_BY_ZERO = "div_by_zero"
    NAN = "nan"
    INEXACT = "inexact"
    ERANGE = "erange"

    def is_set(self) -> bool:
        with _lock:
            return self in _raised

    def set(self) -> None:
        with _lock:
            _raised.add(self)

    def clear(self) -> None:
        with _lock:
            _raised.discard(self)


@dataclass(frozen=True)
class FlagState:
    """Point-in-time copy of all six flags."""
    underflow: bool = False
    overflow: bool = False
    div_by_zero: bool = False
    nan: bool = False
    inexact: bool = False
    erange: bool = False

    def __bool__(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))


# Methods --------------------------------------------------------------------------------------------------------------

def raise_flags(raised: Iterable[Flag]) -> None:
    """Set every flag in raised; flags not listed keep their state."""
    raised = set(raised)
    if raised:
        with _lock:
            _raised.update(raised)


def clear_all() -> None:
    with _lock:
        _raised.clear()


def snapshot() -> FlagState:
    """Return the current state of all flags."""
    with _lock:
        return FlagState(**{flag.value: flag in _raised for flag in Flag})
