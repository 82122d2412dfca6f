"""
Marker singletons for optional settings of precfloat records.

UNSET stands for "argument not given", so that None keeps its own meaning (e.g. "no
width" in FormatOptions.merge). CONTEXT stands for "read the setting from the thread's
rounding context when the record is used" and is the default rounding mode of
FormatOptions.

Compare markers with 'is'.

Example:
    >>> opts = FormatOptions(Format.FIXED, rounding_mode=CONTEXT)
    >>> opts.merge(width=UNSET).width is opts.width
    True
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any, Callable, Final

__all__ = [
    'UNSET',
    'CONTEXT',
    'UnsetType',
    'ContextType',
    'ifnotunset',
]


# Classes --------------------------------------------------------------------------------------------------------------

class _Marker:
    """
    One instance per subclass; the label and truth value are given at subclass creation.
    """
    __slots__ = ()

    _label: str = ""
    _truthy: bool = False
    _singleton = None

    def __init_subclass__(cls, *, label: str, truthy: bool = False, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._label = label
        cls._truthy = truthy
        cls._singleton = None

    def __new__(cls):
        if cls._singleton is None:
            cls._singleton = super().__new__(cls)
        return cls._singleton

    def __repr__(self) -> str:
        return f'<{self._label}>'

    def __bool__(self) -> bool:
        return self._truthy

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self) -> tuple:
        return type(self), ()


class UnsetType(_Marker, label="UNSET"):
    """Type of UNSET, an argument the caller did not provide. Falsy."""
    __slots__ = ()


class ContextType(_Marker, label="CONTEXT", truthy=True):
    """Type of CONTEXT, a setting deferred to the ambient rounding context. Truthy."""
    __slots__ = ()


UNSET: Final[UnsetType] = UnsetType()
CONTEXT: Final[ContextType] = ContextType()


# Methods --------------------------------------------------------------------------------------------------------------

def ifnotunset(value: Any, *, default: Any = None, default_factory: Callable[[], Any] | None = None) -> Any:
    """
    value, or the default when value is UNSET.

    default_factory, when given, is called instead of returning default.

    Examples:
        >>> ifnotunset(UNSET, default=10)
        10
        >>> ifnotunset(None, default=10) is None
        True
    """
    if value is not UNSET:
        return value
    return default if default_factory is None else default_factory()
