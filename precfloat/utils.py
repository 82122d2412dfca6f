"""
Utilities shared across the package.

Formatters for exception messages and logs, kept here to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------

def class_name(obj: Any) -> str:
    """
    Get the class name of an object or a class.

    Examples:
        >>> class_name(10)
        'int'
        >>> class_name(int)
        'int'
    """
    cls = obj if isinstance(obj, type) else type(obj)
    try:
        return cls.__name__
    except AttributeError:
        return str(cls)


def fmt_type(obj: Any, *, max_repr: int = 120) -> str:
    """
    Format type information for exception messages.

    Examples:
        >>> fmt_type(42)
        '<type: int>'
        >>> fmt_type(float)
        '<type: float>'
    """
    return f"<type: {_fmt_truncate(class_name(obj), max_repr)}>"


def fmt_value(x: Any, *, max_repr: int = 120) -> str:
    """
    Format a single value as a type-value pair for exception messages and logs.

    Broken __repr__ methods are handled gracefully; inner ">" is escaped so that
    it does not clash with the wrapper brackets.

    Examples:
        >>> fmt_value(42)
        '<int: 42>'
        >>> fmt_value("hello world", max_repr=8)
        "<str: 'hell...>"
    """
    t = class_name(x)
    try:
        base_repr = repr(x)
    except Exception as e:
        base_repr = f"<{t} object (repr failed: {type(e).__name__})>"
    base_repr = base_repr.replace(">", "\\>")
    return f"<{t}: {_fmt_truncate(base_repr, max_repr)}>"


def _fmt_truncate(s: str, max_len: int, ellipsis: str = "...") -> str:
    """Truncate s to max_len characters, ellipsis included."""
    if max_len <= 0 or len(s) <= max_len:
        return s
    if max_len <= len(ellipsis):
        return ellipsis[:max_len]
    return s[:max_len - len(ellipsis)] + ellipsis
