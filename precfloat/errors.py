"""
Exceptions raised by precfloat.

Numeric exceptional conditions (overflow, underflow, NaN, ...) are never raised;
they are recorded as sticky flags, see precfloat.flags.
"""


class ParseError(ValueError):
    """
    A numeral string is not valid in the requested radix.

    Recoverable: raised at the conversion call site. The target value is left NaN
    at its precision, callers must not rely on its previous content.
    """

    def __init__(self, text: str, radix: int):
        self.text = text
        self.radix = radix
        super().__init__(f"cannot parse {text!r} as a radix {radix} numeral")


class FormatError(RuntimeError):
    """
    The engine reported a negative rendered length.

    Fatal: signals an engine-level inconsistency or an invalid format specifier.
    The library never catches it.
    """
