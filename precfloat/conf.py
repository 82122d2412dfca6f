"""
Configuration constants for precfloat values, conversions and formatting.
"""

# Third-party ----------------------------------------------------------------------------------------------------------
import gmpy2


# Classes --------------------------------------------------------------------------------------------------------------

# @formatter:off

class FloatConf:
    """
    Default configuration constants for BigFloat allocation, conversion and formatting.

    Attributes:
        DEFAULT_PRECISION: Process default precision in bits, used when a value
            is allocated without an explicit precision. Matches binary64.

        MIN_PRECISION: Smallest precision accepted for a value, as in MPFR.

        MAX_PRECISION: Largest precision the engine accepts.

        AUTO_RADIX: Radix value asking the parser to detect the base from the
            numeral prefix (0b, 0x).

        MIN_RADIX, MAX_RADIX: Supported numeral radix range.

        SINGLE_*, DOUBLE_*: Precision and exponent range of IEEE 754 binary32
            and binary64, using the engine exponent convention (x = 0.1b... * 2^e).

        PRINTF_PRECISION: Digits after the radix point for f/F/g/G conversions
            when no precision is requested, as in C printf.
    """

    DEFAULT_PRECISION = 53
    MIN_PRECISION = 1
    MAX_PRECISION = gmpy2.get_max_precision()

    AUTO_RADIX = 0
    MIN_RADIX = 2
    MAX_RADIX = 62

    SINGLE_PRECISION = 24
    SINGLE_EMIN = -148
    SINGLE_EMAX = 128

    DOUBLE_PRECISION = 53
    DOUBLE_EMIN = -1073
    DOUBLE_EMAX = 1024

    PRINTF_PRECISION = 6

# @formatter:on
