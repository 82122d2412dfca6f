#
# PrecFloat - Engine Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import math

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from precfloat import engine
from precfloat.flags import Flag
from precfloat.rounding import RoundingMode

RN = RoundingMode.TO_NEAREST


# Local Classes & Methods ----------------------------------------------------------------------------------------------

def mpfr(x, prec=53, rnd=RN):
    value, _ = engine.assign(x, prec, rnd)
    return value


def render(spec, x, rnd=RN):
    n = engine.snprintf(None, spec, rnd, x)
    assert n >= 0
    buffer = bytearray(n + 1)
    assert engine.snprintf(buffer, spec, rnd, x) == n
    assert buffer[n] == 0
    return buffer[:n].decode("ascii")


# Tests ----------------------------------------------------------------------------------------------------------------

class TestAllocation:

    def test_allocate_is_nan_at_precision(self):
        x = engine.allocate(80)
        assert engine.is_nan(x)
        assert x.precision == 80

    @pytest.mark.parametrize("negative", [False, True])
    def test_signed_specials(self, negative):
        inf = engine.inf(24, negative)
        zero = engine.zero(24, negative)
        assert engine.is_inf(inf) and engine.is_signed(inf) is negative
        assert engine.is_zero(zero) and engine.is_signed(zero) is negative

    def test_specials_set_no_flags(self):
        engine.nan(53)
        engine.inf(53)
        assert not Flag.NAN.is_set()


class TestAssign:

    def test_ternary(self):
        _, exact = engine.assign(0.5, 53, RN)
        _, below = engine.assign_rational(1, 3, 53, RoundingMode.DOWN)
        _, above = engine.assign_rational(1, 3, 53, RoundingMode.UP)
        assert exact == 0
        assert below < 0 < above
        assert Flag.INEXACT.is_set()

    def test_rounds_to_target_precision(self):
        value, ternary = engine.assign(2 ** 60 + 1, 53, RN)
        assert value.precision == 53
        assert int(value) == 2 ** 60
        assert ternary < 0

    @pytest.mark.parametrize("text, radix, expected", [
        pytest.param("1.5", 10, 1.5, id="decimal"),
        pytest.param("-1e3", 10, -1000.0, id="exponent"),
        pytest.param("ff", 16, 255.0, id="hex"),
        pytest.param("0x10", 0, 16.0, id="auto-hex"),
        pytest.param("0b101", 0, 5.0, id="auto-binary"),
        pytest.param("z", 36, 35.0, id="base-36"),
    ])
    def test_assign_str(self, text, radix, expected):
        value, _ = engine.assign_str(text, radix, 53, RN)
        assert float(value) == expected

    @pytest.mark.parametrize("text, radix", [
        pytest.param("abc", 10, id="letters"),
        pytest.param("12", 2, id="digit-out-of-radix"),
        pytest.param("", 10, id="empty"),
        pytest.param("  ", 10, id="blank"),
    ])
    def test_assign_str_invalid(self, text, radix):
        with pytest.raises(ValueError):
            engine.assign_str(text, radix, 53, RN)

    def test_round_to(self):
        third, _ = engine.assign_rational(1, 3, 200, RN)
        assert engine.round_to(third, 10, RN).precision == 10


class TestArithmetic:

    def test_reversed_primitives(self):
        a, b = mpfr(10), mpfr(4)
        assert engine.rsub(a, b, 53, RN) == -6
        assert engine.rdiv(a, b, 53, RN) == 0.4
        assert engine.rpow(mpfr(3), 2, 53, RN) == 8

    def test_result_precision(self):
        result = engine.add(mpfr(1, 10), mpfr(1, 100), 24, RN)
        assert result.precision == 24

    @pytest.mark.parametrize("name, x, args, expected", [
        pytest.param("sqrt", 16, (), 4, id="sqrt"),
        pytest.param("cbrt", 27, (), 3, id="cbrt"),
        pytest.param("rootn", 32, (5,), 2, id="rootn"),
        pytest.param("abs", -2.5, (), 2.5, id="abs"),
        pytest.param("neg", 2.5, (), -2.5, id="neg"),
        pytest.param("exp2", 10, (), 1024, id="exp2"),
        pytest.param("log2", 1024, (), 10, id="log2"),
        pytest.param("square", -3, (), 9, id="square"),
    ])
    def test_unary(self, name, x, args, expected):
        assert engine.unary(name, mpfr(x), *args, prec=53, rnd=RN) == expected

    def test_unary_table_covers_math(self):
        for name in ("sin", "cos", "tan", "sec", "csc", "cot", "asinh", "lngamma", "zeta", "erfc"):
            assert name in engine.UNARY


class TestQueries:

    def test_compare(self):
        assert engine.compare(mpfr(1), 2) == -1
        assert engine.compare(mpfr(2), 2.0) == 0
        assert engine.compare(mpfr(3), mpfr(2)) == 1
        assert not Flag.ERANGE.is_set()

    @pytest.mark.parametrize("a, b", [
        pytest.param(engine.nan(53), 1, id="nan-left"),
        pytest.param(engine.zero(53), math.nan, id="nan-right"),
    ])
    def test_compare_unordered(self, a, b):
        assert engine.compare(a, b) is None
        assert Flag.ERANGE.is_set()

    def test_get_exp(self):
        assert engine.get_exp(mpfr(1)) == 1
        assert engine.get_exp(mpfr(0.75)) == 0

    @pytest.mark.parametrize("name, expected", [
        pytest.param("log2", math.log(2), id="log2"),
        pytest.param("pi", math.pi, id="pi"),
        pytest.param("euler", 0.5772156649015329, id="euler"),
        pytest.param("catalan", 0.915965594177219, id="catalan"),
    ])
    def test_constants(self, name, expected):
        value = engine.constant(name, 53, RN)
        assert float(value) == pytest.approx(expected, rel=1e-15)


class TestNativeConversion:

    def test_to_float_single(self):
        assert engine.to_float(mpfr(0.1), RN, single=True) == 0.10000000149011612

    def test_to_float_single_subnormal(self):
        assert engine.to_float(mpfr(2.0 ** -149), RN, single=True) == 2.0 ** -149
        assert engine.to_float(mpfr(2.0 ** -160), RN, single=True) == 0.0

    def test_to_float_single_overflow(self):
        assert engine.to_float(mpfr(1e39), RN, single=True) == math.inf
        assert Flag.OVERFLOW.is_set()

    def test_to_float_double(self):
        third, _ = engine.assign_rational(1, 3, 200, RN)
        assert engine.to_float(third, RN) == 1 / 3
        assert engine.to_float(third, RoundingMode.DOWN) < engine.to_float(third, RoundingMode.UP)

    @pytest.mark.parametrize("x, rnd, expected", [
        pytest.param(2.5, RoundingMode.TO_NEAREST, 2, id="nearest-even"),
        pytest.param(2.5, RoundingMode.UP, 3, id="up"),
        pytest.param(-2.5, RoundingMode.DOWN, -3, id="down"),
        pytest.param(-2.5, RoundingMode.TOWARD_ZERO, -2, id="toward-zero"),
        pytest.param(2.5, RoundingMode.AWAY_FROM_ZERO, 3, id="away"),
    ])
    def test_to_int_rounding(self, x, rnd, expected):
        assert engine.to_int(mpfr(x), rnd) == expected
        assert not Flag.ERANGE.is_set()

    def test_to_int_saturates(self):
        assert engine.to_int(mpfr(1e20), RN, -2 ** 31, 2 ** 31 - 1) == 2 ** 31 - 1
        assert Flag.ERANGE.is_set()

    def test_to_int_nan_and_inf(self):
        assert engine.to_int(engine.nan(53), RN, 0, 255) == 0
        assert engine.to_int(engine.inf(53, negative=True), RN, -128, 127) == -128
        assert Flag.ERANGE.is_set()

    def test_to_int_unbounded(self):
        assert engine.to_int(mpfr(2 ** 100, 200), RN) == 2 ** 100

    def test_to_ratio(self):
        assert engine.to_ratio(mpfr(0.75)) == (3, 4)
        with pytest.raises(ValueError):
            engine.to_ratio(engine.nan(53))
        with pytest.raises(OverflowError):
            engine.to_ratio(engine.inf(53))


class TestGetStr:

    def test_digits_and_exponent(self):
        assert engine.get_str(mpfr(1.5), 10, RN) == ("15000000000000000", 1)

    def test_negative(self):
        digits, exponent = engine.get_str(mpfr(-0.25), 10, RN)
        assert digits.startswith("-25")
        assert exponent == 0

    @pytest.mark.parametrize("value, expected", [
        pytest.param(engine.nan(53), "@NaN@", id="nan"),
        pytest.param(engine.inf(53), "@Inf@", id="inf"),
        pytest.param(engine.inf(53, negative=True), "-@Inf@", id="-inf"),
    ])
    def test_specials(self, value, expected):
        assert engine.get_str(value, 10, RN) == (expected, 0)


class TestSnprintf:

    @pytest.mark.parametrize("spec, x, expected", [
        pytest.param("%.3R*f", 12345.67, "12345.670", id="fixed"),
        pytest.param("%0+12.3R*f", 12345.67, "+0012345.670", id="zero-sign-width"),
        pytest.param("%-10.1R*f", 1.5, "1.5       ", id="left-adjusted"),
        pytest.param("%-010.1R*f", 1.5, "1.5       ", id="left-overrides-zero"),
        pytest.param("%10.1R*f", -1.5, "      -1.5", id="right-adjusted"),
        pytest.param("% .1R*f", 1.5, " 1.5", id="blank"),
        pytest.param("% +.1R*f", 1.5, "+1.5", id="sign-overrides-blank"),
        pytest.param("%R*f", 0.5, "0.500000", id="fixed-default-precision"),
        pytest.param("%#.0R*f", 2.0, "2.", id="alternate-fixed"),
        pytest.param("%.2R*e", 1234.5, "1.23e+03", id="scientific"),
        pytest.param("%.2R*E", 1234.5, "1.23E+03", id="scientific-upper"),
        pytest.param("%R*e", 1.5, "1.5000000000000000e+00", id="scientific-exact-digits"),
        pytest.param("%#.0R*e", 3.0, "3.e+00", id="alternate-scientific"),
        pytest.param("%.0R*f", 2.5, "2", id="fixed-no-digits"),
        pytest.param("%5.0R*F", -7.0, "   -7", id="fixed-no-digits-width"),
        pytest.param("%.0R*e", 2.0, "2e+00", id="scientific-no-digits"),
    ])
    def test_render(self, spec, x, expected):
        assert render(spec, mpfr(x)) == expected

    @pytest.mark.parametrize("spec, x, expected", [
        pytest.param("%R*g", 100.0, "100", id="strip-zeros"),
        pytest.param("%#R*g", 100.0, "100.000", id="alternate-keeps-zeros"),
        pytest.param("%R*g", 0.0001, "0.0001", id="small-fixed"),
        pytest.param("%R*g", 1e-5, "1e-05", id="small-scientific"),
        pytest.param("%R*g", 123456789.0, "1.23457e+08", id="large-scientific"),
        pytest.param("%R*G", 123456789.0, "1.23457E+08", id="large-scientific-upper"),
        pytest.param("%.0R*g", 0.5, "0.5", id="zero-precision-is-one"),
        pytest.param("%.15R*g", 1.5, "1.5", id="value-precision"),
        pytest.param("%R*g", 0.0, "0", id="zero"),
        pytest.param("%#.1R*g", 2.0, "2.", id="alternate-one-digit"),
        pytest.param("%.1R*g", 2.0, "2", id="one-digit"),
    ])
    def test_general(self, spec, x, expected):
        assert render(spec, mpfr(x)) == expected

    @pytest.mark.parametrize("rnd, expected", [
        pytest.param(RoundingMode.TO_NEAREST, "2", id="nearest"),
        pytest.param(RoundingMode.UP, "3", id="up"),
        pytest.param(RoundingMode.DOWN, "2", id="down"),
        pytest.param(RoundingMode.TOWARD_ZERO, "2", id="toward-zero"),
        pytest.param(RoundingMode.AWAY_FROM_ZERO, "3", id="away"),
    ])
    def test_rounding_mode(self, rnd, expected):
        assert render("%.0R*f", mpfr(2.5), rnd) == expected

    def test_special_values_ignore_zero_padding(self):
        assert render("%08.2R*f", engine.nan(53)) == "     nan"
        assert render("%+08.2R*f", engine.inf(53)) == "    +inf"

    def test_hex_zero_padding_after_prefix(self):
        unpadded = render("%R*a", mpfr(1.0))
        padded = render("%020R*a", mpfr(1.0))
        assert unpadded.startswith("0x")
        assert padded == "0x" + "0" * (20 - len(unpadded)) + unpadded[2:]
        assert render("%R*A", mpfr(1.0)).startswith("0X")

    def test_binary(self):
        text = render("%R*b", mpfr(0.75))
        assert "p" in text
        assert set(text.split("p")[0]) <= set("01.")

    def test_length_query(self):
        assert engine.snprintf(None, "%.3R*f", RN, mpfr(12345.67)) == 9
        assert engine.snprintf(bytearray(), "%.3R*f", RN, mpfr(12345.67)) == 9

    def test_truncating_buffer(self):
        buffer = bytearray(b"xxxxxx")
        n = engine.snprintf(buffer, "%.3R*f", RN, mpfr(12345.67))
        assert n == 9
        assert bytes(buffer) == b"12345\x00"

    @pytest.mark.parametrize("spec", [
        pytest.param("%Q", id="unknown-conversion"),
        pytest.param("%.3f", id="missing-rounding-marker"),
        pytest.param("value %R*f", id="surrounding-text"),
        pytest.param("", id="empty"),
    ])
    def test_unsupported_spec(self, spec):
        assert engine.snprintf(None, spec, RN, mpfr(1.0)) == -1
