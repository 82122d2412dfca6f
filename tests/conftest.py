#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from precfloat import flags
from precfloat.precision import get_default_prec, set_default_prec
from precfloat.rounding import RoundingMode, set_rounding_mode


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clean_float_state():
    """Each test starts at default precision, round-to-nearest and with all flags clear."""
    prec = get_default_prec()
    set_rounding_mode(RoundingMode.TO_NEAREST)
    flags.clear_all()
    yield
    set_default_prec(prec)
    set_rounding_mode(RoundingMode.TO_NEAREST)
    flags.clear_all()


@pytest.fixture
def value_of():
    """Factory building a BigFloat at an optional precision (bits or Precision)."""
    from precfloat.convert import construct

    def _value_of(source, precision=None, **kwargs):
        return construct(source, precision, **kwargs)

    return _value_of
