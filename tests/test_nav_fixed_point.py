import pytest

from fundnav.nav import fixed_point as fp
from fundnav.nav.errors import ArithmeticFault


def test_checked_ops_in_range():
    assert fp.add(2, 3) == 5
    assert fp.sub(5, 3) == 2
    assert fp.mul(4, 25) == 100
    assert fp.div(7, 2) == 3
    assert fp.mul_div(2000, 75_000, 10_000) == 15_000


def test_sub_underflow_faults():
    with pytest.raises(ArithmeticFault):
        fp.sub(3, 5)


def test_add_and_mul_overflow_fault():
    with pytest.raises(ArithmeticFault):
        fp.add(fp.UINT_MAX, 1)
    with pytest.raises(ArithmeticFault):
        fp.mul(2**200, 2**100)


def test_division_by_zero_faults():
    with pytest.raises(ArithmeticFault):
        fp.div(1, 0)
    with pytest.raises(ArithmeticFault):
        fp.mul_div(1, 1, 0)


def test_to_uint_rejects_negatives_and_non_integers():
    assert fp.to_uint(0) == 0
    with pytest.raises(ArithmeticFault):
        fp.to_uint(-1)
    with pytest.raises(ArithmeticFault):
        fp.to_uint(1.5)
    with pytest.raises(ArithmeticFault):
        fp.to_uint(True)


def test_signed_amount_gain_and_loss():
    gain = fp.SignedAmount.difference(110, 100).minus(3)
    assert gain.is_gain
    assert gain.to_unsigned() == 7

    loss = fp.SignedAmount.difference(90, 100)
    assert not loss.is_gain
    assert loss.magnitude() == 10
    with pytest.raises(ArithmeticFault):
        loss.to_unsigned()


def test_signed_amount_range_is_checked():
    with pytest.raises(ArithmeticFault):
        fp.SignedAmount(fp.INT_MAX + 1)
    with pytest.raises(ArithmeticFault):
        fp.SignedAmount(fp.INT_MIN - 1)
