import pytest
from dataclasses import FrozenInstanceError
from decimal import Decimal

import mpmath as mp
import numpy as np

from lmsr_market.engine.errors import DomainError, EconomicError, FixedPointOverflowError
from lmsr_market.engine.fixed_point import (
    MAX_RELATIVE_ERROR,
    SCALE,
    WIDE_SCALE,
    FixedPoint,
    ceil_div,
    exp,
    exp_wide,
    ln,
    ln_wide,
)
from lmsr_market.utils import relative_error

def fp(value: str) -> FixedPoint:
    return FixedPoint.from_decimal(value)

def test_add_sub():
    assert fp('1.5') + fp('2.25') == fp('3.75')
    assert fp('1.5') - fp('2.25') == fp('-0.75')
    assert (fp('1.5') - fp('2.25')).is_negative()

def test_mul_floors():
    assert fp('2.5') * fp('4') == fp('10')
    assert FixedPoint(1) * fp('0.5') == FixedPoint.zero()
    assert fp('-0.000000000000000001') * fp('0.5') == FixedPoint(-1)

def test_div_floors():
    assert (FixedPoint.one() / FixedPoint.from_int(3)).raw == 333333333333333333
    assert (fp('10') / fp('4')) == fp('2.5')

def test_div_by_zero():
    with pytest.raises(DomainError):
        FixedPoint.one() / FixedPoint.zero()
    with pytest.raises(DomainError):
        FixedPoint.from_ratio(1, 0)

def test_from_ratio():
    assert FixedPoint.from_ratio(1, 4) == fp('0.25')

def test_floor_and_ceil():
    assert FixedPoint(SCALE + 1).floor() == 1
    assert FixedPoint(SCALE + 1).ceil() == 2
    assert FixedPoint.from_int(7).ceil() == 7
    assert FixedPoint(-1).floor() == -1
    assert FixedPoint(-1).ceil() == 0

def test_is_zero_and_ordering():
    assert FixedPoint.zero().is_zero()
    assert not FixedPoint(1).is_zero()
    assert FixedPoint.one() > FixedPoint.zero()
    assert max([fp('1'), fp('3'), fp('2')]) == fp('3')
    assert sorted([fp('2'), fp('-1'), fp('0')]) == [fp('-1'), fp('0'), fp('2')]

def test_decimal_round_trip():
    assert fp('2.5').to_decimal() == Decimal('2.5')
    assert FixedPoint.from_decimal(Decimal('123456789012345.123456789012345678')).raw == 123456789012345123456789012345678
    assert FixedPoint.from_decimal('-0.0000000000000000015').raw == -2

def test_raw_must_be_int():
    with pytest.raises(TypeError):
        FixedPoint(1.5)
    with pytest.raises(TypeError):
        FixedPoint(True)

def test_immutable():
    x = fp('1')
    with pytest.raises(FrozenInstanceError):
        x.raw = 5

def test_exp_zero_and_one():
    assert exp(FixedPoint.zero()) == FixedPoint.one()
    assert relative_error(exp(FixedPoint.one()), mp.e) < Decimal('1e-15')

@pytest.mark.parametrize('x', [float(v) for v in np.linspace(-20, 60, 81)])
def test_exp_relative_error(x):
    arg = FixedPoint.from_decimal(Decimal(str(x)))
    expected = mp.exp(mp.mpf(str(arg.to_decimal())))
    assert relative_error(exp(arg), expected) <= MAX_RELATIVE_ERROR

def test_exp_large_negative_underflows_to_zero():
    assert exp(FixedPoint.from_int(-100)) == FixedPoint.zero()
    assert exp(FixedPoint.from_int(-10**12)) == FixedPoint.zero()

def test_exp_overflow_guard():
    with pytest.raises(FixedPointOverflowError):
        exp(FixedPoint.from_int(131))
    with pytest.raises(OverflowError):
        exp(FixedPoint.from_int(10**6))
    with pytest.raises(EconomicError):
        exp(FixedPoint.from_int(200))

def test_exp_wide_matches_public():
    assert exp_wide(0) == WIDE_SCALE
    assert exp_wide(WIDE_SCALE) // 10**9 == exp(FixedPoint.one()).raw

@pytest.mark.parametrize('value', ['0.000001', '0.25', '0.5', '1.5', '2', '3', '10', '12345.678', '1e12', '1e30'])
def test_ln_relative_error(value):
    arg = fp(value)
    expected = mp.log(mp.mpf(value))
    assert relative_error(ln(arg), expected) <= MAX_RELATIVE_ERROR

def test_ln_one_is_zero():
    assert ln(FixedPoint.one()) == FixedPoint.zero()

def test_ln_smallest_value():
    # ln(1e-18)
    assert relative_error(ln(FixedPoint(1)), mp.log(mp.mpf('1e-18'))) < Decimal('1e-12')

def test_ln_domain():
    with pytest.raises(DomainError):
        ln(FixedPoint.zero())
    with pytest.raises(ValueError):
        ln(fp('-1'))
    with pytest.raises(DomainError):
        ln_wide(0)

@pytest.mark.parametrize('value', ['-10', '-0.001', '0.5', '3', '25'])
def test_ln_inverts_exp(value):
    x = fp(value)
    assert abs((ln(exp(x)) - x).to_decimal()) < Decimal('1e-12')

def test_ceil_div():
    assert ceil_div(7, 2) == 4
    assert ceil_div(8, 2) == 4
    assert ceil_div(-7, 2) == -3
    with pytest.raises(DomainError):
        ceil_div(1, 0)

def test_units_conversion():
    value = FixedPoint.from_units(1_500_000, 6)
    assert value == fp('1.5')
    assert value.to_units(6) == 1_500_000
    assert FixedPoint.from_units(1, 9).to_units(9) == 1
    assert fp('0.0000001').to_units(6) == 0
