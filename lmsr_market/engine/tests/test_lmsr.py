import pytest
from decimal import Decimal

import mpmath as mp
import numpy as np

from lmsr_market.config import get_default_market_params
from lmsr_market.engine import lmsr
from lmsr_market.engine.errors import (
    InsufficientSupplyError,
    InvalidLiquidityError,
    OutcomeIndexError,
    UnderflowError,
    ValidationError,
)
from lmsr_market.engine.fixed_point import FixedPoint
from lmsr_market.engine.params import default_liquidity_parameter
from lmsr_market.utils import relative_error

def q(*values) -> list:
    return [FixedPoint.from_int(v) for v in values]

@pytest.fixture
def b() -> FixedPoint:
    return FixedPoint.from_int(100)

@pytest.fixture
def reference_b() -> FixedPoint:
    params = get_default_market_params()
    return default_liquidity_parameter(params['default_liquidity'], params['collateral_decimals'])

def mp_cost(quantities, b) -> mp.mpf:
    b_mp = mp.mpf(b)
    return b_mp * mp.log(sum(mp.exp(mp.mpf(x) / b_mp) for x in quantities))

def test_cost_balanced_is_b_ln2(b):
    assert relative_error(lmsr.cost(q(0, 0), b), 100 * mp.log(2)) < Decimal('1e-15')

def test_cost_matches_reference():
    b = FixedPoint.from_int(250)
    for first, second in [(0, 10), (300, 20), (5000, 0), (1234, 1234)]:
        assert relative_error(lmsr.cost(q(first, second), b), mp_cost([first, second], 250)) < Decimal('1e-12')

def test_cost_single_quantity_unchanged(b):
    assert lmsr.cost(q(42), b) == FixedPoint.from_int(42)

def test_cost_preconditions(b):
    with pytest.raises(ValidationError):
        lmsr.cost([], b)
    with pytest.raises(InvalidLiquidityError):
        lmsr.cost(q(1, 2), FixedPoint.zero())
    with pytest.raises(ValueError):
        lmsr.cost(q(1, 2), FixedPoint.from_int(-5))
    with pytest.raises(ValidationError):
        lmsr.cost([FixedPoint.from_int(-1), FixedPoint.zero()], b)

def test_cost_survives_large_imbalance(b):
    # Naive exp(q / b) would overflow here; the max shift keeps every exponent <= 0
    result = lmsr.cost(q(10**9, 0), b)
    assert result == FixedPoint.from_int(10**9)

@pytest.mark.parametrize('index', [0, 1])
def test_cost_monotonic(b, index):
    other = 50
    previous = None
    for value in np.linspace(0, 2000, 41):
        quantities = q(other, other)
        quantities[index] = FixedPoint.from_int(int(value))
        current = lmsr.cost(quantities, b)
        if previous is not None:
            assert current >= previous
        previous = current

@pytest.mark.parametrize('first,second', [(0, 0), (10, 0), (0, 250), (1000, 999), (10**6, 0), (3, 10**7)])
def test_prices_sum_to_one(b, first, second):
    p0 = lmsr.price(q(first, second), b, 0)
    p1 = lmsr.price(q(first, second), b, 1)
    assert abs((p0 + p1).to_decimal() - 1) <= Decimal('1e-6')

def test_price_balanced_is_half(b):
    assert lmsr.price(q(0, 0), b, 0) == FixedPoint.from_decimal('0.5')
    assert lmsr.prices(q(7, 7), b) == [FixedPoint.from_decimal('0.5')] * 2

def test_price_matches_softmax(b):
    expected = mp.exp(mp.mpf(1)) / (mp.exp(mp.mpf(1)) + 1)
    assert relative_error(lmsr.price(q(100, 0), b, 0), expected) < Decimal('1e-15')

def test_price_rises_with_own_supply(b):
    assert lmsr.price(q(50, 0), b, 0) > lmsr.price(q(0, 0), b, 0)
    assert lmsr.price(q(50, 0), b, 1) < lmsr.price(q(0, 0), b, 1)

def test_price_index_out_of_range(b):
    with pytest.raises(OutcomeIndexError):
        lmsr.price(q(0, 0), b, 2)
    with pytest.raises(IndexError):
        lmsr.price(q(0, 0), b, -1)

def test_price_converges_to_half_for_deep_markets():
    quantities = q(100, 0)
    deviations = []
    for b_value in [10**2, 10**4, 10**6, 10**9]:
        p = lmsr.price(quantities, FixedPoint.from_int(b_value), 0)
        deviations.append(abs(p.to_decimal() - Decimal('0.5')))
    assert deviations == sorted(deviations, reverse=True)
    assert deviations[-1] < Decimal('1e-6')

@pytest.mark.parametrize('first,second,index,amount', [(0, 0, 0, 10), (40, 3, 1, 77), (5000, 0, 0, 1), (0, 9000, 0, 500)])
def test_net_cost_identity(b, first, second, index, amount):
    quantities = q(first, second)
    after = list(quantities)
    after[index] = after[index] + FixedPoint.from_int(amount)
    result = lmsr.net_cost(quantities, b, index, FixedPoint.from_int(amount))
    assert result == lmsr.cost(after, b) - lmsr.cost(quantities, b)
    assert not result.is_negative()

def test_net_cost_zero_amount(b):
    assert lmsr.net_cost(q(3, 4), b, 0, FixedPoint.zero()) == FixedPoint.zero()

def test_net_cost_rejects_negative_amount(b):
    with pytest.raises(ValidationError):
        lmsr.net_cost(q(3, 4), b, 0, FixedPoint.from_int(-1))

def test_net_cost_bounded_by_amount(b):
    # Each unit costs its marginal price, which is below 1
    cost = lmsr.net_cost(q(0, 0), b, 0, FixedPoint.from_int(10))
    assert FixedPoint.from_int(5) < cost < FixedPoint.from_int(10)

def test_net_cost_underflow_is_fatal(b, monkeypatch):
    costs = iter([FixedPoint.from_int(10), FixedPoint.from_int(9)])
    monkeypatch.setattr(lmsr, 'cost', lambda quantities, b: next(costs))
    with pytest.raises(UnderflowError):
        lmsr.net_cost(q(0, 0), b, 0, FixedPoint.from_int(1))

@pytest.mark.parametrize('first,second,index,amount', [(10, 0, 0, 10), (40, 3, 1, 3), (5000, 20, 0, 4999)])
def test_net_revenue_identity(b, first, second, index, amount):
    quantities = q(first, second)
    after = list(quantities)
    after[index] = after[index] - FixedPoint.from_int(amount)
    result = lmsr.net_revenue(quantities, b, index, FixedPoint.from_int(amount))
    assert result == lmsr.cost(quantities, b) - lmsr.cost(after, b)
    assert not result.is_negative()

def test_net_revenue_insufficient_supply(b):
    with pytest.raises(InsufficientSupplyError):
        lmsr.net_revenue(q(5, 100), b, 0, FixedPoint.from_int(6))

def test_buy_then_sell_round_trip(b):
    amount = FixedPoint.from_int(25)
    paid = lmsr.net_cost(q(10, 30), b, 1, amount)
    received = lmsr.net_revenue(q(10, 55), b, 1, amount)
    assert paid == received

def test_price_impact_grows_with_own_imbalance(reference_b):
    amount = FixedPoint.from_int(100 * 10**9)
    balanced = lmsr.net_cost(q(0, 0), reference_b, 0, amount)
    crowded = lmsr.net_cost(q(5000 * 10**9, 0), reference_b, 0, amount)
    assert crowded > balanced

def test_buying_against_the_crowd_is_cheaper(reference_b):
    amount = FixedPoint.from_int(100 * 10**9)
    balanced = lmsr.net_cost(q(0, 0), reference_b, 0, amount)
    contrarian = lmsr.net_cost(q(0, 5000 * 10**9), reference_b, 0, amount)
    assert contrarian < balanced
