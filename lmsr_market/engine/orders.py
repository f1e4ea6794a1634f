"""
Quoting and trading against the LMSR maker.

Every trade is priced from an OutcomeSnapshot that the caller fills right before
submitting. All checks run before the first mutation, so a rejected trade leaves the
market untouched; the snapshot itself is spent once it has been priced.
"""

import logging
from typing import Optional, Tuple

from . import events
from .errors import (
    AssetMismatchError,
    InsufficientCollateralError,
    InsufficientPaymentError,
    InsufficientSupplyError,
    MarketMismatchError,
    SlippageError,
)
from .events import make_event
from .fixed_point import FixedPoint
from .guards import require_positive, require_trading, serialized, timestamp_or_now
from .params import compute_fee
from .snapshot import _SNAPSHOT_KEY, OutcomeSnapshot
from .state import Coin, Market, Outcome

logger = logging.getLogger(__name__)


def _require_snapshot_market(market: Market, snapshot: OutcomeSnapshot) -> None:
    if snapshot.market_id != market.id:
        raise MarketMismatchError(f"Snapshot for market {snapshot.market_id} cannot price market {market.id}")


def _buy_quote(market: Market, snapshot: OutcomeSnapshot, outcome: Outcome, amount: int) -> Tuple[int, int]:
    """Consumes the snapshot and returns (cost, fee) in collateral units. Cost rounds up."""
    b = market.config['liquidity_parameter']
    cost = snapshot.into_net_cost(outcome, FixedPoint.from_int(amount), b).ceil()
    fee = compute_fee(cost, market.config['fee_basis_points'])
    return cost, fee


def _sell_quote(market: Market, snapshot: OutcomeSnapshot, outcome: Outcome, amount: int) -> int:
    """Consumes the snapshot and returns the revenue in collateral units. Revenue rounds down."""
    b = market.config['liquidity_parameter']
    return snapshot.into_net_revenue(outcome, FixedPoint.from_int(amount), b).floor()


@serialized
def quote_snapshot(market: Market) -> OutcomeSnapshot:
    require_trading(market)
    return OutcomeSnapshot(market.id, market.outcomes, _key=_SNAPSHOT_KEY)


@serialized
def add_snapshot_entry(market: Market, snapshot: OutcomeSnapshot, outcome: Outcome) -> None:
    """Records the current supply of `outcome`. Call once per outcome."""
    market.require_outcome(outcome)
    snapshot.add_entry(market.id, outcome, FixedPoint.from_int(market.supply_of(outcome)), _key=_SNAPSHOT_KEY)


def quote_full_snapshot(market: Market) -> OutcomeSnapshot:
    """Quotes a snapshot and fills both entries under one lock hold."""
    with market.lock:
        snapshot = quote_snapshot(market)
        for outcome in market.outcomes:
            add_snapshot_entry(market, snapshot, outcome)
        return snapshot


@serialized
def preview_buy_cost(market: Market, snapshot: OutcomeSnapshot, outcome: Outcome, amount: int) -> int:
    """Total collateral (cost plus fee) a buy would require. Prices a clone; `snapshot` stays usable."""
    require_positive(amount)
    market.require_outcome(outcome)
    _require_snapshot_market(market, snapshot)
    cost, fee = _buy_quote(market, snapshot.clone(), outcome, amount)
    return cost + fee


@serialized
def preview_sell_revenue(market: Market, snapshot: OutcomeSnapshot, outcome: Outcome, amount: int) -> int:
    require_positive(amount)
    market.require_outcome(outcome)
    _require_snapshot_market(market, snapshot)
    return _sell_quote(market, snapshot.clone(), outcome, amount)


@serialized
def buy(
    market: Market,
    snapshot: OutcomeSnapshot,
    payment: Coin,
    outcome: Outcome,
    amount: int,
    max_cost: int,
    timestamp: Optional[int] = None,
) -> Tuple[Coin, Coin]:
    """
    Mints `amount` units of `outcome` against `payment`.

    The buyer pays cost + fee where fee = floor(cost * fee_bps / 10000); both must fit
    under max_cost and the payment. Returns (outcome asset, change).
    """
    require_positive(amount)
    market.require_outcome(outcome)
    if payment.asset_type != market.collateral_type:
        raise AssetMismatchError(f"Expected payment in {market.collateral_type}, got {payment.asset_type}")
    _require_snapshot_market(market, snapshot)
    require_trading(market)

    cost, fee = _buy_quote(market, snapshot, outcome, amount)
    required = cost + fee
    if required > max_cost:
        raise SlippageError(f"Buy cost {required} exceeds max_cost {max_cost}")
    if required > payment.value:
        raise InsufficientPaymentError(f"Payment {payment.value} does not cover cost {cost} plus fee {fee}")

    paid = payment.take()
    market.collateral_balance += cost
    market.fee_balance += fee
    market.set_supply(outcome, market.supply_of(outcome) + amount)

    asset = Coin(asset_type=outcome.asset_type, value=amount)
    change = Coin(asset_type=market.collateral_type, value=paid - required)
    market.channel.publish(make_event(
        events.OUTCOME_PURCHASED, market.id, timestamp_or_now(timestamp),
        outcome=outcome.side, amount=amount, cost=cost, fee=fee,
        supply=market.supply_of(outcome),
    ))
    logger.debug(f"Market {market.id}: bought {amount} {outcome.side.value} for {cost} + fee {fee}")
    return asset, change


@serialized
def sell(
    market: Market,
    snapshot: OutcomeSnapshot,
    outcome_asset: Coin,
    outcome: Outcome,
    min_revenue: int,
    timestamp: Optional[int] = None,
) -> Coin:
    """Burns `outcome_asset` back into the maker and returns collateral. No fee is charged."""
    market.require_outcome(outcome)
    if outcome_asset.asset_type != outcome.asset_type:
        raise AssetMismatchError(f"Asset {outcome_asset.asset_type} does not back outcome {outcome.side.value}")
    amount = outcome_asset.value
    require_positive(amount)
    _require_snapshot_market(market, snapshot)
    require_trading(market)

    supply = market.supply_of(outcome)
    if supply < amount:
        raise InsufficientSupplyError(f"Insufficient supply for {outcome.side.value}: have {supply}, need {amount}.")

    revenue = _sell_quote(market, snapshot, outcome, amount)
    if revenue < min_revenue:
        raise SlippageError(f"Sell revenue {revenue} below min_revenue {min_revenue}")
    if revenue > market.collateral_balance:
        raise InsufficientCollateralError(
            f"Market {market.id} holds {market.collateral_balance}, cannot pay {revenue}"
        )

    outcome_asset.take()
    market.set_supply(outcome, supply - amount)
    market.collateral_balance -= revenue

    market.channel.publish(make_event(
        events.OUTCOME_SOLD, market.id, timestamp_or_now(timestamp),
        outcome=outcome.side, amount=amount, revenue=revenue,
        supply=market.supply_of(outcome),
    ))
    logger.debug(f"Market {market.id}: sold {amount} {outcome.side.value} for {revenue}")
    return Coin(asset_type=market.collateral_type, value=revenue)
