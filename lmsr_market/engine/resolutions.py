"""
Resolution and settlement.

Resolution is one-way. Redemption opens only once the market is both paused and
resolved: the manager pauses to freeze trading, then resolves to pick the winner.
Winning assets redeem 1:1 for collateral with no fee.
"""

import logging
from typing import Optional

from . import events
from .errors import (
    InsufficientCollateralError,
    InsufficientFeeBalanceError,
    InsufficientSupplyError,
    MarketNotPausedError,
    OutcomeMismatchError,
    OutstandingSupplyError,
)
from .events import make_event
from .guards import (
    require_capability,
    require_positive,
    require_resolved,
    require_unresolved,
    serialized,
    timestamp_or_now,
)
from .state import Coin, ManagerCapability, Market, Outcome

logger = logging.getLogger(__name__)


@serialized
def resolve(market: Market, capability: ManagerCapability, outcome: Outcome, timestamp: Optional[int] = None) -> None:
    require_capability(market, capability)
    require_unresolved(market)
    market.require_outcome(outcome)

    ts = timestamp_or_now(timestamp)
    market.winning_outcome = outcome
    market.resolved_at = ts
    market.channel.publish(make_event(
        events.MARKET_RESOLVED, market.id, ts,
        winning_outcome=outcome.side, asset_type=outcome.asset_type,
        paused=market.is_paused,
    ))
    if not market.is_paused:
        logger.warning(f"Market {market.id} resolved while trading was open; redemption stays closed until paused")
    logger.info(f"Market {market.id} resolved to {outcome.side.value}")


@serialized
def redeem(market: Market, outcome_asset: Coin, timestamp: Optional[int] = None) -> Coin:
    require_resolved(market)
    if not market.is_paused:
        raise MarketNotPausedError(f"Market {market.id} must be paused before redemption")
    amount = outcome_asset.value
    require_positive(amount)
    outcome = market.outcome_for_asset(outcome_asset.asset_type)
    if outcome != market.winning_outcome:
        raise OutcomeMismatchError(
            f"Asset for {outcome.side.value} cannot redeem; market {market.id} resolved to {market.winning_outcome.side.value}"
        )
    supply = market.supply_of(outcome)
    if amount > supply:
        raise InsufficientSupplyError(f"Insufficient supply for {outcome.side.value}: have {supply}, need {amount}.")
    if amount > market.collateral_balance:
        raise InsufficientCollateralError(
            f"Market {market.id} holds {market.collateral_balance}, cannot redeem {amount}"
        )

    outcome_asset.take()
    market.set_supply(outcome, supply - amount)
    market.collateral_balance -= amount

    market.channel.publish(make_event(
        events.OUTCOME_REDEEMED, market.id, timestamp_or_now(timestamp),
        outcome=outcome.side, amount=amount, payout=amount,
    ))
    logger.debug(f"Market {market.id}: redeemed {amount} {outcome.side.value}")
    return Coin(asset_type=market.collateral_type, value=amount)


@serialized
def withdraw_fee(market: Market, capability: ManagerCapability, amount: int, timestamp: Optional[int] = None) -> Coin:
    require_capability(market, capability)
    require_resolved(market)
    require_positive(amount)
    if amount > market.fee_balance:
        raise InsufficientFeeBalanceError(f"Fee balance {market.fee_balance} is less than {amount}")

    market.fee_balance -= amount
    market.channel.publish(make_event(
        events.FEE_WITHDRAWN, market.id, timestamp_or_now(timestamp),
        amount=amount, fee_balance=market.fee_balance,
    ))
    logger.info(f"Market {market.id}: withdrew {amount} in fees")
    return Coin(asset_type=market.collateral_type, value=amount)


@serialized
def close(market: Market, capability: ManagerCapability, timestamp: Optional[int] = None) -> Coin:
    """
    Retires a resolved market for good and sweeps whatever collateral and fees remain
    to the caller.

    While redemption is open (paused and resolved) every winning asset must be
    redeemed first. A market resolved while trading was open can never redeem, so it
    closes straight away.
    """
    require_capability(market, capability)
    require_resolved(market)
    outstanding = market.supply_of(market.winning_outcome)
    if market.is_paused and outstanding > 0:
        raise OutstandingSupplyError(f"Market {market.id} still has {outstanding} unredeemed winning units")
    if outstanding > 0:
        logger.warning(f"Market {market.id} closing with {outstanding} winning units that could never redeem")

    residual = market.collateral_balance + market.fee_balance
    market.collateral_balance = 0
    market.fee_balance = 0
    market.closed = True
    market.channel.publish(make_event(
        events.MARKET_CLOSED, market.id, timestamp_or_now(timestamp),
        residual=residual,
    ))
    logger.info(f"Market {market.id} closed, {residual} units swept")
    return Coin(asset_type=market.collateral_type, value=residual)
