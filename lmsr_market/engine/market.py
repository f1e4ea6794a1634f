"""
Market creation and administrative operations.

Every admin call requires the market's ManagerCapability. Pausing only stops new
quotes and trades; configuration stays editable until the market resolves.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from lmsr_market.config import MarketParams, get_market_params

from . import events, lmsr
from .errors import AssetMismatchError, UnchangedValueError
from .events import EventChannel, get_event_channel, make_event
from .fixed_point import FixedPoint
from .guards import (
    require_capability,
    require_positive,
    require_unresolved,
    serialized,
    timestamp_or_now,
)
from .params import default_liquidity_parameter, new_market_config, validate_fee_bps
from .state import (
    CollateralMetadata,
    Coin,
    ManagerCapability,
    Market,
    Outcome,
    OutcomeSide,
    issue_capability,
)

logger = logging.getLogger(__name__)


def create(
    outcome_a_marker: str,
    outcome_b_marker: str,
    collateral_metadata: CollateralMetadata,
    content_reference: str,
    timestamp: Optional[int] = None,
    *,
    owner: str = 'creator',
    liquidity_parameter: Optional[FixedPoint] = None,
    fee_bps: Optional[int] = None,
    channel: Optional[EventChannel] = None,
    registry=None,
    params: Optional[MarketParams] = None,
) -> Tuple[Market, ManagerCapability]:
    """
    Creates a market and the capability that manages it in one step.

    The two outcome markers and the collateral asset type are fixed for the life of
    the market. Liquidity and fee default to the configured market params, with the
    liquidity scaled by the collateral's decimals.
    """
    asset_types = {outcome_a_marker, outcome_b_marker, collateral_metadata.asset_type}
    if len(asset_types) != 3:
        raise AssetMismatchError(
            f"Outcome and collateral asset types must be distinct: "
            f"{outcome_a_marker}, {outcome_b_marker}, {collateral_metadata.asset_type}"
        )

    params = params or get_market_params()
    if liquidity_parameter is None:
        liquidity_parameter = default_liquidity_parameter(params['default_liquidity'], collateral_metadata.decimals)
    if fee_bps is None:
        fee_bps = params['default_fee_bps']
    config = new_market_config(liquidity_parameter, fee_bps)
    ts = timestamp_or_now(timestamp)

    market = Market(
        id=str(uuid.uuid4()),
        content_reference=content_reference,
        created_at=ts,
        outcomes=(
            Outcome(OutcomeSide.FIRST, outcome_a_marker),
            Outcome(OutcomeSide.SECOND, outcome_b_marker),
        ),
        collateral=collateral_metadata,
        config=config,
        channel=channel if channel is not None else get_event_channel(),
    )
    capability = issue_capability(market.id, owner)

    if registry is not None:
        registry.register(market)

    market.channel.publish(make_event(
        events.MARKET_CREATED, market.id, ts,
        content_reference=content_reference,
        outcomes=[o.asset_type for o in market.outcomes],
        collateral=collateral_metadata.asset_type,
        liquidity_parameter=str(liquidity_parameter),
        fee_bps=fee_bps,
    ))
    logger.info(f"Market {market.id} created: b={liquidity_parameter}, fee={fee_bps}bps, collateral={collateral_metadata.asset_type}")
    return market, capability


def transfer_capability(capability: ManagerCapability, recipient: str, market: Optional[Market] = None, timestamp: Optional[int] = None) -> None:
    if market is not None:
        require_capability(market, capability)
    previous = capability.owner
    capability.owner = recipient
    if market is not None:
        market.channel.publish(make_event(
            events.CAPABILITY_TRANSFERRED, market.id, timestamp_or_now(timestamp),
            previous_owner=previous, new_owner=recipient,
        ))
    logger.info(f"Capability for market {capability.market_id} transferred from {previous} to {recipient}")


@serialized
def update_content_reference(market: Market, capability: ManagerCapability, new_reference: str, timestamp: Optional[int] = None) -> None:
    require_capability(market, capability)
    if new_reference == market.content_reference:
        raise UnchangedValueError(f"Content reference for market {market.id} is already {new_reference!r}")

    previous = market.content_reference
    market.content_reference = new_reference
    market.channel.publish(make_event(
        events.CONTENT_UPDATED, market.id, timestamp_or_now(timestamp),
        previous=previous, current=new_reference,
    ))


@serialized
def update_fee_bps(market: Market, capability: ManagerCapability, bps: int, timestamp: Optional[int] = None) -> None:
    require_capability(market, capability)
    require_unresolved(market)
    validate_fee_bps(bps)

    previous = market.config['fee_basis_points']
    market.config['fee_basis_points'] = bps
    market.channel.publish(make_event(
        events.FEE_UPDATED, market.id, timestamp_or_now(timestamp),
        previous_bps=previous, fee_bps=bps,
    ))
    logger.info(f"Market {market.id} fee updated {previous} -> {bps} bps")


@serialized
def pause(market: Market, capability: ManagerCapability, timestamp: Optional[int] = None) -> None:
    require_capability(market, capability)
    require_unresolved(market)

    market.is_paused = True
    market.channel.publish(make_event(events.MARKET_PAUSED, market.id, timestamp_or_now(timestamp)))
    logger.info(f"Market {market.id} paused")


@serialized
def resume(market: Market, capability: ManagerCapability, timestamp: Optional[int] = None) -> None:
    require_capability(market, capability)
    require_unresolved(market)

    market.is_paused = False
    market.channel.publish(make_event(events.MARKET_RESUMED, market.id, timestamp_or_now(timestamp)))
    logger.info(f"Market {market.id} resumed")


@serialized
def deposit_liquidity(market: Market, capability: ManagerCapability, coin: Coin, timestamp: Optional[int] = None) -> None:
    """
    Funds the collateral pool. An LMSR maker can lose up to b * ln(2), so winners are
    only guaranteed a full payout when the pool was seeded with at least that much.
    """
    require_capability(market, capability)
    require_unresolved(market)
    if coin.asset_type != market.collateral_type:
        raise AssetMismatchError(f"Expected collateral {market.collateral_type}, got {coin.asset_type}")
    require_positive(coin.value, 'deposit')

    amount = coin.take()
    market.collateral_balance += amount
    market.channel.publish(make_event(
        events.LIQUIDITY_DEPOSITED, market.id, timestamp_or_now(timestamp),
        amount=amount, collateral_balance=market.collateral_balance,
    ))
    logger.info(f"Market {market.id} received {amount} units of liquidity")


def max_subsidy(market: Market) -> int:
    """Worst-case maker loss b * ln(2), rounded up to whole collateral units."""
    b = market.config['liquidity_parameter']
    return lmsr.cost([FixedPoint.zero(), FixedPoint.zero()], b).ceil()


def get_supply(market: Market, outcome: Outcome) -> int:
    with market.lock:
        return market.supply_of(outcome)


def get_prices(market: Market) -> List[FixedPoint]:
    """Current marginal prices, FIRST then SECOND."""
    with market.lock:
        quantities = [FixedPoint.from_int(market.first_supply), FixedPoint.from_int(market.second_supply)]
        return lmsr.prices(quantities, market.config['liquidity_parameter'])
