from typing_extensions import TypedDict

from .errors import FeeOutOfBoundsError, InvalidLiquidityError
from .fixed_point import FixedPoint

BPS_DENOMINATOR = 10_000
MAX_FEE_BPS = 1_000  # 10%


class MarketConfig(TypedDict):
    """Per-market pricing parameters. liquidity_parameter is fixed once the market exists."""
    fee_basis_points: int
    liquidity_parameter: FixedPoint


def validate_fee_bps(fee_bps: int) -> None:
    if isinstance(fee_bps, bool) or not isinstance(fee_bps, int):
        raise FeeOutOfBoundsError(f"Fee must be an integer number of basis points, got {fee_bps!r}")
    if not (0 <= fee_bps <= MAX_FEE_BPS):
        raise FeeOutOfBoundsError(f"Fee {fee_bps} bps outside bounds [0, {MAX_FEE_BPS}]")


def validate_liquidity(b: FixedPoint) -> None:
    if b.raw <= 0:
        raise InvalidLiquidityError(f"Liquidity parameter must be positive, got {b}")


def new_market_config(liquidity_parameter: FixedPoint, fee_basis_points: int = 0) -> MarketConfig:
    validate_liquidity(liquidity_parameter)
    validate_fee_bps(fee_basis_points)
    return MarketConfig(fee_basis_points=fee_basis_points, liquidity_parameter=liquidity_parameter)


def default_liquidity_parameter(liquidity_whole_units: int, collateral_decimals: int) -> FixedPoint:
    """Liquidity expressed in collateral base units, e.g. 1000 tokens with 9 decimals."""
    return FixedPoint.from_int(liquidity_whole_units * 10**collateral_decimals)


def compute_fee(amount: int, fee_bps: int) -> int:
    """fee = floor(amount * fee_bps / 10000)"""
    return amount * fee_bps // BPS_DENOMINATOR
