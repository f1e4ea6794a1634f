import functools
from typing import Optional

from lmsr_market.utils import get_current_ms, validate_amount

from .errors import (
    AuthorizationError,
    MarketClosedError,
    MarketNotResolvedError,
    MarketPausedError,
    MarketResolvedError,
    ZeroAmountError,
)
from .state import ManagerCapability, Market


def serialized(fn):
    """Runs a market operation under that market's lock, one writer at a time."""
    @functools.wraps(fn)
    def wrapper(market: Market, *args, **kwargs):
        with market.lock:
            if market.closed:
                raise MarketClosedError(f"Market {market.id} is closed")
            return fn(market, *args, **kwargs)
    return wrapper


def require_capability(market: Market, capability: ManagerCapability) -> None:
    if not isinstance(capability, ManagerCapability) or capability.market_id != market.id:
        bound = getattr(capability, 'market_id', None)
        raise AuthorizationError(f"Capability for market {bound} cannot manage market {market.id}")


def require_unresolved(market: Market) -> None:
    if market.is_resolved:
        raise MarketResolvedError(f"Market {market.id} is already resolved")


def require_resolved(market: Market) -> None:
    if not market.is_resolved:
        raise MarketNotResolvedError(f"Market {market.id} is not resolved yet")


def require_trading(market: Market) -> None:
    if market.is_paused:
        raise MarketPausedError(f"Market {market.id} is paused")
    require_unresolved(market)


def require_positive(amount: int, what: str = 'amount') -> None:
    validate_amount(amount)
    if amount <= 0:
        raise ZeroAmountError(f"Invalid {what}: {amount}. Must be positive.")


def timestamp_or_now(timestamp: Optional[int]) -> int:
    return get_current_ms() if timestamp is None else timestamp
