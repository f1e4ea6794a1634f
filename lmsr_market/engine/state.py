import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .errors import AssetMismatchError, UnknownOutcomeError
from .events import EventChannel
from .params import MarketConfig


class OutcomeSide(str, Enum):
    FIRST = 'FIRST'
    SECOND = 'SECOND'


@dataclass(frozen=True)
class Outcome:
    """One of the two positions of a market, tagged with the asset type backing it."""
    side: OutcomeSide
    asset_type: str


@dataclass(frozen=True)
class CollateralMetadata:
    asset_type: str
    decimals: int
    symbol: str = ''


@dataclass
class Coin:
    """A spendable amount of one asset type, collateral or outcome."""
    asset_type: str
    value: int

    def take(self) -> int:
        """Empties the coin and returns its value, so it cannot be spent twice."""
        value = self.value
        self.value = 0
        return value


def mint_for_testing(asset_type: str, value: int) -> Coin:
    """Mock collateral for tests and demos."""
    return Coin(asset_type=asset_type, value=value)


_CREATION_KEY = object()


class ManagerCapability:
    """
    Administrative credential bound to exactly one market id.

    Only market creation can issue one. It can change hands via transfer_capability
    but can never be copied or pickled.
    """

    __slots__ = ('_market_id', 'owner')

    def __init__(self, market_id: str, owner: str, *, _key: object = None):
        if _key is not _CREATION_KEY:
            raise TypeError("ManagerCapability is only issued by market creation")
        self._market_id = market_id
        self.owner = owner

    @property
    def market_id(self) -> str:
        return self._market_id

    def __copy__(self):
        raise TypeError("ManagerCapability cannot be duplicated")

    def __deepcopy__(self, memo):
        raise TypeError("ManagerCapability cannot be duplicated")

    def __reduce_ex__(self, protocol):
        raise TypeError("ManagerCapability cannot be serialized")

    def __repr__(self) -> str:
        return f"ManagerCapability(market_id={self._market_id!r}, owner={self.owner!r})"


def issue_capability(market_id: str, owner: str) -> ManagerCapability:
    return ManagerCapability(market_id, owner, _key=_CREATION_KEY)


@dataclass(eq=False)
class Market:
    id: str
    content_reference: str
    created_at: int
    outcomes: Tuple[Outcome, Outcome]
    collateral: CollateralMetadata
    config: MarketConfig
    channel: EventChannel = field(repr=False)
    is_paused: bool = False
    resolved_at: Optional[int] = None
    winning_outcome: Optional[Outcome] = None
    collateral_balance: int = 0
    fee_balance: int = 0
    first_supply: int = 0
    second_supply: int = 0
    closed: bool = False
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def is_resolved(self) -> bool:
        return self.winning_outcome is not None

    @property
    def collateral_type(self) -> str:
        return self.collateral.asset_type

    def require_outcome(self, outcome: Outcome) -> Outcome:
        if outcome not in self.outcomes:
            raise UnknownOutcomeError(f"Outcome {outcome} does not belong to market {self.id}")
        return outcome

    def outcome_for_asset(self, asset_type: str) -> Outcome:
        for outcome in self.outcomes:
            if outcome.asset_type == asset_type:
                return outcome
        raise AssetMismatchError(f"Asset type {asset_type} is not an outcome of market {self.id}")

    def supply_of(self, outcome: Outcome) -> int:
        self.require_outcome(outcome)
        if outcome.side == OutcomeSide.FIRST:
            return self.first_supply
        return self.second_supply

    def set_supply(self, outcome: Outcome, supply: int) -> None:
        self.require_outcome(outcome)
        if supply < 0:
            raise ValueError(f"Supply for {outcome.side.value} cannot go negative: {supply}")
        if outcome.side == OutcomeSide.FIRST:
            self.first_supply = supply
        else:
            self.second_supply = supply
