"""
Single-use capture of both outcome supplies of one market.

A snapshot is filled with exactly one entry per outcome, then handed to exactly one
pricing call which consumes it. Previews price a clone and leave the original intact.
Only the quoting operations in orders.py hold the key that opens a snapshot or
records an entry, so every supply in it was read from the market itself.
"""

from typing import Dict, List, Sequence, Tuple

from . import lmsr
from .errors import (
    DuplicateEntryError,
    InvalidSnapshotError,
    MarketMismatchError,
    OutcomeNotFoundError,
    SnapshotConsumedError,
)
from .fixed_point import FixedPoint
from .state import Outcome

REQUIRED_ENTRIES = 2

_SNAPSHOT_KEY = object()


def _check_key(key: object) -> None:
    if key is not _SNAPSHOT_KEY:
        raise TypeError("Snapshots are only filled through quote_snapshot and add_snapshot_entry")


class OutcomeSnapshot:

    def __init__(self, market_id: str, outcomes: Sequence[Outcome], *, _key: object = None):
        _check_key(_key)
        self._market_id = market_id
        self._outcomes = tuple(outcomes)
        self._entries: Dict[Outcome, FixedPoint] = {}
        self._consumed = False

    @property
    def market_id(self) -> str:
        return self._market_id

    @property
    def consumed(self) -> bool:
        return self._consumed

    @property
    def entries(self) -> Dict[Outcome, FixedPoint]:
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _ensure_live(self) -> None:
        if self._consumed:
            raise SnapshotConsumedError(f"Snapshot for market {self._market_id} was already consumed")

    @property
    def outcomes(self) -> Tuple[Outcome, ...]:
        return self._outcomes

    def add_entry(self, market_id: str, outcome: Outcome, supply: FixedPoint, *, _key: object = None) -> None:
        _check_key(_key)
        self._ensure_live()
        if market_id != self._market_id:
            raise MarketMismatchError(f"Snapshot belongs to market {self._market_id}, not {market_id}")
        if outcome not in self._outcomes:
            raise MarketMismatchError(
                f"Outcome {outcome.side.value} ({outcome.asset_type}) is not an outcome of market {self._market_id}"
            )
        if outcome in self._entries:
            raise DuplicateEntryError(f"Snapshot already holds an entry for {outcome.side.value}")
        if supply.is_negative():
            raise InvalidSnapshotError(f"Supply for {outcome.side.value} cannot be negative: {supply}")
        self._entries[outcome] = supply

    def clone(self) -> 'OutcomeSnapshot':
        self._ensure_live()
        copy = OutcomeSnapshot(self._market_id, self._outcomes, _key=_SNAPSHOT_KEY)
        copy._entries = dict(self._entries)
        return copy

    def _consume(self, outcome: Outcome) -> Tuple[List[FixedPoint], int]:
        """Marks the snapshot spent, then validates it and returns (quantities, index)."""
        self._ensure_live()
        self._consumed = True
        if len(self._entries) != REQUIRED_ENTRIES:
            raise InvalidSnapshotError(
                f"Snapshot must contain exactly {REQUIRED_ENTRIES} entries, has {len(self._entries)}"
            )
        # Order by side so the quantity vector is the same regardless of insertion order
        ordered = sorted(self._entries.items(), key=lambda item: item[0].side.value)
        outcomes = [o for o, _ in ordered]
        if outcome not in outcomes:
            raise OutcomeNotFoundError(f"Snapshot has no entry for {outcome.side.value} ({outcome.asset_type})")
        return [q for _, q in ordered], outcomes.index(outcome)

    def into_net_cost(self, outcome: Outcome, amount: FixedPoint, b: FixedPoint) -> FixedPoint:
        quantities, index = self._consume(outcome)
        return lmsr.net_cost(quantities, b, index, amount)

    def into_net_revenue(self, outcome: Outcome, amount: FixedPoint, b: FixedPoint) -> FixedPoint:
        quantities, index = self._consume(outcome)
        return lmsr.net_revenue(quantities, b, index, amount)

    def into_price(self, outcome: Outcome, b: FixedPoint) -> FixedPoint:
        quantities, index = self._consume(outcome)
        return lmsr.price(quantities, b, index)

    def __repr__(self) -> str:
        state = 'consumed' if self._consumed else f"{len(self._entries)} entries"
        return f"OutcomeSnapshot(market_id={self._market_id!r}, {state})"
