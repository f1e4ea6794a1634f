"""
Audit records emitted by every mutating market operation.

Records are immutable and only flow outward: the engine appends them to a channel
and never reads them back.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

MARKET_CREATED = 'MARKET_CREATED'
CONTENT_UPDATED = 'CONTENT_UPDATED'
FEE_UPDATED = 'FEE_UPDATED'
MARKET_PAUSED = 'MARKET_PAUSED'
MARKET_RESUMED = 'MARKET_RESUMED'
MARKET_RESOLVED = 'MARKET_RESOLVED'
MARKET_CLOSED = 'MARKET_CLOSED'
OUTCOME_PURCHASED = 'OUTCOME_PURCHASED'
OUTCOME_SOLD = 'OUTCOME_SOLD'
OUTCOME_REDEEMED = 'OUTCOME_REDEEMED'
FEE_WITHDRAWN = 'FEE_WITHDRAWN'
LIQUIDITY_DEPOSITED = 'LIQUIDITY_DEPOSITED'
CAPABILITY_TRANSFERRED = 'CAPABILITY_TRANSFERRED'


@dataclass(frozen=True)
class MarketEvent:
    type: str
    market_id: str
    ts_ms: int
    payload: Mapping[str, Any]

    def to_dict(self) -> dict:
        return {'type': self.type, 'market_id': self.market_id, 'ts_ms': self.ts_ms, **self.payload}


def make_event(event_type: str, market_id: str, ts_ms: int, **payload: Any) -> MarketEvent:
    return MarketEvent(type=event_type, market_id=market_id, ts_ms=ts_ms, payload=MappingProxyType(dict(payload)))


Subscriber = Callable[[MarketEvent], None]


class EventChannel:
    """
    Append-only record log with fire-and-forget subscribers.

    With maxlen set only the newest maxlen records are retained; subscribers still
    see every record as it is published.
    """

    def __init__(self, name: str = 'market', maxlen: Optional[int] = None):
        self.name = name
        self.maxlen = maxlen
        self._records: Deque[MarketEvent] = deque(maxlen=maxlen)
        self._subscribers: List[Subscriber] = []

    @property
    def records(self) -> Tuple[MarketEvent, ...]:
        return tuple(self._records)

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        self._subscribers.remove(callback)

    def publish(self, event: MarketEvent) -> None:
        self._records.append(event)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                # Observers never influence the operation that emitted the record
                logger.error(f"Subscriber failed on {event.type} for market {event.market_id} in channel {self.name}: {e}")

    def __len__(self) -> int:
        return len(self._records)


DEFAULT_CHANNEL = 'markets'
SHARED_CHANNEL_MAXLEN = 10_000

_channels: Dict[str, EventChannel] = {}
_channels_lock = threading.Lock()


def get_event_channel(name: str = DEFAULT_CHANNEL) -> EventChannel:
    """
    Returns the process-wide channel with this name, creating it on first use.
    Shared channels outlive any one market, so they keep only the newest
    SHARED_CHANNEL_MAXLEN records.
    """
    with _channels_lock:
        if name not in _channels:
            _channels[name] = EventChannel(name, maxlen=SHARED_CHANNEL_MAXLEN)
        return _channels[name]
