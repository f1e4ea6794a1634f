import threading
from typing import List, Tuple


class MarketRegistry:
    """Append-only list of market ids with a running count."""

    def __init__(self):
        self._market_ids: List[str] = []
        self._lock = threading.Lock()

    def register(self, market) -> int:
        with self._lock:
            if market.id in self._market_ids:
                raise ValueError(f"Market {market.id} is already registered")
            self._market_ids.append(market.id)
            return len(self._market_ids)

    @property
    def market_ids(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._market_ids)

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._market_ids)
