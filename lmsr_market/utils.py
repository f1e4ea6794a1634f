import json
import time
from decimal import Decimal, ROUND_DOWN
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict

import mpmath as mp
import numpy as np

mp.mp.dps = 50

def get_current_ms() -> int:
    return int(time.time() * 1000)

def units_to_amount(units: int, decimals: int) -> Decimal:
    """Base units to a human-readable token amount, e.g. 1500000000 with 9 decimals -> 1.5."""
    return Decimal(units).scaleb(-decimals)

def amount_to_units(amount: float | str | Decimal, decimals: int) -> int:
    """Token amount to base units, truncating anything below one unit."""
    scaled = Decimal(str(amount)).scaleb(decimals).quantize(Decimal(1), rounding=ROUND_DOWN)
    return int(scaled)

def validate_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, (int, np.integer)):
        raise TypeError(f"Invalid amount type: {type(amount).__name__}. Must be an integer number of units.")

def serialize_record(record: Dict[str, Any]) -> str:
    def default_handler(obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, MappingProxyType):
            return dict(obj)
        if isinstance(obj, (np.integer,)):
            return int(obj)
        if isinstance(obj, (np.float64, np.float32)):
            return float(obj)
        if hasattr(obj, 'to_decimal'):
            return str(obj.to_decimal())
        raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
    return json.dumps(record, default=default_handler, sort_keys=True)

def deserialize_record(json_str: str) -> Dict[str, Any]:
    return json.loads(json_str)

def to_mpf(value: Any) -> mp.mpf:
    if hasattr(value, 'to_decimal'):
        value = value.to_decimal()
    return mp.mpf(str(value))

def relative_error(actual: Any, expected: Any) -> Decimal:
    """|actual - expected| / |expected| evaluated with mpmath; absolute error when expected is 0."""
    a = to_mpf(actual)
    e = to_mpf(expected)
    if e == 0:
        return Decimal(str(abs(a)))
    return Decimal(mp.nstr(abs(a - e) / abs(e), 20))
