from .fixed_point import FixedPoint, SCALE, WIDE_SCALE, exp, ln
from .state import CollateralMetadata, Coin, ManagerCapability, Market, Outcome, OutcomeSide, mint_for_testing
from .params import MarketConfig, BPS_DENOMINATOR, MAX_FEE_BPS, compute_fee
from .snapshot import OutcomeSnapshot
from .events import EventChannel, MarketEvent, get_event_channel

from .market import (
    create,
    transfer_capability,
    update_content_reference,
    update_fee_bps,
    pause,
    resume,
    deposit_liquidity,
    max_subsidy,
    get_supply,
    get_prices,
)
from .orders import (
    quote_snapshot,
    add_snapshot_entry,
    quote_full_snapshot,
    preview_buy_cost,
    preview_sell_revenue,
    buy,
    sell,
)
from .resolutions import resolve, redeem, withdraw_fee, close
