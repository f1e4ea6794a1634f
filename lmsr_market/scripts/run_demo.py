"""
Walks one market through its whole life: create, seed, random trading, pause,
resolve, redeem, fee withdrawal and close.
"""

import argparse
import logging
from typing import Any, Dict, List, Optional

import numpy as np

from lmsr_market.config import configure_logging, get_market_params
from lmsr_market.engine import (
    CollateralMetadata,
    Coin,
    EventChannel,
    Market,
    buy,
    close,
    create,
    deposit_liquidity,
    get_prices,
    max_subsidy,
    mint_for_testing,
    pause,
    quote_full_snapshot,
    redeem,
    resolve,
    sell,
    withdraw_fee,
)
from lmsr_market.engine.errors import MarketError
from lmsr_market.services import MarketRegistry
from lmsr_market.utils import amount_to_units, units_to_amount

logger = logging.getLogger(__name__)

COLLATERAL = CollateralMetadata(asset_type='USDC', decimals=6, symbol='USDC')


def run_demo(
    n_trades: int = 50,
    fee_bps: int = 100,
    liquidity: Optional[int] = None,
    seed: int = 7,
    winner_index: int = 0,
) -> Dict[str, Any]:
    """Runs the lifecycle and returns the market, its channel and a summary."""
    params = get_market_params()
    params['collateral_decimals'] = COLLATERAL.decimals
    if liquidity is not None:
        params['default_liquidity'] = liquidity

    channel = EventChannel('demo')
    registry = MarketRegistry()
    market, cap = create('YES', 'NO', COLLATERAL, 'ipfs://demo-question', 0,
                         fee_bps=fee_bps, channel=channel, registry=registry, params=params)
    deposit_liquidity(market, cap, mint_for_testing(COLLATERAL.asset_type, max_subsidy(market)), 0)

    rng = np.random.default_rng(seed)
    holdings: Dict[str, List[Coin]] = {o.asset_type: [] for o in market.outcomes}
    rejected = 0

    for step in range(1, n_trades + 1):
        outcome = market.outcomes[int(rng.integers(0, 2))]
        held = holdings[outcome.asset_type]
        try:
            snapshot = quote_full_snapshot(market)
            if held and rng.random() < 0.3:
                asset = held.pop()
                sell(market, snapshot, asset, outcome, 0, step)
            else:
                amount = amount_to_units(int(rng.integers(1, 50)), COLLATERAL.decimals)
                payment = mint_for_testing(COLLATERAL.asset_type, amount_to_units(10**6, COLLATERAL.decimals))
                asset, _change = buy(market, snapshot, payment, outcome, amount, payment.value, step)
                held.append(asset)
        except MarketError as e:
            rejected += 1
            logger.warning(f"Trade {step} rejected: {e}")

    first, second = get_prices(market)
    logger.info(f"Prices after trading: {market.outcomes[0].asset_type}={first}, {market.outcomes[1].asset_type}={second}")

    ts = n_trades + 1
    pause(market, cap, ts)
    winner = market.outcomes[winner_index]
    resolve(market, cap, winner, ts)

    paid_out = 0
    for asset in holdings[winner.asset_type]:
        paid_out += redeem(market, asset, ts).value
    fees = market.fee_balance
    if fees > 0:
        withdraw_fee(market, cap, fees, ts)
    residual = close(market, cap, ts).value

    summary = {
        'market_id': market.id,
        'trades': n_trades,
        'rejected': rejected,
        'winner': winner.asset_type,
        'paid_out': units_to_amount(paid_out, COLLATERAL.decimals),
        'fees': units_to_amount(fees, COLLATERAL.decimals),
        'residual': units_to_amount(residual, COLLATERAL.decimals),
        'events': len(channel),
    }
    return {'market': market, 'channel': channel, 'registry': registry, 'summary': summary}


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run a full LMSR market lifecycle in memory.")
    parser.add_argument("--trades", type=int, default=50, help="Number of random trades")
    parser.add_argument("--fee_bps", type=int, default=100, help="Trading fee in basis points")
    parser.add_argument("--liquidity", type=int, help="Liquidity parameter in whole collateral units")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument("--winner", type=int, choices=[0, 1], default=0, help="Winning outcome index")
    args = parser.parse_args(argv)

    configure_logging()
    result = run_demo(args.trades, args.fee_bps, args.liquidity, args.seed, args.winner)
    for key, value in result['summary'].items():
        print(f"{key}: {value}")


if __name__ == "__main__":
    main()
