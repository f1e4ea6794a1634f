import argparse
from typing import Iterable, List

import pandas as pd

from lmsr_market.engine import FixedPoint, Market, MarketEvent
from lmsr_market.utils import units_to_amount

def events_frame(records: Iterable[MarketEvent]) -> pd.DataFrame:
    rows = []
    for event in records:
        row = event.to_dict()
        for key, value in row.items():
            if hasattr(value, 'value'):
                row[key] = value.value
            elif isinstance(value, list):
                row[key] = ','.join(str(v) for v in value)
        rows.append(row)
    return pd.DataFrame(rows)

def export_events_csv(records: Iterable[MarketEvent], filename: str) -> None:
    df = events_frame(records)
    df.to_csv(filename, index=False)

def export_markets_csv(markets: List[Market], filename: str) -> None:
    rows = []
    for market in markets:
        decimals = market.collateral.decimals
        rows.append({
            'market_id': market.id,
            'content_reference': market.content_reference,
            'created_at': market.created_at,
            'resolved_at': market.resolved_at,
            'winning_outcome': market.winning_outcome.asset_type if market.winning_outcome else None,
            'paused': market.is_paused,
            'fee_bps': market.config['fee_basis_points'],
            'liquidity_parameter': float(FixedPoint.from_units(market.config['liquidity_parameter'].floor(), decimals).to_decimal()),
            'collateral_balance': float(units_to_amount(market.collateral_balance, decimals)),
            'fee_balance': float(units_to_amount(market.fee_balance, decimals)),
            'first_supply': float(units_to_amount(market.first_supply, decimals)),
            'second_supply': float(units_to_amount(market.second_supply, decimals)),
        })
    df = pd.DataFrame(rows)
    df.to_csv(filename, index=False, float_format='%.6f')

if __name__ == "__main__":
    from lmsr_market.scripts.run_demo import run_demo

    parser = argparse.ArgumentParser(description="Run the demo market and export its audit records.")
    parser.add_argument("--events", type=str, default="events.csv", help="Output CSV for audit records")
    parser.add_argument("--markets", type=str, default="markets.csv", help="Output CSV for market summaries")
    parser.add_argument("--trades", type=int, default=50, help="Number of random trades")
    args = parser.parse_args()

    result = run_demo(n_trades=args.trades)
    export_events_csv(result['channel'].records, args.events)
    export_markets_csv([result['market']], args.markets)
    print(f"Exported {len(result['channel'])} records to {args.events}")
