import pytest
from decimal import Decimal

import numpy as np
import pandas as pd

from lmsr_market.engine import events
from lmsr_market.scripts.export_csv import events_frame, export_events_csv, export_markets_csv
from lmsr_market.scripts.generate_graph import generate_graph, price_impact_curve
from lmsr_market.scripts.run_demo import main, run_demo

@pytest.fixture(scope='module')
def demo():
    return run_demo(n_trades=30, fee_bps=100, liquidity=500, seed=11, winner_index=1)

def test_demo_runs_full_lifecycle(demo):
    market = demo['market']
    summary = demo['summary']
    assert market.closed
    assert market.is_resolved
    assert market.winning_outcome == market.outcomes[1]
    assert market.supply_of(market.winning_outcome) == 0
    assert market.collateral_balance == 0
    assert market.fee_balance == 0

    assert summary['market_id'] == market.id
    assert summary['trades'] == 30
    assert summary['rejected'] == 0
    assert summary['winner'] == 'NO'
    assert summary['fees'] > 0
    assert summary['residual'] >= 0
    assert summary['events'] == len(demo['channel'])
    assert demo['registry'].market_ids == (market.id,)

def test_demo_record_sequence(demo):
    types = [record.type for record in demo['channel'].records]
    assert types[0] == events.MARKET_CREATED
    assert types[1] == events.LIQUIDITY_DEPOSITED
    assert types[-1] == events.MARKET_CLOSED
    assert events.MARKET_PAUSED in types
    assert types.index(events.MARKET_PAUSED) < types.index(events.MARKET_RESOLVED)
    assert types.count(events.OUTCOME_PURCHASED) + types.count(events.OUTCOME_SOLD) == 30

def test_demo_is_deterministic(demo):
    again = run_demo(n_trades=30, fee_bps=100, liquidity=500, seed=11, winner_index=1)
    for key in ('paid_out', 'fees', 'residual', 'events'):
        assert again['summary'][key] == demo['summary'][key]

def test_events_frame(demo):
    df = events_frame(demo['channel'].records)
    assert len(df) == len(demo['channel'])
    assert set(['type', 'market_id', 'ts_ms']).issubset(df.columns)
    assert (df['market_id'] == demo['market'].id).all()
    purchases = df[df['type'] == events.OUTCOME_PURCHASED]
    assert set(purchases['outcome']).issubset({'FIRST', 'SECOND'})

def test_csv_exports(demo, tmp_path):
    events_path = tmp_path / 'events.csv'
    markets_path = tmp_path / 'markets.csv'
    export_events_csv(demo['channel'].records, str(events_path))
    export_markets_csv([demo['market']], str(markets_path))

    exported = pd.read_csv(events_path)
    assert len(exported) == len(demo['channel'])
    markets = pd.read_csv(markets_path)
    assert markets.loc[0, 'market_id'] == demo['market'].id
    assert markets.loc[0, 'winning_outcome'] == 'NO'
    assert markets.loc[0, 'collateral_balance'] == 0

def test_main_prints_summary(capsys):
    main(['--trades', '5', '--seed', '3'])
    output = capsys.readouterr().out
    assert 'market_id:' in output
    assert 'residual:' in output

def test_price_impact_curve():
    imbalances, costs, prices = price_impact_curve(1000, 100, 5000, points=26)
    assert len(imbalances) == len(costs) == len(prices) == 26
    assert imbalances[0] == 0
    assert np.all(np.diff(costs) > 0)
    assert np.all(np.diff(prices) > 0)
    assert prices[0] == pytest.approx(0.5)
    assert np.all(costs < 100)

def test_generate_graph_writes_file(tmp_path):
    output = tmp_path / 'impact.png'
    generate_graph(b=100, amount=10, max_imbalance=500, output_path=str(output))
    assert output.exists()

def test_summary_amounts_are_decimal(demo):
    assert isinstance(demo['summary']['paid_out'], Decimal)
