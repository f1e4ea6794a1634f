import argparse

import matplotlib.pyplot as plt
import numpy as np

from lmsr_market.engine.fixed_point import FixedPoint
from lmsr_market.engine.lmsr import net_cost, price

def price_impact_curve(b: int, amount: int, max_imbalance: int, points: int = 50) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Cost of buying `amount` of the first outcome, and its marginal price, as the
    first outcome's supply grows from 0 to max_imbalance with the second held at 0.
    """
    b_fp = FixedPoint.from_int(b)
    amount_fp = FixedPoint.from_int(amount)
    imbalances = np.linspace(0, max_imbalance, points).astype(np.int64)
    costs = np.empty(points)
    prices = np.empty(points)
    for i, imbalance in enumerate(imbalances):
        quantities = [FixedPoint.from_int(int(imbalance)), FixedPoint.zero()]
        costs[i] = float(net_cost(quantities, b_fp, 0, amount_fp).to_decimal())
        prices[i] = float(price(quantities, b_fp, 0).to_decimal())
    return imbalances, costs, prices

def generate_graph(b: int = 1000, amount: int = 100, max_imbalance: int = 5000, output_path: str = None) -> None:
    imbalances, costs, prices = price_impact_curve(b, amount, max_imbalance)

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(imbalances, costs, label=f'Cost of buying {amount} units', color='blue')
    ax.set_xlabel('Supply of first outcome (second outcome at 0)')
    ax.set_ylabel('Collateral units')
    ax2 = ax.twinx()
    ax2.plot(imbalances, prices, label='Marginal price', color='green')
    ax2.set_ylabel('Price')
    ax.set_title(f'LMSR price impact, b = {b}')
    ax.legend(loc='upper left')
    ax2.legend(loc='lower right')
    ax.grid(True)

    if output_path:
        plt.savefig(output_path)
    else:
        plt.show()

if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Plot LMSR price impact against supply imbalance.")
    parser.add_argument("--b", type=int, default=1000, help="Liquidity parameter")
    parser.add_argument("--amount", type=int, default=100, help="Trade size")
    parser.add_argument("--max_imbalance", type=int, default=5000, help="Largest supply of the first outcome")
    parser.add_argument("--output", type=str, help="Save to this path instead of showing")
    args = parser.parse_args()
    generate_graph(args.b, args.amount, args.max_imbalance, args.output)
