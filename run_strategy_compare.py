"""
run_strategy_compare.py

Compare the inventory-skewed market maker (gamma > 0) against a naive
fixed-spread market maker (gamma = 0) under the same price paths.

We run many simulation paths for each strategy and report:
  * Mean final PnL
  * Std of final PnL
  * Sharpe (mean / std of step PnL)
  * Max drawdown (average over runs)
  * Average |inventory| over time
"""

from __future__ import annotations

import argparse
import logging
from typing import Dict, List

import numpy as np

from mmsim.config import QuoteParams, SimulatorConfig
from mmsim.engine import MarketMakerSimulation, summarize_path


# ---------- helper to run ONE path for a given parameter set ----------

def run_single_path(params: QuoteParams, n_steps: int, seed: int = 0) -> Dict[str, float]:
    """
    Returns:
      dict with final_pnl, sharpe, max_drawdown, avg_abs_inventory
    """
    cfg = SimulatorConfig(n_steps=n_steps, seed=seed)
    sim = MarketMakerSimulation(cfg, params)
    return summarize_path(sim.run())


# ---------- main experiment --------------------------------------

def run_experiment(n_paths: int = 50, n_steps: int = 1000, gamma: float = 0.01):
    skewed = QuoteParams(gamma=gamma)
    naive = QuoteParams(gamma=0.0)

    skewed_results: List[Dict[str, float]] = []
    naive_results: List[Dict[str, float]] = []

    for i in range(n_paths):
        # same seed for both strategies -> same price shocks
        seed = 1234 + i
        skewed_results.append(run_single_path(skewed, n_steps=n_steps, seed=seed))
        naive_results.append(run_single_path(naive, n_steps=n_steps, seed=seed))

    def summarize(results, name: str):
        final_pnls = np.array([r["final_pnl"] for r in results])
        sharpes = np.array([r["sharpe"] for r in results])
        max_dds = np.array([r["max_drawdown"] for r in results])
        avg_abs_inv = np.array([r["avg_abs_inventory"] for r in results])

        print(f"\n===== {name} =====")
        print(f"# paths: {len(results)}")
        print(f"Mean final PnL      : {final_pnls.mean():8.3f}")
        print(f"Std final PnL       : {final_pnls.std():8.3f}")
        print(f"Mean Sharpe         : {sharpes.mean():8.3f}")
        print(f"Mean max drawdown   : {max_dds.mean():8.3f}")
        print(f"Mean |inv| over time: {avg_abs_inv.mean():8.3f}")

    summarize(skewed_results, f"Inventory-skewed MM (gamma={gamma})")
    summarize(naive_results, "Naive fixed-spread MM")


def main():
    parser = argparse.ArgumentParser(description="Skewed vs naive market maker")
    parser.add_argument("--paths", type=int, default=50)
    parser.add_argument("--steps", type=int, default=1000)
    parser.add_argument("--gamma", type=float, default=0.01)
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    run_experiment(n_paths=args.paths, n_steps=args.steps, gamma=args.gamma)


if __name__ == "__main__":
    main()
