"""
run_mm_sim.py

End-to-end run:
  * random-walk mid price
  * inventory-skewed two-sided quotes with hard inventory cutoffs
  * probabilistic fills and fill-vs-cancel race resolution
  * a report row every 50 steps plus a final summary

Exits with status 1 if an order is ever left CANCEL_PENDING.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from mmsim.config import QuoteParams, SimulatorConfig
from mmsim.engine import MarketMakerSimulation
from mmsim.errors import ConfigError, LostCancelError
from mmsim.report import TextReporter

logger = logging.getLogger("run_mm_sim")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = SimulatorConfig()
    qdefaults = QuoteParams()
    parser = argparse.ArgumentParser(description="Single-asset market-making simulation")
    parser.add_argument("--steps", type=int, default=defaults.n_steps)
    parser.add_argument("--seed", type=int, default=defaults.seed)
    parser.add_argument("--s0", type=float, default=defaults.S0, help="initial mid price")
    parser.add_argument("--sigma", type=float, default=defaults.sigma, help="mid shock std dev")
    parser.add_argument("--qty", type=int, default=defaults.qty_per_fill, help="shares per fill")
    parser.add_argument("--report-every", type=int, default=defaults.report_every)
    parser.add_argument("--spread", type=float, default=qdefaults.base_spread, help="quoted spread")
    parser.add_argument("--gamma", type=float, default=qdefaults.gamma, help="inventory aversion")
    parser.add_argument("--inventory-limit", type=float, default=qdefaults.inventory_limit)
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        sim_cfg = SimulatorConfig(
            S0=args.s0,
            sigma=args.sigma,
            qty_per_fill=args.qty,
            n_steps=args.steps,
            seed=args.seed,
            report_every=args.report_every,
        )
        params = QuoteParams(
            base_spread=args.spread,
            gamma=args.gamma,
            inventory_limit=args.inventory_limit,
        )
    except ConfigError as exc:
        logger.error("invalid configuration: %s", exc)
        return 2

    sim = MarketMakerSimulation(sim_cfg, params)
    try:
        sim.run(TextReporter())
    except LostCancelError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
