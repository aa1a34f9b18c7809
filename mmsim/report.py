"""
report.py

Plain-text report of a run: a CSV-like row per sampled step and a final
summary block. Reads simulation state only.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .engine import SimulationResult, StepSnapshot
from .orders import state_code

HEADER = "step, mid, bid_px, bid_state, ask_px, ask_state, inv, cash, pnl"


def format_row(snap: StepSnapshot) -> str:
    return (
        f"{snap.step}, "
        f"{snap.mid:.4f}, "
        f"{snap.bid_price:.4f}, "
        f"{state_code(snap.bid_state)}, "
        f"{snap.ask_price:.4f}, "
        f"{state_code(snap.ask_state)}, "
        f"{snap.inventory:.4f}, "
        f"{snap.cash:.4f}, "
        f"{snap.pnl:.4f}"
    )


def format_summary(result: SimulationResult) -> str:
    final = result.final
    return "\n".join(
        [
            "",
            "Final state:",
            f"Inventory: {final.inventory:.4f} shares",
            f"Cash:      {final.cash:.4f}",
            f"Midprice:  {final.mid:.4f}",
            f"PnL:       {final.pnl:.4f}",
            f"  spread PnL:    {final.spread_pnl:.4f}",
            f"  inventory PnL: {final.inventory_pnl:.4f}",
            f"Fills:     {result.n_fills} ({result.n_race_fills} before cancel)",
        ]
    )


class TextReporter:
    def __init__(self, out: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout

    def on_start(self) -> None:
        print(HEADER, file=self.out)

    def on_step(self, snap: StepSnapshot, last: bool) -> None:
        print(format_row(snap), file=self.out)

    def on_finish(self, result: SimulationResult) -> None:
        print(format_summary(result), file=self.out)
