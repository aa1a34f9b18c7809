"""
pnl.py

Cash / inventory accounting and PnL attribution for the market maker.

  * Fill      - one execution against our bid or ask
  * Ledger    - signed cash and inventory; mark-to-market is derived
  * PnLState  - splits equity changes into spread PnL and inventory PnL
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .orders import Side


@dataclass(frozen=True)
class Fill:
    """
    Simple fill record.

    side:   side of OUR order that traded
    price:  execution price (our limit price)
    qty:    signed quantity, + when we buy, - when we sell
    step:   simulation step of the fill
    race:   True if the fill beat an in-flight cancel
    """
    side: Side
    price: float
    qty: float
    step: int
    race: bool = False


def fill_spread_pnl(mid: float, fill: Fill) -> float:
    """
    Spread PnL of a single fill against the mid at the time of the fill.

    Buying below mid or selling above mid -> positive.
    """
    return (mid - fill.price) * fill.qty


@dataclass
class Ledger:
    """
    Tracks our financial state.

    cash:      realized cash flow
    inventory: signed number of shares held
    fills:     every fill applied this run, in order
    """
    cash: float = 0.0
    inventory: float = 0.0
    fills: List[Fill] = field(default_factory=list)

    def apply_fill(self, price: float, qty: float) -> None:
        """
        qty > 0 : we buy qty (our bid was hit)
        qty < 0 : we sell |qty| (our ask was lifted)
        """
        self.inventory += qty
        self.cash -= price * qty  # buying spends cash, selling receives it

    def record(self, fill: Fill) -> None:
        self.apply_fill(fill.price, fill.qty)
        self.fills.append(fill)

    def mark_to_market(self, mid: float) -> float:
        """
        Mark-to-market PnL = cash + inventory * mid.
        """
        return self.cash + self.inventory * mid


@dataclass
class PnLState:
    """
    Tracks cumulative PnL components.

    cumulative_spread_pnl:     sum of all spread PnL over time
    cumulative_inventory_pnl:  sum of all inventory PnL over time

    Starting from a flat book, their sum equals mark-to-market PnL.
    """
    cumulative_spread_pnl: float = 0.0
    cumulative_inventory_pnl: float = 0.0

    def update_for_step(
        self,
        mid_prev: Optional[float],
        mid_now: float,
        inventory_prev: float,
        fills: Iterable[Fill],
    ) -> tuple[float, float]:
        """
        Update PnL for a single simulation step.

        mid_prev:        mid at previous step (None for first step)
        mid_now:         mid at current step
        inventory_prev:  our inventory at the *start* of the step
        fills:           fills that happened during this step

        Returns:
          (spread_pnl_step, inventory_pnl_step)
        """
        spread_step = sum(fill_spread_pnl(mid_now, f) for f in fills)
        self.cumulative_spread_pnl += spread_step

        inventory_step = 0.0
        if mid_prev is not None:
            inventory_step = inventory_prev * (mid_now - mid_prev)
            self.cumulative_inventory_pnl += inventory_step

        return spread_step, inventory_step

    @property
    def total(self) -> float:
        return self.cumulative_spread_pnl + self.cumulative_inventory_pnl
