"""
agent.py

The market-making agent: its quoting parameters, its ledger and its two
resting orders (one per side).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import QuoteParams
from .orders import Order, Side
from .pnl import Ledger


@dataclass
class Agent:
    params: QuoteParams = field(default_factory=QuoteParams)
    ledger: Ledger = field(default_factory=Ledger)
    bid_order: Order = field(default_factory=lambda: Order(Side.BID))
    ask_order: Order = field(default_factory=lambda: Order(Side.ASK))

    # ---------- read-only views ----------

    @property
    def inventory(self) -> float:
        return self.ledger.inventory

    @property
    def cash(self) -> float:
        return self.ledger.cash

    @property
    def fair_value(self) -> float:
        return self.params.fair_value

    @property
    def base_spread(self) -> float:
        return self.params.base_spread

    @property
    def inventory_limit(self) -> float:
        return self.params.inventory_limit

    @property
    def gamma(self) -> float:
        return self.params.gamma

    def order_for(self, side: Side) -> Order:
        return self.bid_order if side is Side.BID else self.ask_order

    def equity(self, mid: float) -> float:
        return self.ledger.mark_to_market(mid)
