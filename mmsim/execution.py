"""
execution.py

Execution layer for our market-making system.

Responsibilities:
  * Decide whether a WORKING order trades this step, using an
    exponential fill-intensity model:
        intensity_bid = exp(-k * (S_t - bid))
        intensity_ask = exp(-k * (ask - S_t))
  * Settle the race between an in-flight cancel and a fill already in
    transit: every CANCEL_PENDING order ends the step FILLED or CANCELED.
  * Book every fill into the agent's ledger.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from .agent import Agent
from .config import SimulatorConfig
from .orders import Order, OrderState, Side
from .pnl import Fill
from .rng import RandomStream
from .simulator import MarketState

logger = logging.getLogger(__name__)


def fill_intensity(order: Order, mid: float, k: float = 10.0) -> float:
    """
    Per-step fill probability of a resting order.
    Crossed quotes (negative distance) are treated as distance 0.
    """
    if order.side is Side.BID:
        dist = mid - order.price
    else:
        dist = order.price - mid
    dist = max(dist, 0.0)
    return math.exp(-k * dist)


def maybe_fill(
    order: Order,
    market: MarketState,
    rng: RandomStream,
    k: float = 10.0,
) -> bool:
    """
    True if a WORKING order trades this step.
    Non-working orders return False without consuming a draw.
    """
    if order.state is not OrderState.WORKING:
        return False
    u = rng.next_uniform(0.0, 1.0)
    return u < fill_intensity(order, market.mid_price, k)


def _book_fill(agent: Agent, order: Order, qty: int, step: int, race: bool) -> Fill:
    fill = Fill(
        side=order.side,
        price=order.price,
        qty=order.side.sign * qty,
        step=step,
        race=race,
    )
    agent.ledger.record(fill)
    order.mark_filled()
    return fill


def fill_working(
    agent: Agent,
    side: Side,
    market: MarketState,
    rng: RandomStream,
    qty: int = 1,
    step: int = 0,
    k: float = 10.0,
) -> Optional[Fill]:
    """
    Run the fill model on one side and, on a fill, update the ledger
    and move the order to FILLED.
    """
    order = agent.order_for(side)
    if not maybe_fill(order, market, rng, k):
        return None
    return _book_fill(agent, order, qty, step, race=False)


def resolve(
    order: Order,
    agent: Agent,
    market: MarketState,
    rng: RandomStream,
    fill_qty: int = 1,
    step: int = 0,
    p_fill_first: float = 0.3,
) -> Optional[Fill]:
    """
    Resolve a CANCEL_PENDING order: with probability p_fill_first the
    fill arrives before the cancel (FILLED, ledger updated), otherwise the
    cancel is confirmed (CANCELED, no trade).

    Orders in any other state are untouched and consume no draw.
    """
    if order.state is not OrderState.CANCEL_PENDING:
        return None

    if rng.next_bernoulli(p_fill_first):
        fill = _book_fill(agent, order, fill_qty, step, race=True)
        logger.debug(
            "step %d: %s filled before cancel @ %.4f (mid %.4f)",
            step, order.side.value, order.price, market.mid_price,
        )
        return fill

    order.confirm_cancel()
    logger.debug("step %d: %s cancel confirmed", step, order.side.value)
    return None


class ExecutionEngine:
    """
    Runs the fill and cancel-resolution phases of one step with the
    parameters of a SimulatorConfig.

    Order matters: fills on WORKING orders first (bid, then ask), then
    resolution of CANCEL_PENDING orders (bid, then ask). A fill from the
    first phase is visible to the second, so no order is resolved twice.
    """

    def __init__(self, config: SimulatorConfig):
        self.k = config.fill_decay
        self.qty = config.qty_per_fill
        self.p_fill_first = config.p_fill_before_cancel

    def run_fills(
        self, agent: Agent, market: MarketState, rng: RandomStream, step: int
    ) -> List[Fill]:
        fills: List[Fill] = []
        for side in (Side.BID, Side.ASK):
            fill = fill_working(agent, side, market, rng, self.qty, step, self.k)
            if fill is not None:
                fills.append(fill)
        return fills

    def resolve_cancels(
        self, agent: Agent, market: MarketState, rng: RandomStream, step: int
    ) -> List[Fill]:
        fills: List[Fill] = []
        for side in (Side.BID, Side.ASK):
            fill = resolve(
                agent.order_for(side),
                agent,
                market,
                rng,
                fill_qty=self.qty,
                step=step,
                p_fill_first=self.p_fill_first,
            )
            if fill is not None:
                fills.append(fill)
        return fills
