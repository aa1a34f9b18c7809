"""
engine.py

Step driver for the market-making simulation.

Each step runs, in this exact order:
  1) mid-price update
  2) quoting / inventory cutoffs
  3) fill attempts on WORKING orders (bid, ask)
  4) cancel resolution on CANCEL_PENDING orders (bid, ask)
  5) no-lost-cancel invariant check (bid, ask)
  6) PnL computation -> StepSnapshot (reported by the caller)
  7) recycle of FILLED / CANCELED orders to IDLE

Reordering 3 and 4 changes which race outcomes are reachable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

import numpy as np

from .agent import Agent
from .config import QuoteParams, SimulatorConfig
from .execution import ExecutionEngine
from .orders import OrderState, check_invariant
from .pnl import Fill, PnLState
from .quoting import quote
from .rng import NumpyRandomStream, RandomStream
from .simulator import MarketState, advance_price

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepSnapshot:
    step: int
    mid: float
    bid_price: float
    bid_state: OrderState
    ask_price: float
    ask_state: OrderState
    inventory: float
    cash: float
    pnl: float
    spread_pnl: float = 0.0
    inventory_pnl: float = 0.0
    fills: tuple[Fill, ...] = ()


@dataclass
class SimulationResult:
    final: StepSnapshot
    equities: List[float] = field(default_factory=list)
    inventories: List[float] = field(default_factory=list)
    n_fills: int = 0
    n_race_fills: int = 0


class StepReporter(Protocol):
    def on_start(self) -> None: ...

    def on_step(self, snap: StepSnapshot, last: bool) -> None: ...

    def on_finish(self, result: SimulationResult) -> None: ...


class MarketMakerSimulation:
    """
    Wires market, agent, random stream and execution engine together.

    The random stream is owned by the caller (or built from config.seed)
    and threaded explicitly through every phase that draws.
    """

    def __init__(
        self,
        config: Optional[SimulatorConfig] = None,
        params: Optional[QuoteParams] = None,
        rng: Optional[RandomStream] = None,
    ):
        self.cfg = config if config is not None else SimulatorConfig()
        self.market = MarketState(mid_price=self.cfg.S0, spread=self.cfg.spread)
        self.agent = Agent(params=params if params is not None else QuoteParams())
        self.rng: RandomStream = rng if rng is not None else NumpyRandomStream(self.cfg.seed)
        self.execution = ExecutionEngine(self.cfg)
        self.pnl_state = PnLState()
        self.t = 0

    # ---------- one step ----------

    def step(self) -> StepSnapshot:
        """
        Run phases 1-6 of the current step and return its snapshot.
        Raises LostCancelError if an order is left CANCEL_PENDING.
        """
        t = self.t
        agent, market, rng = self.agent, self.market, self.rng
        mid_prev = market.mid_price
        inventory_prev = agent.inventory

        # 1) price
        advance_price(market, rng, sigma=self.cfg.sigma, floor=self.cfg.price_floor)

        # 2) quotes / cutoffs
        quote(agent, market)

        # 3) fills on WORKING orders, before any cancel is resolved
        fills = self.execution.run_fills(agent, market, rng, t)

        # 4) fill-before-cancel vs cancel-confirm
        fills += self.execution.resolve_cancels(agent, market, rng, t)

        # 5) no lost cancels
        check_invariant(agent.bid_order, t)
        check_invariant(agent.ask_order, t)

        # 6) PnL
        spread_step, inv_step = self.pnl_state.update_for_step(
            mid_prev=mid_prev,
            mid_now=market.mid_price,
            inventory_prev=inventory_prev,
            fills=fills,
        )
        if spread_step or inv_step:
            logger.debug(
                "step %d: spread pnl %.4f, inventory pnl %.4f", t, spread_step, inv_step
            )

        return StepSnapshot(
            step=t,
            mid=market.mid_price,
            bid_price=agent.bid_order.price,
            bid_state=agent.bid_order.state,
            ask_price=agent.ask_order.price,
            ask_state=agent.ask_order.state,
            inventory=agent.inventory,
            cash=agent.cash,
            pnl=agent.equity(market.mid_price),
            spread_pnl=self.pnl_state.cumulative_spread_pnl,
            inventory_pnl=self.pnl_state.cumulative_inventory_pnl,
            fills=tuple(fills),
        )

    def recycle(self) -> None:
        """
        7) FILLED / CANCELED -> IDLE, after reporting; advances the step index.
        """
        self.agent.bid_order.recycle()
        self.agent.ask_order.recycle()
        self.t += 1

    # ---------- full run ----------

    def run(self, reporter: Optional[StepReporter] = None) -> SimulationResult:
        n_steps = self.cfg.n_steps
        every = self.cfg.report_every
        logger.info(
            "starting run: %d steps, seed=%s, S0=%.2f, gamma=%.4f, limit=%.0f",
            n_steps, self.cfg.seed, self.cfg.S0,
            self.agent.gamma, self.agent.inventory_limit,
        )
        if reporter is not None:
            reporter.on_start()

        equities: List[float] = []
        inventories: List[float] = []
        n_fills = 0
        n_race = 0
        snap: Optional[StepSnapshot] = None

        for _ in range(n_steps):
            snap = self.step()
            equities.append(snap.pnl)
            inventories.append(snap.inventory)
            n_fills += len(snap.fills)
            n_race += sum(1 for f in snap.fills if f.race)

            if reporter is not None:
                last = snap.step == n_steps - 1
                if snap.step % every == 0 or last:
                    reporter.on_step(snap, last)
            self.recycle()

        assert snap is not None  # n_steps > 0 is enforced by SimulatorConfig
        result = SimulationResult(
            final=snap,
            equities=equities,
            inventories=inventories,
            n_fills=n_fills,
            n_race_fills=n_race,
        )
        logger.info(
            "run finished: pnl=%.4f inventory=%.0f fills=%d (race fills %d)",
            snap.pnl, snap.inventory, n_fills, n_race,
        )
        if reporter is not None:
            reporter.on_finish(result)
        return result


def summarize_path(result: SimulationResult) -> Dict[str, float]:
    """
    Path metrics for one run:
      final_pnl, sharpe, max_drawdown, avg_abs_inventory
    """
    equities = np.asarray(result.equities, dtype=float)
    abs_inv = np.abs(np.asarray(result.inventories, dtype=float))

    pnl_total = float(equities[-1]) if len(equities) else 0.0

    rets = np.diff(equities)
    if len(rets) and rets.std() > 0:
        sharpe = float(rets.mean() / rets.std() * np.sqrt(len(rets)))
    else:
        sharpe = 0.0

    if len(equities):
        running_max = np.maximum.accumulate(equities)
        max_dd = float((equities - running_max).min())
    else:
        max_dd = 0.0

    avg_abs_inv = float(abs_inv.mean()) if len(abs_inv) else 0.0

    return {
        "final_pnl": pnl_total,
        "sharpe": sharpe,
        "max_drawdown": max_dd,
        "avg_abs_inventory": avg_abs_inv,
    }
