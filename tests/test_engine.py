import pytest

from mmsim.config import QuoteParams, SimulatorConfig
from mmsim.engine import MarketMakerSimulation, summarize_path
from mmsim.errors import LostCancelError
from mmsim.orders import OrderState


def test_first_step_arms_both_sides_and_draws_in_order(scripted):
    rng = scripted(gaussians=[0.0], uniforms=[0.99, 0.99])
    sim = MarketMakerSimulation(SimulatorConfig(n_steps=1), QuoteParams(gamma=0.0), rng=rng)

    snap = sim.step()

    assert rng.calls == ["gaussian", "uniform", "uniform"]
    assert snap.bid_state is OrderState.WORKING
    assert snap.ask_state is OrderState.WORKING
    assert abs(snap.bid_price - 99.90) < 1e-9
    assert abs(snap.ask_price - 100.10) < 1e-9
    assert snap.pnl == 0.0


def test_cutoff_step_draw_order_and_resolution(scripted):
    """
    At the long limit with a working bid: price draw, ask fill draw
    (the bid is pending, so no fill draw), then the bid's race draw.
    """
    rng = scripted(gaussians=[0.0], uniforms=[0.99], bernoullis=[True])
    sim = MarketMakerSimulation(
        SimulatorConfig(n_steps=1, qty_per_fill=1),
        QuoteParams(inventory_limit=10, gamma=0.0),
        rng=rng,
    )
    sim.agent.bid_order.arm(99.90)
    sim.agent.ledger.apply_fill(100.0, 10)
    cash_before = sim.agent.cash

    snap = sim.step()

    assert rng.calls == ["gaussian", "uniform", "bernoulli"]
    assert snap.bid_state is OrderState.FILLED
    assert snap.ask_state is OrderState.WORKING
    assert snap.inventory == 11
    assert abs(snap.cash - (cash_before - 99.90)) < 1e-9
    assert len(snap.fills) == 1 and snap.fills[0].race


def test_recycle_resets_terminal_orders(scripted):
    rng = scripted(gaussians=[0.0], uniforms=[0.0, 0.99])
    sim = MarketMakerSimulation(SimulatorConfig(n_steps=2), QuoteParams(gamma=0.0), rng=rng)

    snap = sim.step()
    assert snap.bid_state is OrderState.FILLED
    assert snap.ask_state is OrderState.WORKING

    sim.recycle()
    assert sim.agent.bid_order.state is OrderState.IDLE
    assert sim.agent.ask_order.state is OrderState.WORKING
    assert sim.t == 1


def test_lost_cancel_is_fatal(scripted):
    rng = scripted(gaussians=[0.0], uniforms=[0.99])
    sim = MarketMakerSimulation(
        SimulatorConfig(n_steps=1),
        QuoteParams(inventory_limit=10, gamma=0.0),
        rng=rng,
    )
    sim.agent.bid_order.arm(99.90)
    sim.agent.ledger.apply_fill(100.0, 10)
    # break the resolution phase
    sim.execution.resolve_cancels = lambda *args, **kwargs: []

    with pytest.raises(LostCancelError) as excinfo:
        sim.step()
    assert excinfo.value.side == "bid"
    assert excinfo.value.step == 0


def test_same_seed_same_run():
    cfg = SimulatorConfig(n_steps=500, seed=7)
    a = MarketMakerSimulation(cfg).run()
    b = MarketMakerSimulation(cfg).run()
    assert a.equities == b.equities
    assert a.inventories == b.inventories
    assert a.final == b.final


def test_different_seeds_diverge():
    a = MarketMakerSimulation(SimulatorConfig(n_steps=200, seed=1)).run()
    b = MarketMakerSimulation(SimulatorConfig(n_steps=200, seed=2)).run()
    assert a.final.mid != b.final.mid


def test_long_run_keeps_invariants():
    cfg = SimulatorConfig(n_steps=3000, seed=42)
    sim = MarketMakerSimulation(cfg, QuoteParams(inventory_limit=3))

    fills = []
    for _ in range(cfg.n_steps):
        inv_at_start = sim.agent.inventory
        bid_state_at_start = sim.agent.bid_order.state
        snap = sim.step()
        fills.extend(snap.fills)

        assert snap.bid_state is not OrderState.CANCEL_PENDING
        assert snap.ask_state is not OrderState.CANCEL_PENDING
        assert snap.mid > 0.0
        # hard cutoff: no new bid armed while at/above the long limit
        if inv_at_start >= 3 and bid_state_at_start is not OrderState.WORKING:
            assert snap.bid_state is OrderState.IDLE or snap.bid_state is OrderState.CANCELED
        sim.recycle()

    # ledger conservation over the whole run
    assert sim.agent.inventory == sum(f.qty for f in fills)
    assert abs(sim.agent.cash - (-sum(f.price * f.qty for f in fills))) < 1e-6
    assert sim.agent.ledger.fills == fills


def test_attribution_sums_to_mark_to_market():
    result = MarketMakerSimulation(SimulatorConfig(n_steps=2000, seed=5)).run()
    final = result.final
    assert abs(final.spread_pnl + final.inventory_pnl - final.pnl) < 1e-6


def test_summarize_path():
    result = MarketMakerSimulation(SimulatorConfig(n_steps=300, seed=9)).run()
    stats = summarize_path(result)
    assert set(stats) == {"final_pnl", "sharpe", "max_drawdown", "avg_abs_inventory"}
    assert stats["final_pnl"] == result.final.pnl
    assert stats["max_drawdown"] <= 0.0
    assert stats["avg_abs_inventory"] >= 0.0
