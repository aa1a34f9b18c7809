from mmsim.orders import Side
from mmsim.pnl import Fill, Ledger, PnLState, fill_spread_pnl


def test_ledger_conservation():
    fills = [(99.9, 1), (100.2, -1), (99.7, 3), (101.05, -2), (98.4, 1)]
    ledger = Ledger()
    for price, qty in fills:
        ledger.apply_fill(price, qty)

    assert ledger.inventory == sum(q for _, q in fills)
    assert abs(ledger.cash - (-sum(p * q for p, q in fills))) < 1e-9


def test_buy_spends_cash_sell_receives():
    ledger = Ledger()
    ledger.apply_fill(100.0, 1)
    assert ledger.inventory == 1 and ledger.cash == -100.0

    ledger.apply_fill(101.0, -1)
    assert ledger.inventory == 0 and ledger.cash == 1.0


def test_mark_to_market():
    ledger = Ledger()
    ledger.apply_fill(99.9, 2)
    assert abs(ledger.mark_to_market(100.0) - 0.2) < 1e-9
    assert abs(ledger.mark_to_market(99.0) - (-1.8)) < 1e-9


def test_record_keeps_fill_history():
    ledger = Ledger()
    f1 = Fill(Side.BID, 99.9, 1, step=0)
    f2 = Fill(Side.ASK, 100.1, -1, step=4, race=True)
    ledger.record(f1)
    ledger.record(f2)
    assert ledger.fills == [f1, f2]
    assert ledger.inventory == 0
    assert abs(ledger.cash - 0.2) < 1e-9


def test_spread_pnl_sign():
    # bought below mid / sold above mid -> positive
    assert abs(fill_spread_pnl(100.0, Fill(Side.BID, 99.9, 1, 0)) - 0.1) < 1e-9
    assert abs(fill_spread_pnl(100.0, Fill(Side.ASK, 100.1, -1, 0)) - 0.1) < 1e-9
    # bid filled above the current mid -> negative
    assert fill_spread_pnl(99.0, Fill(Side.BID, 99.9, 1, 0)) < 0


def test_attribution_matches_mark_to_market():
    """
    Starting flat, cumulative spread + inventory PnL equals cash + inv * mid.
    """
    ledger = Ledger()
    pnl = PnLState()
    path = [
        (100.0, 100.02, [Fill(Side.BID, 99.9, 1, 0)]),
        (100.02, 99.95, []),
        (99.95, 100.10, [Fill(Side.ASK, 100.05, -1, 2), Fill(Side.BID, 99.85, 1, 2)]),
        (100.10, 100.30, [Fill(Side.ASK, 100.2, -1, 3, race=True)]),
    ]
    for mid_prev, mid_now, fills in path:
        inv_prev = ledger.inventory
        for f in fills:
            ledger.record(f)
        pnl.update_for_step(mid_prev, mid_now, inv_prev, fills)

    final_mid = path[-1][1]
    assert abs(pnl.total - ledger.mark_to_market(final_mid)) < 1e-9


def test_first_step_without_previous_mid():
    pnl = PnLState()
    spread, inv = pnl.update_for_step(None, 100.0, 5.0, [])
    assert spread == 0.0 and inv == 0.0
    assert pnl.cumulative_inventory_pnl == 0.0
