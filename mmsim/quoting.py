"""
quoting.py

Inventory-aware quoting policy.

This module provides:
  * skewed_mid(...)
  * desired_quotes(...)
  * quote(agent, market)

Quotes are centered on an inventory-skewed mid:
    effective_mid = S_t - gamma * q_t
    bid/ask       = effective_mid -/+ base_spread / 2
so a long position lowers both quotes (encourages selling) and a short
position raises them (encourages buying). gamma = 0 gives a naive
fixed-spread market maker.
"""

from __future__ import annotations

import logging

from .agent import Agent
from .orders import Order
from .simulator import MarketState

logger = logging.getLogger(__name__)


# ================================================================
# === Price components ===========================================
# ================================================================

def skewed_mid(S: float, q: float, gamma: float) -> float:
    """
    Compute: effective_mid = S_t - gamma * q_t
    """
    return S - gamma * q


def desired_quotes(
    S: float,
    q: float,
    gamma: float,
    base_spread: float,
    eps: float = 0.01,
) -> tuple[float, float]:
    """
    Bid/ask around the skewed mid, clamped so neither quote touches
    or crosses the true mid S (bid < S < ask, at least eps away).
    """
    effective_mid = skewed_mid(S, q, gamma)
    half_spread = base_spread / 2.0

    bid = effective_mid - half_spread
    ask = effective_mid + half_spread

    if bid >= S:
        bid = S - eps
    if ask <= S:
        ask = S + eps
    return bid, ask


# ================================================================
# === Policy =====================================================
# ================================================================

def _arm_if_idle(order: Order, price: float) -> None:
    # a working order keeps its price; no cancel/replace on every tick
    if order.is_armable:
        order.arm(price)


def quote(agent: Agent, market: MarketState) -> None:
    """
    Compute desired quotes and (re-)arm or cancel each side.

    Hard cutoffs: at inventory >= limit no bid is armed and a working bid
    is cancelled; at inventory <= -limit the same holds for the ask.
    """
    p = agent.params
    inv = agent.inventory

    # clamp is part of the desired-price computation, before the cutoffs
    bid_px, ask_px = desired_quotes(
        S=market.mid_price,
        q=inv,
        gamma=p.gamma,
        base_spread=p.base_spread,
        eps=p.eps,
    )

    if inv >= p.inventory_limit:
        if agent.bid_order.request_cancel():
            logger.debug("inventory %.1f >= limit, cancelling bid", inv)
    else:
        _arm_if_idle(agent.bid_order, bid_px)

    if inv <= -p.inventory_limit:
        if agent.ask_order.request_cancel():
            logger.debug("inventory %.1f <= -limit, cancelling ask", inv)
    else:
        _arm_if_idle(agent.ask_order, ask_px)
