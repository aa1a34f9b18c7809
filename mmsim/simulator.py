"""
simulator.py

Market state and mid-price dynamics.

The mid follows an arithmetic random walk with a floor:
    S_{t+1} = max(floor, S_t + N(0, sigma^2))
"""

from __future__ import annotations

from dataclasses import dataclass

from .rng import RandomStream


@dataclass
class MarketState:
    mid_price: float
    # informational only; the quoting policy uses its own base_spread
    spread: float = 0.2


def advance_price(
    market: MarketState,
    rng: RandomStream,
    sigma: float = 0.05,
    floor: float = 0.01,
) -> MarketState:
    """
    Add one Gaussian shock to the mid and clamp it to at least `floor`.
    Consumes exactly one gaussian draw.
    """
    shock = rng.next_gaussian(0.0, sigma)
    market.mid_price = max(floor, market.mid_price + shock)
    return market
