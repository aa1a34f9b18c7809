"""
config.py

Parameter sets for a simulation run.

  * SimulatorConfig - market model, fill model and run length
  * QuoteParams     - the market maker's quoting / risk parameters
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError


@dataclass(frozen=True)
class SimulatorConfig:
    # Initial mid price
    S0: float = 100.0
    # Informational market spread
    spread: float = 0.2
    # Std dev of the Gaussian mid-price shock per step
    sigma: float = 0.05
    # Mid price never goes below this
    price_floor: float = 0.01

    # Fill model: intensity = exp(-fill_decay * distance_from_mid)
    fill_decay: float = 10.0
    # Probability that a fill beats an in-flight cancel
    p_fill_before_cancel: float = 0.3
    # Shares per fill
    qty_per_fill: int = 1

    n_steps: int = 10000
    seed: Optional[int] = 42
    # Emit a report row every `report_every` steps (plus the last step)
    report_every: int = 50

    def __post_init__(self) -> None:
        if self.n_steps <= 0:
            raise ConfigError(f"n_steps must be positive, got {self.n_steps}")
        if self.S0 <= 0:
            raise ConfigError(f"S0 must be positive, got {self.S0}")
        if self.price_floor <= 0:
            raise ConfigError(f"price_floor must be positive, got {self.price_floor}")
        if self.sigma < 0:
            raise ConfigError(f"sigma must be non-negative, got {self.sigma}")
        if self.fill_decay < 0:
            raise ConfigError(f"fill_decay must be non-negative, got {self.fill_decay}")
        if not 0.0 <= self.p_fill_before_cancel <= 1.0:
            raise ConfigError(
                f"p_fill_before_cancel must be in [0, 1], got {self.p_fill_before_cancel}"
            )
        if self.qty_per_fill <= 0:
            raise ConfigError(f"qty_per_fill must be positive, got {self.qty_per_fill}")
        if self.report_every <= 0:
            raise ConfigError(f"report_every must be positive, got {self.report_every}")


@dataclass(frozen=True)
class QuoteParams:
    fair_value: float = 100.0       # internal fair value estimate (informational)
    base_spread: float = 0.2        # full quoted spread, in dollars
    inventory_limit: float = 10000.0  # hard cap on |inventory|
    gamma: float = 0.01             # inventory aversion (quote skew per share held)
    eps: float = 0.01               # minimum distance of a quote from mid

    def __post_init__(self) -> None:
        if self.base_spread < 0:
            raise ConfigError(f"base_spread must be non-negative, got {self.base_spread}")
        if self.inventory_limit <= 0:
            raise ConfigError(
                f"inventory_limit must be positive, got {self.inventory_limit}"
            )
        if self.gamma < 0:
            raise ConfigError(f"gamma must be non-negative, got {self.gamma}")
        if self.eps <= 0:
            raise ConfigError(f"eps must be positive, got {self.eps}")
