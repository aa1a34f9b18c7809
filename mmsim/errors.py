"""
errors.py

Exception types raised by the market-making core.
"""

from __future__ import annotations

from typing import Optional


class MarketMakerError(Exception):
    """Base class for every error raised by mmsim."""


class ConfigError(MarketMakerError, ValueError):
    """Invalid simulation or quoting parameters."""


class OrderStateError(MarketMakerError):
    """An order received an event its current state does not accept."""


class LostCancelError(MarketMakerError):
    """
    An order was still CANCEL_PENDING after cancel resolution ran.

    This is a broken invariant in the resolution logic, not a model
    condition, so there is no recovery path. The driver decides whether
    to terminate the process.
    """

    def __init__(self, side: str, step: Optional[int] = None, price: Optional[float] = None):
        self.side = side
        self.step = step
        self.price = price
        where = f" at step {step}" if step is not None else ""
        super().__init__(
            f"lost cancel: {side} order still CANCEL_PENDING at end of step{where}"
        )
