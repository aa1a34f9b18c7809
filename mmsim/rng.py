"""
rng.py

Random stream used by the simulator.

Every operation that needs a draw takes the stream as an explicit argument,
so a run is reproducible from its seed and the draw order per step is:
  price -> bid fill -> ask fill -> bid cancel race -> ask cancel race
"""

from __future__ import annotations

from typing import Optional, Protocol

import numpy as np


class RandomStream(Protocol):
    def next_gaussian(self, mean: float, stddev: float) -> float: ...

    def next_uniform(self, lo: float, hi: float) -> float: ...

    def next_bernoulli(self, p: float) -> bool: ...


class NumpyRandomStream:
    """
    Seeded stream backed by numpy's Generator (PCG64).
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._gen = np.random.default_rng(seed)

    def next_gaussian(self, mean: float, stddev: float) -> float:
        return float(self._gen.normal(mean, stddev))

    def next_uniform(self, lo: float = 0.0, hi: float = 1.0) -> float:
        # numpy draws in [lo, hi)
        return float(self._gen.uniform(lo, hi))

    def next_bernoulli(self, p: float) -> bool:
        return bool(self._gen.random() < p)
