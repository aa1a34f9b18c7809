from collections import deque
from typing import List, Optional

import pytest


class ScriptedStream:
    """
    RandomStream that replays predetermined draws and records the order
    in which draw kinds were requested.
    """

    def __init__(self, gaussians=(), uniforms=(), bernoullis=(), gaussian_default: Optional[float] = None):
        self.gaussians = deque(gaussians)
        self.uniforms = deque(uniforms)
        self.bernoullis = deque(bernoullis)
        self.gaussian_default = gaussian_default
        self.calls: List[str] = []

    def next_gaussian(self, mean, stddev):
        self.calls.append("gaussian")
        if not self.gaussians and self.gaussian_default is not None:
            return self.gaussian_default
        return self.gaussians.popleft()

    def next_uniform(self, lo=0.0, hi=1.0):
        self.calls.append("uniform")
        return self.uniforms.popleft()

    def next_bernoulli(self, p):
        self.calls.append("bernoulli")
        return self.bernoullis.popleft()


@pytest.fixture
def scripted():
    return ScriptedStream
