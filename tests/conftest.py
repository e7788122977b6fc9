import numpy as np
import pytest


class ScriptedRandom:
    """Deterministic stand-in for numpy's Generator.

    uniform() returns the midpoint of its range, random() pops scripted
    values (then repeats `default`), integers() returns a fixed index.
    """

    def __init__(self, randoms=(), default=0.99, index=0):
        self.randoms = list(randoms)
        self.default = default
        self.index = index

    def uniform(self, low=0.0, high=1.0):
        return (low + high) / 2

    def random(self):
        return self.randoms.pop(0) if self.randoms else self.default

    def integers(self, low, high=None):
        return self.index


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def rng():
    return np.random.default_rng(42)
