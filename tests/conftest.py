import numpy as np
import pytest

from bandit_engine.core.config import Settings


class FixedRng:
    """Stand-in generator that replays a fixed sequence of uniform draws."""

    def __init__(self, values):
        self._values = iter(values)

    def random(self):
        return next(self._values)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def fast_settings():
    """Settings with a smaller Monte Carlo budget for tests that only need the shape of a result."""
    return Settings(CONFIDENCE_TRIALS=2_000)


@pytest.fixture
def fixed_rng():
    return FixedRng
