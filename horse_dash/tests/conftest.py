# horse_dash/tests/conftest.py
import random

import pytest


class ConstantRandom(random.Random):
    """random() always returns the same value; everything in the game draws through it."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def constant_rng():
    return ConstantRandom


@pytest.fixture
def never_rng():
    # above every spawn probability and every archetype frequency
    return ConstantRandom(0.99)


@pytest.fixture
def always_rng():
    return ConstantRandom(0.0)
