import random

import pytest


class ScriptedRandom:
    """randint() stand-in replaying a fixed cycle of values."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def randint(self, a, b):
        v = self.values[self.calls % len(self.values)]
        self.calls += 1
        assert a <= v <= b
        return v


class ForbiddenRandom:
    def randint(self, a, b):
        raise AssertionError("random source consulted unexpectedly")


@pytest.fixture
def rng():
    return random.Random(20240601)


@pytest.fixture
def scripted_rng():
    return ScriptedRandom


@pytest.fixture
def forbidden_rng():
    return ForbiddenRandom()
