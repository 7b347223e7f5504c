import os
import random

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")


class FixedRandom:
    """Stands in for random.Random, always returning the same value."""

    def __init__(self, value=0.5):
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def fixed_rng():
    return FixedRandom(0.5)


class SequenceRandom:
    """Replays a fixed list of random() values in order."""

    def __init__(self, values):
        self.values = list(values)
        self.draws = 0

    def random(self):
        value = self.values[self.draws]
        self.draws += 1
        return value
