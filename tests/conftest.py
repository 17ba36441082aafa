import os
import random

# Must be set before pygame initialises any subsystem
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest


class FixedRandom(random.Random):
    """Random whose random() is pinned; choice/randrange stay seeded."""

    def __init__(self, value, seed=0):
        super().__init__(seed)
        self.value = value

    def random(self):
        return self.value

    # Defining this keeps choice() and randrange() on the seeded bit source
    def getrandbits(self, k):
        return super().getrandbits(k)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def always_special():
    return FixedRandom(0.0)


@pytest.fixture
def never_special():
    return FixedRandom(0.99)
