"""Seeded random stream shared by every generation step.

All draws of a generation run come from one RandomStream, in a fixed
order, so a fixed seed and config reproduce the same course. The stream
owns a private random.Random; the module-level `random` state is never
touched, so unrelated randomness elsewhere in the process cannot shift
the draw sequence.
"""

import random
import time
from typing import Optional


def time_seed() -> int:
    """Fallback seed derived from the wall clock (not reproducible)."""
    return time.time_ns() & 0x7FFFFFFF


class RandomStream:
    """Deterministic pseudo-random source.

    Every draw method advances the stream exactly once.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random()
        self.last_seed = 0
        self.draws = 0
        self.seed(seed)

    def seed(self, value: Optional[int] = None) -> int:
        """Reset the stream. Returns the seed actually used."""
        if value is None:
            value = time_seed()
        self._rng.seed(value)
        self.last_seed = value
        self.draws = 0
        return value

    def uniform01(self) -> float:
        """Uniform float in [0, 1)."""
        self.draws += 1
        return self._rng.random()

    def uniform_range(self, lo: float, hi: float) -> float:
        """Uniform float between lo and hi (order of bounds does not matter)."""
        self.draws += 1
        return self._rng.uniform(lo, hi)

    def uniform_int(self, lo: int, hi: int) -> int:
        """Uniform integer in [lo, hi], both ends inclusive."""
        self.draws += 1
        return self._rng.randint(lo, hi)

    def sign(self) -> float:
        """+1.0 or -1.0 with equal probability (one uniform01 draw)."""
        return 1.0 if self.uniform01() > 0.5 else -1.0
