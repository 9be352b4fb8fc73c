# spinwheel/infrastructure/rng/strategies/mersenne_rng.py
import random
from typing import Optional


class MersenneTwisterRNG:
    """Python's Mersenne Twister, on a private random.Random instance."""

    def __init__(self, seed_value: Optional[int] = None):
        # The module-level generator is never touched
        self._random = random.Random(seed_value)

    def random(self) -> float:
        return self._random.random()

    def seed(self, seed_value: int) -> None:
        self._random.seed(seed_value)
