# spinwheel/infrastructure/rng/strategies/numpy_rng.py
import numpy as np
from typing import Optional


class NumpyRNG:
    """
    NumPy RandomState source.

    Draws are served from a pre-generated block of samples; refilling per
    block keeps the per-spin cost of crossing into NumPy negligible. The
    stream is identical to calling random_sample() once per draw.
    """
    BLOCK_SIZE = 1024

    def __init__(self, seed_value: Optional[int] = None):
        self.rng = np.random.RandomState(seed_value)
        self._block = np.empty(0)
        self._position = 0

    def random(self) -> float:
        if self._position >= len(self._block):
            self._block = self.rng.random_sample(self.BLOCK_SIZE)
            self._position = 0
        value = self._block[self._position]
        self._position += 1
        return float(value)

    def seed(self, seed_value: int) -> None:
        self.rng = np.random.RandomState(seed_value)
        self._block = np.empty(0)
        self._position = 0
