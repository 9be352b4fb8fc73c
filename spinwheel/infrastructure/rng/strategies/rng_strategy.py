# spinwheel/infrastructure/rng/strategies/rng_strategy.py
from typing import Protocol


class RNGStrategy(Protocol):
    """
    Uniform random source consumed by the fairness engine.

    Not meant to be cryptographically secure; a seeded strategy must replay
    the same stream so spins can be reproduced.
    """

    def random(self) -> float:
        """
        Get the next uniform float.

        Returns:
            Random float r with 0 <= r < 1
        """
        ...

    def seed(self, seed_value: int) -> None:
        """Restart the stream from seed_value."""
        ...
