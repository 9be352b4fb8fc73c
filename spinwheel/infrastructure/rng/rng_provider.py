# spinwheel/infrastructure/rng/rng_provider.py
import logging
from typing import Optional, Dict, Any, Tuple, Type

from .strategies.mersenne_rng import MersenneTwisterRNG
from .strategies.numpy_rng import NumpyRNG
from .strategies.rng_strategy import RNGStrategy

# name -> (strategy class, description)
STRATEGIES: Dict[str, Tuple[Type, str]] = {
    "mersenne": (MersenneTwisterRNG, "Mersenne Twister (Python's default random generator)"),
    "numpy": (NumpyRNG, "NumPy RandomState generator"),
}


class RNGProvider:
    """
    Hands out the uniform sources the spin engine draws from.

    Unseeded generators are shared per strategy; a seeded request always gets
    a fresh generator so a reproducible run never consumes another run's
    stream.
    """
    def __init__(self):
        self.logger = logging.getLogger("infrastructure.rng")
        self._shared: Dict[str, RNGStrategy] = {}

    def get_rng(self, strategy_name: str, seed: Optional[int] = None) -> RNGStrategy:
        """
        Args:
            strategy_name: Key of STRATEGIES, case-insensitive
            seed: Optional integer seed

        Raises:
            ValueError: Unknown strategy or a seed that is not an integer
        """
        name = strategy_name.lower()
        if name not in STRATEGIES:
            self.logger.error(f"Unknown RNG strategy: {strategy_name}")
            raise ValueError(f"Unknown RNG strategy: {strategy_name}")

        if seed is None:
            if name not in self._shared:
                self._shared[name] = STRATEGIES[name][0]()
            return self._shared[name]

        if isinstance(seed, bool) or not isinstance(seed, int):
            raise ValueError(f"RNG seed must be an integer, got {seed!r}")

        self.logger.debug(f"Creating {name} RNG with seed {seed}")
        return STRATEGIES[name][0](seed)

    def create_from_config(self, config: Dict[str, Any]) -> RNGStrategy:
        """
        Build the RNG described by the "rng" section of the simulation config,
        e.g. {"strategy": "numpy", "seed": 12345}.
        """
        return self.get_rng(config.get('strategy', 'mersenne'), config.get('seed'))

    @staticmethod
    def get_available_strategies() -> Dict[str, str]:
        return {name: description for name, (_, description) in STRATEGIES.items()}
