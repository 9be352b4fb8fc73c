# tests/test_rng.py
import unittest
import sys
import os
import numpy as np

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from spinwheel.infrastructure.rng.rng_provider import RNGProvider
from spinwheel.infrastructure.rng.strategies.mersenne_rng import MersenneTwisterRNG
from spinwheel.infrastructure.rng.strategies.numpy_rng import NumpyRNG


class TestRNGStrategies(unittest.TestCase):
    """Test both RNG strategies against the same contract."""

    def setUp(self):
        self.strategies = [MersenneTwisterRNG(seed_value=12345), NumpyRNG(seed_value=12345)]

    def test_random_in_unit_interval(self):
        for rng in self.strategies:
            values = [rng.random() for _ in range(10_000)]
            self.assertTrue(all(0.0 <= v < 1.0 for v in values))
            self.assertIsInstance(values[0], float)

    def test_same_seed_same_stream(self):
        for cls in (MersenneTwisterRNG, NumpyRNG):
            first = cls(seed_value=42)
            second = cls(seed_value=42)
            self.assertEqual([first.random() for _ in range(50)],
                             [second.random() for _ in range(50)])

    def test_reseed_restarts_stream(self):
        for rng in self.strategies:
            rng.seed(7)
            expected = [rng.random() for _ in range(10)]
            rng.seed(7)
            self.assertEqual([rng.random() for _ in range(10)], expected)

    def test_numpy_blocks_match_plain_stream(self):
        rng = NumpyRNG(seed_value=8)
        reference = np.random.RandomState(8)

        count = NumpyRNG.BLOCK_SIZE + 10
        values = [rng.random() for _ in range(count)]
        expected = [reference.random_sample() for _ in range(count)]

        self.assertEqual(values, expected)

    def test_uniformity_chi_square(self):
        num_bins = 20
        n_samples = 200_000
        for rng in self.strategies:
            samples = np.array([rng.random() for _ in range(n_samples)])
            counts, _ = np.histogram(samples, bins=num_bins, range=(0.0, 1.0))
            expected = n_samples / num_bins
            chi2 = np.sum((counts - expected) ** 2 / expected)
            # 19 degrees of freedom, p = 0.001 critical value is ~43.8
            self.assertLess(chi2, 43.8)


class TestRNGProvider(unittest.TestCase):

    def setUp(self):
        self.provider = RNGProvider()

    def test_unseeded_instances_are_shared(self):
        self.assertIs(self.provider.get_rng("mersenne"), self.provider.get_rng("MERSENNE"))

    def test_seeded_instances_are_independent(self):
        first = self.provider.get_rng("numpy", seed=3)
        second = self.provider.get_rng("numpy", seed=3)
        self.assertIsNot(first, second)
        self.assertEqual(first.random(), second.random())

    def test_create_from_config(self):
        rng = self.provider.create_from_config({"strategy": "numpy", "seed": 12345})
        self.assertIsInstance(rng, NumpyRNG)
        self.assertIsInstance(self.provider.create_from_config({}), MersenneTwisterRNG)

    def test_unknown_strategy(self):
        with self.assertRaises(ValueError):
            self.provider.get_rng("dice")
        with self.assertRaises(ValueError):
            self.provider.create_from_config({"strategy": "mersenne", "seed": "abc"})
        self.assertEqual(set(RNGProvider.get_available_strategies()), {"mersenne", "numpy"})


if __name__ == "__main__":
    unittest.main()
