# tests/test_segment_model.py
import math
import os
import random
import sys
import unittest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from spinwheel.domain.spin.errors import InvalidWheelError
from spinwheel.domain.wheel.entities.segment_model import (
    POINTER_ANGLE, TWO_PI, SegmentModel, build_segments, normalize_angle
)

from helpers import make_options


class TestNormalizeAngle(unittest.TestCase):

    def test_values_inside_range_are_unchanged(self):
        self.assertEqual(normalize_angle(0.0), 0.0)
        self.assertAlmostEqual(normalize_angle(1.5), 1.5)

    def test_negative_angles_are_lifted(self):
        self.assertAlmostEqual(normalize_angle(-math.pi / 2), 3 * math.pi / 2)
        self.assertAlmostEqual(normalize_angle(-5 * TWO_PI - 0.25), TWO_PI - 0.25)

    def test_large_angles_wrap(self):
        self.assertAlmostEqual(normalize_angle(7 * TWO_PI + 1.0), 1.0, places=9)

    def test_result_never_reaches_two_pi(self):
        for angle in (-1e-17, -1e-300, TWO_PI, -TWO_PI, 1e6):
            result = normalize_angle(angle)
            self.assertGreaterEqual(result, 0.0)
            self.assertLess(result, TWO_PI)


class TestBuildSegments(unittest.TestCase):

    def setUp(self):
        self.options = make_options(("A", 1), ("B", 1), ("C", 2))

    def test_widths_proportional_to_weight(self):
        segments = build_segments(self.options)

        self.assertEqual([s.option.id for s in segments], ["A", "B", "C"])
        self.assertAlmostEqual(segments[0].width, math.pi / 2)
        self.assertAlmostEqual(segments[1].width, math.pi / 2)
        self.assertAlmostEqual(segments[2].width, math.pi)

    def test_segments_are_contiguous_and_cover_the_circle(self):
        segments = build_segments(self.options, rotation_offset=0.7)

        self.assertEqual(segments[0].start_angle, 0.7)
        for left, right in zip(segments, segments[1:]):
            self.assertEqual(left.end_angle, right.start_angle)
        self.assertAlmostEqual(sum(s.width for s in segments), TWO_PI)
        self.assertEqual(segments[-1].end_angle, 0.7 + TWO_PI)

    def test_widths_sum_to_two_pi_for_arbitrary_weights(self):
        rng = random.Random(7)
        for _ in range(50):
            count = rng.randint(1, 30)
            options = make_options(*[(f"o{i}", rng.uniform(0.1, 10)) for i in range(count)])
            segments = build_segments(options)
            self.assertAlmostEqual(sum(s.width for s in segments), TWO_PI, places=9)

    def test_empty_options_rejected(self):
        with self.assertRaises(InvalidWheelError):
            build_segments([])

    def test_zero_total_weight_rejected(self):
        with self.assertRaises(InvalidWheelError):
            build_segments(make_options(("A", 0), ("B", 0)))


class TestSegmentModel(unittest.TestCase):

    def setUp(self):
        self.model = SegmentModel(make_options(("A", 1), ("B", 1), ("C", 2)))

    def test_pointer_reads_relative_angle(self):
        # Unrotated, the pointer at 3π/2 sits inside C = [π, 2π)
        self.assertEqual(self.model.option_at(0.0).id, "C")
        # Rotate so the pointer is 0.1 rad into the wheel
        self.assertEqual(self.model.option_at(POINTER_ANGLE - 0.1).id, "A")
        self.assertEqual(self.model.option_at(POINTER_ANGLE - math.pi / 2 - 0.1).id, "B")

    def test_every_angle_maps_to_exactly_one_segment(self):
        rng = random.Random(42)
        for _ in range(2000):
            angle = rng.uniform(-50, 50)
            rel = self.model.relative_angle(angle)
            containing = [s for s in self.model.segments
                          if self.model.local_arc(s.index)[0] <= rel < self.model.local_arc(s.index)[1]]
            self.assertEqual(len(containing), 1)
            self.assertEqual(containing[0].index, self.model.index_at(angle))

    def test_neighbourhood_of_a_boundary(self):
        # A/B boundary sits at local angle π/2
        rotation = POINTER_ANGLE - math.pi / 2
        self.assertEqual(self.model.option_at(rotation + 1e-9).id, "A")
        self.assertEqual(self.model.option_at(rotation - 1e-9).id, "B")

    def test_rotation_offset_shifts_layout_not_mapping(self):
        shifted = SegmentModel(self.model.options, rotation_offset=1.0)
        rng = random.Random(3)
        for _ in range(200):
            angle = rng.uniform(0, TWO_PI)
            self.assertEqual(shifted.index_at(angle - 1.0), self.model.index_at(angle))

    def test_zero_weight_option_is_never_under_pointer(self):
        model = SegmentModel(make_options(("A", 1), ("Z", 0), ("B", 1)))
        self.assertEqual(model.segments[1].width, 0.0)
        for step in range(360):
            self.assertNotEqual(model.option_at(math.radians(step)).id, "Z")


if __name__ == "__main__":
    unittest.main()
