# spinwheel/domain/wheel/entities/segment_model.py
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from spinwheel.domain.spin.errors import InvalidWheelError
from .option import Option

TWO_PI = 2 * math.pi

# Stationary indicator. With canvas-style coordinates (y down) this is the top
# of the wheel; the renderer has to use the same convention.
POINTER_ANGLE = 3 * math.pi / 2


def normalize_angle(angle: float) -> float:
    """
    Reduce an angle to [0, 2π).

    fmod keeps the sign of the input, negative residues are lifted by 2π.
    """
    result = math.fmod(angle, TWO_PI)
    while result < 0:
        result += TWO_PI
    # -1e-17 + 2π rounds to exactly 2π
    if result >= TWO_PI:
        result -= TWO_PI
    return result


@dataclass(frozen=True)
class Segment:
    """Angular interval [start_angle, end_angle) owned by one option."""
    option: Option
    index: int
    start_angle: float
    end_angle: float

    @property
    def width(self) -> float:
        return self.end_angle - self.start_angle


def build_segments(options: Sequence[Option], rotation_offset: float = 0.0) -> List[Segment]:
    """
    Lay options out around the circle in order.

    Widths are 2π * weight / total weight. The last segment is closed at
    exactly rotation_offset + 2π so the segments partition the circle.

    Raises:
        InvalidWheelError: No options or total weight <= 0
    """
    if not options:
        raise InvalidWheelError(None, "cannot build segments without options")

    total_weight = sum(option.weight for option in options)
    if total_weight <= 0:
        raise InvalidWheelError(None, f"total weight must be positive, got {total_weight}")

    segments = []
    start = rotation_offset
    last = len(options) - 1
    for index, option in enumerate(options):
        if index == last:
            end = rotation_offset + TWO_PI
        else:
            end = start + TWO_PI * option.weight / total_weight
        segments.append(Segment(option=option, index=index, start_angle=start, end_angle=end))
        start = end

    return segments


class SegmentModel:
    """
    The wheel's layout: ordered segments built from raw weights, plus the
    inverse mapping from a rotation angle to the option under the pointer.

    Visual widths never change with fairness adjustments; eliminated options
    stay on the wheel with their full width.
    """
    def __init__(self, options: Sequence[Option], rotation_offset: float = 0.0,
                 pointer_angle: float = POINTER_ANGLE):
        self.options = tuple(options)
        self.rotation_offset = rotation_offset
        self.pointer_angle = pointer_angle
        self.segments = build_segments(self.options, rotation_offset)
        self.total_weight = sum(option.weight for option in self.options)

    def relative_angle(self, rotation: float) -> float:
        """Wheel-local angle (measured from the first segment's start) under the pointer."""
        return normalize_angle(self.pointer_angle - normalize_angle(rotation) - self.rotation_offset)

    def index_at(self, rotation: float) -> int:
        """Index of the segment under the pointer when the wheel is rotated by `rotation`."""
        rel = self.relative_angle(rotation)
        for segment in self.segments:
            start, end = self.local_arc(segment.index)
            if start <= rel < end:
                return segment.index
        # Only reachable through float drift right at the 2π seam
        return 0

    def segment_at(self, rotation: float) -> Segment:
        return self.segments[self.index_at(rotation)]

    def option_at(self, rotation: float) -> Option:
        return self.segment_at(rotation).option

    def local_arc(self, index: int) -> Tuple[float, float]:
        """(start, end) of a segment relative to the rotation offset."""
        segment = self.segments[index]
        return (segment.start_angle - self.rotation_offset,
                segment.end_angle - self.rotation_offset)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    def __repr__(self) -> str:
        return f"SegmentModel(segments={len(self.segments)}, total_weight={self.total_weight:g})"
