# spinwheel/domain/spin/services/rotation_planner.py
import logging
from dataclasses import dataclass

from spinwheel.domain.wheel.entities.segment_model import POINTER_ANGLE, TWO_PI, normalize_angle
from spinwheel.domain.wheel.entities.wheel import SpinDuration


@dataclass(frozen=True)
class RotationPlan:
    """Where a spin starts, where it must stop, and how hard to push it."""
    start_angle: float
    target_angle: float       # absolute, always >= start_angle
    alignment: float          # rotation needed to centre the winner, [0, 2π)
    extra_spins: float        # full turns added for show, in radians
    initial_velocity: float   # radians per frame
    friction: float

    @property
    def distance(self) -> float:
        return self.target_angle - self.start_angle


class RotationPlanner:
    """
    Computes the rotation that brings the centre of a winning arc under the
    pointer, plus the initial velocity whose friction-decayed travel adds up
    to exactly that distance.
    """
    def __init__(self, pointer_angle: float = POINTER_ANGLE):
        self.logger = logging.getLogger("domain.spin.planner")
        self.pointer_angle = pointer_angle

    def plan(self, current_angle: float, win_start: float, win_end: float,
             duration: SpinDuration) -> RotationPlan:
        """
        Plan a spin.

        Args:
            current_angle: Resting angle of the wheel, any real value
            win_start: Start of the winner's arc (wheel-local)
            win_end: End of the winner's arc (wheel-local)
            duration: Duration mode, supplies friction and extra turns

        Returns:
            RotationPlan with target = current_angle + alignment + extra_spins
        """
        target_internal = win_start + (win_end - win_start) / 2
        current_norm = normalize_angle(current_angle)

        alignment = normalize_angle(self.pointer_angle - current_norm - target_internal)
        extra_spins = TWO_PI * duration.extra_turns
        distance = alignment + extra_spins

        friction = duration.friction
        # v0 * (1 + f + f^2 + ...) == distance
        initial_velocity = distance * (1 - friction)

        plan = RotationPlan(
            start_angle=current_angle,
            target_angle=current_angle + distance,
            alignment=alignment,
            extra_spins=extra_spins,
            initial_velocity=initial_velocity,
            friction=friction,
        )
        self.logger.debug(
            f"Planned {duration.value} spin: distance={distance:.4f} rad, "
            f"target={plan.target_angle:.4f}, v0={initial_velocity:.5f}"
        )
        return plan
