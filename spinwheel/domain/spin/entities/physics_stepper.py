# spinwheel/domain/spin/entities/physics_stepper.py
import logging
import math
from enum import Enum, auto
from typing import Callable, Optional

from spinwheel.domain.spin.services.rotation_planner import RotationPlan
from spinwheel.domain.wheel.entities.segment_model import SegmentModel

# radians per frame; below this the wheel is considered stopped
STOP_VELOCITY = 0.0005


class StepperState(Enum):
    IDLE = auto()
    SPINNING = auto()
    SETTLED = auto()
    CANCELLED = auto()


class PhysicsStepper:
    """
    Frame-by-frame motion of one spin.

    Every step advances the angle by the current velocity, then decays the
    velocity by the friction factor. Once the velocity falls under
    STOP_VELOCITY the angle is snapped to the planned target, so the drift
    accumulated by the float sum never shows in the final position.
    """
    def __init__(self, model: SegmentModel, plan: RotationPlan,
                 on_tick: Optional[Callable[[int], None]] = None):
        self.logger = logging.getLogger("domain.spin.physics")
        self.model = model
        self.plan = plan
        self.on_tick = on_tick

        self.state = StepperState.IDLE
        self.angle = plan.start_angle
        self.velocity = 0.0
        self.frames = 0
        self.ticks = 0
        self.current_index = model.index_at(plan.start_angle)

    @property
    def is_spinning(self) -> bool:
        return self.state == StepperState.SPINNING

    def start(self):
        if self.state != StepperState.IDLE:
            raise RuntimeError(f"Cannot start a stepper in state {self.state.name}")
        self.velocity = self.plan.initial_velocity
        self.state = StepperState.SPINNING

    def step(self) -> bool:
        """
        Advance one frame.

        Returns:
            True when this frame settled the wheel
        """
        if self.state != StepperState.SPINNING:
            return self.state == StepperState.SETTLED

        self.angle += self.velocity
        self.velocity *= self.plan.friction
        self.frames += 1

        settling = abs(self.velocity) < STOP_VELOCITY
        if settling:
            self.angle = self.plan.target_angle
            self.velocity = 0.0

        self._update_segment()
        if self.state != StepperState.SPINNING:
            # cancelled from the tick callback
            return False

        if settling:
            self.state = StepperState.SETTLED
            self.logger.debug(f"Settled after {self.frames} frames, {self.ticks} ticks, angle={self.angle:.4f}")
            return True

        return False

    def cancel(self):
        if self.state == StepperState.SPINNING:
            self.state = StepperState.CANCELLED
            self.velocity = 0.0

    def _update_segment(self):
        # One tick per frame at most, intermediate boundaries crossed within a
        # single frame are not reported
        index = self.model.index_at(self.angle)
        if index != self.current_index:
            self.current_index = index
            self.ticks += 1
            if self.on_tick:
                self.on_tick(index)

    @staticmethod
    def frames_to_stop(initial_velocity: float, friction: float) -> int:
        """Number of steps until the velocity drops below STOP_VELOCITY."""
        if initial_velocity < STOP_VELOCITY:
            return 1
        # smallest n with v0 * f^n < STOP_VELOCITY
        return int(math.floor(math.log(STOP_VELOCITY / initial_velocity) / math.log(friction))) + 1
