# spinwheel/domain/spin/spin_engine.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, FrozenSet, List, Optional

from spinwheel.domain.events.event_dispatcher import EventDispatcher
from spinwheel.domain.events.spin_events import SpinEvent, SpinEventType
from spinwheel.domain.wheel.entities.segment_model import SegmentModel
from spinwheel.domain.wheel.entities.wheel import Wheel
from spinwheel.infrastructure.feedback.feedback_sink import FeedbackSink, NullFeedbackSink
from spinwheel.infrastructure.scheduling.frame_scheduler import FrameScheduler
from .errors import SessionMismatchError, WheelExhaustedError
from .entities.physics_stepper import PhysicsStepper, StepperState
from .entities.session_state import SessionState
from .entities.spin_outcome import SpinOutcome
from .services.fairness_engine import Draw, FairnessEngine
from .services.rotation_planner import RotationPlan, RotationPlanner

RenderSink = Callable[[float, FrozenSet[str]], None]
SettleCallback = Callable[[SpinOutcome], None]


class SpinStatus(Enum):
    READY = "ready"
    SPINNING = "spinning"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class SpinHandle:
    """What the caller gets back when a spin starts."""
    spin_number: int
    draw: Draw
    plan: RotationPlan


class SpinEngine:
    """
    Spins one wheel within one session.

    A spin draws the winner up front, plans the rotation that centres it
    under the pointer and then lets the physics stepper run one step per
    scheduled frame until it settles. Only one spin can be in flight; the
    session history is only written when a spin settles.
    """
    def __init__(self, wheel: Wheel, scheduler: FrameScheduler, rng,
                 session: Optional[SessionState] = None,
                 event_dispatcher: Optional[EventDispatcher] = None,
                 feedback: Optional[FeedbackSink] = None,
                 render: Optional[RenderSink] = None,
                 planner: Optional[RotationPlanner] = None,
                 initial_angle: float = 0.0):
        """
        Args:
            wheel: Wheel to spin, validated here
            scheduler: Per-frame scheduling primitive
            rng: Uniform random source with random() in [0, 1)
            session: Existing session state, a fresh one is created if omitted
            event_dispatcher: Optional dispatcher for SpinEvents
            feedback: Optional haptic/sound sink for tick and settle pulses
            render: Optional callable(angle, eliminated_ids) invoked every frame
            planner: Rotation planner, default pointer convention if omitted
            initial_angle: Resting angle before the first spin

        Raises:
            InvalidWheelError: If the wheel cannot be spun
            SessionMismatchError: If session was built for another wheel or fairness mode
        """
        self.wheel = wheel.validate()
        self.logger = logging.getLogger(f"domain.spin.engine.{wheel.id}")

        self.scheduler = scheduler
        self.rng = rng
        self.session = session or SessionState(wheel.config.fairness, wheel.option_ids)
        self._check_session()
        self.event_dispatcher = event_dispatcher
        self.feedback = feedback or NullFeedbackSink()
        self.render = render

        self.planner = planner or RotationPlanner()
        self.model = SegmentModel(wheel.options, pointer_angle=self.planner.pointer_angle)
        self.fairness = FairnessEngine(wheel.config.fairness)

        self.angle = initial_angle
        self.spin_count = 0
        self.last_outcome: Optional[SpinOutcome] = None
        self.outcomes: List[SpinOutcome] = []

        self._stepper: Optional[PhysicsStepper] = None
        self._handle: Optional[SpinHandle] = None
        self._frame_handle: Any = None
        self._on_settle: Optional[SettleCallback] = None

    @property
    def is_spinning(self) -> bool:
        # A settled stepper stays active until its win has been recorded
        return self._stepper is not None and self._stepper.state in (StepperState.SPINNING,
                                                                     StepperState.SETTLED)

    @property
    def status(self) -> SpinStatus:
        if self.is_spinning:
            return SpinStatus.SPINNING
        if self.session.is_exhausted():
            return SpinStatus.EXHAUSTED
        return SpinStatus.READY

    def spin(self, on_settle: Optional[SettleCallback] = None) -> Optional[SpinHandle]:
        """
        Start a spin.

        The outcome is delivered later, from inside a frame callback, through
        on_settle and a SPIN_SETTLED event.

        Args:
            on_settle: Called once with the SpinOutcome when the wheel stops

        Returns:
            The SpinHandle, or None when no spin was started: either a spin is
            already running, or the session was exhausted and has been reset
            instead
        """
        if self.is_spinning:
            self.logger.warning("Spin requested while the wheel is already spinning, ignored")
            self._dispatch(SpinEventType.SPIN_REJECTED)
            return None

        if self.session.is_exhausted():
            self.logger.info("All options eliminated, resetting session instead of spinning")
            self.reset()
            return None

        try:
            draw = self.fairness.draw(self.model, self.session, self.rng, wheel_id=self.wheel.id)
        except WheelExhaustedError:
            self.logger.info("No option can be drawn, resetting session")
            self.reset()
            return None

        plan = self.planner.plan(self.angle, draw.win_start, draw.win_end, self.wheel.config.duration)

        self.spin_count += 1
        handle = SpinHandle(spin_number=self.spin_count, draw=draw, plan=plan)
        self._stepper = PhysicsStepper(self.model, plan, on_tick=self._on_tick)
        self._handle = handle
        self._on_settle = on_settle

        self._stepper.start()
        self._frame_handle = self.scheduler.request_frame(self._on_frame)

        self.logger.debug(
            f"Spin #{self.spin_count} started: winner={draw.option.id}, "
            f"target={plan.target_angle:.4f}, v0={plan.initial_velocity:.5f}"
        )
        self._dispatch(SpinEventType.SPIN_STARTED, {
            "winner_id": draw.option.id,
            "start_angle": plan.start_angle,
            "target_angle": plan.target_angle,
            "initial_velocity": plan.initial_velocity,
        })
        return handle

    def cancel(self) -> bool:
        """
        Abandon the running spin without reporting a winner.

        The wheel stays where the last frame left it and the session is not
        touched.

        Returns:
            True if a spin was cancelled
        """
        if not self.is_spinning:
            return False

        stepper = self._stepper
        spin_number = self._handle.spin_number
        self.scheduler.cancel_frame(self._frame_handle)
        stepper.cancel()
        self.angle = stepper.angle
        self._clear_active()

        self.logger.info(f"Spin #{spin_number} cancelled after {stepper.frames} frames")
        self._dispatch(SpinEventType.SPIN_CANCELLED, {"angle": self.angle, "frames": stepper.frames})
        return True

    def reset(self):
        """Clear the session history, cancelling a running spin first."""
        self.cancel()
        self.session.reset()
        self.feedback.tick()
        self.logger.info(f"Session reset for wheel {self.wheel.id}")
        self._dispatch(SpinEventType.SESSION_RESET)
        self._render()

    def _on_frame(self):
        stepper = self._stepper
        if stepper is None or not stepper.is_spinning:
            return
        handle, on_settle = self._handle, self._on_settle

        settled = stepper.step()
        if self._stepper is not stepper:
            return
        self.angle = stepper.angle
        self._render()
        self._dispatch(SpinEventType.FRAME, {"angle": self.angle, "velocity": stepper.velocity})

        # Tick, render and frame callbacks may have cancelled or reset the spin
        if self._stepper is not stepper:
            return
        if settled:
            self._settle(stepper, handle, on_settle)
        else:
            self._frame_handle = self.scheduler.request_frame(self._on_frame)

    def _check_session(self):
        if self.session.fairness != self.wheel.config.fairness:
            raise SessionMismatchError(
                self.wheel.id,
                f"fairness {self.session.fairness.value} != {self.wheel.config.fairness.value}"
            )
        if tuple(self.session.option_ids) != tuple(self.wheel.option_ids):
            raise SessionMismatchError(self.wheel.id, f"options {list(self.session.option_ids)}")

    def _on_tick(self, index: int):
        self.feedback.tick()
        self._dispatch(SpinEventType.TICK, {"segment_index": index,
                                            "option_id": self.model.options[index].id})

    def _settle(self, stepper: PhysicsStepper, handle: SpinHandle, on_settle: Optional[SettleCallback]):
        winner = self.model.option_at(stepper.angle)
        if winner.id != handle.draw.option.id:
            # Only possible for an arc too narrow to resolve in floating point
            self.logger.error(f"Settled on {winner.id} but drew {handle.draw.option.id}")

        self.session.record_win(winner.id)
        self.feedback.settle()

        outcome = SpinOutcome(
            winner=winner,
            final_angle=stepper.angle,
            wheel_id=self.wheel.id,
            spin_number=handle.spin_number,
            frames=stepper.frames,
            ticks=stepper.ticks,
        )
        self.last_outcome = outcome
        self.outcomes.append(outcome)
        self._clear_active()

        self.logger.info(f"Spin #{outcome.spin_number} landed on {winner.label} after {outcome.frames} frames")
        self._dispatch(SpinEventType.SPIN_SETTLED, outcome.to_dict())
        self._render()

        if on_settle:
            on_settle(outcome)

    def _clear_active(self):
        self._stepper = None
        self._handle = None
        self._frame_handle = None
        self._on_settle = None

    def _render(self):
        if self.render:
            self.render(self.angle, frozenset(self.session.eliminated_ids))

    def _dispatch(self, event_type: SpinEventType, data: Optional[dict] = None):
        # FRAME fires every step, skip building events nobody listens to
        if not self.event_dispatcher or not self.event_dispatcher.has_listeners(event_type, SpinEvent):
            return
        self.event_dispatcher.dispatch(SpinEvent(
            type=event_type,
            wheel_id=self.wheel.id,
            spin_number=self.spin_count,
            data=dict(data) if data else {},
        ))
