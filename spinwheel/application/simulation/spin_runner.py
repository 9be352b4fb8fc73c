# spinwheel/application/simulation/spin_runner.py
import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import numpy as np

from spinwheel.domain.events.event_dispatcher import EventDispatcher
from spinwheel.domain.spin.entities.physics_stepper import PhysicsStepper
from spinwheel.domain.spin.entities.spin_outcome import SpinOutcome
from spinwheel.domain.spin.spin_engine import SpinEngine, SpinHandle
from spinwheel.domain.wheel.entities.wheel import Wheel
from spinwheel.infrastructure.feedback.feedback_sink import FeedbackSink, LoggingFeedbackSink
from spinwheel.infrastructure.scheduling.frame_scheduler import (
    AsyncioFrameScheduler, DEFAULT_FRAME_INTERVAL, ManualFrameScheduler
)


class SpinRunner:
    """
    Runs a series of spins on one wheel and summarises them.

    Headless runs drive the frames themselves with a ManualFrameScheduler;
    real-time runs play every frame on an asyncio loop.
    """
    def __init__(self, wheel: Wheel, rng, event_dispatcher: Optional[EventDispatcher] = None,
                 feedback: Optional[FeedbackSink] = None, max_frames_per_spin: Optional[int] = None):
        self.logger = logging.getLogger("application.simulation.runner")
        self.wheel = wheel
        self.rng = rng
        self.event_dispatcher = event_dispatcher
        self.feedback = feedback or LoggingFeedbackSink()
        self.max_frames_per_spin = max_frames_per_spin

        self.outcomes: List[SpinOutcome] = []
        self.resets = 0
        self.engine: Optional[SpinEngine] = None

    def run(self, spins: int) -> Dict[str, Any]:
        """
        Perform `spins` spin requests headlessly.

        A request made on an exhausted elimination wheel resets the session
        instead of spinning; it still counts as a request.

        Returns:
            Summary dictionary (see summarize())
        """
        scheduler = ManualFrameScheduler()
        self.engine = self._create_engine(scheduler)

        start_time = time.time()
        self.logger.info(f"Running {spins} spins on wheel {self.wheel.id}")

        for _ in range(spins):
            handle = self.engine.spin(on_settle=self.outcomes.append)
            if handle is None:
                self.resets += 1
                continue
            scheduler.run_until_idle(self.max_frames_per_spin or self._frame_limit(handle))

        elapsed = time.time() - start_time
        self.logger.info(f"Finished {len(self.outcomes)} spins in {elapsed:.2f}s ({self.resets} resets)")
        return self.summarize()

    async def run_realtime(self, spins: int, frame_interval: float = DEFAULT_FRAME_INTERVAL,
                           pause: float = 0.5) -> Dict[str, Any]:
        """
        Same as run(), but every physics step waits for the next frame on the
        running event loop.

        Args:
            spins: Number of spin requests
            frame_interval: Seconds per frame
            pause: Seconds to wait between spins
        """
        loop = asyncio.get_running_loop()
        scheduler = AsyncioFrameScheduler(loop, frame_interval)
        self.engine = self._create_engine(scheduler)

        for number in range(spins):
            settled = loop.create_future()
            handle = self.engine.spin(on_settle=settled.set_result)
            if handle is None:
                self.resets += 1
                continue

            outcome = await settled
            self.outcomes.append(outcome)
            if number < spins - 1:
                await asyncio.sleep(pause)

        return self.summarize()

    def summarize(self) -> Dict[str, Any]:
        """Counts, empirical frequencies and frame statistics of the run."""
        labels = {option.id: option.label for option in self.wheel.options}
        option_ids = self.wheel.option_ids

        winner_indices = np.array([option_ids.index(o.winner.id) for o in self.outcomes], dtype=int)
        counts = np.bincount(winner_indices, minlength=len(option_ids))
        total = counts.sum()
        frequencies = counts / total if total > 0 else np.zeros(len(option_ids))

        weights = np.array([option.weight for option in self.wheel.options], dtype=float)
        expected = weights / weights.sum()

        frames = np.array([o.frames for o in self.outcomes], dtype=float)

        summary = {
            "wheel_id": self.wheel.id,
            "title": self.wheel.title,
            "fairness": self.wheel.config.fairness.value,
            "duration": self.wheel.config.duration.value,
            "spins": len(self.outcomes),
            "resets": self.resets,
            "counts": {labels[oid]: int(c) for oid, c in zip(option_ids, counts)},
            "frequencies": {labels[oid]: round(float(f), 4) for oid, f in zip(option_ids, frequencies)},
            "weight_shares": {labels[oid]: round(float(e), 4) for oid, e in zip(option_ids, expected)},
            "mean_frames": float(frames.mean()) if frames.size else 0.0,
            "max_frames": int(frames.max()) if frames.size else 0,
            "results": [o.winner.label for o in self.outcomes],
        }
        if self.engine:
            summary["session"] = self.engine.session.to_dict(labels)
        return summary

    def _create_engine(self, scheduler) -> SpinEngine:
        self.outcomes = []
        self.resets = 0
        return SpinEngine(
            wheel=self.wheel,
            scheduler=scheduler,
            rng=self.rng,
            event_dispatcher=self.event_dispatcher,
            feedback=self.feedback,
        )

    @staticmethod
    def _frame_limit(handle: SpinHandle) -> int:
        # float drift in the velocity product can add one frame
        return PhysicsStepper.frames_to_stop(handle.plan.initial_velocity, handle.plan.friction) + 2
