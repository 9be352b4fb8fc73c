# spinwheel/infrastructure/scheduling/frame_scheduler.py
import asyncio
import itertools
import logging
from typing import Any, Callable, Dict, Optional, Protocol

FrameCallback = Callable[[], None]

DEFAULT_FRAME_INTERVAL = 1.0 / 60.0


class FrameScheduler(Protocol):
    """
    "Run this callback on the next display refresh."

    The spin engine requests exactly one frame at a time and re-requests from
    inside the callback while the wheel is moving.
    """

    def request_frame(self, callback: FrameCallback) -> Any:
        """Schedule callback for the next frame and return a cancellable handle."""
        ...

    def cancel_frame(self, handle: Any) -> None:
        """Drop a previously requested frame; unknown or spent handles are ignored."""
        ...


class ManualFrameScheduler:
    """
    Deterministic scheduler driven by the host.

    Frames only run when run_frame() or run_until_idle() is called, which
    makes whole spins reproducible in tests and headless simulations.
    """
    def __init__(self):
        self.logger = logging.getLogger("infrastructure.scheduling.manual")
        self._pending: Dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)
        self.frame_count = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: Any) -> None:
        self._pending.pop(handle, None)

    def run_frame(self) -> int:
        """
        Run every callback that was pending when the frame started.

        Callbacks requested during the frame are deferred to the next one.

        Returns:
            Number of callbacks executed
        """
        if not self._pending:
            return 0

        batch = list(self._pending.items())
        self._pending.clear()
        self.frame_count += 1

        for _, callback in batch:
            callback()
        return len(batch)

    def run_until_idle(self, max_frames: int = 100_000) -> int:
        """
        Run frames until nothing is pending.

        Args:
            max_frames: Upper bound protecting against a runaway callback chain

        Returns:
            Number of frames executed

        Raises:
            RuntimeError: If callbacks are still pending after max_frames
        """
        frames = 0
        while self._pending:
            if frames >= max_frames:
                raise RuntimeError(f"Frame callbacks still pending after {max_frames} frames")
            self.run_frame()
            frames += 1

        self.logger.debug(f"Scheduler idle after {frames} frames")
        return frames


class AsyncioFrameScheduler:
    """
    Real-time scheduler: each frame is a call_later on an asyncio event loop,
    frame_interval seconds after it was requested.
    """
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None,
                 frame_interval: float = DEFAULT_FRAME_INTERVAL):
        if frame_interval <= 0:
            raise ValueError(f"frame_interval must be positive, got {frame_interval}")
        self.logger = logging.getLogger("infrastructure.scheduling.asyncio")
        self._loop = loop
        self.frame_interval = frame_interval

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        return self.loop.call_later(self.frame_interval, callback)

    def cancel_frame(self, handle: Any) -> None:
        if handle is not None:
            handle.cancel()
