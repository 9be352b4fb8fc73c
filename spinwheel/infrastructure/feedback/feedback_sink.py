# spinwheel/infrastructure/feedback/feedback_sink.py
import logging
from typing import Protocol


class FeedbackSink(Protocol):
    """Haptic/sound output accepting discrete pulses."""

    def tick(self) -> None:
        """Short pulse, fired when the pointer enters a new segment."""
        ...

    def settle(self) -> None:
        """Stronger pulse, fired once when the wheel comes to rest."""
        ...


class NullFeedbackSink:
    """Used when the host has no haptic or sound output."""

    def tick(self) -> None:
        pass

    def settle(self) -> None:
        pass


class LoggingFeedbackSink:
    """
    Records pulses and writes them to the log, the headless stand-in for a
    vibration motor (tick ~5ms, settle ~20ms on a phone).
    """
    TICK_MS = 5
    SETTLE_MS = 20

    def __init__(self, logger_name: str = "infrastructure.feedback"):
        self.logger = logging.getLogger(logger_name)
        self.tick_count = 0
        self.settle_count = 0

    def tick(self) -> None:
        self.tick_count += 1
        self.logger.debug(f"tick ({self.TICK_MS}ms) #{self.tick_count}")

    def settle(self) -> None:
        self.settle_count += 1
        self.logger.debug(f"settle ({self.SETTLE_MS}ms)")
