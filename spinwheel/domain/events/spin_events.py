# spinwheel/domain/events/spin_events.py
from enum import Enum, auto
from dataclasses import dataclass

from .event_types import DomainEvent


class SpinEventType(Enum):
    """Event types emitted while a wheel is being spun."""
    SPIN_STARTED = auto()
    FRAME = auto()              # one physics step, carries the current angle
    TICK = auto()               # pointer entered a new segment
    SPIN_SETTLED = auto()
    SPIN_CANCELLED = auto()
    SPIN_REJECTED = auto()      # spin requested while another one is running
    SESSION_RESET = auto()


@dataclass
class SpinEvent(DomainEvent):
    """Event representing something that happened during a spin session."""
    wheel_id: str = ""
    spin_number: int = 0

    def __post_init__(self):
        self.data["wheel_id"] = self.wheel_id
        self.data["spin_number"] = self.spin_number
