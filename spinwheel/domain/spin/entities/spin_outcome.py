# spinwheel/domain/spin/entities/spin_outcome.py
import time
from dataclasses import dataclass, field
from typing import Any, Dict

from spinwheel.domain.wheel.entities.option import Option


@dataclass(frozen=True)
class SpinOutcome:
    """Result of one completed spin. Lives only as long as the session."""
    winner: Option
    final_angle: float
    wheel_id: str = ""
    spin_number: int = 0
    frames: int = 0
    ticks: int = 0
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wheel_id": self.wheel_id,
            "spin_number": self.spin_number,
            "winner_id": self.winner.id,
            "winner": self.winner.label,
            "final_angle": self.final_angle,
            "frames": self.frames,
            "ticks": self.ticks,
            "timestamp": self.timestamp,
        }
