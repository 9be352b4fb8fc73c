# spinwheel/domain/wheel/entities/wheel.py
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

from spinwheel.domain.spin.errors import InvalidWheelError
from .option import Option


class SpinDuration(Enum):
    """How long a spin lasts, expressed through per-frame friction."""
    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"
    INSTANT = "instant"

    @property
    def friction(self) -> float:
        return DURATION_FRICTION[self]

    @property
    def extra_turns(self) -> int:
        return DURATION_EXTRA_TURNS[self]


# Lower value = faster decay = shorter spin
DURATION_FRICTION = {
    SpinDuration.SLOW: 0.992,
    SpinDuration.MEDIUM: 0.985,
    SpinDuration.FAST: 0.95,
    SpinDuration.INSTANT: 0.15,
}

# Fast mode decays quickly, more turns keep the spin from looking short
DURATION_EXTRA_TURNS = {
    SpinDuration.SLOW: 5,
    SpinDuration.MEDIUM: 5,
    SpinDuration.FAST: 12,
    SpinDuration.INSTANT: 1,
}


class FairnessMode(Enum):
    """How history affects the next draw."""
    RANDOM = "random"
    BALANCED = "balanced"
    ELIMINATION = "elimination"


@dataclass(frozen=True)
class WheelConfig:
    duration: SpinDuration = SpinDuration.MEDIUM
    fairness: FairnessMode = FairnessMode.RANDOM

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "WheelConfig":
        """
        Build a config from its serialized form ({"duration": "fast", ...}).

        Raises:
            ValueError: On an unknown duration or fairness name
        """
        config = config or {}
        return cls(
            duration=SpinDuration(str(config.get("duration", SpinDuration.MEDIUM.value)).lower()),
            fairness=FairnessMode(str(config.get("fairness", FairnessMode.RANDOM.value)).lower()),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"duration": self.duration.value, "fairness": self.fairness.value}


@dataclass(frozen=True)
class Wheel:
    """
    A titled, ordered set of options plus its spin configuration.

    Option order defines the angular layout. The engine only reads wheels.
    """
    id: str
    title: str
    options: Tuple[Option, ...]
    config: WheelConfig = field(default_factory=WheelConfig)
    created_at: float = field(default_factory=time.time)

    def __post_init__(self):
        # Accept any sequence but store an immutable one
        object.__setattr__(self, "options", tuple(self.options))

    @property
    def total_weight(self) -> float:
        return sum(option.weight for option in self.options)

    @property
    def option_ids(self) -> List[str]:
        return [option.id for option in self.options]

    def validate(self) -> "Wheel":
        """
        Check the wheel can be spun.

        Returns:
            self, for chaining

        Raises:
            InvalidWheelError: No options, a negative or non-finite weight,
                duplicate option ids, or a total weight <= 0
        """
        if not self.options:
            raise InvalidWheelError(self.id, "wheel has no options")

        seen = set()
        for option in self.options:
            if option.id in seen:
                raise InvalidWheelError(self.id, f"duplicate option id {option.id!r}")
            seen.add(option.id)

            if not math.isfinite(option.weight) or option.weight < 0:
                raise InvalidWheelError(self.id, f"option {option.id!r} has invalid weight {option.weight}")

        if self.total_weight <= 0:
            raise InvalidWheelError(self.id, f"total weight must be positive, got {self.total_weight}")

        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "options": [option.to_dict() for option in self.options],
            "config": self.config.to_dict(),
            "created_at": self.created_at,
        }

    def __len__(self) -> int:
        return len(self.options)

    def __repr__(self) -> str:
        return f"Wheel(id={self.id}, options={len(self.options)}, {self.config.fairness.value}/{self.config.duration.value})"
