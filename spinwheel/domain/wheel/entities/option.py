# spinwheel/domain/wheel/entities/option.py
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Option:
    """
    One entry on the wheel.

    The weight drives both the visual width of the segment and the base
    selection probability.
    """
    id: str
    label: str
    weight: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "weight": self.weight}

    def __str__(self) -> str:
        return f"{self.label} ({self.id}, w={self.weight:g})"
