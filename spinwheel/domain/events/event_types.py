# spinwheel/domain/events/event_types.py
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any


@dataclass
class DomainEvent:
    """Base class for all domain events; `type` is a member of the subclass's event enum."""
    type: Enum
    timestamp: datetime = field(default_factory=datetime.now)
    data: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(type={self.type.name}, timestamp={self.timestamp:%H:%M:%S.%f})"
