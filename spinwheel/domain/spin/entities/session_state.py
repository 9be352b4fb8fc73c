# spinwheel/domain/spin/entities/session_state.py
import logging
from collections import Counter
from typing import Any, Dict, Iterable, Optional, Set

from spinwheel.domain.wheel.entities.wheel import FairnessMode


class SessionState:
    """
    History of one wheel-viewing session: how often each option has won and,
    in elimination mode, which options are out.

    Only the engine mutates it, after a spin has settled.
    """
    def __init__(self, fairness: FairnessMode, option_ids: Iterable[str]):
        self.logger = logging.getLogger("domain.spin.session")
        self.fairness = fairness
        self.option_ids = tuple(option_ids)

        self.pick_counts: Counter = Counter()
        self.eliminated_ids: Set[str] = set()
        self.total_spins = 0
        self.last_winner_id: Optional[str] = None

    def pick_count(self, option_id: str) -> int:
        return self.pick_counts[option_id]

    def is_eliminated(self, option_id: str) -> bool:
        return option_id in self.eliminated_ids

    def record_win(self, option_id: str):
        self.pick_counts[option_id] += 1
        if self.fairness == FairnessMode.ELIMINATION:
            self.eliminated_ids.add(option_id)

        self.total_spins += 1
        self.last_winner_id = option_id

    def reset(self):
        self.pick_counts.clear()
        self.eliminated_ids.clear()
        self.total_spins = 0
        self.last_winner_id = None
        self.logger.debug("Session reset")

    def is_exhausted(self) -> bool:
        """Elimination mode with every option already picked."""
        return (self.fairness == FairnessMode.ELIMINATION
                and len(self.eliminated_ids) >= len(self.option_ids))

    def remaining_ids(self):
        return [option_id for option_id in self.option_ids if option_id not in self.eliminated_ids]

    def to_dict(self, labels: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """
        Summary of the session.

        Args:
            labels: Optional id -> label map, used to key the counts by label
        """
        labels = labels or {}
        return {
            "fairness": self.fairness.value,
            "total_spins": self.total_spins,
            "last_winner": labels.get(self.last_winner_id, self.last_winner_id),
            "pick_counts": {labels.get(option_id, option_id): self.pick_counts[option_id]
                            for option_id in self.option_ids},
            "eliminated": [labels.get(option_id, option_id)
                           for option_id in self.option_ids if option_id in self.eliminated_ids],
            "exhausted": self.is_exhausted(),
        }
