# spinwheel/domain/spin/services/fairness_engine.py
import logging
from dataclasses import dataclass
from typing import List, Tuple

from spinwheel.domain.spin.errors import WheelExhaustedError
from spinwheel.domain.wheel.entities.option import Option
from spinwheel.domain.wheel.entities.segment_model import SegmentModel
from spinwheel.domain.wheel.entities.wheel import FairnessMode

# Each previous win multiplies an option's weight by this factor in balanced mode
BALANCED_DECAY = 0.35


@dataclass(frozen=True)
class Draw:
    """
    Result of one weighted draw.

    win_start/win_end are the winner's visual arc relative to the wheel's
    first segment; they come from raw weights, not effective ones.
    """
    option: Option
    index: int
    win_start: float
    win_end: float
    random_value: float
    effective_weights: Tuple[float, ...]

    @property
    def effective_total(self) -> float:
        return sum(self.effective_weights)

    @property
    def target_angle(self) -> float:
        """Centre of the winner's arc."""
        return self.win_start + (self.win_end - self.win_start) / 2


class FairnessEngine:
    """
    Turns raw weights plus session history into effective weights and draws
    a winner from them.
    """
    def __init__(self, mode: FairnessMode = FairnessMode.RANDOM, decay: float = BALANCED_DECAY):
        self.logger = logging.getLogger("domain.spin.fairness")
        self.mode = mode
        self.decay = decay

    def effective_weight(self, option: Option, session) -> float:
        """
        Selection weight of one option for the next draw.

        - random: the raw weight
        - balanced: raw weight * decay ** pick_count, never exactly zero
        - elimination: raw weight, or 0 once the option has won
        """
        if self.mode == FairnessMode.BALANCED:
            return option.weight * (self.decay ** session.pick_count(option.id))
        if self.mode == FairnessMode.ELIMINATION:
            return 0.0 if session.is_eliminated(option.id) else option.weight
        return option.weight

    def effective_weights(self, options, session) -> List[float]:
        return [self.effective_weight(option, session) for option in options]

    def draw(self, model: SegmentModel, session, rng, wheel_id: str = "") -> Draw:
        """
        Weighted draw over the model's options.

        Walks options in layout order; the first whose effective interval
        [acc, acc + weight) contains r = rng.random() * effective_total wins.
        The visual arc is accumulated in the same pass.

        Args:
            model: Segment layout of the wheel
            session: SessionState providing pick counts / eliminated ids
            rng: Uniform source with random() in [0, 1)
            wheel_id: Only used in errors and logs

        Returns:
            The Draw

        Raises:
            WheelExhaustedError: If the effective total is <= 0
        """
        weights = self.effective_weights(model.options, session)
        effective_total = sum(weights)

        if effective_total <= 0:
            self.logger.info(f"No selectable options left on wheel {wheel_id}")
            raise WheelExhaustedError(wheel_id, len(session.eliminated_ids))

        random_value = rng.random()
        r = random_value * effective_total

        winner_index = None
        acc = 0.0
        for index, weight in enumerate(weights):
            if weight > 0 and acc <= r < acc + weight:
                winner_index = index
                break
            acc += weight

        if winner_index is None:
            # r landed past the last interval through float drift
            winner_index = next(i for i, w in enumerate(weights) if w > 0)
            self.logger.debug(f"Draw value {r} outside cumulative intervals, using option {winner_index}")

        win_start, win_end = model.local_arc(winner_index)
        option = model.options[winner_index]

        self.logger.debug(
            f"[{self.mode.value}] drew {option.id} with r={r:.4f}/{effective_total:.4f}, "
            f"arc=[{win_start:.4f}, {win_end:.4f})"
        )

        return Draw(
            option=option,
            index=winner_index,
            win_start=win_start,
            win_end=win_end,
            random_value=random_value,
            effective_weights=tuple(weights),
        )
