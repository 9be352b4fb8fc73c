# tests/helpers.py
from spinwheel.domain.wheel.entities.option import Option
from spinwheel.domain.wheel.entities.wheel import FairnessMode, SpinDuration, Wheel, WheelConfig


class FixedRandom:
    """Uniform source returning scripted values, cycling when exhausted."""
    def __init__(self, *values):
        self.values = list(values) or [0.0]
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


def make_options(*pairs):
    return [Option(id=label, label=label, weight=weight) for label, weight in pairs]


def make_wheel(pairs=(("A", 1), ("B", 1), ("C", 2)),
               fairness=FairnessMode.RANDOM, duration=SpinDuration.INSTANT, wheel_id="test-wheel"):
    return Wheel(
        id=wheel_id,
        title="Test wheel",
        options=make_options(*pairs),
        config=WheelConfig(duration=duration, fairness=fairness),
    )
