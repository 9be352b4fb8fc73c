# spinwheel/domain/spin/errors.py


class SpinEngineError(Exception):
    """Base class for spin engine errors."""
    pass


class InvalidWheelError(SpinEngineError):
    """The wheel cannot be spun: no options, or total weight <= 0."""
    def __init__(self, wheel_id, reason):
        self.wheel_id = wheel_id
        self.reason = reason
        self.message = f"Invalid wheel {wheel_id or '<anonymous>'}: {reason}"
        super().__init__(self.message)


class WheelExhaustedError(SpinEngineError):
    """
    Every option has zero effective weight (all eliminated).

    Not a hard failure: the session has to be reset before the next draw.
    """
    def __init__(self, wheel_id, eliminated_count=0):
        self.wheel_id = wheel_id
        self.eliminated_count = eliminated_count
        self.message = (f"Wheel {wheel_id or '<anonymous>'} is exhausted "
                        f"({eliminated_count} options eliminated), reset required")
        super().__init__(self.message)


class SessionMismatchError(SpinEngineError):
    """A session was handed to an engine for a different wheel or fairness mode."""
    def __init__(self, wheel_id, reason):
        self.wheel_id = wheel_id
        self.reason = reason
        self.message = f"Session does not belong to wheel {wheel_id or '<anonymous>'}: {reason}"
        super().__init__(self.message)
