class TimerError(Exception):
    """Base exception for the countdown engine."""


class InvalidModeError(TimerError):
    """Raised when a mode identifier is not present in the mode table."""

    def __init__(self, mode_id: object):
        super().__init__(f"Unknown mode: {mode_id!r}")
        self.mode_id = mode_id


class SignalChannelError(TimerError):
    """Raised when a completion signal channel fails to deliver."""

    def __init__(self, channel: str, message: str):
        super().__init__(f"{channel}: {message}")
        self.channel = channel


class PersistenceError(TimerError):
    """Raised when the cycle counter cannot be read or written."""
