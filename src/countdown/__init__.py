from .clock import DeadlineClock, resolve_time_source
from .constants import (
    MODE_FOCUS,
    MODE_LONG_BREAK,
    MODE_SHORT_BREAK,
    STATUS_COMPLETED,
    STATUS_IDLE,
    STATUS_PAUSED,
    STATUS_RUNNING,
)
from .cycles import cycle_position, suggest_next_mode
from .errors import (
    InvalidModeError,
    PersistenceError,
    SignalChannelError,
    TimerError,
)
from .machine import TimerEvent, TimerSnapshot, TimerStateMachine, TimerStatus
from .modes import ModeSpec, ModeTable

__all__ = [
    "DeadlineClock",
    "InvalidModeError",
    "MODE_FOCUS",
    "MODE_LONG_BREAK",
    "MODE_SHORT_BREAK",
    "ModeSpec",
    "ModeTable",
    "PersistenceError",
    "STATUS_COMPLETED",
    "STATUS_IDLE",
    "STATUS_PAUSED",
    "STATUS_RUNNING",
    "SignalChannelError",
    "TimerError",
    "TimerEvent",
    "TimerSnapshot",
    "TimerStateMachine",
    "TimerStatus",
    "cycle_position",
    "resolve_time_source",
    "suggest_next_mode",
]
