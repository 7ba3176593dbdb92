"""Mode, status, command, and reason constants used by the countdown engine."""

from __future__ import annotations

MODE_FOCUS = "focus"
MODE_SHORT_BREAK = "short_break"
MODE_LONG_BREAK = "long_break"

MODE_IDS: tuple[str, ...] = (MODE_FOCUS, MODE_SHORT_BREAK, MODE_LONG_BREAK)

DEFAULT_MODE_DURATIONS: dict[str, int] = {
    MODE_FOCUS: 25 * 60,
    MODE_SHORT_BREAK: 5 * 60,
    MODE_LONG_BREAK: 15 * 60,
}
DEFAULT_MODE_LABELS: dict[str, str] = {
    MODE_FOCUS: "Focus",
    MODE_SHORT_BREAK: "Short break",
    MODE_LONG_BREAK: "Long break",
}
DEFAULT_LONG_BREAK_INTERVAL = 4

STATUS_IDLE = "idle"
STATUS_RUNNING = "running"
STATUS_PAUSED = "paused"
STATUS_COMPLETED = "completed"

COMMAND_START = "start"
COMMAND_PAUSE = "pause"
COMMAND_RESET = "reset"
COMMAND_SWITCH_MODE = "switch_mode"
COMMAND_ACKNOWLEDGE = "acknowledge_completion"

ACTION_SYNC = "sync"
ACTION_TICK = "tick"
ACTION_COMPLETED = "completed"
ACTION_CLOSE = "close"

REASON_STARTED = "started"
REASON_RESUMED = "resumed"
REASON_ALREADY_RUNNING = "already_running"
REASON_AWAITING_ACKNOWLEDGEMENT = "awaiting_acknowledgement"
REASON_PAUSED = "paused"
REASON_NOT_RUNNING = "not_running"
REASON_RESET = "reset"
REASON_MODE_SWITCHED = "mode_switched"
REASON_ACKNOWLEDGED = "acknowledged"
REASON_NOT_COMPLETED = "not_completed"
REASON_CLOSED = "closed"
REASON_UNSUPPORTED_COMMAND = "unsupported_command"
REASON_TICK = "tick"
REASON_COMPLETED = "completed"
REASON_STARTUP = "startup"
