"""English status and completion text builders for the UI."""

from __future__ import annotations

from countdown import TimerSnapshot
from countdown.constants import (
    COMMAND_ACKNOWLEDGE,
    COMMAND_PAUSE,
    COMMAND_START,
    MODE_FOCUS,
    REASON_ALREADY_RUNNING,
    REASON_AWAITING_ACKNOWLEDGEMENT,
    REASON_CLOSED,
    REASON_NOT_COMPLETED,
    REASON_NOT_RUNNING,
    STATUS_COMPLETED,
    STATUS_PAUSED,
    STATUS_RUNNING,
)


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def status_message(snapshot: TimerSnapshot) -> str:
    """Build status text for the current timer snapshot."""
    label = snapshot.label or snapshot.mode
    remaining = format_duration(snapshot.remaining_seconds)
    if snapshot.status == STATUS_RUNNING:
        return f"{label} running ({remaining} remaining)"
    if snapshot.status == STATUS_PAUSED:
        return f"{label} paused ({remaining} remaining)"
    if snapshot.status == STATUS_COMPLETED:
        return f"{label} completed"
    return f"{label} ready ({remaining})"


def completion_message(snapshot: TimerSnapshot, suggested_label: str = "") -> str:
    """Build the text shown while a completion awaits acknowledgement."""
    if snapshot.mode == MODE_FOCUS:
        text = "Time is up! Take a breath."
    else:
        text = f"Time is up! {snapshot.label or 'Break'} is over."
    if suggested_label:
        text += f" Next up: {suggested_label}."
    return text


def cycle_summary(cycles_completed: int, position: int, interval: int) -> str:
    noun = "session" if cycles_completed == 1 else "sessions"
    return f"{cycles_completed} focus {noun} completed ({position}/{interval} toward a long break)"


def rejection_text(command: str, reason: str) -> str:
    """Explain why a command left the timer unchanged."""
    if reason == REASON_CLOSED:
        return "Timer is shut down."
    if command == COMMAND_START and reason == REASON_ALREADY_RUNNING:
        return "Timer is already running."
    if command == COMMAND_START and reason == REASON_AWAITING_ACKNOWLEDGEMENT:
        return "Acknowledge the completed session first."
    if command == COMMAND_PAUSE and reason == REASON_NOT_RUNNING:
        return "Timer is not running."
    if command == COMMAND_ACKNOWLEDGE and reason == REASON_NOT_COMPLETED:
        return "Nothing to acknowledge."
    return f"Command '{command}' was not applied ({reason})."
