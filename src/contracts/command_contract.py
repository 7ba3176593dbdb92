"""Canonical command names and UI aliases accepted by the runtime."""

from __future__ import annotations

from countdown.constants import (
    COMMAND_ACKNOWLEDGE,
    COMMAND_PAUSE,
    COMMAND_RESET,
    COMMAND_START,
    COMMAND_SWITCH_MODE,
)

# Pseudo-command resolved against the current status: start when stopped,
# pause when running.
COMMAND_TOGGLE = "toggle"

COMMAND_ALIASES: dict[str, str] = {
    "resume": COMMAND_START,
    "continue": COMMAND_START,
    "stop_sound": COMMAND_ACKNOWLEDGE,
    "acknowledge": COMMAND_ACKNOWLEDGE,
    "switch": COMMAND_SWITCH_MODE,
    "mode": COMMAND_SWITCH_MODE,
}

RUNTIME_COMMANDS: frozenset[str] = frozenset(
    {
        COMMAND_START,
        COMMAND_PAUSE,
        COMMAND_RESET,
        COMMAND_SWITCH_MODE,
        COMMAND_ACKNOWLEDGE,
        COMMAND_TOGGLE,
    }
)


def canonical_command(name: str) -> str:
    """Normalize a command name and resolve aliases; unknown names pass through."""
    normalized = name.strip().lower().replace("-", "_")
    return COMMAND_ALIASES.get(normalized, normalized)
