"""Helpers deriving cycle progress and the suggested follow-up mode."""

from __future__ import annotations

from .constants import (
    DEFAULT_LONG_BREAK_INTERVAL,
    MODE_FOCUS,
    MODE_LONG_BREAK,
    MODE_SHORT_BREAK,
)


def cycle_position(
    cycles_completed: int,
    long_break_interval: int = DEFAULT_LONG_BREAK_INTERVAL,
) -> int:
    """Return how many focus cycles of the current set are done."""
    if long_break_interval < 1:
        raise ValueError("long_break_interval must be >= 1")
    return max(0, int(cycles_completed)) % long_break_interval


def suggest_next_mode(
    completed_mode: str,
    cycles_completed: int,
    long_break_interval: int = DEFAULT_LONG_BREAK_INTERVAL,
) -> str:
    """Suggest the mode to run after `completed_mode` finished.

    A long break follows every `long_break_interval`-th focus cycle, a short
    break follows any other focus cycle, and focus follows any break.
    """
    if completed_mode != MODE_FOCUS:
        return MODE_FOCUS
    if cycles_completed > 0 and cycle_position(cycles_completed, long_break_interval) == 0:
        return MODE_LONG_BREAK
    return MODE_SHORT_BREAK
