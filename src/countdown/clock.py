"""Deadline arithmetic that stays correct when polls are late or skipped.

Remaining time is always one subtraction against an absolute deadline on a
single time source. Nothing here accumulates state between polls, so a tick
that arrives after the process was suspended, throttled, or blocked reports
the same value as if every intermediate tick had run.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, Optional

CLOCK_BOOTTIME = "boottime"
CLOCK_MONOTONIC = "monotonic"
CLOCK_WALL = "wall"

CLOCK_SOURCES: frozenset[str] = frozenset({CLOCK_BOOTTIME, CLOCK_MONOTONIC, CLOCK_WALL})

# Float noise below a microsecond must not push ceil() over an integer boundary.
_PRECISION_DIGITS = 6


def resolve_time_source(
    name: str = CLOCK_BOOTTIME,
    *,
    logger: Optional[logging.Logger] = None,
) -> Callable[[], float]:
    """Return a zero-argument callable for the named time source.

    `boottime` keeps counting while the machine is suspended, which is what a
    wall-clock countdown needs; platforms without CLOCK_BOOTTIME fall back to
    the monotonic clock.
    """
    if name == CLOCK_MONOTONIC:
        return time.monotonic
    if name == CLOCK_WALL:
        return time.time
    if name == CLOCK_BOOTTIME:
        clock_id = getattr(time, "CLOCK_BOOTTIME", None)
        if clock_id is not None:
            return lambda: time.clock_gettime(clock_id)
        (logger or logging.getLogger("countdown")).info(
            "CLOCK_BOOTTIME unavailable on this platform; using monotonic clock"
        )
        return time.monotonic
    allowed = ", ".join(sorted(CLOCK_SOURCES))
    raise ValueError(f"clock must be one of: {allowed}, got: {name!r}")


class DeadlineClock:
    """Converts durations into deadlines and deadlines into remaining seconds."""

    def __init__(self, time_fn: Optional[Callable[[], float]] = None):
        self._time_fn = time_fn or time.monotonic

    def now(self) -> float:
        return self._time_fn()

    @staticmethod
    def arm(duration_seconds: int, now: float) -> float:
        if duration_seconds < 0:
            raise ValueError(f"duration_seconds must be >= 0, got: {duration_seconds}")
        return now + duration_seconds

    @staticmethod
    def remaining(deadline: float, now: float) -> int:
        delta = round(deadline - now, _PRECISION_DIGITS)
        return max(0, int(math.ceil(delta)))

    @classmethod
    def is_expired(cls, deadline: float, now: float) -> bool:
        return cls.remaining(deadline, now) == 0
