"""Numpy synthesis of the completion chime."""

from __future__ import annotations

import numpy as np

_ATTACK_SECONDS = 0.005
_OVERTONE_GAIN = 0.35


def synthesize_chime(
    *,
    frequency_hz: float = 880.0,
    duration_seconds: float = 0.6,
    repeats: int = 3,
    gap_seconds: float = 0.25,
    volume: float = 0.5,
    sample_rate_hz: int = 44100,
) -> np.ndarray:
    """Return a mono float32 bell-like chime: `repeats` decaying strikes."""
    if frequency_hz <= 0:
        raise ValueError("frequency_hz must be greater than zero")
    if duration_seconds <= 0:
        raise ValueError("duration_seconds must be greater than zero")
    if repeats < 1:
        raise ValueError("repeats must be >= 1")
    if gap_seconds < 0:
        raise ValueError("gap_seconds must be >= 0")
    if not 0.0 <= volume <= 1.0:
        raise ValueError("volume must be in [0, 1]")
    if sample_rate_hz <= 0:
        raise ValueError("sample_rate_hz must be greater than zero")

    samples = max(1, int(round(duration_seconds * sample_rate_hz)))
    t = np.arange(samples, dtype=np.float64) / sample_rate_hz
    strike = np.sin(2.0 * np.pi * frequency_hz * t)
    strike += _OVERTONE_GAIN * np.sin(2.0 * np.pi * 2.0 * frequency_hz * t)

    envelope = np.exp(-5.0 * t / duration_seconds)
    attack = min(samples, max(1, int(_ATTACK_SECONDS * sample_rate_hz)))
    envelope[:attack] *= np.linspace(0.0, 1.0, attack)
    strike *= envelope

    peak = float(np.max(np.abs(strike)))
    if peak > 0:
        strike *= volume / peak

    gap = np.zeros(int(round(gap_seconds * sample_rate_hz)), dtype=np.float64)
    parts: list[np.ndarray] = []
    for index in range(repeats):
        if index:
            parts.append(gap)
        parts.append(strike)
    return np.concatenate(parts).astype(np.float32)
