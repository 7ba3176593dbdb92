"""Audio chime signal channel."""

from __future__ import annotations

import logging
import threading
from typing import Optional

import numpy as np

from countdown.errors import SignalChannelError

from .contracts import AudioOutputLike, Completion
from .errors import AudioOutputError
from .tone import synthesize_chime


class ChimeChannel:
    """Plays the synthesized chime once per completion; `clear` stops it."""

    name = "chime"

    def __init__(
        self,
        output: AudioOutputLike,
        *,
        frequency_hz: float = 880.0,
        duration_seconds: float = 0.6,
        repeats: int = 3,
        gap_seconds: float = 0.25,
        volume: float = 0.5,
        sample_rate_hz: int = 44100,
        logger: Optional[logging.Logger] = None,
    ):
        self._output = output
        self._sample_rate_hz = sample_rate_hz
        self._wav = synthesize_chime(
            frequency_hz=frequency_hz,
            duration_seconds=duration_seconds,
            repeats=repeats,
            gap_seconds=gap_seconds,
            volume=volume,
            sample_rate_hz=sample_rate_hz,
        )
        self._logger = logger or logging.getLogger("completion")
        self._lock = threading.Lock()
        self._cleared_through = 0
        self._playing = threading.Event()

    @classmethod
    def from_settings(
        cls,
        settings,
        output: AudioOutputLike,
        logger: Optional[logging.Logger] = None,
    ) -> "ChimeChannel":
        return cls(
            output,
            frequency_hz=settings.frequency_hz,
            duration_seconds=settings.duration_seconds,
            repeats=settings.repeats,
            gap_seconds=settings.gap_seconds,
            volume=settings.volume,
            sample_rate_hz=settings.sample_rate_hz,
            logger=logger,
        )

    @property
    def wav(self) -> np.ndarray:
        return self._wav

    @property
    def is_playing(self) -> bool:
        return self._playing.is_set()

    def deliver(self, completion: Completion) -> None:
        if not self._output.is_available():
            raise SignalChannelError(self.name, "no audio output device available")

        with self._lock:
            if completion.completion_id <= self._cleared_through:
                self._logger.debug(
                    "Chime for completion %d was stopped before it started",
                    completion.completion_id,
                )
                return
            self._output.arm()
            self._playing.set()

        self._logger.debug(
            "Playing completion chime for %s (%d samples)",
            completion.mode,
            len(self._wav),
        )
        try:
            self._output.play(self._wav, self._sample_rate_hz)
        except AudioOutputError as error:
            raise SignalChannelError(self.name, str(error)) from error
        finally:
            self._playing.clear()

    def clear(self, completion: Completion) -> None:
        with self._lock:
            self._cleared_through = max(self._cleared_through, completion.completion_id)
            if self._playing.is_set():
                self._logger.debug("Stopping completion chime for %s", completion.mode)
            self._output.stop()
