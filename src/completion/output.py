"""Sounddevice-backed audio playback for the completion chime."""

import logging
import threading
from typing import Optional

import numpy as np
import sounddevice as sd

from .errors import AudioOutputError

_FINISH_GRACE_SECONDS = 1.0


class SoundDeviceAudioOutput:
    """Plays mono PCM arrays through a selected sounddevice output."""
    def __init__(
        self,
        output_device_index: Optional[int] = None,
        blocksize: int = 2048,
        logger: Optional[logging.Logger] = None,
    ):
        self._output_device_index = output_device_index
        self._blocksize = blocksize
        self._logger = logger or logging.getLogger(__name__)
        self._stop_requested = threading.Event()

    def is_available(self) -> bool:
        try:
            sd.query_devices(self._output_device_index, kind="output")
        except Exception as error:
            self._logger.debug("No usable audio output device: %s", error)
            return False
        return True

    def arm(self) -> None:
        """Allow the next `play` to run; a later `stop` still cuts it short."""
        self._stop_requested.clear()

    def stop(self) -> None:
        self._stop_requested.set()

    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        """Play `wav` and block until it finishes or `stop()` is called."""
        if wav.ndim != 1:
            raise AudioOutputError("Expected mono PCM array for playback")
        if len(wav) == 0:
            raise AudioOutputError("Cannot play empty audio buffer")

        finished = threading.Event()
        pos = 0

        def callback(outdata, frames, time_info, status):
            nonlocal pos
            if status:
                self._logger.warning("Sounddevice status: %s", status)

            if self._stop_requested.is_set():
                outdata.fill(0)
                raise sd.CallbackStop()

            end = pos + frames
            chunk = wav[pos:end]

            if len(chunk) < frames:
                outdata[: len(chunk), 0] = chunk
                outdata[len(chunk) :, 0] = 0
                raise sd.CallbackStop()

            outdata[:, 0] = chunk
            pos = end

        try:
            with sd.OutputStream(
                channels=1,
                samplerate=sample_rate_hz,
                blocksize=self._blocksize,
                callback=callback,
                device=self._output_device_index,
                finished_callback=finished.set,
            ):
                finished.wait(len(wav) / sample_rate_hz + _FINISH_GRACE_SECONDS)
        except Exception as error:
            raise AudioOutputError(f"Audio playback failed: {error}") from error
