"""Completion payload and protocols shared by the signaler and its channels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np


@dataclass(frozen=True)
class Completion:
    """A single running-to-completed transition, as seen by signal channels."""
    mode: str
    completion_id: int
    label: str = ""
    cycles_completed: int = 0


class SignalChannel(Protocol):
    """Independent side-effect path triggered when a countdown completes."""
    name: str

    def deliver(self, completion: Completion) -> None:
        ...

    def clear(self, completion: Completion) -> None:
        ...


class AudioOutputLike(Protocol):
    def is_available(self) -> bool:
        ...

    def arm(self) -> None:
        ...

    def play(self, wav: np.ndarray, sample_rate_hz: int) -> None:
        ...

    def stop(self) -> None:
        ...


class CompletionPublisherLike(Protocol):
    def publish_completion(self, completion: Completion, *, active: bool) -> None:
        ...
