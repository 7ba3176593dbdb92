"""UI-visible completion flag channel."""

from __future__ import annotations

import threading

from .contracts import Completion, CompletionPublisherLike


class UIFlagChannel:
    """Raises the UI "completed" flag on delivery and lowers it on clear.

    Delivery runs on a worker thread while clear runs on the caller's thread,
    so a clear may arrive first; a delivery for an already-cleared completion
    is dropped.
    """

    name = "ui"

    def __init__(self, publisher: CompletionPublisherLike):
        self._publisher = publisher
        self._lock = threading.Lock()
        self._raised_for = 0
        self._cleared_through = 0

    @property
    def raised(self) -> bool:
        with self._lock:
            return self._raised_for != 0

    def deliver(self, completion: Completion) -> None:
        with self._lock:
            if completion.completion_id <= self._cleared_through:
                return
            self._raised_for = completion.completion_id
            self._publisher.publish_completion(completion, active=True)

    def clear(self, completion: Completion) -> None:
        with self._lock:
            self._cleared_through = max(self._cleared_through, completion.completion_id)
            if self._raised_for != completion.completion_id:
                return
            self._raised_for = 0
            self._publisher.publish_completion(completion, active=False)
