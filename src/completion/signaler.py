"""Fan-out of a single completion to independent, fire-and-forget channels."""

from __future__ import annotations

import concurrent.futures
import logging
import threading
from typing import Callable, Optional, Sequence

from countdown.errors import SignalChannelError

from .contracts import Completion, SignalChannel

FailureHandler = Callable[[SignalChannelError], None]


class CompletionSignaler:
    """Delivers each completion id at most once to every channel.

    Each channel gets its own single-worker executor, so a slow channel (an
    audio device, a permission prompt) never delays another one or the
    caller. Failures are recorded and reported, never retried. `clear` runs
    on the caller's thread and must stay non-blocking in every channel.
    """

    def __init__(
        self,
        channels: Sequence[SignalChannel],
        *,
        executor: Optional[concurrent.futures.Executor] = None,
        on_failure: Optional[FailureHandler] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._channels = tuple(channels)
        self._logger = logger or logging.getLogger("completion")
        self._on_failure = on_failure
        self._lock = threading.Lock()
        self._last_completion_id = 0
        self._cleared_through = 0
        self._active: Optional[Completion] = None
        self._failures: list[SignalChannelError] = []

        self._owned_executors: list[concurrent.futures.ThreadPoolExecutor] = []
        self._executors: dict[str, concurrent.futures.Executor] = {}
        for channel in self._channels:
            if executor is not None:
                self._executors[channel.name] = executor
                continue
            owned = concurrent.futures.ThreadPoolExecutor(
                max_workers=1,
                thread_name_prefix=f"completion-{channel.name}",
            )
            self._owned_executors.append(owned)
            self._executors[channel.name] = owned

    @property
    def channel_names(self) -> tuple[str, ...]:
        return tuple(channel.name for channel in self._channels)

    @property
    def active(self) -> Optional[Completion]:
        with self._lock:
            return self._active

    @property
    def failures(self) -> tuple[SignalChannelError, ...]:
        with self._lock:
            return tuple(self._failures)

    def signal(
        self,
        mode: str,
        *,
        completion_id: int,
        label: str = "",
        cycles_completed: int = 0,
    ) -> bool:
        """Dispatch `completion_id` to all channels; False if already signaled."""
        with self._lock:
            if completion_id <= self._last_completion_id:
                self._logger.debug("Ignoring repeated completion signal %d", completion_id)
                return False
            self._last_completion_id = completion_id
            completion = Completion(
                mode=mode,
                completion_id=completion_id,
                label=label,
                cycles_completed=cycles_completed,
            )
            self._active = completion

        self._logger.info(
            "Signaling completion %d for mode=%s via %s",
            completion_id,
            mode,
            ", ".join(self.channel_names) or "no channels",
        )
        for channel in self._channels:
            self._submit(channel, self._deliver, channel, completion)
        return True

    def clear(self) -> None:
        """Withdraw the active completion: stop the chime, lower the UI flag."""
        with self._lock:
            completion = self._active
            self._active = None
            if completion is None:
                return
            self._cleared_through = max(self._cleared_through, completion.completion_id)

        for channel in self._channels:
            try:
                channel.clear(completion)
            except SignalChannelError as error:
                self._record_failure(error)
            except Exception as error:
                self._record_failure(SignalChannelError(channel.name, f"clear failed: {error}"))

    def shutdown(self, wait: bool = True) -> None:
        self.clear()
        for executor in self._owned_executors:
            executor.shutdown(wait=wait, cancel_futures=not wait)

    def _submit(self, channel: SignalChannel, fn, *args) -> None:
        try:
            self._executors[channel.name].submit(fn, *args)
        except RuntimeError as error:
            # Executor already shut down.
            self._record_failure(SignalChannelError(channel.name, f"not dispatched: {error}"))

    def _deliver(self, channel: SignalChannel, completion: Completion) -> None:
        with self._lock:
            if completion.completion_id <= self._cleared_through:
                self._logger.debug(
                    "Skipping %s for cleared completion %d",
                    channel.name,
                    completion.completion_id,
                )
                return
        try:
            channel.deliver(completion)
        except SignalChannelError as error:
            self._record_failure(error)
        except Exception as error:
            self._record_failure(SignalChannelError(channel.name, str(error)))

    def _record_failure(self, error: SignalChannelError) -> None:
        with self._lock:
            self._failures.append(error)
        self._logger.warning("Completion channel failed: %s", error)
        if self._on_failure is None:
            return
        try:
            self._on_failure(error)
        except Exception:
            self._logger.exception("Completion failure handler raised")
