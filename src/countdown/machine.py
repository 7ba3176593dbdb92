"""Thread-safe countdown state machine driven by an absolute deadline."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from .clock import DeadlineClock
from .constants import (
    ACTION_CLOSE,
    ACTION_COMPLETED,
    ACTION_TICK,
    COMMAND_ACKNOWLEDGE,
    COMMAND_PAUSE,
    COMMAND_RESET,
    COMMAND_START,
    COMMAND_SWITCH_MODE,
    MODE_FOCUS,
    REASON_ACKNOWLEDGED,
    REASON_ALREADY_RUNNING,
    REASON_AWAITING_ACKNOWLEDGEMENT,
    REASON_CLOSED,
    REASON_COMPLETED,
    REASON_MODE_SWITCHED,
    REASON_NOT_COMPLETED,
    REASON_NOT_RUNNING,
    REASON_PAUSED,
    REASON_RESET,
    REASON_RESUMED,
    REASON_STARTED,
    REASON_TICK,
    REASON_UNSUPPORTED_COMMAND,
    STATUS_COMPLETED,
    STATUS_IDLE,
    STATUS_PAUSED,
    STATUS_RUNNING,
)
from .contracts import CompletionSignalerLike, CycleStoreLike
from .errors import PersistenceError, SignalChannelError
from .modes import ModeSpec, ModeTable

TimerStatus = Literal["idle", "running", "paused", "completed"]


@dataclass(frozen=True)
class TimerSnapshot:
    """Immutable timer state exposed to the runtime and UI publishers."""
    mode: str
    remaining_seconds: int
    status: TimerStatus
    label: str = ""
    duration_seconds: int = 0
    cycles_completed: int = 0

    @property
    def is_running(self) -> bool:
        return self.status == STATUS_RUNNING

    @property
    def progress(self) -> float:
        """Elapsed fraction of the current mode's duration, in [0, 1]."""
        if self.duration_seconds <= 0:
            return 1.0 if self.status == STATUS_COMPLETED else 0.0
        elapsed = self.duration_seconds - self.remaining_seconds
        return min(1.0, max(0.0, elapsed / self.duration_seconds))


@dataclass(frozen=True)
class TimerEvent:
    """State-change notification pushed to subscribers after every transition."""
    action: str
    accepted: bool
    reason: str
    snapshot: TimerSnapshot
    completed: bool = False


TimerListener = Callable[[TimerEvent], None]


class TimerStateMachine:
    """Single-countdown state machine; all transitions run under one lock.

    Time never advances inside the machine. Callers poll `tick()` at any
    cadence; remaining time is recomputed from the armed deadline on every
    poll, and completion fires on the first poll at or after the deadline.
    """

    def __init__(
        self,
        *,
        modes: Optional[ModeTable] = None,
        signaler: Optional[CompletionSignalerLike] = None,
        cycle_store: Optional[CycleStoreLike] = None,
        clock: Optional[DeadlineClock] = None,
        initial_mode: str = MODE_FOCUS,
        logger: Optional[logging.Logger] = None,
    ):
        self._modes = modes or ModeTable.default()
        self._clock = clock or DeadlineClock()
        self._signaler = signaler
        self._cycle_store = cycle_store
        self._logger = logger or logging.getLogger("countdown")
        self._lock = threading.Lock()
        self._listeners: list[TimerListener] = []

        self._mode = self._modes.get(initial_mode).mode_id
        self._status: TimerStatus = STATUS_IDLE
        self._remaining_seconds = self._modes.duration_of(self._mode)
        self._deadline: Optional[float] = None
        self._armed_mode: Optional[str] = None
        self._run_id = 0
        self._last_completion_id = 0
        self._closed = False
        self._cycles = self._load_cycles()
        self._persist_lock = threading.Lock()
        self._persisted_cycles = self._cycles

    @property
    def modes(self) -> ModeTable:
        return self._modes

    @property
    def cycles_completed(self) -> int:
        with self._lock:
            return self._cycles

    @property
    def is_closed(self) -> bool:
        with self._lock:
            return self._closed

    def snapshot(self) -> TimerSnapshot:
        with self._lock:
            return self._snapshot_locked(self._clock.now())

    def subscribe(self, listener: TimerListener) -> Callable[[], None]:
        """Register a push listener; returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> TimerSnapshot:
        return self.apply(COMMAND_START).snapshot

    def pause(self) -> TimerSnapshot:
        return self.apply(COMMAND_PAUSE).snapshot

    def reset(self) -> TimerSnapshot:
        return self.apply(COMMAND_RESET).snapshot

    def switch_mode(self, mode_id: str) -> TimerSnapshot:
        return self.apply(COMMAND_SWITCH_MODE, mode=mode_id).snapshot

    def acknowledge_completion(self) -> TimerSnapshot:
        return self.apply(COMMAND_ACKNOWLEDGE).snapshot

    def apply(self, command: str, *, mode: Optional[str] = None) -> TimerEvent:
        """Run a command and return the resulting event.

        Raises InvalidModeError for `switch_mode` with an unknown mode before
        any state is touched. Every other command is total: inapplicable
        commands come back with `accepted=False` and leave state unchanged.
        """
        target: Optional[ModeSpec] = None
        if command == COMMAND_SWITCH_MODE:
            target = self._modes.get(mode)  # type: ignore[arg-type]

        with self._lock:
            now = self._clock.now()
            if self._closed:
                return self._event_locked(command, False, REASON_CLOSED, now)

            if command == COMMAND_START:
                event = self._start_locked(now)
            elif command == COMMAND_PAUSE:
                event = self._pause_locked(now)
            elif command == COMMAND_RESET:
                event = self._reset_locked(now)
            elif command == COMMAND_SWITCH_MODE and target is not None:
                event = self._switch_mode_locked(now, target)
            elif command == COMMAND_ACKNOWLEDGE:
                event = self._acknowledge_locked(now)
            else:
                return self._event_locked(command, False, REASON_UNSUPPORTED_COMMAND, now)
            listeners = tuple(self._listeners)

        self._after_transition(listeners, event)
        return event

    def tick(self, now: Optional[float] = None) -> Optional[TimerEvent]:
        """Reconcile state against `now`; returns an event only when it changed."""
        with self._lock:
            if now is None:
                now = self._clock.now()
            event = self._tick_locked(now)
            listeners = tuple(self._listeners)

        if event is not None:
            self._after_transition(listeners, event)
        return event

    def close(self) -> TimerSnapshot:
        """Release the armed deadline and drop listeners; later calls are no-ops."""
        with self._lock:
            now = self._clock.now()
            if self._closed:
                return self._snapshot_locked(now)

            if self._status == STATUS_RUNNING:
                self._remaining_seconds = self._running_remaining_locked(now)
                self._status = STATUS_PAUSED
            elif self._status == STATUS_COMPLETED:
                self._clear_signal_locked()
            self._clear_deadline_locked()
            self._closed = True
            event = self._event_locked(ACTION_CLOSE, True, REASON_CLOSED, now)
            listeners = tuple(self._listeners)
            self._listeners.clear()

        self._logger.debug("Timer closed: mode=%s", event.snapshot.mode)
        self._notify(listeners, event)
        return event.snapshot

    def __enter__(self) -> "TimerStateMachine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _start_locked(self, now: float) -> TimerEvent:
        if self._status == STATUS_RUNNING:
            return self._event_locked(COMMAND_START, False, REASON_ALREADY_RUNNING, now)
        if self._status == STATUS_COMPLETED:
            return self._event_locked(
                COMMAND_START,
                False,
                REASON_AWAITING_ACKNOWLEDGEMENT,
                now,
            )

        resumed = self._status == STATUS_PAUSED
        self._deadline = self._clock.arm(self._remaining_seconds, now)
        self._armed_mode = self._mode
        self._run_id += 1
        self._status = STATUS_RUNNING
        self._logger.info(
            "Timer %s: mode=%s remaining=%ss",
            "resumed" if resumed else "started",
            self._mode,
            self._remaining_seconds,
        )
        reason = REASON_RESUMED if resumed else REASON_STARTED
        return self._event_locked(COMMAND_START, True, reason, now)

    def _pause_locked(self, now: float) -> TimerEvent:
        if self._status != STATUS_RUNNING or self._deadline is None:
            return self._event_locked(COMMAND_PAUSE, False, REASON_NOT_RUNNING, now)

        # A pause observed at or after the deadline is the expiry observation.
        if self._clock.is_expired(self._deadline, now):
            return self._complete_locked(now)

        self._remaining_seconds = self._running_remaining_locked(now)
        self._clear_deadline_locked()
        self._status = STATUS_PAUSED
        self._logger.info(
            "Timer paused: mode=%s remaining=%ss",
            self._mode,
            self._remaining_seconds,
        )
        return self._event_locked(COMMAND_PAUSE, True, REASON_PAUSED, now)

    def _reset_locked(self, now: float) -> TimerEvent:
        previous = self._status
        self._enter_idle_locked(self._mode)
        if previous == STATUS_COMPLETED:
            self._clear_signal_locked()
        self._logger.info("Timer reset: mode=%s", self._mode)
        return self._event_locked(COMMAND_RESET, True, REASON_RESET, now)

    def _switch_mode_locked(self, now: float, target: ModeSpec) -> TimerEvent:
        previous_status = self._status
        previous_mode = self._mode
        if previous_status == STATUS_RUNNING and previous_mode == MODE_FOCUS:
            self._logger.info("Focus session abandoned by mode switch; cycle not counted")

        self._enter_idle_locked(target.mode_id)
        if previous_status == STATUS_COMPLETED:
            self._clear_signal_locked()
        self._logger.info("Mode switched: %s -> %s", previous_mode, self._mode)
        return self._event_locked(COMMAND_SWITCH_MODE, True, REASON_MODE_SWITCHED, now)

    def _acknowledge_locked(self, now: float) -> TimerEvent:
        if self._status != STATUS_COMPLETED:
            return self._event_locked(COMMAND_ACKNOWLEDGE, False, REASON_NOT_COMPLETED, now)

        self._enter_idle_locked(self._mode)
        self._clear_signal_locked()
        self._logger.info("Completion acknowledged: mode=%s", self._mode)
        return self._event_locked(COMMAND_ACKNOWLEDGE, True, REASON_ACKNOWLEDGED, now)

    def _tick_locked(self, now: float) -> Optional[TimerEvent]:
        if self._closed or self._status != STATUS_RUNNING or self._deadline is None:
            return None
        if self._armed_mode != self._mode:
            self._logger.warning(
                "Ignoring tick for stale deadline: armed=%s current=%s",
                self._armed_mode,
                self._mode,
            )
            return None

        if self._clock.is_expired(self._deadline, now):
            return self._complete_locked(now)

        remaining = self._running_remaining_locked(now)
        if remaining == self._remaining_seconds:
            return None
        self._remaining_seconds = remaining
        return self._event_locked(ACTION_TICK, True, REASON_TICK, now)

    def _complete_locked(self, now: float) -> TimerEvent:
        mode = self._mode
        completion_id = self._run_id
        self._status = STATUS_COMPLETED
        self._remaining_seconds = 0
        self._clear_deadline_locked()

        if completion_id <= self._last_completion_id:
            self._logger.warning("Completion %d already signaled", completion_id)
            return self._event_locked(ACTION_COMPLETED, False, REASON_COMPLETED, now)
        self._last_completion_id = completion_id

        if mode == MODE_FOCUS:
            self._cycles += 1
        self._logger.info(
            "Timer completed: mode=%s cycles_completed=%d",
            mode,
            self._cycles,
        )
        self._signal_locked(mode, completion_id)

        return TimerEvent(
            action=ACTION_COMPLETED,
            accepted=True,
            reason=REASON_COMPLETED,
            snapshot=self._snapshot_locked(now),
            completed=True,
        )

    def _enter_idle_locked(self, mode_id: str) -> None:
        self._mode = mode_id
        self._status = STATUS_IDLE
        self._remaining_seconds = self._modes.duration_of(mode_id)
        self._clear_deadline_locked()

    def _clear_deadline_locked(self) -> None:
        self._deadline = None
        self._armed_mode = None

    def _signal_locked(self, mode: str, completion_id: int) -> None:
        if self._signaler is None:
            return
        try:
            self._signaler.signal(
                mode,
                completion_id=completion_id,
                label=self._modes.label_of(mode),
                cycles_completed=self._cycles,
            )
        except SignalChannelError as error:
            self._logger.warning("Completion signal failed: %s", error)

    def _clear_signal_locked(self) -> None:
        if self._signaler is None:
            return
        try:
            self._signaler.clear()
        except SignalChannelError as error:
            self._logger.warning("Clearing completion signal failed: %s", error)

    def _load_cycles(self) -> int:
        if self._cycle_store is None:
            return 0
        try:
            return max(0, int(self._cycle_store.load()))
        except PersistenceError as error:
            self._logger.warning("Failed to load cycle counter, starting at 0: %s", error)
            return 0

    def _after_transition(self, listeners: tuple[TimerListener, ...], event: TimerEvent) -> None:
        if event.completed and event.snapshot.mode == MODE_FOCUS:
            self._persist_cycles(event.snapshot.cycles_completed)
        self._notify(listeners, event)

    def _persist_cycles(self, value: int) -> None:
        if self._cycle_store is None:
            return
        # Runs outside the state lock; never overwrite a newer count with an older one.
        with self._persist_lock:
            if value <= self._persisted_cycles:
                return
            try:
                self._cycle_store.save(value)
            except PersistenceError as error:
                self._logger.warning(
                    "Failed to persist cycle counter (in-memory value %d kept): %s",
                    value,
                    error,
                )
                return
            self._persisted_cycles = value

    def _event_locked(
        self,
        action: str,
        accepted: bool,
        reason: str,
        now: float,
    ) -> TimerEvent:
        return TimerEvent(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self._snapshot_locked(now),
        )

    def _snapshot_locked(self, now: float) -> TimerSnapshot:
        spec = self._modes.get(self._mode)
        return TimerSnapshot(
            mode=spec.mode_id,
            remaining_seconds=self._current_remaining_locked(now),
            status=self._status,
            label=spec.label,
            duration_seconds=spec.duration_seconds,
            cycles_completed=self._cycles,
        )

    def _current_remaining_locked(self, now: float) -> int:
        if self._status == STATUS_RUNNING:
            return self._running_remaining_locked(now)
        return self._remaining_seconds

    def _running_remaining_locked(self, now: float) -> int:
        if self._deadline is None:
            return self._remaining_seconds
        # Never report more than the last observed value, even if `now` regresses.
        return min(
            self._remaining_seconds,
            self._clock.remaining(self._deadline, now),
        )

    def _notify(self, listeners: tuple[TimerListener, ...], event: TimerEvent) -> None:
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                self._logger.exception("Timer listener failed for %s", event.action)
