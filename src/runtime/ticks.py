"""Event handlers that publish timer updates and completion state to the UI."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from contracts.ui_protocol import (
    STATE_COMPLETED,
    STATE_IDLE,
    STATE_PAUSED,
    STATE_RUNNING,
)
from countdown import TimerEvent, TimerSnapshot, cycle_position, suggest_next_mode
from countdown.constants import (
    ACTION_TICK,
    STATUS_COMPLETED,
    STATUS_PAUSED,
    STATUS_RUNNING,
)
from countdown.modes import ModeTable

from .messages import completion_message, cycle_summary, rejection_text, status_message
from .ui import RuntimeUIPublisher

_STATUS_TO_UI_STATE = {
    STATUS_RUNNING: STATE_RUNNING,
    STATUS_PAUSED: STATE_PAUSED,
    STATUS_COMPLETED: STATE_COMPLETED,
}


@dataclass(frozen=True)
class TickDependencies:
    """Dependencies required for publishing timer events."""
    logger: logging.Logger
    ui: RuntimeUIPublisher
    modes: ModeTable
    long_break_interval: int


class TickProcessor:
    """Turns timer events into `timer` and `state_update` UI events."""
    def __init__(self, dependencies: TickDependencies):
        self._dependencies = dependencies

    def handle_timer_event(self, event: TimerEvent) -> None:
        deps = self._dependencies
        snapshot = event.snapshot
        if event.completed:
            self._handle_completion(event)
            return

        if event.action == ACTION_TICK:
            deps.ui.publish_timer_update(
                snapshot,
                action=event.action,
                accepted=True,
                reason=event.reason,
                **self._cycle_fields(snapshot),
            )
            return

        message = (
            status_message(snapshot)
            if event.accepted
            else rejection_text(event.action, event.reason)
        )
        deps.ui.publish_timer_update(
            snapshot,
            action=event.action,
            accepted=event.accepted,
            reason=event.reason,
            message=message,
            **self._cycle_fields(snapshot),
        )
        deps.ui.publish_state(ui_state_for(snapshot), message=status_message(snapshot))

    def _cycle_fields(self, snapshot: TimerSnapshot) -> dict[str, int]:
        interval = self._dependencies.long_break_interval
        return {
            "cycle_position": cycle_position(snapshot.cycles_completed, interval),
            "long_break_interval": interval,
        }

    def _handle_completion(self, event: TimerEvent) -> None:
        deps = self._dependencies
        snapshot = event.snapshot
        suggested = suggest_next_mode(
            snapshot.mode,
            snapshot.cycles_completed,
            deps.long_break_interval,
        )
        suggested_label = deps.modes.label_of(suggested) if suggested in deps.modes else ""
        message = completion_message(snapshot, suggested_label)
        cycle_fields = self._cycle_fields(snapshot)
        deps.logger.info(
            "%s (%s)",
            message,
            cycle_summary(
                snapshot.cycles_completed,
                cycle_fields["cycle_position"],
                deps.long_break_interval,
            ),
        )
        deps.ui.publish_timer_update(
            snapshot,
            action=event.action,
            accepted=True,
            reason=event.reason,
            message=message,
            suggested_mode=suggested,
            **cycle_fields,
        )
        deps.ui.publish_state(STATE_COMPLETED, message=message)


def ui_state_for(snapshot: TimerSnapshot) -> str:
    return _STATUS_TO_UI_STATE.get(snapshot.status, STATE_IDLE)
