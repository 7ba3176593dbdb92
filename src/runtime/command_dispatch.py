"""Dispatcher that executes UI command frames against the timer state machine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from contracts.command_contract import COMMAND_TOGGLE, RUNTIME_COMMANDS, canonical_command
from contracts.ui_protocol import FIELD_COMMAND, FIELD_MODE
from countdown import (
    InvalidModeError,
    TimerEvent,
    TimerStateMachine,
    suggest_next_mode,
)
from countdown.constants import (
    COMMAND_ACKNOWLEDGE,
    COMMAND_PAUSE,
    COMMAND_START,
    COMMAND_SWITCH_MODE,
    STATUS_RUNNING,
)

from .ui import RuntimeUIPublisher


class CommandError(ValueError):
    """Raised when an incoming command frame is malformed."""


@dataclass(frozen=True)
class TimerCommand:
    """Validated command frame."""
    command: str
    mode: Optional[str] = None


def parse_command(payload: Mapping[str, Any]) -> TimerCommand:
    raw_name = payload.get(FIELD_COMMAND)
    if not isinstance(raw_name, str) or not raw_name.strip():
        raise CommandError("Command frame requires a 'command' string")

    command = canonical_command(raw_name)
    if command not in RUNTIME_COMMANDS:
        raise CommandError(f"Unsupported command: {raw_name.strip()}")

    raw_mode = payload.get(FIELD_MODE)
    if command == COMMAND_SWITCH_MODE:
        if not isinstance(raw_mode, str) or not raw_mode.strip():
            raise CommandError("switch_mode requires a 'mode' string")
        return TimerCommand(command=command, mode=raw_mode.strip())
    return TimerCommand(command=command)


class RuntimeCommandDispatcher:
    """Routes UI commands to the timer; state changes reach the UI via subscription."""
    def __init__(
        self,
        *,
        logger: logging.Logger,
        timer: TimerStateMachine,
        ui: RuntimeUIPublisher,
        long_break_interval: int,
        auto_advance: bool = False,
    ):
        self._logger = logger
        self._timer = timer
        self._ui = ui
        self._long_break_interval = long_break_interval
        self._auto_advance = auto_advance

    def handle_command(self, payload: Mapping[str, Any]) -> Optional[TimerEvent]:
        try:
            command = parse_command(payload)
        except CommandError as error:
            self._logger.warning("Rejected UI command %r: %s", dict(payload), error)
            self._ui.publish_error(str(error))
            return None
        return self.execute(command)

    def execute(self, command: TimerCommand) -> Optional[TimerEvent]:
        name = command.command
        if name == COMMAND_TOGGLE:
            running = self._timer.snapshot().status == STATUS_RUNNING
            name = COMMAND_PAUSE if running else COMMAND_START

        try:
            event = self._timer.apply(name, mode=command.mode)
        except InvalidModeError as error:
            self._logger.warning("Rejected mode switch: %s", error)
            self._ui.publish_error(str(error), mode=command.mode)
            return None

        if not event.accepted:
            self._logger.debug("Command %s not applied: %s", name, event.reason)

        if name == COMMAND_ACKNOWLEDGE and event.accepted and self._auto_advance:
            return self._advance(event)
        return event

    def _advance(self, acknowledged: TimerEvent) -> TimerEvent:
        snapshot = acknowledged.snapshot
        next_mode = suggest_next_mode(
            snapshot.mode,
            snapshot.cycles_completed,
            self._long_break_interval,
        )
        if next_mode not in self._timer.modes:
            return acknowledged
        self._logger.info("Auto-advancing from %s to %s", snapshot.mode, next_mode)
        return self._timer.apply(COMMAND_SWITCH_MODE, mode=next_mode)
