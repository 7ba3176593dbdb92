"""Runtime orchestration loop: drains UI commands and polls the timer."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Any, Mapping, Optional

from app_config import AppConfig
from completion import CompletionSignaler
from countdown import TimerStateMachine
from countdown.constants import ACTION_SYNC, REASON_STARTUP
from server import UIServer

from .command_dispatch import RuntimeCommandDispatcher
from .messages import status_message
from .ticks import TickDependencies, TickProcessor, ui_state_for
from .ui import RuntimeUIPublisher

_STOP = object()


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    app_config: AppConfig
    timer: TimerStateMachine
    ui: RuntimeUIPublisher
    signaler: Optional[CompletionSignaler] = None
    ui_server: Optional[UIServer] = None


class RuntimeEngine:
    """Single poller for the timer; commands are serialized through one queue.

    The loop waits on the command queue for at most one tick interval, then
    polls the timer. A late wakeup only delays the next observation; the
    timer's deadline arithmetic keeps the reported state correct.
    """
    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._timer = bootstrap.timer
        self._ui = bootstrap.ui
        self._tick_interval = bootstrap.app_config.runtime.tick_interval_seconds
        cycles = bootstrap.app_config.cycles

        self._dispatcher = RuntimeCommandDispatcher(
            logger=self._logger,
            timer=self._timer,
            ui=self._ui,
            long_break_interval=cycles.long_break_interval,
            auto_advance=cycles.auto_advance,
        )
        self._tick_processor = TickProcessor(
            TickDependencies(
                logger=self._logger,
                ui=self._ui,
                modes=self._timer.modes,
                long_break_interval=cycles.long_break_interval,
            )
        )
        self._commands: Queue[Any] = Queue()
        self._stop_requested = threading.Event()
        self._unsubscribe = self._timer.subscribe(self._tick_processor.handle_timer_event)

        if bootstrap.ui_server is not None:
            bootstrap.ui_server.set_command_handler(self.submit_command)

    @property
    def timer(self) -> TimerStateMachine:
        return self._timer

    def submit_command(self, payload: Mapping[str, Any]) -> None:
        """Queue a command frame; safe to call from any thread."""
        self._commands.put(dict(payload))

    def stop(self) -> None:
        self._stop_requested.set()
        self._commands.put(_STOP)

    def run(self) -> int:
        self._publish_startup_sync()
        try:
            while not self._stop_requested.is_set():
                self.run_once(self._tick_interval)
            return 0
        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            return 1
        finally:
            self._shutdown()

    def run_once(self, timeout: float = 0.0) -> None:
        """Handle at most one queued command, then poll the timer."""
        payload = self._poll_command(timeout)
        if payload is not None and payload is not _STOP:
            self._dispatcher.handle_command(payload)
        self._timer.tick()

    def _poll_command(self, timeout: float) -> Optional[Any]:
        try:
            if timeout <= 0:
                return self._commands.get_nowait()
            return self._commands.get(timeout=timeout)
        except Empty:
            return None

    def _publish_startup_sync(self) -> None:
        snapshot = self._timer.snapshot()
        self._ui.publish_timer_update(
            snapshot,
            action=ACTION_SYNC,
            accepted=True,
            reason=REASON_STARTUP,
            message=status_message(snapshot),
        )
        self._ui.publish_state(
            ui_state_for(snapshot),
            message=status_message(snapshot),
        )
        self._logger.info(
            "Ready: mode=%s cycles_completed=%d",
            snapshot.mode,
            snapshot.cycles_completed,
        )

    def _shutdown(self) -> None:
        self._unsubscribe()
        self._logger.info("Closing timer...")
        self._timer.close()

        signaler = self._bootstrap.signaler
        if signaler is not None:
            self._logger.info("Stopping completion signaler...")
            signaler.shutdown(wait=False)

        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            self._logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)
