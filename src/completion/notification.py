"""System notification signal channel backed by plyer."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from plyer import notification as plyer_notification

from countdown.constants import MODE_FOCUS
from countdown.errors import SignalChannelError

from .contracts import Completion

DEFAULT_APP_NAME = "Pomodoro"


def notification_text(completion: Completion) -> tuple[str, str]:
    """Return the (title, message) pair shown for a completion."""
    if completion.mode == MODE_FOCUS:
        cycles = completion.cycles_completed
        noun = "cycle" if cycles == 1 else "cycles"
        return "Time is up!", f"Take a breath. {cycles} focus {noun} completed."
    label = completion.label or "Break"
    return "Time is up!", f"{label} is over. Ready to focus again?"


class NotificationChannel:
    """Shows a desktop notification; unsupported platforms fail the channel only."""

    name = "notification"

    def __init__(
        self,
        *,
        app_name: str = DEFAULT_APP_NAME,
        timeout_seconds: int = 10,
        notify_fn: Optional[Callable[..., Any]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._app_name = app_name
        self._timeout_seconds = timeout_seconds
        self._notify = notify_fn or plyer_notification.notify
        self._logger = logger or logging.getLogger("completion")

    @classmethod
    def from_settings(
        cls,
        settings,
        logger: Optional[logging.Logger] = None,
    ) -> "NotificationChannel":
        return cls(
            app_name=settings.app_name,
            timeout_seconds=settings.timeout_seconds,
            logger=logger,
        )

    def deliver(self, completion: Completion) -> None:
        title, message = notification_text(completion)
        try:
            self._notify(
                title=title,
                message=message,
                app_name=self._app_name,
                timeout=self._timeout_seconds,
            )
        except NotImplementedError as error:
            raise SignalChannelError(
                self.name,
                "system notifications are not supported on this platform",
            ) from error
        except Exception as error:
            raise SignalChannelError(self.name, f"notification failed: {error}") from error
        self._logger.debug("Notification shown: %s", title)

    def clear(self, completion: Completion) -> None:
        # Desktop notifications expire on their own.
        del completion
