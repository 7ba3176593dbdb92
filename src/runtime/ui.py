from __future__ import annotations

from typing import Any, Optional, Protocol

from completion import Completion
from contracts.ui_protocol import EVENT_COMPLETION, EVENT_ERROR, EVENT_TIMER, STATE_ERROR
from countdown import SignalChannelError, TimerSnapshot


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        ...


def snapshot_payload(snapshot: TimerSnapshot) -> dict[str, Any]:
    return {
        "mode": snapshot.mode,
        "label": snapshot.label,
        "status": snapshot.status,
        "duration_seconds": snapshot.duration_seconds,
        "remaining_seconds": snapshot.remaining_seconds,
        "progress": round(snapshot.progress, 4),
        "cycles_completed": snapshot.cycles_completed,
    }


class RuntimeUIPublisher:
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        if self._ui_server:
            self._ui_server.publish_state(state, message=message, **payload)

    def publish_timer_update(
        self,
        snapshot: TimerSnapshot,
        *,
        action: str,
        accepted: Optional[bool] = None,
        reason: str = "",
        message: Optional[str] = None,
        **extra: Any,
    ) -> None:
        payload: dict[str, Any] = {"action": action, **snapshot_payload(snapshot)}
        if accepted is not None:
            payload["accepted"] = accepted
        if reason:
            payload["reason"] = reason
        if message:
            payload["message"] = message
        payload.update(extra)
        self.publish(EVENT_TIMER, **payload)

    def publish_completion(self, completion: Completion, *, active: bool) -> None:
        self.publish(
            EVENT_COMPLETION,
            active=active,
            mode=completion.mode,
            label=completion.label,
            completion_id=completion.completion_id,
            cycles_completed=completion.cycles_completed,
        )

    def publish_error(self, message: str, **payload: Any) -> None:
        self.publish(EVENT_ERROR, state=STATE_ERROR, message=message, **payload)

    def publish_channel_failure(self, error: SignalChannelError) -> None:
        self.publish_error(f"Completion signal failed: {error}", channel=error.channel)
