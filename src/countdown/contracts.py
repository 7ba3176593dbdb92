"""Protocols for collaborators driven by the timer state machine."""

from __future__ import annotations

from typing import Protocol


class CompletionSignalerLike(Protocol):
    """Fan-out target invoked once per running-to-completed transition."""
    def signal(
        self,
        mode: str,
        *,
        completion_id: int,
        label: str = "",
        cycles_completed: int = 0,
    ) -> bool:
        ...

    def clear(self) -> None:
        ...


class CycleStoreLike(Protocol):
    """Durable slot holding the completed focus-cycle counter."""
    def load(self) -> int:
        ...

    def increment(self) -> int:
        ...

    def save(self, value: int) -> None:
        ...
