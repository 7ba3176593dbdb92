"""Static mode table mapping mode identifiers to durations and labels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .constants import (
    DEFAULT_MODE_DURATIONS,
    DEFAULT_MODE_LABELS,
    MODE_FOCUS,
    MODE_IDS,
)
from .errors import InvalidModeError


@dataclass(frozen=True)
class ModeSpec:
    """Duration and display metadata for a single countdown mode."""
    mode_id: str
    label: str
    duration_seconds: int

    def __post_init__(self) -> None:
        if not self.mode_id:
            raise ValueError("mode_id cannot be empty")
        if isinstance(self.duration_seconds, bool) or not isinstance(
            self.duration_seconds, int
        ):
            raise ValueError(
                f"duration_seconds for {self.mode_id} must be an integer"
            )
        if self.duration_seconds < 0:
            raise ValueError(
                f"duration_seconds for {self.mode_id} must be >= 0, "
                f"got: {self.duration_seconds}"
            )


class ModeTable:
    """Immutable lookup of configured modes; always contains the focus mode."""

    def __init__(self, modes: Iterable[ModeSpec]):
        table: dict[str, ModeSpec] = {}
        for spec in modes:
            if spec.mode_id in table:
                raise ValueError(f"Duplicate mode: {spec.mode_id}")
            table[spec.mode_id] = spec
        if MODE_FOCUS not in table:
            raise ValueError(f"Mode table must define '{MODE_FOCUS}'")
        self._modes = table

    @classmethod
    def default(cls) -> "ModeTable":
        return cls(
            ModeSpec(
                mode_id=mode_id,
                label=DEFAULT_MODE_LABELS[mode_id],
                duration_seconds=DEFAULT_MODE_DURATIONS[mode_id],
            )
            for mode_id in MODE_IDS
        )

    @classmethod
    def from_settings(cls, settings) -> "ModeTable":
        return cls(
            ModeSpec(
                mode_id=item.mode_id,
                label=item.label,
                duration_seconds=item.duration_seconds,
            )
            for item in settings
        )

    @property
    def mode_ids(self) -> tuple[str, ...]:
        return tuple(self._modes)

    def get(self, mode_id: str) -> ModeSpec:
        try:
            return self._modes[mode_id]
        except (KeyError, TypeError):
            raise InvalidModeError(mode_id) from None

    def duration_of(self, mode_id: str) -> int:
        return self.get(mode_id).duration_seconds

    def label_of(self, mode_id: str) -> str:
        return self.get(mode_id).label

    def __contains__(self, mode_id: object) -> bool:
        try:
            return mode_id in self._modes
        except TypeError:
            return False

    def __iter__(self) -> Iterator[ModeSpec]:
        return iter(self._modes.values())

    def __len__(self) -> int:
        return len(self._modes)
