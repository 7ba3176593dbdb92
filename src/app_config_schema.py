"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class ModeSettings:
    """Duration and label of one countdown mode from `[modes.<id>]`."""
    mode_id: str
    label: str
    duration_seconds: int


@dataclass(frozen=True)
class CycleSettings:
    """Focus-cycle bookkeeping from `[cycles]`."""
    long_break_interval: int = 4
    auto_advance: bool = False


@dataclass(frozen=True)
class StorageSettings:
    """Cycle counter persistence from `[storage]`."""
    enabled: bool = True
    cycle_file: str = ""


@dataclass(frozen=True)
class ChimeSettings:
    """Completion chime synthesis and output selection from `[chime]`."""
    enabled: bool = True
    frequency_hz: float = 880.0
    duration_seconds: float = 0.6
    repeats: int = 3
    gap_seconds: float = 0.25
    volume: float = 0.5
    sample_rate_hz: int = 44100
    output_device: Optional[int] = None


@dataclass(frozen=True)
class NotificationSettings:
    """Desktop notification settings from `[notification]`."""
    enabled: bool = True
    app_name: str = "Pomodoro"
    timeout_seconds: int = 10


@dataclass(frozen=True)
class RuntimeSettings:
    """Poll cadence, time source, and log level from `[runtime]`."""
    tick_interval_seconds: float = 0.25
    clock: str = "boottime"
    log_level: str = "INFO"


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    modes: tuple[ModeSettings, ...]
    cycles: CycleSettings = field(default_factory=CycleSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)
    chime: ChimeSettings = field(default_factory=ChimeSettings)
    notification: NotificationSettings = field(default_factory=NotificationSettings)
    runtime: RuntimeSettings = field(default_factory=RuntimeSettings)
    ui_server: UIServerSettings = field(default_factory=UIServerSettings)
    source_file: str = ""
