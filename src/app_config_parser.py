"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    ChimeSettings,
    CycleSettings,
    ModeSettings,
    NotificationSettings,
    RuntimeSettings,
    StorageSettings,
    UIServerSettings,
)
from countdown.clock import CLOCK_SOURCES
from countdown.constants import DEFAULT_MODE_DURATIONS, DEFAULT_MODE_LABELS, MODE_IDS

_ALLOWED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_MAX_TICK_INTERVAL_SECONDS = 5.0


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    return AppConfig(
        modes=_parse_modes(_section(raw, "modes")),
        cycles=_parse_cycle_settings(_section(raw, "cycles")),
        storage=_parse_storage_settings(_section(raw, "storage"), base_dir=base_dir),
        chime=_parse_chime_settings(_section(raw, "chime")),
        notification=_parse_notification_settings(_section(raw, "notification")),
        runtime=_parse_runtime_settings(_section(raw, "runtime")),
        ui_server=_parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir),
        source_file=source_file,
    )


def _parse_modes(section: Mapping[str, Any]) -> tuple[ModeSettings, ...]:
    unknown = sorted(set(section) - set(MODE_IDS))
    if unknown:
        allowed = ", ".join(MODE_IDS)
        raise AppConfigurationError(
            f"Unknown mode(s) in [modes]: {', '.join(unknown)}. Allowed: {allowed}."
        )

    modes = []
    for mode_id in MODE_IDS:
        mode_raw = _section(section, mode_id, parent="modes")
        field_prefix = f"modes.{mode_id}"
        duration = _as_int(
            mode_raw.get("duration_seconds", DEFAULT_MODE_DURATIONS[mode_id]),
            f"{field_prefix}.duration_seconds",
        )
        if duration < 0:
            raise AppConfigurationError(f"{field_prefix}.duration_seconds must be >= 0.")
        label = _as_str(
            mode_raw.get("label", DEFAULT_MODE_LABELS[mode_id]),
            f"{field_prefix}.label",
        )
        modes.append(
            ModeSettings(
                mode_id=mode_id,
                label=label or DEFAULT_MODE_LABELS[mode_id],
                duration_seconds=duration,
            )
        )
    return tuple(modes)


def _parse_cycle_settings(section: Mapping[str, Any]) -> CycleSettings:
    interval = _as_int(
        section.get("long_break_interval", 4),
        "cycles.long_break_interval",
    )
    if interval < 1:
        raise AppConfigurationError("cycles.long_break_interval must be >= 1.")
    return CycleSettings(
        long_break_interval=interval,
        auto_advance=_as_bool(section.get("auto_advance", False), "cycles.auto_advance"),
    )


def _parse_storage_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> StorageSettings:
    cycle_file = _as_str(section.get("cycle_file", ""), "storage.cycle_file")
    return StorageSettings(
        enabled=_as_bool(section.get("enabled", True), "storage.enabled"),
        cycle_file=_resolve_path(base_dir, cycle_file),
    )


def _parse_chime_settings(section: Mapping[str, Any]) -> ChimeSettings:
    volume = _as_float(section.get("volume", 0.5), "chime.volume")
    if not 0.0 <= volume <= 1.0:
        raise AppConfigurationError("chime.volume must be in [0, 1].")
    settings = ChimeSettings(
        enabled=_as_bool(section.get("enabled", True), "chime.enabled"),
        frequency_hz=_as_float(section.get("frequency_hz", 880.0), "chime.frequency_hz"),
        duration_seconds=_as_float(
            section.get("duration_seconds", 0.6),
            "chime.duration_seconds",
        ),
        repeats=_as_int(section.get("repeats", 3), "chime.repeats"),
        gap_seconds=_as_float(section.get("gap_seconds", 0.25), "chime.gap_seconds"),
        volume=volume,
        sample_rate_hz=_as_int(
            section.get("sample_rate_hz", 44100),
            "chime.sample_rate_hz",
        ),
        output_device=(
            _as_int(section.get("output_device"), "chime.output_device")
            if "output_device" in section
            else None
        ),
    )
    if settings.frequency_hz <= 0:
        raise AppConfigurationError("chime.frequency_hz must be greater than zero.")
    if settings.duration_seconds <= 0:
        raise AppConfigurationError("chime.duration_seconds must be greater than zero.")
    if settings.repeats < 1:
        raise AppConfigurationError("chime.repeats must be >= 1.")
    if settings.gap_seconds < 0:
        raise AppConfigurationError("chime.gap_seconds must be >= 0.")
    if settings.sample_rate_hz <= 0:
        raise AppConfigurationError("chime.sample_rate_hz must be greater than zero.")
    return settings


def _parse_notification_settings(section: Mapping[str, Any]) -> NotificationSettings:
    timeout = _as_int(section.get("timeout_seconds", 10), "notification.timeout_seconds")
    if timeout < 0:
        raise AppConfigurationError("notification.timeout_seconds must be >= 0.")
    return NotificationSettings(
        enabled=_as_bool(section.get("enabled", True), "notification.enabled"),
        app_name=_as_str(section.get("app_name", "Pomodoro"), "notification.app_name")
        or "Pomodoro",
        timeout_seconds=timeout,
    )


def _parse_runtime_settings(section: Mapping[str, Any]) -> RuntimeSettings:
    interval = _as_float(
        section.get("tick_interval_seconds", 0.25),
        "runtime.tick_interval_seconds",
    )
    if not 0.0 < interval <= _MAX_TICK_INTERVAL_SECONDS:
        raise AppConfigurationError(
            f"runtime.tick_interval_seconds must be in (0, {_MAX_TICK_INTERVAL_SECONDS:g}]."
        )
    clock = _as_str(section.get("clock", "boottime"), "runtime.clock").lower()
    if clock not in CLOCK_SOURCES:
        allowed = ", ".join(sorted(CLOCK_SOURCES))
        raise AppConfigurationError(f"runtime.clock must be one of: {allowed}.")
    log_level = _as_str(section.get("log_level", "INFO"), "runtime.log_level").upper()
    if log_level not in _ALLOWED_LOG_LEVELS:
        allowed = ", ".join(_ALLOWED_LOG_LEVELS)
        raise AppConfigurationError(f"runtime.log_level must be one of: {allowed}.")
    return RuntimeSettings(
        tick_interval_seconds=interval,
        clock=clock,
        log_level=log_level,
    )


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        index_file=_resolve_path(base_dir, index_file),
    )


def log_level_value(name: str) -> int:
    """Map a validated log level name to its `logging` constant."""
    return logging.getLevelName(name.upper())


def _section(
    root: Mapping[str, Any],
    name: str,
    *,
    parent: Optional[str] = None,
) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        qualified = f"{parent}.{name}" if parent else name
        raise AppConfigurationError(f"[{qualified}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
