"""Cycle counter persistence as a single non-negative integer in a text file."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from platformdirs import user_data_dir

from countdown.errors import PersistenceError

APP_NAME = "pomodoro-chime"
CYCLE_FILE_NAME = "cycles.txt"


def default_cycle_file() -> Path:
    return Path(user_data_dir(APP_NAME, appauthor=False)) / CYCLE_FILE_NAME


def _validate_value(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Cycle counter must be an integer, got: {value!r}")
    if value < 0:
        raise ValueError(f"Cycle counter must be >= 0, got: {value}")
    return value


class FileCycleStore:
    """Single writer of the persisted cycle counter."""

    def __init__(
        self,
        path: Optional[Path] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._path = Path(path) if path is not None else default_cycle_file()
        self._logger = logger or logging.getLogger("cycle_store")
        self._lock = threading.Lock()
        self._value: Optional[int] = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> int:
        with self._lock:
            self._value = self._read_locked()
            return self._value

    def increment(self) -> int:
        with self._lock:
            if self._value is None:
                self._value = self._read_locked()
            self._value += 1
            self._write_locked(self._value)
            return self._value

    def save(self, value: int) -> None:
        value = _validate_value(value)
        with self._lock:
            self._value = value
            self._write_locked(value)

    def _read_locked(self) -> int:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return 0
        except UnicodeDecodeError as error:
            raise PersistenceError(
                f"Cycle counter file {self._path} is corrupt: not UTF-8 text"
            ) from error
        except OSError as error:
            raise PersistenceError(
                f"Failed to read cycle counter from {self._path}: {error}"
            ) from error

        text = raw.strip()
        if not text:
            return 0
        try:
            value = int(text)
        except ValueError as error:
            raise PersistenceError(
                f"Cycle counter file {self._path} is corrupt: {text[:32]!r}"
            ) from error
        if value < 0:
            raise PersistenceError(
                f"Cycle counter file {self._path} holds a negative value: {value}"
            )
        return value

    def _write_locked(self, value: int) -> None:
        temp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(f"{value}\n", encoding="utf-8")
            os.replace(temp_path, self._path)
        except OSError as error:
            raise PersistenceError(
                f"Failed to write cycle counter to {self._path}: {error}"
            ) from error
        self._logger.debug("Persisted cycle counter %d to %s", value, self._path)


class InMemoryCycleStore:
    """Process-local counter used when durable storage is disabled."""

    def __init__(self, initial: int = 0):
        self._value = _validate_value(initial)
        self._lock = threading.Lock()

    def load(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def save(self, value: int) -> None:
        value = _validate_value(value)
        with self._lock:
            self._value = value
