import logging
import os
import sys
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

from app_config import (
    AppConfigurationError,
    load_app_config,
    resolve_config_path,
)
from app_config_parser import log_level_value


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _load(content: str):
    with tempfile.TemporaryDirectory() as temp_dir:
        config_path = Path(temp_dir) / "config.toml"
        _write_text(config_path, textwrap.dedent(content).strip())
        return load_app_config(str(config_path))


class AppConfigLoadingTests(unittest.TestCase):
    def test_load_app_config_resolves_relative_paths(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            config_path = root / "config.toml"
            _write_text(
                config_path,
                textwrap.dedent(
                    """
                    [storage]
                    cycle_file = "state/cycles.txt"

                    [ui_server]
                    index_file = "web/index.html"
                    """
                ).strip(),
            )

            app_config = load_app_config(str(config_path))

            self.assertEqual(str(config_path), app_config.source_file)
            self.assertEqual(
                str((root / "state/cycles.txt").resolve()),
                app_config.storage.cycle_file,
            )
            self.assertEqual(
                str((root / "web/index.html").resolve()),
                app_config.ui_server.index_file,
            )

    def test_empty_config_uses_defaults(self) -> None:
        app_config = _load("")

        durations = {mode.mode_id: mode.duration_seconds for mode in app_config.modes}
        self.assertEqual(
            {"focus": 1500, "short_break": 300, "long_break": 900},
            durations,
        )
        self.assertEqual(4, app_config.cycles.long_break_interval)
        self.assertFalse(app_config.cycles.auto_advance)
        self.assertTrue(app_config.storage.enabled)
        self.assertEqual("", app_config.storage.cycle_file)
        self.assertEqual(0.25, app_config.runtime.tick_interval_seconds)
        self.assertEqual("boottime", app_config.runtime.clock)
        self.assertIsNone(app_config.chime.output_device)
        self.assertEqual(8765, app_config.ui_server.port)

    def test_mode_overrides(self) -> None:
        app_config = _load(
            """
            [modes.focus]
            label = "Deep work"
            duration_seconds = 3000

            [modes.long_break]
            duration_seconds = 1200
            """
        )
        modes = {mode.mode_id: mode for mode in app_config.modes}
        self.assertEqual("Deep work", modes["focus"].label)
        self.assertEqual(3000, modes["focus"].duration_seconds)
        self.assertEqual(1200, modes["long_break"].duration_seconds)
        self.assertEqual("Long break", modes["long_break"].label)

    def test_unknown_mode_is_rejected(self) -> None:
        with self.assertRaises(AppConfigurationError) as context:
            _load(
                """
                [modes.nap]
                duration_seconds = 60
                """
            )
        self.assertIn("nap", str(context.exception))

    def test_invalid_values_are_rejected(self) -> None:
        cases = {
            "modes.focus.duration_seconds": "[modes.focus]\nduration_seconds = -5",
            "cycles.long_break_interval": "[cycles]\nlong_break_interval = 0",
            "chime.volume": "[chime]\nvolume = 2.0",
            "chime.repeats": "[chime]\nrepeats = true",
            "runtime.tick_interval_seconds": "[runtime]\ntick_interval_seconds = 10",
            "runtime.clock": "[runtime]\nclock = 'sundial'",
            "runtime.log_level": "[runtime]\nlog_level = 'LOUD'",
            "notification.enabled": "[notification]\nenabled = 'maybe'",
            "[cycles]": "cycles = 3",
        }
        for field, content in cases.items():
            with self.subTest(field=field):
                with self.assertRaises(AppConfigurationError) as context:
                    _load(content)
                self.assertIn(field, str(context.exception))

    def test_runtime_settings_are_normalized(self) -> None:
        app_config = _load(
            """
            [runtime]
            clock = "Monotonic"
            log_level = "debug"
            tick_interval_seconds = 1
            """
        )
        self.assertEqual("monotonic", app_config.runtime.clock)
        self.assertEqual("DEBUG", app_config.runtime.log_level)
        self.assertEqual(1.0, app_config.runtime.tick_interval_seconds)
        self.assertEqual(logging.DEBUG, log_level_value(app_config.runtime.log_level))

    def test_chime_output_device(self) -> None:
        app_config = _load("[chime]\noutput_device = 2")
        self.assertEqual(2, app_config.chime.output_device)

    def test_missing_config_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaisesRegex(AppConfigurationError, "not found"):
                load_app_config(str(Path(temp_dir) / "missing.toml"))

    def test_invalid_toml_raises(self) -> None:
        with self.assertRaisesRegex(AppConfigurationError, "TOML"):
            _load("[modes.focus\nduration_seconds = 1")

    def test_resolve_config_path_prefers_environment_variable(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "custom.toml"
            _write_text(config_path, "")
            with patch.dict(os.environ, {"APP_CONFIG_FILE": str(config_path)}):
                self.assertEqual(config_path, resolve_config_path())

    def test_resolve_config_path_uses_executable_dir_fallback_in_frozen_mode(self) -> None:
        with tempfile.TemporaryDirectory() as cwd_dir, tempfile.TemporaryDirectory() as exe_dir:
            cwd = Path(cwd_dir)
            executable_dir_config = Path(exe_dir) / "config.toml"
            _write_text(executable_dir_config, "[cycles]\nlong_break_interval = 3\n")
            executable = Path(exe_dir) / "main"

            with patch.dict(os.environ, {}, clear=True):
                with patch("app_config.Path.cwd", return_value=cwd):
                    with patch.object(sys, "frozen", True, create=True):
                        with patch.object(sys, "executable", str(executable), create=True):
                            resolved = resolve_config_path()

            self.assertEqual(executable_dir_config.resolve(), resolved)

    def test_shipped_config_file_loads(self) -> None:
        shipped = Path(__file__).resolve().parents[2] / "config.toml"
        app_config = load_app_config(str(shipped))
        self.assertEqual(3, len(app_config.modes))
        self.assertTrue(app_config.ui_server.enabled)


if __name__ == "__main__":
    unittest.main()
