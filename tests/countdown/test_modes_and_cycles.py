import unittest
from types import SimpleNamespace

from countdown import (
    InvalidModeError,
    ModeSpec,
    ModeTable,
    cycle_position,
    suggest_next_mode,
)


class ModeTableTests(unittest.TestCase):
    def test_default_table_has_standard_modes(self) -> None:
        table = ModeTable.default()
        self.assertEqual(("focus", "short_break", "long_break"), table.mode_ids)
        self.assertEqual(1500, table.duration_of("focus"))
        self.assertEqual(300, table.duration_of("short_break"))
        self.assertEqual(900, table.duration_of("long_break"))
        self.assertEqual(3, len(table))

    def test_from_settings_uses_configured_values(self) -> None:
        table = ModeTable.from_settings(
            [
                SimpleNamespace(mode_id="focus", label="Deep work", duration_seconds=3000),
                SimpleNamespace(mode_id="short_break", label="Stretch", duration_seconds=120),
            ]
        )
        self.assertEqual("Deep work", table.label_of("focus"))
        self.assertEqual(120, table.duration_of("short_break"))
        self.assertNotIn("long_break", table)

    def test_unknown_mode_raises_invalid_mode_error(self) -> None:
        table = ModeTable.default()
        with self.assertRaises(InvalidModeError):
            table.duration_of("nap")
        with self.assertRaises(InvalidModeError):
            table.get(None)  # type: ignore[arg-type]
        self.assertNotIn(["focus"], table)

    def test_table_requires_focus_mode(self) -> None:
        with self.assertRaises(ValueError):
            ModeTable([ModeSpec("short_break", "Short break", 300)])

    def test_table_rejects_duplicate_modes(self) -> None:
        with self.assertRaises(ValueError):
            ModeTable([ModeSpec("focus", "A", 1), ModeSpec("focus", "B", 2)])

    def test_mode_spec_rejects_invalid_durations(self) -> None:
        for duration in (-1, 1.5, True):
            with self.subTest(duration=duration):
                with self.assertRaises(ValueError):
                    ModeSpec("focus", "Focus", duration)  # type: ignore[arg-type]


class CycleHelperTests(unittest.TestCase):
    def test_cycle_position_wraps_at_interval(self) -> None:
        self.assertEqual(0, cycle_position(0, 4))
        self.assertEqual(3, cycle_position(3, 4))
        self.assertEqual(0, cycle_position(4, 4))
        self.assertEqual(1, cycle_position(9, 4))

    def test_cycle_position_rejects_invalid_interval(self) -> None:
        with self.assertRaises(ValueError):
            cycle_position(3, 0)

    def test_suggest_next_mode(self) -> None:
        self.assertEqual("short_break", suggest_next_mode("focus", 1, 4))
        self.assertEqual("short_break", suggest_next_mode("focus", 3, 4))
        self.assertEqual("long_break", suggest_next_mode("focus", 4, 4))
        self.assertEqual("long_break", suggest_next_mode("focus", 8, 4))
        self.assertEqual("focus", suggest_next_mode("short_break", 4, 4))
        self.assertEqual("focus", suggest_next_mode("long_break", 4, 4))

    def test_suggest_next_mode_never_starts_with_long_break(self) -> None:
        self.assertEqual("short_break", suggest_next_mode("focus", 0, 4))


if __name__ == "__main__":
    unittest.main()
