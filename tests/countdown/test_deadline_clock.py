import time
import unittest
from unittest.mock import patch

from countdown import DeadlineClock, resolve_time_source


class DeadlineClockTests(unittest.TestCase):
    def test_remaining_is_zero_at_and_after_deadline(self) -> None:
        deadline = DeadlineClock.arm(1500, 10.0)
        for k in (0, 0.4, 1, 60, 86_400):
            self.assertEqual(0, DeadlineClock.remaining(deadline, 1510.0 + k))

    def test_remaining_is_one_a_second_before_deadline(self) -> None:
        deadline = DeadlineClock.arm(1500, 10.0)
        self.assertEqual(1, DeadlineClock.remaining(deadline, 1509.0))

    def test_partial_seconds_round_up(self) -> None:
        deadline = DeadlineClock.arm(10, 0.0)
        self.assertEqual(10, DeadlineClock.remaining(deadline, 0.3))
        self.assertEqual(1, DeadlineClock.remaining(deadline, 9.999))

    def test_float_noise_does_not_add_a_second(self) -> None:
        deadline = 0.1 + 0.2 + 5
        self.assertEqual(5, DeadlineClock.remaining(deadline, 0.3))

    def test_is_expired(self) -> None:
        deadline = DeadlineClock.arm(5, 100.0)
        self.assertFalse(DeadlineClock.is_expired(deadline, 104.5))
        self.assertTrue(DeadlineClock.is_expired(deadline, 105.0))

    def test_arm_rejects_negative_duration(self) -> None:
        with self.assertRaises(ValueError):
            DeadlineClock.arm(-1, 0.0)

    def test_now_uses_injected_time_source(self) -> None:
        clock = DeadlineClock(lambda: 42.5)
        self.assertEqual(42.5, clock.now())


class ResolveTimeSourceTests(unittest.TestCase):
    def test_monotonic_and_wall_sources(self) -> None:
        self.assertIs(time.monotonic, resolve_time_source("monotonic"))
        self.assertIs(time.time, resolve_time_source("wall"))

    def test_boottime_falls_back_to_monotonic(self) -> None:
        with patch("countdown.clock.time") as mock_time:
            del mock_time.CLOCK_BOOTTIME
            source = resolve_time_source("boottime")
        self.assertIs(mock_time.monotonic, source)

    def test_boottime_reads_clock_gettime_when_available(self) -> None:
        with patch("countdown.clock.time") as mock_time:
            mock_time.CLOCK_BOOTTIME = 7
            mock_time.clock_gettime.return_value = 12.0
            source = resolve_time_source("boottime")
            self.assertEqual(12.0, source())
        mock_time.clock_gettime.assert_called_once_with(7)

    def test_unknown_source_raises(self) -> None:
        with self.assertRaisesRegex(ValueError, "clock must be one of"):
            resolve_time_source("sundial")


if __name__ == "__main__":
    unittest.main()
