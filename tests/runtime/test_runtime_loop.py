import logging
import unittest

from app_config import AppConfig, CycleSettings
from countdown import DeadlineClock, ModeSpec, ModeTable, TimerStateMachine
from runtime import RuntimeBootstrap, RuntimeEngine
from runtime.ui import RuntimeUIPublisher


class _FakeTime:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _UIServerStub:
    def __init__(self):
        self.events: list[tuple[str, dict[str, object]]] = []
        self.states: list[tuple[str, str | None]] = []
        self.command_handler = None
        self.stopped = False

    def publish(self, event_type: str, **payload):
        self.events.append((event_type, payload))

    def publish_state(self, state: str, *, message=None, **payload):
        self.states.append((state, message))

    def set_command_handler(self, handler) -> None:
        self.command_handler = handler

    def stop(self, timeout_seconds: float = 5.0) -> None:
        self.stopped = True


class _SignalerStub:
    def __init__(self):
        self.signals = []
        self.shutdowns = 0

    def signal(self, mode, *, completion_id, label, cycles_completed) -> bool:
        self.signals.append((mode, completion_id))
        return True

    def clear(self) -> None:
        pass

    def shutdown(self, wait: bool = True) -> None:
        self.shutdowns += 1


class RuntimeEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.time = _FakeTime()
        self.server = _UIServerStub()
        self.signaler = _SignalerStub()
        self.timer = TimerStateMachine(
            modes=ModeTable(
                [
                    ModeSpec("focus", "Focus", 60),
                    ModeSpec("short_break", "Short break", 30),
                ]
            ),
            signaler=self.signaler,
            clock=DeadlineClock(self.time),
        )
        self.engine = RuntimeEngine(
            RuntimeBootstrap(
                logger=logging.getLogger("test.runtime"),
                app_config=AppConfig(modes=(), cycles=CycleSettings(long_break_interval=2)),
                timer=self.timer,
                ui=RuntimeUIPublisher(self.server),
                signaler=self.signaler,
                ui_server=self.server,
            )
        )

    def _timer_events(self) -> list[dict[str, object]]:
        return [payload for kind, payload in self.server.events if kind == "timer"]

    def test_ui_server_commands_are_routed_to_engine(self) -> None:
        self.assertEqual(self.engine.submit_command, self.server.command_handler)

        self.server.command_handler({"command": "start"})
        self.engine.run_once()

        self.assertEqual("running", self.timer.snapshot().status)
        self.assertEqual("start", self._timer_events()[-1]["action"])

    def test_run_once_polls_timer_to_completion(self) -> None:
        self.engine.submit_command({"command": "start"})
        self.engine.run_once()

        self.time.now = 59.5
        self.engine.run_once()
        self.assertEqual(1, self._timer_events()[-1]["remaining_seconds"])

        self.time.now = 75.0
        self.engine.run_once()
        self.engine.run_once()

        self.assertEqual([("focus", 1)], self.signaler.signals)
        completed = self._timer_events()[-1]
        self.assertEqual("completed", completed["action"])
        self.assertEqual("short_break", completed["suggested_mode"])
        self.assertEqual(("completed",), self.server.states[-1][:1])

    def test_invalid_commands_do_not_stop_the_loop(self) -> None:
        self.engine.submit_command({"command": "switch_mode", "mode": "long_break"})
        self.engine.run_once()
        errors = [payload for kind, payload in self.server.events if kind == "error"]
        self.assertEqual(1, len(errors))
        self.assertEqual("focus", self.timer.snapshot().mode)

    def test_run_publishes_startup_sync_and_shuts_down(self) -> None:
        self.engine.submit_command({"command": "start"})
        self.engine.stop()

        self.assertEqual(0, self.engine.run())

        first = self._timer_events()[0]
        self.assertEqual("sync", first["action"])
        self.assertEqual("startup", first["reason"])
        self.assertEqual("idle", self.server.states[0][0])
        self.assertTrue(self.timer.is_closed)
        self.assertEqual(1, self.signaler.shutdowns)
        self.assertTrue(self.server.stopped)


if __name__ == "__main__":
    unittest.main()
