import unittest

from completion import Completion
from countdown import SignalChannelError, TimerSnapshot
from runtime.ui import RuntimeUIPublisher, snapshot_payload


class _UIServerStub:
    def __init__(self):
        self.events: list[tuple[str, dict[str, object]]] = []

    def publish(self, event_type: str, **payload):
        self.events.append((event_type, payload))

    def publish_state(self, state: str, *, message=None, **payload):
        self.events.append(("state_update", {"state": state, "message": message, **payload}))


class RuntimeUIPublisherTests(unittest.TestCase):
    def test_snapshot_payload(self) -> None:
        snapshot = TimerSnapshot(
            mode="focus",
            remaining_seconds=500,
            status="running",
            label="Focus",
            duration_seconds=1500,
            cycles_completed=2,
        )
        payload = snapshot_payload(snapshot)
        self.assertEqual(0.6667, payload["progress"])
        self.assertEqual(2, payload["cycles_completed"])
        self.assertEqual("running", payload["status"])

    def test_publish_completion_flag(self) -> None:
        server = _UIServerStub()
        publisher = RuntimeUIPublisher(server)
        publisher.publish_completion(
            Completion(mode="focus", completion_id=3, label="Focus", cycles_completed=1),
            active=True,
        )
        event_type, payload = server.events[0]
        self.assertEqual("completion", event_type)
        self.assertTrue(payload["active"])
        self.assertEqual(3, payload["completion_id"])

    def test_publish_channel_failure(self) -> None:
        server = _UIServerStub()
        RuntimeUIPublisher(server).publish_channel_failure(
            SignalChannelError("notification", "not supported")
        )
        event_type, payload = server.events[0]
        self.assertEqual("error", event_type)
        self.assertEqual("notification", payload["channel"])
        self.assertEqual(
            "Completion signal failed: notification: not supported",
            payload["message"],
        )

    def test_publisher_without_server_is_noop(self) -> None:
        publisher = RuntimeUIPublisher(None)
        publisher.publish_error("ignored")
        publisher.publish_state("idle")


if __name__ == "__main__":
    unittest.main()
