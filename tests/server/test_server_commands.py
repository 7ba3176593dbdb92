import json
import unittest

from app_config_schema import UIServerSettings
from server.config import UIServerConfig
from server.service import UIServer


class UIServerCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.received = []
        self.server = UIServer(
            UIServerConfig.from_settings(UIServerSettings()),
            command_handler=self.received.append,
        )

    def test_handle_incoming_forwards_command_frames(self) -> None:
        error = self.server.handle_incoming('{"command": "switch_mode", "mode": "long_break"}')
        self.assertIsNone(error)
        self.assertEqual([{"command": "switch_mode", "mode": "long_break"}], self.received)

    def test_handle_incoming_rejects_non_json(self) -> None:
        error = self.server.handle_incoming("start please")
        self.assertIn("JSON", error)
        self.assertEqual([], self.received)

    def test_handle_incoming_without_handler(self) -> None:
        self.server.set_command_handler(None)
        self.assertIsNotNone(self.server.handle_incoming('{"command": "start"}'))

    def test_publish_while_stopped_keeps_sticky_state(self) -> None:
        self.assertFalse(self.server.is_running)
        self.server.publish("timer", mode="focus", remaining_seconds=1500)
        self.server.publish_state("idle", message="Ready")

        snapshot = [json.loads(item) for item in self.server._sticky_events.snapshot()]
        self.assertEqual(["timer", "state_update"], [item["type"] for item in snapshot])
        self.assertEqual("Ready", snapshot[1]["message"])


if __name__ == "__main__":
    unittest.main()
