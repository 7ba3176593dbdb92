import sys
import types
import unittest
from pathlib import Path

# Import server.routes without executing src/server/__init__.py.
_SERVER_DIR = Path(__file__).resolve().parents[2] / "src" / "server"
if "server" not in sys.modules:
    _pkg = types.ModuleType("server")
    _pkg.__path__ = [str(_SERVER_DIR)]  # type: ignore[attr-defined]
    sys.modules["server"] = _pkg

from server.routes import route_request


class ServerRoutesTests(unittest.TestCase):
    def _route(self, path: str):
        return route_request(path, index_html=b"<html>timer</html>", websocket_path="/ws")

    def test_websocket_path_is_left_to_handshake(self) -> None:
        self.assertIsNone(self._route("/ws"))

    def test_index_is_served_for_root_and_index(self) -> None:
        for path in ("/", "/index.html"):
            with self.subTest(path=path):
                response = self._route(path)
                self.assertEqual(200, response.status_code)
                self.assertEqual(b"<html>timer</html>", response.body)
                self.assertTrue(response.headers["Content-Type"].startswith("text/html"))
                self.assertEqual("no-store", response.headers["Cache-Control"])

    def test_healthz(self) -> None:
        response = self._route("/healthz")
        self.assertEqual(200, response.status_code)
        self.assertEqual(b"ok\n", response.body)

    def test_unknown_path_is_not_found(self) -> None:
        response = self._route("/assets/app.js")
        self.assertEqual(404, response.status_code)
        self.assertEqual("Not Found", response.reason_phrase)


if __name__ == "__main__":
    unittest.main()
