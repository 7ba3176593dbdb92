"""Plain HTTP routes served next to the websocket endpoint."""

from __future__ import annotations

from http import HTTPStatus
from typing import Optional

from websockets.datastructures import Headers
from websockets.http11 import Response

from .config import HEALTHZ_PATH, INDEX_PATH, ROOT_PATH

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


def http_response(status: HTTPStatus, body: bytes, content_type: str) -> Response:
    headers = Headers(
        [
            ("Content-Type", content_type),
            ("Content-Length", str(len(body))),
            ("Cache-Control", "no-store"),
        ]
    )
    return Response(status.value, status.phrase, headers, body)


def route_request(path: str, *, index_html: bytes, websocket_path: str) -> Optional[Response]:
    """Answer non-websocket paths; None hands the request to the websocket handshake."""
    if path == websocket_path:
        return None
    if path in (ROOT_PATH, INDEX_PATH):
        return http_response(HTTPStatus.OK, index_html, HTML_CONTENT_TYPE)
    if path == HEALTHZ_PATH:
        return http_response(HTTPStatus.OK, b"ok\n", TEXT_CONTENT_TYPE)
    return http_response(HTTPStatus.NOT_FOUND, b"not found\n", TEXT_CONTENT_TYPE)
