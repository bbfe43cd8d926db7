"""
Root Pytest Fixtures.

Provides a threaded local HTTP server that records every request it
receives, so end-to-end tests can run the CLI against real sockets.
"""

import json
import threading
import time
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlsplit

import pytest


PROXY_VARIABLES = [
    "HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY",
    "http_proxy", "https_proxy", "all_proxy",
]

SETTINGS_VARIABLES = [
    "HTTPREQ_TIMEOUT", "HTTPREQ_MAX_REDIRECTS", "HTTPREQ_VERIFY_SSL",
    "HTTPREQ_LOG_LEVEL", "HTTPREQ_LOG_FILE",
]


@dataclass
class RecordedRequest:
    """A request as seen by the test server."""
    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


# Seconds between body bytes on /drip
DRIP_INTERVAL = 0.4

# path -> (status, headers, body)
ROUTES = {
    "/json": (200, [("Content-Type", "application/json")], b'{"b":2,"a":1}'),
    "/array": (200, [("Content-Type", "application/json")], b'[1, {"x": [true, null]}]'),
    "/text": (200, [("Content-Type", "text/plain")], b"not json"),
    "/redirect": (302, [("Location", "/json")], b""),
    "/temporary": (307, [("Location", "/echo")], b""),
    "/loop": (302, [("Location", "/loop")], b""),
    "/multi": (200, [("X-Multi", "first"), ("X-Multi", "second")], b"{}"),
}


class RecordingHandler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args):
        pass

    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        self.server.requests.append(RecordedRequest(
            method=self.command,
            path=self.path,
            headers={name.lower(): value for name, value in self.headers.items()},
            body=body,
        ))

        path = urlsplit(self.path).path
        if path == "/drip":
            self._drip(b"12345678", DRIP_INTERVAL)
            return
        if path == "/echo":
            status, headers = 200, [("Content-Type", "application/json")]
            payload = json.dumps({
                "method": self.command,
                "body": body.decode("utf-8", "replace"),
            }).encode()
        else:
            status, headers, payload = ROUTES.get(path, (404, [], b'{"error": "not found"}'))

        self.send_response(status)
        for name, value in headers:
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def _drip(self, payload: bytes, interval: float):
        """Send the body one byte at a time."""
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        try:
            for byte in payload:
                self.wfile.write(bytes([byte]))
                self.wfile.flush()
                time.sleep(interval)
        except (BrokenPipeError, ConnectionResetError):
            pass

    do_GET = _handle
    do_POST = _handle
    do_PUT = _handle
    do_DELETE = _handle
    do_PATCH = _handle


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Keep proxies and user settings from leaking into tests."""
    for name in PROXY_VARIABLES + SETTINGS_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("httpreq.config.ENV_LOCATIONS", [])


@pytest.fixture
def http_server():
    """Start a recording HTTP server on an ephemeral port."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), RecordingHandler)
    server.daemon_threads = True
    server.requests = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture
def base_url(http_server) -> str:
    host, port = http_server.server_address[:2]
    return f"http://{host}:{port}"
