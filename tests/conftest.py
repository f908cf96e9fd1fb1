import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, List, Optional, Tuple, Union

import orjson
import pytest

from axiom_sdk import AxiomClient
from axiom_sdk.config import get_settings

TOKEN = "xaat-test-token"


@dataclass
class Route:
    status: int = 200
    body: bytes = b""
    send_length: bool = True
    extra_length: int = 0


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: Dict[str, str]
    body: bytes


@dataclass
class StubServer:
    url: str = ""
    routes: Dict[Tuple[str, str], Route] = field(default_factory=dict)
    requests: List[RecordedRequest] = field(default_factory=list)

    def route(
        self,
        method: str,
        path: str,
        payload: Union[bytes, Any] = b"",
        *,
        status: int = 200,
        send_length: bool = True,
        extra_length: int = 0,
    ) -> None:
        body = payload if isinstance(payload, bytes) else orjson.dumps(payload)
        self.routes[(method, path)] = Route(status, body, send_length, extra_length)

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


def _make_handler(stub: StubServer):
    class Handler(BaseHTTPRequestHandler):
        def _serve(self) -> None:
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length) if length else b""
            self.stub_record(body)
            route = stub.routes.get((self.command, self.path))
            if route is None:
                route = Route(404, b'{"message":"route not found"}')
            self.send_response(route.status)
            self.send_header("Content-Type", "application/json")
            if route.send_length:
                self.send_header("Content-Length", str(len(route.body) + route.extra_length))
            self.end_headers()
            self.wfile.write(route.body)
            self.close_connection = True

        def stub_record(self, body: bytes) -> None:
            stub.requests.append(
                RecordedRequest(self.command, self.path, {k: v for k, v in self.headers.items()}, body)
            )

        do_GET = _serve
        do_POST = _serve

        def log_message(self, format: str, *args: Any) -> None:
            pass

    return Handler


@pytest.fixture
def stub_server():
    stub = StubServer()
    server = ThreadingHTTPServer(("127.0.0.1", 0), _make_handler(stub))
    host, port = server.server_address[:2]
    stub.url = f"http://{host}:{port}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield stub
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def client(stub_server: StubServer):
    c = AxiomClient(TOKEN, url=stub_server.url, timeout=5.0)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def dataset_json(name: str = "_traces", **overrides: Optional[str]) -> Dict[str, Any]:
    value: Dict[str, Any] = {
        "id": "1",
        "name": name,
        "description": "",
        "who": "sys",
        "created": "2024-01-01T00:00:00Z",
    }
    value.update(overrides)
    return value
