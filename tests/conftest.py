"""Pytest configuration and standardized factories for docgate."""

import json
import logging
import threading
import time
from collections.abc import Callable, Iterator
from datetime import date
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

import pytest
import requests

from docgate.gate.rate_gate import RateGate
from docgate.schemas.documents import Description, Document, Product


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0, step: float = 0.005) -> bool:
    """Poll `predicate` until it holds or `timeout` elapses.

    Returns:
        The final value of the predicate.
    """
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(step)
    return predicate()


@pytest.fixture
def product_factory() -> Callable[..., Product]:
    """Factory to create Product instances with default valid data."""

    def _make_product(**kwargs: Any) -> Product:
        defaults: dict[str, Any] = {
            "certificate_document": "CONFORMITY_CERTIFICATE",
            "certificate_document_date": date(2024, 1, 15),
            "certificate_document_number": "RU-123",
            "owner_inn": "7701234567",
            "producer_inn": "7707654321",
            "production_date": date(2024, 1, 10),
            "tnved_code": "6401100000",
            "uit_code": "010460043993125621JgXJ5.T",
            "uitu_code": None,
        }
        return Product(**{**defaults, **kwargs})

    return _make_product


@pytest.fixture
def document_factory(product_factory: Callable[..., Product]) -> Callable[..., Document]:
    """Factory to create Document instances with default valid data.

    Returns:
        A callable that generates Documents.
    """

    def _make_document(products: int = 1, **kwargs: Any) -> Document:
        defaults: dict[str, Any] = {
            "description": Description(participant_inn="7701234567"),
            "doc_id": "doc-001",
            "doc_status": "DRAFT",
            "doc_type": "LP_INTRODUCE_GOODS",
            "import_request": False,
            "owner_inn": "7701234567",
            "participant_inn": "7701234567",
            "producer_inn": "7707654321",
            "production_date": date(2024, 1, 10),
            "production_type": "OWN_PRODUCTION",
            "products": [product_factory() for _ in range(products)],
            "reg_date": date(2024, 1, 20),
            "reg_number": "REG-42",
        }
        return Document(**{**defaults, **kwargs})

    return _make_document


@pytest.fixture
def gate_factory() -> Iterator[Callable[..., RateGate]]:
    """Factory creating rate gates whose timers are stopped at teardown."""
    gates: list[RateGate] = []

    def _make_gate(limit: int = 2, window: float = 0.2) -> RateGate:
        gate = RateGate(limit=limit, window=window)
        gates.append(gate)
        return gate

    yield _make_gate

    for gate in gates:
        gate.close()


class FakeSession(requests.Session):
    """A requests session that answers from memory instead of the network.

    Records every prepared request in 'sent', removing the need for
    mocks/spies.
    """

    def __init__(
        self,
        status_code: int = 200,
        body: bytes = b"{}",
        side_effect: Exception | None = None,
        delay: float = 0.0,
    ):
        super().__init__()
        self.status_code = status_code
        self.body = body
        self.side_effect = side_effect
        self.delay = delay
        self.sent: list[requests.PreparedRequest] = []
        self.timeouts: list[Any] = []
        self.closed = False
        self._record_lock = threading.Lock()

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:  # type: ignore[override]
        with self._record_lock:
            self.sent.append(request)
            self.timeouts.append(kwargs.get("timeout"))

        if self.delay > 0:
            time.sleep(self.delay)
        if self.side_effect:
            raise self.side_effect

        response = requests.Response()
        response.status_code = self.status_code
        response.reason = "OK" if self.status_code < 400 else "Error"
        response._content = self.body
        response.url = request.url or ""
        response.request = request
        return response

    def close(self) -> None:
        self.closed = True
        super().close()


@pytest.fixture
def fake_session_factory() -> Callable[..., FakeSession]:
    """Factory to create configured FakeSession instances."""

    def _make_session(
        status_code: int = 200,
        body: bytes = b"{}",
        side_effect: Exception | None = None,
        delay: float = 0.0,
    ) -> FakeSession:
        return FakeSession(
            status_code=status_code, body=body, side_effect=side_effect, delay=delay
        )

    return _make_session


class _RecordingHandler(BaseHTTPRequestHandler):
    """Accepts POSTs and answers with an empty JSON object."""

    def do_POST(self) -> None:
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length)
        self.server.received.append(  # type: ignore[attr-defined]
            {
                "path": self.path,
                "content_type": self.headers.get("Content-Type"),
                "body": json.loads(body),
            }
        )
        payload = b'{"status": "accepted"}'
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format: str, *args: Any) -> None:
        pass


@pytest.fixture
def http_endpoint() -> Iterator[tuple[str, list[dict[str, Any]]]]:
    """Local HTTP endpoint recording every request it receives.

    Yields:
        The endpoint URL and the list of received requests.
    """
    server = ThreadingHTTPServer(("127.0.0.1", 0), _RecordingHandler)
    server.received = []  # type: ignore[attr-defined]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    host, port = server.server_address[:2]
    yield f"http://{host}:{port}/api/v3/lk/documents/create", server.received  # type: ignore[attr-defined]

    server.shutdown()
    server.server_close()


@pytest.fixture
def captured_logs() -> Iterator[Callable[[str], list[logging.LogRecord]]]:
    """Attach a recording handler to docgate loggers.

    docgate loggers do not propagate, so pytest's caplog does not see
    them; this fixture hooks the named logger directly and lowers its
    level for the duration of the test.
    """
    attached: list[tuple[logging.Logger, logging.Handler, int]] = []

    class _ListHandler(logging.Handler):
        def __init__(self) -> None:
            super().__init__(level=logging.DEBUG)
            self.records: list[logging.LogRecord] = []

        def emit(self, record: logging.LogRecord) -> None:
            self.records.append(record)

    def _capture(name: str) -> list[logging.LogRecord]:
        logger = logging.getLogger(name)
        handler = _ListHandler()
        attached.append((logger, handler, logger.level))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        return handler.records

    yield _capture

    for logger, handler, level in attached:
        logger.removeHandler(handler)
        logger.setLevel(level)
