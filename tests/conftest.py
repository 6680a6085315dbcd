"""Shared fixtures: a recording logger and mock origins built on httpx.MockTransport."""

import json

import httpx
import pytest

from core.config import Config


class RecordingLogger:
    """RequestLogger that keeps every call for assertions."""

    def __init__(self):
        self.forwarded: list[dict] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_forward(self, transport, method, target, status, elapsed_ms, *, headers=None):
        self.forwarded.append(
            {
                "transport": transport,
                "method": method,
                "target": target,
                "status": status,
                "headers": headers,
            }
        )

    def log_error(self, transport, status, message):
        self.errors.append((transport, status, message))


class RecordingOrigin:
    """Mock origin that records requests and replies with a fixed response."""

    def __init__(self, status_code=200, headers=None, content=b""):
        self.status_code = status_code
        self.headers = headers or []
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, headers=self.headers, content=self.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def request_logger():
    return RecordingLogger()


@pytest.fixture
def origin():
    return RecordingOrigin(200, headers=[("X-Test", "1")], content=b"hi")


def direct_payload(**overrides) -> bytes:
    document = {
        "method": "GET",
        "url": "http://example.test/ok",
        "body": "",
        "headers": {"X-Test": "1"},
    }
    document.update(overrides)
    return json.dumps(document).encode()


def gateway_event(**overrides) -> dict:
    event = {
        "headers": {"X-Test": "1"},
        "httpMethod": "GET",
        "path": "http://example.test/ok",
        "queryString": {},
        "body": "",
        "requestContext": {
            "serviceId": "service-abc",
            "requestId": "req-1",
            "httpMethod": "GET",
            "path": "/ok",
            "sourceIp": "10.0.0.1",
            "stage": "release",
            "identity": {"secretId": None},
        },
    }
    event.update(overrides)
    return event
