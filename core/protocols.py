"""Shared protocol definitions."""

from typing import Any, Protocol

from core.exceptions import ProxyError
from core.request_types import RequestSpec, ResponseSpec


class RequestLogger(Protocol):
    """Protocol for invocation logging (ConsoleLogger)."""

    def log_forward(
        self,
        transport: str,
        method: str,
        target: str,
        status: int,
        elapsed_ms: float,
        *,
        headers: dict[str, str] | None = None,
    ) -> None: ...
    def log_error(self, transport: str, status: int, message: str) -> None: ...


class EnvelopeCodec(Protocol):
    """Translate one transport's payloads to and from the canonical types."""

    name: str

    def decode(self, payload: Any) -> RequestSpec: ...
    def encode(self, response: ResponseSpec) -> Any: ...
    def encode_error(self, error: ProxyError) -> Any: ...
