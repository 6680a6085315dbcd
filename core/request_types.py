"""Transport-agnostic request and response types."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RequestSpec:
    """Outbound request decoded from an inbound envelope."""

    method: str
    target: str
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class ResponseSpec:
    """Origin response ready to be encoded into an outbound envelope.

    ``headers`` holds one value per header name; ``body`` is the raw,
    fully buffered origin body.
    """

    status_code: int
    headers: dict[str, str]
    body: bytes
