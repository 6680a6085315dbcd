"""Exception hierarchy for the forwarding function."""

from typing import Any


class ProxyError(Exception):
    """Base exception for all errors raised while handling one invocation.

    Attributes:
        status_code: Status reported to the caller when this error ends an invocation.
    """

    status_code: int = 500

    @property
    def public_message(self) -> str:
        """Text that is safe to return to the caller."""
        return str(self)


class DecodeError(ProxyError):
    """Raised when an inbound envelope is malformed or its body is not valid base64."""

    status_code = 400


class BuildError(ProxyError):
    """Raised when the method/target pair cannot form a valid outbound request."""

    status_code = 400


class TransportError(ProxyError):
    """Raised when the origin cannot be reached (timeout, DNS, TLS, connection)."""

    status_code = 500


class ReadError(ProxyError):
    """Raised when the origin response body cannot be consumed."""

    status_code = 500


class EncodeError(ProxyError):
    """Raised when the outbound envelope cannot be serialized."""

    status_code = 500

    @property
    def public_message(self) -> str:
        return "Internal Server Error"


class ConfigurationError(Exception):
    """Raised when the configuration file is unreadable or invalid."""


class InvocationFailed(Exception):
    """Raised by event entry points to report a failed invocation.

    The event response describing the failure is kept on ``response``; the
    underlying ``ProxyError`` is chained as ``__cause__``.
    """

    def __init__(self, response: dict[str, Any], error: ProxyError) -> None:
        super().__init__(str(error))
        self.response = response
        self.error = error
