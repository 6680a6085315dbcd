"""Invocation pipeline shared by every transport."""

import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from core.config import Config
from core.exceptions import ProxyError
from core.protocols import EnvelopeCodec, RequestLogger
from core.request_types import RequestSpec, ResponseSpec
from services.upstream import Forwarder, RequestBuilder, create_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of one invocation.

    Attributes:
        payload: Encoded outbound payload (success envelope or error payload).
        status_code: Status the payload represents to the caller.
        error: The error that ended the invocation, if any.
    """

    payload: Any
    status_code: int
    error: ProxyError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ForwardingService:
    """Decode, build, forward and encode one invocation.

    With a shared ``client`` every invocation reuses its connection pool;
    without one, each invocation opens and closes its own client.
    """

    def __init__(
        self,
        config: Config,
        logger: RequestLogger,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        builder: RequestBuilder | None = None,
        forwarder: Forwarder | None = None,
    ) -> None:
        self._config = config
        self._logger = logger
        self._client = client
        self._transport = transport
        self._builder = builder or RequestBuilder()
        self._forwarder = forwarder or Forwarder(config.forward)

    async def invoke(self, codec: EnvelopeCodec, payload: Any) -> InvocationResult:
        """Run the pipeline; every ProxyError becomes the codec's error payload."""
        started = time.perf_counter()
        try:
            spec = codec.decode(payload)
            response = await self._forward(spec)
            encoded = codec.encode(response)
        except ProxyError as e:
            logger.debug("%s invocation failed: %r", codec.name, e)
            self._logger.log_error(codec.name, e.status_code, str(e))
            return InvocationResult(codec.encode_error(e), e.status_code, e)

        elapsed_ms = (time.perf_counter() - started) * 1000
        self._logger.log_forward(
            codec.name,
            spec.method,
            spec.target,
            response.status_code,
            elapsed_ms,
            headers=spec.headers,
        )
        return InvocationResult(encoded, 200)

    async def _forward(self, spec: RequestSpec) -> ResponseSpec:
        if self._client is not None:
            return await self._send(self._client, spec)

        async with create_client(self._config.forward, self._transport) as client:
            return await self._send(client, spec)

    async def _send(self, client: httpx.AsyncClient, spec: RequestSpec) -> ResponseSpec:
        request = self._builder.build(client, spec)
        return await self._forwarder.forward(client, request)
