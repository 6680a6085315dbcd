"""Cloud function entry points.

``app`` serves the direct transport behind an HTTP trigger; ``handler`` is the
event-function entry point for API gateway invocations.
"""

import asyncio
from typing import Any

import httpx

from app import create_app
from core.config import Config, load_config
from core.envelopes import GatewayCodec
from core.exceptions import InvocationFailed
from core.protocols import RequestLogger
from services.forwarding_service import ForwardingService
from ui.console import ConsoleLogger

default_config = load_config()
request_logger = ConsoleLogger(default_config.logging)
# Network transport for event invocations; None uses real connections.
outbound_transport: httpx.AsyncBaseTransport | None = None
app = create_app(default_config, request_logger)


async def invoke_event(
    event: dict[str, Any] | bytes | str,
    *,
    config: Config | None = None,
    logger: RequestLogger | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Forward one gateway event using a client scoped to this invocation.

    Raises:
        InvocationFailed: The invocation failed; ``.response`` holds the
            ``statusCode`` 400/500 event response.
    """
    config = config or default_config
    service = ForwardingService(
        config,
        logger or request_logger,
        transport=transport or outbound_transport,
    )
    codec = GatewayCodec(base64_flag=config.gateway.base64_flag)
    result = await service.invoke(codec, event)
    if result.error is not None:
        raise InvocationFailed(result.payload, result.error) from result.error
    return result.payload


def handler(event: dict[str, Any] | bytes | str, context: Any = None) -> dict[str, Any]:
    """Synchronous event-function entry point."""
    return asyncio.run(invoke_event(event))
