"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_direct, handle_event
from core.config import Config
from core.envelopes import DirectCodec, GatewayCodec
from core.protocols import RequestLogger
from services.forwarding_service import ForwardingService
from services.upstream import create_client


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``transport`` replaces the network transport of the outbound client.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = create_client(config.forward, transport)
        app.state.forwarding_service = ForwardingService(config, logger, client=client)
        app.state.direct_codec = DirectCodec()
        app.state.gateway_codec = GatewayCodec(base64_flag=config.gateway.base64_flag)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="HTTP Forwarding Function", version="0.1.0", lifespan=lifespan)

    @app.post(config.server.direct_path)
    async def forward_direct(request: Request):
        return await handle_direct(request, config)

    @app.post(config.server.event_path)
    async def forward_event(request: Request):
        return await handle_event(request, config)

    return app
