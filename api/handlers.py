"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from core.config import Config

_ERROR_HEADERS = {"X-Content-Type-Options": "nosniff"}


async def _read_body(request: Request, config: Config) -> bytes | None:
    """Return the raw body, or None if it exceeds the configured limit."""
    raw_body = await request.body()
    if len(raw_body) > config.server.max_body_size:
        return None
    return raw_body


async def handle_direct(request: Request, config: Config) -> Response:
    """Forward a direct-transport request description."""
    raw_body = await _read_body(request, config)
    if raw_body is None:
        return Response(
            content="Request body too large\n",
            status_code=413,
            media_type="text/plain; charset=utf-8",
            headers=_ERROR_HEADERS,
        )

    service = request.app.state.forwarding_service
    result = await service.invoke(request.app.state.direct_codec, raw_body)
    if result.ok:
        return Response(content=result.payload, status_code=200, media_type="application/json")
    return Response(
        content=result.payload,
        status_code=result.status_code,
        media_type="text/plain; charset=utf-8",
        headers=_ERROR_HEADERS,
    )


async def handle_event(request: Request, config: Config) -> Response:
    """Forward an API gateway event posted as JSON."""
    raw_body = await _read_body(request, config)
    if raw_body is None:
        return JSONResponse({"statusCode": 413}, status_code=413)

    service = request.app.state.forwarding_service
    result = await service.invoke(request.app.state.gateway_codec, raw_body)
    return JSONResponse(result.payload, status_code=result.status_code)
