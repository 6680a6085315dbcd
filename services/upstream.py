"""Outbound request building and forwarding to the origin."""

import asyncio
import re
import ssl

import httpx

from core.config import ForwardSettings
from core.exceptions import BuildError, ReadError, TransportError
from core.headers import HeaderBuilder
from core.request_types import RequestSpec, ResponseSpec

_METHOD_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

# The body is relayed fully buffered, so the origin's message framing no longer applies.
_FRAMING_HEADERS = frozenset({b"transfer-encoding"})


def create_ssl_context(settings: ForwardSettings) -> ssl.SSLContext:
    """SSL context for origin connections; accepts any certificate unless verify_tls is set."""
    return httpx.create_ssl_context(verify=settings.verify_tls)


def create_client(
    settings: ForwardSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an outbound client carrying the fixed transport policy."""
    return httpx.AsyncClient(
        timeout=settings.timeout,
        follow_redirects=settings.follow_redirects,
        verify=create_ssl_context(settings),
        transport=transport,
        # Bodies are relayed undecoded, so only ask for compression when the caller does.
        headers={"Accept-Encoding": "identity"},
    )


class RequestBuilder:
    """Turn a RequestSpec into an httpx.Request."""

    def __init__(self, header_builder: HeaderBuilder | None = None) -> None:
        self._headers = header_builder or HeaderBuilder()

    def build(self, client: httpx.AsyncClient, spec: RequestSpec) -> httpx.Request:
        """Build the outbound request without touching the network.

        Raises:
            BuildError: If the method is not an HTTP token or the target is not
                an absolute http(s) URL.
        """
        if not _METHOD_RE.fullmatch(spec.method):
            raise BuildError(f"invalid method {spec.method!r}")

        try:
            url = httpx.URL(spec.target)
        except httpx.InvalidURL as e:
            raise BuildError(f"invalid target {spec.target!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise BuildError(f"unsupported target {spec.target!r}: expected an absolute http(s) URL")

        try:
            request = client.build_request(
                spec.method,
                url,
                headers=self._headers.build_outbound_headers(spec.headers),
                content=spec.body or None,
            )
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            raise BuildError(str(e)) from e
        # httpx uppercases the method; the origin sees it exactly as supplied.
        request.method = spec.method
        return request


class Forwarder:
    """Send built requests and buffer the origin response."""

    def __init__(
        self,
        settings: ForwardSettings,
        header_builder: HeaderBuilder | None = None,
    ) -> None:
        self._settings = settings
        self._headers = header_builder or HeaderBuilder()

    async def forward(self, client: httpx.AsyncClient, request: httpx.Request) -> ResponseSpec:
        """Execute the request within the wall-clock deadline.

        Raises:
            TransportError: Timeout, DNS, TLS or connection failure.
            ReadError: The response body could not be read to completion.
        """
        try:
            return await asyncio.wait_for(
                self._exchange(client, request),
                timeout=self._settings.timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Upstream timeout: no complete response within {self._settings.timeout:g}s"
            ) from e

    async def _exchange(self, client: httpx.AsyncClient, request: httpx.Request) -> ResponseSpec:
        try:
            response = await client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise TransportError(f"Upstream timeout: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Upstream connection error: {e}") from e

        try:
            # Undecoded bytes, consistent with the origin's Content-Encoding.
            chunks = [chunk async for chunk in response.stream]
        except httpx.HTTPError as e:
            raise ReadError(f"Error reading upstream response: {e}") from e
        finally:
            await response.aclose()

        encoding = response.headers.encoding
        raw_headers = [
            (key.decode(encoding), value.decode(encoding))
            for key, value in response.headers.raw
            if key.lower() not in _FRAMING_HEADERS
        ]
        return ResponseSpec(
            status_code=response.status_code,
            headers=self._headers.collapse_response_headers(raw_headers),
            body=b"".join(chunks),
        )
