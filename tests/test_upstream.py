import asyncio
import ssl

import httpx
import pytest

from conftest import RecordingOrigin
from core.config import ForwardSettings
from core.exceptions import BuildError, ReadError, TransportError
from core.request_types import RequestSpec
from services.upstream import Forwarder, RequestBuilder, create_client, create_ssl_context


class FailingStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        yield b"partial"
        raise httpx.ReadError("connection reset while reading body")


@pytest.fixture
async def client(origin):
    async with create_client(ForwardSettings(), origin.transport) as client:
        yield client


class TestRequestBuilder:
    async def test_method_target_and_body_verbatim(self, client):
        spec = RequestSpec("PATCH", "https://example.test/a?b=c", body=b"\x00raw", headers={"A": "1"})
        request = RequestBuilder().build(client, spec)
        assert request.method == "PATCH"
        assert str(request.url) == "https://example.test/a?b=c"
        assert request.content == b"\x00raw"
        assert request.headers["A"] == "1"

    @pytest.mark.parametrize("method", ["PURGE", "purge", "Get"])
    async def test_method_is_sent_verbatim(self, client, method):
        request = RequestBuilder().build(client, RequestSpec(method, "http://example.test/"))
        assert request.method == method

    async def test_headers_differing_in_case_are_both_sent(self, client):
        spec = RequestSpec("GET", "http://example.test/", headers={"X-Dup": "a", "x-dup": "b"})
        request = RequestBuilder().build(client, spec)
        assert request.headers.get_list("x-dup") == ["a", "b"]

    async def test_empty_body_sends_no_content(self, client):
        request = RequestBuilder().build(client, RequestSpec("GET", "http://example.test/"))
        assert request.content == b""
        assert "content-length" not in request.headers

    async def test_compression_only_when_caller_asks(self, client):
        request = RequestBuilder().build(client, RequestSpec("GET", "http://example.test/"))
        assert request.headers["accept-encoding"] == "identity"

        spec = RequestSpec("GET", "http://example.test/", headers={"accept-encoding": "gzip"})
        request = RequestBuilder().build(client, spec)
        assert request.headers.get_list("accept-encoding") == ["gzip"]

    @pytest.mark.parametrize("method", ["", "BAD METHOD", "GET\r\n"])
    async def test_invalid_method(self, client, method):
        with pytest.raises(BuildError, match="invalid method"):
            RequestBuilder().build(client, RequestSpec(method, "http://example.test/"))

    @pytest.mark.parametrize("target", ["", "/relative/path", "ftp://example.test/", "http://"])
    async def test_target_must_be_absolute_http_url(self, client, target):
        with pytest.raises(BuildError):
            RequestBuilder().build(client, RequestSpec("GET", target))


class TestForwarder:
    async def test_response_is_buffered(self, client, origin):
        request = RequestBuilder().build(client, RequestSpec("GET", "http://example.test/ok"))
        response = await Forwarder(ForwardSettings()).forward(client, request)
        assert response.status_code == 200
        assert response.body == b"hi"
        assert response.headers["X-Test"] == "1"
        assert len(origin.requests) == 1

    async def test_multi_valued_headers_keep_first_value(self):
        origin = RecordingOrigin(
            200,
            headers=[("Set-Cookie", "a=1"), ("set-cookie", "b=2"), ("x-lower", "v")],
        )
        async with create_client(ForwardSettings(), origin.transport) as client:
            request = client.build_request("GET", "http://example.test/")
            response = await Forwarder(ForwardSettings()).forward(client, request)
        assert response.headers["Set-Cookie"] == "a=1"
        assert response.headers["X-Lower"] == "v"

    async def test_redirect_is_returned_not_followed(self):
        origin = RecordingOrigin(302, headers=[("Location", "http://example.test/elsewhere")])
        async with create_client(ForwardSettings(), origin.transport) as client:
            request = client.build_request("GET", "http://example.test/start")
            response = await Forwarder(ForwardSettings()).forward(client, request)
        assert response.status_code == 302
        assert response.headers["Location"] == "http://example.test/elsewhere"
        assert [str(r.url) for r in origin.requests] == ["http://example.test/start"]

    async def test_slow_origin_times_out(self):
        async def slow(request):
            await asyncio.sleep(5)
            return httpx.Response(200)

        settings = ForwardSettings(timeout=0.05)
        async with create_client(settings, httpx.MockTransport(slow)) as client:
            request = client.build_request("GET", "http://example.test/")
            with pytest.raises(TransportError, match="timeout"):
                await Forwarder(settings).forward(client, request)

    async def test_connection_failure(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with create_client(ForwardSettings(), httpx.MockTransport(refuse)) as client:
            request = client.build_request("GET", "http://example.test/")
            with pytest.raises(TransportError, match="connection refused"):
                await Forwarder(ForwardSettings()).forward(client, request)

    async def test_httpx_timeout_is_transport_error(self):
        def time_out(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with create_client(ForwardSettings(), httpx.MockTransport(time_out)) as client:
            request = client.build_request("GET", "http://example.test/")
            with pytest.raises(TransportError, match="Upstream timeout"):
                await Forwarder(ForwardSettings()).forward(client, request)

    async def test_body_read_failure(self):
        def broken_body(request):
            return httpx.Response(200, stream=FailingStream())

        async with create_client(ForwardSettings(), httpx.MockTransport(broken_body)) as client:
            request = client.build_request("GET", "http://example.test/")
            with pytest.raises(ReadError, match="connection reset"):
                await Forwarder(ForwardSettings()).forward(client, request)

    async def test_policy_is_applied_to_client(self):
        client = create_client(ForwardSettings())
        try:
            assert client.follow_redirects is False
            assert client.timeout.read == 10.0
        finally:
            await client.aclose()

    async def test_tls_verification_disabled_by_default(self):
        assert create_ssl_context(ForwardSettings()).verify_mode == ssl.CERT_NONE
        client = create_client(ForwardSettings())
        try:
            context = client._transport._pool._ssl_context
            assert context.verify_mode == ssl.CERT_NONE
            assert context.check_hostname is False
        finally:
            await client.aclose()

    async def test_tls_verification_can_be_enabled(self):
        settings = ForwardSettings(verify_tls=True)
        assert create_ssl_context(settings).verify_mode == ssl.CERT_REQUIRED
        client = create_client(settings)
        try:
            assert client._transport._pool._ssl_context.verify_mode == ssl.CERT_REQUIRED
        finally:
            await client.aclose()

    async def test_transfer_encoding_is_not_relayed(self):
        origin = RecordingOrigin(
            200,
            headers=[("Transfer-Encoding", "chunked"), ("X-Test", "1")],
            content=b"hi",
        )
        async with create_client(ForwardSettings(), origin.transport) as client:
            request = client.build_request("GET", "http://example.test/")
            response = await Forwarder(ForwardSettings()).forward(client, request)
        assert "Transfer-Encoding" not in response.headers
        assert response.headers["X-Test"] == "1"
        assert response.body == b"hi"
