import httpx
import pytest
import requests

from equifax_credit.clients.real_http.gateway import AsyncHttpGatewayTransport, HttpGatewayTransport
from equifax_credit.errors import RequestRejectedError, TransportFailureError, TransportTimeoutError

ENDPOINT = "https://bki.example.invalid/gateway"


class FakeResponse:
    def __init__(self, status_code: int, content: bytes = b""):
        self.status_code = status_code
        self.content = content


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, data=None, headers=None, timeout=None, verify=True):
        self.calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout, "verify": verify})
        if self.error is not None:
            raise self.error
        return self.response


def test_posts_envelope_as_octet_stream():
    session = FakeSession(FakeResponse(200, b"\x30\x80reply"))
    transport = HttpGatewayTransport(timeout_seconds=12, session=session)

    reply = transport.send(b"signed-request", ENDPOINT)

    assert reply == b"\x30\x80reply"
    call = session.calls[0]
    assert call["url"] == ENDPOINT
    assert call["data"] == b"signed-request"
    assert call["headers"]["Content-Type"] == "application/octet-stream"
    assert call["timeout"] == 12


def test_per_call_timeout_wins():
    session = FakeSession(FakeResponse(200, b"ok"))
    transport = HttpGatewayTransport(timeout_seconds=12, session=session)

    transport.send(b"x", ENDPOINT, timeout=3)

    assert session.calls[0]["timeout"] == 3


def test_zero_timeout_is_not_replaced_by_default():
    session = FakeSession(FakeResponse(200, b"ok"))
    transport = HttpGatewayTransport(timeout_seconds=12, session=session)

    transport.send(b"x", ENDPOINT, timeout=0)

    assert session.calls[0]["timeout"] == 0


@pytest.mark.parametrize("status", [400, 403, 500, 502])
def test_non_success_status_is_rejected_with_body(status):
    session = FakeSession(FakeResponse(status, b"<html>Bad Gateway</html>"))
    transport = HttpGatewayTransport(session=session)

    with pytest.raises(RequestRejectedError) as excinfo:
        transport.send(b"x", ENDPOINT)

    assert excinfo.value.status_code == status
    assert excinfo.value.body == b"<html>Bad Gateway</html>"


def test_timeout_is_reported_as_timeout():
    transport = HttpGatewayTransport(session=FakeSession(error=requests.exceptions.ReadTimeout("slow")))

    with pytest.raises(TransportTimeoutError):
        transport.send(b"x", ENDPOINT)


def test_connection_error_is_transport_failure():
    transport = HttpGatewayTransport(session=FakeSession(error=requests.exceptions.ConnectionError("refused")))

    with pytest.raises(TransportFailureError) as excinfo:
        transport.send(b"x", ENDPOINT)

    assert not isinstance(excinfo.value, TransportTimeoutError)


@pytest.mark.asyncio
async def test_async_transport_posts_envelope():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = request.content
        seen["content_type"] = request.headers["Content-Type"]
        return httpx.Response(200, content=b"reply-bytes")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = AsyncHttpGatewayTransport(client=client)
        reply = await transport.send(b"signed-request", ENDPOINT)

    assert reply == b"reply-bytes"
    assert seen == {"body": b"signed-request", "content_type": "application/octet-stream"}


@pytest.mark.asyncio
async def test_async_transport_rejects_non_success_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, content=b"maintenance")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = AsyncHttpGatewayTransport(client=client)
        with pytest.raises(RequestRejectedError) as excinfo:
            await transport.send(b"x", ENDPOINT)

    assert excinfo.value.status_code == 503
    assert excinfo.value.body == b"maintenance"


@pytest.mark.asyncio
async def test_async_transport_maps_timeouts():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = AsyncHttpGatewayTransport(client=client)
        with pytest.raises(TransportTimeoutError):
            await transport.send(b"x", ENDPOINT, timeout=0.5)


@pytest.mark.asyncio
async def test_async_transport_maps_connection_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = AsyncHttpGatewayTransport(client=client)
        with pytest.raises(TransportFailureError):
            await transport.send(b"x", ENDPOINT)
