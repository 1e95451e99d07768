"""Tests for the outbound fetcher."""

import socket

import httpx
import pytest

from core.exceptions import InvalidURL, UpstreamUnreachable
from core.request_types import NormalizedURL
from core.urls import normalize_url
from services.fetcher import Fetcher, is_host_not_found

pytestmark = pytest.mark.anyio

USER_AGENT = "Mozilla/5.0 (test)"


def _fetcher(handler) -> Fetcher:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        headers={"User-Agent": USER_AGENT},
    )
    return Fetcher(client)


async def test_fetch_success_returns_body_and_content_type():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["user_agent"] = request.headers["user-agent"]
        return httpx.Response(200, headers={"content-type": "image/png"}, content=b"\x89PNG")

    upstream = await _fetcher(handler).fetch(normalize_url("example.com/logo.png"))

    assert seen == {"url": "https://example.com/logo.png", "user_agent": USER_AGENT}
    assert upstream.is_success
    assert upstream.body == b"\x89PNG"
    assert upstream.content_type == "image/png"
    assert upstream.url == "https://example.com/logo.png"


async def test_fetch_non_2xx_is_returned_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="nope")

    upstream = await _fetcher(handler).fetch(normalize_url("example.com/missing"))

    assert not upstream.is_success
    assert upstream.status_code == 404
    assert upstream.reason == "Not Found"
    assert upstream.body == b"nope"


async def test_fetch_dns_failure_is_host_not_found():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("[Errno -2] Name or service not known", request=request)

    with pytest.raises(UpstreamUnreachable) as exc_info:
        await _fetcher(handler).fetch(normalize_url("no-such-host.invalid"))

    assert exc_info.value.host_not_found
    assert exc_info.value.url == "https://no-such-host.invalid/"


async def test_fetch_connection_refused_is_not_host_not_found():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

    with pytest.raises(UpstreamUnreachable) as exc_info:
        await _fetcher(handler).fetch(normalize_url("example.com"))

    assert not exc_info.value.host_not_found


async def test_fetch_timeout_is_unreachable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(UpstreamUnreachable, match="Upstream timeout"):
        await _fetcher(handler).fetch(normalize_url("example.com"))


def test_is_host_not_found_follows_exception_chain():
    error = httpx.ConnectError("connect failed")
    error.__cause__ = socket.gaierror(socket.EAI_NONAME, "lookup failed")
    assert is_host_not_found(error)


def test_is_host_not_found_false_for_other_errors():
    assert not is_host_not_found(httpx.ConnectError("Connection reset by peer"))


async def test_fetch_maps_httpx_invalid_url():
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request)
        return httpx.Response(200)

    bad = NormalizedURL(value="https://999.1.1.1/", scheme="https", host="999.1.1.1")
    with pytest.raises(InvalidURL):
        await _fetcher(handler).fetch(bad)

    assert requested == []
