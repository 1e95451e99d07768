"""Tests for content-type branching."""

import pytest

import core.dispatch
from core.dispatch import HTML_RESPONSE_MEDIA_TYPE, ContentDispatcher, is_html
from core.exceptions import InternalFailure
from core.request_types import RewriteContext, UpstreamResponse
from core.urls import normalize_url

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe\x80"


def _upstream(content_type: str, body: bytes, url: str = "https://site.com/") -> UpstreamResponse:
    return UpstreamResponse(
        status_code=200,
        reason="OK",
        content_type=content_type,
        body=body,
        url=url,
    )


@pytest.fixture
def context() -> RewriteContext:
    return RewriteContext(base_url=normalize_url("https://site.com/"))


@pytest.mark.parametrize(
    ("content_type", "expected"),
    [
        ("text/html", True),
        ("text/html; charset=ISO-8859-1", True),
        ("TEXT/HTML", True),
        ("application/xhtml+xml", False),
        ("image/png", False),
        ("", False),
    ],
)
def test_is_html(content_type, expected):
    assert is_html(content_type) is expected


def test_binary_passthrough_is_byte_identical(context):
    result = ContentDispatcher().dispatch(_upstream("image/png", PNG_BYTES), context)
    assert result.content == PNG_BYTES
    assert result.media_type == "image/png"
    assert result.status_code == 200


def test_css_is_not_rewritten(context):
    css = b".a { background-image: url('/bg.png') }"
    result = ContentDispatcher().dispatch(_upstream("text/css", css), context)
    assert result.content == css
    assert result.media_type == "text/css"


def test_missing_content_type_passes_through(context):
    result = ContentDispatcher().dispatch(_upstream("", b"raw"), context)
    assert result.content == b"raw"
    assert result.media_type is None


def test_html_is_rewritten_with_forced_charset(context):
    body = '<head></head><a href="/x">é</a>'.encode()
    result = ContentDispatcher().dispatch(
        _upstream("text/html; charset=ISO-8859-1", body), context
    )
    assert result.media_type == HTML_RESPONSE_MEDIA_TYPE
    assert result.content == (
        '<head><base href="https://site.com/" target="_top"></head>'
        '<a href="/api/proxy?url=https%3A%2F%2Fsite.com%2Fx">é</a>'
    )


def test_undecodable_html_bytes_are_replaced(context):
    result = ContentDispatcher().dispatch(_upstream("text/html", b"<p>\xff</p>"), context)
    assert result.content == "<p>\ufffd</p>"


def test_rewrite_failure_becomes_internal_failure(context, monkeypatch):
    def broken(html, ctx):
        raise RuntimeError("boom")

    monkeypatch.setattr(core.dispatch, "rewrite_html", broken)
    with pytest.raises(InternalFailure, match="boom"):
        ContentDispatcher().dispatch(_upstream("text/html", b"<p></p>"), context)
