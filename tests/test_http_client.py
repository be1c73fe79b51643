"""Tests for the httpx-backed client."""

import httpx
import pytest

from feedcanon.adapters.base import FetchError
from feedcanon.adapters.http import HttpxClient


def make_client(handler):
    return HttpxClient(client=httpx.Client(transport=httpx.MockTransport(handler)), user_agent="test-agent")


def test_fetch_follows_redirects():
    """Test redirects are followed and the final URL reported."""

    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, text="<rss/>", headers={"Content-Type": "application/rss+xml"})

    response = make_client(handler).fetch("https://example.com/old")

    assert response.ok
    assert response.url == "https://example.com/new"
    assert response.body == "<rss/>"
    assert response.headers["content-type"] == "application/rss+xml"


def test_fetch_sends_user_agent():
    """Test configured User-Agent is sent."""
    seen = {}

    def handler(request):
        seen["user-agent"] = request.headers["User-Agent"]
        return httpx.Response(200, text="ok")

    make_client(handler).fetch("https://example.com/feed")

    assert seen["user-agent"] == "test-agent"


def test_fetch_returns_error_status():
    """Test non-2xx responses are returned, not raised."""
    response = make_client(lambda request: httpx.Response(404, text="missing")).fetch("https://example.com/feed")

    assert response.status == 404
    assert not response.ok


def test_fetch_transport_error():
    """Test transport failures raise FetchError."""

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError):
        make_client(handler).fetch("https://example.com/feed")
