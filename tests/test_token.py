"""Tests for the realtime session token proxy."""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from realtime_console.server.token import TokenProxy

from conftest import SESSIONS_URL

UPSTREAM_BODY = b'{"client_secret":"abc","expires_at":123}'
FAILURE_BODY = b'{"error":"Failed to generate token"}'


@pytest.mark.asyncio
async def test_issue_token_relays_upstream_body(realtime_config, upstream):
    """Upstream JSON is returned byte-for-byte."""
    transport = upstream(lambda request: httpx.Response(200, content=UPSTREAM_BODY))
    proxy = TokenProxy(realtime_config, transport=transport)

    response = await proxy.issue_token()

    assert response.status_code == 200
    assert response.body == UPSTREAM_BODY
    assert response.media_type == "application/json"


@pytest.mark.asyncio
async def test_issue_token_request_shape(realtime_config, upstream):
    """The upstream call is an authenticated POST with model and voice only."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"client_secret": {"value": "ek"}})

    proxy = TokenProxy(realtime_config, transport=upstream(handler))
    await proxy.issue_token()

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == SESSIONS_URL
    assert request.headers["Authorization"] == "Bearer sk-test-secret"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {
        "model": "gpt-4o-mini-realtime-preview-2024-12-17",
        "voice": "verse",
    }


@pytest.mark.asyncio
async def test_issue_token_network_error(realtime_config, upstream, caplog):
    """A transport failure becomes the generic 500 and is logged."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    proxy = TokenProxy(realtime_config, transport=upstream(handler))
    with caplog.at_level(logging.ERROR, logger="realtime_console.server.token"):
        response = await proxy.issue_token()

    assert response.status_code == 500
    assert response.body == FAILURE_BODY
    assert "Token generation error" in caplog.text
    assert "connection refused" in caplog.text


@pytest.mark.asyncio
async def test_issue_token_upstream_error_status(realtime_config, upstream):
    """Non-2xx upstream responses are not relayed."""
    transport = upstream(
        lambda request: httpx.Response(401, json={"error": {"message": "Incorrect API key"}})
    )
    proxy = TokenProxy(realtime_config, transport=transport)

    response = await proxy.issue_token()

    assert response.status_code == 500
    assert response.body == FAILURE_BODY


@pytest.mark.asyncio
async def test_issue_token_non_json(realtime_config, upstream):
    """A 200 with a non-JSON body is treated as a failure."""
    transport = upstream(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
    proxy = TokenProxy(realtime_config, transport=transport)

    response = await proxy.issue_token()

    assert response.status_code == 500
    assert response.body == FAILURE_BODY


@pytest.mark.asyncio
async def test_issue_token_never_leaks_secret(realtime_config, upstream):
    """Neither the key nor the upstream error text reaches the caller."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("upstream did not answer", request=request)

    proxy = TokenProxy(realtime_config, transport=upstream(handler))
    response = await proxy.issue_token()

    assert b"sk-test-secret" not in response.body
    assert response.body == FAILURE_BODY


@pytest.mark.asyncio
async def test_issue_token_each_call_hits_upstream(realtime_config, upstream):
    """Tokens are never cached between calls."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"client_secret": {"value": f"ek-{len(calls)}"}})

    proxy = TokenProxy(realtime_config, transport=upstream(handler))
    first = await proxy.issue_token()
    second = await proxy.issue_token()

    assert len(calls) == 2
    assert first.body != second.body
