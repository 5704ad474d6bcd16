"""Tests for the gateway invoker (click -> POST /gateway -> result element)."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from gatewayplay.config.schema import Config
from gatewayplay.invoker import ClickEvent, GatewayInvoker, MemorySink, Outcome, ResultStyle


def _invoker(handler) -> tuple[GatewayInvoker, MemorySink]:
    sink = MemorySink()
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GatewayInvoker(host="example.test:9000", sink=sink, client=client), sink


def _ok(body: str = "hello", status_code: int = 200, status_message: str = "OK") -> httpx.Response:
    return httpx.Response(
        200,
        json={"success": True, "status-code": status_code, "status-message": status_message, "body": body},
    )


@pytest.mark.asyncio
async def test_sends_exactly_one_fixed_post_to_gateway():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _ok()

    invoker, _ = _invoker(handler)
    await invoker.invoke()
    await invoker.invoke()

    assert len(seen) == 2
    for request in seen:
        assert request.method == "POST"
        assert str(request.url) == "https://example.test:9000/gateway"
        assert request.headers["content-type"] == "application/json; charset=UTF-8"
        assert request.content == b'{"path":"/","method":"GET"}'
        assert json.loads(request.content) == {"path": "/", "method": "GET"}


@pytest.mark.asyncio
async def test_success_is_written_to_result_element():
    invoker, sink = _invoker(lambda request: _ok())
    result = await invoker.invoke()

    assert result.style == ResultStyle.SUCCESS
    assert sink.results["result"] is result
    assert "Status: 200 OK" in result.text
    assert "hello" in sink.html("result")
    assert "bg-success" in sink.html("result")


@pytest.mark.asyncio
async def test_upstream_error_status_is_warning():
    invoker, sink = _invoker(lambda request: _ok(body="x", status_code=404, status_message="Not Found"))
    result = await invoker.invoke()
    assert result.style == ResultStyle.WARNING
    assert "bg-warning" in sink.html("result")


@pytest.mark.asyncio
async def test_structured_error_even_on_http_400():
    invoker, sink = _invoker(
        lambda request: httpx.Response(400, json={"success": False, "error": "BadRequest", "reason": "missing field"})
    )
    result = await invoker.invoke()
    assert result.outcome == Outcome.STRUCTURED_ERROR
    assert result.style == ResultStyle.DANGER
    assert "BadRequest: missing field" in sink.html("result")


@pytest.mark.asyncio
async def test_timeout_is_a_transport_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    invoker, sink = _invoker(handler)
    result = await invoker.invoke()
    assert result.outcome == Outcome.TRANSPORT_ERROR
    assert result.style == ResultStyle.DANGER
    assert "Gateway invocation failed with status: timeout" in sink.html("result")


@pytest.mark.asyncio
async def test_connection_error_is_a_transport_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    invoker, _ = _invoker(handler)
    result = await invoker.invoke()
    assert result.text == "Gateway invocation failed with status: error"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(502, text=""),
        httpx.Response(200, json=[1, 2, 3]),
    ],
)
async def test_unparseable_body_is_a_parser_error(response):
    invoker, sink = _invoker(lambda request: response)
    result = await invoker.invoke()
    assert result.outcome == Outcome.TRANSPORT_ERROR
    assert "status: parsererror" in sink.html("result")


@pytest.mark.asyncio
async def test_click_prevents_default_and_returns_before_completion():
    release = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        await release.wait()
        return _ok()

    invoker, sink = _invoker(handler)
    event = ClickEvent()
    task = invoker.on_click(event)

    assert event.default_prevented is True
    assert not task.done()
    assert sink.html("result") == ""

    release.set()
    result = await task
    assert result.style == ResultStyle.SUCCESS
    assert "hello" in sink.html("result")


@pytest.mark.asyncio
async def test_overlapping_clicks_last_response_wins():
    release_first = asyncio.Event()
    calls = {"n": 0}

    async def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            await release_first.wait()
            return _ok(body="first")
        return _ok(body="second")

    invoker, sink = _invoker(handler)
    first = invoker.on_click(ClickEvent())
    second = invoker.on_click(ClickEvent())

    await second
    assert "second" in sink.html("result")

    release_first.set()
    await first
    assert "first" in sink.html("result")
    assert [element for element, _ in sink.history] == ["result", "result"]
    assert calls["n"] == 2


def test_from_config_builds_url():
    cfg = Config()
    cfg.invoker.scheme = "http"
    cfg.invoker.host = "localhost:9000"
    invoker = GatewayInvoker.from_config(cfg, MemorySink())
    assert invoker.gateway_url == "http://localhost:9000/gateway"
    assert invoker.escape_html is True

    override = GatewayInvoker.from_config(cfg, MemorySink(), host="other:1")
    assert override.gateway_url == "http://other:1/gateway"
