"""Tests for the httpx remote store."""

import asyncio
import json

import httpx

from tests.conftest import API_KEY, make_harness, offline_transport
from wellness_tracker.adapters.remote_store import (
    FetchOk,
    RemoteError,
    RemoteInvalidPayload,
    RemoteNetworkError,
    RemoteTimeout,
    RemoteUnavailable,
)


def _router(data_handler):  # type: ignore[no-untyped-def]
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/health"):
            return httpx.Response(200, json={"status": "ok"})
        return data_handler(request)

    return handler


def test_request_sends_credentials_and_json_body() -> None:
    seen: list[httpx.Request] = []

    def data_handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    harness = make_harness(httpx.MockTransport(_router(data_handler)))

    result = asyncio.run(
        harness.remote.request("/mood", "POST", {"userId": "u", "mood": "neutral"})
    )

    assert result == FetchOk({"success": True})
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/wellness/mood"
    assert request.headers["authorization"] == f"Bearer {API_KEY}"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"userId": "u", "mood": "neutral"}


def test_unavailable_service_short_circuits() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(503, json={"error": "down"})

    harness = make_harness(httpx.MockTransport(handler))

    async def scenario() -> object:
        await harness.monitor.ensure_checked()
        return await harness.remote.request("/meals/u/2024-05-01")

    result = asyncio.run(scenario())

    assert isinstance(result, RemoteUnavailable)
    assert calls == ["/wellness/health"]


def test_server_error_marks_service_unavailable() -> None:
    harness = make_harness(
        httpx.MockTransport(
            _router(lambda request: httpx.Response(503, json={"error": "kv down"}))
        )
    )

    result = asyncio.run(harness.remote.request("/stats/u"))

    assert result == RemoteError(message="kv down", status=503)
    assert harness.monitor.available is False


def test_client_error_keeps_service_available() -> None:
    harness = make_harness(
        httpx.MockTransport(
            _router(
                lambda request: httpx.Response(
                    400, json={"error": "Missing required fields: userId, stats"}
                )
            )
        )
    )

    result = asyncio.run(harness.remote.request("/stats", "POST", {}))

    assert isinstance(result, RemoteError)
    assert result.status == 400
    assert "Missing required fields" in result.message
    assert harness.monitor.available is True


def test_timeout_is_reported_and_marks_unavailable() -> None:
    def data_handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    harness = make_harness(httpx.MockTransport(_router(data_handler)))

    result = asyncio.run(harness.remote.request("/hydration/u/2024-05-01"))

    assert isinstance(result, RemoteTimeout)
    assert harness.monitor.available is False


def test_network_error_is_reported_and_marks_unavailable() -> None:
    def data_handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("reset by peer", request=request)

    harness = make_harness(httpx.MockTransport(_router(data_handler)))

    result = asyncio.run(harness.remote.request("/achievements/u"))

    assert isinstance(result, RemoteNetworkError)
    assert harness.monitor.available is False


def test_non_json_body_is_invalid_payload() -> None:
    harness = make_harness(
        httpx.MockTransport(
            _router(lambda request: httpx.Response(200, content=b"<html></html>"))
        )
    )

    result = asyncio.run(harness.remote.request("/meals/u/2024-05-01"))

    assert isinstance(result, RemoteInvalidPayload)
    assert harness.monitor.available is True


def test_offline_service_never_raises() -> None:
    harness = make_harness(offline_transport())

    result = asyncio.run(harness.remote.request("/mood/u/2024-05-01"))

    assert isinstance(result, RemoteUnavailable)
    assert result.describe() == "RemoteUnavailable"
