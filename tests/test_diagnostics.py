"""Tests for the diagnostics stages and the client reporter."""

import asyncio

import httpx

from tests.conftest import (
    API_KEY,
    BASE_URL,
    FIXED_NOW,
    InMemoryKeyValueStore,
    fixed_now,
    make_harness,
)
from wellness_tracker.services.diagnostics import DiagnosticsReporter
from wellness_tracker.services.tracking_store import TrackingStoreService


def test_all_stages_pass_and_probe_key_is_removed() -> None:
    store = InMemoryKeyValueStore(values={"mood:demo-user:2024-05-01": {}})
    service = TrackingStoreService(store, clock=fixed_now)

    report = service.run_diagnostics(config_present=True)

    assert report.healthy
    assert report.errors == []
    assert report.checked_at == FIXED_NOW
    assert len(store.deleted) == 1
    assert store.deleted[0].startswith("diagnostic_test_")
    assert list(store.values) == ["mood:demo-user:2024-05-01"]


def test_missing_table_is_reported_as_connected() -> None:
    service = TrackingStoreService(InMemoryKeyValueStore(missing_table=True))

    report = service.run_diagnostics(config_present=True)

    assert report.connected is True
    assert report.table_exists is False
    assert report.can_write is False
    assert "table check failed" in report.errors[0]


def test_unreachable_store_fails_every_stage() -> None:
    service = TrackingStoreService(InMemoryKeyValueStore(fail=True))

    report = service.run_diagnostics(config_present=False)

    assert not report.healthy
    assert report.to_json()["connected"] is False
    assert report.errors == ["connection failed: storage offline"]


def test_reporter_fetches_remote_report(
    backend_transport: httpx.ASGITransport, kv_store: InMemoryKeyValueStore
) -> None:
    harness = make_harness(backend_transport)
    reporter = DiagnosticsReporter(
        remote=harness.remote, base_url=BASE_URL, api_key=API_KEY
    )

    report = asyncio.run(reporter.run())

    assert report.healthy
    assert reporter.last_report == report
    assert kv_store.values == {}


def test_first_successful_probe_triggers_reporter(
    backend_transport: httpx.ASGITransport,
) -> None:
    harness = make_harness(backend_transport)
    reporter = DiagnosticsReporter(
        remote=harness.remote, base_url=BASE_URL, api_key=API_KEY
    )
    harness.monitor.on_first_success = reporter.run

    async def scenario() -> None:
        await harness.monitor.ensure_checked()
        await harness.monitor.diagnostics_task

    asyncio.run(scenario())

    assert reporter.last_report is not None
    assert reporter.last_report.can_read is True


def test_reporter_records_missing_configuration() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    harness = make_harness(httpx.MockTransport(handler))
    reporter = DiagnosticsReporter(remote=harness.remote, base_url="", api_key="")

    report = asyncio.run(reporter.run())

    assert report.config_present is False
    assert report.connected is False
    assert report.errors


def test_reporter_records_remote_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/health"):
            return httpx.Response(200, json={"status": "ok"})
        return httpx.Response(500, json={"error": "boom"})

    harness = make_harness(httpx.MockTransport(handler))
    reporter = DiagnosticsReporter(
        remote=harness.remote, base_url=BASE_URL, api_key=API_KEY
    )

    report = asyncio.run(reporter.run())

    assert report.config_present is True
    assert report.connected is False
    assert report.errors == ["RemoteError 500: boom"]
