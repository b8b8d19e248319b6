"""Dependency container wiring for the client core and the backend service."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import partial
from pathlib import Path

import httpx
from supabase import create_client

from wellness_tracker.adapters.local_store import JsonFileLocalStore, LocalStore
from wellness_tracker.adapters.remote_store import (
    HttpxRemoteStore,
    RemoteStore,
    auth_headers,
)
from wellness_tracker.adapters.supabase_kv_store import SupabaseKeyValueStore
from wellness_tracker.app_logging import configure_logging
from wellness_tracker.config import Settings
from wellness_tracker.domain.days import local_now
from wellness_tracker.services.achievements import AchievementService
from wellness_tracker.services.availability import AvailabilityMonitor
from wellness_tracker.services.dashboard import DashboardService
from wellness_tracker.services.diagnostics import DiagnosticsReporter
from wellness_tracker.services.hydration import HydrationService
from wellness_tracker.services.meals import MealService
from wellness_tracker.services.mood import MoodService
from wellness_tracker.services.stats import StatsService
from wellness_tracker.services.tracking_store import TrackingStoreService


@dataclass
class AppContainer:
    """Holds the client-side dependencies."""

    settings: Settings
    monitor: AvailabilityMonitor
    remote_store: RemoteStore
    local_store: LocalStore
    mood_service: MoodService
    meal_service: MealService
    hydration_service: HydrationService
    stats_service: StatsService
    achievement_service: AchievementService
    dashboard_service: DashboardService
    diagnostics_reporter: DiagnosticsReporter
    close_resources: Callable[[], Awaitable[None]]

    async def retry_connection(self) -> bool:
        """Re-probe the remote service on user request."""
        return await self.monitor.force_recheck()


@dataclass
class ServiceContainer:
    """Holds the backend service dependencies."""

    settings: Settings
    tracking_service: TrackingStoreService
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
    local_store: LocalStore | None = None,
) -> AppContainer:
    """Create the default client container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    resolved_http_client = http_client or httpx.AsyncClient()
    base_url = resolved_settings.api_base_url.rstrip("/")
    monitor = AvailabilityMonitor(
        health_url=f"{base_url}/health",
        http_client=resolved_http_client,
        headers=auth_headers(resolved_settings.api_key),
        check_interval=resolved_settings.health_check_interval_seconds,
        probe_timeout=resolved_settings.health_timeout_seconds,
    )
    remote_store = HttpxRemoteStore.create(
        base_url=base_url,
        api_key=resolved_settings.api_key,
        monitor=monitor,
        http_client=resolved_http_client,
        timeout=resolved_settings.request_timeout_seconds,
    )
    resolved_local_store = local_store or JsonFileLocalStore(
        Path(resolved_settings.local_store_dir).expanduser()
    )
    diagnostics_reporter = DiagnosticsReporter(
        remote=remote_store,
        base_url=base_url,
        api_key=resolved_settings.api_key,
        timeout=resolved_settings.diagnostics_timeout_seconds,
    )
    monitor.on_first_success = diagnostics_reporter.run

    clock = partial(local_now, resolved_settings.timezone)
    user_id = resolved_settings.user_id
    mood_service = MoodService(
        remote=remote_store, local=resolved_local_store, user_id=user_id, clock=clock
    )
    meal_service = MealService(
        remote=remote_store, local=resolved_local_store, user_id=user_id, clock=clock
    )
    hydration_service = HydrationService(
        remote=remote_store, local=resolved_local_store, user_id=user_id, clock=clock
    )
    stats_service = StatsService(
        remote=remote_store, local=resolved_local_store, user_id=user_id
    )
    achievement_service = AchievementService(
        remote=remote_store, local=resolved_local_store, user_id=user_id, clock=clock
    )
    dashboard_service = DashboardService(
        mood_service=mood_service,
        meal_service=meal_service,
        hydration_service=hydration_service,
        stats_service=stats_service,
        achievement_service=achievement_service,
    )

    async def close_resources() -> None:
        await monitor.cancel_diagnostics()
        await resolved_http_client.aclose()

    return AppContainer(
        settings=resolved_settings,
        monitor=monitor,
        remote_store=remote_store,
        local_store=resolved_local_store,
        mood_service=mood_service,
        meal_service=meal_service,
        hydration_service=hydration_service,
        stats_service=stats_service,
        achievement_service=achievement_service,
        dashboard_service=dashboard_service,
        diagnostics_reporter=diagnostics_reporter,
        close_resources=close_resources,
    )


def build_service_container(settings: Settings | None = None) -> ServiceContainer:
    """Create the default backend container."""
    resolved_settings = settings or Settings()
    if not resolved_settings.supabase_url or not resolved_settings.supabase_service_key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    kv_store = SupabaseKeyValueStore(supabase_client, table=resolved_settings.kv_table)
    tracking_service = TrackingStoreService(kv_store)

    async def close_resources() -> None:
        return None

    return ServiceContainer(
        settings=resolved_settings,
        tracking_service=tracking_service,
        close_resources=close_resources,
    )
