"""Remote service availability tracking.

The monitor starts optimistic and only probes the health endpoint once per
check interval; callers inside the window get the cached answer. Data calls
that hit a timeout, a transport error or a 5xx flip the cached state to
unavailable straight away through ``mark_unavailable``.
"""

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from enum import Enum

import httpx

_logger = logging.getLogger(__name__)

FirstSuccessHook = Callable[[], Coroutine[object, object, object]]


class StorageMode(Enum):
    """Which store currently serves requests."""

    REMOTE = "remote"
    LOCAL = "local"


@dataclass
class AvailabilityMonitor:
    """Cached health state of the remote service."""

    health_url: str
    http_client: httpx.AsyncClient
    headers: dict[str, str] = field(default_factory=dict)
    check_interval: float = 30
    probe_timeout: float = 5
    clock: Callable[[], float] = time.monotonic
    on_first_success: FirstSuccessHook | None = None
    available: bool = True
    last_checked_at: float | None = None
    probe_count: int = 0
    diagnostics_task: asyncio.Task | None = None

    @property
    def mode(self) -> StorageMode:
        """Return the store a request would be routed to right now."""
        return StorageMode.REMOTE if self.available else StorageMode.LOCAL

    async def ensure_checked(self) -> bool:
        """Return availability, probing only when the cached value is stale."""
        if self.last_checked_at is not None:
            elapsed = self.clock() - self.last_checked_at
            if elapsed < self.check_interval:
                return self.available
        return await self.check()

    async def force_recheck(self) -> bool:
        """Drop the cached value and probe immediately."""
        self.last_checked_at = None
        return await self.check()

    async def check(self) -> bool:
        """Probe the health endpoint and cache the outcome."""
        self.last_checked_at = self.clock()
        self.probe_count += 1
        healthy = await self._probe()
        self._set_available(healthy, reason="health probe")
        if healthy:
            self._maybe_start_diagnostics()
        return healthy

    def mark_unavailable(self, reason: str) -> None:
        """Record an outage observed by a data call."""
        self.last_checked_at = self.clock()
        self._set_available(False, reason=reason)

    async def cancel_diagnostics(self) -> None:
        """Stop a diagnostics run that has not finished yet."""
        task = self.diagnostics_task
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _probe(self) -> bool:
        try:
            response = await self.http_client.get(
                self.health_url,
                headers=self.headers,
                timeout=self.probe_timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            _logger.info("Health probe failed: %s", str(exc) or type(exc).__name__)
            return False
        if not response.is_success:
            _logger.info("Health probe failed: status=%s", response.status_code)
            return False
        return True

    def _set_available(self, available: bool, reason: str) -> None:
        if available != self.available:
            _logger.info(
                "Remote service is now %s (%s)",
                "available" if available else "unavailable",
                reason,
            )
        self.available = available

    def _maybe_start_diagnostics(self) -> None:
        if self.on_first_success is None or self.diagnostics_task is not None:
            return
        self.diagnostics_task = asyncio.create_task(self.on_first_success())
