"""Extended connection check run after the first successful health probe."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import TypeAdapter

from wellness_tracker.adapters.remote_store import FetchOk, RemoteStore
from wellness_tracker.domain.diagnostics import DiagnosticsReport
from wellness_tracker.services.fallback import decode

_logger = logging.getLogger(__name__)

_REPORT = TypeAdapter(DiagnosticsReport)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class DiagnosticsReporter:
    """Asks the service to exercise its key/value store and logs the outcome."""

    remote: RemoteStore
    base_url: str
    api_key: str
    timeout: float = 10
    clock: Callable[[], datetime] = _utc_now
    last_report: DiagnosticsReport | None = None

    async def run(self) -> DiagnosticsReport:
        """Collect a report; failures are recorded in it, never raised."""
        report = await self._collect()
        self.last_report = report
        if report.healthy:
            _logger.info("Remote diagnostics passed: %s", report.to_json())
        else:
            _logger.warning("Remote diagnostics incomplete: %s", report.to_json())
        return report

    async def _collect(self) -> DiagnosticsReport:
        if not self.base_url or not self.api_key:
            return DiagnosticsReport(
                config_present=False,
                errors=["API base URL or key is not configured"],
                checked_at=self.clock(),
            )
        result = decode(
            await self.remote.request("/diagnostics", timeout=self.timeout),
            _REPORT,
        )
        if isinstance(result, FetchOk):
            return result.value
        return DiagnosticsReport(
            config_present=True,
            errors=[result.describe()],
            checked_at=self.clock(),
        )
