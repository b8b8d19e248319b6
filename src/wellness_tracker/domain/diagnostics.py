"""Diagnostics report produced after the first successful connection."""

from datetime import datetime

from pydantic import Field

from wellness_tracker.domain.models import Record


class DiagnosticsReport(Record):
    """Outcome of each diagnostics stage, recorded independently."""

    config_present: bool = False
    connected: bool = False
    table_exists: bool = False
    can_write: bool = False
    can_read: bool = False
    errors: list[str] = Field(default_factory=list)
    checked_at: datetime | None = None

    @property
    def healthy(self) -> bool:
        """Return True when every stage passed."""
        return all(
            (
                self.config_present,
                self.connected,
                self.table_exists,
                self.can_write,
                self.can_read,
            )
        )
