"""Hydration tracking with remote-first, local-fallback storage."""

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from urllib.parse import quote

from pydantic import TypeAdapter

from wellness_tracker.adapters.local_store import LocalStore, Namespace
from wellness_tracker.adapters.remote_store import FetchOk, RemoteStore
from wellness_tracker.domain.days import day_key, local_now
from wellness_tracker.domain.errors import ValidationError
from wellness_tracker.domain.models import HydrationEntry, HydrationLog, WriteResult
from wellness_tracker.services.fallback import (
    decode,
    log_fallback,
    read_day,
    read_local,
)

_LOG = TypeAdapter(HydrationLog)
_WRITE = TypeAdapter(WriteResult[HydrationLog])


@dataclass
class HydrationService:
    """Appends drinks to the day's log and keeps its total."""

    remote: RemoteStore
    local: LocalStore
    user_id: str
    clock: Callable[[], datetime] = local_now

    async def log_hydration(self, amount: float) -> WriteResult[HydrationLog]:
        """Add a drink in millilitres and return the day's updated log."""
        if isinstance(amount, bool) or not isinstance(amount, int | float):
            raise ValidationError("Hydration amount must be a number")
        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError("Hydration amount must be a positive number")
        now = self.clock()
        day = day_key(now)
        result = decode(
            await self.remote.request(
                "/hydration",
                "POST",
                {"userId": self.user_id, "date": day, "amount": amount},
            ),
            _WRITE,
        )
        if isinstance(result, FetchOk):
            return result.value
        log_fallback("log_hydration", result)
        log = read_local(
            self.local, Namespace.HYDRATION, day, _LOG, HydrationLog()
        )
        log.entries.append(HydrationEntry(amount=amount, timestamp=now))
        log.total = sum(entry.amount for entry in log.entries)
        self.local.write(Namespace.HYDRATION, day, log.to_json())
        return WriteResult(data=log)

    async def get_hydration(self, day: date | str | None = None) -> HydrationLog:
        """Return the drinks for a day; empty with a zero total by default."""
        resolved_day = read_day(day, self.clock(), "get_hydration")
        if resolved_day is None:
            return HydrationLog()
        result = decode(
            await self.remote.request(
                f"/hydration/{quote(self.user_id, safe='')}/{resolved_day}"
            ),
            _LOG,
        )
        if isinstance(result, FetchOk):
            return result.value
        log_fallback("get_hydration", result)
        return read_local(
            self.local, Namespace.HYDRATION, resolved_day, _LOG, HydrationLog()
        )
