"""Mood logging with remote-first, local-fallback storage."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from urllib.parse import quote

from pydantic import TypeAdapter

from wellness_tracker.adapters.local_store import LocalStore, Namespace
from wellness_tracker.adapters.remote_store import FetchOk, RemoteStore
from wellness_tracker.domain.days import day_key, local_now
from wellness_tracker.domain.errors import ValidationError
from wellness_tracker.domain.models import Mood, MoodEntry, WriteResult
from wellness_tracker.services.fallback import (
    decode,
    log_fallback,
    read_day,
    read_local,
)

_ENTRY = TypeAdapter(MoodEntry | None)
_WRITE = TypeAdapter(WriteResult[MoodEntry])


@dataclass
class MoodService:
    """Stores one mood per day; a later write for the same day replaces it."""

    remote: RemoteStore
    local: LocalStore
    user_id: str
    clock: Callable[[], datetime] = local_now

    async def log_mood(self, mood: Mood | str) -> WriteResult[MoodEntry]:
        """Save today's mood."""
        resolved = _parse_mood(mood)
        now = self.clock()
        day = day_key(now)
        result = decode(
            await self.remote.request(
                "/mood",
                "POST",
                {"userId": self.user_id, "date": day, "mood": resolved.value},
            ),
            _WRITE,
        )
        if isinstance(result, FetchOk):
            return result.value
        log_fallback("log_mood", result)
        entry = MoodEntry(mood=resolved, timestamp=now)
        self.local.write(Namespace.MOOD, day, entry.to_json())
        return WriteResult()

    async def get_mood(self, day: date | str | None = None) -> MoodEntry | None:
        """Return the mood for a day, or None when nothing was logged."""
        resolved_day = read_day(day, self.clock(), "get_mood")
        if resolved_day is None:
            return None
        result = decode(
            await self.remote.request(
                f"/mood/{quote(self.user_id, safe='')}/{resolved_day}"
            ),
            _ENTRY,
        )
        if isinstance(result, FetchOk):
            return result.value
        log_fallback("get_mood", result)
        return read_local(self.local, Namespace.MOOD, resolved_day, _ENTRY, None)


def _parse_mood(mood: Mood | str) -> Mood:
    try:
        return Mood(mood)
    except ValueError as exc:
        options = ", ".join(option.value for option in Mood)
        raise ValidationError(
            f"Unknown mood {mood!r}; expected one of {options}"
        ) from exc
