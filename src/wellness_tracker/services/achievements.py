"""Earned badges with remote-first, local-fallback storage."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import quote

from pydantic import TypeAdapter

from wellness_tracker.adapters.local_store import LocalStore, Namespace
from wellness_tracker.adapters.remote_store import FetchOk, RemoteStore
from wellness_tracker.domain.days import local_now
from wellness_tracker.domain.models import (
    AchievementLog,
    Badge,
    BadgeDraft,
    WriteResult,
)
from wellness_tracker.services.fallback import (
    decode,
    log_fallback,
    read_local,
    validate_input,
)

_LOG = TypeAdapter(AchievementLog)
_WRITE = TypeAdapter(WriteResult[AchievementLog])


@dataclass
class AchievementService:
    """Appends badges to the user's achievement log."""

    remote: RemoteStore
    local: LocalStore
    user_id: str
    clock: Callable[[], datetime] = local_now

    async def add_achievement(
        self, badge: BadgeDraft | dict[str, object]
    ) -> WriteResult[AchievementLog]:
        """Award a badge and return the updated log."""
        draft = validate_input(BadgeDraft, badge)
        result = decode(
            await self.remote.request(
                "/achievements",
                "POST",
                {"userId": self.user_id, "badge": draft.to_json()},
            ),
            _WRITE,
        )
        if isinstance(result, FetchOk):
            return result.value
        log_fallback("add_achievement", result)
        log = read_local(
            self.local, Namespace.ACHIEVEMENTS, self.user_id, _LOG, AchievementLog()
        )
        log.badges.append(Badge(**draft.model_dump(), earned_at=self.clock()))
        self.local.write(Namespace.ACHIEVEMENTS, self.user_id, log.to_json())
        return WriteResult(data=log)

    async def get_achievements(self) -> AchievementLog:
        """Return earned badges; empty when none were awarded."""
        result = decode(
            await self.remote.request(
                f"/achievements/{quote(self.user_id, safe='')}"
            ),
            _LOG,
        )
        if isinstance(result, FetchOk):
            return result.value
        log_fallback("get_achievements", result)
        return read_local(
            self.local,
            Namespace.ACHIEVEMENTS,
            self.user_id,
            _LOG,
            AchievementLog(),
        )
