"""Progress counters with remote-first, local-fallback storage."""

from dataclasses import dataclass
from urllib.parse import quote

from pydantic import TypeAdapter

from wellness_tracker.adapters.local_store import LocalStore, Namespace
from wellness_tracker.adapters.remote_store import FetchOk, RemoteStore
from wellness_tracker.domain.models import StatsSnapshot, WriteResult
from wellness_tracker.services.fallback import (
    decode,
    log_fallback,
    read_local,
    validate_input,
)

_SNAPSHOT = TypeAdapter(StatsSnapshot)
_WRITE = TypeAdapter(WriteResult[StatsSnapshot])


@dataclass
class StatsService:
    """Reads and replaces the user's stats snapshot."""

    remote: RemoteStore
    local: LocalStore
    user_id: str

    async def replace_stats(
        self, stats: StatsSnapshot | dict[str, object]
    ) -> WriteResult[StatsSnapshot]:
        """Overwrite the stored snapshot with ``stats``."""
        snapshot = validate_input(StatsSnapshot, stats)
        result = decode(
            await self.remote.request(
                "/stats",
                "POST",
                {"userId": self.user_id, "stats": snapshot.to_json()},
            ),
            _WRITE,
        )
        if isinstance(result, FetchOk):
            return result.value
        log_fallback("replace_stats", result)
        self.local.write(Namespace.STATS, self.user_id, snapshot.to_json())
        return WriteResult()

    async def get_stats(self) -> StatsSnapshot:
        """Return the snapshot, all zeros when none was stored."""
        result = decode(
            await self.remote.request(f"/stats/{quote(self.user_id, safe='')}"),
            _SNAPSHOT,
        )
        if isinstance(result, FetchOk):
            return result.value
        log_fallback("get_stats", result)
        return read_local(
            self.local, Namespace.STATS, self.user_id, _SNAPSHOT, StatsSnapshot()
        )
