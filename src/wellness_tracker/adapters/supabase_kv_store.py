"""Supabase-backed key/value store for the backend service."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from wellness_tracker.domain.errors import KeyValueStoreError
from wellness_tracker.services.tracking_store import KeyValueStore, MissingTableError

# PostgreSQL undefined_table and PostgREST schema-cache miss.
_MISSING_TABLE_CODES = {"42P01", "PGRST205"}


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Stores JSON values in a two-column ``key``/``value`` table."""

    client: Client
    table: str = "kv_store"

    def get(self, key: str) -> object | None:
        """Return the value for a key."""
        with _translate_errors("get"):
            response = (
                self.client.table(self.table)
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return response.data[0].get("value")

    def set(self, key: str, value: object) -> None:
        """Insert or replace the value for a key."""
        with _translate_errors("set"):
            self.client.table(self.table).upsert({"key": key, "value": value}).execute()

    def delete(self, key: str) -> None:
        """Delete a key."""
        with _translate_errors("delete"):
            self.client.table(self.table).delete().eq("key", key).execute()

    def ping(self) -> None:
        """Query a single key to prove the table is reachable."""
        with _translate_errors("ping"):
            self.client.table(self.table).select("key").limit(1).execute()


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    try:
        yield
    except APIError as exc:
        if exc.code in _MISSING_TABLE_CODES:
            raise MissingTableError(exc.message or action) from exc
        raise KeyValueStoreError(f"{action} failed: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise KeyValueStoreError(f"{action} failed: {exc}") from exc
