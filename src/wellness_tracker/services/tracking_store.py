"""Backend handlers that keep wellness records in a key/value store."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol, TypeVar
from uuid import uuid4

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from wellness_tracker.domain.diagnostics import DiagnosticsReport
from wellness_tracker.domain.errors import KeyValueStoreError
from wellness_tracker.domain.models import (
    AchievementLog,
    Badge,
    BadgeDraft,
    HydrationEntry,
    HydrationLog,
    Meal,
    MealDraft,
    MealLog,
    Mood,
    MoodEntry,
    StatsSnapshot,
    WriteResult,
)

_logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class MissingTableError(KeyValueStoreError):
    """Raised when the store is reachable but its table does not exist."""


class KeyValueStore(Protocol):
    """String-keyed JSON storage."""

    def get(self, key: str) -> object | None:
        """Return the value for ``key`` or None."""

    def set(self, key: str, value: object) -> None:
        """Store ``value`` under ``key``."""

    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""

    def ping(self) -> None:
        """Run a cheap query; raise ``KeyValueStoreError`` when it fails."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def mood_key(user_id: str, day: str) -> str:
    return f"mood:{user_id}:{day}"


def meals_key(user_id: str, day: str) -> str:
    return f"meals:{user_id}:{day}"


def hydration_key(user_id: str, day: str) -> str:
    return f"hydration:{user_id}:{day}"


def stats_key(user_id: str) -> str:
    return f"stats:{user_id}"


def achievements_key(user_id: str) -> str:
    return f"achievements:{user_id}"


@dataclass
class TrackingStoreService:
    """Request handlers behind the wellness HTTP API."""

    store: KeyValueStore
    clock: Callable[[], datetime] = _utc_now

    def save_mood(self, user_id: str, day: str, mood: Mood) -> WriteResult[MoodEntry]:
        """Replace the mood for a day."""
        entry = MoodEntry(mood=mood, timestamp=self.clock())
        self.store.set(mood_key(user_id, day), entry.to_json())
        _logger.info("Mood saved: user=%s date=%s mood=%s", user_id, day, mood.value)
        return WriteResult()

    def get_mood(self, user_id: str, day: str) -> MoodEntry | None:
        """Return the mood for a day, if any."""
        return self._load(mood_key(user_id, day), MoodEntry)

    def add_meal(
        self, user_id: str, day: str, meal: MealDraft
    ) -> WriteResult[MealLog]:
        """Append a meal to a day's log."""
        key = meals_key(user_id, day)
        log = self._load(key, MealLog) or MealLog()
        log.meals.append(Meal(**meal.model_dump(), timestamp=self.clock()))
        self.store.set(key, log.to_json())
        _logger.info("Meal saved: user=%s date=%s", user_id, day)
        return WriteResult(data=log)

    def get_meals(self, user_id: str, day: str) -> MealLog:
        """Return a day's meals."""
        return self._load(meals_key(user_id, day), MealLog) or MealLog()

    def add_hydration(
        self, user_id: str, day: str, amount: float
    ) -> WriteResult[HydrationLog]:
        """Append a drink and bump the day's running total."""
        key = hydration_key(user_id, day)
        log = self._load(key, HydrationLog) or HydrationLog()
        log.entries.append(HydrationEntry(amount=amount, timestamp=self.clock()))
        log.total = log.total + amount
        self.store.set(key, log.to_json())
        _logger.info("Hydration saved: user=%s date=%s amount=%s", user_id, day, amount)
        return WriteResult(data=log)

    def get_hydration(self, user_id: str, day: str) -> HydrationLog:
        """Return a day's drinks."""
        return self._load(hydration_key(user_id, day), HydrationLog) or HydrationLog()

    def save_stats(
        self, user_id: str, stats: StatsSnapshot
    ) -> WriteResult[StatsSnapshot]:
        """Replace the user's stats snapshot."""
        self.store.set(stats_key(user_id), stats.to_json())
        _logger.info("Stats saved: user=%s", user_id)
        return WriteResult()

    def get_stats(self, user_id: str) -> StatsSnapshot:
        """Return the user's stats snapshot."""
        return self._load(stats_key(user_id), StatsSnapshot) or StatsSnapshot()

    def add_achievement(
        self, user_id: str, badge: BadgeDraft
    ) -> WriteResult[AchievementLog]:
        """Append a badge to the user's achievements."""
        key = achievements_key(user_id)
        log = self._load(key, AchievementLog) or AchievementLog()
        log.badges.append(Badge(**badge.model_dump(), earned_at=self.clock()))
        self.store.set(key, log.to_json())
        _logger.info("Achievement saved: user=%s title=%s", user_id, badge.title)
        return WriteResult(data=log)

    def get_achievements(self, user_id: str) -> AchievementLog:
        """Return the user's achievements."""
        return self._load(achievements_key(user_id), AchievementLog) or AchievementLog()

    def run_diagnostics(self, config_present: bool) -> DiagnosticsReport:
        """Probe the store stage by stage and clean up the probe key."""
        report = DiagnosticsReport(
            config_present=config_present, checked_at=self.clock()
        )
        try:
            self.store.ping()
        except MissingTableError as exc:
            report.connected = True
            report.errors.append(f"table check failed: {exc}")
            return report
        except KeyValueStoreError as exc:
            report.errors.append(f"connection failed: {exc}")
            return report
        report.connected = True
        report.table_exists = True

        probe_key = f"diagnostic_test_{uuid4().hex}"
        probe_value = {"test": True, "timestamp": report.checked_at.isoformat()}
        try:
            self.store.set(probe_key, probe_value)
            report.can_write = True
        except KeyValueStoreError as exc:
            report.errors.append(f"write failed: {exc}")
            return report
        try:
            report.can_read = self.store.get(probe_key) == probe_value
            if not report.can_read:
                report.errors.append("read returned a different value")
        except KeyValueStoreError as exc:
            report.errors.append(f"read failed: {exc}")
        try:
            self.store.delete(probe_key)
        except KeyValueStoreError as exc:
            report.errors.append(f"cleanup failed: {exc}")
        return report

    def _load(self, key: str, model: type[ModelT]) -> ModelT | None:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return model.model_validate(raw)
        except PydanticValidationError as exc:
            raise KeyValueStoreError(f"stored value for {key} is invalid") from exc
