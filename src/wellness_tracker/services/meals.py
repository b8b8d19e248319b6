"""Meal journal with remote-first, local-fallback storage."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from urllib.parse import quote

from pydantic import TypeAdapter

from wellness_tracker.adapters.local_store import LocalStore, Namespace
from wellness_tracker.adapters.remote_store import FetchOk, RemoteStore
from wellness_tracker.domain.days import day_key, local_now
from wellness_tracker.domain.errors import ValidationError
from wellness_tracker.domain.models import (
    Meal,
    MealDraft,
    MealLog,
    MealType,
    WriteResult,
)
from wellness_tracker.services.fallback import (
    decode,
    log_fallback,
    read_day,
    read_local,
    validate_input,
)

QUICK_ADD_NAME = "Quick Add"

_LOG = TypeAdapter(MealLog)
_WRITE = TypeAdapter(WriteResult[MealLog])


@dataclass
class MealService:
    """Appends meals to the day's journal."""

    remote: RemoteStore
    local: LocalStore
    user_id: str
    clock: Callable[[], datetime] = local_now

    async def log_meal(
        self, meal: MealDraft | dict[str, object]
    ) -> WriteResult[MealLog]:
        """Append a meal to today's log and return the updated log."""
        draft = validate_input(MealDraft, meal)
        now = self.clock()
        day = day_key(now)
        result = decode(
            await self.remote.request(
                "/meals",
                "POST",
                {"userId": self.user_id, "date": day, "meal": draft.to_json()},
            ),
            _WRITE,
        )
        if isinstance(result, FetchOk):
            return result.value
        log_fallback("log_meal", result)
        log = read_local(self.local, Namespace.MEALS, day, _LOG, MealLog())
        log.meals.append(Meal(**draft.model_dump(), timestamp=now))
        self.local.write(Namespace.MEALS, day, log.to_json())
        return WriteResult(data=log)

    async def quick_add(self, name: str, calories: float) -> WriteResult[MealLog]:
        """Log a single food as a snack."""
        if not name:
            raise ValidationError("Food name is required")
        return await self.log_meal(
            {
                "name": QUICK_ADD_NAME,
                "type": MealType.SNACK,
                "items": [{"name": name, "calories": calories}],
                "totalCalories": calories,
            }
        )

    async def get_meals(self, day: date | str | None = None) -> MealLog:
        """Return the meals for a day; empty when nothing was logged."""
        resolved_day = read_day(day, self.clock(), "get_meals")
        if resolved_day is None:
            return MealLog()
        result = decode(
            await self.remote.request(
                f"/meals/{quote(self.user_id, safe='')}/{resolved_day}"
            ),
            _LOG,
        )
        if isinstance(result, FetchOk):
            return result.value
        log_fallback("get_meals", result)
        return read_local(self.local, Namespace.MEALS, resolved_day, _LOG, MealLog())
