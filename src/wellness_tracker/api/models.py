"""Pydantic models for request bodies of the wellness API."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from wellness_tracker.domain.errors import ValidationError
from wellness_tracker.domain.models import BadgeDraft, MealDraft, Mood, StatsSnapshot


class RequestBody(BaseModel):
    """Body whose required fields are checked explicitly for a 400 response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def require(self, *fields: str) -> None:
        """Raise ``ValidationError`` naming every field in ``fields``."""
        missing = [name for name in fields if getattr(self, name) in (None, "")]
        if missing:
            names = ", ".join(to_camel(name) for name in fields)
            raise ValidationError(f"Missing required fields: {names}")


class MoodRequest(RequestBody):
    user_id: str | None = None
    date: str | None = None
    mood: Mood | None = None


class MealRequest(RequestBody):
    user_id: str | None = None
    date: str | None = None
    meal: MealDraft | None = None


class HydrationRequest(RequestBody):
    user_id: str | None = None
    date: str | None = None
    amount: float | None = None


class StatsRequest(RequestBody):
    user_id: str | None = None
    stats: StatsSnapshot | None = None


class AchievementRequest(RequestBody):
    user_id: str | None = None
    badge: BadgeDraft | None = None
