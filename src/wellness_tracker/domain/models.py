"""Typed records for each tracked wellness domain.

Records serialize with camelCase keys so the remote API, the backend key/value
rows and the local JSON store all share one wire shape.
"""

from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict[str, object]:
        """Return the JSON-ready camelCase representation."""
        return self.model_dump(mode="json", by_alias=True)


class Mood(str, Enum):
    """Self-reported energy level."""

    ENERGIZED = "energized"
    NEUTRAL = "neutral"
    SLUGGISH = "sluggish"


class MealType(str, Enum):
    """Slot a meal belongs to."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"


class MoodEntry(Record):
    """The mood logged for a day; a later write replaces it."""

    mood: Mood
    timestamp: datetime


class MealItem(Record):
    """A food item inside a meal."""

    name: str
    calories: float = Field(ge=0)


class MealDraft(Record):
    """A meal as submitted, before the store stamps it."""

    name: str
    type: MealType
    items: list[MealItem] = Field(default_factory=list)
    total_calories: float = Field(ge=0)


class Meal(MealDraft):
    """A stored meal."""

    timestamp: datetime


class MealLog(Record):
    """All meals logged for a day, in logging order."""

    meals: list[Meal] = Field(default_factory=list)


class HydrationEntry(Record):
    """A single drink in millilitres."""

    amount: float
    timestamp: datetime


class HydrationLog(Record):
    """Drinks logged for a day with their running total."""

    entries: list[HydrationEntry] = Field(default_factory=list)
    total: float = 0


class StatsSnapshot(Record):
    """Aggregate progress counters, replaced as a whole on write."""

    days_active: int = Field(default=0, ge=0)
    current_streak: int = Field(default=0, ge=0)
    avg_calories: float = Field(default=0, ge=0)


class BadgeDraft(Record):
    """A badge as submitted, before the store stamps it."""

    title: str
    emoji: str
    description: str


class Badge(BadgeDraft):
    """An earned badge."""

    earned_at: datetime


class AchievementLog(Record):
    """Badges earned by a user, in award order."""

    badges: list[Badge] = Field(default_factory=list)


DataT = TypeVar("DataT")


class WriteResult(Record, Generic[DataT]):
    """Outcome of a write, identical whichever store accepted it."""

    success: bool = True
    data: DataT | None = None

    def to_json(self) -> dict[str, object]:
        """Return the wire shape, omitting ``data`` when there is none."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
