"""Parallel loads backing the home and journey views."""

import asyncio
import math
from dataclasses import dataclass
from datetime import date

from wellness_tracker.domain.models import (
    AchievementLog,
    HydrationLog,
    MealLog,
    MoodEntry,
    StatsSnapshot,
)
from wellness_tracker.services.achievements import AchievementService
from wellness_tracker.services.hydration import HydrationService
from wellness_tracker.services.meals import MealService
from wellness_tracker.services.mood import MoodService
from wellness_tracker.services.stats import StatsService

CALORIE_GOAL = 2000
GLASS_ML = 250
WATER_GOAL_GLASSES = 8


@dataclass(frozen=True)
class TodaySummary:
    """Everything the home view shows for one day."""

    mood: MoodEntry | None
    meals: MealLog
    hydration: HydrationLog
    total_calories: float
    calorie_progress: float
    water_glasses: int
    water_progress: float


@dataclass(frozen=True)
class JourneySummary:
    """Long-running progress shown on the journey view."""

    stats: StatsSnapshot
    achievements: AchievementLog


@dataclass
class DashboardService:
    """Fans out independent reads and joins their results."""

    mood_service: MoodService
    meal_service: MealService
    hydration_service: HydrationService
    stats_service: StatsService
    achievement_service: AchievementService
    calorie_goal: float = CALORIE_GOAL
    water_goal_glasses: int = WATER_GOAL_GLASSES

    async def load_today(self, day: date | str | None = None) -> TodaySummary:
        """Load mood, meals and hydration for a day concurrently."""
        mood, meals, hydration = await asyncio.gather(
            self.mood_service.get_mood(day),
            self.meal_service.get_meals(day),
            self.hydration_service.get_hydration(day),
        )
        total_calories = sum(meal.total_calories for meal in meals.meals)
        # Half-up rounding to whole glasses.
        water_glasses = math.floor(hydration.total / GLASS_ML + 0.5)
        return TodaySummary(
            mood=mood,
            meals=meals,
            hydration=hydration,
            total_calories=total_calories,
            calorie_progress=_progress(total_calories, self.calorie_goal),
            water_glasses=water_glasses,
            water_progress=_progress(water_glasses, self.water_goal_glasses),
        )

    async def load_journey(self) -> JourneySummary:
        """Load stats and achievements concurrently."""
        stats, achievements = await asyncio.gather(
            self.stats_service.get_stats(),
            self.achievement_service.get_achievements(),
        )
        return JourneySummary(stats=stats, achievements=achievements)


def _progress(value: float, goal: float) -> float:
    if goal <= 0:
        return 0.0
    return min(value / goal, 1.0)
