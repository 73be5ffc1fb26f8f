"""Statistics over logged meals, grouped by the user's local calendar day."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from glycemic_tracker.domain.errors import InvalidInput, UpstreamUnavailable
from glycemic_tracker.domain.meals import MealRecord
from glycemic_tracker.domain.rounding import round_half_up
from glycemic_tracker.domain.stats import DailyStats, StatsSummary, TodayStats
from glycemic_tracker.services.boundary import StoreGuard

WINDOW_DAYS = 7


class StatsRepository(Protocol):
    """Persistence interface for meal statistics."""

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals created within ``[start, end)``."""


def summarize_meals(
    meals: Iterable[MealRecord],
    reference_instant: datetime,
    timezone: tzinfo | None = None,
) -> StatsSummary:
    """Reduce meals into today's totals and a 7-day series ending today.

    Days are local calendar days in ``timezone`` (default: the reference
    instant's own timezone).
    """
    zone = timezone or reference_instant.tzinfo
    reference_day = _local_day(reference_instant, zone)
    by_day: dict[date, list[MealRecord]] = {}
    for meal in meals:
        by_day.setdefault(_local_day(meal.created_at, zone), []).append(meal)

    weekly = []
    for offset in range(WINDOW_DAYS - 1, -1, -1):
        day = reference_day - timedelta(days=offset)
        weekly.append(_aggregate_day(day, by_day.get(day, [])))

    current = weekly[-1]
    today = TodayStats(
        calories=current.calories,
        carbs=current.carbs,
        protein=current.protein,
        fat=current.fat,
        avg_glycemic_score=current.avg_glycemic_score,
        meal_count=current.meal_count,
    )
    return StatsSummary(today=today, weekly=weekly)


@dataclass
class StatsService:
    """Service for computing a user's dashboard statistics by timezone."""

    repository: StatsRepository
    guard: StoreGuard
    fallback: StatsRepository | None = None

    async def get_summary(
        self,
        user_id: UUID,
        timezone_name: str = "UTC",
        now: datetime | None = None,
    ) -> StatsSummary:
        """Return today's totals and the last 7 days in the user's timezone."""
        tz = _resolve_timezone(timezone_name)
        reference = (now or datetime.now(tz=UTC)).astimezone(tz)
        start = (reference - timedelta(days=WINDOW_DAYS - 1)).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        end = start + timedelta(days=WINDOW_DAYS)
        start_utc, end_utc = start.astimezone(UTC), end.astimezone(UTC)
        try:
            meals = await self.guard.read(
                lambda: self.repository.list_meals(user_id, start_utc, end_utc),
                action="list_meals",
            )
        except UpstreamUnavailable:
            meals = (
                self.fallback.list_meals(user_id, start_utc, end_utc)
                if self.fallback
                else []
            )
        return summarize_meals(meals, reference, tz)


def _aggregate_day(day: date, meals: list[MealRecord]) -> DailyStats:
    scores = [meal.analysis.glycemic_score for meal in meals if meal.analysis]
    return DailyStats(
        date=day,
        calories=sum(meal.total_calories or 0.0 for meal in meals),
        carbs=sum(meal.total_carbs or 0.0 for meal in meals),
        protein=sum(meal.total_protein or 0.0 for meal in meals),
        fat=sum(meal.total_fat or 0.0 for meal in meals),
        meal_count=len(meals),
        avg_glycemic_score=round_half_up(sum(scores) / len(scores)) if scores else 0,
    )


def _local_day(instant: datetime, zone: tzinfo | None) -> date:
    if zone is None or instant.tzinfo is None:
        return instant.date()
    return instant.astimezone(zone).date()


def _resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidInput(f"Unknown timezone: {name}", field="tz") from exc
