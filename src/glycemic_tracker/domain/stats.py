"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyStats:
    """Totals for one local calendar day."""

    date: date
    calories: float
    carbs: float
    protein: float
    fat: float
    meal_count: int
    avg_glycemic_score: int


@dataclass(frozen=True)
class TodayStats:
    """Totals for the reference day."""

    calories: float
    carbs: float
    protein: float
    fat: float
    avg_glycemic_score: int
    meal_count: int


@dataclass(frozen=True)
class StatsSummary:
    """Today's totals plus the rolling 7-day series, oldest first."""

    today: TodayStats
    weekly: list[DailyStats]
