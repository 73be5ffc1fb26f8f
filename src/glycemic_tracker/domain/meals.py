"""Domain models for logged meals and saved meal templates."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from glycemic_tracker.domain.nutrition import FoodItem, NutritionAnalysis


@dataclass(frozen=True)
class MealRecord:
    """One logged eating event with denormalized totals."""

    id: UUID
    user_id: UUID
    created_at: datetime
    image_url: str | None
    analysis: NutritionAnalysis | None
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float


@dataclass(frozen=True)
class SavedMealTemplate:
    """User-named reusable meal snapshot."""

    id: UUID
    user_id: UUID
    name: str
    foods: list[FoodItem]
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    glycemic_score: int
    created_at: datetime


@dataclass(frozen=True)
class MealSaveResult:
    """Outcome of a meal write, flagged when it only reached the local store."""

    meal: MealRecord
    saved_locally: bool = False
