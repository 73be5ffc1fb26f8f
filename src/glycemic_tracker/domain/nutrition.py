"""Models for nutrition analyses exchanged with the AI provider and the store."""

import math
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from glycemic_tracker.domain.rounding import round_half_up


class MealCategory(StrEnum):
    """Meal category tag attached to an analysis."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    MANUAL = "manual"


class FoodEntry(BaseModel):
    """Food line typed by the user for a text analysis request."""

    name: str = Field(min_length=1)
    quantity: str = ""


class FoodItem(BaseModel):
    """Single food line of an analysis."""

    model_config = ConfigDict(allow_inf_nan=False)

    name: str
    quantity: str = ""
    calories: float = 0.0
    carbs: float = 0.0
    protein: float = 0.0
    fat: float = 0.0

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_as_text(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, int | float):
            return str(value)
        return value


class NutritionAnalysis(BaseModel):
    """Structured nutrition estimate for one meal."""

    model_config = ConfigDict(allow_inf_nan=False)

    foods: list[FoodItem]
    total_calories: float = 0.0
    total_carbs: float = 0.0
    total_protein: float = 0.0
    total_fat: float = 0.0
    glycemic_score: int = Field(ge=0, le=100)
    recommendations: list[str] = Field(default_factory=list)
    meal_category: MealCategory | None = None

    @field_validator("glycemic_score", mode="before")
    @classmethod
    def _round_fractional_score(cls, value: object) -> object:
        if isinstance(value, float) and math.isfinite(value):
            return round_half_up(value)
        return value


class MacroTotals(BaseModel):
    """Four tracked macro totals."""

    calories: float = 0.0
    carbs: float = 0.0
    protein: float = 0.0
    fat: float = 0.0


def sum_foods(foods: list[FoodItem]) -> MacroTotals:
    """Sum per-food values into macro totals."""
    return MacroTotals(
        calories=sum(food.calories for food in foods),
        carbs=sum(food.carbs for food in foods),
        protein=sum(food.protein for food in foods),
        fat=sum(food.fat for food in foods),
    )


def with_recomputed_totals(analysis: NutritionAnalysis) -> NutritionAnalysis:
    """Return a copy whose totals equal the sum of its foods."""
    totals = sum_foods(analysis.foods)
    return analysis.model_copy(
        update={
            "total_calories": totals.calories,
            "total_carbs": totals.carbs,
            "total_protein": totals.protein,
            "total_fat": totals.fat,
        }
    )
