"""Pydantic models for API request payloads."""

from pydantic import BaseModel, ConfigDict, Field

from glycemic_tracker.domain.nutrition import FoodEntry, MealCategory, NutritionAnalysis
from glycemic_tracker.domain.profile import WeightGoalType


class AnalyzeNutritionRequest(BaseModel):
    """Manual food list to analyze."""

    foods: list[FoodEntry] = Field(default_factory=list)


class AnalyzeMealRequest(BaseModel):
    """Meal photo to analyze, as a data URL or bare base64."""

    image: str = ""
    meal_category: MealCategory = MealCategory.LUNCH


class LogMealRequest(BaseModel):
    """Reviewed analysis to store as a meal."""

    analysis: NutritionAnalysis
    image_url: str | None = None
    meal_category: MealCategory | None = None


class SaveTemplateRequest(BaseModel):
    """Analysis to keep as a named template."""

    name: str
    analysis: NutritionAnalysis


class RecalculateGoalsRequest(BaseModel):
    """Goal inputs; unset fields are taken from the stored profile."""

    model_config = ConfigDict(allow_inf_nan=False)

    weight_kg: float | None = None
    uses_incretin_mimetic: bool | None = None
    goal: WeightGoalType | None = None
