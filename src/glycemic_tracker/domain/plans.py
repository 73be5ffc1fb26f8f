"""Models for the personalized care plan."""

from pydantic import BaseModel, Field


class GlycemicTargets(BaseModel):
    """Target blood-glucose range in mg/dL."""

    min: int = Field(gt=0)
    max: int = Field(gt=0)


class DailyMacros(BaseModel):
    """Daily macro and hydration targets."""

    water: int
    fiber: int
    protein: int
    fat: int
    carbs: int


class MealScheduleEntry(BaseModel):
    """One scheduled meal with its recommendations."""

    time: str
    meal: str
    recommendations: list[str]


class PersonalizedPlan(BaseModel):
    """Personalized care plan for a user profile."""

    greeting: str
    diabetes_analysis: str
    glycemic_targets: GlycemicTargets
    daily_macros: DailyMacros
    meal_schedule: list[MealScheduleEntry]
    goals: list[str]
    nutrition_guidelines: list[str]
    exercise_plan: list[str]
    medication_reminders: list[str]
    weekly_goals: list[str]
    motivational_message: str
