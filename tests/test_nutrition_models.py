"""Tests for nutrition analysis models."""

import json
import math
from datetime import UTC, datetime
from uuid import uuid4

import pytest
from pydantic import ValidationError

from glycemic_tracker.adapters.supabase_meal_repository import parse_meal_row
from glycemic_tracker.domain.nutrition import (
    FoodItem,
    MealCategory,
    NutritionAnalysis,
    with_recomputed_totals,
)


def test_analysis_survives_stored_json() -> None:
    analysis = NutritionAnalysis(
        foods=[
            FoodItem(name="Lentils", quantity="1 cup", calories=230, carbs=40),
            FoodItem(name="Olive oil", quantity="", calories=40, fat=4.5),
        ],
        total_calories=270,
        total_carbs=40,
        total_fat=4.5,
        glycemic_score=32,
        recommendations=["Keep it up"],
        meal_category=MealCategory.DINNER,
    )
    row = {
        "id": str(uuid4()),
        "user_id": str(uuid4()),
        "created_at": datetime(2024, 3, 10, tzinfo=UTC).isoformat(),
        "image_url": None,
        "analysis_result": json.loads(json.dumps(analysis.model_dump(mode="json"))),
        "total_calories": 270,
        "total_protein": 0,
        "total_carbs": 40,
        "total_fat": 4.5,
    }

    meal = parse_meal_row(row)

    assert meal.analysis == analysis


def test_quantity_is_coerced_to_text() -> None:
    assert FoodItem(name="Egg", quantity=None).quantity == ""
    assert FoodItem(name="Egg", quantity=2).quantity == "2"


def test_fractional_score_rounds_half_up() -> None:
    analysis = NutritionAnalysis.model_validate(
        {"foods": [], "glycemic_score": 57.5}
    )

    assert analysis.glycemic_score == 58


def test_numeric_strings_are_accepted() -> None:
    item = FoodItem.model_validate({"name": "Bread", "calories": "80.5"})

    assert item.calories == 80.5


@pytest.mark.parametrize("score", [-1, 101, math.inf, math.nan])
def test_out_of_range_score_rejected(score: int) -> None:
    with pytest.raises(ValidationError):
        NutritionAnalysis(foods=[], glycemic_score=score)


def test_missing_foods_rejected() -> None:
    with pytest.raises(ValidationError):
        NutritionAnalysis.model_validate({"glycemic_score": 40})


def test_recomputed_totals_match_foods() -> None:
    analysis = NutritionAnalysis(
        foods=[
            FoodItem(name="A", calories=100, carbs=10, protein=5, fat=1),
            FoodItem(name="B", calories=50, carbs=5, protein=2.5, fat=0.5),
        ],
        total_calories=999,
        glycemic_score=40,
    )

    updated = with_recomputed_totals(analysis)

    assert updated.total_calories == 150
    assert updated.total_carbs == 15
    assert updated.total_protein == 7.5
    assert updated.total_fat == 1.5
    assert analysis.total_calories == 999


@pytest.mark.parametrize("value", [math.nan, math.inf, "NaN", "-Infinity"])
def test_non_finite_food_values_rejected(value: object) -> None:
    with pytest.raises(ValidationError):
        FoodItem.model_validate({"name": "Rice", "calories": value})


def test_non_finite_total_rejected() -> None:
    with pytest.raises(ValidationError):
        NutritionAnalysis(foods=[], total_carbs=math.inf, glycemic_score=40)
