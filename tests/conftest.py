"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

import pytest

from glycemic_tracker.adapters.local_store import LocalStore
from glycemic_tracker.config import Settings
from glycemic_tracker.containers import AppContainer, build_container
from glycemic_tracker.domain.meals import MealRecord
from glycemic_tracker.domain.nutrition import FoodItem, NutritionAnalysis
from glycemic_tracker.services.analysis import AnalysisClient
from glycemic_tracker.services.boundary import StoreGuard
from glycemic_tracker.services.plans import PlanClient


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "name": "Oatmeal",
                    "quantity": "1 bowl",
                    "calories": 150,
                    "carbs": 27,
                    "protein": 5,
                    "fat": 3,
                },
                {
                    "name": "Banana",
                    "quantity": "1 medium",
                    "calories": 105,
                    "carbs": 27,
                    "protein": 1.3,
                    "fat": 0.4,
                },
            ],
            "total_calories": 255,
            "total_carbs": 54,
            "total_protein": 6.3,
            "total_fat": 3.4,
            "glycemic_score": 58,
            "recommendations": ["Add protein", "Watch portions", "Drink water"],
        }
    )
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        image_data_url: str | None,
        schema: dict[str, object],
        temperature: float,
        max_output_tokens: int,
    ) -> dict[str, object]:
        self.calls.append(
            {
                "model": model,
                "prompt": prompt,
                "image_data_url": image_data_url,
                "temperature": temperature,
            }
        )
        return self.payload


@dataclass
class FakePlanClient(PlanClient):
    """Fake plan client returning a fixed payload."""

    payload: dict[str, object]
    prompts: list[str] = field(default_factory=list)

    async def complete_json(
        self, *, model: str, system_prompt: str, prompt: str, temperature: float
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        return self.payload


class UnavailableStore:
    """Repository stand-in whose every call fails like a dropped connection."""

    def __getattr__(self, name: str):  # type: ignore[no-untyped-def]
        def _fail(*_args, **_kwargs):  # type: ignore[no-untyped-def]
            raise ConnectionError(f"{name} failed")

        return _fail


def make_analysis(
    score: int = 50, foods: list[FoodItem] | None = None
) -> NutritionAnalysis:
    foods = foods or [
        FoodItem(
            name="Rice", quantity="1 cup", calories=200, carbs=45, protein=4, fat=1
        )
    ]
    return NutritionAnalysis(
        foods=foods,
        total_calories=sum(food.calories for food in foods),
        total_carbs=sum(food.carbs for food in foods),
        total_protein=sum(food.protein for food in foods),
        total_fat=sum(food.fat for food in foods),
        glycemic_score=score,
        recommendations=[],
    )


def make_meal(  # noqa: PLR0913
    created_at: datetime,
    *,
    user_id: UUID | None = None,
    calories: float = 0.0,
    carbs: float = 0.0,
    protein: float = 0.0,
    fat: float = 0.0,
    score: int | None = None,
) -> MealRecord:
    return MealRecord(
        id=uuid4(),
        user_id=user_id or uuid4(),
        created_at=created_at,
        image_url=None,
        analysis=make_analysis(score) if score is not None else None,
        total_calories=calories,
        total_protein=protein,
        total_carbs=carbs,
        total_fat=fat,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        supabase_url=None,
        supabase_key=None,
        openai_api_key=None,
        store_read_timeout_seconds=1,
        store_write_timeout_seconds=1,
    )


@pytest.fixture
def guard() -> StoreGuard:
    return StoreGuard(read_timeout_seconds=1, write_timeout_seconds=1)


@pytest.fixture
def local_store() -> LocalStore:
    return LocalStore()


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return build_container(settings)
