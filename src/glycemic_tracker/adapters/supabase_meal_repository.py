"""Supabase repository for logged meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import ValidationError
from supabase import Client

from glycemic_tracker.domain.meals import MealRecord
from glycemic_tracker.domain.nutrition import NutritionAnalysis
from glycemic_tracker.services.meals import MealRepository

MEAL_COLUMNS = (
    "id, user_id, image_url, analysis_result, total_calories, total_protein, "
    "total_carbs, total_fat, created_at"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for the meals table."""

    client: Client

    def create_meal(
        self,
        user_id: UUID,
        analysis: NutritionAnalysis,
        image_url: str | None,
        created_at: datetime,
    ) -> MealRecord:
        """Insert a meal row and return the stored record."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "image_url": image_url,
                    "analysis_result": analysis.model_dump(mode="json"),
                    "total_calories": analysis.total_calories,
                    "total_protein": analysis.total_protein,
                    "total_carbs": analysis.total_carbs,
                    "total_fat": analysis.total_fat,
                    "created_at": created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return parse_meal_row(response.data[0])

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        """Return the newest meals for a user."""
        response = (
            self.client.table("meals")
            .select(MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [parse_meal_row(row) for row in response.data or []]


def parse_meal_row(row: dict[str, object]) -> MealRecord:
    """Build a meal record; a missing or malformed analysis is kept as None."""
    return MealRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        image_url=row.get("image_url") or None,
        analysis=_parse_analysis(row.get("analysis_result")),
        total_calories=float(row.get("total_calories") or 0.0),
        total_protein=float(row.get("total_protein") or 0.0),
        total_carbs=float(row.get("total_carbs") or 0.0),
        total_fat=float(row.get("total_fat") or 0.0),
    )


def _parse_analysis(raw: object) -> NutritionAnalysis | None:
    if not raw:
        return None
    try:
        if isinstance(raw, str):
            return NutritionAnalysis.model_validate_json(raw)
        return NutritionAnalysis.model_validate(raw)
    except ValidationError:
        return None
