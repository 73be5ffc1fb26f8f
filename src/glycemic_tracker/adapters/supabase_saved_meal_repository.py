"""Supabase repository for saved meal templates."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from glycemic_tracker.domain.meals import SavedMealTemplate
from glycemic_tracker.domain.nutrition import FoodItem, MacroTotals, NutritionAnalysis
from glycemic_tracker.services.saved_meals import SavedMealRepository

_COLUMNS = (
    "id, user_id, name, foods, total_calories, total_protein, total_carbs, "
    "total_fat, glycemic_score, created_at"
)


@dataclass
class SupabaseSavedMealRepository(SavedMealRepository):
    """Supabase implementation for the saved_meals table."""

    client: Client

    def create_saved_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        analysis: NutritionAnalysis,
        totals: MacroTotals,
        created_at: datetime,
    ) -> SavedMealTemplate:
        """Insert a template row and return it."""
        response = (
            self.client.table("saved_meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "name": name,
                    "foods": [food.model_dump(mode="json") for food in analysis.foods],
                    "total_calories": totals.calories,
                    "total_protein": totals.protein,
                    "total_carbs": totals.carbs,
                    "total_fat": totals.fat,
                    "glycemic_score": analysis.glycemic_score,
                    "created_at": created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create saved meal")
        return _parse_row(response.data[0])

    def list_saved_meals(self, user_id: UUID) -> list[SavedMealTemplate]:
        """Return a user's templates, newest first."""
        response = (
            self.client.table("saved_meals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_saved_meal(
        self, user_id: UUID, template_id: UUID
    ) -> SavedMealTemplate | None:
        """Return a template by id, scoped to its owner."""
        response = (
            self.client.table("saved_meals")
            .select(_COLUMNS)
            .eq("id", str(template_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_saved_meal(self, user_id: UUID, template_id: UUID) -> bool:
        """Delete a template scoped to its owner."""
        response = (
            self.client.table("saved_meals")
            .delete()
            .eq("id", str(template_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> SavedMealTemplate:
    return SavedMealTemplate(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        foods=[FoodItem.model_validate(food) for food in row.get("foods") or []],
        total_calories=float(row.get("total_calories") or 0.0),
        total_protein=float(row.get("total_protein") or 0.0),
        total_carbs=float(row.get("total_carbs") or 0.0),
        total_fat=float(row.get("total_fat") or 0.0),
        glycemic_score=int(row.get("glycemic_score") or 0),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
