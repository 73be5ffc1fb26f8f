"""Services for reusable saved meal templates."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from glycemic_tracker.domain.errors import InvalidInput
from glycemic_tracker.domain.glycemic import band_advice
from glycemic_tracker.domain.meals import SavedMealTemplate
from glycemic_tracker.domain.nutrition import (
    MacroTotals,
    MealCategory,
    NutritionAnalysis,
    sum_foods,
)
from glycemic_tracker.services.boundary import StoreGuard


class SavedMealRepository(Protocol):
    """Persistence interface for saved meal templates."""

    def create_saved_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        analysis: NutritionAnalysis,
        totals: MacroTotals,
        created_at: datetime,
    ) -> SavedMealTemplate:
        """Create a template and return it."""

    def list_saved_meals(self, user_id: UUID) -> list[SavedMealTemplate]:
        """Return a user's templates, newest first."""

    def get_saved_meal(
        self, user_id: UUID, template_id: UUID
    ) -> SavedMealTemplate | None:
        """Return one of the user's templates by id."""

    def delete_saved_meal(self, user_id: UUID, template_id: UUID) -> bool:
        """Delete one of the user's templates; False when nothing matched."""


@dataclass
class SavedMealService:
    """Application service for saved meal templates."""

    repository: SavedMealRepository
    guard: StoreGuard

    async def save_template(
        self, user_id: UUID, name: str, analysis: NutritionAnalysis
    ) -> SavedMealTemplate:
        """Snapshot an analysis under a user-chosen name."""
        name = name.strip()
        if not name:
            raise InvalidInput("Template name is required", field="name")
        if not analysis.foods:
            raise InvalidInput("Food list is empty", field="foods")
        totals = sum_foods(analysis.foods)
        created_at = datetime.now(tz=UTC)
        return await self.guard.write(
            lambda: self.repository.create_saved_meal(
                user_id, name, analysis, totals, created_at
            ),
            action="create_saved_meal",
        )

    async def list_templates(self, user_id: UUID) -> list[SavedMealTemplate]:
        """Return templates newest first, or none when the store is down."""
        templates = await self.guard.read_or_default(
            lambda: self.repository.list_saved_meals(user_id),
            default=[],
            action="list_saved_meals",
        )
        return sorted(templates, key=lambda item: item.created_at, reverse=True)

    async def delete_template(self, user_id: UUID, template_id: UUID) -> None:
        """Delete a template owned by the user."""
        deleted = await self.guard.write(
            lambda: self.repository.delete_saved_meal(user_id, template_id),
            action="delete_saved_meal",
        )
        if not deleted:
            raise InvalidInput("Saved meal not found", field="id")

    async def repeat_template(
        self, user_id: UUID, template_id: UUID
    ) -> NutritionAnalysis:
        """Rebuild an analysis from a template so it can be logged again."""
        template = await self.guard.read(
            lambda: self.repository.get_saved_meal(user_id, template_id),
            action="get_saved_meal",
        )
        if template is None:
            raise InvalidInput("Saved meal not found", field="id")
        return template_to_analysis(template)


def template_to_analysis(template: SavedMealTemplate) -> NutritionAnalysis:
    """Return a manual analysis carrying the template's foods and band advice."""
    return NutritionAnalysis(
        foods=[food.model_copy() for food in template.foods],
        total_calories=template.total_calories,
        total_carbs=template.total_carbs,
        total_protein=template.total_protein,
        total_fat=template.total_fat,
        glycemic_score=template.glycemic_score,
        recommendations=band_advice(template.glycemic_score),
        meal_category=MealCategory.MANUAL,
    )
