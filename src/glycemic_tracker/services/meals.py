"""Meal logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from glycemic_tracker.domain.errors import UpstreamUnavailable
from glycemic_tracker.domain.meals import MealRecord, MealSaveResult
from glycemic_tracker.domain.nutrition import (
    MealCategory,
    NutritionAnalysis,
    with_recomputed_totals,
)
from glycemic_tracker.services.boundary import StoreGuard

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for logged meals."""

    def create_meal(
        self,
        user_id: UUID,
        analysis: NutritionAnalysis,
        image_url: str | None,
        created_at: datetime,
    ) -> MealRecord:
        """Insert a meal row; totals are taken from ``analysis``."""

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        """Return the newest meals first."""


@dataclass
class MealService:
    """Service that persists analyzed meals, falling back to a local store."""

    repository: MealRepository
    guard: StoreGuard
    local: MealRepository

    async def log_meal(
        self,
        user_id: UUID,
        analysis: NutritionAnalysis,
        image_url: str | None = None,
        meal_category: MealCategory | None = None,
    ) -> MealSaveResult:
        """Store a meal whose totals are recomputed from its foods."""
        analysis = with_recomputed_totals(analysis)
        if meal_category is not None:
            analysis = analysis.model_copy(update={"meal_category": meal_category})
        created_at = datetime.now(tz=UTC)
        try:
            meal = await self.guard.write(
                lambda: self.repository.create_meal(
                    user_id, analysis, image_url, created_at
                ),
                action="create_meal",
            )
        except UpstreamUnavailable:
            meal = self.local.create_meal(user_id, analysis, image_url, created_at)
            _logger.warning(
                "Meal saved locally", extra={"user_id": str(user_id)}
            )
            return MealSaveResult(meal=meal, saved_locally=True)
        return MealSaveResult(meal=meal)

    async def list_recent(self, user_id: UUID, limit: int = 10) -> list[MealRecord]:
        """Return recent meals; the local store answers when the store is down."""
        try:
            return await self.guard.read(
                lambda: self.repository.list_recent_meals(user_id, limit),
                action="list_recent_meals",
            )
        except UpstreamUnavailable:
            return self.local.list_recent_meals(user_id, limit)
