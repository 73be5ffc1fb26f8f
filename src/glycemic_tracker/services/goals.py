"""Daily goal calculation and persistence."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from glycemic_tracker.domain.errors import InvalidInput, UpstreamUnavailable
from glycemic_tracker.domain.profile import DailyGoals, WeightGoalType
from glycemic_tracker.domain.rounding import round_half_up
from glycemic_tracker.services.boundary import StoreGuard

WATER_ML_PER_KG = 35
INCRETIN_MIMETIC_WATER_BONUS_ML = 500
LOSE_KCAL_PER_KG = 22
DEFAULT_KCAL_PER_KG = 30
PROTEIN_G_PER_KG = 1.6

_logger = logging.getLogger(__name__)


class GoalsRepository(Protocol):
    """Persistence interface for daily goals."""

    def get_goals(self, user_id: UUID) -> DailyGoals | None:
        """Return the stored goals for a user, if any."""

    def upsert_goals(self, user_id: UUID, goals: DailyGoals) -> None:
        """Insert or replace the goals row for a user."""


def calculate_daily_goals(
    weight_kg: float, uses_incretin_mimetic: bool, goal: WeightGoalType
) -> DailyGoals:
    """Derive water, calorie and protein targets from body weight.

    ``maintain`` and ``gain`` share the same calorie multiplier.
    """
    if not (math.isfinite(weight_kg) and weight_kg > 0):
        raise InvalidInput("Weight must be a positive number", field="weight_kg")
    water = weight_kg * WATER_ML_PER_KG
    if uses_incretin_mimetic:
        water += INCRETIN_MIMETIC_WATER_BONUS_ML
    if goal == WeightGoalType.LOSE:
        calories = weight_kg * LOSE_KCAL_PER_KG
    else:
        calories = weight_kg * DEFAULT_KCAL_PER_KG
    return DailyGoals(
        water_ml=round_half_up(water),
        calorie_kcal=round_half_up(calories),
        protein_g=round_half_up(weight_kg * PROTEIN_G_PER_KG),
    )


@dataclass
class GoalService:
    """Service that recalculates and stores daily goals."""

    repository: GoalsRepository
    guard: StoreGuard
    local: GoalsRepository | None = None

    async def recalculate(
        self,
        user_id: UUID,
        weight_kg: float,
        uses_incretin_mimetic: bool,
        goal: WeightGoalType,
    ) -> DailyGoals:
        """Compute goals for the given weight and persist them."""
        goals = calculate_daily_goals(weight_kg, uses_incretin_mimetic, goal)
        try:
            await self.guard.write(
                lambda: self.repository.upsert_goals(user_id, goals),
                action="upsert_goals",
            )
        except UpstreamUnavailable:
            if self.local is None:
                raise
            self.local.upsert_goals(user_id, goals)
        _logger.info(
            "Daily goals recalculated",
            extra={"user_id": str(user_id), "weight_kg": weight_kg},
        )
        return goals

    def recalculate_locally(
        self,
        user_id: UUID,
        weight_kg: float,
        uses_incretin_mimetic: bool,
        goal: WeightGoalType,
    ) -> DailyGoals:
        """Compute goals and keep them in the local store only."""
        goals = calculate_daily_goals(weight_kg, uses_incretin_mimetic, goal)
        if self.local is not None:
            self.local.upsert_goals(user_id, goals)
        return goals

    async def get_goals(self, user_id: UUID) -> DailyGoals | None:
        """Return stored goals; None when unset or the store is unreachable."""
        try:
            return await self.guard.read(
                lambda: self.repository.get_goals(user_id), action="get_goals"
            )
        except UpstreamUnavailable:
            return self.local.get_goals(user_id) if self.local else None
