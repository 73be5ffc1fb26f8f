"""In-process store used offline and as the fallback for failed writes."""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from uuid import NAMESPACE_URL, UUID, uuid4, uuid5

from glycemic_tracker.domain.meals import MealRecord, SavedMealTemplate
from glycemic_tracker.domain.models import AuthUser
from glycemic_tracker.domain.nutrition import MacroTotals, NutritionAnalysis
from glycemic_tracker.domain.profile import DailyGoals, UserProfile, WeightEntry
from glycemic_tracker.services.auth import AuthGateway
from glycemic_tracker.services.goals import GoalsRepository
from glycemic_tracker.services.meals import MealRepository
from glycemic_tracker.services.profile import ProfileRepository
from glycemic_tracker.services.saved_meals import SavedMealRepository
from glycemic_tracker.services.stats import StatsRepository

LOCAL_USER_ID = uuid5(NAMESPACE_URL, "glycemic-tracker:local-user")


@dataclass
class LocalStore(
    MealRepository,
    StatsRepository,
    SavedMealRepository,
    ProfileRepository,
    GoalsRepository,
):
    """Dict-backed implementation of every repository interface."""

    meals: list[MealRecord] = field(default_factory=list)
    saved_meals: dict[UUID, SavedMealTemplate] = field(default_factory=dict)
    profiles: dict[UUID, UserProfile] = field(default_factory=dict)
    weights: dict[UUID, list[WeightEntry]] = field(default_factory=dict)
    goals: dict[UUID, DailyGoals] = field(default_factory=dict)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def create_meal(
        self,
        user_id: UUID,
        analysis: NutritionAnalysis,
        image_url: str | None,
        created_at: datetime,
    ) -> MealRecord:
        """Store a meal and return it."""
        meal = MealRecord(
            id=uuid4(),
            user_id=user_id,
            created_at=created_at,
            image_url=image_url,
            analysis=analysis,
            total_calories=analysis.total_calories,
            total_protein=analysis.total_protein,
            total_carbs=analysis.total_carbs,
            total_fat=analysis.total_fat,
        )
        with self._lock:
            self.meals.append(meal)
        return meal

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        """Return the newest meals for a user."""
        with self._lock:
            owned = [meal for meal in self.meals if meal.user_id == user_id]
        owned.sort(key=lambda meal: meal.created_at, reverse=True)
        return owned[:limit]

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals created within ``[start, end)``."""
        with self._lock:
            return [
                meal
                for meal in self.meals
                if meal.user_id == user_id and start <= meal.created_at < end
            ]

    def create_saved_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        analysis: NutritionAnalysis,
        totals: MacroTotals,
        created_at: datetime,
    ) -> SavedMealTemplate:
        """Store a template and return it."""
        template = SavedMealTemplate(
            id=uuid4(),
            user_id=user_id,
            name=name,
            foods=[food.model_copy() for food in analysis.foods],
            total_calories=totals.calories,
            total_protein=totals.protein,
            total_carbs=totals.carbs,
            total_fat=totals.fat,
            glycemic_score=analysis.glycemic_score,
            created_at=created_at,
        )
        with self._lock:
            self.saved_meals[template.id] = template
        return template

    def list_saved_meals(self, user_id: UUID) -> list[SavedMealTemplate]:
        """Return a user's templates, newest first."""
        with self._lock:
            owned = [t for t in self.saved_meals.values() if t.user_id == user_id]
        return sorted(owned, key=lambda t: t.created_at, reverse=True)

    def get_saved_meal(
        self, user_id: UUID, template_id: UUID
    ) -> SavedMealTemplate | None:
        """Return a template owned by the user."""
        template = self.saved_meals.get(template_id)
        if template is None or template.user_id != user_id:
            return None
        return template

    def delete_saved_meal(self, user_id: UUID, template_id: UUID) -> bool:
        """Delete a template owned by the user."""
        with self._lock:
            if self.get_saved_meal(user_id, template_id) is None:
                return False
            del self.saved_meals[template_id]
        return True

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile."""
        return self.profiles.get(user_id)

    def upsert_profile(self, user_id: UUID, profile: UserProfile) -> None:
        """Replace the stored profile."""
        with self._lock:
            self.profiles[user_id] = profile.model_copy(deep=True)

    def record_weight(self, user_id: UUID, entry: WeightEntry) -> None:
        """Append a weight log entry."""
        with self._lock:
            self.weights.setdefault(user_id, []).append(entry)

    def latest_weight(self, user_id: UUID) -> WeightEntry | None:
        """Return the most recent weight log entry."""
        entries = self.weights.get(user_id)
        if not entries:
            return None
        return max(entries, key=lambda entry: entry.recorded_at)

    def get_goals(self, user_id: UUID) -> DailyGoals | None:
        """Return the stored goals."""
        return self.goals.get(user_id)

    def upsert_goals(self, user_id: UUID, goals: DailyGoals) -> None:
        """Replace the stored goals."""
        with self._lock:
            self.goals[user_id] = goals


@dataclass
class LocalAuthGateway(AuthGateway):
    """Offline identity: any non-empty token is the single local user."""

    user_id: UUID = LOCAL_USER_ID

    def authenticate(self, access_token: str) -> AuthUser | None:
        """Return the local user for any non-blank token."""
        if not access_token.strip():
            return None
        return AuthUser(id=self.user_id)
