"""Supabase repository for daily goals."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from glycemic_tracker.domain.profile import DailyGoals
from glycemic_tracker.services.goals import GoalsRepository


@dataclass
class SupabaseGoalsRepository(GoalsRepository):
    """Supabase implementation for the daily_goals table."""

    client: Client

    def get_goals(self, user_id: UUID) -> DailyGoals | None:
        """Return the stored goals for a user."""
        response = (
            self.client.table("daily_goals")
            .select("water_ml, calories, protein_g")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return DailyGoals(
            water_ml=int(row["water_ml"]),
            calorie_kcal=int(row["calories"]),
            protein_g=int(row["protein_g"]),
        )

    def upsert_goals(self, user_id: UUID, goals: DailyGoals) -> None:
        """Insert or replace the goals row for a user."""
        self.client.table("daily_goals").upsert(
            {
                "user_id": str(user_id),
                "water_ml": goals.water_ml,
                "calories": goals.calorie_kcal,
                "protein_g": goals.protein_g,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()
