"""Supabase repository for user profiles and the weight log."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from glycemic_tracker.domain.profile import UserProfile, WeightEntry
from glycemic_tracker.services.profile import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for user_profiles and weight_history."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("user_profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserProfile.model_validate(
            {
                key: value
                for key, value in row.items()
                if key in UserProfile.model_fields and value is not None
            }
        )

    def upsert_profile(self, user_id: UUID, profile: UserProfile) -> None:
        """Insert or replace the profile row for a user."""
        payload = profile.model_dump(mode="json")
        payload["user_id"] = str(user_id)
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        self.client.table("user_profiles").upsert(
            payload, on_conflict="user_id"
        ).execute()

    def record_weight(self, user_id: UUID, entry: WeightEntry) -> None:
        """Append a weight log entry."""
        self.client.table("weight_history").insert(
            {
                "user_id": str(user_id),
                "weight_kg": entry.weight_kg,
                "recorded_at": entry.recorded_at.isoformat(),
            }
        ).execute()

    def latest_weight(self, user_id: UUID) -> WeightEntry | None:
        """Return the most recent weight log entry."""
        response = (
            self.client.table("weight_history")
            .select("weight_kg, recorded_at")
            .eq("user_id", str(user_id))
            .order("recorded_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return WeightEntry(
            weight_kg=float(row["weight_kg"]),
            recorded_at=datetime.fromisoformat(str(row["recorded_at"])),
        )
