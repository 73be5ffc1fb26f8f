"""Profile, onboarding and weight tracking."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from glycemic_tracker.domain.errors import InvalidInput, UpstreamUnavailable
from glycemic_tracker.domain.profile import (
    DailyGoals,
    ProfileSaveResult,
    ProfileUpdate,
    UserProfile,
    WeightEntry,
)
from glycemic_tracker.services.boundary import StoreGuard
from glycemic_tracker.services.goals import GoalService

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for profiles and the weight log."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile, if any."""

    def upsert_profile(self, user_id: UUID, profile: UserProfile) -> None:
        """Insert or replace the profile row."""

    def record_weight(self, user_id: UUID, entry: WeightEntry) -> None:
        """Append an entry to the weight log."""

    def latest_weight(self, user_id: UUID) -> WeightEntry | None:
        """Return the most recent weight log entry."""


@dataclass
class ProfileService:
    """Service that reads and amends user profiles.

    Every write is mirrored to ``local`` first, so reads can fall back to the
    last known profile while the store is unreachable.
    """

    repository: ProfileRepository
    goal_service: GoalService
    guard: StoreGuard
    local: ProfileRepository

    async def get_profile(self, user_id: UUID) -> UserProfile:
        """Return the profile with the latest logged weight applied."""
        profile, _ = await self._load(user_id)
        return profile

    async def _load(self, user_id: UUID) -> tuple[UserProfile, bool]:
        """Return the profile and whether the store answered the read."""
        from_store = True
        try:
            profile = await self.guard.read(
                lambda: self.repository.get_profile(user_id), action="get_profile"
            )
            latest = await self.guard.read_or_default(
                lambda: self.repository.latest_weight(user_id),
                default=None,
                action="latest_weight",
            )
        except UpstreamUnavailable:
            from_store = False
            profile = None
            latest = self.local.latest_weight(user_id)
        if profile is None:
            profile = self.local.get_profile(user_id) or UserProfile()
        if latest is not None:
            profile = profile.model_copy(update={"weight_kg": latest.weight_kg})
        return profile, from_store

    async def complete_onboarding(
        self, user_id: UUID, profile: UserProfile
    ) -> ProfileSaveResult:
        """Store the onboarding answers, log the weight and compute goals."""
        if not profile.weight_kg > 0:
            raise InvalidInput("Weight must be positive", field="weight_kg")
        profile = profile.model_copy(update={"onboarding_completed": True})
        saved_locally = await self._save(user_id, profile, weight_changed=True)
        goals = await self._recalculate_goals(user_id, profile)
        return ProfileSaveResult(
            profile=profile, goals=goals, saved_locally=saved_locally
        )

    async def update_profile(
        self, user_id: UUID, changes: ProfileUpdate
    ) -> ProfileSaveResult:
        """Merge a partial edit; a weight change is logged and refreshes goals.

        When the stored profile could not be read, the edit is merged onto the
        last local copy and kept locally only, so the stored row is never
        overwritten with fields the service did not see.
        """
        current, from_store = await self._load(user_id)
        updates = {
            name: getattr(changes, name)
            for name in changes.model_fields_set
            if getattr(changes, name) is not None
        }
        merged = current.model_copy(update=updates)
        weight_changed = (
            "weight_kg" in updates
            and merged.weight_kg > 0
            and merged.weight_kg != current.weight_kg
        )
        if not from_store:
            return self._save_local_only(user_id, merged, weight_changed)
        saved_locally = await self._save(user_id, merged, weight_changed)
        goals = None
        if weight_changed:
            goals = await self._recalculate_goals(user_id, merged)
        return ProfileSaveResult(
            profile=merged, goals=goals, saved_locally=saved_locally
        )

    def _save_local_only(
        self, user_id: UUID, profile: UserProfile, weight_changed: bool
    ) -> ProfileSaveResult:
        self.local.upsert_profile(user_id, profile)
        goals = None
        if weight_changed:
            self.local.record_weight(
                user_id,
                WeightEntry(
                    weight_kg=profile.weight_kg, recorded_at=datetime.now(tz=UTC)
                ),
            )
            goals = self.goal_service.recalculate_locally(
                user_id,
                profile.weight_kg,
                profile.medications.incretin_mimetic,
                profile.weight_goal.type,
            )
        _logger.warning(
            "Profile read failed, edit kept locally", extra={"user_id": str(user_id)}
        )
        return ProfileSaveResult(profile=profile, goals=goals, saved_locally=True)

    async def _save(
        self, user_id: UUID, profile: UserProfile, weight_changed: bool
    ) -> bool:
        entry = WeightEntry(
            weight_kg=profile.weight_kg, recorded_at=datetime.now(tz=UTC)
        )
        if self.local is not self.repository:
            self.local.upsert_profile(user_id, profile)
            if weight_changed:
                self.local.record_weight(user_id, entry)
        try:
            await self.guard.write(
                lambda: self.repository.upsert_profile(user_id, profile),
                action="upsert_profile",
            )
            if weight_changed:
                await self.guard.write(
                    lambda: self.repository.record_weight(user_id, entry),
                    action="record_weight",
                )
        except UpstreamUnavailable:
            _logger.warning("Profile saved locally", extra={"user_id": str(user_id)})
            return True
        return False

    async def _recalculate_goals(
        self, user_id: UUID, profile: UserProfile
    ) -> DailyGoals:
        return await self.goal_service.recalculate(
            user_id,
            profile.weight_kg,
            profile.medications.incretin_mimetic,
            profile.weight_goal.type,
        )
