"""Tests for profile and onboarding."""

import asyncio
import math
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from pydantic import ValidationError

from glycemic_tracker.adapters.local_store import LocalStore
from glycemic_tracker.domain.errors import InvalidInput
from glycemic_tracker.domain.profile import (
    DailyGoals,
    Medications,
    ProfileUpdate,
    UserProfile,
    WeightEntry,
    WeightGoal,
    WeightGoalType,
)
from glycemic_tracker.services.goals import GoalService
from glycemic_tracker.services.profile import ProfileService
from tests.conftest import UnavailableStore


def _service(remote, local: LocalStore, guard) -> ProfileService:  # type: ignore[no-untyped-def]
    return ProfileService(
        repository=remote,
        goal_service=GoalService(remote, guard, local=local),
        guard=guard,
        local=local,
    )


def _onboarding() -> UserProfile:
    return UserProfile(
        full_name="Alex Doe",
        weight_kg=70,
        height_cm=170,
        medications=Medications(incretin_mimetic=True),
        weight_goal=WeightGoal(type=WeightGoalType.MAINTAIN),
    )


def test_get_profile_defaults_when_nothing_stored(guard) -> None:
    service = _service(LocalStore(), LocalStore(), guard)

    profile = asyncio.run(service.get_profile(uuid4()))

    assert profile == UserProfile()


def test_complete_onboarding(guard) -> None:
    remote = LocalStore()
    service = _service(remote, LocalStore(), guard)
    user_id = uuid4()

    result = asyncio.run(service.complete_onboarding(user_id, _onboarding()))

    assert result.profile.onboarding_completed is True
    assert result.goals == DailyGoals(water_ml=2950, calorie_kcal=2100, protein_g=112)
    assert result.saved_locally is False
    assert remote.profiles[user_id].onboarding_completed is True
    assert remote.weights[user_id][0].weight_kg == 70
    assert remote.goals[user_id] == result.goals


def test_onboarding_requires_weight(guard) -> None:
    service = _service(LocalStore(), LocalStore(), guard)

    with pytest.raises(InvalidInput):
        asyncio.run(service.complete_onboarding(uuid4(), UserProfile()))


def test_weight_change_logs_weight_and_recalculates(guard) -> None:
    remote = LocalStore()
    service = _service(remote, LocalStore(), guard)
    user_id = uuid4()
    asyncio.run(service.complete_onboarding(user_id, _onboarding()))

    result = asyncio.run(
        service.update_profile(
            user_id,
            ProfileUpdate(
                weight_kg=80,
                weight_goal=WeightGoal(type=WeightGoalType.LOSE, target_kg=6),
            ),
        )
    )

    assert result.profile.weight_kg == 80
    assert result.profile.full_name == "Alex Doe"
    assert result.goals == DailyGoals(water_ml=3300, calorie_kcal=1760, protein_g=128)
    assert [entry.weight_kg for entry in remote.weights[user_id]] == [70, 80]
    assert remote.goals[user_id] == result.goals


def test_edit_without_weight_change_keeps_goals(guard) -> None:
    remote = LocalStore()
    service = _service(remote, LocalStore(), guard)
    user_id = uuid4()
    onboarding = asyncio.run(service.complete_onboarding(user_id, _onboarding()))

    result = asyncio.run(
        service.update_profile(
            user_id, ProfileUpdate(preferred_name="Lex", weight_kg=70)
        )
    )

    assert result.goals is None
    assert result.profile.preferred_name == "Lex"
    assert remote.goals[user_id] == onboarding.goals
    assert len(remote.weights[user_id]) == 1


def test_latest_weight_overrides_profile(guard) -> None:
    remote = LocalStore()
    user_id = uuid4()
    remote.upsert_profile(user_id, _onboarding())
    now = datetime.now(tz=UTC)
    remote.record_weight(user_id, WeightEntry(weight_kg=68.5, recorded_at=now))
    remote.record_weight(
        user_id, WeightEntry(weight_kg=71, recorded_at=now - timedelta(days=3))
    )
    service = _service(remote, LocalStore(), guard)

    profile = asyncio.run(service.get_profile(user_id))

    assert profile.weight_kg == 68.5


def test_store_failure_saves_locally(guard) -> None:
    local = LocalStore()
    service = _service(UnavailableStore(), local, guard)
    user_id = uuid4()

    result = asyncio.run(service.complete_onboarding(user_id, _onboarding()))
    profile = asyncio.run(service.get_profile(user_id))

    assert result.saved_locally is True
    assert local.goals[user_id] == result.goals
    assert profile.onboarding_completed is True
    assert profile.full_name == "Alex Doe"


class _ReadFailingStore(LocalStore):
    def get_profile(self, user_id):  # type: ignore[no-untyped-def]
        raise ConnectionError("read timed out")


def _stored_profile() -> UserProfile:
    return UserProfile(
        full_name="Alex",
        weight_kg=70,
        medications=Medications(incretin_mimetic=True),
        weight_goal=WeightGoal(type=WeightGoalType.LOSE, target_kg=5),
        onboarding_completed=True,
    )


def test_edit_after_failed_read_leaves_stored_profile_untouched(guard) -> None:
    remote = _ReadFailingStore()
    user_id = uuid4()
    remote.upsert_profile(user_id, _stored_profile())
    local = LocalStore()
    service = _service(remote, local, guard)

    result = asyncio.run(
        service.update_profile(user_id, ProfileUpdate(preferred_name="Al"))
    )

    assert result.saved_locally is True
    assert remote.profiles[user_id] == _stored_profile()
    assert local.profiles[user_id].preferred_name == "Al"


def test_edit_after_failed_read_merges_onto_local_copy(guard) -> None:
    remote = _ReadFailingStore()
    local = LocalStore()
    user_id = uuid4()
    local.upsert_profile(user_id, _stored_profile())
    service = _service(remote, local, guard)

    result = asyncio.run(
        service.update_profile(user_id, ProfileUpdate(weight_kg=80))
    )

    assert result.saved_locally is True
    assert result.profile.full_name == "Alex"
    assert result.profile.onboarding_completed is True
    assert result.goals == DailyGoals(water_ml=3300, calorie_kcal=1760, protein_g=128)
    assert local.goals[user_id] == result.goals
    assert local.latest_weight(user_id).weight_kg == 80
    assert user_id not in remote.profiles
    assert user_id not in remote.goals
    assert user_id not in remote.weights


@pytest.mark.parametrize("weight", [math.inf, math.nan])
def test_non_finite_weight_rejected_by_models(weight: float) -> None:
    with pytest.raises(ValidationError):
        UserProfile(weight_kg=weight)
    with pytest.raises(ValidationError):
        ProfileUpdate(weight_kg=weight)
