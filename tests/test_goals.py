"""Tests for daily goal calculation."""

import asyncio
import math
from uuid import uuid4

import pytest

from glycemic_tracker.domain.errors import InvalidInput, UpstreamUnavailable
from glycemic_tracker.domain.profile import DailyGoals, WeightGoalType
from glycemic_tracker.domain.rounding import round_half_up
from glycemic_tracker.services.goals import GoalService, calculate_daily_goals
from tests.conftest import UnavailableStore


def test_goals_for_weight_loss() -> None:
    goals = calculate_daily_goals(70, False, WeightGoalType.LOSE)

    assert goals == DailyGoals(water_ml=2450, calorie_kcal=1540, protein_g=112)


def test_incretin_mimetic_adds_water() -> None:
    goals = calculate_daily_goals(70, True, WeightGoalType.MAINTAIN)

    assert goals == DailyGoals(water_ml=2950, calorie_kcal=2100, protein_g=112)


def test_gain_matches_maintain() -> None:
    maintain = calculate_daily_goals(82.4, False, WeightGoalType.MAINTAIN)
    gain = calculate_daily_goals(82.4, False, WeightGoalType.GAIN)

    assert gain == maintain


@pytest.mark.parametrize("weight", [0, -1, -70.5, math.nan, math.inf, -math.inf])
def test_non_positive_or_non_finite_weight_rejected(weight: float) -> None:
    with pytest.raises(InvalidInput) as exc_info:
        calculate_daily_goals(weight, False, WeightGoalType.LOSE)

    assert exc_info.value.details == {"field": "weight_kg"}


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2
    assert round_half_up(0.0) == 0


def test_fractional_weight_rounds_each_goal() -> None:
    goals = calculate_daily_goals(70.5, False, WeightGoalType.LOSE)

    assert goals.water_ml == 2468
    assert goals.calorie_kcal == 1551
    assert goals.protein_g == 113


def test_recalculate_persists_goals(guard, local_store) -> None:
    user_id = uuid4()
    service = GoalService(local_store, guard)

    goals = asyncio.run(service.recalculate(user_id, 70, False, WeightGoalType.LOSE))

    assert local_store.goals[user_id] == goals
    assert asyncio.run(service.get_goals(user_id)) == goals


def test_recalculate_falls_back_to_local_store(guard, local_store) -> None:
    user_id = uuid4()
    service = GoalService(UnavailableStore(), guard, local=local_store)

    goals = asyncio.run(service.recalculate(user_id, 60, False, WeightGoalType.GAIN))

    assert local_store.goals[user_id] == goals
    assert asyncio.run(service.get_goals(user_id)) == goals


def test_recalculate_without_local_store_raises(guard) -> None:
    service = GoalService(UnavailableStore(), guard)

    with pytest.raises(UpstreamUnavailable):
        asyncio.run(service.recalculate(uuid4(), 60, False, WeightGoalType.GAIN))

    assert asyncio.run(service.get_goals(uuid4())) is None
