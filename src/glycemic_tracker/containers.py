"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from openai import AsyncOpenAI
from supabase import create_client

from glycemic_tracker.adapters.local_store import LocalAuthGateway, LocalStore
from glycemic_tracker.adapters.openai_analysis_client import OpenAIAnalysisClient
from glycemic_tracker.adapters.openai_plan_client import OpenAIPlanClient
from glycemic_tracker.adapters.supabase_auth_gateway import SupabaseAuthGateway
from glycemic_tracker.adapters.supabase_goals_repository import (
    SupabaseGoalsRepository,
)
from glycemic_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from glycemic_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from glycemic_tracker.adapters.supabase_saved_meal_repository import (
    SupabaseSavedMealRepository,
)
from glycemic_tracker.adapters.supabase_stats_repository import SupabaseStatsRepository
from glycemic_tracker.config import Settings
from glycemic_tracker.domain.models import StoreMode
from glycemic_tracker.services.analysis import AnalysisService
from glycemic_tracker.services.auth import AuthGateway, AuthService
from glycemic_tracker.services.boundary import StoreGuard
from glycemic_tracker.services.goals import GoalService, GoalsRepository
from glycemic_tracker.services.meals import MealRepository, MealService
from glycemic_tracker.services.plans import PlanService
from glycemic_tracker.services.profile import ProfileRepository, ProfileService
from glycemic_tracker.services.saved_meals import (
    SavedMealRepository,
    SavedMealService,
)
from glycemic_tracker.services.stats import StatsRepository, StatsService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store_mode: StoreMode
    local_store: LocalStore
    auth_service: AuthService
    analysis_service: AnalysisService
    plan_service: PlanService
    goal_service: GoalService
    profile_service: ProfileService
    meal_service: MealService
    saved_meal_service: SavedMealService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


@dataclass
class _Repositories:
    auth_gateway: AuthGateway
    meals: MealRepository
    stats: StatsRepository
    saved_meals: SavedMealRepository
    profiles: ProfileRepository
    goals: GoalsRepository


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store_mode = resolved_settings.store_mode
    local_store = LocalStore()
    if store_mode == StoreMode.ONLINE:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_key
        )
        repositories = _Repositories(
            auth_gateway=SupabaseAuthGateway(supabase_client),
            meals=SupabaseMealRepository(supabase_client),
            stats=SupabaseStatsRepository(supabase_client),
            saved_meals=SupabaseSavedMealRepository(supabase_client),
            profiles=SupabaseProfileRepository(supabase_client),
            goals=SupabaseGoalsRepository(supabase_client),
        )
    else:
        _logger.warning("Supabase not configured, using the in-process store")
        repositories = _Repositories(
            auth_gateway=LocalAuthGateway(),
            meals=local_store,
            stats=local_store,
            saved_meals=local_store,
            profiles=local_store,
            goals=local_store,
        )
    guard = StoreGuard(
        read_timeout_seconds=resolved_settings.store_read_timeout_seconds,
        write_timeout_seconds=resolved_settings.store_write_timeout_seconds,
    )

    openai_client = None
    analysis_client = None
    plan_client = None
    if resolved_settings.openai_api_key:
        openai_client = AsyncOpenAI(
            api_key=resolved_settings.openai_api_key,
            base_url=resolved_settings.openai_base_url,
        )
        analysis_client = OpenAIAnalysisClient(openai_client)
        plan_client = OpenAIPlanClient(
            openai_client, timeout_seconds=resolved_settings.ai_timeout_seconds
        )
    analysis_service = AnalysisService(
        client=analysis_client,
        model=resolved_settings.openai_model,
        temperature=resolved_settings.analysis_temperature,
        max_output_tokens=resolved_settings.analysis_max_output_tokens,
        timeout_seconds=resolved_settings.ai_timeout_seconds,
    )
    plan_service = PlanService(
        client=plan_client,
        model=resolved_settings.openai_model,
        temperature=resolved_settings.plan_temperature,
        timeout_seconds=resolved_settings.ai_timeout_seconds,
    )
    goal_service = GoalService(repositories.goals, guard, local=local_store)
    profile_service = ProfileService(
        repository=repositories.profiles,
        goal_service=goal_service,
        guard=guard,
        local=local_store,
    )
    meal_service = MealService(repositories.meals, guard, local=local_store)
    saved_meal_service = SavedMealService(repositories.saved_meals, guard)
    stats_service = StatsService(repositories.stats, guard, fallback=local_store)
    auth_service = AuthService(
        gateway=repositories.auth_gateway,
        guard=guard,
        login_url=resolved_settings.login_url,
    )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        store_mode=store_mode,
        local_store=local_store,
        auth_service=auth_service,
        analysis_service=analysis_service,
        plan_service=plan_service,
        goal_service=goal_service,
        profile_service=profile_service,
        meal_service=meal_service,
        saved_meal_service=saved_meal_service,
        stats_service=stats_service,
        close_resources=close_resources,
    )
