"""JSON endpoints under ``/api``."""

from uuid import UUID

from fastapi import APIRouter, Depends

from glycemic_tracker.api.auth import get_container, require_user
from glycemic_tracker.api.models import (
    AnalyzeMealRequest,
    AnalyzeNutritionRequest,
    LogMealRequest,
    RecalculateGoalsRequest,
    SaveTemplateRequest,
)
from glycemic_tracker.containers import AppContainer
from glycemic_tracker.domain.models import AuthUser
from glycemic_tracker.domain.nutrition import NutritionAnalysis
from glycemic_tracker.domain.plans import PersonalizedPlan
from glycemic_tracker.domain.profile import ProfileUpdate, UserProfile

router = APIRouter(prefix="/api", tags=["api"])


@router.post("/analyze-nutrition")
async def analyze_nutrition(
    payload: AnalyzeNutritionRequest,
    container: AppContainer = Depends(get_container),
) -> NutritionAnalysis:
    """Analyze a manually entered food list."""
    return await container.analysis_service.analyze_foods(payload.foods)


@router.post("/analyze-meal")
async def analyze_meal(
    payload: AnalyzeMealRequest,
    container: AppContainer = Depends(get_container),
) -> NutritionAnalysis:
    """Analyze a meal photo."""
    return await container.analysis_service.analyze_image(
        payload.image, payload.meal_category
    )


@router.post("/generate-plan")
async def generate_plan(
    profile: UserProfile,
    container: AppContainer = Depends(get_container),
) -> PersonalizedPlan:
    """Build a personalized plan for the posted profile."""
    return await container.plan_service.generate(profile)


@router.get("/profile")
async def get_profile(
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> UserProfile:
    """Return the current user's profile."""
    return await container.profile_service.get_profile(user.id)


@router.put("/onboarding")
async def complete_onboarding(
    profile: UserProfile,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Store onboarding answers and compute the first goals."""
    result = await container.profile_service.complete_onboarding(user.id, profile)
    return {
        "profile": result.profile,
        "goals": result.goals,
        "saved_locally": result.saved_locally,
    }


@router.patch("/profile")
async def update_profile(
    changes: ProfileUpdate,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Apply a partial profile edit."""
    result = await container.profile_service.update_profile(user.id, changes)
    return {
        "profile": result.profile,
        "goals": result.goals,
        "saved_locally": result.saved_locally,
    }


@router.get("/goals")
async def get_goals(
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the stored daily goals, if any."""
    return {"goals": await container.goal_service.get_goals(user.id)}


@router.post("/goals/recalculate")
async def recalculate_goals(
    payload: RecalculateGoalsRequest,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Recalculate goals from the payload, filling gaps from the profile."""
    profile = await container.profile_service.get_profile(user.id)
    goals = await container.goal_service.recalculate(
        user.id,
        payload.weight_kg if payload.weight_kg is not None else profile.weight_kg,
        (
            payload.uses_incretin_mimetic
            if payload.uses_incretin_mimetic is not None
            else profile.medications.incretin_mimetic
        ),
        payload.goal or profile.weight_goal.type,
    )
    return {"goals": goals}


@router.get("/meals")
async def list_meals(
    limit: int | None = None,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the user's most recent meals."""
    meals = await container.meal_service.list_recent(
        user.id, limit or container.settings.recent_meals_limit
    )
    return {"meals": meals}


@router.post("/meals", status_code=201)
async def log_meal(
    payload: LogMealRequest,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Store a reviewed analysis as a meal."""
    result = await container.meal_service.log_meal(
        user.id, payload.analysis, payload.image_url, payload.meal_category
    )
    return {"meal": result.meal, "saved_locally": result.saved_locally}


@router.get("/stats")
async def get_stats(
    tz: str | None = None,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return today's totals and the 7-day series."""
    summary = await container.stats_service.get_summary(
        user.id, tz or container.settings.default_timezone
    )
    return {"today": summary.today, "weekly": summary.weekly}


@router.get("/saved-meals")
async def list_saved_meals(
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return saved meal templates, newest first."""
    return {"saved_meals": await container.saved_meal_service.list_templates(user.id)}


@router.post("/saved-meals", status_code=201)
async def save_meal_template(
    payload: SaveTemplateRequest,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Save an analysis as a named template."""
    template = await container.saved_meal_service.save_template(
        user.id, payload.name, payload.analysis
    )
    return {"saved_meal": template}


@router.delete("/saved-meals/{template_id}")
async def delete_saved_meal(
    template_id: UUID,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Delete one of the user's templates."""
    await container.saved_meal_service.delete_template(user.id, template_id)
    return {"status": "deleted"}


@router.post("/saved-meals/{template_id}/repeat")
async def repeat_saved_meal(
    template_id: UUID,
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> NutritionAnalysis:
    """Turn a template back into an analysis ready to be logged."""
    return await container.saved_meal_service.repeat_template(user.id, template_id)


@router.get("/plan")
async def get_plan(
    user: AuthUser = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> PersonalizedPlan:
    """Build a plan from the stored profile."""
    profile = await container.profile_service.get_profile(user.id)
    return await container.plan_service.generate(profile)
