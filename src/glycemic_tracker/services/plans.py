"""Personalized care plan generation."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from glycemic_tracker.domain.errors import InvalidInput
from glycemic_tracker.domain.plans import (
    DailyMacros,
    GlycemicTargets,
    MealScheduleEntry,
    PersonalizedPlan,
)
from glycemic_tracker.domain.profile import (
    DiabetesType,
    InsulinType,
    UserProfile,
    WeightGoalType,
)
from glycemic_tracker.domain.rounding import round_half_up

_logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert in diabetes, endocrinology and nutrition. Create "
    "detailed and safe personalized plans. Always return valid JSON."
)

_DIABETES_LABELS = {
    DiabetesType.TYPE_1: "Type 1 diabetes",
    DiabetesType.TYPE_2: "Type 2 diabetes",
    DiabetesType.PRE_DIABETIC: "Pre-diabetes",
}

_INSULIN_LABELS = {
    InsulinType.NPH: "NPH",
    InsulinType.REGULAR: "Regular",
    InsulinType.BOTH: "NPH and Regular",
}

_MEAL_SCHEDULE = [
    MealScheduleEntry(
        time="07:00",
        meal="Breakfast",
        recommendations=[
            "Prioritize protein and fiber for glycemic control",
            "Avoid simple sugars and refined carbohydrates",
        ],
    ),
    MealScheduleEntry(
        time="10:00",
        meal="Morning snack",
        recommendations=[
            "Low glycemic index fruit (apple, pear) or a handful of nuts",
        ],
    ),
    MealScheduleEntry(
        time="12:30",
        meal="Lunch",
        recommendations=[
            "Balanced plate: 50% vegetables, 25% lean protein, 25% whole grains",
            "Prefer brown rice, quinoa or sweet potato",
        ],
    ),
    MealScheduleEntry(
        time="15:30",
        meal="Afternoon snack",
        recommendations=[
            "Unsweetened natural yogurt with seeds or a handful of nuts",
        ],
    ),
    MealScheduleEntry(
        time="19:00",
        meal="Dinner",
        recommendations=[
            "Keep it light and avoid excess carbohydrates at night",
            "Prioritize protein and vegetables",
        ],
    ),
]

_NUTRITION_GUIDELINES = [
    "Favor whole, natural foods at every meal",
    "Avoid ultra-processed foods, refined sugars and trans fats",
    "Include quality protein at every meal for satiety",
    "Eat at least 5 servings of varied vegetables daily",
    "Stay hydrated through the day, especially before meals",
]

_EXERCISE_PLANS = {
    "sedentary": [
        "Light walk for 20-30 minutes, 3-4 times a week (start slowly)",
        "Daily morning stretches (10 minutes)",
        "Mobility exercises twice a week",
        "Increase intensity gradually as you feel comfortable",
    ],
    "active": [
        "Walk or jog for 30-40 minutes, 4-5 times a week",
        "Resistance training 2-3 times a week",
        "Daily stretching and mobility",
        "Vary aerobic activities to stay motivated",
    ],
}

_INTENSE_EXERCISE_PLAN = [
    "Intense cardio for 40-50 minutes, 5 times a week",
    "Strength or functional training 3-4 times a week",
    "Yoga or pilates 1-2 times a week for recovery",
    "Stay consistent and vary the stimulus",
]

_WEEKLY_SESSIONS = {"sedentary": "3-4", "active": "4-5"}

_DEFAULT_GOALS = [
    "Control blood glucose",
    "Improve eating habits",
    "Increase energy",
]


class PlanClient(Protocol):
    """Interface for JSON chat completions."""

    async def complete_json(
        self, *, model: str, system_prompt: str, prompt: str, temperature: float
    ) -> dict[str, object]:
        """Return the model's JSON answer as a dict."""


@dataclass
class PlanService:
    """Service that builds a personalized plan, optionally via an LLM."""

    client: PlanClient | None
    model: str
    temperature: float = 0.7
    timeout_seconds: float = 30.0

    async def generate(self, profile: UserProfile) -> PersonalizedPlan:
        """Return the AI plan when available and valid, else the computed one."""
        computed = build_plan(profile)
        if self.client is None:
            _logger.info("OpenAI not configured, returning computed plan")
            return computed
        try:
            raw = await asyncio.wait_for(
                self.client.complete_json(
                    model=self.model,
                    system_prompt=SYSTEM_PROMPT,
                    prompt=_build_prompt(profile),
                    temperature=self.temperature,
                ),
                timeout=self.timeout_seconds,
            )
            return PersonalizedPlan.model_validate(raw)
        except TimeoutError:
            _logger.warning("Plan generation timed out after %ss", self.timeout_seconds)
        except ValidationError as exc:
            _logger.warning(
                "Plan generation returned %s invalid fields", exc.error_count()
            )
        except Exception:
            _logger.exception("Plan generation failed")
        return computed


def build_plan(profile: UserProfile) -> PersonalizedPlan:
    """Compute a deterministic plan from the profile."""
    weight = profile.weight_kg
    if not weight > 0:
        raise InvalidInput("Profile weight must be positive", field="weight_kg")
    name = _display_name(profile)
    losing = profile.weight_goal.type == WeightGoalType.LOSE
    type_1 = profile.diabetes_type == DiabetesType.TYPE_1
    water = round_half_up(weight * 35)
    targets = (
        GlycemicTargets(min=70, max=180)
        if type_1
        else GlycemicTargets(min=80, max=140)
    )
    macros = DailyMacros(
        water=water,
        fiber=30,
        protein=round_half_up(weight * (1.8 if losing else 1.6)),
        fat=50 if losing else 65,
        carbs=200 if type_1 else 130 if losing else 180,
    )
    activity = profile.physical_activity
    return PersonalizedPlan(
        greeting=f"Hello, {name}! Welcome to your personalized plan!",
        diabetes_analysis=_diabetes_analysis(profile),
        glycemic_targets=targets,
        daily_macros=macros,
        meal_schedule=[entry.model_copy(deep=True) for entry in _MEAL_SCHEDULE],
        goals=profile.goals[:3] if profile.goals else list(_DEFAULT_GOALS),
        nutrition_guidelines=list(_NUTRITION_GUIDELINES),
        exercise_plan=list(_EXERCISE_PLANS.get(activity, _INTENSE_EXERCISE_PLAN)),
        medication_reminders=_medication_reminders(profile),
        weekly_goals=[
            "Log every meal and glucose reading in the app daily",
            f"Keep glucose between {targets.min}-{targets.max} mg/dL in most readings",
            f"Exercise {_WEEKLY_SESSIONS.get(activity, '5-6')} times this week",
            f"Drink at least {water / 1000:.1f}L of water per day",
        ],
        motivational_message=_motivational_message(profile, name),
    )


def body_mass_index(weight_kg: float, height_cm: float) -> float | None:
    """Return the BMI, or None without a usable height."""
    if height_cm <= 0:
        return None
    return weight_kg / (height_cm / 100) ** 2


def _display_name(profile: UserProfile) -> str:
    return profile.preferred_name or profile.full_name or "there"


def _diabetes_label(profile: UserProfile) -> str:
    return _DIABETES_LABELS.get(profile.diabetes_type, "Pre-diabetes")


def _diabetes_analysis(profile: UserProfile) -> str:
    bmi = body_mass_index(profile.weight_kg, profile.height_cm)
    bmi_text = f" and a BMI of {bmi:.1f}" if bmi is not None else ""
    parts = [
        f"Based on your {_diabetes_label(profile)} profile, a weight of "
        f"{profile.weight_kg:g}kg{bmi_text}, we built a plan to reach your "
        "goals safely and effectively."
    ]
    if profile.medications.incretin_mimetic:
        parts.append("Your GLP-1 medication was taken into account.")
    if profile.medications.insulin:
        parts.append("It includes specific guidance for insulin use.")
    return " ".join(parts)


def _medication_reminders(profile: UserProfile) -> list[str]:
    medications = profile.medications
    if medications.insulin:
        reminders = [
            "Insulin: apply as prescribed (usually before main meals)",
            "Check glucose before and 2h after meals",
        ]
        if medications.metformin:
            reminders.append("Metformin: take as prescribed (usually with meals)")
        return reminders
    if medications.metformin:
        return [
            "Metformin: take as prescribed (usually with meals)",
            "Check glucose regularly as advised",
        ]
    return [
        "Keep regular medical follow-ups",
        "Check glucose as advised by your doctor",
    ]


def _motivational_message(profile: UserProfile, name: str) -> str:
    goal = profile.weight_goal
    if goal.type == WeightGoalType.LOSE:
        target = f" of losing {goal.target_kg:g}kg" if goal.target_kg else ""
        return (
            f"{name}, you are on the right track to reach your goal{target}! "
            "Every healthy choice brings you closer. Progress, not perfection."
        )
    return (
        f"{name}, you are doing great work taking care of your health! Keeping "
        "your glucose under control and eating well are key steps. Keep going!"
    )


def _build_prompt(profile: UserProfile) -> str:
    medications = profile.medications
    medication_lines = []
    if medications.incretin_mimetic:
        dose = medications.incretin_mimetic_dose or "dose not informed"
        medication_lines.append(f"- GLP-1 (incretin mimetic): {dose}")
    if medications.insulin:
        label = _INSULIN_LABELS.get(medications.insulin_type, "type not informed")
        medication_lines.append(f"- Insulin: {label}")
    if medications.metformin:
        medication_lines.append("- Metformin")
    goal = profile.weight_goal
    if goal.type == WeightGoalType.LOSE and goal.target_kg:
        weight_goal = f"Lose {goal.target_kg:g}kg"
    else:
        weight_goal = goal.type.capitalize() + " weight"
    bmi = body_mass_index(profile.weight_kg, profile.height_cm)
    return (
        "Create an extremely detailed personalized plan for this profile.\n\n"
        "PATIENT:\n"
        f"- Name: {_display_name(profile)}\n"
        f"- Diabetes: {_diabetes_label(profile)}\n"
        f"- Age: {profile.age_range or 'not informed'}\n"
        f"- Weight: {profile.weight_kg:g}kg\n"
        f"- Height: {profile.height_cm:g}cm\n"
        f"- BMI: {f'{bmi:.1f}' if bmi is not None else 'unknown'}\n\n"
        "MEDICATIONS:\n"
        f"{chr(10).join(medication_lines) or '- None'}\n\n"
        "ROUTINE:\n"
        f"- Work: {profile.work_routine or 'not informed'}\n"
        f"- Physical activity: {profile.physical_activity or 'not informed'}\n\n"
        f"GOALS: {', '.join(profile.goals) or 'not informed'}\n"
        f"WEIGHT GOAL: {weight_goal}\n"
        f"3-MONTH VISION: {profile.vision_3_months or 'not informed'}\n\n"
        "Consider the diabetes type and medications when setting safe glycemic "
        "targets (mg/dL), fit meal times to the work routine, include medication "
        "reminders, and compute daily targets for water (30-35 ml/kg), fiber "
        "(25-30 g), protein (1.2-2.0 g/kg), fat and carbohydrates.\n\n"
        "Return ONLY a JSON object with the keys greeting, diabetes_analysis, "
        "glycemic_targets {min, max}, daily_macros {water, fiber, protein, fat, "
        "carbs}, meal_schedule [{time, meal, recommendations}], goals, "
        "nutrition_guidelines, exercise_plan, medication_reminders, "
        "weekly_goals and motivational_message."
    )
