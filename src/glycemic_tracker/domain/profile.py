"""Models for onboarding answers, profile edits and daily goals."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class DiabetesType(StrEnum):
    """Diabetes classification."""

    TYPE_1 = "type_1"
    TYPE_2 = "type_2"
    PRE_DIABETIC = "pre_diabetic"


class InsulinType(StrEnum):
    """Insulin regimen."""

    NPH = "nph"
    REGULAR = "regular"
    BOTH = "both"


class WeightGoalType(StrEnum):
    """Weight goal variant."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class Medications(BaseModel):
    """Medication flags collected during onboarding."""

    incretin_mimetic: bool = False
    incretin_mimetic_dose: str | None = None
    insulin: bool = False
    insulin_type: InsulinType | None = None
    metformin: bool = False


class WeightGoal(BaseModel):
    """Active weight goal with an optional target in kilograms."""

    model_config = ConfigDict(allow_inf_nan=False)

    type: WeightGoalType = WeightGoalType.MAINTAIN
    target_kg: float | None = Field(default=None, gt=0)


class UserProfile(BaseModel):
    """Onboarding answers and goal basis for a user."""

    model_config = ConfigDict(allow_inf_nan=False)

    diabetes_type: DiabetesType | None = None
    medications: Medications = Field(default_factory=Medications)
    full_name: str = ""
    preferred_name: str = ""
    age_range: str = ""
    weight_kg: float = Field(default=0.0, ge=0)
    height_cm: float = Field(default=0.0, ge=0)
    work_routine: str = ""
    physical_activity: str = ""
    goals: list[str] = Field(default_factory=list)
    vision_3_months: str = ""
    weight_goal: WeightGoal = Field(default_factory=WeightGoal)
    onboarding_completed: bool = False


class ProfileUpdate(BaseModel):
    """Piecemeal profile edit; unset fields are left unchanged."""

    model_config = ConfigDict(allow_inf_nan=False)

    diabetes_type: DiabetesType | None = None
    medications: Medications | None = None
    full_name: str | None = None
    preferred_name: str | None = None
    age_range: str | None = None
    weight_kg: float | None = Field(default=None, ge=0)
    height_cm: float | None = Field(default=None, ge=0)
    work_routine: str | None = None
    physical_activity: str | None = None
    goals: list[str] | None = None
    vision_3_months: str | None = None
    weight_goal: WeightGoal | None = None


@dataclass(frozen=True)
class DailyGoals:
    """Daily intake targets derived from body weight."""

    water_ml: int
    calorie_kcal: int
    protein_g: int


@dataclass(frozen=True)
class WeightEntry:
    """Entry of the append-only weight log."""

    weight_kg: float
    recorded_at: datetime


@dataclass(frozen=True)
class ProfileSaveResult:
    """Outcome of a profile write."""

    profile: UserProfile
    goals: DailyGoals | None = None
    saved_locally: bool = False
