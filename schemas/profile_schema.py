"""Schemas for user profile, onboarding and nutrition targets."""

from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Optional


class Sex(str, Enum):
    """Sex options offered at onboarding."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer_not_to_say"


class ActivityLevel(str, Enum):
    """Self-reported activity level driving the TDEE multiplier."""

    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    EXTREMELY_ACTIVE = "extremely_active"


class PrimaryGoal(str, Enum):
    """Primary health goal driving the calorie adjustment."""

    LOSE_WEIGHT = "lose_weight"
    GAIN_MUSCLE = "gain_muscle"
    MAINTAIN_WEIGHT = "maintain_weight"
    IMPROVE_HEALTH = "improve_health"
    INCREASE_ENERGY = "increase_energy"


class NutritionTargets(BaseModel):
    """Daily calorie and macro targets. Always positive integers."""

    daily_calorie_target: int = Field(..., gt=0, examples=[2556])
    protein_target_g: int = Field(..., gt=0, examples=[192])
    carbs_target_g: int = Field(..., gt=0, examples=[256])
    fat_target_g: int = Field(..., gt=0, examples=[85])


class OnboardingRequest(BaseModel):
    """Request payload completing onboarding and creating the profile."""

    age: int = Field(..., gt=0, examples=[30], description="Age in years")
    sex: Sex = Field(..., examples=["male"])
    height_cm: float = Field(..., gt=0, examples=[175.0], description="Height in centimeters")
    current_weight_kg: float = Field(..., gt=0, examples=[70.0], description="Current weight in kilograms")
    goal_weight_kg: Optional[float] = Field(None, gt=0, examples=[65.0])
    activity_level: ActivityLevel = Field(ActivityLevel.MODERATELY_ACTIVE)
    primary_goal: PrimaryGoal = Field(PrimaryGoal.IMPROVE_HEALTH)
    health_conditions: List[str] = Field(default_factory=list, examples=[["type 2 diabetes"]])
    dietary_preferences: List[str] = Field(default_factory=list, examples=[["vegetarian"]])
    favorite_foods: str = Field("", examples=["oats, salmon"], description="Comma-separated favorite foods")
    disliked_foods: str = Field("", examples=["olives"], description="Comma-separated disliked foods")


class ProfileUpdateRequest(BaseModel):
    """Partial profile edit. Unset fields are left untouched."""

    age: Optional[int] = Field(None, gt=0)
    sex: Optional[Sex] = None
    height_cm: Optional[float] = Field(None, gt=0)
    current_weight_kg: Optional[float] = Field(None, gt=0)
    goal_weight_kg: Optional[float] = Field(None, gt=0)
    activity_level: Optional[ActivityLevel] = None
    primary_goal: Optional[PrimaryGoal] = None
    health_conditions: Optional[List[str]] = None
    dietary_preferences: Optional[List[str]] = None
    favorite_foods: Optional[str] = Field(None, description="Comma-separated favorite foods")
    disliked_foods: Optional[str] = Field(None, description="Comma-separated disliked foods")


class ProfileResponse(BaseModel):
    """Stored profile returned to the client."""

    id: int
    user_id: str
    age: int
    sex: str
    height_cm: float
    current_weight_kg: float
    goal_weight_kg: Optional[float] = None
    bmi: float
    activity_level: str
    primary_goal: str
    health_conditions: List[str] = []
    dietary_preferences: List[str] = []
    favorite_foods: List[str] = []
    disliked_foods: List[str] = []
    targets: NutritionTargets
    current_streak: int
    total_points: int


class TargetRecalculation(BaseModel):
    """AI-recalculated targets with the model's explanation."""

    targets: NutritionTargets
    explanation: Optional[str] = None
