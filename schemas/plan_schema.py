"""Schemas for meal/workout plan generation requests and stored plans."""

from datetime import date
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from .profile_schema import NutritionTargets


class MealPlanSettings(BaseModel):
    """User customization options for one meal plan generation."""

    duration: str = Field("1_week", examples=["1_week"], description="1_week, 1_month, 3_months or 6_months")
    max_prep_time: int = Field(60, gt=0, description="Maximum prep time per meal in minutes")
    dietary_restrictions: List[str] = Field(default_factory=list, examples=[["Gluten-Free", "Nut-Free"]])
    other_restrictions: str = Field("", description="Comma-separated extra restrictions")
    preferred_foods: str = Field("", description="Comma-separated foods to include")
    avoid_foods: str = Field("", description="Comma-separated foods to avoid")
    meal_complexity: str = Field("moderate", examples=["simple", "moderate", "complex"])
    use_custom_nutrition: bool = Field(False, description="Use the custom_* values instead of profile targets")
    custom_calories: Optional[int] = Field(None, gt=0)
    custom_protein: Optional[int] = Field(None, gt=0)
    custom_carbs: Optional[int] = Field(None, gt=0)
    custom_fat: Optional[int] = Field(None, gt=0)


class GenerationRequest(BaseModel):
    """A prompt plus the JSON schema the inference service must answer with."""

    prompt: str
    response_json_schema: Dict[str, Any]


class MealPlanRequest(GenerationRequest):
    """Structured generation request for a multi-day meal plan."""

    duration: str
    day_count: int
    start_date: date
    end_date: date
    targets: NutritionTargets
    dietary_restrictions: List[str]
    avoid_foods: List[str]
    preferred_foods: List[str]
    max_prep_time: int
    based_on_habits: bool


class WorkoutPlanRequest(GenerationRequest):
    """Structured generation request for a weekly workout plan."""

    goal: str
    weeks_duration: int
    equipment_available: List[str]


class HabitSummary(BaseModel):
    """Eating habits derived from recent food logs."""

    total_meals: int = 0
    meal_type_counts: Dict[str, int] = {}
    frequent_foods: List[str] = []


class ValidatedMealPlan(BaseModel):
    """Meal plan response that passed day-count validation."""

    daily_plans: List[Dict[str, Any]]
    total_calories: float
    ai_notes: Optional[str] = None
    requested_days: int
    surplus_days: int = 0
    warnings: List[str] = []


class MealPlanPreview(BaseModel):
    """Generated but not yet approved meal plan."""

    week_start_date: date
    week_end_date: date
    duration: str = "1_week"
    daily_plans: List[Dict[str, Any]]
    total_weekly_calories: float
    based_on_habits: bool = False
    ai_notes: Optional[str] = None
    is_active: bool = False
    warnings: List[str] = []


class MealPlanResponse(BaseModel):
    """Stored meal plan."""

    id: int
    week_start_date: date
    week_end_date: date
    daily_plans: List[Dict[str, Any]]
    total_weekly_calories: float
    based_on_habits: bool = False
    ai_notes: Optional[str] = None
    is_active: bool


class MealEditRequest(BaseModel):
    """Replacement for one meal slot of a stored plan."""

    day_index: int = Field(..., ge=0)
    meal_type: str = Field(..., examples=["lunch"])
    meal: Dict[str, Any]


class WorkoutPlanResponse(BaseModel):
    """Stored workout plan."""

    id: int
    plan_name: str
    fitness_level: Optional[str] = None
    weekly_schedule: List[Dict[str, Any]]
    goal: str
    equipment_available: List[str] = []
    weeks_duration: int
    ai_rationale: Optional[str] = None
    is_active: bool


class MealTrackingResponse(BaseModel):
    """Completion flags for one day of an approved meal plan."""

    id: int
    meal_plan_id: int
    date: date
    day_name: Optional[str] = None
    breakfast_completed: bool = False
    lunch_completed: bool = False
    dinner_completed: bool = False
    adherence_score: float = 0


class MealCompletionRequest(BaseModel):
    meal_type: str = Field(..., examples=["breakfast"])
    completed: bool = True
