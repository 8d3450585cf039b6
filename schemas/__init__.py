"""Pydantic schema package for request and response models."""

from .profile_schema import (
    Sex,
    ActivityLevel,
    PrimaryGoal,
    NutritionTargets,
    OnboardingRequest,
    ProfileUpdateRequest,
    ProfileResponse,
)
from .food_log_schema import MealType, MealAnalysis, LogMealRequest, FoodLogResponse
from .plan_schema import (
    MealPlanSettings,
    GenerationRequest,
    MealPlanRequest,
    WorkoutPlanRequest,
    ValidatedMealPlan,
    MealPlanPreview,
    MealPlanResponse,
    WorkoutPlanResponse,
)
from .grocery_schema import GroceryCategory, GroceryItem, GroceryListResponse
from .progress_schema import DailyProgressResponse, GamificationState, ProgressSummary

__all__ = [
    "Sex",
    "ActivityLevel",
    "PrimaryGoal",
    "NutritionTargets",
    "OnboardingRequest",
    "ProfileUpdateRequest",
    "ProfileResponse",
    "MealType",
    "MealAnalysis",
    "LogMealRequest",
    "FoodLogResponse",
    "MealPlanSettings",
    "GenerationRequest",
    "MealPlanRequest",
    "WorkoutPlanRequest",
    "ValidatedMealPlan",
    "MealPlanPreview",
    "MealPlanResponse",
    "WorkoutPlanResponse",
    "GroceryCategory",
    "GroceryItem",
    "GroceryListResponse",
    "DailyProgressResponse",
    "GamificationState",
    "ProgressSummary",
]
