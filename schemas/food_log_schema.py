"""Schemas for meal logging and AI meal analysis."""

from datetime import date
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class FoodItem(BaseModel):
    """One food of a logged meal with its estimated nutrients."""

    name: str
    portion: Optional[str] = None
    calories: float = 0
    protein_g: float = 0
    carbs_g: float = 0
    fat_g: float = 0


class MealAnalysis(BaseModel):
    """Structured nutrient breakdown returned by the inference service."""

    food_items: List[FoodItem] = []
    total_calories: float = Field(..., ge=0)
    total_protein_g: float = Field(..., ge=0)
    total_carbs_g: float = Field(..., ge=0)
    total_fat_g: float = Field(..., ge=0)
    healthiness_score: int = Field(5, ge=1, le=10)
    ai_suggestions: Optional[str] = None


class LogMealRequest(BaseModel):
    """Free-text description of a meal to analyze and log."""

    description: str = Field(..., min_length=1, examples=["Two scrambled eggs on toast with coffee"])
    meal_type: MealType = Field(MealType.BREAKFAST)
    meal_date: Optional[date] = Field(None, description="Defaults to today")
    meal_time: Optional[str] = Field(None, examples=["08:30"], description="HH:MM, defaults to now")

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Meal description must not be blank")
        return value


class FoodLogResponse(BaseModel):
    """Stored food log entry."""

    id: int
    meal_type: str
    meal_date: date
    meal_time: Optional[str] = None
    notes: Optional[str] = None
    food_items: List[FoodItem] = []
    total_calories: float
    total_protein_g: float
    total_carbs_g: float
    total_fat_g: float
    healthiness_score: Optional[int] = None
    ai_suggestions: Optional[str] = None
