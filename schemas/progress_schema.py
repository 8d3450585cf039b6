"""Schemas for daily progress, progress analytics and milestones."""

from datetime import date
from pydantic import BaseModel, Field
from typing import List, Optional


class DailyProgressResponse(BaseModel):
    """Cumulative progress for one day."""

    date: date
    calories_consumed: float = 0
    protein_consumed_g: float = 0
    carbs_consumed_g: float = 0
    fat_consumed_g: float = 0
    meals_logged: int = 0
    workout_completed: bool = False
    weight_kg: Optional[float] = None


class GamificationState(BaseModel):
    """Streak and points after an award."""

    current_streak: int = Field(..., ge=0)
    total_points: int = Field(..., ge=0)


class WeightLogRequest(BaseModel):
    weight_kg: float = Field(..., gt=0, examples=[69.4])
    day: Optional[date] = Field(None, description="Defaults to today")


class CaloriePoint(BaseModel):
    date: date
    consumed: float
    target: int


class WeightPoint(BaseModel):
    date: date
    weight: float


class ProgressSummary(BaseModel):
    """Aggregates over the most recent N days of progress."""

    days: int
    average_calories: float
    workouts_completed: int
    workout_completion_rate: float
    start_weight: Optional[float] = None
    current_weight: Optional[float] = None
    weight_change: float = 0
    calorie_series: List[CaloriePoint] = []
    weight_series: List[WeightPoint] = []


class MilestoneResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    points_earned: int
    achieved_date: date
