"""Workout plan API router: generate, fetch the active plan, and complete a workout."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.context import UserContext
from core.exceptions import NotFoundError
from database.deps import get_db_read, get_db_write, get_inference_client, get_user_context
from schemas import WorkoutPlanResponse
from schemas.progress_schema import DailyProgressResponse
from services.inference_client import InferenceClient
from services.plan_lifecycle import plan_lifecycle
from services.progress_aggregator import progress_aggregator

router = APIRouter(prefix="/api/workout-plans", tags=["workout-plans"])


@router.post("", response_model=WorkoutPlanResponse, status_code=201)
def generate_workout_plan(
    db: Session = Depends(get_db_write),
    ctx: UserContext = Depends(get_user_context),
    inference: InferenceClient = Depends(get_inference_client),
):
    """Generate a 4-week plan from the profile; it replaces the active plan."""
    plan = plan_lifecycle.generate_workout_plan(db, ctx, inference)
    return WorkoutPlanResponse.model_validate(plan, from_attributes=True)


@router.get("/active", response_model=WorkoutPlanResponse)
def get_active_workout_plan(db: Session = Depends(get_db_read), ctx: UserContext = Depends(get_user_context)):
    plan = plan_lifecycle.get_active_workout_plan(db, ctx)
    if plan is None:
        raise NotFoundError("WorkoutPlan", "active")
    return WorkoutPlanResponse.model_validate(plan, from_attributes=True)


@router.post("/complete")
def complete_workout(
    day: Optional[date] = None,
    db: Session = Depends(get_db_write),
    ctx: UserContext = Depends(get_user_context),
):
    """Mark the day's workout done (today by default) and award the workout points."""
    update = progress_aggregator.record_workout_completion(db, ctx, day)
    return {
        "daily_progress": DailyProgressResponse.model_validate(update.progress, from_attributes=True),
        "gamification": update.gamification,
    }
