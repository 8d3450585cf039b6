"""Food log API router: log a described meal and list a day's meals."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.context import UserContext
from database.deps import get_db_read, get_db_write, get_inference_client, get_user_context
from schemas import FoodLogResponse, LogMealRequest
from schemas.progress_schema import DailyProgressResponse
from services import food_log_service
from services.inference_client import InferenceClient

router = APIRouter(prefix="/api/food-logs", tags=["food-logs"])


@router.post("", status_code=201)
def log_meal(
    payload: LogMealRequest,
    db: Session = Depends(get_db_write),
    ctx: UserContext = Depends(get_user_context),
    inference: InferenceClient = Depends(get_inference_client),
):
    """Analyze and store a meal, then return it with the updated day and rewards.

    Raises:
        RemoteOperationFailed: If the analysis or a store call fails; nothing is logged.
    """
    entry, update = food_log_service.log_meal(db, ctx, payload, inference)
    return {
        "food_log": FoodLogResponse.model_validate(entry, from_attributes=True),
        "daily_progress": DailyProgressResponse.model_validate(update.progress, from_attributes=True),
        "gamification": update.gamification,
    }


@router.get("", response_model=List[FoodLogResponse])
def list_meals(
    day: Optional[date] = None,
    db: Session = Depends(get_db_read),
    ctx: UserContext = Depends(get_user_context),
):
    """Meals logged on `day` (today by default), newest first."""
    return [
        FoodLogResponse.model_validate(entry, from_attributes=True)
        for entry in food_log_service.list_meals(db, ctx, day)
    ]
