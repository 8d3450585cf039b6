"""Meal logging: AI nutrient analysis, FoodLog creation and progress folding."""

from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from core.context import UserContext
from core.logger import get_logger
from core.repository import BaseRepository
from database import models
from schemas.food_log_schema import LogMealRequest
from services.inference_client import InferenceClient
from services.plan_request_builder import plan_request_builder
from services.plan_validator import validate_meal_analysis
from services.progress_aggregator import ProgressUpdate, progress_aggregator

logger = get_logger("services.food_log_service")


def log_meal(
    db: Session,
    ctx: UserContext,
    payload: LogMealRequest,
    inference: InferenceClient,
) -> Tuple[models.FoodLog, ProgressUpdate]:
    """Analyze a described meal, store it and fold it into the day's progress.

    Nothing is stored when the analysis fails.
    """
    request = plan_request_builder.build_meal_analysis_request(payload.description)
    analysis = validate_meal_analysis(inference.invoke(request))

    entry = BaseRepository(models.FoodLog, db, ctx.user_id).create(
        meal_type=payload.meal_type.value,
        meal_date=payload.meal_date or ctx.current_date(),
        meal_time=payload.meal_time or datetime.now().strftime("%H:%M"),
        notes=payload.description,
        food_items=[item.model_dump() for item in analysis.food_items],
        total_calories=analysis.total_calories,
        total_protein_g=analysis.total_protein_g,
        total_carbs_g=analysis.total_carbs_g,
        total_fat_g=analysis.total_fat_g,
        healthiness_score=analysis.healthiness_score,
        ai_suggestions=analysis.ai_suggestions,
    )
    logger.info("Food log %s created: %s %.0f kcal", entry.id, entry.meal_type, entry.total_calories)
    update = progress_aggregator.record_meal_log(db, ctx, entry)
    return entry, update


def list_meals(db: Session, ctx: UserContext, day: Optional[date] = None) -> List[models.FoodLog]:
    """Return the user's meals for a day, newest first."""
    return BaseRepository(models.FoodLog, db, ctx.user_id).filter(
        order_by="-created_at", meal_date=day or ctx.current_date()
    )
