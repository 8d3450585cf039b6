"""Progress analytics over the most recent days of DailyProgress records.

Builds a pandas frame from the records and derives average intake, workout
completion and weight trend for the progress views.
"""

from datetime import date
from typing import Iterable, List, Optional

import pandas as pd
from sqlalchemy.orm import Session

from core.context import UserContext
from core.logger import get_logger
from core.repository import BaseRepository
from database import models
from schemas.progress_schema import CaloriePoint, ProgressSummary, WeightPoint

logger = get_logger("services.progress_summary")

DEFAULT_RANGE_DAYS = 30
DEFAULT_CALORIE_TARGET = 2000


def _frame(records: Iterable[models.DailyProgress]) -> pd.DataFrame:
    rows = [
        {
            "date": r.date,
            "calories_consumed": r.calories_consumed,
            "workout_completed": r.workout_completed,
            "weight_kg": r.weight_kg,
        }
        for r in records
    ]
    df = pd.DataFrame(rows, columns=["date", "calories_consumed", "workout_completed", "weight_kg"])
    df["calories_consumed"] = pd.to_numeric(df["calories_consumed"], errors="coerce").fillna(0.0)
    df["workout_completed"] = df["workout_completed"].fillna(False).astype(bool)
    df["weight_kg"] = pd.to_numeric(df["weight_kg"], errors="coerce")
    return df.sort_values("date").reset_index(drop=True)


def summarize_progress(
    records: List[models.DailyProgress],
    calorie_target: Optional[int] = None,
    fallback_weight: Optional[float] = None,
) -> ProgressSummary:
    """Aggregate a list of daily records.

    Args:
        records: DailyProgress rows in any order.
        calorie_target: Target drawn next to each day's intake (2000 if unknown).
        fallback_weight: Profile weight used when no day carries a weight sample.
    """
    target = calorie_target or DEFAULT_CALORIE_TARGET
    df = _frame(records)
    if df.empty:
        return ProgressSummary(
            days=0,
            average_calories=0.0,
            workouts_completed=0,
            workout_completion_rate=0.0,
            start_weight=fallback_weight,
            current_weight=fallback_weight,
            weight_change=0.0,
        )

    workouts = int(df["workout_completed"].sum())
    weights = df.dropna(subset=["weight_kg"])
    if weights.empty:
        start_weight = current_weight = fallback_weight
    else:
        start_weight = float(weights["weight_kg"].iloc[0])
        current_weight = float(weights["weight_kg"].iloc[-1])
    weight_change = current_weight - start_weight if start_weight and current_weight else 0.0

    summary = ProgressSummary(
        days=len(df),
        average_calories=round(float(df["calories_consumed"].mean()), 1),
        workouts_completed=workouts,
        workout_completion_rate=round(workouts / len(df) * 100, 1),
        start_weight=start_weight,
        current_weight=current_weight,
        weight_change=round(weight_change, 2),
        calorie_series=[
            CaloriePoint(date=row.date, consumed=row.calories_consumed, target=target)
            for row in df.itertuples()
        ],
        weight_series=[
            WeightPoint(date=row.date, weight=row.weight_kg)
            for row in weights.itertuples()
        ],
    )
    logger.debug("Progress summary over %s days: avg=%.1f", summary.days, summary.average_calories)
    return summary


def get_progress_summary(db: Session, ctx: UserContext, days: int = DEFAULT_RANGE_DAYS) -> ProgressSummary:
    """Summarize the user's most recent `days` progress records."""
    records = BaseRepository(models.DailyProgress, db, ctx.user_id).filter(order_by="-date", limit=days)
    profile = BaseRepository(models.UserProfile, db, ctx.user_id).first()
    return summarize_progress(
        records,
        calorie_target=getattr(profile, "daily_calorie_target", None),
        fallback_weight=getattr(profile, "current_weight_kg", None),
    )


def get_daily_progress(db: Session, ctx: UserContext, day: Optional[date] = None) -> Optional[models.DailyProgress]:
    return BaseRepository(models.DailyProgress, db, ctx.user_id).first(date=day or ctx.current_date())


def list_milestones(db: Session, ctx: UserContext, limit: Optional[int] = None) -> List[models.Milestone]:
    return BaseRepository(models.Milestone, db, ctx.user_id).filter(order_by="-achieved_date", limit=limit)
