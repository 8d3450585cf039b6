"""Daily progress aggregation and gamification awards.

Each meal-log event is folded into the day's cumulative DailyProgress record
and awards streak and points on the profile. Folding is a read-modify-write
against the record store without a concurrency token; applying the same
event twice counts it twice, so callers deliver each event at most once.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from core.context import UserContext
from core.logger import get_logger
from core.repository import BaseRepository
from database import models
from schemas.progress_schema import GamificationState

logger = get_logger("services.progress_aggregator")

MEAL_LOG_POINTS = 10
WORKOUT_POINTS = 20

CUMULATIVE_FIELDS = {
    'calories_consumed': 'total_calories',
    'protein_consumed_g': 'total_protein_g',
    'carbs_consumed_g': 'total_carbs_g',
    'fat_consumed_g': 'total_fat_g',
}


@dataclass
class ProgressUpdate:
    """Outcome of folding one event."""

    progress: models.DailyProgress
    gamification: Optional[GamificationState] = None


def fold_meal(record: Optional[Any], entry: Any) -> Dict[str, Any]:
    """Return the day's cumulative fields after adding one meal.

    A missing record counts as all zeros.
    """
    folded = {}
    for progress_field, entry_field in CUMULATIVE_FIELDS.items():
        previous = getattr(record, progress_field, None) or 0
        folded[progress_field] = previous + (getattr(entry, entry_field, None) or 0)
    folded['meals_logged'] = (getattr(record, 'meals_logged', None) or 0) + 1
    return folded


def award_meal_log(state: GamificationState) -> GamificationState:
    """A logged meal extends the streak by one and earns 10 points."""
    return GamificationState(
        current_streak=state.current_streak + 1,
        total_points=state.total_points + MEAL_LOG_POINTS,
    )


def award_workout(state: GamificationState) -> GamificationState:
    """A completed workout earns 20 points; the streak is untouched."""
    return GamificationState(
        current_streak=state.current_streak,
        total_points=state.total_points + WORKOUT_POINTS,
    )


class ProgressAggregator:
    """Applies meal, workout and weight events to the record store."""

    def _progress_repo(self, db: Session, ctx: UserContext) -> BaseRepository:
        return BaseRepository(models.DailyProgress, db, ctx.user_id)

    def _profile_repo(self, db: Session, ctx: UserContext) -> BaseRepository:
        return BaseRepository(models.UserProfile, db, ctx.user_id)

    def _upsert(self, db: Session, ctx: UserContext, day: date, **fields: Any) -> models.DailyProgress:
        repo = self._progress_repo(db, ctx)
        record = repo.first(date=day)
        if record is None:
            return repo.create(date=day, **fields)
        return repo.update(record, **fields)

    def _award(self, db: Session, ctx: UserContext, award) -> Optional[GamificationState]:
        repo = self._profile_repo(db, ctx)
        profile = repo.first()
        if profile is None:
            logger.warning("No profile for user %s, skipping gamification award", ctx.user_id)
            return None
        state = award(GamificationState(
            current_streak=profile.current_streak or 0,
            total_points=profile.total_points or 0,
        ))
        repo.update(profile, current_streak=state.current_streak, total_points=state.total_points)
        return state

    def record_meal_log(self, db: Session, ctx: UserContext, entry: models.FoodLog) -> ProgressUpdate:
        """Fold a newly created food log entry into its day and award the meal points."""
        repo = self._progress_repo(db, ctx)
        existing = repo.first(date=entry.meal_date)
        folded = fold_meal(existing, entry)
        if existing is None:
            progress = repo.create(date=entry.meal_date, **folded)
        else:
            progress = repo.update(existing, **folded)
        state = self._award(db, ctx, award_meal_log)
        logger.info(
            "Meal logged for %s on %s: calories=%.1f meals=%s",
            ctx.user_id, entry.meal_date, progress.calories_consumed, progress.meals_logged,
        )
        return ProgressUpdate(progress=progress, gamification=state)

    def record_workout_completion(self, db: Session, ctx: UserContext, day: Optional[date] = None) -> ProgressUpdate:
        """Mark the day's workout completed and award the workout points."""
        day = day or ctx.current_date()
        progress = self._upsert(db, ctx, day, workout_completed=True)
        state = self._award(db, ctx, award_workout)
        logger.info("Workout completed for %s on %s", ctx.user_id, day)
        return ProgressUpdate(progress=progress, gamification=state)

    def record_weight(self, db: Session, ctx: UserContext, weight_kg: float, day: Optional[date] = None) -> ProgressUpdate:
        """Store the day's weight sample, replacing an earlier one for the same day."""
        day = day or ctx.current_date()
        progress = self._upsert(db, ctx, day, weight_kg=weight_kg)
        return ProgressUpdate(progress=progress)


progress_aggregator = ProgressAggregator()
