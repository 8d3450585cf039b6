"""Progress API router: today's totals, weight logging, range summary and milestones."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.context import UserContext
from database.deps import get_db_read, get_db_write, get_user_context
from schemas import DailyProgressResponse, ProgressSummary
from schemas.progress_schema import MilestoneResponse, WeightLogRequest
from services import progress_summary
from services.progress_aggregator import progress_aggregator

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.get("/daily", response_model=DailyProgressResponse)
def get_daily_progress(
    day: Optional[date] = None,
    db: Session = Depends(get_db_read),
    ctx: UserContext = Depends(get_user_context),
):
    """A day without any record reads as all zeros."""
    day = day or ctx.current_date()
    record = progress_summary.get_daily_progress(db, ctx, day)
    if record is None:
        return DailyProgressResponse(date=day)
    return DailyProgressResponse.model_validate(record, from_attributes=True)


@router.post("/weight", response_model=DailyProgressResponse)
def log_weight(payload: WeightLogRequest, db: Session = Depends(get_db_write), ctx: UserContext = Depends(get_user_context)):
    update = progress_aggregator.record_weight(db, ctx, payload.weight_kg, payload.day)
    return DailyProgressResponse.model_validate(update.progress, from_attributes=True)


@router.get("/summary", response_model=ProgressSummary)
def get_summary(
    days: int = Query(progress_summary.DEFAULT_RANGE_DAYS, gt=0, le=365),
    db: Session = Depends(get_db_read),
    ctx: UserContext = Depends(get_user_context),
):
    """Averages and trends over the most recent `days` progress records."""
    return progress_summary.get_progress_summary(db, ctx, days)


@router.get("/milestones", response_model=List[MilestoneResponse])
def list_milestones(db: Session = Depends(get_db_read), ctx: UserContext = Depends(get_user_context)):
    return [
        MilestoneResponse.model_validate(m, from_attributes=True)
        for m in progress_summary.list_milestones(db, ctx)
    ]
