"""Meal plan API router.

Generation returns an unsaved preview; approving it makes it the caller's
only active plan and creates its grocery list and tracking days.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.context import UserContext
from core.exceptions import NotFoundError
from core.logger import get_logger
from database.deps import get_db_read, get_db_write, get_inference_client, get_user_context
from schemas import MealPlanPreview, MealPlanResponse, MealPlanSettings
from schemas.plan_schema import MealCompletionRequest, MealEditRequest, MealTrackingResponse
from services.inference_client import InferenceClient
from services.plan_lifecycle import adherence_rate, plan_lifecycle

logger = get_logger("api.meal_plans")
router = APIRouter(prefix="/api/meal-plans", tags=["meal-plans"])


def _plan_response(plan) -> MealPlanResponse:
    return MealPlanResponse.model_validate(plan, from_attributes=True)


@router.post("/preview", response_model=MealPlanPreview)
def generate_preview(
    settings: MealPlanSettings,
    db: Session = Depends(get_db_read),
    ctx: UserContext = Depends(get_user_context),
    inference: InferenceClient = Depends(get_inference_client),
):
    """Generate a meal plan from the profile, recent habits and the given settings.

    Raises:
        IncompletePlanError: If fewer days than requested came back; retry.
    """
    return plan_lifecycle.generate_meal_plan_preview(db, ctx, settings, inference)


@router.post("", response_model=MealPlanResponse, status_code=201)
def approve_plan(
    preview: MealPlanPreview,
    db: Session = Depends(get_db_write),
    ctx: UserContext = Depends(get_user_context),
    inference: InferenceClient = Depends(get_inference_client),
):
    """Approve a previewed plan and make it the active one."""
    plan = plan_lifecycle.approve_meal_plan(db, ctx, preview, inference)
    logger.info("Meal plan %s approved via API for %s", plan.id, ctx.user_id)
    return _plan_response(plan)


@router.get("", response_model=List[MealPlanResponse])
def list_plans(db: Session = Depends(get_db_read), ctx: UserContext = Depends(get_user_context)):
    return [_plan_response(plan) for plan in plan_lifecycle.list_meal_plans(db, ctx)]


@router.get("/active", response_model=MealPlanResponse)
def get_active_plan(db: Session = Depends(get_db_read), ctx: UserContext = Depends(get_user_context)):
    """Raises NotFoundError when no plan is active."""
    plan = plan_lifecycle.get_active_meal_plan(db, ctx)
    if plan is None:
        raise NotFoundError("MealPlan", "active")
    return _plan_response(plan)


@router.patch("/{plan_id}/meals", response_model=MealPlanResponse)
def edit_meal(
    plan_id: int,
    payload: MealEditRequest,
    db: Session = Depends(get_db_write),
    ctx: UserContext = Depends(get_user_context),
):
    plan = plan_lifecycle.update_plan_meal(db, ctx, plan_id, payload.day_index, payload.meal_type, payload.meal)
    return _plan_response(plan)


@router.delete("/{plan_id}", status_code=204)
def delete_plan(plan_id: int, db: Session = Depends(get_db_write), ctx: UserContext = Depends(get_user_context)):
    plan_lifecycle.delete_meal_plan(db, ctx, plan_id)


@router.delete("")
def delete_all_plans(db: Session = Depends(get_db_write), ctx: UserContext = Depends(get_user_context)):
    return {"deleted": plan_lifecycle.delete_all_meal_plans(db, ctx)}


@router.get("/{plan_id}/tracking")
def get_tracking(plan_id: int, db: Session = Depends(get_db_read), ctx: UserContext = Depends(get_user_context)):
    """Tracking days of a plan with the share of fully completed days."""
    tracking = plan_lifecycle.list_tracking(db, ctx, plan_id)
    return {
        "days": [MealTrackingResponse.model_validate(row, from_attributes=True) for row in tracking],
        "adherence_rate": adherence_rate(tracking),
    }


@router.patch("/tracking/{tracking_id}", response_model=MealTrackingResponse)
def mark_meal(
    tracking_id: int,
    payload: MealCompletionRequest,
    db: Session = Depends(get_db_write),
    ctx: UserContext = Depends(get_user_context),
):
    row = plan_lifecycle.mark_meal(db, ctx, tracking_id, payload.meal_type, payload.completed)
    return MealTrackingResponse.model_validate(row, from_attributes=True)
