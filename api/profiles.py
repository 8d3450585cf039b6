"""Profile API router.

Onboarding, profile edits, nutrition target maintenance and account
deletion. Every endpoint is scoped to the caller from the `X-User-Id` header.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.context import UserContext
from core.logger import get_logger
from database.deps import get_db_read, get_db_write, get_inference_client, get_user_context
from schemas import NutritionTargets, OnboardingRequest, ProfileResponse, ProfileUpdateRequest
from schemas.profile_schema import TargetRecalculation
from services import profile_service
from services.inference_client import InferenceClient

logger = get_logger("api.profiles")
router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.post("", response_model=ProfileResponse, status_code=201)
def complete_onboarding(
    payload: OnboardingRequest,
    db: Session = Depends(get_db_write),
    ctx: UserContext = Depends(get_user_context),
):
    """Create the caller's profile with calculated nutrition targets.

    Raises:
        InvalidInputError: If a profile already exists or biometrics are invalid.
    """
    profile = profile_service.complete_onboarding(db, ctx, payload)
    return profile_service.to_response(profile)


@router.get("", response_model=ProfileResponse)
def get_profile(db: Session = Depends(get_db_read), ctx: UserContext = Depends(get_user_context)):
    return profile_service.to_response(profile_service.get_profile(db, ctx))


@router.patch("", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    db: Session = Depends(get_db_write),
    ctx: UserContext = Depends(get_user_context),
):
    """Apply a partial profile edit; nutrition targets are left as they are."""
    return profile_service.to_response(profile_service.update_profile(db, ctx, payload))


@router.put("/targets", response_model=ProfileResponse)
def update_targets(
    targets: NutritionTargets,
    db: Session = Depends(get_db_write),
    ctx: UserContext = Depends(get_user_context),
):
    return profile_service.to_response(profile_service.update_nutrition_targets(db, ctx, targets))


@router.get("/targets/recalculate", response_model=NutritionTargets)
def recalculate_targets(db: Session = Depends(get_db_read), ctx: UserContext = Depends(get_user_context)):
    """Targets recomputed from the stored biometrics. Not saved."""
    return profile_service.recalculate_targets(db, ctx)


@router.post("/targets/recalculate-ai", response_model=TargetRecalculation)
def recalculate_targets_with_ai(
    db: Session = Depends(get_db_read),
    ctx: UserContext = Depends(get_user_context),
    inference: InferenceClient = Depends(get_inference_client),
):
    """Targets suggested by the inference service. Not saved; apply them with PUT /targets."""
    return profile_service.recalculate_targets_with_ai(db, ctx, inference)


@router.delete("")
def delete_account(db: Session = Depends(get_db_write), ctx: UserContext = Depends(get_user_context)):
    """Delete the caller's profile and all records they own."""
    deleted = profile_service.delete_account(db, ctx)
    logger.info("Account deleted for %s", ctx.user_id)
    return {"deleted": deleted}
