"""Profile lifecycle: onboarding, edits, nutrition targets and account deletion."""

from typing import Dict

from sqlalchemy.orm import Session

from core.context import UserContext
from core.exceptions import InvalidInputError, NotFoundError, RemoteOperationFailed
from core.logger import get_logger
from core.repository import BaseRepository
from database import models
from schemas.profile_schema import (
    NutritionTargets,
    OnboardingRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    TargetRecalculation,
)
from services.inference_client import InferenceClient
from services.nutrition_calculator import nutrition_calculator, round_half_up
from services.plan_request_builder import plan_request_builder, split_csv

logger = get_logger("services.profile_service")

# Deleted in this order on account deletion; children before the plans they reference
OWNED_MODELS = [
    models.GroceryList,
    models.MealPlanTracking,
    models.FoodLog,
    models.MealPlan,
    models.WorkoutPlan,
    models.DailyProgress,
    models.Milestone,
    models.UserProfile,
]


def _repo(db: Session, ctx: UserContext) -> BaseRepository:
    return BaseRepository(models.UserProfile, db, ctx.user_id)


def get_profile(db: Session, ctx: UserContext) -> models.UserProfile:
    """Raises NotFoundError when onboarding has not been completed."""
    profile = _repo(db, ctx).first()
    if profile is None:
        raise NotFoundError("UserProfile", ctx.user_id)
    return profile


def complete_onboarding(db: Session, ctx: UserContext, payload: OnboardingRequest) -> models.UserProfile:
    """Compute targets from the onboarding answers and create the profile.

    Raises:
        InvalidInputError: If the biometrics are invalid or a profile already exists.
    """
    repo = _repo(db, ctx)
    if repo.first() is not None:
        raise InvalidInputError("Onboarding already completed for this user")
    targets = nutrition_calculator.calculate_targets(
        weight_kg=payload.current_weight_kg,
        height_cm=payload.height_cm,
        age=payload.age,
        sex=payload.sex,
        activity_level=payload.activity_level,
        primary_goal=payload.primary_goal,
    )
    profile = repo.create(
        age=payload.age,
        sex=payload.sex.value,
        height_cm=payload.height_cm,
        current_weight_kg=payload.current_weight_kg,
        goal_weight_kg=payload.goal_weight_kg,
        activity_level=payload.activity_level.value,
        primary_goal=payload.primary_goal.value,
        health_conditions=list(payload.health_conditions),
        dietary_preferences=list(payload.dietary_preferences),
        favorite_foods=split_csv(payload.favorite_foods),
        disliked_foods=split_csv(payload.disliked_foods),
        current_streak=0,
        total_points=0,
        onboarding_completed=True,
        **targets.model_dump(),
    )
    logger.info("Onboarding completed for %s: %s kcal", ctx.user_id, targets.daily_calorie_target)
    return profile


def update_profile(db: Session, ctx: UserContext, payload: ProfileUpdateRequest) -> models.UserProfile:
    """Apply a partial profile edit. Targets change only through the target operations."""
    profile = get_profile(db, ctx)
    changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    for key in ('favorite_foods', 'disliked_foods'):
        if key in changes:
            changes[key] = split_csv(changes[key])
    return _repo(db, ctx).update(profile, **changes)


def update_nutrition_targets(db: Session, ctx: UserContext, targets: NutritionTargets) -> models.UserProfile:
    profile = get_profile(db, ctx)
    return _repo(db, ctx).update(profile, **targets.model_dump())


def recalculate_targets(db: Session, ctx: UserContext) -> NutritionTargets:
    """Recompute targets from the stored biometrics with the Mifflin-St Jeor calculator."""
    return nutrition_calculator.targets_for_profile(get_profile(db, ctx))


def recalculate_targets_with_ai(db: Session, ctx: UserContext, inference: InferenceClient) -> TargetRecalculation:
    """Ask the inference service for targets. The result is returned, not stored."""
    profile = get_profile(db, ctx)
    result = inference.invoke(plan_request_builder.build_target_recalculation_request(profile))
    try:
        targets = NutritionTargets(
            daily_calorie_target=round_half_up(float(result['daily_calorie_target'])),
            protein_target_g=round_half_up(float(result['protein_target_g'])),
            carbs_target_g=round_half_up(float(result['carbs_target_g'])),
            fat_target_g=round_half_up(float(result['fat_target_g'])),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise RemoteOperationFailed("inference", "recalculate_targets", str(exc)) from exc
    return TargetRecalculation(targets=targets, explanation=result.get('explanation'))


def delete_account(db: Session, ctx: UserContext) -> Dict[str, int]:
    """Delete the profile and every record the user owns."""
    deleted = {}
    for model in OWNED_MODELS:
        deleted[model.__tablename__] = BaseRepository(model, db, ctx.user_id).delete_all()
    logger.info("Account data deleted for %s: %s", ctx.user_id, deleted)
    return deleted


def to_response(profile: models.UserProfile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        user_id=profile.user_id,
        age=profile.age,
        sex=profile.sex,
        height_cm=profile.height_cm,
        current_weight_kg=profile.current_weight_kg,
        goal_weight_kg=profile.goal_weight_kg,
        bmi=round(nutrition_calculator.calculate_bmi(profile.height_cm, profile.current_weight_kg), 1),
        activity_level=profile.activity_level,
        primary_goal=profile.primary_goal,
        health_conditions=profile.health_conditions or [],
        dietary_preferences=profile.dietary_preferences or [],
        favorite_foods=profile.favorite_foods or [],
        disliked_foods=profile.disliked_foods or [],
        targets=NutritionTargets(
            daily_calorie_target=profile.daily_calorie_target,
            protein_target_g=profile.protein_target_g,
            carbs_target_g=profile.carbs_target_g,
            fat_target_g=profile.fat_target_g,
        ),
        current_streak=profile.current_streak,
        total_points=profile.total_points,
    )
