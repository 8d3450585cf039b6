"""Tests for onboarding, profile edits, target maintenance and account deletion."""

import copy

import pytest

from conftest import GROCERY_RESPONSE, make_plan_response
from core.exceptions import InvalidInputError, NotFoundError, RemoteOperationFailed
from core.repository import BaseRepository
from database import models
from schemas import MealPlanSettings, NutritionTargets, OnboardingRequest, ProfileUpdateRequest
from services import profile_service
from services.plan_lifecycle import plan_lifecycle


def test_onboarding_creates_profile_with_targets(profile):
    assert profile.daily_calorie_target == 2556
    assert profile.protein_target_g == 192
    assert profile.carbs_target_g == 256
    assert profile.fat_target_g == 85
    assert profile.current_streak == 0
    assert profile.total_points == 0
    assert profile.favorite_foods == ["oats", "salmon"]
    assert profile.disliked_foods == ["olives"]


def test_second_onboarding_is_rejected(db, ctx, profile):
    payload = OnboardingRequest(age=40, sex="female", height_cm=160, current_weight_kg=60)
    with pytest.raises(InvalidInputError):
        profile_service.complete_onboarding(db, ctx, payload)


def test_get_profile_missing(db, ctx):
    with pytest.raises(NotFoundError):
        profile_service.get_profile(db, ctx)


def test_update_profile_is_partial(db, ctx, profile):
    updated = profile_service.update_profile(
        db, ctx, ProfileUpdateRequest(current_weight_kg=68.5, activity_level="very_active", favorite_foods="tofu, rice")
    )
    assert updated.current_weight_kg == 68.5
    assert updated.activity_level == "very_active"
    assert updated.favorite_foods == ["tofu", "rice"]
    assert updated.age == 30
    # targets only move through the target operations
    assert updated.daily_calorie_target == 2556


def test_recalculate_targets_uses_current_biometrics(db, ctx, profile):
    profile_service.update_profile(db, ctx, ProfileUpdateRequest(activity_level="lightly_active"))
    targets = profile_service.recalculate_targets(db, ctx)
    assert targets.daily_calorie_target == 2267  # 1648.75 * 1.375


def test_update_nutrition_targets(db, ctx, profile):
    targets = NutritionTargets(daily_calorie_target=2200, protein_target_g=165, carbs_target_g=220, fat_target_g=73)
    updated = profile_service.update_nutrition_targets(db, ctx, targets)
    assert updated.daily_calorie_target == 2200
    assert updated.fat_target_g == 73


def test_ai_recalculation_is_rounded_and_not_stored(db, ctx, profile, inference):
    inference.queue({
        "daily_calorie_target": 2345.5,
        "protein_target_g": 150.4,
        "carbs_target_g": 260.6,
        "fat_target_g": 78,
        "explanation": "Adjusted for activity.",
    })
    result = profile_service.recalculate_targets_with_ai(db, ctx, inference)
    assert result.targets.daily_calorie_target == 2346
    assert result.targets.protein_target_g == 150
    assert result.targets.carbs_target_g == 261
    assert result.explanation == "Adjusted for activity."
    db.refresh(profile)
    assert profile.daily_calorie_target == 2556


@pytest.mark.parametrize("response", [
    {"daily_calorie_target": 2000},
    {"daily_calorie_target": "lots", "protein_target_g": 1, "carbs_target_g": 1, "fat_target_g": 1},
    {"daily_calorie_target": -10, "protein_target_g": 1, "carbs_target_g": 1, "fat_target_g": 1},
])
def test_ai_recalculation_rejects_bad_response(db, ctx, profile, inference, response):
    inference.queue(response)
    with pytest.raises(RemoteOperationFailed):
        profile_service.recalculate_targets_with_ai(db, ctx, inference)


def test_delete_account_removes_owned_records_only(db, ctx, other_ctx, profile, inference):
    inference.queue(make_plan_response(7), copy.deepcopy(GROCERY_RESPONSE))
    plan_preview = plan_lifecycle.generate_meal_plan_preview(db, ctx, MealPlanSettings(), inference)
    plan_lifecycle.approve_meal_plan(db, ctx, plan_preview, inference)
    BaseRepository(models.DailyProgress, db, other_ctx.user_id).create(date=ctx.current_date())

    deleted = profile_service.delete_account(db, ctx)

    assert deleted["user_profiles"] == 1
    assert deleted["meal_plans"] == 1
    assert deleted["grocery_lists"] == 1
    assert deleted["meal_plan_tracking"] == 7
    with pytest.raises(NotFoundError):
        profile_service.get_profile(db, ctx)
    assert BaseRepository(models.DailyProgress, db, other_ctx.user_id).count() == 1


def test_profile_response_includes_bmi(profile):
    response = profile_service.to_response(profile)
    assert response.bmi == 22.9
    assert response.targets.daily_calorie_target == 2556
