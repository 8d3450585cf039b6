"""Tests for meal and workout plan generation, approval and deletion."""

import copy
from datetime import date

import pytest

from conftest import GROCERY_RESPONSE, WORKOUT_RESPONSE, make_meal, make_plan_response
from core.exceptions import IncompletePlanError, InvalidInputError, NotFoundError, RemoteOperationFailed
from core.repository import BaseRepository
from database import models
from schemas import MealPlanSettings
from services.plan_lifecycle import adherence_rate, plan_lifecycle


def preview(db, ctx, inference, days=7, duration="1_week"):
    inference.queue(make_plan_response(days))
    return plan_lifecycle.generate_meal_plan_preview(db, ctx, MealPlanSettings(duration=duration), inference)


def approve(db, ctx, inference, plan_preview):
    inference.queue(copy.deepcopy(GROCERY_RESPONSE))
    return plan_lifecycle.approve_meal_plan(db, ctx, plan_preview, inference)


def test_preview_requires_profile(db, ctx, inference):
    with pytest.raises(NotFoundError):
        plan_lifecycle.generate_meal_plan_preview(db, ctx, MealPlanSettings(), inference)
    assert inference.requests == []


def test_preview_is_not_persisted(db, ctx, profile, inference):
    result = preview(db, ctx, inference)
    assert result.is_active is False
    assert result.week_start_date == date(2026, 3, 4)
    assert result.week_end_date == date(2026, 3, 10)
    assert result.total_weekly_calories == 7 * 1700
    assert BaseRepository(models.MealPlan, db, ctx.user_id).count() == 0


def test_preview_uses_profile_targets_and_preferences(db, ctx, profile, inference):
    preview(db, ctx, inference)
    prompt = inference.requests[0].prompt
    assert "Daily calories: 2556 cal" in prompt
    assert "Dietary restrictions: vegetarian" in prompt
    assert "Preferred foods: oats, salmon" in prompt
    assert "Avoid: olives" in prompt


def test_incomplete_preview_persists_nothing(db, ctx, profile, inference):
    inference.queue(make_plan_response(5))
    with pytest.raises(IncompletePlanError):
        plan_lifecycle.generate_meal_plan_preview(db, ctx, MealPlanSettings(), inference)
    assert BaseRepository(models.MealPlan, db, ctx.user_id).count() == 0


def test_approve_creates_active_plan_grocery_list_and_tracking(db, ctx, profile, inference):
    plan = approve(db, ctx, inference, preview(db, ctx, inference))

    assert plan.is_active is True
    assert len(plan.daily_plans) == 7
    grocery_list = BaseRepository(models.GroceryList, db, ctx.user_id).first(meal_plan_id=plan.id)
    assert grocery_list is not None
    assert grocery_list.plan_duration == "1_week"
    tracking = plan_lifecycle.list_tracking(db, ctx, plan.id)
    assert len(tracking) == 7
    assert tracking[0].date == date(2026, 3, 4)
    assert tracking[0].day_name == "Day 1"


def test_tracking_covers_at_most_seven_days(db, ctx, profile, inference):
    plan = approve(db, ctx, inference, preview(db, ctx, inference, days=30, duration="1_month"))
    assert len(plan.daily_plans) == 30
    assert len(plan_lifecycle.list_tracking(db, ctx, plan.id)) == 7


def test_approving_leaves_exactly_one_active_plan(db, ctx, profile, inference):
    first = approve(db, ctx, inference, preview(db, ctx, inference))
    second = approve(db, ctx, inference, preview(db, ctx, inference))

    active = BaseRepository(models.MealPlan, db, ctx.user_id).filter(is_active=True)
    assert [plan.id for plan in active] == [second.id]
    db.refresh(first)
    assert first.is_active is False
    assert plan_lifecycle.get_active_meal_plan(db, ctx).id == second.id


def test_approval_does_not_touch_other_users(db, ctx, other_ctx, profile, inference):
    theirs = BaseRepository(models.MealPlan, db, other_ctx.user_id).create(
        week_start_date=date(2026, 3, 1), week_end_date=date(2026, 3, 7),
        daily_plans=[], total_weekly_calories=0, is_active=True,
    )
    approve(db, ctx, inference, preview(db, ctx, inference))
    db.refresh(theirs)
    assert theirs.is_active is True


def test_grocery_failure_surfaces_after_plan_is_stored(db, ctx, profile, inference):
    plan_preview = preview(db, ctx, inference)
    inference.queue(RemoteOperationFailed("inference", "invoke", "timeout"))
    with pytest.raises(RemoteOperationFailed):
        plan_lifecycle.approve_meal_plan(db, ctx, plan_preview, inference)
    assert plan_lifecycle.get_active_meal_plan(db, ctx) is not None
    assert BaseRepository(models.GroceryList, db, ctx.user_id).count() == 0


def test_approving_truncated_preview_is_rejected(db, ctx, profile, inference):
    plan_preview = preview(db, ctx, inference)
    plan_preview.daily_plans = plan_preview.daily_plans[:3]
    with pytest.raises(IncompletePlanError) as exc_info:
        plan_lifecycle.approve_meal_plan(db, ctx, plan_preview, inference)
    assert exc_info.value.requested_days == 7
    assert exc_info.value.received_days == 3
    assert BaseRepository(models.MealPlan, db, ctx.user_id).count() == 0
    assert inference.requests[1:] == []


def test_approval_recomputes_weekly_calories(db, ctx, profile, inference):
    plan_preview = preview(db, ctx, inference)
    plan_preview.total_weekly_calories = 1
    plan = approve(db, ctx, inference, plan_preview)
    assert plan.total_weekly_calories == 7 * 1700


def test_update_plan_meal_recalculates_total(db, ctx, profile, inference):
    plan = approve(db, ctx, inference, preview(db, ctx, inference))
    updated = plan_lifecycle.update_plan_meal(db, ctx, plan.id, 0, "dinner", make_meal("Tofu Bowl", 500))

    assert updated.daily_plans[0]["dinner"]["meal_name"] == "Tofu Bowl"
    assert updated.daily_plans[1]["dinner"]["meal_name"] == "Salmon Rice"
    assert updated.total_weekly_calories == 7 * 1700 - 200


@pytest.mark.parametrize("day_index,meal_type", [(7, "lunch"), (-1, "lunch"), (0, "snacks"), (0, "brunch")])
def test_update_plan_meal_rejects_bad_slot(db, ctx, profile, inference, day_index, meal_type):
    plan = approve(db, ctx, inference, preview(db, ctx, inference))
    with pytest.raises(InvalidInputError):
        plan_lifecycle.update_plan_meal(db, ctx, plan.id, day_index, meal_type, make_meal("X", 1))


def test_delete_plan_removes_children(db, ctx, profile, inference):
    plan = approve(db, ctx, inference, preview(db, ctx, inference))
    plan_lifecycle.delete_meal_plan(db, ctx, plan.id)

    assert BaseRepository(models.MealPlan, db, ctx.user_id).count() == 0
    assert BaseRepository(models.GroceryList, db, ctx.user_id).count() == 0
    assert BaseRepository(models.MealPlanTracking, db, ctx.user_id).count() == 0
    with pytest.raises(NotFoundError):
        plan_lifecycle.delete_meal_plan(db, ctx, plan.id)


def test_delete_all_plans(db, ctx, profile, inference):
    approve(db, ctx, inference, preview(db, ctx, inference))
    approve(db, ctx, inference, preview(db, ctx, inference))
    assert plan_lifecycle.delete_all_meal_plans(db, ctx) == 2
    assert plan_lifecycle.list_meal_plans(db, ctx) == []


def test_mark_meal_updates_adherence(db, ctx, profile, inference):
    plan = approve(db, ctx, inference, preview(db, ctx, inference))
    day = plan_lifecycle.list_tracking(db, ctx, plan.id)[0]

    plan_lifecycle.mark_meal(db, ctx, day.id, "breakfast")
    row = plan_lifecycle.mark_meal(db, ctx, day.id, "lunch")
    assert row.adherence_score == pytest.approx(66.7)
    row = plan_lifecycle.mark_meal(db, ctx, day.id, "dinner")
    assert row.adherence_score == 100

    tracking = plan_lifecycle.list_tracking(db, ctx, plan.id)
    assert adherence_rate(tracking) == pytest.approx(14.3)


def test_adherence_rate_of_nothing_is_zero():
    assert adherence_rate([]) == 0.0


def test_generate_workout_plan_replaces_active(db, ctx, profile, inference):
    inference.queue(copy.deepcopy(WORKOUT_RESPONSE), copy.deepcopy(WORKOUT_RESPONSE))
    first = plan_lifecycle.generate_workout_plan(db, ctx, inference)
    second = plan_lifecycle.generate_workout_plan(db, ctx, inference)

    assert second.goal == "general_fitness"
    assert second.weeks_duration == 4
    assert second.equipment_available == ["bodyweight", "dumbbells", "resistance bands"]
    db.refresh(first)
    assert first.is_active is False
    assert plan_lifecycle.get_active_workout_plan(db, ctx).id == second.id


def test_empty_workout_plan_is_not_stored(db, ctx, profile, inference):
    inference.queue({"plan_name": "Nothing", "weekly_schedule": []})
    with pytest.raises(IncompletePlanError):
        plan_lifecycle.generate_workout_plan(db, ctx, inference)
    assert plan_lifecycle.get_active_workout_plan(db, ctx) is None
