"""Tests for day-count validation of generated plans and meal analysis checks."""

from datetime import date
from types import SimpleNamespace

import pytest

from conftest import make_day, make_plan_response
from core.exceptions import IncompletePlanError, RemoteOperationFailed
from schemas import MealPlanSettings
from services.plan_request_builder import plan_request_builder
from services.plan_validator import (
    plan_total_calories,
    validate_meal_analysis,
    validate_meal_plan,
    validate_workout_plan,
)


@pytest.fixture
def week_request():
    profile = SimpleNamespace(
        primary_goal="maintain_weight", activity_level="sedentary",
        daily_calorie_target=2000, protein_target_g=150, carbs_target_g=200, fat_target_g=67,
    )
    return plan_request_builder.build_meal_plan_request(profile, [], MealPlanSettings(), date(2026, 3, 4))


def test_short_plan_is_rejected(week_request):
    with pytest.raises(IncompletePlanError) as exc_info:
        validate_meal_plan(week_request, make_plan_response(5))
    exc = exc_info.value
    assert exc.requested_days == 7
    assert exc.received_days == 5
    assert exc.status_code == 422
    assert exc.details["retryable"] is True


@pytest.mark.parametrize("response", [{}, {"daily_plans": None}, {"daily_plans": "seven days"}, None])
def test_missing_daily_plans_counts_as_zero_days(week_request, response):
    with pytest.raises(IncompletePlanError) as exc_info:
        validate_meal_plan(week_request, response)
    assert exc_info.value.received_days == 0


def test_exact_plan_passes(week_request):
    validated = validate_meal_plan(week_request, make_plan_response(7))
    assert len(validated.daily_plans) == 7
    assert validated.requested_days == 7
    assert validated.surplus_days == 0
    assert validated.warnings == []
    assert validated.ai_notes == "Balanced week"


def test_surplus_days_are_accepted_and_reported(week_request):
    validated = validate_meal_plan(week_request, make_plan_response(9))
    assert len(validated.daily_plans) == 9
    assert validated.surplus_days == 2


def test_total_excludes_snacks(week_request):
    validated = validate_meal_plan(week_request, make_plan_response(7))
    assert validated.total_calories == 7 * (400 + 600 + 700)


def test_missing_meal_slot_is_flagged_not_rejected(week_request):
    response = make_plan_response(7)
    del response["daily_plans"][2]["lunch"]
    validated = validate_meal_plan(week_request, response)
    assert validated.warnings == ["Day 3 is missing lunch"]
    assert validated.total_calories == 7 * 1700 - 600


def test_plan_total_ignores_malformed_calories():
    day = make_day(0)
    day["dinner"]["calories"] = "lots"
    assert plan_total_calories([day]) == 1000


def test_workout_plan_requires_schedule():
    with pytest.raises(IncompletePlanError):
        validate_workout_plan({"plan_name": "Empty", "weekly_schedule": []})
    response = {"weekly_schedule": [{"day": "Monday"}]}
    assert validate_workout_plan(response) is response


def test_meal_analysis_clamps_score():
    analysis = validate_meal_analysis({
        "food_items": [{"name": "eggs", "calories": 150}],
        "total_calories": 320,
        "total_protein_g": 18,
        "total_carbs_g": 25,
        "total_fat_g": 14,
        "healthiness_score": 14,
    })
    assert analysis.healthiness_score == 10
    assert analysis.food_items[0].name == "eggs"


def test_meal_analysis_defaults_missing_score():
    analysis = validate_meal_analysis({
        "total_calories": 100, "total_protein_g": 1, "total_carbs_g": 20, "total_fat_g": 0,
    })
    assert analysis.healthiness_score == 5


@pytest.mark.parametrize("response", [
    None,
    {"total_calories": 100},
    {"total_calories": "many", "total_protein_g": 1, "total_carbs_g": 1, "total_fat_g": 1},
    {"total_calories": -5, "total_protein_g": 1, "total_carbs_g": 1, "total_fat_g": 1},
])
def test_malformed_meal_analysis_raises(response):
    with pytest.raises(RemoteOperationFailed) as exc_info:
        validate_meal_analysis(response)
    assert exc_info.value.details["service"] == "inference"
