"""Tests for building meal plan, workout and auxiliary generation requests."""

from datetime import date
from types import SimpleNamespace

import pytest

from schemas import MealPlanSettings
from services.plan_request_builder import merge_sources, plan_request_builder, split_csv

START = date(2026, 3, 4)


@pytest.fixture
def profile():
    return SimpleNamespace(
        age=34,
        sex="female",
        height_cm=165,
        current_weight_kg=62,
        goal_weight_kg=58,
        activity_level="lightly_active",
        primary_goal="lose_weight",
        health_conditions=["hypertension"],
        dietary_preferences=["Vegetarian"],
        favorite_foods=["oats", "lentils"],
        disliked_foods=["olives"],
        daily_calorie_target=1700,
        protein_target_g=128,
        carbs_target_g=170,
        fat_target_g=57,
    )


def food_log(meal_type, *names):
    return SimpleNamespace(meal_type=meal_type, food_items=[{"name": n} for n in names])


@pytest.mark.parametrize("duration,days", [
    ("1_week", 7), ("1_month", 30), ("3_months", 90), ("6_months", 180), ("fortnight", 7),
])
def test_duration_to_days(duration, days):
    assert plan_request_builder.duration_to_days(duration) == days


def test_split_csv_trims_and_drops_empties():
    assert split_csv(" tofu, ,rice ,") == ["tofu", "rice"]
    assert split_csv("") == []
    assert split_csv(None) == []


def test_merge_sources_keeps_order_and_duplicates():
    assert merge_sources(["a", "b"], None, ["b", "c"]) == ["a", "b", "b", "c"]


def test_frequent_foods_ranked_by_count_ties_by_first_seen():
    logs = [
        food_log("breakfast", "eggs", "toast"),
        food_log("lunch", "rice", "toast"),
        food_log("dinner", "rice", "eggs", "kale"),
        food_log("snack", "apple"),
    ]
    habits = plan_request_builder.analyze_eating_habits(logs)
    assert habits.total_meals == 4
    assert habits.meal_type_counts == {"breakfast": 1, "lunch": 1, "dinner": 1, "snack": 1}
    assert habits.frequent_foods == ["eggs", "toast", "rice", "kale", "apple"]


def test_frequent_foods_limited_to_ten():
    logs = [food_log("lunch", *[f"food{i}" for i in range(15)])]
    assert len(plan_request_builder.analyze_eating_habits(logs).frequent_foods) == 10


def test_meal_plan_request_merges_sources_in_order(profile):
    settings = MealPlanSettings(
        duration="1_week",
        dietary_restrictions=["Gluten-Free"],
        other_restrictions="low sodium, no shellfish",
        preferred_foods="tofu",
        avoid_foods="mushrooms, olives",
    )
    logs = [food_log("lunch", "quinoa"), food_log("dinner", "quinoa", "beans")]
    request = plan_request_builder.build_meal_plan_request(profile, logs, settings, START)

    assert request.day_count == 7
    assert request.start_date == START
    assert request.end_date == date(2026, 3, 10)
    assert request.dietary_restrictions == ["Vegetarian", "Gluten-Free", "low sodium", "no shellfish"]
    assert request.avoid_foods == ["olives", "mushrooms", "olives"]
    assert request.preferred_foods == ["oats", "lentils", "quinoa", "beans", "tofu"]
    assert request.based_on_habits is True
    assert request.response_json_schema["properties"]["daily_plans"]["type"] == "array"


def test_meal_plan_prompt_states_day_count_and_labels(profile):
    settings = MealPlanSettings(duration="1_month", max_prep_time=30)
    request = plan_request_builder.build_meal_plan_request(profile, [], settings, START)
    assert request.day_count == 30
    assert "EXACTLY 30 DAYS" in request.prompt
    assert "NOT 29" in request.prompt
    assert "March 4, 2026 (Wednesday)" in request.prompt
    assert "- Day 1 (Mar 4)" in request.prompt
    assert "Day 30 (Apr 2)" in request.prompt
    assert "Max prep time: 30 minutes" in request.prompt
    assert "No previous meals logged" in request.prompt
    assert request.based_on_habits is False


def test_profile_targets_used_without_custom_toggle(profile):
    settings = MealPlanSettings(custom_calories=2500)
    request = plan_request_builder.build_meal_plan_request(profile, [], settings, START)
    assert request.targets.daily_calorie_target == 1700


def test_custom_targets_replace_only_set_values(profile):
    settings = MealPlanSettings(use_custom_nutrition=True, custom_calories=2000, custom_fat=70)
    targets = plan_request_builder.select_targets(profile, settings)
    assert targets.daily_calorie_target == 2000
    assert targets.fat_target_g == 70
    assert targets.protein_target_g == 128
    assert targets.carbs_target_g == 170


def test_workout_request(profile):
    request = plan_request_builder.build_workout_plan_request(profile)
    assert request.goal == "fat_loss"
    assert request.weeks_duration == 4
    assert request.equipment_available == ["bodyweight", "dumbbells", "resistance bands"]
    assert "4-week workout plan" in request.prompt
    assert "weekly_schedule" in request.response_json_schema["properties"]


@pytest.mark.parametrize("goal,mapped", [
    ("gain_muscle", "muscle_gain"), ("maintain_weight", "general_fitness"), ("increase_energy", "general_fitness"),
])
def test_workout_goal_mapping(profile, goal, mapped):
    profile.primary_goal = goal
    assert plan_request_builder.build_workout_plan_request(profile).goal == mapped


def test_meal_analysis_request_includes_description():
    request = plan_request_builder.build_meal_analysis_request("  two eggs and toast ")
    assert "two eggs and toast" in request.prompt
    assert "total_calories" in request.response_json_schema["properties"]


def test_builder_does_not_mutate_profile(profile):
    before = list(profile.favorite_foods)
    plan_request_builder.build_meal_plan_request(
        profile, [food_log("lunch", "rice")], MealPlanSettings(preferred_foods="tofu"), START
    )
    assert profile.favorite_foods == before
