"""Validation of structured plans returned by the inference service.

The inference service may return fewer items than asked for even though the
prompt insists on a fixed day count, so cardinality is checked here rather
than trusted to the schema.
"""

from typing import Any, Dict, List

from core.exceptions import IncompletePlanError, RemoteOperationFailed
from core.logger import get_logger
from schemas.food_log_schema import MealAnalysis
from schemas.plan_schema import MealPlanRequest, ValidatedMealPlan
from services.output_schemas import MEAL_SLOTS

logger = get_logger("services.plan_validator")

ANALYSIS_TOTALS = ('total_calories', 'total_protein_g', 'total_carbs_g', 'total_fat_g')


def _calories(meal: Any) -> float:
    if not isinstance(meal, dict):
        return 0.0
    try:
        return float(meal.get('calories') or 0)
    except (TypeError, ValueError):
        return 0.0


def plan_total_calories(daily_plans: List[Dict[str, Any]]) -> float:
    """Sum breakfast, lunch and dinner calories over all days. Snacks are not counted."""
    return sum(_calories(day.get(slot)) for day in daily_plans for slot in MEAL_SLOTS)


def validate_meal_plan(request: MealPlanRequest, response: Dict[str, Any]) -> ValidatedMealPlan:
    """Check a generated meal plan against the requested day count.

    Surplus days are accepted and reported through `surplus_days`. Days
    missing a breakfast, lunch or dinner object are reported in `warnings`.

    Raises:
        IncompletePlanError: If fewer daily entries than requested came back.
    """
    daily_plans = response.get('daily_plans') if isinstance(response, dict) else None
    if not isinstance(daily_plans, list):
        daily_plans = []
    daily_plans = [day for day in daily_plans if isinstance(day, dict)]

    requested = request.day_count
    received = len(daily_plans)
    if received < requested:
        logger.warning("Incomplete meal plan: %s of %s days", received, requested)
        raise IncompletePlanError(requested, received)

    surplus = received - requested
    if surplus:
        logger.warning("Meal plan returned %s surplus days (%s requested)", surplus, requested)

    warnings = []
    for index, day in enumerate(daily_plans):
        missing = [slot for slot in MEAL_SLOTS if not isinstance(day.get(slot), dict)]
        if missing:
            label = day.get('day') or f"Day {index + 1}"
            warnings.append(f"{label} is missing {', '.join(missing)}")
    if warnings:
        logger.warning("Meal plan has %s days with missing meal slots", len(warnings))

    return ValidatedMealPlan(
        daily_plans=daily_plans,
        total_calories=plan_total_calories(daily_plans),
        ai_notes=response.get('ai_notes'),
        requested_days=requested,
        surplus_days=surplus,
        warnings=warnings,
    )


def validate_workout_plan(response: Dict[str, Any]) -> Dict[str, Any]:
    """Require at least one scheduled workout day.

    Raises:
        IncompletePlanError: If the weekly schedule is missing or empty.
    """
    schedule = response.get('weekly_schedule') if isinstance(response, dict) else None
    if not isinstance(schedule, list) or not schedule:
        raise IncompletePlanError(1, 0, kind="workout plan")
    return response


def validate_meal_analysis(response: Dict[str, Any]) -> MealAnalysis:
    """Validate a meal nutrient breakdown, clamping the healthiness score to 1-10.

    Raises:
        RemoteOperationFailed: If the response is not an object, misses one
            of the four totals or carries malformed values.
    """
    if not isinstance(response, dict):
        raise RemoteOperationFailed("inference", "analyze_meal", "response is not an object")
    missing = [key for key in ANALYSIS_TOTALS if response.get(key) is None]
    if missing:
        raise RemoteOperationFailed("inference", "analyze_meal", f"missing {', '.join(missing)}")
    data = dict(response)
    score = data.get('healthiness_score')
    try:
        data['healthiness_score'] = min(10, max(1, int(round(float(score))))) if score is not None else 5
        return MealAnalysis(**data)
    except (TypeError, ValueError) as exc:
        # pydantic.ValidationError is a ValueError
        raise RemoteOperationFailed("inference", "analyze_meal", str(exc)) from exc
