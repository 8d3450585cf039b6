"""Plan request builder service.

Turns a user profile, recent food logs and per-session customization into
structured generation requests (prompt + expected output schema) for the
inference service. Everything here is a pure transform; the caller performs
the actual inference call.
"""

from collections import Counter
from datetime import date, timedelta
from typing import Any, Iterable, List, Optional

from core.logger import get_logger
from schemas.plan_schema import (
    GenerationRequest,
    HabitSummary,
    MealPlanRequest,
    MealPlanSettings,
    WorkoutPlanRequest,
)
from schemas.profile_schema import NutritionTargets
from services import output_schemas, prompts

logger = get_logger("services.plan_request_builder")

DURATION_DAYS = {
    '1_week': 7,
    '1_month': 30,
    '3_months': 90,
    '6_months': 180,
}
DEFAULT_DURATION_DAYS = 7

FREQUENT_FOODS_LIMIT = 10

WORKOUT_WEEKS = 4
WORKOUT_EQUIPMENT = ['bodyweight', 'dumbbells', 'resistance bands']
WORKOUT_GOALS = {
    'lose_weight': 'fat_loss',
    'gain_muscle': 'muscle_gain',
}


def _value(obj: Any) -> Any:
    return getattr(obj, 'value', obj)


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def split_csv(text: Optional[str]) -> List[str]:
    """Split a comma-separated free-text field into trimmed, non-empty entries."""
    if not text:
        return []
    return [part.strip() for part in text.split(',') if part.strip()]


def merge_sources(*sources: Optional[Iterable[str]]) -> List[str]:
    """Concatenate lists in order. Duplicates across sources are kept."""
    merged: List[str] = []
    for source in sources:
        merged.extend(source or [])
    return merged


class PlanRequestBuilder:
    """Builds meal plan, workout plan and auxiliary generation requests."""

    def duration_to_days(self, duration: str) -> int:
        """Map a duration selector to a day count; unknown selectors mean one week."""
        days = DURATION_DAYS.get(_value(duration))
        if days is None:
            logger.warning("Unknown plan duration %r, defaulting to %s days", duration, DEFAULT_DURATION_DAYS)
            return DEFAULT_DURATION_DAYS
        return days

    def analyze_eating_habits(self, food_logs: Iterable[Any]) -> HabitSummary:
        """Summarize meal-type counts and the most frequently logged foods.

        Frequent foods are the top 10 food-item names by count, descending,
        with ties kept in first-observed order.
        """
        meal_type_counts: Counter = Counter()
        frequency: Counter = Counter()
        total = 0
        for log in food_logs:
            total += 1
            meal_type_counts[_value(_field(log, 'meal_type'))] += 1
            for item in _field(log, 'food_items') or []:
                name = _field(item, 'name')
                if name:
                    frequency[name] += 1

        # Counter preserves insertion order and sorted() is stable
        ranked = sorted(frequency.items(), key=lambda kv: kv[1], reverse=True)
        frequent = [name for name, _ in ranked[:FREQUENT_FOODS_LIMIT]]
        logger.debug("Habit analysis: %s meals, frequent=%s", total, frequent)
        return HabitSummary(total_meals=total, meal_type_counts=dict(meal_type_counts), frequent_foods=frequent)

    def select_targets(self, profile: Any, settings: MealPlanSettings) -> NutritionTargets:
        """Use profile targets, replaced field by field by custom values when opted in."""
        custom = settings.use_custom_nutrition

        def pick(custom_value: Optional[int], profile_field: str) -> int:
            if custom and custom_value:
                return int(custom_value)
            return int(getattr(profile, profile_field))

        return NutritionTargets(
            daily_calorie_target=pick(settings.custom_calories, 'daily_calorie_target'),
            protein_target_g=pick(settings.custom_protein, 'protein_target_g'),
            carbs_target_g=pick(settings.custom_carbs, 'carbs_target_g'),
            fat_target_g=pick(settings.custom_fat, 'fat_target_g'),
        )

    def build_meal_plan_request(
        self,
        profile: Any,
        food_logs: Iterable[Any],
        settings: MealPlanSettings,
        start_date: date,
    ) -> MealPlanRequest:
        """Build the structured request for a multi-day meal plan.

        Args:
            profile: Stored user profile (targets, goal, preferences).
            food_logs: Recent food log entries used to bias suggestions.
            settings: Session customization (duration, restrictions, overrides).
            start_date: First day of the plan.

        Returns:
            A `MealPlanRequest` carrying the prompt, schema and the
            parameters the validator and approval step rely on.
        """
        day_count = self.duration_to_days(settings.duration)
        habits = self.analyze_eating_habits(food_logs)

        restrictions = merge_sources(
            getattr(profile, 'dietary_preferences', None),
            settings.dietary_restrictions,
            split_csv(settings.other_restrictions),
        )
        avoid = merge_sources(getattr(profile, 'disliked_foods', None), split_csv(settings.avoid_foods))
        preferred = merge_sources(
            getattr(profile, 'favorite_foods', None),
            habits.frequent_foods,
            split_csv(settings.preferred_foods),
        )
        targets = self.select_targets(profile, settings)

        prompt = prompts.MEAL_PLAN_PROMPT.format(
            days=day_count,
            days_minus_one=day_count - 1,
            start_date=prompts.format_long_date(start_date),
            calories=targets.daily_calorie_target,
            protein=targets.protein_target_g,
            carbs=targets.carbs_target_g,
            fat=targets.fat_target_g,
            goal=_value(getattr(profile, 'primary_goal', None)),
            activity=_value(getattr(profile, 'activity_level', None)),
            health_conditions=prompts.format_list(getattr(profile, 'health_conditions', None) or []),
            restrictions=prompts.format_list(restrictions),
            preferred=prompts.format_list(preferred, empty='Variety'),
            avoid=prompts.format_list(avoid),
            max_prep_time=settings.max_prep_time,
            complexity=settings.meal_complexity,
            habit_analysis=prompts.format_habit_analysis(
                habits.total_meals, habits.meal_type_counts, habits.frequent_foods
            ),
            day_labels=prompts.format_day_labels(start_date, day_count),
        )

        logger.info(
            "Built %s-day meal plan request (restrictions=%s, preferred=%s, avoid=%s)",
            day_count, len(restrictions), len(preferred), len(avoid),
        )
        return MealPlanRequest(
            prompt=prompt,
            response_json_schema=output_schemas.meal_plan_schema(),
            duration=_value(settings.duration),
            day_count=day_count,
            start_date=start_date,
            end_date=start_date + timedelta(days=day_count - 1),
            targets=targets,
            dietary_restrictions=restrictions,
            avoid_foods=avoid,
            preferred_foods=preferred,
            max_prep_time=settings.max_prep_time,
            based_on_habits=habits.total_meals > 0,
        )

    def build_workout_plan_request(self, profile: Any) -> WorkoutPlanRequest:
        """Build the structured request for a weekly workout plan."""
        primary_goal = _value(getattr(profile, 'primary_goal', None))
        prompt = prompts.WORKOUT_PLAN_PROMPT.format(
            goal=primary_goal,
            activity=_value(getattr(profile, 'activity_level', None)),
            age=getattr(profile, 'age', None),
            health_conditions=prompts.format_list(getattr(profile, 'health_conditions', None) or []),
            weeks=WORKOUT_WEEKS,
            equipment=", ".join(WORKOUT_EQUIPMENT),
        )
        return WorkoutPlanRequest(
            prompt=prompt,
            response_json_schema=output_schemas.workout_plan_schema(),
            goal=WORKOUT_GOALS.get(primary_goal, 'general_fitness'),
            weeks_duration=WORKOUT_WEEKS,
            equipment_available=list(WORKOUT_EQUIPMENT),
        )

    def build_meal_analysis_request(self, description: str) -> GenerationRequest:
        """Build the request that turns a free-text meal into a nutrient breakdown."""
        return GenerationRequest(
            prompt=prompts.MEAL_ANALYSIS_PROMPT.format(description=description.strip()),
            response_json_schema=output_schemas.meal_analysis_schema(),
        )

    def build_target_recalculation_request(self, profile: Any) -> GenerationRequest:
        """Build the request asking the model to recalculate nutrition targets."""
        return GenerationRequest(
            prompt=prompts.TARGET_RECALCULATION_PROMPT.format(
                age=getattr(profile, 'age', None),
                sex=_value(getattr(profile, 'sex', None)),
                height_cm=getattr(profile, 'height_cm', None),
                current_weight_kg=getattr(profile, 'current_weight_kg', None),
                goal_weight_kg=getattr(profile, 'goal_weight_kg', None),
                activity=_value(getattr(profile, 'activity_level', None)),
                goal=_value(getattr(profile, 'primary_goal', None)),
                health_conditions=prompts.format_list(getattr(profile, 'health_conditions', None) or []),
            ),
            response_json_schema=output_schemas.nutrition_targets_schema(),
        )


# export a default instance
plan_request_builder = PlanRequestBuilder()
