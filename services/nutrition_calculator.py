"""Nutrition calculation helpers.

Turns biometric inputs into daily calorie and macro targets using the
Mifflin-St Jeor equation, an activity multiplier and a goal adjustment.
"""

import math
from typing import Any, Dict

from core.exceptions import InvalidInputError
from core.logger import get_logger
from schemas.profile_schema import NutritionTargets

logger = get_logger("services.nutrition_calculator")

SEX_OFFSETS = {
    'male': 5,
    'female': -161,
}
# other / prefer_not_to_say: mean of the two offsets
DEFAULT_SEX_OFFSET = (SEX_OFFSETS['male'] + SEX_OFFSETS['female']) / 2

ACTIVITY_MULTIPLIERS = {
    'sedentary': 1.2,
    'lightly_active': 1.375,
    'moderately_active': 1.55,
    'very_active': 1.725,
    'extremely_active': 1.9,
}

GOAL_ADJUSTMENTS = {
    'lose_weight': -500,
    'gain_muscle': 300,
    'maintain_weight': 0,
    'improve_health': 0,
    'increase_energy': 0,
}

# share of calories, kcal per gram
MACRO_SPLIT = {
    'protein': (0.3, 4),
    'carbs': (0.4, 4),
    'fat': (0.3, 9),
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def _enum_value(value: Any) -> str:
    return getattr(value, 'value', value)


def _require_positive(value: Any, field: str) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidInputError(f"{field} is required", field=field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field} must be a number", field=field)
    if not math.isfinite(number) or number <= 0:
        raise InvalidInputError(f"{field} must be a positive number", field=field)
    return number


class NutritionCalculator:
    """Class-based nutrition calculator used across the app."""

    def calculate_bmi(self, height_cm: float, weight_kg: float) -> float:
        """Calculate BMI from height in cm and weight in kg."""
        h_m = _require_positive(height_cm, 'height_cm') / 100.0
        return _require_positive(weight_kg, 'weight_kg') / (h_m * h_m)

    def calculate_bmr(self, age: int, height_cm: float, weight_kg: float, sex: str) -> float:
        """Calculate BMR using the Mifflin-St Jeor equation.

        Sexes other than male/female use the mean of both offsets.
        """
        age = _require_positive(age, 'age')
        height_cm = _require_positive(height_cm, 'height_cm')
        weight_kg = _require_positive(weight_kg, 'weight_kg')
        offset = SEX_OFFSETS.get(str(_enum_value(sex) or '').lower(), DEFAULT_SEX_OFFSET)
        return 10 * weight_kg + 6.25 * height_cm - 5 * age + offset

    def calculate_tdee(self, bmr: float, activity_level: str) -> float:
        """Estimate TDEE from BMR and activity multiplier."""
        level = _enum_value(activity_level)
        if level not in ACTIVITY_MULTIPLIERS:
            raise InvalidInputError(f"Unknown activity level '{level}'", field='activity_level')
        val = bmr * ACTIVITY_MULTIPLIERS[level]
        logger.debug("TDEE calculated: %s", val)
        return val

    def calculate_target_calories(self, tdee: float, primary_goal: str) -> float:
        """Apply the goal adjustment to TDEE."""
        goal = _enum_value(primary_goal)
        if goal not in GOAL_ADJUSTMENTS:
            raise InvalidInputError(f"Unknown primary goal '{goal}'", field='primary_goal')
        val = tdee + GOAL_ADJUSTMENTS[goal]
        logger.debug("Target calories for goal %s: %s", goal, val)
        return val

    def calculate_macros(self, target_calories: float) -> Dict[str, int]:
        """Allocate macronutrient grams from a calorie target with a 30/40/30 split."""
        macros = {
            name: round_half_up(target_calories * share / kcal_per_g)
            for name, (share, kcal_per_g) in MACRO_SPLIT.items()
        }
        logger.debug("Macros calculated: %s", macros)
        return macros

    def calculate_targets(
        self,
        weight_kg: float,
        height_cm: float,
        age: int,
        sex: str,
        activity_level: str,
        primary_goal: str,
    ) -> NutritionTargets:
        """Compute daily calorie and macro targets from biometric inputs.

        Raises:
            InvalidInputError: If any input is missing, non-positive or
                unknown, or the resulting targets would not be positive.
        """
        bmr = self.calculate_bmr(age, height_cm, weight_kg, sex)
        tdee = self.calculate_tdee(bmr, activity_level)
        calories = self.calculate_target_calories(tdee, primary_goal)
        macros = self.calculate_macros(calories)
        daily = round_half_up(calories)
        if daily <= 0 or min(macros.values()) <= 0:
            raise InvalidInputError("Biometric inputs produce a non-positive calorie target")
        return NutritionTargets(
            daily_calorie_target=daily,
            protein_target_g=macros['protein'],
            carbs_target_g=macros['carbs'],
            fat_target_g=macros['fat'],
        )

    def targets_for_profile(self, profile) -> NutritionTargets:
        """Compute targets from any object carrying profile attributes."""
        return self.calculate_targets(
            weight_kg=getattr(profile, 'current_weight_kg', None),
            height_cm=getattr(profile, 'height_cm', None),
            age=getattr(profile, 'age', None),
            sex=getattr(profile, 'sex', None),
            activity_level=getattr(profile, 'activity_level', None),
            primary_goal=getattr(profile, 'primary_goal', None),
        )


# export singleton
nutrition_calculator = NutritionCalculator()
__all__ = ["NutritionCalculator", "nutrition_calculator", "round_half_up"]
