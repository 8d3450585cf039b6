"""JSON schemas describing the structured output expected from the inference service.

JSON Schema here does not bound array lengths; cardinality is checked
after the fact by the plan validator.
"""

MEAL_SLOTS = ('breakfast', 'lunch', 'dinner')

GROCERY_CATEGORIES = ['produce', 'protein', 'dairy', 'grains', 'pantry', 'spices', 'other']


def _meal_schema() -> dict:
    return {
        'type': 'object',
        'properties': {
            'meal_name': {'type': 'string'},
            'ingredients': {'type': 'array', 'items': {'type': 'string'}},
            'calories': {'type': 'number'},
            'protein_g': {'type': 'number'},
            'carbs_g': {'type': 'number'},
            'fat_g': {'type': 'number'},
            'prep_time_min': {'type': 'integer'},
            'instructions': {'type': 'string'},
        },
    }


def meal_plan_schema() -> dict:
    """Per-day breakfast/lunch/dinner objects plus a snack list."""
    day = {
        'type': 'object',
        'properties': {'day': {'type': 'string'}},
    }
    for slot in MEAL_SLOTS:
        day['properties'][slot] = _meal_schema()
    day['properties']['snacks'] = {
        'type': 'array',
        'items': {
            'type': 'object',
            'properties': {
                'name': {'type': 'string'},
                'calories': {'type': 'number'},
            },
        },
    }
    return {
        'type': 'object',
        'properties': {
            'daily_plans': {'type': 'array', 'items': day},
            'ai_notes': {'type': 'string'},
        },
    }


def workout_plan_schema() -> dict:
    exercise = {
        'type': 'object',
        'properties': {
            'name': {'type': 'string'},
            'sets': {'type': 'integer'},
            'reps': {'type': 'string'},
            'rest_sec': {'type': 'integer'},
            'notes': {'type': 'string'},
        },
    }
    return {
        'type': 'object',
        'properties': {
            'plan_name': {'type': 'string'},
            'fitness_level': {'type': 'string', 'enum': ['beginner', 'intermediate', 'advanced']},
            'weekly_schedule': {
                'type': 'array',
                'items': {
                    'type': 'object',
                    'properties': {
                        'day': {'type': 'string'},
                        'workout_type': {'type': 'string'},
                        'duration_min': {'type': 'integer'},
                        'exercises': {'type': 'array', 'items': exercise},
                        'calories_burned_estimate': {'type': 'number'},
                    },
                },
            },
            'ai_rationale': {'type': 'string'},
        },
    }


def grocery_list_schema() -> dict:
    return {
        'type': 'object',
        'properties': {
            'items': {
                'type': 'array',
                'items': {
                    'type': 'object',
                    'properties': {
                        'item_name': {'type': 'string'},
                        'quantity': {'type': 'string'},
                        'category': {'type': 'string', 'enum': list(GROCERY_CATEGORIES)},
                        'estimated_cost': {'type': 'number'},
                    },
                },
            },
            'total_estimated_cost': {'type': 'number'},
        },
    }


def meal_analysis_schema() -> dict:
    return {
        'type': 'object',
        'properties': {
            'food_items': {
                'type': 'array',
                'items': {
                    'type': 'object',
                    'properties': {
                        'name': {'type': 'string'},
                        'portion': {'type': 'string'},
                        'calories': {'type': 'number'},
                        'protein_g': {'type': 'number'},
                        'carbs_g': {'type': 'number'},
                        'fat_g': {'type': 'number'},
                    },
                },
            },
            'total_calories': {'type': 'number'},
            'total_protein_g': {'type': 'number'},
            'total_carbs_g': {'type': 'number'},
            'total_fat_g': {'type': 'number'},
            'healthiness_score': {'type': 'integer'},
            'ai_suggestions': {'type': 'string'},
        },
    }


def nutrition_targets_schema() -> dict:
    return {
        'type': 'object',
        'properties': {
            'daily_calorie_target': {'type': 'number'},
            'protein_target_g': {'type': 'number'},
            'carbs_target_g': {'type': 'number'},
            'fat_target_g': {'type': 'number'},
            'explanation': {'type': 'string'},
        },
    }
