"""Prompt templates sent to the inference service."""

from datetime import date, timedelta
from typing import List


def format_long_date(day: date) -> str:
    """'March 4, 2026 (Wednesday)'."""
    return f"{day:%B} {day.day}, {day.year} ({day:%A})"


def format_short_date(day: date) -> str:
    """'Mar 4'."""
    return f"{day:%b} {day.day}"


def format_day_labels(start_date: date, day_count: int) -> str:
    """Label the first three days and the last one, e.g. '- Day 1 (Mar 4)'."""
    lines = [
        f"- Day {i + 1} ({format_short_date(start_date + timedelta(days=i))})"
        for i in range(min(3, day_count))
    ]
    if day_count > 3:
        last = start_date + timedelta(days=day_count - 1)
        lines.append(f"... continuing through Day {day_count} ({format_short_date(last)})")
    return "\n".join(lines)


def format_list(items: List[str], empty: str = "None") -> str:
    return ", ".join(items) if items else empty


def format_habit_analysis(total_meals: int, meal_type_counts: dict, frequent_foods: List[str]) -> str:
    """Summarize logged eating habits for the meal plan prompt."""
    if total_meals == 0:
        return "No previous meals logged - will create plan based on preferences"
    return (
        "Eating Pattern Analysis:\n"
        f"- Total meals logged: {total_meals}\n"
        f"- Breakfast habits: {meal_type_counts.get('breakfast', 0)} logged\n"
        f"- Lunch habits: {meal_type_counts.get('lunch', 0)} logged\n"
        f"- Dinner habits: {meal_type_counts.get('dinner', 0)} logged\n"
        f"- Most frequent foods: {', '.join(frequent_foods[:5])}"
    )


MEAL_PLAN_PROMPT = """YOU MUST CREATE A COMPLETE {days}-DAY MEAL PLAN. DO NOT CREATE LESS THAN {days} DAYS.

YOU MUST GENERATE EXACTLY {days} DAYS OF MEALS. NOT {days_minus_one}, BUT EXACTLY {days} DAYS.

EACH DAY MUST INCLUDE:
- Breakfast with full details
- Lunch with full details
- Dinner with full details
- 2 snack options

START DATE: {start_date}

**User Requirements:**
- Daily calories: {calories} cal
- Protein: {protein}g | Carbs: {carbs}g | Fat: {fat}g
- Goal: {goal}
- Activity: {activity}
- Health: {health_conditions}
- Dietary restrictions: {restrictions}
- Preferred foods: {preferred}
- Avoid: {avoid}
- Max prep time: {max_prep_time} minutes
- Meal complexity: {complexity}

**{habit_analysis}**

**MANDATORY OUTPUT:**
Generate {days} complete days in the daily_plans array. Label each day as:
{day_labels}

For EVERY SINGLE DAY (all {days} days), provide:
- Complete breakfast, lunch, dinner
- EXACT ingredient quantities (e.g., "2 cups rice", "1 lb chicken")
- Precise macros per meal
- Prep time per meal
- DETAILED cooking instructions (5+ steps)
- 2 snacks

Variety across all {days} days while using preferred foods.

The daily_plans array MUST contain exactly {days} entries."""


WORKOUT_PLAN_PROMPT = """Create a personalized workout plan for a user with these details:

**Profile:**
- Primary goal: {goal}
- Activity level: {activity}
- Age: {age}
- Health conditions: {health_conditions}

Create a {weeks}-week workout plan with 4-5 workouts per week that:
1. Aligns with their fitness goal and current activity level
2. Considers their age and any health conditions
3. Includes progressive overload
4. Provides variety (strength, cardio, flexibility)
5. Can be done with minimal equipment ({equipment})

For each workout day, provide:
- Day name (e.g., "Monday", "Tuesday")
- Workout type (e.g., "Upper Body Strength", "Cardio", "Full Body")
- Duration in minutes
- List of exercises with sets, reps, and rest periods
- Brief notes on form or modifications
- Estimated calories burned

Also include a brief explanation of why this plan fits their goals."""


GROCERY_LIST_PROMPT = """Given this list of ingredients from a meal plan, create a consolidated grocery list with:
- Combined quantities for duplicate items
- Organized by category (produce, protein, dairy, grains, pantry, spices, other)
- Estimated cost per item (rough estimate in USD)

Ingredients: {ingredients}

Return a structured grocery list."""


MEAL_ANALYSIS_PROMPT = """Analyze this meal and extract nutrition information. Meal description: "{description}"

Break down the foods into individual items with portions and estimate:
- Calories
- Protein (g)
- Carbs (g)
- Fat (g)

Also provide:
- A healthiness score from 1-10
- 2-3 suggestions for healthier alternatives or improvements
- Keep cultural context and preferences in mind

Return as JSON matching this exact structure."""


TARGET_RECALCULATION_PROMPT = """Calculate optimal daily nutrition targets for this person:

Age: {age}
Sex: {sex}
Height: {height_cm} cm
Current Weight: {current_weight_kg} kg
Goal Weight: {goal_weight_kg} kg
Activity Level: {activity}
Primary Goal: {goal}
Health Conditions: {health_conditions}

Calculate:
1. Daily calorie target using Mifflin-St Jeor equation
2. Protein target (consider goal and activity level)
3. Carbohydrate target
4. Fat target

Adjust based on their goal:
- Weight loss: moderate calorie deficit
- Muscle gain: slight surplus with higher protein
- Maintenance: at TDEE

Return precise numbers and a brief explanation of the calculation."""
