"""SQLAlchemy ORM models for the health-coaching record store.

Every table is tenant-scoped by `user_id`. List and nested-object fields
(food items, daily plans, grocery items, ...) are stored in JSON columns.
Models keep behavior-free; the services own the business rules.
"""

from sqlalchemy import (
    Column, Integer, String, Float, Date, DateTime, Boolean, Text, JSON, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
from datetime import datetime

Base = declarative_base()


class UserProfile(Base):
    """Biometric inputs, derived nutrition targets and gamification state."""

    __tablename__ = "user_profiles"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, unique=True, index=True)
    age = Column(Integer, nullable=False)
    sex = Column(String, nullable=False)
    height_cm = Column(Float, nullable=False)
    current_weight_kg = Column(Float, nullable=False)
    goal_weight_kg = Column(Float, nullable=True)
    activity_level = Column(String, nullable=False)
    primary_goal = Column(String, nullable=False)
    health_conditions = Column(JSON, default=list)
    dietary_preferences = Column(JSON, default=list)
    favorite_foods = Column(JSON, default=list)
    disliked_foods = Column(JSON, default=list)
    daily_calorie_target = Column(Integer, nullable=False)
    protein_target_g = Column(Integer, nullable=False)
    carbs_target_g = Column(Integer, nullable=False)
    fat_target_g = Column(Integer, nullable=False)
    current_streak = Column(Integer, nullable=False, default=0)
    total_points = Column(Integer, nullable=False, default=0)
    onboarding_completed = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class FoodLog(Base):
    """One logged meal with its AI nutrient breakdown. Never edited."""

    __tablename__ = "food_logs"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    meal_type = Column(String, nullable=False)
    meal_date = Column(Date, nullable=False, index=True)
    meal_time = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    food_items = Column(JSON, default=list)
    total_calories = Column(Float, nullable=False, default=0)
    total_protein_g = Column(Float, nullable=False, default=0)
    total_carbs_g = Column(Float, nullable=False, default=0)
    total_fat_g = Column(Float, nullable=False, default=0)
    healthiness_score = Column(Integer, nullable=True)
    ai_suggestions = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class DailyProgress(Base):
    """Cumulative per-day intake, workout flag and weight sample."""

    __tablename__ = "daily_progress"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_progress_user_date"),)
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    calories_consumed = Column(Float, nullable=False, default=0)
    protein_consumed_g = Column(Float, nullable=False, default=0)
    carbs_consumed_g = Column(Float, nullable=False, default=0)
    fat_consumed_g = Column(Float, nullable=False, default=0)
    meals_logged = Column(Integer, nullable=False, default=0)
    workout_completed = Column(Boolean, nullable=False, default=False)
    weight_kg = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class MealPlan(Base):
    """A multi-day AI meal plan. At most one active plan per user."""

    __tablename__ = "meal_plans"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    week_start_date = Column(Date, nullable=False)
    week_end_date = Column(Date, nullable=False)
    daily_plans = Column(JSON, nullable=False, default=list)
    total_weekly_calories = Column(Float, nullable=False, default=0)
    based_on_habits = Column(Boolean, default=False)
    ai_notes = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class WorkoutPlan(Base):
    """An AI workout plan. At most one active plan per user."""

    __tablename__ = "workout_plans"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    plan_name = Column(String, nullable=False)
    fitness_level = Column(String, nullable=True)
    weekly_schedule = Column(JSON, nullable=False, default=list)
    goal = Column(String, nullable=False)
    equipment_available = Column(JSON, default=list)
    weeks_duration = Column(Integer, nullable=False, default=4)
    ai_rationale = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class GroceryList(Base):
    """Consolidated grocery items for one meal plan."""

    __tablename__ = "grocery_lists"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    meal_plan_id = Column(Integer, ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=False, unique=True)
    plan_duration = Column(String, nullable=True)
    items = Column(JSON, nullable=False, default=list)
    total_estimated_cost = Column(Float, nullable=True)
    generated_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class MealPlanTracking(Base):
    """Per-day completion record for the first week of an approved plan."""

    __tablename__ = "meal_plan_tracking"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    meal_plan_id = Column(Integer, ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    day_name = Column(String, nullable=True)
    breakfast_completed = Column(Boolean, default=False)
    lunch_completed = Column(Boolean, default=False)
    dinner_completed = Column(Boolean, default=False)
    adherence_score = Column(Float, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)


class Milestone(Base):
    """Append-only achievement record."""

    __tablename__ = "milestones"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    points_earned = Column(Integer, nullable=False, default=0)
    achieved_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
