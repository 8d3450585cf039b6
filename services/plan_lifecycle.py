"""Meal and workout plan lifecycle.

Generation runs build -> infer -> validate. A generated meal plan is only a
preview until the user approves it; approval deactivates every other plan
of the user, so at most one plan of each kind is active at a time.
"""

from datetime import timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from core.context import UserContext
from core.exceptions import IncompletePlanError, InvalidInputError, NotFoundError
from core.logger import get_logger
from core.repository import BaseRepository
from database import models
from schemas.plan_schema import MealPlanPreview, MealPlanSettings
from services.grocery_consolidator import grocery_consolidator
from services.inference_client import InferenceClient
from services.output_schemas import MEAL_SLOTS
from services.plan_request_builder import plan_request_builder
from services.plan_validator import plan_total_calories, validate_meal_plan, validate_workout_plan

logger = get_logger("services.plan_lifecycle")

RECENT_LOGS_LIMIT = 30
TRACKED_DAYS = 7


def adherence_rate(tracking: List[Any]) -> float:
    """Percentage of tracked days with breakfast, lunch and dinner all completed."""
    if not tracking:
        return 0.0
    complete = [
        t for t in tracking
        if t.breakfast_completed and t.lunch_completed and t.dinner_completed
    ]
    return round(len(complete) / len(tracking) * 100, 1)


class PlanLifecycle:
    """Generates, approves, edits and deletes plans for one user at a time."""

    def _repo(self, model, db: Session, ctx: UserContext) -> BaseRepository:
        return BaseRepository(model, db, ctx.user_id)

    def _require_profile(self, db: Session, ctx: UserContext) -> models.UserProfile:
        profile = self._repo(models.UserProfile, db, ctx).first()
        if profile is None:
            raise NotFoundError("UserProfile", ctx.user_id)
        return profile

    def _deactivate_all(self, repo: BaseRepository) -> int:
        active = repo.filter(is_active=True)
        for plan in active:
            repo.update(plan, is_active=False)
        return len(active)

    # Meal plans

    def generate_meal_plan_preview(
        self,
        db: Session,
        ctx: UserContext,
        settings: MealPlanSettings,
        inference: InferenceClient,
    ) -> MealPlanPreview:
        """Generate a meal plan without persisting it.

        Raises:
            NotFoundError: If the user has no profile yet.
            IncompletePlanError: If fewer days than requested were generated.
            RemoteOperationFailed: If the inference or persistence call fails.
        """
        profile = self._require_profile(db, ctx)
        food_logs = self._repo(models.FoodLog, db, ctx).filter(order_by="-created_at", limit=RECENT_LOGS_LIMIT)
        request = plan_request_builder.build_meal_plan_request(profile, food_logs, settings, ctx.current_date())
        response = inference.invoke(request)
        validated = validate_meal_plan(request, response)
        logger.info("Generated %s-day meal plan preview for %s", request.day_count, ctx.user_id)
        return MealPlanPreview(
            week_start_date=request.start_date,
            week_end_date=request.end_date,
            duration=request.duration,
            daily_plans=validated.daily_plans,
            total_weekly_calories=validated.total_calories,
            based_on_habits=request.based_on_habits,
            ai_notes=validated.ai_notes,
            is_active=False,
            warnings=validated.warnings,
        )

    def approve_meal_plan(
        self,
        db: Session,
        ctx: UserContext,
        preview: MealPlanPreview,
        inference: InferenceClient,
    ) -> models.MealPlan:
        """Activate a previewed plan, then create its grocery list and tracking rows.

        The preview comes back from the client, so its day count is checked
        again and its calorie total is recomputed from the days.

        Raises:
            IncompletePlanError: If the preview has fewer days than its duration.
        """
        requested = plan_request_builder.duration_to_days(preview.duration)
        if len(preview.daily_plans) < requested:
            raise IncompletePlanError(requested, len(preview.daily_plans))

        repo = self._repo(models.MealPlan, db, ctx)
        deactivated = self._deactivate_all(repo)
        plan = repo.create(
            week_start_date=preview.week_start_date,
            week_end_date=preview.week_end_date,
            daily_plans=preview.daily_plans,
            total_weekly_calories=plan_total_calories(preview.daily_plans),
            based_on_habits=preview.based_on_habits,
            ai_notes=preview.ai_notes,
            is_active=True,
        )
        logger.info("Meal plan %s approved for %s (%s plans deactivated)", plan.id, ctx.user_id, deactivated)

        grocery_consolidator.generate_grocery_list(db, ctx, plan, inference, preview.duration)

        tracking = self._repo(models.MealPlanTracking, db, ctx)
        today = ctx.current_date()
        for i, day in enumerate(preview.daily_plans[:TRACKED_DAYS]):
            tracking.create(
                meal_plan_id=plan.id,
                date=today + timedelta(days=i),
                day_name=day.get('day'),
                breakfast_completed=False,
                lunch_completed=False,
                dinner_completed=False,
                adherence_score=0,
            )
        return plan

    def list_meal_plans(self, db: Session, ctx: UserContext) -> List[models.MealPlan]:
        return self._repo(models.MealPlan, db, ctx).filter(order_by="-created_at")

    def get_meal_plan(self, db: Session, ctx: UserContext, plan_id: int) -> models.MealPlan:
        return self._repo(models.MealPlan, db, ctx).get(plan_id)

    def get_active_meal_plan(self, db: Session, ctx: UserContext) -> Optional[models.MealPlan]:
        return self._repo(models.MealPlan, db, ctx).first(order_by="-created_at", is_active=True)

    def update_plan_meal(
        self,
        db: Session,
        ctx: UserContext,
        plan_id: int,
        day_index: int,
        meal_type: str,
        meal: Dict[str, Any],
    ) -> models.MealPlan:
        """Replace one breakfast/lunch/dinner of a stored plan and refresh its calorie total."""
        if meal_type not in MEAL_SLOTS:
            raise InvalidInputError(f"Unknown meal slot '{meal_type}'", field="meal_type")
        repo = self._repo(models.MealPlan, db, ctx)
        plan = repo.get(plan_id)
        days = [dict(day) for day in plan.daily_plans or []]
        if not 0 <= day_index < len(days):
            raise InvalidInputError(f"Day index {day_index} out of range", field="day_index")
        days[day_index][meal_type] = dict(meal)
        return repo.update(plan, daily_plans=days, total_weekly_calories=plan_total_calories(days))

    def delete_meal_plan(self, db: Session, ctx: UserContext, plan_id: int) -> None:
        """Delete a plan together with its grocery list and tracking rows."""
        repo = self._repo(models.MealPlan, db, ctx)
        plan = repo.get(plan_id)
        self._repo(models.GroceryList, db, ctx).delete_all(meal_plan_id=plan.id)
        self._repo(models.MealPlanTracking, db, ctx).delete_all(meal_plan_id=plan.id)
        repo.delete(plan)
        logger.info("Meal plan %s deleted for %s", plan_id, ctx.user_id)

    def delete_all_meal_plans(self, db: Session, ctx: UserContext) -> int:
        plans = self.list_meal_plans(db, ctx)
        for plan in plans:
            self.delete_meal_plan(db, ctx, plan.id)
        return len(plans)

    def list_tracking(self, db: Session, ctx: UserContext, plan_id: int) -> List[models.MealPlanTracking]:
        return self._repo(models.MealPlanTracking, db, ctx).filter(order_by="date", meal_plan_id=plan_id)

    def mark_meal(
        self,
        db: Session,
        ctx: UserContext,
        tracking_id: int,
        meal_type: str,
        completed: bool = True,
    ) -> models.MealPlanTracking:
        """Set one meal's completion flag on a tracking day and refresh its adherence score."""
        if meal_type not in MEAL_SLOTS:
            raise InvalidInputError(f"Unknown meal slot '{meal_type}'", field="meal_type")
        repo = self._repo(models.MealPlanTracking, db, ctx)
        row = repo.get(tracking_id)
        flags = {slot: bool(getattr(row, f"{slot}_completed")) for slot in MEAL_SLOTS}
        flags[meal_type] = completed
        score = round(sum(flags.values()) / len(MEAL_SLOTS) * 100, 1)
        return repo.update(row, adherence_score=score, **{f"{meal_type}_completed": completed})

    # Workout plans

    def generate_workout_plan(self, db: Session, ctx: UserContext, inference: InferenceClient) -> models.WorkoutPlan:
        """Generate a workout plan and make it the user's only active one."""
        profile = self._require_profile(db, ctx)
        request = plan_request_builder.build_workout_plan_request(profile)
        response = validate_workout_plan(inference.invoke(request))

        repo = self._repo(models.WorkoutPlan, db, ctx)
        self._deactivate_all(repo)
        plan = repo.create(
            plan_name=response.get('plan_name') or 'Workout Plan',
            fitness_level=response.get('fitness_level'),
            weekly_schedule=response['weekly_schedule'],
            goal=request.goal,
            equipment_available=request.equipment_available,
            weeks_duration=request.weeks_duration,
            ai_rationale=response.get('ai_rationale'),
            is_active=True,
        )
        logger.info("Workout plan %s activated for %s", plan.id, ctx.user_id)
        return plan

    def get_active_workout_plan(self, db: Session, ctx: UserContext) -> Optional[models.WorkoutPlan]:
        return self._repo(models.WorkoutPlan, db, ctx).first(order_by="-created_at", is_active=True)


plan_lifecycle = PlanLifecycle()
