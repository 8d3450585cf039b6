"""Grocery list consolidation service.

Collects every ingredient of a meal plan, asks the inference service to
merge quantities, categorize and price them, and persists the result as the
plan's grocery list with each item's purchased state.
"""

import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from core.context import UserContext
from core.exceptions import InvalidInputError, RemoteOperationFailed
from core.logger import get_logger
from core.repository import BaseRepository
from database import models
from schemas.plan_schema import GenerationRequest
from services import output_schemas, prompts
from services.inference_client import InferenceClient

logger = get_logger("services.grocery_consolidator")


def collect_ingredients(daily_plans: Iterable[Dict[str, Any]]) -> List[str]:
    """Flatten breakfast, lunch and dinner ingredients across all days, duplicates kept."""
    ingredients = []
    for day in daily_plans:
        for slot in output_schemas.MEAL_SLOTS:
            meal = day.get(slot)
            if isinstance(meal, dict):
                ingredients.extend(meal.get('ingredients') or [])
    return ingredients


def build_grocery_request(ingredients: List[str]) -> GenerationRequest:
    """Build the consolidation request for a flattened ingredient list."""
    return GenerationRequest(
        prompt=prompts.GROCERY_LIST_PROMPT.format(ingredients=", ".join(ingredients)),
        response_json_schema=output_schemas.grocery_list_schema(),
    )


def _normalize_item(raw: Dict[str, Any]) -> Dict[str, Any]:
    category = raw.get('category')
    if category not in output_schemas.GROCERY_CATEGORIES:
        category = 'other'
    return {
        'item_id': uuid.uuid4().hex,
        'item_name': raw.get('item_name') or raw.get('name') or '',
        'quantity': raw.get('quantity'),
        'category': category,
        'estimated_cost': raw.get('estimated_cost'),
        'purchased': False,
    }


class GroceryConsolidator:
    """Creates grocery lists for meal plans and tracks purchased items."""

    def _repo(self, db: Session, ctx: UserContext) -> BaseRepository:
        return BaseRepository(models.GroceryList, db, ctx.user_id)

    def create_grocery_list(
        self,
        db: Session,
        ctx: UserContext,
        meal_plan: models.MealPlan,
        response: Dict[str, Any],
        plan_duration: Optional[str] = None,
    ) -> models.GroceryList:
        """Persist a consolidation response as the meal plan's grocery list.

        Every item starts unpurchased and receives a stable `item_id`.
        """
        raw_items = response.get('items') if isinstance(response, dict) else None
        if not isinstance(raw_items, list):
            raise RemoteOperationFailed("inference", "consolidate_groceries", "response has no item list")
        items = [_normalize_item(raw) for raw in raw_items if isinstance(raw, dict)]
        total = response.get('total_estimated_cost')
        if total is None:
            total = sum(item['estimated_cost'] or 0 for item in items)
        grocery_list = self._repo(db, ctx).create(
            meal_plan_id=meal_plan.id,
            plan_duration=plan_duration,
            items=items,
            total_estimated_cost=total,
            generated_date=ctx.current_date(),
        )
        logger.info("Grocery list %s created for meal plan %s with %s items", grocery_list.id, meal_plan.id, len(items))
        return grocery_list

    def generate_grocery_list(
        self,
        db: Session,
        ctx: UserContext,
        meal_plan: models.MealPlan,
        inference: InferenceClient,
        plan_duration: Optional[str] = None,
    ) -> models.GroceryList:
        """Consolidate the plan's ingredients through the inference service and persist them."""
        ingredients = collect_ingredients(meal_plan.daily_plans or [])
        response = inference.invoke(build_grocery_request(ingredients))
        return self.create_grocery_list(db, ctx, meal_plan, response, plan_duration)

    def regenerate_grocery_list(
        self,
        db: Session,
        ctx: UserContext,
        meal_plan: models.MealPlan,
        inference: InferenceClient,
    ) -> models.GroceryList:
        """Replace the plan's grocery list; purchased flags start over."""
        previous = self.get_for_plan(db, ctx, meal_plan.id)
        duration = previous.plan_duration if previous else None
        response = inference.invoke(build_grocery_request(collect_ingredients(meal_plan.daily_plans or [])))
        if previous is not None:
            self._repo(db, ctx).delete(previous)
        return self.create_grocery_list(db, ctx, meal_plan, response, duration)

    def get_for_plan(self, db: Session, ctx: UserContext, meal_plan_id: int) -> Optional[models.GroceryList]:
        return self._repo(db, ctx).first(meal_plan_id=meal_plan_id)

    def toggle_item(self, db: Session, ctx: UserContext, grocery_list_id: int, index: int) -> models.GroceryList:
        """Flip the purchased flag of the item at `index` and persist the whole item array.

        Raises:
            InvalidInputError: If `index` is outside the item list.
        """
        repo = self._repo(db, ctx)
        grocery_list = repo.get(grocery_list_id)
        items = grocery_list.items or []
        if not 0 <= index < len(items):
            raise InvalidInputError(f"Grocery item index {index} out of range", field="index")
        updated = [
            {**item, 'purchased': not item.get('purchased', False)} if i == index else dict(item)
            for i, item in enumerate(items)
        ]
        return repo.update(grocery_list, items=updated)


grocery_consolidator = GroceryConsolidator()
