"""Grocery list API router: fetch, regenerate and tick off items of a meal plan's list."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.context import UserContext
from core.exceptions import NotFoundError
from database.deps import get_db_read, get_db_write, get_inference_client, get_user_context
from schemas import GroceryListResponse
from services.grocery_consolidator import grocery_consolidator
from services.inference_client import InferenceClient
from services.plan_lifecycle import plan_lifecycle

router = APIRouter(prefix="/api/grocery-lists", tags=["grocery-lists"])


def _response(grocery_list) -> GroceryListResponse:
    return GroceryListResponse.model_validate(grocery_list, from_attributes=True)


@router.get("/by-plan/{meal_plan_id}", response_model=GroceryListResponse)
def get_for_plan(meal_plan_id: int, db: Session = Depends(get_db_read), ctx: UserContext = Depends(get_user_context)):
    grocery_list = grocery_consolidator.get_for_plan(db, ctx, meal_plan_id)
    if grocery_list is None:
        raise NotFoundError("GroceryList", f"meal_plan:{meal_plan_id}")
    return _response(grocery_list)


@router.post("/by-plan/{meal_plan_id}", response_model=GroceryListResponse, status_code=201)
def regenerate(
    meal_plan_id: int,
    db: Session = Depends(get_db_write),
    ctx: UserContext = Depends(get_user_context),
    inference: InferenceClient = Depends(get_inference_client),
):
    """Rebuild the plan's list from its ingredients; purchased flags are reset."""
    plan = plan_lifecycle.get_meal_plan(db, ctx, meal_plan_id)
    return _response(grocery_consolidator.regenerate_grocery_list(db, ctx, plan, inference))


@router.post("/{grocery_list_id}/items/{index}/toggle", response_model=GroceryListResponse)
def toggle_item(
    grocery_list_id: int,
    index: int,
    db: Session = Depends(get_db_write),
    ctx: UserContext = Depends(get_user_context),
):
    """Flip the purchased flag of the item at `index`."""
    return _response(grocery_consolidator.toggle_item(db, ctx, grocery_list_id, index))
