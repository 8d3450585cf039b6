"""Schemas for grocery lists."""

from datetime import date
from enum import Enum
from pydantic import BaseModel
from typing import List, Optional


class GroceryCategory(str, Enum):
    PRODUCE = "produce"
    PROTEIN = "protein"
    DAIRY = "dairy"
    GRAINS = "grains"
    PANTRY = "pantry"
    SPICES = "spices"
    OTHER = "other"


class GroceryItem(BaseModel):
    """One consolidated grocery item with its purchased state."""

    item_id: str
    item_name: str
    quantity: Optional[str] = None
    category: GroceryCategory = GroceryCategory.OTHER
    estimated_cost: Optional[float] = None
    purchased: bool = False


class GroceryListResponse(BaseModel):
    """Stored grocery list for a meal plan."""

    id: int
    meal_plan_id: int
    plan_duration: Optional[str] = None
    items: List[GroceryItem]
    total_estimated_cost: Optional[float] = None
    generated_date: Optional[date] = None
