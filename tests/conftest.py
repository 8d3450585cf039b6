"""Shared fixtures: in-memory record store, scripted inference client, user context."""

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.context import UserContext
from database import init_db
from schemas import OnboardingRequest
from services import profile_service
from services.inference_client import InferenceClient

TODAY = date(2026, 3, 4)


class FakeInferenceClient(InferenceClient):
    """Answers with queued responses in order and records every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def invoke(self, request):
        self.requests.append(request)
        if not self.responses:
            raise AssertionError("Unexpected inference call")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_meal(name, calories, ingredients=None):
    return {
        "meal_name": name,
        "calories": calories,
        "protein_g": 20,
        "carbs_g": 30,
        "fat_g": 10,
        "prep_time_min": 15,
        "ingredients": ingredients if ingredients is not None else [f"1 cup {name.lower()}"],
        "instructions": "Prepare and serve.",
    }


def make_day(index, calories=(400, 600, 700)):
    return {
        "day": f"Day {index + 1}",
        "breakfast": make_meal("Oats", calories[0], ["1 cup oats", "1 banana"]),
        "lunch": make_meal("Chicken Salad", calories[1], ["200g chicken breast", "1 head lettuce"]),
        "dinner": make_meal("Salmon Rice", calories[2], ["150g salmon", "1 cup rice"]),
        "snacks": [{"name": "Apple", "calories": 95}],
    }


def make_plan_response(days, notes="Balanced week"):
    return {"daily_plans": [make_day(i) for i in range(days)], "ai_notes": notes}


GROCERY_RESPONSE = {
    "items": [
        {"item_name": "Oats", "quantity": "7 cups", "category": "grains", "estimated_cost": 4.5},
        {"item_name": "Chicken breast", "quantity": "1.4 kg", "category": "protein", "estimated_cost": 15.0},
        {"item_name": "Lettuce", "quantity": "7 heads", "category": "produce", "estimated_cost": 7.0},
        {"item_name": "Mystery sauce", "quantity": "1 jar", "category": "condiments", "estimated_cost": 3.5},
    ],
    "total_estimated_cost": 30.0,
}

WORKOUT_RESPONSE = {
    "plan_name": "Lean Start",
    "fitness_level": "beginner",
    "weekly_schedule": [
        {
            "day": "Monday",
            "workout_type": "Full Body",
            "duration_min": 40,
            "exercises": [{"name": "Squat", "sets": 3, "reps": "12", "rest_sec": 60}],
            "calories_burned_estimate": 250,
        }
    ],
    "ai_rationale": "Builds a base.",
}


@pytest.fixture
def db():
    """Fresh in-memory SQLite session per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def ctx():
    return UserContext(user_id="alice@example.com", today=TODAY)


@pytest.fixture
def other_ctx():
    return UserContext(user_id="bob@example.com", today=TODAY)


@pytest.fixture
def inference():
    return FakeInferenceClient()


@pytest.fixture
def profile(db, ctx):
    payload = OnboardingRequest(
        age=30,
        sex="male",
        height_cm=175,
        current_weight_kg=70,
        goal_weight_kg=68,
        activity_level="moderately_active",
        primary_goal="maintain_weight",
        dietary_preferences=["vegetarian"],
        favorite_foods="oats, salmon",
        disliked_foods="olives",
    )
    return profile_service.complete_onboarding(db, ctx, payload)
