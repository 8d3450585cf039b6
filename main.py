"""Application entry point for the HabitLoop health-coaching API.

Defines the FastAPI app, middleware and exception handlers and includes the
routers from the `api` package. The `lifespan` handler creates the record
tables on startup.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.food_logs import router as food_logs_router
from api.grocery_lists import router as grocery_lists_router
from api.meal_plans import router as meal_plans_router
from api.profiles import router as profiles_router
from api.progress import router as progress_router
from api.workout_plans import router as workout_plans_router
from core.error_handlers import register_exception_handlers
from core.exceptions import RemoteOperationFailed
from core.logger import get_logger
from database import init_db
from database.deps import get_db_read

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the record tables before serving requests."""
    init_db()
    yield


app = FastAPI(title="HabitLoop Health Core", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log incoming requests and their responses."""
    logger.info("%s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Request error: %s %s", request.method, request.url.path)
        raise
    logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
    return response


@app.get("/health")
def health(db: Session = Depends(get_db_read)):
    """Return basic health status and record store connectivity.

    Raises:
        RemoteOperationFailed: If the record store cannot be reached.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.exception("Health check failed")
        raise RemoteOperationFailed("persistence", "health_check", str(exc)) from exc
    return {"status": "healthy", "database": "connected"}


app.include_router(profiles_router)
app.include_router(food_logs_router)
app.include_router(meal_plans_router)
app.include_router(workout_plans_router)
app.include_router(progress_router)
app.include_router(grocery_lists_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
