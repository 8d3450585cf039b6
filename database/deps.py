"""FastAPI dependency helpers.

`get_db_write` / `get_db_read` yield record-store sessions, `get_user_context`
turns the `X-User-Id` header into the explicit `UserContext` every service
takes, and `get_inference_client` builds the configured inference client.
"""

from typing import Optional

from fastapi import Header

from core.context import UserContext
from core.exceptions import InvalidInputError
from services.inference_client import HttpInferenceClient, InferenceClient
from .database import get_read_session, get_write_session


def get_db_write():
    """Yield a write-capable DB session for FastAPI dependency injection."""
    yield from get_write_session()


def get_db_read():
    """Yield a read-only DB session; routed to the read replica when configured."""
    yield from get_read_session()


def get_user_context(x_user_id: Optional[str] = Header(None)) -> UserContext:
    """Identify the caller from the `X-User-Id` header.

    Raises:
        InvalidInputError: If the header is missing or blank.
    """
    if not x_user_id or not x_user_id.strip():
        raise InvalidInputError("X-User-Id header is required", field="X-User-Id")
    return UserContext(user_id=x_user_id.strip())


def get_inference_client() -> InferenceClient:
    """Build the HTTP inference client from the environment."""
    return HttpInferenceClient.from_env()
