"""Record store package: tenant-scoped ORM models, engines and sessions."""

from .database import (
    write_engine,
    read_engine,
    WriteSessionLocal,
    ReadSessionLocal,
    init_db,
    get_write_session,
    get_read_session,
)
from . import models
from .models import Base

__all__ = [
    "Base",
    "models",
    "init_db",
    "write_engine",
    "read_engine",
    "WriteSessionLocal",
    "ReadSessionLocal",
    "get_write_session",
    "get_read_session",
]
