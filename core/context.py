"""Explicit per-request user context passed into service operations."""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class UserContext:
    """Identity of the user every record operation is scoped to."""

    user_id: str
    today: Optional[date] = None

    def current_date(self) -> date:
        """Return the pinned date when set, otherwise the real current date."""
        return self.today or date.today()
