"""Repository pattern base class for the record store.

Provides the uniform persistence interface used by every service: create,
fetch by id, filter by field equality with optional ordering and limit,
update and delete. Every repository is bound to one user and only ever
sees that user's rows. Database failures surface as `RemoteOperationFailed`.
"""

from contextlib import contextmanager
from typing import TypeVar, Generic, Type, Optional, List, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from core.exceptions import NotFoundError, RemoteOperationFailed
from core.logger import get_logger
from database.models import Base

T = TypeVar('T', bound=Base)

logger = get_logger("core.repository")


class BaseRepository(Generic[T]):
    """Tenant-scoped repository for one record type.

    Attributes:
        model: SQLAlchemy model class to operate on.
        session: Database session for executing queries.
        user_id: Owner every query is restricted to.
    """

    def __init__(self, model: Type[T], session: Session, user_id: str):
        """Initialize repository with model, session and owning user.

        Args:
            model: SQLAlchemy model class.
            session: Database session.
            user_id: Tenant key applied to every read and write.
        """
        self.model = model
        self.session = session
        self.user_id = user_id

    @contextmanager
    def _remote(self, operation: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("%s %s failed: %s", self.model.__name__, operation, exc)
            raise RemoteOperationFailed("persistence", f"{self.model.__name__}.{operation}", str(exc)) from exc

    def _order_clause(self, order_by: str):
        descending = order_by.startswith("-")
        column = getattr(self.model, order_by.lstrip("-"))
        return column.desc() if descending else column.asc()

    def create(self, **fields: Any) -> T:
        """Persist a new record owned by the repository's user.

        Args:
            **fields: Column values for the new record.

        Returns:
            The persisted object with refreshed attributes.
        """
        obj = self.model(user_id=self.user_id, **fields)
        with self._remote("create"):
            self.session.add(obj)
            self.session.commit()
            self.session.refresh(obj)
        return obj

    def get(self, id: Any) -> T:
        """Retrieve one of the user's records by primary key.

        Raises:
            NotFoundError: If no such record exists for this user.
        """
        with self._remote("get"):
            obj = self.session.get(self.model, id)
        if obj is None or obj.user_id != self.user_id:
            raise NotFoundError(self.model.__name__, id)
        return obj

    def filter(self, order_by: Optional[str] = None, limit: Optional[int] = None, **equals: Any) -> List[T]:
        """Return the user's records matching every field equality.

        Args:
            order_by: Field name to sort on; a leading '-' sorts descending.
            limit: Maximum number of records to return.
            **equals: Field values records must match.

        Returns:
            List of model instances.
        """
        with self._remote("filter"):
            query = self.session.query(self.model).filter(self.model.user_id == self.user_id)
            for field, value in equals.items():
                query = query.filter(getattr(self.model, field) == value)
            if order_by:
                query = query.order_by(self._order_clause(order_by))
            if limit is not None:
                query = query.limit(limit)
            return query.all()

    def first(self, order_by: Optional[str] = None, **equals: Any) -> Optional[T]:
        """Return the first matching record or None."""
        rows = self.filter(order_by=order_by, limit=1, **equals)
        return rows[0] if rows else None

    def update(self, obj: T, **fields: Any) -> T:
        """Assign the given fields on an existing record and commit.

        Returns:
            The updated object with refreshed attributes.
        """
        with self._remote("update"):
            for key, value in fields.items():
                setattr(obj, key, value)
                flag_modified(obj, key)
            self.session.commit()
            self.session.refresh(obj)
        return obj

    def delete(self, obj: T) -> None:
        """Delete a record and commit."""
        with self._remote("delete"):
            self.session.delete(obj)
            self.session.commit()

    def delete_by_id(self, id: Any) -> None:
        """Delete one of the user's records by primary key.

        Raises:
            NotFoundError: If the record does not exist for this user.
        """
        self.delete(self.get(id))

    def delete_all(self, **equals: Any) -> int:
        """Delete every matching record of the user.

        Returns:
            Number of records deleted.
        """
        rows = self.filter(**equals)
        with self._remote("delete_all"):
            for row in rows:
                self.session.delete(row)
            self.session.commit()
        return len(rows)

    def count(self, **equals: Any) -> int:
        """Count the user's records matching the given field values."""
        return len(self.filter(**equals))
