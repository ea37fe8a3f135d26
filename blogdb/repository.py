"""Generic repository pattern for type-safe database operations.

This module provides a Generic Repository[T] implementation for SQLModel
rows, used by :class:`blogdb.database.SqlStore`. Repositories never commit:
the store owns the unit of work so that multi-table steps (such as a post
deletion with its comments and likes) commit or roll back as one.

Rows carry an integer ``seq`` column; every collection query is ordered by
it, which gives the insertion order the store contract requires.

Example:
    >>> from blogdb.repository import Repository
    >>> from blogdb.models import PostRow
    >>> post_repo = Repository[PostRow](session, PostRow)
    >>> post = post_repo.get("6d0c...")
    >>> posts = post_repo.find_by(author_id="0b1f...")
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import func
from sqlmodel import Session, SQLModel, select

T = TypeVar("T", bound=SQLModel)


class Repository(Generic[T]):
    """Generic repository implementation for SQLModel rows.

    Type Parameter:
        T: SQLModel row type (UserRow, PostRow, CommentRow, ...)

    Args:
        session: SQLModel Session instance
        model: SQLModel class (e.g., PostRow, UserRow)
    """

    def __init__(self, session: Session, model: type[T]):
        self.session = session
        self.model = model

    def _ordered(self, stmt: Any) -> Any:
        if hasattr(self.model, "seq"):
            return stmt.order_by(getattr(self.model, "seq"))
        return stmt

    def get(self, entity_id: str) -> T | None:
        """Get row by primary key.

        Returns:
            Row instance or None if not found
        """
        return self.session.get(self.model, entity_id)

    def get_all(self) -> Sequence[T]:
        """Get all rows in insertion order."""
        return self.session.exec(self._ordered(select(self.model))).all()

    def create(self, entity: T) -> T:
        """Stage a new row and flush it so constraints are checked immediately."""
        self.session.add(entity)
        self.session.flush()
        return entity

    def update(self, entity: T) -> T:
        """Stage changes to an existing row."""
        self.session.add(entity)
        self.session.flush()
        return entity

    def delete(self, entity_id: str) -> bool:
        """Delete row by primary key.

        Returns:
            True if deleted, False if not found
        """
        entity = self.get(entity_id)
        if entity is None:
            return False
        self.session.delete(entity)
        self.session.flush()
        return True

    def find_by(self, **filters: Any) -> Sequence[T]:
        """Find rows matching equality filters, in insertion order.

        Unknown attribute names are ignored.

        Example:
            >>> comments = comment_repo.find_by(post_id="6d0c...")
        """
        stmt = select(self.model)
        for key, value in filters.items():
            if hasattr(self.model, key):
                stmt = stmt.where(getattr(self.model, key) == value)
        return self.session.exec(self._ordered(stmt)).all()

    def find_one_by(self, **filters: Any) -> T | None:
        """Find the first row matching equality filters."""
        rows = self.find_by(**filters)
        return rows[0] if rows else None

    def delete_by(self, **filters: Any) -> int:
        """Delete every row matching equality filters.

        Returns:
            Number of rows deleted
        """
        rows = self.find_by(**filters)
        for row in rows:
            self.session.delete(row)
        if rows:
            self.session.flush()
        return len(rows)

    def count(self) -> int:
        """Count total number of rows."""
        stmt = select(func.count()).select_from(self.model)
        return self.session.exec(stmt).one()

    def exists(self, entity_id: str) -> bool:
        """Check if a row exists by primary key."""
        return self.get(entity_id) is not None

    def next_seq(self) -> int:
        """Next insertion sequence number for this table."""
        current = self.session.exec(select(func.max(getattr(self.model, "seq")))).one()
        return (current or 0) + 1


class RepositoryFactory:
    """Factory for creating type-safe repositories sharing one session.

    Example:
        >>> factory = RepositoryFactory(session)
        >>> post_repo = factory.for_entity(PostRow)
        >>> like_repo = factory.for_entity(LikeRow)
    """

    def __init__(self, session: Session):
        self.session = session

    def for_entity(self, model: type[T]) -> Repository[T]:
        """Create repository for specific row type."""
        return Repository[T](self.session, model)


__all__ = ["Repository", "RepositoryFactory"]
