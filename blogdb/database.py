"""Relational entity store for BlogDB.

This module provides :class:`SqlStore`, an implementation of
:class:`~blogdb.interfaces.IEntityStore` backed by SQLModel tables. It is
a drop-in replacement for :class:`~blogdb.store.InMemoryStore`: the query
layer and services see the same Pydantic snapshots from either.

By default it runs against an in-process SQLite database (``sqlite://``),
so state still lives only as long as the process.

Example:
    >>> from blogdb.database import SqlStore
    >>>
    >>> store = SqlStore()
    >>> store.initialize()
    >>> user = store.create_user(
    ...     {"username": "ada", "email": "ada@example.com", "password": "secret1"}
    ... )
    >>> store.close()
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from blogdb.config import settings
from blogdb.logging import logger
from blogdb.models import (
    Comment,
    CommentRow,
    Follow,
    FollowRow,
    Like,
    LikeRow,
    Post,
    PostPatch,
    PostRow,
    User,
    UserPatch,
    UserRow,
)
from blogdb.repository import Repository, RepositoryFactory
from blogdb.types import CommentData, EntityCounts, FollowData, LikeData, PostData, UserData
from blogdb.utils import new_id, utc_now

TABLES: tuple[type[SQLModel], ...] = (UserRow, PostRow, CommentRow, LikeRow, FollowRow)


class SqlStore:
    """Entity store on top of a SQLAlchemy engine.

    Features:
    - One long-lived session, each mutation committed as a unit of work
    - Post deletion and its comment/like cascade commit together
    - Like/follow creation checks the unique pair and inserts under one lock,
      with a table-level unique constraint behind it

    Args:
        database_url: SQLAlchemy URL (defaults to settings.database_url)
        echo: Echo emitted SQL (defaults to settings.database_echo)
        clock: Source of creation timestamps (defaults to :func:`utc_now`)
    """

    def __init__(
        self,
        database_url: str | None = None,
        echo: bool | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.database_url = database_url or settings.database_url
        self.echo = settings.database_echo if echo is None else echo
        self.clock = clock or utc_now
        self.engine: Engine | None = None
        self.session: Session | None = None
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self) -> None:
        """Create the engine, the tables and the session.

        In-memory SQLite needs a single shared connection, otherwise every
        pooled connection would see its own empty database.
        """
        if self.engine is not None:
            return

        url = make_url(self.database_url)
        engine_kwargs: dict[str, Any] = {"echo": self.echo}

        if url.get_backend_name() == "sqlite":
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url.database in (None, "", ":memory:"):
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(self.database_url, **engine_kwargs)
        SQLModel.metadata.create_all(
            self.engine,
            tables=[model.__table__ for model in TABLES],  # type: ignore[attr-defined]
        )

        self.session = Session(self.engine, expire_on_commit=False)
        self._repos = RepositoryFactory(self.session)
        logger.info(f"✅ SQL store initialized at {url.render_as_string(hide_password=True)}")

    def close(self) -> None:
        """Close the session and dispose of the engine."""
        if self.session is not None:
            self.session.close()
            self.session = None
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
        logger.info("SQL store closed")

    def _repo(self, model: type[Any]) -> Repository[Any]:
        if self.session is None:
            raise RuntimeError("Database not initialized")
        return self._repos.for_entity(model)

    @contextmanager
    def _unit_of_work(self) -> Iterator[None]:
        if self.session is None:
            raise RuntimeError("Database not initialized")
        with self._lock:
            try:
                yield
                self.session.commit()
            except Exception:
                self.session.rollback()
                logger.exception("Store transaction rolled back")
                raise

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_users(self) -> list[User]:
        return [row.to_pydantic() for row in self._repo(UserRow).get_all()]

    def get_user_by_id(self, user_id: str) -> User | None:
        row = self._repo(UserRow).get(user_id)
        return row.to_pydantic() if row else None

    def get_user_by_email(self, email: str) -> User | None:
        row = self._repo(UserRow).find_one_by(email=email)
        return row.to_pydantic() if row else None

    def create_user(self, data: UserData) -> User:
        user = User(id=new_id(), created_at=self.clock(), **data)
        with self._unit_of_work():
            repo = self._repo(UserRow)
            repo.create(UserRow.from_pydantic(user, seq=repo.next_seq()))
        logger.debug(f"Created user {user.id} ({user.username})")
        return user.model_copy()

    def update_user(self, user_id: str, patch: UserPatch) -> User | None:
        with self._unit_of_work():
            repo = self._repo(UserRow)
            row = repo.get(user_id)
            if row is None:
                return None
            updated = patch.apply_to(row.to_pydantic())
            row.username = updated.username
            row.email = updated.email
            row.password = updated.password
            row.profile_picture = updated.profile_picture
            row.bio = updated.bio
            repo.update(row)
        logger.debug(f"Updated user {user_id}")
        return updated

    def delete_user(self, user_id: str) -> bool:
        with self._unit_of_work():
            deleted = self._repo(UserRow).delete(user_id)
        if deleted:
            logger.debug(f"Deleted user {user_id}")
        return deleted

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------

    def get_posts(self) -> list[Post]:
        return [row.to_pydantic() for row in self._repo(PostRow).get_all()]

    def get_post_by_id(self, post_id: str) -> Post | None:
        row = self._repo(PostRow).get(post_id)
        return row.to_pydantic() if row else None

    def get_posts_by_user_id(self, user_id: str) -> list[Post]:
        return [row.to_pydantic() for row in self._repo(PostRow).find_by(author_id=user_id)]

    def create_post(self, data: PostData) -> Post:
        post = Post(id=new_id(), created_at=self.clock(), **data)
        with self._unit_of_work():
            repo = self._repo(PostRow)
            repo.create(PostRow.from_pydantic(post, seq=repo.next_seq()))
        logger.debug(f"Created post {post.id} by {post.author_id}")
        return post.model_copy()

    def update_post(self, post_id: str, patch: PostPatch) -> Post | None:
        with self._unit_of_work():
            repo = self._repo(PostRow)
            row = repo.get(post_id)
            if row is None:
                return None
            updated = patch.apply_to(row.to_pydantic())
            row.title = updated.title
            row.content = updated.content
            repo.update(row)
        logger.debug(f"Updated post {post_id}")
        return updated

    def delete_post(self, post_id: str) -> bool:
        with self._unit_of_work():
            if not self._repo(PostRow).exists(post_id):
                return False
            removed_comments = self._repo(CommentRow).delete_by(post_id=post_id)
            removed_likes = self._repo(LikeRow).delete_by(post_id=post_id)
            self._repo(PostRow).delete(post_id)
        logger.debug(
            f"Deleted post {post_id} "
            f"(cascaded {removed_comments} comments, {removed_likes} likes)"
        )
        return True

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------

    def get_comments(self) -> list[Comment]:
        return [row.to_pydantic() for row in self._repo(CommentRow).get_all()]

    def get_comment_by_id(self, comment_id: str) -> Comment | None:
        row = self._repo(CommentRow).get(comment_id)
        return row.to_pydantic() if row else None

    def get_comments_by_post_id(self, post_id: str) -> list[Comment]:
        return [row.to_pydantic() for row in self._repo(CommentRow).find_by(post_id=post_id)]

    def create_comment(self, data: CommentData) -> Comment:
        comment = Comment(id=new_id(), created_at=self.clock(), **data)
        with self._unit_of_work():
            repo = self._repo(CommentRow)
            repo.create(CommentRow.from_pydantic(comment, seq=repo.next_seq()))
        logger.debug(f"Created comment {comment.id} on post {comment.post_id}")
        return comment.model_copy()

    def delete_comment(self, comment_id: str) -> bool:
        with self._unit_of_work():
            deleted = self._repo(CommentRow).delete(comment_id)
        if deleted:
            logger.debug(f"Deleted comment {comment_id}")
        return deleted

    # -------------------------------------------------------------------------
    # Likes
    # -------------------------------------------------------------------------

    def get_likes(self) -> list[Like]:
        return [row.to_pydantic() for row in self._repo(LikeRow).get_all()]

    def get_like_by_id(self, like_id: str) -> Like | None:
        row = self._repo(LikeRow).get(like_id)
        return row.to_pydantic() if row else None

    def get_likes_by_post_id(self, post_id: str) -> list[Like]:
        return [row.to_pydantic() for row in self._repo(LikeRow).find_by(post_id=post_id)]

    def get_like(self, user_id: str, post_id: str) -> Like | None:
        row = self._repo(LikeRow).find_one_by(user_id=user_id, post_id=post_id)
        return row.to_pydantic() if row else None

    def create_like(self, data: LikeData) -> Like:
        with self._unit_of_work():
            repo = self._repo(LikeRow)
            existing = repo.find_one_by(user_id=data["user_id"], post_id=data["post_id"])
            if existing is not None:
                return existing.to_pydantic()
            like = Like(id=new_id(), **data)
            repo.create(LikeRow.from_pydantic(like, seq=repo.next_seq()))
        logger.debug(f"User {like.user_id} liked post {like.post_id}")
        return like.model_copy()

    def delete_like(self, user_id: str, post_id: str) -> bool:
        with self._unit_of_work():
            return self._repo(LikeRow).delete_by(user_id=user_id, post_id=post_id) > 0

    # -------------------------------------------------------------------------
    # Follows
    # -------------------------------------------------------------------------

    def get_follows(self) -> list[Follow]:
        return [row.to_pydantic() for row in self._repo(FollowRow).get_all()]

    def get_follow_by_id(self, follow_id: str) -> Follow | None:
        row = self._repo(FollowRow).get(follow_id)
        return row.to_pydantic() if row else None

    def get_followers_by_user_id(self, followed_id: str) -> list[Follow]:
        rows = self._repo(FollowRow).find_by(followed_id=followed_id)
        return [row.to_pydantic() for row in rows]

    def get_following_by_user_id(self, follower_id: str) -> list[Follow]:
        rows = self._repo(FollowRow).find_by(follower_id=follower_id)
        return [row.to_pydantic() for row in rows]

    def get_follow(self, follower_id: str, followed_id: str) -> Follow | None:
        row = self._repo(FollowRow).find_one_by(
            follower_id=follower_id, followed_id=followed_id
        )
        return row.to_pydantic() if row else None

    def create_follow(self, data: FollowData) -> Follow:
        with self._unit_of_work():
            repo = self._repo(FollowRow)
            existing = repo.find_one_by(
                follower_id=data["follower_id"], followed_id=data["followed_id"]
            )
            if existing is not None:
                return existing.to_pydantic()
            follow = Follow(id=new_id(), **data)
            repo.create(FollowRow.from_pydantic(follow, seq=repo.next_seq()))
        logger.debug(f"User {follow.follower_id} followed {follow.followed_id}")
        return follow.model_copy()

    def delete_follow(self, follower_id: str, followed_id: str) -> bool:
        with self._unit_of_work():
            deleted = self._repo(FollowRow).delete_by(
                follower_id=follower_id, followed_id=followed_id
            )
        return deleted > 0

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def counts(self) -> EntityCounts:
        return {
            "users": self._repo(UserRow).count(),
            "posts": self._repo(PostRow).count(),
            "comments": self._repo(CommentRow).count(),
            "likes": self._repo(LikeRow).count(),
            "follows": self._repo(FollowRow).count(),
        }
