"""Data models for BlogDB.

This module defines both Pydantic models (the entity snapshots handed to
callers, typed patches and facade outcomes) and SQLModel tables (rows for
the relational store backend).

Models are organized into three sections:
1. Pydantic entity models and their typed patches
2. Facade outcomes
3. SQLModel tables for the sql store backend
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from blogdb.utils import parse_datetime

T = TypeVar("T")

# =============================================================================
# Section 1: Pydantic Entity Models
# =============================================================================


class PublicUser(BaseModel):
    """User as exposed beyond the store: every field except the password.

    Attributes:
        id: Unique user ID
        username: Display handle
        email: Login email
        profile_picture: Avatar URL
        bio: Short biography
        created_at: Account creation timestamp (UTC)
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    username: str
    email: str
    profile_picture: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_created_at(cls, v: str | datetime) -> Optional[datetime]:
        return parse_datetime(v)


class User(PublicUser):
    """Registered account, including its secret.

    Only the store and the session layer ever see this model; everything
    else receives :class:`PublicUser`.
    """

    password: str

    def to_public(self) -> PublicUser:
        """Project this user without the password field."""
        return PublicUser.model_validate(self.model_dump(exclude={"password"}))


class Post(BaseModel):
    """Blog post.

    Attributes:
        id: Unique post ID
        title: Post title
        content: Post body
        author_id: ID of the authoring user (never changes after creation)
        created_at: Creation timestamp (UTC)
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    content: str
    author_id: str
    created_at: datetime

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_created_at(cls, v: str | datetime) -> Optional[datetime]:
        return parse_datetime(v)


class Comment(BaseModel):
    """Comment on a post. Immutable once created."""

    model_config = ConfigDict(extra="ignore")

    id: str
    content: str
    author_id: str
    post_id: str
    created_at: datetime

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_created_at(cls, v: str | datetime) -> Optional[datetime]:
        return parse_datetime(v)


class Like(BaseModel):
    """A user's like of a post. At most one per (user_id, post_id)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    post_id: str


class Follow(BaseModel):
    """Follow edge from follower to followed. At most one per pair."""

    model_config = ConfigDict(extra="ignore")

    id: str
    follower_id: str
    followed_id: str


class UserPatch(BaseModel):
    """Partial update for a user.

    Fields left as ``None`` keep their current value.
    """

    model_config = ConfigDict(extra="forbid")

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    profile_picture: Optional[str] = None
    bio: Optional[str] = None

    def apply_to(self, user: User) -> User:
        """Return a copy of ``user`` with the provided fields overwritten."""
        updated = user.model_copy()
        if self.username is not None:
            updated.username = self.username
        if self.email is not None:
            updated.email = self.email
        if self.password is not None:
            updated.password = self.password
        if self.profile_picture is not None:
            updated.profile_picture = self.profile_picture
        if self.bio is not None:
            updated.bio = self.bio
        return updated


class PostPatch(BaseModel):
    """Partial update for a post. ``author_id`` is not patchable."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    content: Optional[str] = None

    def apply_to(self, post: Post) -> Post:
        """Return a copy of ``post`` with the provided fields overwritten."""
        updated = post.model_copy()
        if self.title is not None:
            updated.title = self.title
        if self.content is not None:
            updated.content = self.content
        return updated


# =============================================================================
# Section 2: Facade Outcomes
# =============================================================================


class Rejection(StrEnum):
    """Reason a facade operation was refused."""

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    INVALID = "invalid"


class Outcome(BaseModel, Generic[T]):
    """Result of a facade mutation: a value, or a rejection with a message.

    Attributes:
        value: Result on success
        error: Rejection reason on failure
        message: Human-readable rejection message (e.g. "Post not found")

    Example:
        >>> result = posts.delete_post(acting_user_id, post_id)
        >>> if not result.ok:
        ...     print(result.error, result.message)
    """

    value: Optional[T] = None
    error: Optional[Rejection] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True when the operation succeeded."""
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        """Build a successful outcome."""
        return cls(value=value)

    @classmethod
    def reject(cls, error: Rejection, message: str) -> "Outcome[T]":
        """Build a rejected outcome."""
        return cls(error=error, message=message)


# =============================================================================
# Section 3: SQLModel Tables for the SQL Store Backend
# =============================================================================


def _to_naive_utc(value: datetime) -> datetime:
    return value.astimezone(UTC).replace(tzinfo=None)


class UserRow(SQLModel, table=True):
    """Persisted representation of a User.

    Attributes:
        id: User ID (primary key)
        seq: Insertion sequence number (indexed, gives store order)
        username: Display handle
        email: Login email (indexed)
        password: Secret
        profile_picture: Avatar URL
        bio: Short biography
        created_at: Creation timestamp, naive UTC
    """

    id: str = Field(primary_key=True)
    seq: int = Field(index=True)
    username: str
    email: str = Field(index=True)
    password: str
    profile_picture: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime = Field(sa_type=DateTime)

    @classmethod
    def from_pydantic(cls, user: User, seq: int) -> "UserRow":
        """Create UserRow from Pydantic User model."""
        return cls(
            id=user.id,
            seq=seq,
            username=user.username,
            email=user.email,
            password=user.password,
            profile_picture=user.profile_picture,
            bio=user.bio,
            created_at=_to_naive_utc(user.created_at),
        )

    def to_pydantic(self) -> User:
        """Detach this row into a Pydantic User snapshot."""
        return User(
            id=self.id,
            username=self.username,
            email=self.email,
            password=self.password,
            profile_picture=self.profile_picture,
            bio=self.bio,
            created_at=self.created_at,
        )


class PostRow(SQLModel, table=True):
    """Persisted representation of a Post.

    Attributes:
        id: Post ID (primary key)
        seq: Insertion sequence number
        title: Title
        content: Body
        author_id: Authoring user ID (indexed, not a constrained foreign key)
        created_at: Creation timestamp, naive UTC
    """

    id: str = Field(primary_key=True)
    seq: int = Field(index=True)
    title: str
    content: str
    author_id: str = Field(index=True)
    created_at: datetime = Field(sa_type=DateTime)

    @classmethod
    def from_pydantic(cls, post: Post, seq: int) -> "PostRow":
        """Create PostRow from Pydantic Post model."""
        return cls(
            id=post.id,
            seq=seq,
            title=post.title,
            content=post.content,
            author_id=post.author_id,
            created_at=_to_naive_utc(post.created_at),
        )

    def to_pydantic(self) -> Post:
        """Detach this row into a Pydantic Post snapshot."""
        return Post(
            id=self.id,
            title=self.title,
            content=self.content,
            author_id=self.author_id,
            created_at=self.created_at,
        )


class CommentRow(SQLModel, table=True):
    """Persisted representation of a Comment."""

    id: str = Field(primary_key=True)
    seq: int = Field(index=True)
    content: str
    author_id: str = Field(index=True)
    post_id: str = Field(index=True)
    created_at: datetime = Field(sa_type=DateTime)

    @classmethod
    def from_pydantic(cls, comment: Comment, seq: int) -> "CommentRow":
        """Create CommentRow from Pydantic Comment model."""
        return cls(
            id=comment.id,
            seq=seq,
            content=comment.content,
            author_id=comment.author_id,
            post_id=comment.post_id,
            created_at=_to_naive_utc(comment.created_at),
        )

    def to_pydantic(self) -> Comment:
        """Detach this row into a Pydantic Comment snapshot."""
        return Comment(
            id=self.id,
            content=self.content,
            author_id=self.author_id,
            post_id=self.post_id,
            created_at=self.created_at,
        )


class LikeRow(SQLModel, table=True):
    """Persisted representation of a Like, unique per (user_id, post_id)."""

    __table_args__ = (UniqueConstraint("user_id", "post_id"),)

    id: str = Field(primary_key=True)
    seq: int = Field(index=True)
    user_id: str = Field(index=True)
    post_id: str = Field(index=True)

    @classmethod
    def from_pydantic(cls, like: Like, seq: int) -> "LikeRow":
        """Create LikeRow from Pydantic Like model."""
        return cls(id=like.id, seq=seq, user_id=like.user_id, post_id=like.post_id)

    def to_pydantic(self) -> Like:
        """Detach this row into a Pydantic Like snapshot."""
        return Like(id=self.id, user_id=self.user_id, post_id=self.post_id)


class FollowRow(SQLModel, table=True):
    """Persisted representation of a Follow, unique per (follower_id, followed_id)."""

    __table_args__ = (UniqueConstraint("follower_id", "followed_id"),)

    id: str = Field(primary_key=True)
    seq: int = Field(index=True)
    follower_id: str = Field(index=True)
    followed_id: str = Field(index=True)

    @classmethod
    def from_pydantic(cls, follow: Follow, seq: int) -> "FollowRow":
        """Create FollowRow from Pydantic Follow model."""
        return cls(
            id=follow.id,
            seq=seq,
            follower_id=follow.follower_id,
            followed_id=follow.followed_id,
        )

    def to_pydantic(self) -> Follow:
        """Detach this row into a Pydantic Follow snapshot."""
        return Follow(
            id=self.id,
            follower_id=self.follower_id,
            followed_id=self.followed_id,
        )
