"""Protocol interfaces for dependency injection.

The entity store is consumed only through these protocols, so the query
layer, the services and the session manager work unchanged against the
in-memory store, the SQL store, or a test double. Using
``@runtime_checkable`` allows ``isinstance`` checks based on method
presence rather than inheritance.

Example:
    >>> from blogdb.interfaces import IEntityStore
    >>> from blogdb.store import InMemoryStore
    >>> isinstance(InMemoryStore(), IEntityStore)
    True
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from blogdb.models import Comment, Follow, Like, Post, PostPatch, User, UserPatch
from blogdb.types import CommentData, EntityCounts, FollowData, LikeData, PostData, UserData


@runtime_checkable
class IIdentityDirectory(Protocol):
    """The slice of the store the session layer needs for identity resolution."""

    def get_user_by_id(self, user_id: str) -> User | None:
        """Get a user by ID."""
        ...

    def get_user_by_email(self, email: str) -> User | None:
        """Get a user by email address."""
        ...

    def create_user(self, data: UserData) -> User:
        """Create a user (id and created_at are assigned by the store)."""
        ...

    def update_user(self, user_id: str, patch: UserPatch) -> User | None:
        """Apply a partial update; None if the user is unknown."""
        ...


@runtime_checkable
class IEntityStore(IIdentityDirectory, Protocol):
    """Entity store interface.

    Sole authority over the users, posts, comments, likes and follows
    collections. Implementations must:

    - return independent copies from every read and write
    - return collections in insertion order
    - signal absence with ``None``/``False``, never by raising
    - cascade a post deletion to its comments and likes atomically
    - make like and follow creation idempotent per unique pair
    """

    # -------------------------------------------------------------------------
    # User operations
    # -------------------------------------------------------------------------

    def get_users(self) -> Sequence[User]:
        """Get all users in insertion order."""
        ...

    def delete_user(self, user_id: str) -> bool:
        """Delete a user. Does not cascade.

        Returns:
            True if a user was removed
        """
        ...

    # -------------------------------------------------------------------------
    # Post operations
    # -------------------------------------------------------------------------

    def get_posts(self) -> Sequence[Post]:
        """Get all posts in insertion order."""
        ...

    def get_post_by_id(self, post_id: str) -> Post | None:
        """Get a post by ID."""
        ...

    def get_posts_by_user_id(self, user_id: str) -> Sequence[Post]:
        """Get posts authored by a user, in insertion order."""
        ...

    def create_post(self, data: PostData) -> Post:
        """Create a post."""
        ...

    def update_post(self, post_id: str, patch: PostPatch) -> Post | None:
        """Apply a partial update; None if the post is unknown."""
        ...

    def delete_post(self, post_id: str) -> bool:
        """Delete a post together with its comments and likes.

        Returns:
            True if the post existed; when False nothing was removed
        """
        ...

    # -------------------------------------------------------------------------
    # Comment operations
    # -------------------------------------------------------------------------

    def get_comments(self) -> Sequence[Comment]:
        """Get all comments in insertion order."""
        ...

    def get_comment_by_id(self, comment_id: str) -> Comment | None:
        """Get a comment by ID."""
        ...

    def get_comments_by_post_id(self, post_id: str) -> Sequence[Comment]:
        """Get comments on a post, in insertion order."""
        ...

    def create_comment(self, data: CommentData) -> Comment:
        """Create a comment."""
        ...

    def delete_comment(self, comment_id: str) -> bool:
        """Delete a comment. Returns True if it existed."""
        ...

    # -------------------------------------------------------------------------
    # Like operations
    # -------------------------------------------------------------------------

    def get_likes(self) -> Sequence[Like]:
        """Get all likes in insertion order."""
        ...

    def get_like_by_id(self, like_id: str) -> Like | None:
        """Get a like by ID."""
        ...

    def get_likes_by_post_id(self, post_id: str) -> Sequence[Like]:
        """Get likes of a post."""
        ...

    def get_like(self, user_id: str, post_id: str) -> Like | None:
        """Look up the like for a (user, post) pair."""
        ...

    def create_like(self, data: LikeData) -> Like:
        """Like a post; returns the existing like when the pair already exists."""
        ...

    def delete_like(self, user_id: str, post_id: str) -> bool:
        """Remove the like for a (user, post) pair. Returns True if it existed."""
        ...

    # -------------------------------------------------------------------------
    # Follow operations
    # -------------------------------------------------------------------------

    def get_follows(self) -> Sequence[Follow]:
        """Get all follows in insertion order."""
        ...

    def get_follow_by_id(self, follow_id: str) -> Follow | None:
        """Get a follow by ID."""
        ...

    def get_followers_by_user_id(self, followed_id: str) -> Sequence[Follow]:
        """Get follow rows pointing at a user."""
        ...

    def get_following_by_user_id(self, follower_id: str) -> Sequence[Follow]:
        """Get follow rows originating from a user."""
        ...

    def get_follow(self, follower_id: str, followed_id: str) -> Follow | None:
        """Look up the follow for a (follower, followed) pair."""
        ...

    def create_follow(self, data: FollowData) -> Follow:
        """Follow a user; returns the existing follow when the pair already exists.

        Self-follows are not rejected here.
        """
        ...

    def delete_follow(self, follower_id: str, followed_id: str) -> bool:
        """Remove a follow. Returns True if it existed."""
        ...

    # -------------------------------------------------------------------------
    # Statistics operations
    # -------------------------------------------------------------------------

    def counts(self) -> EntityCounts:
        """Get row counts for every collection."""
        ...
