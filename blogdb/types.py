"""Type definitions for BlogDB create payloads.

These TypedDicts describe the data callers hand to the store's ``create_*``
operations: every entity field except the store-assigned ``id`` and
``created_at``.

Example:
    >>> from blogdb.types import PostData
    >>> post: PostData = {
    ...     "title": "Hello",
    ...     "content": "First post",
    ...     "author_id": "0b1f...",
    ... }
"""

from typing import NotRequired, Required, TypedDict


class UserData(TypedDict, total=False):
    """Fields supplied when creating a user.

    Attributes:
        username: Required display handle
        email: Required login email (unique per store, checked at registration)
        password: Required secret
        profile_picture: Optional avatar URL
        bio: Optional short biography
    """

    username: Required[str]
    email: Required[str]
    password: Required[str]
    profile_picture: NotRequired[str | None]
    bio: NotRequired[str | None]


class PostData(TypedDict):
    """Fields supplied when creating a post."""

    title: str
    content: str
    author_id: str


class CommentData(TypedDict):
    """Fields supplied when creating a comment."""

    content: str
    author_id: str
    post_id: str


class LikeData(TypedDict):
    """Fields supplied when liking a post."""

    user_id: str
    post_id: str


class FollowData(TypedDict):
    """Fields supplied when following a user."""

    follower_id: str
    followed_id: str


# Type aliases
EntityCounts = dict[str, int]
"""Row counts keyed by collection name (users, posts, comments, likes, follows)."""
