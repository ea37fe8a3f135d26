"""BlogDB - entity store and services for a small social blogging platform.

This package provides the data layer of a blogging platform: an entity
store for users, posts, comments, likes and follows (in memory or on a
SQLModel backend), the feed and counting queries built on it, per-entity
services with ownership checks, and token-based sessions.

Example:
    >>> from blogdb import BlogPlatform
    >>>
    >>> platform = BlogPlatform()
    >>> platform.initialize()
    >>> session = platform.sessions.login("john@example.com", "password123").value
    >>> feed = platform.posts.get_feed_posts(session.user.id)
    >>> platform.close()
"""

from blogdb.auth import AuthSession, SessionManager
from blogdb.config import settings
from blogdb.database import SqlStore
from blogdb.interfaces import IEntityStore, IIdentityDirectory
from blogdb.models import (
    Comment,
    Follow,
    Like,
    Outcome,
    Post,
    PostPatch,
    PublicUser,
    Rejection,
    User,
    UserPatch,
)
from blogdb.platform import BlogPlatform
from blogdb.queries import BlogQueries
from blogdb.services import CommentService, PostService, UserService
from blogdb.store import InMemoryStore

__version__ = "0.1.0"

__all__ = [
    # Main components
    "BlogPlatform",
    "BlogQueries",
    "PostService",
    "CommentService",
    "UserService",
    "SessionManager",
    "AuthSession",
    # Stores
    "IEntityStore",
    "IIdentityDirectory",
    "InMemoryStore",
    "SqlStore",
    # Configuration
    "settings",
    # Pydantic models
    "User",
    "PublicUser",
    "Post",
    "Comment",
    "Like",
    "Follow",
    "UserPatch",
    "PostPatch",
    "Outcome",
    "Rejection",
    # Metadata
    "__version__",
]
