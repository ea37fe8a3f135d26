"""Platform assembly: store, query layer, services and sessions.

:class:`BlogPlatform` wires one entity store to the query layer, the three
entity services and the session manager, mirroring the way a client
application would hold them for its lifetime.

Example:
    >>> platform = BlogPlatform()
    >>> platform.initialize()
    >>> john = platform.sessions.login("john@example.com", "password123").value.user
    >>> len(platform.posts.get_feed_posts(john.id))
    3
    >>> platform.close()
"""

from collections.abc import Callable
from datetime import datetime
from typing import Optional

from blogdb.auth import SessionManager
from blogdb.config import Settings, StoreBackend, settings as default_settings
from blogdb.database import SqlStore
from blogdb.interfaces import IEntityStore
from blogdb.logging import logger
from blogdb.queries import BlogQueries
from blogdb.seed import seed_store
from blogdb.services import CommentService, PostService, UserService
from blogdb.store import InMemoryStore
from blogdb.types import EntityCounts


def create_store(
    settings: Settings, clock: Optional[Callable[[], datetime]] = None
) -> IEntityStore:
    """Build the store selected by ``settings.store_backend``."""
    if settings.store_backend == StoreBackend.SQL:
        return SqlStore(
            database_url=settings.database_url,
            echo=settings.database_echo,
            clock=clock,
        )
    return InMemoryStore(clock=clock)


class BlogPlatform:
    """The assembled platform.

    Attributes:
        store: Entity store shared by every component
        queries: Read-only derived views
        posts: Post service
        comments: Comment service
        users: User service
        sessions: Session manager

    Args:
        store: Entity store (built from settings if None)
        settings: Settings instance (global settings if None)
        clock: Time source for a store built here and for session expiry
    """

    def __init__(
        self,
        store: Optional[IEntityStore] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or default_settings
        self.store = store or create_store(self.settings, clock)
        self.queries = BlogQueries(self.store)
        self.posts = PostService(self.store, self.queries)
        self.comments = CommentService(self.store, self.queries)
        self.users = UserService(self.store, self.queries)
        self.sessions = SessionManager(self.store, settings=self.settings, clock=clock)
        self._initialized = False

    def initialize(self) -> None:
        """Open the store and load fixture data when enabled.

        Fixtures are only loaded into an empty store. Calling this again
        before ``close()`` is a no-op.
        """
        if self._initialized:
            return
        if isinstance(self.store, SqlStore):
            self.store.initialize()
        if self.settings.seed_fixtures and self.store.counts()["users"] == 0:
            seed_store(self.store)
        self._initialized = True
        logger.info("✅ Platform initialized")

    def close(self) -> None:
        """Release store resources."""
        if isinstance(self.store, SqlStore):
            self.store.close()
        self._initialized = False
        logger.info("✅ Platform closed")

    def get_statistics(self) -> EntityCounts:
        """Get current entity counts.

        Example:
            >>> stats = platform.get_statistics()
            >>> print(f"Total posts: {stats['posts']}")
        """
        return self.store.counts()
