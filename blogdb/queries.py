"""Read-only derived views over the entity store.

Feed composition, like/follow counting, membership checks and the
redacted user projections. Nothing here mutates the store.

Ordering conventions:
    - posts (feed, all posts, posts by user): newest first
    - comments: oldest first
    - equal timestamps keep store insertion order (stable sort)
"""

from blogdb.interfaces import IEntityStore
from blogdb.models import Comment, Post, PublicUser
from blogdb.utils import newest_first, oldest_first


class BlogQueries:
    """Query/derivation layer bound to one store.

    Args:
        store: Any :class:`~blogdb.interfaces.IEntityStore` implementation
    """

    def __init__(self, store: IEntityStore):
        self.store = store

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------

    def feed_for(self, user_id: str) -> list[Post]:
        """Posts by the authors ``user_id`` follows, plus the user's own posts.

        Example:
            >>> # A follows B; A posted at t=1, B at t=2
            >>> [p.title for p in queries.feed_for(a.id)]
            ['B post', 'A post']
        """
        authors = {follow.followed_id for follow in self.store.get_following_by_user_id(user_id)}
        authors.add(user_id)
        posts = [post for post in self.store.get_posts() if post.author_id in authors]
        return newest_first(posts, key=lambda post: post.created_at)

    def all_posts(self) -> list[Post]:
        """Every post, newest first."""
        return newest_first(self.store.get_posts(), key=lambda post: post.created_at)

    def posts_by_user(self, user_id: str) -> list[Post]:
        """Posts authored by ``user_id``, newest first."""
        return newest_first(
            self.store.get_posts_by_user_id(user_id), key=lambda post: post.created_at
        )

    # -------------------------------------------------------------------------
    # Comments and likes
    # -------------------------------------------------------------------------

    def comments_for_post(self, post_id: str) -> list[Comment]:
        """Comments on a post, oldest first."""
        return oldest_first(
            self.store.get_comments_by_post_id(post_id),
            key=lambda comment: comment.created_at,
        )

    def like_count(self, post_id: str) -> int:
        return len(self.store.get_likes_by_post_id(post_id))

    def has_liked(self, user_id: str, post_id: str) -> bool:
        return self.store.get_like(user_id, post_id) is not None

    # -------------------------------------------------------------------------
    # Follow graph
    # -------------------------------------------------------------------------

    def follower_count(self, user_id: str) -> int:
        return len(self.store.get_followers_by_user_id(user_id))

    def following_count(self, user_id: str) -> int:
        return len(self.store.get_following_by_user_id(user_id))

    def is_following(self, follower_id: str, followed_id: str) -> bool:
        return self.store.get_follow(follower_id, followed_id) is not None

    def followers_of(self, user_id: str) -> list[PublicUser]:
        """Users following ``user_id``, redacted, in user store order."""
        follower_ids = {f.follower_id for f in self.store.get_followers_by_user_id(user_id)}
        return [u.to_public() for u in self.store.get_users() if u.id in follower_ids]

    def following_of(self, user_id: str) -> list[PublicUser]:
        """Users ``user_id`` follows, redacted, in user store order."""
        followed_ids = {f.followed_id for f in self.store.get_following_by_user_id(user_id)}
        return [u.to_public() for u in self.store.get_users() if u.id in followed_ids]

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def all_users(self) -> list[PublicUser]:
        """Every user, redacted, in store order."""
        return [user.to_public() for user in self.store.get_users()]

    def public_user(self, user_id: str) -> PublicUser | None:
        """A single user, redacted, or None if unknown."""
        user = self.store.get_user_by_id(user_id)
        return user.to_public() if user else None
