"""Application facade: per-entity service sets.

Each service wraps store and query operations with existence checks,
ownership checks and password redaction. Reads return snapshots (or
``None`` when absent); mutations of owned content take the acting user's id
and return an :class:`~blogdb.models.Outcome` instead of raising.

Example:
    >>> posts = PostService(store, BlogQueries(store))
    >>> post = posts.create_post("Hello", "First post", author_id=ada.id)
    >>> result = posts.update_post(bob.id, post.id, PostPatch(title="Mine now"))
    >>> result.error
    <Rejection.FORBIDDEN: 'forbidden'>
"""

from blogdb.interfaces import IEntityStore
from blogdb.logging import logger
from blogdb.models import (
    Comment,
    Outcome,
    Post,
    PostPatch,
    PublicUser,
    Rejection,
    UserPatch,
)
from blogdb.queries import BlogQueries


class PostService:
    """Post operations: CRUD, feed and likes."""

    def __init__(self, store: IEntityStore, queries: BlogQueries):
        self.store = store
        self.queries = queries

    def get_all_posts(self) -> list[Post]:
        return self.queries.all_posts()

    def get_post_by_id(self, post_id: str) -> Post | None:
        return self.store.get_post_by_id(post_id)

    def get_posts_by_user_id(self, user_id: str) -> list[Post]:
        return self.queries.posts_by_user(user_id)

    def get_feed_posts(self, user_id: str) -> list[Post]:
        return self.queries.feed_for(user_id)

    def create_post(self, title: str, content: str, author_id: str) -> Post:
        """Create a post. The author id is not checked for existence."""
        post = self.store.create_post(
            {"title": title, "content": content, "author_id": author_id}
        )
        logger.info(f"Post {post.id} created by {author_id}")
        return post

    def update_post(
        self, acting_user_id: str, post_id: str, patch: PostPatch
    ) -> Outcome[Post]:
        """Update title/content of a post owned by ``acting_user_id``."""
        log = logger.bind(operation="update_post", user_id=acting_user_id)
        post = self.store.get_post_by_id(post_id)
        if post is None:
            log.info(f"Post {post_id} not found")
            return Outcome.reject(Rejection.NOT_FOUND, "Post not found")
        if post.author_id != acting_user_id:
            log.warning(f"Refused update of post {post_id} owned by {post.author_id}")
            return Outcome.reject(Rejection.FORBIDDEN, "Only the author can edit this post")

        updated = self.store.update_post(post_id, patch)
        if updated is None:
            return Outcome.reject(Rejection.NOT_FOUND, "Post not found")
        return Outcome.success(updated)

    def delete_post(self, acting_user_id: str, post_id: str) -> Outcome[bool]:
        """Delete a post (and its comments and likes) owned by ``acting_user_id``."""
        log = logger.bind(operation="delete_post", user_id=acting_user_id)
        post = self.store.get_post_by_id(post_id)
        if post is None:
            log.info(f"Post {post_id} not found")
            return Outcome.reject(Rejection.NOT_FOUND, "Post not found")
        if post.author_id != acting_user_id:
            log.warning(f"Refused delete of post {post_id} owned by {post.author_id}")
            return Outcome.reject(Rejection.FORBIDDEN, "Only the author can delete this post")

        if not self.store.delete_post(post_id):
            return Outcome.reject(Rejection.NOT_FOUND, "Post not found")
        log.info(f"Post {post_id} deleted")
        return Outcome.success(True)

    def like_post(self, user_id: str, post_id: str) -> bool:
        """Like a post. Liking twice keeps a single like."""
        self.store.create_like({"user_id": user_id, "post_id": post_id})
        return True

    def unlike_post(self, user_id: str, post_id: str) -> bool:
        return self.store.delete_like(user_id, post_id)

    def has_user_liked_post(self, user_id: str, post_id: str) -> bool:
        return self.queries.has_liked(user_id, post_id)

    def get_post_likes_count(self, post_id: str) -> int:
        return self.queries.like_count(post_id)

    def get_comments_by_post_id(self, post_id: str) -> list[Comment]:
        return self.queries.comments_for_post(post_id)


class CommentService:
    """Comment operations."""

    def __init__(self, store: IEntityStore, queries: BlogQueries):
        self.store = store
        self.queries = queries

    def get_comments_by_post_id(self, post_id: str) -> list[Comment]:
        """Comments on a post, oldest first."""
        return self.queries.comments_for_post(post_id)

    def create_comment(self, content: str, author_id: str, post_id: str) -> Comment:
        comment = self.store.create_comment(
            {"content": content, "author_id": author_id, "post_id": post_id}
        )
        logger.info(f"Comment {comment.id} added to post {post_id} by {author_id}")
        return comment

    def delete_comment(self, acting_user_id: str, comment_id: str) -> Outcome[bool]:
        """Delete a comment written by ``acting_user_id``."""
        log = logger.bind(operation="delete_comment", user_id=acting_user_id)
        comment = self.store.get_comment_by_id(comment_id)
        if comment is None:
            log.info(f"Comment {comment_id} not found")
            return Outcome.reject(Rejection.NOT_FOUND, "Comment not found")
        if comment.author_id != acting_user_id:
            log.warning(f"Refused delete of comment {comment_id} owned by {comment.author_id}")
            return Outcome.reject(
                Rejection.FORBIDDEN, "Only the author can delete this comment"
            )

        if not self.store.delete_comment(comment_id):
            return Outcome.reject(Rejection.NOT_FOUND, "Comment not found")
        return Outcome.success(True)


class UserService:
    """User profile and follow-graph operations. Every user returned is redacted."""

    def __init__(self, store: IEntityStore, queries: BlogQueries):
        self.store = store
        self.queries = queries

    def get_all_users(self) -> list[PublicUser]:
        return self.queries.all_users()

    def get_user_by_id(self, user_id: str) -> PublicUser | None:
        return self.queries.public_user(user_id)

    def follow_user(self, follower_id: str, followed_id: str) -> bool:
        """Follow another user. Following yourself is a no-op returning False."""
        if follower_id == followed_id:
            return False
        self.store.create_follow({"follower_id": follower_id, "followed_id": followed_id})
        return True

    def unfollow_user(self, follower_id: str, followed_id: str) -> bool:
        return self.store.delete_follow(follower_id, followed_id)

    def is_following(self, follower_id: str, followed_id: str) -> bool:
        return self.queries.is_following(follower_id, followed_id)

    def get_user_followers(self, user_id: str) -> list[PublicUser]:
        return self.queries.followers_of(user_id)

    def get_user_following(self, user_id: str) -> list[PublicUser]:
        return self.queries.following_of(user_id)

    def get_followers_count(self, user_id: str) -> int:
        return self.queries.follower_count(user_id)

    def get_following_count(self, user_id: str) -> int:
        return self.queries.following_count(user_id)

    def update_profile(
        self, acting_user_id: str, user_id: str, patch: UserPatch
    ) -> Outcome[PublicUser]:
        """Update a profile. Users may only edit their own profile.

        Changing the email to one already registered by someone else is
        rejected with ``CONFLICT``.
        """
        log = logger.bind(operation="update_profile", user_id=acting_user_id)
        if acting_user_id != user_id:
            log.warning(f"Refused profile update of {user_id}")
            return Outcome.reject(Rejection.FORBIDDEN, "You can only edit your own profile")

        if patch.email is not None:
            holder = self.store.get_user_by_email(patch.email)
            if holder is not None and holder.id != user_id:
                return Outcome.reject(Rejection.CONFLICT, "Email already in use")

        updated = self.store.update_user(user_id, patch)
        if updated is None:
            log.info(f"User {user_id} not found")
            return Outcome.reject(Rejection.NOT_FOUND, "User not found")
        return Outcome.success(updated.to_public())

    def update_profile_picture(
        self, acting_user_id: str, user_id: str, profile_picture: str
    ) -> Outcome[PublicUser]:
        return self.update_profile(
            acting_user_id, user_id, UserPatch(profile_picture=profile_picture)
        )
