"""In-memory entity store.

Holds the five entity collections as plain lists of Pydantic models. Every
value that leaves the store is a copy, so callers can never mutate store
state through a returned object.

Example:
    >>> from blogdb.store import InMemoryStore
    >>> store = InMemoryStore()
    >>> user = store.create_user(
    ...     {"username": "ada", "email": "ada@example.com", "password": "secret1"}
    ... )
    >>> store.get_user_by_id(user.id).username
    'ada'
"""

import threading
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TypeVar

from pydantic import BaseModel

from blogdb.logging import logger
from blogdb.models import Comment, Follow, Like, Post, PostPatch, User, UserPatch
from blogdb.types import CommentData, EntityCounts, FollowData, LikeData, PostData, UserData
from blogdb.utils import new_id, utc_now

M = TypeVar("M", bound=BaseModel)


def _copies(items: Sequence[M]) -> list[M]:
    return [item.model_copy() for item in items]


def _first(items: Sequence[M], predicate: Callable[[M], bool]) -> M | None:
    return next((item for item in items if predicate(item)), None)


class InMemoryStore:
    """Process-memory implementation of :class:`~blogdb.interfaces.IEntityStore`.

    Execution is assumed single-threaded, but every mutation runs under a
    re-entrant lock so that the post cascade and the like/follow
    check-then-insert stay atomic if the store is ever shared by threads.

    Args:
        clock: Source of creation timestamps (defaults to :func:`utc_now`)
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or utc_now
        self._lock = threading.RLock()
        self._users: list[User] = []
        self._posts: list[Post] = []
        self._comments: list[Comment] = []
        self._likes: list[Like] = []
        self._follows: list[Follow] = []

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_users(self) -> list[User]:
        return _copies(self._users)

    def get_user_by_id(self, user_id: str) -> User | None:
        user = _first(self._users, lambda u: u.id == user_id)
        return user.model_copy() if user else None

    def get_user_by_email(self, email: str) -> User | None:
        user = _first(self._users, lambda u: u.email == email)
        return user.model_copy() if user else None

    def create_user(self, data: UserData) -> User:
        user = User(id=new_id(), created_at=self.clock(), **data)
        with self._lock:
            self._users.append(user)
        logger.debug(f"Created user {user.id} ({user.username})")
        return user.model_copy()

    def update_user(self, user_id: str, patch: UserPatch) -> User | None:
        with self._lock:
            for index, user in enumerate(self._users):
                if user.id == user_id:
                    updated = patch.apply_to(user)
                    self._users[index] = updated
                    logger.debug(f"Updated user {user_id}")
                    return updated.model_copy()
        return None

    def delete_user(self, user_id: str) -> bool:
        with self._lock:
            before = len(self._users)
            self._users = [u for u in self._users if u.id != user_id]
            deleted = len(self._users) < before
        if deleted:
            logger.debug(f"Deleted user {user_id}")
        return deleted

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------

    def get_posts(self) -> list[Post]:
        return _copies(self._posts)

    def get_post_by_id(self, post_id: str) -> Post | None:
        post = _first(self._posts, lambda p: p.id == post_id)
        return post.model_copy() if post else None

    def get_posts_by_user_id(self, user_id: str) -> list[Post]:
        return _copies([p for p in self._posts if p.author_id == user_id])

    def create_post(self, data: PostData) -> Post:
        post = Post(id=new_id(), created_at=self.clock(), **data)
        with self._lock:
            self._posts.append(post)
        logger.debug(f"Created post {post.id} by {post.author_id}")
        return post.model_copy()

    def update_post(self, post_id: str, patch: PostPatch) -> Post | None:
        with self._lock:
            for index, post in enumerate(self._posts):
                if post.id == post_id:
                    updated = patch.apply_to(post)
                    self._posts[index] = updated
                    logger.debug(f"Updated post {post_id}")
                    return updated.model_copy()
        return None

    def delete_post(self, post_id: str) -> bool:
        with self._lock:
            if not any(p.id == post_id for p in self._posts):
                return False
            self._posts = [p for p in self._posts if p.id != post_id]
            comments_before = len(self._comments)
            likes_before = len(self._likes)
            self._comments = [c for c in self._comments if c.post_id != post_id]
            self._likes = [lk for lk in self._likes if lk.post_id != post_id]
            removed_comments = comments_before - len(self._comments)
            removed_likes = likes_before - len(self._likes)
        logger.debug(
            f"Deleted post {post_id} "
            f"(cascaded {removed_comments} comments, {removed_likes} likes)"
        )
        return True

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------

    def get_comments(self) -> list[Comment]:
        return _copies(self._comments)

    def get_comment_by_id(self, comment_id: str) -> Comment | None:
        comment = _first(self._comments, lambda c: c.id == comment_id)
        return comment.model_copy() if comment else None

    def get_comments_by_post_id(self, post_id: str) -> list[Comment]:
        return _copies([c for c in self._comments if c.post_id == post_id])

    def create_comment(self, data: CommentData) -> Comment:
        comment = Comment(id=new_id(), created_at=self.clock(), **data)
        with self._lock:
            self._comments.append(comment)
        logger.debug(f"Created comment {comment.id} on post {comment.post_id}")
        return comment.model_copy()

    def delete_comment(self, comment_id: str) -> bool:
        with self._lock:
            before = len(self._comments)
            self._comments = [c for c in self._comments if c.id != comment_id]
            deleted = len(self._comments) < before
        if deleted:
            logger.debug(f"Deleted comment {comment_id}")
        return deleted

    # -------------------------------------------------------------------------
    # Likes
    # -------------------------------------------------------------------------

    def get_likes(self) -> list[Like]:
        return _copies(self._likes)

    def get_like_by_id(self, like_id: str) -> Like | None:
        like = _first(self._likes, lambda lk: lk.id == like_id)
        return like.model_copy() if like else None

    def get_likes_by_post_id(self, post_id: str) -> list[Like]:
        return _copies([lk for lk in self._likes if lk.post_id == post_id])

    def get_like(self, user_id: str, post_id: str) -> Like | None:
        like = _first(
            self._likes, lambda lk: lk.user_id == user_id and lk.post_id == post_id
        )
        return like.model_copy() if like else None

    def create_like(self, data: LikeData) -> Like:
        with self._lock:
            existing = self.get_like(data["user_id"], data["post_id"])
            if existing:
                return existing
            like = Like(id=new_id(), **data)
            self._likes.append(like)
        logger.debug(f"User {like.user_id} liked post {like.post_id}")
        return like.model_copy()

    def delete_like(self, user_id: str, post_id: str) -> bool:
        with self._lock:
            before = len(self._likes)
            self._likes = [
                lk
                for lk in self._likes
                if not (lk.user_id == user_id and lk.post_id == post_id)
            ]
            return len(self._likes) < before

    # -------------------------------------------------------------------------
    # Follows
    # -------------------------------------------------------------------------

    def get_follows(self) -> list[Follow]:
        return _copies(self._follows)

    def get_follow_by_id(self, follow_id: str) -> Follow | None:
        follow = _first(self._follows, lambda f: f.id == follow_id)
        return follow.model_copy() if follow else None

    def get_followers_by_user_id(self, followed_id: str) -> list[Follow]:
        return _copies([f for f in self._follows if f.followed_id == followed_id])

    def get_following_by_user_id(self, follower_id: str) -> list[Follow]:
        return _copies([f for f in self._follows if f.follower_id == follower_id])

    def get_follow(self, follower_id: str, followed_id: str) -> Follow | None:
        follow = _first(
            self._follows,
            lambda f: f.follower_id == follower_id and f.followed_id == followed_id,
        )
        return follow.model_copy() if follow else None

    def create_follow(self, data: FollowData) -> Follow:
        with self._lock:
            existing = self.get_follow(data["follower_id"], data["followed_id"])
            if existing:
                return existing
            follow = Follow(id=new_id(), **data)
            self._follows.append(follow)
        logger.debug(f"User {follow.follower_id} followed {follow.followed_id}")
        return follow.model_copy()

    def delete_follow(self, follower_id: str, followed_id: str) -> bool:
        with self._lock:
            before = len(self._follows)
            self._follows = [
                f
                for f in self._follows
                if not (f.follower_id == follower_id and f.followed_id == followed_id)
            ]
            return len(self._follows) < before

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def counts(self) -> EntityCounts:
        return {
            "users": len(self._users),
            "posts": len(self._posts),
            "comments": len(self._comments),
            "likes": len(self._likes),
            "follows": len(self._follows),
        }
