"""Tests for the query/derivation layer."""

import pytest

from blogdb.models import PublicUser
from blogdb.queries import BlogQueries


@pytest.fixture
def queries(store):
    return BlogQueries(store)


@pytest.fixture
def trio(make_user):
    """Users A, B and C."""
    return make_user("a"), make_user("b"), make_user("c")


class TestFeed:
    """Tests for feed composition and ordering."""

    def test_feed_follows_and_own_posts_newest_first(self, store, queries, trio):
        """Test A's feed holds B's post and A's post, newest first, and not C's."""
        a, b, c = trio
        store.create_follow({"follower_id": a.id, "followed_id": b.id})
        pa = store.create_post({"title": "PA", "content": "x", "author_id": a.id})
        pb = store.create_post({"title": "PB", "content": "x", "author_id": b.id})
        store.create_post({"title": "PC", "content": "x", "author_id": c.id})

        assert [p.id for p in queries.feed_for(a.id)] == [pb.id, pa.id]

    def test_feed_without_follows_is_own_posts(self, store, queries, trio):
        """Test a user following nobody sees only their own posts."""
        a, b, _ = trio
        own = store.create_post({"title": "Mine", "content": "x", "author_id": a.id})
        store.create_post({"title": "Theirs", "content": "x", "author_id": b.id})

        assert [p.id for p in queries.feed_for(a.id)] == [own.id]

    def test_unfollow_removes_posts_from_feed(self, store, queries, trio):
        """Test posts of an unfollowed author leave the feed."""
        a, b, _ = trio
        store.create_follow({"follower_id": a.id, "followed_id": b.id})
        store.create_post({"title": "PB", "content": "x", "author_id": b.id})
        store.delete_follow(a.id, b.id)

        assert queries.feed_for(a.id) == []

    def test_feed_for_unknown_user_is_empty(self, store, queries, trio):
        """Test an unknown user id yields an empty feed."""
        a, _, _ = trio
        store.create_post({"title": "PA", "content": "x", "author_id": a.id})

        assert queries.feed_for("ghost") == []


class TestOrdering:
    """Tests for post and comment ordering."""

    def test_all_posts_newest_first(self, store, queries, trio):
        """Test all_posts sorts by creation time descending."""
        a, _, _ = trio
        first = store.create_post({"title": "1", "content": "x", "author_id": a.id})
        second = store.create_post({"title": "2", "content": "x", "author_id": a.id})

        assert [p.id for p in queries.all_posts()] == [second.id, first.id]
        assert [p.id for p in queries.posts_by_user(a.id)] == [second.id, first.id]

    def test_comments_oldest_first(self, store, queries, trio):
        """Test comments are listed in ascending creation time."""
        a, b, _ = trio
        post = store.create_post({"title": "T", "content": "x", "author_id": a.id})
        first = store.create_comment({"content": "1", "author_id": b.id, "post_id": post.id})
        second = store.create_comment({"content": "2", "author_id": a.id, "post_id": post.id})

        assert [c.id for c in queries.comments_for_post(post.id)] == [first.id, second.id]

    def test_equal_timestamps_keep_insertion_order(self, frozen_store):
        """Test ties keep store order for posts and comments alike."""
        queries = BlogQueries(frozen_store)
        user = frozen_store.create_user(
            {"username": "a", "email": "a@example.com", "password": "secret1"}
        )
        posts = [
            frozen_store.create_post({"title": str(n), "content": "x", "author_id": user.id})
            for n in range(3)
        ]
        comments = [
            frozen_store.create_comment(
                {"content": str(n), "author_id": user.id, "post_id": posts[0].id}
            )
            for n in range(3)
        ]

        expected_posts = [p.id for p in posts]
        assert [p.id for p in queries.all_posts()] == expected_posts
        assert [p.id for p in queries.feed_for(user.id)] == expected_posts
        assert [c.id for c in queries.comments_for_post(posts[0].id)] == [
            c.id for c in comments
        ]


class TestLikes:
    """Tests for like counting."""

    def test_like_count_and_membership(self, store, queries, trio):
        """Test like_count and has_liked."""
        a, b, c = trio
        post = store.create_post({"title": "T", "content": "x", "author_id": a.id})
        store.create_like({"user_id": b.id, "post_id": post.id})
        store.create_like({"user_id": b.id, "post_id": post.id})
        store.create_like({"user_id": c.id, "post_id": post.id})

        assert queries.like_count(post.id) == 2
        assert queries.has_liked(b.id, post.id) is True
        assert queries.has_liked(a.id, post.id) is False
        assert queries.like_count("ghost") == 0


class TestFollowGraph:
    """Tests for follower/following views."""

    def test_counts_and_membership(self, store, queries, trio):
        """Test follower and following counts."""
        a, b, c = trio
        store.create_follow({"follower_id": a.id, "followed_id": b.id})
        store.create_follow({"follower_id": c.id, "followed_id": b.id})

        assert queries.follower_count(b.id) == 2
        assert queries.following_count(a.id) == 1
        assert queries.following_count(b.id) == 0
        assert queries.is_following(a.id, b.id) is True
        assert queries.is_following(b.id, a.id) is False

    def test_followers_are_redacted_in_user_order(self, store, queries, trio):
        """Test follower lists are PublicUser projections in user store order."""
        a, b, c = trio
        store.create_follow({"follower_id": c.id, "followed_id": b.id})
        store.create_follow({"follower_id": a.id, "followed_id": b.id})

        followers = queries.followers_of(b.id)

        assert [u.id for u in followers] == [a.id, c.id]
        assert all(type(u) is PublicUser for u in followers)
        assert all("password" not in u.model_dump() for u in followers)

    def test_following_of(self, store, queries, trio):
        """Test the followed users of a user."""
        a, b, c = trio
        store.create_follow({"follower_id": a.id, "followed_id": c.id})

        assert [u.username for u in queries.following_of(a.id)] == ["c"]
        assert queries.following_of(b.id) == []

    def test_deleted_user_dropped_from_follower_list(self, store, queries, trio):
        """Test orphaned follows do not produce phantom users."""
        a, b, _ = trio
        store.create_follow({"follower_id": a.id, "followed_id": b.id})
        store.delete_user(a.id)

        assert queries.follower_count(b.id) == 1
        assert queries.followers_of(b.id) == []


class TestUsers:
    """Tests for redacted user reads."""

    def test_all_users_redacted(self, queries, trio):
        """Test no password ever leaves the query layer."""
        users = queries.all_users()

        assert [u.username for u in users] == ["a", "b", "c"]
        assert all(not hasattr(u, "password") for u in users)

    def test_public_user(self, queries, trio):
        """Test a single redacted user and the unknown-id case."""
        a, _, _ = trio

        assert queries.public_user(a.id) == a.to_public()
        assert queries.public_user("ghost") is None
