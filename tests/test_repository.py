"""Tests for the generic repository used by the SQL store."""

from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from blogdb.database import TABLES
from blogdb.models import LikeRow, PostRow
from blogdb.repository import Repository, RepositoryFactory

CREATED_AT = datetime(2024, 1, 15, 10, 0)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def test_session():
    """Session on a fresh in-memory database with the store tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine, tables=[model.__table__ for model in TABLES])
    with Session(engine) as session:
        yield session
        session.rollback()
    engine.dispose()


@pytest.fixture
def post_repo(test_session):
    return Repository[PostRow](test_session, PostRow)


def make_post_row(post_id: str, seq: int, author_id: str = "u1") -> PostRow:
    return PostRow(
        id=post_id,
        seq=seq,
        title=f"Post {post_id}",
        content="Body",
        author_id=author_id,
        created_at=CREATED_AT,
    )


# =============================================================================
# Repository Core Tests
# =============================================================================


def test_repository_get_returns_none_when_not_found(post_repo):
    """Test get returns None for an unknown id."""
    assert post_repo.get("missing") is None


def test_repository_create_and_get(post_repo):
    """Test a created row is visible before commit."""
    post_repo.create(make_post_row("p1", 1))

    row = post_repo.get("p1")
    assert row is not None
    assert row.title == "Post p1"


def test_repository_get_all_ordered_by_seq(post_repo):
    """Test get_all follows the seq column, not insertion of ids."""
    post_repo.create(make_post_row("b", 2))
    post_repo.create(make_post_row("c", 3))
    post_repo.create(make_post_row("a", 1))

    assert [row.id for row in post_repo.get_all()] == ["a", "b", "c"]


def test_repository_update_modifies_row(post_repo):
    """Test update stages attribute changes."""
    row = post_repo.create(make_post_row("p1", 1))
    row.title = "Renamed"
    post_repo.update(row)

    assert post_repo.get("p1").title == "Renamed"


def test_repository_delete(post_repo):
    """Test delete returns True once and False afterwards."""
    post_repo.create(make_post_row("p1", 1))

    assert post_repo.delete("p1") is True
    assert post_repo.delete("p1") is False
    assert post_repo.exists("p1") is False


def test_repository_find_by_filters(post_repo):
    """Test equality filters and seq ordering in find_by."""
    post_repo.create(make_post_row("p2", 2, author_id="u1"))
    post_repo.create(make_post_row("p1", 1, author_id="u1"))
    post_repo.create(make_post_row("p3", 3, author_id="u2"))

    assert [row.id for row in post_repo.find_by(author_id="u1")] == ["p1", "p2"]
    assert post_repo.find_by(author_id="nobody") == []
    assert post_repo.find_one_by(author_id="u2").id == "p3"
    assert post_repo.find_one_by(author_id="nobody") is None


def test_repository_find_by_ignores_unknown_attributes(post_repo):
    """Test unknown filter names are ignored."""
    post_repo.create(make_post_row("p1", 1))

    assert len(post_repo.find_by(nonexistent_field="x")) == 1


def test_repository_delete_by_returns_count(post_repo):
    """Test delete_by removes every match and reports how many."""
    post_repo.create(make_post_row("p1", 1, author_id="u1"))
    post_repo.create(make_post_row("p2", 2, author_id="u1"))
    post_repo.create(make_post_row("p3", 3, author_id="u2"))

    assert post_repo.delete_by(author_id="u1") == 2
    assert post_repo.delete_by(author_id="u1") == 0
    assert post_repo.count() == 1


def test_repository_next_seq(post_repo):
    """Test next_seq starts at 1 and follows the largest seq."""
    assert post_repo.next_seq() == 1
    post_repo.create(make_post_row("p1", 7))
    assert post_repo.next_seq() == 8


def test_repository_unique_pair_constraint(test_session):
    """Test the like table refuses a second row for the same pair."""
    repo = Repository[LikeRow](test_session, LikeRow)
    repo.create(LikeRow(id="l1", seq=1, user_id="u1", post_id="p1"))

    with pytest.raises(IntegrityError):
        repo.create(LikeRow(id="l2", seq=2, user_id="u1", post_id="p1"))


# =============================================================================
# Factory Tests
# =============================================================================


def test_repository_factory_creates_repository_for_entity(test_session):
    """Test the factory binds repositories to its session."""
    factory = RepositoryFactory(test_session)
    repo = factory.for_entity(PostRow)

    assert isinstance(repo, Repository)
    assert repo.model is PostRow
    assert repo.session is test_session


def test_repository_factory_repositories_share_session(test_session):
    """Test repositories from one factory see each other's staged rows."""
    factory = RepositoryFactory(test_session)
    factory.for_entity(PostRow).create(make_post_row("p1", 1))

    assert factory.for_entity(PostRow).exists("p1")
    assert factory.for_entity(LikeRow).count() == 0
