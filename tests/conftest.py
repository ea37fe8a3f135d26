"""Pytest configuration and shared fixtures for BlogDB tests."""

import sys
from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta

import pytest
from loguru import logger

from blogdb.config import Environment, Settings
from blogdb.database import SqlStore
from blogdb.interfaces import IEntityStore
from blogdb.models import User
from blogdb.platform import BlogPlatform
from blogdb.store import InMemoryStore

T0 = datetime(2024, 1, 15, 10, 0, tzinfo=UTC)


# =============================================================================
# Test Configuration
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Configure loguru for tests to avoid I/O errors."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="ERROR",
        format="{time} {level} {message}",
        catch=True,
        enqueue=True,
    )
    yield
    logger.remove()


@pytest.fixture(scope="function", autouse=True)
def reset_loguru():
    """Reset loguru handlers before each test to prevent I/O errors."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="ERROR",
        format="{time} {level} {message}",
        catch=True,
        enqueue=True,
    )
    yield
    logger.remove()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Testing-profile settings with a temporary data directory."""
    return Settings(environment=Environment.TESTING, data_dir=tmp_path)


# =============================================================================
# Clocks
# =============================================================================


class SteppingClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


@pytest.fixture
def clock() -> SteppingClock:
    """Clock that hands out strictly increasing timestamps."""
    return SteppingClock()


@pytest.fixture
def frozen_clock() -> Callable[[], datetime]:
    """Clock that always returns the same instant."""
    return lambda: T0


# =============================================================================
# Stores
# =============================================================================


def build_store(
    backend: str, clock: Callable[[], datetime], initialize: bool = True
) -> IEntityStore:
    if backend == "sql":
        store = SqlStore(database_url="sqlite://", echo=False, clock=clock)
        if initialize:
            store.initialize()
        return store
    return InMemoryStore(clock=clock)


@pytest.fixture(params=["memory", "sql"])
def store(request, clock) -> Generator[IEntityStore, None, None]:
    """Empty entity store, once per backend."""
    instance = build_store(request.param, clock)
    yield instance
    if isinstance(instance, SqlStore):
        instance.close()


@pytest.fixture(params=["memory", "sql"])
def frozen_store(request, frozen_clock) -> Generator[IEntityStore, None, None]:
    """Empty entity store whose timestamps never change, once per backend."""
    instance = build_store(request.param, frozen_clock)
    yield instance
    if isinstance(instance, SqlStore):
        instance.close()


@pytest.fixture
def make_user(store: IEntityStore) -> Callable[..., User]:
    """Factory creating users in ``store`` with unique default emails."""
    counter = iter(range(1, 1000))

    def _make(username: str | None = None, **extra) -> User:
        n = next(counter)
        name = username or f"user{n}"
        data = {"username": name, "email": f"{name}@example.com", "password": "secret1"}
        data.update(extra)
        return store.create_user(data)  # type: ignore[arg-type]

    return _make


# =============================================================================
# Platform
# =============================================================================


@pytest.fixture(params=["memory", "sql"])
def platform(request, test_settings, clock) -> Generator[BlogPlatform, None, None]:
    """Seeded platform, once per backend."""
    instance = BlogPlatform(
        store=build_store(request.param, clock, initialize=False),
        settings=test_settings,
        clock=clock,
    )
    instance.initialize()
    yield instance
    instance.close()


@pytest.fixture
def memory_platform(test_settings, clock) -> BlogPlatform:
    """Seeded platform on the in-memory store."""
    instance = BlogPlatform(store=InMemoryStore(clock=clock), settings=test_settings, clock=clock)
    instance.initialize()
    return instance


@pytest.fixture
def seeded_users(platform: BlogPlatform) -> dict[str, User]:
    """Fixture users keyed by username (with passwords)."""
    return {user.username: user for user in platform.store.get_users()}
