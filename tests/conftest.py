"""Root conftest — shared fixtures: fixed clock, per-test SQLite database, wired repositories.

Invariants:
    - Every test gets a fresh SQLite file under tmp_path (WAL on, like production)
    - The clock is frozen at NOW unless a test advances it

Design Decisions:
    - File database over :memory:: cursors held open across writes need separate
      connections that see the same data
"""

import os

import pytest

from taskdata.infrastructure.database import DatabaseSessionManager
from taskdata.models.task import Task
from taskdata.repositories.metadata_repository import MetadataRepository
from taskdata.repositories.task_repository import TaskRepository
from taskdata.services.task_service import TaskService

# Settings must never pick up a developer's real database
os.environ.setdefault("TASKDATA_DATABASE_URL", "sqlite:///:memory:")

NOW = 1_700_000_000_000


class FixedClock:
    """Callable clock returning a settable epoch-millisecond value."""

    def __init__(self, now: int = NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def db(tmp_path):
    manager = DatabaseSessionManager(f"sqlite:///{tmp_path / 'tasks.sqlite3'}")
    manager.create_all()
    yield manager
    manager.dispose()


@pytest.fixture
def task_repo(db, clock):
    return TaskRepository(db, clock=clock)


@pytest.fixture
def metadata_repo(db, clock):
    return MetadataRepository(db, clock=clock)


@pytest.fixture
def service(task_repo, metadata_repo, clock):
    return TaskService(task_repo, metadata_repo, clock=clock)


@pytest.fixture
def make_task(task_repo):
    """Insert a task with the given column values and return it."""
    def _make(**values) -> Task:
        task = Task(**values)
        task_repo.save(task)
        return task
    return _make
