"""Composition Root — wires settings, database, repositories and TaskService.

Invariants:
    - The only place that reads global settings; everything below receives
      its collaborators explicitly
    - Tables are created if missing (create_all); schema migrations are out of scope

Design Decisions:
    - Factory function over a dependency-injection container: one call builds the
      whole graph, tests build the same graph against a temporary database
"""

import logging
from dataclasses import dataclass

from taskdata.config import Settings, get_settings
from taskdata.infrastructure.database import DatabaseSessionManager
from taskdata.infrastructure.observability import setup_logging
from taskdata.repositories.metadata_repository import MetadataRepository
from taskdata.repositories.task_repository import TaskRepository
from taskdata.services.task_service import TaskService

logger = logging.getLogger(__name__)


@dataclass
class TaskDataApp:
    """Everything create_task_service() built, for callers that need the parts."""
    settings: Settings
    db: DatabaseSessionManager
    tasks: TaskRepository
    metadata: MetadataRepository
    service: TaskService

    def close(self) -> None:
        self.db.dispose()


def create_app(
    settings: Settings | None = None, configure_logging: bool = False,
) -> TaskDataApp:
    if settings is None:
        settings = get_settings()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_format)

    db = DatabaseSessionManager(
        settings.database_url,
        echo=settings.database_echo,
        sqlite_wal=settings.sqlite_wal,
    )
    db.create_all()
    tasks = TaskRepository(db)
    metadata = MetadataRepository(db)
    service = TaskService(tasks, metadata, clone_mode=settings.clone_mode)
    logger.info(
        "Task service ready",
        extra={"clone_mode": settings.clone_mode.value, "operation": "bootstrap"},
    )
    return TaskDataApp(settings, db, tasks, metadata, service)


def create_task_service(
    settings: Settings | None = None, configure_logging: bool = False,
) -> TaskService:
    return create_app(settings, configure_logging).service
