"""Metadata Repository — key/value rows attached to tasks by task_id.

Invariants:
    - create_new() refuses a row whose task_id has no task (ResourceNotFoundError),
      checked inside the same unit of work as the insert
    - Rows are only ever removed explicitly (delete / delete_where)

Design Decisions:
    - Existence check in code rather than a SQLite foreign key: FK enforcement
      would also block purging a task that still has metadata
"""

import logging
from typing import Any

from sqlalchemy import delete, insert, select, update

from taskdata.core import date_utils
from taskdata.core.domain_types import MetadataId, TaskId
from taskdata.core.errors import ErrorContext, ResourceNotFoundError
from taskdata.infrastructure.database import DatabaseSessionManager
from taskdata.infrastructure.row_cursor import RowCursor
from taskdata.models.criteria import MetadataCriteria, TaskCriteria
from taskdata.models.metadata import Metadata, METADATA_PROPERTIES
from taskdata.models.task import Task

logger = logging.getLogger(__name__)


class MetadataRepository:
    """Reads and writes the metadata table."""

    def __init__(self, db: DatabaseSessionManager, clock=date_utils.now):
        self._db = db
        self._clock = clock

    def query(self, statement: Any) -> RowCursor:
        return self._db.stream(statement)

    def fetch(self, metadata_id: MetadataId, *columns: Any) -> Metadata | None:
        statement = select(*(columns or METADATA_PROPERTIES)).where(
            Metadata.id == metadata_id,
        )
        with self.query(statement) as cursor:
            row = cursor.first()
        return Metadata.from_row(row) if row is not None else None

    def fetch_for_task(self, task_id: TaskId, key: str | None = None) -> list[Metadata]:
        """All metadata rows of a task (optionally one key), in insertion order."""
        criterion = (
            MetadataCriteria.by_task(task_id) if key is None
            else MetadataCriteria.by_task_and_key(task_id, key)
        )
        statement = (
            select(*METADATA_PROPERTIES).where(criterion).order_by(Metadata.id)
        )
        with self.query(statement) as cursor:
            return [Metadata.from_row(row) for row in cursor]

    def create_new(self, metadata: Metadata) -> bool:
        """Insert `metadata` as a new row and assign its id."""
        if not metadata.contains_value("created_date"):
            metadata.created_date = self._clock()
        values = metadata.set_values()
        values.pop("id", None)

        with self._db.session() as db:
            owner = db.execute(
                select(Task.id).where(TaskCriteria.by_id(metadata.task_id)),
            ).first()
            if owner is None:
                raise ResourceNotFoundError(
                    "Task", metadata.task_id,
                    ErrorContext(task_id=metadata.task_id, operation="metadata.create"),
                )
            result = db.execute(insert(Metadata.__table__).values(**values))
            new_id = result.inserted_primary_key[0]
        metadata.id = new_id
        return True

    def save(self, metadata: Metadata) -> bool:
        if not metadata.is_saved():
            return self.create_new(metadata)
        values = metadata.set_values()
        values.pop("id")
        with self._db.session() as db:
            result = db.execute(
                update(Metadata.__table__)
                .where(Metadata.__table__.c.id == metadata.id)
                .values(**values)
            )
            return result.rowcount > 0

    def delete(self, metadata_id: MetadataId) -> bool:
        with self._db.session() as db:
            result = db.execute(
                delete(Metadata.__table__).where(Metadata.__table__.c.id == metadata_id),
            )
            return result.rowcount > 0

    def delete_where(self, criterion: Any) -> int:
        with self._db.session() as db:
            result = db.execute(delete(Metadata.__table__).where(criterion))
            deleted = result.rowcount
        logger.debug("Metadata rows deleted", extra={"row_count": deleted})
        return deleted
