"""Task Service — filtered fetch, ordering, soft-delete lifecycle, cloning and bulk cleanup.

Invariants:
    - Every row cursor opened here is released on every exit path (`with` blocks);
      cursors returned to callers (query, fetch_filtered) are the caller's to release
    - delete() on an unsaved task is a no-op; on an untitled task ("") it purges and
      resets the in-memory id to NO_ID; otherwise it rewrites the row to id +
      deletion_date with every other column reset
    - Soft delete never touches metadata rows
    - update_by_selection saves once per matched row (save listeners fire per row)
    - cleanup, clone and update_by_selection read their rows and release the cursor
      before the first write: no SQLite read lock is held while they write, WAL or not
    - clone() in LEGACY mode leaves already-inserted rows behind on failure; in
      ATOMIC mode the whole clone rolls back. Either way the triggering error propagates

Design Decisions:
    - Collaborators injected through the constructor (TaskStore / MetadataStore
      ports): no global container, in-memory fakes drop in for tests
    - WHERE injection delegated to core/query_template.merge_where so its quirks
      are tested in isolation
    - Clock injected: soft-delete stamps and placeholder resolution are deterministic
"""

import logging
from typing import Any, Callable, Iterable

from sqlalchemy import select

from taskdata.core import date_utils
from taskdata.core.domain_types import NO_ID, CloneMode, TaskId, TaskLifecycle
from taskdata.core.errors import ErrorContext, ResourceNotFoundError
from taskdata.core.perma_sql import replace_placeholders
from taskdata.core.ports import MetadataStore, TaskStore
from taskdata.core.query_template import merge_where
from taskdata.infrastructure.row_cursor import RowCursor
from taskdata.models.criteria import (
    MetadataCriteria, TaskCriteria, default_task_order, title_constraint,
)
from taskdata.models.metadata import Metadata, METADATA_PROPERTIES
from taskdata.models.task import Task, TASK_PROPERTIES
from taskdata.schemas.filter import Filter

logger = logging.getLogger(__name__)


class TaskService:
    """Service layer for task-centered activities."""

    def __init__(
        self,
        task_store: TaskStore,
        metadata_store: MetadataStore,
        clone_mode: CloneMode = CloneMode.LEGACY,
        clock: Callable[[], int] = date_utils.now,
    ):
        self._tasks = task_store
        self._metadata = metadata_store
        self._clone_mode = CloneMode.parse(clone_mode)
        self._clock = clock

    @property
    def clone_mode(self) -> CloneMode:
        return self._clone_mode

    # ─── Pass-through ────────────────────────────────────────────

    def query(self, statement: Any) -> RowCursor:
        """Run `statement` against the tasks store; caller releases the cursor."""
        return self._tasks.query(statement)

    def fetch_by_id(self, task_id: TaskId, *columns: Any) -> Task | None:
        """Task with the requested columns, or None if it doesn't exist."""
        return self._tasks.fetch(task_id, *columns)

    def save(self, task: Task) -> bool:
        return self._tasks.save(task)

    def set_complete(self, task: Task, completed: bool) -> bool:
        """Mark the task completed (now) or not completed (0) and save it."""
        task.completion_date = self._clock() if completed else 0
        return self._tasks.save(task)

    # ─── Filtered fetch & ordering ───────────────────────────────

    def fetch_filtered(
        self, query_template: str | None, constraint: str | None, *columns: Any,
    ) -> RowCursor:
        """Tasks selected by `query_template`, narrowed by a title search.

        query_template None → structured SELECT over the tasks table.
        constraint → UPPER(title) LIKE '%CONSTRAINT%' merged into the query.
        """
        columns = columns or TASK_PROPERTIES
        where_constraint = None
        if constraint is not None:
            where_constraint = title_constraint(str(constraint))

        if query_template is None:
            statement = select(*columns)
            if where_constraint is not None:
                statement = statement.where(where_constraint)
            return self._tasks.query(statement)

        predicate = None
        if where_constraint is not None:
            predicate = self._tasks.render(where_constraint)
        sql = merge_where(query_template, predicate)
        sql = replace_placeholders(sql, self._clock())
        return self._tasks.query_template(columns, sql)

    @staticmethod
    def default_task_order(now: int | None = None):
        """Ascending ordering by due date, importance and completion (see core/task_order)."""
        return default_task_order(now)

    # ─── Soft delete / purge / cleanup ───────────────────────────

    def delete(self, item: Task) -> None:
        """Soft-delete `item`, or purge it outright if it never had a title."""
        if not item.is_saved():
            return

        if item.contains_value("title") and item.title == "":
            self._tasks.delete(item.id)
            logger.info("Untitled task purged", extra={"task_id": item.id, "operation": "delete"})
            item.id = NO_ID
            return

        task_id = item.id
        item.clear()
        for key, value in Task.unset_values().items():
            setattr(item, key, value)
        item.id = task_id
        item.deletion_date = self._clock()
        self._tasks.save(item)
        logger.info("Task soft-deleted", extra={"task_id": task_id, "operation": "delete"})

    def lifecycle(self, task_id: TaskId) -> TaskLifecycle:
        """Where the task stands: PURGED once its row is gone."""
        task = self._tasks.fetch(task_id, Task.id, Task.deletion_date)
        if task is None:
            return TaskLifecycle.PURGED
        return task.lifecycle()

    def purge(self, task_id: TaskId) -> None:
        """Permanently delete the task row."""
        self._tasks.delete(task_id)
        logger.info("Task purged", extra={"task_id": task_id, "operation": "purge"})

    def cleanup(self) -> int:
        """Purge every task without a title; returns how many were removed."""
        statement = select(Task.id).where(TaskCriteria.has_no_title())
        with self._tasks.query(statement) as cursor:
            task_ids = [row.id for row in cursor]
        purged = 0
        for task_id in task_ids:
            self._tasks.delete(task_id)
            purged += 1
        logger.info("Cleanup finished", extra={"operation": "cleanup", "row_count": purged})
        return purged

    # ─── Clone ───────────────────────────────────────────────────

    def clone(self, task: Task) -> Task:
        """Copy the task row and all of its metadata under a new id."""
        if self._clone_mode is CloneMode.ATOMIC:
            with self._tasks.transaction():
                new_task = self._clone(task)
        else:
            new_task = self._clone(task)
        logger.info(
            "Task cloned",
            extra={
                "task_id": task.id, "new_task_id": new_task.id,
                "clone_mode": self._clone_mode.value, "operation": "clone",
            },
        )
        return new_task

    def _clone(self, task: Task) -> Task:
        new_task = self.fetch_by_id(task.id, *TASK_PROPERTIES)
        if new_task is None:
            raise ResourceNotFoundError(
                "Task", task.id, ErrorContext(task_id=task.id, operation="clone"),
            )
        new_task.clear_value("id")
        self._tasks.create_new(new_task)

        statement = select(*METADATA_PROPERTIES).where(
            MetadataCriteria.by_task(task.id),
        )
        with self._metadata.query(statement) as cursor:
            rows = [Metadata.from_row(row) for row in cursor]
        for metadata in rows:
            metadata.task_id = new_task.id
            metadata.clear_value("id")
            self._metadata.create_new(metadata)
        return new_task

    # ─── Bulk operations & counts ────────────────────────────────

    def count(self, statement: Any) -> int:
        """How many rows `statement` yields."""
        with self._tasks.query(statement) as cursor:
            return cursor.count()

    def count_tasks(self, task_filter: Filter | None = None) -> int:
        """Count all tasks, or the tasks selected by `task_filter`."""
        if task_filter is None:
            return self.count(select(Task.id))
        template = replace_placeholders(task_filter.sql_query, self._clock())
        with self._tasks.query_template([Task.id], template) as cursor:
            return cursor.count()

    def clear_details(self, criterion: Any) -> int:
        """Drop the cached details of matching tasks; returns affected rows."""
        return self._tasks.update_multiple({"details": None}, criterion)

    def update_by_selection(
        self,
        selection: str | None,
        selection_args: Iterable[Any] | None,
        task_values: Task,
    ) -> int:
        """Save `task_values` onto every task id the raw selection matches, one row at a time."""
        with self._tasks.raw_query(selection, selection_args, Task.id) as cursor:
            task_ids = [row.id for row in cursor]
        for task_id in task_ids:
            task_values.id = task_id
            self._tasks.save(task_values)
        matched = len(task_ids)
        logger.info(
            "Tasks updated by selection",
            extra={"operation": "update_by_selection", "row_count": matched},
        )
        return matched

    def delete_where(self, criterion: Any) -> int:
        """Hard-delete every task matching `criterion`."""
        return self._tasks.delete_where(criterion)
