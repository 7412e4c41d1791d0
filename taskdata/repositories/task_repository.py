"""Task Repository — SQLAlchemy-backed persistence for Task rows.

Invariants:
    - fetch() returns None for a missing id, never an empty Task
    - save() writes only the task's set values; an unsaved task is inserted
    - create_new() assigns the new id to the task after the insert
    - Save listeners run once per successful save/create_new, after the write
    - delete()/delete_where() on non-matching rows are no-ops (return False / 0)

Design Decisions:
    - Core table statements (insert/update/delete on Task.__table__) over ORM
      unit-of-work: tasks are detached value carriers, a template task may be
      saved under many ids in a row
    - created_date/modified_date stamped only when the caller did not set them
"""

import logging
from typing import Any, Iterable, Sequence

from sqlalchemy import delete, insert, select, update

from taskdata.core import date_utils
from taskdata.core.domain_types import TaskId
from taskdata.core.ports import SaveListener
from taskdata.core.query_template import build_templated_query
from taskdata.infrastructure.database import DatabaseSessionManager
from taskdata.infrastructure.row_cursor import RowCursor
from taskdata.models.criteria import TaskCriteria
from taskdata.models.task import Task, TASK_PROPERTIES

logger = logging.getLogger(__name__)


class TaskRepository:
    """Reads and writes the tasks table."""

    def __init__(self, db: DatabaseSessionManager, clock=date_utils.now):
        self._db = db
        self._clock = clock
        self._save_listeners: list[SaveListener] = []

    # ─── Listeners ───────────────────────────────────────────────

    def add_save_listener(self, listener: SaveListener) -> None:
        self._save_listeners.append(listener)

    def remove_save_listener(self, listener: SaveListener) -> None:
        self._save_listeners.remove(listener)

    def _notify(self, task: Task, is_new: bool) -> None:
        for listener in self._save_listeners:
            listener(task, is_new)

    # ─── Reads ───────────────────────────────────────────────────

    def query(self, statement: Any) -> RowCursor:
        return self._db.stream(statement)

    def query_template(self, columns: Sequence[Any], template: str) -> RowCursor:
        """Run a raw template; clause suffixes are prefixed with SELECT <columns> FROM tasks."""
        names = [f"{Task.__tablename__}.{c.key}" for c in (columns or TASK_PROPERTIES)]
        return self._db.stream(
            build_templated_query(names, Task.__tablename__, template),
        )

    def raw_query(
        self,
        selection: str | None,
        selection_args: Iterable[Any] | None,
        *columns: Any,
    ) -> RowCursor:
        """SELECT <columns> FROM tasks WHERE <selection>, binding `?` from selection_args."""
        names = ", ".join(c.key for c in (columns or (Task.id,)))
        sql = f"SELECT {names} FROM {Task.__tablename__}"
        if selection:
            sql += f" WHERE {selection}"
        return self._db.stream(sql, list(selection_args or ()))

    def fetch(self, task_id: TaskId, *columns: Any) -> Task | None:
        """Task with the given columns loaded, or None if it doesn't exist."""
        statement = select(*(columns or TASK_PROPERTIES)).where(
            TaskCriteria.by_id(task_id),
        )
        with self.query(statement) as cursor:
            row = cursor.first()
        return Task.from_row(row) if row is not None else None

    def render(self, clause: Any) -> str:
        """Render an expression to SQL text for splicing into a raw template."""
        return str(clause.compile(
            dialect=self._db.engine.dialect,
            compile_kwargs={"literal_binds": True},
        ))

    # ─── Writes ──────────────────────────────────────────────────

    def transaction(self):
        return self._db.transaction()

    def create_new(self, task: Task) -> bool:
        """Insert `task` as a new row (any id it carries is ignored)."""
        now = self._clock()
        if not task.contains_value("created_date"):
            task.created_date = now
        if not task.contains_value("modified_date"):
            task.modified_date = now
        values = task.set_values()
        values.pop("id", None)

        with self._db.session() as db:
            result = db.execute(insert(Task.__table__).values(**values))
            new_id = result.inserted_primary_key[0]
        task.id = new_id
        logger.debug("Task created", extra={"task_id": new_id})
        self._notify(task, True)
        return True

    def save(self, task: Task) -> bool:
        """Insert an unsaved task, otherwise update the row with its set values."""
        if not task.is_saved():
            return self.create_new(task)

        if not task.contains_value("modified_date"):
            task.modified_date = self._clock()
        values = task.set_values()
        values.pop("id")

        with self._db.session() as db:
            result = db.execute(
                update(Task.__table__)
                .where(Task.__table__.c.id == task.id)
                .values(**values)
            )
            saved = result.rowcount > 0
        if saved:
            self._notify(task, False)
        return saved

    def delete(self, task_id: TaskId) -> bool:
        with self._db.session() as db:
            result = db.execute(
                delete(Task.__table__).where(Task.__table__.c.id == task_id),
            )
            return result.rowcount > 0

    def update_multiple(self, values: dict[str, Any], criterion: Any) -> int:
        """Apply `values` to every row matching `criterion`; returns affected rows."""
        with self._db.session() as db:
            result = db.execute(
                update(Task.__table__).where(criterion).values(**values),
            )
            return result.rowcount

    def delete_where(self, criterion: Any) -> int:
        with self._db.session() as db:
            result = db.execute(delete(Task.__table__).where(criterion))
            return result.rowcount
