"""Criteria — reusable SQLAlchemy predicates and orderings over the ORM models.

Invariants:
    - Every function returns an unexecuted SQL expression (no I/O)
    - default_task_order mirrors core/task_order.task_order_score term for term

Design Decisions:
    - Static-method namespaces (TaskCriteria.has_no_title()) read like the call
      sites that use them; expressions stay composable with and_/or_
"""

from sqlalchemy import and_, case, func, or_
from sqlalchemy.sql.expression import ColumnElement, UnaryExpression

from taskdata.core import date_utils
from taskdata.core.task_order import (
    ORDER_COMPLETION_WEIGHT, ORDER_IMPORTANCE_WEIGHT, UNDATED_OFFSET,
)
from taskdata.models.metadata import Metadata
from taskdata.models.task import Task


class TaskCriteria:
    """Predicates over the tasks table."""

    @staticmethod
    def by_id(task_id: int) -> ColumnElement[bool]:
        return Task.id == task_id

    @staticmethod
    def has_no_title() -> ColumnElement[bool]:
        return or_(Task.title.is_(None), Task.title == "")

    @staticmethod
    def is_active() -> ColumnElement[bool]:
        return and_(Task.completion_date == 0, Task.deletion_date == 0)

    @staticmethod
    def completed() -> ColumnElement[bool]:
        return Task.completion_date > 0

    @staticmethod
    def is_deleted() -> ColumnElement[bool]:
        return Task.deletion_date > 0


class MetadataCriteria:
    """Predicates over the metadata table."""

    @staticmethod
    def by_task(task_id: int) -> ColumnElement[bool]:
        return Metadata.task_id == task_id

    @staticmethod
    def by_task_and_key(task_id: int, key: str) -> ColumnElement[bool]:
        return and_(Metadata.task_id == task_id, Metadata.key == key)


def title_constraint(constraint: str) -> ColumnElement[bool]:
    """Case-insensitive substring match on the title: UPPER(title) LIKE '%CONSTRAINT%'.

    LIKE wildcards inside `constraint` are not escaped.
    """
    return func.upper(Task.title).like(f"%{constraint.upper()}%")


def default_task_order(now: int | None = None) -> UnaryExpression:
    """Ascending order by the composite due/importance/completion score."""
    if now is None:
        now = date_utils.now()
    effective_due = case(
        (Task.due_date == 0, now + UNDATED_OFFSET), else_=Task.due_date,
    )
    return (
        effective_due
        + ORDER_IMPORTANCE_WEIGHT * Task.importance
        + ORDER_COMPLETION_WEIGHT * Task.completion_date
    ).asc()
