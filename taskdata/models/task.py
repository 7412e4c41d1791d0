"""Task ORM — the primary to-do entity.

Invariants:
    - id is an autoincrement int primary key; None or NO_ID means "unsaved"
    - title "" is a sentinel for "never had a real title" (cleanup purges it)
    - All timestamps are epoch milliseconds, 0 = unset
    - deletion_date != 0 means logically deleted; completion_date != 0 means
      complete; the two axes are independent

Design Decisions:
    - Every non-id column is nullable or defaulted so a soft-deleted row can be
      reduced to id + deletion_date
    - No relationship() to Metadata: metadata lifetime is managed explicitly by
      the service, never by ORM cascade
"""

from typing import Any

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskdata.core.domain_types import IMPORTANCE_NONE, TaskLifecycle
from taskdata.db.base import Base


class Task(Base):
    """Task entity — a to-do item with due/completion/deletion timestamps."""
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    importance: Mapped[int] = mapped_column(
        Integer, nullable=False, default=IMPORTANCE_NONE,
    )

    # Timestamps (epoch ms, 0 = unset)
    due_date: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    hide_until: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created_date: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    modified_date: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    completion_date: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    deletion_date: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    estimated_seconds: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    elapsed_seconds: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    recurrence: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Cached, recomputable rendering of per-task details
    details: Mapped[str | None] = mapped_column(Text, nullable=True)

    @classmethod
    def unset_values(cls) -> dict[str, Any]:
        """Every column but id and deletion_date at its unset value (default, else NULL)."""
        values = {}
        for column in cls.__table__.columns:
            if column.key in ("id", "deletion_date"):
                continue
            default = column.default
            values[column.key] = (
                default.arg if default is not None and default.is_scalar else None
            )
        return values

    def is_completed(self) -> bool:
        return bool(self.completion_date)

    def is_deleted(self) -> bool:
        return bool(self.deletion_date)

    def lifecycle(self) -> TaskLifecycle:
        """ACTIVE or SOFT_DELETED, read from deletion_date."""
        if self.is_deleted():
            return TaskLifecycle.SOFT_DELETED
        return TaskLifecycle.ACTIVE

    def __repr__(self) -> str:
        return f"Task(id={self.id!r}, title={self.title!r})"


TASK_PROPERTIES = (
    Task.id, Task.title, Task.importance,
    Task.due_date, Task.hide_until, Task.created_date, Task.modified_date,
    Task.completion_date, Task.deletion_date,
    Task.notes, Task.estimated_seconds, Task.elapsed_seconds,
    Task.recurrence, Task.details,
)
