"""Metadata ORM — key/value records attached to a task.

Invariants:
    - Always points at a task (task_id FK); the task must exist at creation
    - Soft-deleting a task leaves its metadata rows in place
    - value1..value3 are opaque to this layer; `key` says how to read them
"""

from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskdata.db.base import Base


class Metadata(Base):
    """Metadata entity — one key/value payload owned by a task."""
    __tablename__ = "metadata"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tasks.id"), nullable=False, index=True,
    )
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    value1: Mapped[str | None] = mapped_column(Text, nullable=True)
    value2: Mapped[str | None] = mapped_column(Text, nullable=True)
    value3: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_date: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"Metadata(id={self.id!r}, task_id={self.task_id!r}, key={self.key!r})"


METADATA_PROPERTIES = (
    Metadata.id, Metadata.task_id, Metadata.key,
    Metadata.value1, Metadata.value2, Metadata.value3,
    Metadata.created_date,
)
