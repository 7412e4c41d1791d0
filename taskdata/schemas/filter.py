"""Filter — immutable, caller-supplied query template selecting a set of tasks.

Invariants:
    - Frozen: a Filter never changes after construction
    - sql_query may carry perma-sql placeholder tokens (core/perma_sql.py);
      they are resolved at query time, never at construction

Design Decisions:
    - Pydantic frozen model over a dataclass: validation + hashable value object
"""

from pydantic import BaseModel, ConfigDict, Field


class Filter(BaseModel):
    """A named query template."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    sql_query: str = Field(
        description="Full SELECT or clause suffix (WHERE ... ORDER BY ...)",
    )

    def __str__(self) -> str:
        return self.title or self.sql_query
