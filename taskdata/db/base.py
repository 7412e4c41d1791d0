"""SQLAlchemy Declarative Base — shared base class for all ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata
    - Models are detached value carriers: "set values" are exactly the column
      attributes present in the instance dict (assigned or loaded), never defaults

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - Set-value tracking reuses SQLAlchemy instance state instead of a parallel
      dict: `del model.attr` un-sets a value, a fresh model has none
"""

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase

from taskdata.core.domain_types import NO_ID


class Base(DeclarativeBase):
    """Base class for all taskdata ORM models."""

    @classmethod
    def column_keys(cls) -> list[str]:
        return [attr.key for attr in cls.__mapper__.column_attrs]

    @classmethod
    def from_row(cls, row: Any):
        """Build a model holding exactly the columns present in `row`."""
        keys = set(cls.column_keys())
        return cls(**{k: v for k, v in row._mapping.items() if k in keys})

    def set_values(self) -> dict[str, Any]:
        """Column values explicitly held by this instance."""
        state = inspect(self).dict
        return {key: state[key] for key in self.column_keys() if key in state}

    def contains_value(self, key: str) -> bool:
        return key in inspect(self).dict

    def clear_value(self, key: str) -> None:
        if self.contains_value(key):
            delattr(self, key)

    def clear(self) -> None:
        for key in list(self.set_values()):
            delattr(self, key)

    def is_saved(self) -> bool:
        return self.id is not None and self.id != NO_ID
