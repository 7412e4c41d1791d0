"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Task is the owner; Metadata rows point at it by task_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata knows every table before
      create_all runs
"""

from taskdata.models.task import Task, TASK_PROPERTIES  # noqa: F401
from taskdata.models.metadata import Metadata, METADATA_PROPERTIES  # noqa: F401
