"""Domain Types — identity types, sentinels and enums shared across the package.

Invariants:
    - TaskId and MetadataId wrap ints; NO_ID marks an unsaved model
    - Importance is an int in [IMPORTANCE_DO_NOW, IMPORTANCE_NONE]; lower sorts first
    - All valid states encoded as Enums, never raw strings

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: settings and log records serialize without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TaskId = NewType("TaskId", int)
MetadataId = NewType("MetadataId", int)

NO_ID: int = 0


# ─── Importance ──────────────────────────────────────────────────

IMPORTANCE_DO_NOW: int = 0
IMPORTANCE_MUST_DO: int = 1
IMPORTANCE_SHOULD_DO: int = 2
IMPORTANCE_NONE: int = 3


# ─── Enums ───────────────────────────────────────────────────────

class CloneMode(str, Enum):
    """What clone() does when a metadata insert fails mid-loop."""
    LEGACY = "legacy"   # already-inserted rows stay
    ATOMIC = "atomic"   # whole clone rolled back

    @classmethod
    def parse(cls, value: "CloneMode | str") -> "CloneMode":
        """Accept LEGACY / Atomic / legacy alike."""
        if isinstance(value, str):
            value = value.strip().lower()
        return cls(value)


class TaskLifecycle(str, Enum):
    """Task deletion states — derived from the row, never stored."""
    ACTIVE = "active"
    SOFT_DELETED = "soft_deleted"
    PURGED = "purged"
