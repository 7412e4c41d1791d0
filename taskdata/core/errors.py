"""Error Hierarchy — typed, categorized exceptions for all taskdata failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Lookup misses are NOT errors at the repository level (fetch returns None);
      ResourceNotFoundError is raised only where an operation cannot proceed
    - DatabaseError always chains the original SQLAlchemy exception and, when the
      driver reported one, carries the failing SQL text in its context

Design Decisions:
    - Single hierarchy with TaskDataError base: callers can catch one type
    - ErrorContext as dataclass: rich observability without coupling to logging;
      to_dict() lists only the context fields that were actually set
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any
from datetime import datetime, timezone

MAX_STATEMENT_CHARS = 500


class ErrorSeverity(str, Enum):
    """How bad it is for the caller."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Which layer the failure comes from."""
    RESOURCE_NOT_FOUND = "resource_not_found"
    CURSOR_STATE = "cursor_state"
    STORAGE = "storage"


@dataclass
class ErrorContext:
    """Where the failure happened: task/metadata ids, operation, SQL."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    task_id: int | None = None
    metadata_id: int | None = None
    operation: str | None = None
    statement: str | None = None
    debug_info: dict[str, Any] | None = None

    def __post_init__(self):
        if self.statement is not None and len(self.statement) > MAX_STATEMENT_CHARS:
            self.statement = self.statement[:MAX_STATEMENT_CHARS] + "..."

    def set_fields(self) -> dict[str, Any]:
        """Context fields other than the timestamp that hold a value."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "timestamp" and getattr(self, f.name) is not None
        }


class TaskDataError(Exception):
    """Base exception for all taskdata errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Error envelope for callers that report failures as data."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": self.context.set_fields(),
            }
        }


# ─── Domain Errors ───────────────────────────────────────────────

class ResourceNotFoundError(TaskDataError):
    """A task (or metadata row) an operation depends on does not exist."""
    def __init__(
        self, resource_type: str, resource_id: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class CursorClosedError(TaskDataError):
    """A row cursor was read after being released."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Row cursor is closed; it cannot be iterated or restarted.",
            "CURSOR_CLOSED", ErrorCategory.CURSOR_STATE,
            ErrorSeverity.WARNING, context,
        )


# ─── Storage Errors ──────────────────────────────────────────────

class DatabaseError(TaskDataError):
    """A unit of work failed in the database and was rolled back."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation
