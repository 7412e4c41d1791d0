"""Structured Logging — JSON and key=value formatters for the taskdata loggers.

Invariants:
    - Every record carries timestamp, level, logger name and message
    - Known extras (task id, operation, row count, clone mode, error code) are
      surfaced when present and not None; anything else passed via `extra` is dropped
    - setup_logging() is idempotent: calling it again replaces its own handler
      instead of stacking a second one

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - Handler installed on the "taskdata" package logger, not the root logger:
      a host application keeps control of its own logging tree
    - Timestamps come from the record (record.created), not from format time
"""

import logging
import json
from datetime import datetime, timezone


PACKAGE_LOGGER = "taskdata"

EXTRA_FIELDS = (
    "task_id", "new_task_id", "operation", "error_code", "row_count", "clone_mode",
)


def record_extras(record: logging.LogRecord) -> dict:
    """Known extra fields set on `record`, in EXTRA_FIELDS order."""
    extras = {}
    for key in EXTRA_FIELDS:
        val = record.__dict__.get(key)
        if val is not None:
            extras[key] = val
    return extras


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class KeyValueFormatter(logging.Formatter):
    """Human-readable line with the known extras appended as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if not extras:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in extras.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the taskdata handler (json | text) at `level`; returns the handler."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if getattr(existing, "_taskdata_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler()
    handler._taskdata_handler = True
    handler.setFormatter(JSONFormatter() if fmt == "json" else KeyValueFormatter())
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
