"""Row Cursor — scoped, forward-only sequence of rows over one query result.

Invariants:
    - Rows are produced lazily and only once (not restartable)
    - close() is idempotent and always releases the owning session when one was given
    - Leaving a `with` block releases the cursor on every exit path
    - A failure while releasing never replaces the block's own result or exception

Design Decisions:
    - Context manager over manual close-in-finally: call sites cannot forget release
    - count() consumes rows instead of issuing COUNT(*): it counts exactly what the
      caller's statement yields, templates included
"""

import logging
from typing import Callable, Iterator

from sqlalchemy.engine import Result, Row

from taskdata.core.errors import CursorClosedError

logger = logging.getLogger(__name__)


class RowCursor:
    """Forward-only, closeable sequence of rows."""

    def __init__(self, result: Result, release: Callable[[], None] | None = None):
        self._result = result
        self._release = release
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[Row]:
        if self._closed:
            raise CursorClosedError()
        for row in self._result:
            yield row

    def first(self) -> Row | None:
        """Next row, or None when the sequence is exhausted."""
        return next(iter(self), None)

    def count(self) -> int:
        """Consume the remaining rows and return how many there were."""
        return sum(1 for _ in self)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._result.close()
        finally:
            if self._release is not None:
                self._release()

    def __enter__(self) -> "RowCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            self.close()
        except Exception:
            logger.warning(
                "Row cursor release failed (primary outcome kept: %s)",
                exc_type.__name__ if exc_type else "success",
                exc_info=True,
            )
        return False
