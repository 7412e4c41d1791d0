"""Database Session Manager — sync sessions with automatic rollback and error mapping.

Invariants:
    - Every unit of work commits on success and rolls back on exception
      (no partial commits leak)
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py)
    - Inside transaction(), session() and stream() join the open session:
      nested units only flush, the outer boundary commits or rolls back once
    - stream() hands the session's lifetime to the RowCursor it returns

Design Decisions:
    - Explicit manager instance passed to repositories (no module-level singleton):
      tests build one per temporary database
    - Raw SQL strings run through exec_driver_sql: template text reaches the DBAPI
      untouched (no ":name" bind parsing)
    - Single-threaded by contract: the open transaction is plain instance state
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import text
from sqlalchemy.sql.expression import Executable
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.orm import Session

from taskdata.core.errors import DatabaseError, ErrorContext
from taskdata.db.base import Base
from taskdata.db.session import create_db_engine, create_session_factory
from taskdata.infrastructure.row_cursor import RowCursor

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages database sessions with rollback, error mapping and row streaming."""

    def __init__(
        self, database_url: str, echo: bool = False, sqlite_wal: bool = True,
        **engine_kwargs,
    ):
        self.engine = create_db_engine(
            database_url, echo=echo, sqlite_wal=sqlite_wal, **engine_kwargs,
        )
        self._session_factory = create_session_factory(self.engine)
        self._active: Session | None = None

    @property
    def in_transaction(self) -> bool:
        return self._active is not None

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a unit-of-work session: commit on success, rollback on exception."""
        if self._active is not None:
            yield self._active
            self._active.flush()
            return
        session = self._session_factory()
        try:
            with _rollback_on_error(session):
                yield session
                session.commit()
        finally:
            session.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Open one boundary that every nested session()/stream() joins."""
        if self._active is not None:
            yield self._active
            return
        session = self._session_factory()
        self._active = session
        try:
            with _rollback_on_error(session):
                yield session
                session.commit()
        finally:
            self._active = None
            session.close()

    def stream(
        self, statement: Executable | str, params: Any = None,
    ) -> RowCursor:
        """Execute a row-returning statement; the caller must release the cursor."""
        if self._active is not None:
            return RowCursor(_execute(self._active, statement, params))
        session = self._session_factory()
        try:
            with _rollback_on_error(session):
                result = _execute(session, statement, params)
        except BaseException:
            session.close()
            raise
        return RowCursor(result, release=session.close)

    def create_all(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            with self.session() as db:
                db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False


def _execute(session: Session, statement: Executable | str, params: Any = None):
    if isinstance(statement, str):
        connection = session.connection()
        if params:
            return connection.exec_driver_sql(statement, tuple(params))
        return connection.exec_driver_sql(statement)
    if params:
        return session.execute(statement, params)
    return session.execute(statement)


def _context(operation: str, error: SQLAlchemyError) -> ErrorContext:
    return ErrorContext(operation=operation, statement=getattr(error, "statement", None))


@contextmanager
def _rollback_on_error(session: Session) -> Iterator[None]:
    try:
        yield
    except IntegrityError as e:
        session.rollback()
        logger.error(f"DB integrity error: {e}", extra={"error_code": "DATABASE_ERROR"})
        raise DatabaseError(
            "Integrity constraint violated", "commit", _context("commit", e),
        ) from e
    except OperationalError as e:
        session.rollback()
        logger.error(f"DB operational error: {e}", extra={"error_code": "DATABASE_ERROR"})
        raise DatabaseError(
            "Connection or operational error", "execute", _context("execute", e),
        ) from e
    except DBAPIError as e:
        session.rollback()
        logger.error(f"DB driver error: {e}", extra={"error_code": "DATABASE_ERROR"})
        raise DatabaseError(
            "Database driver error", "query", _context("query", e),
        ) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"SQLAlchemy error: {e}", extra={"error_code": "DATABASE_ERROR"})
        raise DatabaseError(
            "Database operation failed", "unknown", _context("unknown", e),
        ) from e
    except BaseException:
        session.rollback()
        raise
