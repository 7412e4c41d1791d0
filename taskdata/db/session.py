"""Engine & Session Factory — builds configured engines for direct usage.

Invariants:
    - SQLite connections get WAL journaling when enabled
    - SQLite foreign-key enforcement stays at its default (OFF): purging a task
      must not be blocked by metadata rows still pointing at it
    - Sessions never expire attributes on commit

Design Decisions:
    - WAL on SQLite: an open row cursor (reader) must not block the writes that
      clone / cleanup / update_by_selection issue while iterating it
    - Pragmas set from a "connect" event so every pooled connection gets them
"""

import contextlib

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker


def create_db_engine(
    database_url: str, echo: bool = False, sqlite_wal: bool = True, **kwargs,
) -> Engine:
    """Create an engine; SQLite URLs get connection pragmas installed."""
    engine = create_engine(database_url, echo=echo, **kwargs)
    if engine.dialect.name == "sqlite" and sqlite_wal:
        _install_wal_pragma(engine)
    return engine


def _install_wal_pragma(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _configure(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            # in-memory databases keep their own journal mode
            with contextlib.suppress(Exception):
                cursor.execute("PRAGMA journal_mode=WAL")
        finally:
            cursor.close()


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to `engine`."""
    return sessionmaker(engine, class_=Session, expire_on_commit=False)
