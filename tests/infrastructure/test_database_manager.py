"""Database Session Manager — tests for units of work, transactions and error mapping.

Tests cover:
    - session() commits on success, rolls back on exception
    - SQLAlchemy failures surface as DatabaseError (chained)
    - transaction() makes nested sessions one all-or-nothing unit
    - stream() returns a RowCursor that sees committed rows
    - raw SQL strings bypass bind-parameter parsing
    - health_check; drop_all / create_all
"""

import pytest
from sqlalchemy import func, insert, select
from sqlalchemy.exc import IntegrityError, OperationalError

from taskdata.core.errors import DatabaseError
from taskdata.infrastructure.row_cursor import RowCursor
from taskdata.models.task import Task

TASKS = Task.__table__


def _count(db) -> int:
    with db.stream(select(func.count()).select_from(TASKS)) as cursor:
        return cursor.first()[0]


def test_session_commits_on_success(db):
    with db.session() as s:
        s.execute(insert(TASKS).values(title="a"))
    assert _count(db) == 1


def test_session_rolls_back_on_exception(db):
    with pytest.raises(RuntimeError):
        with db.session() as s:
            s.execute(insert(TASKS).values(title="a"))
            raise RuntimeError("abort")
    assert _count(db) == 0


def test_integrity_error_mapped_to_database_error(db):
    with db.session() as s:
        s.execute(insert(TASKS).values(id=1, title="a"))
    with pytest.raises(DatabaseError) as excinfo:
        with db.session() as s:
            s.execute(insert(TASKS).values(id=1, title="b"))
    assert excinfo.value.operation == "commit"
    assert isinstance(excinfo.value.__cause__, IntegrityError)


def test_malformed_sql_surfaces_as_database_error(db):
    with pytest.raises(DatabaseError) as excinfo:
        db.stream("SELECT FROM WHERE")
    assert excinfo.value.operation == "execute"
    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert excinfo.value.context.statement == "SELECT FROM WHERE"


def test_transaction_commits_nested_sessions_once(db):
    with db.transaction():
        with db.session() as s:
            s.execute(insert(TASKS).values(title="a"))
        with db.session() as s:
            s.execute(insert(TASKS).values(title="b"))
        assert db.in_transaction
    assert not db.in_transaction
    assert _count(db) == 2


def test_transaction_rolls_back_every_nested_session(db):
    with pytest.raises(RuntimeError):
        with db.transaction():
            with db.session() as s:
                s.execute(insert(TASKS).values(title="a"))
            raise RuntimeError("abort")
    assert not db.in_transaction
    assert _count(db) == 0


def test_stream_inside_transaction_sees_uncommitted_rows(db):
    with db.transaction():
        with db.session() as s:
            s.execute(insert(TASKS).values(title="a"))
        with db.stream(select(TASKS.c.title)) as cursor:
            assert [row.title for row in cursor] == ["a"]


def test_stream_returns_row_cursor(db):
    cursor = db.stream(select(TASKS.c.id))
    assert isinstance(cursor, RowCursor)
    cursor.close()
    assert cursor.closed


def test_raw_sql_keeps_colons_and_percent_literal(db):
    with db.session() as s:
        s.execute(insert(TASKS).values(title="at 10:30 100%"))
    with db.stream("SELECT title FROM tasks WHERE title LIKE '%10:30%'") as cursor:
        assert [row.title for row in cursor] == ["at 10:30 100%"]


def test_raw_sql_binds_positional_args(db):
    with db.session() as s:
        s.execute(insert(TASKS).values(title="a", importance=1))
        s.execute(insert(TASKS).values(title="b", importance=2))
    with db.stream("SELECT title FROM tasks WHERE importance = ?", [2]) as cursor:
        assert [row.title for row in cursor] == ["b"]


def test_health_check(db):
    assert db.health_check() is True


def test_drop_all_then_create_all(db):
    with db.session() as s:
        s.execute(insert(TASKS).values(title="a"))
    db.drop_all()
    with pytest.raises(DatabaseError):
        _count(db)
    db.create_all()
    assert _count(db) == 0
