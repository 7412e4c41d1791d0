"""Row Cursor — tests for scoped, forward-only row sequences.

Tests cover:
    - rows are produced once; the cursor is not restartable
    - count() and first()
    - close() is idempotent and releases exactly once
    - reading a closed cursor raises CursorClosedError
    - `with` releases on success and on exception
    - a release failure never masks the block's outcome
"""

import pytest

from taskdata.core.errors import CursorClosedError
from taskdata.infrastructure.row_cursor import RowCursor


class FakeResult:
    """Minimal stand-in for sqlalchemy Result: iterable once, closeable."""

    def __init__(self, rows):
        self._rows = iter(rows)
        self.close_calls = 0

    def __iter__(self):
        return self._rows

    def close(self):
        self.close_calls += 1


class Release:
    def __init__(self, error: Exception | None = None):
        self.calls = 0
        self.error = error

    def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error


def test_iterates_rows_once():
    cursor = RowCursor(FakeResult([1, 2, 3]))
    assert list(cursor) == [1, 2, 3]
    assert list(cursor) == []


def test_count_consumes_remaining_rows():
    cursor = RowCursor(FakeResult(["a", "b", "c"]))
    assert cursor.first() == "a"
    assert cursor.count() == 2


def test_first_on_empty_is_none():
    assert RowCursor(FakeResult([])).first() is None


def test_close_is_idempotent_and_releases_once():
    result, release = FakeResult([1]), Release()
    cursor = RowCursor(result, release=release)
    cursor.close()
    cursor.close()
    assert cursor.closed
    assert result.close_calls == 1
    assert release.calls == 1


def test_closed_cursor_cannot_be_read():
    cursor = RowCursor(FakeResult([1]))
    cursor.close()
    with pytest.raises(CursorClosedError):
        list(cursor)


def test_with_block_releases_on_success():
    release = Release()
    with RowCursor(FakeResult([1, 2]), release=release) as cursor:
        assert cursor.count() == 2
    assert cursor.closed
    assert release.calls == 1


def test_with_block_releases_on_exception():
    release = Release()
    with pytest.raises(ValueError):
        with RowCursor(FakeResult([1]), release=release):
            raise ValueError("boom")
    assert release.calls == 1


def test_release_failure_does_not_mask_primary_error():
    release = Release(RuntimeError("release failed"))
    with pytest.raises(ValueError, match="primary"):
        with RowCursor(FakeResult([1]), release=release):
            raise ValueError("primary")
    assert release.calls == 1


def test_release_failure_does_not_mask_success():
    release = Release(RuntimeError("release failed"))

    def count_rows():
        with RowCursor(FakeResult([1, 2, 3]), release=release) as cursor:
            return cursor.count()

    assert count_rows() == 3
    assert release.calls == 1


def test_release_runs_even_if_result_close_fails():
    class BrokenResult(FakeResult):
        def close(self):
            raise RuntimeError("close failed")

    release = Release()
    cursor = RowCursor(BrokenResult([]), release=release)
    with pytest.raises(RuntimeError):
        cursor.close()
    assert release.calls == 1
