"""Tests for the undo/redo history manager."""

import json

import pytest

from glossary_editor import Record, db
from glossary_editor.history import MAX_HISTORY, HistoryManager


def _snap(n):
    return (Record(f"w{n}", "", "d", "t", created_at=str(n)),)


@pytest.fixture
def conn():
    conn = db.connect(":memory:")
    db.init_db(conn)
    yield conn
    conn.close()


class TestUndoRedo:

    def test_empty(self, conn):
        history = HistoryManager(conn)
        assert not history.can_undo
        assert not history.can_redo
        assert history.undo(_snap(0)) is None
        assert history.redo(_snap(0)) is None

    def test_undo_returns_pre_commit_snapshot(self, conn):
        history = HistoryManager(conn)
        history.record_undo_point(_snap(1))
        assert history.undo(_snap(2)) == _snap(1)
        assert history.redo_depth == 1

    def test_redo_returns_undone_state(self, conn):
        history = HistoryManager(conn)
        history.record_undo_point(_snap(1))
        history.undo(_snap(2))
        assert history.redo(_snap(1)) == _snap(2)
        assert history.undo_depth == 1
        assert history.redo_depth == 0

    def test_new_point_clears_redo(self, conn):
        history = HistoryManager(conn)
        history.record_undo_point(_snap(1))
        history.undo(_snap(2))
        history.record_undo_point(_snap(1))
        assert not history.can_redo

    def test_limit_drops_oldest(self, conn):
        history = HistoryManager(conn, limit=3)
        for n in range(5):
            history.record_undo_point(_snap(n))
        assert history.undo_snapshots() == [_snap(2), _snap(3), _snap(4)]

    def test_default_limit(self, conn):
        assert MAX_HISTORY == 50
        history = HistoryManager(conn)
        for n in range(MAX_HISTORY + 5):
            history.record_undo_point(_snap(n))
        assert history.undo_depth == MAX_HISTORY

    def test_redo_limit(self, conn):
        history = HistoryManager(conn, limit=2)
        for n in range(4):
            history.record_undo_point(_snap(n))
        history.undo(_snap(10))
        history.undo(_snap(3))
        assert history.redo_depth == 2

    def test_invalid_limit(self, conn):
        with pytest.raises(ValueError):
            HistoryManager(conn, limit=0)

    def test_clear(self, conn):
        history = HistoryManager(conn)
        history.record_undo_point(_snap(1))
        history.undo(_snap(2))
        history.clear()
        assert history.undo_depth == history.redo_depth == 0


class TestPersistence:

    def test_reload(self, conn):
        history = HistoryManager(conn)
        history.record_undo_point(_snap(1))
        history.record_undo_point(_snap(2))
        history.undo(_snap(3))

        other = HistoryManager(conn)
        other.load()
        assert other.undo_snapshots() == [_snap(1)]
        assert other.redo_snapshots() == [_snap(3)]

    def test_loaded_history_trimmed_to_limit(self, conn):
        history = HistoryManager(conn, limit=10)
        for n in range(10):
            history.record_undo_point(_snap(n))

        small = HistoryManager(conn, limit=4)
        small.load()
        assert small.undo_snapshots() == [_snap(n) for n in range(6, 10)]

    @pytest.mark.parametrize("payload", [
        "not json",
        json.dumps([1, 2]),
        json.dumps({"undo": "x"}),
        json.dumps({"undo": [[{"sense": "no word"}]]}),
    ])
    def test_corrupt_history_loads_empty(self, conn, payload):
        history = HistoryManager(conn)
        history.record_undo_point(_snap(9))
        db.write_value(conn, db.HISTORY_KEY, payload)
        history.load()
        assert history.undo_depth == 0
        assert history.redo_depth == 0

    def test_write_failure_keeps_memory_state(self, conn):
        history = HistoryManager(conn)
        conn.execute("PRAGMA query_only = ON")
        assert history.record_undo_point(_snap(1)) is False
        assert history.last_write_ok is False
        assert history.can_undo
