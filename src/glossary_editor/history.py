"""Bounded undo/redo history of whole-collection snapshots."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections import deque
from collections.abc import Iterable

from glossary_editor import db as _db
from glossary_editor.models import Record
from glossary_editor.store import decode_records, encode_records

logger = logging.getLogger(__name__)

MAX_HISTORY = 50

Snapshot = tuple[Record, ...]


class HistoryManager:
    """Undo and redo stacks, persisted under one durable entry.

    Each stack keeps at most ``limit`` snapshots; pushing past the limit
    evicts the oldest. Records are immutable, so a tuple of them shares
    nothing mutable with the live collection.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        *,
        limit: int = MAX_HISTORY,
        key: str = _db.HISTORY_KEY,
    ) -> None:
        if limit < 1:
            raise ValueError(f"History limit must be positive, got {limit}")
        self._conn = conn
        self._key = key
        self.limit = limit
        self._undo: deque[Snapshot] = deque(maxlen=limit)
        self._redo: deque[Snapshot] = deque(maxlen=limit)
        self.last_write_ok = True

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def undo_snapshots(self) -> list[Snapshot]:
        """Undo stack, oldest first."""
        return list(self._undo)

    def redo_snapshots(self) -> list[Snapshot]:
        """Redo stack, oldest first."""
        return list(self._redo)

    def load(self) -> None:
        """Read both stacks; absent or malformed data gives empty stacks."""
        self._undo.clear()
        self._redo.clear()
        raw = _db.read_value(self._conn, self._key)
        if raw is None:
            return
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("history must be an object")
            undo = self._decode_stack(data.get("undo"))
            redo = self._decode_stack(data.get("redo"))
        except ValueError as e:
            logger.warning(f"Discarding corrupt history under {self._key!r}: {e}")
            return
        self._undo.extend(undo)
        self._redo.extend(redo)

    @staticmethod
    def _decode_stack(data: object) -> list[Snapshot]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError("history stack must be a list")
        return [decode_records(snapshot) for snapshot in data]

    def _persist(self) -> bool:
        payload = json.dumps(
            {
                "undo": [encode_records(s) for s in self._undo],
                "redo": [encode_records(s) for s in self._redo],
            },
            ensure_ascii=False,
        )
        self.last_write_ok = _db.write_value(self._conn, self._key, payload)
        return self.last_write_ok

    def record_undo_point(self, snapshot: Iterable[Record]) -> bool:
        """Push the pre-commit collection and invalidate redo."""
        self._undo.append(tuple(snapshot))
        self._redo.clear()
        return self._persist()

    def undo(self, current: Iterable[Record]) -> Snapshot | None:
        """Pop the latest undo snapshot, saving *current* for redo."""
        if not self._undo:
            return None
        snapshot = self._undo.pop()
        self._redo.append(tuple(current))
        self._persist()
        return snapshot

    def redo(self, current: Iterable[Record]) -> Snapshot | None:
        """Pop the latest redo snapshot, saving *current* for undo."""
        if not self._redo:
            return None
        snapshot = self._redo.pop()
        self._undo.append(tuple(current))
        self._persist()
        return snapshot

    def clear(self) -> bool:
        self._undo.clear()
        self._redo.clear()
        return self._persist()
