"""GlossaryEditor — main entry point for the glossary-editor library."""

from __future__ import annotations

import functools
import logging
import sqlite3
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, TypeVar

from glossary_editor import db as _db
from glossary_editor import exporter as _exp
from glossary_editor.exceptions import EditModeError
from glossary_editor.filters import domain_options, filter_records
from glossary_editor.history import MAX_HISTORY, HistoryManager
from glossary_editor.identity import RowKey, find_index
from glossary_editor.lookup import LookupResult, records_from_lookup
from glossary_editor.models import (
    ChangeEvent,
    ChangeKind,
    CommitResult,
    EditorMode,
    FieldName,
    FieldValidation,
    Record,
    ValidationResult,
)
from glossary_editor.staging import EditStager
from glossary_editor.store import RecordStore
from glossary_editor.validator import validate_collection, validate_field

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])

Listener = Callable[[ChangeEvent], None]


def _exclusive(method: _F) -> _F:
    """Decorator: run the method under the editor's lock."""

    @functools.wraps(method)
    def wrapper(self: GlossaryEditor, *args: Any, **kwargs: Any) -> Any:
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class GlossaryEditor:
    """Staged editing, undo and redo over a locally persisted glossary.

    The editor is either viewing or editing. Cell edits are validated and
    staged while editing; :meth:`commit` applies them all as one snapshot
    and records an undo point. Anything that replaces the whole collection
    (undo, redo, append, clear) drops staged edits first, since their row
    identities may no longer resolve.
    """

    def __init__(
        self,
        db_path: str | Path = ":memory:",
        *,
        history_limit: int = MAX_HISTORY,
    ) -> None:
        self._db_path = str(db_path)
        self._storage_ok = True
        self._conn = _db.connect(db_path)
        try:
            _db.check_schema_version(self._conn)
            _db.init_db(self._conn)
        except sqlite3.DatabaseError as e:
            # Leave the unreadable file untouched; nothing is saved this session.
            logger.warning(f"Cannot use {self._db_path!r} ({e}); starting empty in memory")
            self._conn.close()
            self._conn = _db.connect(":memory:")
            _db.init_db(self._conn)
            self._storage_ok = False
        self._store = RecordStore(self._conn)
        self._store.load()
        self._history = HistoryManager(self._conn, limit=history_limit)
        self._history.load()
        self._stager = EditStager()
        self._mode = EditorMode.VIEWING
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> GlossaryEditor:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def mode(self) -> EditorMode:
        return self._mode

    @property
    def records(self) -> tuple[Record, ...]:
        return self._store.records

    def get_collection(self) -> tuple[Record, ...]:
        """Read-only snapshot for rendering and export."""
        return self._store.records

    @property
    def pending(self) -> dict[RowKey, dict[FieldName, str]]:
        return self._stager.pending

    def has_pending(self) -> bool:
        return self._stager.has_pending()

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def undo_depth(self) -> int:
        return self._history.undo_depth

    @property
    def redo_depth(self) -> int:
        return self._history.redo_depth

    @property
    def last_storage_ok(self) -> bool:
        """False if the most recent durable write was rejected, or if the
        database file could not be opened and the editor runs in memory."""
        return (
            self._storage_ok
            and self._store.last_write_ok
            and self._history.last_write_ok
        )

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners = [cb for cb in self._listeners if cb != listener]

    def _notify(self, kind: ChangeKind) -> None:
        event = ChangeEvent(kind=kind, records=self._store.records)
        for listener in list(self._listeners):
            listener(event)

    # ------------------------------------------------------------------
    # Edit mode
    # ------------------------------------------------------------------

    @_exclusive
    def enable_editing(self) -> None:
        if self._mode is EditorMode.EDITING:
            return
        self._mode = EditorMode.EDITING
        logger.debug("Edit mode on")
        self._notify(ChangeKind.MODE)

    @_exclusive
    def finish_editing(self, *, commit: bool = False) -> CommitResult | None:
        """Leave edit mode, committing or dropping staged edits."""
        if commit:
            return self.commit()
        self._stager.clear()
        if self._mode is EditorMode.EDITING:
            self._mode = EditorMode.VIEWING
            logger.debug("Edit mode off, staged edits dropped")
            self._notify(ChangeKind.MODE)
        return None

    @_exclusive
    def toggle_editing(self) -> EditorMode:
        if self._mode is EditorMode.EDITING:
            self.finish_editing()
        else:
            self.enable_editing()
        return self._mode

    # ------------------------------------------------------------------
    # Staging
    # ------------------------------------------------------------------

    @_exclusive
    def stage_cell(
        self,
        key: RowKey,
        field: FieldName | str,
        raw: str | None,
    ) -> FieldValidation:
        """Validate a cell edit and stage it.

        A rejected value leaves data and staged edits untouched; the result
        carries the reason. A row that no longer exists is ignored.

        Raises:
            EditModeError: if the editor is not in edit mode.
            InvalidFieldError: if *field* is not a record field.
        """
        if self._mode is not EditorMode.EDITING:
            raise EditModeError("Cells can only be edited in edit mode")
        result = validate_field(field, raw)
        if not result.accepted:
            logger.debug(f"Rejected {FieldName(field).value} edit: {result.reason}")
            return result
        records = self._store.records
        idx = find_index(records, key)
        if idx is None:
            logger.debug(f"Ignoring edit to stale row {key.word!r}/{key.sense!r}")
            return result
        before = self._stager.pending_value(key, field)
        self._stager.stage(key, field, result.value, records[idx].get(field))
        if self._stager.pending_value(key, field) != before:
            self._notify(ChangeKind.STAGE)
        return result

    @_exclusive
    def pending_value(self, key: RowKey, field: FieldName | str) -> str | None:
        return self._stager.pending_value(key, field)

    @_exclusive
    def unstage_cell(self, key: RowKey, field: FieldName | str) -> None:
        if self._stager.pending_value(key, field) is None:
            return
        self._stager.unstage(key, field)
        self._notify(ChangeKind.STAGE)

    @_exclusive
    def discard(self) -> None:
        """Drop staged edits without applying them."""
        if not self._stager.has_pending():
            return
        self._stager.clear()
        self._notify(ChangeKind.DISCARD)

    @_exclusive
    def commit(self) -> CommitResult:
        """Apply all staged edits as one snapshot and return to viewing.

        Rows that no longer resolve are skipped. An undo point is recorded
        only when at least one row changed.
        """
        staged = len(self._stager)
        was_editing = self._mode is EditorMode.EDITING
        self._mode = EditorMode.VIEWING
        if not staged:
            if was_editing:
                self._notify(ChangeKind.MODE)
            return CommitResult(applied=0, staged=0, persisted=True)

        before = self._store.records
        after, applied = self._stager.commit(before)
        persisted = True
        if applied:
            persisted = self._store.replace_all(after)
            persisted = self._history.record_undo_point(before) and persisted
            logger.info(f"Committed {staged} staged cell(s) across {applied} row(s)")
        else:
            # Nothing changed, so no undo point: it would restore an
            # identical collection.
            logger.warning(f"Commit applied nothing: {staged} staged cell(s) were stale")
        self._notify(ChangeKind.COMMIT)
        return CommitResult(applied=applied, staged=staged, persisted=persisted)

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------

    @_exclusive
    def undo(self) -> tuple[Record, ...] | None:
        """Restore the collection as it was before the last commit."""
        dropped = self._drop_pending()
        snapshot = self._history.undo(self._store.records)
        if snapshot is None:
            if dropped:
                self._notify(ChangeKind.DISCARD)
            return None
        self._store.replace_all(snapshot)
        logger.info(f"Undo: {len(snapshot)} record(s), {self.undo_depth} more undo step(s)")
        self._notify(ChangeKind.UNDO)
        return snapshot

    @_exclusive
    def redo(self) -> tuple[Record, ...] | None:
        """Reapply the last undone commit."""
        dropped = self._drop_pending()
        snapshot = self._history.redo(self._store.records)
        if snapshot is None:
            if dropped:
                self._notify(ChangeKind.DISCARD)
            return None
        self._store.replace_all(snapshot)
        logger.info(f"Redo: {len(snapshot)} record(s), {self.redo_depth} more redo step(s)")
        self._notify(ChangeKind.REDO)
        return snapshot

    def _drop_pending(self) -> bool:
        had_pending = self._stager.has_pending()
        self._stager.clear()
        return had_pending

    def undo_snapshots(self) -> list[tuple[Record, ...]]:
        """Collections undo would restore, oldest first."""
        return self._history.undo_snapshots()

    def redo_snapshots(self) -> list[tuple[Record, ...]]:
        """Collections redo would restore, oldest first."""
        return self._history.redo_snapshots()

    @_exclusive
    def clear_history(self) -> bool:
        """Forget every undo and redo step."""
        ok = self._history.clear()
        logger.info("Cleared undo history")
        return ok

    # ------------------------------------------------------------------
    # Collection changes from outside the edit flow
    # ------------------------------------------------------------------

    @_exclusive
    def append(self, record: Record) -> Record:
        """Add a record as delivered by the lookup service; not validated."""
        self._stager.clear()
        record = self._store.append(record)
        logger.info(f"Added {record.word!r} ({record.sense or 'General'})")
        self._notify(ChangeKind.APPEND)
        return record

    @_exclusive
    def append_lookup(
        self,
        result: LookupResult,
        senses: list[str] | None = None,
    ) -> list[Record]:
        """Add the senses of a lookup reply, general sense first."""
        self._stager.clear()
        added = [self._store.append(r) for r in records_from_lookup(result, senses)]
        if added:
            logger.info(f"Added {len(added)} sense(s) of {result.headword!r}")
            self._notify(ChangeKind.APPEND)
        return added

    @_exclusive
    def replace_all(self, records: Iterable[Record]) -> bool:
        """Swap in a whole collection. History is left alone."""
        self._stager.clear()
        ok = self._store.replace_all(records)
        self._notify(ChangeKind.REPLACE)
        return ok

    @_exclusive
    def clear_all(self) -> bool:
        """Delete every record on this device."""
        self._stager.clear()
        ok = self._store.replace_all(())
        logger.info("Cleared glossary")
        self._notify(ChangeKind.CLEAR)
        return ok

    @_exclusive
    def reload(self) -> tuple[Record, ...]:
        """Re-read the collection from durable storage (external refresh)."""
        self._stager.clear()
        records = self._store.load()
        self._history.load()
        self._notify(ChangeKind.REPLACE)
        return records

    # ------------------------------------------------------------------
    # Views, audit and export
    # ------------------------------------------------------------------

    def filter(
        self,
        *,
        text: str = "",
        domain: str = "",
        missing_example: bool = False,
        missing_note: bool = False,
    ) -> list[tuple[int, Record]]:
        return filter_records(
            self._store.records,
            text=text,
            domain=domain,
            missing_example=missing_example,
            missing_note=missing_note,
        )

    def domain_options(self) -> list[str]:
        return domain_options(self._store.records)

    def audit(self) -> list[ValidationResult]:
        """Report stored values that would not pass an edit."""
        return validate_collection(self._store.records)

    def export_tsv(self, destination: str | Path | None = None) -> Path:
        return _exp.export_tsv(self._store.records, destination)

    def sheet_append_plan(self, existing_created_at: Iterable[str]) -> list[list[list[str]]]:
        """Rows to append to the spreadsheet, skipping ones already there."""
        return _exp.plan_sheet_append(self._store.records, existing_created_at)

    @property
    @_exclusive
    def class_name(self) -> str:
        """Class name used to pick the target spreadsheet."""
        return _db.read_value(self._conn, _db.CLASS_NAME_KEY) or ""

    @class_name.setter
    @_exclusive
    def class_name(self, value: str) -> None:
        value = (value or "").strip()
        if value:
            _db.write_value(self._conn, _db.CLASS_NAME_KEY, value)
        else:
            _db.delete_value(self._conn, _db.CLASS_NAME_KEY)
