"""Record store: the ordered glossary collection and its persistence."""

from __future__ import annotations

import dataclasses
import json
import logging
import sqlite3
from collections.abc import Iterable

from glossary_editor import db as _db
from glossary_editor.models import Record, now_iso

logger = logging.getLogger(__name__)


def decode_records(data: object) -> tuple[Record, ...]:
    """Parse a decoded JSON array into records.

    Raises:
        ValueError: if *data* is not a list of record objects.
    """
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of records, got {type(data).__name__}")
    return tuple(Record.from_dict(item) for item in data)


def encode_records(records: Iterable[Record]) -> list[dict[str, str]]:
    return [r.to_dict() for r in records]


class RecordStore:
    """Owns the live record collection.

    No other component holds a mutable alias: readers get tuples, and every
    mutation is written through to the durable store.
    """

    def __init__(self, conn: sqlite3.Connection, key: str = _db.GLOSSARY_KEY) -> None:
        self._conn = conn
        self._key = key
        self._records: list[Record] = []
        self.last_write_ok = True

    @property
    def records(self) -> tuple[Record, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> tuple[Record, ...]:
        """Read the collection from durable storage.

        Absent or corrupt data gives an empty collection; nothing is raised.
        """
        raw = _db.read_value(self._conn, self._key)
        if raw is None:
            self._records = []
            return ()
        try:
            records = decode_records(json.loads(raw))
        except ValueError as e:
            logger.warning(f"Discarding corrupt glossary data under {self._key!r}: {e}")
            records = ()
        self._records = list(records)
        return records

    def save(self, records: Iterable[Record] | None = None) -> bool:
        """Write the full collection, replacing prior contents.

        Returns False if the durable medium rejected the write.
        """
        if records is not None:
            self._records = list(records)
        payload = json.dumps(encode_records(self._records), ensure_ascii=False)
        self.last_write_ok = _db.write_value(self._conn, self._key, payload)
        return self.last_write_ok

    def append(self, record: Record) -> Record:
        """Add one record, stamping ``created_at`` if it has none."""
        if not record.created_at:
            record = dataclasses.replace(record, created_at=now_iso())
        self._records.append(record)
        self.save()
        return record

    def replace_all(self, records: Iterable[Record]) -> bool:
        """Swap in a whole collection (undo/redo, clear-all) and persist it."""
        return self.save(records)
