"""Row identity: map a displayed row back to its record.

A row is identified by the text currently shown in its ``word``, ``sense``
and ``created_at`` cells, not by a surrogate id. Editing ``word`` or
``sense`` therefore changes the row's identity once committed.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from glossary_editor.models import Record

# ASCII unit separator; cannot survive whitespace collapsing in validated text.
_SEP = "\x1f"


class RowKey(NamedTuple):
    """Natural key of a displayed row."""

    word: str
    sense: str
    created_at: str

    def encode(self) -> str:
        """Flat string form for views that can only carry text."""
        return _SEP.join(self)

    @classmethod
    def decode(cls, text: str) -> RowKey:
        parts = text.split(_SEP)
        if len(parts) != 3:
            raise ValueError(f"Not an encoded row key: {text!r}")
        return cls(*parts)


def row_key(record: Record) -> RowKey:
    return RowKey(record.word, record.sense, record.created_at)


def find_index(records: Sequence[Record], key: RowKey) -> int | None:
    """Index of the record matching *key* exactly, or None for a stale row."""
    for i, record in enumerate(records):
        if (
            record.word == key.word
            and record.sense == key.sense
            and record.created_at == key.created_at
        ):
            return i
    return None
