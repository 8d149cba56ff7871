"""Pending per-cell edits, held until an explicit commit."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence

from glossary_editor.identity import RowKey, find_index
from glossary_editor.models import FieldName, Record

logger = logging.getLogger(__name__)


class EditStager:
    """Accumulates field deltas keyed by row identity.

    Nothing here touches the record collection until :meth:`commit`.
    Drafts are not autosaved: :meth:`clear` drops them.
    """

    def __init__(self) -> None:
        self._pending: dict[RowKey, dict[FieldName, str]] = {}

    def __len__(self) -> int:
        """Number of staged cells."""
        return sum(len(fields) for fields in self._pending.values())

    @property
    def pending(self) -> dict[RowKey, dict[FieldName, str]]:
        """Copy of the pending deltas."""
        return {key: dict(fields) for key, fields in self._pending.items()}

    def has_pending(self) -> bool:
        return bool(self._pending)

    def pending_value(self, key: RowKey, field: FieldName | str) -> str | None:
        return self._pending.get(key, {}).get(FieldName(field))

    def stage(
        self,
        key: RowKey,
        field: FieldName | str,
        value: str,
        original: str,
    ) -> bool:
        """Record a proposed value for one cell.

        Staging the original value removes any earlier delta for the cell
        instead of storing a no-op. Returns True if a delta is now pending
        for the cell.
        """
        field = FieldName(field)
        if value == original:
            self.unstage(key, field)
            return False
        self._pending.setdefault(key, {})[field] = value
        logger.debug(f"Staged {field.value} for {key.word!r}/{key.sense!r}")
        return True

    def unstage(self, key: RowKey, field: FieldName | str) -> None:
        fields = self._pending.get(key)
        if fields is None:
            return
        fields.pop(FieldName(field), None)
        if not fields:
            del self._pending[key]

    def commit(self, records: Sequence[Record]) -> tuple[tuple[Record, ...], int]:
        """Apply every resolvable delta to a copy of *records*.

        Entries whose row no longer exists are skipped. The pending set is
        empty afterwards whatever the outcome.

        Returns:
            The new collection and the number of rows updated.
        """
        result = list(records)
        applied = 0
        for key, fields in self._pending.items():
            idx = find_index(records, key)
            if idx is None:
                logger.debug(f"Skipping stale row {key.word!r}/{key.sense!r}")
                continue
            result[idx] = dataclasses.replace(
                result[idx], **{f.value: v for f, v in fields.items()}
            )
            applied += 1
        self._pending.clear()
        return tuple(result), applied

    def clear(self) -> None:
        self._pending.clear()
