"""View filters over the record collection."""

from __future__ import annotations

from collections.abc import Sequence

from glossary_editor.models import Record


def _haystack(record: Record) -> str:
    return " ".join((
        record.word, record.sense, record.definition_en,
        record.translation_ja, record.example_en, record.note,
    )).lower()


def filter_records(
    records: Sequence[Record],
    *,
    text: str = "",
    domain: str = "",
    missing_example: bool = False,
    missing_note: bool = False,
) -> list[tuple[int, Record]]:
    """Select records for display, keeping their collection index.

    Args:
        text: case-insensitive substring matched against every text field
        domain: exact ``sense`` to keep; empty keeps all
        missing_example: keep only records without an example
        missing_note: keep only records without a note
    """
    needle = text.strip().lower()
    rows: list[tuple[int, Record]] = []
    for i, record in enumerate(records):
        if needle and needle not in _haystack(record):
            continue
        if domain and record.sense != domain:
            continue
        if missing_example and record.example_en.strip():
            continue
        if missing_note and record.note.strip():
            continue
        rows.append((i, record))
    return rows


def domain_options(records: Sequence[Record]) -> list[str]:
    """Distinct non-empty senses, sorted, for the domain selector."""
    return sorted({r.sense for r in records if r.sense})
