"""Export pipeline for glossary-editor: TSV files and spreadsheet rows."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from pathlib import Path

from glossary_editor.exceptions import ExportError
from glossary_editor.models import Record, now_iso

logger = logging.getLogger(__name__)

TSV_HEADER = (
    "Word", "Sense", "Definition (EN)", "Translation (JA)",
    "Example", "Note", "CreatedAt",
)
SHEET_HEADER = (
    "Word", "Sense", "Definition (EN)", "Translation (JA)",
    "Example (EN)", "Note", "Created At",
)
SHEET_NAME = "Glossary"
SHEET_CHUNK_SIZE = 400


def safe_tsv(value: object) -> str:
    """Flatten a cell for TSV: tabs to spaces, line breaks to `` / ``."""
    if value is None:
        return ""
    return str(value).replace("\t", " ").replace("\r\n", " / ").replace("\n", " / ")


def _row(record: Record) -> list[str]:
    return [
        record.word, record.sense, record.definition_en, record.translation_ja,
        record.example_en, record.note, record.created_at,
    ]


def to_tsv(records: Sequence[Record]) -> str:
    """Render the collection as TSV text, header first.

    Raises:
        ExportError: if there is nothing to export.
    """
    if not records:
        raise ExportError("No items in glossary")
    lines = [TSV_HEADER, *(_row(r) for r in records)]
    return "\n".join("\t".join(safe_tsv(c) for c in line) for line in lines)


def default_tsv_filename(today: date | None = None) -> str:
    return f"glossary_{(today or date.today()).isoformat()}.tsv"


def export_tsv(
    records: Sequence[Record],
    destination: str | Path | None = None,
) -> Path:
    """Write the collection to a TSV file and return its path."""
    path = Path(destination) if destination is not None else Path(default_tsv_filename())
    text = to_tsv(records)
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ExportError(f"Cannot write {path}: {e}") from e
    logger.info(f"Exported {len(records)} record(s) to {path}")
    return path


# ---------------------------------------------------------------------------
# Spreadsheet sync (append with dedup); the network side lives elsewhere
# ---------------------------------------------------------------------------

def spreadsheet_title(class_name: str = "") -> str:
    class_name = (class_name or "").strip()
    return f"Glossary Data – {class_name}" if class_name else "Glossary Data"


def sheet_rows(records: Iterable[Record]) -> list[list[str]]:
    """Spreadsheet value rows; a record without a timestamp gets one now."""
    return [
        _row(r)[:-1] + [r.created_at or now_iso()]
        for r in records
    ]


def plan_sheet_append(
    records: Sequence[Record],
    existing_created_at: Iterable[str],
    *,
    chunk_size: int = SHEET_CHUNK_SIZE,
) -> list[list[list[str]]]:
    """Rows not yet present in the sheet, split into append-sized chunks.

    The sheet's ``Created At`` column is the dedup key.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    existing = {v for v in existing_created_at if v}
    rows = [row for row in sheet_rows(records) if row[-1] not in existing]
    return [rows[i:i + chunk_size] for i in range(0, len(rows), chunk_size)]
