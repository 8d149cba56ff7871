"""Tests for TSV export and spreadsheet append planning."""

from datetime import date

import pytest

from glossary_editor import ExportError, Record
from glossary_editor.exporter import (
    TSV_HEADER,
    default_tsv_filename,
    export_tsv,
    plan_sheet_append,
    safe_tsv,
    spreadsheet_title,
    to_tsv,
)


class TestSafeTsv:

    def test_tabs_and_newlines(self):
        assert safe_tsv("a\tb\r\nc\nd") == "a b / c / d"

    def test_none(self):
        assert safe_tsv(None) == ""


class TestTsv:

    def test_header_and_rows(self, records):
        lines = to_tsv(records).split("\n")
        assert lines[0].split("\t") == list(TSV_HEADER)
        assert len(lines) == 4
        assert lines[3].split("\t")[-1] == "2024-05-01T09:31:00.001Z"

    def test_cells_escaped(self):
        rec = Record("w", "", "has\ttab", "t", note="two\nlines", created_at="c")
        row = to_tsv([rec]).split("\n")[1].split("\t")
        assert row[2] == "has tab"
        assert row[5] == "two / lines"

    def test_empty_raises(self):
        with pytest.raises(ExportError):
            to_tsv([])

    def test_default_filename(self):
        assert default_tsv_filename(date(2024, 5, 1)) == "glossary_2024-05-01.tsv"

    def test_export_file(self, tmp_path, records):
        path = export_tsv(records, tmp_path / "out.tsv")
        assert path.read_text(encoding="utf-8").startswith("Word\tSense")

    def test_unwritable_destination(self, tmp_path, records):
        with pytest.raises(ExportError):
            export_tsv(records, tmp_path / "missing" / "out.tsv")

    def test_editor_export(self, editor_with_data, tmp_path):
        path = editor_with_data.export_tsv(tmp_path / "g.tsv")
        assert "インプット" in path.read_text(encoding="utf-8")


class TestSpreadsheet:

    def test_title(self):
        assert spreadsheet_title("") == "Glossary Data"
        assert spreadsheet_title(" Seminar A ") == "Glossary Data – Seminar A"

    def test_skips_existing(self, records):
        (chunk,) = plan_sheet_append(records, ["2024-05-01T09:30:00.123Z", ""])
        assert [row[0] for row in chunk] == ["interest", "interest"]

    def test_nothing_new(self, records):
        existing = [r.created_at for r in records]
        assert plan_sheet_append(records, existing) == []

    def test_chunks(self):
        recs = [Record(f"w{n}", "", "d", "t", created_at=str(n)) for n in range(5)]
        chunks = plan_sheet_append(recs, [], chunk_size=2)
        assert [len(c) for c in chunks] == [2, 2, 1]

    def test_invalid_chunk_size(self, records):
        with pytest.raises(ValueError):
            plan_sheet_append(records, [], chunk_size=0)

    def test_missing_timestamp_filled(self):
        (chunk,) = plan_sheet_append([Record("w", "", "d", "t")], [])
        assert chunk[0][-1].endswith("Z")

    def test_editor_plan(self, editor_with_data):
        (chunk,) = editor_with_data.sheet_append_plan([])
        assert len(chunk) == 3
