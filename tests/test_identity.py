"""Tests for natural-key row identity."""

import pytest

from glossary_editor import Record, RowKey, find_index, row_key


class TestRowKey:

    def test_from_record(self, records):
        assert row_key(records[0]) == RowKey("input", "SLA", "2024-05-01T09:30:00.123Z")

    def test_encode_decode(self):
        key = RowKey("a|b", "c::d", "2024-05-01T09:30:00.123Z")
        assert RowKey.decode(key.encode()) == key

    def test_decode_rejects_garbage(self):
        with pytest.raises(ValueError):
            RowKey.decode("just text")


class TestFindIndex:

    def test_found(self, records):
        assert find_index(records, row_key(records[2])) == 2

    def test_same_word_different_sense(self, records):
        key = RowKey("interest", "General", "2024-05-01T09:31:00.000Z")
        assert find_index(records, key) == 1

    def test_stale_key(self, records):
        assert find_index(records, RowKey("input", "SLA", "other")) is None

    def test_first_duplicate_wins(self):
        rec = Record("w", "", "d", "t", created_at="x")
        assert find_index([rec, rec], row_key(rec)) == 0

    def test_empty_collection(self):
        assert find_index([], RowKey("w", "", "")) is None
