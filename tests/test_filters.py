"""Tests for view filters."""

from glossary_editor.filters import domain_options, filter_records


class TestFilterRecords:

    def test_no_filters_keeps_all(self, records):
        assert [i for i, _ in filter_records(records)] == [0, 1, 2]

    def test_text_case_insensitive(self, records):
        assert [i for i, _ in filter_records(records, text="INTEREST")] == [1, 2]

    def test_text_matches_translation(self, records):
        assert [i for i, _ in filter_records(records, text="利子")] == [2]

    def test_text_matches_note(self, records):
        assert [i for i, _ in filter_records(records, text="krashen")] == [0]

    def test_domain_exact(self, records):
        assert [i for i, _ in filter_records(records, domain="Finance")] == [2]
        assert filter_records(records, domain="Fin") == []

    def test_missing_example(self, records):
        assert [i for i, _ in filter_records(records, missing_example=True)] == [1]

    def test_missing_note(self, records):
        assert [i for i, _ in filter_records(records, missing_note=True)] == [1, 2]

    def test_combined(self, records):
        rows = filter_records(records, text="interest", missing_example=True, missing_note=True)
        assert [i for i, _ in rows] == [1]

    def test_index_refers_to_collection(self, records):
        ((index, record),) = filter_records(records, domain="Finance")
        assert records[index] is record


class TestDomainOptions:

    def test_sorted_distinct(self, records):
        assert domain_options(records) == ["Finance", "General", "SLA"]

    def test_empty_sense_skipped(self, records):
        from glossary_editor import Record
        extra = list(records) + [Record("w", "", "d", "t")]
        assert "" not in domain_options(extra)
