"""
Tests for batch edit request functionality.
"""
import pytest

from glossary_editor import RowKey, row_key
from glossary_editor.batch import (
    BatchResult,
    EditStatus,
    ParseError,
    execute_edit_request,
    load_edit_request,
    load_yaml_file,
    validate_edit_request,
)


REQUEST_YAML = """
session:
  name: Tidy notes
  description: Fill in missing notes
edits:
  - word: interest
    sense: General
    created_at: "2024-05-01T09:31:00.000Z"
    set:
      note: everyday sense
  - word: input
    sense: SLA
    created_at: "2024-05-01T09:30:00.123Z"
    set:
      example_en: "comprehensible input ; i+1"
      note: Krashen
"""


class TestParser:
    """Tests for YAML parsing."""

    def test_load_from_string(self):
        request = load_edit_request(REQUEST_YAML)

        assert request.session_name == "Tidy notes"
        assert request.session_description == "Fill in missing notes"
        assert len(request.edits) == 2
        assert request.edits[0].key == RowKey("interest", "General", "2024-05-01T09:31:00.000Z")
        assert request.edits[1].fields == {
            "example_en": "comprehensible input ; i+1",
            "note": "Krashen",
        }

    def test_load_from_file(self, tmp_path):
        yaml_file = tmp_path / "edits.yaml"
        yaml_file.write_text(REQUEST_YAML, encoding="utf-8")

        request = load_edit_request(yaml_file)

        assert request.source_file == yaml_file
        assert len(request.edits) == 2

    def test_load_from_dict(self):
        request = load_edit_request({
            "edits": [{"word": "w", "createdAt": "c", "set": {"note": "n"}}],
        })
        assert request.edits[0].key == RowKey("w", "", "c")
        assert request.session_name is None

    def test_unquoted_timestamp(self):
        request = load_edit_request("""
edits:
  - word: w
    created_at: 2024-05-01T09:30:00.123Z
    set: {note: n}
""")
        assert request.edits[0].key.created_at == "2024-05-01T09:30:00.123Z"

    def test_null_value_clears(self):
        request = load_edit_request("""
edits:
  - word: w
    created_at: c
    set: {note: null}
""")
        assert request.edits[0].fields == {"note": ""}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_edit_request(tmp_path / "nope.yaml")

    @pytest.mark.parametrize("text,message", [
        ("session: {}\n", "edits"),
        ("edits: []\n", "empty"),
        ("edits: x\n", "list"),
        ("edits:\n  - word: w\n    set: {note: n}\n", "created_at"),
        ("edits:\n  - created_at: c\n    set: {note: n}\n", "word"),
        ("edits:\n  - word: w\n    created_at: c\n", "set"),
        ("edits:\n  - word: w\n    created_at: c\n    set: {}\n", "set"),
        ("edits:\n  - word: w\n    created_at: c\n    set: {note: [a]}\n", "scalar"),
        ("- just\n- a list\n", "mapping"),
    ])
    def test_invalid_requests(self, text, message):
        with pytest.raises(ParseError, match=message):
            load_edit_request(text)

    def test_invalid_yaml_reports_line(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("edits:\n  - word: [unclosed\n", encoding="utf-8")
        with pytest.raises(ParseError) as excinfo:
            load_yaml_file(bad)
        assert excinfo.value.line is not None

    def test_empty_file(self, tmp_path):
        empty = tmp_path / "empty.yaml"
        empty.write_text("", encoding="utf-8")
        with pytest.raises(ParseError, match="Empty"):
            load_edit_request(empty)


class TestValidator:
    """Tests for request validation."""

    def test_valid(self, records):
        result = validate_edit_request(load_edit_request(REQUEST_YAML), records)
        assert result.is_valid
        assert result.warning_count == 0

    def test_unknown_field(self):
        request = load_edit_request({
            "edits": [{"word": "w", "created_at": "c", "set": {"colour": "red"}}],
        })
        result = validate_edit_request(request)
        assert not result.is_valid
        assert result.errors[0].field == "colour"

    def test_created_at_not_settable(self):
        request = load_edit_request({
            "edits": [{"word": "w", "created_at": "c", "set": {"created_at": "d"}}],
        })
        result = validate_edit_request(request)
        assert result.error_count == 1

    def test_field_rules_applied(self):
        request = load_edit_request({
            "edits": [{"word": "w", "created_at": "c", "set": {
                "definition_en": " ",
                "example_en": "a; b; c; d",
            }}],
        })
        result = validate_edit_request(request)
        assert sorted(e.field for e in result.errors) == ["definition_en", "example_en"]

    def test_unknown_row_is_warning(self, records):
        request = load_edit_request({
            "edits": [{"word": "ghost", "created_at": "c", "set": {"note": "n"}}],
        })
        result = validate_edit_request(request, records)
        assert result.is_valid
        assert result.warning_count == 1

    def test_duplicate_cell_is_warning(self):
        edit = {"word": "w", "created_at": "c", "set": {"note": "n"}}
        request = load_edit_request({"edits": [edit, edit]})
        result = validate_edit_request(request)
        assert result.is_valid
        assert result.warnings[0].index == 1


class TestExecutor:
    """Tests for executing requests against an editor."""

    def test_single_undo_point(self, editor_with_data, records):
        ed = editor_with_data
        result = execute_edit_request(ed, load_edit_request(REQUEST_YAML))

        assert isinstance(result, BatchResult)
        assert result.total_count == 3
        assert result.staged_count == 2
        assert result.unchanged_count == 1
        assert result.commit.applied == 2
        assert ed.records[1].note == "everyday sense"
        assert ed.records[0].example_en == "comprehensible input; i+1"
        assert ed.undo_depth == 1

        ed.undo()
        assert ed.records == records

    def test_dry_run(self, editor_with_data, records):
        ed = editor_with_data
        result = execute_edit_request(ed, load_edit_request(REQUEST_YAML), dry_run=True)
        assert result.dry_run
        assert result.commit is None
        assert result.staged_count == 2
        assert ed.records == records
        assert not ed.has_pending()
        assert not ed.can_undo

    def test_stale_and_rejected(self, editor_with_data, records):
        ed = editor_with_data
        request = load_edit_request({
            "edits": [
                {"word": "ghost", "created_at": "c", "set": {"note": "n"}},
                {"word": "input", "sense": "SLA", "created_at": "2024-05-01T09:30:00.123Z",
                 "set": {"word": "", "colour": "red"}},
            ],
        })
        result = execute_edit_request(ed, request)
        statuses = [c.status for c in result.changes]
        assert statuses == [EditStatus.STALE, EditStatus.REJECTED, EditStatus.REJECTED]
        assert result.commit.applied == 0
        assert ed.records == records
        assert not ed.can_undo

    def test_previous_pending_dropped(self, editor_with_data):
        ed = editor_with_data
        ed.enable_editing()
        ed.stage_cell(row_key(ed.records[2]), "note", "stray draft")
        execute_edit_request(ed, load_edit_request(REQUEST_YAML))
        assert ed.records[2].note == ""
