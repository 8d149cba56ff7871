"""Tests for shaping definition-service replies."""

import json

import pytest

from glossary_editor import ChangeKind, DataImportError
from glossary_editor.lookup import (
    GENERAL_SENSE,
    load_lookup,
    mock_lookup,
    records_from_lookup,
    shape_lookup_response,
)

REPLY = {
    "headword": "interest",
    "corrected_to": "interest",
    "did_you_mean": ["interests", "interested", "interesting", "inter"],
    "general": {"definition_en": "The feeling of wanting to know more", "translation_ja": "興味"},
    "domains": [
        {"domain": "Finance", "definition_en": "Money paid for borrowing", "translation_ja": "利子"},
        {"domain": "Law", "definition_en": "A legal share", "translation_ja": "権利"},
        {"domain": "", "definition_en": "nameless", "translation_ja": "x"},
        {"domain": "Empty", "definition_en": "", "translation_ja": "x"},
        {"domain": "SLA", "definition_en": "Learner motivation", "translation_ja": "関心"},
        {"domain": "Extra", "definition_en": "Beyond the cap", "translation_ja": "x"},
    ],
    "related_forms": [{"form": "interested", "pos": "adj", "ja": "興味のある"}],
}


class TestShape:

    def test_fields(self):
        result = shape_lookup_response(REPLY, "intrest")
        assert result.headword == "interest"
        assert result.corrected_to == "interest"
        assert result.general.domain == GENERAL_SENSE
        assert result.general.translation_ja == "興味"

    def test_caps(self):
        result = shape_lookup_response(REPLY, "interest")
        assert len(result.did_you_mean) == 3
        assert [d.domain for d in result.domains] == ["Finance", "Law", "SLA"]

    def test_related_forms(self):
        (form,) = shape_lookup_response(REPLY, "interest").related_forms
        assert form.form == "interested"
        assert form.ja_gloss == "興味のある"

    def test_defaults(self):
        result = shape_lookup_response({}, "word")
        assert result.headword == "word"
        assert result.corrected_to is None
        assert result.domains == ()
        assert result.general.definition_en == ""

    def test_not_an_object(self):
        with pytest.raises(DataImportError):
            shape_lookup_response(["no"], "word")


class TestMock:

    def test_placeholder(self):
        result = mock_lookup(" apple ")
        assert result.headword == "apple"
        assert result.general.definition_en == 'A concise learner-style meaning of "apple".'
        assert result.general.translation_ja == "簡潔な定義。"


class TestRecords:

    def test_general_first(self):
        recs = records_from_lookup(shape_lookup_response(REPLY, "interest"))
        assert [r.sense for r in recs] == ["General", "Finance", "Law", "SLA"]
        assert all(r.word == "interest" for r in recs)

    def test_sense_selection(self):
        recs = records_from_lookup(shape_lookup_response(REPLY, "interest"), ["Law"])
        assert [r.sense for r in recs] == ["Law"]

    def test_append_lookup(self, editor):
        events = []
        editor.add_listener(events.append)
        added = editor.append_lookup(shape_lookup_response(REPLY, "interest"), ["General", "SLA"])
        assert [r.sense for r in editor.records] == ["General", "SLA"]
        assert all(r.created_at for r in added)
        assert [e.kind for e in events] == [ChangeKind.APPEND]


class TestLoad:

    def test_from_file(self, tmp_path):
        path = tmp_path / "interest.json"
        path.write_text(json.dumps(REPLY), encoding="utf-8")
        assert load_lookup(path).headword == "interest"

    def test_term_defaults_to_file_name(self, tmp_path):
        path = tmp_path / "apple.json"
        path.write_text("{}", encoding="utf-8")
        assert load_lookup(path).headword == "apple"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(DataImportError):
            load_lookup(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_lookup(tmp_path / "none.json")
