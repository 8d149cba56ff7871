"""Shared test fixtures for glossary-editor."""

import pytest

from glossary_editor import GlossaryEditor, Record


SAMPLE_RECORDS = (
    Record(
        word="input",
        sense="SLA",
        definition_en="Language the learner hears or reads",
        translation_ja="インプット",
        example_en="comprehensible input",
        note="Krashen",
        created_at="2024-05-01T09:30:00.123Z",
    ),
    Record(
        word="interest",
        sense="General",
        definition_en="The feeling of wanting to know more",
        translation_ja="興味",
        created_at="2024-05-01T09:31:00.000Z",
    ),
    Record(
        word="interest",
        sense="Finance",
        definition_en="Money paid for the use of money",
        translation_ja="利子",
        example_en="interest rate; compound interest",
        created_at="2024-05-01T09:31:00.001Z",
    ),
)


@pytest.fixture
def records():
    return SAMPLE_RECORDS


@pytest.fixture
def editor():
    """Create an in-memory editor for testing."""
    with GlossaryEditor(":memory:") as ed:
        yield ed


@pytest.fixture
def editor_with_data(editor):
    """Editor holding the three sample records, no history."""
    editor.replace_all(SAMPLE_RECORDS)
    return editor


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "glossary.db"
