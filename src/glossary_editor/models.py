"""Domain model dataclasses and enums for glossary-editor."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class FieldName(str, Enum):
    """Fields of a glossary record."""

    WORD = "word"
    SENSE = "sense"
    DEFINITION_EN = "definition_en"
    TRANSLATION_JA = "translation_ja"
    EXAMPLE_EN = "example_en"
    NOTE = "note"
    CREATED_AT = "created_at"


EDITABLE_FIELDS: tuple[FieldName, ...] = (
    FieldName.WORD,
    FieldName.SENSE,
    FieldName.DEFINITION_EN,
    FieldName.TRANSLATION_JA,
    FieldName.EXAMPLE_EN,
    FieldName.NOTE,
)


class EditorMode(str, Enum):
    """State of the inline editor."""

    VIEWING = "viewing"
    EDITING = "editing"


class ChangeKind(str, Enum):
    """Kind of mutation announced to listeners."""

    APPEND = "append"
    COMMIT = "commit"
    UNDO = "undo"
    REDO = "redo"
    REPLACE = "replace"
    CLEAR = "clear"
    DISCARD = "discard"
    MODE = "mode"
    STAGE = "stage"


class ValidationSeverity(str, Enum):
    """Severity level for audit findings."""

    ERROR = "ERROR"
    WARNING = "WARNING"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def now_iso() -> str:
    """Current UTC time as ``2024-05-01T09:30:00.123Z``."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def _text(data: Mapping[str, Any], key: str, *, required: bool = False) -> str:
    value = data.get(key)
    if value is None:
        if required:
            raise ValueError(f"Missing required key: {key!r}")
        return ""
    if not isinstance(value, str):
        raise ValueError(f"Key {key!r} must be a string, got {type(value).__name__}")
    return value


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Record:
    """One glossary entry.

    Records are immutable; edits produce a new record through
    :func:`dataclasses.replace`, so a tuple of records is already an
    independent snapshot.
    """

    word: str
    sense: str
    definition_en: str
    translation_ja: str
    example_en: str = ""
    note: str = ""
    created_at: str = ""

    def get(self, field: FieldName | str) -> str:
        return getattr(self, FieldName(field).value)

    def to_dict(self) -> dict[str, str]:
        """Serialize using the persisted key names."""
        return {
            "word": self.word,
            "sense": self.sense,
            "definition_en": self.definition_en,
            "translation_ja": self.translation_ja,
            "example_en": self.example_en,
            "note": self.note,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Record:
        """Build a record from its persisted form.

        Raises:
            ValueError: if *data* is not a mapping or a field has the wrong type.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Record must be an object, got {type(data).__name__}")
        key = "createdAt" if "createdAt" in data else "created_at"
        return cls(
            word=_text(data, "word", required=True),
            sense=_text(data, "sense"),
            definition_en=_text(data, "definition_en"),
            translation_ja=_text(data, "translation_ja"),
            example_en=_text(data, "example_en"),
            note=_text(data, "note"),
            created_at=_text(data, key),
        )


@dataclass(frozen=True, slots=True)
class FieldValidation:
    """Outcome of validating one proposed cell value."""

    accepted: bool
    value: str
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Outcome of committing the pending edits."""

    applied: int
    staged: int
    persisted: bool


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """Notification sent to listeners after a mutation."""

    kind: ChangeKind
    records: tuple[Record, ...]


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """A single audit finding (error or warning) for a stored record."""

    rule_id: str
    severity: str
    index: int
    field: str
    message: str
    details: dict[str, Any] | None = None
