"""Field validation rules and collection audit for glossary-editor."""

from __future__ import annotations

import re
from collections.abc import Sequence

from glossary_editor.exceptions import InvalidFieldError
from glossary_editor.identity import row_key
from glossary_editor.models import (
    EDITABLE_FIELDS,
    FieldName,
    FieldValidation,
    Record,
    ValidationResult,
    ValidationSeverity,
)

MAX_LENGTH: dict[FieldName, int] = {
    FieldName.WORD: 80,
    FieldName.SENSE: 80,
    FieldName.DEFINITION_EN: 300,
    FieldName.TRANSLATION_JA: 200,
    FieldName.NOTE: 160,
}
REQUIRED_FIELDS = frozenset({
    FieldName.WORD, FieldName.DEFINITION_EN, FieldName.TRANSLATION_JA,
})
MAX_EXAMPLES = 3
MAX_EXAMPLE_LENGTH = 40

REQUIRED = "Required"
ONE_LINE = "One line only"
READ_ONLY = "Read-only field"

_WS_RE = re.compile(r"\s+")
_EXAMPLE_SEP_RE = re.compile(r"\s*;\s*")
_LINE_BREAK_RE = re.compile(r"[\r\n]")


def normalize_whitespace(raw: str | None) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    return _WS_RE.sub(" ", raw or "").strip()


def _field(field: FieldName | str) -> FieldName:
    try:
        return FieldName(field)
    except ValueError:
        raise InvalidFieldError(f"Unknown field: {field!r}") from None


def _reject(reason: str) -> FieldValidation:
    return FieldValidation(accepted=False, value="", reason=reason)


def validate_field(field: FieldName | str, raw: str | None) -> FieldValidation:
    """Accept and normalize, or reject, a proposed value for one field.

    Rejection never touches any data; the caller shows ``reason`` and keeps
    the previous value.

    Raises:
        InvalidFieldError: if *field* is not a record field.
    """
    field = _field(field)
    if field is FieldName.CREATED_AT:
        return _reject(READ_ONLY)

    raw = raw or ""
    value = normalize_whitespace(raw)
    if field in REQUIRED_FIELDS and not value:
        return _reject(REQUIRED)

    if field is FieldName.EXAMPLE_EN:
        return _validate_examples(raw, value)

    if field is FieldName.NOTE:
        if not value:
            return FieldValidation(accepted=True, value="")
        if len(value) > MAX_LENGTH[field]:
            return _reject(f"At most {MAX_LENGTH[field]} characters")
        if _LINE_BREAK_RE.search(raw):
            return _reject(ONE_LINE)
        return FieldValidation(accepted=True, value=value)

    if len(value) > MAX_LENGTH[field]:
        return _reject(f"At most {MAX_LENGTH[field]} characters")
    return FieldValidation(accepted=True, value=value)


def _validate_examples(raw: str, value: str) -> FieldValidation:
    if not value:
        return FieldValidation(accepted=True, value="")
    normalized = _EXAMPLE_SEP_RE.sub(";", value)
    parts = [p.strip() for p in normalized.split(";") if p.strip()]
    if len(parts) > MAX_EXAMPLES:
        return _reject(f"At most {MAX_EXAMPLES} items separated by ';'")
    if any(len(p) > MAX_EXAMPLE_LENGTH for p in parts):
        return _reject(f"Each item at most {MAX_EXAMPLE_LENGTH} characters")
    if _LINE_BREAK_RE.search(raw):
        return _reject(ONE_LINE)
    return FieldValidation(accepted=True, value="; ".join(parts))


# ---------------------------------------------------------------------------
# Collection audit
# ---------------------------------------------------------------------------

def validate_record(record: Record, index: int = 0) -> list[ValidationResult]:
    """Report stored values that an edit of the same cell would not accept."""
    results: list[ValidationResult] = []
    for field in EDITABLE_FIELDS:
        stored = record.get(field)
        check = validate_field(field, stored)
        if not check.accepted:
            results.append(ValidationResult(
                rule_id="VAL-REC-001" if check.reason == REQUIRED else "VAL-REC-002",
                severity=ValidationSeverity.ERROR.value,
                index=index,
                field=field.value,
                message=check.reason or "Invalid value",
                details={"value": stored},
            ))
        elif check.value != stored:
            results.append(ValidationResult(
                rule_id="VAL-REC-003",
                severity=ValidationSeverity.WARNING.value,
                index=index,
                field=field.value,
                message="Value is not in normalized form",
                details={"value": stored, "normalized": check.value},
            ))
    if not record.created_at:
        results.append(ValidationResult(
            rule_id="VAL-REC-004",
            severity=ValidationSeverity.WARNING.value,
            index=index,
            field=FieldName.CREATED_AT.value,
            message="Record has no creation timestamp",
        ))
    return results


def validate_collection(records: Sequence[Record]) -> list[ValidationResult]:
    """Run the record checks over a collection, plus duplicate-key detection.

    Two records sharing a natural key cannot be told apart by the row
    identity resolver; edits to either land on the first.
    """
    results: list[ValidationResult] = []
    seen: dict[tuple[str, str, str], int] = {}
    for i, record in enumerate(records):
        results.extend(validate_record(record, i))
        key = row_key(record)
        if key in seen:
            results.append(ValidationResult(
                rule_id="VAL-COL-001",
                severity=ValidationSeverity.ERROR.value,
                index=i,
                field=FieldName.CREATED_AT.value,
                message=f"Duplicate row identity (same as row {seen[key]})",
                details={"first_index": seen[key]},
            ))
        else:
            seen[key] = i
    return results
