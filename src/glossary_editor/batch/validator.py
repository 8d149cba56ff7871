"""
Validation for batch edit requests.

Provides both schema validation (field names, field rules) and
referential validation (the rows to edit exist in the collection).
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import List, Optional, Set, Tuple

from glossary_editor.identity import RowKey, find_index
from glossary_editor.models import FieldName, Record
from glossary_editor.validator import validate_field

from .schema import (
    EditRequest,
    EditSpec,
    SETTABLE_FIELDS,
    ValidationError,
    ValidationResult,
    ValidationWarning,
)

logger = logging.getLogger(__name__)


def validate_edit_request(
    request: EditRequest,
    records: Optional[Sequence[Record]] = None,
) -> ValidationResult:
    """Validate an edit request.

    Args:
        request: The edit request to validate
        records: If given, warn about edits whose row is not in the collection

    Returns:
        ValidationResult with errors and warnings
    """
    errors: List[ValidationError] = []
    warnings: List[ValidationWarning] = []
    seen: Set[Tuple[RowKey, str]] = set()

    for i, edit in enumerate(request.edits):
        edit_errors, edit_warnings = _validate_edit(edit, i, seen)
        errors.extend(edit_errors)
        warnings.extend(edit_warnings)

        if records is not None and find_index(records, edit.key) is None:
            warnings.append(
                ValidationWarning(
                    index=i,
                    message=(
                        f"No row matches word={edit.key.word!r} sense={edit.key.sense!r} "
                        f"created_at={edit.key.created_at!r}; the edit will be skipped"
                    ),
                    line_number=edit.line_number,
                )
            )

    logger.debug(
        f"Validated {len(request.edits)} edit(s): "
        f"{len(errors)} error(s), {len(warnings)} warning(s)"
    )
    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _validate_edit(
    edit: EditSpec,
    index: int,
    seen: Set[Tuple[RowKey, str]],
) -> tuple[List[ValidationError], List[ValidationWarning]]:
    """Validate a single edit.

    Returns:
        Tuple of (errors, warnings)
    """
    errors: List[ValidationError] = []
    warnings: List[ValidationWarning] = []

    if not edit.key.created_at:
        errors.append(
            ValidationError(
                index=index,
                field="created_at",
                message="Missing row timestamp 'created_at'",
                line_number=edit.line_number,
            )
        )

    for name, value in edit.fields.items():
        if name == FieldName.CREATED_AT.value:
            errors.append(
                ValidationError(
                    index=index,
                    field=name,
                    message="'created_at' cannot be edited",
                    line_number=edit.line_number,
                )
            )
            continue
        if name not in SETTABLE_FIELDS:
            errors.append(
                ValidationError(
                    index=index,
                    field=name,
                    message=f"Unknown field '{name}'. Valid: {', '.join(sorted(SETTABLE_FIELDS))}",
                    line_number=edit.line_number,
                )
            )
            continue

        check = validate_field(name, value)
        if not check.accepted:
            errors.append(
                ValidationError(
                    index=index,
                    field=name,
                    message=f"{check.reason}",
                    line_number=edit.line_number,
                )
            )

        if (edit.key, name) in seen:
            warnings.append(
                ValidationWarning(
                    index=index,
                    message=f"Field '{name}' of this row is set more than once; the last value wins",
                    line_number=edit.line_number,
                )
            )
        seen.add((edit.key, name))

    return errors, warnings
