"""
Batch edit request module for glossary-editor.

This module provides functionality to submit field edits for many rows at
once, in YAML format, and apply them as a single undoable commit.

Example usage:
    from glossary_editor import GlossaryEditor
    from glossary_editor.batch import (
        load_edit_request,
        validate_edit_request,
        execute_edit_request,
    )

    request = load_edit_request("edits.yaml")

    with GlossaryEditor("glossary.db") as editor:
        validation = validate_edit_request(request, editor.records)
        if not validation.is_valid:
            for error in validation.errors:
                print(f"[{error.index}] {error.field}: {error.message}")

        result = execute_edit_request(editor, request)
        print(f"Staged {result.staged_count}/{result.total_count} cells")

A request file looks like:

    session:
      name: Tidy SLA notes
    edits:
      - word: input
        sense: SLA
        created_at: "2024-05-01T09:30:00.123Z"
        set:
          note: Krashen's hypothesis
"""

from .schema import (
    # Enums and constants
    EditStatus as EditStatus,
    REQUIRED_KEYS as REQUIRED_KEYS,
    OPTIONAL_KEYS as OPTIONAL_KEYS,
    SETTABLE_FIELDS as SETTABLE_FIELDS,
    # Data classes
    EditSpec as EditSpec,
    EditRequest as EditRequest,
    ValidationError as ValidationError,
    ValidationWarning as ValidationWarning,
    ValidationResult as ValidationResult,
    EditResult as EditResult,
    BatchResult as BatchResult,
)

from .parser import (
    load_edit_request as load_edit_request,
    load_yaml_file as load_yaml_file,
    ParseError as ParseError,
)

from .validator import (
    validate_edit_request as validate_edit_request,
)

from .executor import (
    execute_edit_request as execute_edit_request,
)

__all__ = [
    # Enums and constants
    "EditStatus",
    "REQUIRED_KEYS",
    "OPTIONAL_KEYS",
    "SETTABLE_FIELDS",
    # Data classes
    "EditSpec",
    "EditRequest",
    "ValidationError",
    "ValidationWarning",
    "ValidationResult",
    "EditResult",
    "BatchResult",
    # Functions
    "load_edit_request",
    "load_yaml_file",
    "validate_edit_request",
    "execute_edit_request",
    # Exceptions
    "ParseError",
]
