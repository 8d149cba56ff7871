__version__ = "0.1.0"

from .editor import (
    GlossaryEditor as GlossaryEditor,
)

from .models import (
    Record as Record,
    FieldName as FieldName,
    EDITABLE_FIELDS as EDITABLE_FIELDS,
    EditorMode as EditorMode,
    ChangeKind as ChangeKind,
    ChangeEvent as ChangeEvent,
    CommitResult as CommitResult,
    FieldValidation as FieldValidation,
    ValidationResult as ValidationResult,
    ValidationSeverity as ValidationSeverity,
)

from .identity import (
    RowKey as RowKey,
    row_key as row_key,
    find_index as find_index,
)

from .validator import (
    validate_field as validate_field,
    validate_record as validate_record,
    normalize_whitespace as normalize_whitespace,
)

from .exceptions import (
    GlossaryEditorError as GlossaryEditorError,
    ValidationError as ValidationError,
    InvalidFieldError as InvalidFieldError,
    EditModeError as EditModeError,
    DataImportError as DataImportError,
    ExportError as ExportError,
    DatabaseError as DatabaseError,
)

# Batch module - import as submodule to avoid naming conflicts
from . import batch

__all__ = [
    # Batch module
    "batch",
    # Editor
    "GlossaryEditor",
    # Data model
    "Record",
    "FieldName",
    "EDITABLE_FIELDS",
    "EditorMode",
    "ChangeKind",
    "ChangeEvent",
    "CommitResult",
    "FieldValidation",
    "ValidationResult",
    "ValidationSeverity",
    # Row identity
    "RowKey",
    "row_key",
    "find_index",
    # Validation
    "validate_field",
    "validate_record",
    "normalize_whitespace",
    # Exceptions
    "GlossaryEditorError",
    "ValidationError",
    "InvalidFieldError",
    "EditModeError",
    "DataImportError",
    "ExportError",
    "DatabaseError",
]
