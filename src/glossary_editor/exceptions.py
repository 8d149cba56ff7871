"""Custom exception hierarchy for glossary-editor."""


class GlossaryEditorError(Exception):
    """Base exception for all glossary-editor errors."""


class ValidationError(GlossaryEditorError):
    """Invalid record data (empty required field, value too long)."""


class InvalidFieldError(ValidationError):
    """Field name is not part of the record schema."""


class EditModeError(GlossaryEditorError):
    """Operation not allowed in the editor's current mode."""


class DataImportError(GlossaryEditorError):
    """Failed to import data (malformed lookup response, etc.)."""


class ExportError(GlossaryEditorError):
    """Failed to export (nothing to export, unwritable destination)."""


class DatabaseError(GlossaryEditorError):
    """Schema version mismatch, connection failure."""
