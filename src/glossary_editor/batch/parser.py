"""
YAML parser for batch edit requests.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from glossary_editor.identity import RowKey

from .schema import EditRequest, EditSpec


class ParseError(Exception):
    """Error parsing an edit request file."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        super().__init__(message)


def load_edit_request(
    source: Union[str, Path, Dict[str, Any]],
) -> EditRequest:
    """Load an edit request from a YAML file or dictionary.

    Args:
        source: Path to YAML file, YAML string, or parsed dictionary

    Returns:
        EditRequest object

    Raises:
        ParseError: If the file cannot be parsed or is invalid
        FileNotFoundError: If the file does not exist
    """
    source_path: Optional[Path] = None

    if isinstance(source, dict):
        data = source
    elif isinstance(source, Path) or (isinstance(source, str) and _is_file_path(source)):
        source_path = Path(source)
        if not source_path.exists():
            raise FileNotFoundError(f"File not found: {source_path}")
        data = _load_yaml_file(source_path)
    else:
        # Assume it's a YAML string
        data = _load_yaml_string(source)

    return _parse_edit_request(data, source_path)


def _is_file_path(s: str) -> bool:
    """Check if a string looks like a file path."""
    if "\n" in s:
        return False
    if "/" in s or "\\" in s:
        return True
    if s.endswith((".yaml", ".yml")):
        return True
    return False


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load YAML from a file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        line = getattr(e, "problem_mark", None)
        line_num = line.line + 1 if line else None
        raise ParseError(f"Invalid YAML: {e}", line=line_num) from e

    if data is None:
        raise ParseError("Empty YAML file")
    if not isinstance(data, dict):
        raise ParseError("YAML root must be a mapping (dictionary)")

    return data


def _load_yaml_string(s: str) -> Dict[str, Any]:
    """Load YAML from a string."""
    try:
        data = yaml.safe_load(s)
    except yaml.YAMLError as e:
        line = getattr(e, "problem_mark", None)
        line_num = line.line + 1 if line else None
        raise ParseError(f"Invalid YAML: {e}", line=line_num) from e

    if data is None:
        raise ParseError("Empty YAML content")
    if not isinstance(data, dict):
        raise ParseError("YAML root must be a mapping (dictionary)")

    return data


def _parse_edit_request(
    data: Dict[str, Any],
    source_path: Optional[Path] = None,
) -> EditRequest:
    """Parse a dictionary into an EditRequest object."""
    session = data.get("session", {})
    if not isinstance(session, dict):
        raise ParseError("Field 'session' must be a mapping")

    edits_data = data.get("edits")
    if edits_data is None:
        raise ParseError("Missing required field: 'edits'")
    if not isinstance(edits_data, list):
        raise ParseError("Field 'edits' must be a list")
    if len(edits_data) == 0:
        raise ParseError("Field 'edits' cannot be empty")

    return EditRequest(
        edits=_parse_edits(edits_data),
        session_name=session.get("name"),
        session_description=session.get("description"),
        source_file=source_path,
    )


def _timestamp_text(value: Any) -> str:
    """Unquoted ISO timestamps arrive from YAML as datetimes; restore the text form."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ValueError("must be a scalar")
    return str(value)


def _parse_edits(edits_data: List[Any]) -> List[EditSpec]:
    """Parse a list of edit dictionaries into EditSpec objects."""
    edits = []

    for i, edit_data in enumerate(edits_data):
        if not isinstance(edit_data, dict):
            raise ParseError(f"Edit #{i + 1} must be a mapping (dictionary)")

        word = edit_data.get("word")
        if word is None:
            raise ParseError(f"Edit #{i + 1}: Missing required field 'word'")
        created_at = edit_data.get("created_at", edit_data.get("createdAt"))
        if created_at is None:
            raise ParseError(f"Edit #{i + 1}: Missing required field 'created_at'")

        fields = edit_data.get("set")
        if fields is None:
            raise ParseError(f"Edit #{i + 1}: Missing required field 'set'")
        if not isinstance(fields, dict) or not fields:
            raise ParseError(f"Edit #{i + 1}: Field 'set' must be a non-empty mapping")

        try:
            values = {str(k): _scalar_text(v) for k, v in fields.items()}
        except ValueError as e:
            raise ParseError(f"Edit #{i + 1}: every value in 'set' {e}") from None

        key = RowKey(
            word=str(word),
            sense=_scalar_text(edit_data.get("sense")),
            created_at=_timestamp_text(created_at),
        )
        edits.append(EditSpec(key=key, fields=values, line_number=None))

    return edits


def load_yaml_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load raw YAML from a file (exposed for testing).

    Raises:
        ParseError: If the file cannot be parsed
        FileNotFoundError: If the file does not exist
    """
    return _load_yaml_file(Path(path))
