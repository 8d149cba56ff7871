"""
Data classes and constants for batch edit requests.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from glossary_editor.identity import RowKey
from glossary_editor.models import CommitResult, EDITABLE_FIELDS


# =============================================================================
# Outcome of a single cell edit
# =============================================================================

class EditStatus(str, Enum):
    """What happened to one cell of a batch edit."""
    STAGED = "staged"
    UNCHANGED = "unchanged"
    REJECTED = "rejected"
    STALE = "stale"


# =============================================================================
# Field Requirements
# =============================================================================

# Keys each edit must carry to identify its row
REQUIRED_KEYS: List[str] = ["word", "created_at", "set"]

# Keys that may accompany them
OPTIONAL_KEYS: List[str] = ["sense"]

# Fields an edit may set
SETTABLE_FIELDS = frozenset(f.value for f in EDITABLE_FIELDS)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class EditSpec:
    """Field values to set on one row, identified by its natural key."""
    key: RowKey
    fields: Dict[str, str]
    line_number: Optional[int] = None


@dataclass
class EditRequest:
    """Parsed edit request from YAML."""
    edits: List[EditSpec]
    session_name: Optional[str] = None
    session_description: Optional[str] = None
    source_file: Optional[Path] = None


@dataclass
class ValidationError:
    """Validation error for a specific edit."""
    index: int
    field: str
    message: str
    line_number: Optional[int] = None


@dataclass
class ValidationWarning:
    """Validation warning for a specific edit."""
    index: int
    message: str
    line_number: Optional[int] = None


@dataclass
class ValidationResult:
    """Result of validating an edit request."""
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)


@dataclass
class EditResult:
    """Result of staging a single cell."""
    index: int
    field: str
    status: EditStatus
    message: str = ""


@dataclass
class BatchResult:
    """Result of executing a batch edit request."""
    total_count: int
    changes: List[EditResult]
    commit: Optional[CommitResult]
    duration_seconds: float
    dry_run: bool = False

    def _count(self, status: EditStatus) -> int:
        return sum(1 for c in self.changes if c.status is status)

    @property
    def staged_count(self) -> int:
        return self._count(EditStatus.STAGED)

    @property
    def unchanged_count(self) -> int:
        return self._count(EditStatus.UNCHANGED)

    @property
    def rejected_count(self) -> int:
        return self._count(EditStatus.REJECTED)

    @property
    def stale_count(self) -> int:
        return self._count(EditStatus.STALE)
