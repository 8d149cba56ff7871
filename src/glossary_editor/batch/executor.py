"""
Executor for batch edit requests.

Applies edits through the editor's staged-edit path, so a whole request
lands as a single commit and a single undo step.
"""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, List

from glossary_editor.exceptions import GlossaryEditorError
from glossary_editor.identity import find_index

from .schema import BatchResult, EditRequest, EditResult, EditStatus

if TYPE_CHECKING:
    from glossary_editor.editor import GlossaryEditor

logger = logging.getLogger(__name__)


def execute_edit_request(
    editor: GlossaryEditor,
    request: EditRequest,
    dry_run: bool = False,
) -> BatchResult:
    """Execute a batch edit request.

    Edits already staged in *editor* are dropped first.

    Args:
        editor: The editor whose collection is changed
        request: The edit request to execute
        dry_run: If True, stage and report but do not commit

    Returns:
        BatchResult with details of each cell
    """
    start_time = time.time()
    results: List[EditResult] = []

    label = request.session_name or "batch edit"
    logger.info(f"{'Simulating' if dry_run else 'Applying'} {label}: {len(request.edits)} edit(s)")

    editor.discard()
    editor.enable_editing()
    try:
        for i, edit in enumerate(request.edits):
            stale = find_index(editor.records, edit.key) is None
            for name, value in edit.fields.items():
                if stale:
                    results.append(EditResult(i, name, EditStatus.STALE, "Row not found"))
                    continue
                results.append(_stage(editor, i, edit.key, name, value))
    except Exception:
        editor.finish_editing()
        raise

    commit = None
    if dry_run:
        editor.finish_editing()
    else:
        commit = editor.commit()

    return BatchResult(
        total_count=len(results),
        changes=results,
        commit=commit,
        duration_seconds=time.time() - start_time,
        dry_run=dry_run,
    )


def _stage(editor: GlossaryEditor, index: int, key, name: str, value: str) -> EditResult:
    """Stage one cell and classify the outcome."""
    try:
        check = editor.stage_cell(key, name, value)
    except GlossaryEditorError as e:
        logger.debug(f"Edit #{index + 1} ({name}) rejected: {e}")
        return EditResult(index, name, EditStatus.REJECTED, str(e))

    if not check.accepted:
        return EditResult(index, name, EditStatus.REJECTED, check.reason or "")
    if editor.pending_value(key, name) is None:
        return EditResult(index, name, EditStatus.UNCHANGED, "Same as current value")
    return EditResult(index, name, EditStatus.STAGED)
