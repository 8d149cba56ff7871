"""
Command-line interface for the glossary editor.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .batch import (
    BatchResult,
    ParseError,
    ValidationResult,
    execute_edit_request,
    load_edit_request,
    validate_edit_request,
)
from .db import DEFAULT_DB_PATH
from .editor import GlossaryEditor
from .exceptions import GlossaryEditorError
from .exporter import spreadsheet_title
from .identity import row_key
from .lookup import load_lookup, mock_lookup
from .models import Record, ValidationSeverity
from .validator import validate_field


def main(argv: Optional[list] = None) -> int:
    """Main entry point for glossary-editor CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        with GlossaryEditor(args.db) as editor:
            return args.func(editor, args)
    except GlossaryEditorError as e:
        print(f"\n  [ERROR] {e}")
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="glossary-editor",
        description="Edit a local glossary with undo and redo",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"Database file (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(title="commands", dest="command")

    # list command
    list_parser = subparsers.add_parser(
        "list",
        help="List glossary records",
    )
    list_parser.add_argument("--text", default="", help="Substring to search for")
    list_parser.add_argument("--domain", default="", help="Only this sense")
    list_parser.add_argument(
        "--missing-example",
        action="store_true",
        help="Only records without an example",
    )
    list_parser.add_argument(
        "--missing-note",
        action="store_true",
        help="Only records without a note",
    )
    list_parser.set_defaults(func=cmd_list)

    # domains command
    domains_parser = subparsers.add_parser(
        "domains",
        help="List the senses in use",
    )
    domains_parser.set_defaults(func=cmd_domains)

    # add command
    add_parser = subparsers.add_parser(
        "add",
        help="Add a record",
    )
    add_parser.add_argument("word", help="Headword")
    add_parser.add_argument("--sense", default="", help="Sense or domain label")
    add_parser.add_argument(
        "--definition",
        help="English definition (default: placeholder from the mock lookup)",
    )
    add_parser.add_argument(
        "--translation",
        help="Japanese translation (default: placeholder from the mock lookup)",
    )
    add_parser.add_argument("--example", default="", help="Examples, separated by ';'")
    add_parser.add_argument("--note", default="", help="Free-form note")
    add_parser.set_defaults(func=cmd_add)

    # edit command
    edit_parser = subparsers.add_parser(
        "edit",
        help="Edit fields of one record as a single undoable commit",
    )
    edit_parser.add_argument(
        "index",
        type=int,
        help="Record number as shown by 'list'",
    )
    edit_parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        required=True,
        metavar="FIELD=VALUE",
        help="Field to change (repeatable)",
    )
    edit_parser.set_defaults(func=cmd_edit)

    # undo command
    undo_parser = subparsers.add_parser(
        "undo",
        help="Undo the last commit",
    )
    undo_parser.set_defaults(func=cmd_undo)

    # redo command
    redo_parser = subparsers.add_parser(
        "redo",
        help="Redo the last undone commit",
    )
    redo_parser.set_defaults(func=cmd_redo)

    # history command
    history_parser = subparsers.add_parser(
        "history",
        help="Show undo and redo stacks",
    )
    history_parser.add_argument(
        "--clear",
        action="store_true",
        help="Forget all undo and redo steps",
    )
    history_parser.set_defaults(func=cmd_history)

    # export command
    export_parser = subparsers.add_parser(
        "export",
        help="Export the glossary as TSV",
    )
    export_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: glossary_YYYY-MM-DD.tsv)",
    )
    export_parser.set_defaults(func=cmd_export)

    # apply command
    apply_parser = subparsers.add_parser(
        "apply",
        help="Apply edits from a YAML request file",
    )
    apply_parser.add_argument(
        "file",
        type=Path,
        help="YAML file containing edit request",
    )
    apply_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Simulate execution without making changes",
    )
    apply_parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Skip confirmation prompt",
    )
    apply_parser.set_defaults(func=cmd_apply)

    # import-lookup command
    lookup_parser = subparsers.add_parser(
        "import-lookup",
        help="Add the senses of a saved lookup reply (JSON)",
    )
    lookup_parser.add_argument(
        "file",
        type=Path,
        help="JSON file containing the lookup reply",
    )
    lookup_parser.add_argument(
        "--term",
        default="",
        help="Looked-up term (default: file name)",
    )
    lookup_parser.add_argument(
        "--sense",
        dest="senses",
        action="append",
        help="Only add this sense (repeatable)",
    )
    lookup_parser.set_defaults(func=cmd_import_lookup)

    # audit command
    audit_parser = subparsers.add_parser(
        "audit",
        help="Report stored values that would not pass an edit",
    )
    audit_parser.set_defaults(func=cmd_audit)

    # clear command
    clear_parser = subparsers.add_parser(
        "clear",
        help="Delete every record",
    )
    clear_parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Skip confirmation prompt",
    )
    clear_parser.set_defaults(func=cmd_clear)

    # class-name command
    class_parser = subparsers.add_parser(
        "class-name",
        help="Show or set the class name used for the spreadsheet",
    )
    class_parser.add_argument(
        "value",
        nargs="?",
        help="New class name ('' to unset)",
    )
    class_parser.set_defaults(func=cmd_class_name)

    return parser


def cmd_list(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle list command."""
    rows = editor.filter(
        text=args.text,
        domain=args.domain,
        missing_example=args.missing_example,
        missing_note=args.missing_note,
    )

    if not rows:
        print("No records found.")
        return 0

    print(f"\n{'#':<5} {'Word':<20} {'Sense':<14} {'Definition':<40} {'Translation'}")
    print("-" * 100)
    for index, record in rows:
        definition = _clip(record.definition_en, 40)
        print(f"{index + 1:<5} {_clip(record.word, 20):<20} {_clip(record.sense, 14):<14} "
              f"{definition:<40} {record.translation_ja}")

    print(f"\n{len(rows)} of {len(editor.records)} record(s)")
    return 0


def cmd_domains(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle domains command."""
    for domain in editor.domain_options():
        print(domain)
    return 0


def cmd_add(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle add command."""
    placeholder = mock_lookup(args.word).general
    values = {
        "word": args.word,
        "sense": args.sense,
        "definition_en": args.definition if args.definition is not None else placeholder.definition_en,
        "translation_ja": args.translation if args.translation is not None else placeholder.translation_ja,
        "example_en": args.example,
        "note": args.note,
    }

    clean = {}
    for name, raw in values.items():
        check = validate_field(name, raw)
        if not check.accepted:
            print(f"\n  [ERROR] {name}: {check.reason}")
            return 1
        clean[name] = check.value

    record = editor.append(Record(**clean))
    print(f"Added {record.word!r} ({record.sense or 'General'}) as #{len(editor.records)}")
    return _storage_status(editor)


def cmd_edit(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle edit command."""
    records = editor.records
    if not 1 <= args.index <= len(records):
        print(f"Record {args.index} not found.")
        return 1
    key = row_key(records[args.index - 1])

    assignments = []
    for item in args.assignments:
        name, sep, value = item.partition("=")
        if not sep:
            print(f"\n  [ERROR] Expected FIELD=VALUE, got {item!r}")
            return 1
        assignments.append((name.strip(), value))

    editor.enable_editing()
    for name, value in assignments:
        check = editor.stage_cell(key, name, value)
        if not check.accepted:
            editor.finish_editing()
            print(f"\n  [ERROR] {name}: {check.reason}")
            return 1

    result = editor.commit()
    if result.applied:
        print(f"Updated record {args.index} ({result.staged} field(s) changed)")
    else:
        print("Nothing changed.")
    return _storage_status(editor)


def cmd_undo(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle undo command."""
    if editor.undo() is None:
        print("Nothing to undo.")
        return 1
    print(f"Undone. {editor.undo_depth} undo / {editor.redo_depth} redo step(s) left.")
    return _storage_status(editor)


def cmd_redo(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle redo command."""
    if editor.redo() is None:
        print("Nothing to redo.")
        return 1
    print(f"Redone. {editor.undo_depth} undo / {editor.redo_depth} redo step(s) left.")
    return _storage_status(editor)


def cmd_history(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle history command."""
    if args.clear:
        editor.clear_history()
        print("History cleared.")
        return _storage_status(editor)

    undo = editor.undo_snapshots()
    redo = editor.redo_snapshots()
    print(f"\nUndo steps: {len(undo)}")
    for i, snapshot in enumerate(reversed(undo), start=1):
        print(f"  -{i}: {len(snapshot)} record(s)")
    print(f"Redo steps: {len(redo)}")
    for i, snapshot in enumerate(reversed(redo), start=1):
        print(f"  +{i}: {len(snapshot)} record(s)")
    return 0


def cmd_export(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle export command."""
    path = editor.export_tsv(args.output)
    print(f"Exported {len(editor.records)} record(s) to {path}")
    return 0


def cmd_apply(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle apply command."""
    print(f"\nLoading {args.file}...")

    try:
        request = load_edit_request(args.file)
    except ParseError as e:
        print(f"\n  [PARSE ERROR] {e}")
        if e.line:
            print(f"               Line: {e.line}")
        return 1
    except FileNotFoundError as e:
        print(f"\n  [ERROR] {e}")
        return 1

    print(f"  Edits: {len(request.edits)}")
    if request.session_name:
        print(f"  Session: \"{request.session_name}\"")

    # Validate first
    print("\nValidating...")
    validation = validate_edit_request(request, editor.records)

    if not validation.is_valid:
        print("\nValidation failed:")
        _print_validation_result(validation)
        print(f"\nFound {validation.error_count} error(s). Fix errors before applying.")
        return 1

    if validation.warning_count > 0:
        print("\nWarnings:")
        _print_validation_result(validation, warnings_only=True)

    # Confirm unless --yes or --dry-run
    if args.dry_run:
        print("\n[DRY RUN] Simulating execution...")
    elif not args.yes:
        response = input(f"\nApply {len(request.edits)} edit(s)? [y/N] ")
        if response.lower() not in ("y", "yes"):
            print("Aborted.")
            return 1

    result = execute_edit_request(editor, request, dry_run=args.dry_run)
    _print_batch_result(result)

    if result.rejected_count > 0:
        return 1
    return _storage_status(editor)


def cmd_import_lookup(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle import-lookup command."""
    try:
        result = load_lookup(args.file, args.term)
    except FileNotFoundError as e:
        print(f"\n  [ERROR] {e}")
        return 1

    if result.corrected_to:
        print(f"  Corrected to: {result.corrected_to}")
    added = editor.append_lookup(result, args.senses)
    if not added:
        print("No senses added.")
        return 1
    for record in added:
        print(f"Added {record.word!r} ({record.sense})")
    return _storage_status(editor)


def cmd_audit(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle audit command."""
    findings = editor.audit()
    if not findings:
        print("No problems found.")
        return 0

    errors = 0
    for finding in findings:
        label = "ERROR" if finding.severity == ValidationSeverity.ERROR else "WARN"
        errors += label == "ERROR"
        print(f"  [{label:<5}] #{finding.index + 1} {finding.field}: {finding.message} ({finding.rule_id})")

    print(f"\nFound {errors} error(s), {len(findings) - errors} warning(s)")
    return 1 if errors else 0


def cmd_clear(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle clear command."""
    count = len(editor.records)
    if not args.yes:
        response = input(f"\nDelete all {count} record(s) on this device? [y/N] ")
        if response.lower() not in ("y", "yes"):
            print("Aborted.")
            return 1

    editor.clear_all()
    print(f"Deleted {count} record(s).")
    return _storage_status(editor)


def cmd_class_name(editor: GlossaryEditor, args: argparse.Namespace) -> int:
    """Handle class-name command."""
    if args.value is not None:
        editor.class_name = args.value
    print(f"Class name: {editor.class_name or '(unset)'}")
    print(f"Spreadsheet: {spreadsheet_title(editor.class_name)}")
    return 0


def _clip(text: str, width: int) -> str:
    return text if len(text) <= width else text[:width - 3] + "..."


def _storage_status(editor: GlossaryEditor) -> int:
    if editor.last_storage_ok:
        return 0
    print("\n  [WARN]  Changes could not be saved to disk; they are kept for this run only.")
    return 1


def _print_validation_result(
    result: ValidationResult,
    errors_only: bool = False,
    warnings_only: bool = False,
) -> None:
    """Print validation errors and warnings."""
    if not warnings_only:
        for error in result.errors:
            line_info = f" (line {error.line_number})" if error.line_number else ""
            print(f"  [ERROR] Edit #{error.index + 1} ({error.field}): {error.message}{line_info}")

    if not errors_only:
        for warning in result.warnings:
            line_info = f" (line {warning.line_number})" if warning.line_number else ""
            print(f"  [WARN]  Edit #{warning.index + 1}: {warning.message}{line_info}")


def _print_batch_result(result: BatchResult) -> None:
    """Print batch execution result."""
    print()
    for change in result.changes:
        print(f"  [{change.index + 1}] {change.field}: {change.status.value.upper()}")
        if change.message:
            print(f"         {change.message}")

    print(f"\nResults:")
    print(f"  Total:     {result.total_count}")
    print(f"  Staged:    {result.staged_count}")
    print(f"  Unchanged: {result.unchanged_count}")
    print(f"  Rejected:  {result.rejected_count}")
    print(f"  Stale:     {result.stale_count}")
    print(f"  Time:      {result.duration_seconds:.2f}s")

    if result.commit is not None:
        print(f"  Rows changed: {result.commit.applied}")
        if result.commit.applied:
            print(f"\nTo revert: glossary-editor undo")


if __name__ == "__main__":
    sys.exit(main())
