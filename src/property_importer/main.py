#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from property_importer import __version__
from property_importer.app import commit_import, describe_batch, list_batches, preview_file
from property_importer.config import ConfigurationError, configure_logging
from property_importer.domain.model import RowStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from property_importer.app import BatchReport
    from property_importer.domain.import_pipeline import CommitResult, PreviewResult


def _batch_id(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid batch id: {value}") from exc


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stage, review and commit property imports")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log pipeline progress at DEBUG level",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    preview = commands.add_parser("preview", help="Stage and validate a CSV or XLSX file")
    preview.add_argument("file", type=Path, help="Spreadsheet to import")

    commit = commands.add_parser("commit", help="Commit the verified rows of a previewed batch")
    commit.add_argument("batch_id", type=_batch_id)

    show = commands.add_parser("show", help="Show a batch and its staged rows")
    show.add_argument("batch_id", type=_batch_id)
    show.add_argument(
        "--rejected-only",
        action="store_true",
        help="Only list rejected rows",
    )

    listing = commands.add_parser("list", help="List recent batches")
    listing.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Number of batches to show (default: %(default)s)",
    )
    return parser.parse_args(list(argv))


def _print_preview(result: PreviewResult) -> None:
    print(f"Batch {result.batch_id}: {result.status}")
    if not result.ok:
        for error in result.errors:
            print(f"  error: {error}")
        return
    summary = result.summary
    print(
        f"  {summary['total_rows']} rows staged: "
        f"{summary['verified_rows']} verified, {summary['rejected_rows']} rejected"
    )
    print(
        f"  {summary['new_properties']} new properties, "
        f"{summary['existing_properties']} already in the database"
    )


def _print_commit(result: CommitResult) -> None:
    print(f"Batch {result.batch_id}: {result.status}")
    if not result.ok:
        for error in result.errors:
            print(f"  error: {error}")
        return
    print(
        f"  created {len(result.properties_created)} properties "
        f"and {len(result.units_created)} units"
    )


def _print_report(report: BatchReport, *, rejected_only: bool = False) -> None:
    print(f"Batch {report.batch_id} ({report.filename}): {report.status}")
    for error in report.errors:
        print(f"  error: {error}")
    for row in report.rows:
        if rejected_only and row.status != RowStatus.REJECTED:
            continue
        label = row.building_name or "?"
        if row.unit_number:
            label = f"{label} - Unit {row.unit_number}"
        print(f"  row {row.source_row_number} [{row.record_type}] {label}: {row.status}")
        for message in row.messages:
            print(f"    - {message}")


def _print_batches(reports: Sequence[BatchReport]) -> None:
    for report in reports:
        created = report.created_at.strftime("%Y-%m-%d %H:%M")
        print(f"{report.batch_id}  {created}  {report.status:<9}  {report.filename}")


def _run(args: argparse.Namespace) -> bool:
    if args.command == "preview":
        preview = preview_file(args.file)
        _print_preview(preview)
        return preview.ok
    if args.command == "commit":
        committed = commit_import(args.batch_id)
        _print_commit(committed)
        return committed.ok
    if args.command == "show":
        _print_report(describe_batch(args.batch_id), rejected_only=args.rejected_only)
        return True
    _print_batches(list_batches(limit=args.limit))
    return True


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO, force=True)

    if parsed_args.command == "preview" and not parsed_args.file.is_file():
        print(f"Error: file not found: {parsed_args.file}", file=sys.stderr)
        sys.exit(2)
    if parsed_args.command == "list" and parsed_args.limit < 1:
        print("Error: limit must be positive", file=sys.stderr)
        sys.exit(2)

    try:
        ok = _run(parsed_args)
    except ConfigurationError as e:
        hint = f" (check {e.setting})" if e.setting else ""
        print(f"Error: {e}{hint}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if not ok:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def cli() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    cli()
