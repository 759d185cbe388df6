"""CLI entry point for sheetrecords.

Usage:
    python -m sheetrecords -s <spreadsheet_id_or_url> -r <range> fields
    python -m sheetrecords -s <spreadsheet_id_or_url> -r <range> query [--where F=V ...]
    python -m sheetrecords -s <spreadsheet_id_or_url> -r <range> insert <records.json|->
    python -m sheetrecords -s <spreadsheet_id_or_url> -r <range> update --where F=V --set F=V
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from sheetrecords.config import get_settings
from sheetrecords.credentials import CredentialsManager
from sheetrecords.exceptions import SheetRecordsError
from sheetrecords.store import RecordStore
from sheetrecords.transport import GoogleSheetsTransport, LocalFileTransport, Transport
from sheetrecords.utils import parse_spreadsheet_id


def parse_assignments(pairs: list[str] | None) -> dict[str, str]:
    """Parse ``FIELD=VALUE`` arguments into a mapping."""
    result: dict[str, str] = {}
    for pair in pairs or []:
        field, sep, value = pair.partition("=")
        if not sep or not field:
            raise ValueError(f"Expected FIELD=VALUE, got {pair!r}")
        result[field] = value
    return result


def _build_transport(args: argparse.Namespace) -> Transport:
    settings = get_settings()
    if args.local:
        return LocalFileTransport(Path(args.local))

    manager = CredentialsManager(
        access_token=settings.access_token or None,
        service_account_path=args.service_account or settings.service_account_path or None,
    )
    token = manager.get_token()
    return GoogleSheetsTransport(access_token=token.access_token, timeout=settings.timeout)


def _open_store(args: argparse.Namespace) -> RecordStore:
    settings = get_settings()
    spreadsheet = args.spreadsheet or settings.spreadsheet_id
    range_name = args.range or settings.range_name
    if not spreadsheet or not range_name:
        raise ValueError(
            "Spreadsheet and range are required "
            "(--spreadsheet/--range or SHEETRECORDS_SPREADSHEET_ID/SHEETRECORDS_RANGE_NAME)"
        )
    return RecordStore(_build_transport(args), parse_spreadsheet_id(spreadsheet), range_name)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


async def cmd_fields(args: argparse.Namespace) -> int:
    """Print the field list of the range."""
    async with _open_store(args) as store:
        _print_json(await store.fields())
    return 0


async def cmd_query(args: argparse.Namespace) -> int:
    """Print the records matching --where criteria."""
    criteria = parse_assignments(args.where)
    async with _open_store(args) as store:
        _print_json(await store.query(criteria or None))
    return 0


async def cmd_insert(args: argparse.Namespace) -> int:
    """Insert records read from a JSON file (object or array)."""
    if args.records_file == "-":
        text = sys.stdin.read()
    else:
        records_file = Path(args.records_file)
        if not records_file.exists():
            print(f"Error: Records file not found: {records_file}", file=sys.stderr)
            return 1
        text = records_file.read_text()

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {args.records_file}: {e}", file=sys.stderr)
        return 1
    items = payload if isinstance(payload, list) else [payload]
    if not all(isinstance(item, dict) for item in items):
        print("Error: Expected a JSON object or array of objects", file=sys.stderr)
        return 1

    async with _open_store(args) as store:
        _print_json(await store.insert(payload))
    return 0


async def cmd_update(args: argparse.Namespace) -> int:
    """Apply --set values to records matching --where criteria."""
    criteria = parse_assignments(args.where)
    patch = parse_assignments(args.set)
    if not patch:
        print("Error: Nothing to update, pass at least one --set", file=sys.stderr)
        return 1

    async with _open_store(args) as store:
        changed = await store.update(criteria or None, patch)

    if changed is None:
        print("No matching records.", file=sys.stderr)
        _print_json([])
    else:
        _print_json(changed)
    return 0


async def _run(args: argparse.Namespace) -> int:
    try:
        result: int = await args.func(args)
        return result
    except (SheetRecordsError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sheetrecords",
        description="Query, insert and update records stored in a Google Sheets range",
    )
    parser.add_argument(
        "-s",
        "--spreadsheet",
        help="Spreadsheet ID or full Google Sheets URL (or SHEETRECORDS_SPREADSHEET_ID)",
    )
    parser.add_argument(
        "-r",
        "--range",
        help="Sheet title or named range holding the records (or SHEETRECORDS_RANGE_NAME)",
    )
    parser.add_argument(
        "--local",
        metavar="DIR",
        help="Read and write local JSON files under DIR instead of Google Sheets",
    )
    parser.add_argument(
        "--service-account",
        help="Path to service account JSON file (or SERVICE_ACCOUNT_PATH env var)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fields_parser = subparsers.add_parser("fields", help="Print the field list")
    fields_parser.set_defaults(func=cmd_fields)

    query_parser = subparsers.add_parser("query", help="Print matching records")
    query_parser.add_argument(
        "-w",
        "--where",
        action="append",
        metavar="FIELD=VALUE",
        help="Match records whose FIELD equals VALUE (repeatable, all must match)",
    )
    query_parser.set_defaults(func=cmd_query)

    insert_parser = subparsers.add_parser("insert", help="Append records")
    insert_parser.add_argument(
        "records_file",
        help="JSON file with a record object or an array of records ('-' for stdin)",
    )
    insert_parser.set_defaults(func=cmd_insert)

    update_parser = subparsers.add_parser("update", help="Update matching records")
    update_parser.add_argument(
        "-w",
        "--where",
        action="append",
        metavar="FIELD=VALUE",
        help="Match records whose FIELD equals VALUE (repeatable, all must match)",
    )
    update_parser.add_argument(
        "--set",
        action="append",
        metavar="FIELD=VALUE",
        help="Set FIELD to VALUE on every matching record (repeatable)",
    )
    update_parser.set_defaults(func=cmd_update)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = "INFO" if args.verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    result: int = asyncio.run(_run(args))
    return result


if __name__ == "__main__":
    sys.exit(main())
