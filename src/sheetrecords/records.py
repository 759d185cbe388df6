"""Mapping between raw sheet rows and keyed records.

The first row of a range is the header. Its first cell is always exposed
as the reserved ``ID`` field, whatever the sheet actually says there, and
every other column is named after its header cell. Column position is
authoritative: a field name maps to the first column carrying it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Union

ID_FIELD = "ID"

CellValue = Union[str, int, float, bool, None]
Record = dict[str, CellValue]


def project_fields(header_row: Sequence[Any]) -> list[str]:
    """Return the field list for a header row, with column 0 renamed to ID."""
    fields = ["" if cell is None else str(cell) for cell in header_row]
    if fields:
        fields[0] = ID_FIELD
    return fields


def row_to_record(fields: Sequence[str], row: Sequence[Any]) -> Record:
    """Zip ``fields`` against ``row`` by position.

    Rows shorter than the field list leave the trailing fields as None.
    Cells beyond the header width are dropped.
    """
    record: Record = {}
    for index, name in enumerate(fields):
        # duplicated header names: first column wins
        if name in record:
            continue
        record[name] = row[index] if index < len(row) else None
    return record


def project_rows(rows: Sequence[Sequence[Any]]) -> tuple[list[str], list[Record]]:
    """Split a raw range into its field list and data records."""
    if not rows:
        return [], []
    fields = project_fields(rows[0])
    records = [row_to_record(fields, row) for row in rows[1:]]
    return fields, records


def cell_text(value: Any) -> str:
    """Render a value the way the sheet displays it.

    Booleans become ``true``/``false`` and whole floats drop the trailing
    ``.0``, so ``1.0`` is written as ``1``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def record_to_row(fields: Sequence[str], record: Mapping[str, Any]) -> list[str]:
    """Flatten ``record`` to one string per field, in field order.

    Present values are rendered with ``cell_text`` and stripped; missing or
    None values become the empty string.
    """
    row: list[str] = []
    for name in fields:
        value = record.get(name)
        row.append("" if value is None else cell_text(value).strip())
    return row


def field_index(fields: Sequence[str], name: str) -> int:
    """Return the first column position of ``name``, or -1 if absent."""
    try:
        return list(fields).index(name)
    except ValueError:
        return -1
