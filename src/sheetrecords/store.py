"""RecordStore - keyed records on top of a single spreadsheet range.

Every operation fetches the whole range, works on an in-memory copy and
issues at most one write. Nothing is cached between calls, and a fetch
followed by a write is not atomic: a concurrent writer can change the
range in between (last writer wins).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import TracebackType
from typing import Any

from sheetrecords.exceptions import UnknownFieldError
from sheetrecords.ids import generate_id
from sheetrecords.matching import filter_records, matches_query
from sheetrecords.records import (
    ID_FIELD,
    Record,
    field_index,
    project_rows,
    record_to_row,
)
from sheetrecords.transport import CellWrite, Transport
from sheetrecords.utils import cell_address

logger = logging.getLogger(__name__)

# Data position i lives on sheet row i + 2: one header row, 1-based rows.
FIRST_DATA_ROW = 2


class RecordStore:
    """Query, insert and update records stored as rows of a sheet range.

    The first column of the range holds the record ID and is always exposed
    as the ``ID`` field. The remaining columns are named by the header row.

    Example:
        >>> from sheetrecords.transport import GoogleSheetsTransport
        >>> transport = GoogleSheetsTransport(access_token="ya29...")
        >>> async with RecordStore(transport, "1Bxi...", "Tasks") as store:
        ...     await store.insert({"Name": "Write docs", "Status": "open"})
        ...     await store.update({"Status": "open"}, {"Status": "closed"})
    """

    def __init__(self, transport: Transport, spreadsheet_id: str, range_name: str) -> None:
        """Initialize the store.

        Args:
            transport: Transport implementation for reading and writing values
            spreadsheet_id: The ID of the spreadsheet (from the URL)
            range_name: The sheet title or named range holding the records
        """
        self._transport = transport
        self.spreadsheet_id = spreadsheet_id
        self.range_name = range_name

    async def __aenter__(self) -> RecordStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()

    async def _load(self) -> tuple[list[str], list[Record]]:
        rows = await self._transport.fetch_range(self.spreadsheet_id, self.range_name)
        return project_rows(rows)

    async def query(self, criteria: Mapping[str, Any] | None = None) -> list[Record]:
        """Return the records matching ``criteria``, in sheet order.

        Args:
            criteria: Field -> expected value; all must match. None matches all.

        Returns:
            Matching records
        """
        _, records = await self._load()
        return filter_records(records, criteria)

    async def fields(self) -> list[str]:
        """Return the field list, ``ID`` first."""
        fields, _ = await self._load()
        return fields

    async def insert(
        self, new_data: Mapping[str, Any] | Sequence[Mapping[str, Any]]
    ) -> list[Record]:
        """Append one or more records as new rows.

        Records without an ID get a fresh one that collides neither with
        the range nor with earlier records of the same batch. All rows are
        appended in a single request.

        Args:
            new_data: A record or a sequence of records

        Returns:
            The inserted records with their IDs filled in, in input order
        """
        fields, records = await self._load()
        items = [new_data] if isinstance(new_data, Mapping) else list(new_data)

        known_ids: set[Any] = {record.get(ID_FIELD) for record in records}
        inserted: list[Record] = []
        new_rows: list[list[str]] = []

        for item in items:
            record: Record = dict(item)
            if record.get(ID_FIELD) is None:
                record[ID_FIELD] = generate_id(known_ids)
            known_ids.add(record[ID_FIELD])
            inserted.append(record)
            new_rows.append(record_to_row(fields, record))

        if new_rows:
            await self._transport.append_rows(
                self.spreadsheet_id, self.range_name, new_rows
            )
        logger.debug("Inserted %d records into %s", len(inserted), self.range_name)
        return inserted

    async def update(
        self, criteria: Mapping[str, Any] | None, patch: Mapping[str, Any]
    ) -> list[Record] | None:
        """Set the ``patch`` fields on every record matching ``criteria``.

        All cell writes go out in one batch request.

        Args:
            criteria: Field -> expected value; None matches every record
            patch: Field -> new value

        Returns:
            The updated records, or None when nothing matched

        Raises:
            UnknownFieldError: If ``patch`` names a field missing from the
                header row. Nothing is written in that case.
        """
        fields, records = await self._load()

        matched = [
            (position, record)
            for position, record in enumerate(records)
            if matches_query(record, criteria)
        ]
        if not matched:
            logger.info("0 rows returned for %r in %s", criteria, self.range_name)
            return None

        columns: dict[str, int] = {}
        for name in patch:
            column = field_index(fields, name)
            if column == -1:
                raise UnknownFieldError(name, self.range_name)
            columns[name] = column

        writes: list[CellWrite] = []
        changed: list[Record] = []
        for position, record in matched:
            updated = dict(record)
            for name, value in patch.items():
                updated[name] = value
                address = cell_address(
                    self.range_name, columns[name], position + FIRST_DATA_ROW
                )
                writes.append(CellWrite(address, value))
            if patch:
                changed.append(updated)

        if writes:
            await self._transport.batch_write_cells(self.spreadsheet_id, writes)
        logger.debug(
            "Updated %d records (%d cells) in %s", len(changed), len(writes), self.range_name
        )
        return changed
