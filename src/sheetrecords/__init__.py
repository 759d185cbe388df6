"""sheetrecords - Keyed records on top of a Google Sheets range.

Rows of a single sheet range are exposed as records keyed by an ``ID``
column, with query, insert and partial update operations.
"""

__version__ = "0.1.0"

from sheetrecords.exceptions import (
    APIError,
    AuthenticationError,
    NotFoundError,
    SheetRecordsError,
    TransportError,
    UnknownFieldError,
)
from sheetrecords.records import ID_FIELD, CellValue, Record
from sheetrecords.store import RecordStore
from sheetrecords.transport import (
    CellWrite,
    GoogleSheetsTransport,
    LocalFileTransport,
    Transport,
)

__all__ = [
    "APIError",
    "AuthenticationError",
    "CellValue",
    "CellWrite",
    "GoogleSheetsTransport",
    "ID_FIELD",
    "LocalFileTransport",
    "NotFoundError",
    "Record",
    "RecordStore",
    "SheetRecordsError",
    "Transport",
    "TransportError",
    "UnknownFieldError",
    "__version__",
]
