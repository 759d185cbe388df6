"""Custom exceptions for sheetrecords."""

from __future__ import annotations


class SheetRecordsError(Exception):
    """Base exception for all sheetrecords errors."""

    pass


class TransportError(SheetRecordsError):
    """Base exception for transport-related errors."""

    pass


class AuthenticationError(TransportError):
    """Raised when authentication fails (401/403)."""

    pass


class NotFoundError(TransportError):
    """Raised when a spreadsheet or range is not found (404)."""

    def __init__(self, spreadsheet_id: str, message: str | None = None) -> None:
        self.spreadsheet_id = spreadsheet_id
        super().__init__(message or f"Spreadsheet not found: {spreadsheet_id}")


class APIError(TransportError):
    """Raised for other API errors."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(f"API error {status_code}: {message}")


class UnknownFieldError(SheetRecordsError):
    """Raised when an update names a field that is not a column of the range.

    Raised before any cell is written, so the range is left untouched.
    """

    def __init__(self, field: str, range_name: str) -> None:
        self.field = field
        self.range_name = range_name
        super().__init__(f"Bad field: {field!r} is not a column of '{range_name}'")
