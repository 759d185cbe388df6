"""Transport layer for reading and writing spreadsheet values.

Defines the Transport protocol and implementations:
- GoogleSheetsTransport: Production transport using the Google Sheets API
- LocalFileTransport: Test transport reading and writing local golden files
"""

from __future__ import annotations

import json
import logging
import ssl
import urllib.parse
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

import certifi
import httpx

from sheetrecords.exceptions import (
    APIError,
    AuthenticationError,
    NotFoundError,
    TransportError,
)
from sheetrecords.utils import a1_to_cell, escape_sheet_title

logger = logging.getLogger(__name__)

# API constants
API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"
DEFAULT_TIMEOUT = 60
VALUE_INPUT_OPTION = "RAW"
INSERT_DATA_OPTION = "INSERT_ROWS"


@dataclass(frozen=True)
class CellWrite:
    """A single-cell write: an A1 address and the value to store there."""

    range: str
    value: Any

    def to_value_range(self) -> dict[str, Any]:
        """Render as a ValueRange for values:batchUpdate."""
        return {"range": self.range, "values": [[self.value]]}


class Transport(ABC):
    """Abstract base class for spreadsheet value transport.

    Implementations fetch a whole named range, append rows after it, and
    write arbitrarily many single cells in one round trip.
    """

    @abstractmethod
    async def fetch_range(self, spreadsheet_id: str, range_name: str) -> list[list[str]]:
        """Fetch every row of a range, header first.

        Args:
            spreadsheet_id: The spreadsheet identifier
            range_name: The named range or sheet title

        Returns:
            Row-major cell values; trailing empty cells may be omitted
        """
        ...

    @abstractmethod
    async def append_rows(
        self,
        spreadsheet_id: str,
        range_name: str,
        rows: Sequence[Sequence[Any]],
    ) -> dict[str, Any]:
        """Append rows after the last populated row of a range.

        Args:
            spreadsheet_id: The spreadsheet identifier
            range_name: The named range or sheet title
            rows: Rows to append, in order

        Returns:
            The API response
        """
        ...

    @abstractmethod
    async def batch_write_cells(
        self,
        spreadsheet_id: str,
        writes: Sequence[CellWrite],
    ) -> dict[str, Any]:
        """Write many single cells in one request.

        Args:
            spreadsheet_id: The spreadsheet identifier
            writes: Cell addresses (A1 notation with range prefix) and values

        Returns:
            The API response
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        ...


class GoogleSheetsTransport(Transport):
    """Production transport backed by the Google Sheets values API.

    Handles authentication, SSL, and HTTP communication.
    """

    def __init__(
        self,
        access_token: str,
        timeout: int = DEFAULT_TIMEOUT,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            access_token: OAuth2 access token with the spreadsheets scope
            timeout: Request timeout in seconds
            http_transport: Optional httpx transport (used by tests)
        """
        self._access_token = access_token
        self._timeout = timeout
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        self._client = httpx.AsyncClient(
            timeout=timeout,
            verify=ssl_context,
            transport=http_transport,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

    async def fetch_range(self, spreadsheet_id: str, range_name: str) -> list[list[str]]:
        """GET /v4/spreadsheets/{id}/values/{range}"""
        url = f"{API_BASE}/{spreadsheet_id}/values/{_quote_range(range_name)}"
        response = await self._request(
            "GET", url, params={"valueRenderOption": "FORMATTED_VALUE"}
        )
        values: list[list[str]] = response.get("values", [])
        logger.debug("Fetched %d rows from %s", len(values), range_name)
        return values

    async def append_rows(
        self,
        spreadsheet_id: str,
        range_name: str,
        rows: Sequence[Sequence[Any]],
    ) -> dict[str, Any]:
        """POST /v4/spreadsheets/{id}/values/{range}:append"""
        url = f"{API_BASE}/{spreadsheet_id}/values/{_quote_range(range_name)}:append"
        logger.debug("Appending %d rows to %s", len(rows), range_name)
        return await self._request(
            "POST",
            url,
            params={
                "valueInputOption": VALUE_INPUT_OPTION,
                "insertDataOption": INSERT_DATA_OPTION,
            },
            json={"values": [list(row) for row in rows]},
        )

    async def batch_write_cells(
        self,
        spreadsheet_id: str,
        writes: Sequence[CellWrite],
    ) -> dict[str, Any]:
        """POST /v4/spreadsheets/{id}/values:batchUpdate"""
        url = f"{API_BASE}/{spreadsheet_id}/values:batchUpdate"
        logger.debug("Writing %d cells to %s", len(writes), spreadsheet_id)
        return await self._request(
            "POST",
            url,
            json={
                "valueInputOption": VALUE_INPUT_OPTION,
                "data": [write.to_value_range() for write in writes],
            },
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and map HTTP failures."""
        try:
            response = await self._client.request(method, url, params=params, json=json)
            response.raise_for_status()
            result: dict[str, Any] = response.json()
            return result
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 401:
                raise AuthenticationError("Invalid or expired access token") from e
            if status == 403:
                raise AuthenticationError(
                    "Access denied. Check your scopes and permissions."
                ) from e
            if status == 404:
                raise NotFoundError(
                    _spreadsheet_id_from_url(url),
                    "Spreadsheet or range not found. Check the ID and sharing permissions.",
                ) from e
            raise APIError(status, e.response.text) from e
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


class LocalFileTransport(Transport):
    """Test transport that reads and writes local golden files.

    Expected directory structure:
        golden_dir/
            <spreadsheet_id>/
                <range_name>.json    # {"values": [[...], ...]}

    Appends and cell writes are applied to the files, so a sequence of
    operations behaves like it would against a live sheet.
    """

    def __init__(self, golden_dir: Path) -> None:
        """Initialize the transport.

        Args:
            golden_dir: Directory containing golden files
        """
        self._golden_dir = golden_dir

    async def fetch_range(self, spreadsheet_id: str, range_name: str) -> list[list[str]]:
        """Read range values from the local file."""
        return self._read(spreadsheet_id, range_name)

    async def append_rows(
        self,
        spreadsheet_id: str,
        range_name: str,
        rows: Sequence[Sequence[Any]],
    ) -> dict[str, Any]:
        """Append rows to the local file."""
        values = self._read(spreadsheet_id, range_name)
        start = len(values) + 1
        values.extend([list(row) for row in rows])
        self._write(spreadsheet_id, range_name, values)
        return {
            "spreadsheetId": spreadsheet_id,
            "updates": {"updatedRows": len(rows), "updatedRange": f"{range_name}!{start}"},
        }

    async def batch_write_cells(
        self,
        spreadsheet_id: str,
        writes: Sequence[CellWrite],
    ) -> dict[str, Any]:
        """Apply single-cell writes to the local files they address."""
        by_range: dict[str, list[CellWrite]] = {}
        for write in writes:
            range_name = _unescape_sheet_title(write.range.rpartition("!")[0])
            by_range.setdefault(range_name, []).append(write)

        for range_name, range_writes in by_range.items():
            values = self._read(spreadsheet_id, range_name)
            for write in range_writes:
                row_index, col_index = a1_to_cell(write.range)
                while len(values) <= row_index:
                    values.append([])
                row = values[row_index]
                while len(row) <= col_index:
                    row.append("")
                row[col_index] = write.value
            self._write(spreadsheet_id, range_name, values)

        return {"spreadsheetId": spreadsheet_id, "totalUpdatedCells": len(writes)}

    async def close(self) -> None:
        """No-op for local file transport."""
        pass

    def _path(self, spreadsheet_id: str, range_name: str) -> Path:
        return self._golden_dir / spreadsheet_id / f"{range_name}.json"

    def _read(self, spreadsheet_id: str, range_name: str) -> list[list[Any]]:
        path = self._path(spreadsheet_id, range_name)
        if not path.exists():
            raise NotFoundError(spreadsheet_id, f"Golden file not found: {path}")
        response = json.loads(path.read_text())
        values: list[list[Any]] = response.get("values", [])
        return values

    def _write(self, spreadsheet_id: str, range_name: str, values: list[list[Any]]) -> None:
        path = self._path(spreadsheet_id, range_name)
        path.write_text(json.dumps({"range": range_name, "values": values}, indent=2))


def _quote_range(range_name: str) -> str:
    return urllib.parse.quote(escape_sheet_title(range_name), safe="")


def _unescape_sheet_title(title: str) -> str:
    if len(title) >= 2 and title.startswith("'") and title.endswith("'"):
        return title[1:-1].replace("''", "'")
    return title


def _spreadsheet_id_from_url(url: str) -> str:
    path = url[len(API_BASE) + 1 :] if url.startswith(API_BASE) else url
    return path.split("/", 1)[0]
