"""Shared test fixtures for sheetrecords."""

from __future__ import annotations

import shutil
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

import pytest

from sheetrecords.config import get_settings
from sheetrecords.transport import CellWrite, LocalFileTransport, Transport

GOLDEN_DIR = Path(__file__).parent / "golden"


class MockTransport(Transport):
    """In-memory transport that records every call."""

    def __init__(self, values: list[list[Any]]) -> None:
        self.values = values
        self.fetch_calls: list[tuple[str, str]] = []
        self.append_calls: list[tuple[str, str, list[list[Any]]]] = []
        self.write_calls: list[list[CellWrite]] = []
        self.closed = False

    async def fetch_range(self, spreadsheet_id: str, range_name: str) -> list[list[str]]:
        self.fetch_calls.append((spreadsheet_id, range_name))
        return [list(row) for row in self.values]

    async def append_rows(
        self,
        spreadsheet_id: str,
        range_name: str,
        rows: Sequence[Sequence[Any]],
    ) -> dict[str, Any]:
        self.append_calls.append((spreadsheet_id, range_name, [list(r) for r in rows]))
        return {"updates": {"updatedRows": len(rows)}}

    async def batch_write_cells(
        self,
        spreadsheet_id: str,  # noqa: ARG002
        writes: Sequence[CellWrite],
    ) -> dict[str, Any]:
        self.write_calls.append(list(writes))
        return {"totalUpdatedCells": len(writes)}

    async def close(self) -> None:
        self.closed = True

    @property
    def remote_calls(self) -> int:
        return len(self.append_calls) + len(self.write_calls)


@pytest.fixture
def golden_dir(tmp_path: Path) -> Path:
    """A writable copy of the golden files."""
    target = tmp_path / "golden"
    shutil.copytree(GOLDEN_DIR, target)
    return target


@pytest.fixture
def local_transport(golden_dir: Path) -> LocalFileTransport:
    return LocalFileTransport(golden_dir)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from SHEETRECORDS_* variables of the outer environment."""
    for name in (
        "SHEETRECORDS_ACCESS_TOKEN",
        "SHEETRECORDS_SERVICE_ACCOUNT_PATH",
        "SHEETRECORDS_SPREADSHEET_ID",
        "SHEETRECORDS_RANGE_NAME",
        "SHEETRECORDS_TIMEOUT",
        "SHEETRECORDS_LOG_LEVEL",
        "SERVICE_ACCOUNT_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
