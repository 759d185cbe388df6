"""
Utility functions for sheetrecords.

Provides column letter conversion and A1 address helpers.
"""

from __future__ import annotations

import re


def column_index_to_letter(index: int) -> str:
    """Convert a zero-based column index to A1 notation letter(s).

    Column letters are bijective base-26: there is no zero digit, so the
    prefix is computed from ``index // 26 - 1``.

    Examples:
        0 -> A, 1 -> B, 25 -> Z, 26 -> AA, 27 -> AB, 701 -> ZZ, 702 -> AAA
    """
    if index < 0:
        raise ValueError(f"Column index must be >= 0, got {index}")
    letter = chr(ord("A") + index % 26)
    quotient = index // 26
    if quotient == 0:
        return letter
    return column_index_to_letter(quotient - 1) + letter


def letter_to_column_index(letter: str) -> int:
    """Convert A1 notation letter(s) to a zero-based column index.

    Examples:
        A -> 0, B -> 1, Z -> 25, AA -> 26, AB -> 27, AAA -> 702
    """
    if not letter or not letter.isalpha():
        raise ValueError(f"Invalid column letters: {letter!r}")
    result = 0
    for char in letter.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def escape_sheet_title(title: str) -> str:
    """Escape a range/sheet name for use in A1 notation.

    Names containing spaces, special characters, or starting with
    digits need to be wrapped in single quotes.
    """
    needs_quoting = (
        " " in title
        or "'" in title
        or "!" in title
        or ":" in title
        or (len(title) > 0 and title[0].isdigit())
    )
    if needs_quoting:
        escaped = title.replace("'", "''")
        return f"'{escaped}'"
    return title


def cell_address(range_name: str, col_index: int, row_number: int) -> str:
    """Build the A1 address of a single cell inside ``range_name``.

    ``col_index`` is zero-based, ``row_number`` is the 1-based sheet row.

    Examples:
        ("Tasks", 1, 3) -> Tasks!B3, ("My Tasks", 0, 2) -> 'My Tasks'!A2
    """
    if row_number < 1:
        raise ValueError(f"Row number must be >= 1, got {row_number}")
    return f"{escape_sheet_title(range_name)}!{column_index_to_letter(col_index)}{row_number}"


def a1_to_cell(a1: str) -> tuple[int, int]:
    """Convert A1 notation to zero-based (row_index, col_index).

    A leading sheet prefix (``Sheet1!`` or ``'My Sheet'!``) is ignored.

    Examples:
        A1 -> (0, 0), B1 -> (0, 1), Tasks!C10 -> (9, 2)
    """
    _, _, cell = a1.rpartition("!")
    match = re.match(r"^([A-Za-z]+)(\d+)$", cell)
    if not match:
        raise ValueError(f"Invalid A1 notation: {a1}")
    col_letter, row_str = match.groups()
    return int(row_str) - 1, letter_to_column_index(col_letter)


def parse_spreadsheet_id(id_or_url: str) -> str:
    """Extract spreadsheet ID from a URL or return as-is if already an ID."""
    # https://docs.google.com/spreadsheets/d/SPREADSHEET_ID/edit...
    url_pattern = r"docs\.google\.com/spreadsheets/d/([a-zA-Z0-9_-]+)"
    match = re.search(url_pattern, id_or_url)
    if match:
        return match.group(1)
    return id_or_url
