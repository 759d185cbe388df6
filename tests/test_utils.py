"""Tests for sheetrecords.utils module."""

import pytest

from sheetrecords.utils import (
    a1_to_cell,
    cell_address,
    column_index_to_letter,
    escape_sheet_title,
    letter_to_column_index,
    parse_spreadsheet_id,
)


class TestColumnConversion:
    """Tests for column index to letter conversion."""

    def test_single_letters(self) -> None:
        assert column_index_to_letter(0) == "A"
        assert column_index_to_letter(1) == "B"
        assert column_index_to_letter(25) == "Z"

    def test_double_letters(self) -> None:
        assert column_index_to_letter(26) == "AA"
        assert column_index_to_letter(27) == "AB"
        assert column_index_to_letter(51) == "AZ"
        assert column_index_to_letter(52) == "BA"
        assert column_index_to_letter(701) == "ZZ"

    def test_triple_letters(self) -> None:
        assert column_index_to_letter(702) == "AAA"
        assert column_index_to_letter(18277) == "ZZZ"

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValueError):
            column_index_to_letter(-1)

    def test_letter_to_index(self) -> None:
        assert letter_to_column_index("A") == 0
        assert letter_to_column_index("Z") == 25
        assert letter_to_column_index("AA") == 26
        assert letter_to_column_index("zz") == 701
        assert letter_to_column_index("AAA") == 702

    def test_strictly_monotonic(self) -> None:
        letters = [column_index_to_letter(i) for i in range(2000)]
        keys = [(len(s), s) for s in letters]
        assert keys == sorted(keys)
        assert len(set(letters)) == len(letters)

    def test_roundtrip(self) -> None:
        for i in range(1000):
            assert letter_to_column_index(column_index_to_letter(i)) == i


class TestAddresses:
    def test_escape_plain_title(self) -> None:
        assert escape_sheet_title("Tasks") == "Tasks"

    def test_escape_title_with_space(self) -> None:
        assert escape_sheet_title("My Tasks") == "'My Tasks'"

    def test_escape_title_with_quote(self) -> None:
        assert escape_sheet_title("Bob's") == "'Bob''s'"

    def test_escape_title_starting_with_digit(self) -> None:
        assert escape_sheet_title("2024") == "'2024'"

    def test_cell_address(self) -> None:
        assert cell_address("Tasks", 1, 3) == "Tasks!B3"
        assert cell_address("My Tasks", 26, 2) == "'My Tasks'!AA2"

    def test_cell_address_rejects_row_zero(self) -> None:
        with pytest.raises(ValueError):
            cell_address("Tasks", 0, 0)

    def test_a1_to_cell(self) -> None:
        assert a1_to_cell("A1") == (0, 0)
        assert a1_to_cell("Tasks!C10") == (9, 2)
        assert a1_to_cell("'My Tasks'!AA2") == (1, 26)

    def test_a1_to_cell_invalid(self) -> None:
        with pytest.raises(ValueError):
            a1_to_cell("Tasks!10C")


class TestParseSpreadsheetId:
    def test_plain_id(self) -> None:
        assert parse_spreadsheet_id("1BxiMVs0XRA5") == "1BxiMVs0XRA5"

    def test_url(self) -> None:
        url = "https://docs.google.com/spreadsheets/d/1BxiMVs0XRA5-_x/edit#gid=0"
        assert parse_spreadsheet_id(url) == "1BxiMVs0XRA5-_x"
