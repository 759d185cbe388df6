"""Tests for value equality and query filtering."""

from __future__ import annotations

from sheetrecords.matching import (
    filter_records,
    matches_query,
    parse_number,
    values_equal,
)


class TestParseNumber:
    """Tests for numeric parsing of cell values."""

    def test_numbers(self) -> None:
        """Decimal literals parse, with sign, exponent and leading zeros."""
        assert parse_number(5) == 5.0
        assert parse_number(2.5) == 2.5
        assert parse_number("05") == 5.0
        assert parse_number(" -1.5e2 ") == -150.0
        assert parse_number(".5") == 0.5

    def test_not_numbers(self) -> None:
        """Blank, None, booleans and non-decimal words are not numbers."""
        assert parse_number("") is None
        assert parse_number("   ") is None
        assert parse_number(None) is None
        assert parse_number(True) is None
        assert parse_number("abc") is None
        assert parse_number("nan") is None
        assert parse_number("1,000") is None


class TestValuesEqual:
    """Tests for the loose equality used by queries."""

    def test_string_matches_number(self) -> None:
        assert values_equal("5", 5)
        assert values_equal(5, "5")

    def test_leading_zero(self) -> None:
        """Numeric strings compare by value."""
        assert values_equal("05", 5)
        assert values_equal("5.0", "5")

    def test_exact_strings(self) -> None:
        assert values_equal("abc", "abc")
        assert not values_equal("abc", "ABC")

    def test_empty_is_not_zero(self) -> None:
        """The empty string and None never equal zero."""
        assert not values_equal("", 0)
        assert not values_equal(0, "")
        assert not values_equal(None, 0)

    def test_empty_matches_empty(self) -> None:
        assert values_equal("", "")

    def test_none_matches_none(self) -> None:
        assert values_equal(None, None)
        assert not values_equal(None, "")

    def test_different_numbers(self) -> None:
        assert not values_equal("5", 6)


class TestMatchesQuery:
    """Tests for conjunctive query matching."""

    record = {"ID": "AB12", "Status": "done", "Points": "3"}

    def test_no_query_matches(self) -> None:
        """None or an empty query matches every record."""
        assert matches_query(self.record, None)
        assert matches_query(self.record, {})

    def test_all_fields_must_match(self) -> None:
        assert matches_query(self.record, {"Status": "done", "Points": 3})
        assert not matches_query(self.record, {"Status": "done", "Points": 4})

    def test_missing_field_never_matches_value(self) -> None:
        assert not matches_query(self.record, {"Owner": "bob"})

    def test_only_own_keys_are_criteria(self) -> None:
        """Class attributes of a mapping subclass are not criteria."""

        class Query(dict[str, str]):
            Status = "open"

        query = Query(ID="AB12")
        assert matches_query(self.record, query)


def test_filter_records_keeps_order() -> None:
    """Matching records come back in their original order."""
    records = [
        {"ID": "1", "Status": "open"},
        {"ID": "2", "Status": "done"},
        {"ID": "3", "Status": "open"},
    ]
    assert [r["ID"] for r in filter_records(records, {"Status": "open"})] == ["1", "3"]
    assert filter_records(records, None) == records
