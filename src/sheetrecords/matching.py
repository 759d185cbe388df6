"""Value comparison and query filtering over records."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

R = TypeVar("R", bound=Mapping[str, Any])


def parse_number(value: Any) -> float | None:
    """Parse ``value`` as a decimal number, or return None.

    Only ints, floats and decimal literal strings count. The empty string,
    whitespace, None and booleans are never numbers, so ``""`` does not
    coerce to 0.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if _NUMBER_RE.match(text):
            return float(text)
    return None


def values_equal(a: Any, b: Any) -> bool:
    """Compare a stored cell value against a query value.

    Equal when both are the same type and equal, or when both parse as
    numbers with the same value (``"05"`` matches ``5``).
    """
    if a is b or (type(a) is type(b) and a == b):
        return True
    left = parse_number(a)
    if left is None:
        return False
    right = parse_number(b)
    return right is not None and left == right


def matches_query(record: Mapping[str, Any], query: Mapping[str, Any] | None) -> bool:
    """Return True if every field of ``query`` equals the record's value.

    An empty or missing query matches every record.
    """
    if not query:
        return True
    for field, expected in query.items():
        if not values_equal(record.get(field), expected):
            return False
    return True


def filter_records(
    records: Iterable[R], query: Mapping[str, Any] | None
) -> list[R]:
    """Return the records matching ``query``, keeping their order."""
    return [record for record in records if matches_query(record, query)]
