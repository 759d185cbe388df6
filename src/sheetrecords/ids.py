"""Random record identifiers."""

from __future__ import annotations

import secrets
from collections.abc import Callable, Container

ID_BYTES = 4


def _random_token() -> str:
    return secrets.token_bytes(ID_BYTES).hex().upper()


def generate_id(
    existing: Container[str],
    token_source: Callable[[], str] = _random_token,
) -> str:
    """Return an 8-character uppercase hex ID not present in ``existing``.

    Candidates are drawn until one is free. There is no retry bound: with
    32 bits of keyspace a collision loop is only possible once the range
    holds billions of records.
    """
    while True:
        candidate = token_source()
        if candidate not in existing:
            return candidate
