"""Small text helpers used when handling SQL."""

from __future__ import annotations

from typing import Iterable

_SQL_SEPARATORS = frozenset(" ,\t/\n\r")


def is_sql_sep(ch: str) -> bool:
    """Tell whether ``ch`` separates tokens in a SQL statement."""
    return ch in _SQL_SEPARATORS


def array_to_string(array: Iterable[int]) -> str:
    """Join integers with ", "; an empty sequence gives an empty string."""
    return ", ".join(str(int(value)) for value in array)