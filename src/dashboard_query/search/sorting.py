"""Stable, type-aware ordering of records by one field."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime, timezone
from functools import cmp_to_key
from typing import Any
import unicodedata

from dashboard_query.domain.search import SortConfig, SortDirection
from dashboard_query.search.schema import is_number, resolve_path, stringify


Record = Mapping[str, Any]


def collation_key(text: str) -> tuple[str, str]:
    """Locale-style key: accent- and case-insensitive first, code points second.

    Independent of the process locale so ordering is reproducible.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base.casefold(), text


def _compare_text(left: str, right: str) -> int:
    return _sign(collation_key(left), collation_key(right))


def _sign(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def _timestamp(value: date) -> float:
    if isinstance(value, datetime):
        aware = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
        return aware.timestamp()
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp()


def compare_values(left: Any, right: Any) -> int:
    """Compare two non-null sort keys, dispatching on their runtime types."""
    if isinstance(left, str) and isinstance(right, str):
        return _compare_text(left, right)
    if is_number(left) and is_number(right):
        # NaN compares equal to everything, like a NaN comparator result
        return _sign(left, right)
    if isinstance(left, date) and isinstance(right, date):
        return _sign(_timestamp(left), _timestamp(right))
    return _compare_text(stringify(left), stringify(right))


def sort_records(records: Sequence[Record], config: SortConfig | Mapping[str, Any]) -> list[Record]:
    """Return a new list of ``records`` ordered by ``config``.

    Records whose sort field is missing or None always go last, in their input
    order, whatever the direction. ``desc`` only negates the comparison, so
    equal keys keep their relative order in both directions.
    """
    if not isinstance(config, SortConfig):
        config = SortConfig.model_validate(config)

    present: list[tuple[Any, Record]] = []
    absent: list[Record] = []
    for record in records:
        value = resolve_path(record, config.field)
        if value is None:
            absent.append(record)
        else:
            present.append((value, record))

    sign = -1 if config.direction == SortDirection.DESC else 1

    def compare(left: tuple[Any, Record], right: tuple[Any, Record]) -> int:
        return sign * compare_values(left[0], right[0])

    present.sort(key=cmp_to_key(compare))
    return [record for _, record in present] + absent
