"""Structured filter evaluation over in-memory records.

Every filter must hold for a record to be kept (logical AND). Evaluation fails
closed: a missing field, a value that cannot be coerced for the operator, or a
pattern that will not compile simply means "no match". Nothing in here raises
for bad data.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date, datetime, timezone
from decimal import Decimal
import logging
import math
import re
from typing import Any

from dashboard_query.domain.search import Filter, FilterOperator
from dashboard_query.search.schema import resolve_path, stringify


logger = logging.getLogger(__name__)

Record = Mapping[str, Any]

_MISSING = object()


def _is_absent(value: Any) -> bool:
    return value is _MISSING or value is None


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without bool/number cross-matching (``True != 1`` here)."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def to_number(value: Any) -> float | None:
    """Coerce a value for numeric comparison; None when it is not a number."""
    if _is_absent(value):
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, datetime):
        number = _as_aware(value).timestamp()
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


def to_datetime(value: Any) -> datetime | None:
    """Coerce a value for date comparison.

    Accepts datetimes, dates (midnight), ISO-8601 strings and epoch seconds.
    Naive values are taken to be UTC so they compare with aware ones.
    """
    if _is_absent(value) or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _as_aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return _as_aware(datetime.fromisoformat(value.strip()))
        except ValueError:
            return None
    return None


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _text_predicate(check: Callable[[str, str], bool]) -> Callable[[Any, Any], bool]:
    def predicate(value: Any, expected: Any) -> bool:
        if _is_absent(value) or expected is None:
            return False
        return check(stringify(value).lower(), stringify(expected).lower())

    return predicate


def _numeric_predicate(check: Callable[[float, float], bool]) -> Callable[[Any, Any], bool]:
    def predicate(value: Any, expected: Any) -> bool:
        left = to_number(value)
        right = to_number(expected)
        if left is None or right is None:
            return False
        return check(left, right)

    return predicate


def _date_predicate(check: Callable[[datetime, datetime], bool]) -> Callable[[Any, Any], bool]:
    def predicate(value: Any, expected: Any) -> bool:
        left = to_datetime(value)
        right = to_datetime(expected)
        if left is None or right is None:
            return False
        return check(left, right)

    return predicate


def _is_collection(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


def _equals(value: Any, expected: Any) -> bool:
    if value is _MISSING:
        return False
    return strict_equals(value, expected)


def _between(value: Any, expected: Any) -> bool:
    if not isinstance(expected, (list, tuple)) or len(expected) != 2:
        return False
    number = to_number(value)
    low = to_number(expected[0])
    high = to_number(expected[1])
    if number is None or low is None or high is None:
        return False
    return low <= number <= high


def _in(value: Any, expected: Any) -> bool:
    if value is _MISSING or not _is_collection(expected):
        return False
    return any(strict_equals(value, candidate) for candidate in expected)


def _not_in(value: Any, expected: Any) -> bool:
    if not _is_collection(expected):
        return True
    if value is _MISSING:
        return True
    return not any(strict_equals(value, candidate) for candidate in expected)


def _regex(value: Any, expected: Any) -> bool:
    if _is_absent(value) or expected is None:
        return False
    try:
        pattern = re.compile(str(expected), re.IGNORECASE)
        return pattern.search(stringify(value)) is not None
    except (re.error, TypeError, RecursionError) as err:
        logger.debug("Regex filter %r failed closed: %s", expected, err)
        return False


_PREDICATES: dict[FilterOperator, Callable[[Any, Any], bool]] = {
    FilterOperator.EQUALS: _equals,
    FilterOperator.CONTAINS: _text_predicate(lambda text, needle: needle in text),
    FilterOperator.STARTS_WITH: _text_predicate(str.startswith),
    FilterOperator.ENDS_WITH: _text_predicate(str.endswith),
    FilterOperator.GT: _numeric_predicate(lambda left, right: left > right),
    FilterOperator.LT: _numeric_predicate(lambda left, right: left < right),
    FilterOperator.GTE: _numeric_predicate(lambda left, right: left >= right),
    FilterOperator.LTE: _numeric_predicate(lambda left, right: left <= right),
    FilterOperator.BETWEEN: _between,
    FilterOperator.IN: _in,
    FilterOperator.NOT_IN: _not_in,
    FilterOperator.BEFORE: _date_predicate(lambda left, right: left < right),
    FilterOperator.AFTER: _date_predicate(lambda left, right: left > right),
    FilterOperator.REGEX: _regex,
}


def evaluate_filter(record: Record, filter_: Filter) -> bool:
    """Return True if ``record`` satisfies a single filter."""
    value = resolve_path(record, filter_.field, default=_MISSING)
    return _PREDICATES[filter_.operator](value, filter_.value)


def coerce_filters(filters: Iterable[Filter | Mapping[str, Any]]) -> list[Filter]:
    """Accept Filter models or plain mappings (camelCase or snake_case keys)."""
    return [item if isinstance(item, Filter) else Filter.model_validate(item) for item in filters]


class FilterEngine:
    """Apply a conjunction of filters to a fixed record collection."""

    def __init__(self, records: Sequence[Record]):
        self.records = list(records)

    def apply(self, filters: Iterable[Filter | Mapping[str, Any]]) -> list[Record]:
        active = coerce_filters(filters)
        if not active:
            return list(self.records)

        kept = [record for record in self.records if all(evaluate_filter(record, item) for item in active)]
        logger.debug("Filters kept %d of %d records", len(kept), len(self.records))
        return kept


def apply_filters(records: Sequence[Record], filters: Iterable[Filter | Mapping[str, Any]]) -> list[Record]:
    """Convenience wrapper around :meth:`FilterEngine.apply`."""
    return FilterEngine(records).apply(filters)
