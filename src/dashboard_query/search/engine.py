"""Ranked free-text search over in-memory records."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import Any

from dashboard_query.domain.search import SearchOptions, SearchResult
from dashboard_query.search.fuzzy import score_text
from dashboard_query.search.highlight import highlight_match
from dashboard_query.search.schema import SearchSchema, resolve_path, stringify


logger = logging.getLogger(__name__)

Record = Mapping[str, Any]


class SearchEngine:
    """Score every searchable field of every record against a query.

    The searchable field set is fixed at construction: an explicit ``schema``
    wins, then ``options.fields``, then discovery from the first record.
    Input records are never copied or mutated; results wrap them.
    """

    def __init__(
        self,
        records: Sequence[Record],
        options: SearchOptions | None = None,
        schema: SearchSchema | None = None,
    ):
        self.records = list(records)
        self.options = options or SearchOptions()
        self.schema = schema if schema is not None else self._resolve_schema()

    @property
    def fields(self) -> list[str]:
        return self.schema.paths

    def _resolve_schema(self) -> SearchSchema:
        if self.options.fields:
            return SearchSchema.from_paths(self.options.fields)
        sample = self.records[0] if self.records else None
        schema = SearchSchema.from_sample(sample)
        if not schema:
            logger.debug("No searchable fields discovered; non-empty queries will match nothing")
        return schema

    def search(self, query: str) -> list[SearchResult]:
        """Rank records against ``query``.

        A blank query is an identity pass: every record comes back with score
        1.0, no matches, in its original order and without truncation.
        Otherwise records without any field scoring at or above the threshold
        are dropped, and the rest are ordered by descending mean score (ties
        keep input order) and capped at ``options.limit``.
        """
        if not query or not query.strip():
            return [SearchResult(item=record, score=1.0) for record in self.records]

        results = []
        for record in self.records:
            result = self._score_record(query, record)
            if result is not None:
                results.append(result)

        # list.sort is stable, so equal scores keep encounter order
        results.sort(key=lambda result: result.score, reverse=True)
        limited = results[: self.options.limit]

        logger.debug(
            "Search %r matched %d of %d records (returning %d)",
            query,
            len(results),
            len(self.records),
            len(limited),
        )
        return limited

    def _score_record(self, query: str, record: Record) -> SearchResult | None:
        total = 0.0
        matches: list[str] = []
        highlights: dict[str, str] = {}

        for path in self.schema.paths:
            value = resolve_path(record, path)
            if value is None:
                continue

            text = stringify(value)
            score = score_text(query, text, self.options)
            # A zero threshold must not turn non-matches into matches
            if score <= 0.0 or score < self.options.threshold:
                continue

            total += score
            matches.append(path)
            highlights[path] = highlight_match(
                text,
                query,
                case_sensitive=self.options.case_sensitive,
                style=self.options.highlight_style,
            )

        if not matches:
            return None

        return SearchResult(
            item=record,
            score=min(1.0, total / len(matches)),
            matches=matches,
            highlights=highlights,
        )


def search(records: Sequence[Record], query: str, options: SearchOptions | None = None) -> list[SearchResult]:
    """Convenience wrapper: build a :class:`SearchEngine` and run one query."""
    return SearchEngine(records, options).search(query)
