"""
Search, filter and sort engine for dashboard tables.

This package provides the pure, in-memory query pipeline:
- schema: searchable field discovery and declaration
- fuzzy: Levenshtein distance and per-field scoring
- highlight: inline <mark> annotation of literal matches
- engine: ranked free-text search
- filters: structured predicate evaluation
- sorting: stable, null-last ordering
"""

from dashboard_query.search.engine import SearchEngine, search
from dashboard_query.search.filters import FilterEngine, apply_filters
from dashboard_query.search.schema import FieldDescriptor, FieldType, SearchSchema, extract_fields
from dashboard_query.search.sorting import sort_records


__all__ = [
    "FieldDescriptor",
    "FieldType",
    "FilterEngine",
    "SearchEngine",
    "SearchSchema",
    "apply_filters",
    "extract_fields",
    "search",
    "sort_records",
]
