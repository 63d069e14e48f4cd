"""Domain value objects shared by the search, filter and sort stages."""

from dashboard_query.domain.search import (
    Filter,
    FilterChoice,
    FilterOperator,
    FilterOption,
    SavedSearch,
    SavedSearchDraft,
    SearchOptions,
    SearchResult,
    SortConfig,
    SortDirection,
)


__all__ = [
    "Filter",
    "FilterChoice",
    "FilterOperator",
    "FilterOption",
    "SavedSearch",
    "SavedSearchDraft",
    "SearchOptions",
    "SearchResult",
    "SortConfig",
    "SortDirection",
]
