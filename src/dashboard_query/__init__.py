"""Search, filter, sort and saved-search engine for dashboard tables."""

from dashboard_query.adapters import FileStore, InMemoryStore, KeyValueStore
from dashboard_query.domain import (
    Filter,
    FilterOperator,
    FilterOption,
    SavedSearch,
    SavedSearchDraft,
    SearchOptions,
    SearchResult,
    SortConfig,
    SortDirection,
)
from dashboard_query.search import (
    FieldDescriptor,
    FieldType,
    FilterEngine,
    SearchEngine,
    SearchSchema,
    apply_filters,
    extract_fields,
    sort_records,
)
from dashboard_query.service_layer import ControllerState, QueryController, SavedSearchStore


__version__ = "0.1.0"

__all__ = [
    "ControllerState",
    "FieldDescriptor",
    "FieldType",
    "FileStore",
    "Filter",
    "FilterEngine",
    "FilterOperator",
    "FilterOption",
    "InMemoryStore",
    "KeyValueStore",
    "QueryController",
    "SavedSearch",
    "SavedSearchDraft",
    "SavedSearchStore",
    "SearchEngine",
    "SearchOptions",
    "SearchResult",
    "SearchSchema",
    "SortConfig",
    "SortDirection",
    "apply_filters",
    "extract_fields",
    "sort_records",
]
