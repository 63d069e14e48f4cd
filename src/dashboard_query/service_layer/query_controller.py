"""Reactive coordination of search, filter and sort for one record collection.

The controller owns the three user inputs (query text, filter list, sort
config) and one derived output (the visible records). Any input change
restarts a trailing-edge debounce window; when the window closes the pipeline
runs synchronously:

    search(query) -> items -> apply_filters(filters) -> sort_records(sort)

Consumers register callbacks with :meth:`QueryController.subscribe` and get
the new result list after every run, which keeps rendering code out of here.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from enum import Enum
import logging
import threading
from typing import Any

from dashboard_query.config import Settings, get_settings
from dashboard_query.domain.search import (
    Filter,
    SavedSearchDraft,
    SearchOptions,
    SearchResult,
    SortConfig,
)
from dashboard_query.observability.metrics import QUERY_RUNS, QUERY_STAGE_LATENCY, track_latency
from dashboard_query.observability.tracing import create_span
from dashboard_query.search.engine import SearchEngine
from dashboard_query.search.filters import apply_filters, coerce_filters
from dashboard_query.search.schema import SearchSchema
from dashboard_query.search.sorting import sort_records
from dashboard_query.service_layer.debounce import Debouncer


logger = logging.getLogger(__name__)

Record = Mapping[str, Any]
Subscriber = Callable[[list[Record]], None]


class ControllerState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    COMPUTING = "computing"


class QueryController:
    """Hold query/filter/sort state and recompute visible records on change."""

    def __init__(
        self,
        records: Sequence[Record],
        options: SearchOptions | None = None,
        *,
        schema: SearchSchema | None = None,
        debounce_seconds: float | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self._options = options or settings.search_options()
        self._schema = schema
        self._records: list[Record] = list(records)
        self._query = ""
        self._filters: list[Filter] = []
        self._sort: SortConfig | None = None
        self._results: list[Record] = list(self._records)
        self._search_results: list[SearchResult] = []
        self._subscribers: list[Subscriber] = []
        self._lock = threading.RLock()
        self._computing = False
        self._run_seq = 0
        self._delivery_lock = threading.Lock()
        self._delivering = False
        self._queued_seq = 0
        self._queued_results: list[Record] | None = None

        delay = settings.debounce_seconds if debounce_seconds is None else debounce_seconds
        self._debouncer = Debouncer(delay, self._recompute)
        self._recompute()

    # -- state -----------------------------------------------------------

    @property
    def query(self) -> str:
        return self._query

    @property
    def filters(self) -> list[Filter]:
        return list(self._filters)

    @property
    def sort(self) -> SortConfig | None:
        return self._sort

    @property
    def records(self) -> list[Record]:
        return list(self._records)

    @property
    def results(self) -> list[Record]:
        """Records from the last completed run, in display order."""
        return list(self._results)

    @property
    def search_results(self) -> list[SearchResult]:
        """Ranked search hits (with highlights) from the last completed run."""
        return list(self._search_results)

    @property
    def state(self) -> ControllerState:
        if self._computing:
            return ControllerState.COMPUTING
        if self._debouncer.pending:
            return ControllerState.DEBOUNCING
        return ControllerState.IDLE

    @property
    def is_pending(self) -> bool:
        """True while a recompute is scheduled or running."""
        return self.state is not ControllerState.IDLE

    # -- setters ---------------------------------------------------------

    def set_query(self, query: str) -> None:
        with self._lock:
            self._query = query
        self._schedule()

    def set_filters(self, filters: Iterable[Filter | Mapping[str, Any]]) -> None:
        active = coerce_filters(filters)
        with self._lock:
            self._filters = active
        self._schedule()

    def set_sort(self, sort: SortConfig | Mapping[str, Any] | None) -> None:
        if sort is not None and not isinstance(sort, SortConfig):
            sort = SortConfig.model_validate(sort)
        with self._lock:
            self._sort = sort
        self._schedule()

    def set_records(self, records: Sequence[Record]) -> None:
        with self._lock:
            self._records = list(records)
        self._schedule()

    def add_filter(self, filter_: Filter | Mapping[str, Any]) -> None:
        (added,) = coerce_filters([filter_])
        with self._lock:
            self._filters = [*self._filters, added]
        self._schedule()

    def remove_filter(self, field: str) -> None:
        """Drop every filter on ``field``."""
        with self._lock:
            self._filters = [item for item in self._filters if item.field != field]
        self._schedule()

    def update_filter(self, field: str, **changes: Any) -> None:
        """Replace attributes of every filter on ``field`` (e.g. ``value=...``)."""
        with self._lock:
            self._filters = [
                Filter.model_validate({**item.model_dump(), **changes}) if item.field == field else item
                for item in self._filters
            ]
        self._schedule()

    def clear_filters(self) -> None:
        with self._lock:
            self._filters = []
        self._schedule()

    def clear_all(self) -> None:
        with self._lock:
            self._query = ""
            self._filters = []
            self._sort = None
        self._schedule()

    def apply_saved_search(self, saved: SavedSearchDraft) -> None:
        """Load a saved (query, filters, sort) profile as one input change."""
        with self._lock:
            self._query = saved.query
            self._filters = list(saved.filters)
            self._sort = saved.sort
        self._schedule()

    def to_draft(self, name: str, description: str | None = None, is_default: bool | None = None) -> SavedSearchDraft:
        """Capture the current inputs as a draft ready for the saved search store."""
        with self._lock:
            return SavedSearchDraft(
                name=name,
                description=description,
                query=self._query,
                filters=list(self._filters),
                sort=self._sort,
                is_default=is_default,
            )

    # -- subscriptions ---------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for result updates; returns an unsubscribe function."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # -- computation -----------------------------------------------------

    def flush(self) -> bool:
        """Run a pending recompute immediately. Returns False if none was pending."""
        return self._debouncer.flush()

    def refresh(self) -> list[Record]:
        """Cancel any pending window and recompute now.

        If another thread is still notifying subscribers about an earlier run,
        that thread delivers this result once its current round finishes.
        """
        self._debouncer.cancel()
        self._recompute()
        return self.results

    def close(self) -> None:
        self._debouncer.cancel()
        with self._lock:
            self._subscribers.clear()

    def _schedule(self) -> None:
        self._debouncer.trigger()

    def _recompute(self) -> None:
        with self._lock:
            self._computing = True
            try:
                ranked, results = self._run_pipeline(self._records, self._query, self._filters, self._sort)
                self._search_results = ranked
                self._results = results
            finally:
                self._computing = False
            self._run_seq += 1
            seq = self._run_seq

        self._notify(seq, results)

    def _notify(self, seq: int, results: list[Record]) -> None:
        # One thread delivers at a time; later runs queue behind it and stale ones are dropped
        with self._delivery_lock:
            if seq <= self._queued_seq:
                return
            self._queued_seq = seq
            self._queued_results = results
            if self._delivering:
                return
            self._delivering = True

        while True:
            with self._delivery_lock:
                batch = self._queued_results
                self._queued_results = None
                if batch is None:
                    self._delivering = False
                    return
            with self._lock:
                subscribers = list(self._subscribers)

            for callback in subscribers:
                try:
                    callback(list(batch))
                except Exception:
                    logger.exception("Query result subscriber %r failed", callback)

    def _run_pipeline(
        self,
        records: list[Record],
        query: str,
        filters: list[Filter],
        sort: SortConfig | None,
    ) -> tuple[list[SearchResult], list[Record]]:
        attributes = {
            "query.length": len(query),
            "query.filters": len(filters),
            "query.sorted": sort is not None,
            "query.records": len(records),
        }
        with create_span("query.pipeline", attributes=attributes) as span:
            with track_latency(QUERY_STAGE_LATENCY, stage="search"):
                ranked = SearchEngine(records, self._options, self._schema).search(query)
            items = [result.item for result in ranked]

            with track_latency(QUERY_STAGE_LATENCY, stage="filter"):
                items = apply_filters(items, filters)

            if sort is not None:
                with track_latency(QUERY_STAGE_LATENCY, stage="sort"):
                    items = sort_records(items, sort)

            span.set_attribute("query.results", len(items))

        QUERY_RUNS.inc()
        logger.debug("Query pipeline produced %d of %d records", len(items), len(records))
        return ranked, items
