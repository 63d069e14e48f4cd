"""Persisted, named search profiles on top of a key-value store."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime, timezone
import logging
import threading
from typing import Any
from uuid import uuid4

from pydantic import TypeAdapter

from dashboard_query.adapters.kv_store import FileStore, KeyValueStore
from dashboard_query.config import Settings, get_settings
from dashboard_query.domain.search import SavedSearch, SavedSearchDraft
from dashboard_query.observability.metrics import SAVED_SEARCH_OPERATIONS


logger = logging.getLogger(__name__)

_SAVED_SEARCH_LIST = TypeAdapter(list[SavedSearch])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_search_id() -> str:
    return f"search_{uuid4().hex}"


class SavedSearchStore:
    """Create, list, load and delete saved searches.

    The whole list lives under one key as a JSON array. Every mutation writes
    the complete new list in a single ``set`` call and only then updates the
    in-memory copy, so a failed write leaves both sides unchanged.

    An unreadable or corrupt payload at startup is logged and treated as an
    empty list; the next save replaces it.
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_search_id,
    ):
        self._store = store
        self.storage_key = storage_key or get_settings().saved_search_storage_key
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self._searches: list[SavedSearch] = self._read()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> SavedSearchStore:
        """File-backed store under ``saved_search_dir`` using the configured key."""
        settings = settings or get_settings()
        return cls(FileStore(settings.saved_search_dir), settings.saved_search_storage_key)

    def _read(self) -> list[SavedSearch]:
        try:
            payload = self._store.get(self.storage_key)
        except (OSError, UnicodeDecodeError) as err:
            logger.warning("Could not read saved searches from %r: %s", self.storage_key, err)
            return []

        if not payload:
            return []

        try:
            return _SAVED_SEARCH_LIST.validate_json(payload)
        except ValueError as err:
            logger.warning("Ignoring unreadable saved searches under %r: %s", self.storage_key, err)
            return []

    def _write(self, searches: list[SavedSearch]) -> None:
        payload = _SAVED_SEARCH_LIST.dump_json(searches, by_alias=True).decode("utf-8")
        self._store.set(self.storage_key, payload)

    def save(self, draft: SavedSearchDraft | Mapping[str, Any], search_id: str | None = None) -> SavedSearch:
        """Persist ``draft`` with a fresh id and creation time.

        Passing an existing ``search_id`` re-creates that entry: the old one is
        removed and the new one is appended with a new timestamp.
        """
        if not isinstance(draft, SavedSearchDraft):
            draft = SavedSearchDraft.model_validate(draft)

        fields = draft.model_dump(exclude={"id", "created_at"})
        saved = SavedSearch.model_validate(
            {**fields, "id": search_id or self._id_factory(), "created_at": self._clock()}
        )

        with self._lock:
            updated = [item for item in self._searches if item.id != saved.id]
            updated.append(saved)
            self._write(updated)
            self._searches = updated

        SAVED_SEARCH_OPERATIONS.labels(operation="save").inc()
        logger.info("Saved search %r as %s", saved.name, saved.id)
        return saved

    def list(self) -> list[SavedSearch]:
        with self._lock:
            return list(self._searches)

    def load(self, search_id: str) -> SavedSearch | None:
        with self._lock:
            found = next((item for item in self._searches if item.id == search_id), None)
        SAVED_SEARCH_OPERATIONS.labels(operation="load").inc()
        return found

    def delete(self, search_id: str) -> bool:
        """Remove a saved search. Returns False if the id was unknown."""
        with self._lock:
            updated = [item for item in self._searches if item.id != search_id]
            if len(updated) == len(self._searches):
                return False
            self._write(updated)
            self._searches = updated

        SAVED_SEARCH_OPERATIONS.labels(operation="delete").inc()
        logger.info("Deleted saved search %s", search_id)
        return True

    def default(self) -> SavedSearch | None:
        """Return the first saved search flagged ``is_default``, if any."""
        with self._lock:
            return next((item for item in self._searches if item.is_default), None)

    # Names used by dashboard callers
    save_search = save
    list_saved_searches = list
    load_saved_search = load
    delete_saved_search = delete
