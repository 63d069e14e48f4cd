"""Storage adapters for persisted query state."""

from dashboard_query.adapters.kv_store import FileStore, InMemoryStore, KeyValueStore


__all__ = ["FileStore", "InMemoryStore", "KeyValueStore"]
