"""Unit tests for the saved search store."""

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from dashboard_query.adapters.kv_store import FileStore, InMemoryStore
from dashboard_query.domain.search import (
    Filter,
    FilterOperator,
    SavedSearchDraft,
    SortConfig,
    SortDirection,
)
from dashboard_query.service_layer.saved_searches import SavedSearchStore


class FailingStore(InMemoryStore):
    """Store whose writes fail after construction."""

    def set(self, key, value):
        raise OSError("quota exceeded")


@pytest.fixture
def clock():
    start = datetime(2024, 3, 2, 9, 0, tzinfo=timezone.utc)
    ticks = count()
    return lambda: start + timedelta(seconds=next(ticks))


@pytest.fixture
def id_factory():
    ticks = count(1)
    return lambda: f"search_{next(ticks)}"


@pytest.fixture
def saved_store(clock, id_factory):
    return SavedSearchStore(InMemoryStore(), clock=clock, id_factory=id_factory)


@pytest.fixture
def vip_draft():
    return SavedSearchDraft(
        name="High value VIPs",
        query="rahul",
        filters=[Filter(field="segment", operator=FilterOperator.EQUALS, value="VIP")],
        sort=SortConfig(field="totalValue", direction=SortDirection.DESC),
    )


@pytest.mark.unit
class TestSave:
    def test_save_assigns_id_and_timestamp(self, saved_store, vip_draft):
        saved = saved_store.save(vip_draft)

        assert saved.id == "search_1"
        assert saved.created_at == datetime(2024, 3, 2, 9, 0, tzinfo=timezone.utc)
        assert saved.name == "High value VIPs"
        assert saved.filters == vip_draft.filters
        assert saved.sort == vip_draft.sort

    def test_vip_only_search_is_listed_once(self):
        store = SavedSearchStore(InMemoryStore())

        store.save_search(
            {"name": "VIP only", "query": "", "filters": [{"field": "segment", "operator": "equals", "value": "VIP"}]}
        )

        (entry,) = store.list_saved_searches()
        assert entry.id.startswith("search_")
        assert entry.created_at.tzinfo is not None
        assert entry.filters == [Filter(field="segment", operator=FilterOperator.EQUALS, value="VIP")]

    def test_saved_search_is_listed_and_loadable(self, saved_store, vip_draft):
        saved = saved_store.save(vip_draft)

        assert saved_store.list() == [saved]
        assert saved_store.load(saved.id) == saved

    def test_default_ids_are_unique(self, vip_draft):
        store = SavedSearchStore(InMemoryStore())

        first = store.save(vip_draft)
        second = store.save(vip_draft)

        assert first.id != second.id
        assert first.id.startswith("search_")

    def test_accepts_mapping_draft(self, saved_store):
        saved = saved_store.save({"name": "Recent", "filters": [{"field": "segment", "operator": "notIn", "value": []}]})

        assert saved.filters[0].operator is FilterOperator.NOT_IN
        assert saved.query == ""

    def test_reused_id_replaces_entry(self, saved_store, vip_draft):
        original = saved_store.save(vip_draft)
        saved_store.save(SavedSearchDraft(name="Other"))

        replaced = saved_store.save(SavedSearchDraft(name="Renamed"), search_id=original.id)

        assert [item.name for item in saved_store.list()] == ["Other", "Renamed"]
        assert replaced.created_at > original.created_at

    def test_persists_camel_case_json(self, vip_draft):
        backend = InMemoryStore()
        SavedSearchStore(backend).save(vip_draft)

        payload = backend.get("saved_searches")

        assert '"createdAt"' in payload
        assert '"operator":"equals"' in payload

    def test_custom_storage_key(self, vip_draft):
        backend = InMemoryStore()
        SavedSearchStore(backend, storage_key="crm.searches").save(vip_draft)

        assert backend.get("crm.searches") is not None
        assert backend.get("saved_searches") is None


@pytest.mark.unit
class TestLoadAndDelete:
    def test_load_unknown_is_none(self, saved_store):
        assert saved_store.load("missing") is None

    def test_delete_removes_entry(self, saved_store, vip_draft):
        saved = saved_store.save(vip_draft)

        assert saved_store.delete(saved.id) is True
        assert saved_store.list() == []
        assert saved_store.load(saved.id) is None

    def test_delete_unknown_is_false(self, saved_store, vip_draft):
        saved_store.save(vip_draft)

        assert saved_store.delete("missing") is False
        assert len(saved_store.list()) == 1

    def test_default_returns_first_flagged(self, saved_store):
        saved_store.save(SavedSearchDraft(name="Plain"))
        flagged = saved_store.save(SavedSearchDraft(name="Mine", is_default=True))
        saved_store.save(SavedSearchDraft(name="Also mine", is_default=True))

        assert saved_store.default() == flagged

    def test_no_default(self, saved_store):
        saved_store.save(SavedSearchDraft(name="Plain"))

        assert saved_store.default() is None

    def test_dashboard_aliases(self, saved_store, vip_draft):
        saved = saved_store.save_search(vip_draft)

        assert saved_store.list_saved_searches() == [saved]
        assert saved_store.load_saved_search(saved.id) == saved
        assert saved_store.delete_saved_search(saved.id) is True


@pytest.mark.unit
class TestPersistence:
    def test_round_trip_through_new_instance(self, tmp_path, vip_draft):
        saved = SavedSearchStore(FileStore(tmp_path)).save(vip_draft)

        reloaded = SavedSearchStore(FileStore(tmp_path))

        assert reloaded.list() == [saved]

    @pytest.mark.parametrize("payload", ["not json", '{"id": 1}', '[{"name": "missing fields"}]'])
    def test_corrupt_payload_starts_empty(self, payload, vip_draft, caplog):
        backend = InMemoryStore({"saved_searches": payload})

        store = SavedSearchStore(backend)

        assert store.list() == []
        assert "Ignoring unreadable saved searches" in caplog.text

        store.save(vip_draft)
        assert len(SavedSearchStore(backend).list()) == 1

    def test_failed_write_leaves_state_unchanged(self, vip_draft):
        backend = FailingStore()
        store = SavedSearchStore(backend)

        with pytest.raises(OSError, match="quota exceeded"):
            store.save(vip_draft)

        assert store.list() == []
        assert backend.get("saved_searches") is None

    def test_failed_delete_keeps_entry(self, vip_draft):
        backend = InMemoryStore()
        saved = SavedSearchStore(backend).save(vip_draft)
        store = SavedSearchStore(FailingStore(backend._data))

        with pytest.raises(OSError):
            store.delete(saved.id)

        assert store.list() == [saved]

    def test_undecodable_file_starts_empty(self, tmp_path, vip_draft, caplog):
        (tmp_path / "saved_searches.json").write_bytes(b"\xff\xfe\x00garbage")

        store = SavedSearchStore(FileStore(tmp_path))

        assert store.list() == []
        assert "Could not read saved searches" in caplog.text

        saved = store.save(vip_draft)
        assert SavedSearchStore(FileStore(tmp_path)).list() == [saved]


@pytest.mark.unit
class TestSettingsIntegration:
    def test_storage_key_defaults_to_setting(self, monkeypatch, vip_draft):
        monkeypatch.setenv("DASHBOARD_QUERY_SAVED_SEARCH_STORAGE_KEY", "crm.saved")
        backend = InMemoryStore()

        SavedSearchStore(backend).save(vip_draft)

        assert backend.get("crm.saved") is not None

    def test_from_settings_uses_configured_directory(self, settings, vip_draft):
        saved = SavedSearchStore.from_settings(settings).save(vip_draft)

        assert (settings.saved_search_dir / "saved_searches.json").exists()
        assert SavedSearchStore.from_settings(settings).list() == [saved]
