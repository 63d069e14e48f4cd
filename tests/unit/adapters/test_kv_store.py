"""Unit tests for key-value storage backends."""

import pytest

from dashboard_query.adapters import kv_store
from dashboard_query.adapters.kv_store import FileStore, InMemoryStore, KeyValueStore


@pytest.mark.unit
class TestInMemoryStore:
    def test_get_and_set(self):
        store = InMemoryStore()

        assert store.get("saved_searches") is None
        store.set("saved_searches", "[]")
        assert store.get("saved_searches") == "[]"

    def test_initial_data_is_copied(self):
        initial = {"k": "v"}
        store = InMemoryStore(initial)
        store.set("k", "changed")

        assert initial == {"k": "v"}

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryStore(), KeyValueStore)


@pytest.mark.unit
class TestFileStore:
    def test_missing_key_is_none(self, tmp_path):
        assert FileStore(tmp_path).get("saved_searches") is None

    def test_set_writes_json_file(self, tmp_path):
        store = FileStore(tmp_path / "nested")

        store.set("saved_searches", '[{"id": "search_1"}]')

        assert (tmp_path / "nested" / "saved_searches.json").read_text(encoding="utf-8") == '[{"id": "search_1"}]'
        assert not list((tmp_path / "nested").glob("*.tmp"))

    def test_overwrite_replaces_value(self, tmp_path):
        store = FileStore(tmp_path)
        store.set("k", "one")
        store.set("k", "two")

        assert store.get("k") == "two"

    def test_values_survive_new_instance(self, tmp_path):
        FileStore(tmp_path).set("k", "persisted")

        assert FileStore(tmp_path).get("k") == "persisted"

    @pytest.mark.parametrize("key", ["../escape", "a/b", "..", "with space"])
    def test_unsafe_keys_are_hashed_inside_root(self, tmp_path, key):
        store = FileStore(tmp_path)

        store.set(key, "value")

        written = [path for path in tmp_path.iterdir() if path.suffix == ".json"]
        assert len(written) == 1
        assert written[0].name.startswith("key_")
        assert store.get(key) == "value"

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(FileStore(tmp_path), KeyValueStore)

    def test_failed_move_removes_temp_file(self, tmp_path, monkeypatch):
        store = FileStore(tmp_path)
        store.set("k", "old")

        def failing_move(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(kv_store.shutil, "move", failing_move)

        with pytest.raises(OSError, match="disk full"):
            store.set("k", "new")

        assert not list(tmp_path.glob("*.tmp"))
        assert store.get("k") == "old"
