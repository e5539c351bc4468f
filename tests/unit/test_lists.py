"""Unit tests for named list storage."""

import json

from knnblocks.storage.lists import JsonListStore, MemoryListStore, Target


class TestMemoryListStore:
    def test_missing_list(self):
        store = MemoryListStore()

        assert store.lookup("data") is None
        assert store.read("data") is None

    def test_write_creates_and_replaces(self):
        store = MemoryListStore()
        store.write("data", ["a", "b"])
        store.write("data", ["c"])

        assert store.read("data") == ["c"]
        assert store.names() == ["data"]

    def test_lookup_or_create_keeps_existing(self):
        store = MemoryListStore({"data": ["1"]})

        variable = store.lookup_or_create("some_id", "data")

        assert variable.value == ["1"]

    def test_lookup_or_create_assigns_id(self):
        store = MemoryListStore()

        variable = store.lookup_or_create("tfknn_dataset", "KNN Dataset")

        assert variable.id == "tfknn_dataset"
        assert store.read("KNN Dataset") == []

    def test_read_returns_copy(self):
        store = MemoryListStore({"data": ["1"]})

        store.read("data").append("2")

        assert store.read("data") == ["1"]


class TestJsonListStore:
    def test_persists_across_instances(self, tmp_path):
        JsonListStore(str(tmp_path), "sprite1").write("data", ["x", "y"])

        reopened = JsonListStore(str(tmp_path), "sprite1")

        assert reopened.read("data") == ["x", "y"]

    def test_file_layout(self, tmp_path):
        store = JsonListStore(str(tmp_path), "sprite1")
        store.lookup_or_create("tfknn_dataset", "KNN Dataset")
        store.write("KNN Dataset", ["line"])

        payload = json.loads(store.path.read_text(encoding="utf-8"))

        assert payload == {"lists": {"KNN Dataset": {"id": "tfknn_dataset", "value": ["line"]}}}

    def test_targets_use_separate_files(self, tmp_path):
        JsonListStore(str(tmp_path), "a").write("data", ["1"])

        assert JsonListStore(str(tmp_path), "b").read("data") is None


def test_target_defaults_to_memory_lists():
    target = Target(id="stage")

    assert isinstance(target.lists, MemoryListStore)
