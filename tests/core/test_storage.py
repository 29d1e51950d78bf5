import json

import pytest

from scribe_toolkit.core.exceptions import StorageError
from scribe_toolkit.core.storage import JsonFileStore, MemoryStore, get_default_store, reset_default_store


def test_memory_store_round_trip():
    store = MemoryStore({"a": "1"})
    assert store.get_item("a") == "1"
    store.set_item("b", "2")
    assert "b" in store
    store.remove_item("a")
    store.remove_item("missing")
    assert store.get_item("a") is None


def test_json_store_persists_between_instances(tmp_path):
    path = tmp_path / "nested" / "store.json"
    JsonFileStore(path).set_item("editorContent", "<p>é</p>")
    assert JsonFileStore(path).get_item("editorContent") == "<p>é</p>"
    assert json.loads(path.read_text(encoding="utf-8")) == {"editorContent": "<p>é</p>"}


def test_json_store_missing_file_reads_as_empty(tmp_path):
    store = JsonFileStore(tmp_path / "absent.json")
    assert store.get_item("editorContent") is None
    store.remove_item("editorContent")
    assert not store.path.exists()


def test_json_store_keeps_other_keys(tmp_path):
    store = JsonFileStore(tmp_path / "store.json")
    store.set_item("a", "1")
    store.set_item("b", "2")
    store.remove_item("a")
    assert store.get_item("a") is None
    assert store.get_item("b") == "2"


def test_json_store_ignores_non_string_values(tmp_path):
    path = tmp_path / "store.json"
    path.write_text('{"editorContent": 5}', encoding="utf-8")
    assert JsonFileStore(path).get_item("editorContent") is None


@pytest.mark.parametrize("content", ["not json", "[1, 2]"])
def test_json_store_corrupt_file_raises_storage_error(tmp_path, content):
    path = tmp_path / "store.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StorageError):
        JsonFileStore(path).get_item("editorContent")


def test_json_store_leaves_no_temp_files(tmp_path):
    store = JsonFileStore(tmp_path / "store.json")
    store.set_item("k", "v")
    assert sorted(p.name for p in tmp_path.iterdir()) == ["store.json"]


def test_default_store_lives_in_data_dir(tmp_path):
    store = get_default_store()
    assert store.path == tmp_path / "data" / "editor_store.json"
    assert get_default_store() is store
    reset_default_store()
    assert get_default_store() is not store
