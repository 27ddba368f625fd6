from __future__ import annotations

import json

import pytest

from companion.storage import FileKeyValueStore, MemoryKeyValueStore


def test_memory_store_returns_none_until_set() -> None:
    store = MemoryKeyValueStore()

    assert store.get("options") is None
    store.set("options", '{"a":1}')
    assert store.get("options") == '{"a":1}'


def test_memory_store_rejects_non_string_values() -> None:
    with pytest.raises(TypeError):
        MemoryKeyValueStore().set("options", {"a": 1})  # type: ignore[arg-type]


def test_file_store_survives_new_instance(tmp_path) -> None:
    path = tmp_path / "data" / "local_storage.json"
    FileKeyValueStore(path, scope="tetristime").set("options", '{"color":"red"}')

    reopened = FileKeyValueStore(path, scope="tetristime")

    assert reopened.get("options") == '{"color":"red"}'
    assert not path.with_suffix(".tmp").exists()


def test_file_store_overwrites_whole_value(tmp_path) -> None:
    store = FileKeyValueStore(tmp_path / "kv.json")
    store.set("options", '{"a":1,"b":2}')
    store.set("options", '{"c":3}')

    assert store.get("options") == '{"c":3}'


def test_file_store_scopes_are_isolated(tmp_path) -> None:
    path = tmp_path / "kv.json"
    FileKeyValueStore(path, scope="one").set("options", "1")
    FileKeyValueStore(path, scope="two").set("options", "2")

    assert FileKeyValueStore(path, scope="one").get("options") == "1"
    assert FileKeyValueStore(path, scope="two").get("options") == "2"
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "one": {"options": "1"},
        "two": {"options": "2"},
    }


def test_file_store_treats_corrupt_file_as_empty(tmp_path, caplog) -> None:
    path = tmp_path / "kv.json"
    path.write_text("{not json", encoding="utf-8")
    store = FileKeyValueStore(path)

    with caplog.at_level("WARNING"):
        assert store.get("options") is None
    assert "unreadable" in caplog.text

    store.set("options", '{"a":1}')
    assert store.get("options") == '{"a":1}'


def test_file_store_rejects_non_string_values(tmp_path) -> None:
    store = FileKeyValueStore(tmp_path / "kv.json")

    with pytest.raises(TypeError):
        store.set("options", 1)  # type: ignore[arg-type]
    assert not (tmp_path / "kv.json").exists()
