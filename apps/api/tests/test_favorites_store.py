"""Tests for the favorites store and its persistence behaviour."""
from __future__ import annotations

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.services.favorites import DEFAULT_STORAGE_KEY, FavoritesStore
from app.services.storage import InMemoryStorage

from conftest import make_property


class FailingStorage(InMemoryStorage):
    """Storage whose reads and/or writes blow up."""

    def __init__(self, *, fail_load: bool = False, fail_save: bool = True) -> None:
        super().__init__()
        self.fail_load = fail_load
        self.fail_save = fail_save

    def load(self, key: str):
        if self.fail_load:
            raise OSError("storage unavailable")
        return super().load(key)

    def save(self, key: str, value: str) -> None:
        if self.fail_save:
            raise OSError("quota exceeded")
        super().save(key, value)


def _stored(storage: InMemoryStorage) -> list[dict]:
    return json.loads(storage.load(DEFAULT_STORAGE_KEY))


def test_starts_empty_without_stored_value(store):
    assert store.count == 0
    assert store.favorites == []


def test_add_then_remove_updates_membership(store):
    prop = make_property(id="prop1")

    assert store.add(prop) is True
    assert store.is_favorite("prop1") is True
    assert store.count == 1

    assert store.remove("prop1") is True
    assert store.is_favorite("prop1") is False
    assert store.count == 0


def test_adding_same_id_twice_is_idempotent(store):
    first = make_property(id="prop1", price=450000)
    second = make_property(id="prop1", price=999999)

    store.add(first)
    assert store.add(second) is False

    assert store.count == 1
    assert store.favorites[0]["price"] == 450000


@pytest.mark.parametrize("invalid", [None, {}, {"id": ""}, {"type": "House"}, "prop1"])
def test_invalid_adds_are_rejected(store, storage, invalid, caplog):
    with caplog.at_level(logging.WARNING):
        assert store.add(invalid) is False

    assert store.count == 0
    assert storage.load(DEFAULT_STORAGE_KEY) is None
    assert "Invalid property" in caplog.text


def test_add_keeps_insertion_order_and_stores_a_copy(store):
    payload = {"id": "dropped", "price": 100000, "images": ["a.jpg"]}

    store.add(make_property(id="prop2"))
    store.add(payload)
    payload["images"].append("b.jpg")

    assert [fav["id"] for fav in store.favorites] == ["prop2", "dropped"]
    assert store.favorites[1]["images"] == ["a.jpg"]


def test_favorites_property_returns_a_copy(store):
    store.add(make_property(id="prop1"))

    store.favorites.clear()

    assert store.count == 1


def test_every_mutation_persists_full_set(store, storage):
    store.add(make_property(id="prop1"))
    store.add(make_property(id="prop2"))
    assert [fav["id"] for fav in _stored(storage)] == ["prop1", "prop2"]

    store.remove("prop1")
    assert [fav["id"] for fav in _stored(storage)] == ["prop2"]

    store.clear()
    assert _stored(storage) == []


def test_snapshot_uses_wire_field_names(store, storage):
    store.add(make_property(id="prop1"))

    saved = _stored(storage)[0]
    assert saved["dateAdded"] == "2025-10-15"
    assert saved["floorPlan"] == "images/prop1/floorplan.jpg"


def test_removing_unknown_id_is_a_noop(store, storage):
    assert store.remove("missing") is False
    assert storage.load(DEFAULT_STORAGE_KEY) is None


def test_clear_empties_unconditionally(store, storage):
    store.clear()

    assert store.count == 0
    assert _stored(storage) == []


def test_load_restores_persisted_favorites():
    storage = InMemoryStorage({DEFAULT_STORAGE_KEY: json.dumps([{"id": "prop1"}, {"id": "prop2"}])})
    store = FavoritesStore(storage)

    store.load()

    assert store.count == 2
    assert store.is_favorite("prop2")


@pytest.mark.parametrize("raw", ["{not json", json.dumps({"id": "prop1"}), json.dumps("prop1")])
def test_load_recovers_from_corrupt_data(raw, caplog):
    store = FavoritesStore(InMemoryStorage({DEFAULT_STORAGE_KEY: raw}))

    with caplog.at_level(logging.WARNING):
        store.load()

    assert store.count == 0
    assert caplog.records


def test_load_drops_invalid_and_duplicate_entries(caplog):
    raw = json.dumps([{"id": "prop1"}, {"id": "prop1", "price": 1}, {"price": 2}, "junk"])
    store = FavoritesStore(InMemoryStorage({DEFAULT_STORAGE_KEY: raw}))

    with caplog.at_level(logging.WARNING):
        store.load()

    assert store.count == 1
    assert "Dropped 3" in caplog.text


def test_load_survives_storage_errors(caplog):
    store = FavoritesStore(FailingStorage(fail_load=True))

    with caplog.at_level(logging.WARNING):
        store.load()

    assert store.count == 0
    assert "Error reading favorites" in caplog.text


def test_save_failure_keeps_in_memory_change(caplog):
    store = FavoritesStore(FailingStorage(fail_save=True))
    store.load()

    with caplog.at_level(logging.ERROR):
        assert store.add(make_property(id="prop1")) is True

    assert store.is_favorite("prop1")
    assert "Error saving favorites" in caplog.text


def test_custom_storage_key():
    storage = InMemoryStorage()
    store = FavoritesStore(storage, storage_key="otherSlot")

    store.add(make_property(id="prop1"))

    assert storage.load("otherSlot") is not None
    assert storage.load(DEFAULT_STORAGE_KEY) is None


def test_load_recovers_from_deeply_nested_data(caplog):
    raw = "[" * 200000 + "]" * 200000
    store = FavoritesStore(InMemoryStorage({DEFAULT_STORAGE_KEY: raw}))

    with caplog.at_level(logging.WARNING):
        store.load()

    assert store.count == 0
    assert "could not be decoded" in caplog.text


class SlowStorage(InMemoryStorage):
    """Storage whose writes take long enough for threads to overlap."""

    def save(self, key: str, value: str) -> None:
        time.sleep(0.001)
        super().save(key, value)


def test_concurrent_adds_persist_the_full_set():
    storage = SlowStorage()
    store = FavoritesStore(storage)
    ids = [f"prop{index}" for index in range(40)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda property_id: store.add({"id": property_id}), ids + ids))

    assert results.count(True) == 40
    assert store.count == 40
    assert sorted(fav["id"] for fav in _stored(storage)) == sorted(ids)
