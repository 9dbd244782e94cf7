import json
from datetime import timedelta

import pytest

from garden.errors import StoreError
from garden.growth import build_versions, utcnow
from garden.sample_data import seed_sample_data
from garden.store.memory import MemoryStore


@pytest.fixture
def data_file(tmp_path):
    return str(tmp_path / "data" / "plants.json")


@pytest.fixture
def store(data_file):
    return MemoryStore(data_file)


def test_insert_assigns_ids_and_timestamps(store):
    first = store.insert("plants", {"name": "Kale"})
    second = store.insert("plants", {"name": "Chard"})

    assert first["_id"].startswith("plants_")
    assert first["_id"].endswith("_1")
    assert second["_id"].endswith("_2")
    assert first["createdAt"] == first["updatedAt"]


def test_records_are_copies(store):
    plant = store.insert("plants", {"name": "Kale", "tags": ["green"]})
    plant["tags"].append("mutated")
    assert store.get("plants", plant["_id"])["tags"] == ["green"]


def test_update_merges_and_touches_updated_at(store):
    plant = store.insert("plants", {"name": "Kale", "location": "indoor"})
    updated = store.update("plants", plant["_id"], {"location": "outdoor", "_id": "hijack"})

    assert updated["_id"] == plant["_id"]
    assert updated["name"] == "Kale"
    assert updated["location"] == "outdoor"
    assert updated["updatedAt"] >= plant["updatedAt"]
    assert store.update("plants", "missing", {"name": "x"}) is None


def test_delete_returns_record(store):
    plant = store.insert("plants", {"name": "Kale"})
    assert store.delete("plants", plant["_id"])["name"] == "Kale"
    assert store.delete("plants", plant["_id"]) is None
    assert store.get("plants", plant["_id"]) is None


def test_find_filters_sorts_and_pages(store):
    for name, location in [("b", "indoor"), ("a", "outdoor"), ("c", "indoor"), ("d", None)]:
        store.insert("plants", {"name": name, "location": location})

    assert [p["name"] for p in store.find("plants", {"location": "indoor"}, sort="name")] == ["b", "c"]
    assert [p["name"] for p in store.find("plants", sort="-name")] == ["d", "c", "b", "a"]
    assert [p["name"] for p in store.find("plants", sort="name", skip=1, limit=2)] == ["b", "c"]
    assert store.count("plants", {"location": "indoor"}) == 2


def test_find_with_comparison_filter_skips_missing_values(store):
    now = utcnow()
    store.insert("plants", {"name": "due", "nextWatering": now - timedelta(hours=1)})
    store.insert("plants", {"name": "later", "nextWatering": now + timedelta(days=1)})
    store.insert("plants", {"name": "never", "nextWatering": None})

    due = store.find("plants", {"nextWatering": ("<=", now)})
    assert [p["name"] for p in due] == ["due"]


def test_search_is_case_insensitive(store):
    store.insert("plants", {"name": "Mint", "species": "Mentha"})
    store.insert("plants", {"name": "Basil", "species": None})
    assert [p["name"] for p in store.find("plants", search="MENT", search_fields=("name", "species"))] == ["Mint"]


def test_unknown_collection(store):
    with pytest.raises(StoreError):
        store.find("weeds")


def test_writes_persist_and_reload(store, data_file):
    now = utcnow()
    plant = store.insert("plants", {"name": "Kale", "versions": build_versions("v2", now=now), "plantedDate": now})
    store.insert("gardens", {"name": "Patch", "plants": [plant["_id"]]})

    with open(data_file) as fh:
        saved = json.load(fh)
    assert saved["savedAt"]
    assert saved["plants"][0]["versions"]["v2"]["date"].endswith("Z")
    assert saved["idCounters"]["plants"] == 2

    reloaded = MemoryStore(data_file)
    assert reloaded.load() is True
    kale = reloaded.get("plants", plant["_id"])
    assert kale["plantedDate"] == plant["plantedDate"]
    assert kale["versions"]["v1"]["date"] == now
    assert reloaded.find("gardens")[0]["plants"] == [plant["_id"]]
    # counters survive so new ids do not collide
    assert reloaded.insert("plants", {"name": "Chard"})["_id"].endswith("_2")


def test_load_without_file(store):
    assert store.load() is False


def test_load_corrupt_file(store, data_file, tmp_path):
    (tmp_path / "data").mkdir()
    with open(data_file, "w") as fh:
        fh.write("{not json")
    assert store.load() is False


def test_sessions_are_not_persisted(store, data_file):
    user = store.create_user("gardener", "hash")
    store.create_session("jti-1", user["_id"])
    store.insert("layouts", {"name": "Bed"})

    assert store.get_session("jti-1")["userId"] == user["_id"]
    with open(data_file) as fh:
        saved = json.load(fh)
    assert "sessions" not in saved and "users" not in saved

    assert store.delete_session("jti-1") is True
    assert store.delete_session("jti-1") is False


def test_seed_sample_data(store):
    seed_sample_data(store)
    assert store.count("plants") == 6
    assert store.count("layouts") == 3
    kitchen = store.find("gardens", {"name": "Kitchen Garden"})[0]
    assert len(kitchen["plants"]) == 4
    spinach = store.find("plants", {"name": "Spinach"})[0]
    assert spinach["currentVersion"] == "v3"
    assert spinach["versions"]["v3"]["date"] is not None
    assert spinach["versions"]["v4"]["date"] is None
