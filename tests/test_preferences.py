"""Tests for per-user property stores and panel preferences."""

import pytest

from datasetiq_sheets.data import InMemoryPropertyStore, SqlitePropertyStore, UserPreferences
from datasetiq_sheets.data.preferences import FAVORITES_PROP, MAX_FAVORITES, MAX_RECENT
from datasetiq_sheets.exceptions import MissingApiKey


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryPropertyStore()
    return SqlitePropertyStore(tmp_path / "props.db", user_id="alice")


def test_store_get_set_delete(any_store):
    assert any_store.get("k") is None
    any_store.set("k", "v1")
    any_store.set("k", "v2")
    assert any_store.get("k") == "v2"
    any_store.delete("k")
    assert any_store.get("k") is None
    any_store.delete("k")


def test_sqlite_store_is_scoped_per_user(tmp_path):
    db_path = tmp_path / "nested" / "props.db"
    alice = SqlitePropertyStore(db_path, user_id="alice")
    bob = SqlitePropertyStore(db_path, user_id="bob")

    alice.set("DATASETIQ_API_KEY", "sk-alice")
    assert bob.get("DATASETIQ_API_KEY") is None
    assert SqlitePropertyStore(db_path, user_id="alice").get("DATASETIQ_API_KEY") == "sk-alice"
    assert alice.keys() == ["DATASETIQ_API_KEY"]


def test_api_key_lifecycle(any_store):
    prefs = UserPreferences(any_store)
    assert prefs.get_api_key() is None

    prefs.save_api_key("  sk-live  ")
    assert prefs.get_api_key() == "sk-live"

    prefs.clear_api_key()
    assert prefs.get_api_key() is None


def test_blank_api_key_is_rejected():
    with pytest.raises(MissingApiKey, match="API key is required."):
        UserPreferences(InMemoryPropertyStore()).save_api_key("   ")


def test_favorites_newest_first_without_duplicates(any_store):
    prefs = UserPreferences(any_store)
    prefs.add_favorite("GDP")
    prefs.add_favorite("CPIAUCSL")
    prefs.add_favorite("GDP")
    assert prefs.get_favorites() == ["CPIAUCSL", "GDP"]

    prefs.remove_favorite("GDP")
    assert prefs.get_favorites() == ["CPIAUCSL"]


def test_favorites_are_capped():
    prefs = UserPreferences(InMemoryPropertyStore())
    for i in range(MAX_FAVORITES + 5):
        prefs.add_favorite(f"S{i}")
    favorites = prefs.get_favorites()
    assert len(favorites) == MAX_FAVORITES
    assert favorites[0] == f"S{MAX_FAVORITES + 4}"


def test_recent_moves_to_front_and_is_capped():
    prefs = UserPreferences(InMemoryPropertyStore())
    for i in range(MAX_RECENT + 3):
        prefs.add_to_recent(f"S{i}")
    prefs.add_to_recent("S10")

    recent = prefs.get_recent()
    assert len(recent) == MAX_RECENT
    assert recent[0] == "S10"
    assert recent.count("S10") == 1


def test_corrupt_list_reads_as_empty():
    store = InMemoryPropertyStore({FAVORITES_PROP: "{not json"})
    assert UserPreferences(store).get_favorites() == []


def test_templates_roundtrip(any_store):
    prefs = UserPreferences(any_store)
    first = prefs.save_template("Inflation", [{"cell": "A1", "formula": '=DSIQ("CPIAUCSL")'}])
    second = prefs.save_template("Jobs", [{"cell": "B2", "formula": '=DSIQ_LATEST("UNRATE")'}])

    assert [t["name"] for t in prefs.get_templates()] == ["Jobs", "Inflation"]
    assert prefs.get_template(first["id"])["formulas"][0]["cell"] == "A1"

    prefs.delete_template(second["id"])
    assert [t["id"] for t in prefs.get_templates()] == [first["id"]]
    assert prefs.get_template(second["id"]) is None
