"""Closet tool facade: form validation payloads, seeding and reference scrubbing."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.clothing_item import ClothingItem
from models.outfit import Outfit
from models.trip import Trip
from tools.closet_store import SQLiteRecordStore
from tools.closet_tools import ClosetTools


@pytest.fixture()
def tools(tmp_path: Path) -> ClosetTools:
    return ClosetTools(SQLiteRecordStore(tmp_path / "closet.db"))


def _trip_form(**overrides: object) -> dict:
    form = {
        "name": "Lisbon",
        "start_date": "2025-06-01",
        "end_date": "2025-06-05",
        "location_name": "Lisbon, Lisbon",
        "latitude": 38.72,
        "longitude": -9.13,
    }
    form.update(overrides)
    return form


def test_seed_runs_only_on_an_empty_closet(tools: ClosetTools) -> None:
    assert tools.seed_defaults_if_empty() == 16
    assert tools.seed_defaults_if_empty() == 0
    assert len(tools.list_items()) == 16


def test_add_item_parses_form_fields(tools: ClosetTools) -> None:
    result = tools.add_item(
        name=" Plaid Skirt ",
        category="bottoms",
        subcategory="short_skirts",
        image_name="plaid",
        tags_text="fall, plaid",
    )

    assert result["status"] == "ok"
    stored = tools.get_item(result["item"]["item_id"])
    assert stored.name == "Plaid Skirt"
    assert stored.tags == ["fall", "plaid"]
    assert stored.supported_foot_styles is None


def test_blank_item_name_needs_review(tools: ClosetTools) -> None:
    """Invalid forms come back inline instead of raising."""

    result = tools.add_item(name="   ", category="tops")

    assert result["status"] == "needs_review"
    assert result["details"][0]["loc"] == ["name"]
    assert tools.list_items() == []


def test_update_item_and_missing_item(tools: ClosetTools) -> None:
    item_id = tools.add_item(name="Tee", category="tops")["item"]["item_id"]

    updated = tools.update_item(item_id, name="Striped Tee", category="tops", tags_text="stripes")
    assert updated["status"] == "ok"
    assert tools.get_item(item_id).tags == ["stripes"]
    assert tools.update_item("missing", name="Ghost", category="tops")["status"] == "not_found"


def test_delete_item_scrubs_outfits(tools: ClosetTools) -> None:
    keep = tools.store.insert(ClothingItem(name="Jeans", category="bottoms"))
    gone = tools.store.insert(ClothingItem(name="Tee", category="tops"))
    outfit = tools.store.insert(Outfit(item_ids=[keep.item_id, gone.item_id]))
    untouched = tools.store.insert(Outfit(item_ids=[keep.item_id]))

    result = tools.delete_item(gone.item_id)

    assert result == {"status": "ok", "deleted": gone.item_id, "scrubbed_outfits": 1}
    assert tools.store.get(Outfit, outfit.outfit_id).item_ids == [keep.item_id]
    assert tools.store.get(Outfit, untouched.outfit_id).item_ids == [keep.item_id]
    assert tools.delete_item(gone.item_id)["status"] == "not_found"


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"latitude": None, "longitude": None}, "Please pick a real place from the suggestions."),
        ({"location_name": "  "}, "Please enter a city."),
        ({"start_date": "2025-06-05", "end_date": "2025-06-01"}, "End date cannot precede start date."),
    ],
)
def test_trip_form_validation_messages(tools: ClosetTools, overrides: dict, message: str) -> None:
    result = tools.add_trip(**_trip_form(**overrides))

    assert result["status"] == "needs_review"
    assert result["message"] == message
    assert tools.list_trips() == []


def test_trip_crud_keeps_outfit_trip_ids(tools: ClosetTools) -> None:
    """Deleting a trip leaves outfits pointing at it; the id just resolves to nothing."""

    trip_id = tools.add_trip(**_trip_form())["trip"]["trip_id"]
    outfit = tools.store.insert(Outfit(item_ids=["x"], trip_id=trip_id))

    renamed = tools.update_trip(trip_id, **_trip_form(name="Lisbon again"))
    assert renamed["trip"]["name"] == "Lisbon again"
    assert tools.store.get(Trip, trip_id).start_date == date(2025, 6, 1)

    assert tools.delete_trip(trip_id) == {"status": "ok", "deleted": trip_id}
    assert tools.store.get(Outfit, outfit.outfit_id).trip_id == trip_id
    assert tools.delete_trip(trip_id)["status"] == "not_found"


def test_search_and_delete_outfits(tools: ClosetTools) -> None:
    cozy = tools.store.insert(Outfit(title="Cozy", tags=["fall", "winter"]))
    tools.store.insert(Outfit(title="Beach", tags=["summer"]))

    assert [o["title"] for o in tools.search_outfits(text="winter")] == ["Cozy"]
    assert len(tools.search_outfits(text="")) == 2
    assert tools.delete_outfit(cozy.outfit_id)["status"] == "ok"
    assert [o["title"] for o in tools.list_outfits()] == ["Beach"]
