"""HTTP surface exercised end to end against a temporary SQLite closet."""

from __future__ import annotations

import asyncio
import sys
import time
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from closet_app.app import MyClosetApp
from closet_app.config import ClosetConfig
from server.api import create_app
from tools.geocoding_provider import MockGeocodingProvider, ResolvedPlace
from tools.weather_provider import MockWeatherProvider, WeatherProvider, WeatherReport


@pytest.fixture()
def closet(tmp_path: Path) -> MyClosetApp:
    config = ClosetConfig(
        database_path=str(tmp_path / "closet.db"),
        default_latitude=40.7,
        default_longitude=-74.0,
        max_open_drafts=3,
    )
    return MyClosetApp(
        config,
        weather_provider=MockWeatherProvider(WeatherReport(high_temp=64, low_temp=50, condition_symbol="cloud")),
        geocoding_provider=MockGeocodingProvider([ResolvedPlace("Lisbon, Lisbon", 38.72, -9.13)]),
    )


@pytest.fixture()
def client(closet: MyClosetApp) -> TestClient:
    return TestClient(create_app(closet))



def _item_id(client: TestClient, name: str) -> str:
    return next(item["item_id"] for item in client.get("/items").json() if item["name"] == name)


def test_healthcheck_and_seeded_closet(client: TestClient) -> None:
    assert client.get("/healthz").json()["status"] == "ok"
    assert len(client.get("/items").json()) == 16


def test_item_crud(client: TestClient) -> None:
    rejected = client.post("/items", json={"name": "", "category": "tops"})
    assert rejected.status_code == 422
    assert rejected.json()["status"] == "needs_review"

    created = client.post("/items", json={"name": "Denim Jacket", "category": "jackets", "tags_text": "denim"})
    assert created.status_code == 201
    item_id = created.json()["item"]["item_id"]

    patched = client.patch(f"/items/{item_id}", json={"name": "Blue Denim Jacket"})
    assert patched.status_code == 200
    assert patched.json()["item"]["tags"] == ["denim"]
    assert client.patch("/items/missing", json={"name": "x"}).status_code == 404

    assert client.delete(f"/items/{item_id}").json()["status"] == "ok"
    assert client.delete(f"/items/{item_id}").status_code == 404


def test_grouped_closet_and_thumbnail(client: TestClient) -> None:
    groups = client.get("/items/grouped").json()
    assert [group["category"] for group in groups] == ["undergarments", "bottoms", "tops", "shoes"]

    heels = client.get("/items/grouped", params={"foot_style": "heels"}).json()
    shoe_names = [item["name"] for sub in heels[-1]["subgroups"] for item in sub["items"]]
    assert shoe_names == ["Tall Black Boots"]
    assert client.get("/items/grouped", params={"foot_style": "wedges"}).status_code == 422

    thumbnail = client.get(f"/items/{_item_id(client, 'Tall Black Boots')}/thumbnail").json()
    assert thumbnail["image_name"] == "black_boots"
    assert thumbnail["layout"] == {"content_width": 200, "content_height": 200, "vertical_offset": -55}


def test_dressing_room_flow(client: TestClient) -> None:
    sneakers = _item_id(client, "White Sneakers")
    sweater = _item_id(client, "Green Sweater")

    draft = client.post("/outfits/drafts", json={"initial_date": "2025-06-03"}).json()
    draft_id = draft["outfit"]["outfit_id"]
    assert draft["persisted"] is False
    assert draft["outfit"]["title"] == "Outfit 06/03/25"

    client.post(f"/outfits/drafts/{draft_id}/toggle", json={"item_id": sweater})
    view = client.post(f"/outfits/drafts/{draft_id}/toggle", json={"item_id": sneakers}).json()
    assert view["persisted"] is True
    assert view["outfit"]["layers"] == ["avatar_base", "avatar_feet_flat", "green_sweater", "white_tennis_shoes", "hair_default"]

    moved = client.post(f"/outfits/drafts/{draft_id}/move", json={"from_index": 1, "to_index": 0}).json()
    assert moved["outfit"]["item_ids"] == [sneakers, sweater]
    assert client.post(f"/outfits/drafts/{draft_id}/move", json={"from_index": 5, "to_index": 0}).status_code == 422

    heels = client.post(f"/outfits/drafts/{draft_id}/foot-style", json={"foot_style": "heels"}).json()
    assert heels["outfit"]["item_ids"] == [sweater]

    assert client.post(f"/outfits/drafts/{draft_id}/hairstyle", json={"hair_asset_name": "hair_mohawk"}).status_code == 422
    client.post(f"/outfits/drafts/{draft_id}/hairstyle", json={"hair_asset_name": "hair_wavy"})

    saved = client.post(
        f"/outfits/drafts/{draft_id}/save",
        json={"title": "Cozy", "tags_text": "fall, winter", "date": "2025-06-03"},
    )
    assert saved.status_code == 200
    assert saved.json()["outfit"]["layers"][-1] == "hair_wavy"

    assert [o["title"] for o in client.get("/outfits", params={"q": "WINTER"}).json()] == ["Cozy"]
    assert client.get(f"/outfits/{draft_id}/avatar").json()["layer_rows"][0]["name"] == "Green Sweater"

    ootd = client.get("/ootd/2025-06-03").json()
    assert [o["title"] for o in ootd["outfits"]] == ["Cozy"]
    assert ootd["weather"] == "☁️ High 64°  Low 50°"
    assert ootd["location_name"] == "Current Location"

    assert client.delete(f"/outfits/{draft_id}").json()["status"] == "ok"
    assert client.get(f"/outfits/{draft_id}/avatar").status_code == 404


def test_saving_an_empty_draft_needs_review(client: TestClient) -> None:
    draft_id = client.post("/outfits/drafts", json={}).json()["outfit"]["outfit_id"]

    response = client.post(f"/outfits/drafts/{draft_id}/save", json={"title": "Nothing"})

    assert response.status_code == 422
    assert response.json()["message"] == "Add at least one item before saving the outfit."
    assert client.post("/outfits/drafts", json={"outfit_id": "missing"}).status_code == 404


def test_trip_planning_flow(client: TestClient) -> None:
    place = client.post("/places/resolve", json={"title": "Lisbon", "subtitle": "Lisbon", "place_id": "Lisbon, Lisbon"}).json()
    assert place["place"]["display_name"] == "Lisbon, Lisbon"
    assert [s["title"] for s in client.get("/places/search", params={"q": "lis"}).json()["suggestions"]] == ["Lisbon"]

    trip_form = {
        "name": "Lisbon",
        "start_date": "2025-06-01",
        "end_date": "2025-06-05",
        "location_name": place["place"]["display_name"],
        "latitude": place["place"]["latitude"],
        "longitude": place["place"]["longitude"],
    }
    assert client.post("/trips", json={**trip_form, "latitude": None}).status_code == 422
    trip_id = client.post("/trips", json=trip_form).json()["trip"]["trip_id"]

    jeans = _item_id(client, "Jeans")
    draft_id = client.post("/outfits/drafts", json={}).json()["outfit"]["outfit_id"]
    client.post(f"/outfits/drafts/{draft_id}/toggle", json={"item_id": jeans})
    client.post(f"/outfits/drafts/{draft_id}/save", json={"title": "Day one", "trip_id": trip_id, "date": "2025-06-02"})

    detail = client.get(f"/trips/{trip_id}").json()
    assert [o["title"] for o in detail["outfits"]] == ["Day one"]
    assert [item["name"] for item in detail["packing_list"]] == ["Jeans"]

    ootd = client.get("/ootd/2025-06-02").json()
    assert ootd["trip"]["name"] == "Lisbon"
    assert ootd["location_name"] == "Lisbon, Lisbon"

    renamed = client.put(f"/trips/{trip_id}", json={**trip_form, "name": "Portugal"})
    assert renamed.json()["trip"]["name"] == "Portugal"
    assert client.delete(f"/trips/{trip_id}").json()["status"] == "ok"
    assert client.get(f"/trips/{trip_id}").status_code == 404
    assert client.get(f"/outfits/{draft_id}/avatar").json()["trip_name"] is None


def test_saving_without_details_keeps_the_draft_date(client: TestClient) -> None:
    draft_id = client.post("/outfits/drafts", json={"initial_date": "2025-06-03"}).json()["outfit"]["outfit_id"]
    client.post(f"/outfits/drafts/{draft_id}/toggle", json={"item_id": _item_id(client, "Jeans")})

    saved = client.post(f"/outfits/drafts/{draft_id}/save")

    assert saved.status_code == 200
    assert saved.json()["outfit"]["title"] == "Outfit 06/03/25"
    assert saved.json()["outfit"]["date"].startswith("2025-06-03")
    assert [o["outfit_id"] for o in client.get("/ootd/2025-06-03").json()["outfits"]] == [draft_id]


def test_renaming_a_saved_outfit_keeps_its_other_details(client: TestClient) -> None:
    trip_id = client.post(
        "/trips",
        json={
            "name": "Lisbon",
            "start_date": "2025-06-01",
            "end_date": "2025-06-05",
            "location_name": "Lisbon, Lisbon",
            "latitude": 38.72,
            "longitude": -9.13,
        },
    ).json()["trip"]["trip_id"]
    draft_id = client.post("/outfits/drafts", json={}).json()["outfit"]["outfit_id"]
    client.post(f"/outfits/drafts/{draft_id}/toggle", json={"item_id": _item_id(client, "Jeans")})
    client.post(
        f"/outfits/drafts/{draft_id}/save",
        json={"title": "Day one", "tags_text": "travel", "date": "2025-06-02", "trip_id": trip_id},
    )

    client.post("/outfits/drafts", json={"outfit_id": draft_id})
    renamed = client.post(f"/outfits/drafts/{draft_id}/save", json={"title": "Arrival"}).json()["outfit"]

    assert renamed["title"] == "Arrival"
    assert renamed["tags"] == ["travel"]
    assert renamed["date"].startswith("2025-06-02")
    assert renamed["trip_id"] == trip_id

    cleared = client.post(f"/outfits/drafts/{draft_id}/save", json={"tags_text": None, "trip_id": None}).json()["outfit"]
    assert cleared["title"] == "Arrival"
    assert cleared["tags"] == []
    assert cleared["trip_id"] is None


class _TwoDayWeather(WeatherProvider):
    """Slow for the first day so two outfit-of-the-day requests overlap."""

    def get_forecast(self, latitude: float, longitude: float, date: date) -> WeatherReport:
        if date.day == 2:
            time.sleep(0.3)
            return WeatherReport(high_temp=90, low_temp=70, condition_symbol="sun.max")
        return WeatherReport(high_temp=55, low_temp=45, condition_symbol="cloud.rain")


def test_overlapping_ootd_requests_keep_their_own_weather(tmp_path: Path) -> None:
    closet = MyClosetApp(
        ClosetConfig(database_path=str(tmp_path / "closet.db"), default_latitude=40.7, default_longitude=-74.0),
        weather_provider=_TwoDayWeather(),
        geocoding_provider=MockGeocodingProvider([]),
    )

    async def two_days():
        return await asyncio.gather(closet.ootd(date(2025, 6, 2)), closet.ootd(date(2025, 6, 3)))

    monday, tuesday = asyncio.run(two_days())

    assert monday["date"] == "2025-06-02"
    assert monday["weather"] == "☀️ High 90°  Low 70°"
    assert monday["weather_error"] is None
    assert tuesday["weather"] == "🌧️ High 55°  Low 45°"


def test_open_drafts_are_capped_and_saved_ones_reload(closet: MyClosetApp) -> None:
    kept = closet.start_draft()
    kept.toggle_item("item-1")
    empty = closet.start_draft()

    for _ in range(3):
        closet.start_draft()

    assert len(closet.drafts) == 3
    assert kept.outfit_id not in closet.drafts
    assert closet.get_draft(empty.outfit_id) is None
    reloaded = closet.get_draft(kept.outfit_id)
    assert reloaded is not None
    assert reloaded.outfit.item_ids == ["item-1"]
    assert len(closet.drafts) == 3


def test_place_lookups_share_one_controller(client: TestClient, closet: MyClosetApp) -> None:
    found = client.get("/places/search", params={"q": "lis"}).json()
    assert [s["title"] for s in found["suggestions"]] == ["Lisbon"]
    assert found["superseded"] is False
    assert closet.places.query == "lis"

    resolved = client.post("/places/resolve", json={"title": "Lisbon", "subtitle": "Lisbon", "place_id": "Lisbon, Lisbon"}).json()
    assert resolved["superseded"] is False
    assert closet.places.selected.display_name == "Lisbon, Lisbon"

    missing = client.post("/places/resolve", json={"title": "Atlantis", "place_id": "Atlantis"}).json()
    assert missing["place"] is None
    assert missing["error_message"] == "Couldn't resolve that place."
