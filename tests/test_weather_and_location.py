"""Weather and place lookups: providers, display rules and latest-request-wins state."""

from __future__ import annotations

import asyncio
import sys
import time
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterator

import pytest
import requests

sys.path.append(str(Path(__file__).resolve().parents[1]))

from closet_app.config import ClosetConfig
from logic.daily_weather import NO_LOCATION_MESSAGE, DailyWeather
from logic.location_search import RESOLVE_FAILED_MESSAGE, LocationSearch
from logic.weather_display import weather_emoji, weather_summary
from memory.lookup_state import LookupState
from models.trip import Trip
from tools import geocoding_provider, weather_provider
from tools.geocoding_provider import (
    GeocodingError,
    GeocodingProvider,
    MockGeocodingProvider,
    OpenMeteoGeocodingProvider,
    PlaceSuggestion,
    ResolvedPlace,
)
from tools.weather_provider import (
    MockWeatherProvider,
    OpenMeteoWeatherProvider,
    WeatherLookupError,
    WeatherReport,
    symbol_for_weather_code,
)


class _FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        return self._payload


@pytest.mark.parametrize(
    "symbol,expected",
    [
        ("sun.max", "☀️"),
        ("cloud.sun", "⛅"),
        ("cloud.rain", "🌧️"),
        ("cloud.drizzle", "🌧️"),
        ("cloud.snow", "❄️"),
        ("cloud.bolt", "⛈️"),
        ("cloud.fog", "☁️"),
        ("cloud", "☁️"),
        ("wind", "🌡️"),
        (None, "🌡️"),
    ],
)
def test_weather_emoji_rules(symbol: str, expected: str) -> None:
    assert weather_emoji(symbol) == expected


def test_weather_summary_rounds_temperatures() -> None:
    report = WeatherReport(high_temp=71.6, low_temp=55.2, condition_symbol="cloud.sun")
    assert weather_summary(report) == "⛅ High 72°  Low 55°"


def test_wmo_codes_map_to_symbols() -> None:
    assert symbol_for_weather_code(0) == "sun.max"
    assert symbol_for_weather_code(2) == "cloud.sun"
    assert symbol_for_weather_code(45) == "cloud.fog"
    assert symbol_for_weather_code(53) == "cloud.drizzle"
    assert symbol_for_weather_code(81) == "cloud.rain"
    assert symbol_for_weather_code(73) == "cloud.snow"
    assert symbol_for_weather_code(95) == "cloud.bolt"
    assert symbol_for_weather_code(None) == "thermometer"


def test_open_meteo_forecast_parses_requested_day(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: Dict[str, Any] = {}

    def fake_get(url: str, params: Dict[str, Any], timeout: float) -> _FakeResponse:
        captured.update(params)
        return _FakeResponse(
            {
                "daily": {
                    "time": ["2025-06-03"],
                    "temperature_2m_max": [78.4],
                    "temperature_2m_min": [61.0],
                    "weathercode": [61],
                }
            }
        )

    monkeypatch.setattr(weather_provider.requests, "get", fake_get)
    provider = OpenMeteoWeatherProvider(timeout_seconds=1.0)

    report = provider.get_forecast(38.7, -9.1, date(2025, 6, 3))

    assert report == WeatherReport(high_temp=78.4, low_temp=61.0, condition_symbol="cloud.rain")
    assert captured["start_date"] == captured["end_date"] == "2025-06-03"
    assert captured["temperature_unit"] == "fahrenheit"


def test_open_meteo_forecast_failures_raise_lookup_error(monkeypatch: pytest.MonkeyPatch) -> None:
    provider = OpenMeteoWeatherProvider()

    def timeout(*_: Any, **__: Any) -> _FakeResponse:
        raise requests.Timeout("slow")

    monkeypatch.setattr(weather_provider.requests, "get", timeout)
    with pytest.raises(WeatherLookupError):
        provider.get_forecast(0, 0, date(2025, 6, 3))

    monkeypatch.setattr(weather_provider.requests, "get", lambda *a, **k: _FakeResponse({"daily": {"time": []}}))
    with pytest.raises(WeatherLookupError):
        provider.get_forecast(0, 0, date(2025, 6, 3))

    monkeypatch.setattr(weather_provider.requests, "get", lambda *a, **k: _FakeResponse({"oops": 1}))
    with pytest.raises(WeatherLookupError):
        provider.get_forecast(0, 0, date(2025, 6, 3))


def test_open_meteo_geocoding_search_and_resolve(monkeypatch: pytest.MonkeyPatch) -> None:
    place = {"id": 2267057, "name": "Lisbon", "latitude": 38.72, "longitude": -9.13, "admin1": "Lisbon", "country": "Portugal"}

    def fake_get(url: str, params: Dict[str, Any], timeout: float) -> _FakeResponse:
        if url == geocoding_provider.SEARCH_URL:
            return _FakeResponse({"results": [place]})
        assert params["id"] == "2267057"
        return _FakeResponse(place)

    monkeypatch.setattr(geocoding_provider.requests, "get", fake_get)
    provider = OpenMeteoGeocodingProvider()

    suggestions = list(provider.search("lisb"))
    assert suggestions == [PlaceSuggestion(title="Lisbon", subtitle="Lisbon, Portugal", place_id="2267057")]
    assert provider.resolve(suggestions[0]) == ResolvedPlace("Lisbon, Lisbon", 38.72, -9.13)
    assert list(provider.search("  ")) == []


def test_open_meteo_geocoding_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*_: Any, **__: Any) -> _FakeResponse:
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(geocoding_provider.requests, "get", boom)
    provider = OpenMeteoGeocodingProvider()

    with pytest.raises(GeocodingError):
        list(provider.search("lisb"))
    with pytest.raises(GeocodingError):
        provider.resolve(PlaceSuggestion(title="Nowhere"))


def test_lookup_state_drops_superseded_results() -> None:
    state: LookupState[str] = LookupState()

    first = state.begin()
    second = state.begin()

    assert state.complete(first, "stale") is False
    assert state.result is None and state.is_loading
    assert state.complete(second, "fresh") is True
    assert state.result == "fresh" and not state.is_loading
    assert state.fail(first, "late failure") is False
    assert state.error_message is None


_PLACES = [
    ResolvedPlace("Lisbon, Lisbon", 38.72, -9.13),
    ResolvedPlace("Porto, Porto", 41.15, -8.61),
]


def test_location_search_suggests_and_selects() -> None:
    search = LocationSearch(MockGeocodingProvider(_PLACES))

    found = asyncio.run(search.update_query("lis"))
    assert found.applied
    assert [s.title for s in found.result] == ["Lisbon"]
    assert search.is_latest(found)

    chosen = asyncio.run(search.select(found.result[0]))
    assert chosen.result == _PLACES[0]
    assert search.query == "Lisbon, Lisbon"
    assert search.suggestions == []

    assert asyncio.run(search.update_query("")).result == []
    assert search.selected is None


def test_location_search_reports_failures() -> None:
    search = LocationSearch(MockGeocodingProvider(error=GeocodingError("offline")))

    asyncio.run(search.update_query("lis"))
    assert search.error_message == "Search failed: offline"

    search = LocationSearch(MockGeocodingProvider(_PLACES))
    missing = asyncio.run(search.select(PlaceSuggestion(title="Atlantis", place_id="Atlantis")))
    assert missing.result is None
    assert missing.error_message == RESOLVE_FAILED_MESSAGE
    assert search.error_message == RESOLVE_FAILED_MESSAGE


class _SlowFirstProvider(GeocodingProvider):
    def search(self, query: str) -> Iterator[PlaceSuggestion]:
        if query == "slow":
            time.sleep(0.3)
        yield PlaceSuggestion(title=query)

    def resolve(self, suggestion: PlaceSuggestion) -> ResolvedPlace:
        raise GeocodingError("unused")


def test_latest_query_wins_over_slower_earlier_query() -> None:
    search = LocationSearch(_SlowFirstProvider())

    async def type_twice():
        return await asyncio.gather(search.update_query("slow"), search.update_query("fast"))

    slow, fast = asyncio.run(type_twice())

    assert [s.title for s in slow.result] == ["slow"]
    assert not slow.applied
    assert not search.is_latest(slow)
    assert fast.applied

    assert [s.title for s in search.suggestions] == ["fast"]
    assert not search.is_loading


def test_daily_weather_prefers_active_trip_location() -> None:
    provider = MockWeatherProvider(WeatherReport(high_temp=80, low_temp=65, condition_symbol="sun.max"))
    config = ClosetConfig(default_latitude=40.7, default_longitude=-74.0)
    weather = DailyWeather(provider, config)
    trip = Trip(
        name="Lisbon",
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 5),
        location_name="Lisbon, Lisbon",
        latitude=38.72,
        longitude=-9.13,
    )

    forecast = asyncio.run(weather.refresh(date(2025, 6, 3), [trip]))
    assert provider.calls[-1] == (38.72, -9.13, date(2025, 6, 3))
    assert forecast.location_name == "Lisbon, Lisbon"
    assert weather.current == forecast
    assert forecast.summary == "☀️ High 80°  Low 65°"

    forecast = asyncio.run(weather.refresh(date(2025, 6, 9), [trip]))
    assert provider.calls[-1] == (40.7, -74.0, date(2025, 6, 9))
    assert forecast.location_name == "Current Location"


def test_daily_weather_failure_is_reported_not_raised() -> None:
    config = ClosetConfig(default_latitude=40.7, default_longitude=-74.0)
    weather = DailyWeather(MockWeatherProvider(error=WeatherLookupError("service down")), config)

    forecast = asyncio.run(weather.refresh(date(2025, 6, 3), []))
    assert forecast.report is None
    assert forecast.summary is None
    assert forecast.error_message == "Weather unavailable: service down"
    assert weather.error_message == "Weather unavailable: service down"
    assert not weather.is_loading


def test_daily_weather_without_any_location() -> None:
    provider = MockWeatherProvider()
    weather = DailyWeather(provider, ClosetConfig())

    forecast = asyncio.run(weather.refresh(date(2025, 6, 3), []))
    assert forecast.error_message == NO_LOCATION_MESSAGE
    assert forecast.location_name is None
    assert provider.calls == []
    assert weather.error_message == NO_LOCATION_MESSAGE


class _PerDayWeatherProvider(MockWeatherProvider):
    """Answers the first day slowly so two refreshes overlap."""

    def __init__(self, slow_day: date, reports: Dict[date, WeatherReport]) -> None:
        super().__init__()
        self.slow_day = slow_day
        self.reports = reports

    def get_forecast(self, latitude: float, longitude: float, date: date) -> WeatherReport:
        self.calls.append((latitude, longitude, date))
        if date == self.slow_day:
            time.sleep(0.3)
        return self.reports[date]


def test_overlapping_refreshes_each_get_their_own_day() -> None:
    monday, tuesday = date(2025, 6, 2), date(2025, 6, 3)
    provider = _PerDayWeatherProvider(
        monday,
        {
            monday: WeatherReport(high_temp=90, low_temp=70, condition_symbol="sun.max"),
            tuesday: WeatherReport(high_temp=55, low_temp=45, condition_symbol="cloud.rain"),
        },
    )
    weather = DailyWeather(provider, ClosetConfig(default_latitude=40.7, default_longitude=-74.0))

    async def both_days():
        return await asyncio.gather(weather.refresh(monday, []), weather.refresh(tuesday, []))

    first, second = asyncio.run(both_days())

    assert first.day == monday
    assert first.report.high_temp == 90
    assert second.day == tuesday
    assert second.report.high_temp == 55
    assert weather.current == second
