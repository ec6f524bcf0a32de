"""Weather row for the outfit-of-the-day screen."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Tuple

from closet_app.config import ClosetConfig
from closet_app.logging_config import get_logger, log_event
from logic.trip_planning import active_trip
from logic.weather_display import weather_summary
from memory.lookup_state import LookupState, run_latest
from models.trip import Trip, as_calendar_day
from tools.weather_provider import WeatherLookupError, WeatherProvider, WeatherReport

LOGGER = get_logger(__name__)
NO_LOCATION_MESSAGE = "No location available for weather."


@dataclass(frozen=True)
class DailyForecast:
    """The weather one refresh produced for one day."""

    day: date
    location_name: Optional[str] = None
    report: Optional[WeatherReport] = None
    error_message: Optional[str] = None

    @property
    def summary(self) -> Optional[str]:
        return weather_summary(self.report) if self.report is not None else None


class DailyWeather:
    """Fetches the forecast for a day at the trip location or the default one.

    ``refresh`` hands each caller the forecast it asked for. The shared state
    only tracks the latest day requested, so a slower, older request never
    overwrites it.
    """

    def __init__(self, provider: WeatherProvider, config: ClosetConfig) -> None:
        self.provider = provider
        self.config = config
        self.state: LookupState[DailyForecast] = LookupState(purpose="weather")

    @property
    def current(self) -> Optional[DailyForecast]:
        return self.state.result

    @property
    def error_message(self) -> Optional[str]:
        return self.state.error_message

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    def location_for(self, day: date, trips: Iterable[Trip]) -> Optional[Tuple[str, float, float]]:
        trip = active_trip(trips, day)
        if trip is not None and trip.has_coordinates:
            return trip.location_name or trip.name, trip.latitude, trip.longitude
        if self.config.has_default_coordinates:
            return self.config.default_location_name, self.config.default_latitude, self.config.default_longitude
        return None

    async def refresh(self, target_date: date | datetime, trips: Iterable[Trip]) -> DailyForecast:
        day = as_calendar_day(target_date)
        location = self.location_for(day, list(trips))
        if location is None:
            self.state.reset()
            self.state.error_message = NO_LOCATION_MESSAGE
            log_event(LOGGER, logging.INFO, "weather_skipped", day=day.isoformat())
            return DailyForecast(day=day, error_message=NO_LOCATION_MESSAGE)

        name, latitude, longitude = location

        def fetch() -> DailyForecast:
            report = self.provider.get_forecast(latitude, longitude, day)
            return DailyForecast(day=day, location_name=name, report=report)

        outcome = await run_latest(
            self.state,
            fetch,
            lambda exc: f"Weather unavailable: {exc}",
            expected=(WeatherLookupError,),
        )
        if outcome.result is not None:
            return outcome.result
        return DailyForecast(day=day, location_name=name, error_message=outcome.error_message)


__all__ = ["DailyForecast", "DailyWeather", "NO_LOCATION_MESSAGE"]
