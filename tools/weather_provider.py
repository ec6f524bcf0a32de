"""Weather provider abstractions and implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

import requests
from pydantic import BaseModel, ValidationError

LOGGER = logging.getLogger(__name__)
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"


class WeatherLookupError(RuntimeError):
    """Raised when a forecast cannot be produced for the requested day."""


class _Daily(BaseModel):
    time: List[str] = []
    temperature_2m_max: List[Optional[float]] = []
    temperature_2m_min: List[Optional[float]] = []
    weathercode: List[Optional[int]] = []


class _ForecastResponse(BaseModel):
    daily: _Daily


@dataclass(frozen=True)
class WeatherReport:
    """The only forecast shape the app consumes."""

    high_temp: float
    low_temp: float
    condition_symbol: str


def symbol_for_weather_code(code: Optional[int]) -> str:
    """Map a WMO weather interpretation code onto a condition symbol name."""

    if code is None:
        return "thermometer"
    if code == 0:
        return "sun.max"
    if code in (1, 2):
        return "cloud.sun"
    if code == 3:
        return "cloud"
    if code in (45, 48):
        return "cloud.fog"
    if 51 <= code <= 57:
        return "cloud.drizzle"
    if 61 <= code <= 67 or 80 <= code <= 82:
        return "cloud.rain"
    if 71 <= code <= 77 or code in (85, 86):
        return "cloud.snow"
    if 95 <= code <= 99:
        return "cloud.bolt"
    return "thermometer"


class WeatherProvider(ABC):
    """Abstract weather provider interface."""

    @abstractmethod
    def get_forecast(self, latitude: float, longitude: float, date: date) -> WeatherReport:
        """Return the forecast for one calendar day or raise :class:`WeatherLookupError`."""


class OpenMeteoWeatherProvider(WeatherProvider):
    """Open-Meteo daily forecast with schema validation."""

    def __init__(self, timeout_seconds: float = 5.0, temperature_unit: str = "fahrenheit") -> None:
        self.timeout_seconds = timeout_seconds
        self.temperature_unit = temperature_unit

    def get_forecast(self, latitude: float, longitude: float, date: date) -> WeatherReport:
        LOGGER.info("Fetching weather forecast", extra={"date": date.isoformat()})
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "daily": "temperature_2m_max,temperature_2m_min,weathercode",
            "temperature_unit": self.temperature_unit,
            "timezone": "auto",
            "start_date": date.isoformat(),
            "end_date": date.isoformat(),
        }

        try:
            response = requests.get(FORECAST_URL, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            parsed = _ForecastResponse.model_validate(response.json())
        except requests.Timeout as exc:
            LOGGER.error("Weather API timed out")
            raise WeatherLookupError("Weather service timed out") from exc
        except requests.RequestException as exc:
            LOGGER.error("Weather API unreachable", exc_info=exc)
            raise WeatherLookupError(f"Weather service unavailable: {exc}") from exc
        except (ValidationError, ValueError) as exc:
            LOGGER.error("Weather payload schema validation failed", exc_info=exc)
            raise WeatherLookupError("Weather service returned an unexpected response") from exc

        daily = parsed.daily
        try:
            index = daily.time.index(date.isoformat())
            high = daily.temperature_2m_max[index]
            low = daily.temperature_2m_min[index]
            code = daily.weathercode[index] if index < len(daily.weathercode) else None
        except (ValueError, IndexError):
            raise WeatherLookupError(f"No forecast available for {date.isoformat()}") from None
        if high is None or low is None:
            raise WeatherLookupError(f"No forecast available for {date.isoformat()}")
        return WeatherReport(high_temp=high, low_temp=low, condition_symbol=symbol_for_weather_code(code))


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests and local runs."""

    def __init__(self, report: WeatherReport | None = None, error: Exception | None = None) -> None:
        self.report = report or WeatherReport(high_temp=72.0, low_temp=60.0, condition_symbol="sun.max")
        self.error = error
        self.calls: List[tuple] = []

    def get_forecast(self, latitude: float, longitude: float, date: date) -> WeatherReport:
        self.calls.append((latitude, longitude, date))
        if self.error is not None:
            raise self.error
        return self.report


__all__ = [
    "WeatherReport",
    "WeatherProvider",
    "WeatherLookupError",
    "OpenMeteoWeatherProvider",
    "MockWeatherProvider",
    "symbol_for_weather_code",
]
