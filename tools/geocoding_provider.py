"""Place search for the trip form: completions while typing, then coordinates."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Optional

import requests
from pydantic import BaseModel, ValidationError

LOGGER = logging.getLogger(__name__)
SEARCH_URL = "https://geocoding-api.open-meteo.com/v1/search"
LOOKUP_URL = "https://geocoding-api.open-meteo.com/v1/get"


class GeocodingError(RuntimeError):
    """Raised when a search or a place resolution fails."""


@dataclass(frozen=True)
class PlaceSuggestion:
    title: str
    subtitle: str = ""
    place_id: Optional[str] = None


@dataclass(frozen=True)
class ResolvedPlace:
    display_name: str
    latitude: float
    longitude: float


class _Place(BaseModel):
    id: int
    name: str
    latitude: float
    longitude: float
    admin1: Optional[str] = None
    country: Optional[str] = None


class _SearchResponse(BaseModel):
    results: List[_Place] = []


def place_display_name(city: str, region: Optional[str]) -> str:
    """"City, Region" or just the city when no region is known."""

    city = (city or "").strip()
    region = (region or "").strip()
    return f"{city}, {region}" if region else city


class GeocodingProvider(ABC):
    @abstractmethod
    def search(self, query: str) -> Iterator[PlaceSuggestion]:
        """Lazily yield completion candidates for a partial query."""

    @abstractmethod
    def resolve(self, suggestion: PlaceSuggestion) -> ResolvedPlace:
        """Turn a chosen suggestion into a display name and coordinates."""


class OpenMeteoGeocodingProvider(GeocodingProvider):
    """Open-Meteo geocoding API."""

    def __init__(self, timeout_seconds: float = 5.0, result_limit: int = 8, language: str = "en") -> None:
        self.timeout_seconds = timeout_seconds
        self.result_limit = result_limit
        self.language = language

    def _get(self, url: str, params: dict) -> dict:
        try:
            response = requests.get(url, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            return response.json()
        except requests.Timeout as exc:
            LOGGER.error("Geocoding request timed out")
            raise GeocodingError("Location service timed out") from exc
        except requests.RequestException as exc:
            LOGGER.error("Geocoding API unreachable", exc_info=exc)
            raise GeocodingError(f"Location service unavailable: {exc}") from exc
        except ValueError as exc:
            raise GeocodingError("Location service returned an unexpected response") from exc

    def search(self, query: str) -> Iterator[PlaceSuggestion]:
        text = (query or "").strip()
        if not text:
            return
        payload = self._get(
            SEARCH_URL,
            {"name": text, "count": self.result_limit, "language": self.language, "format": "json"},
        )
        try:
            parsed = _SearchResponse.model_validate(payload)
        except ValidationError as exc:
            LOGGER.error("Geocoding payload schema validation failed", exc_info=exc)
            raise GeocodingError("Location service returned an unexpected response") from exc
        for place in parsed.results:
            subtitle = ", ".join(part for part in (place.admin1, place.country) if part)
            yield PlaceSuggestion(title=place.name, subtitle=subtitle, place_id=str(place.id))

    def resolve(self, suggestion: PlaceSuggestion) -> ResolvedPlace:
        if not suggestion.place_id:
            raise GeocodingError("Couldn't resolve that place.")
        payload = self._get(LOOKUP_URL, {"id": suggestion.place_id, "language": self.language})
        try:
            place = _Place.model_validate(payload)
        except ValidationError as exc:
            raise GeocodingError("Couldn't resolve that place.") from exc
        return ResolvedPlace(
            display_name=place_display_name(place.name, place.admin1 or place.country),
            latitude=place.latitude,
            longitude=place.longitude,
        )


class MockGeocodingProvider(GeocodingProvider):
    """Offline provider backed by a fixed list of places."""

    def __init__(self, places: List[ResolvedPlace] | None = None, error: Exception | None = None) -> None:
        self.places = places or []
        self.error = error

    def search(self, query: str) -> Iterator[PlaceSuggestion]:
        if self.error is not None:
            raise self.error
        needle = (query or "").strip().lower()
        if not needle:
            return
        for place in self.places:
            city, _, region = place.display_name.partition(", ")
            if needle in place.display_name.lower():
                yield PlaceSuggestion(title=city, subtitle=region, place_id=place.display_name)

    def resolve(self, suggestion: PlaceSuggestion) -> ResolvedPlace:
        if self.error is not None:
            raise self.error
        for place in self.places:
            if place.display_name == suggestion.place_id:
                return place
        raise GeocodingError("Couldn't resolve that place.")


__all__ = [
    "GeocodingError",
    "GeocodingProvider",
    "MockGeocodingProvider",
    "OpenMeteoGeocodingProvider",
    "PlaceSuggestion",
    "ResolvedPlace",
    "place_display_name",
]
