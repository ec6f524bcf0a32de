"""MyCloset app bootstrap: wires the store, tools, providers and controllers."""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import asdict
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from closet_app.config import ClosetConfig
from closet_app.logging_config import configure_logging, get_logger, log_event, operation_context
from logic.avatar import avatar_layers, layer_rows
from logic.compatibility import resolve_display_image
from logic.composition import WorkingOutfit
from logic.daily_weather import DailyWeather
from logic.grouping import CategoryGroup, group_by_category_then_subcategory
from logic.location_search import LocationSearch
from logic.thumbnail_layout import THUMBNAIL_FRAME_SIZE, thumbnail_layout
from logic.trip_planning import active_trip, outfits_for_date, packing_items, resolve_trip, trip_outfits
from logic.validation import OutfitSaveForm, first_error_message, validation_failure
from models.clothing_item import ClothingItem
from models.outfit import Outfit
from models.taxonomy import FootStyle, validate_foot_style
from models.trip import Trip, as_calendar_day
from tools.closet_store import RecordStore, SQLiteRecordStore
from tools.closet_tools import ClosetTools
from tools.geocoding_provider import GeocodingProvider, OpenMeteoGeocodingProvider
from tools.weather_provider import OpenMeteoWeatherProvider, WeatherProvider

LOGGER = get_logger(__name__)


class MyClosetApp:
    """Composition root for the closet, the dressing room and trips."""

    def __init__(
        self,
        config: ClosetConfig | None = None,
        *,
        store: RecordStore | None = None,
        weather_provider: WeatherProvider | None = None,
        geocoding_provider: GeocodingProvider | None = None,
    ) -> None:
        self.config = config or ClosetConfig.from_env()
        configure_logging()

        self.store = store or SQLiteRecordStore(self.config.database_path)
        self.tools = ClosetTools(self.store)
        self.weather_provider = weather_provider or OpenMeteoWeatherProvider(
            timeout_seconds=self.config.http_timeout_seconds,
            temperature_unit=self.config.temperature_unit,
        )
        self.geocoding_provider = geocoding_provider or OpenMeteoGeocodingProvider(
            timeout_seconds=self.config.http_timeout_seconds,
            result_limit=self.config.location_result_limit,
        )
        self.daily_weather = DailyWeather(self.weather_provider, self.config)
        self.places = LocationSearch(self.geocoding_provider, result_limit=self.config.location_result_limit)
        self.drafts: "OrderedDict[str, WorkingOutfit]" = OrderedDict()
        self.initialized = False

    def initialize(self) -> int:
        """Run once at startup; seeds the starter closet when enabled and empty."""

        if self.initialized:
            return 0
        seeded = self.tools.seed_defaults_if_empty() if self.config.seed_defaults else 0
        self.initialized = True
        log_event(LOGGER, logging.INFO, "app_initialized", seeded_items=seeded)
        return seeded

    # Closet

    def items(self) -> List[ClothingItem]:
        return self.store.query(ClothingItem)

    def items_by_id(self) -> Dict[str, ClothingItem]:
        return {item.item_id: item for item in self.items()}

    def closet_groups(self, foot_style: FootStyle | str | None = None) -> List[CategoryGroup]:
        style = validate_foot_style(foot_style) if foot_style else None
        return group_by_category_then_subcategory(self.items(), style)

    def thumbnail(self, item_id: str) -> Optional[Dict[str, Any]]:
        item = self.store.get(ClothingItem, item_id)
        if item is None:
            return None
        layout = thumbnail_layout(item.category, item.subcategory)
        return {
            "item_id": item.item_id,
            "image_name": resolve_display_image(item),
            "frame_size": THUMBNAIL_FRAME_SIZE,
            "layout": asdict(layout),
        }

    # Dressing room

    def start_draft(
        self, outfit_id: str | None = None, *, initial_date: date | datetime | None = None
    ) -> Optional[WorkingOutfit]:
        """Open a saved outfit for editing, or start a fresh unsaved draft."""

        if outfit_id:
            draft = WorkingOutfit.load(self.store, outfit_id)
            if draft is None:
                return None
        else:
            draft = WorkingOutfit.new(self.store, initial_date=initial_date)
        self._remember_draft(draft)
        return draft

    def _remember_draft(self, draft: WorkingOutfit) -> None:
        """Keep the most recently used drafts; persisted ones can be reloaded later."""

        self.drafts[draft.outfit_id] = draft
        self.drafts.move_to_end(draft.outfit_id)
        while len(self.drafts) > self.config.max_open_drafts:
            evicted_id, evicted = self.drafts.popitem(last=False)
            log_event(
                LOGGER,
                logging.DEBUG,
                "draft_evicted",
                outfit_id=evicted_id,
                persisted=evicted.persisted,
            )

    def get_draft(self, draft_id: str) -> Optional[WorkingOutfit]:
        draft = self.drafts.get(draft_id)
        if draft is None:
            draft = WorkingOutfit.load(self.store, draft_id)
        if draft is not None:
            self._remember_draft(draft)
        return draft

    def save_draft(self, draft: WorkingOutfit, **form: Any) -> Dict[str, Any]:
        with operation_context("app:save_outfit"):
            try:
                validated = OutfitSaveForm.model_validate({**form, "item_count": len(draft.outfit.item_ids)})
            except ValidationError as exc:
                log_event(LOGGER, logging.WARNING, "outfit_save_invalid", outfit_id=draft.outfit_id)
                return validation_failure(first_error_message(exc), exc)
            touched = validated.model_fields_set - {"item_count"}
            outfit = draft.save(**{field: getattr(validated, field) for field in touched})
            self.drafts.pop(draft.outfit_id, None)
            return {"status": "ok", "outfit": self.outfit_view(outfit)}

    def outfit_view(self, outfit: Outfit, items_by_id: Dict[str, ClothingItem] | None = None) -> Dict[str, Any]:
        lookup = items_by_id if items_by_id is not None else self.items_by_id()
        trip = resolve_trip(outfit, self.store.query(Trip))
        return {
            **asdict(outfit),
            "layers": avatar_layers(outfit, lookup),
            "layer_rows": [asdict(row) for row in layer_rows(outfit, lookup)],
            "trip_name": trip.name if trip else None,
        }

    # Calendar and trips

    async def ootd(self, day: date | datetime) -> Dict[str, Any]:
        """Outfits planned for ``day`` plus the weather where the user will be."""

        target = as_calendar_day(day)
        trips = self.store.query(Trip)
        lookup = self.items_by_id()
        outfits = outfits_for_date(self.store.query(Outfit), target)
        trip = active_trip(trips, target)
        forecast = await self.daily_weather.refresh(target, trips)
        return {
            "date": target.isoformat(),
            "outfits": [self.outfit_view(outfit, lookup) for outfit in outfits],
            "trip": asdict(trip) if trip else None,
            "location_name": forecast.location_name,
            "weather": forecast.summary,
            "weather_error": forecast.error_message,
        }

    def trip_detail(self, trip_id: str) -> Optional[Dict[str, Any]]:
        trip = self.store.get(Trip, trip_id)
        if trip is None:
            return None
        outfits = self.store.query(Outfit)
        lookup = self.items_by_id()
        return {
            "trip": asdict(trip),
            "outfits": [self.outfit_view(outfit, lookup) for outfit in trip_outfits(trip, outfits)],
            "packing_list": [asdict(item) for item in packing_items(trip, outfits, lookup.values())],
        }


__all__ = ["MyClosetApp"]
