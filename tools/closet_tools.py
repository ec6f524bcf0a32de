"""Tool wrappers over the record store for the closet, outfits and trips."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from closet_app.logging_config import get_logger, log_event
from logic.trip_planning import search_outfits
from logic.validation import ClothingItemForm, TripForm, first_error_message, validation_failure
from models.clothing_item import ClothingItem
from models.default_catalog import make_default_items
from models.outfit import Outfit
from models.taxonomy import parse_tags_text
from models.trip import Trip
from tools.closet_store import RecordStore, SQLiteRecordStore
from tools.observability import instrument_tool

LOGGER = get_logger(__name__)


def _default_store() -> SQLiteRecordStore:
    return SQLiteRecordStore()


def _needs_review(exc) -> Dict[str, Any]:
    return validation_failure(first_error_message(exc), exc)


def _not_found(kind: str, record_id: str) -> Dict[str, Any]:
    return {"status": "not_found", "message": f"{kind} {record_id} not found"}


def _item_from_form(form: Dict[str, Any], item_id: Optional[str] = None) -> ClothingItem:
    extra = {"item_id": item_id} if item_id else {}
    return ClothingItem(
        name=form["name"],
        category=form["category"],
        subcategory=form["subcategory"],
        image_name=form["image_name"],
        image_name_flat=form["image_name_flat"],
        image_name_heels=form["image_name_heels"],
        tags=parse_tags_text(form["tags_text"]),
        supported_foot_styles=form["supported_foot_styles"],
        **extra,
    )


def _trip_from_form(form: Dict[str, Any], trip_id: Optional[str] = None) -> Trip:
    extra = {"trip_id": trip_id} if trip_id else {}
    return Trip(
        name=form["name"],
        start_date=form["start_date"],
        end_date=form["end_date"],
        location_name=form["location_name"],
        latitude=form["latitude"],
        longitude=form["longitude"],
        **extra,
    )


class ClosetTools:
    """CRUD facade returning plain payloads.

    Form-backed tools take the record id positionally and the form fields as
    keyword arguments; invalid forms come back as a ``needs_review`` payload.
    """

    def __init__(self, store: Optional[RecordStore] = None) -> None:
        self.store = store or _default_store()

    @instrument_tool("seed_default_items")
    def seed_defaults_if_empty(self) -> int:
        """Populate the starter closet the first time the app runs. Returns items added."""

        if self.store.count(ClothingItem):
            return 0
        items = make_default_items()
        for item in items:
            self.store.insert(item)
        log_event(LOGGER, logging.INFO, "closet_seeded", item_count=len(items))
        return len(items)

    @instrument_tool("add_item", input_model=ClothingItemForm, on_validation_error=_needs_review)
    def add_item(self, **form: Any) -> Dict[str, Any]:
        item = self.store.insert(_item_from_form(form))
        return {"status": "ok", "item": asdict(item)}

    @instrument_tool("update_item", input_model=ClothingItemForm, on_validation_error=_needs_review)
    def update_item(self, item_id: str, **form: Any) -> Dict[str, Any]:
        stored = self.store.update(_item_from_form(form, item_id=item_id))
        if stored is None:
            return _not_found("Item", item_id)
        return {"status": "ok", "item": asdict(stored)}

    @instrument_tool("delete_item")
    def delete_item(self, item_id: str) -> Dict[str, Any]:
        """Delete an item and scrub it from every outfit that layers it."""

        if not self.store.delete(ClothingItem, item_id):
            return _not_found("Item", item_id)
        scrubbed = 0
        for outfit in self.store.query(Outfit, lambda o: item_id in o.item_ids):
            outfit.item_ids = [other for other in outfit.item_ids if other != item_id]
            self.store.update(outfit)
            scrubbed += 1
        return {"status": "ok", "deleted": item_id, "scrubbed_outfits": scrubbed}

    def get_item(self, item_id: str) -> Optional[ClothingItem]:
        return self.store.get(ClothingItem, item_id)

    @instrument_tool("list_items")
    def list_items(self) -> List[Dict[str, Any]]:
        return [asdict(item) for item in self.store.query(ClothingItem)]

    @instrument_tool("add_trip", input_model=TripForm, on_validation_error=_needs_review)
    def add_trip(self, **form: Any) -> Dict[str, Any]:
        trip = self.store.insert(_trip_from_form(form))
        return {"status": "ok", "trip": asdict(trip)}

    @instrument_tool("update_trip", input_model=TripForm, on_validation_error=_needs_review)
    def update_trip(self, trip_id: str, **form: Any) -> Dict[str, Any]:
        stored = self.store.update(_trip_from_form(form, trip_id=trip_id))
        if stored is None:
            return _not_found("Trip", trip_id)
        return {"status": "ok", "trip": asdict(stored)}

    @instrument_tool("delete_trip")
    def delete_trip(self, trip_id: str) -> Dict[str, Any]:
        # Outfits keep their trip_id; it resolves to no trip from now on.
        if not self.store.delete(Trip, trip_id):
            return _not_found("Trip", trip_id)
        return {"status": "ok", "deleted": trip_id}

    @instrument_tool("list_trips")
    def list_trips(self) -> List[Dict[str, Any]]:
        return [asdict(trip) for trip in self.store.query(Trip)]

    @instrument_tool("list_outfits")
    def list_outfits(self) -> List[Dict[str, Any]]:
        return [asdict(outfit) for outfit in self.store.query(Outfit)]

    @instrument_tool("search_outfits")
    def search_outfits(self, text: str = "") -> List[Dict[str, Any]]:
        return [asdict(outfit) for outfit in search_outfits(self.store.query(Outfit), text)]

    @instrument_tool("delete_outfit")
    def delete_outfit(self, outfit_id: str) -> Dict[str, Any]:
        if not self.store.delete(Outfit, outfit_id):
            return _not_found("Outfit", outfit_id)
        return {"status": "ok", "deleted": outfit_id}


__all__ = ["ClosetTools"]
