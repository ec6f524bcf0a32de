"""Date and trip association: OOTD lookups, active trips, packing lists and search."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Optional, Set

from models.clothing_item import ClothingItem
from models.outfit import Outfit
from models.trip import Trip, as_calendar_day


def active_trip(trips: Iterable[Trip], day: date | datetime) -> Optional[Trip]:
    """First trip, in iteration order, whose inclusive range covers ``day``."""

    target = as_calendar_day(day)
    for trip in trips:
        if trip.contains(target):
            return trip
    return None


def outfits_for_date(outfits: Iterable[Outfit], day: date | datetime) -> List[Outfit]:
    target = as_calendar_day(day)
    return [outfit for outfit in outfits if outfit.date is not None and outfit.date.date() == target]


def trip_outfits(trip: Trip, outfits: Iterable[Outfit]) -> List[Outfit]:
    return [outfit for outfit in outfits if outfit.trip_id == trip.trip_id]


def packing_list(trip: Trip, outfits: Iterable[Outfit]) -> Set[str]:
    """Union of item ids across every outfit attached to ``trip``."""

    ids: Set[str] = set()
    for outfit in trip_outfits(trip, outfits):
        ids.update(outfit.item_ids)
    return ids


def packing_items(trip: Trip, outfits: Iterable[Outfit], items: Iterable[ClothingItem]) -> List[ClothingItem]:
    """Catalog items to pack, in catalog order; dangling ids simply drop out."""

    ids = packing_list(trip, outfits)
    return [item for item in items if item.item_id in ids]


def resolve_trip(outfit: Outfit, trips: Iterable[Trip]) -> Optional[Trip]:
    if not outfit.trip_id:
        return None
    for trip in trips:
        if trip.trip_id == outfit.trip_id:
            return trip
    return None


def search_outfits(outfits: Iterable[Outfit], text: str | None) -> List[Outfit]:
    """Case-insensitive substring match against the title or the space-joined tags."""

    candidates = list(outfits)
    if not text or not text.strip():
        return candidates
    needle = text.strip().lower()
    return [
        outfit
        for outfit in candidates
        if needle in outfit.title.lower() or needle in " ".join(outfit.tags).lower()
    ]


__all__ = [
    "active_trip",
    "outfits_for_date",
    "trip_outfits",
    "packing_list",
    "packing_items",
    "resolve_trip",
    "search_outfits",
]
