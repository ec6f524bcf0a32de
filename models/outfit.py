"""Outfit record: an ordered layering of clothing item ids plus save details."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List, Optional

from models.clothing_item import new_record_id
from models.taxonomy import DEFAULT_HAIRSTYLE, FootStyle, normalise_tags, validate_foot_style

DEFAULT_OUTFIT_TITLE = "Outfit"


def as_datetime(value: date | datetime | str | None) -> Optional[datetime]:
    """Coerce a calendar value to ``datetime``; plain dates land on midnight."""

    if value is None:
        return None
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def default_title_for_date(target: date | datetime) -> str:
    """Title used for an outfit started from a calendar day, e.g. ``Outfit 06/03/25``."""

    return f"{DEFAULT_OUTFIT_TITLE} {target.strftime('%m/%d/%y')}"


@dataclass
class Outfit:
    """Outfits reference items by id; ``item_ids`` order is the layering order."""

    title: str = DEFAULT_OUTFIT_TITLE
    item_ids: List[str] = field(default_factory=list)
    date: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)
    trip_id: Optional[str] = None
    foot_style: FootStyle = FootStyle.FLAT
    hair_asset_name: str = DEFAULT_HAIRSTYLE
    outfit_id: str = field(default_factory=new_record_id)

    def __post_init__(self) -> None:
        self.title = str(self.title or "").strip() or DEFAULT_OUTFIT_TITLE
        self.item_ids = [str(item_id) for item_id in self.item_ids]
        self.date = as_datetime(self.date)
        self.tags = normalise_tags(self.tags)
        self.trip_id = self.trip_id or None
        self.foot_style = validate_foot_style(self.foot_style)
        self.hair_asset_name = self.hair_asset_name or DEFAULT_HAIRSTYLE


__all__ = ["Outfit", "DEFAULT_OUTFIT_TITLE", "as_datetime", "default_title_for_date"]
