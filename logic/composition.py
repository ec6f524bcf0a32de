"""Outfit composition: the layering list and its foot-style rule.

The module-level functions are pure state transitions on an :class:`Outfit`.
:class:`WorkingOutfit` binds a draft to the record store and is the only
place persistence happens: a brand-new draft is inserted the first time it
holds an item, and every later change is written straight through.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Iterable, Mapping, Optional

from closet_app.logging_config import get_logger, log_event
from logic.compatibility import is_compatible
from models.clothing_item import ClothingItem
from models.outfit import DEFAULT_OUTFIT_TITLE, Outfit, default_title_for_date
from models.taxonomy import FootStyle, parse_tags_text, validate_foot_style, validate_hairstyle
from tools.closet_store import RecordStore

LOGGER = get_logger(__name__)

ItemLookup = Callable[[str], Optional[ClothingItem]]

# Marks a save-sheet field the caller did not touch.
UNSET: Any = object()


def toggle_item(outfit: Outfit, item_id: str) -> Outfit:
    """Remove the first occurrence of ``item_id`` or append it to the top layer."""

    if item_id in outfit.item_ids:
        outfit.item_ids.remove(item_id)
    else:
        outfit.item_ids.append(item_id)
    return outfit


def move_item(outfit: Outfit, from_index: int, to_index: int) -> Outfit:
    """Stable move: the other items keep their relative order."""

    ids = outfit.item_ids
    if not 0 <= from_index < len(ids):
        raise IndexError(f"from_index {from_index} out of range for {len(ids)} layers")
    moved = ids.pop(from_index)
    ids.insert(max(0, min(to_index, len(ids))), moved)
    return outfit


def remove_items(outfit: Outfit, indices: Iterable[int]) -> Outfit:
    """Drop several layers at once; indices refer to the list before removal."""

    doomed = set(indices)
    size = len(outfit.item_ids)
    invalid = sorted(index for index in doomed if not 0 <= index < size)
    if invalid:
        raise IndexError(f"indices {invalid} out of range for {size} layers")
    outfit.item_ids = [item_id for index, item_id in enumerate(outfit.item_ids) if index not in doomed]
    return outfit


def _as_lookup(items: Mapping[str, ClothingItem] | ItemLookup) -> ItemLookup:
    if callable(items):
        return items
    return items.get


def change_foot_style(
    outfit: Outfit, new_style: FootStyle | str, items: Mapping[str, ClothingItem] | ItemLookup
) -> Outfit:
    """Switch feet and evict every layer the new style cannot wear.

    Setting the current style again changes nothing. Ids with no matching
    catalog item are left alone; they are treated as missing, not incompatible.
    """

    style = validate_foot_style(new_style)
    if style is outfit.foot_style:
        return outfit
    lookup = _as_lookup(items)
    outfit.foot_style = style
    kept = []
    evicted = []
    for item_id in outfit.item_ids:
        item = lookup(item_id)
        if item is not None and not is_compatible(item, style):
            evicted.append(item_id)
        else:
            kept.append(item_id)
    outfit.item_ids = kept
    if evicted:
        log_event(
            LOGGER,
            logging.INFO,
            "outfit_layers_evicted",
            outfit_id=outfit.outfit_id,
            foot_style=style.value,
            evicted_count=len(evicted),
        )
    return outfit


class WorkingOutfit:
    """An outfit being edited in the dressing room."""

    def __init__(self, outfit: Outfit, store: RecordStore, *, persisted: bool) -> None:
        self.outfit = outfit
        self.store = store
        self.persisted = persisted

    @classmethod
    def new(
        cls,
        store: RecordStore,
        *,
        initial_date: date | datetime | None = None,
        initial_title: str | None = None,
    ) -> "WorkingOutfit":
        title = initial_title
        if title is None:
            title = default_title_for_date(initial_date) if initial_date else DEFAULT_OUTFIT_TITLE
        return cls(Outfit(title=title, date=initial_date), store, persisted=False)

    @classmethod
    def load(cls, store: RecordStore, outfit_id: str) -> Optional["WorkingOutfit"]:
        outfit = store.get(Outfit, outfit_id)
        if outfit is None:
            return None
        return cls(outfit, store, persisted=True)

    @property
    def outfit_id(self) -> str:
        return self.outfit.outfit_id

    def _lookup(self, item_id: str) -> Optional[ClothingItem]:
        return self.store.get(ClothingItem, item_id)

    def commit(self) -> bool:
        """Insert a new draft the first time it has items. Returns True only on that insert."""

        if self.persisted or not self.outfit.item_ids:
            return False
        self.store.insert(self.outfit)
        self.persisted = True
        log_event(
            LOGGER,
            logging.INFO,
            "outfit_committed",
            outfit_id=self.outfit.outfit_id,
            layer_count=len(self.outfit.item_ids),
        )
        return True

    def sync(self) -> None:
        """Run after every mutation: lazy first insert, otherwise write through."""

        if self.commit():
            return
        if self.persisted:
            self.store.update(self.outfit)

    def toggle_item(self, item_id: str) -> Outfit:
        toggle_item(self.outfit, item_id)
        self.sync()
        return self.outfit

    def move_item(self, from_index: int, to_index: int) -> Outfit:
        move_item(self.outfit, from_index, to_index)
        self.sync()
        return self.outfit

    def remove_items(self, indices: Iterable[int]) -> Outfit:
        remove_items(self.outfit, indices)
        self.sync()
        return self.outfit

    def change_foot_style(self, new_style: FootStyle | str) -> Outfit:
        change_foot_style(self.outfit, new_style, self._lookup)
        self.sync()
        return self.outfit

    def set_hairstyle(self, hair_asset_name: str) -> Outfit:
        self.outfit.hair_asset_name = validate_hairstyle(hair_asset_name)
        self.sync()
        return self.outfit

    def save(
        self,
        *,
        title: Any = UNSET,
        tags_text: Any = UNSET,
        date: Any = UNSET,
        trip_id: Any = UNSET,
    ) -> Outfit:
        """Apply the save-sheet details. An outfit with no layers cannot be saved.

        Fields left as ``UNSET`` keep their current value; ``None`` or blank
        clears them, and a cleared title falls back to "Outfit".
        """

        if not self.outfit.item_ids:
            raise ValueError("Add at least one item before saving the outfit")
        current = self.outfit
        self.outfit = Outfit(
            outfit_id=current.outfit_id,
            title=current.title if title is UNSET else (title or "").strip() or DEFAULT_OUTFIT_TITLE,
            item_ids=current.item_ids,
            date=current.date if date is UNSET else date,
            tags=list(current.tags) if tags_text is UNSET else parse_tags_text(tags_text),
            trip_id=current.trip_id if trip_id is UNSET else trip_id,
            foot_style=self.outfit.foot_style,
            hair_asset_name=self.outfit.hair_asset_name,
        )
        self.sync()
        return self.outfit


__all__ = [
    "toggle_item",
    "move_item",
    "remove_items",
    "change_foot_style",
    "WorkingOutfit",
    "UNSET",
]
