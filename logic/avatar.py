"""Avatar layer stack and the layering list shown beside it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping

from logic.compatibility import is_compatible, resolve_image
from models.clothing_item import ClothingItem
from models.outfit import Outfit
from models.taxonomy import AVATAR_BASE_ASSET


@dataclass(frozen=True)
class LayerRow:
    item_id: str
    name: str
    category_label: str


def avatar_layers(outfit: Outfit, items_by_id: Mapping[str, ClothingItem]) -> List[str]:
    """Asset names bottom to top: body, feet, each item in order, then hair."""

    layers = [AVATAR_BASE_ASSET, outfit.foot_style.asset_name]
    for item_id in outfit.item_ids:
        item = items_by_id.get(item_id)
        if item is None or not is_compatible(item, outfit.foot_style):
            continue
        image = resolve_image(item, outfit.foot_style)
        if image:
            layers.append(image)
    layers.append(outfit.hair_asset_name)
    return layers


def layer_rows(outfit: Outfit, items_by_id: Mapping[str, ClothingItem]) -> List[LayerRow]:
    rows = []
    for item_id in outfit.item_ids:
        item = items_by_id.get(item_id)
        if item is None:
            continue
        rows.append(LayerRow(item_id=item_id, name=item.name, category_label=item.category.display_name))
    return rows


__all__ = ["LayerRow", "avatar_layers", "layer_rows"]
