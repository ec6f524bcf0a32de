"""Foot-style compatibility and image asset resolution for clothing items."""

from __future__ import annotations

from typing import Optional

from models.clothing_item import ClothingItem
from models.taxonomy import FootStyle

# Fixed fallback order when no outfit foot style is in play (closet browsing).
_CONTEXT_FREE_ORDER = (FootStyle.FLAT, FootStyle.HEELS)


def is_compatible(item: ClothingItem, foot_style: FootStyle) -> bool:
    """An empty or missing ``supported_foot_styles`` means "no restriction"."""

    if not item.supported_foot_styles:
        return True
    return foot_style in item.supported_foot_styles


def _style_specific_image(item: ClothingItem, foot_style: FootStyle) -> Optional[str]:
    if foot_style is FootStyle.FLAT:
        return item.image_name_flat
    return item.image_name_heels


def resolve_image(item: ClothingItem, foot_style: FootStyle) -> Optional[str]:
    """Pick the asset to draw for ``item`` on an avatar wearing ``foot_style``.

    Compatible items prefer their foot-style-specific asset; everything else
    falls back to the generic ``image_name``.
    """

    if is_compatible(item, foot_style):
        specific = _style_specific_image(item, foot_style)
        if specific:
            return specific
    return item.image_name


def resolve_display_image(item: ClothingItem, foot_style: FootStyle | None = None) -> Optional[str]:
    """Thumbnail asset for ``item``.

    With a foot style this is :func:`resolve_image`. Without one, flat is
    tried, then heels, then the generic asset, so heels-only boots still get
    a thumbnail in the closet.
    """

    if foot_style is not None:
        return resolve_image(item, foot_style)
    for style in _CONTEXT_FREE_ORDER:
        resolved = resolve_image(item, style)
        if resolved:
            return resolved
    return item.image_name


__all__ = ["is_compatible", "resolve_image", "resolve_display_image"]
