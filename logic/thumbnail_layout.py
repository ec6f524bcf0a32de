"""How a clothing image is zoomed and offset inside the square closet thumbnail."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from models.taxonomy import ClothingCategory, ClothingSubcategory

THUMBNAIL_FRAME_SIZE = 80


@dataclass(frozen=True)
class ThumbnailLayout:
    content_width: float
    content_height: float
    vertical_offset: float


DEFAULT_LAYOUT = ThumbnailLayout(content_width=80, content_height=80, vertical_offset=0)

# Applies to every subcategory of the category.
_CATEGORY_LAYOUTS: Dict[ClothingCategory, ThumbnailLayout] = {
    ClothingCategory.TOPS: ThumbnailLayout(130, 230, 35),
    ClothingCategory.JACKETS: ThumbnailLayout(100, 200, 30),
    ClothingCategory.SHOES: ThumbnailLayout(200, 200, -55),
    ClothingCategory.ACCESSORIES: ThumbnailLayout(140, 200, 30),
    ClothingCategory.OTHER: ThumbnailLayout(150, 260, 60),
}

# Subcategory-aware entries; unmapped pairs in these categories use DEFAULT_LAYOUT.
_SUBCATEGORY_LAYOUTS: Dict[Tuple[ClothingCategory, ClothingSubcategory], ThumbnailLayout] = {
    (ClothingCategory.BOTTOMS, ClothingSubcategory.PANTS): ThumbnailLayout(70, 170, -15),
    (ClothingCategory.BOTTOMS, ClothingSubcategory.SHORTS): ThumbnailLayout(140, 240, 10),
    (ClothingCategory.BOTTOMS, ClothingSubcategory.LONG_SKIRTS): ThumbnailLayout(70, 170, -15),
    (ClothingCategory.BOTTOMS, ClothingSubcategory.SHORT_SKIRTS): ThumbnailLayout(140, 240, 10),
    (ClothingCategory.UNDERGARMENTS, ClothingSubcategory.TIGHTS): ThumbnailLayout(60, 160, -20),
    (ClothingCategory.UNDERGARMENTS, ClothingSubcategory.SOCKS): ThumbnailLayout(140, 240, -80),
}


def thumbnail_layout(
    category: ClothingCategory, subcategory: Optional[ClothingSubcategory] = None
) -> ThumbnailLayout:
    if subcategory is not None:
        layout = _SUBCATEGORY_LAYOUTS.get((category, subcategory))
        if layout:
            return layout
    return _CATEGORY_LAYOUTS.get(category, DEFAULT_LAYOUT)


__all__ = ["ThumbnailLayout", "DEFAULT_LAYOUT", "THUMBNAIL_FRAME_SIZE", "thumbnail_layout"]
