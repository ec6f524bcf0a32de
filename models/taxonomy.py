"""Canonical taxonomy definitions for closet items.

This module centralises the closed sets the rest of the app keys off:
clothing categories, subcategories, foot styles and the avatar hairstyles.
Helper functions keep validation and tag parsing consistent across the
models, the forms and the record store.
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return str(value).strip().lower().replace(" ", "_")


class ClothingCategory(str, Enum):
    ACCESSORIES = "accessories"
    JACKETS = "jackets"
    TOPS = "tops"
    BOTTOMS = "bottoms"
    UNDERGARMENTS = "undergarments"
    OTHER = "other"
    SHOES = "shoes"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class ClothingSubcategory(str, Enum):
    # Accessories
    HATS = "hats"
    JEWELRY = "jewelry"
    BAGS = "bags"
    BELTS = "belts"
    SCARVES = "scarves"
    GLASSES = "glasses"
    GLOVES = "gloves"
    # Bottoms
    PANTS = "pants"
    SHORTS = "shorts"
    SHORT_SKIRTS = "short_skirts"
    LONG_SKIRTS = "long_skirts"
    # Undergarments
    BRAS = "bras"
    UNDERWEAR = "underwear"
    SOCKS = "socks"
    TIGHTS = "tights"
    # Other
    DRESSES = "dresses"
    OVERALLS = "overalls"
    SWIMSUITS = "swimsuits"
    ROBES = "robes"
    PAJAMAS = "pajamas"
    SPORTS = "sports"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class FootStyle(str, Enum):
    FLAT = "flat"
    HEELS = "heels"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def asset_name(self) -> str:
        return f"avatar_feet_{self.value}"


# Layering and closet display order.
CATEGORY_DISPLAY_ORDER: Tuple[ClothingCategory, ...] = (
    ClothingCategory.UNDERGARMENTS,
    ClothingCategory.BOTTOMS,
    ClothingCategory.TOPS,
    ClothingCategory.JACKETS,
    ClothingCategory.ACCESSORIES,
    ClothingCategory.SHOES,
    ClothingCategory.OTHER,
)

# Advisory only: forms suggest these, storage accepts any known subcategory.
SUBCATEGORIES_BY_CATEGORY: Dict[ClothingCategory, List[ClothingSubcategory]] = {
    ClothingCategory.ACCESSORIES: [
        ClothingSubcategory.HATS,
        ClothingSubcategory.JEWELRY,
        ClothingSubcategory.BAGS,
        ClothingSubcategory.BELTS,
        ClothingSubcategory.SCARVES,
        ClothingSubcategory.GLASSES,
        ClothingSubcategory.GLOVES,
    ],
    ClothingCategory.JACKETS: [],
    ClothingCategory.TOPS: [],
    ClothingCategory.BOTTOMS: [
        ClothingSubcategory.PANTS,
        ClothingSubcategory.SHORTS,
        ClothingSubcategory.SHORT_SKIRTS,
        ClothingSubcategory.LONG_SKIRTS,
    ],
    ClothingCategory.UNDERGARMENTS: [
        ClothingSubcategory.BRAS,
        ClothingSubcategory.UNDERWEAR,
        ClothingSubcategory.SOCKS,
        ClothingSubcategory.TIGHTS,
    ],
    ClothingCategory.OTHER: [
        ClothingSubcategory.DRESSES,
        ClothingSubcategory.OVERALLS,
        ClothingSubcategory.SWIMSUITS,
        ClothingSubcategory.ROBES,
        ClothingSubcategory.PAJAMAS,
        ClothingSubcategory.SPORTS,
    ],
    ClothingCategory.SHOES: [],
}

NO_SUBCATEGORY_LABEL = "Other"
AVATAR_BASE_ASSET = "avatar_base"
DEFAULT_HAIRSTYLE = "hair_default"
HAIRSTYLES: List[str] = [
    "hair_default",
    "hair_half_up_half_down",
    "hair_low_pony",
    "hair_high_pony",
    "hair_straight",
    "hair_wavy",
    "hair_two_braids",
]


def validate_category(value: str | ClothingCategory) -> ClothingCategory:
    """Validate and normalise a category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    if isinstance(value, ClothingCategory):
        return value
    key = _normalize_key(value)
    try:
        return ClothingCategory(key)
    except ValueError:
        allowed = sorted(category.value for category in ClothingCategory)
        raise ValueError(f"Unsupported category '{value}'. Allowed: {allowed}") from None


def validate_subcategory(value: str | ClothingSubcategory | None) -> Optional[ClothingSubcategory]:
    """Validate an optional subcategory; blank values mean "no subcategory"."""

    if value is None or isinstance(value, ClothingSubcategory):
        return value
    key = _normalize_key(value)
    if not key or key == "none":
        return None
    try:
        return ClothingSubcategory(key)
    except ValueError:
        allowed = sorted(sub.value for sub in ClothingSubcategory)
        raise ValueError(f"Unsupported subcategory '{value}'. Allowed: {allowed}") from None


def validate_foot_style(value: str | FootStyle) -> FootStyle:
    if isinstance(value, FootStyle):
        return value
    try:
        return FootStyle(_normalize_key(value))
    except ValueError:
        raise ValueError(f"Unsupported foot style '{value}'. Allowed: ['flat', 'heels']") from None


def validate_hairstyle(value: str) -> str:
    if value not in HAIRSTYLES:
        raise ValueError(f"Unknown hairstyle '{value}'. Allowed: {HAIRSTYLES}")
    return value


def subcategory_label(subcategory: Optional[ClothingSubcategory]) -> str:
    return subcategory.display_name if subcategory else NO_SUBCATEGORY_LABEL


def normalise_tags(values: Iterable[str] | None) -> List[str]:
    """Trim free-form tags and drop blanks; order and duplicates are kept."""

    if not values:
        return []
    return [str(value).strip() for value in values if str(value).strip()]


def parse_tags_text(text: str | None) -> List[str]:
    """Parse the comma separated tag field used by the item and outfit forms."""

    if not text:
        return []
    return normalise_tags(text.split(","))


def format_tags_text(tags: Iterable[str]) -> str:
    return ", ".join(tags)


__all__ = [
    "ClothingCategory",
    "ClothingSubcategory",
    "FootStyle",
    "CATEGORY_DISPLAY_ORDER",
    "SUBCATEGORIES_BY_CATEGORY",
    "NO_SUBCATEGORY_LABEL",
    "AVATAR_BASE_ASSET",
    "DEFAULT_HAIRSTYLE",
    "HAIRSTYLES",
    "validate_category",
    "validate_subcategory",
    "validate_foot_style",
    "validate_hairstyle",
    "subcategory_label",
    "normalise_tags",
    "parse_tags_text",
    "format_tags_text",
]
