"""Starter closet seeded on first launch when the catalog is empty."""

from __future__ import annotations

from typing import List

from models.clothing_item import ClothingItem
from models.taxonomy import ClothingCategory, ClothingSubcategory, FootStyle

BOTH_FEET = [FootStyle.FLAT, FootStyle.HEELS]


def _tights(name: str, asset_prefix: str, tags: List[str]) -> ClothingItem:
    return ClothingItem(
        name=name,
        category=ClothingCategory.UNDERGARMENTS,
        subcategory=ClothingSubcategory.TIGHTS,
        image_name_flat=f"{asset_prefix}_flat",
        image_name_heels=f"{asset_prefix}_heels",
        tags=tags,
        supported_foot_styles=list(BOTH_FEET),
    )


def make_default_items() -> List[ClothingItem]:
    """Return fresh item instances (new ids on every call)."""

    tops = [
        ClothingItem(
            name="Green Sweater",
            category=ClothingCategory.TOPS,
            image_name="green_sweater",
            tags=["turtle neck", "fall", "winter", "green", "polyester"],
        ),
        ClothingItem(
            name="Black Crop Top",
            category=ClothingCategory.TOPS,
            image_name="black_crop",
            tags=["mock turtle neck", "black", "crop top"],
        ),
        ClothingItem(
            name="Gray Crop Tank",
            category=ClothingCategory.TOPS,
            image_name="gray_tank",
            tags=["velvet", "tank top", "crop top", "gray"],
        ),
        ClothingItem(
            name="Green Crop Tank",
            category=ClothingCategory.TOPS,
            image_name="green_tank",
            tags=["velvet", "tank top", "crop top", "green"],
        ),
    ]
    bottoms = [
        ClothingItem(
            name="Jeans",
            category=ClothingCategory.BOTTOMS,
            subcategory=ClothingSubcategory.PANTS,
            image_name="jeans",
            tags=["denim", "light blue", "pacsun", "high waisted"],
        ),
        ClothingItem(
            name="Black Skort",
            category=ClothingCategory.BOTTOMS,
            subcategory=ClothingSubcategory.SHORT_SKIRTS,
            image_name="black_skort",
            tags=["black", "skort", "gold", "mini skirt"],
        ),
        ClothingItem(
            name="Cheetah Skirt",
            category=ClothingCategory.BOTTOMS,
            subcategory=ClothingSubcategory.LONG_SKIRTS,
            image_name="pink_cheetah",
            tags=["pink", "long skirt", "cheetah print", "shimmery"],
        ),
        ClothingItem(
            name="Leopard Skirt",
            category=ClothingCategory.BOTTOMS,
            subcategory=ClothingSubcategory.LONG_SKIRTS,
            image_name="leopard",
            tags=["tan", "black", "long skirt", "leopard print", "slit"],
        ),
    ]
    tights = [
        _tights("Black Sheer Tights", "black_sheer", ["tights", "winter", "fall", "black"]),
        _tights("Polkadot Tights", "polkadot", ["tights", "winter", "fall", "black"]),
        _tights("Maroon Tights", "maroon", ["tights", "winter", "fall", "maroon"]),
        _tights("Navy Plaid Tights", "navy_plaid", ["tights", "winter", "fall", "navy", "plaid"]),
        _tights("Fleece Tights", "fleece", ["tights", "winter", "fall", "peach", "tan", "fleece"]),
    ]
    shoes = [
        ClothingItem(
            name="White Sneakers",
            category=ClothingCategory.SHOES,
            image_name="white_tennis_shoes",
            tags=["casual"],
            supported_foot_styles=[FootStyle.FLAT],
        ),
        ClothingItem(
            name="Tall Black Boots",
            category=ClothingCategory.SHOES,
            image_name="black_boots",
            tags=["black", "leather", "winter", "fall", "knee high", "boots"],
            supported_foot_styles=[FootStyle.HEELS],
        ),
        ClothingItem(
            name="Gray Uggs",
            category=ClothingCategory.SHOES,
            image_name="gray_uggs",
            tags=["gray", "boots", "winter", "fall"],
            supported_foot_styles=[FootStyle.FLAT],
        ),
    ]
    return tops + bottoms + tights + shoes


__all__ = ["make_default_items"]
