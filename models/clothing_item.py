"""Clothing item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import uuid4

from models.taxonomy import (
    ClothingCategory,
    ClothingSubcategory,
    FootStyle,
    normalise_tags,
    validate_category,
    validate_foot_style,
    validate_subcategory,
)


def new_record_id() -> str:
    return str(uuid4())


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class ClothingItem:
    """Represents one item in the user's closet.

    ``supported_foot_styles`` of ``None`` or ``[]`` means the item places no
    restriction on the outfit's feet (tops, accessories and most bottoms).
    """

    name: str
    category: ClothingCategory
    subcategory: Optional[ClothingSubcategory] = None
    image_name: Optional[str] = None
    image_name_flat: Optional[str] = None
    image_name_heels: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    supported_foot_styles: Optional[List[FootStyle]] = None
    item_id: str = field(default_factory=new_record_id)

    def __post_init__(self) -> None:
        self.name = str(self.name or "").strip()
        if not self.name:
            raise ValueError("ClothingItem name cannot be blank")
        self.category = validate_category(self.category)
        self.subcategory = validate_subcategory(self.subcategory)
        self.image_name = _blank_to_none(self.image_name)
        self.image_name_flat = _blank_to_none(self.image_name_flat)
        self.image_name_heels = _blank_to_none(self.image_name_heels)
        self.tags = normalise_tags(self.tags)
        if self.supported_foot_styles is not None:
            self.supported_foot_styles = [validate_foot_style(style) for style in self.supported_foot_styles]


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from loose form or API data."""

    required_fields = ["name", "category"]
    missing = [key for key in required_fields if not metadata.get(key)]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")

    extra = {"item_id": str(metadata["item_id"])} if metadata.get("item_id") else {}
    return ClothingItem(
        name=str(metadata["name"]),
        category=metadata["category"],
        subcategory=metadata.get("subcategory"),
        image_name=metadata.get("image_name"),
        image_name_flat=metadata.get("image_name_flat"),
        image_name_heels=metadata.get("image_name_heels"),
        tags=list(metadata.get("tags") or []),
        supported_foot_styles=metadata.get("supported_foot_styles"),
        **extra,
    )


__all__ = ["ClothingItem", "from_raw_metadata", "new_record_id"]
