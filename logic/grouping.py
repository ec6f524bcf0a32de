"""Closet presentation grouping: category buckets, then subcategory buckets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from logic.compatibility import is_compatible
from models.clothing_item import ClothingItem
from models.taxonomy import (
    CATEGORY_DISPLAY_ORDER,
    ClothingCategory,
    ClothingSubcategory,
    FootStyle,
    subcategory_label,
)


@dataclass
class SubcategoryGroup:
    subcategory: Optional[ClothingSubcategory]
    label: str
    items: List[ClothingItem] = field(default_factory=list)


@dataclass
class CategoryGroup:
    category: ClothingCategory
    label: str
    subgroups: List[SubcategoryGroup] = field(default_factory=list)

    @property
    def items(self) -> List[ClothingItem]:
        return [item for subgroup in self.subgroups for item in subgroup.items]


def group_by_category_then_subcategory(
    items: Iterable[ClothingItem], foot_style: FootStyle | None = None
) -> List[CategoryGroup]:
    """Bucket items for display.

    Categories follow ``CATEGORY_DISPLAY_ORDER``; subcategory buckets are sorted
    by label, items without a subcategory sorting as "Other". Empty categories
    are omitted. Passing ``foot_style`` keeps only compatible items, which is
    what the dressing room shows.
    """

    by_category: Dict[ClothingCategory, Dict[Optional[ClothingSubcategory], List[ClothingItem]]] = {}
    for item in items:
        if foot_style is not None and not is_compatible(item, foot_style):
            continue
        buckets = by_category.setdefault(item.category, {})
        buckets.setdefault(item.subcategory, []).append(item)

    groups: List[CategoryGroup] = []
    for category in CATEGORY_DISPLAY_ORDER:
        buckets = by_category.get(category)
        if not buckets:
            continue
        subgroups = [
            SubcategoryGroup(subcategory=sub, label=subcategory_label(sub), items=bucket)
            for sub, bucket in buckets.items()
        ]
        subgroups.sort(key=lambda group: group.label)
        groups.append(CategoryGroup(category=category, label=category.display_name, subgroups=subgroups))
    return groups


__all__ = ["CategoryGroup", "SubcategoryGroup", "group_by_category_then_subcategory"]
