"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.clothing_item import ClothingItem, from_raw_metadata
from models.outfit import Outfit
from models.trip import Trip

__all__ = ["ClothingItem", "Outfit", "Trip", "from_raw_metadata"]
