"""Pydantic schemas for the add/edit forms and their inline error payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from models.taxonomy import (
    ClothingCategory,
    ClothingSubcategory,
    FootStyle,
    parse_tags_text,
)


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


class ClothingItemForm(BaseModel):
    """Add-item / edit-item form."""

    name: str = Field(min_length=1)
    category: ClothingCategory = ClothingCategory.TOPS
    subcategory: Optional[ClothingSubcategory] = None
    image_name: Optional[str] = None
    image_name_flat: Optional[str] = None
    image_name_heels: Optional[str] = None
    tags_text: str = ""
    supported_foot_styles: Optional[List[FootStyle]] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("subcategory", "image_name", "image_name_flat", "image_name_heels", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        value = _strip(value)
        if value in ("", "none"):
            return None
        return value

    @property
    def tags(self) -> List[str]:
        return parse_tags_text(self.tags_text)


class OutfitSaveForm(BaseModel):
    """Save-outfit sheet. A blank title is accepted and later becomes "Outfit".

    Only the fields the caller sent are applied; the rest keep their value.
    """

    title: Optional[str] = ""
    tags_text: Optional[str] = ""
    date: Optional[datetime] = None
    trip_id: Optional[str] = None
    item_count: int = Field(description="Layers in the outfit; saving needs at least one")

    @field_validator("date", mode="before")
    @classmethod
    def _date_only(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(value, str) and len(value.strip()) == 10:
            value = date.fromisoformat(value.strip())
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, datetime.min.time())
        return value

    @field_validator("trip_id", mode="before")
    @classmethod
    def _blank_trip(cls, value: Any) -> Any:
        return _strip(value) or None

    @field_validator("item_count")
    @classmethod
    def _has_items(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Add at least one item before saving the outfit.")
        return value


class TripForm(BaseModel):
    """Add/edit trip form. A location must come from a resolved place suggestion."""

    name: str = Field(min_length=1)
    start_date: date
    end_date: date
    location_name: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("name", "location_name", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _calendar_day(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        return value

    @model_validator(mode="after")
    def _validate_trip(self) -> "TripForm":
        if self.latitude is None or self.longitude is None:
            raise ValueError("Please pick a real place from the suggestions.")
        if not self.location_name:
            raise ValueError("Please enter a city.")
        if self.end_date < self.start_date:
            raise ValueError("End date cannot precede start date.")
        return self


class ValidationResult(BaseModel):
    """Returned to the caller when a form fails validation."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def _error_details(exc: ValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


def first_error_message(exc: ValidationError) -> str:
    """Message of the first error without pydantic's "Value error, " prefix."""

    errors = exc.errors()
    if not errors:
        return "Please review the highlighted fields."
    message = str(errors[0].get("msg", ""))
    prefix = "Value error, "
    return message[len(prefix):] if message.startswith(prefix) else message


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent, re-presentable payload."""

    return ValidationResult(message=message, details=_error_details(exc)).model_dump()


__all__ = [
    "ClothingItemForm",
    "OutfitSaveForm",
    "TripForm",
    "ValidationResult",
    "first_error_message",
    "validation_failure",
]
