"""FastAPI server exposing the closet, dressing room, calendar and trips."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from closet_app.app import MyClosetApp
from closet_app.logging_config import configure_logging
from logic.composition import WorkingOutfit
from models.clothing_item import ClothingItem
from models.outfit import Outfit
from models.taxonomy import format_tags_text
from tools.geocoding_provider import PlaceSuggestion


class DraftRequest(BaseModel):
    """Start a new draft, or reopen a saved outfit when ``outfit_id`` is set."""

    outfit_id: Optional[str] = None
    initial_date: Optional[date] = None


class ToggleRequest(BaseModel):
    item_id: str


class MoveRequest(BaseModel):
    from_index: int
    to_index: int


class RemoveRequest(BaseModel):
    indices: List[int] = Field(default_factory=list)


class FootStyleRequest(BaseModel):
    foot_style: str


class HairstyleRequest(BaseModel):
    hair_asset_name: str


class SuggestionRequest(BaseModel):
    title: str
    subtitle: str = ""
    place_id: Optional[str] = None


def _review(result: Any) -> Any:
    """Map tool payloads onto HTTP: 422 for forms that need review, 404 for misses."""

    if isinstance(result, dict):
        if result.get("status") == "needs_review":
            return JSONResponse(status_code=422, content=result)
        if result.get("status") == "not_found":
            raise HTTPException(status_code=404, detail=result.get("message"))
    return result


def _rejected(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"status": "needs_review", "message": str(exc), "details": []},
    )


def _item_form(item: ClothingItem) -> Dict[str, Any]:
    return {
        "name": item.name,
        "category": item.category.value,
        "subcategory": item.subcategory.value if item.subcategory else None,
        "image_name": item.image_name,
        "image_name_flat": item.image_name_flat,
        "image_name_heels": item.image_name_heels,
        "tags_text": format_tags_text(item.tags),
        "supported_foot_styles": [style.value for style in item.supported_foot_styles]
        if item.supported_foot_styles is not None
        else None,
    }


def create_app(closet: MyClosetApp | None = None) -> FastAPI:
    """Build the HTTP app around a closet; the closet is initialised here once."""

    configure_logging()
    closet = closet or MyClosetApp()
    closet.initialize()
    app = FastAPI(title="MyCloset", version="0.1.0")
    app.state.closet = closet

    def draft_or_404(draft_id: str) -> WorkingOutfit:
        draft = closet.get_draft(draft_id)
        if draft is None:
            raise HTTPException(status_code=404, detail=f"Outfit {draft_id} not found")
        return draft

    def draft_view(draft: WorkingOutfit) -> dict:
        return {"persisted": draft.persisted, "outfit": closet.outfit_view(draft.outfit)}

    @app.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "mycloset",
            "environment": closet.config.environment or "local",
        }

    # Closet

    @app.get("/items")
    async def list_items() -> list:
        return closet.tools.list_items()

    @app.post("/items", status_code=201)
    async def add_item(payload: Dict[str, Any] = Body(...)) -> Any:
        return _review(closet.tools.add_item(**payload))

    @app.get("/items/grouped")
    async def grouped_items(foot_style: Optional[str] = None) -> list:
        try:
            groups = closet.closet_groups(foot_style)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return [
            {
                "category": group.category.value,
                "label": group.label,
                "subgroups": [
                    {
                        "subcategory": sub.subcategory.value if sub.subcategory else None,
                        "label": sub.label,
                        "items": [asdict(item) for item in sub.items],
                    }
                    for sub in group.subgroups
                ],
            }
            for group in groups
        ]

    @app.patch("/items/{item_id}")
    async def update_item(item_id: str, payload: Dict[str, Any] = Body(...)) -> Any:
        existing = closet.tools.get_item(item_id)
        if existing is None:
            raise HTTPException(status_code=404, detail=f"Item {item_id} not found")
        return _review(closet.tools.update_item(item_id, **{**_item_form(existing), **payload}))

    @app.delete("/items/{item_id}")
    async def delete_item(item_id: str) -> Any:
        return _review(closet.tools.delete_item(item_id))

    @app.get("/items/{item_id}/thumbnail")
    async def item_thumbnail(item_id: str) -> dict:
        thumbnail = closet.thumbnail(item_id)
        if thumbnail is None:
            raise HTTPException(status_code=404, detail=f"Item {item_id} not found")
        return thumbnail

    # Outfits

    @app.get("/outfits")
    async def list_outfits(q: str = "") -> list:
        return closet.tools.search_outfits(text=q)

    @app.post("/outfits/drafts", status_code=201)
    async def start_draft(request: DraftRequest) -> dict:
        draft = closet.start_draft(request.outfit_id, initial_date=request.initial_date)
        if draft is None:
            raise HTTPException(status_code=404, detail=f"Outfit {request.outfit_id} not found")
        return draft_view(draft)

    @app.post("/outfits/drafts/{draft_id}/toggle")
    async def toggle_layer(draft_id: str, request: ToggleRequest) -> dict:
        draft = draft_or_404(draft_id)
        draft.toggle_item(request.item_id)
        return draft_view(draft)

    @app.post("/outfits/drafts/{draft_id}/move")
    async def move_layer(draft_id: str, request: MoveRequest) -> Any:
        draft = draft_or_404(draft_id)
        try:
            draft.move_item(request.from_index, request.to_index)
        except IndexError as exc:
            return _rejected(exc)
        return draft_view(draft)

    @app.post("/outfits/drafts/{draft_id}/remove")
    async def remove_layers(draft_id: str, request: RemoveRequest) -> Any:
        draft = draft_or_404(draft_id)
        try:
            draft.remove_items(request.indices)
        except IndexError as exc:
            return _rejected(exc)
        return draft_view(draft)

    @app.post("/outfits/drafts/{draft_id}/foot-style")
    async def change_foot_style(draft_id: str, request: FootStyleRequest) -> Any:
        draft = draft_or_404(draft_id)
        try:
            draft.change_foot_style(request.foot_style)
        except ValueError as exc:
            return _rejected(exc)
        return draft_view(draft)

    @app.post("/outfits/drafts/{draft_id}/hairstyle")
    async def set_hairstyle(draft_id: str, request: HairstyleRequest) -> Any:
        draft = draft_or_404(draft_id)
        try:
            draft.set_hairstyle(request.hair_asset_name)
        except ValueError as exc:
            return _rejected(exc)
        return draft_view(draft)

    @app.post("/outfits/drafts/{draft_id}/save")
    async def save_draft(draft_id: str, payload: Optional[Dict[str, Any]] = Body(default=None)) -> Any:
        return _review(closet.save_draft(draft_or_404(draft_id), **(payload or {})))

    @app.get("/outfits/{outfit_id}/avatar")
    async def outfit_avatar(outfit_id: str) -> dict:
        outfit = closet.store.get(Outfit, outfit_id)
        if outfit is None:
            raise HTTPException(status_code=404, detail=f"Outfit {outfit_id} not found")
        return closet.outfit_view(outfit)

    @app.delete("/outfits/{outfit_id}")
    async def delete_outfit(outfit_id: str) -> Any:
        closet.drafts.pop(outfit_id, None)
        return _review(closet.tools.delete_outfit(outfit_id))

    # Calendar

    @app.get("/ootd/{day}")
    async def outfit_of_the_day(day: date) -> dict:
        return await closet.ootd(day)

    # Trips

    @app.get("/trips")
    async def list_trips() -> list:
        return closet.tools.list_trips()

    @app.post("/trips", status_code=201)
    async def add_trip(payload: Dict[str, Any] = Body(...)) -> Any:
        return _review(closet.tools.add_trip(**payload))

    @app.get("/trips/{trip_id}")
    async def trip_detail(trip_id: str) -> dict:
        detail = closet.trip_detail(trip_id)
        if detail is None:
            raise HTTPException(status_code=404, detail=f"Trip {trip_id} not found")
        return detail

    @app.put("/trips/{trip_id}")
    async def update_trip(trip_id: str, payload: Dict[str, Any] = Body(...)) -> Any:
        return _review(closet.tools.update_trip(trip_id, **payload))

    @app.delete("/trips/{trip_id}")
    async def delete_trip(trip_id: str) -> Any:
        return _review(closet.tools.delete_trip(trip_id))

    # Places

    @app.get("/places/search")
    async def search_places(q: str = "") -> dict:
        outcome = await closet.places.update_query(q)
        return {
            "suggestions": [asdict(suggestion) for suggestion in outcome.result or []],
            "error_message": outcome.error_message,
            "superseded": not closet.places.is_latest(outcome),
        }

    @app.post("/places/resolve")
    async def resolve_place(request: SuggestionRequest) -> dict:
        outcome = await closet.places.select(PlaceSuggestion(**request.model_dump()))
        return {
            "place": asdict(outcome.result) if outcome.result else None,
            "error_message": outcome.error_message,
            "superseded": not outcome.applied,
        }

    return app


__all__ = ["create_app"]
