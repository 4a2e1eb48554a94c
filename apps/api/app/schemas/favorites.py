"""Schemas for the favorites endpoints."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class AddFavoriteRequest(BaseModel):
    property_id: str | None = Field(default=None, description="Catalog id to snapshot")
    property: dict[str, Any] | None = Field(default=None, description="Dropped property payload")


class FavoritesResponse(BaseModel):
    favorites: list[dict[str, Any]]
    count: int


class AddFavoriteResponse(FavoritesResponse):
    added: bool


class RemoveFavoriteResponse(FavoritesResponse):
    removed: bool


class FavoriteStatusResponse(BaseModel):
    property_id: str
    is_favorite: bool
