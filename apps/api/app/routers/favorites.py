"""Favorites endpoints backing the add button and drag-and-drop drop zone."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..data.catalog import get_catalog
from ..repositories import properties as properties_repo
from ..schemas import favorites as favorites_schema
from ..schemas.properties import Property
from ..services.favorites import FavoritesStore, get_favorites_store

router = APIRouter()


@router.get("", response_model=favorites_schema.FavoritesResponse)
def list_favorites(
    store: FavoritesStore = Depends(get_favorites_store),
) -> favorites_schema.FavoritesResponse:
    """Return saved favorites in the order they were added."""

    return favorites_schema.FavoritesResponse(favorites=store.favorites, count=store.count)


@router.post("", response_model=favorites_schema.AddFavoriteResponse)
def add_favorite(
    payload: favorites_schema.AddFavoriteRequest,
    store: FavoritesStore = Depends(get_favorites_store),
    catalog: tuple[Property, ...] = Depends(get_catalog),
) -> favorites_schema.AddFavoriteResponse:
    """Add a catalog property by id, or a dropped property payload as-is."""

    if payload.property_id is not None:
        prop = properties_repo.get_property(catalog, payload.property_id)
        if prop is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
        added = store.add(prop)
    elif payload.property is not None:
        added = store.add(payload.property)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="property_id or property is required",
        )

    return favorites_schema.AddFavoriteResponse(
        favorites=store.favorites,
        count=store.count,
        added=added,
    )


@router.delete("", response_model=favorites_schema.FavoritesResponse)
def clear_favorites(
    store: FavoritesStore = Depends(get_favorites_store),
) -> favorites_schema.FavoritesResponse:
    """Remove every favorite."""

    store.clear()
    return favorites_schema.FavoritesResponse(favorites=store.favorites, count=store.count)


@router.get("/{property_id}", response_model=favorites_schema.FavoriteStatusResponse)
def favorite_status(
    property_id: str,
    store: FavoritesStore = Depends(get_favorites_store),
) -> favorites_schema.FavoriteStatusResponse:
    """Report whether a property is saved."""

    return favorites_schema.FavoriteStatusResponse(
        property_id=property_id,
        is_favorite=store.is_favorite(property_id),
    )


@router.delete("/{property_id}", response_model=favorites_schema.RemoveFavoriteResponse)
def remove_favorite(
    property_id: str,
    store: FavoritesStore = Depends(get_favorites_store),
) -> favorites_schema.RemoveFavoriteResponse:
    """Remove a single favorite; unknown ids are a no-op."""

    removed = store.remove(property_id)
    return favorites_schema.RemoveFavoriteResponse(
        favorites=store.favorites,
        count=store.count,
        removed=removed,
    )
