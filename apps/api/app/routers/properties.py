"""Catalog search and detail endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..data.catalog import get_catalog
from ..repositories import properties as properties_repo
from ..schemas import properties as properties_schema
from ..services.sanitize import sanitize_html

router = APIRouter()


@router.get("", response_model=properties_schema.PropertyListResponse)
async def list_properties(
    catalog: tuple[properties_schema.Property, ...] = Depends(get_catalog),
) -> properties_schema.PropertyListResponse:
    """Return the whole catalog in fixture order."""

    return properties_schema.PropertyListResponse(results=list(catalog), count=len(catalog))


@router.post("/search", response_model=properties_schema.PropertyListResponse)
async def search_properties(
    criteria: properties_schema.FilterCriteria,
    catalog: tuple[properties_schema.Property, ...] = Depends(get_catalog),
) -> properties_schema.PropertyListResponse:
    """Return properties matching every active filter."""

    results = properties_repo.filter_properties(catalog, criteria)
    return properties_schema.PropertyListResponse(results=results, count=len(results))


@router.get("/{property_id}", response_model=properties_schema.PropertyDetail)
async def get_property(
    property_id: str,
    catalog: tuple[properties_schema.Property, ...] = Depends(get_catalog),
) -> properties_schema.PropertyDetail:
    """Return one property with sanitized description markup."""

    prop = properties_repo.get_property(catalog, property_id)
    if prop is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")

    return properties_schema.PropertyDetail(
        **prop.model_dump(),
        description_html=sanitize_html(prop.description),
        long_description_html=sanitize_html(prop.long_description),
    )
