"""Shared fixtures: a small catalog and an in-memory favorites store."""
from __future__ import annotations

from datetime import date

import pytest

from app.data.catalog import get_catalog
from app.main import app
from app.schemas.properties import Property
from app.services.favorites import FavoritesStore, get_favorites_store
from app.services.storage import InMemoryStorage


def make_property(**overrides) -> Property:
    data = {
        "id": "prop1",
        "type": "House",
        "price": 450000,
        "bedrooms": 4,
        "postcode": "BR1",
        "location": "Bromley, Kent",
        "description": "Family home with a garden.",
        "long_description": "<p>Family home with a <strong>garden</strong>.</p>",
        "date_added": date(2025, 10, 15),
        "images": ("images/prop1/pic1.jpg", "images/prop1/pic2.jpg", "images/prop1/pic3.jpg"),
        "floor_plan": "images/prop1/floorplan.jpg",
        "map_url": None,
    }
    data.update(overrides)
    return Property(**data)


@pytest.fixture
def sample_properties() -> list[Property]:
    return [
        make_property(id="prop1", type="House", price=450000, bedrooms=4, postcode="BR1", date_added=date(2025, 10, 15)),
        make_property(id="prop2", type="Flat", price=325000, bedrooms=2, postcode="NW1", date_added=date(2025, 11, 2)),
        make_property(id="prop3", type="House", price=680000, bedrooms=5, postcode="SE1", date_added=date(2025, 9, 20)),
    ]


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def store(storage: InMemoryStorage) -> FavoritesStore:
    favorites_store = FavoritesStore(storage)
    favorites_store.load()
    return favorites_store


@pytest.fixture
def client_overrides(sample_properties, store):
    """Point the app at the sample catalog and the in-memory store."""

    app.dependency_overrides[get_catalog] = lambda: tuple(sample_properties)
    app.dependency_overrides[get_favorites_store] = lambda: store
    yield
    app.dependency_overrides.clear()
