"""Favorites store synchronised to a single key/value persistence slot."""
from __future__ import annotations

import copy
import json
import logging
import threading
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from pydantic import BaseModel

from ..core.config import settings
from .storage import KeyValueStorage, SqlStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "propertyFavorites"


class FavoritesStore:
    """Insertion-ordered set of property snapshots keyed by id.

    The in-memory list is the source of truth. Every mutation re-saves the
    whole list to storage; a failed save is logged and the mutation is kept.
    Handlers call the store from FastAPI's threadpool, so each operation
    holds a re-entrant lock for its read-modify-save cycle.
    """

    def __init__(self, storage: KeyValueStorage, storage_key: str = DEFAULT_STORAGE_KEY) -> None:
        self._storage = storage
        self._key = storage_key
        self._favorites: list[dict[str, Any]] = []
        self._lock = threading.RLock()

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._favorites)

    @property
    def favorites(self) -> list[dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self._favorites)

    def load(self) -> None:
        """Replace the in-memory set with the persisted one; never raises."""

        with self._lock:
            self._favorites = self._read_stored()

    def _read_stored(self) -> list[dict[str, Any]]:
        try:
            raw = self._storage.load(self._key)
        except Exception as exc:  # noqa: BLE001 - storage is best-effort
            logger.warning("Error reading favorites from storage: %s", exc)
            return []

        if raw is None:
            return []

        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError, RecursionError) as exc:
            logger.warning("Stored favorites could not be decoded, starting empty: %s", type(exc).__name__)
            return []

        if not isinstance(parsed, list):
            logger.warning("Stored favorites were %s, expected a list; starting empty", type(parsed).__name__)
            return []

        favorites: list[dict[str, Any]] = []
        seen: set[str] = set()
        for entry in parsed:
            entry_id = _snapshot_id(entry)
            if entry_id is None or entry_id in seen:
                continue
            seen.add(entry_id)
            favorites.append(entry)

        dropped = len(parsed) - len(favorites)
        if dropped:
            logger.warning("Dropped %d invalid or duplicate stored favorites", dropped)
        return favorites

    def is_favorite(self, property_id: str) -> bool:
        with self._lock:
            return any(fav["id"] == property_id for fav in self._favorites)

    def add(self, prop: BaseModel | Mapping[str, Any] | None) -> bool:
        """Append a snapshot of ``prop`` unless it is invalid or already saved."""

        snapshot = _to_snapshot(prop)
        if snapshot is None:
            logger.warning("Invalid property, not added to favorites")
            return False

        with self._lock:
            if self.is_favorite(snapshot["id"]):
                return False
            self._favorites.append(snapshot)
            self._persist()
        return True

    def remove(self, property_id: str) -> bool:
        with self._lock:
            remaining = [fav for fav in self._favorites if fav["id"] != property_id]
            if len(remaining) == len(self._favorites):
                return False
            self._favorites = remaining
            self._persist()
        return True

    def clear(self) -> None:
        with self._lock:
            self._favorites = []
            self._persist()

    def _persist(self) -> None:
        try:
            self._storage.save(self._key, json.dumps(self._favorites, default=str))
        except Exception as exc:  # noqa: BLE001 - in-memory state stays authoritative
            logger.exception("Error saving favorites to storage: %s", exc)


def _to_snapshot(prop: BaseModel | Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Deep-copy ``prop`` into a JSON-compatible dict, or ``None`` if it has no id."""

    if prop is None:
        return None
    if isinstance(prop, BaseModel):
        snapshot = prop.model_dump(mode="json", by_alias=True)
    elif isinstance(prop, Mapping):
        snapshot = copy.deepcopy(dict(prop))
    else:
        return None

    if _snapshot_id(snapshot) is None:
        return None
    return snapshot


def _snapshot_id(entry: object) -> str | None:
    if not isinstance(entry, dict):
        return None
    entry_id = entry.get("id")
    if not entry_id or not isinstance(entry_id, str):
        return None
    return entry_id


_store_lock = threading.Lock()


def get_favorites_store() -> FavoritesStore:
    """Return the process-wide store, loaded from the configured database."""

    # Dependencies resolve on worker threads; only one of them may build the store.
    with _store_lock:
        return _build_favorites_store()


@lru_cache
def _build_favorites_store() -> FavoritesStore:
    from ..db.session import SessionLocal, create_schema

    create_schema()
    store = FavoritesStore(SqlStorage(SessionLocal), storage_key=settings.favorites_storage_key)
    store.load()
    return store
