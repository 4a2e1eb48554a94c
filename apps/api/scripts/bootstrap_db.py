"""Create the storage schema and optionally seed favorites for development."""
from __future__ import annotations

import argparse

from app.core.config import settings
from app.data.catalog import get_catalog
from app.db.session import SessionLocal, create_schema
from app.repositories import properties as properties_repo
from app.services.favorites import FavoritesStore
from app.services.storage import SqlStorage


def seed_favorites(property_ids: list[str], *, reset: bool) -> FavoritesStore:
	"""Add the given catalog properties to the persisted favorites slot."""

	storage = SqlStorage(SessionLocal)
	if reset:
		storage.remove(settings.favorites_storage_key)

	store = FavoritesStore(storage, storage_key=settings.favorites_storage_key)
	store.load()

	catalog = get_catalog()
	for property_id in property_ids:
		prop = properties_repo.get_property(catalog, property_id)
		if prop is None:
			print(f"Skipping unknown property id: {property_id}")
			continue
		store.add(prop)
	return store


def main() -> None:
	parser = argparse.ArgumentParser(description=__doc__)
	parser.add_argument("property_ids", nargs="*", help="catalog ids to add to favorites")
	parser.add_argument("--reset", action="store_true", help="clear stored favorites first")
	args = parser.parse_args()

	create_schema()
	store = seed_favorites(args.property_ids, reset=args.reset)
	print(f"Storage schema ensured at {settings.database_url}; {store.count} favorites stored.")


if __name__ == "__main__":
	main()
