"""Static property catalog loaded from the bundled JSON fixture."""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import TypeAdapter

from ..core.config import settings
from ..schemas.properties import Property

logger = logging.getLogger(__name__)

_CATALOG_ADAPTER = TypeAdapter(list[Property])


def load_catalog(path: Path) -> tuple[Property, ...]:
    """Parse the fixture file into immutable property records.

    Raises ``ValueError`` when two records share an id, since detail lookups
    and favorites are both keyed on it.
    """

    raw = json.loads(path.read_text(encoding="utf-8"))
    properties = tuple(_CATALOG_ADAPTER.validate_python(raw))

    seen: set[str] = set()
    for prop in properties:
        if prop.id in seen:
            raise ValueError(f"Duplicate property id in catalog: {prop.id}")
        seen.add(prop.id)

    logger.info("Loaded %d properties from %s", len(properties), path)
    return properties


@lru_cache
def get_catalog() -> tuple[Property, ...]:
    """Return the cached catalog for the configured fixture."""

    return load_catalog(settings.fixture_path)
