"""Storage slot repository helpers."""
from __future__ import annotations

from sqlalchemy.orm import Session

from ..models.storage_item import StorageItem


def get_value(session: Session, key: str) -> str | None:
    """Return the raw value stored under ``key``."""

    item = session.get(StorageItem, key)
    if item is None:
        return None
    return item.value


def put_value(session: Session, *, key: str, value: str) -> StorageItem:
    """Create the slot or overwrite its value wholesale."""

    item = session.get(StorageItem, key)
    if item is None:
        item = StorageItem(key=key, value=value)
        session.add(item)
        session.flush()
        return item

    item.value = value
    session.add(item)
    return item


def delete_value(session: Session, key: str) -> bool:
    """Drop the slot; returns whether anything was removed."""

    item = session.get(StorageItem, key)
    if item is None:
        return False
    session.delete(item)
    return True
