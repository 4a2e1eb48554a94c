"""Key/value persistence backends used by the favorites store."""
from __future__ import annotations

from typing import Protocol

from sqlalchemy.orm import Session, sessionmaker

from ..repositories import storage_items as storage_repo


class KeyValueStorage(Protocol):
    """Persistence port: one string value per key, overwritten wholesale."""

    def load(self, key: str) -> str | None:
        ...

    def save(self, key: str, value: str) -> None:
        ...


class InMemoryStorage:
    """Dictionary-backed storage for tests and ephemeral runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> str | None:
        return self._items.get(key)

    def save(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


class SqlStorage:
    """Storage slots kept in the ``storage_items`` table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def load(self, key: str) -> str | None:
        with self._session_factory() as session:
            return storage_repo.get_value(session, key)

    def save(self, key: str, value: str) -> None:
        with self._session_factory() as session:
            with session.begin():
                storage_repo.put_value(session, key=key, value=value)

    def remove(self, key: str) -> None:
        with self._session_factory() as session:
            with session.begin():
                storage_repo.delete_value(session, key)
