"""Database engine and session management."""
from __future__ import annotations

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from ..core.config import settings
from ..models.base import Base


def build_engine(database_url: str) -> Engine:
    """Create an engine, relaxing SQLite's same-thread check for the threadpool."""

    connect_args: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=False, pool_pre_ping=True, connect_args=connect_args)


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(engine, expire_on_commit=False, class_=Session)


def create_schema(bind: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""

    # Registers the table on the shared metadata.
    from ..models import storage_item  # noqa: F401

    Base.metadata.create_all(bind or engine)
