"""SQLAlchemy storage for the ``sql`` table backend."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from clientdesk.config import settings

logger = logging.getLogger(__name__)


def _connect_args(url: str) -> dict[str, object]:
    # Gateway calls run in worker threads, so a SQLite connection may change thread
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.database_url, connect_args=_connect_args(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def create_tables() -> None:
    """Create the clients table when it is missing. Existing tables are left untouched."""
    # Registers ClientRow on Base.metadata
    import clientdesk.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Client table '%s' ready on %s", settings.clients_table, engine.url.render_as_string())
