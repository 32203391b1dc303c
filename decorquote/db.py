# decorquote/db.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional

import streamlit as st
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine, select

from .config import get_config
from .db_models import KVEntry
from .errors import StorageError

logger = logging.getLogger(__name__)


def _resolve_url(db_url: Optional[str]) -> str:
    return db_url or get_config().sqlite_url


# ---------------------------------------------------------------------
# Engine factory (cached across reruns & sessions)
# ---------------------------------------------------------------------
@st.cache_resource(show_spinner=False)
def get_engine(db_url: Optional[str] = None):
    """
    Create (or return cached) SQLAlchemy/SQLModel engine.

    - Cached with st.cache_resource so it's shared across reruns/sessions.
    - For SQLite: creates the parent directory, sets journal_mode=WAL and
      busy_timeout.
    """
    url = _resolve_url(db_url)
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}

    if url.startswith("sqlite:///"):
        Path(url[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)

    if url.startswith("sqlite"):
        with engine.connect() as conn:
            conn.exec_driver_sql("PRAGMA journal_mode=WAL;")
            conn.exec_driver_sql("PRAGMA synchronous=NORMAL;")
            conn.exec_driver_sql("PRAGMA busy_timeout=5000;")

    logger.info("Opened database %s", engine.url.render_as_string(hide_password=True))
    return engine


def create_db_and_tables(db_url: Optional[str] = None) -> None:
    """Create the key/value table if it does not exist yet."""
    SQLModel.metadata.create_all(get_engine(db_url))


@contextmanager
def get_session(db_url: Optional[str] = None) -> Iterator[Session]:
    """
    Context-managed Session:

        with get_session() as s:
            s.add(obj)
            s.commit()

    """
    engine = get_engine(db_url)
    with Session(engine) as session:
        yield session


class SqlBackend:
    """Key/value backend storing every key as a row of ``kv_entry``."""

    def __init__(self, db_url: Optional[str] = None):
        self.db_url = _resolve_url(db_url)
        create_db_and_tables(self.db_url)

    def get(self, key: str) -> Optional[str]:
        try:
            with get_session(self.db_url) as s:
                row = s.get(KVEntry, key)
                return row.value if row is not None else None
        except SQLAlchemyError as exc:
            raise StorageError(key, exc) from exc

    def set(self, key: str, value: str) -> None:
        try:
            with get_session(self.db_url) as s:
                row = s.get(KVEntry, key)
                if row is None:
                    row = KVEntry(key=key, value=value)
                else:
                    row.value = value
                    row.updated_at = datetime.now(timezone.utc)
                s.add(row)
                s.commit()
        except SQLAlchemyError as exc:
            raise StorageError(key, exc) from exc

    def delete(self, key: str) -> None:
        try:
            with get_session(self.db_url) as s:
                row = s.get(KVEntry, key)
                if row is not None:
                    s.delete(row)
                    s.commit()
        except SQLAlchemyError as exc:
            raise StorageError(key, exc) from exc

    def keys(self) -> List[str]:
        with get_session(self.db_url) as s:
            return list(s.exec(select(KVEntry.key).order_by(KVEntry.key)).all())
