# decorquote/db_models.py
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Text
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KVEntry(SQLModel, table=True):
    """
    One storage key per row. The value is the serialized collection (or
    singleton) exactly as the document store hands it over.
    """
    __tablename__ = "kv_entry"

    key: str = Field(primary_key=True, max_length=64)
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
