# decorquote/store.py
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .config import AppConfig, get_config
from .kv import JsonDirBackend, KeyValueBackend, MemoryBackend
from .records import has_timestamps, validate_record

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


class DocumentStore:
    """
    Named collections of records, each an ordered list of dicts with an
    integer ``id``, kept under one key of a flat key/value backend.

    Every mutation reads the whole collection, changes it and writes the
    whole collection back. There is no locking: two writers on the same
    collection race and the last write wins, so a store must only be used
    by a single process.
    """

    def __init__(self, backend: KeyValueBackend, clock: Callable[[], str] = utc_now_iso):
        self.backend = backend
        self.clock = clock

    # ---- raw values -------------------------------------------------------
    def read(self, key: str) -> Any:
        """Deserialized value under ``key``; ``None`` if never written or unreadable."""
        raw = self.backend.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupted content under key %r", key)
            return None

    def write(self, key: str, value: Any) -> None:
        self.backend.set(key, json.dumps(value, ensure_ascii=False, indent=2))

    # ---- collections ------------------------------------------------------
    def list(self, collection: str) -> List[Record]:
        data = self.read(collection)
        if not isinstance(data, list):
            if data is not None:
                logger.warning("Collection %r is not a list, treating it as empty", collection)
            return []
        return data

    def replace(self, collection: str, records: Iterable[Mapping[str, Any]]) -> None:
        self.write(collection, [dict(r) for r in records])

    def get(self, collection: str, record_id: int) -> Optional[Record]:
        for rec in self.list(collection):
            if rec.get("id") == record_id:
                return rec
        return None

    def next_id(self, collection: str) -> int:
        return _next_id(self.list(collection))

    def create(self, collection: str, fields: Mapping[str, Any]) -> Record:
        records = self.list(collection)
        rec = dict(fields)
        rec["id"] = _next_id(records)
        if has_timestamps(collection):
            now = self.clock()
            rec["created_at"] = now
            rec["updated_at"] = now
        rec = validate_record(collection, rec)
        records.append(rec)
        self.replace(collection, records)
        logger.debug("Created %s #%d", collection, rec["id"])
        return rec

    def update(self, collection: str, record_id: int, fields: Mapping[str, Any]) -> Optional[Record]:
        records = self.list(collection)
        for idx, current in enumerate(records):
            if current.get("id") != record_id:
                continue
            rec = {**current, **fields, "id": record_id}
            if has_timestamps(collection):
                rec["updated_at"] = self.clock()
            rec = validate_record(collection, rec)
            records[idx] = rec
            self.replace(collection, records)
            return rec
        return None

    def delete(self, collection: str, record_id: int) -> bool:
        return self.delete_where(collection, lambda r: r.get("id") == record_id) > 0

    def delete_where(self, collection: str, predicate: Callable[[Record], bool]) -> int:
        """Drop every record matching ``predicate``; returns how many went."""
        records = self.list(collection)
        kept = [r for r in records if not predicate(r)]
        removed = len(records) - len(kept)
        if removed:
            self.replace(collection, kept)
        return removed


def _next_id(records: Iterable[Mapping[str, Any]]) -> int:
    ids = [r["id"] for r in records if isinstance(r.get("id"), int)]
    return max(ids) + 1 if ids else 1


def open_store(config: Optional[AppConfig] = None) -> DocumentStore:
    """Build a store over the backend chosen in the configuration."""
    config = config or get_config()
    if config.backend == "memory":
        backend: KeyValueBackend = MemoryBackend()
    elif config.backend == "sqlite":
        from .db import SqlBackend  # pulls in sqlmodel + streamlit caching
        backend = SqlBackend(config.sqlite_url)
    else:
        backend = JsonDirBackend(config.store_dir)
    logger.info("Using %s storage backend", config.backend)
    return DocumentStore(backend)
