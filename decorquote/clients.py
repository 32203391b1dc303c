# decorquote/clients.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from .records import CLIENTS
from .store import DocumentStore

logger = logging.getLogger(__name__)


def list_clients(store: DocumentStore) -> List[Dict[str, Any]]:
    return store.list(CLIENTS)


def get_client(store: DocumentStore, client_id: int) -> Optional[Dict[str, Any]]:
    return store.get(CLIENTS, client_id)


def create_client(store: DocumentStore, fields: Mapping[str, Any]) -> Dict[str, Any]:
    client = store.create(CLIENTS, fields)
    logger.info("Created client #%d %s", client["id"], client["name"])
    return client


def update_client(store: DocumentStore, client_id: int, fields: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    return store.update(CLIENTS, client_id, fields)


def delete_client(store: DocumentStore, client_id: int) -> bool:
    # quotes keep their client_id and show as "Deleted client"
    removed = store.delete(CLIENTS, client_id)
    if removed:
        logger.info("Deleted client #%d", client_id)
    return removed
