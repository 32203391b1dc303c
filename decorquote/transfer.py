# decorquote/transfer.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Mapping, Union

import pandas as pd

from .formatting import format_date
from .records import EVENT_TYPE_LABELS, EXPORT_KEYS, QUOTE_STATUS_LABELS, EventType, QuoteStatus
from .store import DocumentStore

logger = logging.getLogger(__name__)


def export_all_data(store: DocumentStore) -> str:
    """All collections and the settings as one JSON object; ``null`` for keys never written."""
    data: Dict[str, Any] = {key: store.read(key) for key in EXPORT_KEYS}
    return json.dumps(data, ensure_ascii=False, indent=2)


def import_all_data(store: DocumentStore, payload: Union[str, bytes]) -> bool:
    """
    Overwrite every collection present (non-null) in ``payload``.

    Returns False, writing nothing, when the payload is not UTF-8 encoded
    or not a JSON object.
    Past that point each key is written on its own, without validating the
    whole document first.
    """
    try:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8-sig")
        data = json.loads(payload)
    except ValueError:  # UnicodeDecodeError included
        logger.warning("Import rejected: payload is not valid UTF-8 JSON")
        return False
    if not isinstance(data, dict):
        logger.warning("Import rejected: expected a JSON object, got %s", type(data).__name__)
        return False

    written = []
    for key, value in data.items():
        if value is None:
            continue
        if key not in EXPORT_KEYS:
            logger.warning("Import: skipping unknown key %r", key)
            continue
        store.write(key, value)
        written.append(key)
    logger.info("Imported %s", ", ".join(written) or "nothing")
    return True


# ---- CSV -------------------------------------------------------------------

CSV_COLUMNS = ["Number", "Client", "Event type", "Event date", "Total", "Status"]


def _label(labels: Mapping, enum_cls, value: Any) -> str:
    try:
        return labels[enum_cls(value)]
    except ValueError:
        return str(value or "")


def quotes_to_csv(quotes: Iterable[Mapping[str, Any]]) -> str:
    """
    Quote list for spreadsheets set to the it-IT locale: ``;`` separated,
    decimal comma, UTF-8 BOM so Excel picks the right encoding.
    """
    rows = [{
        "Number": q.get("number", ""),
        "Client": q.get("client_name", ""),
        "Event type": _label(EVENT_TYPE_LABELS, EventType, q.get("event_type")),
        "Event date": format_date(q.get("event_date")),
        "Total": f"{float(q.get('total', 0) or 0):.2f}".replace(".", ","),
        "Status": _label(QUOTE_STATUS_LABELS, QuoteStatus, q.get("status")),
    } for q in quotes]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    return "\ufeff" + df.to_csv(index=False, sep=";", lineterminator="\n")
