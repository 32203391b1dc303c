# decorquote/quotes.py
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from . import pricing
from .company import get_settings
from .records import (
    CLIENTS, PAYMENT_PLANS, QUOTE_CHILDREN, QUOTE_ITEMS, QUOTES, WEDDING_DETAILS,
    CompanySettings, QuoteStatus, validate_record,
)
from .store import DocumentStore, Record

logger = logging.getLogger(__name__)

DELETED_CLIENT = "Deleted client"

# Fields a duplicate does not inherit from its source.
_NOT_COPIED = {"id", "number", "status", "confirmed_date", "created_at", "updated_at", "client_name"}


# ---------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------
def list_quotes(store: DocumentStore) -> List[Record]:
    """All quotes with a ``client_name`` resolved from the clients collection."""
    names = {c["id"]: c.get("name", "") for c in store.list(CLIENTS)}
    return [{**q, "client_name": names.get(q.get("client_id")) or DELETED_CLIENT}
            for q in store.list(QUOTES)]


def get_quote(store: DocumentStore, quote_id: int) -> Optional[Record]:
    for q in list_quotes(store):
        if q.get("id") == quote_id:
            return q
    return None


def quotes_for_client(store: DocumentStore, client_id: int) -> List[Record]:
    return [q for q in list_quotes(store) if q.get("client_id") == client_id]


# ---------------------------------------------------------------------
# List search and ordering
# ---------------------------------------------------------------------
SORT_FIELDS = ("event_date", "total", "status")

_STATUS_ORDER = {
    QuoteStatus.DRAFT.value: 0,
    QuoteStatus.SENT.value: 1,
    QuoteStatus.CONFIRMED.value: 2,
    QuoteStatus.COMPLETED.value: 3,
    QuoteStatus.REJECTED.value: 4,
    QuoteStatus.EXPIRED.value: 5,
}


def filter_quotes(quotes: Iterable[Record],
                  search: str = "",
                  status: Optional[str] = None,
                  event_type: Optional[str] = None,
                  date_from: Optional[str] = None,
                  date_to: Optional[str] = None,
                  amount_min: Optional[float] = None,
                  amount_max: Optional[float] = None) -> List[Record]:
    """
    Quotes matching every criterion given. ``search`` is a case-insensitive
    substring of the client name or the quote number; dates are ISO strings
    compared against ``event_date``, bounds inclusive.
    """
    needle = search.strip().lower()
    out = []
    for q in quotes:
        if needle and needle not in str(q.get("client_name", "")).lower() \
                and needle not in str(q.get("number", "")).lower():
            continue
        if status and q.get("status") != status:
            continue
        if event_type and q.get("event_type") != event_type:
            continue
        event_date = q.get("event_date") or ""
        if date_from and event_date < date_from:
            continue
        if date_to and event_date > date_to:
            continue
        total = float(q.get("total", 0) or 0)
        if amount_min is not None and total < amount_min:
            continue
        if amount_max is not None and total > amount_max:
            continue
        out.append(q)
    return out


def sort_quotes(quotes: Iterable[Record], field: str = "event_date",
                descending: bool = False) -> List[Record]:
    """Order by event date, total or status (draft first). Blank event dates go last."""
    if field not in SORT_FIELDS:
        raise ValueError(f"cannot sort quotes by {field!r}")
    rows = list(quotes)
    if field == "event_date":
        dated = [q for q in rows if q.get("event_date")]
        blank = [q for q in rows if not q.get("event_date")]
        return sorted(dated, key=lambda q: q["event_date"], reverse=descending) + blank
    if field == "total":
        return sorted(rows, key=lambda q: float(q.get("total", 0) or 0), reverse=descending)
    unknown = len(_STATUS_ORDER)
    return sorted(rows, key=lambda q: _STATUS_ORDER.get(q.get("status"), unknown), reverse=descending)


def create_quote(store: DocumentStore, fields: Mapping[str, Any]) -> Record:
    quote = store.create(QUOTES, fields)
    logger.info("Created quote #%d %s", quote["id"], quote["number"])
    return quote


def update_quote(store: DocumentStore, quote_id: int, fields: Mapping[str, Any]) -> Optional[Record]:
    """
    Merge ``fields`` into the quote. Status is free-form: any status may be
    replaced by any other, there is no transition graph.
    """
    return store.update(QUOTES, quote_id, fields)


def delete_quote(store: DocumentStore, quote_id: int) -> bool:
    """
    Remove the quote and every item, wedding detail and payment plan it owns.

    These are four separate collection writes with no transaction around
    them; the children are removed even when the quote row is already gone.
    """
    removed = store.delete(QUOTES, quote_id)
    counts = {name: store.delete_where(name, lambda r: r.get("quote_id") == quote_id)
              for name in QUOTE_CHILDREN}
    if removed:
        logger.info("Deleted quote #%d (%s)", quote_id,
                    ", ".join(f"{n} {name}" for name, n in counts.items()))
    return removed


# ---------------------------------------------------------------------
# Numbering
# ---------------------------------------------------------------------
def _sequence(number: str) -> int:
    try:
        return int(str(number).rsplit("-", 1)[-1])
    except ValueError:
        return 0


def next_quote_number(store: DocumentStore,
                      settings: Optional[CompanySettings] = None,
                      today: Optional[date] = None) -> str:
    """
    ``PREFIX-YEAR-NNNN``: one above the highest sequence already used this
    year, or the configured start number for the first quote of the year.
    Gaps are never refilled.
    """
    settings = settings or get_settings(store)
    year = (today or date.today()).year
    marker = f"-{year}-"
    used = [_sequence(q.get("number", "")) for q in store.list(QUOTES) if marker in str(q.get("number", ""))]
    seq = max(used) + 1 if used else settings.quote_start_number
    return f"{settings.quote_prefix}-{year}-{seq:04d}"


# ---------------------------------------------------------------------
# Owned rows: items, wedding details, payment plans
# ---------------------------------------------------------------------
def _children(store: DocumentStore, collection: str, quote_id: int) -> List[Record]:
    rows = [r for r in store.list(collection) if r.get("quote_id") == quote_id]
    return sorted(rows, key=lambda r: r.get("sort_order", 0))


def _replace_children(store: DocumentStore, collection: str, quote_id: int,
                      rows: Iterable[Mapping[str, Any]]) -> List[Record]:
    """Swap the quote's rows wholesale; sort_order becomes the list position."""
    others = [r for r in store.list(collection) if r.get("quote_id") != quote_id]
    next_id = max((r["id"] for r in others), default=0) + 1
    fresh = []
    for idx, row in enumerate(rows):
        rec = {**row, "id": next_id + idx, "quote_id": quote_id, "sort_order": idx}
        fresh.append(validate_record(collection, rec))
    store.replace(collection, others + fresh)
    return fresh


def get_quote_items(store: DocumentStore, quote_id: int) -> List[Record]:
    return _children(store, QUOTE_ITEMS, quote_id)


def set_quote_items(store: DocumentStore, quote_id: int,
                    items: Iterable[Mapping[str, Any]]) -> List[Record]:
    return _replace_children(store, QUOTE_ITEMS, quote_id, items)


def get_payment_plans(store: DocumentStore, quote_id: int) -> List[Record]:
    return _children(store, PAYMENT_PLANS, quote_id)


def set_payment_plans(store: DocumentStore, quote_id: int,
                      plans: Iterable[Mapping[str, Any]]) -> List[Record]:
    return _replace_children(store, PAYMENT_PLANS, quote_id, plans)


def get_wedding_details(store: DocumentStore, quote_id: int) -> Optional[Record]:
    for w in store.list(WEDDING_DETAILS):
        if w.get("quote_id") == quote_id:
            return w
    return None


def set_wedding_details(store: DocumentStore, quote_id: int,
                        details: Mapping[str, Any]) -> Record:
    """At most one row per quote: any previous row for the quote is replaced."""
    rows = store.list(WEDDING_DETAILS)
    new_id = max((r["id"] for r in rows), default=0) + 1
    others = [r for r in rows if r.get("quote_id") != quote_id]
    rec = validate_record(WEDDING_DETAILS, {**details, "id": new_id, "quote_id": quote_id})
    store.replace(WEDDING_DETAILS, others + [rec])
    return rec


# ---------------------------------------------------------------------
# Duplication
# ---------------------------------------------------------------------
def duplicate_quote(store: DocumentStore, source_id: int,
                    settings: Optional[CompanySettings] = None,
                    today: Optional[date] = None) -> Optional[Record]:
    source = store.get(QUOTES, source_id)
    if source is None:
        return None

    fields = {k: v for k, v in source.items() if k not in _NOT_COPIED}
    fields["number"] = next_quote_number(store, settings, today)
    fields["status"] = QuoteStatus.DRAFT.value
    fields["confirmed_date"] = None
    copy = create_quote(store, fields)

    strip = ("id", "quote_id")
    items = get_quote_items(store, source_id)
    if items:
        set_quote_items(store, copy["id"], [{k: v for k, v in it.items() if k not in strip} for it in items])
    wedding = get_wedding_details(store, source_id)
    if wedding is not None:
        set_wedding_details(store, copy["id"], {k: v for k, v in wedding.items() if k not in strip})
    plans = get_payment_plans(store, source_id)
    if plans:
        set_payment_plans(store, copy["id"], [{k: v for k, v in p.items() if k not in strip} for p in plans])

    logger.info("Duplicated quote #%d as #%d %s", source_id, copy["id"], copy["number"])
    return copy


# ---------------------------------------------------------------------
# Editor save
# ---------------------------------------------------------------------
def save_quote(store: DocumentStore,
               fields: Mapping[str, Any],
               items: Iterable[Mapping[str, Any]],
               payments: Iterable[Mapping[str, Any]],
               wedding: Optional[Mapping[str, Any]] = None,
               quote_id: Optional[int] = None,
               settings: Optional[CompanySettings] = None) -> Tuple[Record, Optional[str]]:
    """
    Persist what the quote editor holds.

    Item amounts, totals and payment amounts are recomputed from the inputs
    before anything is written, so saving the same inputs twice stores the
    same figures. Returns the saved quote and the payment split warning, if
    any (the quote is saved either way).
    """
    settings = settings or get_settings(store)
    rows = [{**it, "amount": pricing.item_amount(it.get("quantity", 1), it.get("unit_price", 0))}
            for it in items]
    totals = pricing.compute_totals(rows, fields.get("discount_type"),
                                    float(fields.get("discount_value") or 0), settings)
    plans = pricing.recompute_payment_amounts(payments, totals["total"])

    data = {
        **fields,
        "subtotal": totals["subtotal"],
        "tax_rate": pricing.effective_tax_rate(settings),
        "total": totals["total"],
    }
    quote = update_quote(store, quote_id, data) if quote_id is not None else None
    if quote is None:
        data.setdefault("number", next_quote_number(store, settings))
        quote = create_quote(store, data)

    set_quote_items(store, quote["id"], rows)
    set_payment_plans(store, quote["id"], plans)
    if wedding is not None:
        set_wedding_details(store, quote["id"], wedding)

    return quote, pricing.payment_split_warning(plans)
