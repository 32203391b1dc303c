# decorquote/stats.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from .formatting import parse_day
from .pricing import round2
from .quotes import list_quotes
from .records import QuoteStatus, WON_STATUSES
from .store import DocumentStore

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

EXPIRY_WINDOW = timedelta(days=30)
UPCOMING_LIMIT = 5

_OPEN_STATUSES = {QuoteStatus.DRAFT.value, QuoteStatus.SENT.value}


@dataclass
class DashboardStats:
    expiring_quotes: List[Dict[str, Any]] = field(default_factory=list)
    upcoming_events: List[Dict[str, Any]] = field(default_factory=list)
    monthly_quotes: int = 0
    monthly_value: float = 0.0
    conversion_rate: float = 0.0
    monthly_revenue: List[Tuple[str, float]] = field(default_factory=list)


def compute_stats(store: DocumentStore, now: Optional[datetime] = None) -> DashboardStats:
    today = (now or datetime.now()).date()
    horizon = today + EXPIRY_WINDOW
    quotes = list_quotes(store)

    expiring = []
    upcoming = []
    this_month = []
    revenue = [0.0] * 12
    for q in quotes:
        status = q.get("status")
        expiry = parse_day(q.get("expiry_date"))
        event_day = parse_day(q.get("event_date"))
        created = parse_day(q.get("created_at"))

        if status in _OPEN_STATUSES and expiry is not None and today <= expiry <= horizon:
            expiring.append(q)
        if status == QuoteStatus.CONFIRMED.value and event_day is not None and event_day >= today:
            upcoming.append((event_day, q))
        if created is not None and (created.year, created.month) == (today.year, today.month):
            this_month.append(q)
        # revenue follows the event date, not the creation date
        if status in WON_STATUSES and event_day is not None and event_day.year == today.year:
            revenue[event_day.month - 1] += float(q.get("total", 0) or 0)

    upcoming.sort(key=lambda pair: pair[0])
    won = sum(1 for q in this_month if q.get("status") in WON_STATUSES)

    return DashboardStats(
        expiring_quotes=expiring,
        upcoming_events=[q for _, q in upcoming[:UPCOMING_LIMIT]],
        monthly_quotes=len(this_month),
        monthly_value=round2(sum(float(q.get("total", 0) or 0) for q in this_month)),
        conversion_rate=(won / len(this_month) * 100) if this_month else 0.0,
        monthly_revenue=[(label, round2(value)) for label, value in zip(MONTH_LABELS, revenue)],
    )
