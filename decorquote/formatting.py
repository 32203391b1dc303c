"""Display helpers for the single supported locale (it-IT, EUR)."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

_TWO_PLACES = Decimal("0.01")


def parse_day(value: Optional[str]) -> Optional[date]:
    """Calendar day of an ISO date or timestamp; None when blank or unparseable."""
    if not value:
        return None
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_currency(value: Any) -> str:
    """``1234.5`` -> ``1.234,50 €``."""
    amount = Decimal(str(value or 0)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    formatted = f"{amount:,.2f}".replace(",", "\x00").replace(".", ",").replace("\x00", ".")
    return f"{formatted} €"


def format_date(value: Optional[str]) -> str:
    day = parse_day(value)
    return day.strftime("%d/%m/%Y") if day else ""
