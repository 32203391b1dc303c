from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .records import CompanySettings, DiscountType, TaxRegime

_TWO_PLACES = Decimal("0.01")


def round2(value: Any) -> float:
    """Round to cents, halves away from zero (2.345 -> 2.35, -2.345 -> -2.35)."""
    return float(Decimal(str(value or 0)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def item_amount(quantity: int, unit_price: float) -> float:
    return round2(int(quantity) * float(unit_price))


def compute_subtotal(items: Iterable[Mapping[str, Any]]) -> float:
    # gifts keep their amount for display but are never charged
    return round2(sum(float(it.get("amount", 0) or 0) for it in items if not it.get("is_gift")))


def discount_amount(subtotal: float, discount_type: Optional[str], discount_value: float) -> float:
    if not discount_type or discount_value is None or discount_value <= 0:
        return 0.0
    if DiscountType(discount_type) is DiscountType.PERCENTAGE:
        return round2(subtotal * discount_value / 100)
    # fixed discounts are not clamped to the subtotal
    return round2(discount_value)


def effective_tax_rate(settings: CompanySettings) -> float:
    if TaxRegime(settings.tax_regime) is TaxRegime.FLAT_RATE:
        return 0.0
    return float(settings.vat_rate)


def compute_totals(items: Iterable[Mapping[str, Any]],
                   discount_type: Optional[str],
                   discount_value: float,
                   settings: CompanySettings) -> Dict[str, float]:
    sub = compute_subtotal(items)
    disc = discount_amount(sub, discount_type, discount_value)
    after = round2(sub - disc)
    tax = round2(after * effective_tax_rate(settings) / 100)
    total = round2(after + tax)
    return {
        "subtotal": sub,
        "discount_amount": disc,
        "after_discount": after,
        "tax_amount": tax,
        "total": total,
    }


# ---- payment plans ----------------------------------------------------------

def payment_amount(total: float, percentage: float) -> float:
    return round2(total * percentage / 100)


def recompute_payment_amounts(plans: Iterable[Mapping[str, Any]], total: float) -> List[Dict[str, Any]]:
    """Every row's amount follows the (new) total; percentages are left alone."""
    return [{**p, "amount": payment_amount(total, float(p.get("percentage", 0) or 0))} for p in plans]


def set_payment_percentage(plans: Iterable[Mapping[str, Any]], index: int,
                           percentage: float, total: float) -> List[Dict[str, Any]]:
    """Change one row's percentage and recompute that row only."""
    out = [dict(p) for p in plans]
    out[index]["percentage"] = percentage
    out[index]["amount"] = payment_amount(total, percentage)
    return out


def percentage_sum(plans: Iterable[Mapping[str, Any]]) -> float:
    return round2(sum(float(p.get("percentage", 0) or 0) for p in plans))


def payment_split_warning(plans: Iterable[Mapping[str, Any]]) -> Optional[str]:
    """Non-blocking check used by the quote editor."""
    plans = list(plans)
    if not plans:
        return None
    observed = percentage_sum(plans)
    if observed == 100:
        return None
    return f"Payment percentages add up to {observed:g}% instead of 100%"


def default_payment_plans(settings: CompanySettings, total: float = 0.0) -> List[Dict[str, Any]]:
    rows = [
        ("Deposit on signature", settings.default_payment_deposit),
        ("Second instalment", settings.default_payment_second),
        ("Balance", settings.default_payment_balance),
    ]
    return [
        {"description": desc, "percentage": pct, "amount": payment_amount(total, pct), "due_date": ""}
        for desc, pct in rows
    ]
