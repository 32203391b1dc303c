# decorquote/records.py
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type

from sqlmodel import SQLModel, Field


# ---------------------------
# Enumerations
# ---------------------------

class ClientStatus(str, Enum):
    PROSPECT = "prospect"
    ACTIVE = "active"
    CONFIRMED = "confirmed"
    ARCHIVED = "archived"


class EventType(str, Enum):
    WEDDING = "wedding"
    BIRTHDAY = "birthday"
    BAPTISM = "baptism"
    COMMUNION = "communion"
    OTHER = "other"


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    EXPIRED = "expired"
    COMPLETED = "completed"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class TaxRegime(str, Enum):
    FLAT_RATE = "flat_rate"  # regime forfettario: no VAT on quotes
    ORDINARY = "ordinary"


class PdfTemplate(str, Enum):
    ELEGANT = "elegant"
    MINIMAL = "minimal"


class Unit(str, Enum):
    PIECE = "piece"
    PAIR = "pair"
    TABLE = "table"
    METRE = "metre"
    SERVICE = "service"
    EVENT = "event"


class CeremonyType(str, Enum):
    RELIGIOUS = "religious"
    CIVIL = "civil"
    SYMBOLIC = "symbolic"


EVENT_TYPE_LABELS = {
    EventType.WEDDING: "Wedding",
    EventType.BIRTHDAY: "Birthday",
    EventType.BAPTISM: "Baptism",
    EventType.COMMUNION: "Communion",
    EventType.OTHER: "Other",
}

QUOTE_STATUS_LABELS = {
    QuoteStatus.DRAFT: "Draft",
    QuoteStatus.SENT: "Sent",
    QuoteStatus.CONFIRMED: "Confirmed",
    QuoteStatus.REJECTED: "Rejected",
    QuoteStatus.EXPIRED: "Expired",
    QuoteStatus.COMPLETED: "Completed",
}

# Statuses that count as won business on the dashboard.
WON_STATUSES = frozenset({QuoteStatus.CONFIRMED.value, QuoteStatus.COMPLETED.value})


# ---------------------------
# Parties & catalogue
# ---------------------------

class Client(SQLModel):
    id: Optional[int] = Field(default=None, ge=1)
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    event_type: EventType = EventType.WEDDING
    notes: str = ""
    status: ClientStatus = ClientStatus.PROSPECT
    created_at: str = ""
    updated_at: str = ""


class ServiceCategory(SQLModel):
    id: Optional[int] = Field(default=None, ge=1)
    name: str
    sort_order: int = 0


class Service(SQLModel):
    id: Optional[int] = Field(default=None, ge=1)
    category_id: int
    name: str
    description: str = ""
    base_price: float = Field(default=0.0, ge=0)
    unit: Unit = Unit.PIECE
    transport_included: bool = False
    image_path: Optional[str] = None
    sort_order: int = 0


# ---------------------------
# Quotes and the rows they own
# ---------------------------

class Quote(SQLModel):
    id: Optional[int] = Field(default=None, ge=1)
    number: str
    client_id: int
    event_type: EventType = EventType.WEDDING
    event_date: str = ""
    event_location: str = ""
    guest_count: int = Field(default=0, ge=0)
    table_count: int = Field(default=0, ge=0)
    expiry_date: str = ""
    internal_notes: str = ""
    client_notes: str = ""
    conditions: str = ""
    status: QuoteStatus = QuoteStatus.DRAFT

    # snapshot of the last computed totals; see decorquote.pricing
    subtotal: float = 0.0
    discount_type: Optional[DiscountType] = None
    discount_value: float = 0.0
    discount_note: str = ""
    tax_rate: float = 0.0
    total: float = 0.0

    confirmed_date: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""


class QuoteItem(SQLModel):
    id: Optional[int] = Field(default=None, ge=1)
    quote_id: int
    service_id: Optional[int] = None  # None for custom rows
    section: str = ""
    description: str = ""
    quantity: int = Field(default=1, ge=1)
    unit_price: float = Field(default=0.0, ge=0)
    amount: float = 0.0
    is_gift: bool = False
    sort_order: int = 0


class WeddingDetails(SQLModel):
    """
    Lists (palette colours, flowers, greenery, areas) are kept as encoded
    strings; decode them with decorquote.wedding.decode_selections.
    """
    id: Optional[int] = Field(default=None, ge=1)
    quote_id: int
    bride_name: str = ""
    groom_name: str = ""
    ceremony_type: CeremonyType = CeremonyType.RELIGIOUS
    church_name: str = ""
    reception_name: str = ""
    has_coordinator: bool = False
    palette: str = ""
    palette_colors: str = ""
    style: str = ""
    flowers: str = ""
    greenery: str = ""
    areas: str = ""


class PaymentPlan(SQLModel):
    id: Optional[int] = Field(default=None, ge=1)
    quote_id: int
    description: str = ""
    percentage: float = Field(default=0.0, ge=0, le=100)
    amount: float = 0.0
    due_date: str = ""
    sort_order: int = 0


# ---------------------------
# Company settings (singleton)
# ---------------------------

class CompanySettings(SQLModel):
    company_name: str = "Stella Filella Wedding & Events"
    address: str = ""
    phone: str = ""
    email: str = ""
    vat_number: str = ""
    logo_path: str = ""
    tax_regime: TaxRegime = TaxRegime.FLAT_RATE
    vat_rate: float = Field(default=22.0, ge=0)
    default_template: PdfTemplate = PdfTemplate.ELEGANT
    default_payment_deposit: float = Field(default=30.0, ge=0, le=100)
    default_payment_second: float = Field(default=30.0, ge=0, le=100)
    default_payment_balance: float = Field(default=40.0, ge=0, le=100)
    default_notes: str = (
        "Any damage to the props will be charged at current market cost."
    )
    default_conditions: str = (
        "This quote is valid for 30 days from the date of issue. Prices are "
        "shown excluding VAT unless stated otherwise. Changes requested after "
        "confirmation may lead to price adjustments."
    )
    quote_prefix: str = "PRV"
    quote_start_number: int = Field(default=1, ge=1)


# ---------------------------
# Collection registry
# ---------------------------

CLIENTS = "clients"
CATEGORIES = "categories"
SERVICES = "services"
QUOTES = "quotes"
QUOTE_ITEMS = "quote_items"
WEDDING_DETAILS = "wedding_details"
PAYMENT_PLANS = "payment_plans"
SETTINGS = "settings"
SEEDED = "seeded"

SCHEMAS: Dict[str, Type[SQLModel]] = {
    CLIENTS: Client,
    CATEGORIES: ServiceCategory,
    SERVICES: Service,
    QUOTES: Quote,
    QUOTE_ITEMS: QuoteItem,
    WEDDING_DETAILS: WeddingDetails,
    PAYMENT_PLANS: PaymentPlan,
}

# Everything a backup file carries, in the order it is written.
EXPORT_KEYS = (
    CLIENTS, CATEGORIES, SERVICES, QUOTES,
    QUOTE_ITEMS, WEDDING_DETAILS, PAYMENT_PLANS, SETTINGS,
)

# Quote children removed together with their quote.
QUOTE_CHILDREN = (QUOTE_ITEMS, WEDDING_DETAILS, PAYMENT_PLANS)


def has_timestamps(collection: str) -> bool:
    schema = SCHEMAS.get(collection)
    return schema is not None and "created_at" in schema.model_fields


def validate_record(collection: str, record: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check a record against its collection schema and return it as a plain,
    JSON-ready dict with every default filled in. Unknown collections pass
    through unchanged.
    """
    schema = SCHEMAS.get(collection)
    if schema is None:
        return dict(record)
    return schema.model_validate(dict(record)).model_dump(mode="json")
