# decorquote/catalog.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from .records import CATEGORIES, SEEDED, SERVICES
from .store import DocumentStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------
def list_categories(store: DocumentStore) -> List[Dict[str, Any]]:
    """Categories by sort_order; sorted() is stable so ties keep stored order."""
    return sorted(store.list(CATEGORIES), key=lambda c: c.get("sort_order", 0))


def create_category(store: DocumentStore, fields: Mapping[str, Any]) -> Dict[str, Any]:
    return store.create(CATEGORIES, fields)


def update_category(store: DocumentStore, category_id: int, fields: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    return store.update(CATEGORIES, category_id, fields)


def delete_category(store: DocumentStore, category_id: int) -> bool:
    # services keep their category_id and show a blank category name
    return store.delete(CATEGORIES, category_id)


# ---------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------
def list_services(store: DocumentStore) -> List[Dict[str, Any]]:
    names = {c["id"]: c.get("name", "") for c in store.list(CATEGORIES)}
    return [{**s, "category_name": names.get(s.get("category_id"), "")} for s in store.list(SERVICES)]


def services_by_category(store: DocumentStore, category_id: int) -> List[Dict[str, Any]]:
    rows = [s for s in list_services(store) if s.get("category_id") == category_id]
    return sorted(rows, key=lambda s: s.get("sort_order", 0))


def create_service(store: DocumentStore, fields: Mapping[str, Any]) -> Dict[str, Any]:
    return store.create(SERVICES, fields)


def update_service(store: DocumentStore, service_id: int, fields: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    return store.update(SERVICES, service_id, fields)


def delete_service(store: DocumentStore, service_id: int) -> bool:
    return store.delete(SERVICES, service_id)


# ---------------------------------------------------------------------
# Demo catalogue
# ---------------------------------------------------------------------
# (category, [(name, description, base_price, unit, transport_included), ...])
DEMO_CATALOG = [
    ("Church decoration", [
        ("Large broken arch (outdoor)", "Large broken-arch structure with floral arrangements for the church entrance", 450, "piece", False),
        ("Small broken arch (indoor)", "Small broken-arch structure for inside the church", 350, "piece", False),
        ("Celebration table arrangement", "Floral arrangement for the ceremony table", 120, "piece", False),
        ("Balustrade garlands (x2)", "Pair of floral garlands for the church balustrades", 280, "pair", False),
        ("Crucifix arrangement", "Decorative floral arrangement for the crucifix", 90, "piece", False),
        ("High altar arrangements (x2)", "Pair of floral arrangements for the high altar", 320, "pair", False),
        ("Boutonnieres", "Floral boutonniere for the jacket", 15, "piece", False),
        ("Bridal bouquet", "Bridal bouquet with selected flowers", 180, "piece", False),
        ("Toss bouquet", "Bouquet for the bride's toss", 80, "piece", False),
        ("Rice corner with props", "Complete rice corner with baskets and props", 150, "piece", False),
        ("Car flowers with ribbons", "Floral decoration for the couple's car with matching ribbons", 120, "piece", False),
    ]),
    ("Venue decoration", [
        ("Centrepiece with candelabra on riser", "Elegant centrepiece with candelabra and arrangement on a riser", 45, "table", False),
        ("Custom seating chart", "Seating chart with custom graphics and floral decoration", 200, "piece", False),
        ("Fabric runner for aperitif tables", "Decorative fabric runner for the aperitif table", 25, "piece", False),
        ("Complete sweetheart table", "Full sweetheart table set-up with floral arrangements", 350, "piece", False),
        ("Complete cake table", "Full wedding cake table set-up", 200, "piece", False),
        ("Sugared almond table with props", "Sugared almond table with bags, ribbons and props", 250, "piece", False),
        ("Rum & cigar corner with props", "Rum and cigar corner with decoration and props", 300, "piece", False),
        ("Favour display", "Arrangement and display of wedding favours", 100, "service", False),
    ]),
    ("Bride's home", [
        ("Main entrance arrangements (on frame)", "Decorative floral arrangements on a frame for the entrance", 250, "piece", False),
        ("Complete dessert table", "Dessert table set-up with floral decoration", 200, "piece", False),
        ("Staircase with gypsophila and ribbons", "Staircase decoration with gypsophila bunches and ribbons", 180, "piece", False),
    ]),
    ("Groom's home", [
        ("Main entrance arrangements", "Floral arrangements for the groom's entrance", 180, "piece", False),
        ("Complete dessert table", "Dessert table set-up at the groom's home", 180, "piece", False),
    ]),
    ("Extra services", [
        ("Wedding coordinator", "Coordination from contract signature to the day of the event", 1500, "event", True),
        ("Transport and set-up", "Transport of materials and installation", 400, "service", True),
        ("Post-event dismantling", "Dismantling and collection of materials after the event", 250, "service", True),
    ]),
    ("Birthday packages", [
        ("Cake table decoration", "Full cake table decoration for a birthday", 150, "piece", False),
        ("Balloons and structures", "Balloon arches and structures", 200, "service", False),
        ("Themed centrepieces", "Themed centrepiece for a birthday party", 30, "table", False),
        ("Custom backdrop", "Themed custom photo backdrop", 350, "piece", False),
    ]),
    ("Baptism / Communion packages", [
        ("Church decoration (small)", "Reduced-size floral church decoration", 200, "service", False),
        ("Children's centrepiece", "Delicate centrepiece for a baptism or communion", 25, "table", False),
        ("Complete sugared almond table", "Sugared almond table with props and bags", 200, "service", False),
    ]),
]


def seed_catalog(store: DocumentStore) -> bool:
    """Insert the demo catalogue once. Returns False when already seeded."""
    if store.read(SEEDED):
        return False
    count = 0
    for cat_order, (cat_name, services) in enumerate(DEMO_CATALOG, start=1):
        cat = create_category(store, {"name": cat_name, "sort_order": cat_order})
        for svc_order, (name, desc, price, unit, transport) in enumerate(services, start=1):
            create_service(store, {
                "category_id": cat["id"],
                "name": name,
                "description": desc,
                "base_price": price,
                "unit": unit,
                "transport_included": transport,
                "image_path": None,
                "sort_order": svc_order,
            })
            count += 1
    store.write(SEEDED, True)
    logger.info("Seeded demo catalogue: %d categories, %d services", len(DEMO_CATALOG), count)
    return True
