# decorquote/wedding.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

# ---- lookups ----------------------------------------------------------------

WEDDING_PALETTES = [
    {"name": "Ivory & White", "colors": ["#FFFFF0", "#FFFFFF", "#F5F5DC"]},
    {"name": "Blush & Gold", "colors": ["#FFB6C1", "#FFD700", "#FFF8DC"]},
    {"name": "Sage Green & Champagne", "colors": ["#9CAF88", "#F7E7CE", "#E8DCC8"]},
    {"name": "Burgundy & Grey", "colors": ["#722F37", "#808080", "#D3D3D3"]},
    {"name": "Navy & Gold", "colors": ["#000080", "#FFD700", "#FFFFF0"]},
    {"name": "Romantic All White", "colors": ["#FFFFFF", "#FFFAFA", "#FFF5EE"]},
    {"name": "Natural Boho", "colors": ["#C4A484", "#8B7355", "#F5DEB3"]},
    {"name": "Modern Black & White", "colors": ["#000000", "#FFFFFF", "#C0C0C0"]},
]

WEDDING_STYLES = [
    {"id": "rustic", "name": "Rustic / Boho"},
    {"id": "romantic", "name": "Romantic / Provencal"},
    {"id": "luxury", "name": "Luxury / Glamour"},
    {"id": "garden", "name": "Garden Party"},
    {"id": "classic", "name": "Classic / Elegant"},
    {"id": "seaside", "name": "Seaside / Mediterranean"},
    {"id": "autumn", "name": "Autumn / Warm"},
    {"id": "winter", "name": "Winter / Minimalist"},
]

FLOWERS = [
    {"id": "rose-vendela", "name": "Vendela Rose", "category": "Roses"},
    {"id": "rose-colombiana", "name": "Colombian Rose", "category": "Roses"},
    {"id": "rose-avalanche", "name": "Avalanche Rose", "category": "Roses"},
    {"id": "rose-explorer", "name": "Explorer Rose", "category": "Roses"},
    {"id": "hydrangea-white", "name": "White Hydrangea", "category": "Hydrangeas"},
    {"id": "hydrangea-lime", "name": "Lime Green Hydrangea", "category": "Hydrangeas"},
    {"id": "hydrangea-pink", "name": "Pink Hydrangea", "category": "Hydrangeas"},
    {"id": "hydrangea-blue", "name": "Blue Hydrangea", "category": "Hydrangeas"},
    {"id": "peony", "name": "Peony", "category": "Main flowers"},
    {"id": "ranunculus", "name": "Ranunculus", "category": "Main flowers"},
    {"id": "tulip", "name": "Tulip", "category": "Main flowers"},
    {"id": "lilium", "name": "Lilium", "category": "Main flowers"},
    {"id": "iris", "name": "Iris", "category": "Main flowers"},
    {"id": "gypsophila", "name": "Gypsophila", "category": "Main flowers"},
    {"id": "lisianthus", "name": "Lisianthus", "category": "Main flowers"},
    {"id": "freesia", "name": "Freesia", "category": "Main flowers"},
    {"id": "gerbera", "name": "Gerbera", "category": "Main flowers"},
    {"id": "dahlia", "name": "Dahlia", "category": "Main flowers"},
    {"id": "anemone", "name": "Anemone", "category": "Main flowers"},
    {"id": "calla", "name": "Calla", "category": "Main flowers"},
    {"id": "wax-flower", "name": "Wax Flower", "category": "Main flowers"},
]

GREENERY = [
    {"id": "eucalyptus", "name": "Eucalyptus"},
    {"id": "ruscus", "name": "Ruscus"},
    {"id": "asparagus-fern", "name": "Asparagus Fern"},
    {"id": "hedera", "name": "Hedera"},
    {"id": "smilax", "name": "Smilax"},
    {"id": "salal", "name": "Salal"},
    {"id": "fern", "name": "Fern"},
]

WEDDING_AREAS = [
    {"id": "church", "name": "Church / Civil ceremony"},
    {"id": "venue", "name": "Reception venue"},
    {"id": "bride-home", "name": "Bride's home"},
    {"id": "groom-home", "name": "Groom's home"},
    {"id": "car", "name": "Couple's car"},
    {"id": "welcome", "name": "Welcome table"},
    {"id": "photobooth", "name": "Floral photo booth"},
]

LIST_FIELDS = ("palette_colors", "flowers", "greenery", "areas")


# ---- encoded list fields ----------------------------------------------------

def decode_list(raw: Optional[str]) -> List[str]:
    """
    Decode a stored list field.

    Tries a JSON array first, then a comma-separated string; anything that
    yields no usable entries becomes an empty list. Never raises.
    """
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError:
        parsed = None
    if isinstance(parsed, list):
        return [str(v).strip() for v in parsed if v is not None and str(v).strip()]
    if parsed is not None and not isinstance(parsed, str):
        logger.debug("Encoded list field is JSON but not an array: %r", raw)
    return [part.strip() for part in str(raw).split(",") if part.strip()]


def encode_list(values: Sequence[str]) -> str:
    return json.dumps([v for v in values if v], ensure_ascii=False)


def resolve_names(ids: Sequence[str], lookup: Sequence[Mapping[str, str]]) -> List[str]:
    """Map ids to display names; unknown ids are shown as-is."""
    names = {entry["id"]: entry["name"] for entry in lookup}
    return [names.get(i, i) for i in ids if i]


@dataclass
class WeddingSelections:
    palette_colors: List[str] = field(default_factory=list)
    flowers: List[str] = field(default_factory=list)
    greenery: List[str] = field(default_factory=list)
    areas: List[str] = field(default_factory=list)

    def encoded(self) -> Dict[str, str]:
        return {name: encode_list(getattr(self, name)) for name in LIST_FIELDS}


def decode_selections(details: Mapping[str, Any]) -> WeddingSelections:
    return WeddingSelections(**{name: decode_list(details.get(name)) for name in LIST_FIELDS})
