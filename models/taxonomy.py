"""Canonical taxonomy definitions for garments.

This module centralises the closed label sets used by the engine (roles,
seasons, occasions, formality levels, subcategories) together with the
synonym tables that translate free-form classifier labels into them. Helper
functions keep lookups case-insensitive and consistent across the normalizer,
the scorer and the request schemas.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Type, TypeVar

E = TypeVar("E", bound=Enum)


class GarmentRole(str, Enum):
    OUTERWEAR = "outerwear"
    TOP = "top"
    BOTTOM = "bottom"
    FOOTWEAR = "footwear"
    ACCESSORY = "accessory"


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"
    ALL_SEASONS = "all_seasons"


class Occasion(str, Enum):
    CASUAL = "casual"
    BUSINESS = "business"
    FORMAL = "formal"
    ATHLETIC = "athletic"
    PARTY = "party"
    DATE = "date"
    TRAVEL = "travel"
    LOUNGEWEAR = "loungewear"


class FormalityLevel(str, Enum):
    ATHLETIC = "athletic"
    CASUAL = "casual"
    BUSINESS = "business"
    FORMAL = "formal"


class Subcategory(str, Enum):
    TEE_SHIRT = "tee_shirt"
    BUTTON_UP = "button_up"
    POLO_SHIRT = "polo_shirt"
    TANK_TOP = "tank_top"
    SWEATSHIRT = "sweatshirt"
    BLOUSE = "blouse"
    JEANS = "jeans"
    PANTS = "pants"
    SHORTS = "shorts"
    SKIRT = "skirt"
    LEGGINGS = "leggings"
    DRESS_PANTS = "dress_pants"
    COAT = "coat"
    JACKET = "jacket"
    BLAZER = "blazer"
    HOODIE = "hoodie"
    SWEATER = "sweater"
    CARDIGAN = "cardigan"
    SNEAKERS = "sneakers"
    DRESS_SHOES = "dress_shoes"
    BOOTS = "boots"
    SANDALS = "sandals"
    HEELS = "heels"
    FLATS = "flats"
    BELT = "belt"
    HAT = "hat"
    BAG = "bag"
    JEWELRY = "jewelry"
    SCARF = "scarf"
    WATCH = "watch"


PAIRING_TOP_ROLES = (GarmentRole.TOP, GarmentRole.OUTERWEAR)
PAIRING_BOTTOM_ROLES = (GarmentRole.BOTTOM,)

DEFAULT_SEASONS: Tuple[Season, ...] = (Season.ALL_SEASONS,)
DEFAULT_OCCASIONS: Tuple[Occasion, ...] = (Occasion.CASUAL,)

ROLE_MAP: Dict[str, GarmentRole] = {
    "outerwear": GarmentRole.OUTERWEAR,
    "tops": GarmentRole.TOP,
    "top": GarmentRole.TOP,
    "bottoms": GarmentRole.BOTTOM,
    "bottom": GarmentRole.BOTTOM,
    "footwear": GarmentRole.FOOTWEAR,
    "shoes": GarmentRole.FOOTWEAR,
    "accessories": GarmentRole.ACCESSORY,
    "accessory": GarmentRole.ACCESSORY,
}

SUBCATEGORY_MAP: Dict[str, Subcategory] = {
    "t-shirt": Subcategory.TEE_SHIRT,
    "t-shirts": Subcategory.TEE_SHIRT,
    "tshirt": Subcategory.TEE_SHIRT,
    "tee": Subcategory.TEE_SHIRT,
    "tee shirt": Subcategory.TEE_SHIRT,
    "tee_shirt": Subcategory.TEE_SHIRT,
    "tee_shirts": Subcategory.TEE_SHIRT,
    "button-up shirt": Subcategory.BUTTON_UP,
    "button up shirt": Subcategory.BUTTON_UP,
    "button_up": Subcategory.BUTTON_UP,
    "button_ups": Subcategory.BUTTON_UP,
    "dress shirt": Subcategory.BUTTON_UP,
    "polo": Subcategory.POLO_SHIRT,
    "polo shirt": Subcategory.POLO_SHIRT,
    "polo_shirts": Subcategory.POLO_SHIRT,
    "tank top": Subcategory.TANK_TOP,
    "tank_tops": Subcategory.TANK_TOP,
    "sweatshirt": Subcategory.SWEATSHIRT,
    "sweatshirts": Subcategory.SWEATSHIRT,
    "blouse": Subcategory.BLOUSE,
    "blouses": Subcategory.BLOUSE,
    "jeans": Subcategory.JEANS,
    "pants": Subcategory.PANTS,
    "trousers": Subcategory.PANTS,
    "chinos": Subcategory.PANTS,
    "shorts": Subcategory.SHORTS,
    "swim shorts": Subcategory.SHORTS,
    "athletic shorts": Subcategory.SHORTS,
    "skirt": Subcategory.SKIRT,
    "skirts": Subcategory.SKIRT,
    "leggings": Subcategory.LEGGINGS,
    "dress pants": Subcategory.DRESS_PANTS,
    "dress_pants": Subcategory.DRESS_PANTS,
    "coat": Subcategory.COAT,
    "coats": Subcategory.COAT,
    "jacket": Subcategory.JACKET,
    "jackets": Subcategory.JACKET,
    "blazer": Subcategory.BLAZER,
    "blazers": Subcategory.BLAZER,
    "hoodie": Subcategory.HOODIE,
    "hoodies": Subcategory.HOODIE,
    "sweater": Subcategory.SWEATER,
    "sweaters": Subcategory.SWEATER,
    "cardigan": Subcategory.CARDIGAN,
    "cardigans": Subcategory.CARDIGAN,
    "sneakers": Subcategory.SNEAKERS,
    "dress shoes": Subcategory.DRESS_SHOES,
    "dress_shoes": Subcategory.DRESS_SHOES,
    "boots": Subcategory.BOOTS,
    "sandals": Subcategory.SANDALS,
    "heels": Subcategory.HEELS,
    "flats": Subcategory.FLATS,
    "belt": Subcategory.BELT,
    "belts": Subcategory.BELT,
    "hat": Subcategory.HAT,
    "hats": Subcategory.HAT,
    "bag": Subcategory.BAG,
    "bags": Subcategory.BAG,
    "jewelry": Subcategory.JEWELRY,
    "jewellery": Subcategory.JEWELRY,
    "scarf": Subcategory.SCARF,
    "scarves": Subcategory.SCARF,
    "watch": Subcategory.WATCH,
    "watches": Subcategory.WATCH,
}

SEASON_MAP: Dict[str, Season] = {
    "spring": Season.SPRING,
    "summer": Season.SUMMER,
    "fall": Season.FALL,
    "autumn": Season.FALL,
    "winter": Season.WINTER,
    "all_seasons": Season.ALL_SEASONS,
    "all seasons": Season.ALL_SEASONS,
    "all-season": Season.ALL_SEASONS,
    "year-round": Season.ALL_SEASONS,
}

OCCASION_MAP: Dict[str, Occasion] = {
    "casual": Occasion.CASUAL,
    "everyday": Occasion.CASUAL,
    "work": Occasion.BUSINESS,
    "office": Occasion.BUSINESS,
    "business": Occasion.BUSINESS,
    "formal": Occasion.FORMAL,
    "party": Occasion.PARTY,
    "sports": Occasion.ATHLETIC,
    "athletic": Occasion.ATHLETIC,
    "gym": Occasion.ATHLETIC,
    "date": Occasion.DATE,
    "travel": Occasion.TRAVEL,
    "lounge": Occasion.LOUNGEWEAR,
    "loungewear": Occasion.LOUNGEWEAR,
    "lounge wear": Occasion.LOUNGEWEAR,
}

FORMALITY_MAP: Dict[str, FormalityLevel] = {
    "athletic": FormalityLevel.ATHLETIC,
    "sporty": FormalityLevel.ATHLETIC,
    "casual": FormalityLevel.CASUAL,
    "business": FormalityLevel.BUSINESS,
    "smart casual": FormalityLevel.BUSINESS,
    "formal": FormalityLevel.FORMAL,
}

# Numeric formality implied by the classifier's coarse label.
FORMALITY_LEVEL_SCORES: Dict[FormalityLevel, int] = {
    FormalityLevel.ATHLETIC: 1,
    FormalityLevel.CASUAL: 3,
    FormalityLevel.BUSINESS: 7,
    FormalityLevel.FORMAL: 9,
}

# Inclusive [min, max] formality band expected for an occasion.
OCCASION_FORMALITY_BANDS: Dict[Occasion, Tuple[int, int]] = {
    Occasion.CASUAL: (1, 4),
    Occasion.BUSINESS: (6, 9),
    Occasion.FORMAL: (8, 10),
    Occasion.ATHLETIC: (1, 2),
    Occasion.DATE: (4, 8),
    Occasion.PARTY: (3, 9),
}


def _normalize_key(value: object) -> str:
    """Normalise a free-form label for table lookups."""

    return str(value).strip().lower()


def lookup_label(value: object, table: Dict[str, E]) -> Optional[E]:
    """Return the enum member for ``value`` or ``None`` when it is unmapped."""

    if value is None:
        return None
    if isinstance(value, Enum) and value in table.values():
        return value  # type: ignore[return-value]
    return table.get(_normalize_key(value))


def map_labels(values: Iterable[object], table: Dict[str, E], default: Iterable[E]) -> List[E]:
    """Map labels element-wise, dropping unknowns and duplicates.

    Falls back to ``default`` when nothing survives the mapping.
    """

    mapped: List[E] = []
    for value in values:
        member = lookup_label(value, table)
        if member is not None and member not in mapped:
            mapped.append(member)
    return mapped or list(default)


def coerce_enum(value: object, enum_type: Type[E], table: Dict[str, E]) -> Optional[E]:
    """Accept an enum member, its value or a known synonym."""

    if isinstance(value, enum_type):
        return value
    member = lookup_label(value, table)
    if member is not None:
        return member
    try:
        return enum_type(_normalize_key(value))
    except ValueError:
        return None


__all__ = [
    "GarmentRole",
    "Season",
    "Occasion",
    "FormalityLevel",
    "Subcategory",
    "PAIRING_TOP_ROLES",
    "PAIRING_BOTTOM_ROLES",
    "DEFAULT_SEASONS",
    "DEFAULT_OCCASIONS",
    "ROLE_MAP",
    "SUBCATEGORY_MAP",
    "SEASON_MAP",
    "OCCASION_MAP",
    "FORMALITY_MAP",
    "FORMALITY_LEVEL_SCORES",
    "OCCASION_FORMALITY_BANDS",
    "lookup_label",
    "map_labels",
    "coerce_enum",
]
