"""Garment, matching context and pairing data models."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from models.color_theory import normalize_hex, validate_hex_color
from models.taxonomy import (
    DEFAULT_OCCASIONS,
    DEFAULT_SEASONS,
    FORMALITY_MAP,
    OCCASION_MAP,
    ROLE_MAP,
    SEASON_MAP,
    SUBCATEGORY_MAP,
    FormalityLevel,
    GarmentRole,
    Occasion,
    Season,
    Subcategory,
    coerce_enum,
    lookup_label,
    map_labels,
)

logger = logging.getLogger(__name__)


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def clamp_formality(value: Any) -> Optional[int]:
    """Round and clamp a formality score into the 1-10 scale."""

    number = _as_float(value)
    if number is None or math.isinf(number):
        return None
    return max(1, min(10, int(round(number))))


def _normalise_subcategory(value: Any) -> Union[Subcategory, str, None]:
    if value is None or not str(value).strip():
        return None
    member = lookup_label(value, SUBCATEGORY_MAP)
    # Unknown subcategories stay verbatim so callers can still display them.
    return member if member is not None else str(value).strip()


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


@dataclass
class Garment:
    """A single wardrobe item with canonical, validated attributes."""

    role: GarmentRole = GarmentRole.TOP
    color_primary: str = "#000000"
    color_secondary: Optional[str] = None
    material: Optional[str] = None
    seasons: List[Season] = field(default_factory=lambda: list(DEFAULT_SEASONS))
    occasions: List[Occasion] = field(default_factory=lambda: list(DEFAULT_OCCASIONS))
    formality_score: Optional[int] = None
    ai_confidence: Optional[float] = None
    item_id: Optional[str] = None
    name: str = ""
    description: str = ""
    subcategory: Union[Subcategory, str, None] = None
    formality: Optional[FormalityLevel] = None
    style_tags: List[str] = field(default_factory=list)
    material_properties: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.role = coerce_enum(self.role, GarmentRole, ROLE_MAP) or GarmentRole.TOP
        self.color_primary = normalize_hex(self.color_primary)
        self.color_secondary = validate_hex_color(self.color_secondary)
        material = str(self.material).strip().lower() if self.material is not None else ""
        self.material = material or None
        self.seasons = map_labels(_ensure_list(self.seasons), SEASON_MAP, DEFAULT_SEASONS)
        self.occasions = map_labels(_ensure_list(self.occasions), OCCASION_MAP, DEFAULT_OCCASIONS)
        self.formality_score = clamp_formality(self.formality_score)
        confidence = _as_float(self.ai_confidence)
        self.ai_confidence = clamp_unit(confidence) if confidence is not None else None
        self.subcategory = _normalise_subcategory(self.subcategory)
        if self.formality is not None:
            self.formality = coerce_enum(self.formality, FormalityLevel, FORMALITY_MAP)
        self.name = str(self.name or "")
        self.description = str(self.description or "")
        self.style_tags = [str(tag) for tag in _ensure_list(self.style_tags) if str(tag).strip()]
        self.material_properties = [str(p) for p in _ensure_list(self.material_properties) if str(p).strip()]

    @property
    def label(self) -> str:
        return self.name or self.item_id or self.description or self.role.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "description": self.description,
            "role": self.role.value,
            "subcategory": _enum_value(self.subcategory),
            "color_primary": self.color_primary,
            "color_secondary": self.color_secondary,
            "material": self.material,
            "seasons": [season.value for season in self.seasons],
            "occasions": [occasion.value for occasion in self.occasions],
            "formality": _enum_value(self.formality),
            "formality_score": self.formality_score,
            "ai_confidence": self.ai_confidence,
            "style_tags": list(self.style_tags),
            "material_properties": list(self.material_properties),
        }


@dataclass(frozen=True)
class WeatherContext:
    """Weather constraints for one recommendation request."""

    temperature_f: float
    description: str = ""


def _normalise_colors(values: Iterable[Any]) -> List[str]:
    colors: List[str] = []
    for value in values:
        color = validate_hex_color(value)
        if color and color not in colors:
            colors.append(color)
    return colors


@dataclass
class MatchingContext:
    """Request-time constraints supplied to the recommendation generator."""

    occasion: Optional[Occasion] = None
    weather: Optional[WeatherContext] = None
    formality_preference: Optional[int] = None
    color_preferences: List[str] = field(default_factory=list)
    avoid_colors: List[str] = field(default_factory=list)
    unrecognised_occasion: Optional[str] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.occasion is not None:
            occasion = coerce_enum(self.occasion, Occasion, OCCASION_MAP)
            if occasion is None:
                self.unrecognised_occasion = str(self.occasion)
                logger.warning("Unrecognised occasion, scoring without one", extra={"occasion": self.unrecognised_occasion})
            self.occasion = occasion
        self.formality_preference = clamp_formality(self.formality_preference)
        self.color_preferences = _normalise_colors(_ensure_list(self.color_preferences))
        self.avoid_colors = _normalise_colors(_ensure_list(self.avoid_colors))


@dataclass
class ScoredPairing:
    """One candidate (top, bottom) combination with its explanation."""

    top: Garment
    bottom: Garment
    confidence: float
    reasoning: str
    color_harmony_score: Optional[float] = None
    formality_match_score: Optional[float] = None
    weather_compatibility_score: Optional[float] = None
    occasion_match_score: Optional[float] = None
    source: str = "scored"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "top": self.top.to_dict(),
            "bottom": self.bottom.to_dict(),
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "color_harmony_score": self.color_harmony_score,
            "formality_match_score": self.formality_match_score,
            "weather_compatibility_score": self.weather_compatibility_score,
            "occasion_match_score": self.occasion_match_score,
            "source": self.source,
        }


__all__ = [
    "Garment",
    "WeatherContext",
    "MatchingContext",
    "ScoredPairing",
    "clamp_unit",
    "clamp_formality",
]
