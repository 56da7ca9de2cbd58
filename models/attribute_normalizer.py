"""Mapping logic from raw classifier output to a canonical :class:`Garment`.

The classifier is an opaque oracle: every field it returns may be missing,
mistyped or out of range. ``normalize`` never raises; malformed fields are
replaced by deterministic defaults so the rest of the pipeline stays total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from models.color_theory import FALLBACK_COLOR, normalize_hex, validate_hex_color
from models.garment import Garment, _as_float, _ensure_list, clamp_formality, clamp_unit
from models.taxonomy import (
    DEFAULT_OCCASIONS,
    DEFAULT_SEASONS,
    FORMALITY_LEVEL_SCORES,
    FORMALITY_MAP,
    OCCASION_MAP,
    ROLE_MAP,
    SEASON_MAP,
    SUBCATEGORY_MAP,
    FormalityLevel,
    GarmentRole,
    lookup_label,
    map_labels,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5
SENTINEL_CONFIDENCE = 0.1
SENTINEL_DESCRIPTION = "Clothing item (auto-categorization failed)"


@dataclass(frozen=True)
class ClassificationFailure:
    """Why a classifier call produced no usable payload."""

    reason: str
    detail: str = ""


@dataclass(frozen=True)
class ClassificationOutcome:
    """Either a raw classifier payload or the failure that prevented one."""

    raw: Optional[Mapping[str, Any]] = None
    failure: Optional[ClassificationFailure] = None

    @classmethod
    def success(cls, raw: Mapping[str, Any]) -> "ClassificationOutcome":
        return cls(raw=raw)

    @classmethod
    def failed(cls, reason: str, detail: str = "") -> "ClassificationOutcome":
        return cls(failure=ClassificationFailure(reason=reason, detail=detail))

    @property
    def ok(self) -> bool:
        return self.failure is None and self.raw is not None

    def to_garment(self, **overrides: Any) -> Garment:
        """Normalize a successful payload or substitute the sentinel garment."""

        if self.ok:
            return normalize(self.raw, **overrides)
        reason = self.failure.reason if self.failure else "empty_payload"
        logger.warning("Classification unavailable, using sentinel garment", extra={"reason": reason})
        return sentinel_garment(**overrides)


def sentinel_garment(**overrides: Any) -> Garment:
    """Fixed low-confidence garment used when classification failed outright."""

    fields: Dict[str, Any] = {
        "role": GarmentRole.TOP,
        "color_primary": FALLBACK_COLOR,
        "ai_confidence": SENTINEL_CONFIDENCE,
        "formality": FormalityLevel.CASUAL,
        "seasons": list(DEFAULT_SEASONS),
        "occasions": list(DEFAULT_OCCASIONS),
        "description": SENTINEL_DESCRIPTION,
    }
    fields.update(overrides)
    return Garment(**fields)


def _text(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    return value.strip() if isinstance(value, str) else ""


def _confidence(raw: Mapping[str, Any]) -> float:
    value = _as_float(raw.get("confidence"))
    return clamp_unit(DEFAULT_CONFIDENCE if value is None else value)


def _formality(raw: Mapping[str, Any]) -> tuple[Optional[FormalityLevel], Optional[int]]:
    level = lookup_label(raw.get("formality"), FORMALITY_MAP)
    explicit = clamp_formality(raw.get("formality_score"))
    if explicit is not None:
        return level, explicit
    if level is not None:
        return level, FORMALITY_LEVEL_SCORES[level]
    return None, None


def _material_properties(material: str, description: str) -> List[str]:
    material = material.lower()
    description = description.lower()
    properties: List[str] = []
    if "cotton" in material or "linen" in material:
        properties.append("breathable")
    if "wool" in material or "fleece" in material:
        properties.append("warm")
    if "denim" in material or "sturdy" in description:
        properties.append("durable")
    if "waterproof" in description or "rain" in description:
        properties.append("waterproof")
    return properties


def _style_tags(formality: Optional[FormalityLevel], garment_fields: Dict[str, Any]) -> List[str]:
    tags: List[str] = []
    candidates = [formality.value if formality else None]
    candidates += [season.value for season in garment_fields["seasons"]]
    candidates += [occasion.value for occasion in garment_fields["occasions"]]
    candidates.append(garment_fields["material"])
    for tag in candidates:
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def normalize(raw: Any, **overrides: Any) -> Garment:
    """Map raw classifier output into a fully validated :class:`Garment`.

    ``overrides`` (item id, user supplied name and so on) are applied on top of
    the classifier fields.
    """

    if not isinstance(raw, Mapping):
        logger.warning("Classifier payload is not a mapping", extra={"payload_type": type(raw).__name__})
        raw = {}

    role = lookup_label(raw.get("category"), ROLE_MAP) or GarmentRole.TOP
    sub_raw = raw.get("subcategory")
    subcategory = lookup_label(sub_raw, SUBCATEGORY_MAP)
    if subcategory is None and isinstance(sub_raw, str) and sub_raw.strip():
        logger.debug("Passing through unmapped subcategory", extra={"subcategory": sub_raw})

    primary = raw.get("color_primary")
    if validate_hex_color(primary) is None:
        logger.debug("Invalid primary color, using fallback", extra={"color": primary})

    material = _text(raw, "material").lower() or None
    description = _text(raw, "description") or "Clothing item"
    formality, formality_score = _formality(raw)

    fields: Dict[str, Any] = {
        "role": role,
        "subcategory": subcategory or (sub_raw if isinstance(sub_raw, str) else None),
        "color_primary": normalize_hex(primary),
        "color_secondary": validate_hex_color(raw.get("color_secondary")),
        "material": material,
        "seasons": map_labels(_ensure_list(raw.get("season", raw.get("seasons"))), SEASON_MAP, DEFAULT_SEASONS),
        "occasions": map_labels(
            _ensure_list(raw.get("occasion", raw.get("occasions"))), OCCASION_MAP, DEFAULT_OCCASIONS
        ),
        "formality": formality,
        "formality_score": formality_score,
        "ai_confidence": _confidence(raw),
        "name": _text(raw, "name"),
        "description": description,
    }
    fields["style_tags"] = _style_tags(formality, fields)
    fields["material_properties"] = _material_properties(material or "", description)
    fields.update(overrides)

    garment = Garment(**fields)
    logger.debug(
        "Normalized classifier output",
        extra={
            "role": garment.role.value,
            "color_primary": garment.color_primary,
            "confidence": garment.ai_confidence,
            "formality_score": garment.formality_score,
        },
    )
    return garment


__all__ = [
    "ClassificationFailure",
    "ClassificationOutcome",
    "normalize",
    "sentinel_garment",
    "DEFAULT_CONFIDENCE",
    "SENTINEL_CONFIDENCE",
]
