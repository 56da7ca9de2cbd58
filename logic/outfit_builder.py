"""Recommendation generation over a wardrobe with a basic-matching fallback."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from logic.outfit_scoring import WARM_ABOVE_F, score_pairing
from models.color_theory import is_neutral
from models.garment import Garment, MatchingContext, ScoredPairing
from models.taxonomy import PAIRING_BOTTOM_ROLES, PAIRING_TOP_ROLES

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 0.3
MAX_RECOMMENDATIONS = 3
BASIC_CONFIDENCE = 0.6
BASIC_UNFILTERED_CONFIDENCE = 0.3
COOL_BELOW_F = 59.0


@dataclass(frozen=True)
class RolePartition:
    tops: List[Garment]
    bottoms: List[Garment]

    @property
    def pairable(self) -> bool:
        return bool(self.tops) and bool(self.bottoms)


def partition_by_role(wardrobe: Sequence[Garment]) -> RolePartition:
    tops = [item for item in wardrobe if item.role in PAIRING_TOP_ROLES]
    bottoms = [item for item in wardrobe if item.role in PAIRING_BOTTOM_ROLES]
    return RolePartition(tops=tops, bottoms=bottoms)


def _without_avoided_colors(wardrobe: Sequence[Garment], context: MatchingContext) -> List[Garment]:
    if not context.avoid_colors:
        return list(wardrobe)
    avoided = set(context.avoid_colors)
    kept = [item for item in wardrobe if item.color_primary not in avoided]
    logger.info("Excluded %s garments in avoided colors %s", len(wardrobe) - len(kept), sorted(avoided))
    return kept


def generate_recommendations(wardrobe: Sequence[Garment], context: MatchingContext) -> List[ScoredPairing]:
    """Score every (top, bottom) combination and return the best three."""

    partition = partition_by_role(_without_avoided_colors(wardrobe, context))
    logger.info("Found %s tops and %s bottoms", len(partition.tops), len(partition.bottoms))
    if not partition.pairable:
        logger.info("Insufficient roles for outfit generation")
        return []

    candidates: List[ScoredPairing] = []
    for top in partition.tops:
        for bottom in partition.bottoms:
            pairing = score_pairing(top, bottom, context)
            if pairing.confidence > MIN_CONFIDENCE:
                candidates.append(pairing)

    candidates.sort(key=lambda pairing: pairing.confidence, reverse=True)
    selected = candidates[:MAX_RECOMMENDATIONS]
    logger.info(
        "Scored %s combinations, %s above threshold, returning %s",
        len(partition.tops) * len(partition.bottoms),
        len(candidates),
        len(selected),
    )
    return selected


def _pick_bottom(top: Garment, bottoms: Sequence[Garment], index: int) -> Garment:
    top_neutral = is_neutral(top.color_primary)
    for bottom in bottoms:
        if top_neutral or is_neutral(bottom.color_primary) or top.color_primary != bottom.color_primary:
            return bottom
    return bottoms[index % len(bottoms)]


def _basic_reasoning(top: Garment, bottom: Garment, context: MatchingContext) -> str:
    parts: List[str] = []
    if context.occasion:
        parts.append(f"suitable for {context.occasion.value}")
    if context.weather is not None:
        temperature = context.weather.temperature_f
        if temperature < COOL_BELOW_F:
            parts.append("warm layers for cool weather")
        elif temperature > WARM_ABOVE_F:
            parts.append("breathable fabrics for warm weather")
        else:
            parts.append("appropriate for current temperature")
    parts.append(f"{top.color_primary} top with {bottom.color_primary} bottom for color harmony")
    return ", ".join(parts) + " (AI unavailable)"


def _basic_candidates(wardrobe: Sequence[Garment], context: MatchingContext) -> Optional[Tuple[RolePartition, float]]:
    if context.occasion is not None:
        filtered = [item for item in wardrobe if context.occasion in item.occasions]
        partition = partition_by_role(filtered)
        if partition.pairable:
            return partition, BASIC_CONFIDENCE
        logger.info("No pairable garments for occasion %s, retrying unfiltered", context.occasion.value)
        partition = partition_by_role(wardrobe)
        return (partition, BASIC_UNFILTERED_CONFIDENCE) if partition.pairable else None
    partition = partition_by_role(wardrobe)
    return (partition, BASIC_CONFIDENCE) if partition.pairable else None


def generate_basic_recommendations(wardrobe: Sequence[Garment], context: MatchingContext) -> List[ScoredPairing]:
    """Fallback pairing used when the AI-backed path is unavailable."""

    selection = _basic_candidates(_without_avoided_colors(wardrobe, context), context)
    if selection is None:
        logger.info("Insufficient roles for basic outfit generation")
        return []
    partition, confidence = selection

    recommendations: List[ScoredPairing] = []
    for index, top in enumerate(partition.tops[:MAX_RECOMMENDATIONS]):
        bottom = _pick_bottom(top, partition.bottoms, index)
        recommendations.append(
            ScoredPairing(
                top=top,
                bottom=bottom,
                confidence=confidence,
                reasoning=_basic_reasoning(top, bottom, context),
                source="basic",
            )
        )
    logger.info("Generated %s basic recommendations at confidence %s", len(recommendations), confidence)
    return recommendations


class OutfitRecommender:
    """Chooses between scored matching and the basic fallback."""

    def generate(
        self, wardrobe: Sequence[Garment], context: MatchingContext | None = None, ai_available: bool = True
    ) -> List[ScoredPairing]:
        context = context or MatchingContext()
        if ai_available:
            return generate_recommendations(wardrobe, context)
        logger.warning("AI service unavailable, using basic outfit matching")
        return generate_basic_recommendations(wardrobe, context)


__all__ = [
    "MIN_CONFIDENCE",
    "MAX_RECOMMENDATIONS",
    "RolePartition",
    "partition_by_role",
    "generate_recommendations",
    "generate_basic_recommendations",
    "OutfitRecommender",
]
