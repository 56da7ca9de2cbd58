"""Heuristic formality estimation for garments without a classifier score."""

from __future__ import annotations

from typing import Dict, Tuple

from models.garment import Garment
from models.taxonomy import GarmentRole

ROLE_BASE_FORMALITY: Dict[GarmentRole, int] = {
    GarmentRole.OUTERWEAR: 6,
    GarmentRole.TOP: 4,
    GarmentRole.BOTTOM: 5,
    GarmentRole.FOOTWEAR: 5,
    GarmentRole.ACCESSORY: 4,
}

# (keywords, adjustment); each rule applies at most once per garment.
KEYWORD_ADJUSTMENTS: Tuple[Tuple[Tuple[str, ...], int], ...] = (
    (("suit", "formal"), 3),
    (("casual", "t-shirt"), -2),
    (("dress",), 2),
    (("jeans",), -1),
)


def estimate_formality(garment: Garment) -> int:
    """Derive a 1-10 formality score from role and name/description keywords."""

    score = ROLE_BASE_FORMALITY.get(garment.role, 5)
    text = f"{garment.name} {garment.description}".lower()
    for keywords, adjustment in KEYWORD_ADJUSTMENTS:
        if any(keyword in text for keyword in keywords):
            score += adjustment
    return max(1, min(10, score))


def effective_formality(garment: Garment) -> int:
    return garment.formality_score if garment.formality_score is not None else estimate_formality(garment)


__all__ = ["ROLE_BASE_FORMALITY", "KEYWORD_ADJUSTMENTS", "estimate_formality", "effective_formality"]
