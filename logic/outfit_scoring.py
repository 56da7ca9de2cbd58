"""Deterministic compatibility scoring for (top, bottom) garment pairs."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from logic.formality import effective_formality
from models.color_theory import evaluate_harmony
from models.garment import Garment, MatchingContext, ScoredPairing, WeatherContext, clamp_unit
from models.taxonomy import OCCASION_FORMALITY_BANDS

WEIGHTS = {
    "color": 0.3,
    "formality": 0.3,
    "weather": 0.2,
    "occasion": 0.2,
}

NEUTRAL_WEATHER_SCORE = 0.8
NO_OCCASION_SCORE = 0.8
FORMALITY_SPREAD = 6.0
IN_BAND_MULTIPLIER = 1.2
OUT_OF_BAND_MULTIPLIER = 0.6
COLD_BELOW_F = 50.0
WARM_ABOVE_F = 77.0


class WeatherBucket(str, Enum):
    COLD = "cold"
    WARM = "warm"
    RAINY = "rainy"
    NEUTRAL = "neutral"


WEATHER_MATERIAL_RULES: Dict[WeatherBucket, Dict[str, Tuple[str, ...]]] = {
    WeatherBucket.COLD: {
        "preferred": ("wool", "fleece", "cashmere", "down"),
        "avoid": ("linen", "cotton", "silk"),
    },
    WeatherBucket.WARM: {
        "preferred": ("cotton", "linen", "silk", "rayon"),
        "avoid": ("wool", "fleece", "heavy"),
    },
    WeatherBucket.RAINY: {
        "preferred": ("waterproof", "synthetic", "treated"),
        "avoid": ("suede", "leather", "canvas"),
    },
}

WEATHER_CLAUSES = {
    WeatherBucket.COLD: "suitable materials for cold weather",
    WeatherBucket.WARM: "breathable fabrics for warm weather",
    WeatherBucket.RAINY: "weather-appropriate materials",
}


def classify_weather(weather: WeatherContext) -> WeatherBucket:
    """Bucket weather by temperature first, then by precipitation keywords."""

    if weather.temperature_f < COLD_BELOW_F:
        return WeatherBucket.COLD
    if weather.temperature_f > WARM_ABOVE_F:
        return WeatherBucket.WARM
    condition = (weather.description or "").lower()
    if "rain" in condition or "storm" in condition:
        return WeatherBucket.RAINY
    return WeatherBucket.NEUTRAL


def color_harmony_score(top: Garment, bottom: Garment) -> float:
    return evaluate_harmony(top.color_primary, bottom.color_primary).score


def formality_match_score(top: Garment, bottom: Garment, context: MatchingContext) -> float:
    top_formality = effective_formality(top)
    bottom_formality = effective_formality(bottom)
    score = max(0.0, 1 - abs(top_formality - bottom_formality) / FORMALITY_SPREAD)

    band = OCCASION_FORMALITY_BANDS.get(context.occasion) if context.occasion else None
    if band:
        average = (top_formality + bottom_formality) / 2
        low, high = band
        score *= IN_BAND_MULTIPLIER if low <= average <= high else OUT_OF_BAND_MULTIPLIER
    return clamp_unit(score)


def _material_matches(material: Optional[str], keywords: Tuple[str, ...]) -> bool:
    text = (material or "").lower()
    return any(keyword in text for keyword in keywords)


def weather_compatibility_score(top: Garment, bottom: Garment, context: MatchingContext) -> float:
    if context.weather is None:
        return NEUTRAL_WEATHER_SCORE
    bucket = classify_weather(context.weather)
    if bucket is WeatherBucket.NEUTRAL:
        return NEUTRAL_WEATHER_SCORE

    rules = WEATHER_MATERIAL_RULES[bucket]
    score = 0.5
    for garment in (top, bottom):
        if _material_matches(garment.material, rules["preferred"]):
            score += 0.2
        if _material_matches(garment.material, rules["avoid"]):
            score -= 0.3
    return clamp_unit(score)


def occasion_match_score(top: Garment, bottom: Garment, context: MatchingContext) -> float:
    if context.occasion is None:
        return NO_OCCASION_SCORE
    score = 0.5
    if context.occasion in top.occasions:
        score += 0.25
    if context.occasion in bottom.occasions:
        score += 0.25
    return clamp_unit(score)


def generate_reasoning(
    top: Garment, bottom: Garment, context: MatchingContext, scores: Dict[str, float]
) -> str:
    """Explain a pairing with fixed-order clauses for the strongest components."""

    reasons: List[str] = []
    occasion = context.occasion.value if context.occasion else None

    if scores["color"] > 0.8:
        reasons.append(f"excellent color harmony between {top.color_primary} and {bottom.color_primary}")
    elif scores["color"] > 0.6:
        reasons.append(f"good color pairing of {top.color_primary} with {bottom.color_primary}")

    if scores["formality"] > 0.8 and occasion:
        reasons.append(f"perfect formality level for {occasion}")
    elif scores["formality"] > 0.6:
        reasons.append("appropriate formality balance")

    if context.weather is not None and scores["weather"] > 0.7:
        bucket = classify_weather(context.weather)
        # Storms score as rainy but only an explicit "rain" earns the clause.
        if bucket is WeatherBucket.RAINY and "rain" not in (context.weather.description or "").lower():
            bucket = WeatherBucket.NEUTRAL
        clause = WEATHER_CLAUSES.get(bucket)
        if clause:
            reasons.append(clause)

    if occasion and scores["occasion"] > 0.7:
        reasons.append(f"well-suited for {occasion} occasions")

    base = ", ".join(reasons) if reasons else "basic color and style coordination"
    return f"{base} (rule-based matching)"


def score_pairing(top: Garment, bottom: Garment, context: MatchingContext) -> ScoredPairing:
    """Calculate the weighted confidence and explanation for one pairing."""

    scores = {
        "color": color_harmony_score(top, bottom),
        "formality": formality_match_score(top, bottom, context),
        "weather": weather_compatibility_score(top, bottom, context),
        "occasion": occasion_match_score(top, bottom, context),
    }
    confidence = min(1.0, sum(scores[key] * weight for key, weight in WEIGHTS.items()))
    return ScoredPairing(
        top=top,
        bottom=bottom,
        confidence=confidence,
        reasoning=generate_reasoning(top, bottom, context, scores),
        color_harmony_score=scores["color"],
        formality_match_score=scores["formality"],
        weather_compatibility_score=scores["weather"],
        occasion_match_score=scores["occasion"],
    )


__all__ = [
    "WEIGHTS",
    "WeatherBucket",
    "WEATHER_MATERIAL_RULES",
    "classify_weather",
    "color_harmony_score",
    "formality_match_score",
    "weather_compatibility_score",
    "occasion_match_score",
    "generate_reasoning",
    "score_pairing",
]
