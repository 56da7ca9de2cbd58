"""Hex color validation and harmony tables for deterministic outfit scoring."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Sequence

logger = logging.getLogger(__name__)

FALLBACK_COLOR = "#000000"

_HEX_PATTERN = re.compile(r"^(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")

COLOR_NAME_TO_HEX: Dict[str, str] = {
    "black": "#000000",
    "white": "#FFFFFF",
    "red": "#FF0000",
    "blue": "#0000FF",
    "green": "#00FF00",
    "yellow": "#FFFF00",
    "purple": "#800080",
    "pink": "#FFC0CB",
    "brown": "#A52A2A",
    "gray": "#808080",
    "grey": "#808080",
    "navy": "#000080",
    "beige": "#F5F5DC",
}

# Colors that sit comfortably next to anything.
NEUTRAL_COLORS: FrozenSet[str] = frozenset(
    {
        "#000000",  # black
        "#FFFFFF",  # white
        "#808080",  # gray
        "#C0C0C0",  # silver
        "#696969",  # dim gray
        "#000080",  # navy
        "#8B4513",  # saddle brown
        "#A52A2A",  # brown
        "#F5F5DC",  # beige
    }
)

PROFESSIONAL_PAIRS: Dict[str, Sequence[str]] = {
    "#000080": ("#FFFFFF", "#C0C0C0", "#D3D3D3"),
    "#000000": ("#FFFFFF", "#C0C0C0", "#FF0000"),
    "#8B4513": ("#F5DEB3", "#FFFFFF", "#000080"),
    "#4169E1": ("#ADD8E6", "#F5DEB3"),
    "#800020": ("#F5DEB3", "#D3D3D3"),
}

COMPLEMENTARY_PAIRS: Dict[str, Sequence[str]] = {
    "#FF0000": ("#00FF00", "#008000"),
    "#0000FF": ("#FFA500", "#FF8C00"),
    "#FFFF00": ("#800080", "#4B0082"),
}

ANALOGOUS_PAIRS: Dict[str, Sequence[str]] = {
    "#FF0000": ("#FF8000", "#FF0080"),
    "#0000FF": ("#0080FF", "#8000FF"),
    "#00FF00": ("#80FF00", "#00FF80"),
    "#4169E1": ("#ADD8E6", "#0000FF"),
}

HARMONY_SCORES: Dict[str, float] = {
    "neutral": 0.9,
    "professional": 0.95,
    "complementary": 0.85,
    "analogous": 0.8,
    "same_family": 0.7,
    "none": 0.5,
}


@dataclass(frozen=True)
class HarmonyResult:
    """Outcome of a pairwise harmony evaluation."""

    rule_applied: str
    score: float


def validate_hex_color(value: object) -> Optional[str]:
    """Return ``#RRGGBB`` for a hex string or known color name, else ``None``.

    Three digit shorthand is expanded by duplicating each digit.
    """

    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    digits = raw[1:] if raw.startswith("#") else raw
    if _HEX_PATTERN.match(digits):
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return "#" + digits.upper()
    return COLOR_NAME_TO_HEX.get(raw.lower())


def normalize_hex(value: object) -> str:
    """Coerce any input into a canonical hex color, defaulting to black."""

    return validate_hex_color(value) or FALLBACK_COLOR


def is_neutral(color: str) -> bool:
    return normalize_hex(color) in NEUTRAL_COLORS


def _paired(table: Dict[str, Sequence[str]], c1: str, c2: str) -> bool:
    return c2 in table.get(c1, ()) or c1 in table.get(c2, ())


def same_color_family(c1: str, c2: str) -> bool:
    """Coarse family check on the leading hex digit."""

    return c1.lstrip("#")[:1] == c2.lstrip("#")[:1]


def evaluate_harmony(color1: str, color2: str) -> HarmonyResult:
    """Score a color pair; the first matching rule in precedence order wins."""

    c1, c2 = normalize_hex(color1), normalize_hex(color2)
    if c1 in NEUTRAL_COLORS or c2 in NEUTRAL_COLORS:
        rule = "neutral"
    elif _paired(PROFESSIONAL_PAIRS, c1, c2):
        rule = "professional"
    elif _paired(COMPLEMENTARY_PAIRS, c1, c2):
        rule = "complementary"
    elif _paired(ANALOGOUS_PAIRS, c1, c2):
        rule = "analogous"
    elif same_color_family(c1, c2):
        rule = "same_family"
    else:
        rule = "none"
    logger.debug("harmony (%s, %s) -> %s", c1, c2, rule)
    return HarmonyResult(rule_applied=rule, score=HARMONY_SCORES[rule])


__all__ = [
    "FALLBACK_COLOR",
    "COLOR_NAME_TO_HEX",
    "NEUTRAL_COLORS",
    "PROFESSIONAL_PAIRS",
    "COMPLEMENTARY_PAIRS",
    "ANALOGOUS_PAIRS",
    "HARMONY_SCORES",
    "HarmonyResult",
    "validate_hex_color",
    "normalize_hex",
    "is_neutral",
    "same_color_family",
    "evaluate_harmony",
]
