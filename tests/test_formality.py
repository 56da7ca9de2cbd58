"""Heuristic formality estimation."""

from logic.formality import effective_formality, estimate_formality
from models.garment import Garment


def test_role_base_without_keywords() -> None:
    assert estimate_formality(Garment(role="outerwear")) == 6
    assert estimate_formality(Garment(role="top")) == 4
    assert estimate_formality(Garment(role="bottom")) == 5


def test_keyword_adjustments_apply_once_each() -> None:
    suit = Garment(role="outerwear", name="Formal suit jacket", description="suit suit suit")
    jeans = Garment(role="bottom", name="Casual jeans")

    assert estimate_formality(suit) == 9
    assert estimate_formality(jeans) == 2


def test_estimate_is_clamped() -> None:
    tee = Garment(role="top", name="casual t-shirt", description="jeans style")

    assert estimate_formality(tee) == 1


def test_explicit_score_takes_precedence() -> None:
    garment = Garment(role="top", name="casual tee", formality_score=8)

    assert effective_formality(garment) == 8
