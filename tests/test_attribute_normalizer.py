"""Normalization of raw classifier output into canonical garments."""

import re

import pytest

from models.attribute_normalizer import (
    SENTINEL_CONFIDENCE,
    SENTINEL_DESCRIPTION,
    ClassificationOutcome,
    normalize,
    sentinel_garment,
)
from models.taxonomy import FormalityLevel, GarmentRole, Occasion, Season, Subcategory

HEX = re.compile(r"^#[0-9A-F]{6}$")


def test_unmapped_color_name_falls_back_to_black() -> None:
    garment = normalize({"category": "tops", "color_primary": "ocean blue"})

    assert garment.color_primary == "#000000"
    assert garment.role is GarmentRole.TOP


@pytest.mark.parametrize(
    "raw",
    [
        None,
        [],
        "a shirt",
        {},
        {"category": 42, "color_primary": None, "season": None, "occasion": 7},
        {"confidence": "very high", "season": ["monsoon"], "occasion": ["wedding-ish"]},
        {"confidence": float("nan"), "formality_score": "n/a"},
    ],
)
def test_normalize_always_yields_valid_garment(raw) -> None:
    garment = normalize(raw)

    assert HEX.match(garment.color_primary)
    assert 0.0 <= garment.ai_confidence <= 1.0
    assert garment.seasons
    assert garment.occasions


def test_full_payload_maps_every_field() -> None:
    garment = normalize(
        {
            "category": "Bottoms",
            "subcategory": "Tee Shirt",
            "color_primary": "abc",
            "color_secondary": "#ff0000",
            "material": " Cotton ",
            "season": "summer",
            "occasion": ["work", "gym", "unknown"],
            "formality": "business",
            "confidence": 0.92,
            "name": "Chinos",
            "description": "Sturdy everyday chinos",
        }
    )

    assert garment.role is GarmentRole.BOTTOM
    assert garment.subcategory is Subcategory.TEE_SHIRT
    assert garment.color_primary == "#AABBCC"
    assert garment.color_secondary == "#FF0000"
    assert garment.material == "cotton"
    assert garment.seasons == [Season.SUMMER]
    assert garment.occasions == [Occasion.BUSINESS, Occasion.ATHLETIC]
    assert garment.formality is FormalityLevel.BUSINESS
    assert garment.formality_score == 7
    assert garment.ai_confidence == pytest.approx(0.92)
    assert "breathable" in garment.material_properties
    assert "durable" in garment.material_properties
    assert garment.style_tags[0] == "business"


def test_confidence_defaults_and_clamps() -> None:
    assert normalize({}).ai_confidence == 0.5
    assert normalize({"confidence": 5}).ai_confidence == 1.0
    assert normalize({"confidence": -2}).ai_confidence == 0.0
    assert normalize({"confidence": True}).ai_confidence == 0.5


def test_explicit_formality_score_wins_over_label() -> None:
    garment = normalize({"formality": "formal", "formality_score": 14.6})

    assert garment.formality is FormalityLevel.FORMAL
    assert garment.formality_score == 10


def test_unmapped_subcategory_passes_through_verbatim() -> None:
    garment = normalize({"subcategory": "Kimono Jacket"})

    assert garment.subcategory == "Kimono Jacket"


def test_unknown_role_defaults_to_top() -> None:
    assert normalize({"category": "hats and scarves"}).role is GarmentRole.TOP


def test_failed_outcome_maps_to_sentinel_garment() -> None:
    outcome = ClassificationOutcome.failed("request_error", "timeout")

    garment = outcome.to_garment(item_id="item-1")

    assert not outcome.ok
    assert garment.item_id == "item-1"
    assert garment.ai_confidence == SENTINEL_CONFIDENCE
    assert garment.color_primary == "#000000"
    assert garment.role is GarmentRole.TOP
    assert garment.formality is FormalityLevel.CASUAL
    assert garment.seasons == [Season.ALL_SEASONS]
    assert garment.occasions == [Occasion.CASUAL]
    assert garment.description == SENTINEL_DESCRIPTION


def test_successful_outcome_normalizes_payload() -> None:
    garment = ClassificationOutcome.success({"category": "outerwear", "color_primary": "navy"}).to_garment()

    assert garment.role is GarmentRole.OUTERWEAR
    assert garment.color_primary == "#000080"


def test_sentinel_has_no_explicit_formality_score() -> None:
    assert sentinel_garment().formality_score is None
