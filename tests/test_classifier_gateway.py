"""Garment classifier gateway."""

import tools.classifier_gateway as classifier_gateway
from models.attribute_normalizer import SENTINEL_CONFIDENCE
from models.taxonomy import GarmentRole
from tools.classifier_gateway import (
    GeminiGarmentClassifier,
    StaticGarmentClassifier,
    extract_json_payload,
)


class _FakeResponse:
    def __init__(self, text: str) -> None:
        self.text = text


class _FakeModel:
    def __init__(self, text: str | None = None, error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.prompts: list = []

    def generate_content(self, parts):
        self.prompts.append(parts)
        if self.error:
            raise self.error
        return _FakeResponse(self.text or "")


def _patch_genai(monkeypatch, model: _FakeModel) -> list:
    configured: list = []
    monkeypatch.setattr(classifier_gateway.genai, "configure", lambda **kwargs: configured.append(kwargs))
    monkeypatch.setattr(classifier_gateway.genai, "GenerativeModel", lambda name: model)
    return configured


def test_missing_api_key_fails_without_network(monkeypatch) -> None:
    def _boom(*args, **kwargs):
        raise AssertionError("no model should be built without a key")

    monkeypatch.setattr(classifier_gateway.genai, "GenerativeModel", _boom)
    classifier = GeminiGarmentClassifier(api_key=None)

    outcome = classifier.classify(b"image-bytes")
    garment = classifier.analyze(b"image-bytes")

    assert not classifier.is_available()
    assert outcome.failure.reason == "missing_api_key"
    assert garment.ai_confidence == SENTINEL_CONFIDENCE


def test_successful_classification_extracts_json(monkeypatch) -> None:
    text = 'Here you go:\n```json\n{"category": "bottoms", "color_primary": "#1a2b3c", "confidence": 0.8}\n```'
    model = _FakeModel(text=text)
    configured = _patch_genai(monkeypatch, model)
    classifier = GeminiGarmentClassifier(api_key="secret")

    garment = classifier.analyze(b"jpeg", mime_type="image/png", item_id="abc")

    assert configured == [{"api_key": "secret"}]
    assert model.prompts[0][1] == {"mime_type": "image/png", "data": b"jpeg"}
    assert garment.role is GarmentRole.BOTTOM
    assert garment.color_primary == "#1A2B3C"
    assert garment.item_id == "abc"


def test_sdk_error_becomes_failed_outcome(monkeypatch) -> None:
    _patch_genai(monkeypatch, _FakeModel(error=RuntimeError("quota exceeded")))

    outcome = GeminiGarmentClassifier(api_key="secret").classify(b"jpeg")

    assert outcome.failure.reason == "request_error"
    assert "quota" in outcome.failure.detail


def test_unparseable_response_is_a_failure(monkeypatch) -> None:
    _patch_genai(monkeypatch, _FakeModel(text="I cannot see a garment"))

    outcome = GeminiGarmentClassifier(api_key="secret").classify(b"jpeg")

    assert outcome.failure.reason == "unparseable_response"


def test_extract_json_payload_rejects_non_objects() -> None:
    assert extract_json_payload('{"a": 1}') == {"a": 1}
    assert extract_json_payload("{not json}") is None
    assert extract_json_payload("") is None


def test_static_classifier_replays_queue() -> None:
    classifier = StaticGarmentClassifier([{"category": "footwear"}, RuntimeError("boom")])

    assert classifier.analyze(b"1").role is GarmentRole.FOOTWEAR
    assert classifier.classify(b"2").failure.reason == "request_error"
    assert classifier.classify(b"3").failure.reason == "empty_payload"
