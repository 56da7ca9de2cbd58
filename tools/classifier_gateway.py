"""Garment image classification backed by a Gemini vision model."""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

import google.generativeai as genai

from matcher_app.config import DEFAULT_CLASSIFIER_MODEL
from models.attribute_normalizer import ClassificationOutcome
from models.garment import Garment
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)

_JSON_PATTERN = re.compile(r"\{.*\}", re.DOTALL)

CLASSIFICATION_PROMPT = """
You are a fashion expert. Analyze the clothing item in this image and respond
with a single JSON object using exactly these keys:
{
  "category": "tops | bottoms | outerwear | footwear | accessories",
  "subcategory": "specific garment type, e.g. t-shirt, jeans, blazer",
  "color_primary": "hex color such as #1A2B3C",
  "color_secondary": "hex color or null",
  "material": "main fabric",
  "season": ["spring", "summer", "fall", "winter", "all_seasons"],
  "occasion": ["casual", "business", "formal", "athletic", "party", "date", "travel", "loungewear"],
  "formality": "athletic | casual | business | formal",
  "confidence": 0.0,
  "name": "short item name",
  "description": "one sentence description"
}
Respond with JSON only.
"""


def extract_json_payload(text: str) -> Optional[Dict[str, Any]]:
    """Pull the first JSON object out of a free-form model response."""

    match = _JSON_PATTERN.search(text or "")
    if not match:
        return None
    try:
        data = json.loads(match.group())
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


class GarmentClassifier(ABC):
    """Single-attempt image classifier; failures are values, never exceptions."""

    @abstractmethod
    def classify(self, image: bytes, mime_type: str = "image/jpeg") -> ClassificationOutcome:
        """Return the raw attribute payload or the reason there is none."""

    def is_available(self) -> bool:
        return True

    def analyze(self, image: bytes, mime_type: str = "image/jpeg", **overrides: Any) -> Garment:
        return self.classify(image, mime_type).to_garment(**overrides)


class GeminiGarmentClassifier(GarmentClassifier):
    """Classifier that sends the image to a Gemini multimodal model."""

    def __init__(self, api_key: str | None = None, model_name: str = DEFAULT_CLASSIFIER_MODEL) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self._model = None

    def is_available(self) -> bool:
        return bool(self.api_key)

    def _get_model(self):
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    @instrument_call("classify_garment")
    def classify(self, image: bytes, mime_type: str = "image/jpeg") -> ClassificationOutcome:
        if not self.api_key:
            LOGGER.warning("Classifier credential missing, skipping classification")
            return ClassificationOutcome.failed("missing_api_key")
        if not image:
            return ClassificationOutcome.failed("empty_image")

        try:
            response = self._get_model().generate_content([CLASSIFICATION_PROMPT, {"mime_type": mime_type, "data": image}])
            text = (getattr(response, "text", None) or "").strip()
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Classifier request failed", exc_info=exc)
            return ClassificationOutcome.failed("request_error", str(exc))

        payload = extract_json_payload(text)
        if payload is None:
            LOGGER.warning("Classifier response contained no JSON object", extra={"response_chars": len(text)})
            return ClassificationOutcome.failed("unparseable_response", text[:200])
        return ClassificationOutcome.success(payload)


class StaticGarmentClassifier(GarmentClassifier):
    """Deterministic classifier replaying queued payloads, for tests and demos.

    Each queued entry is either a raw payload mapping or an ``Exception``
    which is reported as a ``request_error`` failure.
    """

    def __init__(self, responses: List[Any] | None = None, available: bool = True) -> None:
        self.responses = list(responses or [])
        self.available = available
        self.calls: List[str] = []

    def is_available(self) -> bool:
        return self.available

    def classify(self, image: bytes, mime_type: str = "image/jpeg") -> ClassificationOutcome:
        self.calls.append(mime_type)
        if not self.available:
            return ClassificationOutcome.failed("missing_api_key")
        if not self.responses:
            return ClassificationOutcome.failed("empty_payload")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            return ClassificationOutcome.failed("request_error", str(response))
        if isinstance(response, Mapping):
            return ClassificationOutcome.success(response)
        return ClassificationOutcome.failed("unparseable_response", str(response))


__all__ = [
    "CLASSIFICATION_PROMPT",
    "extract_json_payload",
    "GarmentClassifier",
    "GeminiGarmentClassifier",
    "StaticGarmentClassifier",
]
