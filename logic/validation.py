"""Pydantic schemas for validating request payloads at the HTTP boundary."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from models.garment import Garment, MatchingContext, WeatherContext


class GarmentPayload(BaseModel):
    """A wardrobe item as submitted by a client.

    Loose strings are accepted; canonicalisation happens in :class:`Garment`.
    """

    item_id: Optional[str] = None
    name: str = ""
    description: str = ""
    role: str = "top"
    subcategory: Optional[str] = None
    color_primary: str = "#000000"
    color_secondary: Optional[str] = None
    material: Optional[str] = None
    seasons: List[str] = []
    occasions: List[str] = []
    formality: Optional[str] = None
    formality_score: Optional[int] = Field(default=None, ge=1, le=10)
    ai_confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    def to_garment(self) -> Garment:
        return Garment(**self.model_dump())


class WeatherPayload(BaseModel):
    temperature_f: float
    description: str = ""

    def to_context(self) -> WeatherContext:
        return WeatherContext(temperature_f=self.temperature_f, description=self.description)


class ContextPayload(BaseModel):
    occasion: Optional[str] = None
    weather: Optional[WeatherPayload] = None
    formality_preference: Optional[int] = Field(default=None, ge=1, le=10)
    color_preferences: List[str] = []
    avoid_colors: List[str] = []

    def to_context(self) -> MatchingContext:
        return MatchingContext(
            occasion=self.occasion,
            weather=self.weather.to_context() if self.weather else None,
            formality_preference=self.formality_preference,
            color_preferences=self.color_preferences,
            avoid_colors=self.avoid_colors,
        )


class LocationPayload(BaseModel):
    """Either a city name or a latitude/longitude pair."""

    city: Optional[str] = Field(default=None, min_length=1)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _require_location(self) -> "LocationPayload":
        has_coordinates = self.latitude is not None and self.longitude is not None
        if not self.city and not has_coordinates:
            raise ValueError("either city or latitude and longitude are required")
        return self


class RecommendationRequest(BaseModel):
    """Envelope for a recommendation run over a submitted wardrobe."""

    wardrobe: List[GarmentPayload]
    context: ContextPayload = ContextPayload()
    location: Optional[LocationPayload] = None
    ai_available: Optional[bool] = None

    def garments(self) -> List[Garment]:
        return [item.to_garment() for item in self.wardrobe]


class ValidationResult(BaseModel):
    """Wrapper returned when validation fails outside FastAPI's own handling."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    return ValidationResult(message=message, details=exc.errors()).model_dump()


__all__ = [
    "GarmentPayload",
    "WeatherPayload",
    "ContextPayload",
    "LocationPayload",
    "RecommendationRequest",
    "ValidationResult",
    "validation_failure",
]
