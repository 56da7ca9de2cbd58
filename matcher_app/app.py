"""Application facade wiring the matcher's engines and gateways together."""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Sequence

import requests
from pydantic import ValidationError

from agents.wardrobe_analysis import BatchAnalysisReport, PendingImage, WardrobeBatchAnalyzer
from logic.outfit_builder import OutfitRecommender
from logic.validation import RecommendationRequest, validation_failure
from logic.weather_context import clothing_weather_advice, outfit_weather_context
from matcher_app.config import MatcherConfig
from matcher_app.logging_config import configure_logging, get_logger, log_event, operation_context
from models.attribute_normalizer import normalize
from models.garment import Garment, MatchingContext, ScoredPairing
from models.weather import Coordinates, DailyForecast, HourlyForecast, WeatherSnapshot
from tools.classifier_gateway import GarmentClassifier, GeminiGarmentClassifier
from tools.weather_cache import WeatherCache
from tools.weather_gateway import Location, WeatherGateway
from tools.weather_provider import OpenMeteoWeatherProvider, WeatherProvider, WeatherProviderError


LOGGER = get_logger(__name__)


class OutfitMatcherApp:
    """Entry points for normalization, recommendation, weather and analysis."""

    def __init__(
        self,
        config: MatcherConfig | None = None,
        weather_provider: WeatherProvider | None = None,
        classifier: GarmentClassifier | None = None,
        weather_cache: WeatherCache | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or MatcherConfig.from_env()
        configure_logging(self.config.log_level)

        self.weather_provider = weather_provider if weather_provider is not None else OpenMeteoWeatherProvider(
            base_url=self.config.weather_base_url,
            geocoding_url=self.config.geocoding_base_url,
            user_agent=self.config.user_agent,
        )
        self.weather_gateway = WeatherGateway(self.weather_provider, cache=weather_cache, sleep=sleep)
        self.classifier = classifier if classifier is not None else GeminiGarmentClassifier(
            api_key=self.config.google_api_key, model_name=self.config.classifier_model
        )
        self.recommender = OutfitRecommender()
        self.batch_analyzer = WardrobeBatchAnalyzer(self.classifier, sleep=sleep)

    def normalize(self, raw: Any) -> Garment:
        return normalize(raw)

    def generate(
        self, wardrobe: Sequence[Garment], context: MatchingContext | None = None, ai_available: bool | None = None
    ) -> List[ScoredPairing]:
        """Rank pairings, falling back to basic matching when the classifier is unavailable."""

        if ai_available is None:
            ai_available = self.classifier.is_available()
        with operation_context("app:generate"):
            return self.recommender.generate(wardrobe, context, ai_available=ai_available)

    def get_weather(self, location: Location) -> WeatherSnapshot:
        with operation_context("app:get_weather"):
            return self.weather_gateway.get_weather(location)

    def get_hourly_forecast(self, location: Location, hours: int = 12) -> List[HourlyForecast]:
        with operation_context("app:get_hourly_forecast"):
            return self.weather_gateway.get_hourly_forecast(location, hours)

    def get_daily_forecast(self, location: Location, days: int = 7) -> List[DailyForecast]:
        with operation_context("app:get_daily_forecast"):
            return self.weather_gateway.get_daily_forecast(location, days)

    def clear_weather_cache(self) -> None:
        self.weather_gateway.clear_cache()

    def weather_guidance(self, location: Location) -> Dict[str, Any]:
        snapshot = self.get_weather(location)
        return {
            "weather": snapshot.to_dict(),
            "context": outfit_weather_context(snapshot),
            "advice": clothing_weather_advice(snapshot),
        }

    def analyze_garment(self, image: bytes, mime_type: str = "image/jpeg", **overrides: Any) -> Garment:
        with operation_context("app:analyze_garment"):
            return self.classifier.analyze(image, mime_type, **overrides)

    def recommend(
        self,
        wardrobe: Sequence[Garment],
        context: MatchingContext | None = None,
        location: Location | None = None,
        ai_available: bool | None = None,
    ) -> List[ScoredPairing]:
        """Generate pairings, attaching live weather when a location is given.

        Weather failures are logged and the run continues without weather.
        """

        context = context or MatchingContext()
        with operation_context("app:recommend") as correlation_id:
            if location is not None and context.weather is None:
                try:
                    snapshot = self.weather_gateway.get_weather(location)
                    context = dataclasses.replace(context, weather=snapshot.as_context())
                except (requests.RequestException, WeatherProviderError) as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "weather_unavailable",
                        correlation_id=correlation_id,
                        error=str(exc),
                    )
            return self.generate(wardrobe, context, ai_available=ai_available)

    def recommend_from_payload(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate a raw request payload and run ``recommend``."""

        try:
            request = RecommendationRequest.model_validate(payload)
        except ValidationError as exc:
            log_event(LOGGER, logging.WARNING, "app_request_invalid", details=str(exc))
            return validation_failure("Invalid recommendation request payload", exc)

        location: Location | None = None
        if request.location is not None:
            if request.location.latitude is not None and request.location.longitude is not None:
                location = Coordinates(request.location.latitude, request.location.longitude)
            else:
                location = request.location.city

        pairings = self.recommend(
            request.garments(),
            request.context.to_context(),
            location=location,
            ai_available=request.ai_available,
        )
        return {"status": "ok", "recommendations": [pairing.to_dict() for pairing in pairings]}

    def reanalyze(self, pending_images: Sequence[PendingImage]) -> BatchAnalysisReport:
        return self.batch_analyzer.analyze(pending_images)


__all__ = ["OutfitMatcherApp"]
