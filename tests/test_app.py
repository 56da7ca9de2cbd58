"""Application facade wiring and entry points."""

import requests

from agents.wardrobe_analysis import PendingImage
from matcher_app.app import OutfitMatcherApp
from matcher_app.config import MatcherConfig
from models.garment import Garment, MatchingContext, WeatherContext
from models.weather import Coordinates, DailyForecast, HourlyForecast, WeatherReading
from tools.classifier_gateway import StaticGarmentClassifier
from tools.weather_cache import WeatherCache
from tools.weather_provider import MockWeatherProvider


def _wardrobe() -> list[Garment]:
    return [
        Garment(role="top", name="wool sweater", color_primary="#808080", material="wool", formality_score=4),
        Garment(role="bottom", name="corduroy trousers", color_primary="#8B4513", material="fleece", formality_score=5),
    ]


def _app(provider: MockWeatherProvider | None = None, classifier=None) -> OutfitMatcherApp:
    return OutfitMatcherApp(
        config=MatcherConfig(),
        weather_provider=provider or MockWeatherProvider(WeatherReading(temperature_f=35.0, description="clear sky")),
        classifier=classifier or StaticGarmentClassifier(),
        sleep=lambda _: None,
    )


def test_recommend_attaches_live_weather() -> None:
    app = _app()

    pairings = app.recommend(_wardrobe(), MatchingContext(), location=Coordinates(59.91, 10.75))

    assert len(pairings) == 1
    assert pairings[0].weather_compatibility_score > 0.8
    assert "suitable materials for cold weather" in pairings[0].reasoning


def test_recommend_continues_without_weather_on_failure() -> None:
    failures = [requests.ConnectionError("offline")] * 3
    app = _app(MockWeatherProvider(failures=list(failures)))

    pairings = app.recommend(_wardrobe(), location=Coordinates(1.0, 1.0))

    assert pairings[0].weather_compatibility_score == 0.8


def test_recommend_keeps_explicit_weather() -> None:
    provider = MockWeatherProvider()
    app = _app(provider)
    context = MatchingContext(weather=WeatherContext(temperature_f=90.0))

    app.recommend(_wardrobe(), context, location="Oslo")

    assert provider.fetch_calls == []
    assert provider.geocode_calls == []


def test_unavailable_classifier_selects_basic_matching() -> None:
    app = _app(classifier=StaticGarmentClassifier(available=False))

    pairings = app.generate(_wardrobe(), MatchingContext())

    assert pairings[0].source == "basic"


def test_analyze_and_reanalyze_use_classifier() -> None:
    classifier = StaticGarmentClassifier([{"category": "bottoms"}, {"category": "outerwear"}])
    app = _app(classifier=classifier)

    garment = app.analyze_garment(b"img", item_id="one")
    report = app.reanalyze([PendingImage(item_id="two", image=b"img")])

    assert garment.role.value == "bottom"
    assert report.garments[0].role.value == "outerwear"
    assert report.stats.successful == 1


def test_recommend_from_payload_validates_input() -> None:
    app = _app()

    invalid = app.recommend_from_payload({"wardrobe": "not-a-list"})
    valid = app.recommend_from_payload(
        {
            "wardrobe": [item.to_dict() for item in _wardrobe()],
            "context": {"occasion": "casual"},
            "location": {"latitude": 59.91, "longitude": 10.75},
            "ai_available": True,
        }
    )

    assert invalid["status"] == "needs_review"
    assert valid["status"] == "ok"
    assert valid["recommendations"][0]["source"] == "scored"


def test_weather_guidance_and_cache_clear() -> None:
    provider = MockWeatherProvider(WeatherReading(temperature_f=35.0, description="clear sky"))
    app = _app(provider)

    guidance = app.weather_guidance(Coordinates(1.0, 1.0))
    app.get_weather(Coordinates(1.0, 1.0))
    app.clear_weather_cache()
    app.get_weather(Coordinates(1.0, 1.0))

    assert guidance["context"]["temperature"] == "cold"
    assert guidance["advice"]["heavy_coat"] is True
    assert len(provider.fetch_calls) == 2


def test_injected_weather_cache_is_shared_with_gateway() -> None:
    cache = WeatherCache(clock=lambda: 2_000.0)
    app = OutfitMatcherApp(
        config=MatcherConfig(),
        weather_provider=MockWeatherProvider(),
        classifier=StaticGarmentClassifier(),
        weather_cache=cache,
        sleep=lambda _: None,
    )

    snapshot = app.get_weather(Coordinates(1.0, 1.0))

    assert app.weather_gateway.cache is cache
    assert snapshot.fetched_at == 2_000.0
    assert Coordinates(1.0, 1.0).cache_key() in cache


def test_forecasts_route_through_gateway() -> None:
    provider = MockWeatherProvider(
        hourly=[HourlyForecast(time="2026-10-17T09:00", temperature_f=50.0, description="fog")],
        daily=[DailyForecast(date="2026-10-17", temperature_max_f=60.0, temperature_min_f=41.0, description="overcast")],
    )
    app = _app(provider)

    hourly = app.get_hourly_forecast(Coordinates(1.0, 1.0), hours=3)
    daily = app.get_daily_forecast(Coordinates(1.0, 1.0))

    assert hourly[0].description == "fog"
    assert daily[0].temperature_min_f == 41.0
    assert [call[0] for call in provider.forecast_calls] == ["hourly", "daily"]
    assert provider.fetch_calls == []
