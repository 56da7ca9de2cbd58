"""HTTP surface exercised through FastAPI's test client."""

import pytest
import requests
from fastapi.testclient import TestClient

from matcher_app.app import OutfitMatcherApp
from matcher_app.config import MatcherConfig
from models.weather import Coordinates, DailyForecast, HourlyForecast, WeatherReading
from server import api
from tools.classifier_gateway import StaticGarmentClassifier
from tools.weather_provider import MockWeatherProvider


@pytest.fixture
def provider() -> MockWeatherProvider:
    return MockWeatherProvider(
        WeatherReading(temperature_f=82.0, description="clear sky", humidity=30.0),
        cities={"Lisbon": Coordinates(38.72, -9.14)},
    )


@pytest.fixture
def client(monkeypatch, provider) -> TestClient:
    matcher = OutfitMatcherApp(
        config=MatcherConfig(environment="test"),
        weather_provider=provider,
        classifier=StaticGarmentClassifier(),
        sleep=lambda _: None,
    )
    monkeypatch.setattr(api, "matcher_app", matcher)
    return TestClient(api.app)


def test_healthz(client) -> None:
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["environment"] == "test"


def test_normalize_endpoint(client) -> None:
    response = client.post("/garments/normalize", json={"category": "tops", "color_primary": "ocean blue"})

    assert response.status_code == 200
    assert response.json()["color_primary"] == "#000000"
    assert response.json()["role"] == "top"


def test_recommendations_endpoint(client) -> None:
    payload = {
        "wardrobe": [
            {"role": "top", "color_primary": "#FFFFFF", "formality_score": 7, "occasions": ["business"]},
            {"role": "bottom", "color_primary": "#000000", "formality_score": 7, "occasions": ["business"]},
        ],
        "context": {"occasion": "business"},
    }

    response = client.post("/recommendations", json=payload)

    body = response.json()
    assert response.status_code == 200
    assert len(body["recommendations"]) == 1
    assert body["recommendations"][0]["confidence"] >= 0.85


def test_recommendations_rejects_invalid_payload(client) -> None:
    response = client.post("/recommendations", json={"wardrobe": [{"formality_score": 42}]})

    assert response.status_code == 422


def test_weather_by_city_and_coordinates(client, provider) -> None:
    by_city = client.get("/weather", params={"city": "Lisbon"})
    by_coords = client.get("/weather", params={"lat": 38.72, "lon": -9.14})

    assert by_city.status_code == 200
    assert by_city.json()["weather"]["location_name"] == "Lisbon"
    assert by_coords.json()["advice"]["shorts"] is True
    assert len(provider.fetch_calls) == 1


def test_weather_errors_map_to_status_codes(client, provider) -> None:
    assert client.get("/weather", params={"city": "Atlantis"}).status_code == 404
    assert client.get("/weather").status_code == 422

    provider.failures = [requests.Timeout("slow")] * 3
    assert client.get("/weather", params={"lat": 1.0, "lon": 1.0}).status_code == 502


def test_clear_weather_cache(client, provider) -> None:
    client.get("/weather", params={"lat": 38.72, "lon": -9.14})
    assert client.delete("/weather/cache").json() == {"status": "cleared"}
    client.get("/weather", params={"lat": 38.72, "lon": -9.14})

    assert len(provider.fetch_calls) == 2


def test_forecast_endpoints(client, provider) -> None:
    provider.hourly = [
        HourlyForecast(time=f"2026-10-17T{hour:02d}:00", temperature_f=60.0, description="clear sky")
        for hour in range(24)
    ]
    provider.daily = [
        DailyForecast(date="2026-10-17", temperature_max_f=70.0, temperature_min_f=55.0, description="mainly clear")
    ]

    hourly = client.get("/weather/forecast/hourly", params={"city": "Lisbon", "count": 3})
    daily = client.get("/weather/forecast/daily", params={"lat": 38.72, "lon": -9.14})

    assert hourly.status_code == 200
    assert len(hourly.json()["forecast"]) == 3
    assert daily.json() == {
        "kind": "daily",
        "forecast": [provider.daily[0].to_dict()],
    }
    assert client.get("/weather/forecast/weekly", params={"city": "Lisbon"}).status_code == 404
    assert client.get("/weather/forecast/hourly").status_code == 422
