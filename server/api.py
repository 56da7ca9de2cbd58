"""FastAPI server exposing the outfit matcher for deployment."""

from typing import Any, Dict, Optional

import requests
from fastapi import FastAPI, HTTPException, Query

from logic.validation import GarmentPayload, RecommendationRequest
from matcher_app.app import OutfitMatcherApp
from matcher_app.logging_config import configure_logging
from models.attribute_normalizer import normalize
from models.weather import Coordinates
from tools.weather_provider import LocationNotFoundError, WeatherProviderError

configure_logging()

matcher_app = OutfitMatcherApp()
app = FastAPI(title="Outfit Matcher", version="0.1.0")


@app.get("/healthz")
async def healthcheck() -> dict:
    """Lightweight readiness probe."""

    return {
        "status": "ok",
        "service": "outfit-matcher",
        "environment": matcher_app.config.environment or "local",
        "classifier_available": matcher_app.classifier.is_available(),
    }


@app.post("/garments/normalize")
def normalize_garment(raw: Dict[str, Any]) -> dict:
    """Map raw classifier attributes to a canonical garment."""

    return normalize(raw).to_dict()


@app.post("/recommendations")
def recommend(request: RecommendationRequest) -> dict:
    """Rank (top, bottom) pairings for the submitted wardrobe."""

    response = matcher_app.recommend_from_payload(request.model_dump())
    if response.get("status") != "ok":
        raise HTTPException(status_code=422, detail=response.get("message", "invalid request"))
    return response


@app.get("/weather")
def weather(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    city: Optional[str] = Query(None, min_length=1),
) -> dict:
    """Current weather plus clothing guidance for coordinates or a city."""

    location = _location(lat, lon, city)
    try:
        return matcher_app.weather_guidance(location)
    except LocationNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (WeatherProviderError, requests.RequestException) as exc:
        raise HTTPException(status_code=502, detail="weather service unavailable") from exc


@app.get("/weather/forecast/{kind}")
def forecast(
    kind: str,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    city: Optional[str] = Query(None, min_length=1),
    count: Optional[int] = Query(None, ge=1),
) -> dict:
    """Hourly (up to 24 h) or daily (up to 7 days) forecast."""

    if kind not in ("hourly", "daily"):
        raise HTTPException(status_code=404, detail=f"unknown forecast kind: {kind}")
    location = _location(lat, lon, city)
    try:
        if kind == "hourly":
            entries = matcher_app.get_hourly_forecast(location, count or 12)
        else:
            entries = matcher_app.get_daily_forecast(location, count or 7)
    except LocationNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (WeatherProviderError, requests.RequestException) as exc:
        raise HTTPException(status_code=502, detail="weather service unavailable") from exc
    return {"kind": kind, "forecast": [entry.to_dict() for entry in entries]}


def _location(lat: Optional[float], lon: Optional[float], city: Optional[str]) -> Any:
    if lat is not None and lon is not None:
        return Coordinates(lat, lon)
    if city:
        return city
    raise HTTPException(status_code=422, detail="either lat and lon or city is required")


@app.delete("/weather/cache")
def clear_weather_cache() -> dict:
    matcher_app.clear_weather_cache()
    return {"status": "cleared"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=8080, reload=False)
