"""Weather provider abstractions and the Open-Meteo implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, ValidationError

from matcher_app.config import DEFAULT_GEOCODING_URL, DEFAULT_USER_AGENT, DEFAULT_WEATHER_URL
from models.weather import Coordinates, DailyForecast, HourlyForecast, WeatherReading
from tools.observability import instrument_call


LOGGER = logging.getLogger(__name__)

GEOCODING_TIMEOUT_SECONDS = 15.0
MAX_FORECAST_HOURS = 24
MAX_FORECAST_DAYS = 7

WMO_WEATHER_CODES: Dict[int, str] = {
    0: "clear sky",
    1: "mainly clear",
    2: "partly cloudy",
    3: "overcast",
    45: "fog",
    48: "depositing rime fog",
    51: "light drizzle",
    53: "moderate drizzle",
    55: "dense drizzle",
    56: "light freezing drizzle",
    57: "dense freezing drizzle",
    61: "slight rain",
    63: "moderate rain",
    65: "heavy rain",
    66: "light freezing rain",
    67: "heavy freezing rain",
    71: "slight snow fall",
    73: "moderate snow fall",
    75: "heavy snow fall",
    77: "snow grains",
    80: "slight rain showers",
    81: "moderate rain showers",
    82: "violent rain showers",
    85: "slight snow showers",
    86: "heavy snow showers",
    95: "thunderstorm",
    96: "thunderstorm with slight hail",
    99: "thunderstorm with heavy hail",
}


class WeatherProviderError(RuntimeError):
    """Raised when a provider reports an error or returns an unusable payload."""


class LocationNotFoundError(WeatherProviderError):
    """Raised when a city name cannot be geocoded."""


def describe_weather_code(code: int) -> str:
    return WMO_WEATHER_CODES.get(code, f"weather code {code}")


class _CurrentConditions(BaseModel):
    temperature_2m: float
    relative_humidity_2m: float = 0.0
    apparent_temperature: Optional[float] = None
    precipitation: float = 0.0
    weather_code: int = 0
    wind_speed_10m: float = 0.0


class _ForecastResponse(BaseModel):
    latitude: float
    longitude: float
    current: _CurrentConditions


class _HourlySeries(BaseModel):
    time: List[str]
    temperature_2m: List[Optional[float]]
    apparent_temperature: List[Optional[float]] = []
    precipitation_probability: List[Optional[float]] = []
    weather_code: List[Optional[int]] = []
    wind_speed_10m: List[Optional[float]] = []


class _HourlyResponse(BaseModel):
    hourly: _HourlySeries


class _DailySeries(BaseModel):
    time: List[str]
    temperature_2m_max: List[Optional[float]]
    temperature_2m_min: List[Optional[float]]
    precipitation_sum: List[Optional[float]] = []
    weather_code: List[Optional[int]] = []
    sunrise: List[Optional[str]] = []
    sunset: List[Optional[str]] = []


class _DailyResponse(BaseModel):
    daily: _DailySeries


def _at(series: List[Any], index: int) -> Any:
    return series[index] if index < len(series) else None


def _validated(model: type[BaseModel], payload: Dict[str, Any]) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        LOGGER.error("Weather payload schema validation failed", exc_info=exc)
        raise WeatherProviderError("Weather payload failed schema validation") from exc


class _GeocodingResult(BaseModel):
    name: str
    latitude: float
    longitude: float
    country: Optional[str] = None


class _GeocodingResponse(BaseModel):
    results: List[_GeocodingResult] = []


class WeatherProvider(ABC):
    """Abstract weather provider interface."""

    @abstractmethod
    def fetch_current(self, coordinates: Coordinates, timeout: float) -> WeatherReading:
        """Return current conditions for the coordinates or raise."""

    @abstractmethod
    def fetch_hourly_forecast(self, coordinates: Coordinates, hours: int, timeout: float) -> List[HourlyForecast]:
        """Return up to ``hours`` hourly entries starting now."""

    @abstractmethod
    def fetch_daily_forecast(self, coordinates: Coordinates, days: int, timeout: float) -> List[DailyForecast]:
        """Return up to ``days`` daily entries starting today."""

    @abstractmethod
    def geocode(self, city: str) -> Coordinates:
        """Resolve a city name to coordinates or raise LocationNotFoundError."""


class OpenMeteoWeatherProvider(WeatherProvider):
    """Open-Meteo forecast and geocoding client with schema validation."""

    def __init__(
        self,
        base_url: str = DEFAULT_WEATHER_URL,
        geocoding_url: str = DEFAULT_GEOCODING_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.geocoding_url = geocoding_url
        self.user_agent = user_agent
        self.session = session or requests.Session()

    def _get_json(self, url: str, params: Dict[str, Any], timeout: float) -> Dict[str, Any]:
        response = self.session.get(url, params=params, timeout=timeout, headers={"User-Agent": self.user_agent})
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise WeatherProviderError("Unexpected weather payload")
        if payload.get("error"):
            raise WeatherProviderError(f"Weather API error: {payload.get('reason', 'unknown')}")
        return payload

    @instrument_call("fetch_current_weather")
    def fetch_current(self, coordinates: Coordinates, timeout: float) -> WeatherReading:
        params = {
            "latitude": coordinates.latitude,
            "longitude": coordinates.longitude,
            "current": ",".join(
                [
                    "temperature_2m",
                    "relative_humidity_2m",
                    "apparent_temperature",
                    "precipitation",
                    "weather_code",
                    "wind_speed_10m",
                    "wind_direction_10m",
                    "pressure_msl",
                ]
            ),
            "daily": "temperature_2m_max,temperature_2m_min",
            "timezone": "auto",
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
            "precipitation_unit": "inch",
        }
        parsed = _validated(_ForecastResponse, self._get_json(self.base_url, params, timeout))
        current = parsed.current
        feels_like = current.apparent_temperature
        return WeatherReading(
            temperature_f=float(round(current.temperature_2m)),
            feels_like_f=float(round(feels_like)) if feels_like is not None else None,
            humidity=current.relative_humidity_2m,
            wind_speed=current.wind_speed_10m,
            description=describe_weather_code(current.weather_code),
            latitude=parsed.latitude,
            longitude=parsed.longitude,
        )

    @instrument_call("fetch_hourly_forecast")
    def fetch_hourly_forecast(self, coordinates: Coordinates, hours: int, timeout: float) -> List[HourlyForecast]:
        hours = max(1, min(hours, MAX_FORECAST_HOURS))
        params = {
            "latitude": coordinates.latitude,
            "longitude": coordinates.longitude,
            "hourly": "temperature_2m,apparent_temperature,precipitation_probability,weather_code,wind_speed_10m",
            "timezone": "auto",
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
            "forecast_hours": hours,
        }
        series = _validated(_HourlyResponse, self._get_json(self.base_url, params, timeout)).hourly
        entries: List[HourlyForecast] = []
        for index, timestamp in enumerate(series.time[:hours]):
            temperature = _at(series.temperature_2m, index)
            if temperature is None:
                continue
            code = _at(series.weather_code, index)
            entries.append(
                HourlyForecast(
                    time=timestamp,
                    temperature_f=temperature,
                    description=describe_weather_code(code) if code is not None else "unknown",
                    feels_like_f=_at(series.apparent_temperature, index),
                    precipitation_probability=_at(series.precipitation_probability, index),
                    wind_speed=_at(series.wind_speed_10m, index),
                )
            )
        return entries

    @instrument_call("fetch_daily_forecast")
    def fetch_daily_forecast(self, coordinates: Coordinates, days: int, timeout: float) -> List[DailyForecast]:
        days = max(1, min(days, MAX_FORECAST_DAYS))
        params = {
            "latitude": coordinates.latitude,
            "longitude": coordinates.longitude,
            "daily": "temperature_2m_max,temperature_2m_min,precipitation_sum,weather_code,sunrise,sunset",
            "timezone": "auto",
            "temperature_unit": "fahrenheit",
            "precipitation_unit": "inch",
            "forecast_days": days,
        }
        series = _validated(_DailyResponse, self._get_json(self.base_url, params, timeout)).daily
        entries: List[DailyForecast] = []
        for index, day in enumerate(series.time[:days]):
            high = _at(series.temperature_2m_max, index)
            low = _at(series.temperature_2m_min, index)
            if high is None or low is None:
                continue
            code = _at(series.weather_code, index)
            entries.append(
                DailyForecast(
                    date=day,
                    temperature_max_f=high,
                    temperature_min_f=low,
                    description=describe_weather_code(code) if code is not None else "unknown",
                    precipitation_sum=_at(series.precipitation_sum, index),
                    sunrise=_at(series.sunrise, index),
                    sunset=_at(series.sunset, index),
                )
            )
        return entries

    @instrument_call("geocode_city")
    def geocode(self, city: str) -> Coordinates:
        if not city or not city.strip():
            raise LocationNotFoundError("City name is required")
        params = {"name": city.strip(), "count": 1, "language": "en", "format": "json"}
        try:
            payload = self._get_json(self.geocoding_url, params, GEOCODING_TIMEOUT_SECONDS)
            parsed = _GeocodingResponse.model_validate(payload)
        except (requests.RequestException, WeatherProviderError, ValidationError) as exc:
            raise LocationNotFoundError(f"City not found: {city}") from exc
        if not parsed.results:
            raise LocationNotFoundError(f"City not found: {city}")
        result = parsed.results[0]
        return Coordinates(latitude=result.latitude, longitude=result.longitude)


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests and demos.

    ``failures`` lists errors to raise on successive fetches before the
    reading is returned.
    """

    def __init__(
        self,
        reading: WeatherReading | None = None,
        failures: List[Exception] | None = None,
        cities: Dict[str, Coordinates] | None = None,
        hourly: List[HourlyForecast] | None = None,
        daily: List[DailyForecast] | None = None,
    ) -> None:
        self.reading = reading or WeatherReading(temperature_f=65.0, description="clear sky", humidity=40.0)
        self.failures = list(failures or [])
        self.cities = {name.lower(): coords for name, coords in (cities or {}).items()}
        self.hourly = list(hourly or [])
        self.daily = list(daily or [])
        self.fetch_calls: List[Coordinates] = []
        self.forecast_calls: List[tuple] = []
        self.timeouts: List[float] = []
        self.geocode_calls: List[str] = []

    def _record_timeout(self, timeout: float) -> None:
        self.timeouts.append(timeout)
        if self.failures:
            raise self.failures.pop(0)

    def fetch_current(self, coordinates: Coordinates, timeout: float) -> WeatherReading:
        self.fetch_calls.append(coordinates)
        self._record_timeout(timeout)
        LOGGER.info("Returning mock weather", extra={"cache_key": coordinates.cache_key()})
        return self.reading

    def fetch_hourly_forecast(self, coordinates: Coordinates, hours: int, timeout: float) -> List[HourlyForecast]:
        self.forecast_calls.append(("hourly", coordinates, hours))
        self._record_timeout(timeout)
        return self.hourly[:hours]

    def fetch_daily_forecast(self, coordinates: Coordinates, days: int, timeout: float) -> List[DailyForecast]:
        self.forecast_calls.append(("daily", coordinates, days))
        self._record_timeout(timeout)
        return self.daily[:days]

    def geocode(self, city: str) -> Coordinates:
        self.geocode_calls.append(city)
        coordinates = self.cities.get(city.strip().lower())
        if coordinates is None:
            raise LocationNotFoundError(f"City not found: {city}")
        return coordinates


__all__ = [
    "WMO_WEATHER_CODES",
    "WeatherProviderError",
    "LocationNotFoundError",
    "describe_weather_code",
    "WeatherProvider",
    "OpenMeteoWeatherProvider",
    "MockWeatherProvider",
]
