"""Cached, retried access to current weather."""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Callable, List, Union

import requests

from models.weather import Coordinates, DailyForecast, HourlyForecast, WeatherSnapshot
from tools.retry import RetryPolicy, call_with_retry
from tools.weather_cache import WeatherCache
from tools.weather_provider import LocationNotFoundError, WeatherProvider, WeatherProviderError

LOGGER = logging.getLogger(__name__)

RETRYABLE_ERRORS = (requests.RequestException, WeatherProviderError)

Location = Union[Coordinates, str]


def city_cache_key(city: str) -> str:
    return f"city_{city.strip().lower()}"


class WeatherGateway:
    """Serves weather from the cache and falls back to the provider on a miss.

    Provider failures are retried per the policy; once exhausted the last error
    propagates and nothing is cached for that key.
    """

    def __init__(
        self,
        provider: WeatherProvider,
        cache: WeatherCache | None = None,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.provider = provider
        self.cache = cache if cache is not None else WeatherCache()
        self.policy = policy if policy is not None else RetryPolicy()
        self.sleep = sleep

    def get_weather(self, location: Location) -> WeatherSnapshot:
        if isinstance(location, Coordinates):
            return self.get_weather_by_coordinates(location)
        if isinstance(location, str):
            return self.get_weather_by_city(location)
        raise TypeError("location must be Coordinates or a city name")

    def get_weather_by_coordinates(self, coordinates: Coordinates) -> WeatherSnapshot:
        key = coordinates.cache_key()
        cached = self.cache.get(key)
        if cached is not None:
            LOGGER.info("Weather cache hit", extra={"cache_key": key})
            return cached

        reading = call_with_retry(
            lambda: self.provider.fetch_current(coordinates, timeout=self.policy.timeout_seconds),
            self.policy,
            sleep=self.sleep,
            retry_on=RETRYABLE_ERRORS,
            operation="fetch_weather",
        )
        snapshot = WeatherSnapshot.from_reading(reading, fetched_at=self.cache.clock(), ttl_seconds=self.cache.ttl_seconds)
        LOGGER.info("Weather cached", extra={"cache_key": key, "temperature_f": snapshot.temperature_f})
        return self.cache.put(key, snapshot)

    def get_weather_by_city(self, city: str) -> WeatherSnapshot:
        if not city or not city.strip():
            raise LocationNotFoundError("City name is required")
        key = city_cache_key(city)
        cached = self.cache.get(key)
        if cached is not None:
            LOGGER.info("Weather cache hit", extra={"cache_key": key})
            return cached

        coordinates = self.provider.geocode(city)
        snapshot = self.get_weather_by_coordinates(coordinates)
        named = dataclasses.replace(snapshot, location_name=city.strip())
        return self.cache.put(key, named)

    def _resolve(self, location: Location) -> Coordinates:
        if isinstance(location, Coordinates):
            return location
        if isinstance(location, str):
            if not location.strip():
                raise LocationNotFoundError("City name is required")
            return self.provider.geocode(location)
        raise TypeError("location must be Coordinates or a city name")

    def get_hourly_forecast(self, location: Location, hours: int = 12) -> List[HourlyForecast]:
        """Hourly forecast for the next ``hours`` hours (at most 24). Never cached."""

        coordinates = self._resolve(location)
        return call_with_retry(
            lambda: self.provider.fetch_hourly_forecast(coordinates, hours, timeout=self.policy.timeout_seconds),
            self.policy,
            sleep=self.sleep,
            retry_on=RETRYABLE_ERRORS,
            operation="fetch_hourly_forecast",
        )

    def get_daily_forecast(self, location: Location, days: int = 7) -> List[DailyForecast]:
        """Daily forecast for the next ``days`` days (at most 7). Never cached."""

        coordinates = self._resolve(location)
        return call_with_retry(
            lambda: self.provider.fetch_daily_forecast(coordinates, days, timeout=self.policy.timeout_seconds),
            self.policy,
            sleep=self.sleep,
            retry_on=RETRYABLE_ERRORS,
            operation="fetch_daily_forecast",
        )

    def clear_cache(self) -> None:
        self.cache.clear()


__all__ = ["RETRYABLE_ERRORS", "WeatherGateway", "city_cache_key"]
