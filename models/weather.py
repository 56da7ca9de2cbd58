"""Weather value objects shared by the gateway and the scoring context."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from models.garment import WeatherContext


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def cache_key(self) -> str:
        return f"{self.latitude:.2f}_{self.longitude:.2f}"


@dataclass(frozen=True)
class WeatherReading:
    """Current conditions as reported by a weather provider."""

    temperature_f: float
    description: str
    humidity: float = 0.0
    wind_speed: float = 0.0
    feels_like_f: float | None = None
    latitude: float = 0.0
    longitude: float = 0.0
    location_name: str = "Current Location"


@dataclass(frozen=True)
class WeatherSnapshot:
    """Cached weather reading; immutable and superseded on refresh."""

    temperature_f: float
    description: str
    humidity: float
    wind_speed: float
    fetched_at: float
    expires_at: float
    feels_like_f: float | None = None
    latitude: float = 0.0
    longitude: float = 0.0
    location_name: str = "Current Location"

    @classmethod
    def from_reading(cls, reading: WeatherReading, fetched_at: float, ttl_seconds: float) -> "WeatherSnapshot":
        return cls(
            temperature_f=reading.temperature_f,
            description=reading.description,
            humidity=reading.humidity,
            wind_speed=reading.wind_speed,
            feels_like_f=reading.feels_like_f,
            latitude=reading.latitude,
            longitude=reading.longitude,
            location_name=reading.location_name,
            fetched_at=fetched_at,
            expires_at=fetched_at + ttl_seconds,
        )

    def is_fresh(self, now: float) -> bool:
        return self.expires_at > now

    def as_context(self) -> WeatherContext:
        return WeatherContext(temperature_f=self.temperature_f, description=self.description)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HourlyForecast:
    time: str
    temperature_f: float
    description: str
    feels_like_f: float | None = None
    precipitation_probability: float | None = None
    wind_speed: float | None = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DailyForecast:
    date: str
    temperature_max_f: float
    temperature_min_f: float
    description: str
    precipitation_sum: float | None = None
    sunrise: str | None = None
    sunset: str | None = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["Coordinates", "WeatherReading", "WeatherSnapshot", "HourlyForecast", "DailyForecast"]
