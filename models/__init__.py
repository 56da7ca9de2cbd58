"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.garment import Garment, MatchingContext, ScoredPairing, WeatherContext
from models.weather import Coordinates, DailyForecast, HourlyForecast, WeatherReading, WeatherSnapshot

__all__ = [
    "Garment",
    "MatchingContext",
    "ScoredPairing",
    "WeatherContext",
    "Coordinates",
    "WeatherReading",
    "WeatherSnapshot",
    "HourlyForecast",
    "DailyForecast",
]
