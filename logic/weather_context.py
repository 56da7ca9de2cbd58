"""Deterministic clothing guidance derived from a weather snapshot."""

from __future__ import annotations

from typing import Dict, Tuple

from models.weather import WeatherSnapshot

# Lower bound (inclusive, °F) -> (temperature band, layers).
TEMPERATURE_BANDS_F: Tuple[Tuple[float, str, str], ...] = (
    (86.0, "hot", "none"),
    (72.0, "warm", "light"),
    (59.0, "mild", "light"),
    (41.0, "cool", "medium"),
    (23.0, "cold", "heavy"),
)


def _mentions(description: str, *words: str) -> bool:
    lowered = description.lower()
    return any(word in lowered for word in words)


def outfit_weather_context(weather: WeatherSnapshot) -> Dict[str, object]:
    """Translate a snapshot into temperature band, layering and fabric needs."""

    temperature = weather.temperature_f
    band, layers = "freezing", "heavy"
    for lower_bound, name, layer_label in TEMPERATURE_BANDS_F:
        if temperature >= lower_bound:
            band, layers = name, layer_label
            break

    return {
        "temperature": band,
        "layers": layers,
        "waterproof": _mentions(weather.description, "rain", "drizzle"),
        "breathable": temperature > 68 or weather.humidity > 70,
    }


def clothing_weather_advice(weather: WeatherSnapshot) -> Dict[str, bool]:
    """Yes/no guidance for common garment types."""

    temperature = weather.temperature_f
    sunny = _mentions(weather.description, "clear", "sunny")
    return {
        "shorts": temperature >= 68,
        "long_pants": temperature <= 77,
        "short_sleeves": temperature >= 64,
        "long_sleeves": temperature <= 72,
        "jacket": temperature <= 59,
        "heavy_coat": temperature <= 41,
        "umbrella": _mentions(weather.description, "rain", "drizzle", "shower"),
        "sunglasses": sunny and temperature >= 59,
    }


__all__ = ["TEMPERATURE_BANDS_F", "outfit_weather_context", "clothing_weather_advice"]
