"""
Data loaders for the EcoCity planner.

Includes:
- Current weather (OpenWeatherMap), with SQLite cache and offline fallback
"""

from loaders.weather import (
    WeatherLoader, get_weather_loader, WeatherReading, WeatherProvider,
    StaticWeatherProvider, FALLBACK_READING,
)

__all__ = [
    "WeatherLoader",
    "get_weather_loader",
    "WeatherReading",
    "WeatherProvider",
    "StaticWeatherProvider",
    "FALLBACK_READING",
]
