"""
Planner Settings

All tunable values for a planner session, with explicit defaults and an
environment-variable loader.
"""

import os
from dataclasses import dataclass, asdict
from typing import Dict, Mapping, Optional

from core.grid import DEFAULT_HEIGHT, DEFAULT_WIDTH

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class PlannerSettings:
    """
    Configuration for a CityPlanner and its weather source.

    Every value has an explicit meaning and default.
    """

    # Grid
    grid_width: int = DEFAULT_WIDTH
    """Number of cells along x."""

    grid_height: int = DEFAULT_HEIGHT
    """Number of cells along y."""

    # Weather
    weather_api_key: str = ""
    """OpenWeatherMap API key. Empty means the mock source is used."""

    weather_city: str = "New York"
    """City name passed to the weather service."""

    weather_country: str = "US"
    """ISO country code passed to the weather service."""

    weather_timeout_seconds: float = 5.0
    """How long a metrics refresh waits for weather before giving up."""

    weather_mock: bool = False
    """Skip the network and use the fallback reading."""

    weather_context: str = "city"
    """Context label for the emissions adjustment (e.g. "city", "industrial")."""

    # Cache
    cache_path: str = "weather_cache.db"
    """SQLite file for cached weather readings."""

    cache_ttl_seconds: float = 600
    """How long a cached reading stays valid."""

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PlannerSettings":
        """Build settings from ECOCITY_* / OPENWEATHER_API_KEY variables."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            grid_width=int(env.get("ECOCITY_GRID_WIDTH", defaults.grid_width)),
            grid_height=int(env.get("ECOCITY_GRID_HEIGHT", defaults.grid_height)),
            weather_api_key=env.get("OPENWEATHER_API_KEY", defaults.weather_api_key),
            weather_city=env.get("ECOCITY_WEATHER_CITY", defaults.weather_city),
            weather_country=env.get("ECOCITY_WEATHER_COUNTRY", defaults.weather_country),
            weather_timeout_seconds=float(
                env.get("ECOCITY_WEATHER_TIMEOUT", defaults.weather_timeout_seconds)
            ),
            weather_mock=env.get("ECOCITY_WEATHER_MOCK", "").strip().lower() in _TRUTHY,
            weather_context=env.get("ECOCITY_WEATHER_CONTEXT", defaults.weather_context),
            cache_path=env.get("ECOCITY_CACHE_PATH", defaults.cache_path),
            cache_ttl_seconds=float(env.get("ECOCITY_CACHE_TTL", defaults.cache_ttl_seconds)),
        )
