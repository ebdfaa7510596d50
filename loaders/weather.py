"""
Weather Loader - Current conditions from OpenWeatherMap.

Features:
- Retry with exponential backoff
- SQLite cache with a time-to-live to avoid repeated lookups
- Fixed fallback reading when the service is unreachable
"""

import json
import os
import sqlite3
import time
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Protocol
import logging
import requests
from tenacity import retry, stop_after_attempt, stop_after_delay, wait_exponential

log = logging.getLogger(__name__)

# No new attempt is started once this much time has been spent retrying
RETRY_BUDGET_SECONDS = 5


@dataclass
class WeatherReading:
    """Current weather conditions for a location."""
    temperature: float  # °C
    humidity: float  # %
    wind_speed: float  # m/s
    description: str
    icon: str = ""
    feels_like: Optional[float] = None
    pressure: Optional[float] = None

    def to_dict(self) -> Dict:
        return asdict(self)


# Returned whenever live data cannot be fetched
FALLBACK_READING = WeatherReading(
    temperature=20,
    humidity=65,
    wind_speed=5,
    description="Weather data unavailable",
    icon="",
    feels_like=21,
    pressure=1013,
)


class WeatherProvider(Protocol):
    """Anything that can report current conditions."""

    def fetch_current(self) -> WeatherReading:
        ...


class StaticWeatherProvider:
    """Always reports the same reading. Useful offline and in tests."""

    def __init__(self, reading: WeatherReading = FALLBACK_READING):
        self.reading = reading

    def fetch_current(self) -> WeatherReading:
        return self.reading


class WeatherCache:
    """SQLite cache for weather readings, keyed by location."""

    def __init__(self, db_path: str = "weather_cache.db", ttl_seconds: float = 600):
        self.db_path = db_path
        self.ttl_seconds = ttl_seconds
        self._init_db()

    def _init_db(self):
        conn = sqlite3.connect(self.db_path)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS weather_cache (
                location_key TEXT PRIMARY KEY,
                reading_json TEXT,
                created_at REAL
            )
        """)
        conn.commit()
        conn.close()

    def _make_key(self, city: str, country: str) -> str:
        return f"{city.lower().strip()},{country.lower().strip()}"

    def get(self, city: str, country: str) -> Optional[WeatherReading]:
        conn = sqlite3.connect(self.db_path)
        row = conn.execute(
            "SELECT reading_json, created_at FROM weather_cache WHERE location_key = ?",
            (self._make_key(city, country),)
        ).fetchone()
        conn.close()
        if row and time.time() - row[1] < self.ttl_seconds:
            return WeatherReading(**json.loads(row[0]))
        return None

    def set(self, city: str, country: str, reading: WeatherReading):
        conn = sqlite3.connect(self.db_path)
        conn.execute(
            """INSERT OR REPLACE INTO weather_cache
               (location_key, reading_json, created_at)
               VALUES (?, ?, ?)""",
            (self._make_key(city, country), json.dumps(reading.to_dict()), time.time())
        )
        conn.commit()
        conn.close()


class WeatherLoader:
    """
    Fetch current weather from the OpenWeatherMap API.

    API Documentation:
    https://openweathermap.org/current
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(
        self,
        api_key: Optional[str] = None,
        city: str = "New York",
        country: str = "US",
        cache_path: str = "weather_cache.db",
        cache_ttl: float = 600,
        timeout: float = 10,
        use_mock: bool = False,
    ):
        self.api_key = api_key or os.environ.get("OPENWEATHER_API_KEY", "")
        self.city = city
        self.country = country
        self.timeout = timeout
        self.use_mock = use_mock or not self.api_key
        self.cache = WeatherCache(cache_path, ttl_seconds=cache_ttl)
        self.session = requests.Session()

    @retry(
        stop=(stop_after_attempt(3) | stop_after_delay(RETRY_BUDGET_SECONDS)),
        wait=wait_exponential(multiplier=1, min=1, max=5),
    )
    def _make_request(self, params: Dict) -> Dict:
        """Make a request with retry."""
        response = self.session.get(self.BASE_URL, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def fetch_current(self) -> WeatherReading:
        """
        Get current conditions for the configured location.

        Returns:
            WeatherReading, or FALLBACK_READING if the service is unreachable
            or returns something unparseable
        """
        if self.use_mock:
            return FALLBACK_READING

        cached = self.cache.get(self.city, self.country)
        if cached:
            log.debug(f"Weather cache hit for {self.city},{self.country}")
            return cached

        params = {
            "q": f"{self.city},{self.country}",
            "units": "metric",
            "appid": self.api_key,
        }

        try:
            data = self._make_request(params)
        except Exception as e:
            log.error(f"Weather request failed for {self.city},{self.country}: {e}")
            return FALLBACK_READING

        try:
            reading = self._parse(data)
        except (KeyError, IndexError, ValueError, TypeError) as e:
            log.error(f"Failed to parse weather response: {e}")
            return FALLBACK_READING

        self.cache.set(self.city, self.country, reading)
        log.info(
            f"Weather for {self.city}: {reading.temperature:.1f}°C, "
            f"{reading.humidity:.0f}% humidity, wind {reading.wind_speed:.1f} m/s"
        )
        return reading

    @staticmethod
    def _parse(data: Dict) -> WeatherReading:
        main = data["main"]
        weather = data["weather"][0]
        icon = weather.get("icon", "")
        return WeatherReading(
            temperature=float(main["temp"]),
            humidity=float(main["humidity"]),
            wind_speed=float(data["wind"]["speed"]),
            description=weather.get("description", ""),
            icon=f"https://openweathermap.org/img/wn/{icon}@2x.png" if icon else "",
            feels_like=main.get("feels_like"),
            pressure=main.get("pressure"),
        )


# Singleton
_loader: Optional[WeatherLoader] = None

def get_weather_loader() -> WeatherLoader:
    """Get singleton weather loader configured from the environment."""
    global _loader
    if _loader is None:
        from core.settings import PlannerSettings
        settings = PlannerSettings.from_env()
        _loader = WeatherLoader(
            api_key=settings.weather_api_key,
            city=settings.weather_city,
            country=settings.weather_country,
            cache_path=settings.cache_path,
            cache_ttl=settings.cache_ttl_seconds,
            timeout=settings.weather_timeout_seconds,
            use_mock=settings.weather_mock,
        )
    return _loader
