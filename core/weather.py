"""
Weather Adjuster

Refines the emissions figure of a provisional snapshot using current weather.
This is the only asynchronous step of a metrics refresh. It fails soft: any
error or timeout returns the unadjusted value.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from loaders.weather import WeatherProvider, WeatherReading

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0

VENTILATED_CONTEXTS = ("residential", "commercial")


def weather_multiplier(reading: WeatherReading, context_label: str = "city") -> float:
    """
    Multiplier applied to raw emissions for the given conditions.

    Only one temperature band applies, checked hottest first. Wind bands
    depend on the context label.
    """
    multiplier = 1.0

    # Temperature: heating and cooling load
    if reading.temperature > 30:
        multiplier += 0.3
    elif reading.temperature > 25:
        multiplier += 0.2
    elif reading.temperature < 0:
        multiplier += 0.25
    elif reading.temperature < 10:
        multiplier += 0.15

    # Wind: ventilation for homes and shops, pollution spread for industry
    if reading.wind_speed > 15:
        if context_label in VENTILATED_CONTEXTS:
            multiplier -= 0.15
        elif context_label == "industrial":
            multiplier += 0.05
    elif reading.wind_speed > 8:
        if context_label in VENTILATED_CONTEXTS:
            multiplier -= 0.1

    # Humidity: comfort
    if reading.humidity > 85:
        multiplier += 0.1
    elif reading.humidity > 70:
        multiplier += 0.05

    if context_label == "greenspace" and reading.temperature > 25:
        multiplier += 0.2
    if context_label == "solar-farm" and "cloud" in reading.description:
        multiplier -= 0.3
    if context_label == "wind-farm" and reading.wind_speed > 12:
        multiplier += 0.4

    return multiplier


class WeatherAdjuster:
    """
    Applies weather_multiplier() to emissions using an injected provider.

    The provider is synchronous (HTTP via requests), so it runs in a worker
    thread bounded by `timeout`. Each lookup gets its own single-thread
    executor that is shut down without waiting, so a stalled provider is
    abandoned instead of holding up event loop shutdown.
    """

    def __init__(self, provider: WeatherProvider, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.provider = provider
        self.timeout = timeout
        self.last_reading: Optional[WeatherReading] = None

    async def fetch_reading(self) -> WeatherReading:
        """Fetch current conditions without blocking the event loop."""
        loop = asyncio.get_running_loop()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="weather")
        try:
            reading = await asyncio.wait_for(
                loop.run_in_executor(executor, self.provider.fetch_current),
                timeout=self.timeout,
            )
        finally:
            executor.shutdown(wait=False)
        self.last_reading = reading
        return reading

    async def adjust_emissions(self, raw_emissions: float, context_label: str = "city") -> float:
        """
        Return weather-adjusted emissions.

        Args:
            raw_emissions: Emissions from the spatial aggregation
            context_label: "city", or a category/building id for finer rules

        Returns:
            Adjusted emissions, or `raw_emissions` unchanged on any failure
        """
        try:
            reading = await self.fetch_reading()
        except asyncio.TimeoutError:
            log.warning(f"Weather lookup timed out after {self.timeout}s; using unadjusted emissions")
            return raw_emissions
        except Exception as e:
            log.warning(f"Failed to apply weather adjustments: {e}")
            return raw_emissions

        multiplier = weather_multiplier(reading, context_label)
        log.debug(f"Weather multiplier for '{context_label}': {multiplier:.2f}")
        return raw_emissions * multiplier
