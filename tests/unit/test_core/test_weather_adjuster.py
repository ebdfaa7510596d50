import asyncio
import time
import pytest
from unittest.mock import MagicMock
from core.weather import WeatherAdjuster, weather_multiplier
from loaders.weather import FALLBACK_READING, StaticWeatherProvider, WeatherReading

def _reading(temperature=20, humidity=50, wind_speed=3, description="clear sky"):
    return WeatherReading(
        temperature=temperature, humidity=humidity,
        wind_speed=wind_speed, description=description,
    )

def test_fallback_is_neutral():
    """The offline reading leaves emissions unchanged."""
    assert weather_multiplier(FALLBACK_READING) == 1.0

def test_temperature_bands():
    assert weather_multiplier(_reading(temperature=32)) == pytest.approx(1.3)
    assert weather_multiplier(_reading(temperature=27)) == pytest.approx(1.2)
    assert weather_multiplier(_reading(temperature=-3)) == pytest.approx(1.25)
    assert weather_multiplier(_reading(temperature=5)) == pytest.approx(1.15)

def test_humidity_bands():
    assert weather_multiplier(_reading(humidity=90)) == pytest.approx(1.1)
    assert weather_multiplier(_reading(humidity=75)) == pytest.approx(1.05)

def test_wind_depends_on_context():
    windy = _reading(wind_speed=16)
    assert weather_multiplier(windy, "city") == 1.0
    assert weather_multiplier(windy, "residential") == pytest.approx(0.85)
    assert weather_multiplier(windy, "industrial") == pytest.approx(1.05)
    assert weather_multiplier(_reading(wind_speed=10), "commercial") == pytest.approx(0.9)

def test_building_specific_rules():
    assert weather_multiplier(_reading(temperature=27), "greenspace") == pytest.approx(1.4)
    assert weather_multiplier(_reading(description="broken clouds"), "solar-farm") == pytest.approx(0.7)
    assert weather_multiplier(_reading(wind_speed=13), "wind-farm") == pytest.approx(1.4)

def test_adjust_emissions():
    adjuster = WeatherAdjuster(StaticWeatherProvider(_reading(temperature=32)))
    result = asyncio.run(adjuster.adjust_emissions(100.0))
    assert result == pytest.approx(130.0)
    assert adjuster.last_reading.temperature == 32

def test_provider_failure_returns_raw():
    """Errors from the weather source never fail the refresh."""
    provider = MagicMock()
    provider.fetch_current.side_effect = RuntimeError("service down")
    adjuster = WeatherAdjuster(provider)
    assert asyncio.run(adjuster.adjust_emissions(42.5)) == 42.5
    assert adjuster.last_reading is None

def test_timeout_returns_raw():
    class SlowProvider:
        def fetch_current(self):
            time.sleep(0.5)
            return _reading(temperature=35)

    adjuster = WeatherAdjuster(SlowProvider(), timeout=0.05)
    assert asyncio.run(adjuster.adjust_emissions(10.0)) == 10.0
