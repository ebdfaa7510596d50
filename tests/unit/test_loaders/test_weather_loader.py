import pytest
import requests
from unittest.mock import MagicMock, patch
from tenacity import stop_after_delay
from loaders import weather as weather_module
from loaders.weather import FALLBACK_READING, WeatherCache, WeatherLoader, WeatherReading

PAYLOAD = {
    "main": {"temp": 24.3, "humidity": 58, "feels_like": 24.9, "pressure": 1011},
    "wind": {"speed": 4.6},
    "weather": [{"description": "scattered clouds", "icon": "03d"}],
}

@pytest.fixture
def mock_loader(tmp_path):
    cache_path = str(tmp_path / "test_weather.db")
    with patch('requests.Session') as mock_session:
        loader = WeatherLoader(api_key="test-key", city="Paris", country="FR", cache_path=cache_path)
        loader.session = mock_session.return_value
        yield loader

def test_fetch_current_success(mock_loader):
    """Verify a successful lookup is parsed and requested in metric units."""
    mock_response = MagicMock()
    mock_response.json.return_value = PAYLOAD
    mock_loader.session.get.return_value = mock_response

    reading = mock_loader.fetch_current()
    assert reading.temperature == 24.3
    assert reading.humidity == 58
    assert reading.wind_speed == 4.6
    assert reading.description == "scattered clouds"
    assert reading.icon == "https://openweathermap.org/img/wn/03d@2x.png"
    assert reading.pressure == 1011

    params = mock_loader.session.get.call_args.kwargs["params"]
    assert params["q"] == "Paris,FR"
    assert params["units"] == "metric"
    assert params["appid"] == "test-key"

def test_fetch_current_cached(mock_loader):
    """Second lookup within the TTL is served from the cache."""
    mock_response = MagicMock()
    mock_response.json.return_value = PAYLOAD
    mock_loader.session.get.return_value = mock_response

    first = mock_loader.fetch_current()
    second = mock_loader.fetch_current()
    assert first == second
    assert mock_loader.session.get.call_count == 1

def test_request_failure_falls_back(mock_loader):
    mock_loader._make_request = MagicMock(side_effect=requests.ConnectionError("down"))
    assert mock_loader.fetch_current() == FALLBACK_READING

def test_unparseable_response_falls_back(mock_loader):
    mock_response = MagicMock()
    mock_response.json.return_value = {"cod": 200}
    mock_loader.session.get.return_value = mock_response

    assert mock_loader.fetch_current() == FALLBACK_READING
    # Nothing was cached
    assert mock_loader.cache.get("Paris", "FR") is None

def test_mock_mode_skips_network(tmp_path):
    loader = WeatherLoader(api_key="test-key", cache_path=str(tmp_path / "w.db"), use_mock=True)
    loader.session = MagicMock()
    assert loader.fetch_current() == FALLBACK_READING
    assert not loader.session.get.called

def test_missing_api_key_uses_mock(tmp_path, monkeypatch):
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
    loader = WeatherLoader(cache_path=str(tmp_path / "w.db"))
    assert loader.use_mock

def test_cache_expiry(tmp_path):
    reading = WeatherReading(temperature=10, humidity=40, wind_speed=2, description="mist")
    fresh = WeatherCache(str(tmp_path / "c.db"), ttl_seconds=600)
    fresh.set("Oslo", "NO", reading)
    assert fresh.get("oslo ", "no") == reading

    expired = WeatherCache(str(tmp_path / "c.db"), ttl_seconds=0)
    assert expired.get("Oslo", "NO") is None

def test_singleton_from_env(tmp_path, monkeypatch):
    monkeypatch.setattr(weather_module, "_loader", None)
    monkeypatch.setenv("ECOCITY_WEATHER_CITY", "Lisbon")
    monkeypatch.setenv("ECOCITY_WEATHER_MOCK", "1")
    monkeypatch.setenv("ECOCITY_CACHE_PATH", str(tmp_path / "s.db"))

    loader = weather_module.get_weather_loader()
    assert loader.city == "Lisbon"
    assert loader.use_mock
    assert weather_module.get_weather_loader() is loader

def test_singleton_uses_configured_timeout(tmp_path, monkeypatch):
    monkeypatch.setattr(weather_module, "_loader", None)
    monkeypatch.setenv("ECOCITY_WEATHER_TIMEOUT", "3")
    monkeypatch.setenv("ECOCITY_WEATHER_MOCK", "1")
    monkeypatch.setenv("ECOCITY_CACHE_PATH", str(tmp_path / "t.db"))

    loader = weather_module.get_weather_loader()
    assert loader.timeout == 3.0

def test_retries_bounded_by_time_budget():
    """Retries stop after three attempts or the time budget, whichever comes first."""
    stop = WeatherLoader._make_request.retry.stop
    budgets = [s.max_delay for s in stop.stops if isinstance(s, stop_after_delay)]
    assert budgets == [weather_module.RETRY_BUDGET_SECONDS]
