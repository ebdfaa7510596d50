import pytest
from core.advisory import (
    DEFAULT_DISASTER_RISK, GENERAL_TIPS, compatibility_tips, disaster_risk,
    future_predictions, improvement_tips, weather_recommendations,
)
from core.catalog import get_catalog
from core.models import EnvironmentalMetrics
from loaders.weather import WeatherReading

def test_tips_for_empty_city():
    """An empty city only triggers the happiness tips plus the general advice."""
    tips = improvement_tips(EnvironmentalMetrics())
    assert len(tips) == 5
    assert tips[0].startswith("Low happiness")
    assert tips[-3:] == GENERAL_TIPS

def test_tips_thresholds():
    tips = improvement_tips(EnvironmentalMetrics(emissions=120, happiness=80))
    assert tips[0].startswith("High emissions")
    assert not any(t.startswith("Low happiness") for t in tips)

    tips = improvement_tips(EnvironmentalMetrics(emissions=60, happiness=80))
    assert tips[0].startswith("Moderate emissions")

def test_social_tips_ignore_zero():
    """Zero social composites are treated as absent, not low."""
    assert not any("education" in t.lower() for t in improvement_tips(EnvironmentalMetrics()))
    tips = improvement_tips(EnvironmentalMetrics(education=30, happiness=80))
    assert any(t.startswith("Low education") for t in tips)

def test_predictions_for_empty_city():
    predictions = future_predictions(EnvironmentalMetrics())
    assert [p.timeframe for p in predictions] == [
        "5 Years", "5 Years", "15 Years", "15 Years", "30 Years",
    ]
    # Score 75 is not above 75
    assert predictions[-1].impact == "neutral"
    assert predictions[3].impact == "negative"

def test_predictions_padded_to_minimum():
    metrics = EnvironmentalMetrics(emissions=50, water=50, heat=50, happiness=64)
    predictions = future_predictions(metrics)
    assert len(predictions) == 4
    assert predictions[2].timeframe == "10 Years"
    assert predictions[2].impact == "positive"
    assert predictions[3].timeframe == "20 Years"

def test_innovation_hub_prediction():
    metrics = EnvironmentalMetrics(economy=80, education=80, happiness=80)
    predictions = future_predictions(metrics)
    assert any("innovation hub" in p.description for p in predictions)

def test_compatibility_tips():
    catalog = get_catalog()
    tips = compatibility_tips(catalog, "residential-house")
    assert tips[0] == "Residential buildings work well near parks and retail."
    assert tips[-1] == "Cannot be placed near: Factory, Industrial Zone, Waste Treatment, Farm"

    solar = compatibility_tips(catalog, "solar-farm")
    assert len(solar) == 2
    assert not any(t.startswith("Cannot") for t in solar)

    assert compatibility_tips(catalog, "castle") == []

def test_disaster_risk_default():
    assert disaster_risk(None) == DEFAULT_DISASTER_RISK

def test_disaster_risk_storm():
    reading = WeatherReading(
        temperature=32, humidity=85, wind_speed=16,
        description="thunderstorm with light rain",
    )
    risk = disaster_risk(reading)
    assert risk.flood == 50
    assert risk.heatwave == 70
    assert risk.storm == 90
    assert risk.overall == 90

def test_disaster_risk_calm():
    reading = WeatherReading(temperature=18, humidity=50, wind_speed=3, description="clear sky")
    assert disaster_risk(reading).overall == 0

def test_weather_recommendations():
    reading = WeatherReading(temperature=33, humidity=40, wind_speed=18, description="clear sky")
    recs = weather_recommendations(reading, aqi=120)
    assert recs[0].startswith("High temperatures detected")
    assert any(r.startswith("Strong winds") for r in recs)
    assert any(r.startswith("Poor air quality") for r in recs)
    assert len(recs) == 7

    mild = WeatherReading(temperature=18, humidity=50, wind_speed=3, description="clear sky")
    assert len(weather_recommendations(mild)) == 2
