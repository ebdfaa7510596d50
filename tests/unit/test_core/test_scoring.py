import pytest
from core.models import EnvironmentalMetrics
from core.scoring import explain_score, rating, score, sub_scores

def test_empty_city_score():
    """An empty city scores 75 and is not rated Excellent."""
    metrics = EnvironmentalMetrics()
    assert score(metrics) == 75  # 0.65 * 100 + 0.10 * 100
    assert rating(score(metrics)) == "Good"

def test_lone_park_score():
    metrics = EnvironmentalMetrics(emissions=-60, water=40, heat=-80, happiness=40)
    # 20 + 15 + 0.15 * 92 + 15 + 0.25 * 20 + 10 = 78.8
    assert score(metrics) == 79

def test_sub_scores_clamped():
    subs = sub_scores(EnvironmentalMetrics(emissions=-500, energy=900, happiness=400, traffic=120))
    assert subs["emissions"] == 100
    assert subs["energy"] == 0
    assert subs["happiness"] == 100
    assert subs["traffic"] == 0

def test_social_blend():
    """Once any social field is present, the three are averaged in at 20% weight."""
    metrics = EnvironmentalMetrics(education=50)
    # 75 * 0.8 + (50 + 0 + 0) / 3 * 0.2
    assert score(metrics) == 63

    metrics = EnvironmentalMetrics(education=100, healthcare=100, economy=100)
    assert score(metrics) == 80  # 75 * 0.8 + 100 * 0.2

def test_detailed_breakdown():
    result = score(EnvironmentalMetrics(education=50), detailed=True)
    assert result["score"] == 63
    breakdown = result["breakdown"]
    assert breakdown["environmental"] == pytest.approx(75)
    assert breakdown["social_average"] == pytest.approx(50 / 3)
    assert breakdown["raw_score"] == pytest.approx(63.33, abs=0.01)

def test_detailed_without_social():
    result = score(EnvironmentalMetrics(), detailed=True)
    assert result["breakdown"]["social_average"] is None

def test_lower_impact_never_scores_worse():
    """Reducing any environmental load cannot lower the score."""
    for field in ("emissions", "energy", "water", "heat"):
        worse = EnvironmentalMetrics(**{field: 200})
        better = EnvironmentalMetrics(**{field: 100})
        assert score(better) >= score(worse)

    assert score(EnvironmentalMetrics(happiness=120)) >= score(EnvironmentalMetrics(happiness=60))
    assert score(EnvironmentalMetrics(traffic=20)) >= score(EnvironmentalMetrics(traffic=60))

def test_more_services_never_score_worse():
    base = EnvironmentalMetrics(education=50)
    assert score(EnvironmentalMetrics(education=50, healthcare=10)) >= score(base)
    assert score(EnvironmentalMetrics(education=80)) >= score(base)
    assert score(EnvironmentalMetrics(education=50, economy=5)) >= score(base)

def test_score_range():
    terrible = EnvironmentalMetrics(emissions=1000, energy=1000, water=1000, heat=1000, traffic=100)
    assert score(terrible) == 0
    assert rating(score(terrible)) == "Critical"

    ideal = EnvironmentalMetrics(happiness=200)
    assert score(ideal) == 100
    assert rating(score(ideal)) == "Excellent"

def test_rating_bands():
    assert rating(90) == "Excellent"
    assert rating(89) == "Very Good"
    assert rating(70) == "Good"
    assert rating(60) == "Fair"
    assert rating(50) == "Mediocre"
    assert rating(40) == "Poor"
    assert rating(30) == "Very Poor"
    assert rating(29) == "Critical"

def test_explain_score():
    text = explain_score(EnvironmentalMetrics(education=50))
    assert text.startswith("Score: 63/100 (Fair)")
    assert "Social blend" in text
