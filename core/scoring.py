"""
City Scoring Module

Converts a metrics snapshot into a single 0-100 score and a rating label:
- Environmental sub-scores inverted linearly (lower impact = better)
- Happiness and traffic sub-scores
- Blend with the education / healthcare / economy average once any is present
"""

import logging
from typing import Any, Dict, List, Tuple, Union

from core.models import EnvironmentalMetrics, round_half_up

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# WEIGHTS
# ═══════════════════════════════════════════════════════════════════════════
ENVIRONMENTAL_WEIGHTS: Dict[str, float] = {
    "emissions": 0.20,
    "energy": 0.15,
    "water": 0.15,
    "heat": 0.15,
    "happiness": 0.25,
    "traffic": 0.10,
}

SOCIAL_FIELDS = ("education", "healthcare", "economy")
SOCIAL_WEIGHT = 0.2

# (threshold, label), checked top-down
RATING_BANDS: List[Tuple[int, str]] = [
    (90, "Excellent"),
    (80, "Very Good"),
    (70, "Good"),
    (60, "Fair"),
    (50, "Mediocre"),
    (40, "Poor"),
    (30, "Very Poor"),
]
LOWEST_RATING = "Critical"


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def sub_scores(metrics: EnvironmentalMetrics) -> Dict[str, float]:
    """Per-field 0-100 sub-scores."""
    return {
        "emissions": _clamp(100 - metrics.emissions / 5),
        "energy": _clamp(100 - metrics.energy / 5),
        "water": _clamp(100 - metrics.water / 5),
        "heat": _clamp(100 - metrics.heat / 5),
        "happiness": _clamp(metrics.happiness / 2),
        "traffic": _clamp(100 - metrics.traffic),
        "education": _clamp(metrics.education),
        "healthcare": _clamp(metrics.healthcare),
        "economy": _clamp(metrics.economy),
    }


def score(metrics: EnvironmentalMetrics, detailed: bool = False) -> Union[int, Dict[str, Any]]:
    """
    Calculate the overall city score.

    The social blend averages all three of education, healthcare and economy
    with absent fields counted as 0, rather than averaging only the positive
    ones. That keeps the score non-decreasing in each social field.

    Args:
        metrics: Snapshot to score
        detailed: If True, return the breakdown as well

    Returns:
        {"score": int, "breakdown": {...}} if detailed
        Just the score (int 0-100) otherwise
    """
    subs = sub_scores(metrics)
    environmental = sum(subs[f] * w for f, w in ENVIRONMENTAL_WEIGHTS.items())

    # Blended in once any social field is present; absent ones then count as 0
    if any(getattr(metrics, f) > 0 for f in SOCIAL_FIELDS):
        social_average = sum(subs[f] for f in SOCIAL_FIELDS) / len(SOCIAL_FIELDS)
        raw = environmental * (1 - SOCIAL_WEIGHT) + social_average * SOCIAL_WEIGHT
    else:
        social_average = None
        raw = environmental

    final_score = round_half_up(raw)

    if detailed:
        return {
            "score": final_score,
            "breakdown": {
                "sub_scores": subs,
                "environmental": environmental,
                "social_average": social_average,
                "raw_score": raw,
            },
        }
    return final_score


def rating(value: int) -> str:
    """Map a 0-100 score to its rating label."""
    for threshold, label in RATING_BANDS:
        if value >= threshold:
            return label
    return LOWEST_RATING


def explain_score(metrics: EnvironmentalMetrics) -> str:
    """Generate human-readable explanation of score."""
    result = score(metrics, detailed=True)
    breakdown = result["breakdown"]

    lines = [f"Score: {result['score']}/100 ({rating(result['score'])})"]
    lines.append("")
    lines.append("Sub-scores:")
    for name, value in breakdown["sub_scores"].items():
        weight = ENVIRONMENTAL_WEIGHTS.get(name)
        suffix = f" x {weight:.2f}" if weight is not None else ""
        lines.append(f"  {name}: {value:.1f}{suffix}")

    if breakdown["social_average"] is not None:
        lines.append(
            f"\nSocial blend: {breakdown['social_average']:.1f} at "
            f"{SOCIAL_WEIGHT:.0%} weight"
        )

    return "\n".join(lines)
