"""
Core module for the EcoCity planner.
Contains the building catalog, grid, placement rules, impact aggregation,
scoring and the planner session.
"""

from core.models import (
    Category, BuildingType, BuildingInstance, Cell, EnvironmentalMetrics,
    Footprint, Impact, PlacementOutcome, Prediction, ValidationResult,
)
from core.errors import (
    RejectionReason, PlacementError, OutOfBoundsError, SpaceOccupiedError,
    IncompatibleAdjacencyError, BuildingNotFoundError, InvalidRotationError,
)
from core.catalog import BuildingCatalog, get_catalog
from core.grid import CityGrid
from core.placement import PlacementValidator
from core.impact import ImpactAggregator
from core.scoring import score, rating
from core.weather import WeatherAdjuster, weather_multiplier
from core.settings import PlannerSettings
from core.planner import CityPlanner, MetricsReport, create_planner

__all__ = [
    # Models
    "Category",
    "BuildingType",
    "BuildingInstance",
    "Cell",
    "EnvironmentalMetrics",
    "Footprint",
    "Impact",
    "PlacementOutcome",
    "Prediction",
    "ValidationResult",
    # Errors
    "RejectionReason",
    "PlacementError",
    "OutOfBoundsError",
    "SpaceOccupiedError",
    "IncompatibleAdjacencyError",
    "BuildingNotFoundError",
    "InvalidRotationError",
    # Engines
    "BuildingCatalog",
    "get_catalog",
    "CityGrid",
    "PlacementValidator",
    "ImpactAggregator",
    "score",
    "rating",
    "WeatherAdjuster",
    "weather_multiplier",
    # Session
    "PlannerSettings",
    "CityPlanner",
    "MetricsReport",
    "create_planner",
]
