"""
City Planner Session

The single writer of a CityGrid. Handles placement, removal, rotation and
reset requests from the presentation layer, and produces MetricsReports:

1. Synchronous scan of a grid snapshot (provisional metrics)
2. Awaited weather refinement of emissions only
3. Score, rating, tips and predictions derived from the result

Each mutation bumps a generation counter. A refresh that finishes after a
newer mutation is discarded (last write wins).
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from core.advisory import (
    DisasterRisk, compatibility_tips, disaster_risk, future_predictions,
    improvement_tips, weather_recommendations,
)
from core.catalog import BuildingCatalog, get_catalog
from core.errors import RejectionReason
from core.grid import CityGrid
from core.impact import ImpactAggregator
from core.models import (
    ROTATIONS, BuildingInstance, EnvironmentalMetrics, PlacementOutcome, Prediction,
)
from core.placement import PlacementValidator
from core.scoring import rating, score
from core.settings import PlannerSettings
from core.weather import WeatherAdjuster
from loaders.weather import WeatherLoader

log = logging.getLogger(__name__)


@dataclass
class MetricsReport:
    """Everything the presentation layer renders after a grid change."""
    metrics: EnvironmentalMetrics
    score: int
    rating: str
    tips: List[str] = field(default_factory=list)
    predictions: List[Prediction] = field(default_factory=list)
    generation: int = 0

    def to_dict(self) -> Dict:
        return {
            "metrics": self.metrics.to_dict(),
            "score": self.score,
            "rating": self.rating,
            "tips": list(self.tips),
            "predictions": [p.to_dict() for p in self.predictions],
            "generation": self.generation,
        }


def build_report(metrics: EnvironmentalMetrics, generation: int = 0) -> MetricsReport:
    """Derive the display values from a rounded metrics snapshot."""
    value = score(metrics)
    return MetricsReport(
        metrics=metrics,
        score=value,
        rating=rating(value),
        tips=improvement_tips(metrics),
        predictions=future_predictions(metrics),
        generation=generation,
    )


ReportCallback = Callable[[MetricsReport], None]


class CityPlanner:
    """
    Interactive planning session over one grid.

    Usage:
        planner = CityPlanner()
        outcome = planner.place("park", 4, 4)
        report = asyncio.run(planner.refresh())
    """

    def __init__(
        self,
        catalog: Optional[BuildingCatalog] = None,
        grid: Optional[CityGrid] = None,
        weather: Optional[WeatherAdjuster] = None,
        settings: Optional[PlannerSettings] = None,
    ):
        self.settings = settings or PlannerSettings()
        self.catalog = catalog or get_catalog()
        self.grid = grid or CityGrid(self.settings.grid_width, self.settings.grid_height)
        self.validator = PlacementValidator(self.catalog)
        self.aggregator = ImpactAggregator()
        self.weather = weather
        self.context_label = self.settings.weather_context

        self.generation = 0
        self.report = build_report(EnvironmentalMetrics())
        self.history: List[MetricsReport] = []
        self._subscribers: List[ReportCallback] = []

    # ───────────────────────────────────────────────────────────────────────
    # Requests
    # ───────────────────────────────────────────────────────────────────────
    def place(self, building_id: str, x: int, y: int, rotation: int = 0) -> PlacementOutcome:
        """Validate and place a building with its origin at (x, y)."""
        if rotation not in ROTATIONS:
            return self._reject(
                RejectionReason.INVALID_ROTATION,
                f"Rotation must be one of {ROTATIONS}, got {rotation}.",
            )
        building = self.catalog.lookup(building_id)
        if building is None:
            return self._reject(RejectionReason.NOT_FOUND, f"Unknown building type: {building_id}")

        result = self.validator.validate(self.grid, x, y, building, rotation)
        if not result.valid:
            return self._reject(result.code, result.reason)

        instance = BuildingInstance(building, x, y, rotation)
        self.grid.occupy(x, y, instance)
        self._mutated()
        log.info(f"Placed {building.id} at ({x}, {y}) rotation {rotation}")
        return PlacementOutcome(
            success=True,
            message=f"{building.name} has been added to your city.",
            instance=instance,
        )

    def remove(self, x: int, y: int) -> PlacementOutcome:
        """Remove the building covering (x, y), clearing its whole footprint."""
        if not self.grid.in_bounds(x, y):
            return self._reject(RejectionReason.OUT_OF_BOUNDS, f"Cell ({x}, {y}) is outside the grid.")

        instance = self.grid.clear(x, y)
        if instance is None:
            return self._reject(RejectionReason.NOT_FOUND, f"No building at ({x}, {y}).")

        self._mutated()
        log.info(f"Removed {instance.id} from {instance.origin}")
        return PlacementOutcome(
            success=True,
            message=f"{instance.name} has been removed from the city.",
            instance=instance,
        )

    def rotate(self, x: int, y: int) -> PlacementOutcome:
        """
        Rotate the building covering (x, y) a quarter turn about its origin.

        The rotated footprint is re-validated against bounds, occupancy and
        adjacency (ignoring the building itself). A rejected rotation leaves
        the grid unchanged.
        """
        if not self.grid.in_bounds(x, y):
            return self._reject(RejectionReason.OUT_OF_BOUNDS, f"Cell ({x}, {y}) is outside the grid.")

        instance = self.grid.building_at(x, y)
        if instance is None:
            return self._reject(RejectionReason.NOT_FOUND, f"No building at ({x}, {y}).")

        ox, oy = instance.origin
        result = self.validator.validate(
            self.grid, ox, oy, instance.building, instance.next_rotation, ignore=instance
        )
        if not result.valid:
            return self._reject(result.code, result.reason)

        self.grid.clear(ox, oy)
        instance.rotate()
        self.grid.occupy(ox, oy, instance)
        self._mutated()
        log.info(f"Rotated {instance.id} at {instance.origin} to {instance.rotation}°")
        return PlacementOutcome(
            success=True,
            message=f"{instance.name} rotated to {instance.rotation}°.",
            instance=instance,
        )

    def reset(self) -> PlacementOutcome:
        """Clear the whole city."""
        self.grid.reset()
        self._mutated()
        log.info("City reset")
        return PlacementOutcome(success=True, message="Your city has been cleared.")

    def _reject(self, code: RejectionReason, reason: str) -> PlacementOutcome:
        log.info(f"Request rejected ({code.value}): {reason}")
        return PlacementOutcome(success=False, message=reason, code=code)

    def _mutated(self) -> None:
        self.generation += 1

    # ───────────────────────────────────────────────────────────────────────
    # Metrics
    # ───────────────────────────────────────────────────────────────────────
    def provisional_report(self) -> MetricsReport:
        """Report from the spatial scan alone, without weather refinement."""
        metrics = self.aggregator.compute(self.grid.snapshot())
        return build_report(metrics, self.generation)

    async def refresh(self) -> Optional[MetricsReport]:
        """
        Recompute the full report for the current grid.

        Returns:
            The new report, or None if the grid changed while the weather
            refinement was in flight (the stale result is dropped)
        """
        generation = self.generation
        raw = self.aggregator.compute_raw(self.grid.snapshot())

        if self.weather is not None:
            raw.emissions = await self.weather.adjust_emissions(raw.emissions, self.context_label)

        report = build_report(raw.rounded(), generation)

        if generation != self.generation or generation < self.report.generation:
            log.debug(f"Discarding stale report for generation {generation} (now {self.generation})")
            return None

        self._publish(report)
        return report

    def subscribe(self, callback: ReportCallback) -> None:
        """Call `callback(report)` after every accepted refresh."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: ReportCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _publish(self, report: MetricsReport) -> None:
        self.report = report
        self.history.append(report)
        for callback in list(self._subscribers):
            try:
                callback(report)
            except Exception as e:
                log.error(f"Metrics subscriber failed: {e}")

    # ───────────────────────────────────────────────────────────────────────
    # Guidance
    # ───────────────────────────────────────────────────────────────────────
    def compatibility_tips(self, building_id: str) -> List[str]:
        return compatibility_tips(self.catalog, building_id)

    def disaster_risk(self) -> DisasterRisk:
        """Risk from the most recent weather reading, or the default estimate."""
        reading = self.weather.last_reading if self.weather else None
        return disaster_risk(reading)

    def weather_recommendations(self, aqi: Optional[int] = None) -> List[str]:
        reading = self.weather.last_reading if self.weather else None
        if reading is None:
            return []
        return weather_recommendations(reading, aqi)


def create_planner(settings: Optional[PlannerSettings] = None) -> CityPlanner:
    """Build a planner wired to the OpenWeatherMap loader described by `settings`."""
    settings = settings or PlannerSettings.from_env()
    loader = WeatherLoader(
        api_key=settings.weather_api_key,
        city=settings.weather_city,
        country=settings.weather_country,
        cache_path=settings.cache_path,
        cache_ttl=settings.cache_ttl_seconds,
        timeout=settings.weather_timeout_seconds,
        use_mock=settings.weather_mock,
    )
    adjuster = WeatherAdjuster(loader, timeout=settings.weather_timeout_seconds)
    return CityPlanner(weather=adjuster, settings=settings)
