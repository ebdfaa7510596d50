"""
Impact Aggregator

Derives the EnvironmentalMetrics snapshot from a grid:
- Per-building environmental impact modulated by neighbors (mitigation, synergy)
- Residential happiness adjustments from nearby amenities and nuisances
- Composite metrics (traffic, education, healthcare, economy) from whole-grid counts

Every call rescans the full grid. Nothing is patched incrementally.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from core.grid import CityGrid
from core.models import (
    BuildingInstance, Category, EnvironmentalMetrics, round_half_up,
)

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# NEIGHBORHOOD RULES
# ═══════════════════════════════════════════════════════════════════════════
NEIGHBOR_RADIUS = 3.0
MITIGATION_FLOOR = 0.5

# Category discount is checked before the id-specific ones.
CATEGORY_MITIGATION: Dict[Category, float] = {
    Category.GREENSPACE: 0.05,
}
BUILDING_MITIGATION: Dict[str, float] = {
    "solar-farm": 0.08,
    "wind-farm": 0.07,
    "green-roof": 0.03,
}

MIXED_USE_BONUS = 0.1
DIVERSITY_BONUS = 0.2
ENTERTAINMENT_BONUS = 0.15
EDUCATION_BONUS = 0.12
INDUSTRIAL_PENALTY = 0.15
AGRICULTURAL_PENALTY = 0.05

DIVERSE_CATEGORIES = (
    Category.RESIDENTIAL,
    Category.COMMERCIAL,
    Category.EDUCATIONAL,
    Category.HEALTHCARE,
    Category.GREENSPACE,
)

# Happiness per neighboring amenity for residential buildings
AMENITY_HAPPINESS: Dict[Category, float] = {
    Category.EDUCATIONAL: 2,
    Category.GREENSPACE: 3,
    Category.HEALTHCARE: 2,
    Category.ENTERTAINMENT: 3,
}
INDUSTRIAL_NUISANCE = 4
POWER_PLANT_NUISANCE = 5
WASTE_NUISANCE = 4

TRAFFIC_PENALTY_THRESHOLD = 50
TRAFFIC_PENALTY_DIVISOR = 5


# ═══════════════════════════════════════════════════════════════════════════
# COMPOSITE RULES
# ═══════════════════════════════════════════════════════════════════════════
ROAD_ID = "road"
TRANSIT_ID = "public-transit"
POWER_PLANT_ID = "power-plant"
WASTE_TREATMENT_ID = "waste-treatment"
SCHOOL_ID = "school"
UNIVERSITY_ID = "university"
HOSPITAL_ID = "hospital"
OFFICE_ID = "office-building"
RETAIL_ID = "retail-store"
MALL_ID = "shopping-mall"

POPULATION_WEIGHTS: Dict[str, int] = {
    "residential-house": 1,
    "apartment-building": 3,
    "high-rise": 5,
}

TRAFFIC_WEIGHTS: Dict[Category, float] = {
    Category.RESIDENTIAL: 1.0,
    Category.COMMERCIAL: 1.5,
    Category.INDUSTRIAL: 2.0,
    Category.EDUCATIONAL: 1.3,
    Category.HEALTHCARE: 1.2,
}
NO_ROADS_TRAFFIC = 80
ROAD_CAPACITY = 3
TRANSIT_DISCOUNT = 0.6


@dataclass
class CellContribution:
    """What one building added to the snapshot, with the factors used."""
    instance: BuildingInstance
    neighbors: List[BuildingInstance] = field(default_factory=list)
    mitigation: float = 1.0
    synergy: float = 1.0
    emissions: float = 0.0
    energy: float = 0.0
    water: float = 0.0
    heat: float = 0.0
    happiness: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "building": self.instance.to_dict(),
            "neighbors": [n.id for n in self.neighbors],
            "mitigation": self.mitigation,
            "synergy": self.synergy,
            "emissions": self.emissions,
            "energy": self.energy,
            "water": self.water,
            "heat": self.heat,
            "happiness": self.happiness,
        }


def _distance(a: BuildingInstance, b: BuildingInstance) -> float:
    return math.hypot(a.origin_x - b.origin_x, a.origin_y - b.origin_y)


def _categories(neighbors: List[BuildingInstance]) -> Counter:
    return Counter(n.category for n in neighbors)


def population(instances: List[BuildingInstance]) -> int:
    """Weighted residential population: house 1, apartment 3, high-rise 5."""
    return sum(POPULATION_WEIGHTS.get(b.id, 0) for b in instances
               if b.category == Category.RESIDENTIAL)


class ImpactAggregator:
    """
    Computes metrics snapshots from a CityGrid.

    Only origin cells carry identity, so each building is visited once and
    neighborhoods are measured between building origins.
    """

    def __init__(self, neighbor_radius: float = NEIGHBOR_RADIUS):
        self.neighbor_radius = neighbor_radius

    # ───────────────────────────────────────────────────────────────────────
    # Snapshot
    # ───────────────────────────────────────────────────────────────────────
    def compute(self, grid: CityGrid) -> EnvironmentalMetrics:
        """Full synchronous snapshot, rounded for display."""
        return self.compute_raw(grid).rounded()

    def compute_raw(self, grid: CityGrid) -> EnvironmentalMetrics:
        """Unrounded snapshot; the weather refinement is applied on top of this."""
        metrics = EnvironmentalMetrics()
        metrics.traffic = self.traffic(grid)
        metrics.education = self.education(grid)
        metrics.healthcare = self.healthcare(grid)
        metrics.economy = self.economy(grid, education=metrics.education)

        for contribution in self.contributions(grid, traffic=metrics.traffic):
            metrics.emissions += contribution.emissions
            metrics.energy += contribution.energy
            metrics.water += contribution.water
            metrics.heat += contribution.heat
            metrics.happiness += contribution.happiness

        log.debug(f"Computed metrics for {len(grid.instances())} buildings: {metrics}")
        return metrics

    def contributions(self, grid: CityGrid, traffic: Optional[int] = None) -> List[CellContribution]:
        """
        Per-building breakdown of the environmental pass.

        Args:
            grid: Grid to scan
            traffic: Traffic composite; computed from the grid when omitted
        """
        if traffic is None:
            traffic = self.traffic(grid)

        instances = grid.instances()
        results = []
        for instance in instances:
            neighbors = self.neighbors_of(instance, instances)
            mitigation = self.mitigation_factor(neighbors)
            synergy = self.synergy_factor(instance, neighbors)
            scale = instance.scale
            impact = instance.building.base_impact
            factor = scale * mitigation * synergy

            contribution = CellContribution(
                instance=instance,
                neighbors=neighbors,
                mitigation=mitigation,
                synergy=synergy,
                emissions=impact.emissions * factor,
                energy=impact.energy * factor,
                water=impact.water * factor,
                heat=impact.heat * factor,
                happiness=impact.happiness * scale,
            )
            contribution.happiness += self._residential_happiness(instance, neighbors)

            if traffic > TRAFFIC_PENALTY_THRESHOLD:
                contribution.happiness -= (traffic - TRAFFIC_PENALTY_THRESHOLD) / TRAFFIC_PENALTY_DIVISOR

            results.append(contribution)
        return results

    def neighbors_of(self, instance: BuildingInstance,
                     instances: List[BuildingInstance]) -> List[BuildingInstance]:
        """Other buildings whose origin lies within the neighbor radius."""
        return [
            other for other in instances
            if other is not instance and _distance(instance, other) <= self.neighbor_radius
        ]

    # ───────────────────────────────────────────────────────────────────────
    # Factors
    # ───────────────────────────────────────────────────────────────────────
    @staticmethod
    def mitigation_factor(neighbors: List[BuildingInstance]) -> float:
        """Discount from beneficial neighbors, floored at MITIGATION_FLOOR."""
        factor = 1.0
        for neighbor in neighbors:
            if neighbor.category in CATEGORY_MITIGATION:
                factor -= CATEGORY_MITIGATION[neighbor.category]
            elif neighbor.id in BUILDING_MITIGATION:
                factor -= BUILDING_MITIGATION[neighbor.id]
        return max(MITIGATION_FLOOR, factor)

    @staticmethod
    def synergy_factor(instance: BuildingInstance, neighbors: List[BuildingInstance]) -> float:
        """Adjustment from category co-location. Not applied to happiness."""
        factor = 1.0
        present = _categories(neighbors)

        if present[Category.RESIDENTIAL] and present[Category.COMMERCIAL]:
            factor -= MIXED_USE_BONUS

        if all(present[c] for c in DIVERSE_CATEGORIES):
            factor -= DIVERSITY_BONUS

        if instance.category == Category.RESIDENTIAL:
            if present[Category.ENTERTAINMENT]:
                factor -= ENTERTAINMENT_BONUS
            if present[Category.EDUCATIONAL]:
                factor -= EDUCATION_BONUS
            factor += INDUSTRIAL_PENALTY * present[Category.INDUSTRIAL]
            factor += AGRICULTURAL_PENALTY * present[Category.AGRICULTURAL]

        return factor

    @staticmethod
    def _residential_happiness(instance: BuildingInstance,
                               neighbors: List[BuildingInstance]) -> float:
        if instance.category != Category.RESIDENTIAL:
            return 0.0

        present = _categories(neighbors)
        ids = {n.id for n in neighbors}
        delta = 0.0

        for category, per_neighbor in AMENITY_HAPPINESS.items():
            delta += per_neighbor * present[category]

        # Nuisances are presence checks scaled by the building's own size
        if present[Category.INDUSTRIAL]:
            delta -= INDUSTRIAL_NUISANCE * instance.scale
        if POWER_PLANT_ID in ids:
            delta -= POWER_PLANT_NUISANCE * instance.scale
        if WASTE_TREATMENT_ID in ids:
            delta -= WASTE_NUISANCE * instance.scale

        return delta

    # ───────────────────────────────────────────────────────────────────────
    # Composites
    # ───────────────────────────────────────────────────────────────────────
    def traffic(self, grid: CityGrid) -> int:
        """Congestion 0-100 from building density against road capacity."""
        instances = grid.instances()
        counts = Counter(b.category for b in instances)
        roads = sum(1 for b in instances if b.id == ROAD_ID)

        generators = sum(counts[c] for c in TRAFFIC_WEIGHTS)
        if generators == 0:
            return 0
        if roads == 0:
            return NO_ROADS_TRAFFIC

        weighted = sum(counts[c] * w for c, w in TRAFFIC_WEIGHTS.items())
        density = weighted / (grid.width * grid.height)
        road_capacity = min(1, generators / (roads * ROAD_CAPACITY))

        score = density * 100 * road_capacity
        if any(b.id == TRANSIT_ID for b in instances):
            score *= TRANSIT_DISCOUNT

        return min(100, round_half_up(score))

    def education(self, grid: CityGrid) -> int:
        """School and university coverage of the residential population."""
        instances = grid.instances()
        residents = population(instances)
        if residents == 0:
            return 0

        schools = sum(1 for b in instances if b.id == SCHOOL_ID)
        universities = sum(1 for b in instances if b.id == UNIVERSITY_ID)

        school_factor = min(1, schools / max(1, residents / 10))
        university_factor = min(1, universities / max(1, residents / 20))

        return min(100, round_half_up(school_factor * 60 + university_factor * 40))

    def healthcare(self, grid: CityGrid) -> int:
        """Hospital coverage of the residential population."""
        instances = grid.instances()
        residents = population(instances)
        if residents == 0:
            return 0

        hospitals = sum(1 for b in instances if b.id == HOSPITAL_ID)
        hospital_factor = min(1, hospitals / max(1, residents / 15))

        return min(100, round_half_up(hospital_factor * 100))

    def economy(self, grid: CityGrid, education: Optional[int] = None) -> int:
        """Economic strength from commerce, industry, population and education."""
        instances = grid.instances()
        counts = Counter(b.category for b in instances)
        ids = Counter(b.id for b in instances)
        residents = population(instances)

        if residents + counts[Category.COMMERCIAL] + counts[Category.INDUSTRIAL] == 0:
            return 0

        if education is None:
            education = self.education(grid)

        total = (
            counts[Category.COMMERCIAL] * 10
            + counts[Category.INDUSTRIAL] * 15
            + ids[OFFICE_ID] * 12
            + ids[RETAIL_ID] * 8
            + ids[MALL_ID] * 25
            + min(50, residents)
            + education * 0.3
        )
        return min(100, round_half_up(total / 5))
