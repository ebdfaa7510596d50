"""
Building Catalog

Static registry of building definitions. Read-only after construction and
handed explicitly to the validator, aggregator and planner.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from core.errors import BuildingNotFoundError
from core.models import BuildingType, Category, Footprint, Impact

log = logging.getLogger(__name__)


# Residential and commercial buildings share the same exclusion list.
_URBAN_EXCLUSIONS = frozenset({"factory", "farm", "industrial-zone", "waste-treatment"})
_CIVIC_EXCLUSIONS = frozenset({"factory", "industrial-zone", "waste-treatment"})


# ═══════════════════════════════════════════════════════════════════════════
# DEFAULT BUILDINGS (declaration order is palette order)
# ═══════════════════════════════════════════════════════════════════════════
DEFAULT_BUILDINGS: List[BuildingType] = [
    BuildingType(
        id="residential-house",
        name="Residential House",
        description="Single-family residential building with minimal environmental impact",
        category=Category.RESIDENTIAL,
        footprint=Footprint(1, 1, 1),
        base_impact=Impact(emissions=10, energy=8, water=7, heat=5, happiness=7),
        incompatible_with=_URBAN_EXCLUSIONS,
    ),
    BuildingType(
        id="apartment-building",
        name="Apartment Building",
        description="Multi-family residential building with efficient land use",
        category=Category.RESIDENTIAL,
        footprint=Footprint(1, 1, 3),
        base_impact=Impact(emissions=25, energy=20, water=18, heat=15, happiness=6),
        incompatible_with=_URBAN_EXCLUSIONS,
    ),
    BuildingType(
        id="high-rise",
        name="High-Rise Apartment",
        description="Tall residential tower for high-density urban living",
        category=Category.RESIDENTIAL,
        footprint=Footprint(1, 1, 5),
        base_impact=Impact(emissions=35, energy=30, water=25, heat=20, happiness=5),
        incompatible_with=_URBAN_EXCLUSIONS,
    ),
    BuildingType(
        id="office-building",
        name="Office Building",
        description="Commercial office space with modern amenities",
        category=Category.COMMERCIAL,
        footprint=Footprint(1, 1, 4),
        base_impact=Impact(emissions=30, energy=28, water=20, heat=22, happiness=5),
        incompatible_with=_URBAN_EXCLUSIONS,
    ),
    BuildingType(
        id="retail-store",
        name="Retail Store",
        description="Commercial retail space for shopping and services",
        category=Category.COMMERCIAL,
        footprint=Footprint(1, 1, 1),
        base_impact=Impact(emissions=15, energy=12, water=8, heat=10, happiness=8),
        incompatible_with=_URBAN_EXCLUSIONS,
    ),
    BuildingType(
        id="shopping-mall",
        name="Shopping Mall",
        description="Large commercial center with multiple retail stores",
        category=Category.COMMERCIAL,
        footprint=Footprint(2, 2, 2),
        base_impact=Impact(emissions=40, energy=35, water=25, heat=30, happiness=7),
        incompatible_with=_URBAN_EXCLUSIONS,
    ),
    BuildingType(
        id="factory",
        name="Factory",
        description="Industrial manufacturing facility with high environmental impact",
        category=Category.INDUSTRIAL,
        footprint=Footprint(2, 2, 2),
        base_impact=Impact(emissions=50, energy=45, water=40, heat=35, happiness=2),
        incompatible_with=frozenset({
            "residential-house", "apartment-building", "high-rise", "park", "farm",
            "office-building", "retail-store", "hospital", "school", "university",
        }),
    ),
    BuildingType(
        id="industrial-zone",
        name="Industrial Zone",
        description="Mixed industrial area with high pollution levels",
        category=Category.INDUSTRIAL,
        footprint=Footprint(2, 1, 1),
        base_impact=Impact(emissions=40, energy=35, water=30, heat=32, happiness=3),
        incompatible_with=frozenset({
            "residential-house", "apartment-building", "high-rise", "park", "farm",
            "retail-store", "hospital", "school", "university",
        }),
    ),
    BuildingType(
        id="waste-treatment",
        name="Waste Treatment",
        description="Facility for processing urban waste and recycling",
        category=Category.INDUSTRIAL,
        footprint=Footprint(2, 1, 1),
        base_impact=Impact(emissions=20, energy=25, water=35, heat=15, happiness=4),
        incompatible_with=frozenset({
            "residential-house", "apartment-building", "high-rise", "retail-store",
            "hospital", "school", "farm",
        }),
    ),
    BuildingType(
        id="solar-farm",
        name="Solar Farm",
        description="Renewable energy generation with solar panels",
        category=Category.INFRASTRUCTURE,
        footprint=Footprint(2, 2, 1),
        base_impact=Impact(emissions=-40, energy=-30, water=0, heat=5, happiness=7),
    ),
    BuildingType(
        id="wind-farm",
        name="Wind Farm",
        description="Clean energy production using wind turbines",
        category=Category.INFRASTRUCTURE,
        footprint=Footprint(2, 2, 2),
        base_impact=Impact(emissions=-35, energy=-25, water=0, heat=0, happiness=6),
    ),
    BuildingType(
        id="power-plant",
        name="Power Plant",
        description="Conventional power generation facility",
        category=Category.INFRASTRUCTURE,
        footprint=Footprint(2, 2, 2),
        base_impact=Impact(emissions=60, energy=-50, water=40, heat=45, happiness=2),
        incompatible_with=frozenset({
            "residential-house", "apartment-building", "high-rise", "park", "farm",
            "hospital", "school",
        }),
    ),
    BuildingType(
        id="park",
        name="City Park",
        description="Green recreational space with trees and vegetation",
        category=Category.GREENSPACE,
        footprint=Footprint(2, 2, 1),
        base_impact=Impact(emissions=-15, energy=0, water=10, heat=-20, happiness=10),
        incompatible_with=_CIVIC_EXCLUSIONS,
    ),
    BuildingType(
        id="green-roof",
        name="Green Roof",
        description="Vegetation installed on building tops to improve insulation and air quality",
        category=Category.GREENSPACE,
        footprint=Footprint(1, 1, 0.2),
        base_impact=Impact(emissions=-10, energy=-5, water=5, heat=-15, happiness=8),
    ),
    BuildingType(
        id="public-transit",
        name="Public Transit",
        description="Bus or train station for efficient urban transportation",
        category=Category.INFRASTRUCTURE,
        footprint=Footprint(1, 1, 1),
        base_impact=Impact(emissions=-20, energy=10, water=5, heat=5, happiness=8),
    ),
    BuildingType(
        id="road",
        name="Road",
        description="Urban transportation infrastructure for vehicles",
        category=Category.INFRASTRUCTURE,
        footprint=Footprint(1, 1, 0.1),
        base_impact=Impact(emissions=5, energy=3, water=5, heat=8, happiness=6),
    ),
    BuildingType(
        id="hospital",
        name="Hospital",
        description="Healthcare facility providing medical services",
        category=Category.HEALTHCARE,
        footprint=Footprint(2, 2, 3),
        base_impact=Impact(emissions=30, energy=40, water=35, heat=20, happiness=12),
        incompatible_with=_CIVIC_EXCLUSIONS,
    ),
    BuildingType(
        id="school",
        name="School",
        description="Educational institution for children and young adults",
        category=Category.EDUCATIONAL,
        footprint=Footprint(2, 1, 2),
        base_impact=Impact(emissions=15, energy=20, water=15, heat=10, happiness=15),
        incompatible_with=_CIVIC_EXCLUSIONS,
    ),
    BuildingType(
        id="university",
        name="University",
        description="Higher education campus with multiple buildings",
        category=Category.EDUCATIONAL,
        footprint=Footprint(2, 2, 3),
        base_impact=Impact(emissions=25, energy=30, water=25, heat=15, happiness=18),
        incompatible_with=_CIVIC_EXCLUSIONS,
    ),
    BuildingType(
        id="sports-complex",
        name="Sports Complex",
        description="Facility for sports and recreational activities",
        category=Category.ENTERTAINMENT,
        footprint=Footprint(2, 2, 1),
        base_impact=Impact(emissions=10, energy=15, water=20, heat=5, happiness=14),
    ),
    BuildingType(
        id="farm",
        name="Farm",
        description="Agricultural production area for local food",
        category=Category.AGRICULTURAL,
        footprint=Footprint(2, 2, 0.5),
        base_impact=Impact(emissions=-5, energy=5, water=15, heat=-10, happiness=8),
        incompatible_with=frozenset({
            "residential-house", "apartment-building", "high-rise", "office-building",
            "retail-store", "factory", "industrial-zone", "waste-treatment",
        }),
    ),
]


CATEGORY_LABELS: List[Tuple[str, str]] = [
    ("all", "All Buildings"),
    (Category.RESIDENTIAL.value, "Residential"),
    (Category.COMMERCIAL.value, "Commercial"),
    (Category.INDUSTRIAL.value, "Industrial"),
    (Category.INFRASTRUCTURE.value, "Infrastructure"),
    (Category.GREENSPACE.value, "Green Space"),
    (Category.AGRICULTURAL.value, "Agricultural"),
    (Category.EDUCATIONAL.value, "Educational"),
    (Category.HEALTHCARE.value, "Healthcare"),
    (Category.ENTERTAINMENT.value, "Entertainment"),
]


class BuildingCatalog:
    """
    Lookup of building definitions by id and by category.

    Pass a custom iterable of BuildingType to build synthetic catalogs for
    tests or scenario variants.
    """

    def __init__(self, buildings: Iterable[BuildingType]):
        self._buildings: Dict[str, BuildingType] = {}
        for building in buildings:
            if building.id in self._buildings:
                raise ValueError(f"Duplicate building id in catalog: {building.id}")
            self._buildings[building.id] = building
        log.debug(f"Catalog initialized with {len(self._buildings)} building types")

    def __len__(self) -> int:
        return len(self._buildings)

    def __iter__(self) -> Iterator[BuildingType]:
        return iter(self._buildings.values())

    def __contains__(self, building_id: str) -> bool:
        return building_id in self._buildings

    def lookup(self, building_id: str) -> Optional[BuildingType]:
        """Return the building type, or None if the id is unknown."""
        return self._buildings.get(building_id)

    def require(self, building_id: str) -> BuildingType:
        """Like lookup, but raise BuildingNotFoundError for unknown ids."""
        building = self.lookup(building_id)
        if building is None:
            raise BuildingNotFoundError(f"Unknown building type: {building_id}")
        return building

    def list_by_category(self, category: Union[Category, str] = "all") -> List[BuildingType]:
        """Buildings in declaration order, optionally filtered by category."""
        if category == "all":
            return list(self._buildings.values())
        if isinstance(category, str):
            category = Category(category)
        return [b for b in self._buildings.values() if b.category == category]

    @staticmethod
    def categories() -> List[Tuple[str, str]]:
        """(value, label) pairs for a building palette, "all" first."""
        return list(CATEGORY_LABELS)


# Singleton
_catalog: Optional[BuildingCatalog] = None

def get_catalog() -> BuildingCatalog:
    """Get the default catalog built from DEFAULT_BUILDINGS."""
    global _catalog
    if _catalog is None:
        _catalog = BuildingCatalog(DEFAULT_BUILDINGS)
    return _catalog
