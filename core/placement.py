"""
Placement Validator

Decides whether a building may occupy a set of cells. Checks run
bounds -> occupancy -> adjacency and stop at the first failure.
"""

import logging
from typing import Iterator, Optional, Tuple

from core.catalog import BuildingCatalog
from core.errors import ERRORS_BY_REASON, RejectionReason
from core.grid import CityGrid
from core.models import BuildingInstance, BuildingType, ValidationResult

log = logging.getLogger(__name__)


class PlacementValidator:
    """
    Enforces the placement policy on top of a CityGrid.

    The catalog is injected so the validator can confirm the candidate is a
    known building type; adjacency rules come from the BuildingType objects
    themselves.
    """

    def __init__(self, catalog: BuildingCatalog):
        self.catalog = catalog

    def validate(
        self,
        grid: CityGrid,
        origin_x: int,
        origin_y: int,
        building: BuildingType,
        rotation: int = 0,
        ignore: Optional[BuildingInstance] = None,
    ) -> ValidationResult:
        """
        Check whether `building` may be placed with its origin at (origin_x, origin_y).

        Args:
            grid: Current grid state (read only)
            origin_x, origin_y: Smallest x, y of the footprint
            building: Candidate building type
            rotation: 0, 90, 180 or 270 degrees
            ignore: Placed instance to treat as absent (used when re-validating
                a rotation in place)

        Returns:
            ValidationResult with the rejection reason and code on failure
        """
        if building.id not in self.catalog:
            return ValidationResult.reject(
                RejectionReason.NOT_FOUND,
                f"Unknown building type: {building.id}",
            )

        width, depth = building.dimensions(rotation)

        # 1. Bounds
        if (origin_x < 0 or origin_y < 0 or
                origin_x + width > grid.width or origin_y + depth > grid.height):
            return ValidationResult.reject(
                RejectionReason.OUT_OF_BOUNDS,
                "Building would extend outside the grid boundaries.",
            )

        # 2. Occupancy
        for dy in range(depth):
            for dx in range(width):
                occupant = grid.building_at(origin_x + dx, origin_y + dy)
                if occupant is not None and occupant is not ignore:
                    return ValidationResult.reject(
                        RejectionReason.SPACE_OCCUPIED,
                        "Space is already occupied by another building.",
                    )

        # 3. Adjacency, checked in both directions
        for neighbor in self._ring_neighbors(grid, origin_x, origin_y, width, depth, ignore):
            if building.excludes(neighbor.id) or neighbor.building.excludes(building.id):
                return ValidationResult.reject(
                    RejectionReason.INCOMPATIBLE_ADJACENCY,
                    f"{building.name} cannot be placed near {neighbor.name}",
                )

        return ValidationResult.ok()

    def check(
        self,
        grid: CityGrid,
        origin_x: int,
        origin_y: int,
        building: BuildingType,
        rotation: int = 0,
        ignore: Optional[BuildingInstance] = None,
    ) -> None:
        """Raising variant of validate(): raises the matching PlacementError."""
        result = self.validate(grid, origin_x, origin_y, building, rotation, ignore)
        if not result.valid:
            raise ERRORS_BY_REASON[result.code](result.reason)

    @staticmethod
    def exclusion_radius(width: int, depth: int) -> int:
        """Larger buildings project incompatibility further."""
        return max(1, min(width, depth))

    def _ring_neighbors(
        self,
        grid: CityGrid,
        origin_x: int,
        origin_y: int,
        width: int,
        depth: int,
        ignore: Optional[BuildingInstance],
    ) -> Iterator[BuildingInstance]:
        """Yield buildings found in the ring around the footprint, scan order."""
        for x, y in self._ring_cells(grid, origin_x, origin_y, width, depth):
            neighbor = grid.building_at(x, y)
            if neighbor is None or neighbor is ignore:
                continue
            yield neighbor

    def _ring_cells(
        self,
        grid: CityGrid,
        origin_x: int,
        origin_y: int,
        width: int,
        depth: int,
    ) -> Iterator[Tuple[int, int]]:
        radius = self.exclusion_radius(width, depth)
        for dx in range(-radius, width + radius):
            for dy in range(-radius, depth + radius):
                if 0 <= dx < width and 0 <= dy < depth:
                    continue
                x, y = origin_x + dx, origin_y + dy
                if grid.in_bounds(x, y):
                    yield (x, y)
