"""
City Grid for building placement.
A fixed-size occupancy store of Cell objects. Holds no placement rules;
legality is decided by core.placement.PlacementValidator.
"""

import copy
import logging
from typing import Iterator, List, Optional, Tuple

from core.errors import OutOfBoundsError, SpaceOccupiedError
from core.models import BuildingInstance, Cell

log = logging.getLogger(__name__)

DEFAULT_WIDTH = 20
DEFAULT_HEIGHT = 20


class CityGrid:
    """
    Manages a W x H array of Cells addressed as (x, y).
    Rows are stored y-major: self.grid[y][x].
    """

    def __init__(self, width_cells: int = DEFAULT_WIDTH, height_cells: int = DEFAULT_HEIGHT):
        if width_cells <= 0 or height_cells <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width_cells}x{height_cells}")
        self.width = width_cells
        self.height = height_cells
        self.grid: List[List[Cell]] = []
        self._init_grid()

    def _init_grid(self) -> None:
        """Initialize the grid with empty cells."""
        self.grid = [
            [Cell(x, y) for x in range(self.width)]
            for y in range(self.height)
        ]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def at(self, x: int, y: int) -> Cell:
        """Return the cell at (x, y), raising OutOfBoundsError outside the grid."""
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(
                f"Cell ({x}, {y}) is outside the {self.width}x{self.height} grid"
            )
        return self.grid[y][x]

    def building_at(self, x: int, y: int) -> Optional[BuildingInstance]:
        """The building covering (x, y), resolving non-origin cells to their origin."""
        cell = self.at(x, y)
        if cell.occupant is not None:
            return cell.occupant
        if cell.anchor is not None:
            ax, ay = cell.anchor
            return self.grid[ay][ax].occupant
        return None

    def occupy(self, origin_x: int, origin_y: int, instance: BuildingInstance) -> None:
        """
        Write `instance` at its origin and anchor every other covered cell.

        Callers validate first. The grid still refuses to overwrite or to
        write past its edges, and checks everything before touching a cell.
        """
        if (origin_x, origin_y) != instance.origin:
            raise ValueError(
                f"Instance origin {instance.origin} does not match ({origin_x}, {origin_y})"
            )
        cells = list(instance.cells())
        for x, y in cells:
            if not self.at(x, y).is_empty:
                raise SpaceOccupiedError(f"Cell ({x}, {y}) is already occupied")

        for x, y in cells:
            cell = self.grid[y][x]
            if (x, y) == instance.origin:
                cell.occupant = instance
            else:
                cell.anchor = instance.origin

    def clear(self, x: int, y: int) -> Optional[BuildingInstance]:
        """
        Remove the building covering (x, y), clearing its whole footprint.

        Returns:
            The removed instance, or None if the cell was empty
        """
        instance = self.building_at(x, y)
        if instance is None:
            return None
        for cx, cy in instance.cells():
            cell = self.grid[cy][cx]
            cell.occupant = None
            cell.anchor = None
        return instance

    def footprint_cells(self, instance: BuildingInstance) -> List[Cell]:
        """All cells covered by a placed instance, origin first."""
        return [self.grid[y][x] for x, y in instance.cells()]

    def cells(self) -> Iterator[Cell]:
        """Iterate every cell, row by row."""
        for row in self.grid:
            yield from row

    def instances(self) -> List[BuildingInstance]:
        """Placed buildings in row-major origin order."""
        return [cell.occupant for cell in self.cells() if cell.occupant is not None]

    def occupied_count(self) -> int:
        """Number of cells covered by any building (origin or not)."""
        return sum(1 for cell in self.cells() if not cell.is_empty)

    def reset(self) -> None:
        """Clear every building from the grid."""
        self._init_grid()

    def snapshot(self) -> "CityGrid":
        """Independent copy, used as a stable read view during metrics scans."""
        return copy.deepcopy(self)

    def get_bounds(self) -> Tuple[int, int]:
        """Return (width, height) of the grid in cells."""
        return (self.width, self.height)
