"""
Placement error taxonomy.

Every error here is recoverable and user-visible: a rejected request leaves
the grid untouched.
"""

from enum import Enum


class RejectionReason(Enum):
    """Why a placement, removal or rotation request was refused."""
    OUT_OF_BOUNDS = "out_of_bounds"
    SPACE_OCCUPIED = "space_occupied"
    INCOMPATIBLE_ADJACENCY = "incompatible_adjacency"
    NOT_FOUND = "not_found"
    INVALID_ROTATION = "invalid_rotation"


class PlacementError(ValueError):
    """Base class for recoverable grid/placement failures."""

    code: RejectionReason = RejectionReason.NOT_FOUND

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class OutOfBoundsError(PlacementError):
    """Footprint or coordinate falls outside the grid extent."""
    code = RejectionReason.OUT_OF_BOUNDS


class SpaceOccupiedError(PlacementError):
    """One or more target cells already hold a building."""
    code = RejectionReason.SPACE_OCCUPIED


class IncompatibleAdjacencyError(PlacementError):
    """A catalog-declared exclusion was triggered (checked both ways)."""
    code = RejectionReason.INCOMPATIBLE_ADJACENCY


class BuildingNotFoundError(PlacementError, LookupError):
    """Unknown building id, or an empty cell targeted for removal/rotation."""
    code = RejectionReason.NOT_FOUND


class InvalidRotationError(PlacementError):
    """Rotation is not one of 0, 90, 180 or 270 degrees."""
    code = RejectionReason.INVALID_ROTATION


ERRORS_BY_REASON = {
    RejectionReason.OUT_OF_BOUNDS: OutOfBoundsError,
    RejectionReason.SPACE_OCCUPIED: SpaceOccupiedError,
    RejectionReason.INCOMPATIBLE_ADJACENCY: IncompatibleAdjacencyError,
    RejectionReason.NOT_FOUND: BuildingNotFoundError,
    RejectionReason.INVALID_ROTATION: InvalidRotationError,
}
