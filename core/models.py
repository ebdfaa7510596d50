"""
Core data models for the EcoCity planner engine.
"""

import math
from dataclasses import dataclass, field, asdict
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple

from core.errors import RejectionReason


class Category(Enum):
    """Fixed set of building categories."""
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    INFRASTRUCTURE = "infrastructure"
    GREENSPACE = "greenspace"
    AGRICULTURAL = "agricultural"
    EDUCATIONAL = "educational"
    HEALTHCARE = "healthcare"
    ENTERTAINMENT = "entertainment"


ROTATIONS = (0, 90, 180, 270)


def normalize_rotation(rotation: int) -> int:
    """Validate a rotation in degrees; only quarter turns are allowed."""
    if rotation not in ROTATIONS:
        raise ValueError(f"Rotation must be one of {ROTATIONS}, got {rotation}")
    return rotation


def rotated_dimensions(width: int, depth: int, rotation: int) -> Tuple[int, int]:
    """Return (width, depth) after rotation. 90/270 swap the axes."""
    if normalize_rotation(rotation) in (90, 270):
        return depth, width
    return width, depth


def round_half_up(value: float) -> int:
    """Integer rounding with .5 going up, as the composite metrics expect."""
    return int(math.floor(value + 0.5))


def round_tenth(value: float) -> float:
    """One-decimal rounding of the exact binary value, half away from zero."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)) + 0.0


@dataclass(frozen=True)
class Footprint:
    """Rectangular extent in cells. Height only scales visuals."""
    width: int
    depth: int
    height: float = 1.0

    def __post_init__(self):
        if self.width <= 0 or self.depth <= 0 or self.height <= 0:
            raise ValueError(f"Footprint dimensions must be positive: {self}")

    @property
    def area(self) -> int:
        return self.width * self.depth


@dataclass(frozen=True)
class Impact:
    """Base environmental coefficients. Negative values are beneficial."""
    emissions: float = 0.0
    energy: float = 0.0
    water: float = 0.0
    heat: float = 0.0
    happiness: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class BuildingType:
    """
    An immutable building definition owned by the catalog.

    `incompatible_with` lists ids that may not sit adjacent to this building.
    The lists are not declared symmetrically, so validation checks both sides.
    """
    id: str
    name: str
    category: Category
    footprint: Footprint
    base_impact: Impact
    description: str = ""
    incompatible_with: FrozenSet[str] = frozenset()

    def excludes(self, other_id: str) -> bool:
        """True if this building declares `other_id` as incompatible."""
        return other_id in self.incompatible_with

    def dimensions(self, rotation: int = 0) -> Tuple[int, int]:
        return rotated_dimensions(self.footprint.width, self.footprint.depth, rotation)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "footprint": asdict(self.footprint),
            "base_impact": self.base_impact.to_dict(),
            "incompatible_with": sorted(self.incompatible_with),
        }


@dataclass
class BuildingInstance:
    """
    A building placed on the grid.

    Position is fixed for the lifetime of the instance; rotation swaps the
    resolved width and depth in place.
    """
    building: BuildingType
    origin_x: int
    origin_y: int
    rotation: int = 0
    width: int = field(init=False)
    depth: int = field(init=False)

    def __post_init__(self):
        self.width, self.depth = self.building.dimensions(self.rotation)

    @property
    def id(self) -> str:
        return self.building.id

    @property
    def name(self) -> str:
        return self.building.name

    @property
    def category(self) -> Category:
        return self.building.category

    @property
    def origin(self) -> Tuple[int, int]:
        return (self.origin_x, self.origin_y)

    @property
    def scale(self) -> int:
        """Cells covered; larger buildings contribute proportionally more."""
        return self.width * self.depth

    @property
    def next_rotation(self) -> int:
        return (self.rotation + 90) % 360

    def rotate(self) -> None:
        """Advance a quarter turn, swapping width and depth."""
        self.rotation = self.next_rotation
        self.width, self.depth = self.depth, self.width

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Yield every (x, y) covered by the footprint, origin first."""
        for dy in range(self.depth):
            for dx in range(self.width):
                yield (self.origin_x + dx, self.origin_y + dy)

    def covers(self, x: int, y: int) -> bool:
        return (self.origin_x <= x < self.origin_x + self.width and
                self.origin_y <= y < self.origin_y + self.depth)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "x": self.origin_x,
            "y": self.origin_y,
            "rotation": self.rotation,
            "width": self.width,
            "depth": self.depth,
        }


@dataclass
class Cell:
    """
    One grid square.

    The origin cell of a building carries the instance in `occupant`; every
    other covered cell carries only `anchor`, the origin coordinates.
    """
    x: int
    y: int
    occupant: Optional[BuildingInstance] = None
    anchor: Optional[Tuple[int, int]] = None

    @property
    def is_empty(self) -> bool:
        return self.occupant is None and self.anchor is None

    @property
    def is_origin(self) -> bool:
        return self.occupant is not None


ENVIRONMENTAL_FIELDS = ("emissions", "energy", "water", "heat")
COMPOSITE_FIELDS = ("traffic", "education", "healthcare", "economy")


@dataclass
class EnvironmentalMetrics:
    """Derived snapshot of a grid. Rebuilt from scratch on every change."""
    emissions: float = 0.0
    energy: float = 0.0
    water: float = 0.0
    heat: float = 0.0
    happiness: float = 0.0
    traffic: int = 0
    education: int = 0
    healthcare: int = 0
    economy: int = 0

    def rounded(self) -> "EnvironmentalMetrics":
        """Environmental fields to one decimal, composites to integers."""
        return EnvironmentalMetrics(
            emissions=round_tenth(self.emissions),
            energy=round_tenth(self.energy),
            water=round_tenth(self.water),
            heat=round_tenth(self.heat),
            happiness=round_tenth(self.happiness),
            traffic=round_half_up(self.traffic),
            education=round_half_up(self.education),
            healthcare=round_half_up(self.healthcare),
            economy=round_half_up(self.economy),
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class ValidationResult:
    """Outcome of a placement legality check."""
    valid: bool
    reason: Optional[str] = None
    code: Optional[RejectionReason] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def reject(cls, code: RejectionReason, reason: str) -> "ValidationResult":
        return cls(valid=False, reason=reason, code=code)

    def __bool__(self) -> bool:
        return self.valid


@dataclass
class PlacementOutcome:
    """Acknowledgment (or rejection) returned to the presentation layer."""
    success: bool
    message: str
    code: Optional[RejectionReason] = None
    instance: Optional[BuildingInstance] = None

    def to_dict(self) -> Dict:
        return {
            "success": self.success,
            "message": self.message,
            "code": self.code.value if self.code else None,
            "building": self.instance.to_dict() if self.instance else None,
        }


@dataclass
class Prediction:
    """A forward-looking scenario derived from a metrics snapshot."""
    timeframe: str
    description: str
    impact: str  # "positive", "neutral" or "negative"

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def cell_span(x: int, y: int, width: int, depth: int) -> List[Tuple[int, int]]:
    """All (x, y) of a width x depth rectangle anchored at (x, y)."""
    return [(x + dx, y + dy) for dy in range(depth) for dx in range(width)]
