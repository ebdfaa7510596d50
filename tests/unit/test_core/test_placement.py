import pytest
from core.catalog import get_catalog
from core.errors import IncompatibleAdjacencyError, RejectionReason
from core.grid import CityGrid
from core.models import BuildingInstance, BuildingType, Category, Footprint, Impact
from core.placement import PlacementValidator

@pytest.fixture
def catalog():
    return get_catalog()

@pytest.fixture
def validator(catalog):
    return PlacementValidator(catalog)

@pytest.fixture
def grid():
    return CityGrid(20, 20)

def _place(grid, catalog, building_id, x, y, rotation=0):
    instance = BuildingInstance(catalog.require(building_id), x, y, rotation)
    grid.occupy(x, y, instance)
    return instance

def test_empty_grid_accepts(validator, grid, catalog):
    result = validator.validate(grid, 0, 0, catalog.require("park"))
    assert result.valid
    assert result.reason is None

def test_house_next_to_factory_rejected(validator, grid, catalog):
    """A house touching a factory's footprint names both buildings."""
    _place(grid, catalog, "factory", 5, 5)  # covers (5..6, 5..6)
    result = validator.validate(grid, 7, 5, catalog.require("residential-house"))

    assert not result.valid
    assert result.code == RejectionReason.INCOMPATIBLE_ADJACENCY
    assert result.reason == "Residential House cannot be placed near Factory"

def test_factory_next_to_house_rejected(validator, grid, catalog):
    _place(grid, catalog, "residential-house", 7, 5)
    result = validator.validate(grid, 5, 5, catalog.require("factory"))
    assert result.code == RejectionReason.INCOMPATIBLE_ADJACENCY
    assert result.reason == "Factory cannot be placed near Residential House"

def test_adjacency_checked_both_ways(validator, grid, catalog):
    """Only the office declares the exclusion; either placement order is refused."""
    _place(grid, catalog, "office-building", 5, 5)
    result = validator.validate(grid, 6, 6, catalog.require("industrial-zone"))
    assert result.code == RejectionReason.INCOMPATIBLE_ADJACENCY
    assert result.reason == "Industrial Zone cannot be placed near Office Building"

    other = CityGrid(20, 20)
    _place(other, catalog, "industrial-zone", 6, 6)
    result = validator.validate(other, 5, 5, catalog.require("office-building"))
    assert result.code == RejectionReason.INCOMPATIBLE_ADJACENCY

def test_larger_buildings_reach_further(validator, grid, catalog):
    """A 2x2 factory projects a two-cell ring, including diagonals."""
    _place(grid, catalog, "residential-house", 3, 3)
    assert not validator.validate(grid, 5, 5, catalog.require("factory")).valid

    far = CityGrid(20, 20)
    _place(far, catalog, "residential-house", 2, 2)
    assert validator.validate(far, 5, 5, catalog.require("factory")).valid

def test_exclusion_radius():
    assert PlacementValidator.exclusion_radius(1, 1) == 1
    assert PlacementValidator.exclusion_radius(2, 1) == 1
    assert PlacementValidator.exclusion_radius(2, 2) == 2

def test_out_of_bounds(validator, grid, catalog):
    park = catalog.require("park")
    result = validator.validate(grid, 19, 19, park)
    assert result.code == RejectionReason.OUT_OF_BOUNDS
    assert result.reason == "Building would extend outside the grid boundaries."

    assert validator.validate(grid, -1, 0, park).code == RejectionReason.OUT_OF_BOUNDS

def test_rotation_changes_fit(validator, grid, catalog):
    """A 2x1 school only fits in the last column once rotated."""
    school = catalog.require("school")
    assert not validator.validate(grid, 19, 0, school, rotation=0).valid
    assert validator.validate(grid, 19, 0, school, rotation=90).valid

def test_space_occupied(validator, grid, catalog):
    _place(grid, catalog, "park", 4, 4)
    result = validator.validate(grid, 5, 5, catalog.require("road"))
    assert result.code == RejectionReason.SPACE_OCCUPIED
    assert result.reason == "Space is already occupied by another building."

def test_bounds_checked_before_occupancy(validator, grid, catalog):
    _place(grid, catalog, "road", 19, 19)
    result = validator.validate(grid, 19, 19, catalog.require("park"))
    assert result.code == RejectionReason.OUT_OF_BOUNDS

def test_ignore_self(validator, grid, catalog):
    """Re-validating a placed building in place passes when it is ignored."""
    park = _place(grid, catalog, "park", 4, 4)
    assert not validator.validate(grid, 4, 4, park.building).valid
    assert validator.validate(grid, 4, 4, park.building, ignore=park).valid

def test_unknown_building(validator, grid):
    stranger = BuildingType(
        id="castle",
        name="Castle",
        category=Category.ENTERTAINMENT,
        footprint=Footprint(1, 1),
        base_impact=Impact(emissions=0, energy=0, water=0, heat=0, happiness=0),
    )
    result = validator.validate(grid, 0, 0, stranger)
    assert result.code == RejectionReason.NOT_FOUND

def test_check_raises(validator, grid, catalog):
    _place(grid, catalog, "factory", 5, 5)
    with pytest.raises(IncompatibleAdjacencyError) as exc:
        validator.check(grid, 7, 5, catalog.require("residential-house"))
    assert exc.value.code == RejectionReason.INCOMPATIBLE_ADJACENCY
    assert "Factory" in exc.value.message
