import pytest
from core.catalog import get_catalog
from core.models import (
    BuildingInstance, Cell, EnvironmentalMetrics, Footprint, PlacementOutcome,
    ValidationResult, normalize_rotation, round_half_up, round_tenth, rotated_dimensions,
)
from core.errors import RejectionReason

def test_rotation_swaps_dimensions():
    """Verify 90/270 swap width and depth, 0/180 keep them."""
    assert rotated_dimensions(2, 1, 0) == (2, 1)
    assert rotated_dimensions(2, 1, 90) == (1, 2)
    assert rotated_dimensions(2, 1, 180) == (2, 1)
    assert rotated_dimensions(2, 1, 270) == (1, 2)

def test_invalid_rotation():
    """Only quarter turns are accepted."""
    with pytest.raises(ValueError):
        normalize_rotation(45)

def test_footprint_must_be_positive():
    with pytest.raises(ValueError):
        Footprint(0, 1)

def test_instance_cells_origin_first():
    """Verify footprint enumeration starts at the origin, row by row."""
    school = get_catalog().require("school")  # 2x1
    instance = BuildingInstance(school, 3, 4)
    assert list(instance.cells()) == [(3, 4), (4, 4)]
    assert instance.scale == 2
    assert instance.covers(4, 4)
    assert not instance.covers(3, 5)

def test_instance_rotate_cycles():
    """Four quarter turns bring the building back to its start."""
    school = get_catalog().require("school")
    instance = BuildingInstance(school, 0, 0)
    instance.rotate()
    assert instance.rotation == 90
    assert (instance.width, instance.depth) == (1, 2)
    for _ in range(3):
        instance.rotate()
    assert instance.rotation == 0
    assert (instance.width, instance.depth) == (2, 1)

def test_rounding_helpers():
    """Composites round half up, environmental fields to one decimal."""
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(41.4) == 41
    assert round_tenth(9.25) == 9.3
    assert round_tenth(-60.0) == -60.0
    assert round_tenth(-0.04) == 0.0

def test_metrics_rounded():
    metrics = EnvironmentalMetrics(emissions=10.04, happiness=7.16, traffic=80)
    rounded = metrics.rounded()
    assert rounded.emissions == 10.0
    assert rounded.happiness == 7.2
    assert rounded.traffic == 80
    # Original left untouched
    assert metrics.emissions == 10.04

def test_cell_states():
    cell = Cell(0, 0)
    assert cell.is_empty
    cell.anchor = (1, 1)
    assert not cell.is_empty
    assert not cell.is_origin

def test_validation_result_truthiness():
    assert ValidationResult.ok()
    rejected = ValidationResult.reject(RejectionReason.SPACE_OCCUPIED, "taken")
    assert not rejected
    assert rejected.code == RejectionReason.SPACE_OCCUPIED

def test_outcome_to_dict():
    outcome = PlacementOutcome(False, "nope", code=RejectionReason.OUT_OF_BOUNDS)
    data = outcome.to_dict()
    assert data["success"] is False
    assert data["code"] == "out_of_bounds"
    assert data["building"] is None
