"""
Unit tests for input validation.
"""

import logging

import pytest

from geom import Coordinate, Polygon
from region import Location, Region
from tests.conftest import ring
from validation import (
    ClosurePolicy,
    ValidationError,
    validate_location,
    validate_locations,
    validate_polygon,
    validate_region,
    validate_regions,
)


class TestValidateLocation:
    """Location name, uniqueness, and coordinate checks."""

    def test_valid_location_is_recorded(self):
        seen = set()
        validate_location(Location("A", Coordinate(10.0, 20.0)), seen)
        assert seen == {"A"}

    def test_duplicate_name_raises(self):
        with pytest.raises(ValidationError, match="Duplicate location name: A"):
            validate_location(Location("A", Coordinate(0.0, 0.0)), {"A"})

    def test_missing_coordinates_raise(self):
        with pytest.raises(ValidationError, match="invalid coordinates"):
            validate_location(Location("B", None), set())

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_missing_name_raises(self, name):
        with pytest.raises(ValidationError, match="Location name missing"):
            validate_location(Location(name, Coordinate(0.0, 0.0)), set())

    @pytest.mark.parametrize("lon, lat", [(180.5, 0.0), (-181.0, 0.0), (0.0, 90.1), (0.0, -91.0)])
    def test_out_of_range_raises(self, lon, lat):
        with pytest.raises(ValidationError, match="out-of-range"):
            validate_location(Location("C", Coordinate(lon, lat)), set())

    def test_bounds_are_inclusive(self):
        seen = set()
        validate_location(Location("NE", Coordinate(180.0, 90.0)), seen)
        validate_location(Location("SW", Coordinate(-180.0, -90.0)), seen)
        assert seen == {"NE", "SW"}

    def test_nan_raises(self):
        with pytest.raises(ValidationError, match="non-finite"):
            validate_location(Location("N", Coordinate(float("nan"), 0.0)), set())

    def test_validate_locations_keeps_order(self):
        locations = [Location(name, Coordinate(0.0, 0.0)) for name in ("c", "a", "b")]
        assert validate_locations(locations) == locations

    def test_validate_locations_rejects_duplicates(self):
        locations = [Location("a", Coordinate(0.0, 0.0)), Location("a", Coordinate(1.0, 1.0))]
        with pytest.raises(ValidationError):
            validate_locations(locations)


class TestValidateRegion:
    """Region and polygon checks."""

    def test_valid_region(self, unit_square):
        seen = set()
        validate_region(Region("R", [unit_square]), seen)
        assert seen == {"R"}

    def test_region_with_no_polygons_raises(self):
        with pytest.raises(ValidationError, match="has no polygons"):
            validate_region(Region("R", []), set())

    def test_duplicate_region_name_raises(self, unit_square):
        with pytest.raises(ValidationError, match="Duplicate region name: R"):
            validate_region(Region("R", [unit_square]), {"R"})

    def test_polygon_with_invalid_coordinate_raises(self):
        polygon = Polygon([Coordinate(0.0, 0.0), None, Coordinate(1.0, 1.0)])
        with pytest.raises(ValidationError, match="invalid coordinates"):
            validate_region(Region("R", [polygon]), set())

    def test_degenerate_polygon_raises(self):
        with pytest.raises(ValidationError, match="degenerate polygon"):
            validate_region(Region("R", [ring((0, 0), (1, 1))]), set())

    def test_out_of_range_vertex_raises(self):
        polygon = ring((0, 0), (0, 95), (1, 1), (0, 0))
        with pytest.raises(ValidationError, match="out-of-range"):
            validate_polygon("R", polygon)

    def test_unclosed_polygon_raises_by_default(self):
        polygon = ring((0, 0), (0, 1), (1, 1), (1, 0))
        with pytest.raises(ValidationError, match="unclosed polygon"):
            validate_region(Region("R", [polygon]), set())

    def test_unclosed_polygon_warns_when_allowed(self, caplog):
        polygon = ring((0, 0), (0, 1), (1, 1), (1, 0))
        with caplog.at_level(logging.WARNING, logger="validation"):
            validate_polygon("R", polygon, closure=ClosurePolicy.WARN)
        assert "unclosed polygon" in caplog.text

    def test_closure_policy_accepts_string_value(self):
        polygon = ring((0, 0), (0, 1), (1, 1), (1, 0))
        validate_polygon("R", polygon, closure="warn")

    def test_validate_regions_checks_every_region(self, unit_square):
        regions = [Region("R", [unit_square]), Region("S", [])]
        with pytest.raises(ValidationError, match="'S' has no polygons"):
            validate_regions(regions)

    def test_validation_error_is_value_error(self):
        assert issubclass(ValidationError, ValueError)
