"""Input validation applied before locations and regions reach the matcher."""
from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Final, Iterable, List, Optional, Set, Tuple

from geom import Coordinate, Polygon
from region import Location, Region

logger = logging.getLogger(__name__)

LONGITUDE_RANGE: Final[Tuple[float, float]] = (-180.0, 180.0)
LATITUDE_RANGE: Final[Tuple[float, float]] = (-90.0, 90.0)
MIN_RING_VERTICES: Final[int] = 3


class ValidationError(ValueError):
    """Raised when input data cannot be handed to the matcher."""


class ClosurePolicy(str, Enum):
    """What to do with a ring whose first and last vertices differ."""

    ERROR = "error"
    WARN = "warn"


def validate_coordinate(coordinate: Optional[Coordinate], context: str) -> None:
    """Reject missing, non-finite, or out-of-range coordinates."""

    if not isinstance(coordinate, Coordinate):
        raise ValidationError(f"{context} has invalid coordinates.")

    longitude, latitude = coordinate.longitude, coordinate.latitude
    if not (math.isfinite(longitude) and math.isfinite(latitude)):
        raise ValidationError(
            f"{context} has non-finite coordinates: [{longitude}, {latitude}]."
        )
    lon_min, lon_max = LONGITUDE_RANGE
    lat_min, lat_max = LATITUDE_RANGE
    if not (lon_min <= longitude <= lon_max and lat_min <= latitude <= lat_max):
        raise ValidationError(
            f"{context} has out-of-range coordinates: [{longitude}, {latitude}]."
        )


def _check_name(name: object, kind: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"{kind} name missing.")
    return name


def validate_location(location: Location, seen_names: Set[str]) -> None:
    """Check name, uniqueness against ``seen_names``, and coordinates."""

    name = _check_name(location.name, "Location")
    validate_coordinate(location.coordinate, f"Location '{name}'")
    if name in seen_names:
        raise ValidationError(f"Duplicate location name: {name}")
    seen_names.add(name)


def validate_polygon(
    region_name: str,
    polygon: Optional[Polygon],
    closure: ClosurePolicy = ClosurePolicy.ERROR,
) -> None:
    """Check vertex count, every coordinate, and ring closure."""

    if polygon is None or len(polygon) < MIN_RING_VERTICES:
        raise ValidationError(
            f"Region '{region_name}' has degenerate polygon (less than 3 points)."
        )
    for coordinate in polygon:
        validate_coordinate(coordinate, f"Region '{region_name}' polygon")

    if not polygon.is_closed:
        message = (
            f"Region '{region_name}' has an unclosed polygon "
            "(first and last point differ)."
        )
        if ClosurePolicy(closure) is ClosurePolicy.ERROR:
            raise ValidationError(message)
        logger.warning(message)


def validate_region(
    region: Region,
    seen_names: Set[str],
    closure: ClosurePolicy = ClosurePolicy.ERROR,
) -> None:
    """Check name, uniqueness against ``seen_names``, and every polygon."""

    name = _check_name(region.name, "Region")
    if name in seen_names:
        raise ValidationError(f"Duplicate region name: {name}")
    seen_names.add(name)

    if not region.polygons:
        raise ValidationError(f"Region '{name}' has no polygons.")
    for polygon in region.polygons:
        validate_polygon(name, polygon, closure)


def validate_locations(locations: Iterable[Location]) -> List[Location]:
    seen: Set[str] = set()
    validated = []
    for location in locations:
        validate_location(location, seen)
        validated.append(location)
    return validated


def validate_regions(
    regions: Iterable[Region], closure: ClosurePolicy = ClosurePolicy.ERROR
) -> List[Region]:
    seen: Set[str] = set()
    validated = []
    for region in regions:
        validate_region(region, seen, closure)
        validated.append(region)
    return validated
