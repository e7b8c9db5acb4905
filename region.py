"""Region matching built on top of the point-in-polygon classifier.

Inputs are assumed to have passed ``validation``: names are unique and
non-empty, every region has at least one polygon, and every polygon is a
closed ring of three or more in-range coordinates. Nothing here re-checks
those preconditions.
"""
from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, List, Optional, Sequence, Tuple

from geom import Coordinate, Polygon, point_in_polygon

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    """Named point to be assigned to regions."""

    name: str
    coordinate: Coordinate


@dataclass(frozen=True)
class Region:
    """Named union of one or more polygon rings."""

    name: str
    polygons: Sequence[Polygon]

    def __post_init__(self) -> None:
        object.__setattr__(self, "polygons", tuple(self.polygons))


@dataclass(frozen=True)
class MatchResult:
    """Locations contained by a region, in the order they were supplied."""

    region: str
    matched_locations: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"region": self.region, "matched_locations": list(self.matched_locations)}


def region_contains(region: Region, coordinate: Coordinate) -> bool:
    """Return True when any polygon of the region contains the coordinate."""

    return any(point_in_polygon(coordinate, polygon) for polygon in region.polygons)


def match_region(region: Region, locations: Sequence[Location]) -> MatchResult:
    """Collect the names of the locations that fall inside the region."""

    matched = tuple(
        location.name
        for location in locations
        if region_contains(region, location.coordinate)
    )
    return MatchResult(region.name, matched)


def match_locations_to_regions(
    locations: Sequence[Location],
    regions: Sequence[Region],
    workers: Optional[int] = None,
) -> List[MatchResult]:
    """Return one MatchResult per region, in region order.

    Regions without any matching location are kept with an empty list. When
    ``workers`` is greater than one the regions are spread over a process
    pool; ``Executor.map`` yields in submission order so the output is the
    same as the serial path.
    """

    locations = list(locations)
    regions = list(regions)
    logger.debug(
        "Matching %d locations against %d regions", len(locations), len(regions)
    )

    if workers is None or workers <= 1 or len(regions) <= 1:
        return [match_region(region, locations) for region in regions]

    with ProcessPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(partial(match_region, locations=locations), regions))
