"""Geometry helpers for point-in-polygon classification on lon/lat coordinates.

All computation is planar and every comparison uses exact floating-point
equality or ordering. No epsilon is applied anywhere: a point counts as being
on the boundary only when it is bit-for-bit on it. Callers needing a tolerance
must snap their coordinates before classification.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple


@dataclass(frozen=True)
class Coordinate:
    """Represents a (longitude, latitude) pair in degrees."""

    longitude: float
    latitude: float

    @classmethod
    def from_pair(cls, pair: Sequence[float]) -> "Coordinate":
        """Build a coordinate from a ``[longitude, latitude]`` sequence."""

        if len(pair) != 2:
            raise ValueError(f"Expected [longitude, latitude], got {list(pair)!r}.")
        longitude, latitude = pair
        return cls(float(longitude), float(latitude))

    def as_pair(self) -> Tuple[float, float]:
        return (self.longitude, self.latitude)


@dataclass(frozen=True)
class Polygon:
    """Represents a closed ring defined by an ordered sequence of vertices.

    By convention the last vertex repeats the first. Neither closure nor the
    minimum of three vertices is checked here; see ``validation``.
    """

    vertices: Sequence[Coordinate]

    def __post_init__(self) -> None:
        # Convert to tuple to avoid accidental mutation of the original sequence.
        object.__setattr__(self, "vertices", tuple(self.vertices))

    def __iter__(self) -> Iterator[Coordinate]:
        """Iterate over the vertices of the ring."""

        return iter(self.vertices)

    def __len__(self) -> int:
        return len(self.vertices)

    def __getitem__(self, index: int) -> Coordinate:
        return self.vertices[index]

    @property
    def is_closed(self) -> bool:
        return len(self.vertices) > 0 and self.vertices[0] == self.vertices[-1]


def point_in_polygon(point: Coordinate, polygon: Polygon) -> bool:
    """Return True when the point lies inside or on the boundary of the polygon.

    Ray casting towards increasing longitude. Each edge runs from the previous
    vertex ``j`` to the current vertex ``i``, with ``j`` starting at the last
    index. A vertex match or an exact hit on an edge returns immediately.

    A plain crossing count never sees an edge lying on the point's own
    latitude, so it reports points on a top horizontal edge such as
    ``(0.5, 1.0)`` on the unit square as outside. Here such an edge is a hit
    whenever its longitude span contains the point, so every boundary point
    is inside.
    """

    lon, lat = point.longitude, point.latitude
    inside = False
    vertices = polygon.vertices
    n = len(vertices)

    j = n - 1
    for i in range(n):
        lon_a, lat_a = vertices[i].longitude, vertices[i].latitude
        lon_b, lat_b = vertices[j].longitude, vertices[j].latitude
        j = i

        if (lon_a == lon and lat_a == lat) or (lon_b == lon and lat_b == lat):
            return True

        if (lat_a > lat) != (lat_b > lat):
            # lat_a != lat_b is guaranteed by the straddle test.
            intersect_lon = (lon_b - lon_a) * (lat - lat_a) / (lat_b - lat_a) + lon_a
            if lon == intersect_lon:
                return True
            if lon < intersect_lon:
                inside = not inside
        # Horizontal edges on the point's latitude never straddle it.
        elif lat_a == lat_b == lat and min(lon_a, lon_b) <= lon <= max(lon_a, lon_b):
            return True

    return inside
