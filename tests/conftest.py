"""
Shared fixtures for geometry and matching tests.
"""

import pytest

from geom import Coordinate, Polygon


def ring(*pairs):
    """Build a Polygon from (longitude, latitude) pairs."""
    return Polygon([Coordinate(float(lon), float(lat)) for lon, lat in pairs])


@pytest.fixture
def unit_square():
    return ring((0, 0), (0, 1), (1, 1), (1, 0), (0, 0))


@pytest.fixture
def regions_json():
    return [
        {
            "name": "R",
            "coordinates": [[[0, 0], [0, 1], [1, 1], [1, 0], [0, 0]]],
        },
        {
            "name": "Far",
            "coordinates": [[[10, 10], [10, 11], [11, 11], [11, 10], [10, 10]]],
        },
    ]


@pytest.fixture
def locations_json():
    return [
        {"name": "A", "coordinates": [0.5, 0.5]},
        {"name": "B", "coordinates": [2.0, 2.0]},
    ]
