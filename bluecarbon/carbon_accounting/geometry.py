# -*- coding: utf-8 -*-
"""
Geometry Primitives - BC-MRV-001: Carbon Accounting

Great-circle distance and plot polygon area for field coordinates.

KEY FORMULAS IMPLEMENTED:
- Haversine: a = sin²(Δφ/2) + cos φ1 cos φ2 sin²(Δλ/2),
             d = 2R atan2(√a, √(1−a)),  R = 6 371 000 m
- Shoelace:  A = |Σ (x_i y_{i+1} − x_{i+1} y_i)| / 2  over lon/lat degrees,
             scaled by 111 320² m² per degree²

LIMITATIONS:
- The area scale factor is the equatorial metres-per-degree for both axes
  (equirectangular). Areas are overestimated away from the equator.
- Neither function range-checks its inputs.
"""

from __future__ import annotations

import math
from typing import Sequence

from bluecarbon.carbon_accounting.constants import (
    EARTH_RADIUS_M,
    METERS_PER_DEGREE,
)
from bluecarbon.carbon_accounting.models import Coordinate


def calculate_distance(coord1: Coordinate, coord2: Coordinate) -> float:
    """Calculate the great-circle distance between two points.

    Args:
        coord1: First coordinate.
        coord2: Second coordinate.

    Returns:
        Distance in metres.
    """
    phi1 = math.radians(coord1.latitude)
    phi2 = math.radians(coord2.latitude)
    d_phi = math.radians(coord2.latitude - coord1.latitude)
    d_lambda = math.radians(coord2.longitude - coord1.longitude)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Out-of-range latitudes can push rounding error past [0, 1].
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def calculate_polygon_area(coordinates: Sequence[Coordinate]) -> float:
    """Calculate polygon area with the Shoelace formula.

    The ring is closed implicitly (last vertex connects to the first), so
    callers need not repeat the first vertex. Vertex order does not matter.

    Args:
        coordinates: Polygon vertices in order.

    Returns:
        Area in square metres; 0.0 for fewer than three vertices.
    """
    n = len(coordinates)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += coordinates[i].longitude * coordinates[j].latitude
        area -= coordinates[j].longitude * coordinates[i].latitude

    area = abs(area) / 2
    return area * METERS_PER_DEGREE ** 2


__all__ = [
    "calculate_distance",
    "calculate_polygon_area",
]
