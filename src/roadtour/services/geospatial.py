"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import NamedTuple

EARTH_RADIUS_KM = 6371.0


class SegmentProjection(NamedTuple):
    """Closest point on a finite segment to a query point."""

    distance: float
    proj_x: float
    proj_y: float
    t: float


def euclidean_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Planar distance, treating lat/lon as Cartesian coordinates."""

    return math.hypot(x1 - x2, y1 - y2)


def project_point_onto_segment(
    px: float,
    py: float,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
) -> SegmentProjection:
    """Project ``(px, py)`` onto the segment ``(x1, y1)-(x2, y2)``.

    The scalar projection parameter ``t`` is clamped to ``[0, 1]`` so the
    result never leaves the segment. A zero-length segment yields ``t = 0``
    and the shared endpoint.
    """

    vx = x2 - x1
    vy = y2 - y1
    wx = px - x1
    wy = py - y1

    length_sq = vx * vx + vy * vy
    t = 0.0
    if length_sq > 0:
        t = (vx * wx + vy * wy) / length_sq
    t = max(0.0, min(1.0, t))

    proj_x = x1 + t * vx
    proj_y = y1 + t * vy
    return SegmentProjection(
        distance=euclidean_distance(px, py, proj_x, proj_y),
        proj_x=proj_x,
        proj_y=proj_y,
        t=t,
    )


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
